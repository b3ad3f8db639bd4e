"""Composite score to recommendation tier mapping."""

from typing import Dict, Union

from models.constants import (
    RECOMMENDATION_THRESHOLDS,
    Recommendation,
    RecommendationFilter,
)

_TIER_RANK: Dict[Recommendation, int] = {
    Recommendation.AVOID: 0,
    Recommendation.HOLD: 1,
    Recommendation.BUY: 2,
    Recommendation.STRONG_BUY: 3,
}

_BUCKETS: Dict[Recommendation, RecommendationFilter] = {
    Recommendation.STRONG_BUY: RecommendationFilter.BUY,
    Recommendation.BUY: RecommendationFilter.BUY,
    Recommendation.HOLD: RecommendationFilter.HOLD,
    Recommendation.AVOID: RecommendationFilter.AVOID,
}


def classify(score: Union[int, float]) -> Recommendation:
    """
    Map a composite score to its recommendation tier.

    Boundary values belong to the higher tier: 85 is a strong buy, 75 a buy,
    60 a hold. Anything below 60 is avoid.
    """
    for tier, minimum in RECOMMENDATION_THRESHOLDS:
        if score >= minimum:
            return tier
    return Recommendation.AVOID


def bucket(tier: Recommendation) -> RecommendationFilter:
    """List-filter bucket for a tier (strong buy and buy collapse to buy)."""
    return _BUCKETS[tier]


def tier_rank(tier: Recommendation) -> int:
    """Ordinal of a tier, avoid lowest."""
    return _TIER_RANK[tier]
