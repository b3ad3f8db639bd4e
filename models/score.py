"""Derived score values for a project."""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .constants import RECOMMENDATION_LABELS, Recommendation


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Five weighted sub-scores plus the composite confidence score.

    All values are integers in [0, 100]. Sub-scores are listed in draw
    order, which is also the order of SCORE_WEIGHTS.
    """

    sentiment: int
    credibility: int
    location: int
    valuation: int
    fundamentals: int
    composite: int
    recommendation: Recommendation

    @property
    def label(self) -> str:
        """Upper-case recommendation text for display."""
        return RECOMMENDATION_LABELS[self.recommendation]

    def sub_scores(self) -> Tuple[int, int, int, int, int]:
        return (
            self.sentiment,
            self.credibility,
            self.location,
            self.valuation,
            self.fundamentals,
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "sentiment": self.sentiment,
            "credibility": self.credibility,
            "location": self.location,
            "valuation": self.valuation,
            "fundamentals": self.fundamentals,
            "composite": self.composite,
            "recommendation": self.recommendation.value,
        }


@dataclass(frozen=True)
class MarketInsights:
    """Synthetic market colour shown alongside the breakdown in the detail panel."""

    metro_distance_km: Optional[float]  # None where the area has no metro
    news_positive: int
    social_mentions: int
    on_time_percent: int
    appreciation_percent: int
    completion_percent: int
    review_rating: float
    nearby_projects: int
    below_market_percent: float
    six_month_projection_percent: float
    gross_yield_percent: float
    summary: str

    @property
    def metro_text(self) -> str:
        if self.metro_distance_km is None:
            return "Not Available"
        return f"{self.metro_distance_km:.1f}km away"
