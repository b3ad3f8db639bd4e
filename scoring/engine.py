"""Deterministic confidence scoring for project listings."""

import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from models.constants import (
    DEFAULT_BASE_SCORE,
    NO_METRO_AREAS,
    SCORE_JITTER_SPAN,
    SCORE_WEIGHTS,
)
from models.project import Project
from models.score import MarketInsights, ScoreBreakdown

from .classifier import classify
from .seeded import SeededSequence

logger = logging.getLogger(__name__)


class ScoreEngine:
    """
    Derives a reproducible composite score from a project's identity.

    The sequence is seeded with title + id, so scoring never depends on
    anything but the project itself. Results are memoized in a side table
    keyed by title and id and are never recomputed, even if a later Project
    value with the same title and id carries a different base score.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the engine.

        Args:
            config: Scoring configuration (default_base_score)
        """
        self.config = config or {}
        self.default_base_score = self.config.get(
            "default_base_score", DEFAULT_BASE_SCORE
        )
        self._breakdowns: Dict[Tuple[str, str], ScoreBreakdown] = {}
        self._insights: Dict[Tuple[str, str], MarketInsights] = {}

    def score(self, project: Project) -> ScoreBreakdown:
        """
        Return the (memoized) score breakdown for a project.

        Args:
            project: Project to score

        Returns:
            ScoreBreakdown with five sub-scores, composite and tier
        """
        key = self._key(project)
        cached = self._breakdowns.get(key)
        if cached is not None:
            return cached

        breakdown = self._calculate(project)
        self._breakdowns[key] = breakdown
        logger.debug(
            f"Scored project {project.id} ({project.title!r}): "
            f"{breakdown.composite} {breakdown.label}"
        )
        return breakdown

    def composite(self, project: Project) -> int:
        return self.score(project).composite

    def insights(self, project: Project) -> MarketInsights:
        """
        Return the (memoized) market insights for a project.

        Insights continue the same seeded sequence after the five sub-score
        draws, so they are as reproducible as the score itself.
        """
        key = self._key(project)
        cached = self._insights.get(key)
        if cached is not None:
            return cached

        insights = self._calculate_insights(project)
        self._insights[key] = insights
        return insights

    def is_cached(self, project: Project) -> bool:
        return self._key(project) in self._breakdowns

    @property
    def cache_size(self) -> int:
        return len(self._breakdowns)

    def _key(self, project: Project) -> Tuple[str, str]:
        return (project.title, str(project.id))

    def _target(self, project: Project) -> int:
        if project.base_score is None:
            return self.default_base_score
        return project.base_score

    def _draw_sub_scores(self, sequence: SeededSequence, target: int) -> List[int]:
        """Draw one jittered, clamped sub-score per weighted metric."""
        sub_scores = []
        for _ in SCORE_WEIGHTS:
            offset = math.floor((sequence.next() - 0.5) * SCORE_JITTER_SPAN)
            sub_scores.append(int(min(100, max(0, target + offset))))
        return sub_scores

    def _calculate(self, project: Project) -> ScoreBreakdown:
        sequence = SeededSequence(project.seed)
        sub_scores = self._draw_sub_scores(sequence, self._target(project))

        # Weighted sum, accumulated in weight order, rounded half up
        weighted = 0.0
        for value, (_, weight) in zip(sub_scores, SCORE_WEIGHTS):
            weighted += value * weight
        composite = int(min(100, max(0, math.floor(weighted + 0.5))))

        sentiment, credibility, location, valuation, fundamentals = sub_scores
        return ScoreBreakdown(
            sentiment=sentiment,
            credibility=credibility,
            location=location,
            valuation=valuation,
            fundamentals=fundamentals,
            composite=composite,
            recommendation=classify(composite),
        )

    def _calculate_insights(self, project: Project) -> MarketInsights:
        sequence = SeededSequence(project.seed)
        sequence.skip(len(SCORE_WEIGHTS))
        rnd = sequence.next

        location = project.location.lower()
        if any(area in location for area in NO_METRO_AREAS):
            metro_distance = None
        else:
            metro_distance = round(rnd() * 5 + 0.5, 1)

        news_positive = math.floor(rnd() * 15 + 5)
        social_mentions = math.floor(rnd() * 200 + 50)
        on_time = math.floor(rnd() * 20 + 75)
        rnd()  # unused draw
        appreciation = math.floor(rnd() * 10 + 5)
        completion = math.floor(rnd() * 90 + 10)
        review_rating = 4 + math.floor(rnd() * 9) / 10
        nearby = math.floor(rnd() * 5 + 2)
        below_market = round(rnd() * 5 + 1, 1)
        six_month = round(rnd() * 4 + 4, 1)
        gross_yield = round(rnd() * 2 + 3, 1)

        tier = self.score(project).recommendation
        summary = (
            f"{project.title} presents a {tier.value} opportunity based on "
            f"{appreciation}% YoY area appreciation and {on_time}% historical "
            f"developer reliability."
        )

        return MarketInsights(
            metro_distance_km=metro_distance,
            news_positive=news_positive,
            social_mentions=social_mentions,
            on_time_percent=on_time,
            appreciation_percent=appreciation,
            completion_percent=completion,
            review_rating=review_rating,
            nearby_projects=nearby,
            below_market_percent=below_market,
            six_month_projection_percent=six_month,
            gross_yield_percent=gross_yield,
            summary=summary,
        )
