"""Data models for project listings."""

from .constants import (
    MARKER_STYLES,
    RECOMMENDATION_THRESHOLDS,
    REGION_PRESETS,
    SCORE_WEIGHTS,
    PropertyType,
    Recommendation,
    RecommendationFilter,
    SortOrder,
    TypeFilter,
)
from .errors import IngestionFailure, InvalidRecordError, ListingLensError
from .project import Project
from .score import MarketInsights, ScoreBreakdown

__all__ = [
    "Project",
    "ScoreBreakdown",
    "MarketInsights",
    "PropertyType",
    "TypeFilter",
    "Recommendation",
    "RecommendationFilter",
    "SortOrder",
    "RECOMMENDATION_THRESHOLDS",
    "SCORE_WEIGHTS",
    "MARKER_STYLES",
    "REGION_PRESETS",
    "ListingLensError",
    "InvalidRecordError",
    "IngestionFailure",
]
