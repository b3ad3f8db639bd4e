"""Catalog constants and enums."""

from enum import Enum
from typing import Dict, Tuple


class PropertyType(Enum):
    """Project categories offered by the listing feed."""

    APARTMENT = "apartment"
    VILLA = "villa"
    PLOT = "plot"
    COMMERCIAL = "commercial"


class TypeFilter(Enum):
    """Type filter values; ALL disables the filter."""

    ALL = "all"
    APARTMENT = "apartment"
    VILLA = "villa"
    PLOT = "plot"
    COMMERCIAL = "commercial"


class Recommendation(Enum):
    """Recommendation tiers shown in the detail panel."""

    STRONG_BUY = "strong buy"
    BUY = "buy"
    HOLD = "hold"
    AVOID = "avoid"


class RecommendationFilter(Enum):
    """List filter buckets (strong buy and buy share one bucket)."""

    ALL = "all"
    BUY = "buy"
    HOLD = "hold"
    AVOID = "avoid"


class SortOrder(Enum):
    """Explicit list orderings. INSERTION keeps feed order."""

    INSERTION = "insertion"
    SCORE_DESC = "score_desc"
    SCORE_ASC = "score_asc"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    TITLE = "title"


# Minimum composite score per tier, checked top-down (boundaries belong to the higher tier)
RECOMMENDATION_THRESHOLDS: Tuple[Tuple[Recommendation, int], ...] = (
    (Recommendation.STRONG_BUY, 85),
    (Recommendation.BUY, 75),
    (Recommendation.HOLD, 60),
)

RECOMMENDATION_LABELS: Dict[Recommendation, str] = {
    Recommendation.STRONG_BUY: "STRONG BUY",
    Recommendation.BUY: "BUY",
    Recommendation.HOLD: "HOLD",
    Recommendation.AVOID: "AVOID",
}

# Sub-metric weights, in draw order. Must sum to 1.0.
SCORE_WEIGHTS: Tuple[Tuple[str, float], ...] = (
    ("sentiment", 0.25),
    ("credibility", 0.20),
    ("location", 0.25),
    ("valuation", 0.20),
    ("fundamentals", 0.10),
)

DEFAULT_BASE_SCORE = 80
SCORE_JITTER_SPAN = 14  # offsets fall in [-7, 6]

DEFAULT_BUILDER = "Verified Builder"
PLACEHOLDER_IMAGE = "https://images.unsplash.com/photo-1545324418-cc1a3fa10c00?w=800"

# Map defaults (Vrindavan)
DEFAULT_CENTER: Tuple[float, float] = (27.5658, 77.6762)
DEFAULT_ZOOM = 13
FOCUS_ZOOM = 15

# Heat-layer weight = price_value / HEATMAP_PRICE_SCALE
HEATMAP_PRICE_SCALE = 10_000_000

# Marker styling per property type
MARKER_STYLES: Dict[PropertyType, Dict[str, str]] = {
    PropertyType.APARTMENT: {"icon": "fa-building", "color": "#6366f1"},
    PropertyType.VILLA: {"icon": "fa-home", "color": "#10b981"},
    PropertyType.PLOT: {"icon": "fa-map", "color": "#f59e0b"},
    PropertyType.COMMERCIAL: {"icon": "fa-store", "color": "#ec4899"},
}

# Named regions the map can be re-centred on
REGION_PRESETS: Dict[str, Dict[str, object]] = {
    "vrindavan": {"center": (27.5658, 77.6762), "zoom": 13},
    "noida": {"center": (28.5355, 77.3910), "zoom": 11},
    "gurugram": {"center": (28.4595, 77.0266), "zoom": 11},
    "mumbai": {"center": (19.0760, 72.8777), "zoom": 11},
}

# Locations without metro coverage (insights report "Not Available")
NO_METRO_AREAS: Tuple[str, ...] = ("vrindavan", "mathura")

CAROUSEL_AUTOPLAY_INTERVAL = 3.0

# Map search box only jumps once the query is longer than this
SEARCH_JUMP_MIN_LENGTH = 2
