"""Project listing data model."""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .constants import (
    DEFAULT_BUILDER,
    DEFAULT_CENTER,
    PLACEHOLDER_IMAGE,
    PropertyType,
)
from .errors import InvalidRecordError

logger = logging.getLogger(__name__)

ProjectId = Union[int, str]


@dataclass(frozen=True)
class Project:
    """Immutable real-estate project as it enters the catalog."""

    # Identity
    id: ProjectId

    # Display strings (title and id also seed the score)
    title: str = ""
    builder: str = DEFAULT_BUILDER
    location: str = ""
    type: PropertyType = PropertyType.APARTMENT

    # Pricing
    price: str = ""
    price_value: float = 0.0

    # Geography
    coords: Tuple[float, float] = DEFAULT_CENTER

    # Media and features
    images: Tuple[str, ...] = (PLACEHOLDER_IMAGE,)
    amenities: Tuple[str, ...] = field(default_factory=tuple)

    # Scoring target from the feed ("aiScore"); None means use the default
    base_score: Optional[int] = None

    # Optional display details
    status: Optional[str] = None
    badge: Optional[str] = None
    beds: Optional[int] = None
    area: Optional[str] = None
    description: Optional[str] = None

    @property
    def seed(self) -> str:
        """String used to seed the deterministic score sequence."""
        return f"{self.title}{self.id}"

    @property
    def is_new_launch(self) -> bool:
        """True when the feed marks the project as a new launch."""
        status = (self.status or "").lower()
        badge = (self.badge or "").lower()
        return status == "new" or badge == "new"

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match over title, builder and location."""
        needle = query.lower()
        return (
            needle in self.title.lower()
            or needle in self.builder.lower()
            or needle in self.location.lower()
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: Dict[str, Any] = {}
        for key, value in self.__dict__.items():
            if value is None:
                continue
            if isinstance(value, PropertyType):
                result[key] = value.value
            elif isinstance(value, tuple):
                result[key] = list(value) if value else None
            else:
                result[key] = value
        return {k: v for k, v in result.items() if v is not None}

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Project":
        """
        Normalize a raw feed record into a Project.

        Accepts the feed's camelCase keys (priceValue, aiScore/baseScore) as
        well as snake_case ones. Only a missing id is fatal; every other
        field falls back to a documented default.

        Args:
            record: Raw project record from the ingestion feed

        Returns:
            Normalized Project

        Raises:
            InvalidRecordError: If the record is not a mapping or has no id
        """
        if not isinstance(record, Mapping):
            raise InvalidRecordError(f"Record is not an object: {record!r}")

        project_id = record.get("id")
        if project_id is None or project_id == "":
            raise InvalidRecordError(
                f"Record has no id (title={record.get('title')!r})"
            )
        if isinstance(project_id, float) and project_id.is_integer():
            project_id = int(project_id)
        elif not isinstance(project_id, (int, str)):
            project_id = str(project_id)

        base_score = _first_present(record, "baseScore", "base_score", "aiScore")

        return cls(
            id=project_id,
            title=_as_text(record.get("title")),
            builder=_as_text(record.get("builder")) or DEFAULT_BUILDER,
            location=_as_text(record.get("location")),
            type=_parse_type(record.get("type")),
            price=_as_text(record.get("price")),
            price_value=_parse_float(
                _first_present(record, "priceValue", "price_value"), 0.0
            ),
            coords=_parse_coords(record.get("coords")),
            images=_parse_images(record.get("images")),
            amenities=_parse_amenities(record.get("amenities")),
            base_score=_parse_base_score(base_score),
            status=_optional_text(record.get("status")),
            badge=_optional_text(record.get("badge")),
            beds=_parse_int(record.get("beds")),
            area=_optional_text(record.get("area")),
            description=_optional_text(record.get("description")),
        )


def _first_present(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(value: Any) -> Optional[str]:
    text = _as_text(value)
    return text or None


def _parse_type(value: Any) -> PropertyType:
    if isinstance(value, PropertyType):
        return value
    text = _as_text(value).lower()
    try:
        return PropertyType(text)
    except ValueError:
        if text:
            logger.debug(f"Unknown project type {text!r}, using apartment")
        return PropertyType.APARTMENT


def _parse_float(value: Any, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _parse_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_base_score(value: Any) -> Optional[int]:
    """Return the feed score rounded and clamped to [0, 100], or None if unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        score = float(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring non-numeric base score {value!r}")
        return None
    if math.isnan(score) or math.isinf(score):
        return None
    return int(min(100, max(0, math.floor(score + 0.5))))


def _parse_coords(value: Any) -> Tuple[float, float]:
    """Accept [lat, lng] or {"lat": .., "lng": ..}; fall back to the map centre."""
    lat = lng = None
    if isinstance(value, Mapping):
        lat = value.get("lat")
        lng = value.get("lng", value.get("lon"))
    elif isinstance(value, (list, tuple)) and len(value) >= 2:
        lat, lng = value[0], value[1]

    try:
        return (float(lat), float(lng))
    except (TypeError, ValueError):
        if value is not None:
            logger.debug(f"Malformed coordinates {value!r}, using default centre")
        return DEFAULT_CENTER


def _parse_images(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return (PLACEHOLDER_IMAGE,)
    images = tuple(str(img) for img in value if img)
    return images or (PLACEHOLDER_IMAGE,)


def _parse_amenities(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        return ()
    seen = []
    for tag in value:
        text = _as_text(tag)
        if text and text not in seen:
            seen.append(text)
    return tuple(seen)
