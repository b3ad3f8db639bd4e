"""Catalog state, view synchronization and detail-panel carousel."""

from .carousel import CarouselController, CarouselState
from .catalog import Catalog, VisibleProjects
from .events import EventBus
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler, default_scheduler
from .sync import (
    CAROUSEL_TOPIC,
    FOCUS_TOPIC,
    VIEW_TOPIC,
    CatalogStats,
    DetailPanel,
    FocusSignal,
    ListEntry,
    Marker,
    ViewSnapshot,
    ViewSyncController,
)

__all__ = [
    "Catalog",
    "VisibleProjects",
    "ViewSyncController",
    "ViewSnapshot",
    "ListEntry",
    "Marker",
    "DetailPanel",
    "FocusSignal",
    "CatalogStats",
    "CarouselController",
    "CarouselState",
    "EventBus",
    "Scheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    "default_scheduler",
    "FOCUS_TOPIC",
    "VIEW_TOPIC",
    "CAROUSEL_TOPIC",
]
