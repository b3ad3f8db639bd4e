"""Single authority that keeps list, map, detail and carousel views in step."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlencode

from feeds.base import ProjectFeed
from models.constants import (
    CAROUSEL_AUTOPLAY_INTERVAL,
    FOCUS_ZOOM,
    HEATMAP_PRICE_SCALE,
    MARKER_STYLES,
    RECOMMENDATION_LABELS,
    REGION_PRESETS,
    SEARCH_JUMP_MIN_LENGTH,
    PropertyType,
    Recommendation,
    RecommendationFilter,
    SortOrder,
    TypeFilter,
)
from models.errors import IngestionFailure, InvalidRecordError
from models.project import Project, ProjectId
from models.score import MarketInsights, ScoreBreakdown
from scoring.classifier import bucket
from scoring.engine import ScoreEngine
from utils.top_n_tracker import TopNTracker

from .carousel import CarouselController, CarouselState
from .catalog import Catalog, coerce_enum
from .events import EventBus
from .scheduler import Scheduler, default_scheduler

logger = logging.getLogger(__name__)

FOCUS_TOPIC = "focus"
VIEW_TOPIC = "view"
CAROUSEL_TOPIC = "carousel"


@dataclass(frozen=True)
class ListEntry:
    """One card in the list projection."""

    project: Project
    breakdown: ScoreBreakdown
    active: bool  # card belongs to the selected project

    @property
    def project_id(self) -> ProjectId:
        return self.project.id

    @property
    def tier(self) -> Recommendation:
        return self.breakdown.recommendation

    @property
    def bucket(self) -> RecommendationFilter:
        return bucket(self.breakdown.recommendation)


@dataclass(frozen=True)
class Marker:
    """One map marker; the marker set always mirrors the list entries."""

    project_id: ProjectId
    coords: Tuple[float, float]
    type: PropertyType
    icon_class: str
    color: str


@dataclass(frozen=True)
class ViewSnapshot:
    """List and marker projections built together from one catalog state."""

    version: int
    entries: Tuple[ListEntry, ...]
    markers: Tuple[Marker, ...]


@dataclass(frozen=True)
class FocusSignal:
    """Advisory request for a map-like collaborator to recentre."""

    coords: Tuple[float, float]
    zoom: int
    project_id: Optional[ProjectId] = None
    region: Optional[str] = None


@dataclass(frozen=True)
class DetailPanel:
    """Everything the detail panel shows for the selected project."""

    project: Project
    breakdown: ScoreBreakdown
    insights: MarketInsights
    carousel: CarouselState

    @property
    def recommendation_text(self) -> str:
        return RECOMMENDATION_LABELS[self.breakdown.recommendation]

    @property
    def directions_url(self) -> str:
        lat, lng = self.project.coords
        query = urlencode({"api": 1, "destination": f"{lat},{lng}"})
        return f"https://www.google.com/maps/dir/?{query}"

    @property
    def street_view_url(self) -> str:
        lat, lng = self.project.coords
        query = urlencode(
            {"api": 1, "map_action": "pano", "viewpoint": f"{lat},{lng}"}
        )
        return f"https://www.google.com/maps/@?{query}"


@dataclass(frozen=True)
class CatalogStats:
    """Headline numbers for the dashboard counters."""

    total: int
    visible: int
    new_launches: int
    average_score: float


class ViewSyncController:
    """
    Translates catalog state into the projections rendering collaborators read.

    Every mutator runs to completion and finishes by rebuilding one
    ViewSnapshot that holds both the list entries and the markers, then
    swapping it in. Readers therefore never see a list and a marker set
    that came from different catalog states.

    Outbound signals are published on the event bus:
    - "focus": FocusSignal after a successful select or region focus
    - "view": the new ViewSnapshot after every mutation
    - "carousel": CarouselState after every carousel index change
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        score_engine: Optional[ScoreEngine] = None,
        catalog: Optional[Catalog] = None,
        carousel: Optional[CarouselController] = None,
        event_bus: Optional[EventBus] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        """
        Initialize the controller and its collaborators.

        Args:
            config: Full configuration dictionary (map, carousel, scoring sections)
            score_engine: Shared score engine (created if omitted)
            catalog: Catalog to drive (created around score_engine if omitted)
            carousel: Carousel controller (created on scheduler if omitted)
            event_bus: Signal bus (created if omitted)
            scheduler: Timer source for the carousel (running asyncio loop, or a
                manual clock outside a loop, if omitted)
        """
        self.config = config or {}
        map_config = self.config.get("map", {})
        carousel_config = self.config.get("carousel", {})

        self.focus_zoom = map_config.get("focus_zoom", FOCUS_ZOOM)
        self.event_bus = event_bus or EventBus()

        if catalog is not None:
            self.score_engine = catalog.score_engine
        else:
            self.score_engine = score_engine or ScoreEngine(self.config.get("scoring"))
        self._catalog = catalog or Catalog(self.score_engine)

        self.carousel = carousel or CarouselController(
            scheduler or default_scheduler(),
            interval=carousel_config.get("autoplay_interval", CAROUSEL_AUTOPLAY_INTERVAL),
        )
        self.carousel.on_change = self._on_carousel_change

        self.sort_order = SortOrder.INSERTION
        self._version = 0
        self._snapshot = ViewSnapshot(version=0, entries=(), markers=())
        self._refresh()

    @property
    def catalog(self) -> Catalog:
        """Read access to the catalog; mutate through the controller."""
        return self._catalog

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def ingest(self, records: Iterable[Union[Mapping[str, Any], Project]]) -> int:
        """
        Normalize raw records and replace the catalog contents.

        Invalid records are skipped with a warning. Selection is cleared and
        the carousel closed. Returns the number of projects ingested.
        """
        projects = self._normalize(records)
        self.carousel.close()
        count = self._catalog.ingest(projects)
        self._refresh()
        logger.info(f"Ingested {count} projects")
        return count

    async def load(self, feed: ProjectFeed) -> bool:
        """
        Fetch records from a feed and ingest them.

        A failed fetch or a result without any usable record leaves the
        catalog exactly as it was.

        Returns:
            True if the catalog was replaced
        """
        feed_name = feed.get_feed_name()
        logger.info(f"Loading projects from {feed_name} feed")
        try:
            records = await feed.fetch()
        except IngestionFailure as e:
            logger.warning(f"Ingestion from {feed_name} failed: {e}")
            return False

        projects = self._normalize(records)
        if not projects:
            logger.warning(f"{feed_name} feed returned no usable projects")
            return False

        self.ingest(projects)
        return True

    def _normalize(
        self, records: Iterable[Union[Mapping[str, Any], Project]]
    ) -> List[Project]:
        projects = []
        for record in records:
            if isinstance(record, Project):
                projects.append(record)
                continue
            try:
                projects.append(Project.from_record(record))
            except InvalidRecordError as e:
                logger.warning(f"Skipping record: {e}")
        return projects

    # ------------------------------------------------------------------
    # Filters, search and ordering
    # ------------------------------------------------------------------

    def set_type_filter(self, value: Union[TypeFilter, str]) -> None:
        self._catalog.set_type_filter(value)
        self._refresh()

    def set_recommendation_filter(self, value: Union[RecommendationFilter, str]) -> None:
        self._catalog.set_recommendation_filter(value)
        self._refresh()

    def set_search_query(self, query: Optional[str]) -> None:
        self._catalog.set_search_query(query)
        self._refresh()

    def set_sort_order(self, order: Union[SortOrder, str]) -> None:
        """Explicit list ordering; the marker set is unaffected."""
        self.sort_order = coerce_enum(SortOrder, order)
        self._refresh()

    # ------------------------------------------------------------------
    # Selection and focus
    # ------------------------------------------------------------------

    def select(self, project_id: ProjectId) -> bool:
        """
        Select a project and open its detail panel.

        Filtered-out projects can be selected; filters are left alone.
        Unknown ids are ignored.
        """
        if not self._catalog.select(project_id):
            return False

        project = self._catalog.selected
        self.carousel.open(project.images)
        self._refresh()
        self.event_bus.publish(
            FOCUS_TOPIC,
            FocusSignal(coords=project.coords, zoom=self.focus_zoom, project_id=project.id),
        )
        return True

    def select_by_search(self, query: str) -> bool:
        """
        Jump to the first project whose title or location contains query.

        Mirrors the map search box: queries of two characters or fewer do
        nothing, and filters are ignored when looking for the match.
        """
        query = (query or "").strip()
        if len(query) <= SEARCH_JUMP_MIN_LENGTH:
            return False
        project = self._catalog.find_first(query, fields=("title", "location"))
        if project is None:
            logger.debug(f"No project matches search jump {query!r}")
            return False
        return self.select(project.id)

    def clear_selection(self) -> None:
        self._catalog.clear_selection()
        self.carousel.close()
        self._refresh()

    def focus_region(self, region: str) -> bool:
        """Recentre the map on a named region preset."""
        name = (region or "").strip().lower()
        preset = REGION_PRESETS.get(name)
        if preset is None:
            logger.warning(f"Unknown region {region!r}")
            return False
        self.event_bus.publish(
            FOCUS_TOPIC,
            FocusSignal(coords=preset["center"], zoom=preset["zoom"], region=name),
        )
        return True

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def snapshot(self) -> ViewSnapshot:
        return self._snapshot

    def list_projection(self) -> Tuple[ListEntry, ...]:
        return self._snapshot.entries

    def marker_projection(self) -> Tuple[Marker, ...]:
        return self._snapshot.markers

    def detail_projection(self) -> Optional[DetailPanel]:
        """Detail payload for the selected project, or None without a selection."""
        project = self._catalog.selected
        if project is None:
            return None
        return DetailPanel(
            project=project,
            breakdown=self.score_engine.score(project),
            insights=self.score_engine.insights(project),
            carousel=self.carousel.state,
        )

    def heatmap_projection(self) -> Tuple[Tuple[float, float, float], ...]:
        """(lat, lng, weight) per ingested project, weighted by normalized price."""
        return tuple(
            (p.coords[0], p.coords[1], p.price_value / HEATMAP_PRICE_SCALE)
            for p in self._catalog.projects
        )

    def stats_projection(self) -> CatalogStats:
        projects = self._catalog.projects
        if projects:
            total_score = sum(self.score_engine.composite(p) for p in projects)
            average = round(total_score / len(projects), 1)
        else:
            average = 0.0
        return CatalogStats(
            total=len(projects),
            visible=len(self._snapshot.entries),
            new_launches=sum(1 for p in projects if p.is_new_launch),
            average_score=average,
        )

    def top_picks(self, n: int = 3) -> List[Project]:
        """Highest-scoring ingested projects, regardless of filters."""
        tracker = TopNTracker(n)
        for project in self._catalog.projects:
            tracker.add(project, self.score_engine.composite(project))
        return tracker.get_sorted_projects()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _refresh(self) -> None:
        """Rebuild list and markers from current state and swap them in together."""
        selected = self._catalog.selected
        entries = tuple(
            ListEntry(
                project=project,
                breakdown=self.score_engine.score(project),
                active=project is selected,
            )
            for project in self._catalog.visible_projects(self.sort_order)
        )
        markers = tuple(self._marker_for(entry.project) for entry in entries)

        self._version += 1
        self._snapshot = ViewSnapshot(
            version=self._version, entries=entries, markers=markers
        )
        self.event_bus.publish(VIEW_TOPIC, self._snapshot)

    def _marker_for(self, project: Project) -> Marker:
        style = MARKER_STYLES[project.type]
        return Marker(
            project_id=project.id,
            coords=project.coords,
            type=project.type,
            icon_class=style["icon"],
            color=style["color"],
        )

    def _on_carousel_change(self, state: CarouselState) -> None:
        self.event_bus.publish(CAROUSEL_TOPIC, state)
