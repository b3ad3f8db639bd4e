"""Authoritative in-memory project set plus filter, search and selection state."""

import logging
from enum import Enum
from typing import (
    Callable,
    Dict,
    Iterable,
    Iterator,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from models.constants import RecommendationFilter, SortOrder, TypeFilter
from models.project import Project, ProjectId
from scoring.classifier import bucket
from scoring.engine import ScoreEngine

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: Type[E], value: Union[E, str]) -> E:
    """Accept an enum member or its (case-insensitive) string value."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValueError(
            f"Invalid {enum_cls.__name__} {value!r}. Allowed: {allowed}"
        ) from None


class VisibleProjects:
    """
    Lazy, restartable view of the projects that pass the current filters.

    Nothing is cached: every iteration re-reads the catalog state, so a
    view taken before a filter change reflects the change on its next pass.
    """

    def __init__(self, catalog: "Catalog", order: SortOrder = SortOrder.INSERTION):
        self._catalog = catalog
        self._order = order

    def __iter__(self) -> Iterator[Project]:
        return self._catalog._iter_visible(self._order)

    def __len__(self) -> int:
        return sum(1 for _ in self)


class Catalog:
    """
    Project records and the user's current view state.

    ingest() replaces the whole record set; the setters each change exactly
    one piece of state. Scores needed by the recommendation filter come from
    the injected ScoreEngine, so they are computed lazily and only once.
    """

    def __init__(self, score_engine: ScoreEngine):
        self.score_engine = score_engine

        self._projects: Tuple[Project, ...] = ()
        self._by_id: Dict[str, Project] = {}

        self.type_filter = TypeFilter.ALL
        self.recommendation_filter = RecommendationFilter.ALL
        self.search_query = ""
        self.selected_id: Optional[ProjectId] = None

    @property
    def projects(self) -> Tuple[Project, ...]:
        """All ingested projects in insertion order."""
        return self._projects

    @property
    def selected(self) -> Optional[Project]:
        if self.selected_id is None:
            return None
        return self.get(self.selected_id)

    def __len__(self) -> int:
        return len(self._projects)

    def ingest(self, projects: Iterable[Project]) -> int:
        """
        Replace the record set wholesale and clear the selection.

        Filters and search are kept. Returns the number of projects ingested.
        """
        self._projects = tuple(projects)
        self._by_id = {}
        for project in self._projects:
            key = str(project.id)
            if key in self._by_id:
                logger.debug(f"Duplicate project id {project.id}; first occurrence wins")
                continue
            self._by_id[key] = project
        self.selected_id = None
        return len(self._projects)

    def set_type_filter(self, value: Union[TypeFilter, str]) -> None:
        self.type_filter = coerce_enum(TypeFilter, value)

    def set_recommendation_filter(self, value: Union[RecommendationFilter, str]) -> None:
        self.recommendation_filter = coerce_enum(RecommendationFilter, value)

    def set_search_query(self, query: Optional[str]) -> None:
        self.search_query = (query or "").strip()

    def get(self, project_id: ProjectId) -> Optional[Project]:
        """Look up a project by id; "1" and 1 refer to the same project."""
        return self._by_id.get(str(project_id))

    def select(self, project_id: ProjectId) -> bool:
        """
        Select a project, visible or not.

        Returns:
            False (selection unchanged) if the id is not in the catalog
        """
        project = self.get(project_id)
        if project is None:
            logger.debug(f"Ignoring selection of unknown project {project_id!r}")
            return False
        self.selected_id = project.id
        return True

    def clear_selection(self) -> None:
        self.selected_id = None

    def find_first(
        self, query: str, fields: Sequence[str] = ("title", "location")
    ) -> Optional[Project]:
        """First project (insertion order, ignoring filters) whose fields contain query."""
        needle = query.strip().lower()
        if not needle:
            return None
        for project in self._projects:
            if any(needle in str(getattr(project, name, "")).lower() for name in fields):
                return project
        return None

    def matches_filters(self, project: Project) -> bool:
        if (
            self.type_filter is not TypeFilter.ALL
            and project.type.value != self.type_filter.value
        ):
            return False
        if self.search_query and not project.matches(self.search_query):
            return False
        if self.recommendation_filter is not RecommendationFilter.ALL:
            tier = self.score_engine.score(project).recommendation
            if bucket(tier) is not self.recommendation_filter:
                return False
        return True

    def visible_projects(
        self, order: Union[SortOrder, str] = SortOrder.INSERTION
    ) -> VisibleProjects:
        return VisibleProjects(self, coerce_enum(SortOrder, order))

    def _iter_visible(self, order: SortOrder) -> Iterator[Project]:
        visible = (p for p in self._projects if self.matches_filters(p))
        if order is SortOrder.INSERTION:
            return visible
        return iter(sorted(visible, key=self._sort_key(order)))

    def _sort_key(self, order: SortOrder) -> Callable[[Project], object]:
        """Sort key for an explicit order; sorted() keeps feed order among ties."""
        composite = self.score_engine.composite
        if order is SortOrder.SCORE_DESC:
            return lambda p: -composite(p)
        if order is SortOrder.SCORE_ASC:
            return composite
        if order is SortOrder.PRICE_ASC:
            return lambda p: p.price_value
        if order is SortOrder.PRICE_DESC:
            return lambda p: -p.price_value
        return lambda p: p.title.lower()
