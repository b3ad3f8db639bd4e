"""Tests for the view synchronization controller."""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from models.constants import FOCUS_ZOOM, MARKER_STYLES, PropertyType, SortOrder
from models.errors import IngestionFailure
from feeds.base import ProjectFeed
from catalog.events import EventBus
from catalog.scheduler import ManualScheduler
from catalog.sync import (
    CAROUSEL_TOPIC,
    FOCUS_TOPIC,
    VIEW_TOPIC,
    ViewSyncController,
)

RECORDS = [
    {"id": 1, "title": "Aster", "builder": "Omaxe", "location": "Noida Sector 150",
     "type": "apartment", "priceValue": 12000000, "baseScore": 90,
     "coords": [28.4089, 77.4854], "images": ["a1.jpg", "a2.jpg", "a3.jpg"]},
    {"id": 2, "title": "Birch", "location": "Vrindavan", "type": "villa",
     "priceValue": 8000000, "baseScore": 40, "status": "new"},
    {"id": 3, "title": "Cedar Heights", "location": "Mathura Road", "type": "plot",
     "priceValue": 2500000, "baseScore": 67},
    {"id": 4, "title": "Dune Plaza", "location": "Gurugram", "type": "commercial",
     "priceValue": 30000000, "baseScore": 30},
]


class StaticFeed(ProjectFeed):
    """Feed returning fixed records, or failing."""

    def __init__(self, records=None, error=None):
        super().__init__()
        self.records = records
        self.error = error

    def get_feed_name(self):
        return "static"

    async def fetch(self):
        if self.error is not None:
            raise self.error
        return self.records


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def controller(scheduler, bus):
    controller = ViewSyncController(event_bus=bus, scheduler=scheduler)
    controller.ingest(RECORDS)
    return controller


def list_ids(controller):
    return [entry.project_id for entry in controller.list_projection()]


def marker_ids(controller):
    return [marker.project_id for marker in controller.marker_projection()]


class TestViewConsistency:
    """List and marker projections always describe the same projects."""

    def test_initial_projection(self, controller):
        assert list_ids(controller) == [1, 2, 3, 4]
        assert marker_ids(controller) == [1, 2, 3, 4]

    def test_markers_follow_filter_sequence(self, controller, bus):
        snapshots = []
        bus.subscribe(VIEW_TOPIC, snapshots.append)

        steps = [
            lambda: controller.set_type_filter("villa"),
            lambda: controller.set_recommendation_filter("avoid"),
            lambda: controller.set_type_filter("all"),
            lambda: controller.set_search_query("gurugram"),
            lambda: controller.set_recommendation_filter("buy"),
            lambda: controller.set_search_query(""),
            lambda: controller.set_sort_order("price_desc"),
        ]
        for step in steps:
            step()
            assert set(list_ids(controller)) == set(marker_ids(controller))

        assert len(snapshots) == len(steps)
        for snapshot in snapshots:
            assert {e.project_id for e in snapshot.entries} == {
                m.project_id for m in snapshot.markers
            }
        assert [s.version for s in snapshots] == sorted(s.version for s in snapshots)

    def test_filtered_view(self, controller):
        controller.set_recommendation_filter("avoid")
        assert list_ids(controller) == [2, 4]
        assert marker_ids(controller) == [2, 4]

    def test_marker_styles(self, controller):
        markers = {m.project_id: m for m in controller.marker_projection()}
        assert markers[2].type is PropertyType.VILLA
        assert markers[2].icon_class == MARKER_STYLES[PropertyType.VILLA]["icon"]
        assert markers[1].coords == (28.4089, 77.4854)

    def test_sort_order(self, controller):
        controller.set_sort_order(SortOrder.SCORE_DESC)
        composites = [e.breakdown.composite for e in controller.list_projection()]
        assert composites == sorted(composites, reverse=True)
        assert list_ids(controller)[0] == 1

    def test_invalid_sort_order(self, controller):
        with pytest.raises(ValueError):
            controller.set_sort_order("random")

    def test_list_entry_tier_and_bucket(self, controller):
        entry = controller.list_projection()[0]
        assert entry.tier.value == "strong buy"
        assert entry.bucket.value == "buy"


class TestSelection:
    """Selection, focus signals and the detail panel."""

    def test_select_publishes_focus(self, controller, bus):
        signals = []
        bus.subscribe(FOCUS_TOPIC, signals.append)

        assert controller.select(1)
        assert len(signals) == 1
        assert signals[0].coords == (28.4089, 77.4854)
        assert signals[0].zoom == FOCUS_ZOOM
        assert signals[0].project_id == 1

    def test_select_unknown(self, controller, bus):
        signals = []
        bus.subscribe(FOCUS_TOPIC, signals.append)
        assert not controller.select(99)
        assert signals == []
        assert controller.detail_projection() is None

    def test_active_entry(self, controller):
        controller.select(2)
        active = [e.project_id for e in controller.list_projection() if e.active]
        assert active == [2]

    def test_select_filtered_out_project(self, controller):
        controller.set_type_filter("villa")
        assert controller.select(1)
        assert controller.detail_projection().project.id == 1
        assert list_ids(controller) == [2]
        assert not any(e.active for e in controller.list_projection())

    def test_detail_projection(self, controller):
        controller.select(1)
        panel = controller.detail_projection()
        assert panel.breakdown.composite == 90
        assert panel.recommendation_text == "STRONG BUY"
        assert panel.insights.metro_distance_km is not None
        assert panel.carousel.length == 3
        assert "destination=28.4089%2C77.4854" in panel.directions_url
        assert "map_action=pano" in panel.street_view_url

    def test_select_drives_carousel(self, controller, scheduler, bus):
        states = []
        bus.subscribe(CAROUSEL_TOPIC, states.append)

        controller.select(1)
        scheduler.advance(3.0)
        assert controller.carousel.index == 1
        assert [s.index for s in states] == [0, 1]

        controller.select(2)
        assert controller.carousel.index == 0
        assert controller.carousel.images == (controller.catalog.get(2).images)

    def test_clear_selection_closes_carousel(self, controller, scheduler):
        controller.select(1)
        controller.clear_selection()
        assert controller.detail_projection() is None
        assert not controller.carousel.is_open
        assert scheduler.advance(10.0) == 0

    def test_select_by_search(self, controller):
        assert not controller.select_by_search("No")
        assert controller.select_by_search("  noida ")
        assert controller.detail_projection().project.id == 1

    def test_select_by_search_ignores_filters(self, controller):
        controller.set_type_filter("villa")
        assert controller.select_by_search("mathura")
        assert controller.catalog.selected_id == 3

    def test_select_by_search_no_match(self, controller):
        assert not controller.select_by_search("atlantis")

    def test_focus_region(self, controller, bus):
        signals = []
        bus.subscribe(FOCUS_TOPIC, signals.append)
        assert controller.focus_region(" Noida ")
        assert signals[0].region == "noida"
        assert signals[0].zoom == 11
        assert not controller.focus_region("atlantis")
        assert len(signals) == 1


class TestIngestion:
    """Replacing the catalog contents."""

    def test_ingest_clears_selection(self, controller):
        controller.select(1)
        controller.ingest(RECORDS[:2])
        assert controller.detail_projection() is None
        assert not controller.carousel.is_open
        assert list_ids(controller) == [1, 2]

    def test_ingest_skips_invalid_records(self, controller):
        assert controller.ingest([{"title": "No id"}, RECORDS[0]]) == 1

    def test_empty_ingest(self, controller):
        controller.ingest([])
        assert controller.list_projection() == ()
        assert controller.marker_projection() == ()

    def test_load_success(self, controller):
        loaded = asyncio.run(controller.load(StaticFeed(records=RECORDS[2:])))
        assert loaded
        assert list_ids(controller) == [3, 4]

    def test_load_failure_keeps_state(self, controller):
        controller.select(1)
        feed = StaticFeed(error=IngestionFailure("offline"))
        assert not asyncio.run(controller.load(feed))
        assert list_ids(controller) == [1, 2, 3, 4]
        assert controller.catalog.selected_id == 1

    def test_load_empty_keeps_state(self, controller):
        assert not asyncio.run(controller.load(StaticFeed(records=[])))
        assert len(controller.catalog) == 4

    def test_load_only_invalid_keeps_state(self, controller):
        feed = StaticFeed(records=[{"title": "No id"}])
        assert not asyncio.run(controller.load(feed))
        assert len(controller.catalog) == 4


class TestAggregates:
    """Stats, heatmap and top picks."""

    def test_stats(self, controller):
        engine = controller.score_engine
        projects = controller.catalog.projects
        expected = round(sum(engine.composite(p) for p in projects) / 4, 1)

        controller.set_type_filter("plot")
        stats = controller.stats_projection()
        assert stats.total == 4
        assert stats.visible == 1
        assert stats.new_launches == 1
        assert stats.average_score == expected

    def test_stats_empty(self, scheduler):
        stats = ViewSyncController(scheduler=scheduler).stats_projection()
        assert stats.total == 0
        assert stats.average_score == 0.0

    def test_heatmap(self, controller):
        points = controller.heatmap_projection()
        assert len(points) == 4
        assert points[0] == (28.4089, 77.4854, 1.2)

    def test_top_picks(self, controller):
        picks = controller.top_picks(2)
        assert len(picks) == 2
        assert picks[0].id == 1

    def test_configured_focus_zoom(self, scheduler, bus):
        signals = []
        bus.subscribe(FOCUS_TOPIC, signals.append)
        controller = ViewSyncController(
            {"map": {"focus_zoom": 17}}, event_bus=bus, scheduler=scheduler
        )
        controller.ingest(RECORDS)
        controller.select(3)
        assert signals[0].zoom == 17


class TestSharedIds:
    """Records that reuse an id."""

    def test_shared_id_scored_by_own_title(self, controller):
        controller.ingest([
            {"id": 1, "title": "Aster", "baseScore": 90},
            {"id": 1, "title": "Birch", "baseScore": 40},
        ])
        tiers = [entry.tier.value for entry in controller.list_projection()]
        assert tiers == ["strong buy", "avoid"]

    def test_reingest_with_new_title_rescored(self, controller):
        controller.ingest([{"id": 1, "title": "Aster", "baseScore": 90}])
        controller.ingest([{"id": 1, "title": "Birch", "baseScore": 40}])
        entry = controller.list_projection()[0]
        assert entry.project.title == "Birch"
        assert entry.tier.value == "avoid"

    def test_only_selected_record_active(self, controller):
        controller.ingest([
            {"id": 1, "title": "Aster", "baseScore": 90},
            {"id": 1, "title": "Birch", "baseScore": 40},
        ])
        controller.select(1)
        assert [e.active for e in controller.list_projection()] == [True, False]


class TestDefaultScheduler:
    """Controllers built without an explicit scheduler."""

    def test_select_outside_event_loop(self):
        controller = ViewSyncController()
        controller.ingest([{"id": 1, "title": "Aster", "images": ["a.jpg", "b.jpg"]}])

        assert controller.select(1)
        state = controller.detail_projection().carousel
        assert state.length == 2
        assert state.autoplaying

    def test_select_inside_event_loop(self):
        async def run():
            controller = ViewSyncController()
            controller.ingest(RECORDS)
            controller.select(1)
            await asyncio.sleep(0)
            autoplaying = controller.carousel.state.autoplaying
            controller.clear_selection()
            return autoplaying

        assert asyncio.run(run())
