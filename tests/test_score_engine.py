"""Tests for the deterministic score engine."""

import sys
from dataclasses import replace
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from models.constants import Recommendation
from models.project import Project
from scoring.engine import ScoreEngine


@pytest.fixture
def engine():
    return ScoreEngine()


@pytest.fixture
def aster():
    return Project.from_record({"id": 1, "title": "Aster", "baseScore": 90})


@pytest.fixture
def birch():
    return Project.from_record({"id": 2, "title": "Birch", "baseScore": 40})


class TestSnapshot:
    """Reproducible scores for fixed projects."""

    def test_aster(self, engine, aster):
        breakdown = engine.score(aster)
        assert breakdown.sub_scores() == (86, 93, 86, 95, 94)
        assert breakdown.composite == 90
        assert breakdown.recommendation is Recommendation.STRONG_BUY

    def test_birch(self, engine, birch):
        breakdown = engine.score(birch)
        assert breakdown.sub_scores() == (34, 35, 45, 44, 42)
        assert breakdown.composite == 40
        assert breakdown.recommendation is Recommendation.AVOID

    def test_default_base_score(self, engine):
        """Without a feed score the target defaults to 80."""
        project = Project.from_record({"id": 1, "title": "Aster"})
        breakdown = engine.score(project)
        assert breakdown.sub_scores() == (76, 83, 76, 85, 84)
        assert breakdown.composite == 80

    def test_configured_default_base_score(self):
        engine = ScoreEngine({"default_base_score": 90})
        project = Project.from_record({"id": 1, "title": "Aster"})
        assert engine.composite(project) == 90


class TestDeterminism:
    """Scores depend only on the project."""

    def test_independent_engines_agree(self, aster):
        assert ScoreEngine().score(aster) == ScoreEngine().score(aster)

    def test_score_order_does_not_matter(self, aster, birch):
        first = ScoreEngine()
        first.score(birch)
        second = ScoreEngine()
        assert first.score(aster) == second.score(aster)

    def test_id_changes_seed(self, engine):
        one = Project.from_record({"id": 1, "title": "Aster", "baseScore": 70})
        two = Project.from_record({"id": 11, "title": "Aster", "baseScore": 70})
        assert engine.score(one).sub_scores() != engine.score(two).sub_scores()


class TestMemoization:
    """Breakdowns are cached per title and id and never recomputed."""

    def test_same_object_returned(self, engine, aster):
        assert engine.score(aster) is engine.score(aster)
        assert engine.cache_size == 1

    def test_changed_base_score_ignored_once_cached(self, engine, aster):
        first = engine.score(aster)
        altered = replace(aster, base_score=10)
        assert engine.score(altered) is first

    def test_string_and_int_ids_share_entry(self, engine, aster):
        engine.score(aster)
        assert engine.is_cached(replace(aster, id="1"))

    def test_not_cached_before_scoring(self, engine, birch):
        assert not engine.is_cached(birch)
        engine.composite(birch)
        assert engine.is_cached(birch)

    def test_shared_id_with_different_title_scored_separately(self, engine, aster):
        """Records sharing an id but not a title have different seeds."""
        other = Project.from_record({"id": 1, "title": "Birch", "baseScore": 40})
        assert engine.composite(aster) == 90
        assert engine.score(other).recommendation is Recommendation.AVOID
        assert engine.cache_size == 2


class TestBounds:
    """Composite and sub-scores stay in [0, 100]."""

    @pytest.mark.parametrize("base", [0, 3, 50, 97, 100])
    def test_bounds(self, engine, base):
        for i in range(25):
            project = Project.from_record(
                {"id": f"{base}-{i}", "title": f"Project {i}", "baseScore": base}
            )
            breakdown = engine.score(project)
            assert 0 <= breakdown.composite <= 100
            for value in breakdown.sub_scores():
                assert 0 <= value <= 100

    @pytest.mark.parametrize("base", [20, 50, 80])
    def test_jitter_window(self, engine, base):
        """Every sub-score lies within [-7, +6] of the target."""
        for i in range(25):
            project = Project.from_record(
                {"id": i, "title": f"Jitter {base}", "baseScore": base}
            )
            for value in engine.score(project).sub_scores():
                assert base - 7 <= value <= base + 6


class TestInsights:
    """Synthetic market insights."""

    def test_deterministic(self, aster):
        assert ScoreEngine().insights(aster) == ScoreEngine().insights(aster)

    def test_memoized(self, engine, aster):
        assert engine.insights(aster) is engine.insights(aster)

    def test_ranges(self, engine):
        for i in range(20):
            project = Project.from_record(
                {"id": i, "title": "Range", "location": "Noida Sector 150"}
            )
            insights = engine.insights(project)
            assert 0.5 <= insights.metro_distance_km <= 5.5
            assert 5 <= insights.news_positive < 20
            assert 50 <= insights.social_mentions < 250
            assert 75 <= insights.on_time_percent < 95
            assert 5 <= insights.appreciation_percent < 15
            assert 10 <= insights.completion_percent < 100
            assert 4.0 <= insights.review_rating <= 4.8
            assert 2 <= insights.nearby_projects < 7
            assert 1.0 <= insights.below_market_percent <= 6.0
            assert 4.0 <= insights.six_month_projection_percent <= 8.0
            assert 3.0 <= insights.gross_yield_percent <= 5.0

    def test_no_metro_in_vrindavan(self, engine):
        project = Project.from_record(
            {"id": 7, "title": "Temple View", "location": "Raman Reti, Vrindavan"}
        )
        insights = engine.insights(project)
        assert insights.metro_distance_km is None
        assert insights.metro_text == "Not Available"

    def test_metro_text(self, engine):
        project = Project.from_record({"id": 8, "title": "Metro", "location": "Noida"})
        insights = engine.insights(project)
        assert insights.metro_text == f"{insights.metro_distance_km:.1f}km away"

    def test_summary_mentions_tier(self, engine, aster):
        insights = engine.insights(aster)
        assert insights.summary.startswith("Aster presents a strong buy opportunity")
        assert f"{insights.appreciation_percent}% YoY" in insights.summary
