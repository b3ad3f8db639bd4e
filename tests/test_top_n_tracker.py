"""Tests for top-N project tracking."""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from models.project import Project
from utils.top_n_tracker import TopNTracker


def project(pid):
    return Project.from_record({"id": pid, "title": f"Project {pid}"})


class TestTopNTracker:
    """Test heap-based top-N selection."""

    def test_keeps_best(self):
        tracker = TopNTracker(2)
        for pid, score in [(1, 50), (2, 90), (3, 70), (4, 10)]:
            tracker.add(project(pid), score)
        assert [p.id for p in tracker.get_sorted_projects()] == [2, 3]
        assert tracker.min_score() == 70

    def test_rejects_worse_when_full(self):
        tracker = TopNTracker(1)
        assert tracker.add(project(1), 80)
        assert not tracker.add(project(2), 60)
        assert tracker.is_full()

    def test_ties_keep_earlier_project(self):
        tracker = TopNTracker(2)
        for pid in (1, 2, 3):
            tracker.add(project(pid), 75)
        assert [p.id for p in tracker.get_sorted_projects()] == [1, 2]

    def test_not_full(self):
        tracker = TopNTracker(3)
        tracker.add(project(1), 40)
        assert len(tracker) == 1
        assert tracker.min_score() == float("-inf")

    def test_zero_capacity(self):
        tracker = TopNTracker(0)
        assert not tracker.add(project(1), 99)
        assert tracker.get_sorted_projects() == []
