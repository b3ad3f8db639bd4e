"""Efficient top-N project tracking using min-heap."""

import heapq
from typing import List, Tuple

from models.project import Project


class TopNTracker:
    """
    Track top N projects by composite score using a min-heap.

    Provides O(log N) insertion complexity, so the best projects can be
    picked out of a feed without sorting all of them.

    The heap stores (score, -insertion_order, project) tuples: the root is
    the weakest entry, and among equal scores the most recently added one,
    so earlier projects win ties.
    """

    def __init__(self, n: int):
        """
        Initialize tracker for top N projects.

        Args:
            n: Number of top projects to track
        """
        self.n = n
        self.heap: List[Tuple[int, int, Project]] = []
        self._counter = 0

    def add(self, project: Project, score: int) -> bool:
        """
        Add project to top N tracker.

        Args:
            project: The project to potentially add
            score: Its composite score

        Returns:
            True if project made it into top N, False otherwise
        """
        if self.n <= 0:
            return False

        entry = (score, -self._counter, project)
        self._counter += 1

        if len(self.heap) < self.n:
            heapq.heappush(self.heap, entry)
            return True

        # Check if better than worst in heap
        worst_score = self.heap[0][0]
        if score > worst_score:
            heapq.heapreplace(self.heap, entry)
            return True
        return False

    def get_sorted_projects(self) -> List[Project]:
        """
        Get top N projects sorted by score (highest first).

        Returns:
            List of Project objects, ties in insertion order
        """
        sorted_heap = sorted(self.heap, key=lambda x: (-x[0], -x[1]))
        return [project for _, _, project in sorted_heap]

    def is_full(self) -> bool:
        return len(self.heap) >= self.n

    def min_score(self) -> float:
        """
        Get minimum score currently in top N.

        Returns:
            Minimum score in top N, or -inf if not full
        """
        if not self.is_full() or not self.heap:
            return float("-inf")
        return self.heap[0][0]

    def __len__(self) -> int:
        """Return number of projects currently tracked."""
        return len(self.heap)
