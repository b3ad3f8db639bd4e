"""Utility modules for ranking and report generation."""

from .markdown_generator import MarkdownGenerator
from .top_n_tracker import TopNTracker

__all__ = [
    "MarkdownGenerator",
    "TopNTracker",
]
