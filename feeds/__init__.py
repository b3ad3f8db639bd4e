"""Ingestion feed factory and exports."""

import logging
from typing import Any, Dict

from feeds.base import ProjectFeed

logger = logging.getLogger(__name__)


def get_feed(config: Dict[str, Any]) -> ProjectFeed:
    """
    Factory function to get the configured ingestion feed.

    Args:
        config: Full configuration dictionary from config.json

    Returns:
        Feed instance (HttpProjectFeed or JsonFileFeed)

    Raises:
        ValueError: If the feed source is not supported

    Example:
        >>> config = {"feed": {"source": "file", "path": "projects.json"}}
        >>> feed = get_feed(config)
        >>> print(feed.get_feed_name())
        "file"
    """
    feed_config = config.get("feed", {})
    source = feed_config.get("source", "http").lower()

    if source == "http":
        from feeds.http_feed import HttpProjectFeed

        feed = HttpProjectFeed(feed_config)
        logger.info(f"Initializing HTTP feed ({feed.url})")
        return feed

    elif source == "file":
        from feeds.file_feed import JsonFileFeed

        feed = JsonFileFeed(feed_config)
        logger.info(f"Initializing file feed ({feed.path})")
        return feed

    else:
        raise ValueError(
            f"Unsupported feed source: {source}. "
            f"Supported sources: 'http', 'file'"
        )


__all__ = ["get_feed", "ProjectFeed"]
