"""Project catalog browser: ingest listings, score them and summarize the view."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from catalog.events import EventBus
from catalog.sync import FOCUS_TOPIC, FocusSignal, ViewSyncController
from feeds import get_feed
from utils.markdown_generator import MarkdownGenerator

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Suppress per-request logs from the HTTP client
logging.getLogger("httpx").setLevel(logging.WARNING)


class CatalogSession:
    """One browsing session: a controller wired to a feed and a summary writer."""

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the session with configuration.

        Args:
            config: Configuration dictionary from config.json
        """
        self.config = config
        self.view_config = config.get("view", {})

        self.event_bus = EventBus()
        self.event_bus.subscribe(FOCUS_TOPIC, self._log_focus)
        self.controller = ViewSyncController(config, event_bus=self.event_bus)
        self.feed = get_feed(config)

        output_config = config.get("output", {})
        self.generate_summary = output_config.get("generate_summary", True)
        self.summary_filename = output_config.get("summary_filename", "catalog_summary.md")
        self.md_generator = MarkdownGenerator(
            output_dir=output_config.get("output_folder", "output"),
            top_n=output_config.get("top_n", 3),
        )

    def apply_view_config(self) -> None:
        """Apply the filters, search, ordering and selection from the view section."""
        view = self.view_config
        self.controller.set_type_filter(view.get("type_filter", "all"))
        self.controller.set_recommendation_filter(view.get("recommendation_filter", "all"))
        self.controller.set_search_query(view.get("search_query", ""))
        self.controller.set_sort_order(view.get("sort_order", "insertion"))

        select_id = view.get("select_id")
        if select_id is not None and not self.controller.select(select_id):
            logger.warning(f"Configured project {select_id!r} not found in catalog")

    async def run(self) -> Optional[Path]:
        """
        Load the feed, apply the configured view and write the summary.

        Returns:
            Path of the summary file, or None if nothing was written
        """
        loaded = await self.controller.load(self.feed)
        if not loaded:
            logger.error("No projects loaded; check that the listing feed is reachable")
            return None

        self.apply_view_config()

        stats = self.controller.stats_projection()
        logger.info(
            f"{stats.visible}/{stats.total} projects visible "
            f"(new launches: {stats.new_launches}, average score: {stats.average_score})"
        )

        summary_path = None
        if self.generate_summary:
            summary_path = self.md_generator.write_summary(
                self.controller, filename=self.summary_filename
            )

        self.controller.clear_selection()
        return summary_path

    def _log_focus(self, signal: FocusSignal) -> None:
        target = signal.region or f"project {signal.project_id}"
        logger.info(f"Map focus: {target} at {signal.coords} (zoom {signal.zoom})")


async def load_config() -> Dict[str, Any]:
    """Load configuration from config.json"""
    config_path = Path(__file__).parent / "config.json"
    with open(config_path, "r", encoding="utf-8") as f:
        config = json.load(f)

    # Validate required fields
    feed_config = config.get("feed")
    if not isinstance(feed_config, dict) or "source" not in feed_config:
        raise ValueError("Missing required field 'feed.source' in config.json")

    if feed_config["source"] == "http" and "url" not in feed_config:
        raise ValueError("Missing required field 'feed.url' for http feed")
    if feed_config["source"] == "file":
        if "path" not in feed_config:
            raise ValueError("Missing required field 'feed.path' for file feed")
        # Relative paths are resolved against the config location
        feed_path = Path(feed_config["path"])
        if not feed_path.is_absolute():
            feed_config["path"] = str(config_path.parent / feed_path)

    return config


async def main():
    """Main entry point for the catalog browser."""
    try:
        config = await load_config()
        session = CatalogSession(config)
        summary_path = await session.run()

        if summary_path:
            logger.info(f"Done! Summary written to {summary_path}")

    except FileNotFoundError:
        logger.error("config.json not found")
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")


if __name__ == "__main__":
    asyncio.run(main())
