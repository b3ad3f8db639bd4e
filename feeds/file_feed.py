"""Project feed that reads a local JSON export."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from models.errors import IngestionFailure

from .base import ProjectFeed

logger = logging.getLogger(__name__)


class JsonFileFeed(ProjectFeed):
    """Load project records from a JSON file ({"data": [...]} or a bare list)."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.path = Path(self.config.get("path", "projects.json"))

    def get_feed_name(self) -> str:
        return "file"

    async def fetch(self) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._read)

    def _read(self) -> List[Dict[str, Any]]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except FileNotFoundError as e:
            raise IngestionFailure(f"Project file not found: {self.path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise IngestionFailure(f"Cannot read project file {self.path}: {e}") from e

        records = self.extract_records(payload)
        logger.info(f"Read {len(records)} project records from {self.path}")
        return records
