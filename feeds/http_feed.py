"""Project feed backed by the listings JSON API."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from models.errors import IngestionFailure

from .base import ProjectFeed

logger = logging.getLogger(__name__)


class HttpProjectFeed(ProjectFeed):
    """Fetch project records from an HTTP endpoint returning {"data": [...]}."""

    DEFAULT_URL = "http://localhost:3000/api/projects"
    MAX_RETRIES = 2

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the HTTP feed.

        Args:
            config: Feed configuration (url, timeout, max_retries)
            transport: Optional httpx transport (e.g. MockTransport in tests)
        """
        super().__init__(config)
        self.url = self.config.get("url", self.DEFAULT_URL)
        self.timeout = self.config.get("timeout", 10.0)
        self.max_retries = max(1, self.config.get("max_retries", self.MAX_RETRIES))
        self.transport = transport

    def get_feed_name(self) -> str:
        return "http"

    async def fetch(self) -> List[Dict[str, Any]]:
        last_error: Optional[str] = None

        for attempt in range(self.max_retries):
            try:
                logger.info(
                    f"Fetching projects from {self.url} "
                    f"(attempt {attempt + 1}/{self.max_retries})"
                )
                async with httpx.AsyncClient(
                    timeout=httpx.Timeout(self.timeout, connect=5.0),
                    transport=self.transport,
                ) as client:
                    response = await client.get(self.url)

                if response.status_code != 200:
                    last_error = f"status={response.status_code}"
                    logger.warning(
                        f"Project API request failed (attempt {attempt + 1}/"
                        f"{self.max_retries}): {last_error}"
                    )
                    continue

                try:
                    payload = response.json()
                except ValueError as e:
                    raise IngestionFailure(f"Project API returned invalid JSON: {e}") from e

                records = self.extract_records(payload)
                logger.info(f"Fetched {len(records)} project records")
                return records

            except httpx.TimeoutException as e:
                last_error = f"timeout after {self.timeout}s: {e}"
                logger.warning(
                    f"Project API timeout on attempt {attempt + 1}/{self.max_retries}: {e}"
                )
            except httpx.HTTPError as e:
                last_error = str(e) or type(e).__name__
                logger.warning(
                    f"Cannot reach project API on attempt {attempt + 1}/"
                    f"{self.max_retries}: {last_error}"
                )

        raise IngestionFailure(f"Project API unavailable at {self.url} ({last_error})")
