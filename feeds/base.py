"""Abstract base class for project ingestion feeds."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from models.errors import IngestionFailure


class ProjectFeed(ABC):
    """
    Abstract base class for sources of raw project records.

    A feed performs one asynchronous fetch per ingestion event and returns
    the complete record set. Records stay raw dicts; normalization into
    Project values happens at the catalog boundary.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize feed with configuration.

        Args:
            config: The "feed" section of the configuration
        """
        self.config = config or {}

    @abstractmethod
    def get_feed_name(self) -> str:
        """
        Return feed identifier.

        Returns:
            Feed name (e.g., "http", "file")
        """
        pass

    @abstractmethod
    async def fetch(self) -> List[Dict[str, Any]]:
        """
        Fetch the full set of raw project records.

        Returns:
            List of record dicts (possibly empty)

        Raises:
            IngestionFailure: If the source rejects the request or the
                payload does not contain a record list
        """
        pass

    def extract_records(self, payload: Any) -> List[Dict[str, Any]]:
        """
        Pull the record list out of a decoded JSON payload.

        Accepts either {"data": [...]} or a bare list.

        Raises:
            IngestionFailure: If no list of records can be found
        """
        if isinstance(payload, dict):
            payload = payload.get("data")
        if not isinstance(payload, list):
            raise IngestionFailure(
                f"{self.get_feed_name()} payload has no record list"
            )
        return [record for record in payload if isinstance(record, dict)]
