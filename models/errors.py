"""Exception types raised across the catalog packages."""


class ListingLensError(Exception):
    """Base class for all catalog errors."""


class InvalidRecordError(ListingLensError):
    """A raw feed record cannot be turned into a Project."""


class IngestionFailure(ListingLensError):
    """The ingestion feed rejected the request or returned an unusable payload."""
