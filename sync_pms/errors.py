"""
Exception types raised by the PMS sync job.

The orchestrator relies on this hierarchy to decide what is fatal:
FetchError on a single entity is logged and skipped, while discovery
failures and PersistenceError abort the run.
"""

from typing import Optional


class SyncError(Exception):
    """Base class for all sync job errors."""


class TransportError(SyncError):
    """The PMS API could not be reached (connection failure, timeout, DNS)."""


class ResponseError(SyncError):
    """
    The PMS API answered, but not with something usable.

    Raised for non-2xx status codes and for bodies that are not valid JSON
    or do not match the expected record shape.

    Attributes:
        status_code: HTTP status code when the error came from a response, else None
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class FetchError(SyncError):
    """
    An entity fetcher failed to retrieve or parse a record.

    Wraps the underlying TransportError or ResponseError, which is also
    available as __cause__.

    Attributes:
        entity: Entity name (e.g. "booking", "room type")
        entity_id: PMS identifier being fetched, None for list calls
        cause: The wrapped transport or response error
    """

    def __init__(self, entity: str, entity_id: Optional[int], cause: SyncError):
        self.entity = entity
        self.entity_id = entity_id
        self.cause = cause
        target = entity if entity_id is None else f"{entity} {entity_id}"
        super().__init__(f"Failed to fetch {target}: {cause}")


class PersistenceError(SyncError):
    """The database transaction failed and was rolled back."""
