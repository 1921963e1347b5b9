"""errors.py — Error taxonomy for the wiki API.

Request-shape faults are raised by the resolvers before any store call.
Store faults are raised by the persistence layer and pass through the
resolvers unchanged in kind.
"""
from __future__ import annotations

__all__ = [
    "RequestShapeError",
    "StoreError",
    "StoreNotFoundError",
    "StoreQueryError",
    "StoreUnavailable",
    "StoreWriteError",
    "WikiApiError",
]


class WikiApiError(Exception):
    """Base class for every fault this API raises."""

    status_code = 500
    code = "INTERNAL_ERROR"
    retryable = False


class RequestShapeError(WikiApiError, ValueError):
    """A required argument is missing or an argument has the wrong type."""

    status_code = 400
    code = "INVALID_INPUT"

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.field = field


class StoreError(WikiApiError):
    """Infrastructure or protocol fault reported by DynamoDB."""


class StoreNotFoundError(StoreError):
    """The addressed item does not exist.

    Never surfaced to callers; update folds it into an absent result,
    delete into success, and the owner query into an empty list.
    """

    status_code = 404
    code = "NOT_FOUND"


class StoreQueryError(StoreError):
    """A read (Query/GetItem) was rejected by the store."""


class StoreWriteError(StoreError):
    """A write (PutItem/UpdateItem/DeleteItem) was rejected by the store."""


class StoreUnavailable(StoreError):
    """The store could not be reached, or throttled/failed service-side."""

    status_code = 503
    code = "STORE_UNAVAILABLE"
    retryable = True
