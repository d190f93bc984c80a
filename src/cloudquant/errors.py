"""Dashboard error types."""

from __future__ import annotations

from enum import Enum


class DashboardErrorCode(Enum):
    """Error classification codes."""

    FETCH_FAILED = "fetch_failed"
    MALFORMED_RESPONSE = "malformed_response"
    AUTH_FAILED = "auth_failed"
    NO_DATA = "no_data"
    INVALID_SERIES = "invalid_series"
    PERSISTENCE_FAILED = "persistence_failed"
    ID_COLLISION = "id_collision"


class DashboardError(Exception):
    """Base exception with error code and retryable flag.

    Attributes:
        message: Human-readable error description.
        code: Structured error code for programmatic handling.
        retryable: Whether the same call may succeed if attempted again.
    """

    default_code = DashboardErrorCode.FETCH_FAILED

    def __init__(
        self,
        message: str,
        code: DashboardErrorCode | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.retryable = retryable


class FetchError(DashboardError):
    """Quote or candle fetch failed. Always absorbed by the data sources."""

    default_code = DashboardErrorCode.FETCH_FAILED

    def __init__(
        self,
        message: str,
        code: DashboardErrorCode | None = None,
        retryable: bool = True,
    ) -> None:
        super().__init__(message, code=code, retryable=retryable)


class InvalidSeries(DashboardError):
    """Candle series handed to the aggregator is not sorted by time."""

    default_code = DashboardErrorCode.INVALID_SERIES


class PersistenceError(DashboardError):
    """Trade ledger read/write failed against its backing store."""

    default_code = DashboardErrorCode.PERSISTENCE_FAILED


class CollisionError(PersistenceError):
    """Backing store rejected a trade id as a duplicate."""

    default_code = DashboardErrorCode.ID_COLLISION
