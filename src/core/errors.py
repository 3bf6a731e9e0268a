"""Error taxonomy - Pure data types.

Setup errors carry the HTTP status the handler should return. Store and
gateway errors are tagged types raised by the shell and mapped to setup
errors by the orchestrator.
"""

from enum import Enum


class SetupAlertError(Exception):
    """Base class for errors surfaced to the caller of /setup-alert.

    Attributes:
        message: Message safe to return to the caller (no contact values)
        status_code: HTTP status code for the response
    """
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SetupAlertError):
    """Malformed or missing input (400)."""
    status_code = 400


class LocationLimitError(SetupAlertError):
    """Contact already has the maximum number of locations (400)."""
    status_code = 400


class ConflictError(SetupAlertError):
    """Duplicate location or concurrent insert for the same contact (409)."""
    status_code = 409


class UpstreamError(SetupAlertError):
    """Notification gateway unreachable or rejected the request (502)."""
    status_code = 502


class InternalError(SetupAlertError):
    """Store anomaly or unexpected failure (500)."""
    status_code = 500


class StoreError(Exception):
    """Generic subscription store failure."""


class UniqueConstraintViolation(StoreError):
    """Another writer created the same contact concurrently."""


class NotificationErrorCategory(Enum):
    """Why a notification gateway call failed."""
    CONNECTION_REFUSED = "connectionRefused"
    TIMEOUT = "timeout"
    UPSTREAM_REJECTED = "upstreamRejected"
    MALFORMED_RESPONSE = "malformedResponse"
    OTHER = "other"


class NotificationError(Exception):
    """Notification gateway call failed.

    Attributes:
        category: Failure category
        status: HTTP status for UPSTREAM_REJECTED, else None
        body: Response body text for UPSTREAM_REJECTED, else None
    """

    def __init__(
        self,
        category: NotificationErrorCategory,
        message: str,
        status: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.status = status
        self.body = body
