"""Error taxonomy for the delivery engine.

Validation and conflict errors signal caller mistakes and always propagate.
``DeliveryError`` wraps unexpected failures raised while delivering.
"""

from __future__ import annotations


class HeraldError(Exception):
    """Base class for all engine errors."""


class NotFoundError(HeraldError, KeyError):
    """A template, notification or delivery log does not exist."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class ConflictError(HeraldError):
    """A uniqueness constraint would be violated (e.g. duplicate template key)."""


class ValidationError(HeraldError, ValueError):
    """Caller supplied malformed or incomplete input."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidTransitionError(ValidationError):
    """A delivery log was asked to move along an edge the state machine forbids."""


class DeliveryError(HeraldError):
    """Unexpected failure while delivering a notification."""

    def __init__(self, notification_id: str, message: str) -> None:
        super().__init__(f"Delivery of notification {notification_id!r} failed: {message}")
        self.notification_id = notification_id
