"""Core enumerations shared across all Herald modules."""

from __future__ import annotations

from enum import StrEnum


class NotificationCategory(StrEnum):
    SYSTEM = "SYSTEM"
    USER_ACTION = "USER_ACTION"
    SECURITY = "SECURITY"
    BILLING = "BILLING"
    CONTENT = "CONTENT"
    WORKFLOW = "WORKFLOW"
    SOCIAL = "SOCIAL"
    CUSTOM = "CUSTOM"


class NotificationPriority(StrEnum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    URGENT = "URGENT"


class NotificationChannel(StrEnum):
    """Medium a notification is pushed through."""

    IN_APP = "IN_APP"


class DeliveryStatus(StrEnum):
    """Progress of a single delivery attempt.

    Allowed moves are listed in ``DELIVERY_TRANSITIONS``. FAILED and
    CLICKED have no outgoing edges.
    """

    SENT = "SENT"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"
    OPENED = "OPENED"
    CLICKED = "CLICKED"

    @property
    def is_terminal(self) -> bool:
        return not DELIVERY_TRANSITIONS[self]

    @property
    def is_successful(self) -> bool:
        return self is not DeliveryStatus.FAILED

    def can_transition_to(self, target: DeliveryStatus) -> bool:
        return target in DELIVERY_TRANSITIONS[self]


DELIVERY_TRANSITIONS: dict[DeliveryStatus, frozenset[DeliveryStatus]] = {
    DeliveryStatus.SENT: frozenset({DeliveryStatus.DELIVERED, DeliveryStatus.FAILED}),
    DeliveryStatus.DELIVERED: frozenset({DeliveryStatus.OPENED}),
    DeliveryStatus.OPENED: frozenset({DeliveryStatus.CLICKED}),
    DeliveryStatus.FAILED: frozenset(),
    DeliveryStatus.CLICKED: frozenset(),
}

# Forward path used when an engagement event implies the steps before it.
ENGAGEMENT_PATH: tuple[DeliveryStatus, ...] = (
    DeliveryStatus.SENT,
    DeliveryStatus.DELIVERED,
    DeliveryStatus.OPENED,
    DeliveryStatus.CLICKED,
)
