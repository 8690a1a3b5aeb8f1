"""Delivery gate: preference and DND checks, in-app push, delivery logging."""

from herald.delivery.models import DeliveryStats, SubmitNotification
from herald.delivery.orchestrator import (
    DND_REASON,
    DISABLED_REASON,
    DeliveryOrchestrator,
)

__all__ = [
    "DISABLED_REASON",
    "DND_REASON",
    "DeliveryOrchestrator",
    "DeliveryStats",
    "SubmitNotification",
]
