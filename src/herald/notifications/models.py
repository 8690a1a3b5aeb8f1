"""Notification and delivery log data models."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from herald.core.errors import InvalidTransitionError, ValidationError
from herald.core.types import (
    ENGAGEMENT_PATH,
    DeliveryStatus,
    NotificationCategory,
    NotificationChannel,
    NotificationPriority,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Notification(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    recipient_id: str
    title: str
    message: str
    category: NotificationCategory = NotificationCategory.SYSTEM
    priority: NotificationPriority = NotificationPriority.NORMAL
    action_url: str | None = None
    action_label: str | None = None
    image_url: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    template_key: str | None = None
    is_read: bool = False
    read_at: datetime | None = None
    created_at: datetime = Field(default_factory=_utcnow)

    def mark_read(self, at: datetime | None = None) -> bool:
        """Flag the notification as read. Returns False if it already was."""
        if self.is_read:
            return False
        self.is_read = True
        self.read_at = at or _utcnow()
        return True


# Status -> timestamp attribute stamped when the status is reached.
_STATUS_TIMESTAMPS: dict[DeliveryStatus, str] = {
    DeliveryStatus.SENT: "sent_at",
    DeliveryStatus.DELIVERED: "delivered_at",
    DeliveryStatus.FAILED: "failed_at",
    DeliveryStatus.OPENED: "opened_at",
    DeliveryStatus.CLICKED: "clicked_at",
}

_ENTRY_STATUSES = frozenset(
    {DeliveryStatus.SENT, DeliveryStatus.DELIVERED, DeliveryStatus.FAILED}
)


class DeliveryLog(BaseModel):
    """One delivery attempt of a notification over a single channel."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    notification_id: str
    channel: NotificationChannel = NotificationChannel.IN_APP
    status: DeliveryStatus
    attempts: int = 1
    error_message: str | None = None
    sent_at: datetime | None = None
    delivered_at: datetime | None = None
    failed_at: datetime | None = None
    opened_at: datetime | None = None
    clicked_at: datetime | None = None
    created_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def start(
        cls,
        notification_id: str,
        channel: NotificationChannel,
        status: DeliveryStatus,
        error_message: str | None = None,
    ) -> DeliveryLog:
        """Create the first log entry of an attempt.

        An attempt enters the machine as SENT, DELIVERED (a channel that
        confirms synchronously) or FAILED (rejected before sending).
        """
        if status not in _ENTRY_STATUSES:
            raise InvalidTransitionError(
                f"A delivery log cannot start in status {status.value}", field="status"
            )
        now = _utcnow()
        log = cls(notification_id=notification_id, channel=channel, status=status, created_at=now)
        if status is DeliveryStatus.DELIVERED:
            log.sent_at = now
        log._stamp(status, now)
        if status is DeliveryStatus.FAILED:
            log.error_message = error_message
        return log

    def transition_to(
        self,
        status: DeliveryStatus,
        error_message: str | None = None,
        at: datetime | None = None,
        count_attempt: bool = True,
    ) -> None:
        """Advance along one edge of the delivery state machine.

        Engagement steps pass ``count_attempt=False``; only delivery moves
        count towards ``attempts``.
        """
        if not self.status.can_transition_to(status):
            raise InvalidTransitionError(
                f"Delivery log {self.id} cannot move from {self.status.value} to {status.value}",
                field="status",
            )
        self.status = status
        if count_attempt:
            self.attempts += 1
        self._stamp(status, at or _utcnow())
        if status is DeliveryStatus.FAILED and error_message:
            self.error_message = error_message

    def advance_to(self, target: DeliveryStatus, at: datetime | None = None) -> bool:
        """Walk forward along SENT -> DELIVERED -> OPENED -> CLICKED up to ``target``.

        Used for engagement events: an open implies delivery, a click implies
        an open. Returns False when the log is already at or beyond ``target``
        or has failed.
        """
        if target not in ENGAGEMENT_PATH:
            raise ValidationError(f"{target.value} is not an engagement status", field="status")
        if self.status not in ENGAGEMENT_PATH:
            return False
        current = ENGAGEMENT_PATH.index(self.status)
        goal = ENGAGEMENT_PATH.index(target)
        if current >= goal:
            return False
        when = at or _utcnow()
        for step in ENGAGEMENT_PATH[current + 1 : goal + 1]:
            self.transition_to(step, at=when, count_attempt=False)
        return True

    def _stamp(self, status: DeliveryStatus, at: datetime) -> None:
        attr = _STATUS_TIMESTAMPS[status]
        if getattr(self, attr) is None:
            setattr(self, attr, at)
