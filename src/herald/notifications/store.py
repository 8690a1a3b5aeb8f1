"""In-memory notification and delivery log stores."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from datetime import datetime

from herald.core.types import NotificationCategory, NotificationChannel
from herald.notifications.models import DeliveryLog, Notification


class NotificationStore:
    """In-memory store for notifications.

    Writes are serialized by a lock so create/update-by-id is atomic when
    several deliveries run on different threads.
    """

    def __init__(self) -> None:
        self._notifications: dict[str, Notification] = {}
        self._lock = threading.Lock()

    def save(self, notification: Notification) -> Notification:
        with self._lock:
            self._notifications[notification.id] = notification
        return notification

    def get(self, notification_id: str) -> Notification | None:
        return self._notifications.get(notification_id)

    def list_for_recipient(self, recipient_id: str) -> list[Notification]:
        return [
            n for n in list(self._notifications.values())
            if n.recipient_id == recipient_id
        ]

    def list_in_range(
        self,
        start: datetime,
        end: datetime,
        recipient_id: str | None = None,
        category: NotificationCategory | None = None,
    ) -> list[Notification]:
        return [
            n for n in list(self._notifications.values())
            if start <= n.created_at <= end
            and (recipient_id is None or n.recipient_id == recipient_id)
            and (category is None or n.category == category)
        ]

    def list_all(self) -> list[Notification]:
        return list(self._notifications.values())

    @property
    def count(self) -> int:
        return len(self._notifications)


class DeliveryLogStore:
    """In-memory store for delivery logs."""

    def __init__(self) -> None:
        self._logs: dict[str, DeliveryLog] = {}
        self._lock = threading.Lock()

    def save(self, log: DeliveryLog) -> DeliveryLog:
        with self._lock:
            self._logs[log.id] = log
        return log

    def get(self, log_id: str) -> DeliveryLog | None:
        return self._logs.get(log_id)

    def list_for_notification(self, notification_id: str) -> list[DeliveryLog]:
        logs = [
            log for log in list(self._logs.values())
            if log.notification_id == notification_id
        ]
        return sorted(logs, key=lambda log: log.created_at, reverse=True)

    def list_for_notifications(self, notification_ids: Iterable[str]) -> list[DeliveryLog]:
        wanted = set(notification_ids)
        return [
            log for log in list(self._logs.values())
            if log.notification_id in wanted
        ]

    def list_in_range(
        self,
        start: datetime,
        end: datetime,
        channel: NotificationChannel | None = None,
    ) -> list[DeliveryLog]:
        return [
            log for log in list(self._logs.values())
            if start <= log.created_at <= end
            and (channel is None or log.channel == channel)
        ]

    def list_all(self) -> list[DeliveryLog]:
        return list(self._logs.values())

    @property
    def count(self) -> int:
        return len(self._logs)
