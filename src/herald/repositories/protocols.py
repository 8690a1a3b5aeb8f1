"""Protocol definitions for all repository interfaces.

Each protocol mirrors the public methods of the corresponding in-memory
store class, so both sync (in-memory) and async (SQL) implementations
satisfy the same interface. Callers go through ``resolve()``.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol, runtime_checkable

from herald.core.types import NotificationCategory, NotificationChannel
from herald.notifications.models import DeliveryLog, Notification
from herald.preferences.models import DNDSettings, Preference, PreferenceUpdate
from herald.templates.models import NotificationTemplate


@runtime_checkable
class NotificationRepository(Protocol):
    """Protocol for notification storage."""

    def save(self, notification: Notification) -> Notification: ...

    def get(self, notification_id: str) -> Notification | None: ...

    def list_for_recipient(self, recipient_id: str) -> list[Notification]: ...

    def list_in_range(
        self,
        start: datetime,
        end: datetime,
        recipient_id: str | None = None,
        category: NotificationCategory | None = None,
    ) -> list[Notification]: ...

    def list_all(self) -> list[Notification]: ...


@runtime_checkable
class DeliveryLogRepository(Protocol):
    """Protocol for delivery log storage. ``save`` is an atomic upsert by id."""

    def save(self, log: DeliveryLog) -> DeliveryLog: ...

    def get(self, log_id: str) -> DeliveryLog | None: ...

    def list_for_notification(self, notification_id: str) -> list[DeliveryLog]: ...

    def list_for_notifications(self, notification_ids: Iterable[str]) -> list[DeliveryLog]: ...

    def list_in_range(
        self,
        start: datetime,
        end: datetime,
        channel: NotificationChannel | None = None,
    ) -> list[DeliveryLog]: ...

    def list_all(self) -> list[DeliveryLog]: ...


@runtime_checkable
class PreferenceRepository(Protocol):
    """Protocol for per-(recipient, category) preference storage."""

    def get(self, recipient_id: str, category: NotificationCategory) -> Preference: ...

    def upsert(
        self,
        recipient_id: str,
        category: NotificationCategory,
        update: PreferenceUpdate,
    ) -> Preference: ...

    def list_for_recipient(self, recipient_id: str) -> list[Preference]: ...

    def set_dnd(self, recipient_id: str, settings: DNDSettings) -> list[Preference]: ...

    def reset_all(self, recipient_id: str) -> list[Preference]: ...


@runtime_checkable
class TemplateRepository(Protocol):
    """Protocol for template storage. Keys are unique."""

    def save(self, template: NotificationTemplate) -> NotificationTemplate: ...

    def get(self, template_id: str) -> NotificationTemplate | None: ...

    def get_by_key(self, key: str) -> NotificationTemplate | None: ...

    def delete(self, template_id: str) -> bool: ...

    def list_all(self) -> list[NotificationTemplate]: ...
