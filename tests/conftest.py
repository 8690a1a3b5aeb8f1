"""Shared test fixtures and helpers."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from herald.core.types import NotificationCategory, NotificationPriority
from herald.notifications.models import Notification


class RecordingSession:
    """Push session that records every payload it accepts."""

    def __init__(self) -> None:
        self.payloads: list[dict[str, Any]] = []

    def push(self, payload: dict[str, Any]) -> None:
        self.payloads.append(payload)


class BrokenSession:
    """Push session whose connection has gone away."""

    def push(self, payload: dict[str, Any]) -> None:
        raise ConnectionError("socket closed")


def at(hhmm: str, day: str = "2024-01-03") -> datetime:
    """Build a local moment on ``day`` (default a Wednesday) at ``hhmm``."""
    hours, minutes = hhmm.split(":")
    base = datetime.fromisoformat(day)
    return base.replace(hour=int(hours), minute=int(minutes))


def make_notification(
    recipient_id: str = "user-1",
    category: NotificationCategory = NotificationCategory.SYSTEM,
    priority: NotificationPriority = NotificationPriority.NORMAL,
    **kwargs: Any,
) -> Notification:
    return Notification(
        recipient_id=recipient_id,
        title=kwargs.pop("title", "Hello"),
        message=kwargs.pop("message", "World"),
        category=category,
        priority=priority,
        **kwargs,
    )
