"""Analytics result models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, field_validator

from herald.core.timeutil import to_utc
from herald.core.types import NotificationCategory, NotificationChannel


class DateRange(BaseModel):
    """Inclusive time range ``[start, end]``."""

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _normalise(cls, value: datetime) -> datetime:
        # Bounds without an offset are read as UTC.
        return to_utc(value)

    @classmethod
    def last_days(cls, days: int, now: datetime | None = None) -> DateRange:
        end = now or datetime.now(timezone.utc)
        return cls(start=end - timedelta(days=days), end=end)


class NotificationMetrics(BaseModel):
    total_delivered: int = 0
    total_opened: int = 0
    total_clicked: int = 0
    open_rate: float = 0.0
    click_rate: float = 0.0
    average_time_to_open_seconds: float = 0.0
    delivery_success_rate: float = 0.0


class CategoryStats(BaseModel):
    category: NotificationCategory
    count: int = 0
    opened: int = 0
    clicked: int = 0
    open_rate: float = 0.0
    click_rate: float = 0.0


class ChannelPerformance(BaseModel):
    channel: NotificationChannel
    delivered: int = 0
    failed: int = 0
    opened: int = 0
    clicked: int = 0
    success_rate: float = 0.0
    open_rate: float = 0.0
    click_rate: float = 0.0
