"""Delivery and engagement metrics computed on demand from the stores.

Nothing is cached or rolled up; every call reads the current records, so
results always reflect the latest log state. All rates are 0.0 when their
denominator is zero.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from herald.analytics.models import (
    CategoryStats,
    ChannelPerformance,
    DateRange,
    NotificationMetrics,
)
from herald.core.errors import ValidationError
from herald.core.types import DeliveryStatus, NotificationCategory, NotificationChannel
from herald.notifications.models import DeliveryLog, Notification
from herald.repositories import resolve

logger = logging.getLogger(__name__)


def rate(numerator: int | float, denominator: int | float) -> float:
    return numerator / denominator if denominator else 0.0


def _is_successful(log: DeliveryLog) -> bool:
    return log.status.is_successful


def average_time_to_open(notifications: Iterable[Notification]) -> float:
    """Mean seconds between creation and read, over read notifications."""
    durations = [
        (n.read_at - n.created_at).total_seconds()
        for n in notifications
        if n.is_read and n.read_at is not None
    ]
    return rate(sum(durations), len(durations))


class AnalyticsAggregator:
    """Computes metrics from notification and delivery log repositories."""

    def __init__(self, notifications: Any, delivery_logs: Any) -> None:
        self._notifications = notifications
        self._logs = delivery_logs

    @staticmethod
    def _check_range(date_range: DateRange) -> None:
        if date_range.start > date_range.end:
            raise ValidationError("Date range start must not be after its end", field="start")

    async def _notifications_in(
        self,
        date_range: DateRange,
        recipient_id: str | None = None,
        category: NotificationCategory | None = None,
    ) -> list[Notification]:
        return await resolve(
            self._notifications.list_in_range(
                date_range.start, date_range.end, recipient_id=recipient_id, category=category
            )
        )

    async def get_metrics(
        self, recipient_id: str | None, date_range: DateRange
    ) -> NotificationMetrics:
        """Metrics over notifications created in range, for one recipient or everyone."""
        self._check_range(date_range)
        notifications = await self._notifications_in(date_range, recipient_id=recipient_id)
        logs: list[DeliveryLog] = await resolve(
            self._logs.list_for_notifications([n.id for n in notifications])
        )

        total_delivered = len(notifications)
        total_opened = sum(1 for n in notifications if n.is_read)
        total_clicked = sum(1 for log in logs if log.clicked_at is not None)
        successful = sum(1 for log in logs if _is_successful(log))

        metrics = NotificationMetrics(
            total_delivered=total_delivered,
            total_opened=total_opened,
            total_clicked=total_clicked,
            open_rate=rate(total_opened, total_delivered),
            click_rate=rate(total_clicked, total_opened),
            average_time_to_open_seconds=average_time_to_open(notifications),
            delivery_success_rate=rate(successful, len(logs)),
        )
        logger.debug("Computed metrics for %s: %s", recipient_id or "all recipients", metrics)
        return metrics

    async def get_category_stats(self, date_range: DateRange) -> list[CategoryStats]:
        """Per-category counts and rates, busiest category first."""
        self._check_range(date_range)
        notifications = await self._notifications_in(date_range)
        logs: list[DeliveryLog] = await resolve(
            self._logs.list_for_notifications([n.id for n in notifications])
        )
        clicked_ids: dict[str, int] = {}
        for log in logs:
            if log.clicked_at is not None:
                clicked_ids[log.notification_id] = clicked_ids.get(log.notification_id, 0) + 1

        stats: list[CategoryStats] = []
        for category in NotificationCategory:
            in_category = [n for n in notifications if n.category == category]
            count = len(in_category)
            opened = sum(1 for n in in_category if n.is_read)
            clicked = sum(clicked_ids.get(n.id, 0) for n in in_category)
            stats.append(
                CategoryStats(
                    category=category,
                    count=count,
                    opened=opened,
                    clicked=clicked,
                    open_rate=rate(opened, count),
                    click_rate=rate(clicked, opened),
                )
            )
        return sorted(stats, key=lambda s: s.count, reverse=True)

    async def get_channel_performance(self, date_range: DateRange) -> list[ChannelPerformance]:
        """Per-channel delivery outcome counts, highest delivered first."""
        self._check_range(date_range)
        performance: list[ChannelPerformance] = []
        for channel in NotificationChannel:
            logs: list[DeliveryLog] = await resolve(
                self._logs.list_in_range(date_range.start, date_range.end, channel=channel)
            )
            delivered = sum(1 for log in logs if _is_successful(log))
            failed = sum(1 for log in logs if log.status is DeliveryStatus.FAILED)
            opened = sum(1 for log in logs if log.opened_at is not None)
            clicked = sum(1 for log in logs if log.clicked_at is not None)
            performance.append(
                ChannelPerformance(
                    channel=channel,
                    delivered=delivered,
                    failed=failed,
                    opened=opened,
                    clicked=clicked,
                    success_rate=rate(delivered, len(logs)),
                    open_rate=rate(opened, delivered),
                    click_rate=rate(clicked, opened),
                )
            )
        return sorted(performance, key=lambda p: p.delivered, reverse=True)
