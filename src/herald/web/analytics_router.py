"""FastAPI router for engagement analytics."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Request

from herald.analytics.models import (
    CategoryStats,
    ChannelPerformance,
    DateRange,
    NotificationMetrics,
)

router = APIRouter(prefix="/api/analytics")


def _date_range(request: Request, start: datetime | None, end: datetime | None) -> DateRange:
    """Fill a missing bound from the configured default window."""
    days = request.app.state.settings.analytics.default_range_days
    if end is None:
        end = datetime.now(timezone.utc)
    if start is None:
        start = end - timedelta(days=days)
    return DateRange(start=start, end=end)


@router.get("/metrics")
async def get_metrics(
    request: Request,
    recipient_id: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
) -> NotificationMetrics:
    aggregator = request.app.state.analytics_aggregator
    return await aggregator.get_metrics(recipient_id, _date_range(request, start, end))


@router.get("/categories")
async def get_category_stats(
    request: Request,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[CategoryStats]:
    aggregator = request.app.state.analytics_aggregator
    return await aggregator.get_category_stats(_date_range(request, start, end))


@router.get("/channels")
async def get_channel_performance(
    request: Request,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[ChannelPerformance]:
    aggregator = request.app.state.analytics_aggregator
    return await aggregator.get_channel_performance(_date_range(request, start, end))
