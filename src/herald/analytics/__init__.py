"""Read-side delivery and engagement metrics."""

from herald.analytics.aggregator import AnalyticsAggregator
from herald.analytics.models import (
    CategoryStats,
    ChannelPerformance,
    DateRange,
    NotificationMetrics,
)

__all__ = [
    "AnalyticsAggregator",
    "CategoryStats",
    "ChannelPerformance",
    "DateRange",
    "NotificationMetrics",
]
