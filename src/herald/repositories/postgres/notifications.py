"""PostgreSQL notification and delivery log repositories."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import func, select

from herald.core.types import (
    DeliveryStatus,
    NotificationCategory,
    NotificationChannel,
    NotificationPriority,
)
from herald.db.engine import DatabaseManager
from herald.db.models import DeliveryLogRow, NotificationRow
from herald.notifications.models import DeliveryLog, Notification
from herald.repositories.postgres import aware, to_utc


class PostgresNotificationRepository:
    """Postgres-backed notification storage."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def save(self, notification: Notification) -> Notification:
        async with self._db.session() as db:
            existing = await db.get(NotificationRow, notification.id)
            if existing:
                # Only read-state is mutable once created.
                existing.is_read = notification.is_read
                existing.read_at = notification.read_at
            else:
                db.add(
                    NotificationRow(
                        id=notification.id,
                        recipient_id=notification.recipient_id,
                        title=notification.title,
                        message=notification.message,
                        category=notification.category.value,
                        priority=notification.priority.value,
                        action_url=notification.action_url,
                        action_label=notification.action_label,
                        image_url=notification.image_url,
                        metadata_json=notification.metadata,
                        template_key=notification.template_key,
                        is_read=notification.is_read,
                        read_at=notification.read_at,
                        created_at=notification.created_at,
                    )
                )
            await db.commit()
        return notification

    async def get(self, notification_id: str) -> Notification | None:
        async with self._db.session() as db:
            row = await db.get(NotificationRow, notification_id)
            if row is None:
                return None
            return self._row_to_notification(row)

    async def list_for_recipient(self, recipient_id: str) -> list[Notification]:
        async with self._db.session() as db:
            result = await db.execute(
                select(NotificationRow).where(NotificationRow.recipient_id == recipient_id)
            )
            return [self._row_to_notification(r) for r in result.scalars().all()]

    async def list_in_range(
        self,
        start: datetime,
        end: datetime,
        recipient_id: str | None = None,
        category: NotificationCategory | None = None,
    ) -> list[Notification]:
        stmt = select(NotificationRow).where(
            NotificationRow.created_at >= to_utc(start),
            NotificationRow.created_at <= to_utc(end),
        )
        if recipient_id is not None:
            stmt = stmt.where(NotificationRow.recipient_id == recipient_id)
        if category is not None:
            stmt = stmt.where(NotificationRow.category == category.value)
        async with self._db.session() as db:
            result = await db.execute(stmt)
            return [self._row_to_notification(r) for r in result.scalars().all()]

    async def list_all(self) -> list[Notification]:
        async with self._db.session() as db:
            result = await db.execute(select(NotificationRow))
            return [self._row_to_notification(r) for r in result.scalars().all()]

    async def async_count(self) -> int:
        async with self._db.session() as db:
            result = await db.execute(select(func.count()).select_from(NotificationRow))
            return result.scalar_one()

    @staticmethod
    def _row_to_notification(row: NotificationRow) -> Notification:
        return Notification(
            id=row.id,
            recipient_id=row.recipient_id,
            title=row.title,
            message=row.message,
            category=NotificationCategory(row.category),
            priority=NotificationPriority(row.priority),
            action_url=row.action_url,
            action_label=row.action_label,
            image_url=row.image_url,
            metadata=row.metadata_json or {},
            template_key=row.template_key,
            is_read=row.is_read,
            read_at=aware(row.read_at),
            created_at=aware(row.created_at),
        )


class PostgresDeliveryLogRepository:
    """Postgres-backed delivery log storage with upsert-by-id saves."""

    _FIELDS = (
        "status",
        "attempts",
        "error_message",
        "sent_at",
        "delivered_at",
        "failed_at",
        "opened_at",
        "clicked_at",
    )

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def save(self, log: DeliveryLog) -> DeliveryLog:
        async with self._db.session() as db:
            existing = await db.get(DeliveryLogRow, log.id)
            if existing:
                for field in self._FIELDS:
                    value = getattr(log, field)
                    if field == "status":
                        value = value.value
                    setattr(existing, field, value)
            else:
                db.add(
                    DeliveryLogRow(
                        id=log.id,
                        notification_id=log.notification_id,
                        channel=log.channel.value,
                        status=log.status.value,
                        attempts=log.attempts,
                        error_message=log.error_message,
                        sent_at=log.sent_at,
                        delivered_at=log.delivered_at,
                        failed_at=log.failed_at,
                        opened_at=log.opened_at,
                        clicked_at=log.clicked_at,
                        created_at=log.created_at,
                    )
                )
            await db.commit()
        return log

    async def get(self, log_id: str) -> DeliveryLog | None:
        async with self._db.session() as db:
            row = await db.get(DeliveryLogRow, log_id)
            if row is None:
                return None
            return self._row_to_log(row)

    async def list_for_notification(self, notification_id: str) -> list[DeliveryLog]:
        async with self._db.session() as db:
            result = await db.execute(
                select(DeliveryLogRow)
                .where(DeliveryLogRow.notification_id == notification_id)
                .order_by(DeliveryLogRow.created_at.desc())
            )
            return [self._row_to_log(r) for r in result.scalars().all()]

    async def list_for_notifications(self, notification_ids: Iterable[str]) -> list[DeliveryLog]:
        ids = list(notification_ids)
        if not ids:
            return []
        async with self._db.session() as db:
            result = await db.execute(
                select(DeliveryLogRow).where(DeliveryLogRow.notification_id.in_(ids))
            )
            return [self._row_to_log(r) for r in result.scalars().all()]

    async def list_in_range(
        self,
        start: datetime,
        end: datetime,
        channel: NotificationChannel | None = None,
    ) -> list[DeliveryLog]:
        stmt = select(DeliveryLogRow).where(
            DeliveryLogRow.created_at >= to_utc(start),
            DeliveryLogRow.created_at <= to_utc(end),
        )
        if channel is not None:
            stmt = stmt.where(DeliveryLogRow.channel == channel.value)
        async with self._db.session() as db:
            result = await db.execute(stmt)
            return [self._row_to_log(r) for r in result.scalars().all()]

    async def list_all(self) -> list[DeliveryLog]:
        async with self._db.session() as db:
            result = await db.execute(select(DeliveryLogRow))
            return [self._row_to_log(r) for r in result.scalars().all()]

    @staticmethod
    def _row_to_log(row: DeliveryLogRow) -> DeliveryLog:
        return DeliveryLog(
            id=row.id,
            notification_id=row.notification_id,
            channel=NotificationChannel(row.channel),
            status=DeliveryStatus(row.status),
            attempts=row.attempts,
            error_message=row.error_message,
            sent_at=aware(row.sent_at),
            delivered_at=aware(row.delivered_at),
            failed_at=aware(row.failed_at),
            opened_at=aware(row.opened_at),
            clicked_at=aware(row.clicked_at),
            created_at=aware(row.created_at),
        )
