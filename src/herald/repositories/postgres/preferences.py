"""PostgreSQL preference repository."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from herald.core.types import NotificationCategory
from herald.db.engine import DatabaseManager
from herald.db.models import PreferenceRow
from herald.preferences.models import (
    DNDSettings,
    Preference,
    PreferenceUpdate,
    validate_update,
)
from herald.repositories.postgres import aware


class PostgresPreferenceRepository:
    """Postgres-backed preferences, unique per (recipient_id, category)."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get(self, recipient_id: str, category: NotificationCategory) -> Preference:
        async with self._db.session() as db:
            row = await self._find(db, recipient_id, category)
            if row is None:
                return Preference.default(recipient_id, category)
            return self._row_to_preference(row)

    async def upsert(
        self,
        recipient_id: str,
        category: NotificationCategory,
        update: PreferenceUpdate,
    ) -> Preference:
        validate_update(update)
        try:
            return await self._upsert_once(recipient_id, category, update)
        except IntegrityError:
            # A concurrent writer inserted the row first; apply on top of it.
            return await self._upsert_once(recipient_id, category, update)

    async def _upsert_once(
        self,
        recipient_id: str,
        category: NotificationCategory,
        update: PreferenceUpdate,
    ) -> Preference:
        async with self._db.session() as db:
            row = await self._find(db, recipient_id, category)
            current = (
                self._row_to_preference(row)
                if row is not None
                else Preference.default(recipient_id, category)
            )
            updated = current.apply(update)
            if row is None:
                row = PreferenceRow(
                    recipient_id=recipient_id,
                    category=category.value,
                    created_at=updated.created_at,
                )
                db.add(row)
            row.enabled = updated.enabled
            row.dnd_enabled = updated.dnd_enabled
            row.dnd_start_time = updated.dnd_start_time
            row.dnd_end_time = updated.dnd_end_time
            row.dnd_days = list(updated.dnd_days)
            row.updated_at = updated.updated_at
            await db.commit()
        return updated

    async def list_for_recipient(self, recipient_id: str) -> list[Preference]:
        async with self._db.session() as db:
            result = await db.execute(
                select(PreferenceRow).where(PreferenceRow.recipient_id == recipient_id)
            )
            stored = {
                NotificationCategory(r.category): self._row_to_preference(r)
                for r in result.scalars().all()
            }
        return [
            stored.get(category) or Preference.default(recipient_id, category)
            for category in NotificationCategory
        ]

    async def set_dnd(self, recipient_id: str, settings: DNDSettings) -> list[Preference]:
        update = settings.as_update()
        validate_update(update)
        return [
            await self.upsert(recipient_id, category, update)
            for category in NotificationCategory
        ]

    async def reset_all(self, recipient_id: str) -> list[Preference]:
        async with self._db.session() as db:
            await db.execute(
                delete(PreferenceRow).where(PreferenceRow.recipient_id == recipient_id)
            )
            await db.commit()
        return [Preference.default(recipient_id, category) for category in NotificationCategory]

    @staticmethod
    async def _find(db, recipient_id: str, category: NotificationCategory) -> PreferenceRow | None:
        result = await db.execute(
            select(PreferenceRow).where(
                PreferenceRow.recipient_id == recipient_id,
                PreferenceRow.category == category.value,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _row_to_preference(row: PreferenceRow) -> Preference:
        return Preference(
            recipient_id=row.recipient_id,
            category=NotificationCategory(row.category),
            enabled=row.enabled,
            dnd_enabled=row.dnd_enabled,
            dnd_start_time=row.dnd_start_time,
            dnd_end_time=row.dnd_end_time,
            dnd_days=list(row.dnd_days or []),
            created_at=aware(row.created_at),
            updated_at=aware(row.updated_at),
        )
