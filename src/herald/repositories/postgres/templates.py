"""PostgreSQL template repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from herald.core.errors import ConflictError
from herald.core.types import NotificationCategory, NotificationChannel, NotificationPriority
from herald.db.engine import DatabaseManager
from herald.db.models import TemplateRow
from herald.repositories.postgres import aware
from herald.templates.models import NotificationTemplate


class PostgresTemplateRepository:
    """Postgres-backed template storage. The ``key`` column is unique."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def save(self, template: NotificationTemplate) -> NotificationTemplate:
        async with self._db.session() as db:
            row = await db.get(TemplateRow, template.id)
            if row is None:
                row = TemplateRow(id=template.id, key=template.key, created_at=template.created_at)
                db.add(row)
            row.name = template.name
            row.description = template.description
            row.category = template.category.value
            row.title = template.title
            row.message = template.message
            row.variables = list(template.variables)
            row.default_channels = [c.value for c in template.default_channels]
            row.default_priority = template.default_priority.value
            row.version = template.version
            row.is_active = template.is_active
            row.updated_at = template.updated_at
            try:
                await db.commit()
            except IntegrityError as exc:
                raise ConflictError(f'Template with key "{template.key}" already exists') from exc
        return template

    async def get(self, template_id: str) -> NotificationTemplate | None:
        async with self._db.session() as db:
            row = await db.get(TemplateRow, template_id)
            return self._row_to_template(row) if row is not None else None

    async def get_by_key(self, key: str) -> NotificationTemplate | None:
        async with self._db.session() as db:
            result = await db.execute(select(TemplateRow).where(TemplateRow.key == key))
            row = result.scalar_one_or_none()
            return self._row_to_template(row) if row is not None else None

    async def delete(self, template_id: str) -> bool:
        async with self._db.session() as db:
            row = await db.get(TemplateRow, template_id)
            if row is None:
                return False
            await db.delete(row)
            await db.commit()
        return True

    async def list_all(self) -> list[NotificationTemplate]:
        async with self._db.session() as db:
            result = await db.execute(select(TemplateRow).order_by(TemplateRow.key))
            return [self._row_to_template(r) for r in result.scalars().all()]

    @staticmethod
    def _row_to_template(row: TemplateRow) -> NotificationTemplate:
        return NotificationTemplate(
            id=row.id,
            key=row.key,
            name=row.name,
            description=row.description,
            category=NotificationCategory(row.category),
            title=row.title,
            message=row.message,
            variables=list(row.variables or []),
            default_channels=[NotificationChannel(c) for c in row.default_channels or []],
            default_priority=NotificationPriority(row.default_priority),
            version=row.version,
            is_active=row.is_active,
            created_at=aware(row.created_at),
            updated_at=aware(row.updated_at),
        )
