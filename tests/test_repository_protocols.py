"""Repository protocol conformance.

Both the in-memory stores and the SQL repositories must satisfy the
runtime-checkable Protocols so services can be wired with either.
"""

from __future__ import annotations

from herald.db.engine import DatabaseManager
from herald.notifications.models import Notification
from herald.notifications.store import DeliveryLogStore, NotificationStore
from herald.preferences import PreferenceStore
from herald.repositories import resolve
from herald.repositories.postgres.notifications import (
    PostgresDeliveryLogRepository,
    PostgresNotificationRepository,
)
from herald.repositories.postgres.preferences import PostgresPreferenceRepository
from herald.repositories.postgres.templates import PostgresTemplateRepository
from herald.repositories.protocols import (
    DeliveryLogRepository,
    NotificationRepository,
    PreferenceRepository,
    TemplateRepository,
)
from herald.templates import TemplateStore


def test_notification_store_satisfies_protocol():
    assert isinstance(NotificationStore(), NotificationRepository)


def test_delivery_log_store_satisfies_protocol():
    assert isinstance(DeliveryLogStore(), DeliveryLogRepository)


def test_preference_store_satisfies_protocol():
    assert isinstance(PreferenceStore(), PreferenceRepository)


def test_template_store_satisfies_protocol():
    assert isinstance(TemplateStore(), TemplateRepository)


async def test_sql_repositories_satisfy_protocols():
    db = DatabaseManager("sqlite+aiosqlite:///:memory:")
    try:
        assert isinstance(PostgresNotificationRepository(db), NotificationRepository)
        assert isinstance(PostgresDeliveryLogRepository(db), DeliveryLogRepository)
        assert isinstance(PostgresPreferenceRepository(db), PreferenceRepository)
        assert isinstance(PostgresTemplateRepository(db), TemplateRepository)
    finally:
        await db.close()


async def test_resolve_passes_plain_values_through():
    store = NotificationStore()
    n = Notification(recipient_id="user-1", title="t", message="m")
    assert await resolve(store.save(n)) is n


async def test_resolve_awaits_coroutines():
    async def fetch():
        return 42

    assert await resolve(fetch()) == 42
