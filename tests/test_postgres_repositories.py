"""SQL repositories exercised against in-memory SQLite via aiosqlite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from herald.core.errors import ConflictError, ValidationError
from herald.core.types import DeliveryStatus, NotificationCategory, NotificationChannel
from herald.db.engine import DatabaseManager
from herald.notifications.models import DeliveryLog
from herald.preferences import DNDSettings, PreferenceUpdate
from herald.repositories.postgres.notifications import (
    PostgresDeliveryLogRepository,
    PostgresNotificationRepository,
)
from herald.repositories.postgres.preferences import PostgresPreferenceRepository
from herald.repositories.postgres.templates import PostgresTemplateRepository
from herald.templates import TemplateCreate, TemplateRenderer, TemplateUpdate
from herald.templates.models import NotificationTemplate

from tests.conftest import make_notification


@pytest.fixture
async def db():
    manager = DatabaseManager("sqlite+aiosqlite:///:memory:")
    await manager.create_all()
    yield manager
    await manager.close()


# -- Notifications --


async def test_notification_save_and_get(db):
    repo = PostgresNotificationRepository(db)
    n = make_notification(metadata={"source": "ci"}, action_url="/builds/1")
    await repo.save(n)
    found = await repo.get(n.id)
    assert found is not None
    assert found.title == n.title
    assert found.metadata == {"source": "ci"}
    assert found.created_at.tzinfo is not None


async def test_notification_get_missing(db):
    assert await PostgresNotificationRepository(db).get("nope") is None


async def test_notification_read_state_persists(db):
    repo = PostgresNotificationRepository(db)
    n = make_notification()
    await repo.save(n)
    n.mark_read()
    await repo.save(n)
    found = await repo.get(n.id)
    assert found.is_read
    assert found.read_at is not None


async def test_notification_list_for_recipient(db):
    repo = PostgresNotificationRepository(db)
    await repo.save(make_notification(recipient_id="a"))
    await repo.save(make_notification(recipient_id="b"))
    await repo.save(make_notification(recipient_id="a"))
    assert len(await repo.list_for_recipient("a")) == 2
    assert await repo.async_count() == 3


async def test_notification_list_in_range(db):
    repo = PostgresNotificationRepository(db)
    now = datetime(2024, 3, 1, 12, tzinfo=timezone.utc)
    await repo.save(make_notification(created_at=now - timedelta(days=1)))
    await repo.save(
        make_notification(created_at=now, category=NotificationCategory.SOCIAL)
    )
    await repo.save(make_notification(created_at=now - timedelta(days=10)))

    in_range = await repo.list_in_range(now - timedelta(days=2), now)
    assert len(in_range) == 2
    social = await repo.list_in_range(
        now - timedelta(days=2), now, category=NotificationCategory.SOCIAL
    )
    assert len(social) == 1


# -- Delivery logs --


async def test_delivery_log_roundtrip_and_transition(db):
    notifications = PostgresNotificationRepository(db)
    logs = PostgresDeliveryLogRepository(db)
    n = make_notification()
    await notifications.save(n)

    log = DeliveryLog.start(n.id, NotificationChannel.IN_APP, DeliveryStatus.SENT)
    await logs.save(log)
    log.advance_to(DeliveryStatus.OPENED)
    await logs.save(log)

    found = await logs.get(log.id)
    assert found.status == DeliveryStatus.OPENED
    assert found.attempts == 1
    assert found.delivered_at is not None
    assert found.opened_at is not None


async def test_delivery_logs_for_notifications(db):
    notifications = PostgresNotificationRepository(db)
    logs = PostgresDeliveryLogRepository(db)
    a, b = make_notification(), make_notification()
    await notifications.save(a)
    await notifications.save(b)
    await logs.save(DeliveryLog.start(a.id, NotificationChannel.IN_APP, DeliveryStatus.SENT))
    await logs.save(DeliveryLog.start(a.id, NotificationChannel.IN_APP, DeliveryStatus.FAILED))
    await logs.save(DeliveryLog.start(b.id, NotificationChannel.IN_APP, DeliveryStatus.SENT))

    assert len(await logs.list_for_notification(a.id)) == 2
    assert len(await logs.list_for_notifications([a.id, b.id])) == 3
    assert await logs.list_for_notifications([]) == []
    assert len(await logs.list_all()) == 3


async def test_delivery_logs_in_range(db):
    notifications = PostgresNotificationRepository(db)
    logs = PostgresDeliveryLogRepository(db)
    n = make_notification()
    await notifications.save(n)
    await logs.save(DeliveryLog.start(n.id, NotificationChannel.IN_APP, DeliveryStatus.SENT))

    now = datetime.now(timezone.utc)
    found = await logs.list_in_range(
        now - timedelta(minutes=5), now + timedelta(minutes=5), channel=NotificationChannel.IN_APP
    )
    assert len(found) == 1
    assert await logs.list_in_range(now - timedelta(days=2), now - timedelta(days=1)) == []


# -- Preferences --


async def test_preference_defaults_and_upsert(db):
    repo = PostgresPreferenceRepository(db)
    prefs = await repo.get("user-1", NotificationCategory.SOCIAL)
    assert prefs.enabled

    await repo.upsert("user-1", NotificationCategory.SOCIAL, PreferenceUpdate(enabled=False))
    await repo.upsert(
        "user-1", NotificationCategory.SOCIAL, PreferenceUpdate(dnd_days=[5, 1, 5])
    )
    prefs = await repo.get("user-1", NotificationCategory.SOCIAL)
    assert not prefs.enabled
    assert prefs.dnd_days == [1, 5]


async def test_preference_validation(db):
    repo = PostgresPreferenceRepository(db)
    with pytest.raises(ValidationError):
        await repo.upsert(
            "user-1", NotificationCategory.SOCIAL, PreferenceUpdate(dnd_end_time="8:00")
        )


async def test_preference_set_dnd_and_reset(db):
    repo = PostgresPreferenceRepository(db)
    await repo.set_dnd("user-1", DNDSettings(enabled=True, start_time="22:00", end_time="07:00"))
    prefs = await repo.list_for_recipient("user-1")
    assert len(prefs) == len(NotificationCategory)
    assert all(p.dnd_enabled for p in prefs)

    await repo.reset_all("user-1")
    prefs = await repo.list_for_recipient("user-1")
    assert not any(p.dnd_enabled for p in prefs)


# -- Templates --


def _template(key: str = "welcome") -> NotificationTemplate:
    return NotificationTemplate(
        key=key,
        name="Welcome",
        category=NotificationCategory.SYSTEM,
        title="Hi {{name}}",
        message="Hello {{name}}",
        variables=["name"],
    )


async def test_template_save_get_delete(db):
    repo = PostgresTemplateRepository(db)
    template = _template()
    await repo.save(template)
    assert (await repo.get(template.id)).key == "welcome"
    assert (await repo.get_by_key("welcome")).id == template.id
    assert await repo.delete(template.id)
    assert not await repo.delete(template.id)
    assert await repo.get(template.id) is None


async def test_template_duplicate_key_conflicts(db):
    repo = PostgresTemplateRepository(db)
    await repo.save(_template())
    with pytest.raises(ConflictError):
        await repo.save(_template())


async def test_renderer_versioning_over_sql(db):
    renderer = TemplateRenderer(PostgresTemplateRepository(db))
    template = await renderer.create(
        TemplateCreate(
            key="digest",
            name="Digest",
            category=NotificationCategory.CONTENT,
            title="{{count}} updates",
            message="You have {{count}} updates",
            variables=["count"],
        )
    )
    updated = await renderer.update(template.id, TemplateUpdate(message="{{count}} new items"))
    assert updated.version == 2
    stored = await renderer.find_by_key("digest")
    assert stored.version == 2
    assert stored.message == "{{count}} new items"
    assert [t.key for t in await renderer.list_templates()] == ["digest"]
