"""Tests for preference models, validation and the in-memory store."""

from __future__ import annotations

import pytest

from herald.core.errors import ValidationError
from herald.core.types import NotificationCategory
from herald.preferences import DNDSettings, Preference, PreferenceStore, PreferenceUpdate


class TestPreferenceDefaults:
    def test_default_is_enabled_without_dnd(self) -> None:
        prefs = Preference.default("user-1", NotificationCategory.SOCIAL)
        assert prefs.enabled
        assert not prefs.dnd_enabled
        assert prefs.dnd_days == []

    def test_apply_only_touches_set_fields(self) -> None:
        prefs = Preference.default("user-1", NotificationCategory.SOCIAL)
        updated = prefs.apply(PreferenceUpdate(dnd_enabled=True))
        assert updated.dnd_enabled
        assert updated.enabled
        assert updated.dnd_start_time is None

    def test_apply_ignores_null_flags(self) -> None:
        prefs = Preference.default("user-1", NotificationCategory.SOCIAL)
        prefs = prefs.apply(PreferenceUpdate(enabled=False))
        updated = prefs.apply(PreferenceUpdate(enabled=None, dnd_start_time="22:00"))
        assert not updated.enabled
        assert updated.dnd_start_time == "22:00"

    def test_apply_normalizes_days(self) -> None:
        prefs = Preference.default("user-1", NotificationCategory.SOCIAL)
        updated = prefs.apply(PreferenceUpdate(dnd_days=[6, 0, 6, 3]))
        assert updated.dnd_days == [0, 3, 6]


class TestPreferenceStore:
    def setup_method(self) -> None:
        self.store = PreferenceStore()

    def test_missing_row_is_synthesized_not_stored(self) -> None:
        prefs = self.store.get("user-1", NotificationCategory.SYSTEM)
        assert prefs.enabled
        assert self.store.count == 0

    def test_upsert_creates_then_updates(self) -> None:
        self.store.upsert("user-1", NotificationCategory.SYSTEM, PreferenceUpdate(enabled=False))
        self.store.upsert(
            "user-1", NotificationCategory.SYSTEM, PreferenceUpdate(dnd_start_time="22:00")
        )
        prefs = self.store.get("user-1", NotificationCategory.SYSTEM)
        assert not prefs.enabled
        assert prefs.dnd_start_time == "22:00"
        assert self.store.count == 1

    def test_preferences_are_per_category(self) -> None:
        self.store.upsert("user-1", NotificationCategory.SOCIAL, PreferenceUpdate(enabled=False))
        assert self.store.get("user-1", NotificationCategory.SECURITY).enabled

    @pytest.mark.parametrize("value", ["7:00", "24:00", "12:60", "noon", "12:00:00", ""])
    def test_rejects_malformed_times(self, value: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            self.store.upsert(
                "user-1", NotificationCategory.SYSTEM, PreferenceUpdate(dnd_start_time=value)
            )
        assert exc_info.value.field == "dnd_start_time"
        assert self.store.count == 0

    def test_rejects_days_out_of_range(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            self.store.upsert(
                "user-1", NotificationCategory.SYSTEM, PreferenceUpdate(dnd_days=[1, 7])
            )
        assert exc_info.value.field == "dnd_days"

    def test_accepts_boundary_times(self) -> None:
        prefs = self.store.upsert(
            "user-1",
            NotificationCategory.SYSTEM,
            PreferenceUpdate(dnd_start_time="00:00", dnd_end_time="23:59"),
        )
        assert prefs.dnd_end_time == "23:59"

    def test_list_for_recipient_covers_every_category(self) -> None:
        self.store.upsert("user-1", NotificationCategory.SOCIAL, PreferenceUpdate(enabled=False))
        prefs = self.store.list_for_recipient("user-1")
        assert len(prefs) == len(NotificationCategory)
        social = next(p for p in prefs if p.category == NotificationCategory.SOCIAL)
        assert not social.enabled

    def test_set_dnd_applies_to_every_category(self) -> None:
        self.store.upsert("user-1", NotificationCategory.SOCIAL, PreferenceUpdate(enabled=False))
        settings = DNDSettings(enabled=True, start_time="22:00", end_time="08:00", days=[1, 2])
        result = self.store.set_dnd("user-1", settings)
        assert len(result) == len(NotificationCategory)
        assert all(p.dnd_enabled and p.dnd_start_time == "22:00" for p in result)
        # Enabled flags survive a DND change.
        assert not self.store.get("user-1", NotificationCategory.SOCIAL).enabled

    def test_set_dnd_validates_before_writing(self) -> None:
        with pytest.raises(ValidationError):
            self.store.set_dnd("user-1", DNDSettings(enabled=True, start_time="99:00"))
        assert self.store.count == 0

    def test_reset_all_restores_defaults(self) -> None:
        self.store.upsert("user-1", NotificationCategory.SOCIAL, PreferenceUpdate(enabled=False))
        self.store.upsert("user-2", NotificationCategory.SOCIAL, PreferenceUpdate(enabled=False))
        prefs = self.store.reset_all("user-1")
        assert all(p.enabled for p in prefs)
        assert self.store.get("user-1", NotificationCategory.SOCIAL).enabled
        assert not self.store.get("user-2", NotificationCategory.SOCIAL).enabled
