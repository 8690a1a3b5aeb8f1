"""In-memory preference store."""

from __future__ import annotations

import threading

from herald.core.types import NotificationCategory
from herald.preferences.models import (
    DNDSettings,
    Preference,
    PreferenceUpdate,
    validate_update,
)


class PreferenceStore:
    """In-memory store keyed by (recipient_id, category).

    At most one row exists per key; missing rows are synthesized as
    defaults on read and never written back.
    """

    def __init__(self) -> None:
        self._prefs: dict[tuple[str, NotificationCategory], Preference] = {}
        self._lock = threading.Lock()

    def get(self, recipient_id: str, category: NotificationCategory) -> Preference:
        stored = self._prefs.get((recipient_id, category))
        return stored if stored is not None else Preference.default(recipient_id, category)

    def upsert(
        self,
        recipient_id: str,
        category: NotificationCategory,
        update: PreferenceUpdate,
    ) -> Preference:
        validate_update(update)
        key = (recipient_id, category)
        with self._lock:
            current = self._prefs.get(key) or Preference.default(recipient_id, category)
            updated = current.apply(update)
            self._prefs[key] = updated
        return updated

    def list_for_recipient(self, recipient_id: str) -> list[Preference]:
        return [self.get(recipient_id, category) for category in NotificationCategory]

    def set_dnd(self, recipient_id: str, settings: DNDSettings) -> list[Preference]:
        update = settings.as_update()
        validate_update(update)
        return [
            self.upsert(recipient_id, category, update)
            for category in NotificationCategory
        ]

    def reset_all(self, recipient_id: str) -> list[Preference]:
        with self._lock:
            for key in [k for k in self._prefs if k[0] == recipient_id]:
                del self._prefs[key]
        return [Preference.default(recipient_id, category) for category in NotificationCategory]

    @property
    def count(self) -> int:
        return len(self._prefs)
