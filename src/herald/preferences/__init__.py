"""Per-recipient notification preferences and Do-Not-Disturb evaluation."""

from herald.preferences.dnd import is_in_dnd_window
from herald.preferences.models import DNDSettings, Preference, PreferenceUpdate
from herald.preferences.store import PreferenceStore

__all__ = [
    "DNDSettings",
    "Preference",
    "PreferenceStore",
    "PreferenceUpdate",
    "is_in_dnd_window",
]
