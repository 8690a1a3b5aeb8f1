"""Preference data models and write-time validation."""

from __future__ import annotations

import re
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from herald.core.errors import ValidationError
from herald.core.types import NotificationCategory

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Preference(BaseModel):
    """Delivery preference for one (recipient, category) pair.

    A recipient without a stored row gets ``Preference.default(...)``:
    enabled, no DND.
    """

    recipient_id: str
    category: NotificationCategory
    enabled: bool = True
    dnd_enabled: bool = False
    dnd_start_time: str | None = None
    dnd_end_time: str | None = None
    dnd_days: list[int] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def default(cls, recipient_id: str, category: NotificationCategory) -> Preference:
        return cls(recipient_id=recipient_id, category=category)

    def apply(self, update: PreferenceUpdate) -> Preference:
        """Return a copy with every field set on ``update`` applied."""
        changes = update.model_dump(exclude_unset=True)
        # Flags are never cleared; an explicit null leaves them untouched.
        for flag in ("enabled", "dnd_enabled"):
            if changes.get(flag, False) is None:
                del changes[flag]
        if "dnd_days" in changes:
            changes["dnd_days"] = sorted(set(changes["dnd_days"] or []))
        changes["updated_at"] = _utcnow()
        return self.model_copy(update=changes)


class PreferenceUpdate(BaseModel):
    """Partial preference write. Only fields explicitly set are applied."""

    enabled: bool | None = None
    dnd_enabled: bool | None = None
    dnd_start_time: str | None = None
    dnd_end_time: str | None = None
    dnd_days: list[int] | None = None


class DNDSettings(BaseModel):
    """Do-Not-Disturb configuration applied across every category."""

    enabled: bool
    start_time: str | None = None
    end_time: str | None = None
    days: list[int] = Field(default_factory=list)

    def as_update(self) -> PreferenceUpdate:
        return PreferenceUpdate(
            dnd_enabled=self.enabled,
            dnd_start_time=self.start_time,
            dnd_end_time=self.end_time,
            dnd_days=self.days,
        )


def validate_time(value: str | None, field: str) -> None:
    if value is None:
        return
    if not isinstance(value, str) or not _TIME_RE.match(value):
        raise ValidationError(
            f"Invalid {field} {value!r}: expected HH:MM (00-23:00-59)", field=field
        )


def validate_days(days: list[int] | None) -> None:
    if not days:
        return
    bad = [d for d in days if not isinstance(d, int) or isinstance(d, bool) or not 0 <= d <= 6]
    if bad:
        raise ValidationError(
            f"Invalid dnd_days {bad}: use 0-6 (Sunday-Saturday)", field="dnd_days"
        )


def validate_update(update: PreferenceUpdate) -> None:
    """Raise ValidationError naming the first malformed field of ``update``."""
    validate_time(update.dnd_start_time, "dnd_start_time")
    validate_time(update.dnd_end_time, "dnd_end_time")
    validate_days(update.dnd_days)
