"""Do-Not-Disturb window evaluation."""

from __future__ import annotations

import logging
from datetime import datetime

from herald.preferences.models import Preference

logger = logging.getLogger(__name__)

_MIDNIGHT = "00:00"


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    h, m = int(hours), int(minutes)
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise ValueError(f"out of range time {hhmm!r}")
    return h * 60 + m


def weekday_index(moment: datetime) -> int:
    """Weekday with Sunday as 0 and Saturday as 6."""
    return (moment.weekday() + 1) % 7


def is_in_dnd_window(prefs: Preference, now: datetime) -> bool:
    """Return True when ``now`` falls inside the recipient's DND window.

    The window is [start, end). A start later than end wraps past midnight,
    and start == end covers the whole day. An empty ``dnd_days`` means every
    day. Malformed stored values yield False.
    """
    try:
        if not prefs.dnd_enabled:
            return False

        days = prefs.dnd_days or []
        if days and weekday_index(now) not in days:
            return False

        start = _minutes(prefs.dnd_start_time or _MIDNIGHT)
        end = _minutes(prefs.dnd_end_time or _MIDNIGHT)
        current = now.hour * 60 + now.minute

        if start == end:
            return True
        if start < end:
            return start <= current < end
        return current >= start or current < end
    except (AttributeError, TypeError, ValueError) as exc:
        logger.warning("Malformed DND settings, treating as outside window: %s", exc)
        return False
