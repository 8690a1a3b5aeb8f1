"""Tests for Do-Not-Disturb window evaluation."""

from __future__ import annotations

import logging

import pytest

from herald.core.types import NotificationCategory
from herald.preferences.dnd import is_in_dnd_window, weekday_index
from herald.preferences.models import Preference

from tests.conftest import at


def _prefs(**kwargs) -> Preference:
    return Preference(
        recipient_id="user-1",
        category=NotificationCategory.SYSTEM,
        dnd_enabled=kwargs.pop("dnd_enabled", True),
        **kwargs,
    )


class TestWeekdayIndex:
    def test_sunday_is_zero(self) -> None:
        assert weekday_index(at("12:00", "2024-01-07")) == 0

    def test_saturday_is_six(self) -> None:
        assert weekday_index(at("12:00", "2024-01-06")) == 6

    def test_wednesday(self) -> None:
        assert weekday_index(at("12:00", "2024-01-03")) == 3


class TestDNDWindow:
    def test_disabled_is_never_in_window(self) -> None:
        prefs = _prefs(dnd_enabled=False, dnd_start_time="00:00", dnd_end_time="23:59")
        assert not is_in_dnd_window(prefs, at("12:00"))

    def test_same_day_window(self) -> None:
        prefs = _prefs(dnd_start_time="09:00", dnd_end_time="17:00")
        assert is_in_dnd_window(prefs, at("09:00"))
        assert is_in_dnd_window(prefs, at("16:59"))
        assert not is_in_dnd_window(prefs, at("17:00"))
        assert not is_in_dnd_window(prefs, at("08:59"))

    @pytest.mark.parametrize(
        ("moment", "expected"),
        [("23:30", True), ("22:00", True), ("03:00", True), ("07:59", True),
         ("08:00", False), ("09:00", False), ("21:59", False)],
    )
    def test_overnight_window_wraps(self, moment: str, expected: bool) -> None:
        prefs = _prefs(dnd_start_time="22:00", dnd_end_time="08:00")
        assert is_in_dnd_window(prefs, at(moment)) is expected

    def test_equal_bounds_cover_whole_day(self) -> None:
        prefs = _prefs(dnd_start_time="10:00", dnd_end_time="10:00")
        assert is_in_dnd_window(prefs, at("00:00"))
        assert is_in_dnd_window(prefs, at("23:59"))

    def test_missing_bounds_default_to_midnight(self) -> None:
        assert is_in_dnd_window(_prefs(), at("15:00"))
        prefs = _prefs(dnd_end_time="06:00")
        assert is_in_dnd_window(prefs, at("05:00"))
        assert not is_in_dnd_window(prefs, at("07:00"))

    def test_day_filter(self) -> None:
        # Saturday and Sunday only.
        prefs = _prefs(dnd_start_time="00:00", dnd_end_time="23:59", dnd_days=[0, 6])
        assert is_in_dnd_window(prefs, at("12:00", "2024-01-06"))
        assert is_in_dnd_window(prefs, at("12:00", "2024-01-07"))
        assert not is_in_dnd_window(prefs, at("12:00", "2024-01-03"))

    def test_empty_days_means_every_day(self) -> None:
        prefs = _prefs(dnd_start_time="00:00", dnd_end_time="23:59", dnd_days=[])
        for day in range(1, 8):
            assert is_in_dnd_window(prefs, at("12:00", f"2024-01-0{day}"))

    def test_malformed_time_is_outside_window(self, caplog) -> None:
        prefs = _prefs(dnd_start_time="25:99", dnd_end_time="08:00")
        with caplog.at_level(logging.WARNING, logger="herald.preferences.dnd"):
            assert not is_in_dnd_window(prefs, at("23:30"))
        assert "Malformed DND" in caplog.text

    def test_garbage_time_is_outside_window(self) -> None:
        prefs = _prefs(dnd_start_time="late", dnd_end_time="early")
        assert not is_in_dnd_window(prefs, at("23:30"))
