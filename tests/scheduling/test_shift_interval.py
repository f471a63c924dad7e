from __future__ import annotations

from datetime import time

import pytest

from solura.core.exceptions import ValidationError
from solura.scheduling.interval import ShiftInterval, parse_hhmm


def test_parse_hhmm_accepts_single_digit_hour():
    assert parse_hhmm("9:05") == 9 * 60 + 5
    assert parse_hhmm("23:59") == 1439
    assert parse_hhmm(" 00:00 ") == 0


@pytest.mark.parametrize("value", ["24:00", "9:5", "12:60", "", "noon", "12-30"])
def test_parse_hhmm_rejects_malformed_times(value):
    with pytest.raises(ValidationError):
        parse_hhmm(value)


def test_day_shift_is_not_overnight():
    interval = ShiftInterval.parse("09:00", "17:30")

    assert not interval.overnight
    assert interval.span == (540, 1050)
    assert interval.duration_minutes == 510
    assert interval.storage_start == "09:00:00"
    assert interval.storage_end == "17:30:00"
    assert str(interval) == "09:00-17:30"


def test_shift_ending_after_midnight_wraps():
    interval = ShiftInterval.parse("22:00", "02:00")

    assert interval.overnight
    assert interval.span == (1320, 1560)
    assert interval.duration_minutes == 240


def test_start_equal_to_end_is_rejected():
    with pytest.raises(ValidationError):
        ShiftInterval.parse("10:00", "10:00")


def test_from_times_drops_seconds():
    interval = ShiftInterval.from_times(time(9, 0, 30), time(13, 0, 59))
    assert interval == ShiftInterval(540, 780)


@pytest.mark.parametrize("start,end", [("09:00", "13:00"), ("22:30", "06:15"), ("0:00", "23:59")])
def test_display_form_parses_back_to_same_interval(start, end):
    interval = ShiftInterval.parse(start, end)
    assert ShiftInterval.parse(interval.display_start, interval.display_end) == interval
