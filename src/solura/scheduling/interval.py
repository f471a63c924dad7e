"""Time-of-day intervals for rota shifts.

A time of day is held as minutes since midnight (0..1439). A shift interval is
half-open, ``[start, end)``; when ``end <= start`` the shift runs past midnight
into the next day.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import time

from ..core.constants import MINUTES_PER_DAY
from ..core.exceptions import ValidationError

_HHMM_RE = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")


def parse_hhmm(value: str, field_name: str = "time") -> int:
    """Parse ``HH:mm`` (hour may be a single digit) into minutes since midnight."""
    match = _HHMM_RE.match(str(value or "").strip())
    if not match:
        raise ValidationError(f"{field_name} must be in HH:mm format")
    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_from_time(value: time) -> int:
    # Seconds are not part of the canonical form.
    return value.hour * 60 + value.minute


def format_storage(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}:00"


def format_display(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class ShiftInterval:
    start_minutes: int
    end_minutes: int

    def __post_init__(self) -> None:
        for name, value in (("start", self.start_minutes), ("end", self.end_minutes)):
            if not 0 <= int(value) < MINUTES_PER_DAY:
                raise ValidationError(f"{name} time out of range")
        if self.start_minutes == self.end_minutes:
            raise ValidationError("Start time and end time must differ")

    @classmethod
    def parse(cls, start: str, end: str) -> "ShiftInterval":
        return cls(parse_hhmm(start, "startTime"), parse_hhmm(end, "endTime"))

    @classmethod
    def from_times(cls, start: time, end: time) -> "ShiftInterval":
        return cls(minutes_from_time(start), minutes_from_time(end))

    @property
    def overnight(self) -> bool:
        return self.end_minutes <= self.start_minutes

    @property
    def span(self) -> tuple[int, int]:
        """Start/end on a linear 48h timeline; wrapping shifts end past 1440."""
        end = self.end_minutes + MINUTES_PER_DAY if self.overnight else self.end_minutes
        return self.start_minutes, end

    @property
    def duration_minutes(self) -> int:
        start, end = self.span
        return end - start

    @property
    def storage_start(self) -> str:
        return format_storage(self.start_minutes)

    @property
    def storage_end(self) -> str:
        return format_storage(self.end_minutes)

    @property
    def display_start(self) -> str:
        return format_display(self.start_minutes)

    @property
    def display_end(self) -> str:
        return format_display(self.end_minutes)

    def __str__(self) -> str:
        return f"{self.display_start}-{self.display_end}"
