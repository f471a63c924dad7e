"""Overlap checks between shifts booked on the same day label.

Both intervals are laid out on a 48h line (wrapping shifts extend past 1440),
then compared as-is and with one side moved a full day either way. That catches
a wrapping shift running into an early-morning shift while leaving late-evening
and early-morning shifts that never meet apart. Touching ends are not overlaps.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, TypeVar

from ..core.constants import MINUTES_PER_DAY
from .interval import ShiftInterval

_DAY_OFFSETS = (0, MINUTES_PER_DAY, -MINUTES_PER_DAY)


class HasInterval(Protocol):
    shift_id: int
    interval: ShiftInterval


T = TypeVar("T", bound=HasInterval)


def overlaps(a: ShiftInterval, b: ShiftInterval) -> bool:
    a_start, a_end = a.span
    b_start, b_end = b.span
    return any(a_start < b_end + k and b_start + k < a_end for k in _DAY_OFFSETS)


def conflicts(candidate: ShiftInterval, existing: Iterable[ShiftInterval]) -> bool:
    return any(overlaps(candidate, other) for other in existing)


def find_conflict(candidate: ShiftInterval, shifts: Iterable[T], *, exclude_id: Optional[int] = None) -> Optional[T]:
    """First shift whose interval overlaps ``candidate``, ignoring ``exclude_id`` (the row being updated)."""
    for shift in shifts:
        if exclude_id is not None and int(shift.shift_id) == int(exclude_id):
            continue
        if overlaps(candidate, shift.interval):
            return shift
    return None
