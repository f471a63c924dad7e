from __future__ import annotations

import logging
import random

import pytest

from solura.core.constants import SHIFT_ID_MAX, SHIFT_ID_MIN
from solura.core.exceptions import AllocationExhaustedError
from solura.shifts.allocator import ShiftIdAllocator


class ScriptedRandom:
    def __init__(self, values):
        self._values = iter(values)
        self.calls = 0

    def randint(self, low, high):
        self.calls += 1
        return next(self._values)


def test_candidates_are_sixteen_digit_ids():
    allocator = ShiftIdAllocator(rng=random.Random(7))
    for _ in range(50):
        candidate = allocator.candidate()
        assert SHIFT_ID_MIN <= candidate <= SHIFT_ID_MAX
        assert len(str(candidate)) == 16


def test_allocate_skips_taken_ids(caplog):
    taken = 1_000_000_000_000_001
    free = 1_000_000_000_000_002
    allocator = ShiftIdAllocator(rng=ScriptedRandom([taken, free]))

    with caplog.at_level(logging.WARNING):
        assert allocator.allocate(lambda c: c == taken) == free

    assert "already taken" in caplog.text


def test_allocate_gives_up_after_budget():
    rng = ScriptedRandom([SHIFT_ID_MIN] * 20)
    allocator = ShiftIdAllocator(rng=rng, attempts=10)

    with pytest.raises(AllocationExhaustedError, match="Could not generate unique shift code"):
        allocator.allocate(lambda c: True)

    assert rng.calls == 10
