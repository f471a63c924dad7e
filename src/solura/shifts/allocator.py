from __future__ import annotations

import logging
import random
from typing import Callable, Optional

from ..core.constants import SHIFT_ID_ATTEMPTS, SHIFT_ID_MAX, SHIFT_ID_MIN
from ..core.exceptions import AllocationExhaustedError

logger = logging.getLogger(__name__)


class ShiftIdAllocator:
    """Random 16-digit shift ids, probed against existing rows before use.

    The probe only narrows the odds; the primary key on insert stays the
    authoritative guard against two callers picking the same id.
    """

    def __init__(self, *, rng: Optional[random.Random] = None, attempts: int = SHIFT_ID_ATTEMPTS):
        self._rng = rng or random.SystemRandom()
        self.attempts = int(attempts)

    def candidate(self) -> int:
        return self._rng.randint(SHIFT_ID_MIN, SHIFT_ID_MAX)

    def allocate(self, in_use: Callable[[int], bool]) -> int:
        for attempt in range(1, self.attempts + 1):
            candidate = self.candidate()
            if not in_use(candidate):
                return candidate
            logger.warning("Shift id %d already taken (attempt %d/%d)", candidate, attempt, self.attempts)

        raise AllocationExhaustedError("Could not generate unique shift code")
