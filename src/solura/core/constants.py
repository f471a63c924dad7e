"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MINUTES_PER_DAY = 24 * 60

MAX_SHIFTS_PER_DAY = 2

SHIFT_ID_MIN = 10**15
SHIFT_ID_MAX = 10**16 - 1
SHIFT_ID_ATTEMPTS = 10

DAY_FORMAT = "%d/%m/%Y"
DEFAULT_PORT = 10000
