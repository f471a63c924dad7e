"""Holiday-year accrual and request bucketing.

Pure functions: the service loads windows, allowance and requests, these turn
them into one ``AccrualBucket`` per configured holiday year.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import DecisionStatus, PaymentType
from .model import AccrualBucket, HolidayRequest, HolidayYearWindow

logger = logging.getLogger(__name__)


def accrued_days(allowance_days: float, window: HolidayYearWindow, today: date) -> float:
    """Pro-rata allowance earned by ``today``, counting both window ends inclusively."""
    allowance_days = max(0.0, float(allowance_days or 0))
    if today < window.start:
        return 0.0
    if today > window.end:
        return allowance_days

    elapsed = (today - window.start).days + 1
    return min(allowance_days, allowance_days * elapsed / window.total_days)


def find_window(windows: Iterable[HolidayYearWindow], day: date) -> Optional[HolidayYearWindow]:
    return next((w for w in windows if w.contains(day)), None)


def _add(bucket: AccrualBucket, request: HolidayRequest) -> None:
    days = float(request.days or 0)
    unpaid = request.payment_type == PaymentType.UNPAID

    if request.status == DecisionStatus.DECLINED:
        bucket.declined_days += days
        bucket.declined.append(request)
    elif request.status == DecisionStatus.APPROVED:
        if unpaid:
            bucket.taken_unpaid_days += days
        else:
            bucket.taken_paid_days += days
        bucket.approved.append(request)
    else:
        if unpaid:
            bucket.pending_unpaid_days += days
        else:
            bucket.pending_paid_days += days
        bucket.pending.append(request)


def build_buckets(
    *,
    allowance_days: float,
    windows: Sequence[HolidayYearWindow],
    requests: Iterable[HolidayRequest],
    today: date,
) -> list[AccrualBucket]:
    """One bucket per window, newest window first.

    Requests are placed by their start date; requests starting outside every
    configured window are dropped.
    """

    allowance_days = max(0.0, float(allowance_days or 0))
    buckets = {
        w.key: AccrualBucket(window=w, allowance_days=allowance_days, accrued_days=accrued_days(allowance_days, w, today))
        for w in windows
    }

    skipped = 0
    for request in requests:
        window = find_window(windows, request.start_date)
        if window is None:
            skipped += 1
            continue
        _add(buckets[window.key], request)

    if skipped:
        logger.debug("Ignored %d holiday requests outside every holiday year", skipped)

    return sorted(buckets.values(), key=lambda b: b.window.start, reverse=True)


def current_year_key(windows: Iterable[HolidayYearWindow], today: date) -> Optional[str]:
    window = find_window(windows, today)
    return window.key if window else None
