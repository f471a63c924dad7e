from __future__ import annotations

from datetime import date, timedelta

import pytest

from solura.core.enums import DecisionStatus, PaymentType
from solura.holidays.accrual import accrued_days, build_buckets, current_year_key
from solura.holidays.model import HolidayRequest, HolidayYearWindow

YEAR_2024 = HolidayYearWindow(date(2024, 1, 1), date(2024, 12, 31))
YEAR_2023 = HolidayYearWindow(date(2023, 1, 1), date(2023, 12, 31))


def holiday(hid, start, days, status=DecisionStatus.PENDING, payment=PaymentType.PAID):
    return HolidayRequest(
        holiday_id=hid,
        employee_id=1,
        name="Ann",
        last_name="Lee",
        start_date=start,
        end_date=start + timedelta(days=days - 1),
        request_date=start - timedelta(days=10),
        days=days,
        status=status,
        payment_type=payment,
        who="Maria Ruiz" if status != DecisionStatus.PENDING else "",
    )


def test_leap_year_window_has_366_days():
    assert YEAR_2024.total_days == 366
    assert YEAR_2024.key == "2024-01-01_2024-12-31"


def test_half_year_accrual():
    # 1 Jan .. 1 Jul inclusive is 183 days of 366.
    assert accrued_days(28, YEAR_2024, date(2024, 7, 1)) == pytest.approx(14.0)


def test_accrual_outside_the_window():
    assert accrued_days(28, YEAR_2024, date(2023, 12, 31)) == 0
    assert accrued_days(28, YEAR_2024, date(2025, 1, 1)) == 28
    assert accrued_days(28, YEAR_2024, date(2024, 12, 31)) == pytest.approx(28)
    assert accrued_days(28, YEAR_2024, date(2024, 1, 1)) == pytest.approx(28 / 366)


def test_accrual_is_monotonic_and_bounded():
    previous = 0.0
    day = date(2023, 12, 25)
    while day <= date(2025, 1, 5):
        current = accrued_days(28, YEAR_2024, day)
        assert previous <= current <= 28
        previous = current
        day += timedelta(days=1)


def test_zero_allowance_never_accrues():
    assert accrued_days(0, YEAR_2024, date(2024, 6, 1)) == 0


def test_buckets_split_by_status_and_payment():
    requests = [
        holiday(1, date(2024, 3, 4), 5, DecisionStatus.APPROVED),
        holiday(2, date(2024, 4, 8), 2, DecisionStatus.APPROVED, PaymentType.UNPAID),
        holiday(3, date(2024, 8, 5), 3),
        holiday(4, date(2024, 9, 2), 1, DecisionStatus.DECLINED),
        holiday(5, date(2023, 5, 1), 4, DecisionStatus.APPROVED),
        holiday(6, date(2022, 5, 1), 4, DecisionStatus.APPROVED),
    ]

    buckets = build_buckets(allowance_days=28, windows=[YEAR_2023, YEAR_2024], requests=requests, today=date(2024, 7, 1))

    assert [b.window.key for b in buckets] == [YEAR_2024.key, YEAR_2023.key]
    current, last = buckets

    assert current.taken_paid_days == 5
    assert current.taken_unpaid_days == 2
    assert current.pending_paid_days == 3
    assert current.declined_days == 1
    assert current.remaining_year_days == 23
    assert current.available_now_days == pytest.approx(9.0)
    assert [h.holiday_id for h in current.approved] == [1, 2]

    assert last.accrued_days == 28
    assert last.taken_paid_days == 4
    assert last.remaining_year_days == 24


def test_available_now_never_negative():
    requests = [holiday(1, date(2024, 1, 8), 10, DecisionStatus.APPROVED)]

    (bucket,) = build_buckets(allowance_days=28, windows=[YEAR_2024], requests=requests, today=date(2024, 1, 31))

    assert bucket.available_now_days == 0
    assert bucket.remaining_year_days == 18


def test_bucket_json_rounds_to_two_places():
    (bucket,) = build_buckets(allowance_days=28, windows=[YEAR_2024], requests=[], today=date(2024, 2, 10))

    data = bucket.to_dict()

    assert data["key"] == "2024-01-01_2024-12-31"
    assert data["accruedDays"] == round(28 * 41 / 366, 2)
    assert data["start"] == "01/01/2024"


def test_current_year_key():
    assert current_year_key([YEAR_2023, YEAR_2024], date(2024, 5, 5)) == YEAR_2024.key
    assert current_year_key([YEAR_2023, YEAR_2024], date(2025, 5, 5)) is None
