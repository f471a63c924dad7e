from __future__ import annotations

from datetime import date

import pytest

from solura.core.enums import DecisionStatus, NotificationType, PaymentType
from solura.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError

TODAY = date(2024, 7, 1)


def test_request_counts_days_inclusively(holiday_service, holiday_store, notifications, ann):
    holiday_id = holiday_service.request_holiday(
        employee=ann,
        start_date=date(2024, 8, 5),
        end_date=date(2024, 8, 9),
        notes="  family trip ",
        today=TODAY,
    )

    stored = holiday_store.get(holiday_id)
    assert stored.days == 5
    assert stored.status == DecisionStatus.PENDING
    assert stored.payment_type == PaymentType.PAID
    assert stored.request_date == TODAY
    assert stored.notes == "family trip"

    sent = notifications.sent[-1]
    assert sent.target_role == "manager"
    assert sent.type == NotificationType.HOLIDAY_REQUEST


def test_single_day_request(holiday_service, holiday_store, ann):
    holiday_id = holiday_service.request_holiday(
        employee=ann, start_date=date(2024, 8, 5), end_date=date(2024, 8, 5), today=TODAY
    )
    assert holiday_store.get(holiday_id).days == 1


def test_end_before_start_is_rejected(holiday_service, ann):
    with pytest.raises(ValidationError):
        holiday_service.request_holiday(
            employee=ann, start_date=date(2024, 8, 9), end_date=date(2024, 8, 5), today=TODAY
        )


def test_decline_with_reason_then_second_decision_conflicts(holiday_service, holiday_store, notifications, ann):
    holiday_id = holiday_service.request_holiday(
        employee=ann, start_date=date(2024, 8, 5), end_date=date(2024, 8, 9), today=TODAY
    )

    decided = holiday_service.decide(
        actor_email="maria@solura.test", holiday_id=holiday_id, approve=False, reason="short staffed"
    )

    assert decided.status == DecisionStatus.DECLINED
    assert decided.who == "Maria Ruiz"
    assert decided.notes == "short staffed"
    assert holiday_store.get(holiday_id).notes == "short staffed"

    sent = notifications.sent[-1]
    assert sent.target_email == "ann@solura.test"
    assert sent.type == NotificationType.HOLIDAY_DECISION
    assert "short staffed" in sent.message

    with pytest.raises(ConflictError, match="Holiday already decided"):
        holiday_service.decide(actor_email="maria@solura.test", holiday_id=holiday_id, approve=True)


def test_approve_keeps_payment_type_and_notes(holiday_service, holiday_store, ann):
    holiday_id = holiday_service.request_holiday(
        employee=ann,
        start_date=date(2024, 8, 5),
        end_date=date(2024, 8, 6),
        payment_type=PaymentType.UNPAID,
        notes="moving house",
        today=TODAY,
    )

    decided = holiday_service.decide(actor_email="maria@solura.test", holiday_id=holiday_id, approve=True, reason="ok")

    assert decided.status == DecisionStatus.APPROVED
    assert decided.payment_type == PaymentType.UNPAID
    assert decided.notes == "moving house"
    assert decided.legacy_accepted == "unpaid"


def test_approver_without_employee_row_is_recorded_by_email(holiday_service, ann):
    holiday_id = holiday_service.request_holiday(
        employee=ann, start_date=date(2024, 8, 5), end_date=date(2024, 8, 6), today=TODAY
    )

    decided = holiday_service.decide(actor_email="boss@solura.test", holiday_id=holiday_id, approve=True)

    assert decided.who == "boss@solura.test"


def test_decide_requires_approver(holiday_service, ann):
    holiday_id = holiday_service.request_holiday(
        employee=ann, start_date=date(2024, 8, 5), end_date=date(2024, 8, 6), today=TODAY
    )

    with pytest.raises(AuthorizationError):
        holiday_service.decide(actor_email="bob@solura.test", holiday_id=holiday_id, approve=True)
    with pytest.raises(AuthorizationError):
        holiday_service.decide(actor_email="stranger@solura.test", holiday_id=holiday_id, approve=True)


def test_decide_unknown_holiday(holiday_service):
    with pytest.raises(NotFoundError):
        holiday_service.decide(actor_email="maria@solura.test", holiday_id=999, approve=True)


def test_pending_lists_only_undecided(holiday_service, ann, bob):
    first = holiday_service.request_holiday(
        employee=ann, start_date=date(2024, 8, 5), end_date=date(2024, 8, 6), today=TODAY
    )
    second = holiday_service.request_holiday(
        employee=bob, start_date=date(2024, 9, 2), end_date=date(2024, 9, 3), today=TODAY
    )
    holiday_service.decide(actor_email="maria@solura.test", holiday_id=first, approve=True)

    assert [h.holiday_id for h in holiday_service.pending_holidays()] == [second]


def test_compute_years_summary(holiday_service, ann):
    holiday_id = holiday_service.request_holiday(
        employee=ann, start_date=date(2024, 3, 4), end_date=date(2024, 3, 8), today=date(2024, 2, 1)
    )
    holiday_service.decide(actor_email="maria@solura.test", holiday_id=holiday_id, approve=True)

    summary = holiday_service.compute_years(employee=ann, today=TODAY)

    assert summary["currentYearKey"] == "2024-01-01_2024-12-31"
    assert summary["employee"]["allowanceDays"] == 28
    current = summary["years"][0]
    assert current["key"] == "2024-01-01_2024-12-31"
    assert current["takenPaidDays"] == 5
    assert current["availableNowDays"] == 9.0
    assert current["approved"][0]["who"] == "Maria Ruiz"
    assert summary["years"][1]["accruedDays"] == 28
