from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import format_day
from ..core.enums import DecisionStatus, NotificationType, PaymentType
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..users.model import Employee
from ..users.repository import EmployeeRepository
from ..users.service import PermissionService
from .accrual import build_buckets, current_year_key
from .model import HolidayRequest
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


class HolidayService:
    def __init__(
        self,
        holidays: HolidayRepository,
        employees: EmployeeRepository,
        *,
        permissions: Optional[PermissionService] = None,
        notifications: Optional[NotificationService] = None,
        tenant: str = "",
    ):
        self._holidays = holidays
        self._employees = employees
        self._permissions = permissions
        self._notifications = notifications
        self._tenant = tenant

    def compute_years(self, *, employee: Employee, today: date) -> dict:
        """Accrual and request buckets for every configured holiday year."""

        windows = self._holidays.list_year_windows()
        requests = self._holidays.list_for_employee(employee.employee_id)
        buckets = build_buckets(
            allowance_days=employee.allowance_days,
            windows=windows,
            requests=requests,
            today=today,
        )
        return {
            "employee": employee.to_dict() | {"allowanceDays": employee.allowance_days},
            "currentYearKey": current_year_key(windows, today),
            "years": [b.to_dict() for b in buckets],
        }

    def request_holiday(
        self,
        *,
        employee: Employee,
        start_date: date,
        end_date: date,
        payment_type: PaymentType = PaymentType.PAID,
        notes: str = "",
        today: date,
    ) -> int:
        if end_date < start_date:
            raise ValidationError("End date must not be before start date")

        days = (end_date - start_date).days + 1
        holiday_id = self._holidays.create(
            employee_id=employee.employee_id,
            name=employee.name,
            last_name=employee.last_name,
            start_date=start_date,
            end_date=end_date,
            request_date=today,
            days=days,
            payment_type=payment_type,
            notes=str(notes or "").strip(),
        )
        logger.info(
            "Holiday %d requested by employee %d: %s..%s (%d days, %s)",
            holiday_id,
            employee.employee_id,
            start_date,
            end_date,
            days,
            payment_type.value,
        )

        if self._notifications:
            self._notifications.emit(
                target_role="manager",
                title="Holiday request",
                message=(
                    f"{employee.full_name} requested {days} {payment_type.value} day(s) "
                    f"from {format_day(start_date)} to {format_day(end_date)}"
                ),
                type=NotificationType.HOLIDAY_REQUEST,
            )
        return holiday_id

    def pending_holidays(self) -> Sequence[HolidayRequest]:
        return self._holidays.list_pending()

    def decide(self, *, actor_email: str, holiday_id: int, approve: bool, reason: str = "") -> HolidayRequest:
        if not self._permissions or not self._permissions.is_approver(actor_email, self._tenant):
            raise AuthorizationError("You are not allowed to decide holidays")

        holiday = self._holidays.get(int(holiday_id))
        if not holiday:
            raise NotFoundError("Holiday request not found")
        if holiday.decided:
            raise ConflictError("Holiday already decided")

        approver = self._employees.get_by_email(actor_email)
        who = approver.full_name if approver else actor_email
        status = DecisionStatus.APPROVED if approve else DecisionStatus.DECLINED
        reason = str(reason or "").strip()
        notes = reason if (reason and not approve) else None

        # The update is conditional on who being empty; losing a race surfaces as a conflict.
        if not self._holidays.decide(holiday_id=holiday.holiday_id, status=status, who=who, notes=notes):
            raise ConflictError("Holiday already decided")

        decided = replace(holiday, status=status, who=who, notes=holiday.notes if notes is None else notes)
        logger.info("Holiday %d %s by %s", decided.holiday_id, status.value, who)

        if self._notifications:
            owner = self._employees.get_by_id(holiday.employee_id)
            message = (
                f"Your holiday from {format_day(holiday.start_date)} to {format_day(holiday.end_date)} "
                f"was {status.value}"
            )
            if notes:
                message += f": {notes}"
            self._notifications.emit(
                target_role="employee",
                target_email=owner.email if owner else None,
                title="Holiday decision",
                message=message,
                type=NotificationType.HOLIDAY_DECISION,
            )
        return decided
