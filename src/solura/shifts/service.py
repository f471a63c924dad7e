from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional, Sequence, TypeVar

from ..common.datetime_utils import format_day, week_bounds
from ..core.constants import MAX_SHIFTS_PER_DAY
from ..core.enums import DecisionStatus, NotificationType
from ..core.exceptions import (
    AllocationExhaustedError,
    AuthorizationError,
    ConflictError,
    DuplicateKeyError,
    NotFoundError,
    ValidationError,
)
from ..notifications.service import NotificationService
from ..scheduling.interval import ShiftInterval
from ..scheduling.overlap import find_conflict
from ..users.model import Employee
from ..users.service import PermissionService
from .allocator import ShiftIdAllocator
from .model import Shift, ShiftMeta, ShiftRequest
from .repository import ShiftRepository, ShiftSession

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ShiftRegistry:
    """Use cases for the rota: add/replace/update/delete shifts and shift requests.

    Every write runs in one repository session that first locks the employee,
    so the count check, the overlap check and the write see the same rows.
    """

    def __init__(
        self,
        shifts: ShiftRepository,
        *,
        allocator: Optional[ShiftIdAllocator] = None,
        permissions: Optional[PermissionService] = None,
        notifications: Optional[NotificationService] = None,
        tenant: str = "",
        max_per_day: int = MAX_SHIFTS_PER_DAY,
    ):
        self._shifts = shifts
        self._allocator = allocator or ShiftIdAllocator()
        self._permissions = permissions
        self._notifications = notifications
        self._tenant = tenant
        self._max_per_day = int(max_per_day)

    # -------- helpers --------
    def _in_session(self, work: Callable[[ShiftSession], T]) -> T:
        # A duplicate id on insert means another request took it after our probe; draw again.
        for attempt in range(1, self._allocator.attempts + 1):
            try:
                with self._shifts.session() as session:
                    return work(session)
            except DuplicateKeyError:
                logger.warning("Shift id collided on insert (attempt %d/%d)", attempt, self._allocator.attempts)
        raise AllocationExhaustedError("Could not generate unique shift code")

    @staticmethod
    def _build(employee: Employee, day: date, interval: ShiftInterval, meta: Optional[ShiftMeta], shift_id: int) -> Shift:
        meta = meta or ShiftMeta()
        return Shift(
            shift_id=int(shift_id),
            employee_id=employee.employee_id,
            name=employee.name,
            last_name=employee.last_name,
            work_date=day,
            interval=interval,
            wage=employee.wage if meta.wage is None else float(meta.wage),
            designation=employee.designation if meta.designation is None else meta.designation,
        )

    def _check_slot(self, interval: ShiftInterval, existing: Sequence[Shift]) -> None:
        if len(existing) >= self._max_per_day:
            raise ConflictError(f"Maximum {self._max_per_day} shifts per day already exist")

        clash = find_conflict(interval, existing)
        if clash:
            raise ConflictError(f"New shift overlaps with existing shift {clash.interval}")

    def _require_approver(self, actor_email: str) -> None:
        if not self._permissions or not self._permissions.is_approver(actor_email, self._tenant):
            raise AuthorizationError("You are not allowed to decide shift requests")

    # -------- rota writes --------
    def add_shift(
        self,
        *,
        employee: Employee,
        day: date,
        interval: ShiftInterval,
        meta: Optional[ShiftMeta] = None,
    ) -> int:
        """Add one more shift for the day (e.g. after a break)."""

        def work(session: ShiftSession) -> Shift:
            existing = session.lock_employee_day(employee_id=employee.employee_id, work_date=day)
            self._check_slot(interval, existing)

            shift = self._build(employee, day, interval, meta, self._allocator.allocate(session.id_in_use))
            session.insert(shift)
            return shift

        shift = self._in_session(work)
        logger.info("Added shift %d (%s) for employee %d on %s", shift.shift_id, interval, employee.employee_id, format_day(day))
        return shift.shift_id

    def save_shift(
        self,
        *,
        employee: Employee,
        day: date,
        interval: ShiftInterval,
        meta: Optional[ShiftMeta] = None,
    ) -> int:
        """Replace every shift of the employee on ``day`` with this one, atomically."""

        def work(session: ShiftSession) -> tuple[Shift, int]:
            session.lock_employee_day(employee_id=employee.employee_id, work_date=day)
            removed = session.delete_day(employee_id=employee.employee_id, work_date=day)

            shift = self._build(employee, day, interval, meta, self._allocator.allocate(session.id_in_use))
            session.insert(shift)
            return shift, removed

        shift, removed = self._in_session(work)
        logger.info(
            "Saved shift %d (%s) for employee %d on %s, replaced %d",
            shift.shift_id,
            interval,
            employee.employee_id,
            format_day(day),
            removed,
        )
        return shift.shift_id

    def update_shift(self, *, shift_id: int, interval: ShiftInterval, meta: Optional[ShiftMeta] = None) -> Shift:
        with self._shifts.session() as session:
            current = session.get(int(shift_id))
            if not current:
                raise NotFoundError("Shift not found")

            existing = session.lock_employee_day(employee_id=current.employee_id, work_date=current.work_date)
            target = next((s for s in existing if s.shift_id == int(shift_id)), None)
            if not target:
                raise NotFoundError("Shift not found")

            clash = find_conflict(interval, existing, exclude_id=target.shift_id)
            if clash:
                raise ConflictError(f"Shift overlaps with existing shift {clash.interval}")

            updated = target.with_interval(interval, meta)
            session.update(updated)

        logger.info("Updated shift %d to %s", updated.shift_id, interval)
        return updated

    def delete_shift(self, *, shift_id: int) -> None:
        with self._shifts.session() as session:
            if not session.delete(int(shift_id)):
                raise NotFoundError("Shift not found")
        logger.info("Deleted shift %d", int(shift_id))

    # -------- rota reads --------
    def today_shifts(self, *, employee: Employee, today: date) -> Sequence[Shift]:
        return self._shifts.list_for_employee_range(employee_id=employee.employee_id, start=today, end=today)

    def week_rota(self, *, employee: Employee, today: date) -> Sequence[Shift]:
        start, end = week_bounds(today)
        return self._shifts.list_for_employee_range(employee_id=employee.employee_id, start=start, end=end)

    def confirmed_rota(self, *, employee: Employee, month: Optional[int] = None, year: Optional[int] = None) -> Sequence[Shift]:
        if (month is None) != (year is None):
            raise ValidationError("month and year must be given together")
        if month is not None and not 1 <= int(month) <= 12:
            raise ValidationError("month must be between 1 and 12")
        return self._shifts.list_confirmed(employee_id=employee.employee_id, month=month, year=year)

    def all_rota(self, *, start: date, end: date) -> Sequence[Shift]:
        if end < start:
            raise ValidationError("end must not be before start")
        return self._shifts.list_range(start=start, end=end)

    # -------- shift requests --------
    def request_shift(
        self,
        *,
        employee: Employee,
        day: date,
        interval: ShiftInterval,
        meta: Optional[ShiftMeta] = None,
    ) -> int:
        def work(session: ShiftSession) -> ShiftRequest:
            shift = self._build(employee, day, interval, meta, self._allocator.allocate(session.id_in_use))
            request = ShiftRequest(
                request_id=shift.shift_id,
                employee_id=shift.employee_id,
                name=shift.name,
                last_name=shift.last_name,
                work_date=shift.work_date,
                interval=shift.interval,
                wage=shift.wage,
                designation=shift.designation,
            )
            session.insert_request(request)
            return request

        request = self._in_session(work)
        logger.info("Shift request %d (%s) from employee %d", request.request_id, interval, employee.employee_id)

        if self._notifications:
            self._notifications.emit(
                target_role="manager",
                title="Shift request",
                message=f"{employee.full_name} asked to work {format_day(day)} {interval}",
                type=NotificationType.SHIFT_REQUEST,
            )
        return request.request_id

    def pending_requests(self) -> Sequence[ShiftRequest]:
        return self._shifts.list_requests(status=DecisionStatus.PENDING)

    def accept_request(self, *, actor_email: str, request_id: int) -> int:
        """Move a pending request into the rota under the same rules as ``add_shift``."""

        self._require_approver(actor_email)

        def work(session: ShiftSession) -> Shift:
            request = session.get_request(int(request_id))
            if not request:
                raise NotFoundError("Shift request not found")

            existing = session.lock_employee_day(employee_id=request.employee_id, work_date=request.work_date)
            request = session.get_request(int(request_id), for_update=True)
            if not request:
                raise NotFoundError("Shift request not found")
            if request.status != DecisionStatus.PENDING:
                raise ConflictError("Shift request already decided")

            self._check_slot(request.interval, existing)

            shift = request.as_shift(self._allocator.allocate(session.id_in_use))
            session.insert(shift)
            session.decide_request(request_id=request.request_id, status=DecisionStatus.APPROVED, decided_by=actor_email)
            return shift

        shift = self._in_session(work)
        logger.info("Shift request %d accepted by %s as shift %d", int(request_id), actor_email, shift.shift_id)
        return shift.shift_id

    def decline_request(self, *, actor_email: str, request_id: int) -> None:
        self._require_approver(actor_email)

        with self._shifts.session() as session:
            if not session.decide_request(request_id=int(request_id), status=DecisionStatus.DECLINED, decided_by=actor_email):
                if not session.get_request(int(request_id)):
                    raise NotFoundError("Shift request not found")
                raise ConflictError("Shift request already decided")

        logger.info("Shift request %d declined by %s", int(request_id), actor_email)
