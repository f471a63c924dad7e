from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_day, weekday_label
from ..core.enums import DecisionStatus
from ..scheduling.interval import ShiftInterval


@dataclass(frozen=True)
class ShiftMeta:
    """Wage/designation overrides; ``None`` falls back to the employee record."""

    wage: Optional[float] = None
    designation: Optional[str] = None


@dataclass(frozen=True)
class Shift:
    """Domain entity: one rota row.

    ``name``/``last_name``/``wage``/``designation`` are copies taken from the
    employee record when the shift was saved; ownership is ``employee_id``.
    """

    shift_id: int
    employee_id: int
    name: str
    last_name: str
    work_date: date
    interval: ShiftInterval
    wage: float = 0.0
    designation: str = ""

    def with_interval(self, interval: ShiftInterval, meta: Optional[ShiftMeta] = None) -> "Shift":
        meta = meta or ShiftMeta()
        return replace(
            self,
            interval=interval,
            wage=self.wage if meta.wage is None else float(meta.wage),
            designation=self.designation if meta.designation is None else meta.designation,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.shift_id,
            "employeeId": self.employee_id,
            "name": self.name,
            "lastName": self.last_name,
            "day": format_day(self.work_date),
            "weekday": weekday_label(self.work_date),
            "startTime": self.interval.storage_start,
            "endTime": self.interval.storage_end,
            "overnight": self.interval.overnight,
            "wage": self.wage,
            "designation": self.designation,
        }


@dataclass(frozen=True)
class ShiftRequest:
    """A shift proposed by an employee, waiting for an approver."""

    request_id: int
    employee_id: int
    name: str
    last_name: str
    work_date: date
    interval: ShiftInterval
    wage: float = 0.0
    designation: str = ""
    status: DecisionStatus = DecisionStatus.PENDING
    decided_by: Optional[str] = None
    created_at: Optional[datetime] = None

    def as_shift(self, shift_id: int) -> Shift:
        return Shift(
            shift_id=int(shift_id),
            employee_id=self.employee_id,
            name=self.name,
            last_name=self.last_name,
            work_date=self.work_date,
            interval=self.interval,
            wage=self.wage,
            designation=self.designation,
        )

    def to_dict(self) -> dict:
        data = self.as_shift(self.request_id).to_dict()
        data.update(
            {
                "status": self.status.value,
                "decidedBy": self.decided_by or "",
                "createdAt": self.created_at.strftime("%Y-%m-%d %H:%M") if self.created_at else None,
            }
        )
        return data
