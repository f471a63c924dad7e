from __future__ import annotations

from datetime import date
from typing import ContextManager, Optional, Protocol, Sequence

from ..core.enums import DecisionStatus
from .model import Shift, ShiftRequest


class ShiftSession(Protocol):
    """Unit of work over the rota and shift request tables.

    Everything done through one session commits or rolls back together.
    Writers lock the employee row first (``lock_employee_day``) so that the
    read-validate-write span for an employee/day is serialized.
    """

    def lock_employee_day(self, *, employee_id: int, work_date: date) -> Sequence[Shift]:
        """Lock the employee and return that day's rota rows (also locked)."""

        raise NotImplementedError

    def get(self, shift_id: int) -> Optional[Shift]:
        raise NotImplementedError

    def id_in_use(self, candidate_id: int) -> bool:
        """True when the id exists in the rota or the shift request table."""

        raise NotImplementedError

    def insert(self, shift: Shift) -> None:
        raise NotImplementedError

    def update(self, shift: Shift) -> None:
        raise NotImplementedError

    def delete(self, shift_id: int) -> bool:
        raise NotImplementedError

    def delete_day(self, *, employee_id: int, work_date: date) -> int:
        raise NotImplementedError

    def get_request(self, request_id: int, *, for_update: bool = False) -> Optional[ShiftRequest]:
        raise NotImplementedError

    def insert_request(self, request: ShiftRequest) -> None:
        raise NotImplementedError

    def decide_request(self, *, request_id: int, status: DecisionStatus, decided_by: str) -> bool:
        """Set the decision only while the request is still pending."""

        raise NotImplementedError


class ShiftRepository(Protocol):
    def session(self) -> ContextManager[ShiftSession]:
        raise NotImplementedError

    def list_for_employee_range(self, *, employee_id: int, start: date, end: date) -> Sequence[Shift]:
        raise NotImplementedError

    def list_range(self, *, start: date, end: date) -> Sequence[Shift]:
        raise NotImplementedError

    def list_confirmed(
        self,
        *,
        employee_id: int,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[Shift]:
        raise NotImplementedError

    def list_requests(self, *, status: Optional[DecisionStatus] = None) -> Sequence[ShiftRequest]:
        raise NotImplementedError
