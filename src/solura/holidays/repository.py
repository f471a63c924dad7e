from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import DecisionStatus, PaymentType
from .model import HolidayRequest, HolidayYearWindow


class HolidayRepository(Protocol):
    def list_year_windows(self) -> Sequence[HolidayYearWindow]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[HolidayRequest]:
        raise NotImplementedError

    def list_pending(self) -> Sequence[HolidayRequest]:
        raise NotImplementedError

    def get(self, holiday_id: int) -> Optional[HolidayRequest]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        name: str,
        last_name: str,
        start_date: date,
        end_date: date,
        request_date: date,
        days: int,
        payment_type: PaymentType,
        notes: str,
    ) -> int:
        raise NotImplementedError

    def decide(
        self,
        *,
        holiday_id: int,
        status: DecisionStatus,
        who: str,
        notes: Optional[str] = None,
    ) -> bool:
        """Record the decision only if none was recorded yet.

        ``notes=None`` keeps the stored notes.
        """

        raise NotImplementedError
