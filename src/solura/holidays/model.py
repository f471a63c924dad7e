from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..common.datetime_utils import format_day
from ..core.enums import DecisionStatus, PaymentType

# Legacy single-column encoding of (status, payment type).
LEGACY_DECLINED = "false"
LEGACY_APPROVED = "true"
LEGACY_UNPAID = "unpaid"


@dataclass(frozen=True)
class HolidayYearWindow:
    """One configured holiday year, inclusive on both ends."""

    start: date
    end: date

    @property
    def key(self) -> str:
        return f"{self.start.isoformat()}_{self.end.isoformat()}"

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class HolidayRequest:
    """Domain entity: a holiday request and its (single) decision."""

    holiday_id: int
    employee_id: int
    name: str
    last_name: str
    start_date: date
    end_date: date
    request_date: date
    days: int
    status: DecisionStatus = DecisionStatus.PENDING
    payment_type: PaymentType = PaymentType.PAID
    who: str = ""
    notes: str = ""

    @property
    def decided(self) -> bool:
        return bool((self.who or "").strip())

    @staticmethod
    def from_legacy(accepted: Optional[str], who: Optional[str]) -> tuple[DecisionStatus, PaymentType]:
        """Decode the legacy ``accepted`` string ("", "unpaid", "true", "false") plus ``who``."""
        accepted = (accepted or "").strip().lower()
        payment = PaymentType.UNPAID if accepted == LEGACY_UNPAID else PaymentType.PAID
        if accepted == LEGACY_DECLINED:
            return DecisionStatus.DECLINED, payment
        if (who or "").strip():
            return DecisionStatus.APPROVED, payment
        return DecisionStatus.PENDING, payment

    @property
    def legacy_accepted(self) -> str:
        if self.status == DecisionStatus.DECLINED:
            return LEGACY_DECLINED
        if self.payment_type == PaymentType.UNPAID:
            return LEGACY_UNPAID
        if self.status == DecisionStatus.APPROVED:
            return LEGACY_APPROVED
        return ""

    def to_dict(self) -> dict:
        return {
            "id": self.holiday_id,
            "employeeId": self.employee_id,
            "name": self.name,
            "lastName": self.last_name,
            "startDate": format_day(self.start_date),
            "endDate": format_day(self.end_date),
            "requestDate": format_day(self.request_date),
            "days": self.days,
            "status": self.status.value,
            "paymentType": self.payment_type.value,
            "accepted": self.legacy_accepted,
            "who": self.who,
            "notes": self.notes,
        }


@dataclass
class AccrualBucket:
    """Per holiday year aggregate for one employee (derived, never stored)."""

    window: HolidayYearWindow
    allowance_days: float
    accrued_days: float = 0.0
    taken_paid_days: float = 0.0
    taken_unpaid_days: float = 0.0
    pending_paid_days: float = 0.0
    pending_unpaid_days: float = 0.0
    declined_days: float = 0.0
    approved: list[HolidayRequest] = field(default_factory=list)
    pending: list[HolidayRequest] = field(default_factory=list)
    declined: list[HolidayRequest] = field(default_factory=list)

    @property
    def remaining_year_days(self) -> float:
        return max(0.0, self.allowance_days - self.taken_paid_days)

    @property
    def available_now_days(self) -> float:
        # Unpaid leave never consumes allowance.
        return max(0.0, min(self.accrued_days, self.allowance_days) - self.taken_paid_days)

    def to_dict(self) -> dict:
        return {
            "key": self.window.key,
            "start": format_day(self.window.start),
            "end": format_day(self.window.end),
            "allowanceDays": self.allowance_days,
            "accruedDays": round(self.accrued_days, 2),
            "takenPaidDays": self.taken_paid_days,
            "takenUnpaidDays": self.taken_unpaid_days,
            "pendingPaidDays": self.pending_paid_days,
            "pendingUnpaidDays": self.pending_unpaid_days,
            "declinedDays": self.declined_days,
            "remainingYearDays": round(self.remaining_year_days, 2),
            "availableNowDays": round(self.available_now_days, 2),
            "approved": [r.to_dict() for r in self.approved],
            "pending": [r.to_dict() for r in self.pending],
            "declined": [r.to_dict() for r in self.declined],
        }
