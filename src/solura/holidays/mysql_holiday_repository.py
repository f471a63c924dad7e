from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import DecisionStatus, PaymentType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, drop_unkeyed, fetchall, fetchone
from .model import HolidayRequest, HolidayYearWindow
from .repository import HolidayRepository

_HOLIDAY_COLUMNS = (
    "id, employee_id, name, lastName, start_date, end_date, request_date, days, status, payment_type, who, notes"
)


def _to_holiday(r: dict) -> HolidayRequest:
    return HolidayRequest(
        holiday_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        name=r["name"],
        last_name=r["lastName"],
        start_date=r["start_date"],
        end_date=r["end_date"],
        request_date=r["request_date"],
        days=int(r.get("days") or 0),
        status=DecisionStatus(r["status"]),
        payment_type=PaymentType(r["payment_type"]),
        who=r.get("who") or "",
        notes=r.get("notes") or "",
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_year_windows(self) -> Sequence[HolidayYearWindow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT start_date, end_date FROM holiday_years ORDER BY start_date DESC")
            return [HolidayYearWindow(start=r["start_date"], end=r["end_date"]) for r in fetchall(cur)]

    def list_for_employee(self, employee_id: int) -> Sequence[HolidayRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_HOLIDAY_COLUMNS} FROM Holiday WHERE employee_id=%s ORDER BY start_date",
                (int(employee_id),),
            )
            return [_to_holiday(r) for r in fetchall(cur)]

    def list_pending(self) -> Sequence[HolidayRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_HOLIDAY_COLUMNS}
                FROM Holiday
                WHERE status=%s AND employee_id IS NOT NULL
                ORDER BY request_date, id
                """,
                (DecisionStatus.PENDING.value,),
            )
            return [_to_holiday(r) for r in drop_unkeyed(fetchall(cur), "Holiday")]

    def get(self, holiday_id: int) -> Optional[HolidayRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_HOLIDAY_COLUMNS} FROM Holiday WHERE id=%s AND employee_id IS NOT NULL",
                (int(holiday_id),),
            )
            r = fetchone(cur)
            return _to_holiday(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO Holiday(
                    employee_id, name, lastName, start_date, end_date, request_date,
                    days, status, payment_type, who, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,'',%s)
                """,
                (
                    int(employee_id),
                    name,
                    last_name,
                    start_date,
                    end_date,
                    request_date,
                    int(days),
                    DecisionStatus.PENDING.value,
                    payment_type.value,
                    notes,
                ),
            )
            return int(cur.lastrowid)

    def decide(
        self,
        *,
        holiday_id: int,
        status: DecisionStatus,
        who: str,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE Holiday
                SET status=%s, who=%s, notes=COALESCE(%s, notes)
                WHERE id=%s AND (who IS NULL OR who='')
                """,
                (status.value, who, notes, int(holiday_id)),
            )
            return cur.rowcount > 0
