from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from typing import Iterator, Optional, Sequence

from ..core.enums import DecisionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, drop_unkeyed, fetchall, fetchone, normalize_mysql_time
from ..scheduling.interval import ShiftInterval
from .model import Shift, ShiftRequest
from .repository import ShiftRepository, ShiftSession

_SHIFT_COLUMNS = "id, employee_id, name, lastName, work_date, startTime, endTime, wage, designation"
_REQUEST_COLUMNS = f"{_SHIFT_COLUMNS}, status, decided_by, created_at"


def _to_shift(r: dict) -> Shift:
    return Shift(
        shift_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        name=r["name"],
        last_name=r["lastName"],
        work_date=r["work_date"],
        interval=ShiftInterval.from_times(normalize_mysql_time(r["startTime"]), normalize_mysql_time(r["endTime"])),
        wage=float(r.get("wage") or 0),
        designation=r.get("designation") or "",
    )


def _to_request(r: dict) -> ShiftRequest:
    shift = _to_shift(r)
    return ShiftRequest(
        request_id=shift.shift_id,
        employee_id=shift.employee_id,
        name=shift.name,
        last_name=shift.last_name,
        work_date=shift.work_date,
        interval=shift.interval,
        wage=shift.wage,
        designation=shift.designation,
        status=DecisionStatus(r["status"]),
        decided_by=r.get("decided_by"),
        created_at=r.get("created_at"),
    )


class MySQLShiftSession(ShiftSession):
    def __init__(self, cur):
        self._cur = cur

    def lock_employee_day(self, *, employee_id: int, work_date: date) -> Sequence[Shift]:
        self._cur.execute("SELECT id FROM Employees WHERE id=%s FOR UPDATE", (int(employee_id),))
        fetchall(self._cur)
        self._cur.execute(
            f"""
            SELECT {_SHIFT_COLUMNS}
            FROM rota
            WHERE employee_id=%s AND work_date=%s
            ORDER BY startTime
            FOR UPDATE
            """,
            (int(employee_id), work_date),
        )
        return [_to_shift(r) for r in fetchall(self._cur)]

    def get(self, shift_id: int) -> Optional[Shift]:
        self._cur.execute(
            f"SELECT {_SHIFT_COLUMNS} FROM rota WHERE id=%s AND employee_id IS NOT NULL",
            (int(shift_id),),
        )
        r = fetchone(self._cur)
        return _to_shift(r) if r else None

    def id_in_use(self, candidate_id: int) -> bool:
        self._cur.execute(
            """
            SELECT id FROM rota WHERE id=%s
            UNION ALL
            SELECT id FROM shift_requests WHERE id=%s
            LIMIT 1
            """,
            (int(candidate_id), int(candidate_id)),
        )
        return fetchone(self._cur) is not None

    def insert(self, shift: Shift) -> None:
        self._cur.execute(
            """
            INSERT INTO rota(id, employee_id, name, lastName, work_date, startTime, endTime, wage, designation)
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
            """,
            (
                int(shift.shift_id),
                int(shift.employee_id),
                shift.name,
                shift.last_name,
                shift.work_date,
                shift.interval.storage_start,
                shift.interval.storage_end,
                shift.wage,
                shift.designation,
            ),
        )

    def update(self, shift: Shift) -> None:
        self._cur.execute(
            """
            UPDATE rota
            SET startTime=%s, endTime=%s, wage=%s, designation=%s
            WHERE id=%s
            """,
            (
                shift.interval.storage_start,
                shift.interval.storage_end,
                shift.wage,
                shift.designation,
                int(shift.shift_id),
            ),
        )

    def delete(self, shift_id: int) -> bool:
        self._cur.execute("DELETE FROM rota WHERE id=%s", (int(shift_id),))
        return self._cur.rowcount > 0

    def delete_day(self, *, employee_id: int, work_date: date) -> int:
        self._cur.execute(
            "DELETE FROM rota WHERE employee_id=%s AND work_date=%s",
            (int(employee_id), work_date),
        )
        return int(self._cur.rowcount)

    def get_request(self, request_id: int, *, for_update: bool = False) -> Optional[ShiftRequest]:
        lock = " FOR UPDATE" if for_update else ""
        self._cur.execute(
            f"SELECT {_REQUEST_COLUMNS} FROM shift_requests WHERE id=%s AND employee_id IS NOT NULL{lock}",
            (int(request_id),),
        )
        r = fetchone(self._cur)
        return _to_request(r) if r else None

    def insert_request(self, request: ShiftRequest) -> None:
        self._cur.execute(
            """
            INSERT INTO shift_requests(
                id, employee_id, name, lastName, work_date, startTime, endTime, wage, designation, status
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
            """,
            (
                int(request.request_id),
                int(request.employee_id),
                request.name,
                request.last_name,
                request.work_date,
                request.interval.storage_start,
                request.interval.storage_end,
                request.wage,
                request.designation,
                request.status.value,
            ),
        )

    def decide_request(self, *, request_id: int, status: DecisionStatus, decided_by: str) -> bool:
        self._cur.execute(
            """
            UPDATE shift_requests
            SET status=%s, decided_by=%s, decided_at=NOW()
            WHERE id=%s AND status=%s
            """,
            (status.value, decided_by, int(request_id), DecisionStatus.PENDING.value),
        )
        return self._cur.rowcount > 0


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def session(self) -> Iterator[MySQLShiftSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            yield MySQLShiftSession(cur)

    def list_for_employee_range(self, *, employee_id: int, start: date, end: date) -> Sequence[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SHIFT_COLUMNS}
                FROM rota
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date, startTime
                """,
                (int(employee_id), start, end),
            )
            return [_to_shift(r) for r in fetchall(cur)]

    def list_range(self, *, start: date, end: date) -> Sequence[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SHIFT_COLUMNS}
                FROM rota
                WHERE work_date BETWEEN %s AND %s AND employee_id IS NOT NULL
                ORDER BY work_date, lastName, name, startTime
                """,
                (start, end),
            )
            return [_to_shift(r) for r in drop_unkeyed(fetchall(cur), "rota")]

    def list_confirmed(
        self,
        *,
        employee_id: int,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[Shift]:
        clauses = ["employee_id=%s"]
        params: list[object] = [int(employee_id)]
        if month is not None and year is not None:
            clauses.append("MONTH(work_date)=%s AND YEAR(work_date)=%s")
            params.extend([int(month), int(year)])

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SHIFT_COLUMNS}
                FROM ConfirmedRota
                WHERE {where}
                ORDER BY work_date, startTime
                """,
                tuple(params),
            )
            return [_to_shift(r) for r in fetchall(cur)]

    def list_requests(self, *, status: Optional[DecisionStatus] = None) -> Sequence[ShiftRequest]:
        clauses = ["employee_id IS NOT NULL"]
        params: list[object] = []
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM shift_requests
                WHERE {where}
                ORDER BY created_at
                """,
                tuple(params),
            )
            return [_to_request(r) for r in drop_unkeyed(fetchall(cur), "shift_requests")]
