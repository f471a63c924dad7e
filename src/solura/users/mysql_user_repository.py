from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AccessGrant, Employee
from .repository import AccessRepository, EmployeeRepository

_EMPLOYEE_COLUMNS = "id, name, lastName, email, wage, designation, allowance_days"


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["id"]),
        name=r["name"],
        last_name=r["lastName"],
        email=r.get("email") or "",
        wage=float(r.get("wage") or 0),
        designation=r.get("designation") or "",
        allowance_days=float(r.get("allowance_days") or 0),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM Employees WHERE id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM Employees WHERE email=%s", (email,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def find_by_name(self, name: str, last_name: str) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_EMPLOYEE_COLUMNS} FROM Employees WHERE name=%s AND lastName=%s ORDER BY id",
                (name, last_name),
            )
            return [_to_employee(r) for r in fetchall(cur)]


class MySQLAccessRepository(AccessRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_grants(self, email: str) -> Sequence[AccessGrant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT Email, Password, Access, db_name FROM users WHERE Email=%s", (email,))
            return [
                AccessGrant(email=r["Email"], password_hash=r["Password"], access=r["Access"], db_name=r["db_name"])
                for r in fetchall(cur)
            ]

    def get_grant(self, email: str, db_name: str) -> Optional[AccessGrant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT Email, Password, Access, db_name FROM users WHERE Email=%s AND db_name=%s",
                (email, db_name),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AccessGrant(email=r["Email"], password_hash=r["Password"], access=r["Access"], db_name=r["db_name"])
