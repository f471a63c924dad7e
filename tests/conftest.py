from __future__ import annotations

import random
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from solura.container import Container, TenantServices
from solura.core.enums import DecisionStatus
from solura.core.exceptions import DuplicateKeyError, NotFoundError
from solura.holidays.model import HolidayRequest, HolidayYearWindow
from solura.holidays.service import HolidayService
from solura.notifications.service import NotificationService
from solura.shifts.allocator import ShiftIdAllocator
from solura.shifts.model import Shift, ShiftRequest
from solura.shifts.service import ShiftRegistry
from solura.users.model import AccessGrant, Employee
from solura.users.service import AuthService, EmployeeService, PermissionService

TENANT = "demo"
PASSWORD = "secret123"


@dataclass
class InMemoryEmployees:
    employees: dict[int, Employee]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(int(employee_id))

    def get_by_email(self, email: str) -> Optional[Employee]:
        return next((e for e in self.employees.values() if e.email == email), None)

    def find_by_name(self, name: str, last_name: str) -> list[Employee]:
        return [e for e in self.employees.values() if e.name == name and e.last_name == last_name]


@dataclass
class InMemoryAccess:
    grants: list[AccessGrant]

    def list_grants(self, email: str) -> list[AccessGrant]:
        return [g for g in self.grants if g.email == email]

    def get_grant(self, email: str, db_name: str) -> Optional[AccessGrant]:
        return next((g for g in self.grants if g.email == email and g.db_name == db_name), None)


class InMemoryShiftSession:
    def __init__(self, store: "InMemoryShiftStore"):
        self._store = store

    def lock_employee_day(self, *, employee_id, work_date):
        self._store.locks.append((int(employee_id), work_date))
        return self._store.day(employee_id, work_date)

    def get(self, shift_id):
        return self._store.rota.get(int(shift_id))

    def id_in_use(self, candidate_id):
        return int(candidate_id) in self._store.rota or int(candidate_id) in self._store.requests

    def insert(self, shift):
        if self._store.fail_next_inserts:
            self._store.fail_next_inserts -= 1
            raise DuplicateKeyError("Duplicate entry for key 'PRIMARY'")
        self._store.rota[shift.shift_id] = shift

    def update(self, shift):
        self._store.rota[shift.shift_id] = shift

    def delete(self, shift_id):
        return self._store.rota.pop(int(shift_id), None) is not None

    def delete_day(self, *, employee_id, work_date):
        doomed = [s.shift_id for s in self._store.day(employee_id, work_date)]
        for shift_id in doomed:
            del self._store.rota[shift_id]
        return len(doomed)

    def get_request(self, request_id, *, for_update=False):
        return self._store.requests.get(int(request_id))

    def insert_request(self, request):
        self._store.requests[request.request_id] = request

    def decide_request(self, *, request_id, status, decided_by):
        req = self._store.requests.get(int(request_id))
        if not req or req.status != DecisionStatus.PENDING:
            return False
        self._store.requests[req.request_id] = replace(req, status=status, decided_by=decided_by)
        return True


@dataclass
class InMemoryShiftStore:
    rota: dict[int, Shift] = field(default_factory=dict)
    requests: dict[int, ShiftRequest] = field(default_factory=dict)
    confirmed: list[Shift] = field(default_factory=list)
    locks: list = field(default_factory=list)
    fail_next_inserts: int = 0

    def day(self, employee_id, work_date) -> list[Shift]:
        rows = [s for s in self.rota.values() if s.employee_id == int(employee_id) and s.work_date == work_date]
        return sorted(rows, key=lambda s: s.interval.start_minutes)

    @contextmanager
    def session(self):
        # Mirrors a transaction: any exception restores the previous state.
        snapshot = (dict(self.rota), dict(self.requests))
        try:
            yield InMemoryShiftSession(self)
        except Exception:
            self.rota, self.requests = snapshot
            raise

    def list_for_employee_range(self, *, employee_id, start, end):
        rows = [s for s in self.rota.values() if s.employee_id == int(employee_id) and start <= s.work_date <= end]
        return sorted(rows, key=lambda s: (s.work_date, s.interval.start_minutes))

    def list_range(self, *, start, end):
        rows = [s for s in self.rota.values() if start <= s.work_date <= end]
        return sorted(rows, key=lambda s: (s.work_date, s.last_name, s.name, s.interval.start_minutes))

    def list_confirmed(self, *, employee_id, month=None, year=None):
        rows = [s for s in self.confirmed if s.employee_id == int(employee_id)]
        if month is not None and year is not None:
            rows = [s for s in rows if s.work_date.month == month and s.work_date.year == year]
        return sorted(rows, key=lambda s: (s.work_date, s.interval.start_minutes))

    def list_requests(self, *, status=None):
        rows = [r for r in self.requests.values() if status is None or r.status == status]
        return sorted(rows, key=lambda r: (r.work_date, r.interval.start_minutes))


@dataclass
class InMemoryHolidays:
    windows: list[HolidayYearWindow] = field(default_factory=list)
    holidays: dict[int, HolidayRequest] = field(default_factory=dict)
    next_id: int = 1

    def list_year_windows(self):
        return list(self.windows)

    def list_for_employee(self, employee_id):
        return [h for h in self.holidays.values() if h.employee_id == int(employee_id)]

    def list_pending(self):
        rows = [h for h in self.holidays.values() if h.status == DecisionStatus.PENDING]
        return sorted(rows, key=lambda h: (h.request_date, h.holiday_id))

    def get(self, holiday_id):
        return self.holidays.get(int(holiday_id))

    def create(self, *, employee_id, name, last_name, start_date, end_date, request_date, days, payment_type, notes):
        holiday_id = self.next_id
        self.next_id += 1
        self.holidays[holiday_id] = HolidayRequest(
            holiday_id=holiday_id,
            employee_id=employee_id,
            name=name,
            last_name=last_name,
            start_date=start_date,
            end_date=end_date,
            request_date=request_date,
            days=days,
            payment_type=payment_type,
            notes=notes,
        )
        return holiday_id

    def decide(self, *, holiday_id, status, who, notes=None):
        current = self.holidays.get(int(holiday_id))
        if not current or current.decided:
            return False
        self.holidays[current.holiday_id] = replace(
            current, status=status, who=who, notes=current.notes if notes is None else notes
        )
        return True


@dataclass
class InMemoryNotifications:
    sent: list = field(default_factory=list)

    def create(self, notification):
        self.sent.append(notification)
        return len(self.sent)


@pytest.fixture
def ann():
    return Employee(1, "Ann", "Lee", "ann@solura.test", wage=11.5, designation="Waiter", allowance_days=28)


@pytest.fixture
def bob():
    return Employee(2, "Bob", "Stone", "bob@solura.test", wage=12.0, designation="Chef", allowance_days=28)


@pytest.fixture
def maria():
    return Employee(3, "Maria", "Ruiz", "maria@solura.test", wage=15.0, designation="Manager", allowance_days=28)


@pytest.fixture
def employees(ann, bob, maria):
    return InMemoryEmployees({e.employee_id: e for e in (ann, bob, maria)})


@pytest.fixture
def access():
    pw = generate_password_hash(PASSWORD, method="pbkdf2:sha256")
    return InMemoryAccess(
        [
            AccessGrant("maria@solura.test", pw, "manager", TENANT),
            AccessGrant("ann@solura.test", pw, "user", TENANT),
            AccessGrant("bob@solura.test", pw, "user", TENANT),
            AccessGrant("boss@solura.test", pw, "admin", TENANT),
            AccessGrant("boss@solura.test", pw, "admin", "other"),
        ]
    )


@pytest.fixture
def auth_service(access):
    return AuthService(access)


@pytest.fixture
def permissions(auth_service):
    return PermissionService(auth_service)


@pytest.fixture
def shift_store():
    return InMemoryShiftStore()


@pytest.fixture
def holiday_store():
    return InMemoryHolidays(
        windows=[
            HolidayYearWindow(date(2023, 1, 1), date(2023, 12, 31)),
            HolidayYearWindow(date(2024, 1, 1), date(2024, 12, 31)),
        ]
    )


@pytest.fixture
def notifications():
    return InMemoryNotifications()


@pytest.fixture
def registry(shift_store, permissions, notifications):
    return ShiftRegistry(
        shift_store,
        allocator=ShiftIdAllocator(rng=random.Random(42)),
        permissions=permissions,
        notifications=NotificationService(notifications),
        tenant=TENANT,
    )


@pytest.fixture
def holiday_service(holiday_store, employees, permissions, notifications):
    return HolidayService(
        holiday_store,
        employees,
        permissions=permissions,
        notifications=NotificationService(notifications),
        tenant=TENANT,
    )


@pytest.fixture
def container(auth_service, permissions, employees, registry, holiday_service, notifications):
    services = TenantServices(
        tenant=TENANT,
        ping=lambda: None,
        employee_service=EmployeeService(employees),
        shift_registry=registry,
        holiday_service=holiday_service,
        notification_service=NotificationService(notifications),
    )

    def tenant_factory(db_name):
        if db_name != TENANT:
            raise NotFoundError(f"No configuration for database {db_name}")
        return services

    return Container(auth_service=auth_service, permission_service=permissions, tenant_factory=tenant_factory)


@pytest.fixture
def client(container, monkeypatch):
    from solura.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()
