from __future__ import annotations

import threading
from dataclasses import dataclass
from functools import partial
from typing import Callable, Mapping

from .database.connection import DBConfig, DatabaseConnection, TenantRegistry
from .database.mysql_base import ping
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.service import HolidayService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import NotificationService
from .shifts.allocator import ShiftIdAllocator
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.service import ShiftRegistry
from .users.mysql_user_repository import MySQLAccessRepository, MySQLEmployeeRepository
from .users.service import AuthService, EmployeeService, PermissionService


@dataclass(frozen=True)
class TenantServices:
    """Services bound to one tenant database."""

    tenant: str
    ping: Callable[[], None]
    employee_service: EmployeeService
    shift_registry: ShiftRegistry
    holiday_service: HolidayService
    notification_service: NotificationService


class Container:
    def __init__(
        self,
        *,
        auth_service: AuthService,
        permission_service: PermissionService,
        tenant_factory: Callable[[str], TenantServices],
    ):
        self.auth_service = auth_service
        self.permission_service = permission_service
        self._tenant_factory = tenant_factory
        self._tenants: dict[str, TenantServices] = {}
        self._lock = threading.Lock()

    def tenant(self, db_name: str) -> TenantServices:
        """Services for ``db_name``; raises NotFoundError for unknown tenants."""
        with self._lock:
            services = self._tenants.get(db_name)
            if services is None:
                services = self._tenant_factory(db_name)
                self._tenants[db_name] = services
            return services


def _build_tenant(
    db_name: str,
    *,
    registry: TenantRegistry,
    permissions: PermissionService,
    allocator: ShiftIdAllocator,
) -> TenantServices:
    conn = registry.get(db_name)

    employees_repo = MySQLEmployeeRepository(conn)
    notification_service = NotificationService(MySQLNotificationRepository(conn))

    return TenantServices(
        tenant=db_name,
        ping=partial(ping, conn),
        employee_service=EmployeeService(employees_repo),
        shift_registry=ShiftRegistry(
            MySQLShiftRepository(conn),
            allocator=allocator,
            permissions=permissions,
            notifications=notification_service,
            tenant=db_name,
        ),
        holiday_service=HolidayService(
            MySQLHolidayRepository(conn),
            employees_repo,
            permissions=permissions,
            notifications=notification_service,
            tenant=db_name,
        ),
        notification_service=notification_service,
    )


def build_container(*, access_db_config: Mapping, tenant_databases: Mapping[str, Mapping]) -> Container:
    access_conn = DatabaseConnection(DBConfig.from_dict(access_db_config))
    registry = TenantRegistry(tenant_databases)

    auth_service = AuthService(MySQLAccessRepository(access_conn))
    permission_service = PermissionService(auth_service)
    allocator = ShiftIdAllocator()

    return Container(
        auth_service=auth_service,
        permission_service=permission_service,
        tenant_factory=partial(
            _build_tenant,
            registry=registry,
            permissions=permission_service,
            allocator=allocator,
        ),
    )
