from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.enums import APPROVER_ROLES, MODERATOR_ROLES, Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .model import Employee
from .repository import AccessRepository, EmployeeRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: log in against the shared access database."""

    def __init__(self, access: AccessRepository):
        self._access = access

    def login(self, email: str, password: str) -> list[dict]:
        """Return the tenants (``db_name`` + ``access``) this credential unlocks."""
        if not email or not password or not str(email).strip():
            raise ValidationError("Email and password required")

        email = str(email).strip()
        databases: list[dict] = []
        for grant in self._access.list_grants(email):
            try:
                ok = check_password_hash(grant.password_hash, str(password))
            except (ValueError, TypeError):
                # bcrypt hashes from the legacy backend use a method werkzeug does not know
                ok = False
            if ok:
                databases.append({"db_name": grant.db_name, "access": grant.access})

        if not databases:
            logger.info("Rejected login for %s", email)
            raise AuthenticationError("Invalid email or password")
        return databases

    def access_level(self, email: str, db_name: str) -> Optional[Role]:
        if not email:
            return None
        grant = self._access.get_grant(str(email).strip(), db_name)
        return grant.role if grant else None


class PermissionService:
    """Capability checks consumed by holiday decisions and moderation."""

    def __init__(self, auth: AuthService):
        self._auth = auth

    def is_approver(self, actor_email: str, db_name: str) -> bool:
        return self._auth.access_level(actor_email, db_name) in APPROVER_ROLES

    def can_moderate(self, actor_email: str, db_name: str) -> bool:
        return self._auth.access_level(actor_email, db_name) in MODERATOR_ROLES


class EmployeeService:
    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def get_by_email(self, email: str) -> Employee:
        email = require_non_empty(email, "email")
        employee = self._employees.get_by_email(email)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def get_by_id(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def resolve(self, *, email: Optional[str] = None, name: Optional[str] = None, last_name: Optional[str] = None) -> Employee:
        """Resolve the employee a request is about.

        Email is the stable key. The (name, lastName) pair is only accepted for
        clients that predate email lookups and must match exactly one employee.
        """

        if email:
            return self.get_by_email(email)

        if not name or not last_name:
            raise ValidationError("email or name and lastName required")

        matches = self._employees.find_by_name(str(name).strip(), str(last_name).strip())
        if not matches:
            raise NotFoundError("Employee not found")
        if len(matches) > 1:
            raise ConflictError(f"Several employees are named {name} {last_name}; use email instead")
        return matches[0]
