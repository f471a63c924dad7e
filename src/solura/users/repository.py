from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AccessGrant, Employee


class EmployeeRepository(Protocol):
    """Employee lookups inside one tenant database."""

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def find_by_name(self, name: str, last_name: str) -> Sequence[Employee]:
        """Legacy (name, lastName) lookup; may return several employees."""

        raise NotImplementedError


class AccessRepository(Protocol):
    """Credential and access-level rows of the shared access database."""

    def list_grants(self, email: str) -> Sequence[AccessGrant]:
        raise NotImplementedError

    def get_grant(self, email: str, db_name: str) -> Optional[AccessGrant]:
        raise NotImplementedError
