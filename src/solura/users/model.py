from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee row of a tenant database."""

    employee_id: int
    name: str
    last_name: str
    email: str
    wage: float = 0.0
    designation: str = ""
    allowance_days: float = 0.0

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "name": self.name,
            "lastName": self.last_name,
            "email": self.email,
            "wage": self.wage,
            "designation": self.designation,
        }


@dataclass(frozen=True)
class AccessGrant:
    """One (email, tenant) row of the shared access database."""

    email: str
    password_hash: str
    access: str
    db_name: str

    @property
    def role(self) -> Role:
        try:
            return Role((self.access or "").strip().lower())
        except ValueError:
            return Role.USER
