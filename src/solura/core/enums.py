from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Access level stored per (email, tenant) in the access database."""

    ADMIN = "admin"
    AM = "am"
    MANAGER = "manager"
    USER = "user"


APPROVER_ROLES = frozenset({Role.ADMIN, Role.AM, Role.MANAGER})
MODERATOR_ROLES = frozenset({Role.ADMIN, Role.AM})


class DecisionStatus(str, Enum):
    """Decision state of a holiday or shift request."""

    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"


class PaymentType(str, Enum):
    PAID = "paid"
    UNPAID = "unpaid"


class NotificationType(str, Enum):
    HOLIDAY_REQUEST = "holiday_request"
    HOLIDAY_DECISION = "holiday_decision"
    SHIFT_REQUEST = "shift_request"
