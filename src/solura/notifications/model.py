from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    target_role: str
    title: str
    message: str
    type: NotificationType
    target_email: Optional[str] = None
