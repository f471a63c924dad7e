from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import NotificationType
from ..core.exceptions import PersistenceError
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Fire-and-forget notification records; a failed write never fails the caller."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def emit(
        self,
        *,
        target_role: str,
        title: str,
        message: str,
        type: NotificationType,
        target_email: Optional[str] = None,
    ) -> Optional[int]:
        notification = Notification(
            target_role=target_role,
            title=title,
            message=message,
            type=type,
            target_email=target_email,
        )
        try:
            return self._notifications.create(notification)
        except PersistenceError:
            logger.exception("Could not store %s notification for %s", type.value, target_email or target_role)
            return None
