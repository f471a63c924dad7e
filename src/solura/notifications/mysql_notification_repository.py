from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, notification: Notification) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(target_role, target_email, title, message, type)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    notification.target_role,
                    notification.target_email,
                    notification.title,
                    notification.message,
                    notification.type.value,
                ),
            )
            return int(cur.lastrowid)
