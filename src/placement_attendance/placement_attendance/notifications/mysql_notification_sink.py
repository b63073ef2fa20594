from __future__ import annotations

from ..common.datetime_utils import now_local
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import NotificationEvent
from .sink import NotificationSink


class MySQLNotificationSink(NotificationSink):
    """Append events to the shared `notifications` table, one row per recipient.

    Delivery (in-app bell, email) is owned by the notification module.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def emit(self, event: NotificationEvent) -> None:
        created_at = event.created_at or now_local()
        rows = [
            (
                int(recipient_id),
                event.event_type.value,
                event.title,
                event.message,
                event.student_id,
                event.attendance_id,
                created_at,
            )
            for recipient_id in event.recipient_ids
        ]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO notifications(recipient_id, event_type, title, message, student_id, attendance_id, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                rows,
            )
