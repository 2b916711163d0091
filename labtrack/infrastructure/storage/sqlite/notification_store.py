"""SQLite implementation of notification storage."""

import aiosqlite

from labtrack.config import get_logger
from labtrack.core.entities.notification import (
    Notification,
    NotificationSeverity,
    NotificationType,
)
from labtrack.core.interfaces.notification_store import INotificationStore
from labtrack.infrastructure.storage.sqlite.base import iso, parse_datetime
from labtrack.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteNotificationStore(INotificationStore):
    """Notifications keyed by their string id; ``put`` inserts or replaces."""

    async def put(self, notification: Notification) -> Notification:
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT OR REPLACE INTO notifications (
                    id, type, title, message, severity, read, related_id, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    notification.id,
                    notification.type.value,
                    notification.title,
                    notification.message,
                    notification.severity.value,
                    1 if notification.read else 0,
                    notification.related_id,
                    iso(notification.created_at),
                ),
            )
            return notification

    async def get(self, notification_id: str) -> Notification | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM notifications WHERE id = ?", (notification_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def delete(self, notification_id: str) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM notifications WHERE id = ?", (notification_id,)
            )
            return cursor.rowcount > 0

    async def list_notifications(
        self, unread_only: bool = False, limit: int = 100
    ) -> list[Notification]:
        async with get_connection() as conn:
            if unread_only:
                cursor = await conn.execute(
                    """
                    SELECT * FROM notifications
                    WHERE read = 0
                    ORDER BY created_at DESC
                    LIMIT ?
                    """,
                    (limit,),
                )
            else:
                cursor = await conn.execute(
                    "SELECT * FROM notifications ORDER BY created_at DESC LIMIT ?",
                    (limit,),
                )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Notification:
        return Notification(
            id=row["id"],
            type=NotificationType(row["type"]),
            title=row["title"],
            message=row["message"],
            severity=NotificationSeverity(row["severity"]),
            read=bool(row["read"]),
            related_id=row["related_id"],
            created_at=parse_datetime(row["created_at"]),
        )
