"""Notification feed backends.

A sink appends one delivered notification to a recipient's feed. Two
backends share the same contract:

- SupabaseNotificationSink: the portal's hosted database (PostgREST).
- SQLiteNotificationFeed: local development and tests.
"""

import json
import sqlite3
from datetime import datetime, timezone
from typing import Optional, Protocol

import httpx

import config as app_config
from logger import logger
from utils.sqlite import open_connection, transaction
from . import config
from .types import Notification


class NotificationDeliveryError(Exception):
    """Appending to a recipient's feed failed."""


class NotificationSink(Protocol):
    async def append_notification(self, recipient_id: str, notification: Notification) -> None:
        ...


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SupabaseNotificationSink:
    """Append notifications to the Supabase ``notifications`` table."""

    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
        table: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.url = url or app_config.SUPABASE_URL
        self.key = key or app_config.SUPABASE_KEY
        self.table = table or config.NOTIFICATIONS_TABLE
        self.timeout = timeout or config.HTTP_TIMEOUT_SECONDS

    def _headers(self) -> dict:
        """Get headers for Supabase API calls."""
        return {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
            "Content-Type": "application/json",
            "Prefer": "return=minimal"
        }

    async def append_notification(self, recipient_id: str, notification: Notification) -> None:
        if not recipient_id:
            raise NotificationDeliveryError("recipient_id is required for notification")
        if not self.url or not self.key:
            raise NotificationDeliveryError("Supabase not configured, cannot append notification")

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.url}/rest/v1/{self.table}",
                    headers=self._headers(),
                    json=notification.to_row(recipient_id, _utc_now_iso()),
                    timeout=self.timeout
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise NotificationDeliveryError(f"Failed to append notification for {recipient_id}: {e}") from e

        logger.debug(f"Appended {notification.category.value} notification for {recipient_id}")


class SQLiteNotificationFeed:
    """Notification feed kept in a local SQLite database."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._connection: Optional[sqlite3.Connection] = None

    def _get_connection(self) -> sqlite3.Connection:
        if self._connection is None:
            self._connection = open_connection(self.db_path)
            self._connection.executescript("""
                CREATE TABLE IF NOT EXISTS notifications (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    message TEXT NOT NULL,
                    type TEXT NOT NULL,
                    link TEXT,
                    priority TEXT DEFAULT 'normal',
                    data TEXT,
                    read INTEGER DEFAULT 0,
                    created_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications(user_id);
            """)
            self._connection.commit()
        return self._connection

    async def append_notification(self, recipient_id: str, notification: Notification) -> None:
        if not recipient_id:
            raise NotificationDeliveryError("recipient_id is required for notification")

        row = notification.to_row(recipient_id, _utc_now_iso())
        try:
            with transaction(self._get_connection()) as conn:
                conn.execute(
                    """
                    INSERT INTO notifications
                    (user_id, title, message, type, link, priority, data, read, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?)
                    """,
                    (
                        row["user_id"], row["title"], row["message"], row["type"],
                        row["link"], row["priority"], json.dumps(row["data"]), row["created_at"]
                    )
                )
        except sqlite3.Error as e:
            raise NotificationDeliveryError(f"Failed to append notification for {recipient_id}: {e}") from e

    def list_for(self, recipient_id: str) -> list[dict]:
        """Feed entries for a recipient, oldest first."""
        rows = self._get_connection().execute(
            "SELECT * FROM notifications WHERE user_id = ? ORDER BY id ASC",
            (recipient_id,)
        ).fetchall()

        feed = []
        for row in rows:
            entry = dict(row)
            entry["data"] = json.loads(entry["data"]) if entry["data"] else {}
            entry["read"] = bool(entry["read"])
            feed.append(entry)
        return feed

    def close(self) -> None:
        if self._connection:
            self._connection.close()
            self._connection = None
