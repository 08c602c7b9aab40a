"""Durable reminder queue.

Store operations: insert, equality query on one field, partial update and
delete. Range filtering (fire_at <= now) is done by callers in memory.

Backends:
- SupabaseReminderStore: PostgREST table in the portal's Supabase project.
- SQLiteReminderStore: local file, for development and tests.
"""

import json
import sqlite3
import uuid
from typing import Any, Optional, Protocol

import httpx

import config as app_config
from logger import logger
from utils.sqlite import open_connection, transaction
from . import config
from .errors import ReminderStoreError
from .timeutils import now_ms
from .types import ReminderRecord

# Columns callers may filter or update on
COLUMNS = (
    "task_id",
    "recipient_id",
    "offset_kind",
    "fire_at",
    "snapshot",
    "delivered",
    "delivered_at",
    "retry_count",
    "last_error",
    "created_at",
)


def _check_columns(fields) -> None:
    unknown = [f for f in fields if f not in COLUMNS and f != "id"]
    if unknown:
        raise ValueError(f"Unknown reminder field(s): {', '.join(unknown)}")


class ReminderStore(Protocol):
    async def insert(self, record: ReminderRecord) -> str:
        ...

    async def query_by_field(self, field_name: str, value: Any) -> list[ReminderRecord]:
        ...

    async def update_fields(self, record_id: str, fields: dict) -> None:
        ...

    async def delete(self, record_id: str) -> None:
        ...


class SupabaseReminderStore:
    """Reminder queue in a Supabase table via the REST API."""

    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
        table: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.url = url or app_config.SUPABASE_URL
        self.key = key or app_config.SUPABASE_KEY
        self.table = table or config.REMINDERS_TABLE
        self.timeout = timeout or config.HTTP_TIMEOUT_SECONDS

        if not self.url or not self.key:
            raise ReminderStoreError("Supabase not configured (SUPABASE_URL / SUPABASE_KEY)")

    @property
    def _endpoint(self) -> str:
        return f"{self.url}/rest/v1/{self.table}"

    def _headers(self) -> dict:
        """Get headers for Supabase API calls."""
        return {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation"
        }

    @staticmethod
    def _filter_value(value: Any) -> str:
        """Python value to a PostgREST eq. operand."""
        if isinstance(value, bool):
            return "true" if value else "false"
        if value is None:
            return "null"
        return str(value)

    async def insert(self, record: ReminderRecord) -> str:
        row = record.to_row()
        if row["created_at"] is None:
            row["created_at"] = now_ms()

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self._endpoint,
                    headers=self._headers(),
                    json=row,
                    timeout=self.timeout
                )
                response.raise_for_status()
                created = response.json()
        except httpx.HTTPError as e:
            raise ReminderStoreError(f"Failed to insert reminder: {e}") from e

        if isinstance(created, list):
            created = created[0] if created else {}
        record_id = created.get("id")
        if record_id is None:
            raise ReminderStoreError("Supabase insert returned no id")

        logger.debug(f"Inserted reminder {record_id} ({record.offset_value}) for task {record.task_id}")
        return str(record_id)

    async def query_by_field(self, field_name: str, value: Any) -> list[ReminderRecord]:
        _check_columns([field_name])
        operator = "is" if value is None else "eq"

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    self._endpoint,
                    headers=self._headers(),
                    params={field_name: f"{operator}.{self._filter_value(value)}", "select": "*"},
                    timeout=self.timeout
                )
                response.raise_for_status()
                rows = response.json()
        except httpx.HTTPError as e:
            raise ReminderStoreError(f"Failed to query reminders by {field_name}: {e}") from e

        return [ReminderRecord.from_row(r) for r in rows]

    async def update_fields(self, record_id: str, fields: dict) -> None:
        _check_columns(fields)

        try:
            async with httpx.AsyncClient() as client:
                response = await client.patch(
                    self._endpoint,
                    headers=self._headers(),
                    params={"id": f"eq.{record_id}"},
                    json=fields,
                    timeout=self.timeout
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise ReminderStoreError(f"Failed to update reminder {record_id}: {e}") from e

    async def delete(self, record_id: str) -> None:
        try:
            async with httpx.AsyncClient() as client:
                response = await client.delete(
                    self._endpoint,
                    headers=self._headers(),
                    params={"id": f"eq.{record_id}"},
                    timeout=self.timeout
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise ReminderStoreError(f"Failed to delete reminder {record_id}: {e}") from e

        logger.debug(f"Deleted reminder {record_id}")


class SQLiteReminderStore:
    """Reminder queue in a local SQLite database."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or config.REMINDER_STORE_DB
        self._connection: Optional[sqlite3.Connection] = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the connection, creating the schema on first use."""
        if self._connection is not None:
            return self._connection

        self._connection = open_connection(self.db_path)
        self._connection.executescript("""
            CREATE TABLE IF NOT EXISTS task_reminders (
                id TEXT PRIMARY KEY,
                task_id TEXT NOT NULL,
                recipient_id TEXT NOT NULL,
                offset_kind TEXT NOT NULL,
                fire_at INTEGER NOT NULL,
                snapshot TEXT NOT NULL,
                delivered INTEGER NOT NULL DEFAULT 0,
                delivered_at INTEGER,
                retry_count INTEGER NOT NULL DEFAULT 0,
                last_error TEXT,
                created_at INTEGER NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_reminders_delivered ON task_reminders(delivered);
            CREATE INDEX IF NOT EXISTS idx_reminders_task ON task_reminders(task_id);
        """)
        self._connection.commit()

        logger.info(f"Reminder store initialized: {self.db_path}")
        return self._connection

    @staticmethod
    def _to_sql(field_name: str, value: Any) -> Any:
        if field_name == "snapshot" and isinstance(value, dict):
            return json.dumps(value)
        if isinstance(value, bool):
            return int(value)
        return value

    @staticmethod
    def _from_sql(row: sqlite3.Row) -> ReminderRecord:
        data = dict(row)
        data["delivered"] = bool(data["delivered"])
        return ReminderRecord.from_row(data)

    async def insert(self, record: ReminderRecord) -> str:
        record_id = uuid.uuid4().hex
        row = record.to_row()
        if row["created_at"] is None:
            row["created_at"] = now_ms()

        try:
            with transaction(self._get_connection()) as conn:
                conn.execute(
                    f"""
                    INSERT INTO task_reminders (id, {", ".join(COLUMNS)})
                    VALUES (?, {", ".join("?" for _ in COLUMNS)})
                    """,
                    (record_id, *(self._to_sql(c, row[c]) for c in COLUMNS))
                )
        except sqlite3.Error as e:
            raise ReminderStoreError(f"Failed to insert reminder: {e}") from e

        logger.debug(f"Inserted reminder {record_id} ({record.offset_value}) for task {record.task_id}")
        return record_id

    async def query_by_field(self, field_name: str, value: Any) -> list[ReminderRecord]:
        _check_columns([field_name])

        try:
            conn = self._get_connection()
            if value is None:
                rows = conn.execute(
                    f"SELECT * FROM task_reminders WHERE {field_name} IS NULL"
                ).fetchall()
            else:
                rows = conn.execute(
                    f"SELECT * FROM task_reminders WHERE {field_name} = ?",
                    (self._to_sql(field_name, value),)
                ).fetchall()
        except sqlite3.Error as e:
            raise ReminderStoreError(f"Failed to query reminders by {field_name}: {e}") from e

        return [self._from_sql(r) for r in rows]

    async def get(self, record_id: str) -> Optional[ReminderRecord]:
        """Get a specific reminder by ID."""
        row = self._get_connection().execute(
            "SELECT * FROM task_reminders WHERE id = ?",
            (record_id,)
        ).fetchone()
        return self._from_sql(row) if row else None

    async def update_fields(self, record_id: str, fields: dict) -> None:
        _check_columns(fields)
        if not fields:
            return

        assignments = ", ".join(f"{name} = ?" for name in fields)
        values = [self._to_sql(name, value) for name, value in fields.items()]

        try:
            with transaction(self._get_connection()) as conn:
                conn.execute(
                    f"UPDATE task_reminders SET {assignments} WHERE id = ?",
                    (*values, record_id)
                )
        except sqlite3.Error as e:
            raise ReminderStoreError(f"Failed to update reminder {record_id}: {e}") from e

    async def delete(self, record_id: str) -> None:
        try:
            with transaction(self._get_connection()) as conn:
                conn.execute("DELETE FROM task_reminders WHERE id = ?", (record_id,))
        except sqlite3.Error as e:
            raise ReminderStoreError(f"Failed to delete reminder {record_id}: {e}") from e

        logger.debug(f"Deleted reminder {record_id}")

    def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None
            logger.debug("Reminder store connection closed")
