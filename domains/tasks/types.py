"""Task reminder data types."""

import json
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union

from .timeutils import MS_PER_HOUR


class OffsetKind(str, Enum):
    """Lead-time bucket of a reminder.

    Values are the identifiers stored in the reminders table.
    """
    ONE_DAY = "1_day"
    TEN_HOURS = "10_hours"
    FIVE_HOURS = "5_hours"
    TWO_HOURS = "2_hours"

    @property
    def lead_ms(self) -> int:
        """How long before the due time this reminder fires."""
        return _LEAD_HOURS[self] * MS_PER_HOUR

    @classmethod
    def parse(cls, value: Any) -> Optional["OffsetKind"]:
        """Stored value to OffsetKind, or None for kinds this version doesn't know."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


_LEAD_HOURS = {
    OffsetKind.ONE_DAY: 24,
    OffsetKind.TEN_HOURS: 10,
    OffsetKind.FIVE_HOURS: 5,
    OffsetKind.TWO_HOURS: 2,
}

# Fixed, ordered lead-time table (earliest reminder first)
REMINDER_OFFSETS: tuple[OffsetKind, ...] = (
    OffsetKind.ONE_DAY,
    OffsetKind.TEN_HOURS,
    OffsetKind.FIVE_HOURS,
    OffsetKind.TWO_HOURS,
)


@dataclass
class Task:
    """The fields of a meeting task the reminder subsystem reads."""
    id: str
    title: str
    meeting_label: str
    due_at: Union[datetime, date, int, str, None] = None
    club_id: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class TaskSnapshot:
    """Copy of the task wording taken when reminders are scheduled."""
    title: str
    due_date: str
    meeting_label: str

    @classmethod
    def of(cls, task: Task) -> "TaskSnapshot":
        due = task.due_at
        if isinstance(due, (datetime, date)):
            due_date = due.isoformat()
        else:
            due_date = str(due)
        return cls(title=str(task.title), due_date=due_date, meeting_label=str(task.meeting_label))

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_value(cls, value: Union[dict, str, None]) -> "TaskSnapshot":
        """Build from a stored JSON object (or its text form)."""
        if isinstance(value, str):
            value = json.loads(value)
        value = value or {}
        return cls(
            title=value.get("title", ""),
            due_date=value.get("due_date", ""),
            meeting_label=value.get("meeting_label", ""),
        )


@dataclass
class ReminderRecord:
    """One scheduled reminder for one recipient and one lead-time bucket."""
    task_id: str
    recipient_id: str
    offset_kind: Optional[OffsetKind]
    fire_at: int
    snapshot: TaskSnapshot
    delivered: bool = False
    delivered_at: Optional[int] = None
    retry_count: int = 0
    last_error: Optional[str] = None
    created_at: Optional[int] = None
    id: Optional[str] = None
    # Raw stored kind, kept when offset_kind is not recognised
    raw_offset_kind: Optional[str] = field(default=None, repr=False)

    @property
    def offset_value(self) -> Optional[str]:
        if self.offset_kind is not None:
            return self.offset_kind.value
        return self.raw_offset_kind

    def to_row(self) -> dict:
        """Column mapping used by every store backend (id excluded)."""
        return {
            "task_id": self.task_id,
            "recipient_id": self.recipient_id,
            "offset_kind": self.offset_value,
            "fire_at": self.fire_at,
            "snapshot": self.snapshot.to_dict(),
            "delivered": self.delivered,
            "delivered_at": self.delivered_at,
            "retry_count": self.retry_count,
            "last_error": self.last_error,
            "created_at": self.created_at,
        }

    @classmethod
    def from_row(cls, row: dict) -> "ReminderRecord":
        raw_kind = row.get("offset_kind")
        return cls(
            id=str(row["id"]) if row.get("id") is not None else None,
            task_id=str(row["task_id"]),
            recipient_id=str(row["recipient_id"]),
            offset_kind=OffsetKind.parse(raw_kind),
            raw_offset_kind=raw_kind,
            fire_at=int(row["fire_at"]),
            snapshot=TaskSnapshot.from_value(row.get("snapshot")),
            delivered=bool(row.get("delivered", False)),
            delivered_at=int(row["delivered_at"]) if row.get("delivered_at") is not None else None,
            retry_count=int(row.get("retry_count") or 0),
            last_error=row.get("last_error"),
            created_at=int(row["created_at"]) if row.get("created_at") is not None else None,
        )


@dataclass
class SweepResult:
    """Outcome counters of one sweep."""
    due: int = 0
    delivered: int = 0
    failed: int = 0
    dead_lettered: int = 0

    def to_dict(self) -> dict:
        return asdict(self)
