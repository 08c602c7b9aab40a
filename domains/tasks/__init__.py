"""Task reminders: schedule lead-time reminders, sweep and deliver, clean up.

Flow: ReminderScheduler writes records when a task is assigned, the
ReminderSweeper delivers them once due, the RetentionJanitor deletes
delivered ones after the retention window. ImmediateNotifier sends the
assignment notice directly.
"""

from .types import OffsetKind, REMINDER_OFFSETS, ReminderRecord, SweepResult, Task, TaskSnapshot
from .errors import ReminderError, ReminderSchedulingError, ReminderStoreError
from .store import ReminderStore, SQLiteReminderStore, SupabaseReminderStore
from .scheduler import ReminderScheduler
from .assignment import ImmediateNotifier
from .sweeper import ReminderSweeper
from .janitor import RetentionJanitor
from .messages import render_assignment, render_reminder
from .services import ReminderServices, build_reminder_services, create_services

__all__ = [
    "OffsetKind",
    "REMINDER_OFFSETS",
    "ReminderRecord",
    "SweepResult",
    "Task",
    "TaskSnapshot",
    "ReminderError",
    "ReminderSchedulingError",
    "ReminderStoreError",
    "ReminderStore",
    "SQLiteReminderStore",
    "SupabaseReminderStore",
    "ReminderScheduler",
    "ImmediateNotifier",
    "ReminderSweeper",
    "RetentionJanitor",
    "render_assignment",
    "render_reminder",
    "ReminderServices",
    "build_reminder_services",
    "create_services",
]
