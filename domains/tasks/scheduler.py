"""Compute and persist reminder moments for a task."""

from typing import Iterable, Optional

from logger import logger
from utils.redact import describe_error
from .errors import ReminderSchedulingError
from .store import ReminderStore
from .timeutils import Clock, format_ms, now_ms, to_epoch_ms
from .types import REMINDER_OFFSETS, ReminderRecord, Task, TaskSnapshot


class ReminderScheduler:
    """Writes one ReminderRecord per (assignee, future offset).

    Only ever inserts. Calling schedule() again for an edited task adds a
    fresh set of records; existing ones are left alone.
    """

    def __init__(self, store: ReminderStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or now_ms

    async def schedule(self, task: Task, assignees: Iterable[str]) -> list[ReminderRecord]:
        """Schedule reminders for every assignee of a task.

        Args:
            task: Task with due_at and display fields
            assignees: Recipient identities (duplicates ignored)

        Returns:
            The records written

        Raises:
            ValueError: If task.due_at is present but unparseable
            ReminderSchedulingError: If any insert failed (written records are kept)
        """
        due_ms = to_epoch_ms(task.due_at)
        if due_ms is None:
            logger.info(f"No due date for task {task.id}, skipping reminder scheduling")
            return []

        recipients = list(dict.fromkeys(str(a) for a in assignees if a))
        if not recipients:
            logger.info(f"No assignees for task {task.id}, nothing to schedule")
            return []

        now = self.clock()
        snapshot = TaskSnapshot.of(task)
        created: list[ReminderRecord] = []
        failures: list[tuple] = []

        for offset in REMINDER_OFFSETS:
            fire_at = due_ms - offset.lead_ms

            # Only schedule if reminder time is in the future
            if fire_at <= now:
                logger.debug(f"Task {task.id}: {offset.value} reminder already elapsed, skipped")
                continue

            for recipient_id in recipients:
                record = ReminderRecord(
                    task_id=str(task.id),
                    recipient_id=recipient_id,
                    offset_kind=offset,
                    fire_at=fire_at,
                    snapshot=snapshot,
                    created_at=now,
                )
                try:
                    record.id = await self.store.insert(record)
                    created.append(record)
                except Exception as e:
                    logger.error(
                        f"Failed to schedule {offset.value} reminder for {recipient_id} "
                        f"on task {task.id}: {describe_error(e)}"
                    )
                    failures.append((recipient_id, offset, e))

        logger.info(
            f"Scheduled {len(created)} reminder(s) for task {task.id} "
            f"due {format_ms(due_ms)} ({len(recipients)} assignee(s))"
        )

        if failures:
            raise ReminderSchedulingError(str(task.id), created, failures)
        return created
