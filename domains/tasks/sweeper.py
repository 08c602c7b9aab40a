"""Deliver due reminders with bounded retries.

One sweep:
1. Query undelivered records (equality filter only)
2. Keep those with fire_at <= now
3. Deliver each one concurrently (bounded)
4. On success: mark delivered
5. On failure: retry_count + 1, then dead-letter (delete) at max retries,
   otherwise push fire_at out by the backoff

A failing query aborts the whole sweep before anything is mutated. Per-record
failures never affect other records.
"""

import asyncio
from typing import Optional

from domains.notifications import NotificationDelivery
from logger import logger
from utils.redact import describe_error
from . import config
from .messages import reminder_dedupe_key, render_reminder
from .store import ReminderStore
from .timeutils import MS_PER_SECOND, Clock, now_ms
from .types import ReminderRecord, SweepResult

DELIVERED = "delivered"
FAILED = "failed"
DEAD_LETTERED = "dead_lettered"


class ReminderSweeper:
    """Periodic scan-and-deliver over the reminder store."""

    def __init__(
        self,
        store: ReminderStore,
        delivery: NotificationDelivery,
        clock: Optional[Clock] = None,
        max_retries: Optional[int] = None,
        retry_backoff_seconds: Optional[int] = None,
        concurrency: Optional[int] = None
    ):
        """Initialize sweeper.

        Args:
            store: Reminder store
            delivery: Notification delivery used for every due record
            clock: Epoch-ms clock (default wall clock)
            max_retries: Failed attempts before a record is dead-lettered (default from config)
            retry_backoff_seconds: Delay before a failed record is due again (default from config)
            concurrency: Max records delivered at once (default from config)
        """
        self.store = store
        self.delivery = delivery
        self.clock = clock or now_ms
        self.max_retries = max_retries if max_retries is not None else config.MAX_RETRIES
        self.retry_backoff_seconds = (
            retry_backoff_seconds if retry_backoff_seconds is not None else config.RETRY_BACKOFF_SECONDS
        )
        self.concurrency = concurrency or config.SWEEP_CONCURRENCY

    async def process_due(self) -> SweepResult:
        """Run one sweep and return its counters."""
        now = self.clock()

        # Query for undelivered reminders only, filter by fire_at in memory
        pending = await self.store.query_by_field("delivered", False)
        due = [r for r in pending if not r.delivered and r.fire_at <= now]

        result = SweepResult(due=len(due))
        if not due:
            logger.debug("Reminder sweep: no due reminders")
            return result

        logger.info(f"Reminder sweep: {len(due)} due of {len(pending)} pending")

        semaphore = asyncio.Semaphore(self.concurrency)

        async def _bounded(record: ReminderRecord) -> str:
            async with semaphore:
                return await self._process_one(record, now)

        outcomes = await asyncio.gather(*(_bounded(r) for r in due))

        result.delivered = outcomes.count(DELIVERED)
        result.failed = outcomes.count(FAILED)
        result.dead_lettered = outcomes.count(DEAD_LETTERED)

        logger.info(
            f"Reminder sweep complete - delivered={result.delivered}, "
            f"failed={result.failed}, dead_lettered={result.dead_lettered}"
        )
        return result

    async def _process_one(self, record: ReminderRecord, now: int) -> str:
        if record.retry_count >= self.max_retries:
            # Out of attempts on an earlier sweep but the delete didn't stick
            return await self._dead_letter(record, record.retry_count, record.last_error or "")

        try:
            await self.delivery.deliver(
                record.recipient_id,
                render_reminder(record),
                dedupe_key=reminder_dedupe_key(record),
            )
            await self.store.update_fields(record.id, {"delivered": True, "delivered_at": now})
        except Exception as e:
            return await self._handle_failure(record, now, e)

        logger.info(f"Sent reminder: {record.offset_value} for task {record.task_id} to {record.recipient_id}")
        return DELIVERED

    async def _handle_failure(self, record: ReminderRecord, now: int, error: Exception) -> str:
        error_text = describe_error(error)
        retry_count = record.retry_count + 1

        if retry_count >= self.max_retries:
            return await self._dead_letter(record, retry_count, error_text)

        try:
            next_fire_at = now + self.retry_backoff_seconds * MS_PER_SECOND
            await self.store.update_fields(record.id, {
                "fire_at": next_fire_at,
                "retry_count": retry_count,
                "last_error": error_text,
            })
            logger.warning(f"Reminder {record.id} retry {retry_count} scheduled: {error_text}")
        except Exception as e:
            # Record keeps its previous state and is picked up by a later sweep
            logger.error(f"Failed to record delivery failure for reminder {record.id}: {describe_error(e)}")

        return FAILED

    async def _dead_letter(self, record: ReminderRecord, retry_count: int, error_text: str) -> str:
        """Delete an exhausted record; if that fails, persist the count so it is never delivered again."""
        try:
            await self.store.delete(record.id)
        except Exception as e:
            logger.error(f"Failed to dead-letter reminder {record.id}: {describe_error(e)}")
            try:
                await self.store.update_fields(record.id, {
                    "retry_count": retry_count,
                    "last_error": error_text,
                })
            except Exception as update_error:
                logger.error(
                    f"Failed to record exhausted retries for reminder {record.id}: "
                    f"{describe_error(update_error)}"
                )
            return FAILED

        logger.warning(
            f"Dead-lettered reminder {record.id} ({record.offset_value}, task {record.task_id}) "
            f"after {retry_count} failed attempts: {error_text}"
        )
        return DEAD_LETTERED
