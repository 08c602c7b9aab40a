"""Retention cleanup for delivered reminders."""

from datetime import timedelta
from typing import Optional

from logger import logger
from utils.redact import describe_error
from . import config
from .store import ReminderStore
from .timeutils import MS_PER_SECOND, Clock, now_ms


class RetentionJanitor:
    """Deletes delivered reminders once they are older than the retention window.

    Undelivered records are never touched here; only the sweeper removes them.
    """

    def __init__(
        self,
        store: ReminderStore,
        clock: Optional[Clock] = None,
        retention_window: Optional[timedelta] = None
    ):
        self.store = store
        self.clock = clock or now_ms
        self.retention_window = (
            retention_window if retention_window is not None else timedelta(days=config.RETENTION_DAYS)
        )

    async def cleanup(self, retention_window: Optional[timedelta] = None) -> int:
        """Delete stale delivered reminders.

        Args:
            retention_window: Override of the configured window

        Returns:
            Number of records deleted
        """
        window = retention_window if retention_window is not None else self.retention_window
        cutoff = self.clock() - int(window.total_seconds() * MS_PER_SECOND)

        delivered = await self.store.query_by_field("delivered", True)
        stale = [
            r for r in delivered
            if r.delivered and r.delivered_at is not None and r.delivered_at < cutoff
        ]

        deleted = 0
        for record in stale:
            try:
                await self.store.delete(record.id)
                deleted += 1
            except Exception as e:
                logger.error(f"Failed to delete old reminder {record.id}: {describe_error(e)}")

        if deleted:
            logger.info(f"Cleaned up {deleted} old task reminders")
        else:
            logger.debug("Reminder cleanup: no old reminders to delete")

        return deleted
