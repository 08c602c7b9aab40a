"""Background task reminder jobs.

- Sweep: every SWEEP_INTERVAL_SECONDS (15 min), delivers due reminders.
  Runs once immediately on start so reminders that fell due while the
  service was down go out without waiting a full interval.
- Cleanup: daily at CLEANUP_HOUR, deletes delivered reminders past retention.
"""

from datetime import datetime, timezone
from typing import Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from domains.tasks import ReminderServices, SweepResult
from domains.tasks import config
from logger import logger
from utils.redact import describe_error

SWEEP_JOB_ID = "task_reminder_sweep"
CLEANUP_JOB_ID = "task_reminder_cleanup"


class TaskReminderProcessor:
    """Owns the periodic sweep and cleanup jobs for one service instance.

    Usage:
        processor = TaskReminderProcessor(services)
        processor.start()
        ...
        processor.stop()

    Pass a shared scheduler to add the jobs alongside others; otherwise the
    processor creates, starts and shuts down its own.
    """

    def __init__(self, services: ReminderServices, scheduler: Optional[AsyncIOScheduler] = None):
        self.services = services
        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler if scheduler is not None else AsyncIOScheduler()
        self._started = False

    @property
    def running(self) -> bool:
        return self._started

    async def run_sweep(self) -> Optional[SweepResult]:
        """One sweep; run-level errors are logged and retried next tick."""
        try:
            return await self.services.sweeper.process_due()
        except Exception as e:
            logger.error(f"Error processing scheduled reminders: {describe_error(e)}")
            return None

    async def run_cleanup(self) -> Optional[int]:
        """One retention pass; errors are logged and retried tomorrow."""
        logger.info("Running task reminder cleanup job")
        try:
            return await self.services.janitor.cleanup()
        except Exception as e:
            logger.error(f"Error cleaning up old reminders: {describe_error(e)}")
            return None

    def start(self) -> None:
        if self._started:
            return

        first_run = datetime.now(timezone.utc) if config.RUN_SWEEP_ON_START else None
        self.scheduler.add_job(
            self.run_sweep,
            'interval',
            seconds=config.SWEEP_INTERVAL_SECONDS,
            id=SWEEP_JOB_ID,
            next_run_time=first_run,
            max_instances=1,  # Prevent overlapping sweeps
            coalesce=True,    # Combine missed runs
            replace_existing=True,
        )
        self.scheduler.add_job(
            self.run_cleanup,
            'cron',
            hour=config.CLEANUP_HOUR,
            minute=0,
            id=CLEANUP_JOB_ID,
            replace_existing=True,
        )

        if self._owns_scheduler:
            self.scheduler.start()

        self._started = True
        logger.info(
            f"Task reminder processor started (sweep every {config.SWEEP_INTERVAL_SECONDS}s, "
            f"cleanup daily at {config.CLEANUP_HOUR:02d}:00)"
        )

    def stop(self) -> None:
        if not self._started:
            return

        for job_id in (SWEEP_JOB_ID, CLEANUP_JOB_ID):
            try:
                self.scheduler.remove_job(job_id)
            except JobLookupError:
                pass

        if self._owns_scheduler:
            self.scheduler.shutdown(wait=False)

        self._started = False
        logger.info("Task reminder processor stopped")


def register_task_reminders(scheduler, services: ReminderServices) -> TaskReminderProcessor:
    """Register the reminder jobs on a shared scheduler.

    Args:
        scheduler: APScheduler instance (started by the caller)
        services: Reminder services built at startup

    Returns:
        The processor, so the caller can stop() it on shutdown
    """
    processor = TaskReminderProcessor(services, scheduler=scheduler)
    processor.start()
    return processor
