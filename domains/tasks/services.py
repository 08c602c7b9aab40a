"""Wire the reminder components to a backend.

Supabase is used when SUPABASE_URL and SUPABASE_KEY are set; otherwise
everything runs on a local SQLite file.
"""

from dataclasses import dataclass
from typing import Optional

import config as app_config
from domains.notifications import (
    NotificationDelivery,
    NotificationSink,
    SQLiteNotificationFeed,
    SupabaseNotificationSink,
    WebhookAlerter,
)
from logger import logger
from . import config
from .assignment import ImmediateNotifier
from .janitor import RetentionJanitor
from .scheduler import ReminderScheduler
from .store import ReminderStore, SQLiteReminderStore, SupabaseReminderStore
from .sweeper import ReminderSweeper
from .timeutils import Clock


@dataclass
class ReminderServices:
    """Everything the host application needs, built once at startup."""
    store: ReminderStore
    sink: NotificationSink
    delivery: NotificationDelivery
    scheduler: ReminderScheduler
    notifier: ImmediateNotifier
    sweeper: ReminderSweeper
    janitor: RetentionJanitor

    def close(self) -> None:
        """Release local database connections (no-op for Supabase)."""
        for backend in (self.store, self.sink):
            close = getattr(backend, "close", None)
            if close is not None:
                close()


def create_services(
    store: ReminderStore,
    sink: NotificationSink,
    alerter: Optional[WebhookAlerter] = None,
    clock: Optional[Clock] = None
) -> ReminderServices:
    """Build the component graph around an existing store and sink."""
    delivery = NotificationDelivery(sink, alerter)
    return ReminderServices(
        store=store,
        sink=sink,
        delivery=delivery,
        scheduler=ReminderScheduler(store, clock=clock),
        notifier=ImmediateNotifier(delivery),
        sweeper=ReminderSweeper(store, delivery, clock=clock),
        janitor=RetentionJanitor(store, clock=clock),
    )


def build_reminder_services(clock: Optional[Clock] = None) -> ReminderServices:
    """Build services from configuration."""
    if app_config.SUPABASE_URL and app_config.SUPABASE_KEY:
        store = SupabaseReminderStore()
        sink = SupabaseNotificationSink()
        logger.info("Task reminders using Supabase backend")
    else:
        logger.warning(f"Supabase not configured, task reminders using SQLite at {config.REMINDER_STORE_DB}")
        store = SQLiteReminderStore(config.REMINDER_STORE_DB)
        sink = SQLiteNotificationFeed(config.REMINDER_STORE_DB)

    return create_services(store, sink, alerter=WebhookAlerter(), clock=clock)
