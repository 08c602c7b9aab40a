"""Notification delivery: render-agnostic feed append plus optional local alerts.

Any producer (task reminders, assignment notices, attendance warnings) hands a
rendered Notification to NotificationDelivery.
"""

from .types import Notification, NotificationCategory, NotificationPriority
from .sink import (
    NotificationDeliveryError,
    NotificationSink,
    SupabaseNotificationSink,
    SQLiteNotificationFeed,
)
from .alerts import LocalAlerter, WebhookAlerter
from .delivery import NotificationDelivery

__all__ = [
    "Notification",
    "NotificationCategory",
    "NotificationPriority",
    "NotificationDeliveryError",
    "NotificationSink",
    "SupabaseNotificationSink",
    "SQLiteNotificationFeed",
    "LocalAlerter",
    "WebhookAlerter",
    "NotificationDelivery",
]
