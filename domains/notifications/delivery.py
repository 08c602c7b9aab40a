"""Notification delivery shared by reminders, assignments and attendance warnings."""

from typing import Optional

from logger import logger
from utils.redact import describe_error
from .alerts import LocalAlerter
from .sink import NotificationSink
from .types import Notification


class NotificationDelivery:
    """Append to the recipient's feed, then raise an optional local alert.

    Feed errors propagate to the caller. Alert errors are logged and
    swallowed: a delivered feed entry is never undone by a failed alert.
    """

    def __init__(self, sink: NotificationSink, alerter: Optional[LocalAlerter] = None):
        self.sink = sink
        self.alerter = alerter

    async def deliver(
        self,
        recipient_id: str,
        notification: Notification,
        dedupe_key: Optional[str] = None
    ) -> None:
        await self.sink.append_notification(recipient_id, notification)

        if self.alerter is None:
            return

        try:
            await self.alerter.raise_local_alert(notification.title, notification.message, dedupe_key)
        except Exception as e:
            logger.debug(f"Local alert failed for {recipient_id}: {describe_error(e)}")
