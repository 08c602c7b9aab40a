"""Immediate 'you were assigned' notifications."""

from domains.notifications import NotificationDelivery
from logger import logger
from .messages import render_assignment
from .types import Task


class ImmediateNotifier:
    """Fires one assignment notification per call; never touches the reminder store.

    No retry: errors reach the caller, who may ignore them since the
    assignment itself has already been saved.
    """

    def __init__(self, delivery: NotificationDelivery):
        self.delivery = delivery

    async def notify_assignment(self, recipient_id: str, task: Task) -> None:
        notification = render_assignment(task)
        await self.delivery.deliver(
            recipient_id,
            notification,
            dedupe_key=f"task-assignment-{task.id}-{recipient_id}",
        )
        logger.info(f"Task assignment notification sent to user {recipient_id} for task {task.id}")
