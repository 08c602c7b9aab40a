"""Notification value types shared by every producer."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from . import config


class NotificationCategory(str, Enum):
    """Lets the portal UI filter the feed by source."""
    TASK_REMINDER = "task_reminder"
    TASK_ASSIGNMENT = "task_assignment"
    ATTENDANCE_WARNING = "attendance_warning"
    MEMBER_ATTENDANCE_WARNING = "member_attendance_warning"


class NotificationPriority(str, Enum):
    NORMAL = "normal"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Notification:
    """One rendered entry for a recipient's notification feed."""
    title: str
    message: str
    category: NotificationCategory
    link_target: str = config.DEFAULT_LINK_TARGET
    payload: dict[str, Any] = field(default_factory=dict)
    priority: NotificationPriority = NotificationPriority.NORMAL

    def to_row(self, recipient_id: str, created_at: str) -> dict:
        """Feed row as stored in the notifications table."""
        return {
            "user_id": recipient_id,
            "title": self.title,
            "message": self.message,
            "type": self.category.value,
            "link": self.link_target,
            "priority": self.priority.value,
            "data": dict(self.payload),
            "read": False,
            "created_at": created_at,
        }
