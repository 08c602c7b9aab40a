"""Render reminder and assignment records into feed notifications."""

from domains.notifications import Notification, NotificationCategory, NotificationPriority
from .types import OffsetKind, ReminderRecord, Task, TaskSnapshot

# offset_kind -> (title, message template, priority)
REMINDER_COPY = {
    OffsetKind.ONE_DAY: (
        "Task Due Tomorrow",
        'Task "{title}" from {meeting} is due tomorrow!',
        NotificationPriority.NORMAL,
    ),
    OffsetKind.TEN_HOURS: (
        "Task Due in 10 Hours",
        'Task "{title}" from {meeting} is due in 10 hours.',
        NotificationPriority.NORMAL,
    ),
    OffsetKind.FIVE_HOURS: (
        "Task Due in 5 Hours",
        'Task "{title}" from {meeting} is due in 5 hours!',
        NotificationPriority.MEDIUM,
    ),
    OffsetKind.TWO_HOURS: (
        "Task Due Soon!",
        'Task "{title}" from {meeting} is due in 2 hours!',
        NotificationPriority.HIGH,
    ),
}

# Records written with a kind this version doesn't know
FALLBACK_COPY = (
    "Task Reminder",
    "Don't forget about task \"{title}\" from {meeting}",
    NotificationPriority.NORMAL,
)

ASSIGNMENT_TITLE = "New Task Assigned"
ASSIGNMENT_MESSAGE = 'You have been assigned a new task: "{title}" for meeting "{meeting}"'


def render_reminder(record: ReminderRecord) -> Notification:
    """Build the feed entry for a due reminder from its snapshot."""
    snapshot: TaskSnapshot = record.snapshot
    title, template, priority = REMINDER_COPY.get(record.offset_kind, FALLBACK_COPY)

    return Notification(
        title=title,
        message=template.format(title=snapshot.title, meeting=snapshot.meeting_label),
        category=NotificationCategory.TASK_REMINDER,
        priority=priority,
        payload={
            "taskId": record.task_id,
            "taskTitle": snapshot.title,
            "dueAt": snapshot.due_date,
            "offsetKind": record.offset_value,
        },
    )


def render_assignment(task: Task) -> Notification:
    """Build the one-shot 'you were assigned' feed entry."""
    due = TaskSnapshot.of(task).due_date if task.due_at not in (None, "") else None

    return Notification(
        title=ASSIGNMENT_TITLE,
        message=ASSIGNMENT_MESSAGE.format(title=task.title, meeting=task.meeting_label),
        category=NotificationCategory.TASK_ASSIGNMENT,
        payload={
            "taskId": task.id,
            "taskTitle": task.title,
            "meetingName": task.meeting_label,
            "dueAt": due,
            "clubId": task.club_id,
        },
    )


def reminder_dedupe_key(record: ReminderRecord) -> str:
    """Alert tag: the shared alerts channel gets one post per task and bucket."""
    return f"task-reminder-{record.task_id}-{record.offset_value}"
