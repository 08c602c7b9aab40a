"""Scheduled background jobs."""

from .task_reminders import TaskReminderProcessor, register_task_reminders

__all__ = [
    "TaskReminderProcessor",
    "register_task_reminders",
]
