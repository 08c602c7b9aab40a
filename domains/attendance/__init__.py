"""Attendance warnings - reuses the notification delivery contract unchanged."""

from .absence_warnings import AttendanceWarningNotifier

__all__ = ["AttendanceWarningNotifier"]
