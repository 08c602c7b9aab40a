"""Attendance warning configuration."""

import os

# A member is warned when consecutive missed meetings reach this count
WARNING_THRESHOLD = int(os.environ.get("ATTENDANCE_WARNING_THRESHOLD", 3))
