"""Task reminder configuration."""

import os

import config as app_config

# Storage
REMINDERS_TABLE = os.environ.get("TASK_REMINDERS_TABLE", "task_reminders")
REMINDER_STORE_DB = os.environ.get(
    "TASK_REMINDER_DB",
    str(app_config.DATA_DIR / "task_reminders.db")
)
HTTP_TIMEOUT_SECONDS = 10

# Due dates without an explicit offset are read in this timezone
TASK_TIMEZONE = os.environ.get("TASK_TIMEZONE", "UTC")

# Sweeper
SWEEP_INTERVAL_SECONDS = int(os.environ.get("TASK_REMINDER_SWEEP_INTERVAL", 15 * 60))
SWEEP_CONCURRENCY = int(os.environ.get("TASK_REMINDER_SWEEP_CONCURRENCY", 10))
RUN_SWEEP_ON_START = os.environ.get("TASK_REMINDER_SWEEP_ON_START", "1").lower() not in ("0", "false", "no")

# Retry policy
MAX_RETRIES = 3
RETRY_BACKOFF_SECONDS = 30 * 60

# Retention (janitor runs daily at CLEANUP_HOUR)
RETENTION_DAYS = 7
CLEANUP_HOUR = 3
