"""Notification delivery configuration."""

import os

# Supabase table holding every user's notification feed
NOTIFICATIONS_TABLE = os.environ.get("NOTIFICATIONS_TABLE", "notifications")

# Default deep link for task notifications in the portal UI
DEFAULT_LINK_TARGET = "/meetings"

# Discord webhook used for local alerts (optional)
ALERTS_WEBHOOK_URL = os.environ.get("DISCORD_WEBHOOK_TASK_ALERTS")
ALERTS_USERNAME = "Club Portal Reminders"

# Same dedupe key is alerted at most once per window
ALERT_DEDUPE_SECONDS = int(os.environ.get("ALERT_DEDUPE_SECONDS", 3600))

# HTTP timeout for Supabase / webhook calls
HTTP_TIMEOUT_SECONDS = 10
