"""Best-effort local alerts via Discord webhook.

The feed entry is the real delivery; this only surfaces a heads-up in the
club's alerts channel. Callers must treat any failure here as ignorable.
"""

import time
from typing import Optional, Protocol

import httpx

from logger import logger
from . import config


class LocalAlerter(Protocol):
    async def raise_local_alert(self, title: str, message: str, dedupe_key: Optional[str] = None) -> None:
        ...


class WebhookAlerter:
    """Post alerts to a Discord webhook, at most once per dedupe key per window."""

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        dedupe_seconds: Optional[int] = None,
        username: Optional[str] = None
    ):
        self.webhook_url = webhook_url or config.ALERTS_WEBHOOK_URL
        self.dedupe_seconds = dedupe_seconds or config.ALERT_DEDUPE_SECONDS
        self.username = username or config.ALERTS_USERNAME
        self._last_alerted: dict[str, float] = {}

    def _is_duplicate(self, dedupe_key: Optional[str]) -> bool:
        if not dedupe_key:
            return False

        now = time.monotonic()
        # Forget expired keys so the map stays small
        self._last_alerted = {
            k: t for k, t in self._last_alerted.items()
            if now - t < self.dedupe_seconds
        }
        if dedupe_key in self._last_alerted:
            return True

        self._last_alerted[dedupe_key] = now
        return False

    async def raise_local_alert(self, title: str, message: str, dedupe_key: Optional[str] = None) -> None:
        """Send alert to Discord via webhook.

        Args:
            title: Alert title (bold first line)
            message: Alert body
            dedupe_key: Alerts sharing a key within the window are dropped
        """
        if not self.webhook_url:
            logger.debug(f"No alerts webhook configured, would alert: {title}")
            return

        if self._is_duplicate(dedupe_key):
            logger.debug(f"Skipping duplicate alert {dedupe_key}")
            return

        payload = {
            "content": f"**{title}**\n{message}",
            "username": self.username,
        }

        async with httpx.AsyncClient(timeout=config.HTTP_TIMEOUT_SECONDS) as client:
            response = await client.post(self.webhook_url, json=payload)
            response.raise_for_status()
        logger.info(f"Sent local alert: {title}")
