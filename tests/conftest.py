"""Pytest configuration and fixtures."""

import os
import sys
import tempfile

import pytest
from unittest.mock import AsyncMock, Mock, patch

# Keep logs and local databases out of the working tree
os.environ.setdefault("CLUB_PORTAL_DATA_DIR", tempfile.mkdtemp(prefix="club_portal_test_"))

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domains.notifications import NotificationDeliveryError  # noqa: E402
from domains.tasks import SQLiteReminderStore  # noqa: E402
from domains.tasks.timeutils import MS_PER_HOUR  # noqa: E402

# 2025-06-02 09:00:00 UTC
T0 = 1748854800000


class FakeClock:
    """Epoch-ms clock the tests move by hand."""

    def __init__(self, now: int = T0):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, hours: float = 0, ms: int = 0) -> int:
        self.now += int(hours * MS_PER_HOUR) + ms
        return self.now


class RecordingSink:
    """Notification sink that records appends and can be told to fail."""

    def __init__(self):
        self.delivered: list[tuple] = []
        self.fail_for: set[str] = set()
        self.fail_all = False
        self.calls = 0

    async def append_notification(self, recipient_id, notification):
        self.calls += 1
        if self.fail_all or recipient_id in self.fail_for:
            raise NotificationDeliveryError(f"feed unavailable for {recipient_id}")
        self.delivered.append((recipient_id, notification))

    def titles_for(self, recipient_id: str) -> list[str]:
        return [n.title for r, n in self.delivered if r == recipient_id]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def temp_db_path():
    """Unique temp database file, removed after the test."""
    fd, temp_path = tempfile.mkstemp(suffix="_reminders_test.db")
    os.close(fd)

    yield temp_path

    for suffix in ["", "-wal", "-shm"]:
        try:
            os.unlink(temp_path + suffix)
        except FileNotFoundError:
            pass


@pytest.fixture
def store(temp_db_path):
    """Fresh SQLite reminder store for each test."""
    reminder_store = SQLiteReminderStore(temp_db_path)
    yield reminder_store
    reminder_store.close()


@pytest.fixture
def mock_httpx_client():
    """Create a mock httpx client."""
    with patch('httpx.AsyncClient') as mock:
        client = AsyncMock()
        mock.return_value.__aenter__.return_value = client
        yield client


def http_response(json_data=None, status_code: int = 200) -> Mock:
    """Fake httpx response with json() and raise_for_status()."""
    import httpx

    response = Mock()
    response.status_code = status_code
    response.json = Mock(return_value=json_data)
    if status_code >= 400:
        request = httpx.Request("GET", "https://example.supabase.co/rest/v1/test")
        real = httpx.Response(status_code, request=request)
        response.raise_for_status = Mock(
            side_effect=httpx.HTTPStatusError(f"HTTP {status_code}", request=request, response=real)
        )
    else:
        response.raise_for_status = Mock(return_value=None)
    return response
