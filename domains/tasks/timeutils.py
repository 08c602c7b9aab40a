"""Epoch-millisecond helpers for reminder timestamps."""

import time
from datetime import date, datetime, timezone
from typing import Callable, Optional, Union
from zoneinfo import ZoneInfo

from dateutil.parser import parse as parse_datetime

from . import config

# Injectable "now" so tests can move the clock
Clock = Callable[[], int]

MS_PER_SECOND = 1000
MS_PER_HOUR = 60 * 60 * MS_PER_SECOND
MS_PER_DAY = 24 * MS_PER_HOUR


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * MS_PER_SECOND)


def to_epoch_ms(value: Union[datetime, date, int, float, str, None]) -> Optional[int]:
    """Convert a due date in any accepted form to epoch milliseconds.

    Accepts datetimes, dates, epoch milliseconds, or strings dateutil can
    parse ("2025-03-01", "2025-03-01 18:00", ISO 8601 with offset). Naive
    values are read in TASK_TIMEZONE. Empty values return None.

    Raises:
        ValueError: If a string cannot be parsed
    """
    if value is None or value == "":
        return None

    if isinstance(value, bool):
        raise ValueError(f"Not a due date: {value!r}")

    if isinstance(value, (int, float)):
        return int(value)

    if isinstance(value, str):
        value = parse_datetime(value.strip())
    elif not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)

    if value.tzinfo is None:
        value = value.replace(tzinfo=ZoneInfo(config.TASK_TIMEZONE))

    return int(value.timestamp() * MS_PER_SECOND)


def from_epoch_ms(value: int) -> datetime:
    """Epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(value / MS_PER_SECOND, tz=timezone.utc)


def format_ms(value: Optional[int]) -> str:
    """Readable UTC timestamp for log lines."""
    if value is None:
        return "<none>"
    return from_epoch_ms(value).strftime("%Y-%m-%d %H:%M:%S UTC")
