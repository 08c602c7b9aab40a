"""Tests for RetentionJanitor."""

import asyncio
from datetime import timedelta

from conftest import T0
from domains.tasks import OffsetKind, ReminderRecord, ReminderStoreError, RetentionJanitor, TaskSnapshot
from domains.tasks.timeutils import MS_PER_DAY, MS_PER_HOUR


def _insert(store, delivered_at=None, recipient="alice"):
    record = ReminderRecord(
        task_id="task-1",
        recipient_id=recipient,
        offset_kind=OffsetKind.TEN_HOURS,
        fire_at=(delivered_at or T0) - MS_PER_HOUR,
        snapshot=TaskSnapshot(title="Tidy storeroom", due_date="2025-05-20", meeting_label="Committee"),
        delivered=delivered_at is not None,
        delivered_at=delivered_at,
        created_at=T0 - 30 * MS_PER_DAY,
    )
    return asyncio.run(store.insert(record))


def test_deletes_only_stale_delivered_records(store, clock):
    old_id = _insert(store, delivered_at=T0 - 8 * MS_PER_DAY)
    recent_id = _insert(store, delivered_at=T0 - 6 * MS_PER_DAY, recipient="bob")
    pending_id = _insert(store, recipient="carol")

    janitor = RetentionJanitor(store, clock=clock)
    deleted = asyncio.run(janitor.cleanup())

    assert deleted == 1
    assert asyncio.run(store.get(old_id)) is None
    assert asyncio.run(store.get(recent_id)) is not None
    assert asyncio.run(store.get(pending_id)) is not None


def test_record_exactly_at_cutoff_is_kept(store, clock):
    record_id = _insert(store, delivered_at=T0 - 7 * MS_PER_DAY)

    deleted = asyncio.run(RetentionJanitor(store, clock=clock).cleanup())

    assert deleted == 0
    assert asyncio.run(store.get(record_id)) is not None


def test_old_undelivered_records_are_never_touched(store, clock):
    """Undelivered records belong to the sweeper, however old."""
    record_id = _insert(store)
    clock.advance(hours=24 * 60)

    deleted = asyncio.run(RetentionJanitor(store, clock=clock).cleanup())

    assert deleted == 0
    assert asyncio.run(store.get(record_id)) is not None


def test_retention_window_override(store, clock):
    _insert(store, delivered_at=T0 - 2 * MS_PER_DAY)
    janitor = RetentionJanitor(store, clock=clock)

    assert asyncio.run(janitor.cleanup()) == 0
    assert asyncio.run(janitor.cleanup(timedelta(days=1))) == 1


def test_delete_failure_is_logged_and_counted_out(store, clock):
    first = _insert(store, delivered_at=T0 - 10 * MS_PER_DAY)
    second = _insert(store, delivered_at=T0 - 9 * MS_PER_DAY, recipient="bob")
    real_delete = store.delete

    async def flaky_delete(record_id):
        if record_id == first:
            raise ReminderStoreError("locked")
        await real_delete(record_id)

    store.delete = flaky_delete
    deleted = asyncio.run(RetentionJanitor(store, clock=clock).cleanup())

    assert deleted == 1
    assert asyncio.run(store.get(first)) is not None
    assert asyncio.run(store.get(second)) is None


def test_zero_retention_window_in_constructor(store, clock):
    record_id = _insert(store, delivered_at=T0 - 1)

    deleted = asyncio.run(RetentionJanitor(store, clock=clock, retention_window=timedelta(0)).cleanup())

    assert deleted == 1
    assert asyncio.run(store.get(record_id)) is None
