"""Tests for the reminder store backends.

SQLite runs against a real temp file; Supabase runs against a mocked httpx client.
"""

import asyncio

import pytest

from conftest import T0, http_response
from domains.tasks import (
    OffsetKind,
    ReminderRecord,
    ReminderStoreError,
    SupabaseReminderStore,
    TaskSnapshot,
)

SNAPSHOT = TaskSnapshot(title="Order shirts", due_date="2025-06-05T18:00:00+00:00", meeting_label="Kit Review")


def _record(**overrides) -> ReminderRecord:
    fields = dict(
        task_id="task-1",
        recipient_id="alice",
        offset_kind=OffsetKind.FIVE_HOURS,
        fire_at=T0,
        snapshot=SNAPSHOT,
        created_at=T0 - 1000,
    )
    fields.update(overrides)
    return ReminderRecord(**fields)


# ============================================================
# SQLite
# ============================================================

def test_sqlite_insert_and_get(store):
    record_id = asyncio.run(store.insert(_record()))

    stored = asyncio.run(store.get(record_id))
    assert stored.id == record_id
    assert stored.task_id == "task-1"
    assert stored.offset_kind is OffsetKind.FIVE_HOURS
    assert stored.fire_at == T0
    assert stored.snapshot == SNAPSHOT
    assert stored.delivered is False
    assert stored.created_at == T0 - 1000


def test_sqlite_ids_are_unique(store):
    ids = {asyncio.run(store.insert(_record())) for _ in range(5)}
    assert len(ids) == 5


def test_sqlite_query_by_field(store):
    asyncio.run(store.insert(_record(recipient_id="alice")))
    asyncio.run(store.insert(_record(recipient_id="bob")))
    asyncio.run(store.insert(_record(recipient_id="bob", delivered=True, delivered_at=T0)))

    assert len(asyncio.run(store.query_by_field("recipient_id", "bob"))) == 2
    assert len(asyncio.run(store.query_by_field("delivered", False))) == 2
    assert len(asyncio.run(store.query_by_field("delivered", True))) == 1
    assert len(asyncio.run(store.query_by_field("delivered_at", None))) == 2
    assert asyncio.run(store.query_by_field("task_id", "missing")) == []


def test_sqlite_update_fields(store):
    record_id = asyncio.run(store.insert(_record()))

    asyncio.run(store.update_fields(record_id, {"retry_count": 2, "last_error": "boom", "fire_at": T0 + 5}))

    stored = asyncio.run(store.get(record_id))
    assert stored.retry_count == 2
    assert stored.last_error == "boom"
    assert stored.fire_at == T0 + 5


def test_sqlite_delete(store):
    record_id = asyncio.run(store.insert(_record()))

    asyncio.run(store.delete(record_id))

    assert asyncio.run(store.get(record_id)) is None


def test_unknown_field_rejected(store):
    with pytest.raises(ValueError):
        asyncio.run(store.query_by_field("fire_at; DROP TABLE task_reminders", 1))
    with pytest.raises(ValueError):
        asyncio.run(store.update_fields("x", {"nope": 1}))


def test_sqlite_errors_are_wrapped(store):
    asyncio.run(store.insert(_record()))
    store._get_connection().execute("DROP TABLE task_reminders")

    with pytest.raises(ReminderStoreError):
        asyncio.run(store.query_by_field("delivered", False))


# ============================================================
# Supabase
# ============================================================

@pytest.fixture
def supabase_store():
    return SupabaseReminderStore(url="https://example.supabase.co", key="test-key", table="task_reminders")


def test_supabase_requires_configuration(monkeypatch):
    import config as app_config

    monkeypatch.setattr(app_config, "SUPABASE_URL", None)
    monkeypatch.setattr(app_config, "SUPABASE_KEY", None)

    with pytest.raises(ReminderStoreError):
        SupabaseReminderStore(url="", key="")


def test_supabase_insert(supabase_store, mock_httpx_client):
    mock_httpx_client.post.return_value = http_response([{"id": 101}], status_code=201)

    record_id = asyncio.run(supabase_store.insert(_record()))

    assert record_id == "101"
    call = mock_httpx_client.post.call_args
    assert call.args[0] == "https://example.supabase.co/rest/v1/task_reminders"
    assert call.kwargs["headers"]["apikey"] == "test-key"
    assert call.kwargs["headers"]["Authorization"] == "Bearer test-key"
    body = call.kwargs["json"]
    assert body["offset_kind"] == "5_hours"
    assert body["delivered"] is False
    assert body["snapshot"]["title"] == "Order shirts"


def test_supabase_insert_without_id_fails(supabase_store, mock_httpx_client):
    mock_httpx_client.post.return_value = http_response([], status_code=201)

    with pytest.raises(ReminderStoreError):
        asyncio.run(supabase_store.insert(_record()))


def test_supabase_query_builds_equality_filter(supabase_store, mock_httpx_client):
    row = {**_record().to_row(), "id": 7}
    mock_httpx_client.get.return_value = http_response([row])

    records = asyncio.run(supabase_store.query_by_field("delivered", False))

    assert len(records) == 1
    assert records[0].id == "7"
    params = mock_httpx_client.get.call_args.kwargs["params"]
    assert params == {"delivered": "eq.false", "select": "*"}


def test_supabase_query_null(supabase_store, mock_httpx_client):
    mock_httpx_client.get.return_value = http_response([])

    asyncio.run(supabase_store.query_by_field("delivered_at", None))

    params = mock_httpx_client.get.call_args.kwargs["params"]
    assert params["delivered_at"] == "is.null"


def test_supabase_update_and_delete(supabase_store, mock_httpx_client):
    mock_httpx_client.patch.return_value = http_response(None, status_code=204)
    mock_httpx_client.delete.return_value = http_response(None, status_code=204)

    asyncio.run(supabase_store.update_fields("7", {"delivered": True, "delivered_at": T0}))
    asyncio.run(supabase_store.delete("8"))

    patch_call = mock_httpx_client.patch.call_args
    assert patch_call.kwargs["params"] == {"id": "eq.7"}
    assert patch_call.kwargs["json"] == {"delivered": True, "delivered_at": T0}
    assert mock_httpx_client.delete.call_args.kwargs["params"] == {"id": "eq.8"}


def test_supabase_http_error_is_wrapped(supabase_store, mock_httpx_client):
    mock_httpx_client.get.return_value = http_response({"message": "boom"}, status_code=500)

    with pytest.raises(ReminderStoreError):
        asyncio.run(supabase_store.query_by_field("delivered", False))
