# tests/test_store.py

"""
Tests for the Supabase-backed entity store (PostgREST builder chain mocked).
"""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from core.errors import StoreError
from core.store import SupabaseStore


def chain(data=None):
    """A builder mock whose filter methods all return itself."""
    query = Mock()
    for method in ("select", "eq", "neq", "gt", "gte", "lt", "lte", "is_", "order", "limit"):
        getattr(query, method).return_value = query
    query.not_ = query
    query.execute.return_value = Mock(data=data or [])
    return query


@pytest.fixture
def mock_supabase_client():
    return Mock()


def test_requires_client():
    with pytest.raises(StoreError):
        SupabaseStore(None)


def test_create_serializes_and_returns_id(mock_supabase_client):
    insert = chain([{"id": "abc"}])
    mock_supabase_client.table.return_value.insert.return_value = insert
    store = SupabaseStore(mock_supabase_client)

    created = datetime(2025, 3, 10, 10, 0, tzinfo=timezone.utc)
    assert store.create("complaints", {"title": "Noise", "created_at": created}) == "abc"

    row = mock_supabase_client.table.return_value.insert.call_args[0][0]
    assert row["created_at"] == "2025-03-10T10:00:00+00:00"
    assert row["id"]
    mock_supabase_client.table.assert_called_with("complaints")


def test_create_many_is_one_insert(mock_supabase_client):
    insert = chain([{"id": "a"}, {"id": "b"}])
    mock_supabase_client.table.return_value.insert.return_value = insert
    store = SupabaseStore(mock_supabase_client)

    ids = store.create_many("guest_requests", [{"id": "a", "party_id": None}, {"id": "b", "party_id": "a"}])

    assert ids == ["a", "b"]
    mock_supabase_client.table.return_value.insert.assert_called_once()
    rows = mock_supabase_client.table.return_value.insert.call_args[0][0]
    assert [r["id"] for r in rows] == ["a", "b"]


def test_create_many_failure_is_store_error(mock_supabase_client):
    mock_supabase_client.table.return_value.insert.return_value.execute.side_effect = Exception("duplicate key")

    with pytest.raises(StoreError):
        SupabaseStore(mock_supabase_client).create_many("guest_requests", [{"first_name": "A"}])


def test_get_decodes_timestamps(mock_supabase_client):
    mock_supabase_client.table.return_value.select.return_value = chain(
        [{"id": "abc", "status": "pending", "created_at": "2025-03-10T10:00:00Z"}]
    )
    store = SupabaseStore(mock_supabase_client)

    doc = store.get("complaints", "abc")
    assert doc["created_at"] == datetime(2025, 3, 10, 10, 0, tzinfo=timezone.utc)


def test_get_missing(mock_supabase_client):
    mock_supabase_client.table.return_value.select.return_value = chain([])
    assert SupabaseStore(mock_supabase_client).get("complaints", "nope") is None


def test_query_applies_filters_and_order(mock_supabase_client):
    query = chain([{"id": "1"}])
    mock_supabase_client.table.return_value.select.return_value = query
    store = SupabaseStore(mock_supabase_client)

    since = datetime(2025, 3, 9, 22, 0, tzinfo=timezone.utc)
    store.query(
        "sleepover_requests",
        [("user_id", "eq", "student-1"), ("is_active", "eq", True), ("created_at", "gte", since)],
        order_by="created_at",
        descending=True,
    )

    query.eq.assert_any_call("user_id", "student-1")
    query.eq.assert_any_call("is_active", "true")
    query.gte.assert_called_with("created_at", "2025-03-09T22:00:00+00:00")
    query.order.assert_called_with("created_at", desc=True)


def test_query_null_filter_uses_is(mock_supabase_client):
    query = chain()
    mock_supabase_client.table.return_value.select.return_value = query

    SupabaseStore(mock_supabase_client).query("sleepover_requests", [("sign_out_time", "eq", None)])
    query.is_.assert_called_with("sign_out_time", "null")


def test_query_rejects_unknown_operator(mock_supabase_client):
    mock_supabase_client.table.return_value.select.return_value = chain()

    with pytest.raises(ValueError):
        SupabaseStore(mock_supabase_client).query("complaints", [("title", "like", "%x%")])


def test_conditional_update_mismatch_returns_none(mock_supabase_client):
    query = chain([])
    mock_supabase_client.table.return_value.update.return_value = query
    store = SupabaseStore(mock_supabase_client)

    result = store.update("complaints", "abc", {"status": "resolved"}, expected={"status": "pending"})

    assert result is None
    query.eq.assert_any_call("id", "abc")
    query.eq.assert_any_call("status", "pending")


def test_update_returns_decoded_row(mock_supabase_client):
    query = chain([{"id": "abc", "status": "resolved", "updated_at": "2025-03-10T11:00:00+00:00"}])
    mock_supabase_client.table.return_value.update.return_value = query

    doc = SupabaseStore(mock_supabase_client).update("complaints", "abc", {"status": "resolved"})
    assert doc["status"] == "resolved"
    assert doc["updated_at"].tzinfo is not None


def test_delete(mock_supabase_client):
    mock_supabase_client.table.return_value.delete.return_value = chain([{"id": "abc"}])
    assert SupabaseStore(mock_supabase_client).delete("announcements", "abc") is True


def test_client_errors_become_store_errors(mock_supabase_client):
    mock_supabase_client.table.return_value.select.side_effect = Exception("connection reset")

    with pytest.raises(StoreError) as exc:
        SupabaseStore(mock_supabase_client).get("complaints", "abc")
    assert exc.value.status_code == 500
