# core/store.py

"""
Entity store: the thin data-access seam between the services and the
backend-as-a-service.

Every collection is a Supabase table with a text ``id`` primary key.
Services only talk to ``EntityStore``; ``SupabaseStore`` is the
production implementation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple
import uuid

from supabase import Client

from core.errors import StoreError, store_error
from core.supabase_client import get_supabase_client
from core.utils import parse_timestamp, to_wire


# (field, op, value); op is one of FILTER_OPS
Filter = Tuple[str, str, Any]

FILTER_OPS = ("eq", "neq", "gt", "gte", "lt", "lte")

# Columns stored as timestamptz; converted to aware datetimes on read
TIMESTAMP_FIELDS = {
    "created_at",
    "updated_at",
    "sign_out_time",
    "checkout_time",
    "expires_at",
}


class EntityStore(ABC):

    @abstractmethod
    def create(self, collection: str, document: Dict[str, Any]) -> str:
        """Persist a new document and return its id."""

    @abstractmethod
    def create_many(self, collection: str, documents: Sequence[Dict[str, Any]]) -> List[str]:
        """
        Persist several documents in one write and return their ids in order.

        Either every document is stored or none is.
        """

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def update(
        self,
        collection: str,
        doc_id: str,
        partial: Dict[str, Any],
        expected: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Apply ``partial`` to one document.

        When ``expected`` is given the write only happens if every field in
        it still equals the given value. Returns the updated document, or
        None when nothing matched.
        """

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> bool:
        ...


def decode_document(row: Dict[str, Any]) -> Dict[str, Any]:
    doc = dict(row)
    for field in TIMESTAMP_FIELDS.intersection(doc):
        doc[field] = parse_timestamp(doc[field])
    return doc


# ============================================================
# Supabase implementation
# ============================================================
class SupabaseStore(EntityStore):
    """EntityStore backed by Supabase tables through PostgREST."""

    def __init__(self, client: Client):
        if client is None:
            raise StoreError("Supabase client not configured")
        self.client = client

    def create(self, collection, document):
        row = to_wire(dict(document))
        row.setdefault("id", str(uuid.uuid4()))

        try:
            result = (
                self.client.table(collection)
                .insert(row, returning="representation")
                .execute()
            )
        except Exception as e:
            raise store_error(e, f"Failed to insert into {collection}") from e

        if result.data:
            return str(result.data[0]["id"])
        return row["id"]

    def create_many(self, collection, documents):
        rows = [to_wire(dict(document)) for document in documents]
        if not rows:
            return []
        for row in rows:
            row.setdefault("id", str(uuid.uuid4()))

        # One INSERT statement: PostgREST runs it in a single transaction
        try:
            result = (
                self.client.table(collection)
                .insert(rows, returning="representation")
                .execute()
            )
        except Exception as e:
            raise store_error(e, f"Failed to insert into {collection}") from e

        if result.data and len(result.data) == len(rows):
            return [str(r["id"]) for r in result.data]
        return [row["id"] for row in rows]

    def get(self, collection, doc_id):
        try:
            result = (
                self.client.table(collection)
                .select("*")
                .eq("id", doc_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise store_error(e, f"Failed to fetch from {collection}") from e

        if not result.data:
            return None
        return decode_document(result.data[0])

    def query(self, collection, filters=(), order_by=None, descending=False):
        try:
            query = self.client.table(collection).select("*")
            query = _apply_filters(query, filters)
            if order_by:
                query = query.order(order_by, desc=descending)
            result = query.execute()
        except ValueError:
            raise
        except Exception as e:
            raise store_error(e, f"Failed to query {collection}") from e

        return [decode_document(row) for row in result.data or []]

    def update(self, collection, doc_id, partial, expected=None):
        try:
            query = (
                self.client.table(collection)
                .update(to_wire(dict(partial)), returning="representation")
                .eq("id", doc_id)
            )
            query = _apply_filters(
                query, [(field, "eq", value) for field, value in (expected or {}).items()]
            )
            result = query.execute()
        except Exception as e:
            raise store_error(e, f"Failed to update {collection}") from e

        if not result.data:
            return None
        return decode_document(result.data[0])

    def delete(self, collection, doc_id):
        try:
            result = (
                self.client.table(collection)
                .delete(returning="representation")
                .eq("id", doc_id)
                .execute()
            )
        except Exception as e:
            raise store_error(e, f"Failed to delete from {collection}") from e

        return bool(result.data)


def _apply_filters(query, filters: Sequence[Filter]):
    for field, op, value in filters:
        if op not in FILTER_OPS:
            raise ValueError(f"Unsupported filter operator: {op}")

        if value is None and op in ("eq", "neq"):
            # PostgREST needs IS NULL / NOT IS NULL for nulls
            query = query.is_(field, "null") if op == "eq" else query.not_.is_(field, "null")
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"

        query = getattr(query, op)(field, to_wire(value))
    return query


# ============================================================
# FastAPI dependency
# ============================================================
def get_store() -> EntityStore:
    return SupabaseStore(get_supabase_client())
