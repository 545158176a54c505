"""
Query — builder for filtered, ordered and paginated reads of one collection.

Usage::

    admins = await (
        users.find()
        .where("details.is_admin", "==", True)
        .order_by("name", "desc")
        .limit(10)
        .get()
    )

Every builder method returns the query itself so calls can be chained.
"""

from __future__ import annotations

from typing import Any

from docvault.core.constants import QueryOperator, SortDirection
from docvault.core.logging import get_logger
from docvault.errors import QueryError
from docvault.persistence.base import (
    Condition,
    DocumentStore,
    OrderBy,
    QuerySpec,
    StoredDocument,
    is_absent,
    resolve_path,
)
from docvault.utils import format_document

logger = get_logger(__name__)

_LIST_OPERATORS = {QueryOperator.IN, QueryOperator.NOT_IN, QueryOperator.ARRAY_CONTAINS_ANY}


def _non_negative(value: int, clause: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise QueryError(f"{clause}() expects a non-negative integer, got {value!r}")
    return value


class Query:
    """Collects clauses and runs them against a DocumentStore."""

    def __init__(self, collection: str, store: DocumentStore) -> None:
        self.collection = collection
        self.store = store
        self.spec = QuerySpec()

    def where(self, field: str, operator: str, value: Any) -> "Query":
        """
        Keep documents whose `field` (dotted path) satisfies `operator` against `value`.

        Operators: ==, !=, <, <=, >, >=, array-contains, in,
        array-contains-any, not-in.  The list operators expect a list value.
        """
        try:
            op = QueryOperator(operator)
        except ValueError:
            raise QueryError(f"Invalid operator {operator!r} for {field}", field=field) from None

        if op in _LIST_OPERATORS and not isinstance(value, (list, tuple)):
            raise QueryError(f"Operator {op.value!r} for {field} expects a list value", field=field)

        self.spec.conditions.append(Condition(field, op, value))
        return self

    def order_by(self, field: str, direction: str = "asc") -> "Query":
        """Sort by `field`, ascending unless `direction` is "desc"."""
        try:
            self.spec.order_by = OrderBy(field, SortDirection(direction))
        except ValueError:
            raise QueryError(f"Invalid sort direction {direction!r} for {field}", field=field) from None
        return self

    def limit(self, limit: int) -> "Query":
        """Return at most the first `limit` matching documents."""
        self.spec.limit = _non_negative(limit, "limit")
        self.spec.limit_to_last = None
        return self

    def limit_to_last(self, limit: int) -> "Query":
        """Return at most the last `limit` matching documents.  Needs order_by()."""
        self.spec.limit_to_last = _non_negative(limit, "limit_to_last")
        self.spec.limit = None
        return self

    def start_after(self, snapshot: StoredDocument) -> "Query":
        """Start after the given document (exclusive), relative to the query order."""
        self.spec.start_after = self._cursor(snapshot, "start_after")
        return self

    def end_before(self, snapshot: StoredDocument) -> "Query":
        """End before the given document (exclusive), relative to the query order."""
        self.spec.end_before = self._cursor(snapshot, "end_before")
        return self

    def offset(self, offset: int) -> "Query":
        """Skip the first `offset` matching documents."""
        self.spec.offset = _non_negative(offset, "offset")
        return self

    def _cursor(self, snapshot: StoredDocument, clause: str) -> StoredDocument:
        if not isinstance(snapshot, StoredDocument) or not snapshot.exists:
            raise QueryError(f"{clause}() expects the snapshot of an existing document")
        order = self.spec.order_by
        if order is not None and is_absent(resolve_path(snapshot.data, order.field)):
            raise QueryError(f"{clause}() document lacks the order field {order.field}", field=order.field)
        return snapshot

    async def get(self, skip_formatting: bool = False) -> list[dict[str, Any]] | list[StoredDocument]:
        """
        Run the query.

        Returns formatted records ({"id": ..., **data}), or the raw
        StoredDocument snapshots when `skip_formatting` is set.
        """
        documents = await self.store.run_query(self.collection, self.spec)
        logger.debug("Query executed", collection=self.collection, results=len(documents))
        if skip_formatting:
            return documents
        return [format_document(document) for document in documents]

    async def count(self) -> int:
        """Number of matching documents, ignoring limit() and limit_to_last()."""
        return await self.store.count(self.collection, self.spec)
