"""
In-process evaluation of a QuerySpec over stored documents.

Follows document-store semantics rather than SQL ones:
    - a filter on a field never matches documents lacking that field
    - range filters only compare values of the same kind
    - ordering drops documents without the order field and breaks ties by id
    - cursors position by (order value, id) and must carry the order field
"""

from __future__ import annotations

import functools
from collections.abc import Iterable, Mapping
from typing import Any

from docvault.core.constants import QueryOperator, SortDirection
from docvault.errors import QueryError
from docvault.persistence.base import Condition, QuerySpec, StoredDocument, is_absent, resolve_path
from docvault.schema.rules import kind_of

_RANGE_OPERATORS = {
    QueryOperator.LT: lambda a, b: a < b,
    QueryOperator.LTE: lambda a, b: a <= b,
    QueryOperator.GT: lambda a, b: a > b,
    QueryOperator.GTE: lambda a, b: a >= b,
}


def _equal(a: Any, b: Any) -> bool:
    return kind_of(a) == kind_of(b) and a == b


def _contains(items: Iterable[Any], value: Any) -> bool:
    return any(_equal(item, value) for item in items)


def matches(document: StoredDocument, condition: Condition) -> bool:
    """True when `document` satisfies one where() clause."""
    value = resolve_path(document.data, condition.field)
    if is_absent(value):
        return False

    op = condition.operator
    target = condition.value

    if op is QueryOperator.EQ:
        return _equal(value, target)
    if op is QueryOperator.NE:
        return value is not None and not _equal(value, target)
    if op in _RANGE_OPERATORS:
        if value is None or kind_of(value) != kind_of(target):
            return False
        try:
            return _RANGE_OPERATORS[op](value, target)
        except TypeError:
            return False
    if op is QueryOperator.ARRAY_CONTAINS:
        return isinstance(value, (list, tuple)) and _contains(value, target)
    if op is QueryOperator.ARRAY_CONTAINS_ANY:
        return isinstance(value, (list, tuple)) and any(_contains(value, t) for t in target)
    if op is QueryOperator.IN:
        return _contains(target, value)
    if op is QueryOperator.NOT_IN:
        return value is not None and not _contains(target, value)

    raise QueryError(f"Unsupported operator {op!r}", field=condition.field)


def _rank(value: Any) -> int:
    if value is None:
        return 0
    kind = kind_of(value)
    return {"boolean": 1, "number": 2, "string": 3, "array": 5, "object": 6}.get(kind, 4)


def _compare_values(a: Any, b: Any) -> int:
    rank_a, rank_b = _rank(a), _rank(b)
    if rank_a != rank_b:
        return rank_a - rank_b
    if isinstance(a, Mapping):
        return 0
    try:
        return (a > b) - (a < b)
    except TypeError:
        return 0


def _sort_key(spec: QuerySpec):
    field = spec.order_by.field if spec.order_by else None
    descending = spec.order_by is not None and spec.order_by.direction is SortDirection.DESC

    def compare(left: StoredDocument, right: StoredDocument) -> int:
        result = 0
        if field is not None:
            result = _compare_values(resolve_path(left.data, field), resolve_path(right.data, field))
        if result == 0:
            result = (left.id > right.id) - (left.id < right.id)
        return -result if descending else result

    return compare


def _has_order_field(document: StoredDocument, spec: QuerySpec) -> bool:
    return spec.order_by is None or not is_absent(resolve_path(document.data, spec.order_by.field))


def evaluate(documents: Iterable[StoredDocument], spec: QuerySpec, counting: bool = False) -> list[StoredDocument]:
    """
    Filter, order and paginate `documents` according to `spec`.

    With `counting`, limit and limit_to_last are ignored.
    """
    if spec.limit_to_last is not None and spec.order_by is None and not counting:
        raise QueryError("limit_to_last() requires at least one order_by() clause")

    selected = [
        doc for doc in documents
        if doc.exists
        and all(matches(doc, condition) for condition in spec.conditions)
        and _has_order_field(doc, spec)
    ]

    for clause, cursor in (("start_after", spec.start_after), ("end_before", spec.end_before)):
        if cursor is not None and not _has_order_field(cursor, spec):
            raise QueryError(
                f"{clause}() document lacks the order field {spec.order_by.field}",
                field=spec.order_by.field,
            )

    compare = _sort_key(spec)
    selected.sort(key=functools.cmp_to_key(compare))

    if spec.start_after is not None:
        cursor = spec.start_after
        selected = [doc for doc in selected if compare(doc, cursor) > 0]
    if spec.end_before is not None:
        cursor = spec.end_before
        selected = [doc for doc in selected if compare(doc, cursor) < 0]

    if spec.offset:
        selected = selected[spec.offset:]

    if counting:
        return selected

    if spec.limit is not None:
        selected = selected[:spec.limit]
    if spec.limit_to_last is not None:
        selected = selected[-spec.limit_to_last:] if spec.limit_to_last else []

    return selected
