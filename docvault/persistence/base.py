"""
DocumentStore — the persistence port Model and Query talk to.

A store keeps JSON-like documents addressed by (collection, id).
Adapters only need to move documents in and out; filtering, ordering
and pagination are applied by `docvault.persistence.matching` so every
adapter answers a QuerySpec the same way.
"""

from __future__ import annotations

import copy
import uuid
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from docvault.core.constants import QueryOperator, SortDirection
from docvault.schema.paths import PATH_SEPARATOR


@dataclass(frozen=True)
class StoredDocument:
    """Snapshot of one stored document.  `exists` is False for a miss."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)
    exists: bool = True

    def get(self, path: str, default: Any = None) -> Any:
        """Read a (dotted) field path from the snapshot's data."""
        value = resolve_path(self.data, path)
        return default if value is _ABSENT else value


@dataclass(frozen=True)
class Condition:
    """One where() clause."""

    field: str
    operator: QueryOperator
    value: Any


@dataclass(frozen=True)
class OrderBy:
    field: str
    direction: SortDirection = SortDirection.ASC


@dataclass
class QuerySpec:
    """Everything a store needs to answer a Query."""

    conditions: list[Condition] = field(default_factory=list)
    order_by: OrderBy | None = None
    limit: int | None = None
    limit_to_last: int | None = None
    start_after: StoredDocument | None = None
    end_before: StoredDocument | None = None
    offset: int | None = None


_ABSENT = object()


def resolve_path(data: Mapping[str, Any], path: str) -> Any:
    """Value at a dotted path, or the module's absent marker."""
    current: Any = data
    for segment in path.split(PATH_SEPARATOR):
        if not isinstance(current, Mapping) or segment not in current:
            return _ABSENT
        current = current[segment]
    return current


def is_absent(value: Any) -> bool:
    return value is _ABSENT


def apply_field_updates(data: Mapping[str, Any], changes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Apply a partial update where keys may be dot paths.

    {"details.bio": "hi"} replaces only `bio` inside `details`, creating
    intermediate objects as needed; a plain key replaces the whole value.
    """
    updated = copy.deepcopy(dict(data))

    for path, value in changes.items():
        segments = path.split(PATH_SEPARATOR)
        level = updated
        for segment in segments[:-1]:
            if not isinstance(level.get(segment), dict):
                level[segment] = {}
            level = level[segment]
        level[segments[-1]] = copy.deepcopy(value)

    return updated


def generate_id() -> str:
    """New random document id."""
    return uuid.uuid4().hex


class DocumentStore(ABC):
    """Async persistence port keyed by collection name and document id."""

    @abstractmethod
    async def add(self, collection: str, data: Mapping[str, Any]) -> StoredDocument:
        """Store `data` under a generated id."""
        ...

    @abstractmethod
    async def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> StoredDocument:
        """Create or overwrite the document `document_id`."""
        ...

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> StoredDocument:
        """Fetch a snapshot; `exists` is False when there is no such document."""
        ...

    @abstractmethod
    async def update(self, collection: str, document_id: str, changes: Mapping[str, Any]) -> StoredDocument:
        """
        Apply a partial (dot-path aware) update.

        Raises DocumentNotFoundError if the document does not exist.
        """
        ...

    @abstractmethod
    async def delete(self, collection: str, document_id: str) -> None:
        """Delete a document.  Deleting a missing document is not an error."""
        ...

    @abstractmethod
    async def run_query(self, collection: str, spec: QuerySpec) -> list[StoredDocument]:
        """Documents of `collection` matching `spec`, in query order."""
        ...

    @abstractmethod
    async def count(self, collection: str, spec: QuerySpec) -> int:
        """Number of documents matching `spec`, ignoring its limits."""
        ...

    async def close(self) -> None:
        """Release adapter resources."""
        pass
