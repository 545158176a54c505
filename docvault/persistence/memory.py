"""
InMemoryDocumentStore — a DocumentStore kept in a dict.

Useful for tests and for running Models without a database.  Data is
deep-copied on the way in and out so callers never share state with
the store.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from docvault.core.logging import get_logger
from docvault.errors import DocumentNotFoundError
from docvault.persistence import matching
from docvault.persistence.base import (
    DocumentStore,
    QuerySpec,
    StoredDocument,
    apply_field_updates,
    generate_id,
)

logger = get_logger(__name__)


class InMemoryDocumentStore(DocumentStore):
    """Process-local document store."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    def _collection(self, name: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(name, {})

    def _snapshot(self, document_id: str, data: Mapping[str, Any]) -> StoredDocument:
        return StoredDocument(id=document_id, data=copy.deepcopy(dict(data)))

    async def add(self, collection: str, data: Mapping[str, Any]) -> StoredDocument:
        return await self.set(collection, generate_id(), data)

    async def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> StoredDocument:
        self._collection(collection)[document_id] = copy.deepcopy(dict(data))
        logger.debug("Document written", collection=collection, id=document_id)
        return self._snapshot(document_id, data)

    async def get(self, collection: str, document_id: str) -> StoredDocument:
        data = self._collection(collection).get(document_id)
        if data is None:
            return StoredDocument(id=document_id, exists=False)
        return self._snapshot(document_id, data)

    async def update(self, collection: str, document_id: str, changes: Mapping[str, Any]) -> StoredDocument:
        documents = self._collection(collection)
        if document_id not in documents:
            raise DocumentNotFoundError(
                f"No document to update: {collection}/{document_id}",
                collection=collection,
                document_id=document_id,
            )
        documents[document_id] = apply_field_updates(documents[document_id], changes)
        return self._snapshot(document_id, documents[document_id])

    async def delete(self, collection: str, document_id: str) -> None:
        self._collection(collection).pop(document_id, None)

    def _all(self, collection: str) -> list[StoredDocument]:
        return [self._snapshot(doc_id, data) for doc_id, data in self._collection(collection).items()]

    async def run_query(self, collection: str, spec: QuerySpec) -> list[StoredDocument]:
        return matching.evaluate(self._all(collection), spec)

    async def count(self, collection: str, spec: QuerySpec) -> int:
        return len(matching.evaluate(self._all(collection), spec, counting=True))
