"""
SQLDocumentStore — DocumentStore backed by async SQLAlchemy.

Each store operation runs in its own transaction; the data-access
functions in `docvault.repositories.documents` only flush.

Usage::

    store = SQLDocumentStore.from_url()      # settings.DATABASE_URL
    await store.create_all()
    users = Model("users", user_schema, store)
    ...
    await store.close()
"""

from __future__ import annotations

import copy
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from docvault.core.logging import get_logger
from docvault.db.models import Base, Document
from docvault.db.session import make_engine, make_session_factory
from docvault.errors import DocumentNotFoundError, StoreError
from docvault.persistence import matching
from docvault.persistence.base import (
    DocumentStore,
    QuerySpec,
    StoredDocument,
    apply_field_updates,
    generate_id,
)
from docvault.repositories import documents as document_repository

logger = get_logger(__name__)


def _snapshot(document: Document) -> StoredDocument:
    return StoredDocument(id=document.id, data=copy.deepcopy(document.data or {}))


def _is_unfiltered(spec: QuerySpec) -> bool:
    return not (spec.conditions or spec.order_by or spec.start_after or spec.end_before)


class SQLDocumentStore(DocumentStore):
    """Documents kept as JSON rows of a single table."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._engine = engine

    @classmethod
    def from_url(cls, url: str | None = None, echo: bool | None = None) -> "SQLDocumentStore":
        """Build a store with its own engine (defaults to settings.DATABASE_URL)."""
        engine = make_engine(url, echo=echo)
        return cls(make_session_factory(engine), engine=engine)

    async def create_all(self) -> None:
        """Create the documents table if it does not exist."""
        if self._engine is None:
            raise StoreError("create_all() needs a store built with an engine")
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()

    @asynccontextmanager
    async def _transaction(self, operation: str, collection: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield session
        except SQLAlchemyError as exc:
            logger.error(
                "Document store operation failed",
                operation=operation,
                collection=collection,
                error=str(exc),
            )
            raise StoreError(
                f"{operation} on {collection} failed: {exc}",
                details={"operation": operation, "collection": collection},
            ) from exc

    async def add(self, collection: str, data: Mapping[str, Any]) -> StoredDocument:
        return await self.set(collection, generate_id(), data)

    async def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> StoredDocument:
        async with self._transaction("set", collection) as session:
            document = await document_repository.save_document(
                session,
                collection=collection,
                document_id=document_id,
                data=copy.deepcopy(dict(data)),
            )
            return _snapshot(document)

    async def get(self, collection: str, document_id: str) -> StoredDocument:
        async with self._transaction("get", collection) as session:
            document = await document_repository.get_document(session, collection, document_id)
            if document is None:
                return StoredDocument(id=document_id, exists=False)
            return _snapshot(document)

    async def update(self, collection: str, document_id: str, changes: Mapping[str, Any]) -> StoredDocument:
        async with self._transaction("update", collection) as session:
            document = await document_repository.get_document(session, collection, document_id)
            if document is None:
                raise DocumentNotFoundError(
                    f"No document to update: {collection}/{document_id}",
                    collection=collection,
                    document_id=document_id,
                )
            document = await document_repository.replace_data(
                session,
                document,
                apply_field_updates(document.data or {}, changes),
            )
            return _snapshot(document)

    async def delete(self, collection: str, document_id: str) -> None:
        async with self._transaction("delete", collection) as session:
            await document_repository.delete_document(session, collection, document_id)

    async def _load(self, collection: str) -> list[StoredDocument]:
        async with self._transaction("query", collection) as session:
            rows = await document_repository.list_documents(session, collection)
            return [_snapshot(row) for row in rows]

    async def run_query(self, collection: str, spec: QuerySpec) -> list[StoredDocument]:
        return matching.evaluate(await self._load(collection), spec)

    async def count(self, collection: str, spec: QuerySpec) -> int:
        if _is_unfiltered(spec):
            async with self._transaction("count", collection) as session:
                total = await document_repository.count_documents(session, collection)
            return max(total - (spec.offset or 0), 0)
        return len(matching.evaluate(await self._load(collection), spec, counting=True))
