"""
Document repository containing all data-access operations for the documents table.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.db.models.document import Document


async def get_document(db: AsyncSession, collection: str, document_id: str) -> Document | None:
    """Fetch a document by primary key."""
    return await db.get(Document, (collection, document_id))


async def save_document(
    db: AsyncSession,
    *,
    collection: str,
    document_id: str,
    data: dict[str, Any],
) -> Document:
    """Insert a document, or overwrite the data of an existing one."""
    document = await get_document(db, collection, document_id)
    if document is None:
        document = Document(collection=collection, id=document_id, data=data)
        db.add(document)
    else:
        # assign a new object so the JSON column is flagged dirty
        document.data = data
    await db.flush()
    return document


async def replace_data(db: AsyncSession, document: Document, data: dict[str, Any]) -> Document:
    """Replace the data of an already loaded document."""
    document.data = data
    await db.flush()
    return document


async def delete_document(db: AsyncSession, collection: str, document_id: str) -> int:
    """Delete a document.  Returns the number of rows removed (0 or 1)."""
    stmt = delete(Document).where(Document.collection == collection, Document.id == document_id)
    result = await db.execute(stmt)
    await db.flush()
    return result.rowcount or 0


async def list_documents(db: AsyncSession, collection: str) -> list[Document]:
    """All documents of a collection, ordered by id."""
    stmt = select(Document).where(Document.collection == collection).order_by(Document.id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_documents(db: AsyncSession, collection: str) -> int:
    """Number of documents in a collection."""
    stmt = select(func.count()).select_from(Document).where(Document.collection == collection)
    result = await db.execute(stmt)
    return result.scalar_one()
