"""
Model — the primary tool for reading and writing one collection.

A Model pairs a Schema with a collection name and a DocumentStore.
Writes are validated by the Schema, passed through the schema's
`before_save` hook and only then handed to the store.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import Any

from docvault.core.logging import get_logger
from docvault.persistence.base import DocumentStore, StoredDocument
from docvault.query import Query
from docvault.schema.schema import Schema, ValidationOptions
from docvault.utils import format_document

logger = get_logger(__name__)


class Model:
    """Validated access to the documents of one collection."""

    def __init__(self, collection: str, schema: Schema, store: DocumentStore) -> None:
        self.collection = collection
        self.schema = schema
        self.store = store

    async def validate(
        self,
        data: Mapping[str, Any],
        *,
        skip_strip: bool = False,
        skip_default: bool = True,
        skip_required: bool = True,
        allow_dot_notation: bool = True,
    ) -> dict[str, Any]:
        """
        Validate a (possibly partial, dot-notation) record against the schema.

        Unlike Schema.validate(), the Model defaults suit partial updates:
        defaults and required checks are skipped and dot notation is
        allowed.  Each switch can be overridden on its own.
        """
        options = ValidationOptions(
            skip_strip=skip_strip,
            skip_default=skip_default,
            skip_required=skip_required,
            allow_dot_notation=allow_dot_notation,
        )
        return await self.schema.validate(data, None, options)

    async def _before_save(self, data: dict[str, Any]) -> None:
        methods = self.schema.methods
        if methods is None or methods.before_save is None:
            return

        result = methods.before_save(data)
        if inspect.isawaitable(result):
            await result

    async def create(
        self,
        data: Mapping[str, Any],
        *,
        id: str | None = None,
        skip_validation: bool = False,
        skip_formatting: bool = False,
        skip_strip: bool = False,
    ) -> dict[str, Any] | StoredDocument:
        """
        Create a new document.

        Args:
            data: Record to validate and store.
            id: Store under this id (overwriting any existing document)
                instead of a generated one.
            skip_validation: Store `data` as given.
            skip_formatting: Return the StoredDocument instead of {"id": ..., **data}.
            skip_strip: Keep keys the schema does not define.
        """
        record = dict(data)
        if not skip_validation:
            record = await self.schema.validate(record, None, ValidationOptions(skip_strip=skip_strip))

        await self._before_save(record)

        if id:
            document = await self.store.set(self.collection, id, record)
        else:
            document = await self.store.add(self.collection, record)

        logger.info("Document created", collection=self.collection, id=document.id)

        if skip_formatting:
            return document
        return {"id": document.id, **record}

    async def find_by_id(
        self,
        id: str,
        *,
        skip_formatting: bool = False,
    ) -> dict[str, Any] | StoredDocument | None:
        """Fetch a document; None (or a non-existing snapshot) when there is none."""
        document = await self.store.get(self.collection, id)
        if skip_formatting:
            return document
        return format_document(document)

    def find(self) -> Query:
        """Start a new Query on this collection."""
        return Query(self.collection, self.store)

    async def update_by_id(
        self,
        id: str,
        data: Mapping[str, Any],
        *,
        skip_validation: bool = False,
        skip_strip: bool = False,
    ) -> str:
        """
        Apply a partial update; dot-notation keys update nested fields only.

        Raises:
            DocumentNotFoundError: there is no document with this id.
        """
        record = dict(data)
        if not skip_validation:
            record = await self.schema.validate(
                record,
                None,
                ValidationOptions(
                    skip_strip=skip_strip,
                    skip_default=True,
                    skip_required=True,
                    allow_dot_notation=True,
                ),
            )

        await self._before_save(record)

        await self.store.update(self.collection, id, record)
        logger.info("Document updated", collection=self.collection, id=id, fields=sorted(record))
        return id

    async def delete_by_id(self, id: str) -> str:
        """Delete a document.  Deleting a missing document is not an error."""
        await self.store.delete(self.collection, id)
        logger.info("Document deleted", collection=self.collection, id=id)
        return id
