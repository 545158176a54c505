"""Helpers shared by Model and Query."""

from __future__ import annotations

from typing import Any

from docvault.persistence.base import StoredDocument


def format_document(document: StoredDocument | None) -> dict[str, Any] | None:
    """`{"id": ..., **data}` for an existing snapshot, None otherwise."""
    if document is None or not document.exists:
        return None

    return {"id": document.id, **document.data}
