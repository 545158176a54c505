"""
Persistence package — the DocumentStore port and its adapters.

SQLDocumentStore is imported from `docvault.persistence.sql` directly so
that SQLAlchemy is only loaded when it is used.
"""

from docvault.persistence.base import (
    Condition,
    DocumentStore,
    OrderBy,
    QuerySpec,
    StoredDocument,
    apply_field_updates,
)
from docvault.persistence.memory import InMemoryDocumentStore

__all__ = [
    "Condition",
    "DocumentStore",
    "InMemoryDocumentStore",
    "OrderBy",
    "QuerySpec",
    "StoredDocument",
    "apply_field_updates",
]
