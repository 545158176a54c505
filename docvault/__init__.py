"""
docvault — schema-validated JSON documents.

    from docvault import Model, Schema
    from docvault.persistence import InMemoryDocumentStore

    users = Model("users", Schema({"name": {"type": "string", "required": True}}), InMemoryDocumentStore())
    created = await users.create({"name": "Ann"})
"""

from docvault.core.constants import SchemaType
from docvault.errors import (
    DocumentNotFoundError,
    DocvaultError,
    FieldCustomValidationError,
    FieldLengthError,
    FieldRequiredError,
    FieldTypeError,
    FieldValidationError,
    PathConflictError,
    QueryError,
    SchemaConfigurationError,
    StoreError,
)
from docvault.model import Model
from docvault.query import Query
from docvault.schema import Schema, SchemaMethods, ValidationOptions
from docvault.utils import format_document

__version__ = "0.1.0"

__all__ = [
    "DocumentNotFoundError",
    "DocvaultError",
    "FieldCustomValidationError",
    "FieldLengthError",
    "FieldRequiredError",
    "FieldTypeError",
    "FieldValidationError",
    "Model",
    "PathConflictError",
    "Query",
    "QueryError",
    "Schema",
    "SchemaConfigurationError",
    "SchemaMethods",
    "SchemaType",
    "StoreError",
    "ValidationOptions",
    "format_document",
]
