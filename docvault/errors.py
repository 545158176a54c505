"""
Exception hierarchy for schema validation and document persistence.

All docvault exceptions inherit from DocvaultError so callers can
catch broadly or narrowly as needed.  Each exception carries the
offending field path (when there is one) plus free-form details for
logging/debugging.  Callers are expected to show `str(exc)` directly.
"""

from __future__ import annotations


class DocvaultError(Exception):
    """Base exception for all docvault errors."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.message = message
        self.field = field
        self.details = details or {}
        super().__init__(message)


class SchemaConfigurationError(DocvaultError):
    """The schema itself is malformed (unknown type, non-callable default, ...)."""
    pass


class FieldValidationError(DocvaultError):
    """Base class for errors caused by the data being validated."""
    pass


class FieldTypeError(FieldValidationError):
    """A value (or an array element) is not of the declared kind."""
    pass


class FieldRequiredError(FieldValidationError):
    """A required value is absent or null."""
    pass


class FieldLengthError(FieldValidationError):
    """A string, array or object size is outside the declared bounds."""
    pass


class FieldCustomValidationError(FieldValidationError):
    """A custom predicate rejected the value."""
    pass


class PathConflictError(DocvaultError):
    """Two dot-notation keys address the same path ambiguously."""
    pass


class DocumentNotFoundError(DocvaultError):
    """An update targeted a document that does not exist."""

    def __init__(
        self,
        message: str,
        *,
        collection: str | None = None,
        document_id: str | None = None,
        **kwargs,
    ) -> None:
        self.collection = collection
        self.document_id = document_id
        super().__init__(message, **kwargs)


class QueryError(DocvaultError):
    """A query was built with invalid clauses."""
    pass


class StoreError(DocvaultError):
    """The persistence adapter failed."""
    pass
