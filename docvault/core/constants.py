"""Shared constants and enums used across the package."""

from enum import StrEnum


class SchemaType(StrEnum):
    """Kinds a field definition may declare."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"


class QueryOperator(StrEnum):
    """Filter operators accepted by Query.where()."""

    EQ = "=="
    NE = "!="
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="
    ARRAY_CONTAINS = "array-contains"
    IN = "in"
    ARRAY_CONTAINS_ANY = "array-contains-any"
    NOT_IN = "not-in"


class SortDirection(StrEnum):
    """Sort order for Query.order_by()."""

    ASC = "asc"
    DESC = "desc"
