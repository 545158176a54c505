"""
Field rule evaluators.

Each check is a plain function taking the current value, the parsed
rule and the field path; it returns None on success and raises a
FieldValidationError subclass on failure.  `MISSING` stands for a key
that is not present in the record at all, which is different from a
key explicitly set to None.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

from docvault.core.constants import SchemaType
from docvault.errors import (
    FieldCustomValidationError,
    FieldLengthError,
    FieldRequiredError,
    FieldTypeError,
)
from docvault.schema.definition import Rule


class _Missing:
    """Sentinel type for absent keys."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def is_empty(value: Any) -> bool:
    """Absent or null."""
    return value is MISSING or value is None


def kind_of(value: Any) -> str:
    """Runtime kind of a value, in SchemaType vocabulary where possible."""
    if isinstance(value, str):
        return SchemaType.STRING.value
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return SchemaType.BOOLEAN.value
    if isinstance(value, (int, float)):
        return SchemaType.NUMBER.value
    if isinstance(value, (list, tuple)):
        return SchemaType.ARRAY.value
    if isinstance(value, Mapping):
        return SchemaType.OBJECT.value
    if value is None:
        return "null"
    return type(value).__name__


def check_type(value: Any, expected: SchemaType, path: str) -> None:
    if is_empty(value):
        return

    actual = kind_of(value)
    if actual != expected.value:
        raise FieldTypeError(
            f"{path} must be of type {expected.value}, but got {actual}",
            field=path,
            details={"expected": expected.value, "actual": actual},
        )


def check_required(value: Any, rule: Rule[bool] | None, path: str) -> None:
    if rule is None or not rule.value or not is_empty(value):
        return

    raise FieldRequiredError(rule.message or f"{path} is required", field=path)


def _measure(value: Any) -> tuple[int, str] | None:
    """Size and unit of a measurable value, or None when length rules don't apply."""
    if isinstance(value, str):
        return len(value), "characters"
    if isinstance(value, (list, tuple)):
        return len(value), "elements"
    if isinstance(value, Mapping):
        return len(value), "properties"
    return None


def _length_message(path: str, bound: str, limit: float, unit: str) -> str:
    if unit == "characters":
        return f"{path} must be at {bound} {limit} characters long"
    return f"{path} must contain at {bound} {limit} {unit}"


def check_max_length(value: Any, rule: Rule[float] | None, path: str) -> None:
    if rule is None:
        return

    measured = _measure(value)
    if measured is None:
        return

    size, unit = measured
    if size > rule.value:
        raise FieldLengthError(
            rule.message or _length_message(path, "most", rule.value, unit),
            field=path,
            details={"max_length": rule.value, "length": size},
        )


def check_min_length(value: Any, rule: Rule[float] | None, path: str) -> None:
    if rule is None:
        return

    measured = _measure(value)
    if measured is None:
        return

    size, unit = measured
    if size < rule.value:
        raise FieldLengthError(
            rule.message or _length_message(path, "least", rule.value, unit),
            field=path,
            details={"min_length": rule.value, "length": size},
        )


def check_custom(value: Any, rule: Rule[Callable[[Any], bool]] | None, path: str) -> None:
    if value is MISSING or rule is None:
        return

    if rule.value(value):
        return

    raise FieldCustomValidationError(rule.message or f"{path} failed custom validation", field=path)


def check_array_of(value: Any, element_type: SchemaType | None, path: str) -> None:
    if element_type is None or not isinstance(value, (list, tuple)):
        return

    if all(kind_of(item) == element_type.value for item in value):
        return

    raise FieldTypeError(
        f"All elements in {path} must be of type {element_type.value}",
        field=path,
        details={"array_of": element_type.value},
    )


def apply_default(value: Any, supplier: Callable[[], Any] | None) -> Any:
    """Return the supplier's result for an absent value, the value itself otherwise."""
    if value is not MISSING or supplier is None:
        return value
    return supplier()


def apply_transform(value: Any, transform: Callable[[Any], Any] | None) -> Any:
    if value is MISSING or transform is None:
        return value
    return transform(value)
