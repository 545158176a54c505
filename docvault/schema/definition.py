"""
FieldDefinition — the parsed, immutable form of one schema entry.

Raw schema nodes are plain dicts, e.g.::

    {
        "name": {"type": "string", "required": (True, "Name please"), "max_length": 40},
        "tags": {"type": "array", "array_of": "string", "default": list},
        "details": {
            "type": "object",
            "schema": {"is_admin": {"type": "boolean", "default": lambda: False}},
        },
    }

`parse_node` turns such a dict into a read-only mapping of
FieldDefinition objects.  Every check that concerns the schema author
(rather than the data) happens here, once, so the validator never has
to branch on "scalar or (scalar, message) pair" at run time.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Generic, TypeVar

from docvault.core.constants import SchemaType
from docvault.errors import SchemaConfigurationError

T = TypeVar("T")

SchemaNode = Mapping[str, "FieldDefinition"]

DEFINITION_KEYS = frozenset({
    "type",
    "required",
    "default",
    "validate",
    "min_length",
    "max_length",
    "transform",
    "array_of",
    "schema",
})


@dataclass(frozen=True)
class Rule(Generic[T]):
    """A rule value with an optional custom error message."""

    value: T
    message: str | None = None


@dataclass(frozen=True)
class FieldDefinition:
    """One entry of a schema node."""

    name: str
    type: SchemaType
    required: Rule[bool] | None = None
    default: Callable[[], Any] | None = None
    validate: Rule[Callable[[Any], bool]] | None = None
    min_length: Rule[float] | None = None
    max_length: Rule[float] | None = None
    transform: Callable[[Any], Any] | None = None
    array_of: SchemaType | None = None
    schema: SchemaNode | None = None


def _parse_type(value: Any, prop: str, path: str) -> SchemaType:
    if value is None:
        raise SchemaConfigurationError(f"A type for {path} must be specified", field=path)
    try:
        return SchemaType(value)
    except ValueError:
        raise SchemaConfigurationError(
            f'Invalid "{prop}" for {path}: {value!r}',
            field=path,
            details={"allowed": [t.value for t in SchemaType]},
        ) from None


def _split_pair(raw: Any, prop: str, path: str) -> tuple[Any, str | None]:
    """Split `value` or `(value, message)` into its two parts."""
    if not isinstance(raw, (tuple, list)):
        return raw, None
    if len(raw) not in (1, 2):
        raise SchemaConfigurationError(
            f'"{prop}" property for {path} must be a value or a (value, message) pair',
            field=path,
        )
    message = raw[1] if len(raw) == 2 else None
    if message is not None and not isinstance(message, str):
        raise SchemaConfigurationError(
            f'Error message in "{prop}" property for {path} must be a string',
            field=path,
        )
    return raw[0], message


def _parse_required(raw: Any, path: str) -> Rule[bool]:
    flag, message = _split_pair(raw, "required", path)
    if not isinstance(flag, bool):
        raise SchemaConfigurationError(
            f'"required" property for {path} must be a boolean, '
            "or a pair containing a boolean as its first element",
            field=path,
        )
    return Rule(flag, message)


def _parse_length(raw: Any, prop: str, path: str) -> Rule[float]:
    bound, message = _split_pair(raw, prop, path)
    if isinstance(bound, bool) or not isinstance(bound, (int, float)):
        raise SchemaConfigurationError(
            f'"{prop}" property for {path} must be a number, '
            "or a pair containing a number as its first element",
            field=path,
        )
    return Rule(bound, message)


def _parse_validate(raw: Any, path: str) -> Rule[Callable[[Any], bool]]:
    predicate, message = _split_pair(raw, "validate", path)
    if not callable(predicate):
        raise SchemaConfigurationError(
            f'"validate" property for {path} must be a function, '
            "or a pair containing a function as its first element",
            field=path,
        )
    return Rule(predicate, message)


def _parse_callable(raw: Any, prop: str, path: str) -> Callable:
    if not callable(raw):
        raise SchemaConfigurationError(f'"{prop}" property for {path} must be a function', field=path)
    return raw


def parse_definition(name: str, raw: Any, parent: str = "") -> FieldDefinition:
    """
    Parse one raw field definition.

    Args:
        name: Field name at its nesting level.
        raw: The raw definition dict (an existing FieldDefinition is returned as is).
        parent: Dotted path of the enclosing object, used in error messages.

    Raises:
        SchemaConfigurationError: the definition is malformed.
    """
    if isinstance(raw, FieldDefinition):
        return raw

    path = f"{parent}.{name}" if parent else name

    if not isinstance(raw, Mapping):
        raise SchemaConfigurationError(f"Definition for {path} must be a mapping", field=path)

    unknown = sorted(set(raw) - DEFINITION_KEYS)
    if unknown:
        raise SchemaConfigurationError(
            f"Unknown properties for {path}: {', '.join(map(str, unknown))}",
            field=path,
            details={"unknown": unknown},
        )

    field_type = _parse_type(raw.get("type"), "type", path)

    array_of = None
    if raw.get("array_of") is not None:
        if field_type is not SchemaType.ARRAY:
            raise SchemaConfigurationError(
                f'"array_of" property for {path} is only allowed on array fields',
                field=path,
            )
        array_of = _parse_type(raw["array_of"], "array_of", path)

    nested = None
    if raw.get("schema") is not None:
        if field_type is not SchemaType.OBJECT:
            raise SchemaConfigurationError(
                f'"schema" property for {path} is only allowed on object fields',
                field=path,
            )
        nested = parse_node(raw["schema"], path)

    def optional(prop: str, parser: Callable[..., Any], *args: Any) -> Any:
        value = raw.get(prop)
        return None if value is None else parser(value, *args)

    return FieldDefinition(
        name=name,
        type=field_type,
        required=optional("required", _parse_required, path),
        default=optional("default", _parse_callable, "default", path),
        validate=optional("validate", _parse_validate, path),
        min_length=optional("min_length", _parse_length, "min_length", path),
        max_length=optional("max_length", _parse_length, "max_length", path),
        transform=optional("transform", _parse_callable, "transform", path),
        array_of=array_of,
        schema=nested,
    )


def parse_node(raw: Mapping[str, Any], parent: str = "") -> SchemaNode:
    """Parse a raw schema node into a read-only mapping, keeping declaration order."""
    if not isinstance(raw, Mapping):
        where = f" for {parent}" if parent else ""
        raise SchemaConfigurationError(f"Schema{where} must be a mapping of field definitions", field=parent or None)

    return MappingProxyType({
        name: parse_definition(name, definition, parent)
        for name, definition in raw.items()
    })
