"""
Schema — validates and normalizes records against a field-definition tree.

Usage::

    users = Schema(
        {
            "name": {"type": "string", "required": True, "transform": str.strip},
            "details": {
                "type": "object",
                "schema": {"is_admin": {"type": "boolean", "default": lambda: False}},
            },
        },
        methods=SchemaMethods(before_save=audit),
    )

    record = await users.validate({"name": " Ann ", "details": {}})
    # {"name": "Ann", "details": {"is_admin": False}}

The walk itself is synchronous (`validate_record`); `validate` is the
async entry point used by Model so hooks and persistence can share
one await chain.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from docvault.core.logging import get_logger
from docvault.errors import FieldValidationError
from docvault.schema import rules
from docvault.schema.definition import FieldDefinition, SchemaNode, parse_node
from docvault.schema.paths import copy_tree, flatten, nest, strip

logger = get_logger(__name__)


@dataclass(frozen=True)
class ValidationOptions:
    """Per-call switches for Schema.validate()."""

    skip_strip: bool = False
    skip_default: bool = False
    skip_required: bool = False
    allow_dot_notation: bool = False


@dataclass(frozen=True)
class SchemaMethods:
    """Lifecycle hooks run by Model, not by the validator."""

    before_save: Callable[[dict[str, Any]], Awaitable[None] | None] | None = None


class Schema:
    """A parsed schema definition plus its lifecycle hooks."""

    def __init__(
        self,
        definition: Mapping[str, Any],
        methods: SchemaMethods | None = None,
    ) -> None:
        self.definition: SchemaNode = parse_node(definition)
        self.methods = methods

    async def validate(
        self,
        data: Mapping[str, Any],
        node: Mapping[str, Any] | None = None,
        options: ValidationOptions | None = None,
    ) -> dict[str, Any]:
        """
        Validate `data` and return the normalized copy.

        Args:
            data: Record to validate.  It is never mutated.
            node: Schema node to validate against.  Defaults to the root
                  definition; raw (unparsed) nodes are accepted.
            options: ValidationOptions; all switches off when omitted.

        Raises:
            FieldValidationError: the first rule violation found.
            SchemaConfigurationError: `node` is malformed.
            PathConflictError: ambiguous dot-notation keys.
        """
        return self.validate_record(data, node, options)

    def validate_record(
        self,
        data: Mapping[str, Any],
        node: Mapping[str, Any] | None = None,
        options: ValidationOptions | None = None,
    ) -> dict[str, Any]:
        """Synchronous form of validate()."""
        options = options or ValidationOptions()
        node = self.definition if node is None else parse_node(node)

        record = nest(data) if options.allow_dot_notation else data

        try:
            validated = self._walk(record, node, options, "")
        except FieldValidationError as exc:
            logger.debug(
                "Record failed validation",
                field=exc.field,
                error_type=type(exc).__name__,
                error=exc.message,
            )
            raise

        return flatten(validated) if options.allow_dot_notation else validated

    def _walk(
        self,
        record: Mapping[str, Any],
        node: SchemaNode,
        options: ValidationOptions,
        parent: str,
    ) -> dict[str, Any]:
        output = copy_tree(record if options.skip_strip else strip(record, node))

        for name, field in node.items():
            path = f"{parent}.{name}" if parent else name
            value = self._evaluate(output.get(name, rules.MISSING), field, options, path)
            if value is not rules.MISSING:
                output[name] = value

        return output

    def _evaluate(
        self,
        value: Any,
        field: FieldDefinition,
        options: ValidationOptions,
        path: str,
    ) -> Any:
        """Run every rule of one field in order and return its final value."""
        if not options.skip_default:
            value = rules.apply_default(value, field.default)

        if not options.skip_required:
            rules.check_required(value, field.required, path)

        rules.check_type(value, field.type, path)
        rules.check_max_length(value, field.max_length, path)
        rules.check_min_length(value, field.min_length, path)
        rules.check_custom(value, field.validate, path)
        rules.check_array_of(value, field.array_of, path)

        value = rules.apply_transform(value, field.transform)

        if field.schema is not None and isinstance(value, Mapping):
            value = self._walk(value, field.schema, options, path)

        return value
