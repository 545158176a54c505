"""
Tests for parsing raw field definitions.
"""
import pytest

from docvault import Schema, SchemaConfigurationError, SchemaType
from docvault.schema.definition import FieldDefinition, Rule, parse_definition, parse_node


class TestParseDefinition:
    """Raw definitions are normalized once, at load time."""

    def test_scalar_rules_become_rules_without_message(self):
        field = parse_definition("name", {"type": "string", "required": True, "min_length": 2})

        assert field.type is SchemaType.STRING
        assert field.required == Rule(True)
        assert field.min_length == Rule(2)
        assert field.max_length is None

    def test_pairs_carry_their_message(self):
        field = parse_definition("name", {
            "type": "string",
            "required": (True, "Name please"),
            "max_length": [5, "Too long"],
        })

        assert field.required == Rule(True, "Name please")
        assert field.max_length == Rule(5, "Too long")

    def test_none_means_not_set(self):
        field = parse_definition("age", {"type": "number", "min_length": None, "default": None})

        assert field.min_length is None
        assert field.default is None

    def test_nested_schema_is_parsed(self):
        field = parse_definition("details", {
            "type": "object",
            "schema": {"is_admin": {"type": "boolean"}},
        })

        assert isinstance(field.schema["is_admin"], FieldDefinition)
        assert field.schema["is_admin"].type is SchemaType.BOOLEAN

    def test_definitions_are_immutable(self):
        field = parse_definition("name", {"type": "string"})

        with pytest.raises(AttributeError):
            field.type = SchemaType.NUMBER

    def test_parsed_node_is_read_only(self):
        node = parse_node({"name": {"type": "string"}})

        with pytest.raises(TypeError):
            node["other"] = parse_definition("other", {"type": "string"})


class TestSchemaMisconfiguration:
    """Malformed schemas fail before any data is looked at."""

    @pytest.mark.parametrize("definition", [
        {"type": "date"},
        {},
        {"type": "string", "required": "yes"},
        {"type": "string", "required": ("yes", "msg")},
        {"type": "string", "min_length": "3"},
        {"type": "string", "max_length": True},
        {"type": "string", "default": "x"},
        {"type": "string", "transform": "upper"},
        {"type": "string", "validate": 42},
        {"type": "string", "validate": (42, "msg")},
        {"type": "string", "required": (True, 3)},
        {"type": "string", "array_of": "string"},
        {"type": "array", "array_of": "date"},
        {"type": "string", "schema": {"a": {"type": "string"}}},
        {"type": "string", "minLength": 3},
    ])
    def test_invalid_definition_raises(self, definition):
        with pytest.raises(SchemaConfigurationError):
            Schema({"field": definition})

    def test_error_names_the_nested_path(self):
        with pytest.raises(SchemaConfigurationError) as exc_info:
            Schema({"details": {"type": "object", "schema": {"bio": {"type": "text"}}}})

        assert exc_info.value.field == "details.bio"
        assert "details.bio" in str(exc_info.value)

    def test_node_must_be_a_mapping(self):
        with pytest.raises(SchemaConfigurationError):
            Schema(["name"])
