"""
Schema package — field definitions, rule evaluators, the dot-notation
codec and the recursive validator.
"""

from docvault.schema.definition import FieldDefinition, Rule, parse_definition, parse_node
from docvault.schema.paths import flatten, nest, strip
from docvault.schema.schema import Schema, SchemaMethods, ValidationOptions

__all__ = [
    "FieldDefinition",
    "Rule",
    "Schema",
    "SchemaMethods",
    "ValidationOptions",
    "flatten",
    "nest",
    "parse_definition",
    "parse_node",
    "strip",
]
