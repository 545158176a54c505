import pytest

from docvault import Schema
from docvault.persistence import InMemoryDocumentStore


@pytest.fixture
def store():
    """Fresh in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def user_schema():
    """A schema with nested objects, arrays, defaults and transforms."""
    return Schema({
        "name": {"type": "string", "required": True, "max_length": 20, "transform": str.strip},
        "age": {"type": "number", "validate": (lambda v: v >= 0, "age cannot be negative")},
        "tags": {"type": "array", "array_of": "string", "default": list},
        "details": {
            "type": "object",
            "schema": {
                "is_admin": {"type": "boolean", "default": lambda: False},
                "bio": {"type": "string", "max_length": 100},
            },
        },
    })
