"""
SQLAlchemy declarative base and shared helpers for the SQL document store.

Convention:
    - Each table lives in its own file under `docvault/db/models/`
    - Every model file imports `Base` from here
    - The `__init__.py` re-exports all models so `create_all` sees them
"""

from datetime import datetime, timezone

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


# JSONB on Postgres, plain JSON everywhere else (e.g. SQLite in tests)
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)
