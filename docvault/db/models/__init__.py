"""
Models package — re-exports Base and all models.

Import models here so `Base.metadata.create_all` picks up every table.
"""

from docvault.db.models.base import Base
from docvault.db.models.document import Document

__all__ = [
    "Base",
    "Document",
]
