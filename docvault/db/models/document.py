"""
Document — one stored record of a collection.

The whole validated record lives in the JSON `data` column; the
(collection, id) pair is the primary key.
"""

from __future__ import annotations

from sqlalchemy import Column, DateTime, String

from docvault.core.config import settings
from docvault.db.models.base import Base, JSONDocument, utcnow


class Document(Base):
    """A JSON document addressed by collection name and id."""

    __tablename__ = settings.DOCUMENTS_TABLE

    collection = Column(String(255), primary_key=True)
    id = Column(String(255), primary_key=True)

    data = Column(JSONDocument, nullable=False, default=dict)

    # ── Timestamps ────────────────────────────
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Document {self.collection}/{self.id}>"
