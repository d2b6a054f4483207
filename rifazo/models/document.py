"""Generic document table used by the SQL storage backend.

Each row holds one document of one collection; the payload is a JSON
column so the SQL backend stores the same shapes as MongoDB.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from rifazo.models.base import Base


class StoredDocument(Base):
    """One document in a named collection."""

    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(String(64), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
