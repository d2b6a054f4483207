"""SQLAlchemy declarative base and the document record mixin."""

from __future__ import annotations

from dataclasses import asdict, fields
from typing import Any, TypeVar

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for ORM models."""

    pass


R = TypeVar("R", bound="DocumentRecord")


class DocumentRecord:
    """Mixin for dataclass records stored as documents.

    Unknown keys in a stored document are ignored on load so older backups
    and hand-edited documents still map onto the current fields.
    """

    id: str | None

    @classmethod
    def from_doc(cls: type[R], doc: dict[str, Any]) -> R:
        names = {f.name for f in fields(cls)}  # type: ignore[arg-type]
        return cls(**{k: v for k, v in doc.items() if k in names})

    def to_doc(self) -> dict[str, Any]:
        doc = asdict(self)  # type: ignore[call-overload]
        doc.pop("id", None)
        return doc
