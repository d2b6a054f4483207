"""Shared CRUD over one document collection."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from rifazo.db import get_store
from rifazo.models.base import DocumentRecord
from rifazo.repositories.document_store import DocumentStore, Filters

R = TypeVar("R", bound=DocumentRecord)


class DocumentRepository(Generic[R]):
    """Map documents of ``collection`` onto ``record_type`` instances."""

    collection: str = ""
    record_type: type[R]

    def __init__(self, store: DocumentStore | None = None) -> None:
        # Without an explicit store, resolve the app's store per call.
        self._store = store

    @property
    def store(self) -> DocumentStore:
        return self._store or get_store()

    def _load(self, doc: dict[str, Any] | None) -> R | None:
        return self.record_type.from_doc(doc) if doc is not None else None

    def get(self, doc_id: str) -> R | None:
        return self._load(self.store.get(self.collection, doc_id))

    def find(self, filters: Filters = None, **kwargs: Any) -> list[R]:
        return [self.record_type.from_doc(d) for d in self.store.find(self.collection, filters, **kwargs)]

    def find_one(self, filters: Filters) -> R | None:
        return self._load(self.store.find_one(self.collection, filters))

    def list_all(self) -> Sequence[R]:
        return self.find()

    def count(self, filters: Filters = None) -> int:
        return self.store.count(self.collection, filters)

    def add(self, record: R) -> R:
        saved = self.store.insert(self.collection, {"id": record.id, **record.to_doc()})
        return self.record_type.from_doc(saved)

    def update(self, doc_id: str, changes: dict[str, Any]) -> bool:
        return self.store.update(self.collection, doc_id, changes)

    def update_many(self, filters: Filters, changes: dict[str, Any]) -> int:
        return self.store.update_many(self.collection, filters, changes)

    def delete(self, doc_id: str) -> bool:
        return self.store.delete(self.collection, doc_id)

    def delete_many(self, filters: Filters) -> int:
        return self.store.delete_many(self.collection, filters)
