"""Document storage backends.

Both backends expose the same small API over named collections of JSON-like
documents keyed by a string ``id``:

- ``MongoDocumentStore`` maps each collection to a MongoDB collection and the
  id to ``_id``.
- ``SqlDocumentStore`` keeps every document in the ``documents`` table
  (see ``rifazo.models.document``) and evaluates filters in Python.

Filter semantics follow MongoDB equality queries: ``{"field": value}``
matches when the field equals the value or, for list fields, contains it;
``{"field": {"$in": [...]}}`` matches any of the listed values.
"""

from __future__ import annotations

import copy
import uuid
from collections.abc import Callable, Iterable
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from rifazo.models.document import StoredDocument

Document = dict[str, Any]
Filters = dict[str, Any] | None


def new_id() -> str:
    return uuid.uuid4().hex


def _value_matches(actual: Any, expected: Any) -> bool:
    if isinstance(expected, dict) and "$in" in expected:
        options = list(expected["$in"])
        if isinstance(actual, list):
            return any(a in options for a in actual)
        return actual in options
    if isinstance(actual, list) and not isinstance(expected, list):
        return expected in actual
    return actual == expected


def matches(doc: Document, filters: Filters) -> bool:
    """Evaluate equality filters against a document."""

    for key, expected in (filters or {}).items():
        if not _value_matches(doc.get(key), expected):
            return False
    return True


def _sort_key(field: str) -> Callable[[Document], tuple[bool, Any]]:
    # Missing values sort first, like MongoDB's null ordering.
    def key(doc: Document) -> tuple[bool, Any]:
        value = doc.get(field)
        return (value is not None, value if value is not None else "")

    return key


class DocumentStore:
    """Interface shared by the storage backends."""

    def insert(self, collection: str, doc: Document) -> Document:
        raise NotImplementedError

    def get(self, collection: str, doc_id: str) -> Document | None:
        raise NotImplementedError

    def find(
        self,
        collection: str,
        filters: Filters = None,
        *,
        sort: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        raise NotImplementedError

    def find_one(self, collection: str, filters: Filters = None) -> Document | None:
        found = self.find(collection, filters, limit=1)
        return found[0] if found else None

    def count(self, collection: str, filters: Filters = None) -> int:
        return len(self.find(collection, filters))

    def update(self, collection: str, doc_id: str, changes: Document) -> bool:
        raise NotImplementedError

    def update_many(self, collection: str, filters: Filters, changes: Document) -> int:
        raise NotImplementedError

    def increment(self, collection: str, doc_id: str, field: str, amount: int | float = 1) -> None:
        raise NotImplementedError

    def add_to_set(self, collection: str, doc_id: str, field: str, value: Any) -> None:
        raise NotImplementedError

    def pull(self, collection: str, doc_id: str, field: str, value: Any) -> None:
        raise NotImplementedError

    def pull_many(self, collection: str, field: str, values: Iterable[Any]) -> int:
        """Remove values from a list field in every document holding one of them."""

        raise NotImplementedError

    def delete(self, collection: str, doc_id: str) -> bool:
        raise NotImplementedError

    def delete_many(self, collection: str, filters: Filters) -> int:
        raise NotImplementedError

    def replace(self, collection: str, doc_id: str, doc: Document) -> None:
        """Insert or overwrite a document under a known id."""

        raise NotImplementedError


class MongoDocumentStore(DocumentStore):
    """Backend over a pymongo ``Database``."""

    def __init__(self, db: Any) -> None:
        self._db = db

    @staticmethod
    def _out(raw: dict[str, Any] | None) -> Document | None:
        if raw is None:
            return None
        doc = dict(raw)
        doc["id"] = str(doc.pop("_id"))
        return doc

    @staticmethod
    def _query(filters: Filters) -> dict[str, Any]:
        query = dict(filters or {})
        if "id" in query:
            query["_id"] = query.pop("id")
        return query

    def insert(self, collection: str, doc: Document) -> Document:
        body = {k: v for k, v in doc.items() if k != "id"}
        doc_id = str(doc.get("id") or new_id())
        self._db[collection].insert_one({"_id": doc_id, **body})
        return {"id": doc_id, **body}

    def get(self, collection: str, doc_id: str) -> Document | None:
        return self._out(self._db[collection].find_one({"_id": doc_id}))

    def find(self, collection, filters=None, *, sort=None, descending=False, limit=None):
        cursor = self._db[collection].find(self._query(filters))
        if sort:
            from pymongo import ASCENDING, DESCENDING

            cursor = cursor.sort(sort, DESCENDING if descending else ASCENDING)
        if limit:
            cursor = cursor.limit(int(limit))
        return [self._out(d) for d in cursor]  # type: ignore[misc]

    def count(self, collection: str, filters: Filters = None) -> int:
        return int(self._db[collection].count_documents(self._query(filters)))

    def update(self, collection: str, doc_id: str, changes: Document) -> bool:
        body = {k: v for k, v in changes.items() if k != "id"}
        if not body:
            return self.get(collection, doc_id) is not None
        res = self._db[collection].update_one({"_id": doc_id}, {"$set": body})
        return res.matched_count > 0

    def update_many(self, collection: str, filters: Filters, changes: Document) -> int:
        res = self._db[collection].update_many(self._query(filters), {"$set": changes})
        return int(res.matched_count)

    def increment(self, collection: str, doc_id: str, field: str, amount: int | float = 1) -> None:
        self._db[collection].update_one({"_id": doc_id}, {"$inc": {field: amount}})

    def add_to_set(self, collection: str, doc_id: str, field: str, value: Any) -> None:
        self._db[collection].update_one({"_id": doc_id}, {"$addToSet": {field: value}})

    def pull(self, collection: str, doc_id: str, field: str, value: Any) -> None:
        self._db[collection].update_one({"_id": doc_id}, {"$pull": {field: value}})

    def pull_many(self, collection: str, field: str, values: Iterable[Any]) -> int:
        wanted = list(values)
        if not wanted:
            return 0
        res = self._db[collection].update_many(
            {field: {"$in": wanted}},
            {"$pull": {field: {"$in": wanted}}},
        )
        return int(res.modified_count)

    def delete(self, collection: str, doc_id: str) -> bool:
        return self._db[collection].delete_one({"_id": doc_id}).deleted_count > 0

    def delete_many(self, collection: str, filters: Filters) -> int:
        return int(self._db[collection].delete_many(self._query(filters)).deleted_count)

    def replace(self, collection: str, doc_id: str, doc: Document) -> None:
        body = {k: v for k, v in doc.items() if k != "id"}
        self._db[collection].replace_one({"_id": doc_id}, body, upsert=True)


class SqlDocumentStore(DocumentStore):
    """Backend over the SQLAlchemy ``documents`` table.

    Every call runs in its own transaction.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @staticmethod
    def _out(row: StoredDocument) -> Document:
        return {"id": row.id, **copy.deepcopy(row.data or {})}

    def _rows(self, session: Session, collection: str) -> list[StoredDocument]:
        stmt = select(StoredDocument).where(StoredDocument.collection == collection)
        return list(session.scalars(stmt).all())

    def _matching_rows(self, session: Session, collection: str, filters: Filters) -> list[StoredDocument]:
        return [row for row in self._rows(session, collection) if matches(self._out(row), filters)]

    def insert(self, collection: str, doc: Document) -> Document:
        body = copy.deepcopy({k: v for k, v in doc.items() if k != "id"})
        doc_id = str(doc.get("id") or new_id())
        with self._session_factory.begin() as session:
            session.add(StoredDocument(collection=collection, id=doc_id, data=body))
        return {"id": doc_id, **body}

    def get(self, collection: str, doc_id: str) -> Document | None:
        with self._session_factory() as session:
            row = session.get(StoredDocument, (collection, doc_id))
            return self._out(row) if row is not None else None

    def find(self, collection, filters=None, *, sort=None, descending=False, limit=None):
        with self._session_factory() as session:
            docs = [self._out(row) for row in self._rows(session, collection)]
        docs = [d for d in docs if matches(d, filters)]
        if sort:
            docs.sort(key=_sort_key(sort), reverse=descending)
        if limit:
            docs = docs[: int(limit)]
        return docs

    def _mutate(self, collection: str, doc_id: str, fn: Callable[[Document], None]) -> bool:
        with self._session_factory.begin() as session:
            row = session.get(StoredDocument, (collection, doc_id))
            if row is None:
                return False
            data = copy.deepcopy(row.data or {})
            fn(data)
            # JSON columns only detect reassignment.
            row.data = data
            return True

    def update(self, collection: str, doc_id: str, changes: Document) -> bool:
        body = {k: copy.deepcopy(v) for k, v in changes.items() if k != "id"}
        return self._mutate(collection, doc_id, lambda data: data.update(body))

    def update_many(self, collection: str, filters: Filters, changes: Document) -> int:
        count = 0
        with self._session_factory.begin() as session:
            for row in self._matching_rows(session, collection, filters):
                data = copy.deepcopy(row.data or {})
                data.update(copy.deepcopy(changes))
                row.data = data
                count += 1
        return count

    def increment(self, collection: str, doc_id: str, field: str, amount: int | float = 1) -> None:
        def _inc(data: Document) -> None:
            data[field] = (data.get(field) or 0) + amount

        self._mutate(collection, doc_id, _inc)

    def add_to_set(self, collection: str, doc_id: str, field: str, value: Any) -> None:
        def _add(data: Document) -> None:
            items = list(data.get(field) or [])
            if value not in items:
                items.append(value)
            data[field] = items

        self._mutate(collection, doc_id, _add)

    def pull(self, collection: str, doc_id: str, field: str, value: Any) -> None:
        def _pull(data: Document) -> None:
            data[field] = [v for v in (data.get(field) or []) if v != value]

        self._mutate(collection, doc_id, _pull)

    def pull_many(self, collection: str, field: str, values: Iterable[Any]) -> int:
        wanted = list(values)
        if not wanted:
            return 0
        count = 0
        with self._session_factory.begin() as session:
            for row in self._matching_rows(session, collection, {field: {"$in": wanted}}):
                data = copy.deepcopy(row.data or {})
                data[field] = [v for v in (data.get(field) or []) if v not in wanted]
                row.data = data
                count += 1
        return count

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._session_factory.begin() as session:
            row = session.get(StoredDocument, (collection, doc_id))
            if row is None:
                return False
            session.delete(row)
            return True

    def delete_many(self, collection: str, filters: Filters) -> int:
        with self._session_factory.begin() as session:
            if not filters:
                res = session.execute(delete(StoredDocument).where(StoredDocument.collection == collection))
                return int(res.rowcount or 0)
            rows = self._matching_rows(session, collection, filters)
            for row in rows:
                session.delete(row)
            return len(rows)

    def replace(self, collection: str, doc_id: str, doc: Document) -> None:
        body = copy.deepcopy({k: v for k, v in doc.items() if k != "id"})
        with self._session_factory.begin() as session:
            row = session.get(StoredDocument, (collection, doc_id))
            if row is None:
                session.add(StoredDocument(collection=collection, id=doc_id, data=body))
            else:
                row.data = body
