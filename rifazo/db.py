"""Storage initialization.

The application keeps a single ``DocumentStore`` in ``app.extensions``.
``DB_BACKEND`` selects MongoDB (``mongo``) or a SQL database through
SQLAlchemy (``sql``).
"""

from __future__ import annotations

import logging

from flask import Flask, current_app
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rifazo.models.base import Base
from rifazo.repositories.document_store import DocumentStore, MongoDocumentStore, SqlDocumentStore

logger = logging.getLogger(__name__)


def create_app_engine(database_url: str) -> Engine:
    url = make_url(database_url)

    # In-memory sqlite must share one connection or every session sees an empty DB.
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            future=True,
        )

    return create_engine(database_url, pool_pre_ping=True, future=True)


def create_sql_store(database_url: str) -> SqlDocumentStore:
    engine = create_app_engine(database_url)
    # Single generic table; created on start (no migrations needed).
    Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    return SqlDocumentStore(session_factory)


def create_mongo_store(mongo_uri: str, mongo_db: str) -> MongoDocumentStore:
    from pymongo import MongoClient

    client = MongoClient(mongo_uri)
    db = client[mongo_db]
    db["users"].create_index("username", unique=True)
    return MongoDocumentStore(db)


def get_db_backend() -> str:
    return str(current_app.config.get("DB_BACKEND", "sql")).lower().strip()


def init_db(app: Flask) -> None:
    """Create the document store for the configured backend."""

    backend = str(app.config.get("DB_BACKEND", "sql")).lower().strip()
    if backend == "mongo":
        store: DocumentStore = create_mongo_store(
            str(app.config["MONGODB_URI"]),
            str(app.config["MONGODB_DB"]),
        )
        logger.info("Using MongoDB document store (db=%s)", app.config["MONGODB_DB"])
    elif backend == "sql":
        store = create_sql_store(str(app.config["DATABASE_URL"]))
        logger.info("Using SQL document store (%s)", make_url(str(app.config["DATABASE_URL"])).get_backend_name())
    else:
        raise RuntimeError(f"Unsupported DB_BACKEND: {backend!r}")

    app.extensions["document_store"] = store


def get_store() -> DocumentStore:
    """Get the application's document store."""

    store: DocumentStore | None = current_app.extensions.get("document_store")
    if store is None:
        raise RuntimeError("Document store not initialized")
    return store
