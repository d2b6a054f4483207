"""Both storage backends honour the same document API."""

from __future__ import annotations

import mongomock
import pytest

from rifazo.db import create_sql_store
from rifazo.repositories.document_store import MongoDocumentStore, matches


@pytest.fixture(params=["sql", "mongo"])
def store(request):
    if request.param == "sql":
        return create_sql_store("sqlite:///:memory:")
    return MongoDocumentStore(mongomock.MongoClient()["rifazo_test"])


def test_matches_equality_list_and_in() -> None:
    doc = {"status": "active", "tags": ["a", "b"]}
    assert matches(doc, {"status": "active"})
    assert matches(doc, {"tags": "b"})
    assert matches(doc, {"status": {"$in": ["completed", "active"]}})
    assert matches(doc, {"tags": {"$in": ["z", "a"]}})
    assert not matches(doc, {"status": "completed"})
    assert matches(doc, None)


def test_insert_get_and_find(store) -> None:
    saved = store.insert("raffles", {"name": "Uno", "status": "active", "total_numbers": 10})
    store.insert("raffles", {"name": "Dos", "status": "completed", "total_numbers": 30})

    assert saved["id"]
    assert store.get("raffles", saved["id"])["name"] == "Uno"
    assert store.get("raffles", "missing") is None
    assert [d["name"] for d in store.find("raffles", {"status": "active"})] == ["Uno"]
    assert [d["name"] for d in store.find("raffles", sort="total_numbers", descending=True)] == ["Dos", "Uno"]
    assert len(store.find("raffles", limit=1)) == 1
    assert store.count("raffles") == 2
    assert store.find("users") == []


def test_find_by_id_and_in(store) -> None:
    a = store.insert("participations", {"raffle_id": "r1"})
    store.insert("participations", {"raffle_id": "r2"})
    store.insert("participations", {"raffle_id": "r3"})

    assert store.find_one("participations", {"id": a["id"]})["raffle_id"] == "r1"
    found = store.find("participations", {"raffle_id": {"$in": ["r1", "r3"]}})
    assert sorted(d["raffle_id"] for d in found) == ["r1", "r3"]


def test_updates(store) -> None:
    doc = store.insert("users", {"username": "ana", "rating_count": 0, "favorite_raffle_ids": []})
    doc_id = doc["id"]

    assert store.update("users", doc_id, {"bio": "hola"})
    assert not store.update("users", "missing", {"bio": "x"})
    store.increment("users", doc_id, "rating_count", 2)
    store.add_to_set("users", doc_id, "favorite_raffle_ids", "r1")
    store.add_to_set("users", doc_id, "favorite_raffle_ids", "r1")
    store.add_to_set("users", doc_id, "favorite_raffle_ids", "r2")
    store.pull("users", doc_id, "favorite_raffle_ids", "r2")

    got = store.get("users", doc_id)
    assert got["bio"] == "hola"
    assert got["rating_count"] == 2
    assert got["favorite_raffle_ids"] == ["r1"]


def test_update_many_and_pull_many(store) -> None:
    store.insert("users", {"username": "a", "plan_assigned_by": "old", "favorite_raffle_ids": ["r1", "r2"]})
    store.insert("users", {"username": "b", "plan_assigned_by": "old", "favorite_raffle_ids": ["r3"]})
    store.insert("users", {"username": "c", "plan_assigned_by": "other", "favorite_raffle_ids": []})

    assert store.update_many("users", {"plan_assigned_by": "old"}, {"plan_assigned_by": "new"}) == 2
    assert store.count("users", {"plan_assigned_by": "new"}) == 2
    assert store.update_many("users", {"plan_assigned_by": "new"}, {"plan_assigned_by": "new"}) == 2

    assert store.pull_many("users", "favorite_raffle_ids", ["r1", "r3"]) == 2
    favorites = {d["username"]: d["favorite_raffle_ids"] for d in store.find("users")}
    assert favorites == {"a": ["r2"], "b": [], "c": []}
    assert store.pull_many("users", "favorite_raffle_ids", []) == 0


def test_delete_and_replace(store) -> None:
    a = store.insert("ratings", {"raffle_id": "r1"})
    store.insert("ratings", {"raffle_id": "r1"})
    store.insert("ratings", {"raffle_id": "r2"})

    assert store.delete("ratings", a["id"])
    assert not store.delete("ratings", a["id"])
    assert store.delete_many("ratings", {"raffle_id": "r1"}) == 1
    assert store.delete_many("ratings", None) == 1
    assert store.count("ratings") == 0

    store.replace("ratings", "fixed-id", {"id": "fixed-id", "rating_stars": 4})
    store.replace("ratings", "fixed-id", {"rating_stars": 5})
    assert store.get("ratings", "fixed-id") == {"id": "fixed-id", "rating_stars": 5}


def test_returned_documents_are_copies(store) -> None:
    doc = store.insert("raffles", {"prizes": [{"description": "TV"}]})
    got = store.get("raffles", doc["id"])
    got["prizes"].append({"description": "Moto"})
    assert len(store.get("raffles", doc["id"])["prizes"]) == 1
