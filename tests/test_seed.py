"""Initial platform accounts."""

from __future__ import annotations

from werkzeug.security import check_password_hash

from rifazo import create_app
from rifazo.models.user import FOUNDER_USERNAME
from rifazo.repositories.user_repository import UserRepository
from rifazo.seed import SUPPORT_USERNAME, seed_initial_users


def test_seeds_empty_store(ctx) -> None:
    created = seed_initial_users()
    assert created == [FOUNDER_USERNAME, SUPPORT_USERNAME]

    founder = UserRepository().get_by_username(FOUNDER_USERNAME)
    assert founder.role == "founder"
    assert founder.public_alias == "RIFAZO_Fundador"
    assert check_password_hash(founder.password_hash, ctx.config["SEED_FOUNDER_PASSWORD"])

    support = UserRepository().get_by_username(SUPPORT_USERNAME)
    assert support.role == "admin"
    assert support.plan == "free"
    assert support.company_name == "RIFAZO Soporte"


def test_skips_when_users_exist(ctx, participant) -> None:
    assert seed_initial_users() == []
    assert UserRepository().get_by_username(FOUNDER_USERNAME) is None


def test_create_app_seeds_when_enabled(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app({"SEED_INITIAL_USERS": True, "SEED_FOUNDER_PASSWORD": "fundador-pass"})
    client = app.test_client()

    resp = client.post("/api/auth/login", json={"username": FOUNDER_USERNAME, "password": "fundador-pass"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["user"]["role"] == "founder"
