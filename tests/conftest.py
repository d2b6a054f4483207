"""Shared pytest fixtures.

app          - fresh application on an in-memory sqlite store (TestingConfig)
client       - Flask test client for ``app``
ctx          - app context for tests that call services directly
make_user    - factory creating accounts through UserService
login        - signs a user in through the JSON API
raffle_data  - minimal valid raffle creation payload
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Callable

import pytest

from rifazo import create_app
from rifazo.models.user import FOUNDER_USERNAME, ManagedUser, Role
from rifazo.services.user_service import UserService

PASSWORD = "secret123"


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def make_user(app) -> Callable[..., ManagedUser]:
    def _make(username: str, role: str = Role.USER.value, password: str = PASSWORD, **profile: Any) -> ManagedUser:
        with app.app_context():
            return UserService().create_user({"username": username, "role": role, **profile}, password=password)

    return _make


@pytest.fixture
def founder(make_user) -> ManagedUser:
    return make_user(FOUNDER_USERNAME, role=Role.FOUNDER.value)


@pytest.fixture
def organizer(make_user) -> ManagedUser:
    return make_user("organizador", role=Role.ADMIN.value, whatsapp_number="584120000001")


@pytest.fixture
def participant(make_user) -> ManagedUser:
    return make_user("participante")


@pytest.fixture
def login(client) -> Callable[..., dict]:
    def _login(username: str, password: str = PASSWORD) -> dict:
        resp = client.post("/api/auth/login", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()["data"]["user"]

    return _login


@pytest.fixture
def raffle_data() -> dict[str, Any]:
    return {
        "name": "Rifa de prueba",
        "description": "Un televisor de 50 pulgadas nuevo.",
        "image": "https://example.com/tv.png",
        "draw_date": (date.today() + timedelta(days=7)).isoformat(),
        "price_per_ticket": 2.5,
        "currency": "USD",
        "total_numbers": 20,
        "prizes": [{"description": "Televisor", "lottery_name": "Lotto Activo", "draw_time": "08:00 PM"}],
        "accepted_payment_methods": [{"id": "pagoMovil", "admin_provided_details": "0102 V-123"}],
    }


@pytest.fixture
def purchase_form() -> dict[str, Any]:
    return {
        "participant_name": "Ana",
        "participant_last_name": "Pérez",
        "participant_id_card": "V-12345678",
        "participant_phone": "04141234567",
    }
