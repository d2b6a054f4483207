"""Reference data: lotteries, draw times, payment methods and plans."""

from __future__ import annotations

from rifazo.reference.lottery_data import DRAW_TIMES, LOTTERY_NAMES, is_known_draw_time, is_known_lottery
from rifazo.reference.payment_methods import (
    AVAILABLE_PAYMENT_METHODS,
    PAYMENT_METHOD_CATEGORIES,
    get_payment_method,
    get_payment_methods_by_category,
)
from rifazo.reference.plans import NO_PLAN, PLAN_CONFIG, get_feature_status, get_plan_details


class TestLotteryData:
    def test_lists_are_unique_and_ordered(self) -> None:
        assert len(LOTTERY_NAMES) == len(set(LOTTERY_NAMES)) == 15
        assert LOTTERY_NAMES[0] == "La Granjita"
        assert DRAW_TIMES[0] == "08:00 AM"
        assert DRAW_TIMES[-1] == "09:00 PM"
        assert len(DRAW_TIMES) == 14

    def test_membership_helpers(self) -> None:
        assert is_known_lottery("Triple Táchira")
        assert not is_known_lottery("Powerball")
        assert is_known_draw_time("12:00 PM")
        assert not is_known_draw_time("12:30 PM")


class TestPaymentMethods:
    def test_lookup_by_id(self) -> None:
        pago_movil = get_payment_method("pagoMovil")
        assert pago_movil is not None
        assert pago_movil.detail_type == "specificFields"
        assert [f.id for f in pago_movil.fields] == ["ci", "phone", "bank"]
        assert get_payment_method("paypal") is None

    def test_grouping_keeps_category_order(self) -> None:
        grouped = get_payment_methods_by_category()
        assert list(grouped) == PAYMENT_METHOD_CATEGORIES == ["Nacionales", "Internacionales", "Otros"]
        assert sum(len(v) for v in grouped.values()) == len(AVAILABLE_PAYMENT_METHODS)


class TestPlans:
    def test_unknown_plan_gets_zero_limits(self) -> None:
        assert get_plan_details(None) is NO_PLAN
        assert get_plan_details("enterprise") is NO_PLAN
        assert not NO_PLAN.allows_raffle_count(0)

    def test_limits(self) -> None:
        free = PLAN_CONFIG["free"]
        assert free.allows_raffle_count(1)
        assert not free.allows_raffle_count(2)
        assert free.allows_ticket_count(50)
        assert not free.allows_ticket_count(51)

        pro = PLAN_CONFIG["pro"]
        assert pro.allows_raffle_count(10_000)
        assert pro.allows_ticket_count(1_000_000)

    def test_feature_text_reflects_limits(self) -> None:
        assert get_feature_status("raffleLimit", PLAN_CONFIG["free"])["text"] == "Crear hasta 2 rifas activas"
        assert get_feature_status("raffleLimit", PLAN_CONFIG["pro"])["text"] == "Rifas activas ilimitadas"

        backup = get_feature_status("backupRestoreAccess", PLAN_CONFIG["standard"])
        assert backup == {
            "id": "backupRestoreAccess",
            "included": False,
            "text": "Respaldo de datos no disponible",
        }

    def test_unknown_feature(self) -> None:
        status = get_feature_status("teleport", PLAN_CONFIG["pro"])
        assert status["included"] is False
        assert "no definida" in status["text"]


class TestReferenceApi:
    def test_lotteries_and_draw_times(self, client) -> None:
        body = client.get("/api/reference/lotteries").get_json()
        assert body["success"] is True
        assert body["data"] == LOTTERY_NAMES
        assert client.get("/api/reference/draw-times").get_json()["data"] == DRAW_TIMES

    def test_payment_methods(self, client) -> None:
        data = client.get("/api/reference/payment-methods").get_json()["data"]
        assert [m["id"] for m in data["methods"]] == ["pagoMovil", "efectivoUSD", "zinli", "otro"]
        assert data["methods"][0]["fields"][1]["type"] == "tel"
        assert [m["id"] for m in data["by_category"]["Internacionales"]] == ["zinli"]

    def test_plans(self, client) -> None:
        plans = client.get("/api/reference/plans").get_json()["data"]
        assert [p["name"] for p in plans] == ["free", "standard", "pro"]
        assert plans[2]["raffle_limit"] is None
        assert len(plans[0]["features"]) == 14

    def test_unknown_plan_is_404(self, client) -> None:
        resp = client.get("/api/reference/plans/enterprise")
        assert resp.status_code == 404
        assert resp.get_json()["error"]["code"] == "not_found"

    def test_health(self, client) -> None:
        body = client.get("/health").get_json()
        assert body["data"]["status"] == "ok"
        assert body["data"]["db_backend"] == "sql"
