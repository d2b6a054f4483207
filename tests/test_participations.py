"""Ticket purchases, payment review, winners and organizer ratings."""

from __future__ import annotations

from urllib.parse import unquote

import pytest
from marshmallow import ValidationError as SchemaValidationError

from rifazo.errors import ConflictError, ForbiddenError, ValidationError
from rifazo.models.participation import PaymentStatus
from rifazo.repositories.participation_repository import ParticipationRepository
from rifazo.repositories.raffle_repository import RaffleRepository
from rifazo.repositories.user_repository import UserRepository
from rifazo.schemas.raffle import RaffleCreateSchema, RegisterWinnersSchema
from rifazo.services.participation_service import ParticipationService
from rifazo.services.raffle_service import RaffleService
from rifazo.services.rating_service import RatingService
from rifazo.services.result_service import ResultService

SUPPORT = "584141135956"


@pytest.fixture
def raffle(ctx, organizer, raffle_data):
    data = RaffleCreateSchema().load({**raffle_data, "min_tickets_per_purchase": 1, "max_tickets_per_purchase": 3})
    return RaffleService().create_raffle(data, organizer)


@pytest.fixture
def participations(ctx):
    return ParticipationService()


class TestPurchase:
    def test_pending_participation_and_message(self, participations, raffle, participant, purchase_form) -> None:
        receipt = participations.purchase(raffle.id, participant, {**purchase_form, "numbers": [5, 2]}, SUPPORT)

        assert receipt.participation.payment_status == PaymentStatus.PENDING.value
        assert receipt.participation.numbers == [2, 5]
        assert receipt.participation.creator_username == "organizador"
        assert receipt.total_amount == 5.0
        assert "📌 Rifa: Rifa de prueba" in receipt.whatsapp_message
        assert "🏷️ A nombre de: Ana Pérez" in receipt.whatsapp_message
        assert "🎟️ Número(s) seleccionado(s): 2, 5" in receipt.whatsapp_message
        assert "💰 Total a pagar: $5.00" in receipt.whatsapp_message
        assert "📝 Notas adicionales: Ninguna" in receipt.whatsapp_message
        # The organizer's own WhatsApp number wins over support.
        assert receipt.whatsapp_url.startswith("https://wa.me/584120000001?text=")
        assert unquote(receipt.whatsapp_url.split("text=", 1)[1]) == receipt.whatsapp_message

    def test_taken_numbers(self, participations, raffle, participant, purchase_form) -> None:
        participations.purchase(raffle.id, participant, {**purchase_form, "numbers": [4]}, SUPPORT)
        with pytest.raises(ConflictError) as exc:
            participations.purchase(raffle.id, participant, {**purchase_form, "numbers": [3, 4]}, SUPPORT)
        assert exc.value.message == "El número 4 ya no está disponible."

    def test_rejected_numbers_are_released(self, participations, raffle, founder, participant, purchase_form) -> None:
        first = participations.purchase(raffle.id, participant, {**purchase_form, "numbers": [4]}, SUPPORT)
        participations.set_payment_status(first.participation.id, PaymentStatus.REJECTED.value, founder)
        again = participations.purchase(raffle.id, participant, {**purchase_form, "numbers": [4]}, SUPPORT)
        assert again.participation.numbers == [4]

    @pytest.mark.parametrize(
        "numbers",
        [[], [0], [21], [1, 1], [1, 2, 3, 4]],
        ids=["empty", "zero", "above-total", "repeated", "above-max-per-purchase"],
    )
    def test_invalid_numbers(self, participations, raffle, participant, purchase_form, numbers) -> None:
        with pytest.raises(ValidationError):
            participations.purchase(raffle.id, participant, {**purchase_form, "numbers": numbers}, SUPPORT)

    def test_missing_participant_data(self, participations, raffle, participant, purchase_form) -> None:
        with pytest.raises(ValidationError):
            participations.purchase(
                raffle.id, participant, {**purchase_form, "participant_phone": " ", "numbers": [1]}, SUPPORT
            )

    def test_inactive_raffle(self, participations, raffle, participant, purchase_form) -> None:
        RaffleRepository().update(raffle.id, {"status": "completed"})
        with pytest.raises(ValidationError):
            participations.purchase(raffle.id, participant, {**purchase_form, "numbers": [1]}, SUPPORT)

    def test_support_number_fallback(self, participations, founder, participant, purchase_form, raffle_data) -> None:
        raffle = RaffleService().create_raffle(RaffleCreateSchema().load(raffle_data), founder)
        receipt = participations.purchase(raffle.id, participant, {**purchase_form, "numbers": [1]}, SUPPORT)
        assert receipt.whatsapp_url.startswith(f"https://wa.me/{SUPPORT}?text=")


class TestPaymentReview:
    def test_only_creator_or_founder(self, participations, raffle, make_user, participant, purchase_form) -> None:
        receipt = participations.purchase(raffle.id, participant, {**purchase_form, "numbers": [1]}, SUPPORT)
        stranger = make_user("otro_org", role="admin")
        with pytest.raises(ForbiddenError):
            participations.set_payment_status(receipt.participation.id, PaymentStatus.CONFIRMED.value, stranger)
        with pytest.raises(ForbiddenError):
            participations.list_for_raffle(raffle.id, stranger)

    def test_confirm_and_delete(self, participations, raffle, organizer, participant, purchase_form) -> None:
        receipt = participations.purchase(raffle.id, participant, {**purchase_form, "numbers": [1, 2]}, SUPPORT)
        confirmed = participations.set_payment_status(
            receipt.participation.id, PaymentStatus.CONFIRMED.value, organizer
        )
        assert confirmed.payment_status == "confirmed"
        assert [p.id for p in participations.list_for_organizer(organizer, status="confirmed")] == [confirmed.id]
        assert participations.list_for_organizer(organizer, status="pending") == []

        with pytest.raises(ValidationError):
            participations.set_payment_status(receipt.participation.id, "refunded", organizer)

        participations.delete_participation(receipt.participation.id, organizer)
        assert ParticipationRepository().get(receipt.participation.id) is None

    def test_reviewed_payment_cannot_change(
        self, participations, raffle, organizer, participant, make_user, purchase_form
    ) -> None:
        first = participations.purchase(raffle.id, participant, {**purchase_form, "numbers": [7]}, SUPPORT)
        participations.set_payment_status(first.participation.id, PaymentStatus.REJECTED.value, organizer)
        buyer = make_user("comprador")
        second = participations.purchase(raffle.id, buyer, {**purchase_form, "numbers": [7]}, SUPPORT)
        participations.set_payment_status(second.participation.id, PaymentStatus.CONFIRMED.value, organizer)

        with pytest.raises(ConflictError):
            participations.set_payment_status(first.participation.id, PaymentStatus.CONFIRMED.value, organizer)
        with pytest.raises(ConflictError):
            participations.set_payment_status(second.participation.id, PaymentStatus.REJECTED.value, organizer)

        holders = [
            p.participant_username
            for p in ParticipationRepository().list_by_raffle(raffle.id)
            if 7 in p.numbers and p.payment_status != PaymentStatus.REJECTED.value
        ]
        assert holders == ["comprador"]


class TestResults:
    def test_winner_details_filled_from_confirmed_ticket(
        self, participations, raffle, organizer, participant, purchase_form
    ) -> None:
        receipt = participations.purchase(raffle.id, participant, {**purchase_form, "numbers": [7]}, SUPPORT)
        participations.set_payment_status(receipt.participation.id, PaymentStatus.CONFIRMED.value, organizer)

        result = ResultService().register_winners(raffle.id, [{"winning_number": 7}], organizer)

        assert result.winning_numbers == [7]
        assert result.winner_names == ["Ana Pérez"]
        assert result.winner_phones == ["04141234567"]
        stored = RaffleRepository().get(raffle.id)
        assert stored.status == "completed"
        assert stored.winner_names == ["Ana Pérez"]

    def test_pending_ticket_does_not_fill_winner(self, participations, raffle, organizer, participant, purchase_form):
        participations.purchase(raffle.id, participant, {**purchase_form, "numbers": [7]}, SUPPORT)
        result = ResultService().register_winners(
            raffle.id, [{"winning_number": 7, "winner_phone": "0412"}], organizer
        )
        assert result.winner_names == [None]
        assert result.winner_phones == ["0412"]

    @pytest.mark.parametrize("entry", [{"winner_name": "Ana"}, {"winning_number": None}], ids=["missing", "null"])
    def test_winning_number_required(self, entry) -> None:
        with pytest.raises(SchemaValidationError) as exc:
            RegisterWinnersSchema().load({"winners": [entry]})
        assert "winning_number" in exc.value.messages["winners"][0]

    def test_rules(self, raffle, organizer, make_user) -> None:
        service = ResultService()
        with pytest.raises(ValidationError):
            service.register_winners(raffle.id, [{"winning_number": 1}, {"winning_number": 2}], organizer)
        with pytest.raises(ValidationError):
            service.register_winners(raffle.id, [{"winning_number": 99}], organizer)
        with pytest.raises(ForbiddenError):
            service.register_winners(raffle.id, [{"winning_number": 1}], make_user("otro_org", role="admin"))

        with pytest.raises(ValidationError):
            service.register_winners(raffle.id, [{"winning_number": None, "winner_name": "Ana"}], organizer)
        assert RaffleRepository().get(raffle.id).status == "active"

        service.register_winners(raffle.id, [{"winning_number": 1}], organizer)
        with pytest.raises(ConflictError):
            service.register_winners(raffle.id, [{"winning_number": 2}], organizer)
        assert service.get_for_raffle(raffle.id).winning_numbers == [1]


class TestRatings:
    def test_running_average(self, participations, raffle, organizer, make_user, purchase_form) -> None:
        ratings = RatingService()
        for number, (username, stars) in enumerate((("p1", 5), ("p2", 2), ("p3", 4)), start=1):
            rater = make_user(username)
            receipt = participations.purchase(raffle.id, rater, {**purchase_form, "numbers": [number]}, SUPPORT)
            participations.set_payment_status(receipt.participation.id, PaymentStatus.CONFIRMED.value, organizer)
            ratings.rate_organizer(raffle.id, rater, stars, comment="  ")

        stored = UserRepository().get(organizer.id)
        assert stored.rating_count == 3
        assert stored.average_rating == pytest.approx(11 / 3)
        assert ratings.list_for_organizer("organizador")[0].comment is None
        assert ratings.has_rated("p1", raffle.id)
        assert all(p.user_has_rated_organizer_for_raffle for p in ParticipationRepository().list_by_raffle(raffle.id))

    def test_rating_rules(self, participations, raffle, organizer, participant, purchase_form) -> None:
        ratings = RatingService()
        with pytest.raises(ValidationError):
            ratings.rate_organizer(raffle.id, participant, 6)

        receipt = participations.purchase(raffle.id, participant, {**purchase_form, "numbers": [1]}, SUPPORT)
        with pytest.raises(ForbiddenError):
            ratings.rate_organizer(raffle.id, participant, 4)

        participations.set_payment_status(receipt.participation.id, PaymentStatus.CONFIRMED.value, organizer)
        ratings.rate_organizer(raffle.id, participant, 4)
        with pytest.raises(ConflictError):
            ratings.rate_organizer(raffle.id, participant, 5)


class TestPurchaseApi:
    def test_purchase_confirm_and_winner_flow(
        self, client, organizer, participant, login, raffle_data, purchase_form
    ) -> None:
        login("organizador")
        raffle_id = client.post("/api/raffles", json=raffle_data).get_json()["data"]["id"]
        client.post("/api/auth/logout")

        login("participante")
        resp = client.post(f"/api/raffles/{raffle_id}/participations", json={**purchase_form, "numbers": [3, 8]})
        assert resp.status_code == 201
        receipt = resp.get_json()["data"]
        assert receipt["total_amount"] == 5.0
        participation_id = receipt["participation"]["id"]

        again = client.post(f"/api/raffles/{raffle_id}/participations", json={**purchase_form, "numbers": [8]})
        assert again.status_code == 409
        assert [p["id"] for p in client.get("/api/participations/mine").get_json()["data"]] == [participation_id]
        client.post("/api/auth/logout")

        login("organizador")
        pending = client.get("/api/participations?status=pending").get_json()["data"]
        assert [p["id"] for p in pending] == [participation_id]
        confirmed = client.post(f"/api/participations/{participation_id}/confirm").get_json()["data"]
        assert confirmed["payment_status"] == "confirmed"
        assert client.post(f"/api/participations/{participation_id}/reject").status_code == 409

        missing = client.post(f"/api/raffles/{raffle_id}/winners", json={"winners": [{"winning_number": None}]})
        assert missing.status_code == 400

        resp = client.post(f"/api/raffles/{raffle_id}/winners", json={"winners": [{"winning_number": 8}]})
        assert resp.status_code == 201
        assert resp.get_json()["data"]["winner_names"] == ["Ana Pérez"]
        client.post("/api/auth/logout")

        results = client.get("/api/results").get_json()["data"]
        assert [r["raffle_id"] for r in results] == [raffle_id]
        assert client.get(f"/api/results/{raffle_id}").status_code == 200

        login("participante")
        resp = client.post("/api/ratings", json={"raffle_id": raffle_id, "rating_stars": 5, "comment": "Excelente"})
        assert resp.status_code == 201
        public = client.get("/api/organizers/organizador/ratings").get_json()["data"]
        assert public[0]["comment"] == "Excelente"

    def test_purchase_requires_login(self, client, organizer, login, raffle_data, purchase_form) -> None:
        login("organizador")
        raffle_id = client.post("/api/raffles", json=raffle_data).get_json()["data"]["id"]
        client.post("/api/auth/logout")
        resp = client.post(f"/api/raffles/{raffle_id}/participations", json={**purchase_form, "numbers": [1]})
        assert resp.status_code == 401
