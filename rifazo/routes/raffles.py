"""Raffle routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from rifazo.auth import login_required, require_user, roles_required
from rifazo.models.raffle import Raffle
from rifazo.models.user import ORGANIZER_ROLES
from rifazo.schemas.participation import ParticipationSchema, PurchaseReceiptSchema, PurchaseSchema
from rifazo.schemas.raffle import RaffleCreateSchema, RaffleSchema, RaffleUpdateSchema, RegisterWinnersSchema
from rifazo.schemas.result import RaffleResultSchema
from rifazo.services.participation_service import ParticipationService
from rifazo.services.raffle_service import RaffleService
from rifazo.services.result_service import ResultService
from rifazo.services.user_service import UserService
from rifazo.utils.responses import ok

raffles_bp = Blueprint("raffles", __name__)

_raffle_schema = RaffleSchema()
_raffles_schema = RaffleSchema(many=True)
_create_schema = RaffleCreateSchema()
_update_schema = RaffleUpdateSchema()
_winners_schema = RegisterWinnersSchema()
_result_schema = RaffleResultSchema()
_purchase_schema = PurchaseSchema()
_receipt_schema = PurchaseReceiptSchema()
_participations_schema = ParticipationSchema(many=True)

_service = RaffleService()
_participation_service = ParticipationService()
_result_service = ResultService()
_user_service = UserService()


def _dump(raffle: Raffle, with_availability: bool = False) -> dict:
    body = _raffle_schema.dump(raffle)
    if with_availability:
        sold = _service.effective_sold_numbers(str(raffle.id))
        body["effective_sold_numbers"] = sold
        body["available_count"] = max(0, raffle.total_numbers - len(sold))
    return body


@raffles_bp.get("/raffles")
def list_raffles():
    """List raffles, newest first.

    Query params:
    - status: optional status filter (active/pending_draw/completed/cancelled)
    - creator: optional organizer username
    """

    status = (request.args.get("status") or "").strip() or None
    creator = (request.args.get("creator") or "").strip() or None
    raffles = _service.list_raffles(status=status, creator_username=creator)
    return ok(_raffles_schema.dump(raffles))


@raffles_bp.get("/raffles/favorites")
@login_required
def list_favorites():
    user = require_user()
    return ok(_raffles_schema.dump(_user_service.list_favorites(str(user.id))))


@raffles_bp.get("/raffles/<raffle_id>")
def get_raffle(raffle_id: str):
    return ok(_dump(_service.get_raffle(raffle_id), with_availability=True))


@raffles_bp.post("/raffles")
@roles_required(*ORGANIZER_ROLES)
def create_raffle():
    payload = request.get_json(silent=True) or {}
    data = _create_schema.load(payload)

    raffle = _service.create_raffle(data, require_user())
    return ok(_dump(raffle), status_code=201)


@raffles_bp.patch("/raffles/<raffle_id>")
@roles_required(*ORGANIZER_ROLES)
def update_raffle(raffle_id: str):
    payload = request.get_json(silent=True) or {}
    data = _update_schema.load(payload)

    raffle = _service.update_raffle(raffle_id, data, require_user())
    return ok(_dump(raffle, with_availability=True))


@raffles_bp.delete("/raffles/<raffle_id>")
@roles_required(*ORGANIZER_ROLES)
def delete_raffle(raffle_id: str):
    _service.delete_raffle(raffle_id, require_user())
    return ok({"deleted": raffle_id})


@raffles_bp.get("/raffles/<raffle_id>/participations")
@roles_required(*ORGANIZER_ROLES)
def list_raffle_participations(raffle_id: str):
    participations = _participation_service.list_for_raffle(raffle_id, require_user())
    return ok(_participations_schema.dump(participations))


@raffles_bp.post("/raffles/<raffle_id>/participations")
@login_required
def purchase(raffle_id: str):
    payload = request.get_json(silent=True) or {}
    data = _purchase_schema.load(payload)

    receipt = _participation_service.purchase(
        raffle_id, require_user(), data, current_app.config["SUPPORT_WHATSAPP_NUMBER"]
    )
    return ok(_receipt_schema.dump(receipt), status_code=201)


@raffles_bp.post("/raffles/<raffle_id>/winners")
@roles_required(*ORGANIZER_ROLES)
def register_winners(raffle_id: str):
    payload = request.get_json(silent=True) or {}
    data = _winners_schema.load(payload)

    result = _result_service.register_winners(raffle_id, data["winners"], require_user())
    return ok(_result_schema.dump(result), status_code=201)


@raffles_bp.post("/raffles/<raffle_id>/favorite")
@login_required
def toggle_favorite(raffle_id: str):
    user = require_user()
    is_favorite = _user_service.toggle_favorite(str(user.id), raffle_id)
    return ok({"raffle_id": raffle_id, "is_favorite": is_favorite})
