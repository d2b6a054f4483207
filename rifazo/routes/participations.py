"""Participation routes: a participant's purchases and organizer payment review."""

from __future__ import annotations

from flask import Blueprint, request

from rifazo.auth import login_required, require_user, roles_required
from rifazo.models.participation import PaymentStatus
from rifazo.models.user import ORGANIZER_ROLES
from rifazo.schemas.participation import ParticipationSchema
from rifazo.services.participation_service import ParticipationService
from rifazo.utils.responses import ok

participations_bp = Blueprint("participations", __name__)

_schema = ParticipationSchema()
_many_schema = ParticipationSchema(many=True)
_service = ParticipationService()


@participations_bp.get("/participations/mine")
@login_required
def list_mine():
    return ok(_many_schema.dump(_service.list_for_participant(require_user().username)))


@participations_bp.get("/participations")
@roles_required(*ORGANIZER_ROLES)
def list_for_organizer():
    """Participations across the caller's raffles; ``?status=pending`` filters."""

    status = (request.args.get("status") or "").strip() or None
    return ok(_many_schema.dump(_service.list_for_organizer(require_user(), status=status)))


@participations_bp.post("/participations/<participation_id>/confirm")
@roles_required(*ORGANIZER_ROLES)
def confirm(participation_id: str):
    participation = _service.set_payment_status(participation_id, PaymentStatus.CONFIRMED.value, require_user())
    return ok(_schema.dump(participation))


@participations_bp.post("/participations/<participation_id>/reject")
@roles_required(*ORGANIZER_ROLES)
def reject(participation_id: str):
    participation = _service.set_payment_status(participation_id, PaymentStatus.REJECTED.value, require_user())
    return ok(_schema.dump(participation))


@participations_bp.delete("/participations/<participation_id>")
@roles_required(*ORGANIZER_ROLES)
def delete(participation_id: str):
    _service.delete_participation(participation_id, require_user())
    return ok({"deleted": participation_id})
