"""Organizer rating routes."""

from __future__ import annotations

from flask import Blueprint, request

from rifazo.auth import login_required, require_user
from rifazo.schemas.result import RatingCreateSchema, RatingSchema
from rifazo.services.rating_service import RatingService
from rifazo.utils.responses import ok

ratings_bp = Blueprint("ratings", __name__)

_schema = RatingSchema()
_many_schema = RatingSchema(many=True)
_create_schema = RatingCreateSchema()
_service = RatingService()


@ratings_bp.post("/ratings")
@login_required
def rate_organizer():
    payload = request.get_json(silent=True) or {}
    data = _create_schema.load(payload)

    rating = _service.rate_organizer(
        str(data["raffle_id"]), require_user(), int(data["rating_stars"]), data.get("comment")
    )
    return ok(_schema.dump(rating), status_code=201)


@ratings_bp.get("/ratings/mine")
@login_required
def list_mine():
    return ok(_many_schema.dump(_service.list_for_rater(require_user().username)))


@ratings_bp.get("/organizers/<username>/ratings")
def list_for_organizer(username: str):
    return ok(_many_schema.dump(_service.list_for_organizer(username)))
