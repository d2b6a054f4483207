"""Published raffle results."""

from __future__ import annotations

from flask import Blueprint

from rifazo.errors import NotFoundError
from rifazo.schemas.result import RaffleResultSchema
from rifazo.services.result_service import ResultService
from rifazo.utils.responses import ok

results_bp = Blueprint("results", __name__)

_schema = RaffleResultSchema()
_many_schema = RaffleResultSchema(many=True)
_service = ResultService()


@results_bp.get("/results")
def list_results():
    return ok(_many_schema.dump(_service.list_results()))


@results_bp.get("/results/<raffle_id>")
def get_result(raffle_id: str):
    result = _service.get_for_raffle(raffle_id)
    if result is None:
        raise NotFoundError(message=f"No result registered for raffle {raffle_id}")
    return ok(_schema.dump(result))
