"""Static reference data: lotteries, draw times, payment methods and plans."""

from __future__ import annotations

from flask import Blueprint

from rifazo.errors import NotFoundError
from rifazo.reference.lottery_data import DRAW_TIMES, LOTTERY_NAMES
from rifazo.reference.payment_methods import (
    AVAILABLE_PAYMENT_METHODS,
    PAYMENT_METHOD_CATEGORIES,
    get_payment_methods_by_category,
)
from rifazo.reference.plans import PLAN_CONFIG, PLAN_NAMES_ORDERED, PlanDetails, get_feature_status
from rifazo.schemas.reference import PaymentMethodOptionSchema, PlanSchema
from rifazo.utils.responses import ok

reference_bp = Blueprint("reference", __name__)

_methods_schema = PaymentMethodOptionSchema(many=True)
_plan_schema = PlanSchema()


def plan_payload(plan: PlanDetails) -> dict:
    body = _plan_schema.dump(plan)
    body["features"] = [get_feature_status(feature_id, plan) for feature_id in plan.feature_list_ids]
    return body


@reference_bp.get("/lotteries")
def list_lotteries():
    return ok(list(LOTTERY_NAMES))


@reference_bp.get("/draw-times")
def list_draw_times():
    return ok(list(DRAW_TIMES))


@reference_bp.get("/payment-methods")
def list_payment_methods():
    by_category = get_payment_methods_by_category()
    return ok(
        {
            "methods": _methods_schema.dump(AVAILABLE_PAYMENT_METHODS),
            "categories": list(PAYMENT_METHOD_CATEGORIES),
            "by_category": {c: _methods_schema.dump(m) for c, m in by_category.items()},
        }
    )


@reference_bp.get("/plans")
def list_plans():
    return ok([plan_payload(PLAN_CONFIG[name]) for name in PLAN_NAMES_ORDERED])


@reference_bp.get("/plans/<name>")
def get_plan(name: str):
    plan = PLAN_CONFIG.get(name)
    if plan is None:
        raise NotFoundError(message=f'Plan "{name}" not found')
    return ok(plan_payload(plan))
