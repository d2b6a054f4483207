"""Founder user management routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from rifazo.auth import require_user, roles_required
from rifazo.models.user import Role
from rifazo.schemas.user import BlockSchema, PlanAssignSchema, UserCreateSchema, UserSchema, UserUpdateSchema
from rifazo.services.plan_service import PlanService
from rifazo.services.user_service import UserService
from rifazo.utils.responses import ok

admin_users_bp = Blueprint("admin_users", __name__)

_user_schema = UserSchema()
_users_schema = UserSchema(many=True)
_create_schema = UserCreateSchema()
_update_schema = UserUpdateSchema()
_block_schema = BlockSchema()
_plan_schema = PlanAssignSchema()
_service = UserService()
_plans = PlanService()

founder_only = roles_required(Role.FOUNDER.value)


@admin_users_bp.get("/users")
@founder_only
def list_users():
    return ok(_users_schema.dump(_service.list_users()))


@admin_users_bp.get("/users/<user_id>")
@founder_only
def get_user(user_id: str):
    return ok(_user_schema.dump(_service.get_user(user_id)))


@admin_users_bp.post("/users")
@founder_only
def create_user():
    payload = request.get_json(silent=True) or {}
    data = _create_schema.load(payload)

    password = data.pop("password")
    user = _service.create_user(data, password=password, created_by=require_user().username)
    return ok(_user_schema.dump(user), status_code=201)


@admin_users_bp.patch("/users/<user_id>")
@founder_only
def update_user(user_id: str):
    payload = request.get_json(silent=True) or {}
    data = _update_schema.load(payload)

    user = _service.update_user(user_id, data, editor_username=require_user().username)
    return ok(_user_schema.dump(user))


@admin_users_bp.delete("/users/<user_id>")
@founder_only
def delete_user(user_id: str):
    _service.delete_user(user_id, deleter_username=require_user().username)
    return ok({"deleted": user_id})


@admin_users_bp.post("/users/<user_id>/block")
@founder_only
def set_blocked(user_id: str):
    payload = request.get_json(silent=True) or {}
    data = _block_schema.load(payload)

    user = _service.set_blocked(user_id, bool(data["blocked"]), actor=require_user().username)
    return ok(_user_schema.dump(user))


@admin_users_bp.post("/users/<user_id>/approve")
@founder_only
def approve(user_id: str):
    user = _service.approve_organizer(user_id, actor=require_user().username)
    return ok(_user_schema.dump(user))


@admin_users_bp.post("/users/<user_id>/unlock")
@founder_only
def reset_lockout(user_id: str):
    user = _service.reset_lockout(user_id, actor=require_user().username)
    return ok(_user_schema.dump(user))


@admin_users_bp.put("/users/<user_id>/plan")
@founder_only
def assign_plan(user_id: str):
    payload = request.get_json(silent=True) or {}
    data = _plan_schema.load(payload)

    user = _plans.assign_plan(user_id, str(data["plan"]), require_user().username, start_date=data.get("start_date"))
    return ok(_user_schema.dump(user))


@admin_users_bp.delete("/users/<user_id>/plan")
@founder_only
def remove_plan(user_id: str):
    user = _plans.remove_plan(user_id, require_user().username)
    return ok(_user_schema.dump(user))
