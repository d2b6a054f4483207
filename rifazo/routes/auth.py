"""Registration and session routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from rifazo.auth import end_session, get_auth_service, login_required, require_user, signed_in_user, start_session
from rifazo.errors import AppError
from rifazo.schemas.auth import (
    LoginResultSchema,
    LoginSchema,
    OrganizerRegistrationSchema,
    RegisterOrganizerSchema,
    RegisterUserSchema,
)
from rifazo.schemas.user import UserSchema
from rifazo.services.auth_service import LoginFailure
from rifazo.utils.responses import ok

auth_bp = Blueprint("auth", __name__)

_register_schema = RegisterUserSchema()
_organizer_schema = OrganizerRegistrationSchema()
_register_organizer_schema = RegisterOrganizerSchema()
_login_schema = LoginSchema()
_login_result_schema = LoginResultSchema()
_user_schema = UserSchema()

LOGIN_MESSAGES = {
    LoginFailure.USER_NOT_FOUND: "Usuario no encontrado.",
    LoginFailure.BLOCKED: "Tu cuenta ha sido bloqueada. Contacta al soporte.",
    LoginFailure.CREDENTIALS_INVALID: "Usuario o contraseña incorrectos.",
}


def login_failure_message(reason: str | None, lockout_minutes: int | None) -> str:
    if reason == LoginFailure.ACCOUNT_LOCKED:
        return f"Cuenta bloqueada temporalmente. Intenta de nuevo en {lockout_minutes} minutos."
    return LOGIN_MESSAGES.get(reason or "", "No se pudo iniciar sesión.")


@auth_bp.post("/register")
def register():
    payload = request.get_json(silent=True) or {}
    data = _register_schema.load(payload)

    user = get_auth_service().register_user(data)
    return ok(_user_schema.dump(user), status_code=201)


@auth_bp.post("/register-organizer")
def register_organizer():
    payload = request.get_json(silent=True) or {}
    data = _register_organizer_schema.load(payload)

    registration = get_auth_service().register_organizer(data, current_app.config["SUPPORT_WHATSAPP_NUMBER"])
    body = _organizer_schema.dump(registration)
    body["user"] = _user_schema.dump(registration.user)
    return ok(body, status_code=201)


@auth_bp.post("/login")
def login():
    payload = request.get_json(silent=True) or {}
    data = _login_schema.load(payload)

    result = get_auth_service().login(str(data["username"]), str(data["password"]))
    if not result.success:
        status = 423 if result.reason == LoginFailure.ACCOUNT_LOCKED else 401
        raise AppError(
            code=str(result.reason),
            message=login_failure_message(result.reason, result.lockout_minutes),
            status_code=status,
            details=_login_result_schema.dump(result),
        )

    start_session(result.user)  # type: ignore[arg-type]
    body = _login_result_schema.dump(result)
    body["user"] = _user_schema.dump(result.user)
    return ok(body)


@auth_bp.post("/logout")
@login_required
def logout():
    user = require_user()
    get_auth_service().logout(user)
    end_session()
    return ok({"logged_out": True})


@auth_bp.get("/me")
def me():
    user = signed_in_user()
    if user is None:
        return ok({"is_logged_in": False, "user": None})
    user = get_auth_service().refresh(user)
    return ok({"is_logged_in": True, "user": _user_schema.dump(user)})
