"""Web page routes."""

from __future__ import annotations

import logging
import secrets
import string
from typing import Any

from flask import Blueprint, Response, current_app, flash, redirect, render_template, request, session, url_for
from marshmallow import ValidationError as MarshmallowValidationError

from rifazo.auth import end_session, get_auth_service, signed_in_user, start_session
from rifazo.errors import AppError
from rifazo.models.raffle import RaffleStatus
from rifazo.reference.plans import PLAN_CONFIG, PLAN_NAMES_ORDERED
from rifazo.routes.auth import login_failure_message
from rifazo.routes.reference import plan_payload
from rifazo.schemas.auth import ORGANIZER_PAYMENT_OPTIONS, RegisterOrganizerSchema, RegisterUserSchema
from rifazo.services.auth_service import ORGANIZER_AGREEMENTS
from rifazo.services.raffle_service import RaffleService
from rifazo.services.result_service import ResultService

logger = logging.getLogger(__name__)

web_bp = Blueprint("web", __name__)

CAPTCHA_SESSION_KEY = "organizer_captcha"
CAPTCHA_ALPHABET = string.ascii_uppercase + string.digits

_register_schema = RegisterUserSchema()
_organizer_schema = RegisterOrganizerSchema()
_raffles = RaffleService()
_results = ResultService()


def _new_captcha() -> str:
    code = "".join(secrets.choice(CAPTCHA_ALPHABET) for _ in range(5))
    session[CAPTCHA_SESSION_KEY] = code
    return code


def _field_errors(exc: MarshmallowValidationError) -> dict[str, list[str]]:
    messages = exc.messages if isinstance(exc.messages, dict) else {"_schema": exc.messages}
    return {k: v if isinstance(v, list) else [str(v)] for k, v in messages.items()}


@web_bp.get("/")
def index():
    raffles = _raffles.list_raffles(status=RaffleStatus.ACTIVE.value)
    return render_template("index.html", raffles=raffles)


@web_bp.route("/login", methods=["GET", "POST"])
def login():
    if signed_in_user() is not None:
        return redirect(url_for("web.index"))
    if request.method == "GET":
        return render_template("login.html", form={}, error=None)

    form = {"username": (request.form.get("username") or "").strip()}
    result = get_auth_service().login(form["username"], request.form.get("password") or "")
    if not result.success:
        message = login_failure_message(result.reason, result.lockout_minutes)
        return render_template("login.html", form=form, error=message), 401

    start_session(result.user)  # type: ignore[arg-type]
    flash(f"¡Bienvenido, {result.user.display_name}!")  # type: ignore[union-attr]
    if result.expires_soon:
        flash("Tu plan vence mañana. Contacta a soporte para renovarlo.")
    return redirect(url_for("web.index"))


@web_bp.get("/logout")
def logout():
    user = signed_in_user()
    if user is not None:
        get_auth_service().logout(user)
    end_session()
    return redirect(url_for("web.index"))


@web_bp.route("/register", methods=["GET", "POST"])
def register():
    if signed_in_user() is not None:
        return redirect(url_for("web.index"))
    if request.method == "GET":
        return render_template("register.html", form={}, errors={}, error=None)

    form = request.form.to_dict()
    try:
        data = _register_schema.load(form)
        user = get_auth_service().register_user(data)
    except MarshmallowValidationError as e:
        return render_template("register.html", form=form, errors=_field_errors(e), error=None), 400
    except AppError as e:
        return render_template("register.html", form=form, errors=e.details or {}, error=e.message), e.status_code

    flash(f"Cuenta creada para {user.username}. Ya puedes iniciar sesión.")
    return redirect(url_for("web.login"))


def _organizer_form() -> dict[str, Any]:
    form: dict[str, Any] = request.form.to_dict()
    form["payment_methods"] = request.form.getlist("payment_methods")
    for key in ORGANIZER_AGREEMENTS:
        form[key] = request.form.get(key) in ("on", "true", "1")
    return form


def _render_organizer(form: dict[str, Any], errors: dict[str, Any], error: str | None, status: int = 200):
    return (
        render_template(
            "register_organizer.html",
            form=form,
            errors=errors,
            error=error,
            captcha=_new_captcha(),
            payment_options=ORGANIZER_PAYMENT_OPTIONS,
            agreements=ORGANIZER_AGREEMENTS,
        ),
        status,
    )


@web_bp.route("/register-organizer", methods=["GET", "POST"])
def register_organizer():
    if signed_in_user() is not None:
        return redirect(url_for("web.index"))
    if request.method == "GET":
        return _render_organizer({}, {}, None)

    form = _organizer_form()
    expected = session.pop(CAPTCHA_SESSION_KEY, None)
    typed = (form.get("captcha_text") or "").strip().upper()
    if not expected or typed != expected:
        errors = {"captcha_text": ["El código de verificación no coincide."]}
        return _render_organizer(form, errors, None, 400)

    try:
        data = _organizer_schema.load(form)
        registration = get_auth_service().register_organizer(data, current_app.config["SUPPORT_WHATSAPP_NUMBER"])
    except MarshmallowValidationError as e:
        return _render_organizer(form, _field_errors(e), None, 400)
    except AppError as e:
        return _render_organizer(form, e.details or {}, e.message, e.status_code)

    return render_template("register_organizer_sent.html", registration=registration)


@web_bp.get("/results")
def results():
    return render_template("results.html", results=_results.list_results())


@web_bp.get("/plans")
def plans():
    return render_template("plans.html", plans=[plan_payload(PLAN_CONFIG[n]) for n in PLAN_NAMES_ORDERED])


@web_bp.get("/terms")
def terms():
    return render_template("terms.html")


@web_bp.get("/privacy")
def privacy():
    return render_template("privacy.html")


@web_bp.get("/favicon.ico")
def favicon() -> Response:
    svg = """<svg xmlns='http://www.w3.org/2000/svg' viewBox='0 0 64 64'>
    <defs>
        <linearGradient id='g' x1='0' y1='0' x2='1' y2='1'>
            <stop offset='0%' stop-color='#f59e0b'/>
            <stop offset='100%' stop-color='#db2777'/>
        </linearGradient>
    </defs>
    <rect x='6' y='14' width='52' height='36' rx='6' fill='url(#g)'/>
    <circle cx='6' cy='32' r='6' fill='#ffffff'/>
    <circle cx='58' cy='32' r='6' fill='#ffffff'/>
    <text x='32' y='39' text-anchor='middle' font-family='system-ui,Segoe UI,Arial' font-size='20' font-weight='800' fill='#ffffff'>R</text>
</svg>"""

    return Response(svg, mimetype="image/svg+xml")
