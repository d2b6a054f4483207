"""Registration, login with lockout, and single-session enforcement."""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any
from urllib.parse import quote

from werkzeug.security import check_password_hash

from rifazo.models.activity_log import ActionType
from rifazo.models.user import ManagedUser, OrganizerType, Role
from rifazo.repositories.user_repository import UserRepository
from rifazo.services.activity_log_service import ActivityLogService
from rifazo.services.plan_service import PlanService
from rifazo.services.user_service import UserService
from rifazo.utils.timeutils import parse_iso, to_iso, utcnow

logger = logging.getLogger(__name__)

MAX_FAILED_ATTEMPTS = 5
LOCKOUT_MINUTES = 15

# Declarations an organizer must accept, in the order they are listed.
ORGANIZER_AGREEMENTS: dict[str, str] = {
    "commitment_agreed": "Me comprometo a rifar productos reales y legales",
    "guarantee_agreed": "Garantizo la entrega del premio al ganador",
    "fraud_policy_agreed": "Entiendo que el fraude será motivo de suspensión",
    "terms_agreed": "Acepto los términos de RIFAZO",
    "contact_agreed": "Autorizo ser contactado por soporte",
    "info_is_truthful_agreed": "Toda la información proporcionada es verdadera",
}


class LoginFailure:
    USER_NOT_FOUND = "user_not_found"
    ACCOUNT_LOCKED = "account_locked"
    BLOCKED = "blocked"
    CREDENTIALS_INVALID = "credentials_invalid"


@dataclass(frozen=True)
class LoginResult:
    success: bool
    reason: str | None = None
    lockout_minutes: int | None = None
    user: ManagedUser | None = None
    expires_soon: bool = False


@dataclass(frozen=True)
class OrganizerRegistration:
    user: ManagedUser
    whatsapp_message: str
    whatsapp_url: str


def whatsapp_url(number: str, message: str | None = None) -> str:
    url = f"https://wa.me/{number}"
    if message:
        url += "?text=" + quote(message, safe="")
    return url


def payment_methods_text(methods: list[str], other: str | None) -> list[str]:
    """Selected methods with the free-form "Otro" entry expanded."""

    if "Otro" not in methods:
        return list(methods)
    return [m for m in methods if m != "Otro"] + [f"Otro: {other or ''}".rstrip()]


def build_organizer_request_message(data: dict[str, Any]) -> str:
    """WhatsApp message sent to support asking for organizer approval."""

    if data.get("organizer_type") == OrganizerType.INDIVIDUAL.value:
        identifier = f"*Nombre completo:* {data.get('full_name')}"
    else:
        identifier = f"*Empresa:* {data.get('company_name')}\n*RIF:* {data.get('rif')}"

    methods = ", ".join(payment_methods_text(list(data.get("payment_methods") or []), data.get("other_payment_method")))
    profile = "Individual" if data.get("organizer_type") == OrganizerType.INDIVIDUAL.value else "Negocio o marca"
    declarations = "\n".join(f"- {label}: Sí" for label in ORGANIZER_AGREEMENTS.values())

    return (
        "*NUEVA SOLICITUD DE ORGANIZADOR - RIFAZO*\n"
        "-------------------------------------\n"
        "*DATOS PERSONALES*\n"
        f"{identifier}\n"
        f"*Cédula de identidad:* {data.get('id_card_number')}\n"
        f"*Correo electrónico:* {data.get('email')}\n"
        f"*Número de teléfono (WhatsApp):* {data.get('whatsapp_number')}\n"
        "\n"
        "*UBICACIÓN*\n"
        f"*Estado:* {data.get('location_state')}\n"
        f"*Ciudad:* {data.get('location_city')}\n"
        "\n"
        "*INFORMACIÓN COMERCIAL*\n"
        f"*Nombre del proyecto:* {data.get('commercial_name') or 'N/A'}\n"
        f"*Métodos de pago:* {methods}\n"
        "\n"
        "*PERFIL PÚBLICO*\n"
        f"*Alias visible:* {data.get('public_alias')}\n"
        f"*Biografía:* {data.get('bio') or 'N/A'}\n"
        f"*Perfil del organizador:* {profile}\n"
        "\n"
        "*DATOS DE ACCESO (sistema)*\n"
        f"*Nombre de Usuario:* {data.get('username')}\n"
        "*(La contraseña es privada y no se muestra)*\n"
        "\n"
        "*DECLARACIÓN Y COMPROMISO*\n"
        f"{declarations}\n"
        "-------------------------------------\n"
        "*Por favor, revise esta solicitud para su aprobación. Para completar la verificación, "
        "por favor adjunta una foto de tu cédula en este chat.*"
    )


class AuthService:
    """Account registration and authentication."""

    def __init__(
        self,
        users: UserRepository | None = None,
        user_service: UserService | None = None,
        plans: PlanService | None = None,
        activity: ActivityLogService | None = None,
        max_failed_attempts: int = MAX_FAILED_ATTEMPTS,
        lockout_minutes: int = LOCKOUT_MINUTES,
    ) -> None:
        self._users = users or UserRepository()
        self._user_service = user_service or UserService(users=self._users)
        self._plans = plans or PlanService(users=self._users)
        self._activity = activity or ActivityLogService()
        self._max_failed_attempts = max_failed_attempts
        self._lockout_minutes = lockout_minutes

    # Registration

    def register_user(self, data: dict[str, Any]) -> ManagedUser:
        """Create a participant account from a validated registration form."""

        return self._user_service.create_user(
            {"username": data["username"], "role": Role.USER.value},
            password=str(data["password"]),
        )

    def register_organizer(self, data: dict[str, Any], support_number: str) -> OrganizerRegistration:
        """Create an organizer account awaiting founder approval."""

        is_individual = data.get("organizer_type") == OrganizerType.INDIVIDUAL.value
        profile = {
            "username": data["username"],
            "role": Role.PENDING_APPROVAL.value,
            "organizer_type": data.get("organizer_type"),
            "full_name": data.get("full_name") if is_individual else None,
            "company_name": None if is_individual else data.get("company_name"),
            "rif": None if is_individual else data.get("rif"),
            "id_card_number": data.get("id_card_number"),
            "email": data.get("email"),
            "whatsapp_number": data.get("whatsapp_number"),
            "location_state": data.get("location_state"),
            "location_city": data.get("location_city"),
            "commercial_name": data.get("commercial_name"),
            "offered_payment_methods": payment_methods_text(
                list(data.get("payment_methods") or []), data.get("other_payment_method")
            ),
            "public_alias": data.get("public_alias"),
            "bio": data.get("bio"),
            "agreements": {key: bool(data.get(key)) for key in ORGANIZER_AGREEMENTS},
        }
        user = self._user_service.create_user(profile, password=str(data["password"]))
        message = build_organizer_request_message(data)
        logger.info("Organizer request submitted by '%s'", user.username)
        return OrganizerRegistration(
            user=user,
            whatsapp_message=message,
            whatsapp_url=whatsapp_url(support_number, message),
        )

    # Sessions

    def login(self, username: str, password: str, now: datetime | None = None) -> LoginResult:
        now = now or utcnow()
        user = self._users.get_by_username(username)
        if user is None:
            logger.warning("Login attempt for non-existent user: %s", username)
            return LoginResult(success=False, reason=LoginFailure.USER_NOT_FOUND)

        locked_until = parse_iso(user.lockout_until)
        if locked_until is not None and locked_until > now:
            minutes = math.ceil((locked_until - now).total_seconds() / 60)
            logger.warning("Login attempt for locked account: %s (%d more minutes)", username, minutes)
            return LoginResult(success=False, reason=LoginFailure.ACCOUNT_LOCKED, lockout_minutes=minutes)

        if not user.password_hash or not check_password_hash(user.password_hash, password):
            return self._register_failure(user, now)

        if user.is_blocked:
            logger.warning("Login attempt for blocked user: %s", username)
            return LoginResult(success=False, reason=LoginFailure.BLOCKED)

        session_id = uuid.uuid4().hex
        changes: dict[str, Any] = {"session_id": session_id}
        if user.failed_login_attempts or user.lockout_until:
            changes.update(failed_login_attempts=0, lockout_until=None)
        self._users.update(str(user.id), changes)

        status = self._plans.check_and_manage_plan_status(replace(user, **changes), today=now.date())
        self._activity.log(
            status.user.username,
            ActionType.ADMIN_LOGIN,
            f"Usuario: {status.user.username}",
            {"ip_address": "N/A", "user_agent": "N/A"},
        )
        return LoginResult(success=True, user=status.user, expires_soon=status.expires_soon)

    def _register_failure(self, user: ManagedUser, now: datetime) -> LoginResult:
        attempts = (user.failed_login_attempts or 0) + 1
        if attempts >= self._max_failed_attempts:
            until = now + timedelta(minutes=self._lockout_minutes)
            self._users.update(str(user.id), {"failed_login_attempts": 0, "lockout_until": to_iso(until)})
            logger.warning("User %s locked for %d minutes.", user.username, self._lockout_minutes)
            return LoginResult(
                success=False,
                reason=LoginFailure.ACCOUNT_LOCKED,
                lockout_minutes=self._lockout_minutes,
            )
        self._users.update(str(user.id), {"failed_login_attempts": attempts})
        return LoginResult(success=False, reason=LoginFailure.CREDENTIALS_INVALID)

    def logout(self, user: ManagedUser, session_expired: bool = False) -> None:
        self._users.update(str(user.id), {"session_id": None})
        self._activity.log(
            user.username,
            ActionType.ADMIN_LOGOUT,
            f"Usuario: {user.username}",
            {"reason": "session_expired" if session_expired else "user_initiated"},
        )

    def validate_session(self, user_id: str, session_id: str | None) -> ManagedUser | None:
        """The stored user if this session is still the active, unblocked one."""

        user = self._users.get(user_id)
        if user is None:
            return None
        if not session_id or user.session_id != session_id:
            logger.warning("Session mismatch for '%s'; stale session rejected.", user.username)
            return None
        if user.is_blocked:
            return None
        return user

    def refresh(self, user: ManagedUser) -> ManagedUser:
        """Re-run the plan status check for a signed-in user."""

        return self._plans.check_and_manage_plan_status(user).user
