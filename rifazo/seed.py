"""Initial platform accounts inserted into an empty user store."""

from __future__ import annotations

import logging
from typing import Any

from flask import current_app

from rifazo.models.user import FOUNDER_USERNAME, OrganizerType, Role
from rifazo.repositories.user_repository import UserRepository
from rifazo.services.user_service import UserService

logger = logging.getLogger(__name__)

SUPPORT_USERNAME = "soporte"

_FOUNDER_PROFILE: dict[str, Any] = {
    "organizer_type": OrganizerType.INDIVIDUAL.value,
    "full_name": "Fundador Principal",
    "public_alias": "RIFAZO_Fundador",
    "whatsapp_number": "+1234567890",
    "location_state": "Distrito Capital",
    "location_city": "Caracas",
    "email": "fundador@rifazo.app",
    "bio": "El creador y fundador de la plataforma RIFAZO. Comprometido con rifas justas y emocionantes.",
    "admin_payment_methods_info": "Acepto todos los métodos de pago principales. ¡Contacta para más detalles!",
}

# Passwords are resolved from config when seeding.
INITIAL_PLATFORM_USERS: tuple[dict[str, Any], ...] = (
    {
        "username": FOUNDER_USERNAME,
        "role": Role.FOUNDER.value,
        "password_config_key": "SEED_FOUNDER_PASSWORD",
        **_FOUNDER_PROFILE,
    },
    {
        "username": SUPPORT_USERNAME,
        "role": Role.ADMIN.value,
        "password_config_key": "SEED_SUPPORT_PASSWORD",
        "organizer_type": OrganizerType.BUSINESS.value,
        "company_name": "RIFAZO Soporte",
        "public_alias": "RIFAZO_Soporte",
        "location_state": "Distrito Capital",
        "location_city": "Caracas",
        "email": "soporte@rifazo.app",
        "bio": "Equipo de soporte de la plataforma RIFAZO.",
    },
)


def seed_initial_users(users: UserRepository | None = None) -> list[str]:
    """Insert the initial accounts when no user exists yet.

    Returns the usernames that were created. Must run inside an app context.
    """

    users = users or UserRepository()
    if users.count() > 0:
        logger.info("Users collection is not empty; skipping initial seed.")
        return []

    service = UserService(users=users)
    created: list[str] = []
    for record in INITIAL_PLATFORM_USERS:
        profile = {k: v for k, v in record.items() if k != "password_config_key"}
        if users.get_by_username(profile["username"]) is not None:
            continue
        password = str(current_app.config[record["password_config_key"]])
        service.create_user(profile, password=password)
        created.append(profile["username"])

    if created:
        logger.info("Seeded initial users: %s", ", ".join(created))
    return created
