"""Platform user (participants, organizers and the founder)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from rifazo.models.base import DocumentRecord


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
    FOUNDER = "founder"
    PENDING_APPROVAL = "pending_approval"


class OrganizerType(str, Enum):
    INDIVIDUAL = "individual"
    BUSINESS = "business"


# Account that backups and role edits must never remove.
FOUNDER_USERNAME = "fundador"

ORGANIZER_ROLES = (Role.ADMIN.value, Role.FOUNDER.value)


@dataclass
class ManagedUser(DocumentRecord):
    """A user document in the ``users`` collection."""

    id: str | None = None
    username: str = ""
    password_hash: str = ""
    role: str = Role.USER.value
    is_blocked: bool = False
    session_id: str | None = None
    failed_login_attempts: int = 0
    lockout_until: str | None = None

    organizer_type: str | None = None
    full_name: str | None = None
    company_name: str | None = None
    rif: str | None = None
    id_card_number: str | None = None
    commercial_name: str | None = None
    public_alias: str | None = None
    whatsapp_number: str | None = None
    location_state: str | None = None
    location_city: str | None = None
    email: str | None = None
    bio: str | None = None
    admin_payment_methods_info: str | None = None
    offered_payment_methods: list[str] = field(default_factory=list)
    agreements: dict[str, bool] = field(default_factory=dict)

    average_rating: float = 0.0
    rating_count: int = 0

    plan: str | None = None
    plan_active: bool = False
    plan_start_date: str | None = None
    plan_end_date: str | None = None
    plan_assigned_by: str | None = None
    raffles_created_this_period: int = 0
    raffles_edited_this_period: int = 0

    favorite_raffle_ids: list[str] = field(default_factory=list)
    created_at: str | None = None

    @property
    def is_founder(self) -> bool:
        return self.role == Role.FOUNDER.value

    @property
    def is_organizer(self) -> bool:
        return self.role in ORGANIZER_ROLES

    @property
    def display_name(self) -> str:
        return self.public_alias or self.full_name or self.username
