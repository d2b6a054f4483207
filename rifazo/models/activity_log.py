"""Audit trail entry."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from rifazo.models.base import DocumentRecord


class ActionType(str, Enum):
    PAYMENT_CONFIRMED = "PAYMENT_CONFIRMED"
    PAYMENT_REJECTED = "PAYMENT_REJECTED"
    PARTICIPATION_DELETED = "PARTICIPATION_DELETED"
    RAFFLE_CREATED = "RAFFLE_CREATED"
    RAFFLE_EDITED = "RAFFLE_EDITED"
    RAFFLE_DELETED = "RAFFLE_DELETED"
    USER_CREATED = "USER_CREATED"
    USER_EDITED = "USER_EDITED"
    USER_DELETED = "USER_DELETED"
    USER_BLOCKED = "USER_BLOCKED"
    USER_UNBLOCKED = "USER_UNBLOCKED"
    USER_APPROVED = "USER_APPROVED"
    WINNER_REGISTERED = "WINNER_REGISTERED"
    ADMIN_LOGIN = "ADMIN_LOGIN"
    ADMIN_LOGOUT = "ADMIN_LOGOUT"
    PROFILE_UPDATED = "PROFILE_UPDATED"
    ORGANIZER_RATED = "ORGANIZER_RATED"
    ADMIN_PLAN_ASSIGNED = "ADMIN_PLAN_ASSIGNED"
    ADMIN_PLAN_EXPIRED = "ADMIN_PLAN_EXPIRED"
    ADMIN_PLAN_REMOVED = "ADMIN_PLAN_REMOVED"
    ADMIN_PLAN_SCHEDULED = "ADMIN_PLAN_SCHEDULED"
    ADMIN_PLAN_ACTIVATED_SCHEDULED = "ADMIN_PLAN_ACTIVATED_SCHEDULED"
    USER_ACCOUNT_UNLOCKED = "USER_ACCOUNT_UNLOCKED"


@dataclass
class ActivityLog(DocumentRecord):
    id: str | None = None
    timestamp: str | None = None
    admin_username: str = ""
    action_type: str = ""
    target_info: str | None = None
    details: dict[str, Any] | str | None = None
