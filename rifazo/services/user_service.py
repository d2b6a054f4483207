"""User management: accounts, roles, blocking, favorites and cascades."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta
from typing import Any

from werkzeug.security import generate_password_hash

from rifazo.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from rifazo.models.activity_log import ActionType
from rifazo.models.raffle import Raffle
from rifazo.models.user import FOUNDER_USERNAME, ORGANIZER_ROLES, ManagedUser, Role
from rifazo.reference.plans import PLAN_CONFIG
from rifazo.repositories.activity_log_repository import ActivityLogRepository
from rifazo.repositories.participation_repository import ParticipationRepository
from rifazo.repositories.raffle_repository import RaffleRepository
from rifazo.repositories.raffle_result_repository import RaffleResultRepository
from rifazo.repositories.rating_repository import RatingRepository
from rifazo.repositories.user_repository import UserRepository
from rifazo.services.activity_log_service import ActivityLogService
from rifazo.utils.timeutils import start_of_day, to_iso, utcnow

logger = logging.getLogger(__name__)

_ROLE_ORDER = {
    Role.PENDING_APPROVAL.value: 1,
    Role.FOUNDER.value: 2,
    Role.ADMIN.value: 3,
    Role.USER.value: 4,
}

# Optional profile fields copied verbatim when creating a user.
PROFILE_FIELDS = (
    "organizer_type",
    "full_name",
    "company_name",
    "rif",
    "id_card_number",
    "commercial_name",
    "public_alias",
    "whatsapp_number",
    "location_state",
    "location_city",
    "email",
    "bio",
    "admin_payment_methods_info",
    "offered_payment_methods",
    "agreements",
)


class UserService:
    """User use-cases shared by registration, the founder panel and the API."""

    def __init__(
        self,
        users: UserRepository | None = None,
        raffles: RaffleRepository | None = None,
        participations: ParticipationRepository | None = None,
        results: RaffleResultRepository | None = None,
        ratings: RatingRepository | None = None,
        logs: ActivityLogRepository | None = None,
        activity: ActivityLogService | None = None,
    ) -> None:
        self._users = users or UserRepository()
        self._raffles = raffles or RaffleRepository()
        self._participations = participations or ParticipationRepository()
        self._results = results or RaffleResultRepository()
        self._ratings = ratings or RatingRepository()
        self._logs = logs or ActivityLogRepository()
        self._activity = activity or ActivityLogService(self._logs)

    # Reads

    def list_users(self) -> list[ManagedUser]:
        users = list(self._users.list_all())
        users.sort(key=lambda u: (_ROLE_ORDER.get(u.role, 99), u.username.lower()))
        return users

    def get_user(self, user_id: str) -> ManagedUser:
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError(message=f"User {user_id} not found")
        return user

    def get_by_username(self, username: str) -> ManagedUser | None:
        return self._users.get_by_username(username)

    # Writes

    def create_user(self, data: dict[str, Any], password: str, created_by: str | None = None) -> ManagedUser:
        """Create an account, enforcing unique username and email."""

        username = str(data["username"])
        if self._users.get_by_username(username) is not None:
            raise ConflictError(message="El nombre de usuario ya existe.", details={"username": ["Already taken"]})
        email = data.get("email")
        if email and self._users.get_by_email(email) is not None:
            raise ConflictError(message="El correo electrónico ya está en uso.", details={"email": ["Already in use"]})

        role = str(data.get("role") or Role.USER.value)
        user = ManagedUser(
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
            is_blocked=bool(data.get("is_blocked", False)),
            created_at=to_iso(utcnow()),
        )
        for name in PROFILE_FIELDS:
            if data.get(name) is not None:
                setattr(user, name, data[name])

        if role in ORGANIZER_ROLES:
            free = PLAN_CONFIG["free"]
            start = utcnow().date()
            user.plan = free.name
            user.plan_active = True
            user.plan_start_date = to_iso(start_of_day(start))
            user.plan_end_date = to_iso(start_of_day(start) + timedelta(days=free.duration_days))
            user.plan_assigned_by = "system_initial"

        if role != Role.USER.value and not user.public_alias:
            user.public_alias = username

        saved = self._users.add(user)
        logger.info("Created user '%s' (role=%s)", saved.username, saved.role)
        if created_by:
            self._activity.log(
                created_by,
                ActionType.USER_CREATED,
                f"Usuario: {saved.username}",
                {"user_id": saved.id, "username": saved.username, "role": saved.role},
            )
        return saved

    def update_user(self, user_id: str, changes: dict[str, Any], editor_username: str) -> ManagedUser:
        """Apply profile changes; a rename rewrites every reference to the old username."""

        user = self.get_user(user_id)
        changes = dict(changes)

        new_username = changes.get("username")
        if new_username and new_username != user.username:
            if self._users.get_by_username(new_username) is not None:
                raise ConflictError(message="El nombre de usuario ya existe.", details={"username": ["Already taken"]})
        new_email = changes.get("email")
        if new_email and new_email != user.email:
            if self._users.get_by_email(new_email) is not None:
                raise ConflictError(message="El correo electrónico ya está en uso.", details={"email": ["Already in use"]})

        if user.username == FOUNDER_USERNAME:
            if changes.get("role") not in (None, Role.FOUNDER.value):
                raise ForbiddenError(message="The founder account's role cannot be changed")
            if new_username and new_username != user.username:
                raise ForbiddenError(message="The founder account cannot be renamed")

        password = changes.pop("password", None)
        if password:
            changes["password_hash"] = generate_password_hash(password)

        updated_fields = sorted(k for k, v in changes.items() if getattr(user, k, None) != v)
        is_rename = bool(new_username and new_username != user.username)

        if is_rename:
            if user.public_alias == user.username and not changes.get("public_alias"):
                changes["public_alias"] = new_username
            self._users.update(user_id, changes)
            self._rename_references(user.username, str(new_username))
        else:
            self._users.update(user_id, changes)

        if updated_fields:
            self._activity.log(
                editor_username,
                ActionType.USER_EDITED,
                f"Usuario: {changes.get('username', user.username)}",
                {"user_id": user_id, "updated_fields": [f for f in updated_fields if f != "password_hash"]},
            )
        return self.get_user(user_id)

    def _rename_references(self, old: str, new: str) -> None:
        targets = (
            (self._raffles, "creator_username"),
            (self._participations, "creator_username"),
            (self._participations, "participant_username"),
            (self._results, "creator_username"),
            (self._logs, "admin_username"),
            (self._ratings, "organizer_username"),
            (self._ratings, "rater_username"),
            (self._users, "plan_assigned_by"),
        )
        for repo, field in targets:
            count = repo.update_many({field: old}, {field: new})
            if count:
                logger.info("Renamed %s '%s' -> '%s' in %d %s", field, old, new, count, repo.collection)

    def delete_user(self, user_id: str, deleter_username: str) -> None:
        """Delete a user; an organizer's raffles and everything tied to them go too."""

        user = self.get_user(user_id)
        if user.username == FOUNDER_USERNAME:
            raise ForbiddenError(message="The founder account cannot be deleted")

        if user.role == Role.ADMIN.value:
            raffles = self._raffles.list_by_creator(user.username)
            self.purge_raffles(raffles, deleter_username, deleted_with_user=user.username)

        self._activity.log(
            deleter_username,
            ActionType.USER_DELETED,
            f"Usuario: {user.username}",
            {"user_id": user.id, "username": user.username, "role": user.role},
        )
        self._users.delete(user_id)

    def purge_raffles(self, raffles: list[Raffle], actor: str, deleted_with_user: str | None = None) -> None:
        """Delete raffles with their participations, results, ratings and favorites."""

        raffle_ids = [str(r.id) for r in raffles]
        if not raffle_ids:
            return
        in_ids = {"raffle_id": {"$in": raffle_ids}}
        self._participations.delete_many(in_ids)
        self._results.delete_many(in_ids)
        self._ratings.delete_many(in_ids)
        self._users.remove_favorites_everywhere(raffle_ids)

        for raffle in raffles:
            details: dict[str, Any] = {"raffle_id": raffle.id, "raffle_name": raffle.name}
            if deleted_with_user:
                details["deleted_as_part_of_user_deletion"] = deleted_with_user
            self._activity.log(actor, ActionType.RAFFLE_DELETED, f"Rifa ID: {raffle.id}", details)
            self._raffles.delete(str(raffle.id))

    def set_blocked(self, user_id: str, blocked: bool, actor: str) -> ManagedUser:
        user = self.get_user(user_id)
        if user.username == FOUNDER_USERNAME and blocked:
            raise ForbiddenError(message="The founder account cannot be blocked")
        changes: dict[str, Any] = {"is_blocked": blocked}
        if blocked:
            changes["session_id"] = None
        self._users.update(user_id, changes)
        self._activity.log(
            actor,
            ActionType.USER_BLOCKED if blocked else ActionType.USER_UNBLOCKED,
            f"Usuario: {user.username}",
            {"user_id": user_id, "username": user.username},
        )
        return replace(user, **changes)

    def approve_organizer(self, user_id: str, actor: str) -> ManagedUser:
        user = self.get_user(user_id)
        if user.role != Role.PENDING_APPROVAL.value:
            raise ValidationError(
                message="Only accounts pending approval can be activated",
                details={"role": [f"Current role is {user.role}"]},
            )
        changes = {"role": Role.ADMIN.value}
        if not user.public_alias:
            changes["public_alias"] = user.username
        self._users.update(user_id, changes)
        self._activity.log(
            actor,
            ActionType.USER_APPROVED,
            f"Usuario: {user.username}",
            {"user_id": user_id, "username": user.username},
        )
        return replace(user, **changes)

    def reset_lockout(self, user_id: str, actor: str) -> ManagedUser:
        user = self.get_user(user_id)
        changes = {"failed_login_attempts": 0, "lockout_until": None}
        self._users.update(user_id, changes)
        self._activity.log(
            actor,
            ActionType.USER_ACCOUNT_UNLOCKED,
            f"Usuario: {user.username}",
            {"user_id": user_id, "username": user.username},
        )
        return replace(user, **changes)

    # Favorites

    def toggle_favorite(self, user_id: str, raffle_id: str) -> bool:
        """Flip a raffle in the user's favorites; returns whether it is now a favorite."""

        user = self.get_user(user_id)
        if raffle_id in (user.favorite_raffle_ids or []):
            self._users.remove_favorite(user_id, raffle_id)
            return False
        if self._raffles.get(raffle_id) is None:
            raise NotFoundError(message=f"Raffle {raffle_id} not found")
        self._users.add_favorite(user_id, raffle_id)
        return True

    def list_favorites(self, user_id: str) -> list[Raffle]:
        user = self.get_user(user_id)
        return self._raffles.get_by_ids(list(user.favorite_raffle_ids or []))
