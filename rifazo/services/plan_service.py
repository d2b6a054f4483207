"""Organizer plan lifecycle: assignment, scheduling, expiry."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta

from rifazo.errors import NotFoundError, ValidationError
from rifazo.models.activity_log import ActionType
from rifazo.models.user import ManagedUser
from rifazo.reference.plans import PLAN_CONFIG, PlanDetails, get_plan_details
from rifazo.repositories.user_repository import UserRepository
from rifazo.services.activity_log_service import ActivityLogService
from rifazo.utils.timeutils import parse_date, start_of_day, to_iso, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanStatus:
    user: ManagedUser
    expires_soon: bool = False


def current_plan(user: ManagedUser) -> PlanDetails:
    """Plan limits that apply right now (placeholder when inactive)."""

    return get_plan_details(user.plan if user.plan_active else None)


class PlanService:
    def __init__(
        self,
        users: UserRepository | None = None,
        activity: ActivityLogService | None = None,
    ) -> None:
        self._users = users or UserRepository()
        self._activity = activity or ActivityLogService()

    def check_and_manage_plan_status(self, user: ManagedUser, today: date | None = None) -> PlanStatus:
        """Expire a finished plan or activate a scheduled one that has started."""

        today = today or utcnow().date()
        updated = user
        expires_soon = False

        end = parse_date(updated.plan_end_date)
        if updated.plan_active and end is not None:
            if end < today:
                logger.info("Plan for user '%s' has expired. Deactivating.", updated.username)
                changes = {"plan_active": False, "raffles_created_this_period": 0, "raffles_edited_this_period": 0}
                updated = replace(updated, **changes)
                self._users.update(str(updated.id), changes)
                self._activity.log(
                    "system",
                    ActionType.ADMIN_PLAN_EXPIRED,
                    f"Admin: {updated.username}, Plan: {updated.plan or 'N/A'}",
                    {"admin_user_id": updated.id, "admin_username": updated.username, "old_plan": updated.plan},
                )
            elif (end - today).days == 1:
                expires_soon = True

        start = parse_date(updated.plan_start_date)
        if not updated.plan_active and updated.plan and start is not None and start <= today:
            end = parse_date(updated.plan_end_date)
            if end is not None and end < today:
                logger.info(
                    "Scheduled plan for '%s' reached its start date but already ended; left inactive.",
                    updated.username,
                )
            else:
                logger.info("Activating scheduled plan for user '%s'.", updated.username)
                changes = {"plan_active": True, "raffles_created_this_period": 0, "raffles_edited_this_period": 0}
                updated = replace(updated, **changes)
                self._users.update(str(updated.id), changes)
                self._activity.log(
                    "system",
                    ActionType.ADMIN_PLAN_ACTIVATED_SCHEDULED,
                    f"Admin: {updated.username}, Plan: {updated.plan}",
                    {"admin_user_id": updated.id, "admin_username": updated.username, "plan_name": updated.plan},
                )

        return PlanStatus(user=updated, expires_soon=expires_soon)

    def assign_plan(
        self,
        user_id: str,
        plan_name: str,
        assigner_username: str,
        start_date: date | None = None,
        today: date | None = None,
    ) -> ManagedUser:
        plan = PLAN_CONFIG.get(plan_name)
        if plan is None:
            raise ValidationError(
                message=f'Plan "{plan_name}" not found',
                details={"plan": [f"Must be one of {', '.join(PLAN_CONFIG)}"]},
            )
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError(message=f"User {user_id} not found")

        today = today or utcnow().date()
        effective_start = start_date or today
        is_scheduled = effective_start > today
        end_date = effective_start + timedelta(days=plan.duration_days)

        changes = {
            "plan": plan.name,
            "plan_active": not is_scheduled,
            "plan_start_date": to_iso(start_of_day(effective_start)),
            "plan_end_date": to_iso(start_of_day(end_date)),
            "plan_assigned_by": assigner_username,
            "raffles_created_this_period": 0,
        }
        self._users.update(user_id, changes)

        self._activity.log(
            assigner_username,
            ActionType.ADMIN_PLAN_SCHEDULED if is_scheduled else ActionType.ADMIN_PLAN_ASSIGNED,
            f"Admin: {user.username}, Plan: {plan.display_name}",
            {
                "admin_user_id": user_id,
                "admin_username": user.username,
                "plan_name": plan.display_name,
                "plan_start_date": changes["plan_start_date"],
                "plan_end_date": changes["plan_end_date"],
                "is_scheduled": is_scheduled,
            },
        )
        return replace(user, **changes)

    def remove_plan(self, user_id: str, remover_username: str) -> ManagedUser:
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError(message="Administrator user not found")

        old_plan = user.plan or "N/A"
        changes = {
            "plan": None,
            "plan_active": False,
            "plan_start_date": None,
            "plan_end_date": None,
            "plan_assigned_by": remover_username,
            "raffles_created_this_period": 0,
        }
        self._users.update(user_id, changes)

        self._activity.log(
            remover_username,
            ActionType.ADMIN_PLAN_REMOVED,
            f"Admin: {user.username}, Plan Anterior: {old_plan}",
            {"admin_user_id": user_id, "admin_username": user.username, "removed_plan": old_plan},
        )
        return replace(user, **changes)
