"""Raffle use-cases: creation and edits under plan limits, deletion, availability."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date
from typing import Any

from rifazo.errors import ForbiddenError, NotFoundError, PlanLimitError, ValidationError
from rifazo.models.activity_log import ActionType
from rifazo.models.raffle import AcceptedPaymentMethod, Prize, Raffle, RaffleStatus
from rifazo.models.user import ManagedUser
from rifazo.reference.payment_methods import get_payment_method
from rifazo.reference.plans import PlanDetails
from rifazo.repositories.participation_repository import ParticipationRepository
from rifazo.repositories.raffle_repository import RaffleRepository
from rifazo.repositories.user_repository import UserRepository
from rifazo.services.activity_log_service import ActivityLogService
from rifazo.services.plan_service import current_plan
from rifazo.services.user_service import UserService
from rifazo.utils.timeutils import to_iso, utcnow

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name",
    "description",
    "image",
    "draw_date",
    "price_per_ticket",
    "currency",
    "total_numbers",
    "prizes",
    "accepted_payment_methods",
    "status",
    "min_tickets_per_purchase",
    "max_tickets_per_purchase",
)


def _draw_date(value: Any) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)


def _prizes(items: list[Any]) -> list[Prize]:
    prizes = []
    for item in items or []:
        if isinstance(item, Prize):
            prizes.append(item)
        else:
            prizes.append(
                Prize(
                    description=str(item.get("description") or ""),
                    lottery_name=item.get("lottery_name") or None,
                    draw_time=item.get("draw_time") or None,
                )
            )
    return prizes


def _payment_methods(items: list[Any]) -> list[AcceptedPaymentMethod]:
    """Resolve selected method ids against the catalogue, keeping organizer details."""

    methods = []
    for item in items or []:
        option = get_payment_method(str(item.get("id")))
        if option is None:
            raise ValidationError(
                message="Unknown payment method",
                details={"accepted_payment_methods": [f"Unknown id {item.get('id')!r}"]},
            )
        methods.append(
            AcceptedPaymentMethod(
                id=option.id,
                name=option.name,
                category=option.category,
                admin_provided_details=item.get("admin_provided_details") or None,
            )
        )
    return methods


def _check_purchase_bounds(min_tickets: int | None, max_tickets: int | None, total_numbers: int) -> None:
    if min_tickets is not None and min_tickets > total_numbers:
        raise ValidationError(
            message="Minimum tickets per purchase exceeds the raffle size",
            details={"min_tickets_per_purchase": [f"Must be at most {total_numbers}"]},
        )
    if min_tickets is not None and max_tickets is not None and min_tickets > max_tickets:
        raise ValidationError(
            message="Minimum tickets per purchase exceeds the maximum",
            details={"min_tickets_per_purchase": ["Must not exceed max_tickets_per_purchase"]},
        )


class RaffleService:
    def __init__(
        self,
        raffles: RaffleRepository | None = None,
        participations: ParticipationRepository | None = None,
        users: UserRepository | None = None,
        user_service: UserService | None = None,
        activity: ActivityLogService | None = None,
    ) -> None:
        self._raffles = raffles or RaffleRepository()
        self._participations = participations or ParticipationRepository()
        self._users = users or UserRepository()
        self._user_service = user_service or UserService(
            users=self._users, raffles=self._raffles, participations=self._participations
        )
        self._activity = activity or ActivityLogService()

    # Reads

    def list_raffles(self, status: str | None = None, creator_username: str | None = None) -> list[Raffle]:
        if creator_username:
            raffles = self._raffles.list_by_creator(creator_username)
        else:
            raffles = self._raffles.list_all()
        if status:
            raffles = [r for r in raffles if r.status == status]
        return raffles

    def get_raffle(self, raffle_id: str) -> Raffle:
        raffle = self._raffles.get(raffle_id)
        if raffle is None:
            raise NotFoundError(message=f"Raffle {raffle_id} not found")
        return raffle

    def effective_sold_numbers(self, raffle_id: str) -> list[int]:
        """Numbers taken by pending or confirmed participations, sorted."""

        taken: set[int] = set()
        for participation in self._participations.list_holding(raffle_id):
            taken.update(int(n) for n in participation.numbers)
        return sorted(taken)

    def available_count(self, raffle: Raffle) -> int:
        return max(0, raffle.total_numbers - len(self.effective_sold_numbers(str(raffle.id))))

    # Writes

    def _check_plan_limits(self, plan: PlanDetails, total_numbers: int, prize_count: int) -> None:
        if not plan.allows_ticket_count(total_numbers):
            raise PlanLimitError(
                message=(
                    f"Tu plan {plan.display_name} permite un máximo de "
                    f"{plan.max_tickets_per_raffle} tickets por rifa."
                ),
                details={"total_numbers": [f"Max {plan.max_tickets_per_raffle}"]},
            )
        if prize_count > 1 and not plan.includes_multiple_prizes:
            raise PlanLimitError(
                message=f"Tu plan {plan.display_name} no permite múltiples premios.",
                details={"prizes": ["Only one prize allowed on this plan"]},
            )

    def create_raffle(self, data: dict[str, Any], creator: ManagedUser) -> Raffle:
        """Publish a new raffle for ``creator``."""

        if not creator.is_organizer:
            raise ForbiddenError(message="Only organizers can create raffles")

        prizes = _prizes(data.get("prizes") or [])
        if not prizes:
            raise ValidationError(message="At least one prize is required", details={"prizes": ["Required"]})
        total_numbers = int(data["total_numbers"])
        _check_purchase_bounds(
            data.get("min_tickets_per_purchase"), data.get("max_tickets_per_purchase"), total_numbers
        )

        if not creator.is_founder:
            plan = current_plan(creator)
            if not creator.plan_active:
                raise PlanLimitError(message="No tienes un plan activo para crear rifas.")
            if not plan.allows_raffle_count(creator.raffles_created_this_period or 0):
                raise PlanLimitError(
                    message=(
                        f"Has alcanzado el límite de {plan.raffle_limit} rifas "
                        f"de tu plan {plan.display_name}."
                    ),
                    details={"raffle_limit": plan.raffle_limit},
                )
            self._check_plan_limits(plan, total_numbers, len(prizes))

        raffle = Raffle(
            name=str(data["name"]),
            description=str(data.get("description") or ""),
            image=str(data.get("image") or ""),
            draw_date=_draw_date(data["draw_date"]),
            price_per_ticket=float(data["price_per_ticket"]),
            currency=str(data.get("currency") or "USD"),
            total_numbers=total_numbers,
            prizes=prizes,
            accepted_payment_methods=_payment_methods(data.get("accepted_payment_methods") or []),
            creator_username=creator.username,
            status=RaffleStatus.ACTIVE.value,
            min_tickets_per_purchase=data.get("min_tickets_per_purchase"),
            max_tickets_per_purchase=data.get("max_tickets_per_purchase"),
            created_at=to_iso(utcnow()),
        )
        saved = self._raffles.add(raffle)

        if not creator.is_founder:
            self._users.increment(str(creator.id), "raffles_created_this_period")

        logger.info("Raffle '%s' created by '%s'", saved.name, creator.username)
        self._activity.log(
            creator.username,
            ActionType.RAFFLE_CREATED,
            f"Rifa: {saved.name}",
            {"raffle_id": saved.id, "raffle_name": saved.name, "creator_username": creator.username},
        )
        return saved

    def update_raffle(self, raffle_id: str, changes: dict[str, Any], editor: ManagedUser) -> Raffle:
        raffle = self.get_raffle(raffle_id)
        if not editor.is_founder:
            if raffle.creator_username != editor.username:
                raise ForbiddenError(message="Only the raffle creator can edit it")
            plan = current_plan(editor)
            if not editor.plan_active or not plan.can_edit_raffles:
                raise PlanLimitError(message="Tu plan actual no permite editar rifas.")
        else:
            plan = None

        updates: dict[str, Any] = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
        if "draw_date" in updates:
            updates["draw_date"] = _draw_date(updates["draw_date"])
        if "prizes" in updates:
            prizes = _prizes(updates["prizes"])
            if not prizes:
                raise ValidationError(message="At least one prize is required", details={"prizes": ["Required"]})
            updates["prizes"] = prizes
        if "accepted_payment_methods" in updates:
            updates["accepted_payment_methods"] = _payment_methods(updates["accepted_payment_methods"])

        total_numbers = int(updates.get("total_numbers", raffle.total_numbers))
        prize_count = len(updates.get("prizes", raffle.prizes))
        if plan is not None:
            self._check_plan_limits(plan, total_numbers, prize_count)

        if "total_numbers" in updates:
            held = sum(len(p.numbers) for p in self._participations.list_holding(raffle_id))
            if total_numbers < held:
                raise ValidationError(
                    message=(
                        f"No puedes reducir el total de números a {total_numbers}; "
                        f"ya hay {held} tickets pendientes o confirmados."
                    ),
                    details={"total_numbers": [f"Must be at least {held}"]},
                )
        _check_purchase_bounds(
            updates.get("min_tickets_per_purchase", raffle.min_tickets_per_purchase),
            updates.get("max_tickets_per_purchase", raffle.max_tickets_per_purchase),
            total_numbers,
        )

        stored = {
            k: [asdict(item) for item in v] if k in ("prizes", "accepted_payment_methods") else v
            for k, v in updates.items()
        }
        self._raffles.update(raffle_id, stored)

        if not editor.is_founder:
            self._users.increment(str(editor.id), "raffles_edited_this_period")

        self._activity.log(
            editor.username,
            ActionType.RAFFLE_EDITED,
            f"Rifa: {updates.get('name', raffle.name)}",
            {"raffle_id": raffle_id, "updated_fields": sorted(updates)},
        )
        return self.get_raffle(raffle_id)

    def delete_raffle(self, raffle_id: str, actor: ManagedUser) -> None:
        raffle = self.get_raffle(raffle_id)
        if not actor.is_founder and raffle.creator_username != actor.username:
            raise ForbiddenError(message="Only the raffle creator can delete it")
        self._user_service.purge_raffles([raffle], actor.username)
        logger.info("Raffle '%s' deleted by '%s'", raffle.name, actor.username)
