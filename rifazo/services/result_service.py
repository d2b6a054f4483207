"""Winner registration and published results."""

from __future__ import annotations

import logging
from typing import Any

from rifazo.errors import ConflictError, ForbiddenError, ValidationError
from rifazo.models.activity_log import ActionType
from rifazo.models.participation import PaymentStatus
from rifazo.models.raffle import RaffleStatus
from rifazo.models.raffle_result import RaffleResult
from rifazo.models.user import ManagedUser
from rifazo.repositories.participation_repository import ParticipationRepository
from rifazo.repositories.raffle_repository import RaffleRepository
from rifazo.repositories.raffle_result_repository import RaffleResultRepository
from rifazo.services.activity_log_service import ActivityLogService
from rifazo.services.raffle_service import RaffleService
from rifazo.utils.timeutils import to_iso, utcnow

logger = logging.getLogger(__name__)


class ResultService:
    def __init__(
        self,
        results: RaffleResultRepository | None = None,
        raffles: RaffleRepository | None = None,
        participations: ParticipationRepository | None = None,
        raffle_service: RaffleService | None = None,
        activity: ActivityLogService | None = None,
    ) -> None:
        self._results = results or RaffleResultRepository()
        self._raffles = raffles or RaffleRepository()
        self._participations = participations or ParticipationRepository()
        self._raffle_service = raffle_service or RaffleService(
            raffles=self._raffles, participations=self._participations
        )
        self._activity = activity or ActivityLogService()

    def list_results(self) -> list[RaffleResult]:
        return self._results.list_all()

    def get_for_raffle(self, raffle_id: str) -> RaffleResult | None:
        return self._results.get_by_raffle_id(raffle_id)

    def register_winners(self, raffle_id: str, winners: list[dict[str, Any]], actor: ManagedUser) -> RaffleResult:
        """Record one winner per prize and complete the raffle.

        A winner entry without a name or phone is completed from the confirmed
        participation that holds the winning number, when there is one.
        """

        raffle = self._raffle_service.get_raffle(raffle_id)
        if not actor.is_founder and raffle.creator_username != actor.username:
            raise ForbiddenError(message="Only the raffle creator can register winners")
        if self._results.get_by_raffle_id(raffle_id) is not None:
            raise ConflictError(message="Winners were already registered for this raffle")
        if len(winners) != len(raffle.prizes):
            raise ValidationError(
                message="One winner is required per prize",
                details={"winners": [f"Expected {len(raffle.prizes)}, got {len(winners)}"]},
            )

        confirmed = [
            p for p in self._participations.list_by_raffle(raffle_id)
            if p.payment_status == PaymentStatus.CONFIRMED.value
        ]

        winning_numbers: list[int] = []
        winner_names: list[str | None] = []
        winner_phones: list[str | None] = []
        for index, winner in enumerate(winners):
            number = winner.get("winning_number")
            if number is None:
                raise ValidationError(
                    message="El número ganador es requerido.",
                    details={f"winners.{index}.winning_number": ["Missing data for required field."]},
                )
            if not 1 <= int(number) <= raffle.total_numbers:
                raise ValidationError(
                    message=(
                        f"El número ganador ({number}) no puede ser mayor que el total "
                        f"de números de la rifa ({raffle.total_numbers})."
                    ),
                    details={f"winners.{index}.winning_number": [f"Must be within 1..{raffle.total_numbers}"]},
                )
            name = (winner.get("winner_name") or "").strip() or None
            phone = (winner.get("winner_phone") or "").strip() or None
            if name is None or phone is None:
                holder = next((p for p in confirmed if int(number) in p.numbers), None)
                if holder is not None:
                    name = name or holder.participant_full_name or None
                    phone = phone or holder.participant_phone or None
            winning_numbers.append(int(number))
            winner_names.append(name)
            winner_phones.append(phone)

        self._raffles.update(
            raffle_id,
            {
                "winning_numbers": winning_numbers,
                "winner_names": winner_names,
                "winner_phones": winner_phones,
                "status": RaffleStatus.COMPLETED.value,
            },
        )
        result = self._results.add(
            RaffleResult(
                raffle_id=raffle_id,
                raffle_name=raffle.name,
                winning_numbers=winning_numbers,
                winner_names=winner_names,
                winner_phones=winner_phones,
                draw_date=raffle.draw_date,
                prizes=list(raffle.prizes),
                creator_username=raffle.creator_username,
                created_at=to_iso(utcnow()),
            )
        )
        logger.info("Winners registered for raffle '%s': %s", raffle.name, winning_numbers)
        self._activity.log(
            actor.username,
            ActionType.WINNER_REGISTERED,
            f"Rifa: {raffle.name}",
            {
                "raffle_id": raffle_id,
                "raffle_name": raffle.name,
                "winning_numbers": winning_numbers,
                "winner_names": winner_names,
                "winner_phones": winner_phones,
            },
        )
        return result
