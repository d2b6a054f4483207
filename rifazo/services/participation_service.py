"""Ticket purchases and organizer payment review."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from rifazo.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from rifazo.models.activity_log import ActionType
from rifazo.models.participation import Participation, PaymentStatus
from rifazo.models.raffle import Raffle, RaffleStatus
from rifazo.models.user import ManagedUser
from rifazo.repositories.participation_repository import ParticipationRepository
from rifazo.repositories.raffle_repository import RaffleRepository
from rifazo.repositories.user_repository import UserRepository
from rifazo.services.activity_log_service import ActivityLogService
from rifazo.services.auth_service import whatsapp_url
from rifazo.services.raffle_service import RaffleService
from rifazo.utils.timeutils import to_iso, utcnow

logger = logging.getLogger(__name__)

CURRENCY_SYMBOLS = {"USD": "$", "Bs": "Bs "}


@dataclass(frozen=True)
class PurchaseReceipt:
    participation: Participation
    total_amount: float
    whatsapp_message: str
    whatsapp_url: str


def build_purchase_message(raffle: Raffle, participation: Participation, total_amount: float) -> str:
    symbol = CURRENCY_SYMBOLS.get(raffle.currency, "$")
    numbers = ", ".join(str(n) for n in participation.numbers)
    return (
        "🎉 ¡Tu participación ha sido registrada con éxito!\n"
        "\n"
        f"📌 Rifa: {raffle.name}\n"
        f"🏷️ A nombre de: {participation.participant_full_name}\n"
        f"🆔 Cédula: {participation.participant_id_card}\n"
        f"📞 Teléfono: {participation.participant_phone}\n"
        f"🎟️ Número(s) seleccionado(s): {numbers}\n"
        f"💰 Total a pagar: {symbol}{total_amount:.2f}\n"
        f"📝 Notas adicionales: {participation.payment_notes or 'Ninguna'}\n"
        "\n"
        "💬 Quedo atento(a) a los datos de los métodos de pago seleccionados para completar mi participación.\n"
    )


class ParticipationService:
    def __init__(
        self,
        participations: ParticipationRepository | None = None,
        raffles: RaffleRepository | None = None,
        users: UserRepository | None = None,
        raffle_service: RaffleService | None = None,
        activity: ActivityLogService | None = None,
    ) -> None:
        self._participations = participations or ParticipationRepository()
        self._raffles = raffles or RaffleRepository()
        self._users = users or UserRepository()
        self._raffle_service = raffle_service or RaffleService(
            raffles=self._raffles, participations=self._participations, users=self._users
        )
        self._activity = activity or ActivityLogService()

    def get_participation(self, participation_id: str) -> Participation:
        participation = self._participations.get(participation_id)
        if participation is None:
            raise NotFoundError(message=f"Participation {participation_id} not found")
        return participation

    def purchase(
        self,
        raffle_id: str,
        participant: ManagedUser,
        form: dict[str, Any],
        support_number: str,
    ) -> PurchaseReceipt:
        """Reserve ticket numbers as a pending participation."""

        raffle = self._raffle_service.get_raffle(raffle_id)
        if raffle.status != RaffleStatus.ACTIVE.value:
            raise ValidationError(
                message="Esta rifa no está activa.",
                details={"status": [f"Raffle is {raffle.status}"]},
            )

        for key in ("participant_name", "participant_last_name", "participant_id_card", "participant_phone"):
            if not str(form.get(key) or "").strip():
                raise ValidationError(message="Missing participant data", details={key: ["Required"]})

        numbers = [int(n) for n in form.get("numbers") or []]
        if not numbers:
            raise ValidationError(message="Selecciona al menos un número.", details={"numbers": ["Required"]})
        if len(set(numbers)) != len(numbers):
            raise ValidationError(message="Números repetidos.", details={"numbers": ["Must be unique"]})
        out_of_range = [n for n in numbers if not 1 <= n <= raffle.total_numbers]
        if out_of_range:
            raise ValidationError(
                message=f"Los números deben estar entre 1 y {raffle.total_numbers}.",
                details={"numbers": [f"Out of range: {out_of_range}"]},
            )
        if raffle.min_tickets_per_purchase and len(numbers) < raffle.min_tickets_per_purchase:
            raise ValidationError(
                message=f"Debes comprar al menos {raffle.min_tickets_per_purchase} números.",
                details={"numbers": [f"Min {raffle.min_tickets_per_purchase}"]},
            )
        if raffle.max_tickets_per_purchase and len(numbers) > raffle.max_tickets_per_purchase:
            raise ValidationError(
                message=f"Puedes comprar como máximo {raffle.max_tickets_per_purchase} números.",
                details={"numbers": [f"Max {raffle.max_tickets_per_purchase}"]},
            )

        sold = set(self._raffle_service.effective_sold_numbers(raffle_id))
        taken = sorted(n for n in numbers if n in sold)
        if taken:
            raise ConflictError(
                message=f"El número {taken[0]} ya no está disponible.",
                details={"numbers": [f"Already taken: {taken}"]},
            )

        participation = self._participations.add(
            Participation(
                raffle_id=str(raffle.id),
                raffle_name=raffle.name,
                creator_username=raffle.creator_username,
                participant_username=participant.username,
                numbers=sorted(numbers),
                payment_status=PaymentStatus.PENDING.value,
                purchase_date=to_iso(utcnow()),
                participant_name=str(form["participant_name"]).strip(),
                participant_last_name=str(form["participant_last_name"]).strip(),
                participant_id_card=str(form["participant_id_card"]).strip(),
                participant_phone=str(form["participant_phone"]).strip(),
                payment_notes=form.get("payment_notes") or None,
            )
        )
        logger.info(
            "User '%s' reserved %d number(s) in raffle %s", participant.username, len(numbers), raffle.id
        )

        total = round(raffle.price_per_ticket * len(numbers), 2)
        message = build_purchase_message(raffle, participation, total)
        organizer = self._users.get_by_username(raffle.creator_username) if raffle.creator_username else None
        number = (organizer.whatsapp_number if organizer else None) or support_number
        return PurchaseReceipt(
            participation=participation,
            total_amount=total,
            whatsapp_message=message,
            whatsapp_url=whatsapp_url(number, message),
        )

    def _check_reviewer(self, participation: Participation, actor: ManagedUser) -> None:
        if actor.is_founder:
            return
        if participation.creator_username != actor.username:
            raise ForbiddenError(message="Only the raffle creator can review this participation")

    def set_payment_status(self, participation_id: str, status: str, actor: ManagedUser) -> Participation:
        participation = self.get_participation(participation_id)
        self._check_reviewer(participation, actor)
        if status not in (PaymentStatus.CONFIRMED.value, PaymentStatus.REJECTED.value):
            raise ValidationError(message="Invalid payment status", details={"payment_status": [status]})
        if participation.payment_status != PaymentStatus.PENDING.value:
            raise ConflictError(
                message="Only pending payments can be reviewed",
                details={"payment_status": [participation.payment_status]},
            )

        self._participations.update(participation_id, {"payment_status": status})
        action = ActionType.PAYMENT_CONFIRMED if status == PaymentStatus.CONFIRMED.value else ActionType.PAYMENT_REJECTED
        self._activity.log(
            actor.username,
            action,
            f"Rifa: {participation.raffle_name}, Participante: {participation.participant_full_name}",
            {
                "participation_id": participation_id,
                "raffle_id": participation.raffle_id,
                "numbers": participation.numbers,
                "participant_username": participation.participant_username,
            },
        )
        participation.payment_status = status
        return participation

    def delete_participation(self, participation_id: str, actor: ManagedUser) -> None:
        participation = self.get_participation(participation_id)
        self._check_reviewer(participation, actor)
        self._participations.delete(participation_id)
        self._activity.log(
            actor.username,
            ActionType.PARTICIPATION_DELETED,
            f"Rifa: {participation.raffle_name}, Participante: {participation.participant_full_name}",
            {
                "participation_id": participation_id,
                "raffle_id": participation.raffle_id,
                "numbers": participation.numbers,
                "payment_status": participation.payment_status,
            },
        )

    def list_for_participant(self, username: str) -> list[Participation]:
        return self._participations.list_by_participant(username)

    def list_for_raffle(self, raffle_id: str, actor: ManagedUser) -> list[Participation]:
        raffle = self._raffle_service.get_raffle(raffle_id)
        if not actor.is_founder and raffle.creator_username != actor.username:
            raise ForbiddenError(message="Only the raffle creator can list its participations")
        return self._participations.list_by_raffle(raffle_id)

    def list_for_organizer(self, organizer: ManagedUser, status: str | None = None) -> list[Participation]:
        """Participations across the organizer's raffles (all raffles for the founder)."""

        if organizer.is_founder:
            participations = self._participations.find(sort="purchase_date", descending=True)
        else:
            raffle_ids = [str(r.id) for r in self._raffles.list_by_creator(organizer.username)]
            participations = self._participations.list_by_raffles(raffle_ids)
        if status:
            participations = [p for p in participations if p.payment_status == status]
        return participations
