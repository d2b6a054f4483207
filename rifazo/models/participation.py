"""Ticket purchase (participation) in a raffle."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from rifazo.models.base import DocumentRecord


class PaymentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


# Statuses that keep a ticket number taken.
HOLDING_STATUSES = (PaymentStatus.PENDING.value, PaymentStatus.CONFIRMED.value)


@dataclass
class Participation(DocumentRecord):
    id: str | None = None
    raffle_id: str = ""
    raffle_name: str = ""
    creator_username: str | None = None
    participant_username: str | None = None
    numbers: list[int] = field(default_factory=list)
    payment_status: str = PaymentStatus.PENDING.value
    purchase_date: str | None = None
    participant_name: str | None = None
    participant_last_name: str | None = None
    participant_id_card: str | None = None
    participant_phone: str | None = None
    payment_notes: str | None = None
    user_has_rated_organizer_for_raffle: bool = False

    @property
    def participant_full_name(self) -> str:
        return f"{self.participant_name or ''} {self.participant_last_name or ''}".strip()
