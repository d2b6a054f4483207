"""Raffle documents and their embedded prize / payment method entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from rifazo.models.base import DocumentRecord


class RaffleStatus(str, Enum):
    ACTIVE = "active"
    PENDING_DRAW = "pending_draw"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class Prize:
    description: str = ""
    lottery_name: str | None = None
    draw_time: str | None = None


@dataclass
class AcceptedPaymentMethod:
    id: str = ""
    name: str = ""
    category: str = ""
    admin_provided_details: str | None = None


@dataclass
class Raffle(DocumentRecord):
    """A raffle document in the ``raffles`` collection."""

    id: str | None = None
    name: str = ""
    description: str = ""
    image: str = ""
    draw_date: str = ""  # YYYY-MM-DD
    price_per_ticket: float = 0.0
    currency: str = "USD"
    total_numbers: int = 0
    prizes: list[Prize] = field(default_factory=list)
    accepted_payment_methods: list[AcceptedPaymentMethod] = field(default_factory=list)
    creator_username: str | None = None
    status: str = RaffleStatus.ACTIVE.value
    min_tickets_per_purchase: int | None = None
    max_tickets_per_purchase: int | None = None
    winning_numbers: list[int | None] = field(default_factory=list)
    winner_names: list[str | None] = field(default_factory=list)
    winner_phones: list[str | None] = field(default_factory=list)
    created_at: str | None = None

    @classmethod
    def from_doc(cls, doc: dict[str, Any]) -> "Raffle":
        raffle = super().from_doc(doc)
        raffle.prizes = [p if isinstance(p, Prize) else Prize(**p) for p in (raffle.prizes or [])]
        raffle.accepted_payment_methods = [
            m if isinstance(m, AcceptedPaymentMethod) else AcceptedPaymentMethod(**m)
            for m in (raffle.accepted_payment_methods or [])
        ]
        return raffle
