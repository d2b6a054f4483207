"""Winner record for a completed raffle."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rifazo.models.base import DocumentRecord
from rifazo.models.raffle import Prize


@dataclass
class RaffleResult(DocumentRecord):
    id: str | None = None
    raffle_id: str = ""
    raffle_name: str = ""
    winning_numbers: list[int] = field(default_factory=list)
    winner_names: list[str | None] = field(default_factory=list)
    winner_phones: list[str | None] = field(default_factory=list)
    draw_date: str = ""
    prizes: list[Prize] = field(default_factory=list)
    creator_username: str | None = None
    created_at: str | None = None

    @classmethod
    def from_doc(cls, doc: dict[str, Any]) -> "RaffleResult":
        result = super().from_doc(doc)
        result.prizes = [p if isinstance(p, Prize) else Prize(**p) for p in (result.prizes or [])]
        return result
