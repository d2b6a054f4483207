"""Repository layer for raffle results."""

from __future__ import annotations

from rifazo.models.raffle_result import RaffleResult
from rifazo.repositories.base_repository import DocumentRepository


class RaffleResultRepository(DocumentRepository[RaffleResult]):
    """Persistence for ``raffleResults`` documents."""

    collection = "raffleResults"
    record_type = RaffleResult

    def list_all(self) -> list[RaffleResult]:
        return self.find(sort="created_at", descending=True)

    def get_by_raffle_id(self, raffle_id: str) -> RaffleResult | None:
        return self.find_one({"raffle_id": raffle_id})
