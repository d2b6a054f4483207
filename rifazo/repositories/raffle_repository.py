"""Repository layer for raffles."""

from __future__ import annotations

from rifazo.models.raffle import Raffle
from rifazo.repositories.base_repository import DocumentRepository


class RaffleRepository(DocumentRepository[Raffle]):
    """Persistence for ``raffles`` documents."""

    collection = "raffles"
    record_type = Raffle

    def list_all(self) -> list[Raffle]:
        return self.find(sort="created_at", descending=True)

    def list_by_creator(self, creator_username: str) -> list[Raffle]:
        return self.find({"creator_username": creator_username}, sort="created_at", descending=True)

    def get_by_ids(self, raffle_ids: list[str]) -> list[Raffle]:
        if not raffle_ids:
            return []
        return self.find({"id": {"$in": list(raffle_ids)}})
