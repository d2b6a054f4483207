"""Repository layer for organizer ratings."""

from __future__ import annotations

from rifazo.models.rating import Rating
from rifazo.repositories.base_repository import DocumentRepository


class RatingRepository(DocumentRepository[Rating]):
    """Persistence for ``ratings`` documents."""

    collection = "ratings"
    record_type = Rating

    def list_by_organizer(self, organizer_username: str) -> list[Rating]:
        return self.find({"organizer_username": organizer_username}, sort="created_at", descending=True)

    def list_by_rater(self, rater_username: str) -> list[Rating]:
        return self.find({"rater_username": rater_username}, sort="created_at", descending=True)

    def exists_for(self, rater_username: str, raffle_id: str) -> bool:
        return self.count({"rater_username": rater_username, "raffle_id": raffle_id}) > 0
