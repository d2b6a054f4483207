"""Repository layer for raffle participations."""

from __future__ import annotations

from rifazo.models.participation import HOLDING_STATUSES, Participation
from rifazo.repositories.base_repository import DocumentRepository


class ParticipationRepository(DocumentRepository[Participation]):
    """Persistence for ``participations`` documents."""

    collection = "participations"
    record_type = Participation

    def list_by_raffle(self, raffle_id: str) -> list[Participation]:
        return self.find({"raffle_id": raffle_id}, sort="purchase_date")

    def list_by_raffles(self, raffle_ids: list[str]) -> list[Participation]:
        if not raffle_ids:
            return []
        return self.find({"raffle_id": {"$in": list(raffle_ids)}}, sort="purchase_date")

    def list_by_participant(self, username: str) -> list[Participation]:
        return self.find({"participant_username": username}, sort="purchase_date", descending=True)

    def list_holding(self, raffle_id: str) -> list[Participation]:
        """Participations whose numbers are taken (pending or confirmed)."""

        return self.find({"raffle_id": raffle_id, "payment_status": {"$in": list(HOLDING_STATUSES)}})
