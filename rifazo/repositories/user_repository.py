"""Repository layer for platform users."""

from __future__ import annotations

from rifazo.models.user import ManagedUser
from rifazo.repositories.base_repository import DocumentRepository


class UserRepository(DocumentRepository[ManagedUser]):
    """Persistence for ``users`` documents."""

    collection = "users"
    record_type = ManagedUser

    def get_by_username(self, username: str) -> ManagedUser | None:
        return self.find_one({"username": username})

    def get_by_email(self, email: str | None) -> ManagedUser | None:
        if not email or not email.strip():
            return None
        return self.find_one({"email": email})

    def get_by_usernames(self, usernames: list[str]) -> list[ManagedUser]:
        if not usernames:
            return []
        return self.find({"username": {"$in": list(usernames)}})

    def add_favorite(self, user_id: str, raffle_id: str) -> None:
        self.store.add_to_set(self.collection, user_id, "favorite_raffle_ids", raffle_id)

    def remove_favorite(self, user_id: str, raffle_id: str) -> None:
        self.store.pull(self.collection, user_id, "favorite_raffle_ids", raffle_id)

    def remove_favorites_everywhere(self, raffle_ids: list[str]) -> int:
        return self.store.pull_many(self.collection, "favorite_raffle_ids", raffle_ids)

    def increment(self, user_id: str, field: str, amount: int | float = 1) -> None:
        self.store.increment(self.collection, user_id, field, amount)
