"""Participant ratings of raffle organizers."""

from __future__ import annotations

import logging

from rifazo.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from rifazo.models.activity_log import ActionType
from rifazo.models.participation import PaymentStatus
from rifazo.models.rating import Rating
from rifazo.models.user import ManagedUser
from rifazo.repositories.participation_repository import ParticipationRepository
from rifazo.repositories.raffle_repository import RaffleRepository
from rifazo.repositories.rating_repository import RatingRepository
from rifazo.repositories.user_repository import UserRepository
from rifazo.services.activity_log_service import ActivityLogService
from rifazo.utils.timeutils import to_iso, utcnow

logger = logging.getLogger(__name__)


class RatingService:
    def __init__(
        self,
        ratings: RatingRepository | None = None,
        raffles: RaffleRepository | None = None,
        participations: ParticipationRepository | None = None,
        users: UserRepository | None = None,
        activity: ActivityLogService | None = None,
    ) -> None:
        self._ratings = ratings or RatingRepository()
        self._raffles = raffles or RaffleRepository()
        self._participations = participations or ParticipationRepository()
        self._users = users or UserRepository()
        self._activity = activity or ActivityLogService()

    def rate_organizer(self, raffle_id: str, rater: ManagedUser, stars: int, comment: str | None = None) -> Rating:
        if not 1 <= int(stars) <= 5:
            raise ValidationError(message="Rating must be between 1 and 5", details={"rating_stars": ["1..5"]})

        raffle = self._raffles.get(raffle_id)
        if raffle is None:
            raise NotFoundError(message=f"Raffle {raffle_id} not found")

        own = self._participations.find({"raffle_id": raffle_id, "participant_username": rater.username})
        if not any(p.payment_status == PaymentStatus.CONFIRMED.value for p in own):
            raise ForbiddenError(message="Only participants with a confirmed purchase can rate this organizer")
        if self._ratings.exists_for(rater.username, raffle_id):
            raise ConflictError(message="Ya calificaste al organizador de esta rifa.")

        organizer_username = str(raffle.creator_username or "")
        rating = self._ratings.add(
            Rating(
                raffle_id=raffle_id,
                raffle_name=raffle.name,
                organizer_username=organizer_username,
                rater_username=rater.username,
                rating_stars=int(stars),
                comment=(comment or "").strip() or None,
                created_at=to_iso(utcnow()),
            )
        )

        organizer = self._users.get_by_username(organizer_username)
        if organizer is not None:
            count = organizer.rating_count or 0
            average = organizer.average_rating or 0.0
            self._users.update(
                str(organizer.id),
                {
                    "average_rating": average + (int(stars) - average) / (count + 1),
                    "rating_count": count + 1,
                },
            )
        self._participations.update_many(
            {"raffle_id": raffle_id, "participant_username": rater.username},
            {"user_has_rated_organizer_for_raffle": True},
        )

        logger.info("'%s' rated '%s' with %d stars", rater.username, organizer_username, int(stars))
        self._activity.log(
            rater.username,
            ActionType.ORGANIZER_RATED,
            f"Organizador: {organizer_username}, Rifa: {raffle.name}",
            {"raffle_id": raffle_id, "organizer_username": organizer_username, "rating_stars": int(stars)},
        )
        return rating

    def list_for_organizer(self, organizer_username: str) -> list[Rating]:
        return self._ratings.list_by_organizer(organizer_username)

    def list_for_rater(self, rater_username: str) -> list[Rating]:
        return self._ratings.list_by_rater(rater_username)

    def has_rated(self, rater_username: str, raffle_id: str) -> bool:
        return self._ratings.exists_for(rater_username, raffle_id)
