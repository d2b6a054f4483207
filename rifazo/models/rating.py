"""Participant rating of a raffle organizer."""

from __future__ import annotations

from dataclasses import dataclass

from rifazo.models.base import DocumentRecord


@dataclass
class Rating(DocumentRecord):
    id: str | None = None
    raffle_id: str = ""
    raffle_name: str = ""
    organizer_username: str = ""
    rater_username: str = ""
    rating_stars: int = 0
    comment: str | None = None
    created_at: str | None = None
