"""Document records and the SQL document table."""

from rifazo.models.activity_log import ActionType, ActivityLog
from rifazo.models.document import StoredDocument
from rifazo.models.participation import Participation, PaymentStatus
from rifazo.models.raffle import AcceptedPaymentMethod, Prize, Raffle, RaffleStatus
from rifazo.models.raffle_result import RaffleResult
from rifazo.models.rating import Rating
from rifazo.models.user import ManagedUser, OrganizerType, Role

__all__ = [
    "AcceptedPaymentMethod",
    "ActionType",
    "ActivityLog",
    "ManagedUser",
    "OrganizerType",
    "Participation",
    "PaymentStatus",
    "Prize",
    "Raffle",
    "RaffleResult",
    "RaffleStatus",
    "Rating",
    "Role",
    "StoredDocument",
]
