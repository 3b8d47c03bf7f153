# app/services/booking/transitions.py
"""Legal booking status transitions, keyed by (current status, actor)"""
import enum
from typing import Dict, FrozenSet, Tuple

from app.models.booking import BookingStatus


class Actor(str, enum.Enum):
    BUSINESS = "business"
    USER = "user"
    SYSTEM = "system"  # time-driven completion sweep


# Targets each actor may ever request, regardless of the current status
ACTOR_TARGETS: Dict[Actor, FrozenSet[BookingStatus]] = {
    Actor.BUSINESS: frozenset({BookingStatus.ACTIVE, BookingStatus.CANCELED}),
    Actor.USER: frozenset({BookingStatus.CANCELED}),
    Actor.SYSTEM: frozenset({BookingStatus.COMPLETE}),
}

# Canceled and Complete are terminal: they have no outgoing entries.
# Re-confirming an Active booking is not a transition either.
TRANSITIONS: Dict[Tuple[BookingStatus, Actor], FrozenSet[BookingStatus]] = {
    (BookingStatus.PENDING, Actor.BUSINESS): frozenset({BookingStatus.ACTIVE, BookingStatus.CANCELED}),
    (BookingStatus.ACTIVE, Actor.BUSINESS): frozenset({BookingStatus.CANCELED}),
    (BookingStatus.PENDING, Actor.USER): frozenset({BookingStatus.CANCELED}),
    (BookingStatus.ACTIVE, Actor.USER): frozenset({BookingStatus.CANCELED}),
    (BookingStatus.ACTIVE, Actor.SYSTEM): frozenset({BookingStatus.COMPLETE}),
}


def actor_may_request(actor: Actor, requested: BookingStatus) -> bool:
    return requested in ACTOR_TARGETS[actor]


def can_transition(current: BookingStatus, actor: Actor, requested: BookingStatus) -> bool:
    return requested in TRANSITIONS.get((current, actor), frozenset())
