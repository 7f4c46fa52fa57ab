"""Explicit caller roles for booking and agreement operations"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import NotAuthorized


class ActorRole(str, Enum):
    OWNER = "owner"
    RENTER = "renter"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    """Who is acting on a booking, and in which capacity"""

    role: ActorRole
    user_id: str

    @classmethod
    def owner(cls, user_id: str) -> "Actor":
        return cls(ActorRole.OWNER, user_id)

    @classmethod
    def renter(cls, user_id: str) -> "Actor":
        return cls(ActorRole.RENTER, user_id)

    @classmethod
    def admin(cls, user_id: str) -> "Actor":
        return cls(ActorRole.ADMIN, user_id)


def resolve_actor(user, owner_id: str, renter_id: str, requested: Optional[ActorRole] = None) -> Actor:
    """
    Work out the capacity a user acts in for a booking (or its agreement).

    When ``requested`` is given the user must actually hold that role; otherwise the
    party role wins over admin so an admin renting a car still signs as renter.

    Raises:
        NotAuthorized: If the user is neither a party nor an admin, or does not hold
            the requested role
    """
    held = []
    if user.id == owner_id:
        held.append(ActorRole.OWNER)
    if user.id == renter_id:
        held.append(ActorRole.RENTER)
    if getattr(user, "is_admin", False):
        held.append(ActorRole.ADMIN)

    if requested is not None:
        if requested not in held:
            raise NotAuthorized(f"You are not the {requested.value} of this booking")
        return Actor(requested, user.id)

    if not held:
        raise NotAuthorized("You are not a party to this booking")
    return Actor(held[0], user.id)


def authorize_actor(actor: Actor, owner_id: str, renter_id: str, is_admin: bool = False) -> None:
    """
    Check once per operation that the actor really is the party it claims to be.

    Raises:
        NotAuthorized: On any mismatch
    """
    if actor.role == ActorRole.OWNER and actor.user_id == owner_id:
        return
    if actor.role == ActorRole.RENTER and actor.user_id == renter_id:
        return
    if actor.role == ActorRole.ADMIN and is_admin:
        return
    raise NotAuthorized(f"User {actor.user_id} cannot act as {actor.role.value} on this booking")
