"""
Booking status state machine

Statuses: pending → confirmed/cancelled → active → completed/cancelled

Note:
- 'active' is reached only when both agreement signatures are present; no actor
  can request it directly
- 'completed' is an external vehicle-return event accepted from the owner or an admin
- 'completed' and 'cancelled' are terminal
"""

from ...models import LIVE_BOOKING_STATUSES
from ...shared.actors import ActorRole
from ...shared.errors import InvalidTransition

TERMINAL_STATUSES = frozenset({"completed", "cancelled"})

# (current, target) -> roles allowed to request it
TRANSITION_RIGHTS: dict[tuple[str, str], frozenset] = {
    ("pending", "confirmed"): frozenset({ActorRole.OWNER}),
    ("pending", "cancelled"): frozenset({ActorRole.OWNER}),
    ("confirmed", "cancelled"): frozenset({ActorRole.OWNER, ActorRole.RENTER, ActorRole.ADMIN}),
    ("confirmed", "active"): frozenset(),  # Agreement signing only
    ("active", "completed"): frozenset({ActorRole.OWNER, ActorRole.ADMIN}),
    ("active", "cancelled"): frozenset({ActorRole.OWNER, ActorRole.ADMIN}),
}


def is_live(status: str) -> bool:
    return status in LIVE_BOOKING_STATUSES


def allowed_targets(current_status: str, role: ActorRole) -> list[str]:
    """Statuses the given role may move a booking to from its current status"""
    return [
        target
        for (current, target), roles in TRANSITION_RIGHTS.items()
        if current == current_status and role in roles
    ]


def validate_transition(current_status: str, new_status: str, role: ActorRole) -> None:
    """
    Validate that ``role`` may move a booking from current_status to new_status.

    Raises:
        InvalidTransition: For a terminal source, an edge that does not exist, or an
            edge the role has no right to request
    """
    if current_status in TERMINAL_STATUSES:
        raise InvalidTransition(
            current_status,
            new_status,
            f"This booking is already {current_status} and can no longer change",
        )

    if (current_status, new_status) not in TRANSITION_RIGHTS:
        raise InvalidTransition(current_status, new_status)

    if role not in TRANSITION_RIGHTS[(current_status, new_status)]:
        if new_status == "active":
            message = "A booking becomes active only after both parties sign the rental agreement"
        else:
            message = f"The {role.value} cannot move a {current_status} booking to {new_status}"
        raise InvalidTransition(current_status, new_status, message)


def validate_system_activation(current_status: str) -> None:
    """The agreement protocol's own edge: confirmed → active"""
    if current_status != "confirmed":
        raise InvalidTransition(
            current_status,
            "active",
            f"Only a confirmed booking can become active (booking is {current_status})",
        )
