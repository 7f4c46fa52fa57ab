"""
Domain error taxonomy.

Services raise these instead of HTTP exceptions so the same rules can run from the
API, the worker and tests. ``main.py`` turns them into JSON responses with the
status code each class declares.
"""

from datetime import date
from typing import Optional


class DomainError(Exception):
    """Base class for every rejected booking/availability operation."""

    status_code = 400
    code = "DomainError"

    def __init__(self, message: str, *, code: Optional[str] = None, day: Optional[date] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.date = day

    def to_dict(self) -> dict:
        payload = {"detail": self.message, "code": self.code}
        if self.date is not None:
            payload["date"] = self.date.isoformat()
        return payload


class ValidationError(DomainError):
    """Malformed or out-of-range input; nothing is persisted."""

    status_code = 422
    code = "ValidationError"


class ConflictError(DomainError):
    status_code = 409
    code = "Conflict"


class AuthorizationError(DomainError):
    status_code = 403
    code = "NotAuthorized"


class PreconditionError(DomainError):
    status_code = 412
    code = "PreconditionFailed"


class NotFoundError(DomainError):
    status_code = 404
    code = "NotFound"


# Concrete errors named by the booking API


class InvalidRange(ValidationError):
    code = "InvalidRange"


class DateConflict(ConflictError):
    code = "DateConflict"

    def __init__(self, day: date, message: Optional[str] = None):
        super().__init__(
            message or f"The vehicle is unavailable on {day.isoformat()}",
            day=day,
        )


class InvalidTransition(ConflictError):
    code = "InvalidTransition"

    def __init__(self, current: str, target: str, message: Optional[str] = None):
        super().__init__(message or f"Invalid booking status transition: {current} -> {target}")
        self.current = current
        self.target = target


class AuthenticationRequired(AuthorizationError):
    status_code = 401
    code = "AuthenticationRequired"

    def __init__(self, message: str = "Please sign in to continue"):
        super().__init__(message)


class NotAuthorized(AuthorizationError):
    code = "NotAuthorized"


class VerificationRequired(PreconditionError):
    code = "VerificationRequired"

    def __init__(
        self, message: str = "Your account must be verified before you can book a vehicle"
    ):
        super().__init__(message)


class SelfBooking(PreconditionError):
    code = "SelfBooking"

    def __init__(self, message: str = "You cannot book your own vehicle"):
        super().__init__(message)


class VehicleNotListed(PreconditionError):
    code = "VehicleNotListed"


class AgreementUnavailable(PreconditionError):
    code = "AgreementUnavailable"
