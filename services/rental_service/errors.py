"""
Domain errors raised by the rental lifecycle code.

Each error carries the HTTP status the API layer answers with, so route
handlers never have to translate them one by one.
"""
from typing import Optional


class RentalError(Exception):
    status_code = 500
    default_message = "Rental operation failed"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(RentalError):
    """Malformed or logically invalid input: bad dates, empty reason."""

    status_code = 400
    default_message = "Invalid input"


class NotFoundError(RentalError):
    """A referenced rental, vehicle or customer does not exist."""

    status_code = 404
    default_message = "Resource not found"


class ConflictError(RentalError):
    """Valid input that breaks a business rule (overlap, wrong state)."""

    status_code = 409
    default_message = "Operation conflicts with the current state"


class DataIntegrityError(RentalError):
    """Stored data the rental engine depends on is incomplete."""

    status_code = 422
    default_message = "Stored data is inconsistent"
