"""
Custom exception classes for the RentDesk back office.

These exceptions provide precise error types that services catch to turn
into (ok, message, result) tuples, and that controllers map to HTTP codes.
"""


class RentDeskError(Exception):
    """Base class; every subclass carries a user-facing default message."""

    default_message = "Error: operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message


class BookingNotFoundError(RentDeskError):
    """Raised when a booking ID cannot be found in the system."""

    default_message = "Error: booking not found"


class CarNotFoundError(RentDeskError):
    """Raised when a car ID cannot be found in the fleet."""

    default_message = "Error: car not found"


class DriverNotFoundError(RentDeskError):
    """Raised when a driver ID cannot be found."""

    default_message = "Error: driver not found"


class TransactionNotFoundError(RentDeskError):
    default_message = "Error: transaction not found"


class InvalidDateRangeError(RentDeskError):
    """Raised when the end of a window is not strictly after its start."""

    default_message = "Error: end time must be after start time"


class BookingValidationError(RentDeskError):
    """Raised when a required form field is missing or malformed."""

    default_message = "Error: invalid booking data"


class CarUnavailableError(RentDeskError):
    """Raised when the car is already booked for an overlapping window."""

    default_message = "Error: car is already booked for this schedule"


class DriverUnavailableError(RentDeskError):
    """Raised when the driver is already on duty for an overlapping window."""

    default_message = "Error: driver is already on duty for this schedule"


class ChecklistIncompleteError(RentDeskError):
    """Raised when a handover checklist is saved without the speedometer photo."""

    default_message = "Error: speedometer photo is required"


class TransactionValidationError(RentDeskError):
    """Raised when an expense line is missing its category or has no positive amount."""

    default_message = "Error: invalid transaction data"


class FleetValidationError(RentDeskError):
    """Raised when a car, driver, customer or partner record fails validation."""

    default_message = "Error: invalid record"


class PermissionDeniedError(RentDeskError):
    default_message = "Error: insufficient permission"


# Conflicts are reported as 409 by the HTTP layer, everything else as 400/403/404
CONFLICT_ERRORS = (CarUnavailableError, DriverUnavailableError)
NOT_FOUND_ERRORS = (BookingNotFoundError, CarNotFoundError, DriverNotFoundError, TransactionNotFoundError)
