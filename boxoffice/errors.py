# boxoffice/errors.py
"""Domain error codes for the box office."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_ID = "INVALID_ID"
    HALL_NOT_FOUND = "HALL_NOT_FOUND"
    HALL_IN_USE = "HALL_IN_USE"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    EVENT_NOT_BOOKABLE = "EVENT_NOT_BOOKABLE"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    BOOKING_ALREADY_CANCELLED = "BOOKING_ALREADY_CANCELLED"
    SEAT_NOT_FOUND = "SEAT_NOT_FOUND"
    SEAT_UNAVAILABLE = "SEAT_UNAVAILABLE"
    SEAT_CATEGORY_CONFLICT = "SEAT_CATEGORY_CONFLICT"
    INVALID_SELECTION = "INVALID_SELECTION"
    PAYMENT_NOT_CONFIGURED = "PAYMENT_NOT_CONFIGURED"
    PAYMENT_GATEWAY_ERROR = "PAYMENT_GATEWAY_ERROR"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidObjectIdError(DomainError):
    """Raised when a path or body ID is not a valid ObjectId."""

    def __init__(self, label: str = "ID") -> None:
        super().__init__(code=ErrorCode.INVALID_ID, message=f"Invalid {label}")


class HallNotFoundError(DomainError):
    def __init__(self, hall_id: str) -> None:
        super().__init__(code=ErrorCode.HALL_NOT_FOUND, message="Hall not found")
        self.hall_id = hall_id


class HallInUseError(DomainError):
    """Raised when deleting a hall that events still point at."""

    def __init__(self, hall_id: str, event_count: int) -> None:
        super().__init__(
            code=ErrorCode.HALL_IN_USE,
            message=f"Hall is used by {event_count} event(s)",
        )
        self.hall_id = hall_id


class EventNotFoundError(DomainError):
    def __init__(self, event_id: str) -> None:
        super().__init__(code=ErrorCode.EVENT_NOT_FOUND, message="Event not found")
        self.event_id = event_id


class EventNotBookableError(DomainError):
    """Raised when an event is not open for booking (draft or cancelled)."""

    def __init__(self, event_id: str, status: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_BOOKABLE,
            message=f"Event is {status} and cannot be booked",
        )
        self.event_id = event_id


class BookingNotFoundError(DomainError):
    def __init__(self, booking_id: str) -> None:
        super().__init__(code=ErrorCode.BOOKING_NOT_FOUND, message="Booking not found")
        self.booking_id = booking_id


class BookingAlreadyCancelledError(DomainError):
    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_ALREADY_CANCELLED,
            message="Booking is already cancelled",
        )
        self.booking_id = booking_id


class SeatNotFoundError(DomainError):
    """Raised when a requested seat ID is not part of the event's layout."""

    def __init__(self, seat_ids: Iterable[str]) -> None:
        seats = sorted(seat_ids)
        super().__init__(
            code=ErrorCode.SEAT_NOT_FOUND,
            message=f"Unknown seat(s): {', '.join(seats)}",
        )
        self.seat_ids = seats


class SeatUnavailableError(DomainError):
    """Raised when a requested seat is already booked."""

    def __init__(self, seat_ids: Iterable[str]) -> None:
        seats = sorted(seat_ids)
        super().__init__(
            code=ErrorCode.SEAT_UNAVAILABLE,
            message=f"Seat(s) already booked: {', '.join(seats)}",
        )
        self.seat_ids = seats


class SeatCategoryConflictError(DomainError):
    """Raised when one booking mixes seat categories."""

    def __init__(self, locked: str, attempted: str) -> None:
        super().__init__(
            code=ErrorCode.SEAT_CATEGORY_CONFLICT,
            message=f"Cannot mix {locked} and {attempted} seats in one booking",
        )


class SeatSelectionError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_SELECTION, message=message)


class PaymentConfigurationError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.PAYMENT_NOT_CONFIGURED,
            message="Payment service configuration error",
        )


class PaymentGatewayError(DomainError):
    """Raised when the payment provider rejects or fails a request."""

    def __init__(self, message: str = "Payment service unavailable") -> None:
        super().__init__(code=ErrorCode.PAYMENT_GATEWAY_ERROR, message=message)


HTTP_STATUS = {
    ErrorCode.INVALID_ID: 400,
    ErrorCode.HALL_NOT_FOUND: 404,
    ErrorCode.HALL_IN_USE: 409,
    ErrorCode.EVENT_NOT_FOUND: 404,
    ErrorCode.EVENT_NOT_BOOKABLE: 409,
    ErrorCode.BOOKING_NOT_FOUND: 404,
    ErrorCode.BOOKING_ALREADY_CANCELLED: 409,
    ErrorCode.SEAT_NOT_FOUND: 400,
    ErrorCode.SEAT_UNAVAILABLE: 409,
    ErrorCode.SEAT_CATEGORY_CONFLICT: 400,
    ErrorCode.INVALID_SELECTION: 400,
    ErrorCode.PAYMENT_NOT_CONFIGURED: 503,
    ErrorCode.PAYMENT_GATEWAY_ERROR: 502,
}
