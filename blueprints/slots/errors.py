# blueprints/slots/errors.py
"""Error kinds raised by the booking engine.

Every kind is recoverable. ``code`` is the stable machine-readable name put into
API responses, ``http_status`` is what the presentation layer answers with.
"""
from __future__ import annotations


class BookingError(Exception):
    code = "booking_error"
    http_status = 400
    default_message = "Booking operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class InvalidInput(BookingError):
    code = "invalid_input"
    http_status = 400
    default_message = "Invalid input"


class NotFound(BookingError):
    code = "not_found"
    http_status = 404
    default_message = "Slot not found"


class DuplicateSlotNumber(BookingError):
    code = "duplicate_slot_number"
    http_status = 409
    default_message = "Slot number already exists"


class AlreadyBooked(BookingError):
    code = "already_booked"
    http_status = 409
    default_message = "This slot is already booked"


class NotBooked(BookingError):
    code = "not_booked"
    http_status = 409
    default_message = "Slot is not booked"


class NotOwner(BookingError):
    code = "not_owner"
    http_status = 403
    default_message = "You can only unbook your own slots"


class ConflictStaleState(BookingError):
    code = "conflict_stale_state"
    http_status = 409
    default_message = "Slot state changed concurrently, refresh and retry"


class IdentityNotRegistered(BookingError):
    code = "identity_not_registered"
    http_status = 403
    default_message = "User not found. Please register first."


class StoreUnavailable(BookingError):
    code = "store_unavailable"
    http_status = 503
    default_message = "Slot store is unavailable"
