# blueprints/slots/validators.py
from __future__ import annotations
from typing import Any

from models import SlotStatus
from .errors import InvalidInput

# db.Integer is 32-bit on most backends
MAX_INT = 2**31 - 1

def _as_positive_int(value: Any, what: str) -> int:
    # bool is an int subclass; True must not become slot 1
    if value is None or isinstance(value, bool):
        raise InvalidInput(f"Invalid {what}")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidInput(f"Invalid {what}")
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidInput(f"Invalid {what}") from None
    elif not isinstance(value, int):
        raise InvalidInput(f"Invalid {what}")
    if value <= 0 or value > MAX_INT:
        raise InvalidInput(f"Invalid {what}")
    return value

def ensure_slot_number(value: Any) -> int:
    return _as_positive_int(value, "slot number")

def ensure_slot_id(value: Any) -> int:
    return _as_positive_int(value, "slot ID")

def ensure_identity(value: Any) -> str:
    """Identity is the requester's email; the only shape rule is a non-empty string with '@'."""
    if not isinstance(value, str):
        raise InvalidInput("Invalid email address")
    ident = value.strip().lower()
    if not ident or "@" not in ident:
        raise InvalidInput("Invalid email address")
    return ident

def ensure_status(value: Any) -> SlotStatus:
    if isinstance(value, SlotStatus):
        return value
    try:
        return SlotStatus(str(value).strip().lower())
    except ValueError:
        raise InvalidInput("Status must be 'available' or 'booked'") from None
