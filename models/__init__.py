from .user import User, Role
from .slot import Slot, SlotStatus

__all__ = ["User", "Role", "Slot", "SlotStatus"]
