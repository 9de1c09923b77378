# blueprints/slots/services.py
from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, List

from sqlalchemy.orm import Session

from models import SlotStatus
from models.user import utcnow
from .errors import (
    AlreadyBooked, ConflictStaleState, DuplicateSlotNumber, IdentityNotRegistered,
    NotBooked, NotFound, NotOwner,
)
from .repository import SlotRecord, SlotRepository, UserDirectory
from .validators import ensure_identity, ensure_slot_id, ensure_slot_number, ensure_status

log = logging.getLogger(__name__)

@dataclass
class SlotStats:
    total: int
    available: int
    booked: int
    occupancy_rate: str


class BookingEngine:
    """Slot lifecycle and the booking state machine.

    available --book--> booked --unbook--> available. Every transition is one
    conditional UPDATE whose WHERE clause re-asserts the source state, so of two
    racing callers exactly one matches a row and the other gets
    ``ConflictStaleState``. No locks are taken here.

    The requester identity is passed in by the caller; the engine never looks at
    the session or request.
    """

    def __init__(self, slots: SlotRepository, users: UserDirectory,
                 clock: Callable[[], datetime] = utcnow):
        self.slots = slots
        self.users = users
        self.clock = clock

    # ---------- admin ----------
    def create(self, slot_number: Any) -> int:
        number = ensure_slot_number(slot_number)
        if self.slots.find_by_number(number) is not None:
            raise DuplicateSlotNumber()
        rec = self.slots.insert(number, now=self.clock())
        log.info("slot created", extra={"event": "slot_created", "slot_id": rec.id, "slot_number": number})
        return rec.id

    def rename(self, slot_id: Any, slot_number: Any) -> SlotRecord:
        sid = ensure_slot_id(slot_id)
        slot = self.slots.get(sid)
        if slot is None:
            raise NotFound()
        number = ensure_slot_number(slot_number)
        if self.slots.find_by_number(number, exclude_id=sid) is not None:
            raise DuplicateSlotNumber()
        now = self.clock()
        matched = self.slots.conditional_update(
            sid, expect={}, values={"slot_number": number, "updated_at": now},
        )
        if not matched:
            raise NotFound()
        log.info("slot renamed", extra={"event": "slot_renamed", "slot_id": sid, "slot_number": number})
        return replace(slot, slot_number=number, updated_at=now)

    def delete(self, slot_id: Any) -> None:
        sid = ensure_slot_id(slot_id)
        if not self.slots.delete(sid):
            raise NotFound()
        log.info("slot deleted", extra={"event": "slot_deleted", "slot_id": sid})

    # ---------- user ----------
    def book(self, slot_id: Any, requester: Any) -> SlotRecord:
        identity = ensure_identity(requester)
        sid = ensure_slot_id(slot_id)
        if not self.users.is_registered(identity):
            raise IdentityNotRegistered()

        slot = self.slots.get(sid)
        if slot is None:
            raise NotFound()
        if slot.status is SlotStatus.BOOKED or slot.booked_by:
            raise AlreadyBooked()

        now = self.clock()
        matched = self.slots.conditional_update(
            sid,
            expect={"status": SlotStatus.AVAILABLE.value, "booked_by": None},
            values={"status": SlotStatus.BOOKED.value, "booked_by": identity,
                    "booked_at": now, "updated_at": now},
        )
        if not matched:
            log.warning("book lost race", extra={"event": "conflict_stale_state", "slot_id": sid,
                                                 "identity": identity})
            raise ConflictStaleState("Slot is no longer available")
        log.info("slot booked", extra={"event": "slot_booked", "slot_id": sid, "identity": identity})
        return replace(slot, status=SlotStatus.BOOKED, booked_by=identity, booked_at=now, updated_at=now)

    def unbook(self, slot_id: Any, requester: Any) -> SlotRecord:
        identity = ensure_identity(requester)
        sid = ensure_slot_id(slot_id)

        slot = self.slots.get(sid)
        if slot is None:
            raise NotFound()
        if slot.status is not SlotStatus.BOOKED:
            raise NotBooked()
        if slot.booked_by != identity:
            raise NotOwner()

        now = self.clock()
        matched = self.slots.conditional_update(
            sid,
            expect={"status": SlotStatus.BOOKED.value, "booked_by": identity},
            values={"status": SlotStatus.AVAILABLE.value, "booked_by": None,
                    "unbooked_at": now, "updated_at": now},
        )
        if not matched:
            log.warning("unbook lost race", extra={"event": "conflict_stale_state", "slot_id": sid,
                                                   "identity": identity})
            raise ConflictStaleState("Failed to unbook slot")
        log.info("slot unbooked", extra={"event": "slot_unbooked", "slot_id": sid, "identity": identity})
        return replace(slot, status=SlotStatus.AVAILABLE, booked_by=None, unbooked_at=now, updated_at=now)

    # ---------- read side ----------
    def get(self, slot_id: Any) -> SlotRecord:
        rec = self.slots.get(ensure_slot_id(slot_id))
        if rec is None:
            raise NotFound()
        return rec

    def list_all(self) -> List[SlotRecord]:
        return self.slots.list_all()

    def list_by_status(self, status: Any) -> List[SlotRecord]:
        return self.slots.list_by_status(ensure_status(status))

    def list_by_owner(self, identity: Any) -> List[SlotRecord]:
        return self.slots.list_by_owner(ensure_identity(identity))

    def stats(self) -> SlotStats:
        # three independent counts; a write landing between them can skew the
        # snapshot by one transition, which callers tolerate
        total = self.slots.count()
        booked = self.slots.count(SlotStatus.BOOKED)
        available = self.slots.count(SlotStatus.AVAILABLE)
        rate = f"{booked / total * 100:.2f}" if total > 0 else "0"
        return SlotStats(total=total, available=available, booked=booked, occupancy_rate=rate)


def engine_for(session: Session) -> BookingEngine:
    return BookingEngine(SlotRepository(session), UserDirectory(session))
