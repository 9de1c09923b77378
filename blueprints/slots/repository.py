# blueprints/slots/repository.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime
from functools import wraps
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session

from models import Slot, SlotStatus, User
from .errors import DuplicateSlotNumber, StoreUnavailable

log = logging.getLogger(__name__)

@dataclass(frozen=True)
class SlotRecord:
    """Detached snapshot of a slot row. Never refreshed behind the caller's back."""
    id: int
    slot_number: int
    status: SlotStatus
    booked_by: Optional[str]
    created_at: datetime
    booked_at: Optional[datetime] = None
    unbooked_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Slot) -> "SlotRecord":
        return cls(
            id=row.id,
            slot_number=row.slot_number,
            status=SlotStatus(row.status),
            booked_by=row.booked_by or None,
            created_at=row.created_at,
            booked_at=row.booked_at,
            unbooked_at=row.unbooked_at,
            updated_at=row.updated_at,
        )

def _store_call(fn):
    """Turn connectivity failures into StoreUnavailable after rolling the session back."""
    @wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except (OperationalError, InterfaceError) as ex:
            self.session.rollback()
            log.error("store call failed", extra={"event": "store_unavailable", "op": fn.__name__})
            raise StoreUnavailable() from ex
    return wrapper


class SlotRepository:
    def __init__(self, session: Session):
        self.session = session

    # ---------- reads ----------
    def _select(self, *where) -> List[SlotRecord]:
        stmt = (select(Slot).where(*where)
                .order_by(Slot.slot_number.asc())
                .execution_options(populate_existing=True))
        return [SlotRecord.from_row(r) for r in self.session.scalars(stmt).all()]

    @_store_call
    def get(self, slot_id: int) -> SlotRecord | None:
        row = self.session.get(Slot, slot_id, populate_existing=True)
        return SlotRecord.from_row(row) if row else None

    @_store_call
    def find_by_number(self, slot_number: int, *, exclude_id: int | None = None) -> SlotRecord | None:
        where = [Slot.slot_number == slot_number]
        if exclude_id is not None:
            where.append(Slot.id != exclude_id)
        found = self._select(*where)
        return found[0] if found else None

    @_store_call
    def list_all(self) -> List[SlotRecord]:
        return self._select()

    @_store_call
    def list_by_status(self, status: SlotStatus) -> List[SlotRecord]:
        return self._select(Slot.status == status.value)

    @_store_call
    def list_by_owner(self, identity: str) -> List[SlotRecord]:
        return self._select(Slot.booked_by == identity)

    @_store_call
    def count(self, status: SlotStatus | None = None) -> int:
        stmt = select(func.count()).select_from(Slot)
        if status is not None:
            stmt = stmt.where(Slot.status == status.value)
        return int(self.session.scalar(stmt) or 0)

    # ---------- writes ----------
    @_store_call
    def insert(self, slot_number: int, *, now: datetime) -> SlotRecord:
        row = Slot(
            slot_number=slot_number,
            status=SlotStatus.AVAILABLE.value,
            booked_by=None,
            created_at=now,
        )
        self.session.add(row)
        try:
            self.session.commit()
        except IntegrityError as ex:
            self.session.rollback()
            raise DuplicateSlotNumber() from ex
        return SlotRecord.from_row(row)

    @_store_call
    def conditional_update(self, slot_id: int, *, expect: Dict[str, Any], values: Dict[str, Any]) -> int:
        """Single UPDATE guarded by ``id`` plus every ``expect`` field; returns the match count.

        ``None`` in ``expect`` means the column IS NULL.
        """
        conds = [Slot.id == slot_id]
        for field, val in expect.items():
            col = getattr(Slot, field)
            conds.append(col.is_(None) if val is None else col == val)
        stmt = (update(Slot).where(*conds).values(**values)
                .execution_options(synchronize_session=False))
        try:
            result = self.session.execute(stmt)
            self.session.commit()
        except IntegrityError as ex:
            # inputs are validated upstream, only the slot_number unique index can fire here
            self.session.rollback()
            raise DuplicateSlotNumber() from ex
        return result.rowcount

    @_store_call
    def delete(self, slot_id: int) -> int:
        result = self.session.execute(
            delete(Slot).where(Slot.id == slot_id).execution_options(synchronize_session=False)
        )
        self.session.commit()
        return result.rowcount


class UserDirectory:
    """Read-only view of ``users`` used for booking attribution."""

    def __init__(self, session: Session):
        self.session = session

    @_store_call
    def is_registered(self, email: str) -> bool:
        stmt = select(func.count()).select_from(User).where(User.email == email)
        return bool(self.session.scalar(stmt))
