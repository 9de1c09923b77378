from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from models import SlotStatus

class SlotOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    slot_number: int
    status: SlotStatus
    booked_by: Optional[str] = None
    created_at: datetime
    booked_at: Optional[datetime] = None
    unbooked_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class SlotStatsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    available: int
    booked: int
    occupancy_rate: str

def dump_slot(rec) -> dict:
    return SlotOut.model_validate(rec).model_dump(mode="json")

def dump_slots(recs) -> list[dict]:
    return [dump_slot(r) for r in recs]
