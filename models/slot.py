from enum import Enum
from extensions import db
from .user import utcnow

class SlotStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"

class Slot(db.Model):
    __tablename__ = "slots"

    id = db.Column(db.Integer, primary_key=True)
    slot_number = db.Column(db.Integer, nullable=False, unique=True, index=True)
    status = db.Column(db.String(16), nullable=False, default=SlotStatus.AVAILABLE.value, index=True)
    # NULL is the only "not booked" value; empty strings are never written
    booked_by = db.Column(db.String(255), nullable=True, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    booked_at = db.Column(db.DateTime, nullable=True)
    unbooked_at = db.Column(db.DateTime, nullable=True)
    updated_at = db.Column(db.DateTime, nullable=True)

    __table_args__ = (
        db.CheckConstraint("slot_number > 0", name="ck_slots_number_positive"),
        db.CheckConstraint(
            "(status = 'booked' AND booked_by IS NOT NULL AND booked_by <> '') "
            "OR (status = 'available' AND booked_by IS NULL)",
            name="ck_slots_status_owner",
        ),
    )

    def __repr__(self):
        return f"<Slot #{self.slot_number} {self.status}>"
