# blueprints/slots/routes.py
from __future__ import annotations
from flask import jsonify, request
from flask_login import login_required, current_user

from extensions import db
from . import api_bp
from .errors import BookingError
from .schemas import dump_slot, dump_slots
from .services import BookingEngine, engine_for

def engine() -> BookingEngine:
    return engine_for(db.session)

def current_identity() -> str | None:
    if not current_user.is_authenticated:
        return None
    return current_user.email

@api_bp.app_errorhandler(BookingError)
def _booking_error(err: BookingError):
    return jsonify(err.to_dict()), err.http_status

@api_bp.get("/slots")
@login_required
def api_slots_list():
    status = request.args.get("status")
    items = engine().list_by_status(status) if status else engine().list_all()
    return jsonify({"items": dump_slots(items)})

@api_bp.get("/slots/mine")
@login_required
def api_slots_mine():
    return jsonify({"items": dump_slots(engine().list_by_owner(current_identity()))})

@api_bp.get("/slots/<int:slot_id>")
@login_required
def api_slots_get(slot_id: int):
    return jsonify(dump_slot(engine().get(slot_id)))

@api_bp.post("/slots/<int:slot_id>/book")
@login_required
def api_slots_book(slot_id: int):
    rec = engine().book(slot_id, current_identity())
    return jsonify({"ok": True, "message": "Slot booked successfully", "slot": dump_slot(rec)})

@api_bp.post("/slots/<int:slot_id>/unbook")
@login_required
def api_slots_unbook(slot_id: int):
    rec = engine().unbook(slot_id, current_identity())
    return jsonify({"ok": True, "message": "Slot unbooked successfully", "slot": dump_slot(rec)})
