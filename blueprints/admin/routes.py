# blueprints/admin/routes.py
from __future__ import annotations
from flask import Blueprint, jsonify, request, url_for

from blueprints.auth.routes import admin_required
from blueprints.slots.errors import InvalidInput
from blueprints.slots.routes import engine
from blueprints.slots.schemas import SlotStatsOut, dump_slot, dump_slots

api_bp = Blueprint("admin_api", __name__)

def created(location: str, data):
    resp = jsonify(data)
    resp.status_code = 201
    resp.headers["Location"] = location
    return resp

def _slot_number_from_request():
    payload = request.get_json(silent=True)
    if payload is None:
        payload = request.form
    elif not isinstance(payload, dict):
        raise InvalidInput("Request body must be a JSON object")
    # validated by the engine, pass through whatever came in
    return payload.get("slot_number", payload.get("slotNumber"))

@api_bp.get("/admin/slots")
@admin_required
def admin_slots_list():
    return jsonify({"items": dump_slots(engine().list_all())})

@api_bp.post("/admin/slots")
@admin_required
def admin_slots_create():
    eng = engine()
    slot_id = eng.create(_slot_number_from_request())
    return created(url_for("slots_api.api_slots_get", slot_id=slot_id),
                   {"ok": True, "message": "Slot added successfully", "slot": dump_slot(eng.get(slot_id))})

@api_bp.put("/admin/slots/<int:slot_id>")
@admin_required
def admin_slots_rename(slot_id: int):
    rec = engine().rename(slot_id, _slot_number_from_request())
    return jsonify({"ok": True, "message": "Slot updated successfully", "slot": dump_slot(rec)})

@api_bp.delete("/admin/slots/<int:slot_id>")
@admin_required
def admin_slots_delete(slot_id: int):
    engine().delete(slot_id)
    return "", 204

@api_bp.get("/admin/slots/stats")
@admin_required
def admin_slots_stats():
    stats = engine().stats()
    return jsonify(SlotStatsOut.model_validate(stats).model_dump(mode="json"))
