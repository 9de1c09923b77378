from __future__ import annotations
import pytest

from app import create_app
from extensions import db
from models import User
from blueprints.slots.services import engine_for

@pytest.fixture()
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        for email, role in (("admin@example.com", "admin"), ("driver@example.com", "user")):
            u = User(email=email, role=role)
            u.set_password("secret1")
            db.session.add(u)
        db.session.commit()
    yield app
    with app.app_context():
        db.drop_all()

def _login(app, email):
    c = app.test_client()
    r = c.post("/api/v1/auth/login", json={"email": email, "password": "secret1"})
    assert r.status_code == 200, r.get_json()
    return c

@pytest.fixture()
def admin(app):
    return _login(app, "admin@example.com")

def test_non_admin_forbidden(app):
    driver = _login(app, "driver@example.com")
    r = driver.post("/api/v1/admin/slots", json={"slot_number": 1})
    assert r.status_code == 403
    assert r.get_json() == {"error": "forbidden"}
    assert driver.get("/api/v1/admin/slots/stats").status_code == 403

def test_anonymous_unauthorized(app):
    assert app.test_client().get("/api/v1/admin/slots").status_code == 401

def test_create_slot(admin):
    r = admin.post("/api/v1/admin/slots", json={"slot_number": 5})
    assert r.status_code == 201
    js = r.get_json()
    assert js["slot"]["slot_number"] == 5
    assert js["slot"]["status"] == "available"
    assert js["slot"]["booked_by"] is None
    assert r.headers["Location"].endswith(f"/api/v1/slots/{js['slot']['id']}")

def test_create_accepts_camel_case_and_form(admin):
    r = admin.post("/api/v1/admin/slots", json={"slotNumber": "6"})
    assert r.status_code == 201
    r2 = admin.post("/api/v1/admin/slots", data={"slot_number": "7"})
    assert r2.status_code == 201
    numbers = [s["slot_number"] for s in admin.get("/api/v1/admin/slots").get_json()["items"]]
    assert numbers == [6, 7]

def test_create_duplicate_and_invalid(admin):
    assert admin.post("/api/v1/admin/slots", json={"slot_number": 5}).status_code == 201
    dup = admin.post("/api/v1/admin/slots", json={"slot_number": 5})
    assert dup.status_code == 409
    assert dup.get_json()["error"] == "duplicate_slot_number"
    for bad in (0, -3, "abc", None):
        r = admin.post("/api/v1/admin/slots", json={"slot_number": bad})
        assert r.status_code == 400
        assert r.get_json() == {"error": "invalid_input", "detail": "Invalid slot number"}

def test_rename(admin):
    a = admin.post("/api/v1/admin/slots", json={"slot_number": 1}).get_json()["slot"]["id"]
    admin.post("/api/v1/admin/slots", json={"slot_number": 2})

    r = admin.put(f"/api/v1/admin/slots/{a}", json={"slot_number": 2})
    assert r.status_code == 409
    assert r.get_json()["error"] == "duplicate_slot_number"

    same = admin.put(f"/api/v1/admin/slots/{a}", json={"slot_number": 1})
    assert same.status_code == 200

    r2 = admin.put(f"/api/v1/admin/slots/{a}", json={"slot_number": 10})
    assert r2.status_code == 200
    assert r2.get_json()["slot"]["slot_number"] == 10
    assert r2.get_json()["slot"]["id"] == a

    missing = admin.put("/api/v1/admin/slots/9999", json={"slot_number": 11})
    assert missing.status_code == 404

def test_delete(admin):
    a = admin.post("/api/v1/admin/slots", json={"slot_number": 1}).get_json()["slot"]["id"]
    assert admin.delete(f"/api/v1/admin/slots/{a}").status_code == 204
    r = admin.delete(f"/api/v1/admin/slots/{a}")
    assert r.status_code == 404
    assert r.get_json()["error"] == "not_found"
    assert admin.get("/api/v1/admin/slots").get_json()["items"] == []

def test_stats(app, admin):
    empty = admin.get("/api/v1/admin/slots/stats").get_json()
    assert empty == {"total": 0, "available": 0, "booked": 0, "occupancy_rate": "0"}

    with app.app_context():
        eng = engine_for(db.session)
        ids = [eng.create(n) for n in range(1, 11)]
        for sid in ids[:3]:
            eng.book(sid, "driver@example.com")

    r = admin.get("/api/v1/admin/slots/stats")
    assert r.status_code == 200
    assert r.get_json() == {"total": 10, "available": 7, "booked": 3, "occupancy_rate": "30.00"}

def test_out_of_range_slot_number_is_invalid_input(admin):
    r = admin.post("/api/v1/admin/slots", json={"slot_number": 2**63})
    assert r.status_code == 400
    assert r.get_json() == {"error": "invalid_input", "detail": "Invalid slot number"}
    assert admin.get("/api/v1/admin/slots").get_json()["items"] == []

@pytest.mark.parametrize("body", [[5], 5, "5"])
def test_non_object_json_body_rejected(admin, body):
    r = admin.post("/api/v1/admin/slots", json=body)
    assert r.status_code == 400
    assert r.get_json()["error"] == "invalid_input"

    sid = admin.post("/api/v1/admin/slots", json={"slot_number": 1}).get_json()["slot"]["id"]
    r2 = admin.put(f"/api/v1/admin/slots/{sid}", json=body)
    assert r2.status_code == 400
    assert r2.get_json()["error"] == "invalid_input"
