"""
Idempotent seed script.
Usage:
  python seed.py --reset            # drop and recreate the DB, then seed admin + slots
  python seed.py --ensure-admin     # only create admin@example.com / admin123
  python seed.py --slots 30         # top the slot list up to numbers 1..30
  python seed.py                    # soft top-up of whatever is missing (idempotent)
"""
from __future__ import annotations
import argparse
import logging

from sqlalchemy import select

from app import create_app
from extensions import db
from models import Role, Slot, SlotStatus, User

log = logging.getLogger("seed")

ADMIN_SEED = {"name": "Admin", "email": "admin@example.com", "password": "admin123"}
DEFAULT_SLOTS = 20

def ensure_admin() -> bool:
    if User.query.filter_by(email=ADMIN_SEED["email"]).first():
        return False
    admin = User(email=ADMIN_SEED["email"], name=ADMIN_SEED["name"], role=Role.ADMIN.value)
    admin.set_password(ADMIN_SEED["password"])
    db.session.add(admin)
    db.session.commit()
    return True

def ensure_slots(count: int) -> int:
    taken = set(db.session.scalars(select(Slot.slot_number)).all())
    added = 0
    for n in range(1, count + 1):
        if n in taken:
            continue
        db.session.add(Slot(slot_number=n, status=SlotStatus.AVAILABLE.value))
        added += 1
    if added:
        db.session.commit()
    return added

def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Seed the parking database")
    parser.add_argument("--reset", action="store_true", help="drop and recreate all tables first")
    parser.add_argument("--ensure-admin", action="store_true", help="only make sure the admin user exists")
    parser.add_argument("--slots", type=int, default=DEFAULT_SLOTS, help="ensure slots 1..N exist")
    parser.add_argument("--config", default=None, help="config name from config.config_map")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = create_app(args.config)
    with app.app_context():
        if args.reset:
            db.drop_all()
            log.info("tables dropped")
        db.create_all()

        if ensure_admin():
            log.info("admin created: %s", ADMIN_SEED["email"])
        if args.ensure_admin:
            return
        added = ensure_slots(args.slots)
        log.info("slots added: %d (target 1..%d)", added, args.slots)

if __name__ == "__main__":
    main()
