from __future__ import annotations
import os
from flask import Flask
from config import config_map
from extensions import db, migrate, login_manager, csrf
from sqlalchemy import inspect, select

def _seed_from_config(app):
    if not app.config.get("SEED_TEST_DATA"):
        return
    with app.app_context():
        # tables may not exist yet (before `flask db upgrade`)
        if not inspect(db.engine).has_table("users"):
            return

        from models import User, Slot, SlotStatus  # local import to avoid cycles
        created = 0
        for u in app.config.get("DEFAULT_USERS", []):
            email = u["email"].strip().lower()
            if User.query.filter_by(email=email).first():
                continue
            user = User(email=email, name=u.get("name"), role=u["role"], is_active_flag=True)
            user.set_password(u["password"])
            db.session.add(user)
            created += 1

        if inspect(db.engine).has_table("slots"):
            taken = set(db.session.scalars(select(Slot.slot_number)).all())
            for n in range(1, int(app.config.get("SEED_SLOTS", 0)) + 1):
                if n not in taken:
                    db.session.add(Slot(slot_number=n, status=SlotStatus.AVAILABLE.value))
                    created += 1
        if created:
            db.session.commit()

def register_blueprints(app: Flask) -> None:
    from blueprints.core import bp as core_bp, api_bp as core_api_bp
    from blueprints.auth.routes import api_bp as auth_api_bp
    from blueprints.slots import api_bp as slots_api_bp
    from blueprints.admin.routes import api_bp as admin_api_bp

    # core without a prefix -> '/health' at the root
    app.register_blueprint(core_bp)
    app.register_blueprint(core_api_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_api_bp, url_prefix="/api/v1")
    app.register_blueprint(slots_api_bp, url_prefix="/api/v1")
    app.register_blueprint(admin_api_bp, url_prefix="/api/v1")

def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    cfg_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config_map[cfg_name])
    # must land before db.init_app, which builds the engine from the URI
    if overrides:
        app.config.update(overrides)

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    register_blueprints(app)
    _seed_from_config(app)
    return app
