# blueprints/auth/routes.py
from __future__ import annotations
import time
from functools import wraps
from typing import Callable, Optional

from flask import Blueprint, request, jsonify, current_app, abort
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import CSRFError
from pydantic import BaseModel, Field, ValidationError, field_validator
from sqlalchemy.exc import IntegrityError

from extensions import db, login_manager
from models import User, Role

api_bp = Blueprint("auth_api", __name__)

# ---- safe defaults
DEFAULT_RL_MAX = 5
DEFAULT_RL_WIN = 300  # 5 minutes

def _attempts() -> dict[str, list[float]]:
    # per-app bucket store, key: ip|email -> [timestamps]
    return current_app.extensions.setdefault("login_attempts", {})

# ---------- payloads ----------
class _Credentials(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def _email_shape(cls, v: str):
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("invalid_email")
        return v

class LoginIn(_Credentials):
    pass

class RegisterIn(_Credentials):
    name: Optional[str] = Field(None, max_length=255)
    password: str = Field(min_length=6, max_length=128)

def _json_err(code: str, http: int = 400, detail=None):
    body = {"error": code}
    if detail:
        body["detail"] = detail
    return jsonify(body), http

def _validation_err(ve: ValidationError):
    return _json_err("validation_error", 422, ve.errors(include_url=False, include_context=False))

def _payload() -> Optional[dict]:
    """JSON object or form fields; None when the JSON body is not an object."""
    data = request.get_json(silent=True)
    if data is None:
        return request.form.to_dict()
    return data if isinstance(data, dict) else None

# ---------- rate limit ----------
def _rl_key(email: str) -> str:
    ip = request.headers.get("X-Forwarded-For", request.remote_addr or "0.0.0.0").split(",")[0].strip()
    return f"{ip}|{(email or '').lower()}"

def _rl_check_and_hit(email: str) -> bool:
    now = time.time()
    win = current_app.config.get("AUTH_RL_WINDOW", DEFAULT_RL_WIN)
    mx = current_app.config.get("AUTH_RL_MAX", DEFAULT_RL_MAX)
    key = _rl_key(email)
    bucket = _attempts().setdefault(key, [])
    # purge old hits
    cutoff = now - win
    while bucket and bucket[0] < cutoff:
        bucket.pop(0)
    if len(bucket) >= mx:
        return False
    bucket.append(now)
    return True

# ---------- role decorators ----------
def admin_required(fn: Callable):
    @wraps(fn)
    @login_required
    def wrapper(*args, **kwargs):
        if getattr(current_user, "role", None) != Role.ADMIN.value:
            abort(403)
        return fn(*args, **kwargs)
    return wrapper

# ---------- 400/401/403 handlers ----------
@login_manager.unauthorized_handler
def _unauth():
    return jsonify({"error": "unauthorized"}), 401

@api_bp.app_errorhandler(403)
def _forbidden(e):
    return jsonify({"error": "forbidden"}), 403

@api_bp.app_errorhandler(CSRFError)
def _csrf_failed(e: CSRFError):
    return jsonify({"error": "csrf_failed", "detail": e.description}), 400

def _user_json(user: User) -> dict:
    return {"id": user.id, "email": user.email, "name": user.name, "role": user.role}

# ---------- API ----------
@api_bp.post("/auth/register")
def api_register():
    payload = _payload()
    if payload is None:
        return _json_err("validation_error", 422)
    try:
        data = RegisterIn.model_validate(payload)
    except ValidationError as ve:
        return _validation_err(ve)

    if User.query.filter_by(email=data.email).first():
        return _json_err("user_exists", 409)

    user = User(email=data.email, name=data.name, role=Role.USER.value, is_active_flag=True)
    user.set_password(data.password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return _json_err("user_exists", 409)

    current_app.logger.info("user registered", extra={"event": "user_registered", "identity": user.email})
    login_user(user, remember=True)
    return jsonify({"ok": True, "user": _user_json(user)}), 201

@api_bp.post("/auth/login")
def api_login():
    payload = _payload()
    if payload is None:
        return _json_err("validation_error", 422)
    email = payload.get("email") or ""
    password = payload.get("password") or ""
    if not isinstance(email, str) or not isinstance(password, str):
        return _json_err("validation_error", 422)
    email = email.strip().lower()

    if not email or not password:
        return _json_err("missing_credentials", 400)

    # rate limit
    if not _rl_check_and_hit(email):
        return _json_err("too_many_attempts", 429)

    try:
        data = LoginIn.model_validate({"email": email, "password": password})
    except ValidationError as ve:
        return _validation_err(ve)

    user: Optional[User] = User.query.filter_by(email=data.email).first()
    if not user or not user.password_hash or not user.check_password(data.password):
        return _json_err("invalid_credentials", 401)

    if not user.is_active:
        return _json_err("inactive", 403)

    login_user(user, remember=True)
    return jsonify({"ok": True, "user": _user_json(user)})

@api_bp.post("/auth/logout")
@login_required
def api_logout():
    logout_user()
    return jsonify({"ok": True})

@api_bp.get("/auth/me")
def api_me():
    if not current_user.is_authenticated:
        return jsonify({"email": None})
    return jsonify({"email": current_user.email, "user": _user_json(current_user)})
