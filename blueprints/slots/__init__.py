from flask import Blueprint

# url_prefix is set in app.register_blueprint(..., url_prefix="/api/v1")
api_bp = Blueprint("slots_api", __name__)

# routes register themselves on import
from . import routes  # noqa: E402,F401
