"""
Deferred extension instances.

Created here, bound to the app in create_app() via init_app().
"""

from flask import g, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],  # No global limit — we apply per-blueprint
    storage_uri="memory://",
)


@login_manager.request_loader
def load_user_from_request(req):
    """Resolve the acting user from an `Authorization: Bearer <jwt>` header.

    Sets g.auth_error so the unauthorized handler can tell a missing
    token apart from a bad or expired one.
    """
    from taskboard.models.user import User
    from taskboard.services import auth_service

    auth_header = req.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        g.auth_error = "No token provided"
        return None

    claims, error = auth_service.decode_token(auth_header[7:])
    if error:
        g.auth_error = error
        return None

    user = db.session.get(User, claims["userId"])
    if user is None or not user.is_active:
        g.auth_error = "Invalid token"
        return None
    return user


@login_manager.unauthorized_handler
def unauthorized():
    """JSON 401 instead of the default login-page redirect."""
    message = g.get("auth_error") or "User not authenticated"
    return jsonify({"error": "Unauthorized", "message": message}), 401
