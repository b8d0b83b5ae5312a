"""Auth blueprint — /auth/*

Registration, login, current user, password change. Login and
register are rate limited per client IP (AUTH_RATE_LIMIT).

Route Map:
  POST /auth/register         — Create account, returns user + token
  POST /auth/login            — Exchange credentials for a token
  GET  /auth/me               — Current user
  POST /auth/change-password  — Change password (token required)
"""

import logging

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from taskboard.extensions import db, limiter
from taskboard.responses import result_error
from taskboard.serializers import user_dict
from taskboard.services import auth_service, email_service
from taskboard.services.auth_service import AuthService

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _auth_limit():
    return current_app.config["AUTH_RATE_LIMIT"]


@auth_bp.route("/register", methods=["POST"])
@limiter.limit(_auth_limit)
def register():
    result = AuthService(db.session).register(request.get_json(silent=True))
    if not result.is_ok:
        return result_error(result)

    user = result.value
    email_service.send_welcome_email(user)
    return jsonify({
        "message": "User registered successfully",
        "user": user_dict(user),
        "token": auth_service.issue_token(user),
    }), 201


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(_auth_limit)
def login():
    result = AuthService(db.session).login(request.get_json(silent=True))
    if not result.is_ok:
        logger.warning(f"Failed login from {request.remote_addr}")
        return result_error(result)

    user = result.value
    return jsonify({
        "message": "Login successful",
        "user": user_dict(user),
        "token": auth_service.issue_token(user),
    })


@auth_bp.route("/me")
@login_required
def me():
    return jsonify({"user": user_dict(current_user)})


@auth_bp.route("/change-password", methods=["POST"])
@login_required
def change_password():
    user = current_user._get_current_object()
    result = AuthService(db.session).change_password(
        user, request.get_json(silent=True)
    )
    if not result.is_ok:
        return result_error(result)
    return jsonify({"message": "Password changed successfully"})
