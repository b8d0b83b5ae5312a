"""Auth service — password hashing, token issue/verify, registration.

Passwords use Werkzeug's salted hashes. Identity tokens are HS256 JWTs
signed with JWT_SECRET and carrying userId, email and fullName; the
login manager's request loader turns them back into a User.
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from taskboard.models.user import User
from taskboard.services.base import SessionService
from taskboard.services.result import Result
from taskboard import schemas

logger = logging.getLogger(__name__)


def hash_password(password):
    return generate_password_hash(password)


def verify_password(user, password):
    return check_password_hash(user.password_hash, password)


def issue_token(user):
    """Sign a JWT for `user` that expires after JWT_EXPIRES_HOURS."""
    now = datetime.now(timezone.utc)
    payload = {
        "userId": user.id,
        "email": user.email,
        "fullName": user.full_name,
        "iat": now,
        "exp": now + timedelta(hours=current_app.config["JWT_EXPIRES_HOURS"]),
    }
    return jwt.encode(
        payload,
        current_app.config["JWT_SECRET"],
        algorithm=current_app.config["JWT_ALGORITHM"],
    )


def decode_token(token):
    """Verify a JWT.

    Returns:
        tuple: (claims, error_message)
            - If valid: (dict, None)
            - If invalid: (None, "Token expired" | "Invalid token")
    """
    try:
        claims = jwt.decode(
            token,
            current_app.config["JWT_SECRET"],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            options={"require": ["exp", "userId"]},
        )
    except jwt.ExpiredSignatureError:
        return None, "Token expired"
    except jwt.InvalidTokenError:
        return None, "Invalid token"
    return claims, None


class AuthService(SessionService):
    """Registration, login and password changes."""

    def find_by_email(self, email):
        return self.session.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()

    def register(self, data):
        cleaned, errors = schemas.validate_register(data)
        if errors:
            return Result.invalid(errors)

        if self.find_by_email(cleaned["email"]) is not None:
            return Result.conflict("Email already exists")

        user = User(
            email=cleaned["email"],
            full_name=cleaned["full_name"],
            password_hash=hash_password(cleaned["password"]),
        )
        # Two requests can both pass the lookup above; the unique index
        # on email decides which one wins.
        try:
            with self.atomic("register"):
                self.session.add(user)
        except IntegrityError:
            return Result.conflict("Email already exists")
        logger.info(f"Registered user {user.id} <{user.email}>")
        return Result.ok(user)

    def login(self, data):
        cleaned, errors = schemas.validate_login(data)
        if errors:
            return Result.invalid(errors)

        user = self.find_by_email(cleaned["email"])
        # Same answer for unknown email and wrong password.
        if user is None or not user.is_active or not verify_password(user, cleaned["password"]):
            return Result.unauthorized("Invalid email or password")
        return Result.ok(user)

    def change_password(self, user, data):
        cleaned, errors = schemas.validate_change_password(data)
        if errors:
            return Result.invalid(errors)

        if not verify_password(user, cleaned["current_password"]):
            return Result.unauthorized("Current password is incorrect")

        with self.atomic("change password"):
            user.password_hash = hash_password(cleaned["new_password"])
        logger.info(f"User {user.id} changed password")
        return Result.ok(user)
