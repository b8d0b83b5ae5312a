"""Tests for the auth blueprint and bearer-token authentication."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from taskboard.extensions import db
from taskboard.models.user import User
from taskboard.services import auth_service, email_service


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture welcome emails instead of sending them."""
    sent = []
    monkeypatch.setattr(email_service, "send_welcome_email", lambda user: sent.append(user.email))
    return sent


def _register(client, **overrides):
    body = {"fullName": "Ada Lovelace", "email": "ada@example.com", "password": "engine1"}
    body.update(overrides)
    return client.post("/auth/register", json=body)


class TestRegister:
    def test_register_returns_user_and_token(self, client, sent_emails):
        resp = _register(client)
        assert resp.status_code == 201
        data = resp.get_json()
        assert data["user"]["email"] == "ada@example.com"
        assert data["user"]["fullName"] == "Ada Lovelace"
        assert "password" not in str(data["user"]).lower()
        assert data["token"]
        assert sent_emails == ["ada@example.com"]

    def test_email_is_normalized(self, client, sent_emails):
        resp = _register(client, email="  Ada@Example.COM ")
        assert resp.get_json()["user"]["email"] == "ada@example.com"

    def test_duplicate_email(self, client, sent_emails):
        _register(client)
        resp = _register(client, email="ADA@example.com")
        assert resp.status_code == 409
        assert resp.get_json()["message"] == "Email already exists"

    def test_concurrent_duplicate_is_a_conflict(self, app, client, sent_emails, monkeypatch):
        """Both requests miss the lookup; the unique index turns the loser into a 409."""
        monkeypatch.setattr(auth_service.AuthService, "find_by_email", lambda self, email: None)
        first = _register(client)
        second = _register(client)

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.get_json()["message"] == "Email already exists"
        with app.app_context():
            assert db.session.query(User).count() == 1

    @pytest.mark.parametrize("overrides, field", [
        ({"fullName": "A"}, "fullName"),
        ({"email": "not-an-email"}, "email"),
        ({"password": "12345"}, "password"),
        ({"password": "x" * 101}, "password"),
    ])
    def test_invalid_registration(self, client, sent_emails, overrides, field):
        resp = _register(client, **overrides)
        assert resp.status_code == 400
        assert [d["field"] for d in resp.get_json()["details"]] == [field]
        assert sent_emails == []


class TestLogin:
    def test_login_success(self, client, users):
        resp = client.post(
            "/auth/login", json={"email": "owner@example.com", "password": "ownerpass"}
        )
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["message"] == "Login successful"
        assert data["user"]["id"] == users["owner_id"]

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
        assert me.get_json()["user"]["email"] == "owner@example.com"

    @pytest.mark.parametrize("email, password", [
        ("owner@example.com", "wrongpass"),
        ("nobody@example.com", "ownerpass"),
    ])
    def test_bad_credentials_look_the_same(self, client, users, email, password):
        resp = client.post("/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Invalid email or password"


class TestTokens:
    def test_me_requires_token(self, client):
        resp = client.get("/auth/me")
        assert resp.status_code == 401
        assert resp.get_json() == {
            "error": "Unauthorized",
            "message": "No token provided",
        }

    def test_garbage_token(self, client):
        resp = client.get("/auth/me", headers={"Authorization": "Bearer nonsense"})
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Invalid token"

    def test_token_signed_with_other_secret(self, client, users):
        token = jwt.encode(
            {
                "userId": users["owner_id"],
                "exp": datetime.now(timezone.utc) + timedelta(hours=1),
            },
            "some-other-secret-that-is-32-chars-long",
            algorithm="HS256",
        )
        resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Invalid token"

    def test_expired_token(self, app, client, users):
        token = jwt.encode(
            {
                "userId": users["owner_id"],
                "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
            },
            app.config["JWT_SECRET"],
            algorithm="HS256",
        )
        resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Token expired"

    def test_token_for_deleted_user(self, app, client):
        token = jwt.encode(
            {"userId": 4242, "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            app.config["JWT_SECRET"],
            algorithm="HS256",
        )
        resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_decode_round_trip_claims(self, app, users):
        with app.app_context():
            claims, error = auth_service.decode_token(users["owner_token"])
        assert error is None
        assert claims["userId"] == users["owner_id"]
        assert claims["email"] == "owner@example.com"
        assert claims["fullName"] == "Board Owner"


class TestChangePassword:
    def test_change_then_login_with_new(self, client, users):
        resp = client.post(
            "/auth/change-password",
            json={"currentPassword": "ownerpass", "newPassword": "newpass1"},
            headers=users["owner_headers"],
        )
        assert resp.status_code == 200

        old = client.post(
            "/auth/login", json={"email": "owner@example.com", "password": "ownerpass"}
        )
        new = client.post(
            "/auth/login", json={"email": "owner@example.com", "password": "newpass1"}
        )
        assert old.status_code == 401
        assert new.status_code == 200

    def test_wrong_current_password(self, client, users):
        resp = client.post(
            "/auth/change-password",
            json={"currentPassword": "nope", "newPassword": "newpass1"},
            headers=users["owner_headers"],
        )
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Current password is incorrect"

    def test_short_new_password(self, client, users):
        resp = client.post(
            "/auth/change-password",
            json={"currentPassword": "ownerpass", "newPassword": "123"},
            headers=users["owner_headers"],
        )
        assert resp.status_code == 400


class TestWelcomeEmail:
    def test_skipped_without_mail_credentials(self, app, users):
        """TestConfig has no MAIL_USERNAME/PASSWORD, so nothing is sent."""
        with app.app_context():
            user = db.session.get(User, users["owner_id"])
            assert email_service.send_welcome_email(user) is False

    def test_delivers_text_and_html_parts(self, app, users, monkeypatch):
        sent = []

        class FakeSMTP:
            def __init__(self, host, port, timeout=None):
                sent.append(("connect", host, port))

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

            def starttls(self):
                pass

            def login(self, username, password):
                sent.append(("login", username))

            def send_message(self, msg):
                sent.append(("send", msg))

        monkeypatch.setattr(email_service.smtplib, "SMTP", FakeSMTP)
        monkeypatch.setitem(app.config, "MAIL_USERNAME", "bot@taskboard.test")
        monkeypatch.setitem(app.config, "MAIL_PASSWORD", "app-password")

        with app.app_context():
            user = db.session.get(User, users["owner_id"])
            delivered = email_service.send_email(
                to=user.email,
                subject="Hello",
                template="emails/welcome.html",
                context={"full_name": user.full_name, "email": user.email,
                         "app_base_url": "http://localhost:5000"},
                text_body="plain hello",
                background=False,
            )

        assert delivered is True
        assert sent[1] == ("login", "bot@taskboard.test")
        msg = sent[2][1]
        assert msg["To"] == "owner@example.com"
        assert msg["From"] == "Taskboard <bot@taskboard.test>"
        parts = [p.get_content_type() for p in msg.get_payload()]
        assert parts == ["text/plain", "text/html"]
        assert "Board Owner" in msg.get_payload()[1].get_payload(decode=True).decode()
