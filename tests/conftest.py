"""Shared test fixtures for the Taskboard test suite.

Provides:
- app: Flask app configured for testing (in-memory SQLite, rate limits off)
- client: Flask test client
- db_session: clean database per test (tables created/dropped)
- users: an owner and an outsider, with bearer-token headers
- make: row factory that writes boards/lists/cards with explicit positions
"""

import pytest
from sqlalchemy import select
from werkzeug.security import generate_password_hash

from taskboard import create_app
from taskboard.extensions import db as _db
from taskboard.models.kanban import Board, Card, TaskList
from taskboard.models.user import User
from taskboard.services.auth_service import issue_token


@pytest.fixture(scope="session")
def app():
    """Create the Flask application configured for testing."""
    app = create_app("testing")
    yield app


@pytest.fixture(autouse=True)
def db_session(app):
    """Create all tables before each test, drop after.

    The app context is not held open during the test body: every test
    client request must push its own, because Flask-Login caches the
    loaded user on `g`. Tests that touch the database directly wrap
    that code in `with app.app_context():`.
    """
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def users(app):
    """Two users: `owner` owns the boards in most tests, `other` does not.

    Returns plain IDs and tokens so tests can use them outside the
    app context the rows were created in.
    """
    with app.app_context():
        owner = User(
            email="owner@example.com",
            password_hash=generate_password_hash("ownerpass"),
            full_name="Board Owner",
        )
        other = User(
            email="other@example.com",
            password_hash=generate_password_hash("otherpass"),
            full_name="Other User",
        )
        _db.session.add_all([owner, other])
        _db.session.commit()

        owner_token = issue_token(owner)
        other_token = issue_token(other)
        return {
            "owner_id": owner.id,
            "other_id": other.id,
            "owner_token": owner_token,
            "other_token": other_token,
            "owner_headers": auth_headers(owner_token),
            "other_headers": auth_headers(other_token),
        }


class Factory:
    """Writes rows directly, bypassing the sequencer, and reads them back."""

    def __init__(self, app):
        self.app = app

    def _add(self, obj):
        with self.app.app_context():
            _db.session.add(obj)
            _db.session.commit()
            return obj.id

    def board(self, owner_id, title="Board"):
        return self._add(Board(title=title, owner_id=owner_id))

    def list(self, board_id, title, position):
        return self._add(TaskList(title=title, board_id=board_id, position=position))

    def card(self, list_id, title, position, description=None):
        return self._add(Card(
            title=title,
            list_id=list_id,
            position=position,
            description=description,
        ))

    def lists(self, board_id, *titles):
        """Lists at positions 0..n-1, returned as {title: id}."""
        return {t: self.list(board_id, t, i) for i, t in enumerate(titles)}

    def cards(self, list_id, *titles):
        """Cards at positions 0..n-1, returned as {title: id}."""
        return {t: self.card(list_id, t, i) for i, t in enumerate(titles)}

    def list_order(self, board_id):
        """[(title, position), ...] of a board's lists, by position."""
        with self.app.app_context():
            rows = _db.session.execute(
                select(TaskList.title, TaskList.position)
                .where(TaskList.board_id == board_id)
                .order_by(TaskList.position, TaskList.id)
            ).all()
            return [tuple(r) for r in rows]

    def card_order(self, list_id):
        """[(title, position), ...] of a list's cards, by position."""
        with self.app.app_context():
            rows = _db.session.execute(
                select(Card.title, Card.position)
                .where(Card.list_id == list_id)
                .order_by(Card.position, Card.id)
            ).all()
            return [tuple(r) for r in rows]


@pytest.fixture
def make(app):
    return Factory(app)


@pytest.fixture
def board_id(make, users):
    """An empty board owned by `owner`."""
    return make.board(users["owner_id"], "Owner Board")
