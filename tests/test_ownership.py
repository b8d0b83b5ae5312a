"""Tests for OwnershipResolver and the service transaction boundary."""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from taskboard.extensions import db
from taskboard.models.activity import Activity
from taskboard.services import result as r
from taskboard.services.card_service import CardService
from taskboard.services.list_service import ListService
from taskboard.services.ownership import OwnershipResolver


@pytest.fixture
def chain(make, users, board_id):
    """board -> list -> card, all owned by `owner`."""
    list_id = make.list(board_id, "Todo", 0)
    card_id = make.card(list_id, "Write tests", 0)
    return {"board": board_id, "list": list_id, "card": card_id}


class TestResolveOwner:
    @pytest.mark.parametrize("kind", ["board", "list", "card"])
    def test_resolves_through_chain(self, app, users, chain, kind):
        with app.app_context():
            resolver = OwnershipResolver(db.session)
            assert resolver.resolve_owner(kind, chain[kind]) == users["owner_id"]

    @pytest.mark.parametrize("kind", ["board", "list", "card"])
    def test_missing_id_resolves_to_none(self, app, users, kind):
        with app.app_context():
            assert OwnershipResolver(db.session).resolve_owner(kind, 424242) is None

    def test_unknown_kind_rejected(self, app):
        with app.app_context():
            with pytest.raises(ValueError, match="Unknown container kind"):
                OwnershipResolver(db.session).resolve_owner("team", 1)


class TestAuthorize:
    def test_owner_is_allowed(self, app, users, chain):
        with app.app_context():
            result = OwnershipResolver(db.session).authorize(
                "card", chain["card"], users["owner_id"]
            )
        assert result.is_ok
        assert result.value == users["owner_id"]

    def test_other_user_is_forbidden(self, app, users, chain):
        with app.app_context():
            result = OwnershipResolver(db.session).authorize(
                "list", chain["list"], users["other_id"]
            )
        assert result.status == r.FORBIDDEN
        assert "containing this list" in result.message

    def test_missing_entity_is_not_found(self, app, users):
        with app.app_context():
            result = OwnershipResolver(db.session).authorize(
                "card", 424242, users["owner_id"]
            )
        assert result.status == r.NOT_FOUND
        assert result.message == "Card not found"


class TestServiceResults:
    """Expected failures come back as Results, checked in order:
    validation first, then ownership."""

    def test_validation_runs_before_ownership(self, app, users, chain):
        with app.app_context():
            result = ListService(db.session).update(
                chain["list"], users["other_id"], {"position": -1}
            )
        assert result.status == r.INVALID
        assert result.details[0]["field"] == "position"

    def test_create_on_foreign_board_is_forbidden(self, app, users, chain):
        with app.app_context():
            result = ListService(db.session).create(
                users["other_id"], {"title": "Sneaky", "boardId": chain["board"]}
            )
        assert result.status == r.FORBIDDEN

    def test_create_on_missing_list_is_not_found(self, app, users):
        with app.app_context():
            result = CardService(db.session).create(
                users["owner_id"], {"title": "Lost", "listId": 424242}
            )
        assert result.status == r.NOT_FOUND


class TestAtomic:
    def test_storage_failure_rolls_back_everything(self, app, users, chain, make, monkeypatch):
        """A failing write mid-operation leaves positions and activity untouched."""
        make.card(chain["list"], "Second", 1)

        def _boom(*args, **kwargs):
            raise SQLAlchemyError("disk full")

        with app.app_context():
            service = CardService(db.session)
            monkeypatch.setattr(service.activity, "log", _boom)
            with pytest.raises(SQLAlchemyError):
                service.update(chain["card"], users["owner_id"], {"position": 1})

        assert make.card_order(chain["list"]) == [("Write tests", 0), ("Second", 1)]
        with app.app_context():
            assert db.session.query(Activity).count() == 0
