"""Tests for the boards blueprint — /boards/*"""

from taskboard.extensions import db
from taskboard.models.kanban import Card, TaskList


class TestBoardCrud:
    def test_empty_board_list(self, client, users):
        resp = client.get("/boards", headers=users["owner_headers"])
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["count"] == 0
        assert data["message"] == "No boards created yet"

    def test_create_and_list(self, client, users):
        resp = client.post(
            "/boards", json={"title": "Roadmap"}, headers=users["owner_headers"]
        )
        assert resp.status_code == 201
        board = resp.get_json()["board"]
        assert board["title"] == "Roadmap"
        assert board["ownerId"] == users["owner_id"]

        listing = client.get("/boards", headers=users["owner_headers"]).get_json()
        assert [b["title"] for b in listing["boards"]] == ["Roadmap"]

    def test_only_own_boards_listed(self, client, users, make):
        make.board(users["owner_id"], "Mine")
        make.board(users["other_id"], "Theirs")
        data = client.get("/boards", headers=users["other_headers"]).get_json()
        assert [b["title"] for b in data["boards"]] == ["Theirs"]

    def test_create_requires_title(self, client, users):
        resp = client.post("/boards", json={"title": "   "}, headers=users["owner_headers"])
        assert resp.status_code == 400
        assert resp.get_json()["details"] == [
            {"field": "title", "message": "Title is required"}
        ]

    def test_rename(self, client, users, board_id):
        resp = client.put(
            f"/boards/{board_id}", json={"title": "Renamed"}, headers=users["owner_headers"]
        )
        assert resp.status_code == 200
        assert resp.get_json()["board"]["title"] == "Renamed"

    def test_other_users_board_is_not_found(self, client, users, board_id):
        """Another user's board looks exactly like a missing one."""
        for resp in (
            client.get(f"/boards/{board_id}", headers=users["other_headers"]),
            client.put(
                f"/boards/{board_id}", json={"title": "x"}, headers=users["other_headers"]
            ),
            client.delete(f"/boards/{board_id}", headers=users["other_headers"]),
        ):
            assert resp.status_code == 404
            assert resp.get_json()["message"] == "Board not found or you do not have access"


class TestFullBoard:
    def test_nested_lists_and_cards_in_position_order(self, client, users, board_id, make):
        done = make.list(board_id, "Done", 1)
        todo = make.list(board_id, "Todo", 0)
        make.card(todo, "second", 1)
        make.card(todo, "first", 0)
        make.card(done, "shipped", 0)

        resp = client.get(f"/boards/{board_id}/full", headers=users["owner_headers"])

        assert resp.status_code == 200
        board = resp.get_json()["board"]
        assert [lst["title"] for lst in board["lists"]] == ["Todo", "Done"]
        assert [c["title"] for c in board["lists"][0]["cards"]] == ["first", "second"]
        assert [c["title"] for c in board["lists"][1]["cards"]] == ["shipped"]

    def test_full_board_of_other_user(self, client, users, board_id):
        resp = client.get(f"/boards/{board_id}/full", headers=users["other_headers"])
        assert resp.status_code == 404


class TestDeleteBoard:
    def test_delete_cascades(self, app, client, users, board_id, make):
        list_id = make.list(board_id, "Todo", 0)
        make.card(list_id, "a", 0)

        resp = client.delete(f"/boards/{board_id}", headers=users["owner_headers"])

        assert resp.status_code == 200
        with app.app_context():
            assert db.session.query(TaskList).count() == 0
            assert db.session.query(Card).count() == 0


class TestActivities:
    def test_newest_first(self, client, users):
        created = client.post(
            "/boards", json={"title": "Log"}, headers=users["owner_headers"]
        ).get_json()["board"]
        client.post(
            "/lists",
            json={"title": "Todo", "boardId": created["id"]},
            headers=users["owner_headers"],
        )

        resp = client.get(
            f"/boards/{created['id']}/activities", headers=users["owner_headers"]
        )

        assert resp.status_code == 200
        data = resp.get_json()
        assert data["count"] == 2
        assert [a["type"] for a in data["activities"]] == ["list_created", "board_created"]
        assert data["activities"][0]["userId"] == users["owner_id"]

    def test_limit(self, client, users, board_id):
        for i in range(3):
            client.put(
                f"/boards/{board_id}", json={"title": f"v{i}"}, headers=users["owner_headers"]
            )
        resp = client.get(
            f"/boards/{board_id}/activities?limit=2", headers=users["owner_headers"]
        )
        assert resp.get_json()["count"] == 2

    def test_other_user_forbidden(self, client, users, board_id):
        resp = client.get(f"/boards/{board_id}/activities", headers=users["other_headers"])
        assert resp.status_code == 403
