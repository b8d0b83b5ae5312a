"""List service — lists within a board.

Order of work for every mutation:
  1. validate the body (400, no database access)
  2. resolve ownership of the board above the list (404 / 403)
  3. apply the position change + field edits + activity entry in one
     transaction

Returns tagged Results; see services/result.py.
"""

import logging

from taskboard.models.kanban import TaskList
from taskboard.services.base import SessionService
from taskboard.services.result import Result
from taskboard.services.sequencer import PositionSequencer
from taskboard import schemas

logger = logging.getLogger(__name__)


class ListService(SessionService):
    def __init__(self, session):
        super().__init__(session)
        self.sequencer = PositionSequencer(session, "list")

    # Reads assume the route already passed @ownership_required.

    def list_for_board(self, board_id):
        """All lists of a board, in position order."""
        return self.sequencer.siblings(board_id)

    def get(self, list_id):
        return self.session.get(TaskList, list_id)

    def create(self, user_id, data):
        """Create a list at the end of the board, or at `position`."""
        cleaned, errors = schemas.validate_list_create(data)
        if errors:
            return Result.invalid(errors)

        board_id = cleaned["board_id"]
        auth = self.ownership.authorize("board", board_id, user_id)
        if not auth.is_ok:
            return auth

        task_list = TaskList(title=cleaned["title"])
        with self.atomic("create list"):
            placed = self.sequencer.insert(
                board_id, task_list, cleaned.get("position")
            )
            if placed is not None:
                self.activity.log(
                    "list_created",
                    f'Created list "{task_list.title}"',
                    user_id=user_id,
                    board_id=board_id,
                    list_id=task_list.id,
                )
        if placed is None:
            return Result.not_found("Board not found")

        logger.info(
            f"List {task_list.id} created on board {board_id} at {task_list.position}"
        )
        return Result.ok(task_list)

    def update(self, list_id, user_id, data):
        """Rename and/or reposition a list within its board."""
        cleaned, errors = schemas.validate_list_update(data)
        if errors:
            return Result.invalid(errors)

        auth = self.ownership.authorize("list", list_id, user_id)
        if not auth.is_ok:
            return auth

        task_list = self.session.get(TaskList, list_id)
        if task_list is None:
            return Result.not_found("List not found")

        with self.atomic("update list"):
            moved = False
            if "position" in cleaned:
                old_position = task_list.position
                self.sequencer.move(task_list, cleaned["position"])
                moved = task_list.position != old_position
            if "title" in cleaned:
                task_list.title = cleaned["title"]
            self.activity.log(
                "list_moved" if moved else "list_updated",
                (
                    f'Moved list "{task_list.title}" to position {task_list.position}'
                    if moved
                    else f'Updated list "{task_list.title}"'
                ),
                user_id=user_id,
                board_id=task_list.board_id,
                list_id=task_list.id,
            )

        return Result.ok(task_list)

    def delete(self, list_id, user_id):
        """Delete a list (and its cards) and close the gap on the board."""
        auth = self.ownership.authorize("list", list_id, user_id)
        if not auth.is_ok:
            return auth

        task_list = self.session.get(TaskList, list_id)
        if task_list is None:
            return Result.not_found("List not found")

        board_id = task_list.board_id
        title = task_list.title
        with self.atomic("delete list"):
            self.sequencer.delete(task_list)
            self.activity.log(
                "list_deleted",
                f'Deleted list "{title}"',
                user_id=user_id,
                board_id=board_id,
            )

        logger.info(f"List {list_id} deleted from board {board_id}")
        return Result.ok()
