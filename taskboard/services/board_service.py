"""Board service — CRUD on boards plus the full board view.

Boards have no ordering of their own. Reading another user's board by
id answers 404, never 403, so board ids do not leak.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from taskboard.models.kanban import Board, TaskList
from taskboard.services.base import SessionService
from taskboard.services.result import Result
from taskboard import schemas

logger = logging.getLogger(__name__)

BOARD_NOT_FOUND = "Board not found or you do not have access"


class BoardService(SessionService):
    def _owned(self, board_id, user_id, full=False):
        stmt = select(Board).where(Board.id == board_id, Board.owner_id == user_id)
        if full:
            stmt = stmt.options(
                selectinload(Board.lists).selectinload(TaskList.cards)
            )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_owner(self, user_id):
        return (
            self.session.execute(
                select(Board)
                .where(Board.owner_id == user_id)
                .order_by(Board.created_at, Board.id)
            )
            .scalars()
            .all()
        )

    def get(self, board_id, user_id):
        board = self._owned(board_id, user_id)
        if board is None:
            return Result.not_found(BOARD_NOT_FOUND)
        return Result.ok(board)

    def get_full(self, board_id, user_id):
        """Board with its lists and their cards, each in position order."""
        board = self._owned(board_id, user_id, full=True)
        if board is None:
            return Result.not_found(BOARD_NOT_FOUND)
        return Result.ok(board)

    def create(self, user_id, data):
        cleaned, errors = schemas.validate_board(data)
        if errors:
            return Result.invalid(errors)

        board = Board(title=cleaned["title"], owner_id=user_id)
        with self.atomic("create board"):
            self.session.add(board)
            self.session.flush()
            self.activity.log(
                "board_created",
                f'Created board "{board.title}"',
                user_id=user_id,
                board_id=board.id,
            )

        logger.info(f"Board {board.id} created by user {user_id}")
        return Result.ok(board)

    def update(self, board_id, user_id, data):
        cleaned, errors = schemas.validate_board(data)
        if errors:
            return Result.invalid(errors)

        board = self._owned(board_id, user_id)
        if board is None:
            return Result.not_found(BOARD_NOT_FOUND)

        with self.atomic("update board"):
            board.title = cleaned["title"]
            self.activity.log(
                "board_updated",
                f'Renamed board to "{board.title}"',
                user_id=user_id,
                board_id=board.id,
            )
        return Result.ok(board)

    def delete(self, board_id, user_id):
        """Delete a board; its lists, cards and activity go with it."""
        board = self._owned(board_id, user_id)
        if board is None:
            return Result.not_found(BOARD_NOT_FOUND)

        with self.atomic("delete board"):
            self.session.delete(board)

        logger.info(f"Board {board_id} deleted by user {user_id}")
        return Result.ok()

    def activities(self, board_id, limit=50):
        """Most recent first. Callers check ownership (@ownership_required)."""
        return self.activity.for_board(board_id, limit=limit)
