"""Ownership resolver — walks card → list → board → owner.

Every board, list and card action is authorized against the owner of
the board at the top of the chain. One joined SELECT per lookup; no
writes.
"""

import logging

from sqlalchemy import select

from taskboard.models.kanban import Board, Card, TaskList
from taskboard.services.result import Result

logger = logging.getLogger(__name__)

KINDS = ("board", "list", "card")

_NOT_FOUND_MESSAGES = {
    "board": "Board not found",
    "list": "List not found",
    "card": "Card not found",
}

_FORBIDDEN_MESSAGES = {
    "board": "Access denied: You do not own this board",
    "list": "Access denied: You do not own the board containing this list",
    "card": "Access denied: You do not own the board containing this card",
}


class OwnershipResolver:
    """Resolve the owning user of any board, list or card id."""

    def __init__(self, session):
        self.session = session

    def _owner_query(self, kind, entity_id):
        if kind == "board":
            return select(Board.owner_id).where(Board.id == entity_id)
        if kind == "list":
            return (
                select(Board.owner_id)
                .join(TaskList, TaskList.board_id == Board.id)
                .where(TaskList.id == entity_id)
            )
        if kind == "card":
            return (
                select(Board.owner_id)
                .join(TaskList, TaskList.board_id == Board.id)
                .join(Card, Card.list_id == TaskList.id)
                .where(Card.id == entity_id)
            )
        raise ValueError(
            f"Unknown container kind '{kind}'. Must be one of: {', '.join(KINDS)}"
        )

    def resolve_owner(self, kind, entity_id):
        """Return the owner id of the board above `entity_id`, or None if
        the id does not exist at any level of the chain."""
        return self.session.execute(
            self._owner_query(kind, entity_id)
        ).scalar_one_or_none()

    def authorize(self, kind, entity_id, user_id):
        """Check that `user_id` owns the board above `entity_id`.

        Returns:
            Result.ok(owner_id), Result.not_found(...) or Result.forbidden(...)
        """
        owner_id = self.resolve_owner(kind, entity_id)
        if owner_id is None:
            return Result.not_found(_NOT_FOUND_MESSAGES[kind])
        if owner_id != user_id:
            logger.warning(
                f"User {user_id} denied access to {kind} {entity_id} "
                f"(owned by {owner_id})"
            )
            return Result.forbidden(_FORBIDDEN_MESSAGES[kind])
        return Result.ok(owner_id)
