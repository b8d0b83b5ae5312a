"""Card service — cards within a list, and moves between lists.

A card update carrying a `listId` different from the card's current
list is a cross-list move. Both the source and the destination list
must belong to the acting user; the destination is checked before any
row is touched, so a refused move changes nothing in either list.
"""

import logging

from taskboard.models.kanban import Card, TaskList
from taskboard.services.base import SessionService
from taskboard.services.result import Result
from taskboard.services.sequencer import PositionSequencer
from taskboard import schemas

logger = logging.getLogger(__name__)


class CardService(SessionService):
    def __init__(self, session):
        super().__init__(session)
        self.sequencer = PositionSequencer(session, "card")

    # Reads assume the route already passed @ownership_required.

    def list_for_list(self, list_id):
        """All cards of a list, in position order."""
        return self.sequencer.siblings(list_id)

    def get(self, card_id):
        return self.session.get(Card, card_id)

    def create(self, user_id, data):
        """Create a card at the end of a list, or at `position`."""
        cleaned, errors = schemas.validate_card_create(data)
        if errors:
            return Result.invalid(errors)

        list_id = cleaned["list_id"]
        auth = self.ownership.authorize("list", list_id, user_id)
        if not auth.is_ok:
            return auth

        card = Card(
            title=cleaned["title"],
            description=cleaned.get("description"),
        )
        with self.atomic("create card"):
            placed = self.sequencer.insert(list_id, card, cleaned.get("position"))
            if placed is not None:
                task_list = self.session.get(TaskList, list_id)
                self.activity.log(
                    "card_created",
                    f'Created card "{card.title}"',
                    user_id=user_id,
                    board_id=task_list.board_id,
                    list_id=list_id,
                    card_id=card.id,
                )
        if placed is None:
            return Result.not_found("List not found")

        logger.info(f"Card {card.id} created in list {list_id} at {card.position}")
        return Result.ok(card)

    def update(self, card_id, user_id, data):
        """Edit a card's fields, reposition it, or move it to another list.

        `position` without a new `listId` reorders within the current
        list. A new `listId` moves the card there, at `position` or at
        the end when `position` is omitted.
        """
        cleaned, errors = schemas.validate_card_update(data)
        if errors:
            return Result.invalid(errors)

        auth = self.ownership.authorize("card", card_id, user_id)
        if not auth.is_ok:
            return auth

        card = self.session.get(Card, card_id)
        if card is None:
            return Result.not_found("Card not found")

        dest_list_id = cleaned.get("list_id")
        crossing = dest_list_id is not None and dest_list_id != card.list_id
        if crossing:
            dest_auth = self.ownership.authorize("list", dest_list_id, user_id)
            if not dest_auth.is_ok:
                return dest_auth

        source_list_id = card.list_id
        with self.atomic("update card"):
            placed = card
            if crossing:
                placed = self.sequencer.move_across(
                    card, dest_list_id, cleaned.get("position")
                )
            elif "position" in cleaned:
                placed = self.sequencer.move(card, cleaned["position"])

            # A list deleted since the ownership check fails the lock;
            # nothing has been written yet.
            if placed is not None:
                if "title" in cleaned:
                    card.title = cleaned["title"]
                if "description" in cleaned:
                    card.description = cleaned["description"]

                task_list = self.session.get(TaskList, card.list_id)
                if crossing:
                    activity_type = "card_moved"
                    description = f'Moved card "{card.title}" to list "{task_list.title}"'
                else:
                    activity_type = "card_updated"
                    description = f'Updated card "{card.title}"'
                self.activity.log(
                    activity_type,
                    description,
                    user_id=user_id,
                    board_id=task_list.board_id,
                    list_id=task_list.id,
                    card_id=card.id,
                )
        if placed is None:
            return Result.not_found("List not found")

        if crossing:
            logger.info(
                f"Card {card.id} moved from list {source_list_id} "
                f"to list {dest_list_id} at {card.position}"
            )
        return Result.ok(card)

    def delete(self, card_id, user_id):
        """Delete a card and close the gap in its list."""
        auth = self.ownership.authorize("card", card_id, user_id)
        if not auth.is_ok:
            return auth

        card = self.session.get(Card, card_id)
        if card is None:
            return Result.not_found("Card not found")

        task_list = self.session.get(TaskList, card.list_id)
        board_id = task_list.board_id
        list_id = task_list.id
        title = card.title
        with self.atomic("delete card"):
            self.sequencer.delete(card)
            self.activity.log(
                "card_deleted",
                f'Deleted card "{title}"',
                user_id=user_id,
                board_id=board_id,
                list_id=list_id,
            )

        logger.info(f"Card {card_id} deleted from list {list_id}")
        return Result.ok()
