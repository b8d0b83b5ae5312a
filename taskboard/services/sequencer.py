"""Position sequencer — keeps sibling positions dense and zero-based.

Lists are ordered within their board, cards within their list. For
every container the children's positions are exactly 0..n-1. Each
operation below keeps that true:

    insert       append (max + 1) or open a slot at p (siblings >= p: +1)
    move         rotate the sub-range between the old and new slot
    move_across  close the gap in the source, open a slot in the destination
    delete       remove the row, close the gap (siblings > p: -1)

Sibling shifts are single bulk UPDATEs with a range predicate. Nothing
here commits: callers wrap each operation in one transaction (see
SessionService.atomic). The container row is locked with
SELECT ... FOR UPDATE before positions are read, so concurrent writers
on the same container queue up behind each other. SQLite ignores the
lock clause; its database-level write lock gives the same ordering.

Requested positions are clamped into range instead of rejected:
inserting at 100 into a three-item container lands at 3.
"""

import logging

from sqlalchemy import func, select, update

from taskboard.models.kanban import Board, Card, TaskList

logger = logging.getLogger(__name__)

# kind -> (child model, container FK attribute, container model)
CONTAINERS = {
    "list": (TaskList, "board_id", Board),
    "card": (Card, "list_id", TaskList),
}


class PositionSequencer:
    """Ordering engine for one kind of child (lists or cards)."""

    def __init__(self, session, kind):
        if kind not in CONTAINERS:
            raise ValueError(
                f"Unknown sequence kind '{kind}'. Must be one of: {', '.join(CONTAINERS)}"
            )
        model, container_attr, container_model = CONTAINERS[kind]
        self.session = session
        self.kind = kind
        self.model = model
        self.container_attr = container_attr
        self.container_column = getattr(model, container_attr)
        self.container_model = container_model

    # ─── Reads ────────────────────────────────────────────────────

    def lock_container(self, container_id):
        """Lock the container row for the rest of the transaction.

        Returns False if the container does not exist.
        """
        found = self.session.execute(
            select(self.container_model.id)
            .where(self.container_model.id == container_id)
            .with_for_update()
        ).scalar_one_or_none()
        return found is not None

    def count(self, container_id):
        return self.session.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.container_column == container_id)
        ).scalar_one()

    def next_position(self, container_id):
        """Slot just past the last child, or 0 for an empty container."""
        max_pos = self.session.execute(
            select(func.max(self.model.position))
            .where(self.container_column == container_id)
        ).scalar()
        return 0 if max_pos is None else max_pos + 1

    def siblings(self, container_id):
        """Children of a container in position order (ties broken by id)."""
        return (
            self.session.execute(
                select(self.model)
                .where(self.container_column == container_id)
                .order_by(self.model.position, self.model.id)
            )
            .scalars()
            .all()
        )

    def is_dense(self, container_id):
        positions = [s.position for s in self.siblings(container_id)]
        return positions == list(range(len(positions)))

    # ─── Writes ───────────────────────────────────────────────────

    def _shift(self, container_id, delta, lower=None, upper=None):
        """Add `delta` to every sibling with lower <= position <= upper.

        One UPDATE statement, so siblings never pass through a
        colliding intermediate state visible to other transactions.
        """
        stmt = update(self.model).where(self.container_column == container_id)
        if lower is not None:
            stmt = stmt.where(self.model.position >= lower)
        if upper is not None:
            stmt = stmt.where(self.model.position <= upper)
        stmt = stmt.values(
            position=self.model.position + delta,
            updated_at=func.now(),
        ).execution_options(synchronize_session="fetch")
        shifted = self.session.execute(stmt).rowcount
        logger.debug(
            f"Shifted {shifted} {self.kind}(s) in container {container_id} "
            f"by {delta:+d} (range {lower}..{upper})"
        )
        return shifted

    @staticmethod
    def clamp(position, upper):
        return max(0, min(position, upper))

    def _refresh_slot(self, entity):
        # Re-read position and container under the lock; other attributes
        # may carry unflushed edits and are left alone.
        self.session.refresh(entity, ["position", self.container_attr])

    def insert(self, container_id, entity, requested_position=None):
        """Place a new entity into a container.

        Returns the flushed entity, or None if the container is missing.
        """
        if not self.lock_container(container_id):
            return None

        if requested_position is None:
            position = self.next_position(container_id)
        else:
            position = self.clamp(requested_position, self.count(container_id))
            self._shift(container_id, +1, lower=position)

        setattr(entity, self.container_attr, container_id)
        entity.position = position
        self.session.add(entity)
        self.session.flush()
        return entity

    def move(self, entity, new_position):
        """Reposition an entity among its current siblings.

        Moving later pulls the items in (old, new] back by one; moving
        earlier pushes the items in [new, old) forward by one. The
        entity's own slot is never part of the shifted range.
        """
        container_id = getattr(entity, self.container_attr)
        if not self.lock_container(container_id):
            return None
        self._refresh_slot(entity)

        old_position = entity.position
        new_position = self.clamp(new_position, self.count(container_id) - 1)
        if new_position == old_position:
            return entity

        if new_position > old_position:
            self._shift(
                container_id, -1, lower=old_position + 1, upper=new_position
            )
        else:
            self._shift(
                container_id, +1, lower=new_position, upper=old_position - 1
            )

        entity.position = new_position
        self.session.flush()
        return entity

    def move_across(self, entity, dest_container_id, new_position=None):
        """Move an entity into another container.

        Closes the gap in the source, then appends to the destination or
        opens a slot at `new_position`. Both containers are locked in id
        order so two opposite moves cannot deadlock.
        Returns None if either container is missing.
        """
        source_id = getattr(entity, self.container_attr)
        if source_id == dest_container_id:
            if new_position is None:
                return entity
            return self.move(entity, new_position)

        for container_id in sorted((source_id, dest_container_id)):
            if not self.lock_container(container_id):
                return None
        self._refresh_slot(entity)

        old_position = entity.position
        self._shift(source_id, -1, lower=old_position + 1)

        if new_position is None:
            position = self.next_position(dest_container_id)
        else:
            position = self.clamp(new_position, self.count(dest_container_id))
            self._shift(dest_container_id, +1, lower=position)

        setattr(entity, self.container_attr, dest_container_id)
        entity.position = position
        self.session.flush()
        return entity

    def delete(self, entity):
        """Delete an entity and close the gap it leaves.

        Descendants go with it through the ON DELETE CASCADE foreign keys.
        """
        container_id = getattr(entity, self.container_attr)
        if not self.lock_container(container_id):
            return False
        self._refresh_slot(entity)

        deleted_position = entity.position
        self.session.delete(entity)
        self.session.flush()
        self._shift(container_id, -1, lower=deleted_position + 1)
        return True

    def compact(self, container_id):
        """Renumber a container's children to 0..n-1, keeping their order.

        Repairs containers written before positions were clamped.
        Returns the number of rows whose position changed.
        """
        if not self.lock_container(container_id):
            return 0
        changed = 0
        for index, sibling in enumerate(self.siblings(container_id)):
            if sibling.position != index:
                sibling.position = index
                changed += 1
        self.session.flush()
        return changed
