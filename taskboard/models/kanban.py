"""Kanban board models.

- Board: owned by exactly one user; holds lists.
- TaskList: a lane on a board; holds cards.
- Card: a task inside a list.

Lists and cards carry a `position` that is dense and zero-based among
their siblings. PositionSequencer is the only code that writes it.
Parent deletes cascade at the database level (ON DELETE CASCADE).
"""

from taskboard.extensions import db


class Board(db.Model):
    __tablename__ = "boards"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    owner_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    # --- Relationships ---
    owner = db.relationship("User", back_populates="boards")
    lists = db.relationship(
        "TaskList",
        back_populates="board",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TaskList.position",
    )

    def __repr__(self):
        return f"<Board {self.title}>"


class TaskList(db.Model):
    __tablename__ = "lists"
    __table_args__ = (
        db.Index("ix_lists_board_id_position", "board_id", "position"),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)
    board_id = db.Column(
        db.Integer,
        db.ForeignKey("boards.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    # --- Relationships ---
    board = db.relationship("Board", back_populates="lists")
    cards = db.relationship(
        "Card",
        back_populates="task_list",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Card.position",
    )

    def __repr__(self):
        return f"<TaskList {self.title} @{self.position}>"


class Card(db.Model):
    __tablename__ = "cards"
    __table_args__ = (
        db.Index("ix_cards_list_id_position", "list_id", "position"),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(500), nullable=False)
    description = db.Column(db.Text, nullable=True)
    position = db.Column(db.Integer, nullable=False, default=0)
    list_id = db.Column(
        db.Integer,
        db.ForeignKey("lists.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    task_list = db.relationship("TaskList", back_populates="cards")

    def __repr__(self):
        return f"<Card {self.title[:40]} @{self.position}>"
