"""Activity model.

Append-only log of board mutations (list created, card moved, ...).
Rows are never updated. Deleting the board removes its history;
deleting a list or card only clears the reference (SET NULL).
"""

from taskboard.extensions import db


class Activity(db.Model):
    __tablename__ = "activities"
    __table_args__ = (
        db.Index("ix_activities_board_id_created_at", "board_id", "created_at"),
    )

    TYPES = [
        "board_created",
        "board_updated",
        "list_created",
        "list_updated",
        "list_moved",
        "list_deleted",
        "card_created",
        "card_updated",
        "card_moved",
        "card_deleted",
    ]

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(50), nullable=False)
    description = db.Column(db.Text, nullable=False)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    board_id = db.Column(
        db.Integer, db.ForeignKey("boards.id", ondelete="CASCADE"), nullable=False
    )
    list_id = db.Column(
        db.Integer, db.ForeignKey("lists.id", ondelete="SET NULL"), nullable=True
    )
    card_id = db.Column(
        db.Integer, db.ForeignKey("cards.id", ondelete="SET NULL"), nullable=True
    )
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )

    def __repr__(self):
        return f"<Activity {self.type}>"
