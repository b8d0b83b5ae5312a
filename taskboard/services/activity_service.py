"""Activity service — append-only board history.

Entries are added inside the caller's transaction, so a rolled-back
mutation leaves no activity behind.
"""

from sqlalchemy import select

from taskboard.models.activity import Activity


class ActivityService:
    def __init__(self, session):
        self.session = session

    def log(self, type, description, user_id, board_id, list_id=None, card_id=None):
        if type not in Activity.TYPES:
            raise ValueError(
                f"Invalid activity type '{type}'. Must be one of: {', '.join(Activity.TYPES)}"
            )
        entry = Activity(
            type=type,
            description=description,
            user_id=user_id,
            board_id=board_id,
            list_id=list_id,
            card_id=card_id,
        )
        self.session.add(entry)
        return entry

    def for_board(self, board_id, limit=50):
        """Most recent first."""
        return (
            self.session.execute(
                select(Activity)
                .where(Activity.board_id == board_id)
                .order_by(Activity.created_at.desc(), Activity.id.desc())
                .limit(limit)
            )
            .scalars()
            .all()
        )
