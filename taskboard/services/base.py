"""Base class for orchestration services.

Services are built per request with an explicit session handle
(`ListService(db.session)`), never by reaching for a module-level
global. `atomic()` turns one service call into one transaction.
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from taskboard.services.activity_service import ActivityService
from taskboard.services.ownership import OwnershipResolver

logger = logging.getLogger(__name__)


class SessionService:
    def __init__(self, session):
        self.session = session
        self.ownership = OwnershipResolver(session)
        self.activity = ActivityService(session)

    @contextmanager
    def atomic(self, action):
        """Commit everything done inside the block, or nothing.

        Any SQLAlchemyError rolls the session back and is re-raised so
        the app's 500 handler can answer.
        """
        try:
            yield
            self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"{action} failed, rolling back: {e}", exc_info=True)
            self.session.rollback()
            raise
