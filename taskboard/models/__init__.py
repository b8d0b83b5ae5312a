# Models package — import all models here so Alembic can discover them.

from taskboard.models.user import User  # noqa: F401
from taskboard.models.kanban import Board, TaskList, Card  # noqa: F401
from taskboard.models.activity import Activity  # noqa: F401
