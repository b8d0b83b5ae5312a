"""
Custom route decorators for access control.

- ownership_required: ensures the bearer-token user owns the board that
  the board/list/card id in the URL belongs to (404 if the id does not
  exist, 403 if someone else owns it).
"""

from functools import wraps

from flask_login import current_user, login_required

from taskboard.extensions import db
from taskboard.responses import result_error
from taskboard.services.ownership import OwnershipResolver


def ownership_required(kind, view_arg):
    """Require login + ownership of the `kind` entity named by `view_arg`.

    Usage:
        @lists_bp.route("/<int:list_id>")
        @ownership_required("list", "list_id")
        def get_list(list_id): ...
    """

    def decorator(f):
        @wraps(f)
        @login_required
        def decorated(*args, **kwargs):
            resolver = OwnershipResolver(db.session)
            auth = resolver.authorize(kind, kwargs[view_arg], current_user.id)
            if not auth.is_ok:
                return result_error(auth)
            return f(*args, **kwargs)

        return decorated

    return decorator
