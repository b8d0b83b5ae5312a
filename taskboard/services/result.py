"""Tagged service results.

Services never raise for expected outcomes (bad input, missing rows,
someone else's board). They return a Result whose `status` tells the
blueprint which HTTP response to build:

    OK         -> 200 / 201 with `value`
    INVALID    -> 400 with `details` (list of {"field", "message"})
    NOT_FOUND  -> 404
    FORBIDDEN  -> 403
    UNAUTHORIZED -> 401 (bad credentials)
    CONFLICT   -> 409

Storage failures are not results; they propagate as SQLAlchemyError
after the service has rolled the session back.
"""

OK = "ok"
INVALID = "invalid"
NOT_FOUND = "not_found"
FORBIDDEN = "forbidden"
UNAUTHORIZED = "unauthorized"
CONFLICT = "conflict"


class Result:
    __slots__ = ("status", "value", "message", "details")

    def __init__(self, status, value=None, message=None, details=None):
        self.status = status
        self.value = value
        self.message = message
        self.details = details

    @classmethod
    def ok(cls, value=None):
        return cls(OK, value=value)

    @classmethod
    def invalid(cls, details, message="Invalid input data"):
        return cls(INVALID, message=message, details=details)

    @classmethod
    def not_found(cls, message="Not found"):
        return cls(NOT_FOUND, message=message)

    @classmethod
    def forbidden(cls, message="Access denied"):
        return cls(FORBIDDEN, message=message)

    @classmethod
    def unauthorized(cls, message):
        return cls(UNAUTHORIZED, message=message)

    @classmethod
    def conflict(cls, message):
        return cls(CONFLICT, message=message)

    @property
    def is_ok(self):
        return self.status == OK

    def __repr__(self):
        return f"<Result {self.status}>"
