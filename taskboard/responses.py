"""Turn tagged service Results into JSON responses."""

from flask import jsonify

from taskboard.services import result as r

_STATUS = {
    r.INVALID: (400, "Validation Error"),
    r.UNAUTHORIZED: (401, "Unauthorized"),
    r.FORBIDDEN: (403, "Forbidden"),
    r.NOT_FOUND: (404, "Not Found"),
    r.CONFLICT: (409, "Conflict"),
}


def error_response(status_code, error, message, details=None):
    body = {"error": error, "message": message}
    if details is not None:
        body["details"] = details
    return jsonify(body), status_code


def result_error(result):
    """Response for a non-OK Result."""
    status_code, error = _STATUS[result.status]
    return error_response(status_code, error, result.message, result.details)
