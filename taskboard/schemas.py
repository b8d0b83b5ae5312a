"""Request body validation.

Each validate_* function takes the decoded JSON body and returns
`(cleaned, errors)`:

    cleaned  dict with snake_case keys, only for fields that were sent
    errors   list of {"field": ..., "message": ...}; empty when valid

Validation never touches the database. Free text is stripped of HTML
with bleach before length checks.
"""

import html
import re

import bleach

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

BOARD_TITLE_MAX = 100
LIST_TITLE_MAX = 100
CARD_TITLE_MAX = 200
DESCRIPTION_MAX = 2000


def _sanitize(text):
    """Strip all HTML tags from user input.

    bleach escapes what it leaves behind; the API returns JSON, so the
    entities are decoded again and "Q&A" stays "Q&A".
    """
    if text is None:
        return text
    return html.unescape(bleach.clean(text, tags=[], strip=True)).strip()


def _is_int(value):
    # bool is an int subclass; JSON true/false is not a position.
    return isinstance(value, int) and not isinstance(value, bool)


def _error(field, message):
    return {"field": field, "message": message}


def _body(data, errors):
    if not isinstance(data, dict):
        errors.append(_error("body", "Request body must be a JSON object"))
        return {}
    return data


def _text(data, key, field, errors, cleaned, max_len, required=True, label=None):
    label = label or field.replace("_", " ").capitalize()
    if key not in data or data[key] is None:
        if required:
            errors.append(_error(key, f"{label} is required"))
        return
    value = data[key]
    if not isinstance(value, str):
        errors.append(_error(key, f"{label} must be a string"))
        return
    value = _sanitize(value)
    if not value:
        errors.append(_error(key, f"{label} is required"))
    elif len(value) > max_len:
        errors.append(_error(key, f"{label} must be less than {max_len} characters"))
    else:
        cleaned[field] = value


def _id(data, key, field, errors, cleaned, required=True):
    if key not in data or data[key] is None:
        if required:
            errors.append(_error(key, f"{key} is required"))
        return
    value = data[key]
    if not _is_int(value) or value < 1:
        errors.append(_error(key, f"{key} must be a positive integer"))
    else:
        cleaned[field] = value


def _position(data, errors, cleaned):
    if "position" not in data or data["position"] is None:
        return
    value = data["position"]
    if not _is_int(value):
        errors.append(_error("position", "Position must be an integer"))
    elif value < 0:
        errors.append(_error("position", "Position must be greater than or equal to 0"))
    else:
        cleaned["position"] = value


# ─── Auth ─────────────────────────────────────────────────────

def validate_register(data):
    errors = []
    data = _body(data, errors)
    cleaned = {}

    full_name = data.get("fullName")
    if not isinstance(full_name, str) or len(full_name.strip()) < 2:
        errors.append(_error("fullName", "Full name must be at least 2 characters"))
    elif len(full_name.strip()) > 100:
        errors.append(_error("fullName", "Full name must be at most 100 characters"))
    else:
        cleaned["full_name"] = _sanitize(full_name)

    email = data.get("email")
    if not isinstance(email, str) or not EMAIL_RE.match(email.strip()):
        errors.append(_error("email", "Invalid email address"))
    else:
        cleaned["email"] = email.lower().strip()

    password = data.get("password")
    if not isinstance(password, str) or len(password) < 6:
        errors.append(_error("password", "Password must be at least 6 characters"))
    elif len(password) > 100:
        errors.append(_error("password", "Password must be at most 100 characters"))
    else:
        cleaned["password"] = password

    return cleaned, errors


def validate_login(data):
    errors = []
    data = _body(data, errors)
    cleaned = {}

    email = data.get("email")
    if not isinstance(email, str) or not EMAIL_RE.match(email.strip()):
        errors.append(_error("email", "Invalid email address"))
    else:
        cleaned["email"] = email.lower().strip()

    password = data.get("password")
    if not isinstance(password, str) or not password:
        errors.append(_error("password", "Password is required"))
    else:
        cleaned["password"] = password

    return cleaned, errors


def validate_change_password(data):
    errors = []
    data = _body(data, errors)
    cleaned = {}

    current = data.get("currentPassword")
    if not isinstance(current, str) or not current:
        errors.append(_error("currentPassword", "Current password is required"))
    else:
        cleaned["current_password"] = current

    new = data.get("newPassword")
    if not isinstance(new, str) or len(new) < 6:
        errors.append(_error("newPassword", "Password must be at least 6 characters"))
    elif len(new) > 100:
        errors.append(_error("newPassword", "Password must be at most 100 characters"))
    else:
        cleaned["new_password"] = new

    return cleaned, errors


# ─── Boards ───────────────────────────────────────────────────

def validate_board(data):
    errors = []
    data = _body(data, errors)
    cleaned = {}
    _text(data, "title", "title", errors, cleaned, BOARD_TITLE_MAX)
    return cleaned, errors


# ─── Lists ────────────────────────────────────────────────────

def validate_list_create(data):
    errors = []
    data = _body(data, errors)
    cleaned = {}
    _text(data, "title", "title", errors, cleaned, LIST_TITLE_MAX)
    _id(data, "boardId", "board_id", errors, cleaned)
    _position(data, errors, cleaned)
    return cleaned, errors


def validate_list_update(data):
    errors = []
    data = _body(data, errors)
    cleaned = {}
    _text(data, "title", "title", errors, cleaned, LIST_TITLE_MAX, required=False)
    _position(data, errors, cleaned)
    if not errors and not cleaned:
        errors.append(_error(
            "body", "At least one field (title or position) must be provided"
        ))
    return cleaned, errors


# ─── Cards ────────────────────────────────────────────────────

def _description(data, errors, cleaned, nullable):
    if "description" not in data:
        return
    value = data["description"]
    if value is None:
        if nullable:
            cleaned["description"] = None
        return
    if not isinstance(value, str):
        errors.append(_error("description", "Description must be a string"))
        return
    value = _sanitize(value)
    if len(value) > DESCRIPTION_MAX:
        errors.append(_error(
            "description",
            f"Description must be less than {DESCRIPTION_MAX} characters",
        ))
    else:
        cleaned["description"] = value


def validate_card_create(data):
    errors = []
    data = _body(data, errors)
    cleaned = {}
    _text(data, "title", "title", errors, cleaned, CARD_TITLE_MAX)
    _description(data, errors, cleaned, nullable=False)
    _id(data, "listId", "list_id", errors, cleaned)
    _position(data, errors, cleaned)
    return cleaned, errors


def validate_card_update(data):
    errors = []
    data = _body(data, errors)
    cleaned = {}
    _text(data, "title", "title", errors, cleaned, CARD_TITLE_MAX, required=False)
    _description(data, errors, cleaned, nullable=True)
    _id(data, "listId", "list_id", errors, cleaned, required=False)
    _position(data, errors, cleaned)
    if not errors and not cleaned:
        errors.append(_error(
            "body",
            "At least one field (title, description, position, or listId) must be provided",
        ))
    return cleaned, errors
