"""JSON shapes returned by the API (camelCase keys, ISO timestamps)."""


def _iso(value):
    return value.isoformat() if value else None


def user_dict(user):
    return {
        "id": user.id,
        "fullName": user.full_name,
        "email": user.email,
        "createdAt": _iso(user.created_at),
    }


def board_dict(board):
    return {
        "id": board.id,
        "title": board.title,
        "ownerId": board.owner_id,
        "createdAt": _iso(board.created_at),
        "updatedAt": _iso(board.updated_at),
    }


def list_dict(task_list):
    return {
        "id": task_list.id,
        "title": task_list.title,
        "position": task_list.position,
        "boardId": task_list.board_id,
        "createdAt": _iso(task_list.created_at),
        "updatedAt": _iso(task_list.updated_at),
    }


def card_dict(card):
    return {
        "id": card.id,
        "title": card.title,
        "description": card.description,
        "position": card.position,
        "listId": card.list_id,
        "createdAt": _iso(card.created_at),
        "updatedAt": _iso(card.updated_at),
    }


def full_board_dict(board):
    """Board with nested lists and cards, both already position-ordered."""
    data = board_dict(board)
    data["lists"] = []
    for task_list in board.lists:
        list_data = list_dict(task_list)
        list_data["cards"] = [card_dict(c) for c in task_list.cards]
        data["lists"].append(list_data)
    return data


def activity_dict(activity):
    return {
        "id": activity.id,
        "type": activity.type,
        "description": activity.description,
        "userId": activity.user_id,
        "boardId": activity.board_id,
        "listId": activity.list_id,
        "cardId": activity.card_id,
        "createdAt": _iso(activity.created_at),
    }
