"""Lists blueprint — /lists/*

Lists are ordered within their board; create/update/delete renumber
siblings so positions stay 0..n-1. Every route needs a bearer token.

Route Map:
  GET    /lists/board/<board_id>  — Lists of a board, by position
  GET    /lists/<id>              — List
  POST   /lists                   — Create list (title, boardId, position?)
  PUT    /lists/<id>              — Rename and/or reposition
  DELETE /lists/<id>              — Delete list (cards cascade)
"""

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from taskboard.decorators import ownership_required
from taskboard.extensions import db
from taskboard.responses import result_error
from taskboard.serializers import list_dict
from taskboard.services.list_service import ListService

lists_bp = Blueprint("lists", __name__, url_prefix="/lists")


# ─── Reads ───────────────────────────────────────────────────────

@lists_bp.route("/board/<int:board_id>", methods=["GET"])
@ownership_required("board", "board_id")
def lists_for_board(board_id):
    lists = ListService(db.session).list_for_board(board_id)
    return jsonify({
        "lists": [list_dict(task_list) for task_list in lists],
        "count": len(lists),
    })


@lists_bp.route("/<int:list_id>", methods=["GET"])
@ownership_required("list", "list_id")
def get_list(list_id):
    return jsonify({"list": list_dict(ListService(db.session).get(list_id))})


# ─── Mutations ───────────────────────────────────────────────────

@lists_bp.route("", methods=["POST"])
@login_required
def create_list():
    result = ListService(db.session).create(
        current_user.id, request.get_json(silent=True)
    )
    if not result.is_ok:
        return result_error(result)
    return jsonify({
        "message": "List created successfully",
        "list": list_dict(result.value),
    }), 201


@lists_bp.route("/<int:list_id>", methods=["PUT"])
@login_required
def update_list(list_id):
    result = ListService(db.session).update(
        list_id, current_user.id, request.get_json(silent=True)
    )
    if not result.is_ok:
        return result_error(result)
    return jsonify({
        "message": "List updated successfully",
        "list": list_dict(result.value),
    })


@lists_bp.route("/<int:list_id>", methods=["DELETE"])
@login_required
def delete_list(list_id):
    result = ListService(db.session).delete(list_id, current_user.id)
    if not result.is_ok:
        return result_error(result)
    return jsonify({"message": "List deleted successfully"})
