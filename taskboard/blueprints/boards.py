"""Boards blueprint — /boards/*

Every route needs a bearer token. Boards belong to exactly one user;
another user's board answers 404.

Route Map:
  GET    /boards                     — Boards owned by the current user
  POST   /boards                     — Create board
  GET    /boards/<id>                — Board
  GET    /boards/<id>/full           — Board with lists and cards
  PUT    /boards/<id>                — Rename board
  DELETE /boards/<id>                — Delete board (cascades)
  GET    /boards/<id>/activities     — Recent activity, newest first
"""

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from taskboard.decorators import ownership_required
from taskboard.extensions import db
from taskboard.responses import result_error
from taskboard.serializers import activity_dict, board_dict, full_board_dict
from taskboard.services.board_service import BoardService

boards_bp = Blueprint("boards", __name__, url_prefix="/boards")

ACTIVITY_LIMIT_MAX = 200


@boards_bp.route("", methods=["GET"])
@login_required
def list_boards():
    boards = BoardService(db.session).list_for_owner(current_user.id)
    if not boards:
        return jsonify({"boards": [], "count": 0, "message": "No boards created yet"})
    return jsonify({
        "boards": [board_dict(b) for b in boards],
        "count": len(boards),
    })


@boards_bp.route("", methods=["POST"])
@login_required
def create_board():
    result = BoardService(db.session).create(
        current_user.id, request.get_json(silent=True)
    )
    if not result.is_ok:
        return result_error(result)
    return jsonify({
        "message": "Board created successfully",
        "board": board_dict(result.value),
    }), 201


@boards_bp.route("/<int:board_id>", methods=["GET"])
@login_required
def get_board(board_id):
    result = BoardService(db.session).get(board_id, current_user.id)
    if not result.is_ok:
        return result_error(result)
    return jsonify({"board": board_dict(result.value)})


@boards_bp.route("/<int:board_id>/full", methods=["GET"])
@login_required
def get_board_full(board_id):
    result = BoardService(db.session).get_full(board_id, current_user.id)
    if not result.is_ok:
        return result_error(result)
    return jsonify({"board": full_board_dict(result.value)})


@boards_bp.route("/<int:board_id>", methods=["PUT"])
@login_required
def update_board(board_id):
    result = BoardService(db.session).update(
        board_id, current_user.id, request.get_json(silent=True)
    )
    if not result.is_ok:
        return result_error(result)
    return jsonify({
        "message": "Board updated successfully",
        "board": board_dict(result.value),
    })


@boards_bp.route("/<int:board_id>", methods=["DELETE"])
@login_required
def delete_board(board_id):
    result = BoardService(db.session).delete(board_id, current_user.id)
    if not result.is_ok:
        return result_error(result)
    return jsonify({"message": "Board deleted successfully"})


@boards_bp.route("/<int:board_id>/activities", methods=["GET"])
@ownership_required("board", "board_id")
def board_activities(board_id):
    limit = request.args.get("limit", 50, type=int)
    limit = max(1, min(limit, ACTIVITY_LIMIT_MAX))
    activities = BoardService(db.session).activities(board_id, limit=limit)
    return jsonify({
        "activities": [activity_dict(a) for a in activities],
        "count": len(activities),
    })
