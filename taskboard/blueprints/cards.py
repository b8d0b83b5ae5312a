"""Cards blueprint — /cards/*

Cards are ordered within their list. PUT with a different `listId`
moves the card to that list (both lists must be yours). Every route
needs a bearer token.

Route Map:
  GET    /cards/list/<list_id>  — Cards of a list, by position
  GET    /cards/<id>            — Card
  POST   /cards                 — Create card (title, listId, description?, position?)
  PUT    /cards/<id>            — Edit, reposition, or move to another list
  DELETE /cards/<id>            — Delete card
"""

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from taskboard.decorators import ownership_required
from taskboard.extensions import db
from taskboard.responses import result_error
from taskboard.serializers import card_dict
from taskboard.services.card_service import CardService

cards_bp = Blueprint("cards", __name__, url_prefix="/cards")


# ─── Reads ───────────────────────────────────────────────────────

@cards_bp.route("/list/<int:list_id>", methods=["GET"])
@ownership_required("list", "list_id")
def cards_for_list(list_id):
    cards = CardService(db.session).list_for_list(list_id)
    return jsonify({"cards": [card_dict(c) for c in cards], "count": len(cards)})


@cards_bp.route("/<int:card_id>", methods=["GET"])
@ownership_required("card", "card_id")
def get_card(card_id):
    return jsonify({"card": card_dict(CardService(db.session).get(card_id))})


# ─── Mutations ───────────────────────────────────────────────────

@cards_bp.route("", methods=["POST"])
@login_required
def create_card():
    result = CardService(db.session).create(
        current_user.id, request.get_json(silent=True)
    )
    if not result.is_ok:
        return result_error(result)
    return jsonify({
        "message": "Card created successfully",
        "card": card_dict(result.value),
    }), 201


@cards_bp.route("/<int:card_id>", methods=["PUT"])
@login_required
def update_card(card_id):
    result = CardService(db.session).update(
        card_id, current_user.id, request.get_json(silent=True)
    )
    if not result.is_ok:
        return result_error(result)
    return jsonify({
        "message": "Card updated successfully",
        "card": card_dict(result.value),
    })


@cards_bp.route("/<int:card_id>", methods=["DELETE"])
@login_required
def delete_card(card_id):
    result = CardService(db.session).delete(card_id, current_user.id)
    if not result.is_ok:
        return result_error(result)
    return jsonify({"message": "Card deleted successfully"})
