from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("state", __name__)


@bp.get("/state")
def get_state():
    game = current_app.extensions["fourpics"]
    return jsonify(game.snapshot())
