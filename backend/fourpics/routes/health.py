from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    game = current_app.extensions["fourpics"]
    return jsonify({"ok": True, "totalRounds": game.total_rounds})
