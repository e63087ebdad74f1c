from __future__ import annotations

import logging

from flask import request
from flask_socketio import SocketIO, emit

from ..game.errors import NameTakenError
from ..game.service import GameService
from ..utils.ip import get_client_ip


logger = logging.getLogger(__name__)

NAME_TAKEN_MESSAGE = "That name is already taken! Try a different one."


def register_socketio_handlers(socketio: SocketIO, game: GameService) -> None:
    def _broadcast_state() -> None:
        socketio.emit("game:state", game.snapshot())

    def _broadcast_tick(seconds: int) -> None:
        socketio.emit("timer:tick", seconds)

    game.on_tick = _broadcast_tick
    game.on_state_change = _broadcast_state

    @socketio.on("connect")
    def on_connect(auth=None):
        logger.info("Connected: %s from %s", request.sid, get_client_ip(request))
        # Late joiners render the current round before picking a name.
        emit("game:state", game.snapshot())

    @socketio.on("join")
    def on_join(name=None):
        try:
            player = game.join(request.sid, name)
        except NameTakenError as exc:
            logger.info("Rejected join for %r: name taken", exc.name)
            emit("join:error", NAME_TAKEN_MESSAGE)
            return

        if player is None:
            return

        emit("joined", {"name": player.name, "isAdmin": player.is_admin})
        _broadcast_state()

    @socketio.on("chat")
    def on_chat(text=None):
        if game.chat(request.sid, text):
            _broadcast_state()

    @socketio.on("admin:start")
    def on_admin_start(*_args):
        if game.start(request.sid):
            _broadcast_state()

    @socketio.on("admin:next")
    def on_admin_next(*_args):
        if game.next_round(request.sid):
            _broadcast_state()

    @socketio.on("admin:reveal")
    def on_admin_reveal(*_args):
        if game.reveal(request.sid):
            _broadcast_state()

    @socketio.on("admin:reset")
    def on_admin_reset(*_args):
        if game.reset(request.sid):
            _broadcast_state()

    @socketio.on("disconnect")
    def on_disconnect(*_args):
        player = game.disconnect(request.sid)
        logger.info("Disconnected: %s%s", request.sid, f" ({player.name})" if player else "")
        if player is not None:
            _broadcast_state()
