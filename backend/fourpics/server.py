from __future__ import annotations

import os
import sys
from pathlib import Path

from flask import Flask, send_from_directory
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .game.questions import load_questions, parse_questions
from .game.service import GameService
from .routes.health import bp as health_bp
from .routes.state import bp as state_bp
from .realtime.handlers import register_socketio_handlers


def _default_async_mode() -> str:
    env_async_mode = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()
    if env_async_mode:
        return env_async_mode
    # Default choice:
    # - Windows: threading (eventlet has known compatibility issues on newer Python)
    # - Python >= 3.13: threading (safer default)
    # - Otherwise: eventlet
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"


def create_app(config_class=Config) -> tuple[Flask, SocketIO]:
    public_dir = Path(getattr(config_class, "PUBLIC_DIR", Config.PUBLIC_DIR))
    serve_public = public_dir.is_dir()

    app = Flask(
        __name__,
        static_folder=str(public_dir) if serve_public else None,
        static_url_path="" if serve_public else None,
    )
    app.config.from_object(config_class)

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=app.config.get("SOCKETIO_ASYNC_MODE") or _default_async_mode(),
    )

    questions = app.config.get("QUESTIONS")
    if questions is not None:
        rounds = parse_questions(questions)
    else:
        rounds = load_questions(app.config["QUESTIONS_PATH"])

    game = GameService(
        rounds,
        round_duration_sec=app.config.get("ROUND_DURATION_SEC", 60),
        admin_name=app.config.get("ADMIN_NAME", "ADMIN"),
        chat_history_limit=app.config.get("CHAT_HISTORY_LIMIT", 100),
        chat_log_cap=app.config.get("CHAT_LOG_CAP", 0),
        start_background_task=socketio.start_background_task,
        sleep=socketio.sleep,
    )
    app.extensions["fourpics"] = game

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(state_bp, url_prefix="/api")

    register_socketio_handlers(socketio, game)

    if serve_public:
        @app.get("/")
        def index():
            return send_from_directory(public_dir, "index.html")

    return app, socketio
