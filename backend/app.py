import logging
import os

import sys

from pathlib import Path

from dotenv import load_dotenv


logger = logging.getLogger("fourpics")


def _log_banner(port: int, timer_sec: int, admin_name: str, lan_addresses: list[str]) -> None:
    logger.info("4 PICS 1 WORD classroom game")
    logger.info("  Local:    http://localhost:%d", port)
    for addr in lan_addresses:
        logger.info("  Network:  http://%s:%d", addr, port)
    logger.info("  Students connect to the Network URL")
    logger.info("  Admin: join as %s to control the game", admin_name)
    logger.info("  Timer: %s", f"{timer_sec}s per round" if timer_sec > 0 else "disabled")


def main() -> None:
    load_dotenv(Path(__file__).resolve().parents[1] / ".env")

    env_async_mode = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()
    if (
        not sys.platform.startswith("win")
        and sys.version_info < (3, 13)
        and env_async_mode in ("", "eventlet")
    ):
        import eventlet

        eventlet.monkey_patch()

    try:
        from backend.fourpics.server import create_app
        from backend.fourpics.utils.ip import lan_ipv4_addresses
    except ImportError:  # pragma: no cover
        from fourpics.server import create_app
        from fourpics.utils.ip import lan_ipv4_addresses

    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app, socketio = create_app()

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "3000"))
    debug = os.environ.get("FLASK_DEBUG", "0") == "1"

    allow_unsafe_werkzeug = os.environ.get("ALLOW_UNSAFE_WERKZEUG", "1") == "1"
    use_reloader = os.environ.get("FLASK_USE_RELOADER", "0") == "1"

    _log_banner(
        port,
        app.config["ROUND_DURATION_SEC"],
        app.config["ADMIN_NAME"],
        lan_ipv4_addresses(),
    )

    socketio.run(
        app,
        host=host,
        port=port,
        debug=debug,
        allow_unsafe_werkzeug=allow_unsafe_werkzeug,
        use_reloader=use_reloader,
    )


if __name__ == "__main__":
    main()
