import logging
import os

try:
    from backend.fourpics.server import create_app
except ImportError:  # pragma: no cover
    from fourpics.server import create_app

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

app, socketio = create_app()
