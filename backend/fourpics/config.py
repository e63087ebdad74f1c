import os
from pathlib import Path


_PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Content
    QUESTIONS_PATH = os.environ.get("QUESTIONS_PATH", str(_PROJECT_ROOT / "questions.json"))
    PUBLIC_DIR = os.environ.get("PUBLIC_DIR", str(_PROJECT_ROOT / "public"))

    # Game
    ROUND_DURATION_SEC = max(0, int(os.environ.get("ROUND_DURATION_SEC", "60")))
    ADMIN_NAME = os.environ.get("ADMIN_NAME", "ADMIN")
    CHAT_HISTORY_LIMIT = int(os.environ.get("CHAT_HISTORY_LIMIT", "100"))
    CHAT_LOG_CAP = int(os.environ.get("CHAT_LOG_CAP", "1000"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
