import os
import sys

import pytest

# Ensure the backend root (containing the `fourpics` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from fourpics.game.service import GameService
from fourpics.game.questions import parse_questions
from fourpics.server import create_app


QUESTIONS = [
    {"word": "Apple", "images": ["a1.jpg", "a2.jpg", "a3.jpg", "a4.jpg"]},
    {"word": "River", "images": ["r1.jpg", "r2.jpg", "r3.jpg", "r4.jpg"]},
    {"word": "Cloud", "images": ["c1.jpg", "c2.jpg", "c3.jpg", "c4.jpg"]},
]


class ManualScheduler:
    """Collects timer tasks instead of running them; tests run them on demand."""

    def __init__(self):
        self.tasks = []

    def start_background_task(self, target, *args):
        self.tasks.append((target, args))

    def sleep(self, seconds):
        pass

    def run_all(self):
        tasks, self.tasks = self.tasks, []
        for target, args in tasks:
            target(*args)


class TestConfig:
    __test__ = False
    TESTING = True
    SECRET_KEY = 'test-secret'
    CORS_ORIGINS = '*'
    TRUST_PROXY_HEADERS = False
    SOCKETIO_ASYNC_MODE = 'threading'
    QUESTIONS = QUESTIONS
    PUBLIC_DIR = os.path.join(CURRENT_DIR, 'no-such-dir')
    ROUND_DURATION_SEC = 0
    ADMIN_NAME = 'ADMIN'
    CHAT_HISTORY_LIMIT = 100
    CHAT_LOG_CAP = 0
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def rounds():
    return parse_questions(QUESTIONS)


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def make_game(rounds, scheduler):
    def _make(round_duration_sec=60, **kwargs):
        return GameService(
            rounds,
            round_duration_sec=round_duration_sec,
            start_background_task=scheduler.start_background_task,
            sleep=scheduler.sleep,
            **kwargs,
        )

    return _make


@pytest.fixture()
def game(make_game):
    return make_game()


@pytest.fixture()
def admin_game(game):
    """A game with an admin (sid "admin") and three guessers g1..g3 joined."""
    game.join('admin', 'ADMIN')
    for i in (1, 2, 3):
        game.join(f'g{i}', f'Guesser{i}')
    return game


@pytest.fixture()
def app_and_socketio():
    return create_app(TestConfig)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def socketio(app_and_socketio):
    return app_and_socketio[1]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(flask_app, socketio):
    clients = []

    def _connect():
        c = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(c)
        return c

    yield _connect

    for c in clients:
        if c.is_connected():
            c.disconnect()
