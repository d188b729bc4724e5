import os
import random
import sys
import pytest

# Ensure the backend root (containing the `impostor` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from impostor import create_app, socketio
from impostor.services.rooms import RoomRegistry, RoomStateMachine
from impostor.words import WordSource


TEST_WORDS = ['Pizza', 'Lighthouse', 'Volcano']


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    LOG_LEVEL = 'DEBUG'
    CORS_ORIGINS = ['http://localhost:5173']
    SOCKETIO_NAMESPACE = '/'
    WORDS = TEST_WORDS
    WORDS_FILE = os.path.join(BACKEND_ROOT, 'words.json')
    MIN_PLAYERS = 3
    ROOM_CODE_MAX_ATTEMPTS = 1000
    DEFAULT_PLAYER_NAME = 'Anonymous'


class ScriptedRandom:
    """Random source that replays queued answers, then falls back to a seeded generator.

    ``codes`` feeds room code generation (one string per attempt), ``picks``
    feeds index draws (word first, then impostor, on each round start).
    """

    def __init__(self, seed=1234):
        self.codes = []
        self.picks = []
        self._fallback = random.Random(seed)

    def choices(self, population, weights=None, *, cum_weights=None, k=1):
        if self.codes:
            return list(self.codes.pop(0))
        return self._fallback.choices(population, weights, cum_weights=cum_weights, k=k)

    def randrange(self, start, stop=None, step=1):
        if self.picks:
            return self.picks.pop(0)
        return self._fallback.randrange(start, stop, step)


@pytest.fixture()
def rng():
    return ScriptedRandom()


@pytest.fixture()
def machine(rng):
    return RoomStateMachine(RoomRegistry(rng=rng), WordSource(TEST_WORDS), rng=rng)


@pytest.fixture()
def flask_app(rng):
    application = create_app(TestConfig, rng=rng)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(flask_app):
    """Factory for Socket.IO test clients; each call is a new player connection."""
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        # Drop the greeting so tests only see protocol events
        test_client.get_received()
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
