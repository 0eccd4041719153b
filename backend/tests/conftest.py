import os
import sys
import pytest

# Ensure the backend root (containing the `caro` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from caro import create_app, socketio
from caro.services.game import Session


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    ROOM_ID = 'test-room'
    TURN_TIME_SEC = 3
    BOARD_SIZE = 20
    WIN_LENGTH = 5
    GAME_PASSWORD = ''
    GAME_PASSWORD_HASH = None
    CORS_ORIGINS = ['*']
    ENABLE_CLOCK_IN_TESTS = False
    BCRYPT_LOG_ROUNDS = 4


class GatedTestConfig(TestConfig):
    GAME_PASSWORD = 'letmein'


class Recorder:
    """Stand-in emitter that keeps everything the session sends."""

    def __init__(self):
        self.events = []

    def __call__(self, event, payload=None, to=None):
        self.events.append((event, payload, to))

    def names(self):
        return [name for name, _, _ in self.events]

    def payloads(self, name):
        return [payload for event, payload, _ in self.events if event == name]

    def clear(self):
        self.events = []


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def gated_app():
    application = create_app(GatedTestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def emitted():
    return Recorder()


@pytest.fixture()
def session(emitted):
    # Countdown tasks are never spawned; tests tick the clock by hand
    return Session(emitted, board_size=20, win_length=5, turn_time=3, spawn=lambda *args: None)


@pytest.fixture()
def started_session(session, emitted):
    session.join('a')
    session.join('b')
    session.confirm_start('a')
    session.confirm_start('b')
    emitted.clear()
    return session
