import os
import sys
import pytest

# Ensure the backend root (containing the `app` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from app import create_app, db, socketio
from app.services.games.sessions import clear_sessions


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MEMORY_SYMBOLS = ['A', 'B']
    FLIP_DELAY_MS = 700
    MATCH_DELAY_MS = 350
    TICK_MS = 1000
    SCORE_BASE = 1000
    SCORE_PENALTY = 25
    LEADERBOARD_ENABLED = True
    LEADERBOARD_LIMIT = 10
    PLAYER_NAME_MAX_LEN = 20
    SESSION_IDLE_TTL_SEC = 600


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import app.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()
    clear_sessions()
    from app.socketio_events import reset_socket_state
    reset_socket_state()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def scheduler(flask_app):
    return flask_app.extensions['memory_scheduler']


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
