import os
import sys
import random
import pytest

# Ensure the project root (containing the `emoji_tapper` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from emoji_tapper import create_app, db, socketio
from emoji_tapper.services.games import ManualScheduler, MemoryHighScoreStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = '*'
    HIGH_SCORE_FILE = ''
    CLASSIC_LEVEL = 'Basic'
    PENGUIN_MAX_ROUNDS = 3


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import emoji_tapper.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


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
def store():
    return MemoryHighScoreStore()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def rng():
    return random.Random(1234)
