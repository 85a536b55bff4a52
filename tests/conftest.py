import os
import sys
import pytest

# Ensure the project root (containing `config` and `countdown_board`) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from countdown_board import create_app, socketio
from countdown_board.services.countdowns import board


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SNAPSHOT_PATH = 'data.json'
    SNAPSHOT_DEBOUNCE_MS = 0
    SWEEP_INTERVAL_SEC = 60
    EXPIRY_GRACE_SEC = 60
    CORS_ORIGINS = '*'
    DEFAULT_USER_NAME = 'Unknown user'
    DEFAULT_USER_COLOR = '#3b82f6'
    MAX_NAME_LENGTH = 32
    BOARD_TITLE = 'Test Board'
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def snapshot_path(tmp_path):
    return str(tmp_path / 'data.json')


@pytest.fixture()
def make_app(snapshot_path):
    def _make(**overrides):
        attrs = {'SNAPSHOT_PATH': snapshot_path}
        attrs.update(overrides)
        config_class = type('PerTestConfig', (TestConfig,), attrs)
        return create_app(config_class)
    return _make


@pytest.fixture()
def flask_app(make_app):
    application = make_app()
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
    )
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()


@pytest.fixture()
def frozen_clock(flask_app):
    """Pin the board clock to a settable epoch-millisecond value."""
    state = {'now': 1_700_000_000_000}
    board.clock = lambda: state['now']
    return state
