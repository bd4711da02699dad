import os
import sys
import pytest

# Ensure the backend root (containing the `typerace` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from typerace import create_app, socketio

# 40 characters, so progress maths in tests stays readable
PASSAGE = 'The quick brown fox jumps over a lazy do'


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = ['http://localhost:5173']
    HOST = '127.0.0.1'
    PORT = 3001
    ROOM_DURATION_SEC = 60
    TEXTS_FILE = None
    TEXTS = [PASSAGE]
    SOCKETIO_NAMESPACE = '/'
    LOG_LEVEL = 'DEBUG'


class FakeClock:
    """Millisecond clock the tests move by hand."""

    def __init__(self, now=1_000_000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += int(seconds * 1000)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def clock(flask_app):
    fake = FakeClock()
    flask_app.extensions['typerace'].clock = fake
    return fake


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions['typerace'].registry


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield make
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
