import os
import sys
import pytest

# Ensure the backend root (containing the `duel` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from duel import create_app, socketio
from duel.services import Channel


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ALLOWED_ORIGINS = ['http://localhost:3000']
    SOCKETIO_NAMESPACE = '/'
    SOCKETIO_ASYNC_MODE = 'threading'
    HOST = '127.0.0.1'
    PORT = 3001
    LOG_LEVEL = 'DEBUG'


class RecordingChannel(Channel):
    """Collects coordinator output instead of sending it anywhere."""

    def __init__(self):
        self.sent = []
        self.rooms = {}
        self.closed = []

    def send(self, channel, event, payload):
        self.sent.append((channel, event, payload))

    def join(self, channel, room_id):
        self.rooms.setdefault(room_id, set()).add(channel)

    def close(self, room_id):
        self.rooms.pop(room_id, None)
        self.closed.append(room_id)

    def to(self, channel):
        return [(event, payload) for sid, event, payload in self.sent if sid == channel]

    def reset(self):
        self.sent.clear()


def make_move(frm, to, after, **extra):
    return {'from': frm, 'to': to, 'after': after, **extra}


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
        application.extensions['duel.sessions'].clear()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _connect():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/',
        )
        # Flush the connect greeting
        test_client.get_received('/')
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected('/'):
                test_client.disconnect(namespace='/')
        except Exception:
            pass
