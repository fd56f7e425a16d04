import os
import sys
import pytest

# Ensure the backend root (containing the `playerstats` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from playerstats import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BCRYPT_LOG_ROUNDS = 4
    TOKEN_TTL_SEC = 3600
    TOKEN_SALT = 'player-session'
    MIN_SECRET_LENGTH = 8
    MAX_NAME_LENGTH = 64
    LEADERBOARD_DEFAULT_LIMIT = 10
    LEADERBOARD_MAX_LIMIT = 100
    CORS_ORIGINS = []


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import playerstats.models  # noqa: F401
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


def register(client, name, secret='correct-horse', **extra):
    body = {'name': name, 'secret': secret}
    body.update(extra)
    return client.post('/accounts', json=body)


def auth_header(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture()
def make_player(client):
    """Register a player and return (player_json, token)."""
    def _make(name, secret='correct-horse'):
        res = register(client, name, secret)
        assert res.status_code == 201, res.get_json()
        data = res.get_json()
        return data['player'], data['token']
    return _make


class FlaskResponseAdapter:
    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code

    def json(self):
        data = self._response.get_json(silent=True)
        if data is None:
            raise ValueError('No JSON body')
        return data


class FlaskSessionAdapter:
    """Routes StatsClient's session.request calls into the Flask test client."""

    def __init__(self, test_client, base_url='http://testserver'):
        self.test_client = test_client
        self.base_url = base_url
        self.calls = []

    def request(self, method, url, headers=None, timeout=None, json=None, params=None):
        path = url[len(self.base_url):] if url.startswith(self.base_url) else url
        self.calls.append((method, path))
        response = self.test_client.open(
            path, method=method, headers=headers or {}, json=json, query_string=params
        )
        return FlaskResponseAdapter(response)


@pytest.fixture()
def http_session(client):
    return FlaskSessionAdapter(client)
