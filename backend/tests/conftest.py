import os
import sys
import pytest

# Ensure the backend root (containing the `colorlock` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from colorlock import create_app, db, socketio


PUZZLE_DATE = '2025-01-15'

# No two 4-adjacent cells share a color, so every region is a single cell.
STRIPES = [
    ['red', 'green', 'blue', 'yellow', 'purple'],
    ['green', 'blue', 'yellow', 'purple', 'orange'],
    ['blue', 'yellow', 'purple', 'orange', 'red'],
    ['yellow', 'purple', 'orange', 'red', 'green'],
    ['purple', 'orange', 'red', 'green', 'blue'],
]

# (0,1)->red, (1,0)->red, (1,1)->red, (0,2)->red
STRIPES_TRACE = [126, 90, 96, 132]


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    BCRYPT_LOG_ROUNDS = 4
    LEDGER_MAX_RETRIES = 3
    LEADERBOARD_SIZE = 10


@pytest.fixture()
def stripes():
    return [list(line) for line in STRIPES]


@pytest.fixture()
def puzzle_definition():
    from colorlock.services.puzzles import PuzzleDefinition
    return PuzzleDefinition(
        date=PUZZLE_DATE,
        initial_grid=[list(line) for line in STRIPES],
        target_color='red',
        actions=list(STRIPES_TRACE),
        optimal_move_count=4,
    )


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import colorlock.models  # noqa: F401
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
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def puzzle(flask_app, puzzle_definition):
    from colorlock.models import Puzzle
    row = Puzzle.from_definition(puzzle_definition)
    db.session.add(row)
    db.session.commit()
    return row


@pytest.fixture()
def make_user(flask_app):
    from colorlock.models import User

    def _make(username, password='password'):
        user = User(username=username)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user

    return _make


def login(client, username, password='password'):
    res = client.post('/login', json={'username': username, 'password': password})
    assert res.status_code == 200
    return res.get_json()['user']
