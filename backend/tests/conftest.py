import os
import sys
import pytest

# Ensure the backend root (containing the `trivia` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from trivia import create_app, socketio
from trivia.questions import load_question_bank
from trivia.services.sessions import AdvanceScheduler, SessionEngine, SessionRegistry


HOST_PASSWORD = 'letmein'


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    HOST_PASSWORD = HOST_PASSWORD
    QUESTION_DURATION_SEC = 10
    GAME_START_DELAY_SEC = 0
    SESSION_ID_LENGTH = 8
    QUESTION_BANK_PATH = None
    CORS_ORIGINS = ['*']


class FakeClock:
    """Manually driven replacement for time.time()."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class RecordingBroadcast:
    def __init__(self):
        self.events = []

    def __call__(self, event, payload, session_id):
        self.events.append((event, payload, session_id))

    def named(self, name, session_id=None):
        return [p for (e, p, sid) in self.events if e == name and (session_id is None or sid == session_id)]


class FakeSocketIO:
    """Collects background tasks instead of running them so tests decide when timers fire."""

    def __init__(self):
        self.tasks = []
        self.slept = []

    def start_background_task(self, target, *args, **kwargs):
        self.tasks.append((target, args, kwargs))

    def sleep(self, seconds):
        self.slept.append(seconds)

    def run_pending(self):
        tasks, self.tasks = self.tasks, []
        for target, args, kwargs in tasks:
            target(*args, **kwargs)
        return len(tasks)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def broadcasts():
    return RecordingBroadcast()


@pytest.fixture()
def fake_socketio():
    return FakeSocketIO()


@pytest.fixture()
def questions():
    return load_question_bank()


@pytest.fixture()
def engine(questions, clock, broadcasts, fake_socketio):
    return SessionEngine(
        registry=SessionRegistry(questions),
        scheduler=AdvanceScheduler(fake_socketio),
        broadcast=broadcasts,
        host_password=HOST_PASSWORD,
        question_duration=10,
        start_delay=0,
        clock=clock,
    )


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
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
def make_sio_client(flask_app):
    clients = []

    def _make():
        c = socketio.test_client(flask_app, namespace='/ws')
        clients.append(c)
        return c

    yield _make
    for c in clients:
        try:
            c.disconnect(namespace='/ws')
        except Exception:
            pass
