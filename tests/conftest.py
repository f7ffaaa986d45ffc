import os
import sys
import threading
from collections import Counter

import pytest
from werkzeug.serving import make_server

# Ensure the project root (containing the `quodyssey` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from quodyssey import QuizClient
from quodyssey.config import Config
from quodyssey.push import Subscription
from quodyssey.theme import FileThemeLoader
from quodyssey.transport import Transport


class StubConfig(Config):
    QUIZ_HOST = None
    QUIZ_PORT = None
    QUIZ_ORIGIN = 'quiz.test'
    QUIZ_GAME_ID = None
    MAX_EDIT_DISTANCE = 2
    ESTIMATE_TOLERANCE = 0.1
    HTTP_TIMEOUT_SEC = 5


class FakeTransport(Transport):
    """Canned responses keyed by path; records every request."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.counts = Counter()

    async def _respond(self, method, path, body):
        self.calls.append((method, path, body))
        self.counts[path] += 1
        response = self.routes[path]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            response = response(body)
            if hasattr(response, '__await__'):
                response = await response
        return response

    async def get(self, path):
        return await self._respond('GET', path, None)

    async def post(self, path, body=None):
        return await self._respond('POST', path, body)


class FakePush:
    def __init__(self):
        self.callbacks = {}
        self.registrations = 0

    async def register(self, game_id, callback):
        self.registrations += 1
        self.callbacks.setdefault(game_id, []).append(callback)
        return Subscription(lambda: self.callbacks[game_id].remove(callback))

    def announce(self, game_id, payload):
        for callback in list(self.callbacks.get(game_id, [])):
            callback(payload)


class FakeClock:
    """Manual clock; ``sleep`` advances it instead of waiting."""

    def __init__(self, now=1000.0):
        self.now = now
        self.sleeps = []

    def __call__(self):
        return self.now

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def question_payload(round_id=1, qtype='open', end=10000, **question):
    raw = {'id': f'q{round_id}', 'type': qtype, 'question': 'What is the capital of France?'}
    if qtype == 'choice':
        raw.update({'a': 'Paris', 'b': 'Lyon', 'c': 'Nice', 'd': 'Lille'})
    raw.update(question)
    return {'success': True, 'round': round_id, 'end': end, 'question': raw}


@pytest.fixture()
def transport():
    return FakeTransport({
        'getq/G1': question_payload(),
        'answer': {'success': True},
    })


@pytest.fixture()
def push():
    return FakePush()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def theme(tmp_path):
    return FileThemeLoader(str(tmp_path / 'theme.json'))


@pytest.fixture()
def client(transport, push, clock, theme):
    return QuizClient(
        game_id='G1',
        username='alice',
        config_class=StubConfig,
        transport=transport,
        push=push,
        theme=theme,
        clock=clock,
        sleep=clock.sleep,
    )


@pytest.fixture()
def stub_server():
    from stub_server import create_stub_app

    app = create_stub_app()
    server = make_server('127.0.0.1', 0, app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield app, server.server_port
    server.shutdown()
    thread.join(timeout=5)
