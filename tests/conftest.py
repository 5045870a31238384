import os
import random
import sys
import pytest

# Ensure the project root (containing the `wordle_rooms` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from wordle_rooms import create_app
from wordle_rooms.config import TestingConfig
from wordle_rooms.services.commentary_service import initialize_commentary_service
from wordle_rooms.services.game_service import GameRoom
from wordle_rooms.services.lobby_service import RoomRegistry, initialize_lobby_service
from wordle_rooms.services.snapshot_service import SnapshotStore
from wordle_rooms.websocket import handlers


class FakeClock:
    def __init__(self, start=1_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def make_room(clock):
    def _make(room_id='room-1', target_words=('crane',), **options):
        options.setdefault('rng', random.Random(7))
        return GameRoom(room_id, target_words=list(target_words), clock=clock, **options)
    return _make


@pytest.fixture()
def room(make_room):
    return make_room()


@pytest.fixture()
def snapshot_store(tmp_path):
    return SnapshotStore(tmp_path / 'game-rooms.json')


@pytest.fixture()
def registry(snapshot_store, clock):
    return RoomRegistry(
        snapshot_store=snapshot_store,
        room_idle_seconds=30 * 60,
        clock=clock,
        target_words=['crane'],
        rng=random.Random(7),
    )


@pytest.fixture()
def flask_app(tmp_path):
    handlers.sessions.clear()
    handlers.connected_sockets.clear()
    initialize_lobby_service(
        TestingConfig,
        snapshot_store=SnapshotStore(tmp_path / 'game-rooms.json'),
        target_words=['crane'],
    )
    initialize_commentary_service(TestingConfig)
    application, socketio = create_app(TestingConfig)
    application.test_socketio = socketio
    yield application
    handlers.sessions.clear()
    handlers.connected_sockets.clear()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _connect():
        test_client = flask_app.test_socketio.test_client(flask_app)
        clients.append(test_client)
        return test_client

    yield _connect

    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
