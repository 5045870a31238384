import random

from wordle_rooms.config import TestingConfig
from wordle_rooms.models.effects import Reply
from wordle_rooms.models.game import RejectReason
from wordle_rooms.services.lobby_service import RoomRegistry, get_lobby_service, initialize_lobby_service


def test_get_or_create_returns_same_room(registry):
    first = registry.get_or_create('alpha')
    assert registry.get_or_create('alpha') is first
    assert registry.get('beta') is None


def test_join_creates_room_lazily(registry):
    result = registry.join('alpha', 'sid-1', 'alice')
    assert result.ok
    assert registry.get('alpha').player_count == 1


def test_rejoin_unknown_room_is_not_found(registry):
    result = registry.rejoin('ghost', 'sid-1', 'alice')
    assert result.reason is RejectReason.NOT_FOUND
    assert result.effects == [Reply('rejoin-failed', {'reason': 'Room not found'})]
    assert registry.get('ghost') is None


def test_list_rooms(registry):
    registry.join('alpha', 'sid-1', 'alice')
    registry.get_or_create('beta')
    rooms = {room['room_id']: room for room in registry.list_rooms()}
    assert rooms['alpha']['player_count'] == 1
    assert rooms['alpha']['game_active']
    assert rooms['beta']['player_count'] == 0
    assert not rooms['beta']['game_active']


def test_room_with_players_is_never_evicted(registry, clock):
    registry.join('alpha', 'sid-1', 'alice')
    clock.advance(registry.room_idle_seconds * 2)
    assert not registry.evict_if_idle('alpha')
    assert registry.get('alpha') is not None


def test_empty_room_is_evicted_after_idle_window(registry, clock):
    registry.join('alpha', 'sid-1', 'alice')
    registry.get('alpha').leave('sid-1')

    clock.advance(registry.room_idle_seconds - 1)
    assert registry.evict_idle_rooms() == []
    clock.advance(1)
    assert registry.evict_idle_rooms() == ['alpha']
    assert registry.get('alpha') is None


def test_recent_disconnect_keeps_room_alive(registry, clock):
    registry.join('alpha', 'sid-1', 'alice')
    room = registry.get('alpha')
    room.disconnect('sid-1')
    assert not registry.evict_if_idle('alpha')

    # grace expires, the stale record is purged and the idle window starts counting from the disconnect
    clock.advance(room.player_grace_seconds + 1)
    assert list(registry.expire_players()) == ['alpha']
    assert room.players == {}
    assert registry.expire_players() == {}
    clock.advance(registry.room_idle_seconds)
    assert registry.evict_idle_rooms() == ['alpha']


def test_global_reset_clears_rooms_and_snapshot(registry, snapshot_store):
    registry.join('alpha', 'sid-1', 'alice')
    registry.join('beta', 'sid-2', 'bob')
    assert registry.save()
    assert snapshot_store.path.exists()

    assert registry.global_reset() == 2
    assert registry.list_rooms() == []
    assert not snapshot_store.path.exists()


def test_save_and_load_round_trip(registry, snapshot_store, clock):
    registry.join('alpha', 'sid-1', 'alice')
    registry.get('alpha').guess('sid-1', 'trace')
    assert registry.save()

    fresh = RoomRegistry(snapshot_store=snapshot_store, clock=clock, target_words=['crane'])
    assert fresh.load() == 1
    room = fresh.get('alpha')
    assert room.secret == 'crane'
    assert room.player_count == 0
    assert room.players['alice'].guesses == ['trace']

    assert fresh.rejoin('alpha', 'sid-9', 'alice').ok
    assert room.players['alice'].attempts == 1


def test_unreadable_room_is_skipped(registry):
    restored = registry.restore({
        'good': {'secret': 'crane', 'players': {}},
        'bad': {'secret': 'crane', 'players': {'alice': {'verdicts': [['purple']]}}}
    })
    assert restored == 1
    assert registry.get('good') is not None
    assert registry.get('bad') is None


def test_initialize_lobby_service_uses_config(tmp_path):
    class Config(TestingConfig):
        SNAPSHOT_PATH = str(tmp_path / 'rooms.json')
        MAX_PLAYERS = 3

    registry = initialize_lobby_service(Config, rng=random.Random(1))
    assert get_lobby_service() is registry
    assert registry.snapshot_store.path == tmp_path / 'rooms.json'
    assert registry.get_or_create('alpha').max_players == 3
