from wordle_rooms.services.lobby_service import get_lobby_service
from wordle_rooms.websocket import handlers


def received(client, event):
    return [message['args'][0] if message['args'] else None
            for message in client.get_received() if message['name'] == event]


def join(sio_factory, name, room_id='room-1'):
    client = sio_factory()
    client.emit('join-room', {'roomId': room_id, 'playerName': name})
    return client


def test_join_room_sends_state_and_starts_round(sio_factory):
    client = join(sio_factory, 'alice')
    messages = client.get_received()
    names = [message['name'] for message in messages]

    assert 'game-state' in names
    assert 'player-joined' in names
    assert 'game-started' in names
    state = next(m['args'][0] for m in messages if m['name'] == 'game-state')
    assert state['room_id'] == 'room-1'
    assert state['word'] is None
    assert [p['name'] for p in state['players']] == ['alice']
    assert list(handlers.sessions.values()) == [{'room_id': 'room-1', 'player_name': 'alice'}]


def test_join_requires_room_and_name(sio_factory):
    client = sio_factory()
    client.emit('join-room', {'roomId': 'room-1'})
    assert received(client, 'error') == [{'error': 'Room ID and player name are required'}]


def test_guess_before_joining_is_refused(sio_factory):
    client = sio_factory()
    client.emit('make-guess', {'guess': 'crane'})
    assert received(client, 'error') == [{'error': 'Join a room first'}]


def test_invalid_guess(sio_factory):
    client = join(sio_factory, 'alice')
    client.get_received()
    client.emit('make-guess', {'guess': 'zzzzz'})
    assert received(client, 'invalid-guess') == ['Word not in word list']


def test_winning_guess_ends_round_for_everyone(sio_factory):
    alice = join(sio_factory, 'alice')
    bob = join(sio_factory, 'bob')
    alice.get_received()
    bob.get_received()

    alice.emit('make-guess', {'guess': 'crane'})

    alice_messages = alice.get_received()
    result = next(m['args'][0] for m in alice_messages if m['name'] == 'guess-result')
    assert result['won'] and result['verdicts'] == ['green'] * 5
    assert received(bob, 'game-ended') == [{'winner': 'alice', 'word': 'crane'}]

    bob.emit('make-guess', {'guess': 'crane'})
    assert received(bob, 'invalid-guess') == ['No round in progress']


def test_sixth_player_gets_room_full(sio_factory):
    for i in range(5):
        join(sio_factory, f'player{i}')
    late = join(sio_factory, 'player5')
    assert len(received(late, 'room-full')) == 1
    assert get_lobby_service().get('room-1').player_count == 5


def test_chat_is_broadcast_to_room(sio_factory):
    alice = join(sio_factory, 'alice')
    bob = join(sio_factory, 'bob')
    bob.get_received()

    alice.emit('chat-message', {'roomId': 'room-1', 'playerName': 'alice', 'message': '  hello  '})

    chat = received(bob, 'chat-message')
    assert len(chat) == 1
    assert chat[0]['message'] == 'hello'
    assert chat[0]['player_name'] == 'alice'


def test_overlong_chat_is_dropped(sio_factory):
    alice = join(sio_factory, 'alice')
    alice.get_received()
    alice.emit('chat-message', {'roomId': 'room-1', 'playerName': 'alice', 'message': 'x' * 101})
    assert received(alice, 'chat-message') == []


def test_rejoin_unknown_room_fails(sio_factory):
    client = sio_factory()
    client.emit('rejoin-room', {'roomId': 'ghost', 'playerName': 'alice'})
    assert received(client, 'rejoin-failed') == [{'reason': 'Room not found'}]


def test_reconnect_and_rejoin_restores_board(sio_factory):
    alice = join(sio_factory, 'alice')
    join(sio_factory, 'bob')
    alice.emit('make-guess', {'guess': 'trace'})
    alice.disconnect()

    room = get_lobby_service().get('room-1')
    assert not room.players['alice'].connected

    again = sio_factory()
    again.emit('rejoin-room', {'roomId': 'room-1', 'playerName': 'alice'})
    state = received(again, 'rejoin-success')[0]
    alice_state = next(p for p in state['players'] if p['name'] == 'alice')
    assert alice_state['board'][0] == list('trace')
    assert alice_state['current_row'] == 1
    assert alice_state['connected']


def test_reset_game_is_latched(sio_factory):
    alice = join(sio_factory, 'alice')
    bob = join(sio_factory, 'bob')
    alice.get_received()
    bob.get_received()

    alice.emit('reset-game')
    bob.emit('reset-game')

    assert received(alice, 'play-again-triggered') == [{'player_name': 'alice'}]
    assert len(received(bob, 'restart-already-requested')) == 1


def test_leave_room_frees_name(sio_factory):
    alice = join(sio_factory, 'alice')
    alice.emit('leave-room')
    assert received(alice, 'left-room') == [{'room_id': 'room-1'}]
    assert 'alice' not in get_lobby_service().get('room-1').players
    assert handlers.sessions == {}


def test_master_reset_clears_rooms(sio_factory, monkeypatch):
    monkeypatch.setattr(handlers, '_disconnect_everyone', lambda socketio, delay: None)

    join(sio_factory, 'alice')
    admin = sio_factory()
    admin.emit('master-reset')

    assert received(admin, 'master-reset-complete') == [{'rooms_cleared': 1}]
    assert get_lobby_service().list_rooms() == []
    assert handlers.sessions == {}


def test_same_name_join_kicks_previous_connection(sio_factory):
    first = join(sio_factory, 'alice')
    first.get_received()
    first_sid = next(iter(handlers.sessions))

    second = join(sio_factory, 'alice')

    assert not first.is_connected()
    kicked = [m['args'][0] for m in first.queue if m['name'] == 'player-kicked']
    assert len(kicked) == 1
    assert 'alice' in kicked[0]['reason']
    assert first_sid not in handlers.sessions
    assert list(handlers.sessions.values()) == [{'room_id': 'room-1', 'player_name': 'alice'}]
    assert get_lobby_service().get('room-1').player_count == 1
    assert 'game-state' in [m['name'] for m in second.get_received()]


def test_non_object_guess_payload_gets_error(sio_factory):
    client = join(sio_factory, 'alice')
    client.get_received()
    client.emit('make-guess', 'crane')
    assert received(client, 'error') == [{'error': 'Invalid request data'}]
    assert get_lobby_service().get('room-1').players['alice'].attempts == 0


def test_non_object_join_payload_gets_error(sio_factory):
    client = sio_factory()
    client.emit('join-room', 'room-1')
    assert received(client, 'error') == [{'error': 'Invalid request data'}]
    assert handlers.sessions == {}


def test_chat_uses_session_name(sio_factory):
    alice = join(sio_factory, 'alice')
    bob = join(sio_factory, 'bob')
    bob.get_received()

    alice.emit('chat-message', {'roomId': 'room-1', 'playerName': 'bob', 'message': 'it was me'})

    chat = received(bob, 'chat-message')
    assert [line['player_name'] for line in chat] == ['alice']


def test_non_object_chat_payload_is_ignored(sio_factory):
    alice = join(sio_factory, 'alice')
    alice.get_received()
    alice.emit('chat-message', 'hello')
    assert alice.get_received() == []
