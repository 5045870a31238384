"""
WebSocket Event Handlers

Translates Socket.IO events into room operations and carries out the
effects those operations return.
"""

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from ..models.effects import Broadcast, Commentary, Kick, Reply, SaveSnapshot
from ..services.commentary_service import get_commentary_service
from ..services.lobby_service import get_lobby_service
from ..utils.decorators import require_room_session
from ..utils.game_logger import game_logger
from ..utils.helpers import normalize_player_name, normalize_room_id, now_ms

# sid -> {'room_id': ..., 'player_name': ...}
sessions = {}

# Every live socket, used to disconnect everyone on a global reset
connected_sockets = set()


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        connected_sockets.add(request.sid)

    @socketio.on('disconnect')
    def handle_disconnect(*args):
        """Handle WebSocket disconnection; the player record is kept for rejoining."""
        sid = request.sid
        connected_sockets.discard(sid)
        session = sessions.pop(sid, None)
        if not session:
            return

        registry = get_lobby_service()
        room = registry.get(session['room_id']) if registry else None
        if room is None:
            return

        try:
            result = room.disconnect(sid)
            run_effects(socketio, room.room_id, sid, result.effects)
        except Exception as e:
            game_logger.log_error(sid, e, 'disconnect', session['room_id'])

    @socketio.on('join-room')
    def handle_join_room(data):
        """Join (or create) a room under a display name."""
        _enter_room(socketio, data, rejoin=False)

    @socketio.on('rejoin-room')
    def handle_rejoin_room(data):
        """Restore a previous player record by name."""
        _enter_room(socketio, data, rejoin=True)

    @socketio.on('make-guess')
    @require_room_session
    def handle_make_guess(data, room=None, session=None):
        """Submit a guess for the caller's board."""
        sid = request.sid
        if not isinstance(data, dict):
            emit('error', {'error': 'Invalid request data'})
            return
        guess = data.get('guess')
        game_logger.log_user_action(sid, 'make_guess', room.room_id, guess=guess)

        try:
            result = room.guess(sid, guess)
            run_effects(socketio, room.room_id, sid, result.effects)
            game_logger.log_server_response(sid, 'make_guess', result.ok, _describe(result), room.room_id)
        except Exception as e:
            game_logger.log_error(sid, e, 'make_guess', room.room_id)
            emit('error', {'error': str(e)})

    @socketio.on('reset-game')
    @require_room_session
    def handle_reset_game(data=None, room=None, session=None):
        """Ask for a new round with a new word."""
        sid = request.sid
        game_logger.log_user_action(sid, 'reset_game', room.room_id)

        try:
            result = room.request_restart(sid)
            run_effects(socketio, room.room_id, sid, result.effects)
            game_logger.log_server_response(sid, 'reset_game', result.ok, _describe(result), room.room_id)
        except Exception as e:
            game_logger.log_error(sid, e, 'reset_game', room.room_id)
            emit('error', {'error': str(e)})

    @socketio.on('leave-room')
    @require_room_session
    def handle_leave_room(data=None, room=None, session=None):
        """Leave the room for good, freeing the display name."""
        sid = request.sid
        game_logger.log_user_action(sid, 'leave_room', room.room_id)

        leave_room(room.room_id)
        sessions.pop(sid, None)
        try:
            result = room.leave(sid)
            run_effects(socketio, room.room_id, sid, result.effects)
        except Exception as e:
            game_logger.log_error(sid, e, 'leave_room', room.room_id)
            emit('error', {'error': str(e)})

    @socketio.on('chat-message')
    def handle_chat_message(data):
        """Relay a chat line to everyone in the sender's room."""
        if not isinstance(data, dict):
            return
        message = data.get('message')
        room_id = normalize_room_id(data.get('roomId') or data.get('room_id'))

        if not isinstance(message, str) or not message.strip() or not room_id:
            return
        if len(message) > current_app.config.get('CHAT_MAX_LENGTH', 100):
            return

        session = sessions.get(request.sid)
        if not session or session['room_id'] != room_id:
            return

        registry = get_lobby_service()
        room = registry.get(room_id) if registry else None
        if room is None or room.find_by_sid(request.sid) is None:
            return

        socketio.emit('chat-message', {
            'message': message.strip(),
            'player_name': session['player_name'],
            'timestamp': now_ms()
        }, room=room_id)

    @socketio.on('master-reset')
    def handle_master_reset(data=None):
        """Discard every room and disconnect every client."""
        sid = request.sid
        game_logger.log_user_action(sid, 'master_reset')

        registry = get_lobby_service()
        if not registry:
            emit('master-reset-error', 'Lobby service unavailable')
            return

        try:
            cleared = registry.global_reset()
            sessions.clear()
            socketio.emit('master-reset-complete', {'rooms_cleared': cleared})
            delay = current_app.config.get('MASTER_RESET_DISCONNECT_DELAY', 1.5)
            socketio.start_background_task(_disconnect_everyone, socketio, delay)
        except Exception as e:
            game_logger.log_error(sid, e, 'master_reset')
            emit('master-reset-error', f'Reset failed: {e}')


def _enter_room(socketio, data, rejoin):
    sid = request.sid
    action = 'rejoin_room' if rejoin else 'join_room'
    if not isinstance(data, dict):
        emit('error', {'error': 'Invalid request data'})
        return
    room_id = normalize_room_id(data.get('roomId') or data.get('room_id'))
    player_name = normalize_player_name(data.get('playerName') or data.get('player_name'))

    if not room_id or not player_name:
        emit('error', {'error': 'Room ID and player name are required'})
        return

    registry = get_lobby_service()
    if not registry:
        emit('error', {'error': 'Lobby service unavailable'})
        return

    game_logger.log_user_action(sid, action, room_id, player_name=player_name)

    try:
        # A connection plays in one room at a time
        previous = sessions.get(sid)
        if previous and previous['room_id'] != room_id:
            old_room = registry.get(previous['room_id'])
            leave_room(previous['room_id'])
            sessions.pop(sid, None)
            if old_room is not None:
                run_effects(socketio, old_room.room_id, sid, old_room.leave(sid).effects)

        if rejoin:
            result = registry.rejoin(room_id, sid, player_name)
        else:
            result = registry.join(room_id, sid, player_name)

        if result.ok:
            join_room(room_id)
            sessions[sid] = {'room_id': room_id, 'player_name': player_name}

        run_effects(socketio, room_id, sid, result.effects)
        game_logger.log_server_response(sid, action, result.ok, _describe(result), room_id)
    except Exception as e:
        game_logger.log_error(sid, e, action, room_id)
        emit('error', {'error': str(e)})


def run_effects(socketio, room_id, sid, effects):
    """Carry out the effects of one room operation, in order."""
    for effect in effects:
        if isinstance(effect, Kick):
            _kick(socketio, room_id, effect)
        elif isinstance(effect, Reply):
            socketio.emit(effect.event, effect.payload, room=sid)
        elif isinstance(effect, Broadcast):
            socketio.emit(effect.event, effect.payload, room=room_id)
        elif isinstance(effect, SaveSnapshot):
            socketio.start_background_task(_save_snapshot)
        elif isinstance(effect, Commentary):
            socketio.start_background_task(_publish_commentary, socketio, room_id, effect)


def _kick(socketio, room_id, effect):
    sessions.pop(effect.sid, None)
    socketio.emit('player-kicked', {'reason': effect.reason}, room=effect.sid)
    try:
        leave_room(room_id, sid=effect.sid, namespace='/')
        socketio.server.disconnect(effect.sid, namespace='/')
    except Exception as e:
        game_logger.log_error(effect.sid, e, 'kick', room_id)


def _save_snapshot():
    registry = get_lobby_service()
    if registry:
        registry.save()


def _publish_commentary(socketio, room_id, effect):
    service = get_commentary_service()
    if not service:
        return
    try:
        line = service.generate(effect.situation, effect.context)
    except Exception as e:
        game_logger.logger.error(f"Error generating commentary for room {room_id}: {e}")
        return
    if line:
        socketio.emit('commentary', {
            'message': line['message'],
            'style': line['style'],
            'player_name': effect.context.get('player_name'),
            'situation': effect.situation
        }, room=room_id)


def _disconnect_everyone(socketio, delay):
    socketio.sleep(delay)
    for sid in list(connected_sockets):
        try:
            socketio.server.disconnect(sid, namespace='/')
        except Exception as e:
            game_logger.logger.error(f"Failed to disconnect {sid} after master reset: {e}")
    connected_sockets.clear()


def _describe(result):
    if result.ok:
        return {'success': True, **{k: v for k, v in result.data.items() if k != 'state'}}
    return {'success': False, 'reason': result.reason.value, 'error': result.message}
