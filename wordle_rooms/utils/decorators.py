"""
Request Decorators

Contains decorators guarding HTTP endpoints and WebSocket events.
"""

from functools import wraps
from flask import request, jsonify
from flask_socketio import emit


def require_lobby_service(f):
    """
    Decorator for HTTP endpoints that need the room registry.
    Passes the registry as the ``registry`` keyword argument.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.lobby_service import get_lobby_service

        registry = get_lobby_service()
        if not registry:
            return jsonify({
                'success': False,
                'error': 'Lobby service unavailable'
            }), 500

        kwargs['registry'] = registry
        return f(*args, **kwargs)

    return decorated_function


def require_room_session(f):
    """
    Decorator for WebSocket events sent by a connection that joined a room.
    Passes the live room as ``room`` and the session entry as ``session``.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.lobby_service import get_lobby_service
        from ..websocket.handlers import sessions

        session = sessions.get(request.sid)
        registry = get_lobby_service()
        room = registry.get(session['room_id']) if session and registry else None
        if room is None:
            emit('error', {'error': 'Join a room first'})
            return

        kwargs['room'] = room
        kwargs['session'] = session
        return f(*args, **kwargs)

    return decorated_function
