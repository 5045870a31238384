"""
Room Controller

Read-only HTTP endpoints exposing the room registry.
"""

from flask import Blueprint, request, jsonify
from ..utils.decorators import require_lobby_service
from ..utils.game_logger import game_logger

room_bp = Blueprint('rooms', __name__)


@room_bp.route('/health', methods=['GET'])
@require_lobby_service
def health(registry=None):
    """Liveness probe with a room count."""
    return jsonify({
        'success': True,
        'rooms': len(registry.list_rooms())
    })


@room_bp.route('/rooms', methods=['GET'])
@require_lobby_service
def list_rooms(registry=None):
    """List every live room with its player count and round status."""
    try:
        return jsonify({
            'success': True,
            'rooms': registry.list_rooms()
        })
    except Exception as e:
        game_logger.log_error(request.remote_addr, e, 'list_rooms')
        return jsonify({'success': False, 'error': str(e)}), 500


@room_bp.route('/rooms/<room_id>/state', methods=['GET'])
@require_lobby_service
def get_room_state(room_id, registry=None):
    """Get the broadcast snapshot of one room."""
    try:
        game_logger.log_user_action(request.remote_addr, 'get_room_state', room_id)

        room = registry.get(room_id)
        if room is None:
            error_response = {
                'success': False,
                'error': 'Room not found'
            }
            game_logger.log_server_response(request.remote_addr, 'get_room_state', False, error_response, room_id)
            return jsonify(error_response), 404

        response_data = {
            'success': True,
            'state': room.get_state()
        }
        game_logger.log_server_response(request.remote_addr, 'get_room_state', True, response_data, room_id)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request.remote_addr, e, 'get_room_state', room_id)
        return jsonify({'success': False, 'error': str(e)}), 500
