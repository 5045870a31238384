"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import require_lobby_service, require_room_session
from .helpers import normalize_room_id, normalize_player_name, now_ms
from .game_logger import game_logger

__all__ = [
    'require_lobby_service', 'require_room_session',
    'normalize_room_id', 'normalize_player_name', 'now_ms',
    'game_logger'
]
