"""
Services Package

Contains all business logic and service classes.
"""

from .scoring import score, is_winning
from .game_service import GameRoom
from .lobby_service import RoomRegistry, get_lobby_service, initialize_lobby_service
from .snapshot_service import SnapshotStore
from .commentary_service import CommentaryService, analyze_situation, get_commentary_service

__all__ = [
    'score', 'is_winning',
    'GameRoom',
    'RoomRegistry', 'get_lobby_service', 'initialize_lobby_service',
    'SnapshotStore',
    'CommentaryService', 'analyze_situation', 'get_commentary_service'
]
