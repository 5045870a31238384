"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import (
    Verdict, RejectReason, GameError, InvalidWordError, RoundInactiveError,
    Accepted, Rejected
)
from .effects import Reply, Broadcast, Kick, SaveSnapshot, Commentary
from .player import PlayerRecord

__all__ = [
    'Verdict', 'RejectReason', 'GameError', 'InvalidWordError', 'RoundInactiveError',
    'Accepted', 'Rejected',
    'Reply', 'Broadcast', 'Kick', 'SaveSnapshot', 'Commentary',
    'PlayerRecord'
]
