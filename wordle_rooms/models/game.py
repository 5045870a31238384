"""
Game Data Models

Contains the verdict enum, rejection taxonomy, operation results and
domain exceptions shared by the room services.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Verdict(Enum):
    """Per-letter scoring outcome, valued with the colors clients render."""
    CORRECT = "green"
    PRESENT = "yellow"
    ABSENT = "gray"


class RejectReason(Enum):
    """Why a room or registry operation was refused."""
    ROOM_FULL = "room_full"
    INVALID_WORD = "invalid_word"
    ROUND_INACTIVE = "round_inactive"
    NOT_FOUND = "not_found"
    DUPLICATE_RESTART = "duplicate_restart"


class GameError(Exception):
    """Base class for recoverable game rule violations."""
    reason: RejectReason = RejectReason.NOT_FOUND

    def __init__(self, message: str, reason: Optional[RejectReason] = None):
        super().__init__(message)
        if reason is not None:
            self.reason = reason


class InvalidWordError(GameError):
    reason = RejectReason.INVALID_WORD


class RoundInactiveError(GameError):
    reason = RejectReason.ROUND_INACTIVE


@dataclass
class Accepted:
    """
    Successful operation outcome.

    Attributes:
        data: Operation specific payload (scores, snapshot, ...)
        effects: One-way effect requests for the gateway to perform
    """
    data: Dict[str, Any] = field(default_factory=dict)
    effects: List[Any] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return True


@dataclass
class Rejected:
    """Refused operation outcome, reported to the caller only."""
    reason: RejectReason
    message: str = ""
    effects: List[Any] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return False
