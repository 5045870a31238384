"""
Effect Requests

State transitions never talk to the transport or the disk themselves.
They return these one-way requests and the websocket gateway carries
them out in order, running persistence and commentary in the background.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class Reply:
    """Emit an event to the connection that triggered the operation."""
    event: str
    payload: Any = None


@dataclass(frozen=True)
class Broadcast:
    """Emit an event to every connection in the room."""
    event: str
    payload: Any = None


@dataclass(frozen=True)
class Kick:
    """Notify a connection it was evicted, then disconnect it."""
    sid: str
    reason: str


@dataclass(frozen=True)
class SaveSnapshot:
    """Request a best-effort write of the registry snapshot."""


@dataclass(frozen=True)
class Commentary:
    """Request flavor commentary for a guess situation."""
    situation: str
    context: Dict[str, Any] = field(default_factory=dict, hash=False)
