"""
Player Record Model

Per-participant state inside a room: board history, verdicts, progress,
cumulative wins and connection status.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .game import RoundInactiveError, Verdict
from ..config.game_settings import MAX_ATTEMPTS, WORD_LENGTH


@dataclass
class PlayerRecord:
    """Mutable state of one player. The display name is the stable key."""
    name: str
    sid: Optional[str] = None
    guesses: List[str] = field(default_factory=list)
    verdicts: List[List[Verdict]] = field(default_factory=list)
    attempts: int = 0
    finished: bool = False
    won: bool = False
    wins: int = 0
    connected: bool = True
    disconnected_at: Optional[float] = None
    max_attempts: int = MAX_ATTEMPTS

    @classmethod
    def create(cls, name: str, sid: str, max_attempts: int = MAX_ATTEMPTS) -> "PlayerRecord":
        """Fresh record for a brand-new identity: no history, no wins."""
        return cls(name=name, sid=sid, max_attempts=max_attempts)

    def record_guess(self, word: str, verdicts: List[Verdict]) -> None:
        """
        Append a scored guess and update the terminal flags.

        Raises:
            RoundInactiveError: If the player already finished this round
        """
        if self.finished or self.attempts >= self.max_attempts:
            raise RoundInactiveError(f"{self.name} has already finished this round")

        self.guesses.append(word)
        self.verdicts.append(list(verdicts))
        self.attempts += 1

        if all(verdict is Verdict.CORRECT for verdict in verdicts):
            self.won = True
            self.finished = True
            self.wins += 1
        elif self.attempts >= self.max_attempts:
            self.finished = True

    def mark_disconnected(self, timestamp: float) -> None:
        self.connected = False
        self.disconnected_at = timestamp

    def mark_reconnected(self, sid: str) -> None:
        """Re-associate a live connection, keeping all game history."""
        self.sid = sid
        self.connected = True
        self.disconnected_at = None

    def reset_board(self) -> None:
        """Clear round progress; the win counter is kept."""
        self.guesses = []
        self.verdicts = []
        self.attempts = 0
        self.finished = False
        self.won = False

    def board_rows(self) -> List[List[str]]:
        rows = [list(word) for word in self.guesses]
        rows += [[''] * WORD_LENGTH for _ in range(self.max_attempts - len(rows))]
        return rows

    def color_rows(self) -> List[List[str]]:
        rows = [[verdict.value for verdict in row] for row in self.verdicts]
        rows += [[''] * WORD_LENGTH for _ in range(self.max_attempts - len(rows))]
        return rows

    def to_state(self) -> Dict:
        """Public view broadcast to every player in the room."""
        return {
            "name": self.name,
            "board": self.board_rows(),
            "colors": self.color_rows(),
            "current_row": self.attempts,
            "finished": self.finished,
            "won": self.won,
            "wins": self.wins,
            "connected": self.connected
        }

    def to_snapshot(self) -> Dict:
        return {
            "board": list(self.guesses),
            "verdicts": [[verdict.value for verdict in row] for row in self.verdicts],
            "attempts": self.attempts,
            "finished": self.finished,
            "won": self.won,
            "wins": self.wins
        }

    @classmethod
    def from_snapshot(cls, name: str, data: Dict, timestamp: float,
                      max_attempts: int = MAX_ATTEMPTS) -> "PlayerRecord":
        """Restore a persisted record. Restored players start disconnected."""
        guesses = [str(word).lower() for word in data.get("board", [])]
        verdicts = [[Verdict(value) for value in row] for row in data.get("verdicts", [])]
        attempts = min(int(data.get("attempts", len(guesses))), max_attempts)
        won = bool(data.get("won", False))
        return cls(
            name=name,
            sid=None,
            guesses=guesses,
            verdicts=verdicts,
            attempts=attempts,
            finished=bool(data.get("finished", False)) or won or attempts >= max_attempts,
            won=won,
            wins=int(data.get("wins", 0)),
            connected=False,
            disconnected_at=timestamp,
            max_attempts=max_attempts
        )
