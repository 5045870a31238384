"""
Game Service

Contains the room session state machine for multiplayer rounds.
"""

import random
import threading
import time
from typing import Callable, Dict, Iterable, List, Optional

from ..config.game_settings import (
    TARGET_WORDS, VALID_GUESSES, WORD_LENGTH, MAX_ATTEMPTS, MAX_PLAYERS
)
from ..models.effects import Broadcast, Commentary, Kick, Reply, SaveSnapshot
from ..models.game import (
    Accepted, InvalidWordError, Rejected, RejectReason, RoundInactiveError
)
from ..models.player import PlayerRecord
from ..utils.game_logger import game_logger
from .commentary_service import analyze_situation
from .scoring import score


class GameRoom:
    """
    One room: a secret word and the records of everyone playing it.

    This class handles:
    - Player lifecycle (join, rejoin, leave, disconnect, name collisions)
    - Guess validation and scoring against the room's secret
    - First-win-wins round termination and full-room losses
    - Restarts, guarded by a one-shot latch

    Every public operation holds the room lock, so operations on one room
    are applied one at a time in arrival order. Operations return an
    Accepted or Rejected result carrying the effects the caller must perform.
    """

    def __init__(self,
                 room_id: str,
                 target_words: Optional[Iterable[str]] = None,
                 valid_guesses: Optional[Iterable[str]] = None,
                 max_players: int = MAX_PLAYERS,
                 max_attempts: int = MAX_ATTEMPTS,
                 player_grace_seconds: float = 10 * 60,
                 restart_latch_seconds: float = 5.0,
                 rng: Optional[random.Random] = None,
                 clock: Optional[Callable[[], float]] = None):
        self.room_id = room_id
        self.target_words = [word.lower() for word in (target_words or TARGET_WORDS)]
        self.valid_guesses = frozenset(word.lower() for word in valid_guesses) if valid_guesses is not None else VALID_GUESSES
        self.max_players = max_players
        self.max_attempts = max_attempts
        self.player_grace_seconds = player_grace_seconds
        self.restart_latch_seconds = restart_latch_seconds
        self._rng = rng or random.Random()
        self._clock = clock or time.time

        self.players: Dict[str, PlayerRecord] = {}  # name -> record
        self.secret = self._draw_word()
        self.active = False
        self.revealed = False
        self.winner: Optional[str] = None
        self.started_at: Optional[float] = None
        self.restart_requested = False
        self.restart_requested_at: Optional[float] = None
        self.created_at = self._clock()
        self.empty_since: Optional[float] = self.created_at
        self.lock = threading.RLock()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def connected_players(self) -> List[PlayerRecord]:
        return [player for player in self.players.values() if player.connected]

    @property
    def player_count(self) -> int:
        return len(self.connected_players())

    def find_by_sid(self, sid: str) -> Optional[PlayerRecord]:
        for player in self.players.values():
            if player.sid == sid:
                return player
        return None

    def has_recent_disconnects(self) -> bool:
        now = self._clock()
        return any(
            not player.connected and player.disconnected_at is not None
            and now - player.disconnected_at <= self.player_grace_seconds
            for player in self.players.values()
        )

    def get_state(self) -> Dict:
        """
        Full room snapshot for broadcasting.

        The secret word is only included once the round has ended.
        """
        with self.lock:
            return {
                "room_id": self.room_id,
                "players": [player.to_state() for player in self.players.values()],
                "game_active": self.active,
                "winner": self.winner,
                "word": self.secret if self.revealed else None,
                "player_count": self.player_count,
                "max_players": self.max_players,
                "max_attempts": self.max_attempts
            }

    # ------------------------------------------------------------------
    # Player lifecycle
    # ------------------------------------------------------------------

    def join(self, sid: str, name: str):
        """
        Add a fresh player record for ``name``.

        A connected player already holding the name is evicted first; a
        disconnected record with the name is discarded, not reattached.
        """
        with self.lock:
            effects = []
            self.cleanup_disconnected_players()

            existing = self.players.get(name)
            if existing is not None:
                if existing.connected and existing.sid != sid:
                    effects.append(Kick(existing.sid, f'Another player joined with your name "{name}"'))
                    game_logger.log_game_event(self.room_id, 'player_kicked', player_name=name, old_sid=existing.sid)
                del self.players[name]

            self._drop_sid(sid)

            if self.player_count >= self.max_players:
                effects.append(Reply('room-full', {'room_id': self.room_id, 'max_players': self.max_players}))
                return Rejected(RejectReason.ROOM_FULL, 'Room is full', effects)

            self.players[name] = PlayerRecord.create(name, sid, self.max_attempts)
            self._update_presence()
            game_logger.log_game_event(self.room_id, 'player_joined', player_name=name, player_count=self.player_count)

            state = self.get_state()
            effects.extend([
                Reply('game-state', state),
                Broadcast('player-joined', {'player_name': name, 'player_count': self.player_count}),
                Broadcast('game-state', state)
            ])

            if self.auto_start_if_idle():
                effects.append(Broadcast('game-started', self.get_state()))

            effects.append(SaveSnapshot())
            return Accepted({'state': self.get_state()}, effects)

    def rejoin(self, sid: str, name: str):
        """
        Reattach an existing record by name, or fall back to ``join``.
        """
        with self.lock:
            self.cleanup_disconnected_players()

            record = self.players.get(name)
            if record is None:
                return self.join(sid, name)

            effects = []
            if record.connected and record.sid and record.sid != sid:
                effects.append(Kick(record.sid, f'Your session "{name}" was resumed from another connection'))

            other = self.find_by_sid(sid)
            if other is not None and other is not record:
                del self.players[other.name]

            record.mark_reconnected(sid)
            self._update_presence()
            game_logger.log_game_event(self.room_id, 'player_rejoined', player_name=name,
                                       attempts=record.attempts, wins=record.wins)

            started = self.auto_start_if_idle()
            state = self.get_state()
            effects.extend([
                Reply('rejoin-success', state),
                Broadcast('player-joined', {'player_name': name, 'player_count': self.player_count})
            ])
            if started:
                effects.append(Broadcast('game-started', state))
            effects.append(SaveSnapshot())
            return Accepted({'state': state, 'player': record.to_state()}, effects)

    def leave(self, sid: str):
        """Intentional departure: the record is removed and the name freed."""
        with self.lock:
            record = self.find_by_sid(sid)
            if record is None:
                return Rejected(RejectReason.NOT_FOUND, 'Not in this room')

            del self.players[record.name]
            self._update_presence()
            game_logger.log_game_event(self.room_id, 'player_left', player_name=record.name,
                                       player_count=self.player_count)

            effects = [
                Reply('left-room', {'room_id': self.room_id}),
                Broadcast('player-left', {'player_name': record.name, 'player_count': self.player_count})
            ]
            effects.extend(self._end_round_if_all_lost())
            effects.append(SaveSnapshot())
            return Accepted({'player_name': record.name}, effects)

    def disconnect(self, sid: str):
        """Transport loss: the record is kept for a later rejoin."""
        with self.lock:
            record = self.find_by_sid(sid)
            if record is None or not record.connected:
                return Rejected(RejectReason.NOT_FOUND, 'Not in this room')

            record.mark_disconnected(self._clock())
            self._update_presence()
            game_logger.log_game_event(self.room_id, 'player_disconnected', player_name=record.name)

            # no loss check here: the record may still rejoin this round
            effects = [
                Broadcast('player-left', {'player_name': record.name, 'player_count': self.player_count}),
                SaveSnapshot()
            ]
            return Accepted({'player_name': record.name}, effects)

    def cleanup_disconnected_players(self) -> List[str]:
        """Drop records disconnected for longer than the grace period."""
        with self.lock:
            now = self._clock()
            stale = [
                name for name, player in self.players.items()
                if not player.connected and (
                    player.disconnected_at is None
                    or now - player.disconnected_at > self.player_grace_seconds
                )
            ]
            for name in stale:
                del self.players[name]
                game_logger.log_game_event(self.room_id, 'player_expired', player_name=name)
            return stale

    def expire_players(self) -> list:
        """
        Periodic sweep: purge stale records, then end the round if everyone
        left in it has run out of attempts.

        Returns:
            list: Effects for the gateway (empty when nothing expired)
        """
        with self.lock:
            if not self.cleanup_disconnected_players():
                return []
            effects = self._end_round_if_all_lost()
            effects.extend([
                Broadcast('game-state', self.get_state()),
                SaveSnapshot()
            ])
            return effects

    # ------------------------------------------------------------------
    # Rounds
    # ------------------------------------------------------------------

    def guess(self, sid: str, raw_word):
        """
        Score a guess for the player on ``sid``.

        The first winning guess deactivates the round; any guess processed
        after that is rejected as ROUND_INACTIVE.
        """
        with self.lock:
            record = self.find_by_sid(sid)
            if record is None or not record.connected:
                return Rejected(RejectReason.NOT_FOUND, 'Not in this room',
                                [Reply('invalid-guess', 'Not in this room')])

            if not self.active:
                return Rejected(RejectReason.ROUND_INACTIVE, 'No round in progress',
                                [Reply('invalid-guess', 'No round in progress')])

            if record.finished:
                return Rejected(RejectReason.ROUND_INACTIVE, 'You have already finished this round',
                                [Reply('invalid-guess', 'You have already finished this round')])

            try:
                word = self.normalize_guess(raw_word)
            except InvalidWordError as e:
                context = {
                    'player_name': record.name,
                    'attempts': record.attempts + 1,
                    'total_players': self.player_count
                }
                return Rejected(e.reason, str(e), [
                    Reply('invalid-guess', str(e)),
                    Commentary('invalidWord', context)
                ])

            verdicts = score(word, self.secret)
            try:
                record.record_guess(word, verdicts)
            except RoundInactiveError as e:
                return Rejected(e.reason, str(e), [Reply('invalid-guess', str(e))])
            self._release_restart_latch()

            ended = None
            if record.won:
                self.winner = record.name
                self._finish_round()
                ended = {'winner': record.name, 'word': self.secret}
                game_logger.log_game_event(self.room_id, 'round_won', player_name=record.name,
                                           attempts=record.attempts, word=self.secret)
            elif self._all_players_lost():
                self._finish_round()
                ended = {'winner': None, 'word': self.secret}
                game_logger.log_game_event(self.room_id, 'round_lost', word=self.secret)

            result = {
                'word': word,
                'verdicts': [verdict.value for verdict in verdicts],
                'attempts': record.attempts,
                'finished': record.finished,
                'won': record.won
            }
            context = {
                'player_name': record.name,
                'attempts': record.attempts,
                'is_win': record.won,
                'total_players': self.player_count
            }
            effects = [
                Reply('guess-result', result),
                Broadcast('game-state', self.get_state())
            ]
            if ended is not None:
                effects.append(Broadcast('game-ended', ended))
            effects.append(Commentary(analyze_situation(record, verdicts), context))
            effects.append(SaveSnapshot())
            return Accepted(result, effects)

    def request_restart(self, sid: str):
        """
        Start a new round with a new word.

        Only one restart is honored per round: the latch stays set until the
        new round sees its first guess or the latch window elapses.
        """
        with self.lock:
            record = self.find_by_sid(sid)
            if record is None or not record.connected:
                return Rejected(RejectReason.NOT_FOUND, 'Not in this room')

            self._expire_restart_latch()
            if self.restart_requested:
                return Rejected(RejectReason.DUPLICATE_RESTART, 'Play again already requested',
                                [Reply('restart-already-requested', {'room_id': self.room_id})])

            self.restart_requested = True
            self.restart_requested_at = self._clock()
            self._start_round(new_word=True)
            game_logger.log_game_event(self.room_id, 'round_restarted', player_name=record.name)

            effects = [
                Broadcast('play-again-triggered', {'player_name': record.name}),
                Broadcast('game-started', self.get_state()),
                SaveSnapshot()
            ]
            return Accepted({'state': self.get_state()}, effects)

    def auto_start_if_idle(self) -> bool:
        """
        Start a round when someone is connected and no round is running.

        The current secret is kept unless it was already revealed by the end
        of a previous round.
        """
        with self.lock:
            if self.active or not self.connected_players():
                return False
            self._start_round(new_word=self.revealed)
            return True

    def normalize_guess(self, raw_word) -> str:
        if not raw_word or not isinstance(raw_word, str):
            raise InvalidWordError("Guess must be a valid string")

        word = raw_word.strip().lower()
        if len(word) != WORD_LENGTH:
            raise InvalidWordError(f"Guess must be exactly {WORD_LENGTH} letters")
        if not word.isalpha():
            raise InvalidWordError("Guess must contain only letters")
        if word not in self.valid_guesses:
            raise InvalidWordError("Word not in word list")
        return word

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_snapshot(self) -> Dict:
        with self.lock:
            return {
                "secret": self.secret,
                "active": self.active,
                "revealed": self.revealed,
                "winner": self.winner,
                "started_at": self.started_at,
                "players": {name: player.to_snapshot() for name, player in self.players.items()}
            }

    @classmethod
    def from_snapshot(cls, room_id: str, data: Dict, **options) -> "GameRoom":
        """Rebuild a room from its persisted form. Every player starts disconnected."""
        room = cls(room_id, **options)
        secret = str(data.get("secret") or "").lower()
        if len(secret) == WORD_LENGTH and secret.isalpha():
            room.secret = secret
        room.active = bool(data.get("active", False))
        room.winner = data.get("winner")
        room.revealed = bool(data.get("revealed", room.winner is not None))
        room.started_at = data.get("started_at")

        now = room._clock()
        for name, player_data in (data.get("players") or {}).items():
            room.players[name] = PlayerRecord.from_snapshot(name, player_data, now, room.max_attempts)
        return room

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _draw_word(self) -> str:
        current = getattr(self, 'secret', None)
        candidates = [word for word in self.target_words if word != current] or self.target_words
        return self._rng.choice(candidates)

    def _start_round(self, new_word: bool) -> None:
        if new_word or not self.secret:
            self.secret = self._draw_word()
        self.active = True
        self.revealed = False
        self.winner = None
        self.started_at = self._clock()
        for player in self.players.values():
            player.reset_board()
        game_logger.log_game_event(self.room_id, 'round_started', player_count=self.player_count)

    def _finish_round(self) -> None:
        self.active = False
        self.revealed = True
        self.restart_requested = False
        self.restart_requested_at = None

    def _contenders(self) -> List[PlayerRecord]:
        """Connected players plus disconnected ones still inside the grace period."""
        now = self._clock()
        return [
            player for player in self.players.values()
            if player.connected or (
                player.disconnected_at is not None
                and now - player.disconnected_at <= self.player_grace_seconds
            )
        ]

    def _all_players_lost(self) -> bool:
        contenders = self._contenders()
        return bool(contenders) and all(player.finished and not player.won for player in contenders)

    def _end_round_if_all_lost(self) -> list:
        if self.active and self._all_players_lost():
            self._finish_round()
            game_logger.log_game_event(self.room_id, 'round_lost', word=self.secret)
            return [Broadcast('game-ended', {'winner': None, 'word': self.secret})]
        return []

    def _release_restart_latch(self) -> None:
        self.restart_requested = False
        self.restart_requested_at = None

    def _expire_restart_latch(self) -> None:
        if (self.restart_requested and self.restart_requested_at is not None
                and self._clock() - self.restart_requested_at >= self.restart_latch_seconds):
            self._release_restart_latch()

    def _drop_sid(self, sid: str) -> None:
        # one record per connection
        record = self.find_by_sid(sid)
        if record is not None:
            del self.players[record.name]

    def _update_presence(self) -> None:
        if self.connected_players():
            self.empty_since = None
        elif self.empty_since is None:
            self.empty_since = self._clock()
