"""
Lobby Service

Registry of every live room: lazy creation, idle eviction, global reset
and snapshot save/restore.
"""

import threading
import time
from typing import Callable, Dict, List, Optional

from ..models.effects import Reply
from ..models.game import Rejected, RejectReason
from ..utils.game_logger import game_logger
from .game_service import GameRoom
from .snapshot_service import SnapshotStore


class RoomRegistry:
    """
    Owns the room id -> GameRoom mapping.

    Room options (word lists, capacity, grace periods, clock, rng) are
    passed through to every room the registry creates.
    """

    def __init__(self,
                 snapshot_store: Optional[SnapshotStore] = None,
                 room_idle_seconds: float = 30 * 60,
                 clock: Optional[Callable[[], float]] = None,
                 **room_options):
        self.rooms: Dict[str, GameRoom] = {}
        self.snapshot_store = snapshot_store
        self.room_idle_seconds = room_idle_seconds
        self._clock = clock or time.time
        self.room_options = dict(room_options, clock=self._clock)
        self._lock = threading.Lock()

    def get(self, room_id: str) -> Optional[GameRoom]:
        with self._lock:
            return self.rooms.get(room_id)

    def get_or_create(self, room_id: str) -> GameRoom:
        with self._lock:
            room = self.rooms.get(room_id)
            if room is None:
                room = GameRoom(room_id, **self.room_options)
                self.rooms[room_id] = room
                game_logger.log_game_event(room_id, 'room_created')
            return room

    def join(self, room_id: str, sid: str, name: str):
        return self.get_or_create(room_id).join(sid, name)

    def rejoin(self, room_id: str, sid: str, name: str):
        room = self.get(room_id)
        if room is None:
            return Rejected(RejectReason.NOT_FOUND, 'Room not found',
                            [Reply('rejoin-failed', {'reason': 'Room not found'})])
        return room.rejoin(sid, name)

    def list_rooms(self) -> List[Dict]:
        with self._lock:
            rooms = list(self.rooms.values())
        return [{
            'room_id': room.room_id,
            'player_count': room.player_count,
            'max_players': room.max_players,
            'game_active': room.active,
            'winner': room.winner
        } for room in rooms]

    # ------------------------------------------------------------------
    # Eviction
    # ------------------------------------------------------------------

    def _is_idle(self, room: GameRoom) -> bool:
        with room.lock:
            if room.connected_players() or room.has_recent_disconnects():
                return False
            if room.empty_since is None:
                return False
            return self._clock() - room.empty_since >= self.room_idle_seconds

    def evict_if_idle(self, room_id: str) -> bool:
        """Remove the room once it has been empty for the idle window."""
        with self._lock:
            room = self.rooms.get(room_id)
            if room is None or not self._is_idle(room):
                return False
            del self.rooms[room_id]
        game_logger.log_game_event(room_id, 'room_evicted')
        return True

    def expire_players(self) -> Dict[str, list]:
        """
        Purge stale players in every room.

        Returns:
            Dict[str, list]: room id -> effects, for rooms where records expired
        """
        with self._lock:
            rooms = list(self.rooms.values())
        expired = {}
        for room in rooms:
            effects = room.expire_players()
            if effects:
                expired[room.room_id] = effects
        return expired

    def evict_idle_rooms(self) -> List[str]:
        """Evict every room that has been empty for the idle window."""
        with self._lock:
            room_ids = list(self.rooms.keys())
        return [room_id for room_id in room_ids if self.evict_if_idle(room_id)]

    def global_reset(self) -> int:
        """
        Discard every room and the durable snapshot. Irreversible.

        Returns:
            int: Number of rooms discarded
        """
        with self._lock:
            count = len(self.rooms)
            self.rooms.clear()
            if self.snapshot_store is not None:
                self.snapshot_store.clear()
        game_logger.log_game_event(None, 'global_reset', rooms_cleared=count)
        return count

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_snapshot(self) -> Dict[str, Dict]:
        with self._lock:
            rooms = dict(self.rooms)
        return {room_id: room.to_snapshot() for room_id, room in rooms.items()}

    def restore(self, snapshot: Dict[str, Dict]) -> int:
        restored = 0
        for room_id, data in (snapshot or {}).items():
            try:
                room = GameRoom.from_snapshot(room_id, data, **self.room_options)
            except (TypeError, ValueError, AttributeError) as e:
                game_logger.logger.warning(f"Skipping unreadable room snapshot '{room_id}': {e}")
                continue
            with self._lock:
                self.rooms[room_id] = room
            restored += 1
        return restored

    def load(self) -> int:
        if self.snapshot_store is None:
            return 0
        restored = self.restore(self.snapshot_store.load())
        game_logger.logger.info(f"Restored {restored} room(s) from snapshot")
        return restored

    def save(self) -> bool:
        if self.snapshot_store is None:
            return False
        return self.snapshot_store.save(self.to_snapshot())


# Global service instance
_lobby_service = None


def get_lobby_service() -> Optional[RoomRegistry]:
    """Get the global room registry instance."""
    return _lobby_service


def initialize_lobby_service(config_class, snapshot_store: Optional[SnapshotStore] = None, **room_options) -> RoomRegistry:
    """Initialize the global room registry from a config class."""
    global _lobby_service
    if snapshot_store is None and config_class.SNAPSHOT_PATH:
        snapshot_store = SnapshotStore(config_class.SNAPSHOT_PATH)
    options = {
        'max_players': config_class.MAX_PLAYERS,
        'max_attempts': config_class.MAX_ATTEMPTS,
        'player_grace_seconds': config_class.PLAYER_GRACE_SECONDS,
        'restart_latch_seconds': config_class.RESTART_LATCH_SECONDS,
    }
    options.update(room_options)
    _lobby_service = RoomRegistry(
        snapshot_store=snapshot_store,
        room_idle_seconds=config_class.ROOM_IDLE_SECONDS,
        **options
    )
    return _lobby_service
