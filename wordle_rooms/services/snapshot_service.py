"""
Snapshot Service

Best-effort durable copy of every room, used to recover after a restart.
In-memory state is always authoritative: failures here are logged and
never raised back into game operations.
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict

from ..utils.game_logger import game_logger


class SnapshotStore:
    """Flat JSON file holding ``{room_id: room_snapshot}``."""

    def __init__(self, path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _write_atomic(self, payload: Any) -> None:
        serialized = json.dumps(payload, indent=2)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            "w", dir=self.path.parent, delete=False, encoding="utf-8"
        ) as tmp:
            tmp.write(serialized)
            tmp.flush()
            os.fsync(tmp.fileno())
            temp_path = Path(tmp.name)

        temp_path.replace(self.path)

    def save(self, snapshot: Dict[str, Dict]) -> bool:
        with self._lock:
            try:
                self._write_atomic(snapshot)
            except (OSError, TypeError, ValueError) as e:
                game_logger.logger.error(f"Failed to save room snapshot to {self.path}: {e}")
                return False
        return True

    def load(self) -> Dict[str, Dict]:
        with self._lock:
            if not self.path.exists():
                return {}
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                game_logger.logger.warning(f"Failed to load room snapshot, starting empty: {e}")
                return {}

        if not isinstance(data, dict):
            game_logger.logger.warning(f"Ignoring malformed room snapshot in {self.path}")
            return {}
        return data

    def clear(self) -> None:
        with self._lock:
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                game_logger.logger.error(f"Failed to delete room snapshot {self.path}: {e}")
