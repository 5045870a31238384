"""
Helper Functions

Contains utility functions used throughout the application.
"""

import time
from typing import Optional


def normalize_room_id(value) -> Optional[str]:
    """Room ids are free-form strings; blank ids are rejected."""
    if value is None:
        return None
    room_id = str(value).strip()
    return room_id or None


def normalize_player_name(value) -> Optional[str]:
    """Display names are compared exactly after trimming surrounding whitespace."""
    if not isinstance(value, str):
        return None
    name = value.strip()
    return name or None


def now_ms() -> int:
    return int(time.time() * 1000)
