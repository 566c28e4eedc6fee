"""
Concurrency Control Service for the DraftRoom game

Hands out one re-entrant lock per room so that every mutation of a room
(join, start, select, skip, disconnect, countdown expiry) is serialized
while different rooms proceed independently.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict

logger = logging.getLogger(__name__)


class ConcurrencyControlService:
    """Manages per-room locking."""

    def __init__(self):
        # Per-room locks for fine-grained control
        self._room_locks: Dict[str, threading.RLock] = {}
        # Lock for managing room locks themselves
        self._locks_lock = threading.Lock()

    def get_room_lock(self, room_code: str) -> threading.RLock:
        """Get or create a lock for a specific room."""
        with self._locks_lock:
            if room_code not in self._room_locks:
                self._room_locks[room_code] = threading.RLock()
            return self._room_locks[room_code]

    def cleanup_room_lock(self, room_code: str):
        """Clean up lock for a deleted room."""
        with self._locks_lock:
            if room_code in self._room_locks:
                del self._room_locks[room_code]
                logger.debug(f"Released lock for room {room_code}")

    def has_room_lock(self, room_code: str) -> bool:
        with self._locks_lock:
            return room_code in self._room_locks

    @contextmanager
    def room_operation(self, room_code: str):
        """Context manager for thread-safe room operations."""
        room_lock = self.get_room_lock(room_code)
        with room_lock:
            yield
