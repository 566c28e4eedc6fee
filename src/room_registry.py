"""
Room Registry for the DraftRoom game

Owns the mapping from room code to RoomState, generates room codes that are
unique among live rooms and assigns seats on create/join.
"""

import logging
import random
import string
import threading
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from src.config.game_settings import get_game_settings
from src.core.errors import RoomFull, RoomNotFound
from src.core.models import FIRST_SEAT, RoomState, SeatOccupant
from src.services.concurrency_control_service import ConcurrencyControlService

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Manages draft rooms and their seats with thread-safe operations."""

    CODE_ALPHABET = string.ascii_uppercase + string.digits
    # Collisions tolerated at one code length before the code is widened
    MAX_ATTEMPTS_PER_LENGTH = 10

    def __init__(self, concurrency_control: Optional[ConcurrencyControlService] = None):
        self.concurrency_control = concurrency_control or ConcurrencyControlService()
        self.game_settings = get_game_settings()
        self._rooms: Dict[str, RoomState] = {}
        self._rooms_lock = threading.RLock()

    # Room code generation
    def generate_room_code(self) -> str:
        """
        Generate a code not used by any live room.

        Retries on collision and widens the code by one character every
        MAX_ATTEMPTS_PER_LENGTH collisions. Must be called with the rooms lock held.
        """
        length = self.game_settings.room_code_length
        attempts = 0
        while True:
            code = ''.join(random.choices(self.CODE_ALPHABET, k=length))
            if code not in self._rooms:
                return code
            attempts += 1
            logger.debug(f"Room code collision on {code} (attempt {attempts})")
            if attempts % self.MAX_ATTEMPTS_PER_LENGTH == 0:
                length += 1

    # Room lifecycle
    def create_room(self, display_name: Optional[str], connection_id: str) -> Tuple[str, int, RoomState]:
        """
        Create a new room with the creator seated in seat 1.

        Args:
            display_name: Creator's display name, defaults to "Player 1"
            connection_id: Creator's connection identity

        Returns:
            Tuple of (room_code, seat, room)
        """
        with self._rooms_lock:
            room_code = self.generate_room_code()
            room = RoomState(
                room_code=room_code,
                turn_duration_seconds=self.game_settings.turn_duration_seconds
            )
            room.seats[FIRST_SEAT] = SeatOccupant(
                connection_id=connection_id,
                name=self._seat_name(display_name, FIRST_SEAT)
            )
            self._rooms[room_code] = room

        logger.info(f"Created room {room_code}")
        return room_code, FIRST_SEAT, room

    def join_room(self, room_code: str, display_name: Optional[str], connection_id: str) -> Tuple[int, RoomState]:
        """
        Seat a connection in the lowest empty seat among 2 and 3.

        Raises:
            RoomNotFound: If no live room has this code
            RoomFull: If seats 2 and 3 are both occupied
        """
        with self.locked_room(room_code) as room:
            if room is None:
                raise RoomNotFound(details={'room_code': room_code})
            seat = next((s for s in room.empty_seats() if s != FIRST_SEAT), None)
            if seat is None:
                raise RoomFull(details={'room_code': room_code})

            room.seats[seat] = SeatOccupant(
                connection_id=connection_id,
                name=self._seat_name(display_name, seat)
            )
            room.touch()

        logger.info(f"Seat {seat} taken in room {room_code}")
        return seat, room

    def vacate_seat(self, room_code: str, seat: int, connection_id: str) -> bool:
        """
        Empty a seat if it is still held by the given connection.

        Returns:
            True if the seat was emptied, False otherwise
        """
        with self.locked_room(room_code) as room:
            if room is None:
                return False
            occupant = room.seats.get(seat)
            if occupant is None or occupant.connection_id != connection_id:
                return False
            room.seats[seat] = None
            room.touch()

        logger.info(f"Seat {seat} vacated in room {room_code}")
        return True

    def delete_room(self, room_code: str) -> bool:
        """
        Delete a room and release its lock.

        Returns:
            True if room was deleted, False if room didn't exist
        """
        with self._rooms_lock:
            if room_code not in self._rooms:
                return False
            del self._rooms[room_code]

        self.concurrency_control.cleanup_room_lock(room_code)
        logger.info(f"Deleted room {room_code}")
        return True

    # Lookups
    def get_room(self, room_code: str) -> Optional[RoomState]:
        return self._rooms.get(room_code)

    def room_exists(self, room_code: str) -> bool:
        return room_code in self._rooms

    def get_all_room_codes(self) -> List[str]:
        with self._rooms_lock:
            return list(self._rooms.keys())

    def room_count(self) -> int:
        return len(self._rooms)

    def find_available_room(self) -> Optional[str]:
        """Find a room that has not started and still has a free joinable seat."""
        for room_code in self.get_all_room_codes():
            room = self._rooms.get(room_code)
            if room and not room.is_started and any(s != FIRST_SEAT for s in room.empty_seats()):
                return room_code
        return None

    def get_inactive_room_codes(self, max_inactive_minutes: int) -> List[str]:
        """
        Get rooms without player activity for longer than the given window.

        Args:
            max_inactive_minutes: Maximum minutes of inactivity

        Returns:
            List of room codes eligible for reaping
        """
        cutoff_time = datetime.now() - timedelta(minutes=max_inactive_minutes)
        with self._rooms_lock:
            return [code for code, room in self._rooms.items() if room.last_activity < cutoff_time]

    def room_operation(self, room_code: str):
        """Serialize a unit of work on one room."""
        return self.concurrency_control.room_operation(room_code)

    @contextmanager
    def locked_room(self, room_code: str):
        """
        Hold a room's lock and yield the room, or None if it does not exist.

        A lock taken for a code with no live room (unknown, or deleted while
        waiting) is dropped again so it does not outlive the room.
        """
        with self.concurrency_control.room_operation(room_code):
            room = self._rooms.get(room_code)
            try:
                yield room
            finally:
                if room is None:
                    self._discard_orphan_lock(room_code)

    def _discard_orphan_lock(self, room_code: str):
        with self._rooms_lock:
            if room_code not in self._rooms:
                self.concurrency_control.cleanup_room_lock(room_code)

    @staticmethod
    def _seat_name(display_name: Optional[str], seat: int) -> str:
        return display_name or f"Player {seat}"
