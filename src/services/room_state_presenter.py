"""
Room State Presenter - Centralized room state transformation for broadcasts.

This service provides canonical transformations for room state data that needs
to be sent to clients, ensuring consistent JSON-safe payload shapes.
"""

import logging
from typing import Any, Dict, Optional

from src.core.models import SEAT_NUMBERS, RoomState

logger = logging.getLogger(__name__)


class RoomStatePresenter:
    """Centralized service for transforming room state data for client broadcasts."""

    @staticmethod
    def deadline_ms(deadline: Optional[float]) -> Optional[int]:
        """Convert an epoch-seconds deadline to epoch milliseconds."""
        if deadline is None:
            return None
        return int(round(deadline * 1000))

    def create_game_state(self, room: RoomState) -> Dict[str, Any]:
        """Create the full game state object for client consumption.

        Args:
            room: Room to present

        Returns:
            Dict with seats, rosters, current turn and deadline
        """
        return {
            'roomCode': room.room_code,
            'players': self.create_player_map(room),
            'rosters': self.create_rosters(room),
            'currentTurn': room.current_turn,
            'timerEndTime': self.deadline_ms(room.turn_deadline),
            'turnDuration': room.turn_duration_seconds
        }

    def create_player_map(self, room: RoomState) -> Dict[str, Optional[Dict[str, Any]]]:
        """Seat number -> occupant summary (or None for an empty seat)."""
        players = {}
        for seat in SEAT_NUMBERS:
            occupant = room.seats[seat]
            players[str(seat)] = None if occupant is None else {
                'id': occupant.connection_id,
                'name': occupant.name,
                'ready': occupant.ready
            }
        return players

    def create_rosters(self, room: RoomState) -> Dict[str, Dict[str, Any]]:
        """Seat number -> copy of that seat's roster."""
        return {str(seat): dict(room.rosters[seat]) for seat in SEAT_NUMBERS}

    def create_room_ack(self, room: RoomState, seat: int) -> Dict[str, Any]:
        """Payload acknowledging a create/join to the acting connection."""
        return {
            'roomCode': room.room_code,
            'playerId': seat,
            'gameState': self.create_game_state(room)
        }
