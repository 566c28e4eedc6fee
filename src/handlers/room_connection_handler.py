"""
Room Connection Handler

This module handles Socket.IO events that seat a connection in a room:
creating a new room and joining an existing one. The createGame/joinGame
events of older clients get the same behaviour with unwrapped replies.
"""

import logging

from src.services.error_response_factory import with_error_handling, with_legacy_error_handling
from .base_handler import BaseRoomHandler

logger = logging.getLogger(__name__)


class RoomConnectionHandler(BaseRoomHandler):
    """Handler for room creation and joining."""

    @with_error_handling
    def handle_create_room(self, data=None):
        """
        Handle a player opening a new room.

        Expected data format:
        {
            'playerName': 'display_name'   # optional
        }
        """
        self._create_room('handle_create_room', data)

    @with_legacy_error_handling
    def handle_create_game(self, data=None):
        """createGame from older clients: raw gameCreated payload, errors as reason strings."""
        self._create_room('handle_create_game', data, legacy_reply=True)

    @with_error_handling
    def handle_join_room(self, data):
        """
        Handle a player joining an existing room.

        Expected data format:
        {
            'roomCode': 'ABC123',
            'playerName': 'display_name'   # optional
        }
        """
        self._join_room('handle_join_room', data)

    @with_legacy_error_handling
    def handle_join_game(self, data):
        """joinGame from older clients: raw gameJoined payload, errors as reason strings."""
        self._join_room('handle_join_game', data, legacy_reply=True)

    def _create_room(self, handler_name, data, legacy_reply=False):
        self.log_handler_start(handler_name, data)

        player_name = self.validate_create_data(data)
        room_code = self.game_manager.create_room(self.connection_id, player_name, legacy_reply=legacy_reply)

        self.log_handler_success(handler_name, f'Created room {room_code}')

    def _join_room(self, handler_name, data, legacy_reply=False):
        self.log_handler_start(handler_name, data)

        room_code, player_name = self.validate_join_data(data)
        seat = self.game_manager.join_room(self.connection_id, room_code, player_name, legacy_reply=legacy_reply)

        self.log_handler_success(handler_name, f'Seat {seat} in room {room_code}')
