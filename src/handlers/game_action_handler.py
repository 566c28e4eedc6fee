"""
Game Action Handler

This module handles Socket.IO events related to draft actions,
including starting the game, selecting a position and skipping a turn.
"""

import logging

from src.services.error_response_factory import with_sender_error_handling
from .base_handler import BaseGameHandler

logger = logging.getLogger(__name__)


class GameActionHandler(BaseGameHandler):
    """Handler for draft actions in the sender's room."""

    @with_sender_error_handling
    def handle_start_game(self, data):
        """
        Handle request to start (or restart) the draft.

        Expected data format: {'roomCode': 'ABC123'}
        """
        self.log_handler_start('handle_start_game', data)

        room_code, _ = self.validate_room_action_data(data)
        self.game_manager.start_game(self.connection_id, room_code)

        self.log_handler_success('handle_start_game', f'Room {room_code}')

    @with_sender_error_handling
    def handle_select_player(self, data):
        """
        Handle a roster selection by the seat holding the turn.

        Expected data format:
        {
            'roomCode': 'ABC123',
            'positionId': 'QB',
            'playerData': {...}
        }
        """
        self.log_handler_start('handle_select_player', data)

        room_code, position_id, player_data = self.validate_selection_data(data)
        self.game_manager.select(self.connection_id, room_code, position_id, player_data)

        self.log_handler_success('handle_select_player', f'{position_id} in room {room_code}')

    @with_sender_error_handling
    def handle_skip_turn(self, data):
        """Handle the seat holding the turn passing it on."""
        self.log_handler_start('handle_skip_turn', data)

        room_code, _ = self.validate_room_action_data(data)
        self.game_manager.skip(self.connection_id, room_code)

        self.log_handler_success('handle_skip_turn', f'Room {room_code}')
