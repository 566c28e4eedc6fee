"""
REST API endpoints for the DraftRoom application.
"""

import logging
from flask import Blueprint, jsonify

logger = logging.getLogger(__name__)

# Global references to services - will be set by registration function
room_registry = None
presenter = None


def create_api_blueprint(services):
    """Create and configure the API Blueprint with service dependencies."""
    global room_registry, presenter

    room_registry = services['room_registry']
    presenter = services['room_state_presenter']

    api = Blueprint('api', __name__)

    @api.route('/health')
    def health():
        return {'status': 'ok', 'rooms': room_registry.room_count()}

    @api.route('/api/rooms/<room_code>')
    def room_state(room_code):
        """Current game state of a room."""
        room_code = room_code.strip().upper()
        with room_registry.locked_room(room_code) as room:
            if room is None:
                return jsonify({'error': 'Room not found'}), 404
            return presenter.create_game_state(room)

    @api.route('/api/find-available-room')
    def find_available_room():
        """Find a room that has not started and still has a free seat."""
        room_code = room_registry.find_available_room()
        if room_code:
            logger.info(f'Found available room: {room_code}')
        return {'roomCode': room_code}

    return api
