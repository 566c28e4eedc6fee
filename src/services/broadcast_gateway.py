"""
Broadcast Gateway - Centralized Socket.IO message delivery.

This service handles all Socket.IO emissions in a centralized way:
- Room-wide broadcasts of turn engine events
- Connection-scoped acknowledgments
- Room subscription management on the Socket.IO server

Delivery is best-effort: a failed emission is logged and never propagated.
"""

import logging
from typing import Any, Dict

from src.services.error_response_factory import ErrorResponseFactory

logger = logging.getLogger(__name__)

NAMESPACE = '/'


class BroadcastGateway:
    """Centralized service for all Socket.IO broadcasting operations."""

    def __init__(self, socketio, response_factory=None):
        """Initialize the broadcast gateway.

        Args:
            socketio: Flask-SocketIO instance for emitting messages
            response_factory: Builds the success envelope used for acknowledgments
        """
        self.socketio = socketio
        self.response_factory = response_factory or ErrorResponseFactory()

    # Core emission methods

    def to_room(self, room_code: str, event: str, payload: Dict[str, Any]):
        """Emit an event to every connection subscribed to a room."""
        try:
            self.socketio.emit(event, payload, to=room_code, namespace=NAMESPACE)
            logger.debug(f'Emitted {event} to room {room_code}')
        except Exception as e:
            logger.error(f'Error emitting {event} to room {room_code}: {e}')

    def to_connection(self, connection_id: str, event: str, payload: Dict[str, Any]):
        """Emit an event to a single connection."""
        try:
            self.socketio.emit(event, payload, to=connection_id, namespace=NAMESPACE)
            logger.debug(f'Emitted {event} to connection {connection_id}')
        except Exception as e:
            logger.error(f'Error emitting {event} to connection {connection_id}: {e}')

    def acknowledge(self, connection_id: str, event: str, data: Dict[str, Any], envelope: bool = True):
        """Send an acknowledgment to the acting connection.

        Args:
            envelope: Wrap the data in the success envelope; older clients read it unwrapped
        """
        payload = self.response_factory.create_success_response(data) if envelope else data
        self.to_connection(connection_id, event, payload)

    def publish(self, room_code: str, effects):
        """Broadcast every event produced by a turn engine operation, in order."""
        for room_event in effects.events:
            self.to_room(room_code, room_event.event, room_event.payload)

    # Subscription management

    def subscribe(self, connection_id: str, room_code: str):
        """Add a connection to the room's broadcast group."""
        try:
            self.socketio.server.enter_room(connection_id, room_code, namespace=NAMESPACE)
            logger.debug(f'Connection {connection_id} subscribed to room {room_code}')
        except Exception as e:
            logger.error(f'Error subscribing {connection_id} to room {room_code}: {e}')

    def unsubscribe(self, connection_id: str, room_code: str):
        """Remove a connection from the room's broadcast group."""
        try:
            self.socketio.server.leave_room(connection_id, room_code, namespace=NAMESPACE)
            logger.debug(f'Connection {connection_id} unsubscribed from room {room_code}')
        except Exception as e:
            logger.error(f'Error unsubscribing {connection_id} from room {room_code}: {e}')

    def close_room(self, room_code: str):
        """Drop every subscription to a room."""
        try:
            self.socketio.server.close_room(room_code, namespace=NAMESPACE)
            logger.debug(f'Closed broadcast group for room {room_code}')
        except Exception as e:
            logger.error(f'Error closing room {room_code}: {e}')

    # High-level broadcast methods

    def broadcast_timer_update(self, room_code: str, time_remaining_ms: int, current_turn: int):
        """Broadcast the countdown for the current turn."""
        self.to_room(room_code, 'timerUpdate', {
            'timeRemaining': time_remaining_ms,
            'currentTurn': current_turn
        })

    def broadcast_player_joined(self, room_code: str, seat: int, game_state: Dict[str, Any]):
        self.to_room(room_code, 'playerJoined', {
            'playerId': seat,
            'gameState': game_state
        })

    def broadcast_player_disconnected(self, room_code: str, seat: int, game_state: Dict[str, Any]):
        self.to_room(room_code, 'playerDisconnected', {
            'playerId': seat,
            'gameState': game_state
        })

    def broadcast_room_closed(self, room_code: str, reason: str):
        self.to_room(room_code, 'roomClosed', {
            'roomCode': room_code,
            'reason': reason
        })
