"""
Socket.IO event handlers for the DraftRoom game.

This module provides the main registration function and the connection/disconnection
handlers; every other event goes through the SocketEventRouter.
"""

import logging
from flask import request
from flask_socketio import emit

from config_factory import get_config
from container import get_container
from .socket_event_router import setup_router
from .room_connection_handler import RoomConnectionHandler
from .game_action_handler import GameActionHandler

logger = logging.getLogger(__name__)


def register_socket_handlers(socketio_instance):
    """Register all socket handlers with the SocketIO instance."""
    router = setup_router(socketio_instance)

    room_handler = RoomConnectionHandler()
    game_handler = GameActionHandler()

    # Connection lifecycle events bypass the router
    socketio_instance.on_event('connect', handle_connect)
    socketio_instance.on_event('disconnect', handle_disconnect)

    router.register_route('createRoom', room_handler.handle_create_room)
    router.register_route('joinRoom', room_handler.handle_join_room)

    # Event names of older clients, answered in their reply format
    router.register_route('createGame', room_handler.handle_create_game)
    router.register_route('joinGame', room_handler.handle_join_game)

    router.register_route('startGame', game_handler.handle_start_game)
    router.register_route('selectPlayer', game_handler.handle_select_player)
    router.register_route('skipTurn', game_handler.handle_skip_turn)

    router.register_with_socketio()

    logger.info(f"Registered {len(router.get_registered_events())} socket event handlers")
    return router


def handle_connect(auth=None):
    """Handle client connection with optional Origin enforcement in production."""
    app_config = get_config()

    origin = request.headers.get('Origin')
    if app_config.is_production and app_config.allowed_origins:
        if origin and origin not in app_config.allowed_origins:
            logger.warning(f'Rejecting connection from disallowed Origin: {origin}')
            return False

    logger.info(f'Client connected: {request.sid} from Origin: {origin}')  # type: ignore[attr-defined]
    emit('connected', {'status': 'Connected to DraftRoom server'})


def handle_disconnect(reason=None):
    """Free the seat of a closed connection."""
    sid = request.sid  # type: ignore[attr-defined]
    logger.info(f'Client disconnected: {sid} ({reason})')

    game_manager = get_container().get('GameManager')
    try:
        game_manager.disconnect(sid)
    except Exception as e:
        logger.error(f'Error releasing seat for {sid}: {e}')
