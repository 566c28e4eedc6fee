"""
Base Handler Classes

This module provides base classes for Socket.IO handlers with common patterns
for service access, payload validation and logging.
"""

import logging
from abc import ABC
from typing import Any, Dict, Optional, Tuple
from flask import request

from container import get_container

logger = logging.getLogger(__name__)


class BaseHandler(ABC):
    """
    Abstract base class for all Socket.IO handlers.

    Provides service access through the container and request logging.
    """

    def __init__(self):
        self._container = get_container()

    @property
    def game_manager(self):
        """Get the game manager service."""
        return self._container.get('GameManager')

    @property
    def validation_service(self):
        """Get the validation service."""
        return self._container.get('ValidationService')

    @property
    def connection_id(self) -> str:
        """Socket.IO sid of the requesting client."""
        return request.sid  # type: ignore[attr-defined]

    @property
    def uses_legacy_replies(self) -> bool:
        """Whether the requesting client sat down through createGame/joinGame."""
        return self.game_manager.uses_legacy_replies(self.connection_id)

    def log_handler_start(self, handler_name: str, data: Any = None) -> None:
        """Log the start of handler execution."""
        logger.info(f'{handler_name} called by client: {self.connection_id}')
        if data:
            logger.debug(f'{handler_name} data: {data}')

    def log_handler_success(self, handler_name: str, message: Optional[str] = None) -> None:
        """Log successful handler completion."""
        log_msg = f'{handler_name} completed successfully for client: {self.connection_id}'
        if message:
            log_msg += f' - {message}'
        logger.info(log_msg)


class ValidationHandlerMixin:
    """
    Mixin for handlers that need common validation patterns.

    Every helper raises IgnoredEvent on malformed input.
    """

    # Type hints for expected attributes from BaseHandler
    validation_service: Any  # Will be injected by container

    def validate_create_data(self, data: Any) -> Optional[str]:
        """Extract the optional display name from a createRoom payload."""
        payload = self.validation_service.validate_payload(data)
        return self.validation_service.validate_player_name(payload.get('playerName'))

    def validate_join_data(self, data: Any) -> Tuple[str, Optional[str]]:
        """
        Validate room join data.

        Returns:
            Tuple of (room_code, player_name)
        """
        payload = self.validation_service.validate_payload(data)
        room_code = self.validation_service.validate_room_code(payload.get('roomCode'))
        player_name = self.validation_service.validate_player_name(payload.get('playerName'))
        return room_code, player_name

    def validate_room_action_data(self, data: Any) -> Tuple[str, Dict[str, Any]]:
        """
        Validate a payload that targets a room.

        Returns:
            Tuple of (room_code, payload)
        """
        payload = self.validation_service.validate_payload(data)
        room_code = self.validation_service.validate_room_code(payload.get('roomCode'))
        return room_code, payload

    def validate_selection_data(self, data: Any) -> Tuple[str, str, Any]:
        """
        Validate a selectPlayer payload.

        Returns:
            Tuple of (room_code, position_id, player_data)
        """
        room_code, payload = self.validate_room_action_data(data)
        position_id = self.validation_service.validate_position_id(payload.get('positionId'))
        player_data = self.validation_service.validate_player_data(payload.get('playerData'))
        return room_code, position_id, player_data


class BaseRoomHandler(BaseHandler, ValidationHandlerMixin):
    """Base class for handlers that seat connections in rooms."""
    pass


class BaseGameHandler(BaseHandler, ValidationHandlerMixin):
    """Base class for handlers that drive the draft."""
    pass
