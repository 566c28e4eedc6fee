"""
Validation Service for the DraftRoom game

Normalizes inbound Socket.IO payloads. Anything malformed is reported as an
IgnoredEvent so the action is dropped without a reply.
"""

import logging
import re
from typing import Any, Dict, Optional

from src.config.game_settings import get_game_settings
from src.core.errors import IgnoredEvent

logger = logging.getLogger(__name__)


class ValidationService:
    """Service responsible for inbound payload validation and sanitization."""

    MAX_ROOM_CODE_LENGTH = 16
    MAX_POSITION_ID_LENGTH = 64

    ROOM_CODE_PATTERN = re.compile(r'^[A-Z0-9]+$')
    CONTROL_CHARS = re.compile(r'[\x00-\x1F\x7F]')

    def __init__(self, max_player_name_length: Optional[int] = None):
        self.max_player_name_length = max_player_name_length or get_game_settings().max_player_name_length

    def validate_payload(self, data: Any) -> Dict:
        """
        Validate Socket.IO event data.

        Raises:
            IgnoredEvent: If data is not a JSON object
        """
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise IgnoredEvent("payload is not an object")
        return data

    def validate_room_code(self, room_code: Any) -> str:
        """
        Validate and normalize a room code.

        Returns:
            Upper-cased room code

        Raises:
            IgnoredEvent: If the code is missing or not alphanumeric
        """
        if not isinstance(room_code, str):
            raise IgnoredEvent("roomCode missing")

        room_code = room_code.strip().upper()
        if not room_code or len(room_code) > self.MAX_ROOM_CODE_LENGTH:
            raise IgnoredEvent("roomCode has invalid length")
        if not self.ROOM_CODE_PATTERN.match(room_code):
            raise IgnoredEvent("roomCode is not alphanumeric")

        return room_code

    def validate_player_name(self, player_name: Any) -> Optional[str]:
        """
        Sanitize a display name.

        Returns:
            Cleaned name, or None when missing or blank so the seat default applies

        Raises:
            IgnoredEvent: If the name is present but not a string
        """
        if player_name is None:
            return None
        if not isinstance(player_name, str):
            raise IgnoredEvent("playerName is not a string")

        player_name = self.CONTROL_CHARS.sub('', player_name).strip()
        if not player_name:
            return None

        if len(player_name) > self.max_player_name_length:
            logger.debug(f"Truncating player name to {self.max_player_name_length} characters")
            player_name = player_name[:self.max_player_name_length].rstrip()

        return player_name

    def validate_position_id(self, position_id: Any) -> str:
        if not isinstance(position_id, str) or not position_id.strip():
            raise IgnoredEvent("positionId missing")
        position_id = position_id.strip()
        if len(position_id) > self.MAX_POSITION_ID_LENGTH:
            raise IgnoredEvent("positionId too long")
        return position_id

    def validate_player_data(self, player_data: Any) -> Any:
        """Selection payloads are opaque; only an absent value is rejected."""
        if player_data is None:
            raise IgnoredEvent("playerData missing")
        return player_data
