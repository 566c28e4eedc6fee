"""
Core error definitions for the DraftRoom game

Provides the domain error taxonomy reported back to the acting connection,
plus the marker exception for actions that are dropped without a reply.
"""

from enum import Enum
from typing import Dict, Optional


class ErrorCode(Enum):
    """Standardized error codes for rejected actions."""

    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_FULL = "ROOM_FULL"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    POSITION_FILLED = "POSITION_FILLED"


class GameError(Exception):
    """Base class for domain rejections of a single inbound action."""

    code: ErrorCode
    default_message = "Action rejected"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class RoomNotFound(GameError):
    code = ErrorCode.ROOM_NOT_FOUND
    default_message = "Room not found"


class RoomFull(GameError):
    code = ErrorCode.ROOM_FULL
    default_message = "Room is full"


class NotYourTurn(GameError):
    code = ErrorCode.NOT_YOUR_TURN
    default_message = "Not your turn"


class PositionFilled(GameError):
    code = ErrorCode.POSITION_FILLED
    default_message = "Position already filled"


class IgnoredEvent(Exception):
    """Raised for malformed, unknown or out-of-context actions. Never reported to clients."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
