"""
Error Response Factory for the DraftRoom game

Provides standardized error and success response creation, and the decorator
that turns handler exceptions into replies to the acting connection.
"""

import logging
import traceback
from functools import wraps
from typing import Any, Callable, Dict, Optional

from flask_socketio import emit

from src.core.errors import ErrorCode, GameError, IgnoredEvent

logger = logging.getLogger(__name__)


class ErrorResponseFactory:
    """Factory responsible for creating standardized error and success responses."""

    def create_success_response(self, data: Dict) -> Dict:
        """
        Create standardized success response.

        Args:
            data: Response data

        Returns:
            Standardized success response
        """
        return {
            "success": True,
            "data": data
        }

    def create_error_response(self, code: ErrorCode, message: str, details: Optional[Dict] = None) -> Dict:
        """
        Create standardized error response.

        Args:
            code: Error code enum
            message: Human-readable error message
            details: Optional additional error details

        Returns:
            Standardized error response
        """
        return {
            "success": False,
            "error": {
                "code": code.value,
                "message": message,
                "details": details or {}
            }
        }

    def emit_error(self, code: ErrorCode, message: str, details: Optional[Dict] = None):
        """
        Emit standardized error response to the requesting client only.

        Args:
            code: Error code enum
            message: Human-readable error message
            details: Optional additional error details
        """
        error_response = self.create_error_response(code, message, details)

        logger.warning(f"Emitting error: {code.value} - {message}")
        emit('error', error_response)

    def emit_game_error(self, error: GameError):
        """
        Emit a domain rejection to the requesting client.

        Args:
            error: GameError instance
        """
        self.emit_error(error.code, error.message, error.details)

    def emit_legacy_error(self, error: GameError):
        """Emit a domain rejection as the bare reason string older clients expect."""
        logger.warning(f"Emitting legacy error: {error.code.value} - {error.message}")
        emit('error', error.message)

    def log_unexpected_exception(self, e: Exception, context: str = "Unknown"):
        """
        Log an unexpected handler failure. Nothing is sent to the client.

        Args:
            e: Exception instance
            context: Context where the exception occurred
        """
        logger.error(f"Unexpected exception in {context}: {str(e)}")
        logger.error(f"Exception traceback: {traceback.format_exc()}")


def with_error_handling(func):
    """
    Decorator for Socket.IO event handlers to provide consistent error handling.

    Domain rejections are reported to the sender, ignored actions are dropped
    and anything unexpected is logged so a bad event never takes the server down.
    """
    return _handle_errors(func, lambda handler: False)


def with_legacy_error_handling(func):
    """Like with_error_handling, but rejections go out as bare reason strings."""
    return _handle_errors(func, lambda handler: True)


def with_sender_error_handling(func):
    """
    Like with_error_handling for events every client generation sends.

    Rejections use the reply format the sender sat down with, read from the
    handler's uses_legacy_replies property.
    """
    return _handle_errors(func, lambda handler: handler.uses_legacy_replies)


def _handle_errors(func, legacy_errors: Callable[[Any], bool]):
    @wraps(func)
    def wrapper(handler, *args: Any, **kwargs: Any):
        try:
            return func(handler, *args, **kwargs)
        except GameError as e:
            if legacy_errors(handler):
                ErrorResponseFactory().emit_legacy_error(e)
            else:
                ErrorResponseFactory().emit_game_error(e)
        except IgnoredEvent as e:
            logger.debug(f"Ignored {func.__name__}: {e.reason}")
        except Exception as e:
            ErrorResponseFactory().log_unexpected_exception(e, func.__name__)

    return wrapper
