"""
Services package for the DraftRoom game

Contains the services the room coordinator is composed from.
"""

from .concurrency_control_service import ConcurrencyControlService
from .participant_index import ParticipantIndex
from .room_state_presenter import RoomStatePresenter
from .broadcast_gateway import BroadcastGateway
from .timer_scheduler import TimerScheduler
from .validation_service import ValidationService
from .error_response_factory import ErrorResponseFactory

__all__ = [
    'ConcurrencyControlService',
    'ParticipantIndex',
    'RoomStatePresenter',
    'BroadcastGateway',
    'TimerScheduler',
    'ValidationService',
    'ErrorResponseFactory'
]
