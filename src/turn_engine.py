"""
Turn Engine for the DraftRoom game

Pure state-transition logic over a RoomState: starting the game, legal
selections, skips and the single turn-advance rule. Every operation returns
the room events it produced; callers hold the room lock and publish them.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from src.config.game_settings import get_game_settings
from src.core.errors import NotYourTurn, PositionFilled
from src.core.models import FIRST_SEAT, LAST_SEAT, RoomState
from src.services.room_state_presenter import RoomStatePresenter

logger = logging.getLogger(__name__)


@dataclass
class RoomEvent:
    """A single room-wide broadcast."""
    event: str
    payload: Dict[str, Any]


@dataclass
class Effects:
    """Outcome of a turn engine operation."""
    events: List[RoomEvent] = field(default_factory=list)
    activate_timer: bool = False

    def emit(self, event: str, payload: Dict[str, Any]) -> None:
        self.events.append(RoomEvent(event, payload))

    def extend(self, other: 'Effects') -> 'Effects':
        self.events.extend(other.events)
        self.activate_timer = self.activate_timer or other.activate_timer
        return self

    @property
    def event_names(self) -> List[str]:
        return [e.event for e in self.events]


class TurnEngine:
    """Turn order, selection legality and deadlines for draft rooms."""

    def __init__(self, presenter: Optional[RoomStatePresenter] = None,
                 clock: Optional[Callable[[], float]] = None,
                 turn_duration_seconds: Optional[int] = None):
        """
        Args:
            presenter: Builds the client payloads carried by the events
            clock: Returns the current epoch time in seconds
            turn_duration_seconds: Overrides the configured turn length for new rooms' deadlines
        """
        self.presenter = presenter or RoomStatePresenter()
        self.clock = clock or time.time
        self._turn_duration_override = turn_duration_seconds

    @staticmethod
    def next_seat(seat: int) -> int:
        """Fixed round robin 1 -> 2 -> 3 -> 1, regardless of occupancy."""
        return FIRST_SEAT if seat == LAST_SEAT else seat + 1

    def turn_duration(self, room: RoomState) -> int:
        if self._turn_duration_override is not None:
            return self._turn_duration_override
        return room.turn_duration_seconds or get_game_settings().turn_duration_seconds

    def _fresh_deadline(self, room: RoomState) -> float:
        return self.clock() + self.turn_duration(room)

    def start_game(self, room: Optional[RoomState]) -> Effects:
        """
        Put seat 1 on the clock and request the room's countdown.

        A missing room is a no-op. Restarting a running room resets the turn to seat 1.
        """
        effects = Effects()
        if room is None:
            return effects

        room.current_turn = FIRST_SEAT
        room.turn_deadline = self._fresh_deadline(room)

        effects.emit('gameStarted', {
            'gameState': self.presenter.create_game_state(room),
            'timerEndTime': self.presenter.deadline_ms(room.turn_deadline)
        })
        effects.activate_timer = True
        logger.info(f"Game started in room {room.room_code}")
        return effects

    def select(self, room: RoomState, seat: int, position_id: str, payload: Any) -> Effects:
        """
        Fill a roster position for the seat holding the turn, then advance.

        Raises:
            NotYourTurn: If seat does not hold the turn
            PositionFilled: If the seat already filled this position
        """
        if seat != room.current_turn:
            raise NotYourTurn(details={'current_turn': room.current_turn})
        if position_id in room.rosters[seat]:
            raise PositionFilled(details={'position_id': position_id})

        room.rosters[seat][position_id] = payload

        effects = Effects()
        effects.emit('playerSelected', {
            'playerId': seat,
            'positionId': position_id,
            'playerData': payload,
            'rosters': self.presenter.create_rosters(room)
        })
        logger.info(f"Seat {seat} selected {position_id} in room {room.room_code}")
        return effects.extend(self.advance_turn(room))

    def skip(self, room: RoomState, seat: int) -> Effects:
        """
        Give up the current turn.

        Raises:
            NotYourTurn: If seat does not hold the turn
        """
        if seat != room.current_turn:
            raise NotYourTurn(details={'current_turn': room.current_turn})

        effects = self.advance_turn(room)
        effects.emit('turnSkipped', {
            'playerId': seat,
            'gameState': self.presenter.create_game_state(room)
        })
        return effects

    def advance_turn(self, room: RoomState) -> Effects:
        """Move the turn to the next seat and reset the deadline.

        Every turn progression (selection, skip, timer expiry) goes through here.
        The first advance in a room that was never started puts it on the clock.
        """
        was_started = room.is_started
        room.current_turn = self.next_seat(room.current_turn)
        room.turn_deadline = self._fresh_deadline(room)

        effects = Effects(activate_timer=not was_started)
        effects.emit('turnChanged', {
            'currentTurn': room.current_turn,
            'timerEndTime': self.presenter.deadline_ms(room.turn_deadline)
        })
        logger.info(f"Turn advanced to seat {room.current_turn} in room {room.room_code}")
        return effects

    def time_remaining_ms(self, room: RoomState) -> Optional[int]:
        """Milliseconds left in the current turn, floored at zero; None before the game starts."""
        if room.turn_deadline is None:
            return None
        return max(0, math.ceil((room.turn_deadline - self.clock()) * 1000))
