"""
Room and participant data model.

A RoomState is owned by the RoomRegistry and only ever mutated while the
room's lock is held. ParticipantRecords are owned by the ParticipantIndex.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

SEAT_NUMBERS = (1, 2, 3)
FIRST_SEAT = SEAT_NUMBERS[0]
LAST_SEAT = SEAT_NUMBERS[-1]


@dataclass
class SeatOccupant:
    """A connection sitting in one of the room's seats."""
    connection_id: str
    name: str
    ready: bool = False


@dataclass
class RoomState:
    """Live state of a single draft room."""
    room_code: str
    turn_duration_seconds: int
    seats: Dict[int, Optional[SeatOccupant]] = field(
        default_factory=lambda: {seat: None for seat in SEAT_NUMBERS}
    )
    rosters: Dict[int, Dict[str, Any]] = field(
        default_factory=lambda: {seat: {} for seat in SEAT_NUMBERS}
    )
    current_turn: int = FIRST_SEAT
    turn_deadline: Optional[float] = None  # epoch seconds
    created_at: datetime = field(default_factory=datetime.now)
    last_activity: datetime = field(default_factory=datetime.now)

    @property
    def is_started(self) -> bool:
        return self.turn_deadline is not None

    def empty_seats(self) -> List[int]:
        return [seat for seat in SEAT_NUMBERS if self.seats[seat] is None]

    def touch(self) -> None:
        """Record player activity; idle rooms are reaped based on this."""
        self.last_activity = datetime.now()


@dataclass
class ParticipantRecord:
    """Binding of a live connection to its seat in a room."""
    connection_id: str
    seat: int
    room_code: str
    player_name: str
    legacy_reply: bool = False  # joined through createGame/joinGame
