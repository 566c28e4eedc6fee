"""
Game Manager for the DraftRoom game

Coordinates the room registry, participant index, turn engine, timer scheduler
and broadcast gateway for each inbound action. Every room mutation runs under
that room's lock and its events are published before the lock is released.
"""

import logging
from typing import Any, Optional

from src.core.errors import IgnoredEvent, RoomNotFound
from src.core.models import ParticipantRecord
from src.services.room_state_presenter import RoomStatePresenter

logger = logging.getLogger(__name__)


class GameManager:
    """Applies player actions to rooms and fans out the results."""

    def __init__(self, room_registry, participant_index, turn_engine, timer_scheduler,
                 broadcast_gateway, presenter: Optional[RoomStatePresenter] = None):
        self.room_registry = room_registry
        self.participant_index = participant_index
        self.turn_engine = turn_engine
        self.timer_scheduler = timer_scheduler
        self.broadcast_gateway = broadcast_gateway
        self.presenter = presenter or RoomStatePresenter()

    def create_room(self, connection_id: str, player_name: Optional[str], legacy_reply: bool = False) -> str:
        """
        Open a new room with the sender in seat 1.

        Args:
            legacy_reply: Send the acknowledgment unwrapped, as older clients expect

        Returns:
            The new room code
        """
        previous = self.participant_index.lookup(connection_id)

        room_code, seat, room = self.room_registry.create_room(player_name, connection_id)
        with self.room_registry.room_operation(room_code):
            self.participant_index.bind(
                connection_id, seat, room_code, room.seats[seat].name, legacy_reply=legacy_reply
            )
            self.broadcast_gateway.subscribe(connection_id, room_code)
            self.broadcast_gateway.acknowledge(
                connection_id, 'gameCreated', self.presenter.create_room_ack(room, seat),
                envelope=not legacy_reply
            )

        if previous is not None:
            self._release_seat(previous)

        logger.info(f"Connection {connection_id} created room {room_code}")
        return room_code

    def join_room(self, connection_id: str, room_code: str, player_name: Optional[str],
                  legacy_reply: bool = False) -> int:
        """
        Seat the sender in an existing room.

        Args:
            legacy_reply: Send the acknowledgment unwrapped, as older clients expect

        Returns:
            The seat number taken

        Raises:
            IgnoredEvent: If the sender is already seated in this room
            RoomNotFound: If the room does not exist
            RoomFull: If seats 2 and 3 are taken
        """
        previous = self.participant_index.lookup(connection_id)
        if previous is not None and previous.room_code == room_code:
            raise IgnoredEvent(f"{connection_id} already seated in room {room_code}")

        with self.room_registry.locked_room(room_code) as room:
            if room is None:
                raise RoomNotFound(details={'room_code': room_code})
            seat, room = self.room_registry.join_room(room_code, player_name, connection_id)
            self.participant_index.bind(
                connection_id, seat, room_code, room.seats[seat].name, legacy_reply=legacy_reply
            )
            self.broadcast_gateway.subscribe(connection_id, room_code)
            self.broadcast_gateway.acknowledge(
                connection_id, 'gameJoined', self.presenter.create_room_ack(room, seat),
                envelope=not legacy_reply
            )
            self.broadcast_gateway.broadcast_player_joined(
                room_code, seat, self.presenter.create_game_state(room)
            )

        if previous is not None:
            self._release_seat(previous)

        logger.info(f"Connection {connection_id} joined room {room_code} in seat {seat}")
        return seat

    def start_game(self, connection_id: str, room_code: str) -> bool:
        """
        Start (or restart) the draft in the sender's room.

        Returns:
            True if a new countdown was scheduled for the room
        """
        self._require_participant(connection_id, room_code)

        with self.room_registry.locked_room(room_code) as room:
            effects = self.turn_engine.start_game(room)
            if room is not None:
                room.touch()
            self.broadcast_gateway.publish(room_code, effects)

        return self._activate_countdown(room_code, effects)

    def select(self, connection_id: str, room_code: str, position_id: str, player_data: Any):
        """Fill a roster position for the sender's seat and pass the turn."""
        record = self._require_participant(connection_id, room_code)

        with self.room_registry.locked_room(room_code) as room:
            self._require_room(room, room_code)
            effects = self.turn_engine.select(room, record.seat, position_id, player_data)
            room.touch()
            self.broadcast_gateway.publish(room_code, effects)

        self._activate_countdown(room_code, effects)

    def skip(self, connection_id: str, room_code: str):
        """Give up the sender's turn."""
        record = self._require_participant(connection_id, room_code)

        with self.room_registry.locked_room(room_code) as room:
            self._require_room(room, room_code)
            effects = self.turn_engine.skip(room, record.seat)
            room.touch()
            self.broadcast_gateway.publish(room_code, effects)

        self._activate_countdown(room_code, effects)

    def uses_legacy_replies(self, connection_id: str) -> bool:
        """Whether the connection sat down through createGame/joinGame."""
        record = self.participant_index.lookup(connection_id)
        return record is not None and record.legacy_reply

    def disconnect(self, connection_id: str) -> bool:
        """
        Free the seat held by a closed connection.

        The turn, the deadline and the room's countdown are left untouched.

        Returns:
            True if the connection was seated somewhere
        """
        record = self.participant_index.unbind(connection_id)
        if record is None:
            logger.debug(f"Disconnect from unseated connection {connection_id}")
            return False

        # The transport has already dropped the connection's room memberships
        self._release_seat(record, unsubscribe=False)
        logger.info(f"Connection {connection_id} left seat {record.seat} in room {record.room_code}")
        return True

    def _release_seat(self, record: ParticipantRecord, unsubscribe: bool = True):
        room_code = record.room_code
        with self.room_registry.locked_room(room_code) as room:
            if room is None:
                return
            if not self.room_registry.vacate_seat(room_code, record.seat, record.connection_id):
                return
            if unsubscribe:
                self.broadcast_gateway.unsubscribe(record.connection_id, room_code)
            self.broadcast_gateway.broadcast_player_disconnected(
                room_code, record.seat, self.presenter.create_game_state(room)
            )

    def _require_participant(self, connection_id: str, room_code: str) -> ParticipantRecord:
        record = self.participant_index.lookup(connection_id)
        if record is None:
            raise IgnoredEvent(f"{connection_id} is not seated")
        if record.room_code != room_code:
            raise IgnoredEvent(f"{connection_id} is not seated in room {room_code}")
        return record

    def _activate_countdown(self, room_code: str, effects) -> bool:
        if effects.activate_timer:
            return self.timer_scheduler.start(room_code)
        return False

    @staticmethod
    def _require_room(room, room_code: str):
        if room is None:
            raise IgnoredEvent(f"room {room_code} no longer exists")
