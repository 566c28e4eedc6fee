"""
Participant Index - Maps live Socket.IO connections to their room and seat.

This service handles:
- Binding a connection to a seat on create/join
- Lookup of the acting connection's seat for every inbound action
- Unbinding on disconnect or when a room is closed
"""

import logging
import threading
from typing import Any, Dict, List, Optional

from src.core.models import ParticipantRecord

logger = logging.getLogger(__name__)


class ParticipantIndex:
    """Manages connection -> seat bindings."""

    def __init__(self):
        """Initialize the participant index."""
        # connection_id -> ParticipantRecord
        self._records: Dict[str, ParticipantRecord] = {}
        self._lock = threading.Lock()
        logger.info("ParticipantIndex initialized")

    def bind(self, connection_id: str, seat: int, room_code: str, player_name: str,
             legacy_reply: bool = False) -> ParticipantRecord:
        """Create or overwrite the binding for a connection.

        Args:
            connection_id: Socket.IO connection ID
            seat: Seat number in the room
            room_code: Room the connection sits in
            player_name: Display name
            legacy_reply: Whether replies to this connection use the older unwrapped format

        Returns:
            The new record
        """
        record = ParticipantRecord(
            connection_id=connection_id,
            seat=seat,
            room_code=room_code,
            player_name=player_name,
            legacy_reply=legacy_reply
        )
        with self._lock:
            previous = self._records.get(connection_id)
            self._records[connection_id] = record

        if previous is not None:
            logger.info(
                f"Moved binding for {connection_id}: room {previous.room_code} seat {previous.seat} "
                f"-> room {room_code} seat {seat}"
            )
        else:
            logger.debug(f"Bound {connection_id} to seat {seat} in room {room_code}")
        return record

    def lookup(self, connection_id: str) -> Optional[ParticipantRecord]:
        """Get the binding for a connection, if any."""
        return self._records.get(connection_id)

    def unbind(self, connection_id: str) -> Optional[ParticipantRecord]:
        """Remove and return the binding for a connection.

        Returns:
            The removed record or None if the connection was not bound
        """
        with self._lock:
            record = self._records.pop(connection_id, None)
        if record:
            logger.debug(f"Unbound {connection_id} from seat {record.seat} in room {record.room_code}")
        return record

    def has_participant(self, connection_id: str) -> bool:
        return connection_id in self._records

    def get_room_participants(self, room_code: str) -> Dict[str, ParticipantRecord]:
        """Get all bindings into one room, keyed by connection ID."""
        with self._lock:
            return {cid: rec for cid, rec in self._records.items() if rec.room_code == room_code}

    def unbind_room(self, room_code: str) -> List[ParticipantRecord]:
        """Drop every binding into a room (used when the room is closed)."""
        with self._lock:
            removed = [rec for rec in self._records.values() if rec.room_code == room_code]
            for rec in removed:
                del self._records[rec.connection_id]

        if removed:
            logger.info(f"Unbound {len(removed)} participants from closed room {room_code}")
        return removed

    def count(self) -> int:
        return len(self._records)

    def get_debug_info(self) -> Dict[str, Any]:
        """Get debug information about active bindings.

        Returns:
            Dictionary with debug information
        """
        room_counts: Dict[str, int] = {}
        for record in list(self._records.values()):
            room_counts[record.room_code] = room_counts.get(record.room_code, 0) + 1

        return {
            'total_participants': len(self._records),
            'participants_by_room': room_counts,
            'active_rooms': len(room_counts)
        }
