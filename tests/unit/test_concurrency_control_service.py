"""
Concurrency Control Service Unit Tests

Tests for per-room locking: lock lifecycle, re-entrancy and
serialization of concurrent work on the same room.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

from src.services.concurrency_control_service import ConcurrencyControlService


class TestRoomLocks:
    """Test lock creation and cleanup"""

    def setup_method(self):
        self.service = ConcurrencyControlService()

    def test_same_room_same_lock(self):
        assert self.service.get_room_lock('ABC123') is self.service.get_room_lock('ABC123')

    def test_different_rooms_different_locks(self):
        assert self.service.get_room_lock('ABC123') is not self.service.get_room_lock('XYZ789')

    def test_cleanup_room_lock(self):
        self.service.get_room_lock('ABC123')
        assert self.service.has_room_lock('ABC123')

        self.service.cleanup_room_lock('ABC123')

        assert not self.service.has_room_lock('ABC123')

    def test_cleanup_unknown_room_is_noop(self):
        self.service.cleanup_room_lock('NOPE42')
        assert not self.service.has_room_lock('NOPE42')

    def test_room_operation_is_reentrant(self):
        with self.service.room_operation('ABC123'):
            with self.service.room_operation('ABC123'):
                entered = True

        assert entered


class TestRoomOperationSerialization:
    """Concurrent operations on one room never interleave"""

    def test_same_room_operations_serialize(self):
        service = ConcurrencyControlService()
        active = []
        overlaps = []

        def work():
            with service.room_operation('ABC123'):
                active.append(1)
                if len(active) > 1:
                    overlaps.append(True)
                time.sleep(0.01)
                active.pop()

        with ThreadPoolExecutor(max_workers=8) as executor:
            for future in [executor.submit(work) for _ in range(16)]:
                future.result()

        assert overlaps == []

    def test_different_rooms_proceed_independently(self):
        service = ConcurrencyControlService()
        inside_first = threading.Event()
        release_first = threading.Event()

        def hold_first():
            with service.room_operation('ROOM01'):
                inside_first.set()
                release_first.wait(timeout=2)

        holder = threading.Thread(target=hold_first)
        holder.start()
        try:
            assert inside_first.wait(timeout=2)
            with service.room_operation('ROOM02'):
                second_entered = True
        finally:
            release_first.set()
            holder.join(timeout=2)

        assert second_entered
