"""
Timer Scheduler - Per-room turn countdowns and idle-room housekeeping.

This service handles:
- One cancellable countdown task per started room, ticking every 100ms
- Broadcasting the remaining time and forcing a turn advance on expiry
- Reaping rooms that have seen no player activity for too long
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from src.config.game_settings import get_game_settings

logger = logging.getLogger(__name__)


@dataclass
class _Countdown:
    thread: threading.Thread
    stop_event: threading.Event


class TimerScheduler:
    """Runs the turn countdown for every active room."""

    def __init__(self, room_registry, participant_index, turn_engine, broadcast_gateway,
                 clock: Optional[Callable[[], float]] = None):
        """Initialize the timer scheduler.

        Args:
            room_registry: Owner of the room states
            participant_index: Connection bindings, cleared when a room is reaped
            turn_engine: Applies the forced turn advance on expiry
            broadcast_gateway: Delivers timer and turn events to the room
            clock: Returns the current epoch time in seconds
        """
        self.room_registry = room_registry
        self.participant_index = participant_index
        self.turn_engine = turn_engine
        self.broadcast_gateway = broadcast_gateway
        self.clock = clock or time.time

        settings = get_game_settings()
        self.tick_interval = settings.timer_tick_interval
        self.room_idle_timeout_minutes = settings.room_idle_timeout_minutes
        self.reap_interval = settings.room_reap_interval_seconds

        self._countdowns: Dict[str, _Countdown] = {}
        self._countdowns_lock = threading.Lock()
        self._shutdown = threading.Event()
        self._housekeeping_thread: Optional[threading.Thread] = None

    # Countdown lifecycle

    def start(self, room_code: str) -> bool:
        """
        Start the countdown for a room unless one is already running.

        Returns:
            True if a new countdown was started, False if one was already active
        """
        with self._countdowns_lock:
            existing = self._countdowns.get(room_code)
            if existing and not existing.stop_event.is_set() and existing.thread.is_alive():
                logger.debug(f"Countdown already running for room {room_code}")
                return False

            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._run_countdown,
                args=(room_code, stop_event),
                name=f"countdown-{room_code}",
                daemon=True
            )
            self._countdowns[room_code] = _Countdown(thread=thread, stop_event=stop_event)
            thread.start()

        logger.info(f"Countdown started for room {room_code}")
        return True

    def stop(self, room_code: str) -> bool:
        """Cancel a room's countdown. Returns False if none was running."""
        with self._countdowns_lock:
            countdown = self._countdowns.pop(room_code, None)
        if countdown is None:
            return False

        countdown.stop_event.set()
        logger.info(f"Countdown stopped for room {room_code}")
        return True

    def stop_all(self):
        """Cancel every running countdown."""
        with self._countdowns_lock:
            room_codes = list(self._countdowns.keys())
        for room_code in room_codes:
            self.stop(room_code)

    def is_running(self, room_code: str) -> bool:
        with self._countdowns_lock:
            countdown = self._countdowns.get(room_code)
            return countdown is not None and not countdown.stop_event.is_set()

    def active_count(self) -> int:
        with self._countdowns_lock:
            return len(self._countdowns)

    def _run_countdown(self, room_code: str, stop_event: threading.Event):
        """Countdown loop for a single room; exits when the room or its deadline is gone."""
        while not stop_event.is_set():
            try:
                if not self.tick(room_code):
                    break
            except Exception as e:
                logger.error(f"Error in countdown for room {room_code}: {e}")
            stop_event.wait(self.tick_interval)

        with self._countdowns_lock:
            countdown = self._countdowns.get(room_code)
            if countdown is not None and countdown.stop_event is stop_event:
                del self._countdowns[room_code]
        logger.debug(f"Countdown loop exited for room {room_code}")

    def tick(self, room_code: str) -> bool:
        """
        Run one countdown step for a room.

        Broadcasts the remaining time and, once it reaches zero, advances the
        turn exactly once (the advance installs a fresh deadline).

        Returns:
            False when the countdown should terminate
        """
        with self.room_registry.locked_room(room_code) as room:
            if room is None or room.turn_deadline is None:
                return False

            remaining_ms = self.turn_engine.time_remaining_ms(room)
            self.broadcast_gateway.broadcast_timer_update(room_code, remaining_ms, room.current_turn)

            if remaining_ms == 0:
                logger.info(f"Turn expired for seat {room.current_turn} in room {room_code}")
                effects = self.turn_engine.advance_turn(room)
                self.broadcast_gateway.publish(room_code, effects)

        return True

    # Idle room housekeeping

    def start_housekeeping(self):
        """Start the background sweep that reaps idle rooms."""
        if self._housekeeping_thread and self._housekeeping_thread.is_alive():
            return
        self._shutdown.clear()
        self._housekeeping_thread = threading.Thread(
            target=self._housekeeping_loop, name="room-housekeeping", daemon=True
        )
        self._housekeeping_thread.start()
        logger.info("Room housekeeping started")

    def _housekeeping_loop(self):
        while not self._shutdown.wait(self.reap_interval):
            try:
                self.reap_idle_rooms()
            except Exception as e:
                logger.error(f"Error reaping idle rooms: {e}")

    def reap_idle_rooms(self) -> int:
        """
        Close rooms that have been inactive for too long.

        Returns:
            Number of rooms closed
        """
        idle_rooms = self.room_registry.get_inactive_room_codes(self.room_idle_timeout_minutes)
        closed = 0
        for room_code in idle_rooms:
            if self.close_room(room_code, reason='idle'):
                closed += 1

        if closed > 0:
            logger.info(f"Reaped {closed} idle rooms")
        return closed

    def close_room(self, room_code: str, reason: str) -> bool:
        """Notify, unsubscribe and unbind everyone in a room, then delete it and cancel its countdown."""
        with self.room_registry.locked_room(room_code) as room:
            if room is None:
                return False
            self.broadcast_gateway.broadcast_room_closed(room_code, reason)
            self.broadcast_gateway.close_room(room_code)
            self.participant_index.unbind_room(room_code)
            deleted = self.room_registry.delete_room(room_code)

        self.stop(room_code)
        if deleted:
            logger.info(f"Closed room {room_code} ({reason})")
        return deleted

    def shutdown(self):
        """Stop housekeeping and every countdown (process exit)."""
        self._shutdown.set()
        self.stop_all()
        if self._housekeeping_thread and self._housekeeping_thread.is_alive():
            self._housekeeping_thread.join(timeout=2)
        logger.info("TimerScheduler stopped")
