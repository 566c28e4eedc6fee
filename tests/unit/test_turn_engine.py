"""
Turn Engine Unit Tests
Tests turn order, selection legality, skips and deadline handling.
"""

import pytest

from src.core.errors import NotYourTurn, PositionFilled
from src.core.models import RoomState, SeatOccupant
from src.turn_engine import Effects, TurnEngine
from tests.helpers.fake_clock import FakeClock


def make_room(code='ABC123'):
    room = RoomState(room_code=code, turn_duration_seconds=15)
    room.seats[1] = SeatOccupant('sid-1', 'Alice')
    room.seats[2] = SeatOccupant('sid-2', 'Bob')
    return room


class TestTurnEngine:
    """Test TurnEngine state transitions"""

    def setup_method(self):
        self.clock = FakeClock()
        self.engine = TurnEngine(clock=self.clock)
        self.room = make_room()

    def started_room(self):
        self.engine.start_game(self.room)
        return self.room

    def test_next_seat_round_robin(self):
        assert TurnEngine.next_seat(1) == 2
        assert TurnEngine.next_seat(2) == 3
        assert TurnEngine.next_seat(3) == 1

    def test_start_game_sets_turn_and_deadline(self):
        self.room.current_turn = 3

        effects = self.engine.start_game(self.room)

        assert self.room.current_turn == 1
        assert self.room.turn_deadline == self.clock.now + 15
        assert effects.activate_timer is True
        assert effects.event_names == ['gameStarted']
        payload = effects.events[0].payload
        assert payload['timerEndTime'] == round((self.clock.now + 15) * 1000)
        assert payload['gameState']['currentTurn'] == 1

    def test_start_game_missing_room_is_noop(self):
        effects = self.engine.start_game(None)

        assert effects.events == []
        assert effects.activate_timer is False

    def test_select_fills_position_and_advances(self):
        self.started_room()
        self.clock.advance(4)

        effects = self.engine.select(self.room, 1, 'QB', {'name': 'X'})

        assert self.room.rosters[1]['QB'] == {'name': 'X'}
        assert self.room.current_turn == 2
        assert self.room.turn_deadline == self.clock.now + 15
        assert effects.event_names == ['playerSelected', 'turnChanged']

        selected = effects.events[0].payload
        assert selected['playerId'] == 1
        assert selected['positionId'] == 'QB'
        assert selected['playerData'] == {'name': 'X'}
        assert selected['rosters']['1'] == {'QB': {'name': 'X'}}

        changed = effects.events[1].payload
        assert changed == {'currentTurn': 2, 'timerEndTime': round((self.clock.now + 15) * 1000)}
        assert effects.activate_timer is False

    def test_select_out_of_turn_rejected_without_mutation(self):
        self.started_room()
        deadline = self.room.turn_deadline

        with pytest.raises(NotYourTurn):
            self.engine.select(self.room, 2, 'QB', {'name': 'Y'})

        assert self.room.rosters == {1: {}, 2: {}, 3: {}}
        assert self.room.current_turn == 1
        assert self.room.turn_deadline == deadline

    def test_select_filled_position_rejected(self):
        self.started_room()
        self.engine.select(self.room, 1, 'QB', {'name': 'X'})
        self.engine.skip(self.room, 2)
        self.engine.skip(self.room, 3)
        assert self.room.current_turn == 1

        with pytest.raises(PositionFilled) as exc_info:
            self.engine.select(self.room, 1, 'QB', {'name': 'Z'})

        assert exc_info.value.message == 'Position already filled'
        assert self.room.rosters[1]['QB'] == {'name': 'X'}
        assert self.room.current_turn == 1

    def test_same_position_allowed_for_different_seats(self):
        self.started_room()
        self.engine.select(self.room, 1, 'QB', {'name': 'X'})
        self.engine.select(self.room, 2, 'QB', {'name': 'Y'})

        assert self.room.rosters[1]['QB'] == {'name': 'X'}
        assert self.room.rosters[2]['QB'] == {'name': 'Y'}

    def test_select_before_start_fills_and_puts_room_on_clock(self):
        effects = self.engine.select(self.room, 1, 'QB', {'name': 'X'})

        assert self.room.rosters[1]['QB'] == {'name': 'X'}
        assert self.room.current_turn == 2
        assert self.room.turn_deadline == self.clock.now + 15
        assert effects.event_names == ['playerSelected', 'turnChanged']
        assert effects.activate_timer is True

    def test_select_before_start_out_of_turn_rejected(self):
        with pytest.raises(NotYourTurn):
            self.engine.select(self.room, 2, 'QB', {'name': 'Y'})

        assert self.room.rosters[2] == {}
        assert self.room.current_turn == 1
        assert self.room.turn_deadline is None

    def test_select_filled_position_before_start_rejected(self):
        self.room.rosters[1]['QB'] = {'name': 'X'}

        with pytest.raises(PositionFilled):
            self.engine.select(self.room, 1, 'QB', {'name': 'Z'})

        assert self.room.turn_deadline is None

    def test_skip_advances_then_reports_skip(self):
        self.started_room()

        effects = self.engine.skip(self.room, 1)

        assert self.room.current_turn == 2
        assert effects.event_names == ['turnChanged', 'turnSkipped']
        skipped = effects.events[1].payload
        assert skipped['playerId'] == 1
        assert skipped['gameState']['currentTurn'] == 2

    def test_skip_out_of_turn_rejected(self):
        self.started_room()

        with pytest.raises(NotYourTurn):
            self.engine.skip(self.room, 3)

        assert self.room.current_turn == 1

    def test_skip_before_start_out_of_turn_rejected(self):
        with pytest.raises(NotYourTurn):
            self.engine.skip(self.room, 2)

        assert self.room.turn_deadline is None

    def test_skip_before_start_advances_and_puts_room_on_clock(self):
        effects = self.engine.skip(self.room, 1)

        assert self.room.current_turn == 2
        assert self.room.turn_deadline == self.clock.now + 15
        assert effects.activate_timer is True

    def test_turn_order_cycles_regardless_of_cause(self):
        self.started_room()
        turns = []

        self.engine.select(self.room, 1, 'QB', {})
        turns.append(self.room.current_turn)
        self.engine.skip(self.room, 2)
        turns.append(self.room.current_turn)
        self.engine.advance_turn(self.room)
        turns.append(self.room.current_turn)
        self.engine.advance_turn(self.room)
        turns.append(self.room.current_turn)
        self.engine.select(self.room, 2, 'RB', {})
        turns.append(self.room.current_turn)

        assert turns == [2, 3, 1, 2, 3]

    def test_advance_passes_through_empty_seat(self):
        self.started_room()
        assert self.room.seats[3] is None

        self.engine.advance_turn(self.room)
        self.engine.advance_turn(self.room)

        assert self.room.current_turn == 3

    def test_every_advance_sets_future_deadline(self):
        self.started_room()
        for _ in range(6):
            self.clock.advance(20)
            self.engine.advance_turn(self.room)
            assert self.room.turn_deadline > self.clock.now

    def test_time_remaining(self):
        assert self.engine.time_remaining_ms(self.room) is None

        self.started_room()
        assert self.engine.time_remaining_ms(self.room) == 15000

        self.clock.advance(14.5)
        assert self.engine.time_remaining_ms(self.room) == 500

        self.clock.advance(1)
        assert self.engine.time_remaining_ms(self.room) == 0

    def test_turn_duration_override(self):
        engine = TurnEngine(clock=self.clock, turn_duration_seconds=5)

        engine.start_game(self.room)

        assert self.room.turn_deadline == self.clock.now + 5


class TestEffects:

    def test_extend_keeps_order_and_timer_flag(self):
        first = Effects()
        first.emit('a', {})
        second = Effects(activate_timer=True)
        second.emit('b', {})

        combined = first.extend(second)

        assert combined is first
        assert combined.event_names == ['a', 'b']
        assert combined.activate_timer is True
