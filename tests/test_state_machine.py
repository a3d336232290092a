# Area: Event Tests
"""Tests for the Event State Machine."""

import pytest
from circle_royale._event.state_machine import EventStateMachine, TRANSITIONS
from circle_royale._event.enums import EventState, EventTransition, EventStatus, NO_WINNER


class TestEventStateMachineBase:
    """Tests for basic state machine functionality."""

    def test_initial_state_is_idle(self):
        """Test that state machine starts in IDLE."""
        assert EventStateMachine().current_state == EventState.IDLE

    def test_can_transition_returns_true_for_valid(self):
        """Test can_transition returns True for valid transitions."""
        sm = EventStateMachine()
        assert sm.can_transition(EventTransition.START_REQUESTED) is True

    def test_can_transition_returns_false_for_invalid(self):
        """Test can_transition returns False for invalid transitions."""
        sm = EventStateMachine()
        assert sm.can_transition(EventTransition.STOPPED) is False

    def test_transition_raises_on_invalid(self):
        """Test that invalid transition raises ValueError."""
        sm = EventStateMachine()
        with pytest.raises(ValueError):
            sm.transition(EventTransition.WINNER_DECLARED)

    def test_reset(self):
        """Test reset returns to IDLE from any state."""
        sm = EventStateMachine()
        sm.transition(EventTransition.START_REQUESTED)
        sm.reset()
        assert sm.current_state == EventState.IDLE


class TestEventStateMachineTransitions:
    """Tests for specific state transitions."""

    def test_start_then_stop(self):
        """Test IDLE -> STARTING -> LIVE -> IDLE via STOPPED."""
        sm = EventStateMachine()
        assert sm.transition(EventTransition.START_REQUESTED) == EventState.STARTING
        assert sm.transition(EventTransition.STARTED) == EventState.LIVE
        assert sm.transition(EventTransition.STOPPED) == EventState.IDLE

    def test_winner_ends_event(self):
        """Test LIVE -> IDLE via WINNER_DECLARED."""
        sm = EventStateMachine()
        sm.transition(EventTransition.START_REQUESTED)
        sm.transition(EventTransition.STARTED)
        assert sm.transition(EventTransition.WINNER_DECLARED) == EventState.IDLE

    def test_start_failure_returns_to_idle(self):
        """Test STARTING -> IDLE via START_FAILED."""
        sm = EventStateMachine()
        sm.transition(EventTransition.START_REQUESTED)
        assert sm.transition(EventTransition.START_FAILED) == EventState.IDLE

    def test_no_double_start(self):
        """Test a second start request is rejected while live."""
        sm = EventStateMachine()
        sm.transition(EventTransition.START_REQUESTED)
        sm.transition(EventTransition.STARTED)
        assert not sm.can_transition(EventTransition.START_REQUESTED)

    def test_only_one_terminal_transition(self):
        """Test a winner cannot be declared after a stop."""
        sm = EventStateMachine()
        sm.transition(EventTransition.START_REQUESTED)
        sm.transition(EventTransition.STARTED)
        sm.transition(EventTransition.STOPPED)
        with pytest.raises(ValueError):
            sm.transition(EventTransition.WINNER_DECLARED)

    def test_every_state_has_an_entry(self):
        """Test the table covers every state."""
        assert set(TRANSITIONS) == set(EventState)


class TestEnums:
    """Tests for persisted status values."""

    def test_status_values(self):
        """Test the status markers stored in the events table."""
        assert [s.value for s in EventStatus] == ["WAITING", "LIVE", "FINISHED", "CANCELLED"]

    def test_no_winner_sentinel(self):
        """Test the no-winner sentinel."""
        assert NO_WINNER == "NONE"
