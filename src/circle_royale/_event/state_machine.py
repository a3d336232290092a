# Area: Event
"""
circle_royale._event.state_machine — Event State Machine
========================================================

Tracks whether an event is idle, starting or live, and rejects
transitions that would allow two events or two terminal paths.
"""

import logging
from .enums import EventState, EventTransition

logger = logging.getLogger("circle_royale.state_machine")

# Valid state transitions: {current_state: {event: next_state}}
TRANSITIONS = {
    EventState.IDLE: {
        EventTransition.START_REQUESTED: EventState.STARTING,
    },
    EventState.STARTING: {
        EventTransition.STARTED: EventState.LIVE,
        EventTransition.START_FAILED: EventState.IDLE,
    },
    EventState.LIVE: {
        EventTransition.STOPPED: EventState.IDLE,
        EventTransition.WINNER_DECLARED: EventState.IDLE,
    },
}


class EventStateMachine:
    """
    State machine for the orchestrator's single event.

    Attributes:
        current_state: The current state of the state machine
    """

    def __init__(self):
        """Initialize state machine in IDLE."""
        self.current_state = EventState.IDLE

    def can_transition(self, event: EventTransition) -> bool:
        """
        Check if a transition is valid from current state.

        Args:
            event: The event to check

        Returns:
            True if the transition is valid, False otherwise
        """
        valid_transitions = TRANSITIONS.get(self.current_state, {})
        return event in valid_transitions

    def transition(self, event: EventTransition) -> EventState:
        """
        Execute a state transition.

        Args:
            event: The event triggering the transition

        Returns:
            The new state after transition

        Raises:
            ValueError: If the transition is not valid
        """
        if not self.can_transition(event):
            raise ValueError(
                f"Invalid transition: {event.value} from {self.current_state.value}"
            )

        next_state = TRANSITIONS[self.current_state][event]
        logger.debug("Event state: %s -> %s", self.current_state.value, next_state.value)
        self.current_state = next_state
        return next_state

    def reset(self) -> None:
        """Reset state machine to IDLE."""
        self.current_state = EventState.IDLE
