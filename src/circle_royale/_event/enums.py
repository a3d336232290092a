# Area: Event
"""
circle_royale._event.enums — Event lifecycle enums
==================================================

Defines the orchestrator's states and transition events, and the
status markers persisted on the event record.
"""

from enum import Enum


class EventState(Enum):
    """
    States of the event orchestrator.

    State transitions:
    IDLE -> STARTING (on START_REQUESTED)
    STARTING -> LIVE (on STARTED)
    STARTING -> IDLE (on START_FAILED)
    LIVE -> IDLE (on STOPPED or WINNER_DECLARED)
    """
    IDLE = "IDLE"
    STARTING = "STARTING"
    LIVE = "LIVE"


class EventTransition(Enum):
    """
    Events that trigger orchestrator state transitions.

    - START_REQUESTED: start_event() called with no event active
    - STARTED: registry prepared, zone and spawner running
    - START_FAILED: no participants (or record creation failed)
    - STOPPED: stop_event() finalized the event without a winner
    - WINNER_DECLARED: last survivor found after an elimination
    """
    START_REQUESTED = "START_REQUESTED"
    STARTED = "STARTED"
    START_FAILED = "START_FAILED"
    STOPPED = "STOPPED"
    WINNER_DECLARED = "WINNER_DECLARED"


class EventStatus(str, Enum):
    """Status values stored on the persisted event record."""
    WAITING = "WAITING"
    LIVE = "LIVE"
    FINISHED = "FINISHED"
    CANCELLED = "CANCELLED"


# Winner identifier persisted when an event ends without a winner
NO_WINNER = "NONE"
