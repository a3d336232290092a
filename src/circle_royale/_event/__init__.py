# Area: Event
"""
Event layer — lifecycle of one arena event.

This package contains:
- Event state machine and status enums
- Active event record and summary building
- Event orchestrator (start, stop, winner declaration)
- SQLite persistence (events, participants, results)
"""

from .enums import NO_WINNER, EventState, EventStatus, EventTransition
from .state_machine import EventStateMachine
from .active_event import ActiveEvent
from .orchestrator import EventOrchestrator
from .database import init_database
from .store import SqliteEventStore

__all__ = [
    "NO_WINNER",
    "EventState",
    "EventStatus",
    "EventTransition",
    "EventStateMachine",
    "ActiveEvent",
    "EventOrchestrator",
    "init_database",
    "SqliteEventStore",
]
