"""
circle_royale — Shrinking Circle Arena Event Runtime
====================================================

Runs a timed, elimination-based arena event: a shrinking safe zone,
periodic out-of-zone damage, loot crates, immunity checkpoints, a
late-game final drop and exactly-once winner declaration.

Quick Start (simulated players, virtual time):
    python -m circle_royale --players 8 --seed 1

Embedding:
    from circle_royale import EventOrchestrator, SqliteEventStore, MatchLogWriter
    orchestrator = EventOrchestrator(presence, SqliteEventStore("arena.db"),
                                     MatchLogWriter("logs"))
    orchestrator.start_event()
    EventRunner(orchestrator).run(start=False)

The host game supplies a PresenceLayer; everything else ships here.
"""

from .config import EventConfig, load_config
from .errors import (
    CircleRoyaleError,
    EventAlreadyRunningError,
    InvalidRadiusError,
    NoActiveEventError,
    NoParticipantsError,
)
from .interfaces import (
    Actor,
    EliminationListener,
    EventStore,
    MatchLog,
    PresenceLayer,
    SpawnerListener,
    ZoneListener,
)
from ._core import (
    ManualClock,
    MonotonicClock,
    Participant,
    Point3,
    Scheduler,
)
from ._event import EventOrchestrator, EventStatus, SqliteEventStore, NO_WINNER
from ._shared import MatchLogWriter, setup_logging
from .runner import EventRunner
from .simulated import SimulatedActor, SimulatedPresence
from .types import (
    BandageResult,
    CrateCollectResult,
    EventSummary,
    FinalDropCollectResult,
    ImmunityClaimResult,
)

__all__ = [
    # Main classes
    "EventOrchestrator",
    "EventRunner",
    "EventConfig",
    "load_config",
    "Scheduler",
    "ManualClock",
    "MonotonicClock",
    "Point3",
    "Participant",
    # Collaborators
    "Actor",
    "PresenceLayer",
    "EventStore",
    "MatchLog",
    "SqliteEventStore",
    "MatchLogWriter",
    "SimulatedActor",
    "SimulatedPresence",
    "setup_logging",
    # Listeners
    "ZoneListener",
    "EliminationListener",
    "SpawnerListener",
    # Status
    "EventStatus",
    "NO_WINNER",
    # Errors
    "CircleRoyaleError",
    "EventAlreadyRunningError",
    "InvalidRadiusError",
    "NoActiveEventError",
    "NoParticipantsError",
    # Result types
    "BandageResult",
    "CrateCollectResult",
    "EventSummary",
    "FinalDropCollectResult",
    "ImmunityClaimResult",
]
__version__ = "1.0.0"
