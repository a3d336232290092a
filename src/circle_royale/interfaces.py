# Area: Collaborators
"""
circle_royale.interfaces — Contracts the event core depends on
==============================================================

The arena core never talks to a game server, a database or the
filesystem directly. It consumes four narrow collaborators:

    Actor / PresenceLayer  — connected actors (position, health, chat,
                             loadout, per-actor flags)
    EventStore             — relational records of events, participants
                             and results
    MatchLog               — per-event append-only JSON log

and it wires its own components together with three observer
protocols (ZoneListener, EliminationListener, SpawnerListener), so
every coupling between components is visible in a constructor
signature.

Concrete implementations shipped with the package:

    SimulatedPresence  (circle_royale.simulated)
    SqliteEventStore   (circle_royale._event.store)
    MatchLogWriter     (circle_royale._shared.match_log)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Protocol

from ._core.geometry import Point3

if TYPE_CHECKING:
    from ._core.registry import Participant


# ──────────────────────────────────────────────────────────────
# PRESENCE
# ──────────────────────────────────────────────────────────────

class Actor(ABC):
    """One connected actor as exposed by the presence layer."""

    @property
    @abstractmethod
    def handle(self) -> int:
        """In-session numeric handle."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name."""

    @property
    @abstractmethod
    def position(self) -> Point3:
        """Current world position."""

    @property
    @abstractmethod
    def health(self) -> float:
        """Current health."""

    @abstractmethod
    def set_health(self, value: float) -> None: ...

    @abstractmethod
    def teleport(self, position: Point3) -> None: ...

    @property
    @abstractmethod
    def dimension(self) -> int:
        """World dimension the actor is in."""

    @abstractmethod
    def set_dimension(self, dimension: int) -> None: ...

    @abstractmethod
    def notify(self, message: str) -> None:
        """Send a direct chat line to this actor."""

    @abstractmethod
    def emit(self, event: str, *args: Any) -> None:
        """Trigger a client-side event on this actor."""

    @abstractmethod
    def give_item(self, item: str, amount: int) -> None: ...

    @abstractmethod
    def remove_all_items(self) -> None: ...

    @abstractmethod
    def get_flag(self, key: str, default: Any = None) -> Any: ...

    @abstractmethod
    def set_flag(self, key: str, value: Any) -> None: ...


class PresenceLayer(ABC):
    """Source of connected actors."""

    @abstractmethod
    def connected_actors(self) -> List[Actor]:
        """Snapshot of every actor currently connected."""

    @abstractmethod
    def lookup(self, handle: int) -> Optional[Actor]:
        """Return the actor for a handle, or None if it disconnected."""

    @abstractmethod
    def broadcast(self, message: str) -> None:
        """Send a chat line to every connected actor."""


# ──────────────────────────────────────────────────────────────
# PERSISTENCE
# ──────────────────────────────────────────────────────────────

class EventStore(ABC):
    """Relational persistence for events, participants and results."""

    @abstractmethod
    def create_event(self, name: str) -> int:
        """Create an event record in WAITING state and return its id."""

    @abstractmethod
    def update_event_status(self, event_id: int, status: str) -> None: ...

    @abstractmethod
    def mark_event_ended(self, event_id: int, ended_at: datetime) -> None: ...

    @abstractmethod
    def record_participant_join(
        self, event_id: int, identifier: str, name: str
    ) -> None: ...

    @abstractmethod
    def mark_participant_death(self, event_id: int, identifier: str) -> None: ...

    @abstractmethod
    def update_participant_stats(
        self, event_id: int, identifier: str, **fields: Any
    ) -> None: ...

    @abstractmethod
    def create_event_result(
        self,
        event_id: int,
        winner_identifier: str,
        duration_seconds: int,
        total_players: int,
        log_path: Optional[str],
    ) -> None: ...


class MatchLog(ABC):
    """Per-event structured log."""

    @abstractmethod
    def init(self, event_id: int) -> str:
        """Start a log for the event and return its path."""

    @abstractmethod
    def log(self, event_id: int, entry_type: str, message: str) -> None: ...

    @abstractmethod
    def finalize(self, event_id: int, summary: Dict[str, Any]) -> Optional[str]:
        """Write summary + entries; None if the log was already finalized."""


# ──────────────────────────────────────────────────────────────
# OBSERVERS
# ──────────────────────────────────────────────────────────────

class ZoneListener(Protocol):
    """Receives one notification per automatic zone shrink."""

    def on_zone_shrink(self, radius: float, center: Point3) -> None: ...


class EliminationListener(Protocol):
    """Receives exactly one notification per eliminated participant."""

    def on_participant_eliminated(self, participant: "Participant") -> None: ...


class SpawnerListener(Protocol):
    """Receives successful loot, checkpoint and final drop claims."""

    def on_crate_collected(
        self, participant: "Participant", weapon: str, crate_id: str
    ) -> None: ...

    def on_checkpoint_claimed(
        self, participant: "Participant", immunity_seconds: float, granted_bonus: bool
    ) -> None: ...

    def on_final_drop_collected(
        self, participant: "Participant", weapon: str
    ) -> None: ...
