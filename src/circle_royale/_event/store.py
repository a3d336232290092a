# Area: Event
"""
circle_royale._event.store — SQLite implementation of EventStore
================================================================

Composes the event and participant repositories behind the
EventStore contract the orchestrator and registry depend on.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..interfaces import EventStore
from .database import init_database
from .repo_events import EventRepository
from .repo_participants import ParticipantRepository

logger = logging.getLogger("circle_royale.store")


class SqliteEventStore(EventStore):
    """EventStore backed by one SQLite file."""

    def __init__(self, db_path: str = "arena.db", initialize: bool = True):
        self.db_path = db_path
        if initialize:
            init_database(db_path)
        self.events = EventRepository(db_path)
        self.participants = ParticipantRepository(db_path)

    def create_event(self, name: str) -> int:
        event_id = self.events.create_event(name)
        logger.info("Event record created: %s (%s)", event_id, name)
        return event_id

    def update_event_status(self, event_id: int, status: str) -> None:
        self.events.update_status(event_id, str(getattr(status, "value", status)))

    def mark_event_ended(self, event_id: int, ended_at: datetime) -> None:
        self.events.mark_ended(event_id, ended_at)

    def record_participant_join(self, event_id: int, identifier: str, name: str) -> None:
        self.participants.upsert_join(event_id, identifier, name)

    def mark_participant_death(self, event_id: int, identifier: str) -> None:
        self.participants.mark_death(event_id, identifier)

    def update_participant_stats(self, event_id: int, identifier: str, **fields: Any) -> None:
        self.participants.update_stats(event_id, identifier, **fields)

    def create_event_result(
        self,
        event_id: int,
        winner_identifier: str,
        duration_seconds: int,
        total_players: int,
        log_path: Optional[str],
    ) -> None:
        self.events.create_result(
            event_id, winner_identifier, duration_seconds, total_players, log_path
        )

    # ── Read helpers ──────────────────────────────────────────

    def get_event(self, event_id: int) -> Optional[Dict[str, Any]]:
        return self.events.get_event(event_id)

    def get_results(self, event_id: int) -> List[Dict[str, Any]]:
        return self.events.get_results(event_id)

    def list_participants(self, event_id: int) -> List[Dict[str, Any]]:
        return self.participants.list_all(event_id)

    def list_alive_participants(self, event_id: int) -> List[Dict[str, Any]]:
        return self.participants.list_alive(event_id)

    def get_result(self, event_id: int) -> Optional[Dict[str, Any]]:
        """The final result row, or None while the event is still open."""
        results = self.events.get_results(event_id)
        return results[-1] if results else None
