# Area: Event
"""
circle_royale._event.repo_events — Events Repository
====================================================

Repository for the events and event_results tables.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from .database import BaseRepository
from .enums import EventStatus


class EventRepository(BaseRepository):
    """
    Repository for events and event_results.

    Handles creating event records, status transitions and the
    final result row.
    """

    def create_event(self, name: str) -> int:
        """
        Create a new event record in WAITING status.

        Args:
            name: Event display name

        Returns:
            The new event id
        """
        query = "INSERT INTO events (name, status) VALUES (?, ?)"
        return self._insert(query, (name, EventStatus.WAITING.value))

    def get_event(self, event_id: int) -> Optional[Dict[str, Any]]:
        query = "SELECT * FROM events WHERE event_id = ?"
        return self._fetch_one(query, (event_id,))

    def update_status(self, event_id: int, status: str) -> None:
        query = "UPDATE events SET status = ? WHERE event_id = ?"
        self._write(query, (status, event_id))

    def mark_ended(self, event_id: int, ended_at: datetime) -> None:
        """Mark event as finished at ``ended_at``."""
        query = """
            UPDATE events
            SET status = ?, ended_at = ?
            WHERE event_id = ?
        """
        self._write(query, (EventStatus.FINISHED.value, ended_at.isoformat(), event_id))

    def create_result(
        self,
        event_id: int,
        winner_identifier: str,
        duration_seconds: int,
        total_players: int,
        log_path: Optional[str] = None,
    ) -> int:
        query = """
            INSERT INTO event_results
            (event_id, winner_identifier, duration_seconds, total_players, log_path)
            VALUES (?, ?, ?, ?, ?)
        """
        return self._insert(
            query, (event_id, winner_identifier, duration_seconds, total_players, log_path)
        )

    def get_results(self, event_id: int) -> List[Dict[str, Any]]:
        """All result rows for an event (exactly one for a finished event)."""
        query = "SELECT * FROM event_results WHERE event_id = ? ORDER BY result_id"
        return self._fetch_all(query, (event_id,))
