# Area: Event
"""
circle_royale._event.repo_participants — Participants Repository
================================================================

Repository for the event_participants table: join/death records and
per-participant stat columns.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from .database import BaseRepository

# Stat columns that update_stats() may touch
STAT_COLUMNS = ("kills", "damage_taken", "last_safe_at", "immunity_until")


class ParticipantRepository(BaseRepository):
    """
    Repository for event_participants.

    Keyed by (event_id, player_identifier).
    """

    def upsert_join(self, event_id: int, identifier: str, name: str) -> None:
        """
        Record a participant joining, reviving an existing row.

        Args:
            event_id: Event identifier
            identifier: Stable player identifier
            name: Display name
        """
        query = """
            INSERT INTO event_participants (event_id, player_identifier, player_name)
            VALUES (?, ?, ?)
            ON CONFLICT(event_id, player_identifier) DO UPDATE SET
                player_name = excluded.player_name,
                alive = 1,
                joined_at = CURRENT_TIMESTAMP,
                left_at = NULL
        """
        self._write(query, (event_id, identifier, name))

    def mark_death(self, event_id: int, identifier: str) -> None:
        query = """
            UPDATE event_participants
            SET alive = 0, left_at = ?
            WHERE event_id = ? AND player_identifier = ?
        """
        now = datetime.now(timezone.utc).isoformat()
        self._write(query, (now, event_id, identifier))

    def update_stats(self, event_id: int, identifier: str, **fields: Any) -> None:
        """
        Update stat columns.

        Raises:
            ValueError: If a field is not a known stat column
        """
        unknown = [k for k in fields if k not in STAT_COLUMNS]
        if unknown:
            raise ValueError(f"Unknown participant stat fields: {unknown}")
        if not fields:
            return

        assignments = ", ".join(f"{column} = ?" for column in fields)
        values = tuple(
            v.isoformat() if isinstance(v, datetime) else v for v in fields.values()
        )
        query = f"""
            UPDATE event_participants
            SET {assignments}
            WHERE event_id = ? AND player_identifier = ?
        """
        self._write(query, values + (event_id, identifier))

    def get_participant(self, event_id: int, identifier: str) -> Optional[Dict[str, Any]]:
        query = """
            SELECT * FROM event_participants
            WHERE event_id = ? AND player_identifier = ?
        """
        return self._fetch_one(query, (event_id, identifier))

    def list_alive(self, event_id: int) -> List[Dict[str, Any]]:
        query = "SELECT * FROM event_participants WHERE event_id = ? AND alive = 1"
        return self._fetch_all(query, (event_id,))

    def list_all(self, event_id: int) -> List[Dict[str, Any]]:
        query = "SELECT * FROM event_participants WHERE event_id = ?"
        return self._fetch_all(query, (event_id,))
