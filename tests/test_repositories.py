# Area: Event Tests
"""Tests for the event and participant repositories."""

import os
import tempfile
from datetime import datetime, timezone

import sqlite3

import pytest
from circle_royale._event.database import connect, init_database
from circle_royale._event.repo_events import EventRepository
from circle_royale._event.repo_participants import ParticipantRepository


@pytest.fixture
def db_path():
    """Create temporary database for testing."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    init_database(path)
    yield path
    os.unlink(path)


class TestEventRepository:
    """Tests for EventRepository class."""

    @pytest.fixture
    def repo(self, db_path):
        return EventRepository(db_path)

    def test_create_event_starts_waiting(self, repo):
        """Test a new event is WAITING."""
        event_id = repo.create_event("Shrinking Circle")
        event = repo.get_event(event_id)
        assert event["name"] == "Shrinking Circle"
        assert event["status"] == "WAITING"
        assert event["ended_at"] is None

    def test_ids_increase(self, repo):
        """Test consecutive events get distinct ids."""
        first = repo.create_event("A")
        second = repo.create_event("B")
        assert second > first

    def test_update_status(self, repo):
        """Test updating event status."""
        event_id = repo.create_event("A")
        repo.update_status(event_id, "LIVE")
        assert repo.get_event(event_id)["status"] == "LIVE"

    def test_mark_ended(self, repo):
        """Test mark_ended sets FINISHED and the end time."""
        event_id = repo.create_event("A")
        ended = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        repo.mark_ended(event_id, ended)
        event = repo.get_event(event_id)
        assert event["status"] == "FINISHED"
        assert event["ended_at"] == ended.isoformat()

    def test_get_event_not_found(self, repo):
        """Test unknown events return None."""
        assert repo.get_event(999) is None

    def test_create_result(self, repo):
        """Test storing the final result row."""
        event_id = repo.create_event("A")
        repo.create_result(event_id, "NONE", 17, 4, "logs/match.json")
        results = repo.get_results(event_id)
        assert len(results) == 1
        assert results[0]["winner_identifier"] == "NONE"
        assert results[0]["duration_seconds"] == 17
        assert results[0]["total_players"] == 4
        assert results[0]["log_path"] == "logs/match.json"


class TestParticipantRepository:
    """Tests for ParticipantRepository class."""

    @pytest.fixture
    def event_id(self, db_path):
        return EventRepository(db_path).create_event("A")

    @pytest.fixture
    def repo(self, db_path):
        return ParticipantRepository(db_path)

    def test_join(self, repo, event_id):
        """Test a join creates a live row with zeroed stats."""
        repo.upsert_join(event_id, "steam:1", "Alice")
        row = repo.get_participant(event_id, "steam:1")
        assert row["player_name"] == "Alice"
        assert row["alive"] == 1
        assert row["kills"] == 0
        assert row["damage_taken"] == 0

    def test_rejoin_revives(self, repo, event_id):
        """Test a second join revives the same row."""
        repo.upsert_join(event_id, "steam:1", "Alice")
        repo.mark_death(event_id, "steam:1")
        repo.upsert_join(event_id, "steam:1", "Alice2")
        rows = repo.list_all(event_id)
        assert len(rows) == 1
        assert rows[0]["alive"] == 1
        assert rows[0]["player_name"] == "Alice2"
        assert rows[0]["left_at"] is None

    def test_mark_death(self, repo, event_id):
        """Test death clears alive and sets left_at."""
        repo.upsert_join(event_id, "steam:1", "Alice")
        repo.upsert_join(event_id, "steam:2", "Bob")
        repo.mark_death(event_id, "steam:1")
        row = repo.get_participant(event_id, "steam:1")
        assert row["alive"] == 0
        assert row["left_at"] is not None
        assert [r["player_identifier"] for r in repo.list_alive(event_id)] == ["steam:2"]

    def test_update_stats(self, repo, event_id):
        """Test stat columns update, datetimes as ISO strings."""
        repo.upsert_join(event_id, "steam:1", "Alice")
        until = datetime(2026, 3, 1, 12, 0, 15, tzinfo=timezone.utc)
        repo.update_stats(event_id, "steam:1", kills=2, damage_taken=12.5,
                          immunity_until=until)
        row = repo.get_participant(event_id, "steam:1")
        assert row["kills"] == 2
        assert row["damage_taken"] == 12.5
        assert row["immunity_until"] == until.isoformat()

    def test_update_stats_rejects_unknown_field(self, repo, event_id):
        """Test unknown columns raise ValueError."""
        repo.upsert_join(event_id, "steam:1", "Alice")
        with pytest.raises(ValueError):
            repo.update_stats(event_id, "steam:1", health=5)

    def test_update_stats_empty_is_noop(self, repo, event_id):
        """Test an empty update does nothing."""
        repo.upsert_join(event_id, "steam:1", "Alice")
        repo.update_stats(event_id, "steam:1")
        assert repo.get_participant(event_id, "steam:1")["kills"] == 0

    def test_get_participant_not_found(self, repo, event_id):
        """Test unknown participants return None."""
        assert repo.get_participant(event_id, "ghost") is None


class TestDatabase:
    """Tests for init_database and connect."""

    def test_init_creates_parent_dirs(self, tmp_path):
        """Test the schema is created under a missing directory."""
        path = str(tmp_path / "data" / "arena.db")
        init_database(path)
        with connect(path) as conn:
            tables = {r["name"] for r in conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'")}
        assert {"events", "event_participants", "event_results"} <= tables

    def test_init_is_idempotent(self, db_path):
        """Test re-running the schema keeps existing rows."""
        EventRepository(db_path).create_event("A")
        init_database(db_path)
        assert EventRepository(db_path).get_event(1)["name"] == "A"

    def test_foreign_keys_enforced(self, db_path):
        """Test participants cannot reference a missing event."""
        with pytest.raises(sqlite3.IntegrityError):
            ParticipantRepository(db_path).upsert_join(999, "steam:1", "Alice")
