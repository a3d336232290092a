# Area: Event
"""
circle_royale._event.database — SQLite access for event records
===============================================================

One short-lived connection per statement. Events are written a handful
of times per second at most (join, stats, death, result), so there is
no pooling; every connection enforces foreign keys and returns rows as
plain dicts.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger("circle_royale.database")

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


@contextmanager
def connect(db_path: str) -> Iterator[sqlite3.Connection]:
    """Open a connection, commit on success, always close."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def init_database(db_path: str = "arena.db") -> None:
    """Create the events, event_participants and event_results tables."""
    parent = Path(db_path).parent
    if str(parent) not in ("", "."):
        parent.mkdir(parents=True, exist_ok=True)
    schema = SCHEMA_PATH.read_text(encoding="utf-8")
    with connect(db_path) as conn:
        conn.executescript(schema)
    logger.info("Event database ready at %s", db_path)


class BaseRepository:
    """Shared statement helpers for the event repositories."""

    def __init__(self, db_path: str = "arena.db"):
        self.db_path = db_path

    def _write(self, query: str, params: tuple = ()) -> int:
        """Run an UPDATE/INSERT and return the number of affected rows."""
        with connect(self.db_path) as conn:
            return conn.execute(query, params).rowcount

    def _insert(self, query: str, params: tuple = ()) -> int:
        """Run an INSERT and return the new row id."""
        with connect(self.db_path) as conn:
            return conn.execute(query, params).lastrowid

    def _fetch_all(self, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
        with connect(self.db_path) as conn:
            return [dict(row) for row in conn.execute(query, params).fetchall()]

    def _fetch_one(self, query: str, params: tuple = ()) -> Optional[Dict[str, Any]]:
        with connect(self.db_path) as conn:
            row = conn.execute(query, params).fetchone()
        return dict(row) if row is not None else None
