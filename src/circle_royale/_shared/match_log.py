# Area: Shared
"""
circle_royale._shared.match_log — Per-event JSON match log
==========================================================

One JSON document per event under ``log_dir``:

    {"entries": [{"timestamp": ..., "type": ..., "message": ...}, ...]}

rewritten after every entry so a crash loses nothing, and replaced on
finalize() by

    {"summary": {...}, "entries": [...]}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..interfaces import MatchLog

logger = logging.getLogger("circle_royale.match_log")


@dataclass
class _OpenLog:
    file_path: Path
    entries: List[Dict[str, str]] = field(default_factory=list)


class MatchLogWriter(MatchLog):
    """Writes the match log documents to disk."""

    def __init__(self, log_dir: str = "logs"):
        self.log_dir = Path(log_dir)
        self._logs: Dict[int, _OpenLog] = {}

    def init(self, event_id: int) -> str:
        self.log_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M")
        file_path = self.log_dir / f"match-{event_id}-{stamp}.json"
        self._logs[event_id] = _OpenLog(file_path=file_path)
        logger.debug("Match log opened for event %s: %s", event_id, file_path)
        return str(file_path)

    def log(self, event_id: int, entry_type: str, message: str) -> None:
        if event_id not in self._logs:
            self.init(event_id)
        match_log = self._logs[event_id]
        match_log.entries.append({
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "type": entry_type,
            "message": message,
        })
        self._write(match_log.file_path, {"entries": match_log.entries})

    def finalize(self, event_id: int, summary: Dict[str, Any]) -> Optional[str]:
        match_log = self._logs.pop(event_id, None)
        if match_log is None:
            return None
        self._write(match_log.file_path, {"summary": summary, "entries": match_log.entries})
        logger.info("Match log finalized: %s", match_log.file_path)
        return str(match_log.file_path)

    def entries(self, event_id: int) -> List[Dict[str, str]]:
        """Entries of a log that is still open (empty once finalized)."""
        match_log = self._logs.get(event_id)
        return list(match_log.entries) if match_log else []

    @staticmethod
    def _write(path: Path, payload: Dict[str, Any]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, default=str)
