# Area: Shared
"""
circle_royale.errors — Custom exception classes
===============================================

Precondition violations raised to the administrative caller.
Stale references (unknown crate, expired checkpoint, dead participant)
are never raised; they come back as structured results instead.
"""

from __future__ import annotations
from typing import Any, Dict, Optional


class CircleRoyaleError(Exception):
    """Base exception for all circle_royale errors."""
    pass


class EventAlreadyRunningError(CircleRoyaleError):
    """Raised when start_event() is called while an event is live."""

    def __init__(self, event_id: Optional[int]):
        self.event_id = event_id
        super().__init__("Event already running")

    def to_dict(self) -> Dict[str, Any]:
        return {"error_type": "EVENT_ALREADY_RUNNING", "event_id": self.event_id}


class NoActiveEventError(CircleRoyaleError):
    """Raised when an administrative override runs without an event."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__("No active event")

    def to_dict(self) -> Dict[str, Any]:
        return {"error_type": "NO_ACTIVE_EVENT", "operation": self.operation}


class NoParticipantsError(CircleRoyaleError):
    """Raised when an event cannot start because nobody is connected."""

    def __init__(self, event_id: int):
        self.event_id = event_id
        super().__init__("No players available to start the event")

    def to_dict(self) -> Dict[str, Any]:
        return {"error_type": "NO_PARTICIPANTS", "event_id": self.event_id}


class InvalidRadiusError(CircleRoyaleError):
    """Raised when an administrative radius override is not positive."""

    def __init__(self, radius: float):
        self.radius = radius
        super().__init__(f"Invalid radius value: {radius!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {"error_type": "INVALID_RADIUS", "radius": self.radius}
