# Area: Event
"""
circle_royale._event.active_event — Active event record
=======================================================

The orchestrator's record of the one live event: identity, start
geometry, initial head count and the three append-only histories that
end up in the match log summary.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .._core.geometry import Point3
from ..types import (
    CheckpointClaimSummary,
    EventSummary,
    FinalDropSummary,
    LootPickupSummary,
)


@dataclass
class ActiveEvent:
    """
    The live event owned by EventOrchestrator.

    Attributes:
        event_id: Persisted event record id
        name: Event display name
        started_at: Clock time at which the event went live
        center: Current zone center (updated by adjust_center)
        initial_players: Participants prepared at start
        log_path: Match log document path
        loot_history: Crate pickups, in claim order
        checkpoint_history: Immunity checkpoint claims, in claim order
        final_drop: The final drop claim, once it happened
    """

    event_id: int
    name: str
    started_at: float
    center: Point3
    initial_players: int
    log_path: Optional[str] = None
    loot_history: List[LootPickupSummary] = field(default_factory=list)
    checkpoint_history: List[CheckpointClaimSummary] = field(default_factory=list)
    final_drop: Optional[FinalDropSummary] = None

    def duration_seconds(self, now: float) -> int:
        """Whole seconds since start, never less than 1."""
        return max(1, round(now - self.started_at))

    def build_summary(
        self,
        duration_seconds: int,
        winner_name: Optional[str] = None,
        winner_id: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> EventSummary:
        summary: EventSummary = {
            "winner": winner_name,
            "winner_id": winner_id,
            "duration_seconds": duration_seconds,
            "initial_players": self.initial_players,
            "loot_collected": list(self.loot_history),
            "checkpoint_claims": list(self.checkpoint_history),
            "final_drop": self.final_drop,
        }
        if reason is not None:
            summary["reason"] = reason
        return summary
