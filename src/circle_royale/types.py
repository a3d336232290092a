"""
circle_royale.types — TypedDict schemas for results and histories
==================================================================

Shapes returned by the request handlers (claim/collect) and the
history entries the orchestrator appends while an event is live.
All of them end up verbatim in the match log summary, so every field
is JSON-serialisable.

    >>> CrateCollectResult.__annotations__
    {'success': bool, 'reason': str, 'weapon': str}
"""

from typing import List, Optional, TypedDict


# ============================================
# Request handler results
# ============================================

class CrateCollectResult(TypedDict, total=False):
    """Result of collect_crate().

    Fields
    ------
    success : bool
        True if the crate was claimed by this call.
    reason : str
        Present on failure, e.g. "Loot phase already ended.".
    weapon : str
        Present on success, the weapon now equipped.
    """
    success: bool
    reason: str
    weapon: str


class FinalDropCollectResult(TypedDict, total=False):
    """Result of collect_final_drop()."""
    success: bool
    reason: str


class ImmunityClaimResult(TypedDict):
    """Result of a successful claim_immunity() (failures return None).

    Fields
    ------
    granted : bool
        Always True; immunity was applied.
    bonus : bool
        True if the checkpoint also handed out the bonus weapon.
    duration : float
        Immunity length in seconds.
    """
    granted: bool
    bonus: bool
    duration: float


class BandageResult(TypedDict, total=False):
    """Result of use_bandage()."""
    success: bool
    reason: str
    health: float
    remaining: int


# ============================================
# Event histories (append-only while live)
# ============================================

class LootPickupSummary(TypedDict):
    player: str
    identifier: str
    weapon: str
    crate_id: str
    timestamp: str


class CheckpointClaimSummary(TypedDict):
    player: str
    identifier: str
    immunity_seconds: float
    granted_bonus: bool
    timestamp: str


class FinalDropSummary(TypedDict):
    player: str
    identifier: str
    weapon: str
    timestamp: str


class EventSummary(TypedDict, total=False):
    """Terminal summary written into the match log.

    ``winner`` and ``winner_id`` are None when the event was stopped;
    ``reason`` is only present for stopped events.
    """
    winner: Optional[str]
    winner_id: Optional[str]
    duration_seconds: int
    reason: str
    initial_players: int
    loot_collected: List[LootPickupSummary]
    checkpoint_claims: List[CheckpointClaimSummary]
    final_drop: Optional[FinalDropSummary]
