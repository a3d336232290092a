# Area: Core
"""
circle_royale._core.spawner — Loot crates, immunity checkpoint, final drop
==========================================================================

Three pickup lifecycles sharing one "phase active" flag (set by
start(), cleared by stop()):

    Loot crates   loot_crate_count crates inside loot_spawn_factor x radius,
                  each with a random melee weapon; claimable until the
                  loot.phase_end timer fires.
    Checkpoint    at most one at a time, spawned once per zone shrink
                  inside checkpoint_spawn_factor x radius; grants
                  immunity (and sometimes a bonus weapon) until its
                  checkpoint.expire timer fires.
    Final drop    spawned at the zone center the first time the radius
                  falls to final_drop_radius; claimable once, never
                  respawns.

Claim methods return structured results; they never raise for stale
or invalid requests.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, List, Optional

from .geometry import Point3, random_point_in_circle
from .registry import ParticipantRegistry
from .scheduler import Scheduler
from .._shared.safe_write import fire_and_forget
from ..types import CrateCollectResult, FinalDropCollectResult, ImmunityClaimResult

if TYPE_CHECKING:
    from ..config import EventConfig
    from ..interfaces import MatchLog, PresenceLayer, SpawnerListener

logger = logging.getLogger("circle_royale.spawner")

LOOT_PHASE_TIMER = "loot.phase_end"
CHECKPOINT_TIMER = "checkpoint.expire"


@dataclass
class LootCrate:
    crate_id: str
    position: Point3
    weapon: str
    taken: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.crate_id,
            "position": self.position.to_dict(),
            "weapon": self.weapon,
            "taken": self.taken,
        }


@dataclass
class Checkpoint:
    position: Point3
    expires_at: float
    grants_bonus: bool


@dataclass
class FinalDrop:
    active: bool = False
    taken: bool = False
    spawned: bool = False
    position: Optional[Point3] = None


class LootSpawner:
    """Owns every ephemeral pickup of the current event."""

    def __init__(
        self,
        scheduler: Scheduler,
        registry: ParticipantRegistry,
        presence: "PresenceLayer",
        match_log: "MatchLog",
        config: "EventConfig",
        listener: Optional["SpawnerListener"] = None,
        rng: Optional[random.Random] = None,
    ):
        self.scheduler = scheduler
        self.registry = registry
        self.presence = presence
        self.match_log = match_log
        self.config = config
        self.listener = listener
        self.rng = rng or random.Random()

        self._event_id: Optional[int] = None
        self._crates: List[LootCrate] = []
        self._loot_phase_ends_at = 0.0
        self._loot_phase_over = False
        self._checkpoint: Optional[Checkpoint] = None
        self._final_drop = FinalDrop()

    # ── Inspection ────────────────────────────────────────────

    @property
    def active(self) -> bool:
        return self._event_id is not None

    @property
    def crates(self) -> List[LootCrate]:
        return [replace(c) for c in self._crates]

    @property
    def loot_phase_ends_at(self) -> float:
        return self._loot_phase_ends_at

    @property
    def active_checkpoint(self) -> Optional[Checkpoint]:
        return replace(self._checkpoint) if self._checkpoint else None

    @property
    def final_drop(self) -> FinalDrop:
        return replace(self._final_drop)

    # ── Lifecycle ─────────────────────────────────────────────

    def start(self, event_id: int, center: Point3, radius: float) -> None:
        """Open the loot phase: spawn crates and arm the phase-end timer."""
        self._event_id = event_id
        self._checkpoint = None
        self._final_drop = FinalDrop()
        self._loot_phase_over = False
        self._spawn_crates(center, radius)
        self._loot_phase_ends_at = self.scheduler.now() + self.config.loot_phase_seconds
        self.scheduler.call_later(
            LOOT_PHASE_TIMER, self.config.loot_phase_seconds, self._end_loot_phase
        )
        self.registry.emit_to_alive(
            "arena:loot:phaseStart",
            {"crates": [c.to_dict() for c in self._crates], "ends_at": self._loot_phase_ends_at},
        )
        self._log("LOOT_PHASE_START", "Loot phase has started with melee crates")

    def stop(self) -> None:
        """Cancel every pickup timer and return to inactive. Safe when idle."""
        self.scheduler.cancel(LOOT_PHASE_TIMER)
        self.scheduler.cancel(CHECKPOINT_TIMER)
        was_active = self.active
        if was_active:
            self._log("LOOT_PHASE_END", "Loot phase stopped")
        self._event_id = None
        self._crates = []
        self._loot_phase_ends_at = 0.0
        self._loot_phase_over = False
        self._checkpoint = None
        self._final_drop = FinalDrop()
        # emit may raise; state is already cleared
        if was_active:
            self.registry.emit_to_alive("arena:loot:phaseEnd")

    # ── Loot crates ───────────────────────────────────────────

    def _spawn_crates(self, center: Point3, radius: float) -> None:
        spread = radius * self.config.loot_spawn_factor
        self._crates = [
            LootCrate(
                crate_id=f"crate-{index + 1}",
                position=random_point_in_circle(center, spread, self.rng),
                weapon=self.rng.choice(self.config.melee_weapons),
            )
            for index in range(self.config.loot_crate_count)
        ]
        self.registry.emit_to_alive("arena:loot:spawnCrates", [c.to_dict() for c in self._crates])

    def _end_loot_phase(self) -> None:
        if not self.active:
            return
        self._log("LOOT_PHASE_END", "Loot phase timed out")
        self.registry.emit_to_alive("arena:loot:phaseEnd")
        self._chat("Loot phase over! Circle shrink and checkpoints are live.")
        self._crates = []
        self._loot_phase_over = True

    def collect_crate(self, handle: int, crate_id: str) -> CrateCollectResult:
        if not self.active:
            return {"success": False, "reason": "No active loot phase."}

        if self._loot_phase_over or self.scheduler.now() >= self._loot_phase_ends_at:
            return {"success": False, "reason": "Loot phase already ended."}

        crate = next((c for c in self._crates if c.crate_id == crate_id), None)
        if crate is None or crate.taken:
            return {"success": False, "reason": "Crate unavailable."}

        participant = self.registry.get(handle)
        if participant is None or not participant.alive:
            return {"success": False, "reason": "Invalid player."}

        if not self.registry.give_item(handle, crate.weapon, 0, strip=True):
            return {"success": False, "reason": "Invalid player."}
        crate.taken = True
        self.registry.emit_to_alive("arena:loot:crateTaken", crate.crate_id, participant.name)

        if self.listener is not None:
            self.listener.on_crate_collected(participant, crate.weapon, crate.crate_id)
        self._log(
            "LOOT_COLLECT",
            f"{participant.name} collected {crate.weapon} from {crate.crate_id}",
        )
        self._chat(f"{participant.name} armed up with {crate.weapon}.")
        return {"success": True, "weapon": crate.weapon}

    # ── Immunity checkpoint ───────────────────────────────────

    def spawn_immunity_point(self, center: Point3, radius: float) -> Optional[Checkpoint]:
        """Replace any pending checkpoint with a fresh one. Called once per shrink."""
        if not self.active:
            return None

        self.scheduler.cancel(CHECKPOINT_TIMER)
        timeout = self.config.checkpoint_timeout_seconds
        position = random_point_in_circle(
            center, radius * self.config.checkpoint_spawn_factor, self.rng
        )
        self._checkpoint = Checkpoint(
            position=position,
            expires_at=self.scheduler.now() + timeout,
            grants_bonus=self.rng.random() < self.config.checkpoint_bonus_chance,
        )
        self.scheduler.call_later(CHECKPOINT_TIMER, timeout, self._expire_checkpoint)

        bonus = self._checkpoint.grants_bonus
        self.registry.emit_to_alive("arena:task:spawn", position.to_dict(), timeout, bonus)
        suffix = " (bonus weapon active)" if bonus else ""
        self._log(
            "TASK_SPAWN",
            f"Immunity task spawned at ({position.x:.2f}, {position.y:.2f}){suffix}",
        )
        return replace(self._checkpoint)

    def _expire_checkpoint(self) -> None:
        if self._checkpoint is None:
            return
        self._checkpoint = None
        self.registry.emit_to_alive("arena:task:expire")
        self._log("TASK_EXPIRED", "Immunity task expired unclaimed")

    def claim_immunity(self, handle: int) -> Optional[ImmunityClaimResult]:
        """Claim the pending checkpoint. None when there is nothing to claim."""
        if not self.active or self._checkpoint is None:
            return None

        participant = self.registry.get(handle)
        if participant is None or not participant.alive:
            return None

        if self.scheduler.now() > self._checkpoint.expires_at:
            return None

        seconds = self.config.immunity_seconds
        granted_bonus = self._checkpoint.grants_bonus
        self.registry.grant_immunity(handle, seconds)
        self.registry.emit_to_alive("arena:task:claimed", participant.name)
        if granted_bonus:
            self.registry.give_item(handle, self.config.bonus_weapon, self.config.bonus_ammo)

        self._checkpoint = None
        self.scheduler.cancel(CHECKPOINT_TIMER)

        suffix = " with bonus weapon" if granted_bonus else ""
        self._log("TASK_CLAIMED", f"{participant.name} claimed immunity{suffix}")
        if self.listener is not None:
            self.listener.on_checkpoint_claimed(participant, seconds, granted_bonus)
        return {"granted": True, "bonus": granted_bonus, "duration": seconds}

    # ── Final drop ────────────────────────────────────────────

    def handle_shrink(self, radius: float, center: Point3) -> None:
        if not self.active:
            return
        if radius <= self.config.final_drop_radius and not self._final_drop.spawned:
            self._spawn_final_drop(center)

    def _spawn_final_drop(self, center: Point3) -> None:
        self._final_drop = FinalDrop(active=True, taken=False, spawned=True, position=center)
        self.registry.emit_to_alive("arena:finaldrop:spawn", center.to_dict())
        self._log("FINAL_DROP_SPAWN", f"Final drop spawned with {self.config.final_drop_weapon} reward")
        self._chat("The Final Drop has appeared! Whoever gets it can end the game.")

    def collect_final_drop(self, handle: int) -> FinalDropCollectResult:
        drop = self._final_drop
        if not self.active or not drop.active or drop.taken or drop.position is None:
            return {"success": False, "reason": "No active final drop."}

        participant = self.registry.get(handle)
        if participant is None or not participant.alive:
            return {"success": False, "reason": "Invalid player."}

        drop.taken = True
        drop.active = False
        weapon = self.config.final_drop_weapon
        self.registry.give_item(handle, weapon, self.config.final_drop_ammo)
        self.registry.emit_to_alive("arena:finaldrop:claimed", participant.name)

        if self.listener is not None:
            self.listener.on_final_drop_collected(participant, weapon)
        self._log("FINAL_DROP_CLAIM", f"{participant.name} secured the final drop {weapon}")
        self._chat(f"{participant.name} grabbed the {weapon}!")
        self.registry.emit_to_alive("arena:finaldrop:despawn")
        return {"success": True}

    # ── Side effects ──────────────────────────────────────────

    def _chat(self, message: str) -> None:
        self.presence.broadcast(f"{self.config.chat_prefix} {message}")

    def _log(self, entry_type: str, message: str) -> None:
        if self._event_id is None:
            return
        fire_and_forget("match_log", self.match_log.log, self._event_id, entry_type, message)
