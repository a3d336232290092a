# Area: Core
"""
circle_royale._core.registry — Participant registry
===================================================

Owns the managed participants of the current event: liveness, damage
and kill accounting, immunity windows and the last time each one was
seen inside the safe zone.

Every lookup by handle tolerates actors that disconnected mid-tick:
unknown handles are silent no-ops, never exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Dict, List, Optional

from .geometry import Point3
from .scheduler import Clock
from .._shared.safe_write import fire_and_forget
from ..types import BandageResult

if TYPE_CHECKING:
    from ..config import EventConfig
    from ..interfaces import Actor, EliminationListener, EventStore, MatchLog, PresenceLayer

logger = logging.getLogger("circle_royale.registry")

FLAG_IDENTIFIER = "arena:identifier"
FLAG_ALIVE = "arena:alive"
FLAG_BANDAGES = "arena:bandages"
SPECTATOR_MODE_EVENT = "arena:spectator:mode"
SPECTATOR_ATTACH_EVENT = "arena:spectator:attach"
SPECTATOR_DETACH_EVENT = "arena:spectator:detach"


@dataclass
class Participant:
    """Bookkeeping for one connected actor during an event."""
    handle: int
    identifier: str
    name: str
    alive: bool = True
    damage_taken: float = 0.0
    kills: int = 0
    last_safe_at: Optional[float] = None     # clock time, last seen inside the zone
    immune_until: Optional[float] = None     # clock time


def resolve_identifier(actor: "Actor") -> str:
    """Stable identifier: the actor's identifier flag, else name-handle."""
    flagged = actor.get_flag(FLAG_IDENTIFIER)
    if flagged:
        return str(flagged)
    return f"{actor.name or 'unknown'}-{actor.handle}"


class ParticipantRegistry:
    """
    Registry of managed participants for the current event.

    Read and written by the zone controller (position, immunity,
    damage), the spawner (liveness, immunity, loadout) and the
    orchestrator (liveness for win detection). Each mutation completes
    synchronously.
    """

    def __init__(
        self,
        presence: "PresenceLayer",
        store: "EventStore",
        match_log: "MatchLog",
        config: "EventConfig",
        clock: Clock,
        listener: Optional["EliminationListener"] = None,
    ):
        self.presence = presence
        self.store = store
        self.match_log = match_log
        self.config = config
        self.clock = clock
        self.listener = listener
        self._participants: Dict[int, Participant] = {}
        self._spectator_targets: Dict[int, int] = {}   # spectator handle -> target handle
        self._event_id: Optional[int] = None

    @property
    def event_id(self) -> Optional[int]:
        return self._event_id

    # ── Lifecycle ─────────────────────────────────────────────

    def prepare(self, event_id: int, center: Point3) -> int:
        """
        Snapshot every connected actor into a fresh participant.

        Replaces previous contents. Each actor is teleported to the
        center, healed, stripped to the starting loadout and recorded
        as joined.

        Returns:
            Number of participants prepared
        """
        self._event_id = event_id
        self._participants.clear()
        self._spectator_targets.clear()
        now = self.clock.now()

        for actor in self.presence.connected_actors():
            identifier = resolve_identifier(actor)
            self._participants[actor.handle] = Participant(
                handle=actor.handle,
                identifier=identifier,
                name=actor.name,
                last_safe_at=now,
            )
            fire_and_forget(
                "record_participant_join",
                self.store.record_participant_join, event_id, identifier, actor.name,
            )
            actor.teleport(center)
            actor.set_health(self.config.max_health)
            self._equip_starting_loadout(actor)
            actor.set_flag(FLAG_ALIVE, True)
            self._log("JOIN", f"{actor.name} joined the event")

        logger.info("Prepared %d participants for event %s", len(self._participants), event_id)
        return len(self._participants)

    def _equip_starting_loadout(self, actor: "Actor") -> None:
        actor.remove_all_items()
        actor.set_flag(FLAG_BANDAGES, self.config.starting_bandages)

    def reset(self) -> None:
        """Forget every participant, spectator target and the current event."""
        self._participants.clear()
        self._spectator_targets.clear()
        self._event_id = None

    # ── Queries ───────────────────────────────────────────────

    def get(self, handle: int) -> Optional[Participant]:
        participant = self._participants.get(handle)
        return replace(participant) if participant else None

    def get_alive(self) -> List[Participant]:
        """Snapshot of live participants at the time of the call."""
        return [replace(p) for p in self._participants.values() if p.alive]

    def alive_count(self) -> int:
        return sum(1 for p in self._participants.values() if p.alive)

    def is_alive(self, handle: int) -> bool:
        participant = self._participants.get(handle)
        return participant is not None and participant.alive

    def position_of(self, handle: int) -> Optional[Point3]:
        if handle not in self._participants:
            return None
        actor = self.presence.lookup(handle)
        return actor.position if actor else None

    def is_immune(self, handle: int) -> bool:
        participant = self._participants.get(handle)
        if participant is None or participant.immune_until is None:
            return False
        return participant.immune_until > self.clock.now()

    # ── Mutations ─────────────────────────────────────────────

    def mark_safe(self, handle: int) -> None:
        """Record that the participant is inside the zone right now."""
        participant = self._participants.get(handle)
        if participant is None or self._event_id is None:
            return
        participant.last_safe_at = self.clock.now()
        self._persist_stats(participant, last_safe_at=datetime.now(timezone.utc))

    def start_grace(self, handle: int) -> None:
        """Open a grace window for a participant never seen inside the zone."""
        participant = self._participants.get(handle)
        if participant is not None and participant.last_safe_at is None:
            participant.last_safe_at = self.clock.now()

    def apply_damage(self, handle: int, amount: float) -> None:
        participant = self._participants.get(handle)
        if participant is None or not participant.alive:
            return
        actor = self.presence.lookup(handle)
        if actor is None:
            return

        participant.damage_taken += amount
        self._persist_stats(participant, damage_taken=participant.damage_taken)

        health = max(0.0, actor.health - amount)
        actor.set_health(health)
        if health <= 0:
            self.eliminate(handle)

    def eliminate(self, handle: int) -> bool:
        """
        Mark a participant dead. Idempotent.

        Returns:
            True if this call performed the elimination
        """
        participant = self._participants.get(handle)
        if participant is None or not participant.alive:
            return False

        participant.alive = False
        actor = self.presence.lookup(handle)
        if actor is not None:
            actor.set_flag(FLAG_ALIVE, False)
            actor.notify("You have been eliminated!")
            self._send_to_spectator(actor)

        if self._event_id is not None:
            fire_and_forget(
                "mark_participant_death",
                self.store.mark_participant_death, self._event_id, participant.identifier,
            )
            self._log("ELIMINATED", f"{participant.name} was eliminated")

        logger.info("Participant eliminated: %s", participant.name)
        if self.listener is not None:
            self.listener.on_participant_eliminated(replace(participant))
        return True

    def _send_to_spectator(self, actor: "Actor") -> None:
        actor.set_dimension(self.config.spectator_dimension)
        actor.emit(SPECTATOR_MODE_EVENT, True)
        self._spectator_targets.pop(actor.handle, None)

    def grant_immunity(self, handle: int, seconds: float) -> None:
        participant = self._participants.get(handle)
        if participant is None or self._event_id is None:
            return

        participant.immune_until = self.clock.now() + seconds
        actor = self.presence.lookup(handle)
        if actor is not None:
            actor.notify(f"You are immune for {seconds:g} seconds!")
        self._persist_stats(
            participant,
            immunity_until=datetime.now(timezone.utc) + timedelta(seconds=seconds),
        )
        self._log("IMMUNITY", f"{participant.name} gained immunity for {seconds:g}s")

    def record_kill(self, handle: int) -> None:
        participant = self._participants.get(handle)
        if participant is None or self._event_id is None:
            return
        participant.kills += 1
        self._persist_stats(participant, kills=participant.kills)
        self._log("KILL", f"{participant.name} has {participant.kills} kill(s)")

    def use_bandage(self, handle: int) -> BandageResult:
        participant = self._participants.get(handle)
        actor = self.presence.lookup(handle)
        if participant is None or not participant.alive or actor is None:
            return {"success": False, "reason": "Invalid player."}

        bandages = int(actor.get_flag(FLAG_BANDAGES, 0) or 0)
        if bandages <= 0:
            return {"success": False, "reason": "You have no bandages left."}

        actor.set_flag(FLAG_BANDAGES, bandages - 1)
        actor.set_health(min(self.config.max_health, actor.health + self.config.bandage_heal))
        self._log("BANDAGE", f"{participant.name} used a bandage")
        return {"success": True, "health": actor.health, "remaining": bandages - 1}

    def give_item(self, handle: int, item: str, amount: int, strip: bool = False) -> bool:
        """Hand an item to a live participant, optionally clearing the loadout first."""
        if not self.is_alive(handle):
            return False
        actor = self.presence.lookup(handle)
        if actor is None:
            return False
        if strip:
            actor.remove_all_items()
        actor.give_item(item, amount)
        return True

    def notify(self, handle: int, message: str) -> bool:
        actor = self.presence.lookup(handle)
        if actor is None:
            return False
        actor.notify(message)
        return True

    def emit_to_alive(self, event: str, *args) -> None:
        """Trigger a client event on every live participant still connected."""
        for participant in self._participants.values():
            if not participant.alive:
                continue
            actor = self.presence.lookup(participant.handle)
            if actor is not None:
                actor.emit(event, *args)

    def teleport_all(self, center: Point3) -> None:
        for participant in self._participants.values():
            actor = self.presence.lookup(participant.handle)
            if actor is not None:
                actor.teleport(center)

    # ── Spectating ────────────────────────────────────────────

    def attach_spectator(self, handle: int, target_handle: int) -> bool:
        """
        Follow another actor: copy its dimension and position.

        Works for any connected actor, participant or not. Attaching to
        a new target replaces the previous one.

        Returns:
            False if either actor is gone or the target is the spectator
        """
        if handle == target_handle:
            return False
        spectator = self.presence.lookup(handle)
        target = self.presence.lookup(target_handle)
        if spectator is None or target is None:
            return False

        spectator.set_dimension(target.dimension)
        spectator.teleport(target.position)
        spectator.emit(SPECTATOR_ATTACH_EVENT, target_handle)
        self._spectator_targets[handle] = target_handle
        return True

    def detach_spectator(self, handle: int) -> bool:
        """Stop following. Returns True if the actor had a target."""
        actor = self.presence.lookup(handle)
        if actor is not None:
            actor.emit(SPECTATOR_DETACH_EVENT)
        return self._spectator_targets.pop(handle, None) is not None

    def spectator_target(self, handle: int) -> Optional[int]:
        return self._spectator_targets.get(handle)

    def is_spectating(self, handle: int) -> bool:
        return handle in self._spectator_targets

    # ── Side effects ──────────────────────────────────────────

    def _persist_stats(self, participant: Participant, **fields) -> None:
        if self._event_id is None:
            return
        fire_and_forget(
            "update_participant_stats",
            self.store.update_participant_stats,
            self._event_id, participant.identifier, **fields,
        )

    def _log(self, entry_type: str, message: str) -> None:
        if self._event_id is None:
            return
        fire_and_forget("match_log", self.match_log.log, self._event_id, entry_type, message)
