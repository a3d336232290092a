# Area: Event
"""
circle_royale._event.orchestrator — Event orchestrator
======================================================

Owns the single active event. Starts it, routes actor requests to the
spawner and registry, and runs exactly one terminal transition
(admin stop or winner declaration) per event.
"""
import logging
import random
from datetime import datetime, timezone
from typing import Any, Optional

from .active_event import ActiveEvent
from .enums import NO_WINNER, EventStatus, EventTransition
from .state_machine import EventStateMachine
from .._core.geometry import Point3
from .._core.registry import Participant, ParticipantRegistry
from .._core.scheduler import Scheduler
from .._core.spawner import LootSpawner
from .._core.zone import ZoneController
from .._shared.safe_write import fire_and_forget
from ..config import EventConfig
from ..errors import (
    EventAlreadyRunningError,
    InvalidRadiusError,
    NoActiveEventError,
    NoParticipantsError,
)
from ..interfaces import EventStore, MatchLog, PresenceLayer
from ..types import (
    BandageResult,
    CrateCollectResult,
    FinalDropCollectResult,
    ImmunityClaimResult,
)

logger = logging.getLogger("circle_royale.orchestrator")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class EventOrchestrator:
    """
    Runs one shrinking-circle event at a time.

    Builds the registry, zone and spawner, and is the listener for all
    three: zone shrinks, eliminations and pickup claims all land here.
    Only the orchestrator creates or destroys the ActiveEvent, and
    stop_event() / winner declaration both detach it as their first
    step, so exactly one terminal path runs per event.
    """

    def __init__(
        self,
        presence: PresenceLayer,
        store: EventStore,
        match_log: MatchLog,
        config: Optional[EventConfig] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
    ):
        self.presence, self.store, self.match_log = presence, store, match_log
        self.config = config or EventConfig()
        self.scheduler = scheduler or Scheduler()
        self.state_machine = EventStateMachine()
        self.registry = ParticipantRegistry(
            presence, store, match_log, self.config, self.scheduler.clock, listener=self)
        self.zone = ZoneController(
            self.scheduler, self.registry, match_log, self.config, listener=self)
        self.spawner = LootSpawner(
            self.scheduler, self.registry, presence, match_log, self.config,
            listener=self, rng=rng)
        self._active: Optional[ActiveEvent] = None

    @property
    def active_event(self) -> Optional[ActiveEvent]:
        return self._active

    def is_event_running(self) -> bool:
        return self._active is not None

    # ── Start ─────────────────────────────────────────────────

    def start_event(self) -> int:
        """
        Create, prepare and start a new event.

        Returns:
            The persisted event id

        Raises:
            EventAlreadyRunningError: If an event is already live
            NoParticipantsError: If nobody is connected
        """
        if self._active is not None or not self.state_machine.can_transition(
                EventTransition.START_REQUESTED):
            raise EventAlreadyRunningError(self._active.event_id if self._active else None)
        self.state_machine.transition(EventTransition.START_REQUESTED)

        event_id: Optional[int] = None
        try:
            event_id = self.store.create_event(self.config.event_name)
            log_path = fire_and_forget("match_log.init", self.match_log.init, event_id)
            self._log(event_id, "INIT", "Event created")

            center = self.config.center_point
            initial_players = self.registry.prepare(event_id, center)
            if initial_players == 0:
                raise NoParticipantsError(event_id)

            self._active = ActiveEvent(
                event_id=event_id, name=self.config.event_name,
                started_at=self.scheduler.now(), center=center,
                initial_players=initial_players, log_path=log_path)
            self.zone.initialize(event_id, center)
            self.spawner.start(event_id, center, self.config.start_radius)
            self.zone.start()
        except Exception:
            self._abort_start(event_id)
            raise

        self.state_machine.transition(EventTransition.STARTED)
        fire_and_forget("update_event_status", self.store.update_event_status,
                        event_id, EventStatus.LIVE.value)
        logger.info("Event %s live with %d participants", event_id, initial_players)
        self._broadcast(f"{self.config.event_name} event has started! Stay inside the zone.")
        self._broadcast("Loot phase active! Find your weapon before the circle closes.")
        return event_id

    def _abort_start(self, event_id: Optional[int]) -> None:
        self.zone.reset()
        self.spawner.stop()
        self.registry.reset()
        self._active = None
        if event_id is not None:
            logger.warning("Event %s could not start", event_id)
            fire_and_forget("update_event_status", self.store.update_event_status,
                            event_id, EventStatus.CANCELLED.value)
            fire_and_forget("match_log.finalize", self.match_log.finalize, event_id,
                            {"winner": None, "reason": "Start failed", "initial_players": 0})
        self.state_machine.transition(EventTransition.START_FAILED)

    # ── Terminal transitions ──────────────────────────────────

    def stop_event(self, reason: str = "Stopped by admin") -> bool:
        """Stop the live event without a winner. Returns False if none was live."""
        return self._finish(winner=None, reason=reason)

    def _declare_winner(self, winner: Participant) -> bool:
        return self._finish(winner=winner, reason=None)

    def _finish(self, winner: Optional[Participant], reason: Optional[str]) -> bool:
        event, self._active = self._active, None
        if event is None:
            return False

        try:
            self._wind_down(event, winner, reason)
        finally:
            self.registry.reset()
            self.zone.reset()
            self.state_machine.transition(
                EventTransition.STOPPED if winner is None else EventTransition.WINNER_DECLARED)
        return True

    def _wind_down(self, event: ActiveEvent, winner: Optional[Participant],
                   reason: Optional[str]) -> None:
        """Persist, log and announce the end of a detached event."""
        self.zone.stop()
        self.spawner.stop()
        event_id = event.event_id
        duration = event.duration_seconds(self.scheduler.now())
        fire_and_forget("mark_event_ended", self.store.mark_event_ended,
                        event_id, datetime.now(timezone.utc))

        if winner is None:
            self._log(event_id, "STOP", f"Event stopped: {reason}")
            summary = event.build_summary(duration, reason=reason)
        else:
            self._log(event_id, "WINNER", f"{winner.name} won the event")
            summary = event.build_summary(duration, winner.name, winner.identifier)
        log_path = fire_and_forget(
            "match_log.finalize", self.match_log.finalize, event_id, summary) or event.log_path
        fire_and_forget(
            "create_event_result", self.store.create_event_result, event_id,
            winner.identifier if winner else NO_WINNER, duration, event.initial_players,
            log_path)

        if winner is not None:
            actor = self.presence.lookup(winner.handle)
            if actor is not None:
                actor.notify("You are the champion!")
            self._broadcast(f"Winner: {winner.name}")
            logger.info("Event %s won by %s after %ds", event_id, winner.name, duration)
        else:
            logger.info("Event %s stopped after %ds: %s", event_id, duration, reason)

    # ── Administrative overrides ──────────────────────────────

    def adjust_center(self, center: Any) -> Point3:
        if self._active is None:
            raise NoActiveEventError("adjust_center")
        point = Point3.from_any(center)
        self._active.center = point
        self.zone.set_center(point)
        self.registry.teleport_all(point)
        self._broadcast(f"Circle center moved to {point.x:.1f}, {point.y:.1f}")
        return point

    def adjust_radius(self, radius: float) -> None:
        if self._active is None:
            raise NoActiveEventError("adjust_radius")
        if radius <= 0:
            raise InvalidRadiusError(radius)
        self.zone.set_radius(radius)
        self._broadcast(f"Circle radius set to {radius:.1f}")

    # ── Actor requests ────────────────────────────────────────

    def claim_immunity(self, handle: int) -> Optional[ImmunityClaimResult]:
        if self._active is None:
            return None
        result = self.spawner.claim_immunity(handle)
        if result is None:
            self._notify(handle, "No active immunity point or it expired.")
        elif result["bonus"]:
            self._notify(handle, f"Bonus {self.config.bonus_weapon} acquired from checkpoint!")
        return result

    def collect_crate(self, handle: int, crate_id: str) -> CrateCollectResult:
        result = self.spawner.collect_crate(handle, crate_id)
        if result["success"]:
            self._notify(handle, f"You equipped {result['weapon']}.")
        else:
            self._notify(handle, result.get("reason", "Unable to collect crate."))
        return result

    def collect_final_drop(self, handle: int) -> FinalDropCollectResult:
        result = self.spawner.collect_final_drop(handle)
        if result["success"]:
            self._notify(handle, f"{self.config.final_drop_weapon} secured! Make it count.")
        else:
            self._notify(handle, result.get("reason", "No final drop available."))
        return result

    def use_bandage(self, handle: int) -> BandageResult:
        if self._active is None:
            return {"success": False, "reason": "No active event."}
        result = self.registry.use_bandage(handle)
        if result["success"]:
            self._notify(handle, f"Bandage used. +{self.config.bandage_heal:g} HP")
        else:
            self._notify(handle, result["reason"])
        return result

    def spectate(self, handle: int, target_handle: Optional[int] = None) -> bool:
        """
        Follow ``target_handle``, or stop following when it is None.

        Allowed with or without a live event. Returns True if the actor
        is now following the target (or was following someone, when
        detaching).
        """
        if target_handle is None:
            was_spectating = self.registry.detach_spectator(handle)
            self._notify(handle, "Spectator mode cleared.")
            return was_spectating

        target = self.presence.lookup(target_handle)
        if target is None:
            self._notify(handle, "Player not found.")
            return False
        if not self.registry.attach_spectator(handle, target_handle):
            self._notify(handle, "You cannot spectate that player.")
            return False
        self._notify(handle, f"Spectating {target.name}.")
        return True

    # ── Presence notifications ────────────────────────────────

    def handle_actor_death(self, handle: int, killer_handle: Optional[int] = None) -> bool:
        if self._active is None:
            return False
        if killer_handle is not None and killer_handle != handle \
                and self.registry.is_alive(killer_handle):
            self.registry.record_kill(killer_handle)
        return self.registry.eliminate(handle)

    def handle_actor_quit(self, handle: int) -> bool:
        if self._active is None:
            return False
        return self.registry.eliminate(handle)

    # ── Listener callbacks ────────────────────────────────────

    def on_zone_shrink(self, radius: float, center: Point3) -> None:
        if self._active is None:
            return
        self._broadcast(f"Circle shrink! New radius: {radius:.1f}")
        self.spawner.spawn_immunity_point(center, radius)
        self.spawner.handle_shrink(radius, center)

    def on_participant_eliminated(self, participant: Participant) -> None:
        if self._active is None:
            return
        alive = self.registry.get_alive()
        if len(alive) == 1:
            self._declare_winner(alive[0])
        elif not alive:
            self._declare_winner(participant)

    def on_crate_collected(self, participant: Participant, weapon: str, crate_id: str) -> None:
        if self._active is None:
            return
        self._active.loot_history.append({
            "player": participant.name, "identifier": participant.identifier,
            "weapon": weapon, "crate_id": crate_id, "timestamp": _timestamp()})

    def on_checkpoint_claimed(self, participant: Participant, immunity_seconds: float,
                              granted_bonus: bool) -> None:
        if self._active is None:
            return
        self._active.checkpoint_history.append({
            "player": participant.name, "identifier": participant.identifier,
            "immunity_seconds": immunity_seconds, "granted_bonus": granted_bonus,
            "timestamp": _timestamp()})

    def on_final_drop_collected(self, participant: Participant, weapon: str) -> None:
        if self._active is None or self._active.final_drop is not None:
            return
        self._active.final_drop = {
            "player": participant.name, "identifier": participant.identifier,
            "weapon": weapon, "timestamp": _timestamp()}

    # ── Helpers ───────────────────────────────────────────────

    def _broadcast(self, message: str) -> None:
        self.presence.broadcast(f"{self.config.chat_prefix} {message}")

    def _notify(self, handle: int, message: str) -> None:
        actor = self.presence.lookup(handle)
        if actor is not None:
            actor.notify(f"{self.config.chat_prefix} {message}")

    def _log(self, event_id: int, entry_type: str, message: str) -> None:
        fire_and_forget("match_log", self.match_log.log, event_id, entry_type, message)
