# Area: Presence
"""
circle_royale.demo — Scripted bots for demo runs
================================================

DemoDriver moves simulated actors once per tick on the event's own
scheduler: toward an untaken crate during the loot phase, toward the
pending checkpoint or final drop when one is live, otherwise toward
the zone center. Bots that end a tick close together may fight.
"""

import logging
import random
from typing import Optional

from ._core.geometry import Point3, distance_2d, random_point_in_circle
from ._event.orchestrator import EventOrchestrator
from .simulated import SimulatedPresence, drift_toward, wander

logger = logging.getLogger("circle_royale.demo")

DRIVER_TIMER = "demo.wander"
PICKUP_RANGE = 2.0
FIGHT_RANGE = 15.0


class DemoDriver:
    """Per-tick bot behaviour for a SimulatedPresence."""

    def __init__(
        self,
        orchestrator: EventOrchestrator,
        presence: SimulatedPresence,
        rng: Optional[random.Random] = None,
        speed: float = 6.0,
        fight_chance: float = 0.05,
    ):
        self.orchestrator = orchestrator
        self.presence = presence
        self.rng = rng or random.Random()
        self.speed = speed
        self.fight_chance = fight_chance

    def attach(self, interval: float = 1.0) -> None:
        self.orchestrator.scheduler.call_every(DRIVER_TIMER, interval, self.tick)

    def detach(self) -> None:
        self.orchestrator.scheduler.cancel(DRIVER_TIMER)

    def scatter(self, radius: float) -> None:
        """Spread alive bots uniformly inside ``radius`` of the zone center."""
        center = self.orchestrator.zone.center
        for participant in self.orchestrator.registry.get_alive():
            actor = self.presence.lookup(participant.handle)
            if actor is not None:
                actor.move_to(random_point_in_circle(center, radius, self.rng))

    def tick(self) -> None:
        if not self.orchestrator.is_event_running():
            self.detach()
            return
        for participant in self.orchestrator.registry.get_alive():
            if not self.orchestrator.is_event_running():
                return
            actor = self.presence.lookup(participant.handle)
            if actor is None or not self.orchestrator.registry.is_alive(participant.handle):
                continue
            self._step(actor)
        self._skirmish()

    def _step(self, actor) -> None:
        orchestrator = self.orchestrator
        spawner = orchestrator.spawner

        drop = spawner.final_drop
        if drop.active and not drop.taken and drop.position is not None:
            if self._reach(actor, drop.position):
                orchestrator.collect_final_drop(actor.handle)
            return

        checkpoint = spawner.active_checkpoint
        if checkpoint is not None:
            if self._reach(actor, checkpoint.position):
                orchestrator.claim_immunity(actor.handle)
            return

        crates = [c for c in spawner.crates if not c.taken]
        if crates and not actor.items:
            crate = min(crates, key=lambda c: distance_2d(actor.position, c.position))
            if self._reach(actor, crate.position):
                orchestrator.collect_crate(actor.handle, crate.crate_id)
            return

        zone = orchestrator.zone
        if distance_2d(actor.position, zone.center) > zone.radius * 0.5:
            drift_toward(actor, zone.center, self.speed)
        else:
            wander(actor, self.rng, self.speed)

    def _reach(self, actor, target: Point3) -> bool:
        drift_toward(actor, target, self.speed)
        return distance_2d(actor.position, target) <= PICKUP_RANGE

    def _skirmish(self) -> None:
        """Give each close pair of bots a small chance of one killing the other."""
        alive = self.orchestrator.registry.get_alive()
        for i, first in enumerate(alive):
            for second in alive[i + 1:]:
                if not self.orchestrator.is_event_running():
                    return
                registry = self.orchestrator.registry
                if not (registry.is_alive(first.handle) and registry.is_alive(second.handle)):
                    continue
                a, b = registry.position_of(first.handle), registry.position_of(second.handle)
                if a is None or b is None or distance_2d(a, b) > FIGHT_RANGE:
                    continue
                if self.rng.random() >= self.fight_chance:
                    continue
                killer, victim = (first, second) if self.rng.random() < 0.5 else (second, first)
                logger.debug("%s takes down %s", killer.name, victim.name)
                self.orchestrator.handle_actor_death(victim.handle, killer.handle)
