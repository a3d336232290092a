# Area: Core
"""
circle_royale._core.zone — Shrinking zone controller
====================================================

Two timers per running zone:

    zone.shrink  every shrink_interval_seconds: radius -= shrink_step,
                 floored at min_radius, then the listener is notified
    zone.damage  every damage_interval_seconds: participants outside
                 the radius, not immune and past their grace window
                 take damage_outside_per_second

Idle -> Running on start(), Running -> Idle on stop(). stop() is safe
to call in any state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .geometry import Point3, distance_2d
from .registry import ParticipantRegistry
from .scheduler import Scheduler
from .._shared.safe_write import fire_and_forget

if TYPE_CHECKING:
    from ..config import EventConfig
    from ..interfaces import MatchLog, ZoneListener

logger = logging.getLogger("circle_royale.zone")

SHRINK_TIMER = "zone.shrink"
DAMAGE_TIMER = "zone.damage"


@dataclass
class ZoneState:
    center: Point3
    radius: float
    running: bool = False
    last_shrink_at: float = 0.0


class ZoneController:
    """Owns the safe zone geometry and its shrink/damage timers."""

    def __init__(
        self,
        scheduler: Scheduler,
        registry: ParticipantRegistry,
        match_log: "MatchLog",
        config: "EventConfig",
        listener: Optional["ZoneListener"] = None,
    ):
        self.scheduler = scheduler
        self.registry = registry
        self.match_log = match_log
        self.config = config
        self.listener = listener
        self.state = ZoneState(
            center=config.center_point,
            radius=config.start_radius,
            last_shrink_at=scheduler.now(),
        )
        self._event_id: Optional[int] = None

    @property
    def radius(self) -> float:
        return self.state.radius

    @property
    def center(self) -> Point3:
        return self.state.center

    @property
    def running(self) -> bool:
        return self.state.running

    def initialize(self, event_id: int, center: Point3) -> None:
        """Reset geometry for a new event. Does not start the timers."""
        self._event_id = event_id
        self.state = ZoneState(
            center=center,
            radius=self.config.start_radius,
            last_shrink_at=self.scheduler.now(),
        )

    def start(self) -> None:
        if self.state.running:
            return
        self.state.running = True
        self.scheduler.call_every(
            SHRINK_TIMER, self.config.shrink_interval_seconds, self.shrink_tick
        )
        self.scheduler.call_every(
            DAMAGE_TIMER, self.config.damage_interval_seconds, self.damage_tick
        )
        logger.info("Zone started at radius %.1f", self.state.radius)
        self._log("CIRCLE_START", f"Circle started at radius {self.state.radius:g}")

    def stop(self) -> None:
        """Cancel both timers. Safe to call repeatedly."""
        self.state.running = False
        self.scheduler.cancel(SHRINK_TIMER)
        self.scheduler.cancel(DAMAGE_TIMER)

    def reset(self) -> None:
        self.stop()
        self._event_id = None
        self.state = ZoneState(
            center=self.config.center_point,
            radius=self.config.start_radius,
            last_shrink_at=self.scheduler.now(),
        )

    # ── Administrative overrides ──────────────────────────────

    def set_center(self, center: Point3) -> None:
        self.state.center = center
        self._log("CIRCLE_CENTER", f"Circle center moved to {center.x:.1f}, {center.y:.1f}")

    def set_radius(self, radius: float) -> None:
        """Set the radius directly, bypassing the shrink rule."""
        self.state.radius = radius
        self._log("CIRCLE_RADIUS", f"Circle radius set to {radius:g}")

    # ── Timer callbacks ───────────────────────────────────────

    def shrink_tick(self) -> None:
        if not self.state.running:
            return
        self.state.radius = max(self.config.min_radius, self.state.radius - self.config.shrink_step)
        self.state.last_shrink_at = self.scheduler.now()
        logger.info("Zone shrunk to %.1f", self.state.radius)
        self._log("CIRCLE_SHRINK", f"Circle radius shrunk to {self.state.radius:g}")
        if self.listener is not None:
            self.listener.on_zone_shrink(self.state.radius, self.state.center)

    def damage_tick(self) -> None:
        if not self.state.running:
            return
        now = self.scheduler.now()
        grace = self.config.grace_seconds

        for participant in self.registry.get_alive():
            # an elimination earlier in this tick may have ended the event
            if not self.state.running:
                return
            position = self.registry.position_of(participant.handle)
            if position is None:
                continue

            if distance_2d(position, self.state.center) <= self.state.radius:
                self.registry.mark_safe(participant.handle)
                continue

            if self.registry.is_immune(participant.handle):
                continue

            if participant.last_safe_at is None:
                self.registry.start_grace(participant.handle)
                continue
            if now - participant.last_safe_at < grace:
                continue

            self.registry.apply_damage(participant.handle, self.config.damage_outside_per_second)
            if self.registry.is_alive(participant.handle):
                self.registry.notify(participant.handle, "You are outside the circle!")

    def _log(self, entry_type: str, message: str) -> None:
        if self._event_id is None:
            return
        fire_and_forget("match_log", self.match_log.log, self._event_id, entry_type, message)
