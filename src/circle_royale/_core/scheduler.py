# Area: Core
"""
circle_royale._core.scheduler — Named, cancellable timers
=========================================================

Every timer in the arena (zone shrink, 1 Hz damage, loot phase end,
checkpoint expiry) is registered here by name. Nothing sleeps: the
owner of the loop calls ``run_pending()`` (real time) or ``advance()``
(virtual time, tests and the simulated demo) and due callbacks run
synchronously, one complete callback at a time.
"""

from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol

logger = logging.getLogger("circle_royale.scheduler")


class Clock(Protocol):
    def now(self) -> float: ...


class MonotonicClock:
    """Wall clock backed by ``time.monotonic``."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """Virtual clock that only moves when told to."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("Cannot move a clock backwards")
        self._now += seconds

    def advance_to(self, timestamp: float) -> None:
        if timestamp > self._now:
            self._now = timestamp


@dataclass
class _Timer:
    name: str
    due: float
    callback: Callable[[], None]
    interval: Optional[float]
    seq: int


class Scheduler:
    """
    Registry of one-shot and periodic timers keyed by name.

    Registering a name that is already pending replaces the old timer.
    Timers due at the same instant fire in registration order.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock = clock or MonotonicClock()
        self._timers: Dict[str, _Timer] = {}
        self._seq = itertools.count()

    def now(self) -> float:
        return self.clock.now()

    def call_later(
        self, name: str, delay: float, callback: Callable[[], None]
    ) -> None:
        """Run ``callback`` once, ``delay`` seconds from now."""
        self._register(name, max(0.0, delay), callback, None)

    def call_every(
        self, name: str, interval: float, callback: Callable[[], None]
    ) -> None:
        """Run ``callback`` every ``interval`` seconds, first after one interval."""
        if interval <= 0:
            raise ValueError(f"Timer interval must be positive: {interval!r}")
        self._register(name, interval, callback, interval)

    def _register(
        self,
        name: str,
        delay: float,
        callback: Callable[[], None],
        interval: Optional[float],
    ) -> None:
        self._timers[name] = _Timer(
            name=name,
            due=self.clock.now() + delay,
            callback=callback,
            interval=interval,
            seq=next(self._seq),
        )
        logger.debug("Timer set: %s (%.1fs)", name, delay)

    def cancel(self, name: str) -> bool:
        """Cancel a timer. Returns False if nothing was pending."""
        if self._timers.pop(name, None) is None:
            return False
        logger.debug("Timer cancelled: %s", name)
        return True

    def cancel_all(self) -> None:
        self._timers.clear()
        logger.debug("All timers cancelled")

    def is_active(self, name: str) -> bool:
        return name in self._timers

    def pending(self) -> List[str]:
        return sorted(self._timers, key=lambda n: (self._timers[n].due, self._timers[n].seq))

    def next_due(self) -> Optional[float]:
        if not self._timers:
            return None
        return min(t.due for t in self._timers.values())

    def run_pending(self) -> int:
        """
        Fire every timer due at the current clock time.

        Periodic timers are re-armed before their callback runs, so a
        callback may cancel its own timer. A timer cancelled by an earlier
        callback in the same pass does not fire.

        Returns:
            Number of callbacks executed
        """
        now = self.clock.now()
        fired = 0
        while True:
            due = [t for t in self._timers.values() if t.due <= now]
            if not due:
                return fired
            timer = min(due, key=lambda t: (t.due, t.seq))
            if timer.interval is None:
                del self._timers[timer.name]
            else:
                timer.due += timer.interval
            timer.callback()
            fired += 1

    def advance(self, seconds: float) -> int:
        """
        Move a ManualClock forward, firing timers at their exact due times.

        Raises:
            TypeError: If the scheduler runs on a real clock
        """
        if not isinstance(self.clock, ManualClock):
            raise TypeError("advance() requires a ManualClock")
        target = self.clock.now() + seconds
        fired = 0
        while True:
            due = self.next_due()
            if due is None or due > target:
                break
            self.clock.advance_to(due)
            fired += self.run_pending()
        self.clock.advance_to(target)
        return fired
