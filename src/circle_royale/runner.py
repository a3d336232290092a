# Area: Runtime
"""
circle_royale.runner — Real-time event runner
=============================================

Drives an orchestrator's scheduler against the wall clock: poll for
due timers, sleep, repeat, until the event ends, the time limit passes
or the process receives SIGINT.
"""

from __future__ import annotations

import logging
import signal
import time
from typing import Optional

from ._event.orchestrator import EventOrchestrator

logger = logging.getLogger("circle_royale")


class EventRunner:
    """
    Blocking poll loop around one EventOrchestrator.

    Timer callback errors are logged and the loop keeps going; one bad
    tick must not take down a live event.
    """

    def __init__(self, orchestrator: EventOrchestrator, poll_interval: float = 0.1):
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")
        self.orchestrator = orchestrator
        self.scheduler = orchestrator.scheduler
        self.poll_interval = poll_interval
        self._running = False

    def run(self, max_seconds: Optional[float] = None, start: bool = True) -> None:
        """Start the event (unless already running) and block until it ends."""
        self._running = True
        previous = signal.signal(signal.SIGINT, lambda s, f: setattr(self, "_running", False))

        if start and not self.orchestrator.is_event_running():
            self.orchestrator.start_event()
        self._log_startup(max_seconds)
        deadline = None if max_seconds is None else self.scheduler.now() + max_seconds

        try:
            while self._running and self.orchestrator.is_event_running():
                if deadline is not None and self.scheduler.now() >= deadline:
                    logger.info("Time limit of %ss reached", max_seconds)
                    break
                try:
                    self.scheduler.run_pending()
                    time.sleep(self.poll_interval)
                except KeyboardInterrupt:
                    break
                except Exception as e:
                    logger.error(f"Loop error: {e}", exc_info=True)
                    time.sleep(self.poll_interval)
        finally:
            signal.signal(signal.SIGINT, previous)

        if self.orchestrator.is_event_running():
            self.orchestrator.stop_event("Runner stopped")
        logger.info("Event runner stopped.")

    def stop(self) -> None:
        self._running = False

    def _log_startup(self, max_seconds: Optional[float]) -> None:
        config = self.orchestrator.config
        logger.info("=" * 60)
        logger.info("  Circle Royale Runner — Starting")
        logger.info(f"  Event:  {config.event_name}")
        logger.info(f"  Radius: {config.start_radius:g} -> {config.min_radius:g}")
        logger.info(f"  Limit:  {max_seconds if max_seconds is not None else 'none'}")
        logger.info("=" * 60)
