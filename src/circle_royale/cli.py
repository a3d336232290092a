# Area: Runtime
"""
circle_royale.cli — Command-line interface
==========================================

Runs one complete event with simulated bots.

Usage:
    python -m circle_royale                         # 8 bots, virtual time
    python -m circle_royale --players 20 --seed 7   # reproducible run
    python -m circle_royale --config arena.json     # custom event config
    python -m circle_royale --realtime              # wall-clock timers

Virtual time (the default) advances a manual clock second by second,
so a full event finishes instantly. Configuration can also come from
CIRCLE_ROYALE_* environment variables or a .env file.
"""

import argparse
import logging
import random
import sys
from typing import List, Optional

from ._core.scheduler import ManualClock, MonotonicClock, Scheduler
from ._event.orchestrator import EventOrchestrator
from ._event.store import SqliteEventStore
from ._shared import MatchLogWriter, setup_logging
from .config import load_config
from .demo import DemoDriver
from .errors import CircleRoyaleError
from .runner import EventRunner
from .simulated import SimulatedPresence


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Circle Royale - run a shrinking circle event with simulated players",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m circle_royale
  python -m circle_royale --players 20 --seed 7
  python -m circle_royale --config arena.json --db arena.db
  CIRCLE_ROYALE_START_RADIUS=120 python -m circle_royale
        """,
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument("--players", type=int, default=8, help="Number of simulated players")
    parser.add_argument("--db", type=str, default="arena.db", help="SQLite database path")
    parser.add_argument("--log-dir", type=str, default="logs", help="Match log directory")
    parser.add_argument("--log-file", type=str, default="circle_royale.log",
                        help="Process log file (JSON lines)")
    parser.add_argument("--seed", type=int, help="Random seed for a reproducible run")
    parser.add_argument("--realtime", action="store_true",
                        help="Run timers against the wall clock instead of virtual time")
    parser.add_argument("--max-seconds", type=float, default=3600.0,
                        help="Stop the event after this many (virtual or real) seconds")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def build_orchestrator(args: argparse.Namespace, presence: SimulatedPresence,
                       rng: random.Random) -> EventOrchestrator:
    config = load_config(args.config)
    clock = MonotonicClock() if args.realtime else ManualClock()
    return EventOrchestrator(
        presence=presence,
        store=SqliteEventStore(args.db),
        match_log=MatchLogWriter(args.log_dir),
        config=config,
        scheduler=Scheduler(clock),
        rng=rng,
    )


def start_with_driver(orchestrator: EventOrchestrator, driver: DemoDriver) -> int:
    """Start the event, spread the bots out and hand them to the driver."""
    event_id = orchestrator.start_event()
    driver.scatter(orchestrator.config.start_radius * 0.5)
    driver.attach()
    return event_id


def run_virtual(orchestrator: EventOrchestrator, max_seconds: float) -> None:
    """Advance virtual time one second at a time until the event ends."""
    scheduler = orchestrator.scheduler
    deadline = scheduler.now() + max_seconds
    while orchestrator.is_event_running() and scheduler.now() < deadline:
        scheduler.advance(1.0)
    if orchestrator.is_event_running():
        orchestrator.stop_event("Time limit reached")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    setup_logging(log_file_path=args.log_file,
                  level=logging.DEBUG if args.verbose else logging.INFO)

    if args.players < 1:
        print("Error: --players must be at least 1", file=sys.stderr)
        return 1

    rng = random.Random(args.seed)
    presence = SimulatedPresence()
    presence.spawn(args.players)
    orchestrator = build_orchestrator(args, presence, rng)
    driver = DemoDriver(orchestrator, presence, rng=rng)

    try:
        event_id = start_with_driver(orchestrator, driver)
        if args.realtime:
            EventRunner(orchestrator).run(max_seconds=args.max_seconds, start=False)
        else:
            run_virtual(orchestrator, args.max_seconds)
    except CircleRoyaleError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        driver.detach()

    print_outcome(orchestrator, event_id)
    return 0


def print_outcome(orchestrator: EventOrchestrator, event_id: int) -> None:
    store = orchestrator.store
    result = store.get_result(event_id) if isinstance(store, SqliteEventStore) else None
    if result is None:
        print(f"Event {event_id} finished without a result record.")
        return
    print(f"Event {event_id}: winner={result['winner_identifier']} "
          f"duration={result['duration_seconds']}s players={result['total_players']}")
    if result.get("log_path"):
        print(f"Match log: {result['log_path']}")
