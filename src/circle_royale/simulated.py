# Area: Presence
"""
circle_royale.simulated — In-memory presence layer
==================================================

A PresenceLayer that lives entirely in process memory. Used by the
demo and by tests: actors record every notification, client event and
item they receive so behaviour can be inspected after the fact.
"""

import logging
import math
import random
from typing import Any, Dict, List, Optional, Tuple

from ._core.geometry import Point3
from .interfaces import Actor, PresenceLayer

logger = logging.getLogger("circle_royale.presence")


class SimulatedActor(Actor):
    """One connected actor with a position, health, loadout and flags."""

    def __init__(self, handle: int, name: str, position: Any = (0.0, 0.0, 0.0),
                 health: float = 100.0, identifier: Optional[str] = None):
        self._handle = handle
        self._name = name
        self._position = Point3.from_any(position)
        self._health = float(health)
        self._dimension = 0
        self.items: Dict[str, int] = {}
        self.flags: Dict[str, Any] = {}
        self.notifications: List[str] = []
        self.events: List[Tuple[str, tuple]] = []
        if identifier is not None:
            self.flags["arena:identifier"] = identifier

    @property
    def handle(self) -> int:
        return self._handle

    @property
    def name(self) -> str:
        return self._name

    @property
    def position(self) -> Point3:
        return self._position

    @property
    def health(self) -> float:
        return self._health

    def set_health(self, value: float) -> None:
        self._health = float(value)

    def teleport(self, position: Point3) -> None:
        self._position = Point3.from_any(position)

    def move_to(self, position: Any) -> None:
        """Player-driven movement; identical to teleport in memory."""
        self._position = Point3.from_any(position)

    @property
    def dimension(self) -> int:
        return self._dimension

    def set_dimension(self, dimension: int) -> None:
        self._dimension = dimension

    def notify(self, message: str) -> None:
        self.notifications.append(message)

    def emit(self, event: str, *args: Any) -> None:
        self.events.append((event, args))

    def give_item(self, item: str, amount: int) -> None:
        self.items[item] = self.items.get(item, 0) + amount

    def remove_all_items(self) -> None:
        self.items.clear()

    def get_flag(self, key: str, default: Any = None) -> Any:
        return self.flags.get(key, default)

    def set_flag(self, key: str, value: Any) -> None:
        self.flags[key] = value

    def events_named(self, event: str) -> List[tuple]:
        return [args for name, args in self.events if name == event]

    def __repr__(self) -> str:
        return f"SimulatedActor({self._handle}, {self._name!r}, hp={self._health:g})"


class SimulatedPresence(PresenceLayer):
    """Connected actors keyed by handle, plus a broadcast transcript."""

    def __init__(self, actors: Optional[List[SimulatedActor]] = None):
        self._actors: Dict[int, SimulatedActor] = {}
        self.broadcasts: List[str] = []
        for actor in actors or []:
            self.connect(actor)

    def connect(self, actor: SimulatedActor) -> SimulatedActor:
        self._actors[actor.handle] = actor
        return actor

    def disconnect(self, handle: int) -> Optional[SimulatedActor]:
        return self._actors.pop(handle, None)

    def spawn(self, count: int, prefix: str = "Bot") -> List[SimulatedActor]:
        """Connect ``count`` fresh actors with consecutive handles."""
        start = max(self._actors, default=0) + 1
        return [
            self.connect(SimulatedActor(handle, f"{prefix}{handle}"))
            for handle in range(start, start + count)
        ]

    def connected_actors(self) -> List[Actor]:
        return list(self._actors.values())

    def lookup(self, handle: int) -> Optional[Actor]:
        return self._actors.get(handle)

    def broadcast(self, message: str) -> None:
        logger.debug("broadcast: %s", message)
        self.broadcasts.append(message)


def wander(actor: SimulatedActor, rng: random.Random, step: float) -> None:
    """Move an actor a random distance up to ``step`` in a random direction."""
    angle = rng.uniform(0.0, 2 * math.pi)
    distance = rng.uniform(0.0, step)
    pos = actor.position
    actor.move_to(Point3(pos.x + math.cos(angle) * distance,
                         pos.y + math.sin(angle) * distance, pos.z))


def drift_toward(actor: SimulatedActor, target: Point3, step: float) -> None:
    """Move an actor up to ``step`` units straight toward ``target``."""
    pos = actor.position
    dx, dy = target.x - pos.x, target.y - pos.y
    distance = math.hypot(dx, dy)
    if distance <= step or distance == 0:
        actor.move_to(Point3(target.x, target.y, pos.z))
        return
    ratio = step / distance
    actor.move_to(Point3(pos.x + dx * ratio, pos.y + dy * ratio, pos.z))
