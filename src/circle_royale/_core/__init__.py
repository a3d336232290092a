# Area: Core
"""
Arena core — the timer-driven components of one event.

This package handles:
- Geometry helpers (planar distance, disc sampling)
- Named cancellable timers over a real or virtual clock
- Participant registry (liveness, damage, immunity)
- Shrinking zone controller
- Loot crate, immunity checkpoint and final drop spawner
"""

from .geometry import Point3, distance_2d, random_point_in_circle
from .scheduler import Clock, ManualClock, MonotonicClock, Scheduler
from .registry import Participant, ParticipantRegistry
from .zone import ZoneController, ZoneState
from .spawner import Checkpoint, FinalDrop, LootCrate, LootSpawner

__all__ = [
    "Point3",
    "distance_2d",
    "random_point_in_circle",
    "Clock",
    "ManualClock",
    "MonotonicClock",
    "Scheduler",
    "Participant",
    "ParticipantRegistry",
    "ZoneController",
    "ZoneState",
    "Checkpoint",
    "FinalDrop",
    "LootCrate",
    "LootSpawner",
]
