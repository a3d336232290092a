# Area: Core
"""Planar geometry helpers for the zone and the spawner."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Point3:
    """World position. Only x/y matter for zone checks; z is carried along."""

    x: float
    y: float
    z: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_any(cls, value: Any) -> "Point3":
        """Build from a Point3, a mapping with x/y[/z] or a 2/3-sequence."""
        if isinstance(value, Point3):
            return value
        if isinstance(value, dict):
            return cls(float(value["x"]), float(value["y"]), float(value.get("z", 0.0)))
        coords = [float(c) for c in value]
        if len(coords) == 2:
            coords.append(0.0)
        return cls(*coords)


def distance_2d(a: Point3, b: Point3) -> float:
    """Distance between two points ignoring height."""
    return math.hypot(a.x - b.x, a.y - b.y)


def random_point_in_circle(
    center: Point3, radius: float, rng: Optional[random.Random] = None
) -> Point3:
    """
    Uniform random point inside the disc of ``radius`` around ``center``.

    Uses the triangle-fold on the sum of two uniforms, which gives the
    linear radial density a uniform disc needs without a sqrt.
    """
    rng = rng or random
    t = 2 * math.pi * rng.random()
    u = rng.random() + rng.random()
    r = 2 - u if u > 1 else u
    return Point3(
        center.x + radius * r * math.cos(t),
        center.y + radius * r * math.sin(t),
        center.z,
    )
