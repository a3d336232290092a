# Area: Shared
"""
circle_royale.config — Event configuration
==========================================

All tunables of one event: zone geometry and cadence, damage, checkpoint
and loot rules, loadout items. Values come from (lowest to highest
priority) the defaults below, an optional JSON file, and
``CIRCLE_ROYALE_<FIELD>`` environment variables (a ``.env`` file in the
working directory is loaded first).

Example config.json:
    {
        "center": [120.0, -45.0, 30.0],
        "start_radius": 250,
        "shrink_interval_seconds": 45
    }
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ._core.geometry import Point3

logger = logging.getLogger("circle_royale.config")

ENV_PREFIX = "CIRCLE_ROYALE_"


class EventConfig(BaseModel):
    """Validated, immutable settings for one arena event."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    event_name: str = "Shrinking Circle"
    center: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    # Zone
    start_radius: float = Field(300.0, gt=0)
    min_radius: float = Field(10.0, gt=0)
    shrink_step: float = Field(25.0, ge=0)
    shrink_interval_seconds: float = Field(60.0, gt=0)
    damage_interval_seconds: float = Field(1.0, gt=0)
    grace_seconds: float = Field(10.0, ge=0)
    damage_outside_per_second: float = Field(5.0, ge=0)

    # Immunity checkpoint
    checkpoint_timeout_seconds: float = Field(30.0, gt=0)
    immunity_seconds: float = Field(15.0, gt=0)
    checkpoint_bonus_chance: float = Field(0.2, ge=0, le=1)
    checkpoint_spawn_factor: float = Field(0.8, gt=0, le=1)
    bonus_weapon: str = "weapon_pistol"
    bonus_ammo: int = Field(6, ge=0)

    # Loot phase
    loot_phase_seconds: float = Field(60.0, gt=0)
    loot_crate_count: int = Field(3, ge=1)
    loot_spawn_factor: float = Field(0.7, gt=0, le=1)
    melee_weapons: Tuple[str, ...] = ("weapon_bat", "weapon_knuckle", "weapon_hammer")

    # Final drop
    final_drop_radius: float = Field(50.0, gt=0)
    final_drop_weapon: str = "weapon_rpg"
    final_drop_ammo: int = Field(1, ge=0)

    # Participants
    max_health: float = Field(100.0, gt=0)
    bandage_heal: float = Field(30.0, ge=0)
    starting_bandages: int = Field(1, ge=0)
    spectator_dimension: int = 999
    chat_prefix: str = "[Arena]"

    @field_validator("melee_weapons")
    @classmethod
    def _weapons_not_empty(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError("melee_weapons must contain at least one weapon")
        return value

    @model_validator(mode="after")
    def _radius_floor_below_start(self) -> "EventConfig":
        if self.min_radius > self.start_radius:
            raise ValueError("min_radius cannot exceed start_radius")
        return self

    @property
    def center_point(self) -> Point3:
        return Point3(*self.center)


def _env_overrides() -> Dict[str, Any]:
    """Collect CIRCLE_ROYALE_* variables, JSON-decoding values when possible."""
    overrides: Dict[str, Any] = {}
    for field_name in EventConfig.model_fields:
        raw = os.environ.get(ENV_PREFIX + field_name.upper())
        if raw is None:
            continue
        try:
            overrides[field_name] = json.loads(raw)
        except json.JSONDecodeError:
            overrides[field_name] = raw
    return overrides


def load_config(config_path: Optional[str] = None) -> EventConfig:
    """
    Load configuration from file and environment.

    Args:
        config_path: Optional path to a JSON config file

    Returns:
        Validated EventConfig

    Raises:
        pydantic.ValidationError: If any value is invalid
    """
    load_dotenv()
    data: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        else:
            logger.warning("Config file not found: %s (using defaults)", config_path)

    data.update(_env_overrides())
    return EventConfig(**data)
