"""Placement planner configuration."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .constants import BOARD_CAPACITY_THRESHOLD, DEFAULT_FLEET_TABLE, MAX_PLACEMENT_ATTEMPTS


def _default_fleet_table() -> dict[int, list[int]]:
    return {size: list(lengths) for size, lengths in DEFAULT_FLEET_TABLE.items()}


class PlannerConfig(BaseModel):
    """Tunables for random fleet placement.

    ``fleet_table`` maps a board size to the ship lengths placed on it.
    """

    fleet_table: dict[int, list[int]] = Field(default_factory=_default_fleet_table)
    capacity_threshold: float = Field(default=BOARD_CAPACITY_THRESHOLD, gt=0, le=1)
    max_placement_attempts: int = Field(default=MAX_PLACEMENT_ATTEMPTS, ge=1)

    @field_validator("fleet_table")
    @classmethod
    def _non_empty_fleets(cls, value: dict[int, list[int]]) -> dict[int, list[int]]:
        for size, lengths in value.items():
            if not lengths:
                raise ValueError(f"fleet for board size {size} is empty")
        return value

    def fleet_for(self, size: int) -> list[int] | None:
        """Return the configured ship lengths for ``size``, if any."""
        lengths = self.fleet_table.get(size)
        return list(lengths) if lengths is not None else None

    @classmethod
    def from_env(cls, **overrides: Any) -> PlannerConfig:
        """Construct config from `BROADSIDE_*` env vars."""

        data: dict[str, Any] = {}
        threshold = os.getenv("BROADSIDE_CAPACITY_THRESHOLD")
        if threshold:
            data["capacity_threshold"] = threshold.strip()
        attempts = os.getenv("BROADSIDE_MAX_PLACEMENT_ATTEMPTS")
        if attempts:
            data["max_placement_attempts"] = attempts.strip()
        table = os.getenv("BROADSIDE_FLEET_TABLE")
        if table:
            data["fleet_table"] = parse_fleet_table(table)
        data.update(overrides)
        return cls(**data)


def parse_fleet_table(text: str) -> dict[int, list[int]]:
    """Parse ``"10=5,4,3,2,2;5=3,2,2"`` into a fleet table."""
    table: dict[int, list[int]] = {}
    for entry in text.split(";"):
        entry = entry.strip()
        if not entry:
            continue
        if "=" not in entry:
            raise ValueError(f"fleet table entry {entry!r} must look like SIZE=L1,L2")
        size, lengths = entry.split("=", 1)
        table[int(size)] = [int(part) for part in lengths.split(",") if part.strip()]
    return table


@lru_cache(maxsize=1)
def load_planner_config() -> PlannerConfig:
    """Load and cache planner config from the environment."""

    return PlannerConfig.from_env()
