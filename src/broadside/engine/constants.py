"""Limits and enumerations shared across the Battleship engine."""

from __future__ import annotations

from enum import Enum

MIN_BOARD_SIZE = 5
MAX_BOARD_SIZE = 10
DEFAULT_BOARD_SIZE = 10

MIN_SHIP_LENGTH = 2
MAX_SHIP_LENGTH = 5
DEFAULT_SHIP_LENGTH = 2

MAX_PLACEMENT_ATTEMPTS = 1000
BOARD_CAPACITY_THRESHOLD = 0.3

# Fleet composition scales with board area; every entry stays under the
# capacity threshold for its size.
DEFAULT_FLEET_TABLE: dict[int, tuple[int, ...]] = {
    10: (5, 4, 3, 2, 2),
    9: (5, 4, 3, 2, 2),
    8: (4, 3, 3, 2),
    7: (4, 3, 2),
    6: (3, 2, 2),
    5: (3, 2, 2),
}

DEFAULT_COMPUTER_NAME = "Computer"


class Direction(Enum):
    """Compass heading a ship extends towards from its origin cell."""

    NORTH = "N"
    EAST = "E"
    SOUTH = "S"
    WEST = "W"

    @property
    def delta(self) -> tuple[int, int]:
        """Return the (dx, dy) step between consecutive ship segments."""
        return _DELTAS[self]


_DELTAS = {
    Direction.NORTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
}


class CellState(Enum):
    """State of a single board cell."""

    EMPTY = "empty"
    OCCUPIED = "occupied"
    MISS = "miss"
    HIT = "hit"


class AttackResult(Enum):
    """Outcome reported to an attacker."""

    HIT = "hit"
    MISS = "miss"
    SUNK = "sunk"
    SUNK_ALL = "sunk-all"


class PlacementFailure(Enum):
    """Why a ship could not be placed."""

    OUT_OF_BOUNDS = "out-of-bounds"
    CELL_OCCUPIED = "cell-occupied"


class Strategy(Enum):
    """Targeting strategies available to automated contestants."""

    RANDOM = "random"
    HUNT_AND_TARGET = "hunt-and-target"

    @classmethod
    def _missing_(cls, value: object) -> Strategy | None:
        if value == "hunt":
            return cls.HUNT_AND_TARGET
        return None


DEFAULT_STRATEGY = Strategy.RANDOM
