"""Targeting strategies for automated contestants."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections.abc import Set

from .board import Board
from .constants import CellState, Strategy
from .ship import Coordinate

# +x, -x, +y, -y
_NEIGHBOUR_OFFSETS = ((1, 0), (-1, 0), (0, 1), (0, -1))


class TargetingStrategy(ABC):
    """Chooses the next cell to attack on an opponent's board."""

    kind: Strategy

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng

    @abstractmethod
    def choose(self, board: Board, memory: Set[Coordinate]) -> Coordinate:
        """Return a coordinate that is on ``board`` and not in ``memory``.

        Callers guarantee that at least one such coordinate exists.
        """


class RandomTargeting(TargetingStrategy):
    """Uniform rejection sampling over unattacked cells."""

    kind = Strategy.RANDOM

    def choose(self, board: Board, memory: Set[Coordinate]) -> Coordinate:
        while True:
            coord = Coordinate(self._rng.randrange(board.size), self._rng.randrange(board.size))
            if coord not in memory:
                return coord


class HuntTargetTargeting(TargetingStrategy):
    """Fire around known hits, otherwise sweep a checkerboard.

    Only the visible hit markers are used; the strategy never looks at ship
    positions or at which ships remain.
    """

    kind = Strategy.HUNT_AND_TARGET

    def choose(self, board: Board, memory: Set[Coordinate]) -> Coordinate:
        target = self._target(board, memory)
        if target is not None:
            return target

        # Every ship of length >= 2 covers at least one even-parity cell.
        hunt_cells = [
            coord
            for coord in _row_major(board.size)
            if coord not in memory and (coord.x + coord.y) % 2 == 0
        ]
        if hunt_cells:
            return self._rng.choice(hunt_cells)

        return next(coord for coord in _row_major(board.size) if coord not in memory)

    def _target(self, board: Board, memory: Set[Coordinate]) -> Coordinate | None:
        for y, row in enumerate(board.view()):
            for x, state in enumerate(row):
                if state is not CellState.HIT:
                    continue
                for dx, dy in _NEIGHBOUR_OFFSETS:
                    neighbour = Coordinate(x + dx, y + dy)
                    if not board.is_valid_coordinate(neighbour.x, neighbour.y):
                        continue
                    if neighbour in memory:
                        continue
                    return neighbour
        return None


def _row_major(size: int):
    for y in range(size):
        for x in range(size):
            yield Coordinate(x, y)


_STRATEGIES: dict[Strategy, type[TargetingStrategy]] = {
    Strategy.RANDOM: RandomTargeting,
    Strategy.HUNT_AND_TARGET: HuntTargetTargeting,
}


def build_strategy(kind: Strategy, rng: random.Random) -> TargetingStrategy:
    """Instantiate the targeting strategy for ``kind``."""
    return _STRATEGIES[kind](rng)
