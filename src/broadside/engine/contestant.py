"""Contestants and the coordinate sources that drive their attacks."""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass

from broadside.telemetry import get_meter, get_tracer

from .board import Board
from .constants import (
    DEFAULT_BOARD_SIZE,
    DEFAULT_COMPUTER_NAME,
    DEFAULT_STRATEGY,
    AttackResult,
    Strategy,
)
from .errors import AttackMemoryExhaustedError, InvalidArgumentError, MissingCoordinatesError
from .ship import Coordinate
from .strategy import TargetingStrategy, build_strategy

logger = logging.getLogger(__name__)
tracer = get_tracer("broadside.engine.contestant")
meter = get_meter("broadside.engine.contestant")

ATTACK_COUNTER = meter.create_counter(
    "broadside_engine_contestant_attacks",
    unit="1",
    description="Attacks launched by contestants",
)


@dataclass(frozen=True)
class AttackOutcome:
    """What an attack hit and where it landed."""

    result: AttackResult
    x: int
    y: int


def parse_strategy(strategy: Strategy | str) -> Strategy:
    """Accept a Strategy or its token (``random``, ``hunt-and-target``, ``hunt``)."""
    if isinstance(strategy, Strategy):
        return strategy
    try:
        return Strategy(strategy)
    except (ValueError, TypeError) as exc:
        tokens = ", ".join(member.value for member in Strategy)
        raise InvalidArgumentError(f"Strategy must be one of: {tokens}") from exc


class CoordinateSource(ABC):
    """Supplies the coordinate for a contestant's next attack."""

    label: str

    @abstractmethod
    def produce_coordinates(
        self, opponent_board: Board, x: int | None, y: int | None
    ) -> Coordinate:
        """Return the coordinate to attack on ``opponent_board``."""


class ManualSource(CoordinateSource):
    """Coordinates are supplied by the caller on every attack."""

    label = "manual"

    def produce_coordinates(
        self, opponent_board: Board, x: int | None, y: int | None
    ) -> Coordinate:
        if x is None or y is None:
            raise MissingCoordinatesError("Manual attacks must provide both coordinates")
        return Coordinate(x, y)


class AutomatedSource(CoordinateSource):
    """Generates coordinates with a targeting strategy and remembers them.

    The memory is a set of every coordinate already fired upon, so no cell
    is ever chosen twice.
    """

    label = "automated"

    def __init__(
        self, strategy: Strategy | str = DEFAULT_STRATEGY, rng: random.Random | None = None
    ) -> None:
        self.strategy: TargetingStrategy = build_strategy(
            parse_strategy(strategy), rng or random.Random()
        )
        self._memory: set[Coordinate] = set()

    @property
    def kind(self) -> Strategy:
        return self.strategy.kind

    @property
    def attack_memory(self) -> frozenset[Coordinate]:
        return frozenset(self._memory)

    def produce_coordinates(
        self, opponent_board: Board, x: int | None, y: int | None
    ) -> Coordinate:
        if len(self._memory) >= opponent_board.size**2:
            raise AttackMemoryExhaustedError("All cells have already been attacked")
        coord = self.strategy.choose(opponent_board, self._memory)
        self._memory.add(coord)
        return coord


class Contestant:
    """A named participant owning one board and a source of attack coordinates."""

    def __init__(
        self,
        name: str,
        board_size: int = DEFAULT_BOARD_SIZE,
        source: CoordinateSource | None = None,
    ) -> None:
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgumentError("Contestant name must be a non-empty string")
        self._name = name.strip()
        self._board = Board(board_size, owner=self._name)
        self.source = source or ManualSource()

    @classmethod
    def manual(cls, name: str, board_size: int = DEFAULT_BOARD_SIZE) -> Contestant:
        return cls(name, board_size, ManualSource())

    @classmethod
    def automated(
        cls,
        name: str = DEFAULT_COMPUTER_NAME,
        board_size: int = DEFAULT_BOARD_SIZE,
        strategy: Strategy | str = DEFAULT_STRATEGY,
        rng: random.Random | None = None,
    ) -> Contestant:
        return cls(name, board_size, AutomatedSource(strategy, rng))

    @property
    def name(self) -> str:
        return self._name

    @property
    def board(self) -> Board:
        return self._board

    @property
    def is_automated(self) -> bool:
        return isinstance(self.source, AutomatedSource)

    def attack(
        self, opponent_board: Board, x: int | None = None, y: int | None = None
    ) -> AttackOutcome:
        """Attack ``opponent_board``; manual contestants must pass x and y."""
        with tracer.start_as_current_span("contestant.attack") as span:
            span.set_attribute("contestant.name", self._name)
            span.set_attribute("contestant.source", self.source.label)
            coord = self.source.produce_coordinates(opponent_board, x, y)
            result = opponent_board.receive_attack(coord.x, coord.y)
            span.set_attribute("attack.outcome", result.value)
            ATTACK_COUNTER.add(1, attributes={"source": self.source.label, "outcome": result.value})
            logger.debug(
                "contestant_attacked",
                extra={
                    "contestant": self._name,
                    "source": self.source.label,
                    "x": coord.x,
                    "y": coord.y,
                    "outcome": result.value,
                },
            )
            return AttackOutcome(result=result, x=coord.x, y=coord.y)

    def __repr__(self) -> str:
        return (
            f"Contestant(name={self._name!r}, source={self.source.label}, "
            f"board_size={self._board.size})"
        )
