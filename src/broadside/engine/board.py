"""Single-contestant board management for the Battleship engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from broadside.telemetry import get_meter, get_tracer

from .constants import (
    DEFAULT_BOARD_SIZE,
    DEFAULT_SHIP_LENGTH,
    MAX_BOARD_SIZE,
    MIN_BOARD_SIZE,
    AttackResult,
    CellState,
    Direction,
    PlacementFailure,
)
from .errors import AlreadyAttackedError, InvalidArgumentError, OutOfRangeError
from .ship import Coordinate, Ship, is_integer

logger = logging.getLogger(__name__)
tracer = get_tracer("broadside.engine.board")
meter = get_meter("broadside.engine.board")

PLACEMENT_COUNTER = meter.create_counter(
    "broadside_engine_ship_placements",
    unit="1",
    description="Number of attempted ship placements",
)

ATTACK_COUNTER = meter.create_counter(
    "broadside_engine_attacks",
    unit="1",
    description="Attacks received by a board",
)

_SYMBOLS = {
    CellState.EMPTY: "~",
    CellState.MISS: "O",
    CellState.HIT: "X",
    CellState.OCCUPIED: "S",
}


@dataclass(frozen=True)
class _Cell:
    state: CellState
    ship_index: int | None = None


_EMPTY = _Cell(CellState.EMPTY)
_MISS = _Cell(CellState.MISS)
_HIT = _Cell(CellState.HIT)


@dataclass(frozen=True)
class SegmentPosition:
    """The first ship segment that failed placement validation."""

    x: int
    y: int
    segment: int


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of ``Board.place_ship``; failures are values, not errors."""

    success: bool
    ship: Ship | None = None
    reason: PlacementFailure | None = None
    position: SegmentPosition | None = None


def parse_direction(direction: Direction | str) -> Direction:
    """Accept a Direction or one of the tokens N, E, S, W."""
    if isinstance(direction, Direction):
        return direction
    try:
        return Direction(direction)
    except (ValueError, TypeError) as exc:
        tokens = ", ".join(member.value for member in Direction)
        raise InvalidArgumentError(f"Direction must be one of: {tokens}") from exc


class Board:
    """An N×N grid that owns its ships and records attack outcomes.

    Cells address ships by their index in the board's ship list, so the
    board stays the only owner of ship state. Coordinates are (x, y) with
    x the column and y the row.
    """

    def __init__(self, size: int = DEFAULT_BOARD_SIZE, owner: str = "unknown") -> None:
        if not is_integer(size):
            raise InvalidArgumentError("Size must be an integer")
        if not MIN_BOARD_SIZE <= size <= MAX_BOARD_SIZE:
            raise InvalidArgumentError(
                f"Board must have grid size between {MIN_BOARD_SIZE} and {MAX_BOARD_SIZE} inclusive"
            )
        self._size = size
        self._cells: list[list[_Cell]] = [[_EMPTY] * size for _ in range(size)]
        self._ships: list[Ship] = []
        self.owner = owner

    @property
    def size(self) -> int:
        return self._size

    @property
    def ships(self) -> list[Ship]:
        """Return a copy of the ships placed on this board."""
        return list(self._ships)

    def is_valid_coordinate(self, x: int, y: int) -> bool:
        """Check whether a coordinate lies inside the board boundaries."""
        return 0 <= x < self._size and 0 <= y < self._size

    def cell_state(self, x: int, y: int) -> CellState:
        """Return the raw state of a cell, ships included."""
        if not is_integer(x) or not is_integer(y) or not self.is_valid_coordinate(x, y):
            raise OutOfRangeError(
                f"Coordinates must be integers between 0 and {self._size - 1} inclusive"
            )
        return self._cells[y][x].state

    def view(self, reveal_ships: bool = False) -> tuple[tuple[CellState, ...], ...]:
        """Return the grid row by row, hiding ships unless ``reveal_ships``."""
        rows = []
        for row in self._cells:
            states = []
            for cell in row:
                if cell.state is CellState.OCCUPIED and not reveal_ships:
                    states.append(CellState.EMPTY)
                else:
                    states.append(cell.state)
            rows.append(tuple(states))
        return tuple(rows)

    def place_ship(
        self,
        x: int,
        y: int,
        length: int = DEFAULT_SHIP_LENGTH,
        direction: Direction | str = Direction.SOUTH,
    ) -> PlacementResult:
        """Place a new ship of ``length`` starting at (x, y) facing ``direction``.

        Every segment, the origin included, must be on the board and empty.
        A blocked placement leaves the board untouched and reports the first
        offending segment.
        """
        if not is_integer(x) or not is_integer(y):
            raise InvalidArgumentError("Coordinates must be integers")
        heading = parse_direction(direction)
        ship = Ship(length)
        dx, dy = heading.delta

        with tracer.start_as_current_span("board.place_ship") as span:
            span.set_attribute("ship.length", length)
            span.set_attribute("ship.origin.x", x)
            span.set_attribute("ship.origin.y", y)
            span.set_attribute("ship.direction", heading.value)
            span.set_attribute("board.owner", self.owner)

            segments = [Coordinate(x + i * dx, y + i * dy) for i in range(length)]
            for index, segment in enumerate(segments):
                if not self.is_valid_coordinate(segment.x, segment.y):
                    reason = PlacementFailure.OUT_OF_BOUNDS
                elif self._cells[segment.y][segment.x].state is not CellState.EMPTY:
                    reason = PlacementFailure.CELL_OCCUPIED
                else:
                    continue
                span.set_attribute("placement.result", reason.value)
                PLACEMENT_COUNTER.add(1, attributes={"result": reason.value, "owner": self.owner})
                logger.debug(
                    "ship_placement_failed",
                    extra={
                        "owner": self.owner,
                        "reason": reason.value,
                        "x": segment.x,
                        "y": segment.y,
                        "segment": index,
                    },
                )
                return PlacementResult(
                    success=False,
                    reason=reason,
                    position=SegmentPosition(segment.x, segment.y, index),
                )

            occupied = _Cell(CellState.OCCUPIED, ship_index=len(self._ships))
            for segment in segments:
                self._cells[segment.y][segment.x] = occupied
            self._ships.append(ship)

            span.set_attribute("placement.result", "success")
            PLACEMENT_COUNTER.add(1, attributes={"result": "success", "owner": self.owner})
            logger.info(
                "ship_placed",
                extra={
                    "owner": self.owner,
                    "length": length,
                    "direction": heading.value,
                    "x": x,
                    "y": y,
                },
            )
            return PlacementResult(success=True, ship=ship)

    def receive_attack(self, x: int, y: int) -> AttackResult:
        """Register an attack on (x, y) and return its outcome.

        ``SUNK_ALL`` takes precedence over ``SUNK``, so the finishing blow is
        reported exactly once.
        """
        with tracer.start_as_current_span("board.receive_attack") as span:
            span.set_attribute("board.owner", self.owner)
            if not is_integer(x) or not is_integer(y) or not self.is_valid_coordinate(x, y):
                logger.error(
                    "attack_out_of_range",
                    extra={"x": repr(x), "y": repr(y), "owner": self.owner},
                )
                raise OutOfRangeError(
                    f"Coordinates must be integers between 0 and {self._size - 1} inclusive"
                )
            span.set_attribute("attack.x", x)
            span.set_attribute("attack.y", y)

            cell = self._cells[y][x]
            if cell.state in (CellState.HIT, CellState.MISS):
                logger.error("attack_duplicate", extra={"x": x, "y": y, "owner": self.owner})
                raise AlreadyAttackedError(f"Cell at ({x}, {y}) has already been attacked")

            if cell.state is CellState.OCCUPIED:
                ship = self._ships[cell.ship_index]
                ship.hit()
                self._cells[y][x] = _HIT
                if self.all_ships_sunk():
                    result = AttackResult.SUNK_ALL
                elif ship.is_sunk():
                    result = AttackResult.SUNK
                else:
                    result = AttackResult.HIT
            else:
                self._cells[y][x] = _MISS
                result = AttackResult.MISS

            span.set_attribute("attack.outcome", result.value)
            ATTACK_COUNTER.add(1, attributes={"outcome": result.value, "owner": self.owner})
            logger.info(
                "attack_resolved",
                extra={"x": x, "y": y, "outcome": result.value, "owner": self.owner},
            )
            return result

    def all_ships_sunk(self) -> bool:
        """Check whether every ship on the board has been sunk."""
        return all(ship.is_sunk() for ship in self._ships)

    def display(self, reveal_ships: bool = True) -> str:
        """Render the grid as text: ~ water, S ship, X hit, O miss."""
        return "\n".join(
            " ".join(_SYMBOLS[state] for state in row) for row in self.view(reveal_ships)
        )
