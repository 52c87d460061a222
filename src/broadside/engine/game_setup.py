"""Fleet placement and contestant initialisation."""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping, Sequence
from typing import Literal

from pydantic import BaseModel, ValidationError

from broadside.telemetry import get_meter, get_tracer

from .board import Board
from .config import PlannerConfig, load_planner_config
from .constants import DEFAULT_STRATEGY, Direction, Strategy
from .contestant import Contestant, parse_strategy
from .errors import FleetCapacityError, InvalidArgumentError, PlacementExhaustedError
from .ship import validate_ship_length

logger = logging.getLogger(__name__)
tracer = get_tracer("broadside.engine.game_setup")
meter = get_meter("broadside.engine.game_setup")

ATTEMPT_COUNTER = meter.create_counter(
    "broadside_engine_placement_attempts",
    unit="1",
    description="Random placement attempts made while laying out fleets",
)

_DIRECTIONS = list(Direction)


def pick_random_direction(rng: random.Random) -> Direction:
    return rng.choice(_DIRECTIONS)


def try_place_ship(board: Board, length: int, max_attempts: int, rng: random.Random) -> int:
    """Place one ship at a random origin and heading; return attempts used."""
    for attempt in range(1, max_attempts + 1):
        result = board.place_ship(
            rng.randrange(board.size),
            rng.randrange(board.size),
            length,
            pick_random_direction(rng),
        )
        if result.success:
            ATTEMPT_COUNTER.add(attempt, attributes={"result": "success"})
            return attempt
    ATTEMPT_COUNTER.add(max_attempts, attributes={"result": "exhausted"})
    logger.error(
        "ship_placement_exhausted",
        extra={"owner": board.owner, "length": length, "attempts": max_attempts},
    )
    raise PlacementExhaustedError(length, max_attempts)


def plan_fleets(
    boards: Sequence[Board],
    fleet_table: Mapping[int, Sequence[int]],
    capacity_threshold: float,
) -> list[list[int]]:
    """Resolve and validate every board's fleet without touching any board."""
    fleets: list[list[int]] = []
    for board in boards:
        lengths = fleet_table.get(board.size)
        if lengths is None:
            raise InvalidArgumentError(f"No fleet configured for board size {board.size}")
        fleet = [validate_ship_length(length) for length in lengths]
        total_ship_cells = sum(fleet)
        if total_ship_cells > board.size**2 * capacity_threshold:
            logger.error(
                "fleet_over_capacity",
                extra={
                    "owner": board.owner,
                    "board_size": board.size,
                    "ship_cells": total_ship_cells,
                    "threshold": capacity_threshold,
                },
            )
            raise FleetCapacityError(
                f"Board of size {board.size} is too small for ships {fleet}"
            )
        fleets.append(fleet)
    return fleets


def place_fleet(
    boards: Sequence[Board],
    fleet_table: Mapping[int, Sequence[int]] | None = None,
    config: PlannerConfig | None = None,
    rng: random.Random | None = None,
) -> None:
    """Randomly place each board's fleet.

    All boards are validated first; if any fails, none is modified.
    """
    resolved = config or load_planner_config()
    table = fleet_table if fleet_table is not None else resolved.fleet_table
    rng = rng or random.Random()

    with tracer.start_as_current_span("game_setup.place_fleet") as span:
        span.set_attribute("boards", len(boards))
        fleets = plan_fleets(boards, table, resolved.capacity_threshold)

        for board, fleet in zip(boards, fleets):
            attempts = 0
            for length in fleet:
                attempts += try_place_ship(board, length, resolved.max_placement_attempts, rng)
            logger.info(
                "fleet_placed",
                extra={
                    "owner": board.owner,
                    "board_size": board.size,
                    "ships": len(fleet),
                    "attempts": attempts,
                },
            )


class ContestantSettings(BaseModel):
    """How to build one contestant for a new game."""

    kind: Literal["manual", "automated"]
    name: str
    strategy: str = DEFAULT_STRATEGY.value


def _build_contestant(
    settings: ContestantSettings, board_size: int, rng: random.Random | None
) -> Contestant:
    if settings.kind == "manual":
        return Contestant.manual(settings.name, board_size)
    strategy: Strategy = parse_strategy(settings.strategy)
    return Contestant.automated(settings.name, board_size, strategy, rng)


def initialise_contestants(
    board_size: int,
    first: ContestantSettings | Mapping[str, str],
    second: ContestantSettings | Mapping[str, str],
    rng: random.Random | None = None,
) -> tuple[Contestant, Contestant]:
    """Build both contestants on boards of ``board_size``."""
    built = []
    for position, settings in enumerate((first, second), start=1):
        if not isinstance(settings, ContestantSettings):
            kind = settings.get("kind")
            if kind not in ("manual", "automated"):
                raise InvalidArgumentError(f"Invalid contestant type for contestant {position}")
            try:
                settings = ContestantSettings(**settings)
            except ValidationError as exc:
                raise InvalidArgumentError(
                    f"Invalid settings for contestant {position}: {exc.error_count()} error(s)"
                ) from exc
        built.append(_build_contestant(settings, board_size, rng))
    return built[0], built[1]
