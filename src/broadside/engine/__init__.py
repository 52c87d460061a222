"""Battleship rules engine: ships, boards, placement and contestants."""

from .board import Board, PlacementResult, SegmentPosition
from .config import PlannerConfig, load_planner_config
from .constants import AttackResult, CellState, Direction, PlacementFailure, Strategy
from .contestant import AttackOutcome, AutomatedSource, Contestant, CoordinateSource, ManualSource
from .errors import (
    AlreadyAttackedError,
    AttackMemoryExhaustedError,
    BattleshipError,
    FleetCapacityError,
    InvalidArgumentError,
    MatchStateError,
    MissingCoordinatesError,
    OutOfRangeError,
    PlacementExhaustedError,
)
from .game import Match, MatchPhase, TurnRecord
from .game_setup import ContestantSettings, initialise_contestants, place_fleet
from .ship import Coordinate, Ship

__all__ = [
    "AlreadyAttackedError",
    "AttackMemoryExhaustedError",
    "AttackOutcome",
    "AttackResult",
    "AutomatedSource",
    "BattleshipError",
    "Board",
    "CellState",
    "Contestant",
    "ContestantSettings",
    "Coordinate",
    "CoordinateSource",
    "Direction",
    "FleetCapacityError",
    "InvalidArgumentError",
    "ManualSource",
    "Match",
    "MatchPhase",
    "MatchStateError",
    "MissingCoordinatesError",
    "OutOfRangeError",
    "PlacementExhaustedError",
    "PlacementFailure",
    "PlacementResult",
    "PlannerConfig",
    "SegmentPosition",
    "Ship",
    "Strategy",
    "TurnRecord",
    "initialise_contestants",
    "load_planner_config",
    "place_fleet",
]
