"""Tests for the targeting strategies."""

import random

from broadside.engine.board import Board
from broadside.engine.constants import AttackResult, CellState, Strategy
from broadside.engine.contestant import Contestant
from broadside.engine.ship import Coordinate
from broadside.engine.strategy import HuntTargetTargeting, RandomTargeting, build_strategy


def _hunter(seed: int = 0) -> Contestant:
    return Contestant.automated("Hunter", 5, Strategy.HUNT_AND_TARGET, random.Random(seed))


def test_build_strategy_maps_kinds() -> None:
    rng = random.Random(0)
    assert isinstance(build_strategy(Strategy.RANDOM, rng), RandomTargeting)
    assert isinstance(build_strategy(Strategy.HUNT_AND_TARGET, rng), HuntTargetTargeting)


def test_random_targeting_skips_memory() -> None:
    board = Board(5)
    memory = {Coordinate(x, y) for x in range(5) for y in range(5)} - {Coordinate(3, 1)}
    assert RandomTargeting(random.Random(1)).choose(board, memory) == Coordinate(3, 1)


def test_target_phase_fires_next_to_known_hit() -> None:
    board = Board(5)
    board.place_ship(2, 2, 2, "E")
    assert board.receive_attack(2, 2) is AttackResult.HIT

    hunter = _hunter()
    first = hunter.attack(board)
    assert (first.x, first.y) == (3, 2)
    assert first.result is AttackResult.SUNK_ALL

    # (3, 2) is remembered now, so the next candidate around (2, 2) is -x.
    second = hunter.attack(board)
    assert (second.x, second.y) == (1, 2)
    assert second.result is AttackResult.MISS


def test_target_phase_neighbour_priority() -> None:
    board = Board(5)
    board.place_ship(2, 2, 2, "E")
    board.receive_attack(2, 2)
    strategy = HuntTargetTargeting(random.Random(0))

    expected = [Coordinate(3, 2), Coordinate(1, 2), Coordinate(2, 3), Coordinate(2, 1)]
    memory: set[Coordinate] = set()
    for coord in expected:
        assert strategy.choose(board, memory) == coord
        memory.add(coord)


def test_target_phase_skips_out_of_bounds_neighbours() -> None:
    board = Board(5)
    board.place_ship(4, 0, 2, "S")
    board.receive_attack(4, 0)
    strategy = HuntTargetTargeting(random.Random(0))
    # +x falls off the board; -x is the first in-bounds neighbour.
    assert strategy.choose(board, set()) == Coordinate(3, 0)


def test_target_phase_scans_row_major() -> None:
    board = Board(5)
    board.place_ship(4, 0, 2, "S")
    board.place_ship(0, 3, 2, "E")
    board.receive_attack(0, 3)
    board.receive_attack(4, 0)
    strategy = HuntTargetTargeting(random.Random(0))
    assert strategy.choose(board, set()) == Coordinate(3, 0)


def test_hunt_phase_uses_checkerboard_parity() -> None:
    board = Board(6)
    strategy = HuntTargetTargeting(random.Random(5))
    memory: set[Coordinate] = set()
    for _ in range(18):
        coord = strategy.choose(board, memory)
        assert (coord.x + coord.y) % 2 == 0
        assert coord not in memory
        memory.add(coord)


def test_fallback_phase_picks_first_remaining_row_major() -> None:
    board = Board(5)
    strategy = HuntTargetTargeting(random.Random(0))
    memory = {Coordinate(x, y) for y in range(5) for x in range(5) if (x + y) % 2 == 0}
    memory.add(Coordinate(1, 0))
    assert strategy.choose(board, memory) == Coordinate(3, 0)


def test_hunter_sinks_fleet_on_small_board() -> None:
    target = Board(5)
    target.place_ship(0, 4, 3, "E")
    target.place_ship(4, 0, 2, "S")
    hunter = _hunter(seed=2)

    outcomes = [hunter.attack(target) for _ in range(25)]
    results = [outcome.result for outcome in outcomes]
    assert results.count(AttackResult.SUNK_ALL) == 1
    assert all(state is not CellState.OCCUPIED for row in target.view(True) for state in row)
