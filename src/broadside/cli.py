"""Command-line driver for playing Battleship against the computer."""

from __future__ import annotations

import argparse
import logging
import random
import string
from typing import Sequence

from broadside.engine.board import Board
from broadside.engine.constants import (
    DEFAULT_BOARD_SIZE,
    DEFAULT_COMPUTER_NAME,
    MAX_BOARD_SIZE,
    MIN_BOARD_SIZE,
    AttackResult,
    Strategy,
)
from broadside.engine.contestant import Contestant
from broadside.engine.errors import AlreadyAttackedError, BattleshipError
from broadside.engine.game import Match, MatchPhase, TurnRecord
from broadside.engine.ship import Coordinate
from broadside.telemetry import configure_console_logging, init_telemetry

ROW_LABELS = string.ascii_uppercase[:MAX_BOARD_SIZE]


def coordinate_from_input(text: str, size: int) -> Coordinate:
    """Parse ``B7`` (row letter, 1-based column) or ``"x y"`` (0-based)."""
    cleaned = text.strip().upper()
    if not cleaned:
        raise ValueError("Empty coordinate.")
    labels = ROW_LABELS[:size]
    if cleaned[0].isalpha():
        if cleaned[0] not in labels:
            raise ValueError(f"Row must be between A and {labels[-1]}.")
        y = labels.index(cleaned[0])
        try:
            x = int(cleaned[1:]) - 1
        except ValueError as exc:
            raise ValueError(f"Column must be a number between 1 and {size}.") from exc
    else:
        parts = cleaned.split()
        if len(parts) != 2:
            raise ValueError("Use formats like B7 or '3 4'.")
        x, y = map(int, parts)
    if x not in range(size) or y not in range(size):
        raise ValueError(f"Coordinates must be within the {size}x{size} board.")
    return Coordinate(x, y)


def format_board(board: Board, show_ships: bool) -> str:
    header = "   " + " ".join(f"{col + 1:>2}" for col in range(board.size))
    lines = board.display(reveal_ships=show_ships).splitlines()
    rows = [header]
    for y, line in enumerate(lines):
        rows.append(f"{ROW_LABELS[y]} |" + " ".join(f"{symbol:>2}" for symbol in line.split()))
    return "\n".join(rows)


def describe_turn(record: TurnRecord) -> str:
    label = f"{ROW_LABELS[record.y]}{record.x + 1}"
    if record.result is AttackResult.SUNK_ALL:
        outcome = "sank the last ship!"
    elif record.result is AttackResult.SUNK:
        outcome = "sank a ship!"
    else:
        outcome = record.result.value
    return f"{record.attacker} fired at {label}: {outcome}"


def _prompt_turn(match: Match) -> TurnRecord:
    size = match.opponent.board.size
    while True:
        raw = input("Enter target coordinate (e.g., B7) or 'q' to quit: ").strip()
        if raw.lower() == "q":
            raise SystemExit("Goodbye!")
        try:
            coord = coordinate_from_input(raw, size)
        except ValueError as exc:
            print(f"Invalid input: {exc}")
            continue
        try:
            return match.play_turn(coord.x, coord.y)
        except AlreadyAttackedError:
            print("That cell has already been targeted. Choose another.")


def play_game(
    name: str,
    size: int = DEFAULT_BOARD_SIZE,
    strategy: Strategy = Strategy.HUNT_AND_TARGET,
    seed: int | None = None,
    auto: bool = False,
) -> Match:
    rng = random.Random(seed)
    if auto:
        first = Contestant.automated(name, size, Strategy.RANDOM, rng)
    else:
        first = Contestant.manual(name, size)
    second = Contestant.automated(DEFAULT_COMPUTER_NAME, size, strategy, rng)
    match = Match(first, second, rng_seed=seed)
    match.start()
    print(f"Welcome to Battleship! Match #{match.match_id} on a {size}x{size} board.\n")

    while match.phase is MatchPhase.IN_PROGRESS:
        if match.current.is_automated:
            record = match.play_turn()
        else:
            print("\nYour Board:")
            print(format_board(first.board, show_ships=True))
            print("\nEnemy Waters:")
            print(format_board(second.board, show_ships=False))
            record = _prompt_turn(match)
        print(describe_turn(record))

    print(f"\n{match.winner.name} wins after {len(match.history)} turns.")
    print(format_board(first.board, show_ships=True))
    print()
    print(format_board(second.board, show_ships=True))
    return match


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Battleship via the CLI.")
    parser.add_argument("--name", default="Player", help="Your name on the scoreboard.")
    parser.add_argument(
        "--size",
        type=int,
        default=DEFAULT_BOARD_SIZE,
        choices=range(MIN_BOARD_SIZE, MAX_BOARD_SIZE + 1),
        help="Board size.",
    )
    parser.add_argument(
        "--strategy",
        default=Strategy.HUNT_AND_TARGET.value,
        choices=[strategy.value for strategy in Strategy],
        help="Targeting strategy for the computer.",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Optional RNG seed for reproducibility."
    )
    parser.add_argument(
        "--auto", action="store_true", help="Let a random computer play in your place."
    )
    parser.add_argument("--log-level", default="WARNING", help="Console log level.")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_console_logging(getattr(logging, args.log_level.upper(), logging.WARNING))
    init_telemetry()
    try:
        play_game(args.name, args.size, Strategy(args.strategy), args.seed, args.auto)
    except BattleshipError as exc:
        raise SystemExit(f"Game aborted: {exc}") from exc


if __name__ == "__main__":
    main()
