"""Exceptions raised by the Battleship engine.

Expected game events (failed placements, attack outcomes) are returned as
values. Everything here signals a usage contract violation or a
configuration the game cannot proceed with.
"""

from __future__ import annotations


class BattleshipError(Exception):
    """Base class for all engine errors."""


class InvalidArgumentError(BattleshipError, ValueError):
    """An argument has the wrong type or lies outside its allowed range."""


class OutOfRangeError(InvalidArgumentError):
    """An attack coordinate is not an integer or falls off the board."""


class MissingCoordinatesError(InvalidArgumentError):
    """A manual attack was made without both coordinates."""


class AlreadyAttackedError(BattleshipError, ValueError):
    """The targeted cell has already been hit or missed."""


class AttackMemoryExhaustedError(BattleshipError, RuntimeError):
    """An automated contestant has already attacked every cell."""


class FleetCapacityError(BattleshipError, ValueError):
    """A fleet would cover too large a share of its board."""


class PlacementExhaustedError(BattleshipError, RuntimeError):
    """Random placement gave up after the maximum number of attempts."""

    def __init__(self, length: int, attempts: int) -> None:
        super().__init__(f"Failed to place {length}-length ship after {attempts} attempts")
        self.length = length
        self.attempts = attempts


class MatchStateError(BattleshipError, RuntimeError):
    """A match was driven out of order (before start or after finish)."""
