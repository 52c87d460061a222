"""Ship domain model for the Battleship engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from .constants import MAX_SHIP_LENGTH, MIN_SHIP_LENGTH
from .errors import InvalidArgumentError


@dataclass(frozen=True)
class Coordinate:
    """Immutable board coordinate; x is the column, y the row."""

    x: int
    y: int


def is_integer(value: object) -> bool:
    """Return True for real integers, rejecting bools."""
    return isinstance(value, int) and not isinstance(value, bool)


def validate_ship_length(length: object) -> int:
    """Return ``length`` if it is a legal ship length, otherwise raise."""
    if not is_integer(length):
        raise InvalidArgumentError("Ship length must be an integer")
    if not MIN_SHIP_LENGTH <= length <= MAX_SHIP_LENGTH:
        raise InvalidArgumentError(
            f"Ship must have length between {MIN_SHIP_LENGTH} and {MAX_SHIP_LENGTH} inclusive"
        )
    return length


@dataclass
class Ship:
    """A damageable unit of fixed length.

    A ship does not know where it sits; the owning board maps cells to it.
    Hits saturate at ``length``.
    """

    length: int
    hits_taken: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        validate_ship_length(self.length)

    def hit(self) -> int:
        """Record one hit unless already sunk and return the hit count."""
        if not self.is_sunk():
            self.hits_taken += 1
        return self.hits_taken

    def is_sunk(self) -> bool:
        """Determine whether the ship has taken a hit on every segment."""
        return self.hits_taken >= self.length
