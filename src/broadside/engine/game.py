"""Two-contestant match driver."""

from __future__ import annotations

import itertools
import logging
import random
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from broadside.telemetry import get_meter, get_tracer, record_match_metric

from .config import PlannerConfig
from .constants import AttackResult
from .contestant import Contestant
from .errors import MatchStateError
from .game_setup import place_fleet

logger = logging.getLogger(__name__)
tracer = get_tracer("broadside.engine.game")
meter = get_meter("broadside.engine.game")

TURN_COUNTER = meter.create_counter(
    "broadside_engine_turns",
    unit="1",
    description="Number of turns played in a Match",
)

_MATCH_IDS = itertools.count(1)


class MatchPhase(Enum):
    """High-level lifecycle of a match."""

    SETUP = "setup"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(frozen=True)
class TurnRecord:
    """One resolved attack within a match."""

    match_id: int
    turn: int
    attacker: str
    result: AttackResult
    x: int
    y: int


class Match:
    """Alternates attacks between two contestants until one fleet is sunk.

    Each match carries a unique ``match_id`` so callers juggling several
    sessions can drop results belonging to an abandoned one.
    """

    def __init__(
        self,
        first: Contestant,
        second: Contestant,
        rng_seed: int | None = None,
        fleet_table: Mapping[int, Sequence[int]] | None = None,
        config: PlannerConfig | None = None,
    ) -> None:
        self.match_id = next(_MATCH_IDS)
        self.contestants: tuple[Contestant, Contestant] = (first, second)
        self.phase = MatchPhase.SETUP
        self.winner: Contestant | None = None
        self.history: list[TurnRecord] = []
        self._current = 0
        self._rng = random.Random(rng_seed)
        self._fleet_table = fleet_table
        self._config = config

    @property
    def current(self) -> Contestant:
        return self.contestants[self._current]

    @property
    def opponent(self) -> Contestant:
        return self.contestants[1 - self._current]

    def start(self) -> None:
        """Randomly place both fleets and hand the first turn to ``first``."""
        with tracer.start_as_current_span("match.start") as span:
            span.set_attribute("match.id", self.match_id)
            if self.phase is not MatchPhase.SETUP:
                raise MatchStateError("Match has already started.")
            place_fleet(
                [contestant.board for contestant in self.contestants],
                fleet_table=self._fleet_table,
                config=self._config,
                rng=self._rng,
            )
            self.phase = MatchPhase.IN_PROGRESS
            self._current = 0
            logger.info(
                "match_started",
                extra={"match_id": self.match_id, "current_player": self.current.name},
            )

    def play_turn(self, x: int | None = None, y: int | None = None) -> TurnRecord:
        """Let the current contestant attack; manual contestants need x and y."""
        with tracer.start_as_current_span("match.play_turn") as span:
            span.set_attribute("match.id", self.match_id)
            if self.phase is not MatchPhase.IN_PROGRESS:
                logger.error(
                    "turn_rejected_match_not_in_progress",
                    extra={"match_id": self.match_id, "phase": self.phase.value},
                )
                raise MatchStateError("Match is not in progress.")

            attacker = self.current
            outcome = attacker.attack(self.opponent.board, x, y)
            record = TurnRecord(
                match_id=self.match_id,
                turn=len(self.history) + 1,
                attacker=attacker.name,
                result=outcome.result,
                x=outcome.x,
                y=outcome.y,
            )
            self.history.append(record)
            span.set_attribute("attacker", attacker.name)
            span.set_attribute("result", outcome.result.value)

            if outcome.result is AttackResult.SUNK_ALL:
                self.winner = attacker
                self.phase = MatchPhase.FINISHED
                span.set_attribute("match.winner", attacker.name)
                record_match_metric(
                    "broadside_match_completed_total",
                    1,
                    {"winner": attacker.name, "turns": record.turn},
                )
                logger.info(
                    "match_finished",
                    extra={
                        "match_id": self.match_id,
                        "winner": attacker.name,
                        "turns": record.turn,
                    },
                )
            else:
                self._current = 1 - self._current

            TURN_COUNTER.add(1, attributes={"result": outcome.result.value})
            return record

    def play_out(self, max_turns: int | None = None) -> Contestant | None:
        """Play automated turns until the match ends or ``max_turns`` is reached."""
        played = 0
        while self.phase is MatchPhase.IN_PROGRESS:
            if max_turns is not None and played >= max_turns:
                break
            if not self.current.is_automated:
                raise MatchStateError(f"{self.current.name} needs coordinates to play a turn.")
            self.play_turn()
            played += 1
        return self.winner
