"""Period lifecycle for the Courtside basketball bench tracker."""

import logging
import uuid
from dataclasses import replace
from typing import List, Optional

from ..errors import InvalidStateError, ValidationError
from ..models import GameStatus, Period
from ..utils import SUPPORTED_PERIOD_COUNTS, SUPPORTED_PERIOD_LENGTHS
from .foul_tracker import FoulTracker
from .game_clock import GameClock
from .roster_tracker import ActiveRosterTracker
from .substitution_ledger import SubstitutionLedger

logger = logging.getLogger(__name__)


def validate_format(period_count: int, period_length_minutes: int) -> None:
    """
    Check a game format.

    Raises:
        ValidationError: If the period count or length is not supported
    """
    if period_count not in SUPPORTED_PERIOD_COUNTS:
        raise ValidationError(
            f"Period count must be one of {', '.join(map(str, SUPPORTED_PERIOD_COUNTS))}"
        )
    if period_length_minutes not in SUPPORTED_PERIOD_LENGTHS:
        raise ValidationError(
            f"Period length must be {' or '.join(map(str, SUPPORTED_PERIOD_LENGTHS))} minutes"
        )


def new_period(period_number: int, length_minutes: int) -> Period:
    return Period(id=str(uuid.uuid4()), period_number=period_number, length_minutes=length_minutes)


class PeriodLifecycleManager:
    """
    Drives the game through its periods.

    State machine: the current period is in progress until ``end_period``;
    ending a period either opens the next one or, after the last period of
    the format, moves the game to game over.
    """

    def __init__(
        self,
        clock: GameClock,
        roster: ActiveRosterTracker,
        ledger: SubstitutionLedger,
        fouls: FoulTracker,
        period_count: int,
        period_length_minutes: int,
        periods: Optional[List[Period]] = None,
        current_index: int = 0,
        status: GameStatus = GameStatus.IN_PROGRESS,
    ):
        validate_format(period_count, period_length_minutes)
        self._clock = clock
        self._roster = roster
        self._ledger = ledger
        self._fouls = fouls
        self.period_count = period_count
        self.period_length_minutes = period_length_minutes
        self._periods: List[Period] = list(periods or [])
        self._current_index = current_index
        self._status = status

        if not self._periods:
            raise ValidationError("A game needs at least one period")

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def is_game_over(self) -> bool:
        return self._status is GameStatus.GAME_OVER

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_period(self) -> Period:
        return self._periods[self._current_index]

    @property
    def periods(self) -> List[Period]:
        return list(self._periods)

    @property
    def is_last_period(self) -> bool:
        return self.current_period.period_number >= self.period_count

    def mark_ended(self, period_id: str) -> None:
        self._periods = [
            replace(p, ended=True) if p.id == period_id else p
            for p in self._periods
        ]

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def end_period(self) -> GameStatus:
        """
        End the current period.

        Stops the clock, subs every player on court out at 0:00 and clears
        the court. If another period is configured it is opened with a full
        clock; otherwise the game is over.

        Returns:
            The game status after the transition

        Raises:
            InvalidStateError: If the game is already over
        """

        if self.is_game_over:
            raise InvalidStateError("The game is over; no period left to end")

        ending = self.current_period
        self._clock.stop()
        self._ledger.close_period(ending.id)
        self._fouls.close_period(ending.id)
        self._roster.clear()
        self.mark_ended(ending.id)
        logger.info("Period %d ended", ending.period_number)

        if self.is_last_period:
            self._status = GameStatus.GAME_OVER
            logger.info("Game over after %d period(s)", ending.period_number)
            return self._status

        self._open(new_period(ending.period_number + 1, self.period_length_minutes))
        self._current_index = len(self._periods) - 1
        return self._status

    def _open(self, period: Period) -> None:
        self._periods.append(period)
        self._ledger.open_period(period.id, period.length_seconds)
        self._fouls.open_period(period.id)
        self._clock.reset(period.length_seconds)
        logger.info("Period %d started (%d:00)", period.period_number, period.length_minutes)
