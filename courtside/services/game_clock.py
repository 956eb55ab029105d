"""Game clock service for the Courtside basketball bench tracker."""

import logging
from typing import Optional

from ..errors import InvalidStateError, ValidationError
from ..models import ClockSnapshot
from ..utils import fmt_clock, now_ts

logger = logging.getLogger(__name__)


class GameClock:
    """
    Countdown clock for the current period.

    The clock is the single source of truth for ``time_remaining``. A host
    delivers one :meth:`tick` per real second while the clock runs; hosts
    that cannot do that call :meth:`sync` to catch up with wall-clock time.
    Both paths agree because the remaining time is never allowed to exceed
    what the wall-clock reference recorded at :meth:`start` allows.
    """

    def __init__(self, period_length_seconds: int, time_remaining: Optional[int] = None):
        if period_length_seconds <= 0:
            raise ValidationError("Period length must be positive")

        self._period_length_seconds = int(period_length_seconds)
        remaining = self._period_length_seconds if time_remaining is None else int(time_remaining)
        self._time_remaining = self._clamp(remaining)
        self._is_running = False
        self._start_ts: Optional[float] = None
        self._start_remaining: Optional[int] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def time_remaining(self) -> int:
        return self._time_remaining

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def period_length_seconds(self) -> int:
        return self._period_length_seconds

    @property
    def is_expired(self) -> bool:
        return self._time_remaining == 0

    @property
    def display(self) -> str:
        return fmt_clock(self._time_remaining)

    # ------------------------------------------------------------------
    # Core clock controls
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Start or resume the countdown. Does nothing once the period has expired."""

        if self._time_remaining == 0 or self._is_running:
            return

        self._is_running = True
        self._start_ts = now_ts()
        self._start_remaining = self._time_remaining
        logger.debug("Clock started at %s", self.display)

    def pause(self) -> None:
        """Pause the countdown, charging whole elapsed seconds since the last start."""

        if not self._is_running:
            return

        self._time_remaining = self._remaining_at(now_ts())
        self._stop()
        logger.debug("Clock paused at %s", self.display)

    def tick(self) -> bool:
        """
        Advance the running clock by one second.

        Returns:
            True when this tick expired the period (the clock auto-pauses)
        """

        if not self._is_running:
            return False

        self._time_remaining = max(0, self._time_remaining - 1)
        if self._time_remaining == 0:
            self._stop()
            logger.info("Period time expired")
            return True
        return False

    def sync(self) -> bool:
        """
        Catch the running clock up with wall-clock time.

        Returns:
            True when syncing expired the period (the clock auto-pauses)
        """

        if not self._is_running:
            return False

        self._time_remaining = self._remaining_at(now_ts())
        if self._time_remaining == 0:
            self._stop()
            logger.info("Period time expired")
            return True
        return False

    def adjust(self, delta_seconds: int) -> int:
        """
        Apply a manual correction to the paused clock.

        Args:
            delta_seconds: Seconds to add (negative to subtract)

        Returns:
            The new time remaining, clamped to the period length

        Raises:
            InvalidStateError: If the clock is running
        """

        if self._is_running:
            raise InvalidStateError("Pause the clock before adjusting it")

        self._time_remaining = self._clamp(self._time_remaining + int(delta_seconds))
        logger.debug("Clock adjusted by %+ds to %s", delta_seconds, self.display)
        return self._time_remaining

    def stop(self) -> None:
        """Stop the clock without charging elapsed time (used at period end)."""
        self._stop()

    def reset(self, period_length_seconds: Optional[int] = None) -> None:
        """Stop the clock and load a full period."""

        if period_length_seconds is not None:
            if period_length_seconds <= 0:
                raise ValidationError("Period length must be positive")
            self._period_length_seconds = int(period_length_seconds)
        self._stop()
        self._time_remaining = self._period_length_seconds

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def snapshot(self) -> ClockSnapshot:
        return ClockSnapshot(
            period_length_seconds=self._period_length_seconds,
            time_remaining=self._time_remaining,
            is_running=self._is_running,
            start_ts=self._start_ts,
            start_remaining=self._start_remaining,
        )

    @classmethod
    def from_snapshot(cls, snapshot: ClockSnapshot) -> "GameClock":
        """
        Restore a clock from a snapshot.

        A clock captured while running keeps running, charged with the wall
        time that passed since its start reference; if the period would have
        elapsed in the meantime it comes back stopped at zero.
        """
        clock = cls(snapshot.period_length_seconds, snapshot.time_remaining)
        if snapshot.is_running and snapshot.start_ts is not None:
            clock._is_running = True
            clock._start_ts = snapshot.start_ts
            clock._start_remaining = (
                snapshot.start_remaining
                if snapshot.start_remaining is not None
                else snapshot.time_remaining
            )
            clock.sync()
        return clock

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _remaining_at(self, now: float) -> int:
        if self._start_ts is None or self._start_remaining is None:
            return self._time_remaining
        elapsed = max(0, int(now - self._start_ts))
        return max(0, min(self._time_remaining, self._start_remaining - elapsed))

    def _stop(self) -> None:
        self._is_running = False
        self._start_ts = None
        self._start_remaining = None

    def _clamp(self, seconds: int) -> int:
        return max(0, min(seconds, self._period_length_seconds))
