"""Foul tracking for the Courtside basketball bench tracker."""

import logging
import uuid
from typing import Dict, Iterable, List, Set, Tuple

from ..errors import InvalidStateError, NotFoundError, ValidationError
from ..models import Foul, Period, Player
from ..utils import DEFAULT_FOUL_LIMIT
from .roster_tracker import ActiveRosterTracker

logger = logging.getLogger(__name__)

FOUL_STATUS_OK = "ok"
FOUL_STATUS_TROUBLE = "foul_trouble"
FOUL_STATUS_OUT = "fouled_out"


class FoulTracker:
    """
    Per-period foul log.

    The period count shown on the scoreboard starts at zero every period;
    a player's cumulative count is summed over every period and never reset.
    Reaching the foul limit only changes the reported status: taking the
    player off court remains a substitution the caller has to make.
    """

    def __init__(
        self,
        roster: ActiveRosterTracker,
        players: Iterable[Player],
        foul_limit: int = DEFAULT_FOUL_LIMIT,
    ):
        self._roster = roster
        self._players: Dict[str, Player] = {p.id: p for p in players}
        self.foul_limit = foul_limit
        self._fouls: Dict[str, List[Foul]] = {}
        self._closed: Set[str] = set()

    def open_period(self, period_id: str) -> None:
        self._fouls.setdefault(period_id, [])

    def load_period(self, period: Period) -> None:
        self._fouls[period.id] = list(period.fouls)
        for foul in period.fouls:
            self._players.setdefault(foul.player.id, foul.player)
        if period.ended:
            self._closed.add(period.id)

    def close_period(self, period_id: str) -> None:
        """Stop accepting fouls for an ended period; its log stays readable."""
        self._closed.add(period_id)

    def record_foul(self, player_id: str, period_id: str, time_remaining: int) -> Foul:
        """
        Charge a foul to a player on court.

        Raises:
            NotFoundError: Unknown player or period
            ValidationError: The player is not on court
            InvalidStateError: The period has already ended
        """
        if player_id not in self._players:
            raise NotFoundError(f"Player '{player_id}' is not part of this game")
        if period_id not in self._fouls:
            raise NotFoundError(f"Period '{period_id}' not found")
        if period_id in self._closed:
            raise InvalidStateError("Cannot record a foul in a period that has ended")

        player = self._players[player_id]
        if player_id not in self._roster:
            raise ValidationError(f"{player.label} is not on court; only players on court can foul")
        if time_remaining < 0:
            raise ValidationError("Time remaining cannot be negative")

        foul = Foul(
            id=str(uuid.uuid4()),
            player=player,
            period_id=period_id,
            time_remaining=int(time_remaining),
        )
        self._fouls[period_id].append(foul)

        total = self.cumulative_foul_count(player_id)
        logger.info("Foul on %s (%d total)", player.label, total)
        if total == self.foul_limit:
            logger.info("%s has fouled out", player.label)
        return foul

    def period_foul_count(self, period_id: str) -> int:
        if period_id not in self._fouls:
            raise NotFoundError(f"Period '{period_id}' not found")
        return len(self._fouls[period_id])

    def player_period_fouls(self, player_id: str, period_id: str) -> int:
        if period_id not in self._fouls:
            raise NotFoundError(f"Period '{period_id}' not found")
        return sum(1 for foul in self._fouls[period_id] if foul.player.id == player_id)

    def cumulative_foul_count(self, player_id: str) -> int:
        return sum(
            1
            for fouls in self._fouls.values()
            for foul in fouls
            if foul.player.id == player_id
        )

    def is_fouled_out(self, player_id: str) -> bool:
        return self.cumulative_foul_count(player_id) >= self.foul_limit

    def foul_status(self, player_id: str) -> str:
        """'fouled_out' at the limit, 'foul_trouble' one foul short of it, else 'ok'."""
        total = self.cumulative_foul_count(player_id)
        if total >= self.foul_limit:
            return FOUL_STATUS_OUT
        if total == self.foul_limit - 1:
            return FOUL_STATUS_TROUBLE
        return FOUL_STATUS_OK

    def fouls(self, period_id: str) -> Tuple[Foul, ...]:
        return tuple(self._fouls.get(period_id, ()))

    def total_fouls(self) -> int:
        return sum(len(fouls) for fouls in self._fouls.values())
