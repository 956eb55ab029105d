"""
Game store for the Courtside basketball bench tracker.

The store owns one game session: its clock, the on-court roster, the
substitution ledger, the foul log and the period lifecycle. Every command
runs under one lock, so a host's tick callback and user actions never
interleave inside an action, and every successful command hands back a new
immutable :class:`~courtside.models.Game` snapshot to the caller and to
subscribers.
"""
import logging
import threading
import uuid
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Sequence

from ..errors import InvalidStateError, ValidationError
from ..models import ClockSnapshot, Game, GameStatus, Player, SubstitutionEvent
from ..utils import (
    DEFAULT_FOUL_LIMIT, DEFAULT_PERIOD_COUNT, DEFAULT_PERIOD_LENGTH_MIN,
    MAX_PLAYERS_ON_COURT, now_ts
)
from .foul_tracker import FoulTracker
from .game_clock import GameClock
from .period_manager import PeriodLifecycleManager, new_period, validate_format
from .roster_tracker import ActiveRosterTracker
from .substitution_ledger import SubstitutionLedger

logger = logging.getLogger(__name__)

Subscriber = Callable[[Game], None]


class GameRepository(Protocol):
    """Persistence collaborator - anything that can save a game snapshot."""

    def save(self, game: Game) -> Game:
        ...


@dataclass(frozen=True)
class SubstitutionPreview:
    """Pending on-court count for a candidate selection, before commit."""

    on_court_count: int
    max_on_court: int

    @property
    def too_many_players(self) -> bool:
        return self.on_court_count > self.max_on_court


class GameStore:
    """State container for a single game session."""

    def __init__(
        self,
        game: Game,
        persistence: Optional[GameRepository] = None,
        foul_limit: int = DEFAULT_FOUL_LIMIT,
    ):
        """
        Restore a store from a game snapshot.

        Args:
            game: Snapshot to restore (see :meth:`create` for a new game)
            persistence: Optional collaborator receiving every new snapshot
            foul_limit: Cumulative fouls at which a player is fouled out

        Raises:
            ValidationError: If the snapshot is inconsistent
        """
        game.ensure_consistency()
        self._lock = threading.RLock()
        self._subscribers: List[Subscriber] = []
        self._persistence = persistence

        self.game_id = game.id
        self.team_name = game.team_name
        self.opponent = game.opponent
        self.players = game.players
        self.created_ts = game.created_ts
        self._players_by_id: Dict[str, Player] = {p.id: p for p in game.players}

        self.clock = GameClock.from_snapshot(game.clock)
        self.roster = ActiveRosterTracker(game.active_players)
        self.ledger = SubstitutionLedger(
            self.roster, game.players, lambda: self.clock.time_remaining
        )
        self.fouls = FoulTracker(self.roster, game.players, foul_limit)

        for index, period in enumerate(game.periods):
            self.ledger.load_period(period, current=index == game.current_period_index)
            self.fouls.load_period(period)

        current = game.current_period
        if not current.ended:
            replayed = self.ledger.active_after_replay(current.id)
            if replayed != game.active_players:
                logger.warning(
                    "Snapshot court %s disagrees with the substitution log; using the log",
                    sorted(game.active_players),
                )
            self.roster.replace(replayed)

        self.periods = PeriodLifecycleManager(
            self.clock,
            self.roster,
            self.ledger,
            self.fouls,
            game.period_count,
            game.period_length_minutes,
            periods=[replace(p, substitution_events=(), fouls=()) for p in game.periods],
            current_index=game.current_period_index,
            status=game.status,
        )
        self._snapshot = self._build_snapshot()

    @classmethod
    def create(
        cls,
        team_name: str,
        opponent: str,
        players: Iterable[Player],
        period_count: int = DEFAULT_PERIOD_COUNT,
        period_length_minutes: int = DEFAULT_PERIOD_LENGTH_MIN,
        persistence: Optional[GameRepository] = None,
        foul_limit: int = DEFAULT_FOUL_LIMIT,
        game_id: Optional[str] = None,
    ) -> "GameStore":
        """
        Start a new game with an empty court and a full first period.

        Raises:
            ValidationError: Unsupported format, no players or duplicate player ids
        """
        validate_format(period_count, period_length_minutes)
        players = tuple(players)
        if not players:
            raise ValidationError("Game must have at least one player")
        if len({p.id for p in players}) != len(players):
            raise ValidationError("Player ids must be unique")

        first = new_period(1, period_length_minutes)
        game = Game(
            id=game_id or str(uuid.uuid4()),
            team_name=team_name,
            opponent=opponent,
            players=players,
            periods=(first,),
            clock=ClockSnapshot(
                period_length_seconds=first.length_seconds,
                time_remaining=first.length_seconds,
            ),
            period_count=period_count,
            period_length_minutes=period_length_minutes,
            created_ts=now_ts(),
        )
        logger.info("New game %s: %s vs %s", game.id, team_name, opponent)
        return cls(game, persistence=persistence, foul_limit=foul_limit)

    @classmethod
    def from_game(
        cls,
        game: Game,
        persistence: Optional[GameRepository] = None,
        foul_limit: int = DEFAULT_FOUL_LIMIT,
    ) -> "GameStore":
        """Restore a store from a saved snapshot (the inverse of :meth:`snapshot`)."""
        return cls(game, persistence=persistence, foul_limit=foul_limit)

    @property
    def lock(self) -> threading.RLock:
        """Lock serializing commands; hold it to read several queries consistently."""
        return self._lock

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for new snapshots.

        Returns:
            A function that removes the subscription
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    # ------------------------------------------------------------------
    # Clock commands
    # ------------------------------------------------------------------
    def start_clock(self) -> Game:
        return self._command(self._start_clock)

    def pause_clock(self) -> Game:
        return self._command(self.clock.pause)

    def tick(self) -> Game:
        return self._command(self.clock.tick)

    def sync_clock(self) -> Game:
        """Catch the running clock up with wall-clock time."""
        with self._lock:
            if not self.clock.is_running:
                return self._snapshot
            return self._command(self.clock.sync)

    def adjust_clock(self, delta_seconds: int) -> Game:
        def adjust() -> None:
            self._require_in_progress()
            self.clock.adjust(delta_seconds)

        return self._command(adjust)

    def _start_clock(self) -> None:
        self._require_in_progress()
        self.clock.start()

    # ------------------------------------------------------------------
    # Game commands
    # ------------------------------------------------------------------
    def record_substitution(
        self,
        subbed_in: Sequence[str],
        subbed_out: Sequence[str],
        event_time: Optional[int] = None,
    ) -> Game:
        """
        Record a substitution in the current period.

        Args:
            subbed_in: Ids of players entering the court
            subbed_out: Ids of players leaving the court
            event_time: Seconds remaining; defaults to the clock
        """
        def record() -> None:
            self._require_in_progress()
            time = self.clock.time_remaining if event_time is None else event_time
            self.ledger.record_substitution(
                self.periods.current_period.id, subbed_in, subbed_out, time
            )

        return self._command(record)

    def edit_substitution(
        self,
        event_id: str,
        event_time: Optional[int] = None,
        subbed_in: Optional[Sequence[str]] = None,
        subbed_out: Optional[Sequence[str]] = None,
    ) -> Game:
        return self._command(
            lambda: self.ledger.edit_substitution(event_id, event_time, subbed_in, subbed_out)
        )

    def delete_substitution(self, event_id: str) -> Game:
        return self._command(lambda: self.ledger.delete_substitution(event_id))

    def record_foul(self, player_id: str) -> Game:
        def record() -> None:
            self._require_in_progress()
            self.fouls.record_foul(
                player_id, self.periods.current_period.id, self.clock.time_remaining
            )

        return self._command(record)

    def end_period(self) -> Game:
        return self._command(self.periods.end_period)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def snapshot(self) -> Game:
        with self._lock:
            return self._snapshot

    def minutes_played(self, player_id: str, period_id: Optional[str] = None) -> int:
        """Seconds played by a player in a period (default: the current one)."""
        with self._lock:
            period_id = period_id or self.periods.current_period.id
            return self.ledger.minutes_played(player_id, period_id)

    def total_seconds_played(self, player_id: str) -> int:
        with self._lock:
            return self.ledger.total_seconds_played(player_id)

    def period_foul_count(self, period_id: Optional[str] = None) -> int:
        with self._lock:
            return self.fouls.period_foul_count(period_id or self.periods.current_period.id)

    def cumulative_foul_count(self, player_id: str) -> int:
        with self._lock:
            return self.fouls.cumulative_foul_count(player_id)

    def is_fouled_out(self, player_id: str) -> bool:
        with self._lock:
            return self.fouls.is_fouled_out(player_id)

    def substitution_history(self) -> List[SubstitutionEvent]:
        """Every substitution of the game, most recently recorded first."""
        with self._lock:
            return self.ledger.history()

    def substitution_table(self) -> List[dict]:
        """Rows of the substitution table, most recently recorded first."""
        with self._lock:
            numbers = {p.id: p.period_number for p in self.periods.periods}
            return [
                {
                    "id": event.id,
                    "period_number": numbers[event.period_id],
                    "event_time": event.event_time,
                    "time": event.formatted_time,
                    "subbed_in": [p.label for p in event.subbed_in],
                    "subbed_out": [p.label for p in event.subbed_out],
                }
                for event in self.ledger.history()
            ]

    def preview_substitution(
        self, subbed_in: Iterable[str], subbed_out: Iterable[str]
    ) -> SubstitutionPreview:
        """Pending on-court count for a candidate selection; never commits anything."""
        with self._lock:
            pending = (self.roster.current() | set(subbed_in)) - set(subbed_out)
            return SubstitutionPreview(
                on_court_count=len(pending), max_on_court=MAX_PLAYERS_ON_COURT
            )

    def player(self, player_id: str) -> Player:
        return self._snapshot.player(player_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require_in_progress(self) -> None:
        if self.periods.status is GameStatus.GAME_OVER:
            raise InvalidStateError("The game is over")

    def _command(self, action: Callable[[], object]) -> Game:
        # Notify and save under the lock so snapshots reach subscribers and
        # storage in commit order
        with self._lock:
            action()
            snapshot = self._build_snapshot()
            self._snapshot = snapshot

            for callback in list(self._subscribers):
                callback(snapshot)

            if self._persistence is not None:
                try:
                    self._persistence.save(snapshot)
                except OSError:
                    logger.exception("Could not save game %s", snapshot.id)
                    raise
        return snapshot

    def _build_snapshot(self) -> Game:
        periods = tuple(
            replace(
                period,
                substitution_events=self.ledger.period_events(period.id),
                fouls=self.fouls.fouls(period.id),
            )
            for period in self.periods.periods
        )
        return Game(
            id=self.game_id,
            team_name=self.team_name,
            opponent=self.opponent,
            players=self.players,
            periods=periods,
            clock=self.clock.snapshot(),
            active_players=self.roster.current(),
            current_period_index=self.periods.current_index,
            period_count=self.periods.period_count,
            period_length_minutes=self.periods.period_length_minutes,
            status=self.periods.status,
            created_ts=self.created_ts,
        )
