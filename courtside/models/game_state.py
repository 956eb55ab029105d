"""
Game state models for the Courtside basketball bench tracker.

This module contains the immutable snapshot types handed out by the game
store: the game itself, its periods, substitution events, fouls and the
clock snapshot, together with their JSON conversion helpers.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from .player import Player
from ..errors import NotFoundError, ValidationError
from ..utils import MAX_PLAYERS_ON_COURT, fmt_clock


class GameStatus(Enum):
    """Lifecycle of a game over its periods."""
    IN_PROGRESS = "in_progress"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class SubstitutionEvent:
    """
    A single recorded transition of players entering/leaving the court.

    Attributes:
        id: Event identifier, stable across edits
        period_id: Period the event belongs to
        event_time: Seconds remaining on the clock when the event happened
        subbed_in: Players entering the court
        subbed_out: Players leaving the court
        sequence: Insertion order within the game, never changed by edits
    """
    id: str
    period_id: str
    event_time: int
    subbed_in: Tuple[Player, ...] = ()
    subbed_out: Tuple[Player, ...] = ()
    sequence: int = 0

    @property
    def subbed_in_ids(self) -> FrozenSet[str]:
        return frozenset(p.id for p in self.subbed_in)

    @property
    def subbed_out_ids(self) -> FrozenSet[str]:
        return frozenset(p.id for p in self.subbed_out)

    @property
    def formatted_time(self) -> str:
        """Event time as shown in the substitution table."""
        return fmt_clock(self.event_time)

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "period_id": self.period_id,
            "event_time": self.event_time,
            "subbed_in": [p.to_dict() for p in self.subbed_in],
            "subbed_out": [p.to_dict() for p in self.subbed_out],
            "sequence": self.sequence,
        }

    @staticmethod
    def from_json(data: dict) -> "SubstitutionEvent":
        return SubstitutionEvent(
            id=str(data["id"]),
            period_id=str(data["period_id"]),
            event_time=int(data["event_time"]),
            subbed_in=tuple(Player.from_dict(p) for p in data.get("subbed_in", [])),
            subbed_out=tuple(Player.from_dict(p) for p in data.get("subbed_out", [])),
            sequence=int(data.get("sequence", 0)),
        )


@dataclass(frozen=True)
class Foul:
    """A personal foul charged to a player. Fouls are append-only."""
    id: str
    player: Player
    period_id: str
    time_remaining: int

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "player": self.player.to_dict(),
            "period_id": self.period_id,
            "time_remaining": self.time_remaining,
        }

    @staticmethod
    def from_json(data: dict) -> "Foul":
        return Foul(
            id=str(data["id"]),
            player=Player.from_dict(data["player"]),
            period_id=str(data["period_id"]),
            time_remaining=int(data.get("time_remaining", 0)),
        )


@dataclass(frozen=True)
class Period:
    """
    A timed segment of the game (half or quarter) with its own event log.

    Attributes:
        id: Period identifier
        period_number: 1-based period number
        length_minutes: Configured period length
        substitution_events: Events in insertion order
        fouls: Fouls recorded during the period, in insertion order
        ended: Whether the period has been closed by an end-of-period action
    """
    id: str
    period_number: int
    length_minutes: int
    substitution_events: Tuple[SubstitutionEvent, ...] = ()
    fouls: Tuple[Foul, ...] = ()
    ended: bool = False

    @property
    def length_seconds(self) -> int:
        return self.length_minutes * 60

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "period_number": self.period_number,
            "length_minutes": self.length_minutes,
            "substitution_events": [e.to_json() for e in self.substitution_events],
            "fouls": [f.to_json() for f in self.fouls],
            "ended": self.ended,
        }

    @staticmethod
    def from_json(data: dict) -> "Period":
        return Period(
            id=str(data["id"]),
            period_number=int(data["period_number"]),
            length_minutes=int(data["length_minutes"]),
            substitution_events=tuple(
                SubstitutionEvent.from_json(e) for e in data.get("substitution_events", [])
            ),
            fouls=tuple(Foul.from_json(f) for f in data.get("fouls", [])),
            ended=bool(data.get("ended", False)),
        )


@dataclass(frozen=True)
class ClockSnapshot:
    """
    Serializable state of the game clock.

    Attributes:
        period_length_seconds: Full length of the current period
        time_remaining: Seconds left in the current period
        is_running: Whether the clock was running when captured
        start_ts: Wall-clock reference recorded by the last start (epoch seconds)
        start_remaining: Time remaining at the last start
    """
    period_length_seconds: int
    time_remaining: int
    is_running: bool = False
    start_ts: Optional[float] = None
    start_remaining: Optional[int] = None

    def to_json(self) -> dict:
        return {
            "period_length_seconds": self.period_length_seconds,
            "time_remaining": self.time_remaining,
            "is_running": self.is_running,
            "start_ts": self.start_ts,
            "start_remaining": self.start_remaining,
        }

    @staticmethod
    def from_json(data: dict) -> "ClockSnapshot":
        start_remaining = data.get("start_remaining")
        return ClockSnapshot(
            period_length_seconds=int(data["period_length_seconds"]),
            time_remaining=int(data["time_remaining"]),
            is_running=bool(data.get("is_running", False)),
            start_ts=data.get("start_ts"),
            start_remaining=int(start_remaining) if start_remaining is not None else None,
        )


@dataclass(frozen=True)
class Game:
    """
    Immutable snapshot of a single game session.

    Attributes:
        id: Game identifier
        team_name: Name of the tracked team
        opponent: Opponent name
        players: Players available for this game
        periods: Periods created so far (lazily, as the game advances)
        active_players: Ids of the players currently on court
        current_period_index: Index into ``periods`` of the active period
        period_count: Number of periods in the game format
        period_length_minutes: Length of each period
        status: Game lifecycle status
        clock: Clock snapshot for the current period
        created_ts: Creation time (epoch seconds)
    """
    id: str
    team_name: str
    opponent: str
    players: Tuple[Player, ...]
    periods: Tuple[Period, ...]
    clock: ClockSnapshot
    active_players: FrozenSet[str] = field(default_factory=frozenset)
    current_period_index: int = 0
    period_count: int = 2
    period_length_minutes: int = 20
    status: GameStatus = GameStatus.IN_PROGRESS
    created_ts: Optional[float] = None

    @property
    def current_period(self) -> Period:
        return self.periods[self.current_period_index]

    @property
    def is_running(self) -> bool:
        return self.clock.is_running

    @property
    def time_remaining(self) -> int:
        return self.clock.time_remaining

    @property
    def is_game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER

    def player(self, player_id: str) -> Player:
        """Look up a game player by id."""
        for player in self.players:
            if player.id == player_id:
                return player
        raise NotFoundError(f"Player '{player_id}' is not part of this game")

    def period(self, period_id: str) -> Period:
        """Look up a created period by id."""
        for period in self.periods:
            if period.id == period_id:
                return period
        raise NotFoundError(f"Period '{period_id}' not found")

    def ensure_consistency(self) -> None:
        """
        Check the snapshot invariants.

        Raises:
            ValidationError: If the snapshot violates an invariant
        """
        if not self.periods:
            raise ValidationError("Game must have at least one period")
        if not 0 <= self.current_period_index < len(self.periods):
            raise ValidationError("Current period must be within available periods")
        if len(self.active_players) > MAX_PLAYERS_ON_COURT:
            raise ValidationError(
                f"Cannot have more than {MAX_PLAYERS_ON_COURT} active players"
            )
        player_ids = {p.id for p in self.players}
        unknown = set(self.active_players) - player_ids
        if unknown:
            raise ValidationError("All active players must be from the game roster")
        length = self.current_period.length_seconds
        if not 0 <= self.clock.time_remaining <= length:
            raise ValidationError(
                f"Time remaining must be between 0 and {length} seconds"
            )

    def to_json(self) -> dict:
        """
        Convert Game to JSON-serializable dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        return {
            "id": self.id,
            "team_name": self.team_name,
            "opponent": self.opponent,
            "players": [p.to_dict() for p in self.players],
            "periods": [p.to_json() for p in self.periods],
            "active_players": sorted(self.active_players),
            "current_period_index": self.current_period_index,
            "period_count": self.period_count,
            "period_length_minutes": self.period_length_minutes,
            "status": self.status.value,
            "clock": self.clock.to_json(),
            "created_ts": self.created_ts,
        }

    @staticmethod
    def from_json(data: dict) -> "Game":
        """
        Create Game from JSON dictionary.

        Args:
            data: Dictionary with game data

        Returns:
            New Game instance

        Raises:
            ValidationError: If the data violates a game invariant
        """
        game = Game(
            id=str(data["id"]),
            team_name=str(data.get("team_name", "")),
            opponent=str(data.get("opponent", "")),
            players=tuple(Player.from_dict(p) for p in data.get("players", [])),
            periods=tuple(Period.from_json(p) for p in data.get("periods", [])),
            clock=ClockSnapshot.from_json(data["clock"]),
            active_players=frozenset(str(pid) for pid in data.get("active_players", [])),
            current_period_index=int(data.get("current_period_index", 0)),
            period_count=int(data.get("period_count", 2)),
            period_length_minutes=int(data.get("period_length_minutes", 20)),
            status=GameStatus(data.get("status", GameStatus.IN_PROGRESS.value)),
            created_ts=data.get("created_ts"),
        )
        game.ensure_consistency()
        return game
