"""Dataclasses representing box score reports for the bench tracker."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class PlayerStatLine:
    """Playing time and foul information for a single player."""

    player_id: str
    number: str
    name: str
    on_court: bool
    total_seconds: int
    period_seconds: Dict[int, int]
    period_fouls: int
    total_fouls: int
    foul_status: str


@dataclass
class TeamStats:
    """Aggregate team figures for the game."""

    total_play_seconds: int = 0
    average_play_seconds: float = 0.0
    total_substitutions: int = 0
    total_fouls: int = 0
    players_with_fouls: int = 0
    most_active_player_id: Optional[str] = None
    most_active_seconds: int = 0


@dataclass
class GameStatusSummary:
    """Where the game stands right now."""

    is_running: bool
    current_period_number: int
    total_periods: int
    active_player_count: int
    total_fouls: int
    is_game_over: bool


@dataclass
class GameReport:
    """Snapshot of the box score for the current game state."""

    generated_ts: float
    game_id: str
    team_name: str
    opponent: str
    time_remaining: int
    status: GameStatusSummary
    team: TeamStats
    players: List[PlayerStatLine] = field(default_factory=list)
