"""
Models package for the Courtside basketball bench tracker.

This package contains the core data models used throughout the application.
"""
from .player import Player
from .game_state import ClockSnapshot, Foul, Game, GameStatus, Period, SubstitutionEvent
from .game_report import GameReport, GameStatusSummary, PlayerStatLine, TeamStats

__all__ = [
    "Player", "ClockSnapshot", "Foul", "Game", "GameStatus", "Period",
    "SubstitutionEvent", "GameReport", "GameStatusSummary", "PlayerStatLine", "TeamStats"
]
