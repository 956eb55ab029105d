"""
Courtside Basketball Bench Tracker

Tracks a basketball team's substitutions, playing time, fouls and
period/clock state for a single game session.

This package provides the game store and its services, plus a Flask JSON
API for the bench UI.
"""
from .errors import GameError, InvalidStateError, NotFoundError, ValidationError
from .models import Player, Game, Period, SubstitutionEvent, Foul, GameStatus
from .services import GameStore, PersistenceService, AnalyticsService
from .utils import fmt_clock, parse_clock, APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "GameError", "InvalidStateError", "NotFoundError", "ValidationError",
    "Player", "Game", "Period", "SubstitutionEvent", "Foul", "GameStatus",
    "GameStore", "PersistenceService", "AnalyticsService",
    "fmt_clock", "parse_clock", "APP_TITLE"
]
