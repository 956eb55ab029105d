"""
Utilities package for the Courtside basketball bench tracker.

This package contains utility functions used throughout the application.
"""
from .time_utils import fmt_clock, fmt_clock_optional, parse_clock, now_ts
from .constants import (
    APP_TITLE, DEFAULT_PERIOD_LENGTH_MIN, DEFAULT_PERIOD_COUNT,
    SUPPORTED_PERIOD_LENGTHS, SUPPORTED_PERIOD_COUNTS, PERIOD_LABELS,
    MAX_PLAYERS_ON_COURT, DEFAULT_FOUL_LIMIT, CLOCK_ADJUST_STEPS
)

__all__ = [
    "fmt_clock", "fmt_clock_optional", "parse_clock", "now_ts", "APP_TITLE",
    "DEFAULT_PERIOD_LENGTH_MIN", "DEFAULT_PERIOD_COUNT", "SUPPORTED_PERIOD_LENGTHS",
    "SUPPORTED_PERIOD_COUNTS", "PERIOD_LABELS", "MAX_PLAYERS_ON_COURT",
    "DEFAULT_FOUL_LIMIT", "CLOCK_ADJUST_STEPS"
]
