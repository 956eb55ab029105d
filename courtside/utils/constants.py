"""
Constants for the Courtside basketball bench tracker.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Courtside Bench Tracker"

# Game format defaults
DEFAULT_PERIOD_LENGTH_MIN = 20
DEFAULT_PERIOD_COUNT = 2
SUPPORTED_PERIOD_LENGTHS = (10, 20)
SUPPORTED_PERIOD_COUNTS = (2, 4)

# Friendly labels for different period counts (used for UI hints)
PERIOD_LABELS = {
    2: "Half",
    4: "Quarter",
}

# On-court rules
MAX_PLAYERS_ON_COURT = 5
DEFAULT_FOUL_LIMIT = 5

# Manual clock corrections offered by the clock controls
CLOCK_ADJUST_STEPS = (10, 60)
