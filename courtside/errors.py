"""
Error kinds raised by the Courtside game services.

Every error is reported synchronously to the caller; nothing is retried.
"""


class GameError(Exception):
    """Base class for all game service errors."""
    pass


class ValidationError(GameError, ValueError):
    """Caller-correctable input problem (roster cap, empty substitution, bench foul)."""
    pass


class InvalidStateError(GameError):
    """Operation not valid in the current state (adjusting a running clock, game over)."""
    pass


class NotFoundError(GameError, LookupError):
    """Operation referenced an event, player, period or game that does not exist."""
    pass
