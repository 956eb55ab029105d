"""
Utility functions for the Courtside basketball bench tracker.

This module contains the clock formatting helpers used throughout the application.
"""
import time
from typing import Optional

from ..errors import ValidationError


def fmt_clock(seconds: int) -> str:
    """
    Format seconds as an M:SS game clock string.

    Args:
        seconds: Number of seconds to format

    Returns:
        Formatted time string, minutes unpadded

    Example:
        >>> fmt_clock(500)
        '8:20'
        >>> fmt_clock(1200)
        '20:00'
    """
    seconds = max(0, int(seconds))
    m = seconds // 60
    s = seconds % 60
    return f"{m}:{s:02d}"


def fmt_clock_optional(seconds: Optional[int]) -> str:
    """Format seconds like :func:`fmt_clock`, returning '' for missing values."""
    if seconds is None:
        return ""
    return fmt_clock(seconds)


def parse_clock(text: str) -> int:
    """
    Parse an M:SS or MM:SS clock string into seconds.

    Args:
        text: Clock string such as "8:20"

    Returns:
        Number of seconds

    Raises:
        ValidationError: If the string is not a valid clock value
    """
    parts = str(text).strip().split(":")
    if len(parts) != 2:
        raise ValidationError(f"Invalid time format '{text}'. Expected M:SS")

    minutes_text, seconds_text = parts
    if not minutes_text.isdigit() or not seconds_text.isdigit():
        raise ValidationError(f"Invalid time values in '{text}'")

    minutes = int(minutes_text)
    seconds = int(seconds_text)
    if seconds > 59:
        raise ValidationError(f"Seconds must be between 0 and 59 in '{text}'")
    return minutes * 60 + seconds


def now_ts() -> float:
    """
    Get current timestamp in epoch seconds.

    Returns:
        Current time as floating point epoch seconds
    """
    return time.time()
