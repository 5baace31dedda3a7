"""
Number and duration formatting shared by grading, gating and the navigator.
"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (12.5 -> 13)."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def percent(part: int, whole: int) -> int:
    """
    Integer percentage of part over whole, clamped to 0..100.

    Returns 0 when whole is 0.
    """
    if whole <= 0:
        return 0
    return max(0, min(100, round_half_up(100 * part / whole)))


def format_elapsed(milliseconds: int) -> str:
    """Format a millisecond total as "{h}h {m}m" (minutes truncated)."""
    hours = milliseconds // (1000 * 60 * 60)
    minutes = (milliseconds % (1000 * 60 * 60)) // (1000 * 60)
    return f"{hours}h {minutes}m"


def format_minutes(total_minutes: float) -> str:
    """
    Format an estimated duration.

    Returns "{h}h {m}m" from one hour up, otherwise "{m} minutes".
    """
    hours = int(total_minutes // 60)
    minutes = round_half_up(total_minutes % 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes} minutes"
