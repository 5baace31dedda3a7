"""CPAT Trainer utilities."""

from .formatting import round_half_up, percent, format_elapsed, format_minutes

__all__ = [
    "round_half_up",
    "percent",
    "format_elapsed",
    "format_minutes",
]
