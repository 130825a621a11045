"""
Numeric helper functions shared by the scoring modules.
"""
import math


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, with halves rounded towards +infinity.

    Python's built-in round() uses banker's rounding; scores shown to users
    must round 12.5 to 13 and -12.5 to -12.

    Args:
        value: Number to round

    Returns:
        Rounded integer
    """
    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]."""
    return max(lower, min(value, upper))
