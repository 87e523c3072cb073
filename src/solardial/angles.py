"""Degree/radian conversion helpers."""

import math

FULL_CIRCLE_RAD = 2.0 * math.pi


def to_radians(degrees: float) -> float:
    """Convert degrees to radians."""
    return degrees * FULL_CIRCLE_RAD / 360.0


def to_degrees(radians: float) -> float:
    """Convert radians to degrees."""
    return radians * 360.0 / FULL_CIRCLE_RAD
