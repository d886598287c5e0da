"""Unit conversions for observation display.

Raw NWS observations are reported in SI units (Celsius, metres per second,
degrees). The callout shows Fahrenheit, mph and compass labels.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

CARDINAL_DIRECTIONS = ["N", "NE", "E", "SE", "S", "SW", "W", "NW"]

MPS_TO_MPH = 2.237


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return int(math.floor(value + 0.5))


def to_fahrenheit(celsius: float) -> str:
    """Convert Celsius to a Fahrenheit string with one decimal digit.

    Exact ties round away from zero (34.25 gives 34.3), where format specs
    would round half to even.
    """
    fahrenheit = Decimal(celsius * 9 / 5 + 32)
    return str(fahrenheit.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def meters_per_second_to_mph(mps: Optional[float]) -> Optional[int]:
    if mps is None:
        return None
    return round_half_up(mps * MPS_TO_MPH)


def degrees_to_cardinal(deg: Optional[float]) -> Optional[str]:
    """Convert a wind direction in degrees to an 8-point compass label.

    Args:
        deg: Direction in degrees (360 wraps to N)

    Returns:
        One of N, NE, E, SE, S, SW, W, NW, or None when deg is None
    """
    if deg is None:
        return None
    return CARDINAL_DIRECTIONS[round_half_up(deg / 45) % 8]


def round_percent(pct: Optional[float]) -> Optional[int]:
    if pct is None:
        return None
    return round_half_up(pct)
