"""Numeric coercion for loosely typed catalog fields."""

import math
from typing import Any


def coerce_number(value: Any, default: float = 0.0) -> float:
    """Convert a JSON-ish value to a finite float.

    Booleans, None, non-numeric strings, NaN and infinities all become
    ``default``, so comparisons downstream never see NaN.

    Example:
        >>> coerce_number("4.5")
        4.5
        >>> coerce_number(float("nan"))
        0.0
    """
    if value is None or isinstance(value, bool):
        return default

    try:
        number = float(value)
    except (TypeError, ValueError):
        return default

    if not math.isfinite(number):
        return default
    return number


def coerce_non_negative(value: Any) -> float:
    """Like coerce_number(), with negative values clamped to 0."""
    return max(coerce_number(value), 0.0)
