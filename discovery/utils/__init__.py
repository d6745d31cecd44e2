"""Utility functions for time handling and numeric coercion."""

from .numbers import coerce_non_negative, coerce_number
from .timestamps import ensure_utc, parse_iso_datetime, utc_now

__all__ = [
    # Numbers
    "coerce_number",
    "coerce_non_negative",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
]
