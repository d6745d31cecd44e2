"""Duration parsing for configuration values such as ``sync.refresh_interval``."""

import re

_ISO_PATTERN = re.compile(r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?$")
_HUMAN_PART = re.compile(r"(\d+)\s*([smhd])")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


class DurationParseError(ValueError):
    """Raised when a duration string cannot be parsed or is out of range."""

    pass


def parse_duration(duration_str: str) -> int:
    """
    Parse a duration string to whole seconds.

    Accepts human-readable values ("30s", "5m", "1h30m", "2d") and ISO-8601
    durations ("PT30S", "PT5M", "P1D").

    Raises:
        DurationParseError: If the string is empty, malformed or zero

    Examples:
        >>> parse_duration("30s")
        30
        >>> parse_duration("PT5M")
        300
    """
    cleaned = duration_str.strip()
    if not cleaned:
        raise DurationParseError("Duration string cannot be empty")

    if cleaned.upper().startswith("P"):
        seconds = _parse_iso(cleaned.upper())
    else:
        seconds = _parse_human(cleaned.lower())

    if seconds == 0:
        raise DurationParseError(f"Duration cannot be zero: '{duration_str}'")
    return seconds


def _parse_iso(value: str) -> int:
    match = _ISO_PATTERN.match(value)
    if not match:
        raise DurationParseError(
            f"Invalid ISO-8601 duration format: '{value}'. "
            "Expected format like 'PT30S', 'PT5M', 'PT1H' or 'P1D'"
        )

    days, hours, minutes, seconds = match.groups()
    return (
        int(days or 0) * _UNIT_SECONDS["d"]
        + int(hours or 0) * _UNIT_SECONDS["h"]
        + int(minutes or 0) * _UNIT_SECONDS["m"]
        + int(float(seconds or 0))
    )


def _parse_human(value: str) -> int:
    parts = _HUMAN_PART.findall(value)
    if not parts:
        raise DurationParseError(
            f"Invalid duration format: '{value}'. "
            "Expected format like '30s', '5m', '1h' or combinations like '1m30s'"
        )

    # Every character must belong to a number+unit pair
    if "".join(f"{num}{unit}" for num, unit in parts) != re.sub(r"\s+", "", value):
        raise DurationParseError(
            f"Invalid characters in duration: '{value}'. "
            "Use only digits and units: s, m, h, d"
        )

    return sum(int(num) * _UNIT_SECONDS[unit] for num, unit in parts)


def validate_duration_range(duration_seconds: int, min_seconds: int = 5, max_seconds: int = 86400) -> None:
    """
    Check that a duration lies within [min_seconds, max_seconds].

    Raises:
        DurationParseError: If the duration is outside the range
    """
    if duration_seconds < min_seconds:
        raise DurationParseError(
            f"Refresh interval too short: {_describe(duration_seconds)}. "
            f"Minimum is {_describe(min_seconds)}."
        )
    if duration_seconds > max_seconds:
        raise DurationParseError(
            f"Refresh interval too long: {_describe(duration_seconds)}. "
            f"Maximum is {_describe(max_seconds)}."
        )


def _describe(seconds: int) -> str:
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}{'s' if count != 1 else ''}"
    return f"{seconds} second{'s' if seconds != 1 else ''}"
