"""Non-fatal configuration checks."""

import warnings
from typing import Any, Dict, List
from urllib.parse import urlparse

from .duration import DurationParseError, parse_duration

SHORT_INTERVAL_SECONDS = 10
LOCAL_HOSTS = {"localhost", "127.0.0.1", "::1"}


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Inspect a raw configuration dict for settings that are legal but suspect.

    Returns:
        List of warning messages (empty when nothing looks off)
    """
    warning_messages = []

    sync = config_dict.get("sync") or {}
    if isinstance(sync, dict):
        interval = sync.get("refresh_interval")
        if isinstance(interval, str):
            try:
                if parse_duration(interval) < SHORT_INTERVAL_SECONDS:
                    warning_messages.append(
                        f"Short refresh_interval ({interval}) polls the catalog endpoint very often"
                    )
            except DurationParseError:
                pass  # reported by model validation

    catalog = config_dict.get("catalog") or {}
    if isinstance(catalog, dict):
        endpoint = catalog.get("endpoint_url")
        if isinstance(endpoint, str):
            parsed = urlparse(endpoint.strip())
            if parsed.scheme == "http" and parsed.hostname and parsed.hostname not in LOCAL_HOSTS:
                warning_messages.append(
                    f"Catalog endpoint {endpoint} uses plain HTTP to a non-local host"
                )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit each message through the warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
