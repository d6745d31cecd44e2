"""Result presentation boundary.

This module provides:
- MatchResults: Immutable ranked result set handed to presenters
- ResultPresenter: Protocol implemented by anything that renders results
- build_display_payload: Render-ready dictionary for one match record
- RefreshStatus: Error sink backing the "could not refresh" indicator
- ConsolePresenter: Jinja2-rendered plain-text presenter for the command line
"""

from .console import ConsolePresenter
from .models import MatchResults, PresentationError, ResultPresenter
from .payloads import (
    build_display_payload,
    format_distance,
    format_price,
    format_provider_type,
    format_rating,
)
from .status import RefreshStatus

__all__ = [
    "ConsolePresenter",
    "MatchResults",
    "PresentationError",
    "RefreshStatus",
    "ResultPresenter",
    "build_display_payload",
    "format_distance",
    "format_price",
    "format_provider_type",
    "format_rating",
]
