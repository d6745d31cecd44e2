"""Scheduling module for periodic catalog refreshes."""

from .service import RefreshScheduler

__all__ = [
    "RefreshScheduler",
]
