"""Catalog synchronization: periodic pull, push invalidation, coalesced refresh."""

from .models import ErrorSink, RefreshFailure, SyncStats
from .service import CatalogSynchronizer, Fetcher, threaded_fetcher

__all__ = [
    "CatalogSynchronizer",
    "ErrorSink",
    "Fetcher",
    "RefreshFailure",
    "SyncStats",
    "threaded_fetcher",
]
