"""Data models for synchronizer bookkeeping and error reporting."""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from discovery.adapters.exceptions import CatalogFetchError


@dataclass(frozen=True)
class RefreshFailure:
    """A failed refresh, as handed to the error sink.

    Attributes:
        error: The NetworkError or DecodeError that ended the refresh
        trigger: What started the refresh (start, timer, push, focus, visibility, manual, coalesced)
        refresh_id: Correlates with the refresh's log lines
        occurred_at: When the failure was recorded (UTC)
        snapshot_version: Version of the snapshot still being served
    """

    error: CatalogFetchError
    trigger: str
    refresh_id: str
    occurred_at: datetime
    snapshot_version: int

    @property
    def error_type(self) -> str:
        return type(self.error).__name__

    @property
    def message(self) -> str:
        return str(self.error)


ErrorSink = Callable[[RefreshFailure], None]


@dataclass
class SyncStats:
    """
    Running counters for one synchronizer.

    Attributes:
        fetch_count: Fetches started
        success_count: Fetches that replaced the snapshot
        failure_count: Fetches that ended in a NetworkError/DecodeError
        coalesced_count: Triggers folded into a pending re-fetch
        discarded_count: Fetches that finished after dispose() and were dropped
        last_error: Message of the most recent failure
        last_success_at: Completion time of the most recent success (UTC)
        last_failure_at: Time of the most recent failure (UTC)
    """

    fetch_count: int = 0
    success_count: int = 0
    failure_count: int = 0
    coalesced_count: int = 0
    discarded_count: int = 0
    last_error: Optional[str] = None
    last_success_at: Optional[datetime] = None
    last_failure_at: Optional[datetime] = None
