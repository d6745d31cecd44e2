"""Refresh status indicator fed by the synchronizer's error sink."""

import logging
from typing import Callable, Optional

from discovery.catalog.models import CatalogSnapshot
from discovery.catalog.store import CatalogStore
from discovery.logging import get_logger
from discovery.sync.models import RefreshFailure

logger = get_logger(__name__, component="presentation")


class RefreshStatus:
    """
    Tracks whether the catalog on screen could be refreshed.

    Pass ``report_failure`` as the synchronizer's error sink and call
    ``attach(store)`` so a later successful refresh clears the failure.
    """

    def __init__(self, logger_instance: Optional[logging.Logger] = None):
        self.logger = logger_instance or logger
        self.last_failure: Optional[RefreshFailure] = None
        self.snapshot_version = 0
        self.consecutive_failures = 0

    @property
    def could_not_refresh(self) -> bool:
        return self.last_failure is not None

    @property
    def message(self) -> Optional[str]:
        if self.last_failure is None:
            return None
        return f"Could not refresh services: {self.last_failure.message}"

    def report_failure(self, failure: RefreshFailure) -> None:
        self.last_failure = failure
        self.consecutive_failures += 1
        if self.consecutive_failures == 1:
            self.logger.info(
                "Showing 'could not refresh' indicator",
                extra={
                    "event": "presentation.refresh_status.stale",
                    "error_type": failure.error_type,
                    "snapshot_version": failure.snapshot_version,
                },
            )

    def mark_fresh(self, snapshot: CatalogSnapshot) -> None:
        if self.last_failure is not None:
            self.logger.info(
                "Catalog refreshed, clearing 'could not refresh' indicator",
                extra={
                    "event": "presentation.refresh_status.fresh",
                    "snapshot_version": snapshot.version,
                    "failed_attempts": self.consecutive_failures,
                },
            )
        self.last_failure = None
        self.consecutive_failures = 0
        self.snapshot_version = snapshot.version

    def attach(self, store: CatalogStore) -> Callable[[], None]:
        """Clear the failure on every snapshot swap; returns the unsubscribe callable."""
        return store.subscribe(self.mark_fresh)
