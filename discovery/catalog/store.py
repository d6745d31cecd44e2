"""Versioned in-memory catalog store.

The store holds exactly one CatalogSnapshot reference. Readers grab the
reference and work on it for as long as they like; the synchronizer swaps in
a brand-new snapshot on each successful fetch. Snapshots are never mutated,
so a reader can never see half of an update.
"""

import logging
from datetime import datetime
from types import MappingProxyType
from typing import Callable, Iterable, List, Mapping, Optional

from discovery.domain.models import ProviderProfile, ServiceOffering
from discovery.logging import get_logger
from discovery.utils.timestamps import ensure_utc, utc_now

from .models import CatalogSnapshot

logger = get_logger(__name__, component="catalog")

SnapshotListener = Callable[[CatalogSnapshot], None]


class CatalogStore:
    """Shared holder of the current catalog snapshot.

    One instance is shared by every consumer (search screens, browse lists)
    so they all observe the same snapshot. Only the CatalogSynchronizer
    calls replace_snapshot().
    """

    def __init__(self, logger_instance: Optional[logging.Logger] = None):
        """Start with an empty version-0 snapshot.

        Args:
            logger_instance: Logger instance (defaults to module logger)
        """
        self._snapshot = CatalogSnapshot()
        self._listeners: List[SnapshotListener] = []
        self.logger = logger_instance or logger

    def get_snapshot(self) -> CatalogSnapshot:
        """Return the current snapshot. O(1); the object is never mutated."""
        return self._snapshot

    @property
    def version(self) -> int:
        return self._snapshot.version

    @property
    def last_successful_fetch_at(self) -> Optional[datetime]:
        return self._snapshot.fetched_at

    def replace_snapshot(
        self,
        offerings: Iterable[ServiceOffering],
        providers: Mapping[str, ProviderProfile],
        fetched_at: Optional[datetime] = None,
    ) -> CatalogSnapshot:
        """Swap in a new snapshot built from a complete fetch result.

        Intended for the synchronizer only. The version is the previous
        version plus one.

        Args:
            offerings: Every offering of the new catalog, in source order
            providers: provider_id -> ProviderProfile for the new catalog
            fetched_at: Fetch completion time (defaults to now, UTC)

        Returns:
            The snapshot that is now current

        Raises:
            ValueError: If two offerings share an offering_id
        """
        offerings = tuple(offerings)
        self._check_unique_ids(offerings)

        snapshot = CatalogSnapshot(
            offerings=offerings,
            providers=MappingProxyType(dict(providers)),
            version=self._snapshot.version + 1,
            fetched_at=ensure_utc(fetched_at) or utc_now(),
        )
        self._snapshot = snapshot

        self.logger.info(
            "Catalog snapshot replaced",
            extra={
                "event": "catalog.snapshot.replaced",
                "snapshot_version": snapshot.version,
                "offering_count": len(snapshot.offerings),
                "provider_count": len(snapshot.providers),
            },
        )

        self._notify(snapshot)
        return snapshot

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener called with each new snapshot.

        Returns:
            Function that removes the listener; safe to call more than once
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, snapshot: CatalogSnapshot) -> None:
        # Copy: listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                self.logger.error(
                    f"Snapshot listener failed: {e}",
                    extra={
                        "event": "catalog.listener.failed",
                        "snapshot_version": snapshot.version,
                        "error_type": type(e).__name__,
                    },
                    exc_info=True,
                )

    @staticmethod
    def _check_unique_ids(offerings: tuple) -> None:
        seen = set()
        duplicates = set()
        for offering in offerings:
            if offering.offering_id in seen:
                duplicates.add(offering.offering_id)
            seen.add(offering.offering_id)
        if duplicates:
            raise ValueError(
                f"Duplicate offering_id in snapshot: {', '.join(sorted(duplicates))}"
            )
