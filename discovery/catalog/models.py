"""Snapshot model for the catalog store."""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple

from discovery.domain.models import ProviderProfile, ServiceOffering


@dataclass(frozen=True)
class CatalogSnapshot:
    """Immutable view of the whole catalog at one point in time.

    Unpacks as ``offerings, providers, version = snapshot``.

    Attributes:
        offerings: Offerings in the order the catalog source returned them
        providers: Read-only mapping of provider_id -> ProviderProfile
        version: Increments by one on every successful replacement (0 = empty initial snapshot)
        fetched_at: When the fetch that produced this snapshot completed (UTC)
    """

    offerings: Tuple[ServiceOffering, ...] = ()
    providers: Mapping[str, ProviderProfile] = field(default_factory=lambda: MappingProxyType({}))
    version: int = 0
    fetched_at: Optional[datetime] = None

    def __iter__(self) -> Iterator:
        return iter((self.offerings, self.providers, self.version))

    def __len__(self) -> int:
        return len(self.offerings)

    @property
    def is_empty(self) -> bool:
        return not self.offerings

    def get_provider(self, provider_id: str) -> Optional[ProviderProfile]:
        return self.providers.get(provider_id)
