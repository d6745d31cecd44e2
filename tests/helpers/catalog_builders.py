"""Builders for catalog test data.

Provides compact constructors for offerings, providers, snapshots and raw
endpoint items, plus a controllable fake fetch for synchronizer tests.
"""

import asyncio
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional

from discovery.adapters.payloads import DecodedCatalog
from discovery.catalog.models import CatalogSnapshot
from discovery.domain.models import ProviderProfile, SearchRequest, ServiceOffering


def make_provider(provider_id: str = "prov-1", **overrides) -> ProviderProfile:
    fields = {
        "provider_id": provider_id,
        "display_name": f"Provider {provider_id}",
        "provider_type_raw": "freelancer",
        "rating": 0,
        "completed_job_count": 0,
        "is_online": True,
        "distance_km": 0,
    }
    fields.update(overrides)
    return ProviderProfile(**fields)


def make_offering(
    offering_id: str = "svc-1",
    provider_id: str = "prov-1",
    **overrides,
) -> ServiceOffering:
    fields = {
        "offering_id": offering_id,
        "provider_id": provider_id,
        "name": "AC Service",
        "category_raw": "AC",
        "price": 500,
    }
    fields.update(overrides)
    return ServiceOffering(**fields)


def make_snapshot(
    offerings: Iterable[ServiceOffering],
    providers: Iterable[ProviderProfile],
    version: int = 1,
) -> CatalogSnapshot:
    return CatalogSnapshot(
        offerings=tuple(offerings),
        providers=MappingProxyType({p.provider_id: p for p in providers}),
        version=version,
    )


def make_request(category: str = "AC", **overrides) -> SearchRequest:
    fields = {
        "category_raw": category,
        "date": "2025-11-20",
        "time": "10:00 AM",
    }
    fields.update(overrides)
    return SearchRequest(**fields)


def raw_item(
    offering_id: Optional[str] = "svc-1",
    provider_id: Optional[str] = "prov-1",
    provider_key: str = "providers",
    **overrides,
) -> Dict[str, Any]:
    """One item as returned by the offerings endpoint."""
    provider: Dict[str, Any] = {
        "id": provider_id,
        "businessName": "Cool Air Works",
        "providerType": "freelancer",
        "rating": 4.5,
        "totalOrders": 12,
        "isOnline": True,
        "distanceKm": 2.5,
        "users": {"profiles": {"firstName": "Ravi", "lastName": "Kumar", "avatar": "https://cdn/ravi.png"}},
    }
    provider.update(overrides.pop("provider", {}))

    item: Dict[str, Any] = {
        "id": offering_id,
        "name": "AC Service",
        "description": "Split AC servicing",
        "category": "AC",
        "price": 500,
        "createdAt": "2025-11-01T12:00:00.000Z",
        provider_key: provider,
    }
    item.update(overrides)
    return item


def decoded(offerings: List[ServiceOffering], providers: List[ProviderProfile]) -> DecodedCatalog:
    return DecodedCatalog(offerings=list(offerings), providers={p.provider_id: p for p in providers})


class FakeFetch:
    """Awaitable fetch stand-in with per-call results and an optional gate.

    Each call pops the next queued outcome (a DecodedCatalog to return or an
    exception to raise); the last outcome repeats once the queue runs dry.
    While ``gated`` is set every call waits for ``release()``.
    """

    def __init__(self, *outcomes, gated: bool = False):
        self.outcomes = list(outcomes) or [DecodedCatalog()]
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.gated = gated
        self.started = asyncio.Event()
        self._gate = asyncio.Event()

    def release(self) -> None:
        self._gate.set()

    async def __call__(self) -> DecodedCatalog:
        self.calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.started.set()
        try:
            if self.gated:
                await self._gate.wait()
                self._gate.clear()
            outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
            if isinstance(outcome, BaseException):
                raise outcome
            return outcome
        finally:
            self.in_flight -= 1
