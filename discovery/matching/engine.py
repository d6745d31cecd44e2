"""Matching engine: filter, deduplicate by provider, and rank offerings.

``match`` is a pure function over a CatalogSnapshot:
1. Join each offering to its provider by provider_id (orphans are dropped)
2. Keep offerings that pass every filter in the SearchRequest
3. Keep the cheapest qualifying offering per provider
4. Rank by rating desc, completed jobs desc, price asc
"""

import logging
import time
from typing import Dict, List, Optional

from discovery.catalog.models import CatalogSnapshot
from discovery.domain.models import ProviderProfile, SearchRequest, ServiceOffering
from discovery.logging import get_logger
from discovery.normalization.service import (
    normalize_category_key,
    normalize_provider_type,
    normalize_search_text,
)

from .models import MatchRecord

logger = get_logger(__name__, component="matching")


def _passes_filters(
    offering: ServiceOffering,
    provider: ProviderProfile,
    request: SearchRequest,
    category_key: str,
    name_filter: Optional[str],
) -> bool:
    if normalize_category_key(offering.category_raw) != category_key:
        return False

    if request.provider_type_filter != "all":
        if normalize_provider_type(provider.provider_type_raw) != request.provider_type_filter:
            return False

    # Unknown distance (0) passes any radius
    if provider.distance_km > 0 and provider.distance_km > request.radius_km:
        return False

    if request.fixed_provider_id is not None and offering.provider_id != request.fixed_provider_id:
        return False

    if name_filter is not None and name_filter not in normalize_search_text(offering.name):
        return False

    return True


def _rank_key(record: MatchRecord):
    return (-record.rating, -record.completed_job_count, record.price)


def match(snapshot: CatalogSnapshot, request: SearchRequest) -> List[MatchRecord]:
    """
    Match a search request against a catalog snapshot.

    Pure and total: performs no I/O and never raises for any snapshot
    produced by the catalog store. An empty request category matches nothing.

    Args:
        snapshot: Catalog snapshot to search
        request: Validated search criteria

    Returns:
        At most one MatchRecord per provider, best first. Providers tied on
        every ranking key keep the order in which they first qualified.
    """
    category_key = normalize_category_key(request.category_raw)
    if not category_key:
        return []

    name_filter = None
    if request.fixed_service_name_substring is not None:
        name_filter = normalize_search_text(request.fixed_service_name_substring)

    cheapest: Dict[str, MatchRecord] = {}
    for offering in snapshot.offerings:
        provider = snapshot.providers.get(offering.provider_id)
        if provider is None:
            continue
        if not _passes_filters(offering, provider, request, category_key, name_filter):
            continue

        current = cheapest.get(offering.provider_id)
        # Strictly cheaper only, so the first offering wins price ties
        if current is None or offering.price < current.price:
            cheapest[offering.provider_id] = MatchRecord.from_pair(offering, provider)

    return sorted(cheapest.values(), key=_rank_key)


class ProviderMatcher:
    """Runs ``match`` and emits one structured log line per search.

    Responsibilities:
    - Delegate to the pure ``match`` function
    - Log request filters, snapshot version, result count and duration
    """

    def __init__(self, logger_instance: Optional[logging.Logger] = None):
        """Initialize ProviderMatcher.

        Args:
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.logger = logger_instance or logger

    def match(self, snapshot: CatalogSnapshot, request: SearchRequest) -> List[MatchRecord]:
        started = time.perf_counter()
        records = match(snapshot, request)
        duration_ms = round((time.perf_counter() - started) * 1000, 3)

        self.logger.info(
            f"Matched {len(records)} provider(s) for category '{request.category_raw}'",
            extra={
                "event": "matching.search.completed",
                "category_key": normalize_category_key(request.category_raw),
                "provider_type_filter": request.provider_type_filter,
                "radius_km": request.radius_km,
                "fixed_provider_id": request.fixed_provider_id,
                "snapshot_version": snapshot.version,
                "offering_count": len(snapshot.offerings),
                "result_count": len(records),
                "duration_ms": duration_ms,
            },
        )
        return records
