"""Free-text catalog search for browsing offerings."""

from typing import List, Optional

from discovery.catalog.models import CatalogSnapshot
from discovery.domain.models import ServiceOffering


def search_catalog(snapshot: CatalogSnapshot, query: Optional[str]) -> List[ServiceOffering]:
    """
    Filter offerings by a free-text query.

    The trimmed, lower-cased query is matched as a substring of the offering
    name, provider display name, category and description. A blank query
    returns every offering. Store order is preserved.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(snapshot.offerings)

    results = []
    for offering in snapshot.offerings:
        provider = snapshot.providers.get(offering.provider_id)
        haystacks = (
            offering.name,
            provider.display_name if provider is not None else "",
            offering.category_raw,
            offering.description,
        )
        if any(needle in text.lower() for text in haystacks):
            results.append(offering)
    return results
