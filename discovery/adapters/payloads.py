"""Decoding of the offerings endpoint body into domain models.

The endpoint returns offerings with the provider embedded in each item:

    { id, name|title, description, category, price, createdAt,
      providers|provider: { id, businessName, providerType, rating,
                            totalOrders, isOnline, distanceKm|distance,
                            users: { profiles: { firstName, lastName, avatar } } } }

Decoding is forgiving: an unrecognised envelope is an empty catalog, and
individual broken items are skipped rather than failing the whole fetch.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from discovery.domain.models import ProviderProfile, ServiceOffering
from discovery.logging import get_logger
from discovery.utils.timestamps import parse_iso_datetime

logger = get_logger(__name__, component="adapter")

DEFAULT_SERVICE_NAME = "Service"
DEFAULT_CATEGORY = "General"
DEFAULT_PROVIDER_NAME = "Provider"


@dataclass
class DecodedCatalog:
    """Result of decoding one catalog response.

    Attributes:
        offerings: Offerings in response order, offering_id unique
        providers: provider_id -> profile, first embedded copy wins
        skipped_count: Items dropped as malformed, orphaned or duplicate
    """

    offerings: List[ServiceOffering] = field(default_factory=list)
    providers: Dict[str, ProviderProfile] = field(default_factory=dict)
    skipped_count: int = 0


def extract_service_items(payload: Any) -> List[Any]:
    """Unwrap the list of offering items from a response body.

    Accepts a bare list, ``{"data": {"services": [...]}}``,
    ``{"services": [...]}`` and ``{"data": [...]}``. Anything else yields an
    empty list.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []

    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("services"), list):
        return data["services"]
    if isinstance(payload.get("services"), list):
        return payload["services"]
    if isinstance(data, list):
        return data
    return []


def get_provider_record(item: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Return the embedded provider object (``providers`` or ``provider``)."""
    provider = item.get("providers") or item.get("provider")
    return provider if isinstance(provider, dict) else None


def resolve_provider_name(provider: Dict[str, Any]) -> str:
    """Profile "First Last", else businessName, else a generic label."""
    profile = _nested(provider, "users", "profiles")
    parts = [profile.get("firstName"), profile.get("lastName")]
    full_name = " ".join(str(part).strip() for part in parts if part).strip()
    if full_name:
        return full_name

    business_name = provider.get("businessName")
    if isinstance(business_name, str) and business_name.strip():
        return business_name.strip()
    return DEFAULT_PROVIDER_NAME


def decode_provider(item: Dict[str, Any], provider: Dict[str, Any]) -> ProviderProfile:
    """Build a ProviderProfile from an embedded provider object.

    Raises:
        ValidationError: If the provider has no usable id
    """
    distance = provider.get("distanceKm")
    if distance is None:
        distance = provider.get("distance")

    return ProviderProfile(
        provider_id=_as_text(provider.get("id")),
        display_name=resolve_provider_name(provider),
        avatar_url=_optional_text(_nested(provider, "users", "profiles").get("avatar")),
        provider_type_raw=_as_text(provider.get("providerType")),
        rating=provider.get("rating") or item.get("rating"),
        completed_job_count=provider.get("totalOrders"),
        is_online=bool(provider.get("isOnline")),
        distance_km=distance,
    )


def decode_offering(item: Dict[str, Any], provider_id: str) -> ServiceOffering:
    """Build a ServiceOffering from one response item.

    Raises:
        ValidationError: If the item has no usable id
    """
    provider = get_provider_record(item) or {}
    name = item.get("name") or item.get("title") or DEFAULT_SERVICE_NAME
    category = item.get("category") or provider.get("category") or DEFAULT_CATEGORY

    return ServiceOffering(
        offering_id=_as_text(item.get("id")),
        provider_id=provider_id,
        name=str(name),
        description=_as_text(item.get("description")),
        category_raw=str(category),
        price=item.get("price"),
        created_at=parse_iso_datetime(item.get("createdAt")),
    )


def decode_catalog(payload: Any) -> DecodedCatalog:
    """Decode a full response body into offerings and providers.

    Items are skipped (and counted) when they are not objects, have no
    provider id, have no offering id, or repeat an offering id already seen.

    Args:
        payload: Parsed JSON body

    Returns:
        DecodedCatalog; empty when the envelope is not recognised
    """
    result = DecodedCatalog()
    seen_ids = set()

    for index, item in enumerate(extract_service_items(payload)):
        if not isinstance(item, dict):
            _log_skip(index, "not_an_object")
            result.skipped_count += 1
            continue

        provider_record = get_provider_record(item)
        if not provider_record or not _as_text(provider_record.get("id")):
            _log_skip(index, "missing_provider")
            result.skipped_count += 1
            continue

        try:
            provider = decode_provider(item, provider_record)
            offering = decode_offering(item, provider.provider_id)
        except ValidationError as e:
            _log_skip(index, "invalid_fields", error_count=e.error_count())
            result.skipped_count += 1
            continue

        if offering.offering_id in seen_ids:
            _log_skip(index, "duplicate_offering_id", offering_id=offering.offering_id)
            result.skipped_count += 1
            continue

        seen_ids.add(offering.offering_id)
        result.offerings.append(offering)
        result.providers.setdefault(provider.provider_id, provider)

    logger.debug(
        "Catalog payload decoded",
        extra={
            "event": "adapter.decode.completed",
            "offering_count": len(result.offerings),
            "provider_count": len(result.providers),
            "skipped_count": result.skipped_count,
        },
    )
    return result


def _nested(obj: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    current: Any = obj
    for key in keys:
        current = current.get(key) if isinstance(current, dict) else None
    return current if isinstance(current, dict) else {}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _log_skip(index: int, reason: str, **fields: Any) -> None:
    logger.warning(
        f"Skipping catalog item {index}: {reason}",
        extra={"event": "adapter.decode.item_skipped", "item_index": index, "reason": reason, **fields},
    )
