"""Data models for the matching engine."""

from dataclasses import dataclass
from typing import Optional

from discovery.domain.models import ProviderProfile, ServiceOffering
from discovery.normalization.service import normalize_category_key, normalize_provider_type


@dataclass(frozen=True)
class MatchRecord:
    """One provider in a result set, represented by its cheapest qualifying offering.

    Display fields are copied from the ProviderProfile so presenters never
    need the snapshot.

    Attributes:
        provider_id: Provider this record represents (unique within a result set)
        provider_name: Provider display name
        provider_avatar: Avatar URL, if any
        provider_type: Normalized provider type ("store" or "freelancer")
        rating: Average rating, 0 if unrated
        completed_job_count: Completed orders
        is_online: Whether the provider is online now
        distance_km: Distance to the customer, 0 if unknown
        offering: The cheapest qualifying offering
        category_key: Normalized category key of the offering
        price: Price of the offering
    """

    provider_id: str
    provider_name: str
    provider_avatar: Optional[str]
    provider_type: str
    rating: float
    completed_job_count: int
    is_online: bool
    distance_km: float
    offering: ServiceOffering
    category_key: str
    price: float

    @classmethod
    def from_pair(cls, offering: ServiceOffering, provider: ProviderProfile) -> "MatchRecord":
        return cls(
            provider_id=provider.provider_id,
            provider_name=provider.display_name,
            provider_avatar=provider.avatar_url,
            provider_type=normalize_provider_type(provider.provider_type_raw),
            rating=provider.rating,
            completed_job_count=provider.completed_job_count,
            is_online=provider.is_online,
            distance_km=provider.distance_km,
            offering=offering,
            category_key=normalize_category_key(offering.category_raw),
            price=offering.price,
        )

    @property
    def offering_id(self) -> str:
        return self.offering.offering_id

    @property
    def service_name(self) -> str:
        return self.offering.name

    @property
    def is_rated(self) -> bool:
        return self.rating > 0

    @property
    def has_known_distance(self) -> bool:
        return self.distance_km > 0
