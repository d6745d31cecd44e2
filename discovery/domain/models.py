"""Core domain models for offerings, providers and search requests.

This module defines the data structures used throughout the engine:
- ServiceOffering: a single listing published by a provider
- ProviderProfile: the provider attributes that matter for matching
- SearchRequest: a customer's match criteria

Offerings point at their provider through ``provider_id``; neither model
holds a reference to the other.
"""

from datetime import date as CalendarDate
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from discovery.utils.numbers import coerce_non_negative
from discovery.utils.timestamps import ensure_utc

ProviderTypeFilter = Literal["all", "freelancer", "store"]

MAX_RATING = 5.0


class ServiceOffering(BaseModel):
    """A service listing as published by a provider.

    Immutable once decoded from a catalog fetch. ``offering_id`` is unique
    within a catalog snapshot.
    """

    offering_id: str = Field(..., min_length=1, description="Globally unique offering ID")
    provider_id: str = Field(..., min_length=1, description="Owning provider ID")
    name: str = Field("Service", description="Offering name as published")
    description: str = Field("", description="Free-text description")
    category_raw: str = Field("General", description="Category label as published")
    price: float = Field(0.0, ge=0, description="Price, non-negative")
    created_at: Optional[datetime] = Field(None, description="When the offering was created (UTC)")

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v) -> float:
        """Malformed or negative prices become 0."""
        return coerce_non_negative(v)

    @field_validator("created_at")
    @classmethod
    def ensure_created_at_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    model_config = {"frozen": True, "json_schema_extra": {"example": {
        "offering_id": "svc-101",
        "provider_id": "prov-7",
        "name": "AC Service",
        "description": "Split and window AC servicing",
        "category_raw": "AC",
        "price": 500,
        "created_at": "2025-11-01T12:00:00Z",
    }}}


class ProviderProfile(BaseModel):
    """Provider attributes relevant to matching and display.

    ``rating`` is 0 for unrated providers. ``distance_km`` of 0 means the
    distance is unknown; such providers pass every radius filter.
    """

    provider_id: str = Field(..., min_length=1, description="Provider ID")
    display_name: str = Field("Provider", description="Name shown to customers")
    avatar_url: Optional[str] = Field(None, description="Avatar image URL")
    provider_type_raw: str = Field("", description="Provider type as published (store/shop/...)")
    rating: float = Field(0.0, ge=0, le=MAX_RATING, description="Average rating, 0 if unrated")
    completed_job_count: int = Field(0, ge=0, description="Completed orders")
    is_online: bool = Field(False, description="Whether the provider is online now")
    distance_km: float = Field(0.0, ge=0, description="Distance to the customer, 0 if unknown")

    @field_validator("rating", mode="before")
    @classmethod
    def clamp_rating(cls, v) -> float:
        return min(coerce_non_negative(v), MAX_RATING)

    @field_validator("completed_job_count", mode="before")
    @classmethod
    def coerce_job_count(cls, v) -> int:
        return int(coerce_non_negative(v))

    @field_validator("distance_km", mode="before")
    @classmethod
    def coerce_distance(cls, v) -> float:
        return coerce_non_negative(v)

    @field_validator("avatar_url")
    @classmethod
    def blank_avatar_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped = v.strip()
        return stripped if stripped else None

    model_config = {"frozen": True, "json_schema_extra": {"example": {
        "provider_id": "prov-7",
        "display_name": "Ravi Kumar",
        "avatar_url": None,
        "provider_type_raw": "freelancer",
        "rating": 4.8,
        "completed_job_count": 120,
        "is_online": True,
        "distance_km": 3.2,
    }}}


class SearchRequest(BaseModel):
    """Customer-supplied match criteria.

    Validation happens here, at construction, so that matching itself never
    has to fail. Blank optional filters are treated as unset.
    """

    category_raw: str = Field(..., description="Category as chosen by the customer")
    date: CalendarDate = Field(..., description="Requested service date")
    time: str = Field(..., description="Requested time slot, e.g. '10:00 AM'")
    provider_type_filter: ProviderTypeFilter = Field("all", description="all, freelancer or store")
    radius_km: float = Field(10.0, gt=0, description="Search radius in kilometres")
    fixed_provider_id: Optional[str] = Field(None, description="Restrict to one provider")
    fixed_service_name_substring: Optional[str] = Field(
        None, description="Restrict to offerings whose name contains this text"
    )

    @field_validator("category_raw")
    @classmethod
    def strip_category(cls, v: str) -> str:
        return v.strip()

    @field_validator("time")
    @classmethod
    def require_time_slot(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("time cannot be empty or whitespace-only")
        return stripped

    @field_validator("provider_type_filter", mode="before")
    @classmethod
    def lower_provider_type_filter(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("fixed_provider_id", "fixed_service_name_substring")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped = v.strip()
        return stripped if stripped else None

    model_config = {"frozen": True, "json_schema_extra": {"example": {
        "category_raw": "AC",
        "date": "2025-11-20",
        "time": "10:00 AM",
        "provider_type_filter": "all",
        "radius_km": 10,
        "fixed_provider_id": None,
        "fixed_service_name_substring": None,
    }}}
