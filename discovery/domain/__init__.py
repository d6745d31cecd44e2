"""Domain models for the provider discovery engine."""

from .models import ProviderProfile, ProviderTypeFilter, SearchRequest, ServiceOffering

__all__ = ["ServiceOffering", "ProviderProfile", "SearchRequest", "ProviderTypeFilter"]
