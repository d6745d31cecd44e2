"""Normalization layer: canonical keys for category, provider type and text.

This module provides:
- normalize_category_key: category label -> comparison key (AC/WM aware)
- normalize_provider_type: raw provider type -> "store" | "freelancer"
- normalize_search_text: text -> alphanumeric lower-case for containment checks
- available_categories / resolve_category: category picker helpers
"""

from .service import (
    ACWM_KEY,
    DEFAULT_CATEGORY_OPTIONS,
    FREELANCER,
    STORE,
    available_categories,
    normalize_category_key,
    normalize_provider_type,
    normalize_search_text,
    resolve_category,
)

__all__ = [
    "normalize_category_key",
    "normalize_provider_type",
    "normalize_search_text",
    "available_categories",
    "resolve_category",
    "DEFAULT_CATEGORY_OPTIONS",
    "ACWM_KEY",
    "STORE",
    "FREELANCER",
]
