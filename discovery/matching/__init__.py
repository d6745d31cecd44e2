"""Matching engine for ranking providers against search requests."""

from .engine import ProviderMatcher, match
from .models import MatchRecord
from .search import search_catalog

__all__ = ["MatchRecord", "ProviderMatcher", "match", "search_catalog"]
