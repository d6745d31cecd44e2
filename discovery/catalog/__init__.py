"""Catalog store: the single shared, atomically replaced catalog snapshot."""

from .models import CatalogSnapshot
from .store import CatalogStore, SnapshotListener

__all__ = ["CatalogStore", "CatalogSnapshot", "SnapshotListener"]
