"""Catalog adapters: fetching and decoding the offerings endpoint.

Use the factory function to instantiate an adapter:
    from discovery.adapters import get_adapter
    adapter = get_adapter(app_config.catalog, app_config.advanced)
    catalog = adapter.fetch_catalog()

Exception handling:
    from discovery.adapters.exceptions import CatalogFetchError, NetworkError, DecodeError
"""

from .base import BaseCatalogAdapter
from .exceptions import (
    AdapterConfigurationError,
    CatalogFetchError,
    DecodeError,
    FetchTimeoutError,
    NetworkError,
)
from .factory import get_adapter
from .http import FileCatalogAdapter, HttpCatalogAdapter
from .payloads import DecodedCatalog, decode_catalog, extract_service_items

__all__ = [
    # Base and factory
    "BaseCatalogAdapter",
    "get_adapter",
    # Adapters
    "HttpCatalogAdapter",
    "FileCatalogAdapter",
    # Decoding
    "DecodedCatalog",
    "decode_catalog",
    "extract_service_items",
    # Exceptions
    "CatalogFetchError",
    "NetworkError",
    "FetchTimeoutError",
    "DecodeError",
    "AdapterConfigurationError",
]
