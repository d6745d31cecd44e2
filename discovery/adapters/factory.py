"""Factory function for instantiating the catalog adapter."""

import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

from discovery.config.models import AdvancedConfig, CatalogConfig

from .base import BaseCatalogAdapter
from .exceptions import AdapterConfigurationError
from .http import FileCatalogAdapter, HttpCatalogAdapter

logger = logging.getLogger(__name__)


def get_adapter(catalog_config: CatalogConfig, advanced_config: AdvancedConfig) -> BaseCatalogAdapter:
    """Build the adapter matching the endpoint URL scheme.

    ``http``/``https`` endpoints get an HttpCatalogAdapter; ``file`` URLs get
    a FileCatalogAdapter reading a saved response.

    Raises:
        AdapterConfigurationError: If the scheme is unsupported or settings are invalid

    Example:
        >>> adapter = get_adapter(CatalogConfig(endpoint_url="file:///tmp/services.json"), AdvancedConfig())
        >>> catalog = adapter.fetch_catalog()
    """
    parsed = urlparse(catalog_config.endpoint_url)
    scheme = parsed.scheme.lower()

    logger.debug(
        "Creating catalog adapter",
        extra={"scheme": scheme, "endpoint_url": catalog_config.endpoint_url},
    )

    common = {
        "provider_id": catalog_config.provider_id,
        "timeout": advanced_config.http_request_timeout,
        "user_agent": advanced_config.user_agent,
    }

    if scheme in ("http", "https"):
        return HttpCatalogAdapter(endpoint_url=catalog_config.endpoint_url, **common)
    if scheme == "file":
        return FileCatalogAdapter(path=Path(unquote(parsed.path)), **common)

    raise AdapterConfigurationError(
        f"Unsupported catalog endpoint scheme: '{scheme}'. Supported: http, https, file"
    )
