"""Catalog adapters for the offerings endpoint and local JSON dumps."""

import json
from pathlib import Path
from typing import Optional

from discovery.logging import get_logger

from .base import DEFAULT_USER_AGENT, BaseCatalogAdapter
from .exceptions import DecodeError, NetworkError
from .payloads import DecodedCatalog, decode_catalog

logger = get_logger(__name__, component="adapter")


class HttpCatalogAdapter(BaseCatalogAdapter):
    """Fetches ``GET <endpoint>`` and decodes the offerings list.

    When ``provider_id`` is set the request carries ``?provider=<id>`` so the
    server returns only that provider's offerings.
    """

    def __init__(
        self,
        endpoint_url: str,
        provider_id: Optional[str] = None,
        timeout: int = 30,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent)
        self.endpoint_url = endpoint_url
        self.provider_id = provider_id

    def fetch_catalog(self) -> DecodedCatalog:
        params = {"provider": self.provider_id} if self.provider_id else None
        payload = self._make_request(self.endpoint_url, params=params)
        catalog = decode_catalog(payload)

        logger.info(
            f"Fetched {len(catalog.offerings)} offerings from {self.endpoint_url}",
            extra={
                "event": "adapter.catalog.fetched",
                "url": self.endpoint_url,
                "offering_count": len(catalog.offerings),
                "provider_count": len(catalog.providers),
                "skipped_count": catalog.skipped_count,
            },
        )
        return catalog


class FileCatalogAdapter(BaseCatalogAdapter):
    """Reads a saved offerings response from disk.

    Used for offline runs and demos (``file://`` endpoints). A missing file
    is reported as a NetworkError so the synchronizer treats it like an
    unreachable server.
    """

    def __init__(self, path: Path, provider_id: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.path = Path(path)
        self.provider_id = provider_id

    def fetch_catalog(self) -> DecodedCatalog:
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise NetworkError(f"Cannot read catalog file {self.path}: {e}", url=str(self.path)) from e

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodeError(f"Catalog file {self.path} is not valid JSON: {e}") from e

        catalog = decode_catalog(payload)
        if self.provider_id:
            catalog.offerings = [o for o in catalog.offerings if o.provider_id == self.provider_id]
            catalog.providers = {
                pid: p for pid, p in catalog.providers.items() if pid == self.provider_id
            }
        return catalog
