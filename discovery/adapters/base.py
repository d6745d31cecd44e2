"""Base adapter with the shared HTTP request and error mapping.

Adapters are synchronous (requests); the synchronizer runs them off the
event loop thread with ``asyncio.to_thread``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from discovery.logging import get_logger

from .exceptions import (
    AdapterConfigurationError,
    DecodeError,
    FetchTimeoutError,
    NetworkError,
)
from .payloads import DecodedCatalog

logger = get_logger(__name__, component="adapter")

DEFAULT_USER_AGENT = "ProviderDiscovery/1.0"


class BaseCatalogAdapter(ABC):
    """Base class for catalog sources.

    Subclasses implement fetch_catalog(). Failures surface as
    NetworkError/FetchTimeoutError (transport) or DecodeError (body).

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
    """

    def __init__(self, timeout: int = 30, user_agent: str = DEFAULT_USER_AGENT) -> None:
        """Initialize adapter with configuration.

        Args:
            timeout: HTTP request timeout in seconds (5-300)
            user_agent: User-Agent header for requests

        Raises:
            AdapterConfigurationError: If timeout is out of range or user_agent is empty
        """
        if not 5 <= timeout <= 300:
            raise AdapterConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise AdapterConfigurationError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()

        self._session = requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent, "Accept": "application/json"})

    @abstractmethod
    def fetch_catalog(self) -> DecodedCatalog:
        """Fetch and decode the full offerings catalog.

        Returns:
            DecodedCatalog (possibly empty)

        Raises:
            NetworkError: Transport failure or HTTP 4xx/5xx (FetchTimeoutError on timeout)
            DecodeError: Body could not be parsed
        """

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self._session.close()

    def _make_request(
        self,
        url: str,
        params: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """GET a URL and return the parsed JSON body.

        Args:
            url: URL to request
            params: Query parameters
            headers: Extra headers merged over the session defaults

        Returns:
            Parsed JSON (any JSON type)

        Raises:
            NetworkError: On HTTP status >= 400 or connection failure
            FetchTimeoutError: On request timeout
            DecodeError: On a body that is not valid JSON
        """
        logger.debug(
            f"HTTP GET request to {url}",
            extra={
                "event": "adapter.fetch.request",
                "url": url,
                "timeout": self.timeout,
            },
        )

        try:
            response = self._session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={
                    "event": "adapter.fetch.retryable_error",
                    "error_type": "Timeout",
                    "url": url,
                    "timeout": self.timeout,
                },
            )
            raise FetchTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={
                    "event": "adapter.fetch.error",
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise NetworkError(f"Request to {url} failed: {e}", url=url) from e

        if response.status_code >= 400:
            is_retryable = response.status_code >= 500
            logger.log(
                logging.WARNING if is_retryable else logging.ERROR,
                f"HTTP {response.status_code} error from {url}",
                extra={
                    "event": "adapter.fetch.retryable_error" if is_retryable else "adapter.fetch.error",
                    "status_code": response.status_code,
                    "url": url,
                },
            )
            raise NetworkError(
                f"HTTP {response.status_code}: {response.reason}",
                url=url,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            # requests' JSONDecodeError subclasses ValueError
            logger.error(
                f"Failed to parse JSON response from {url}",
                extra={
                    "event": "adapter.fetch.error",
                    "error_type": "JSONDecodeError",
                    "url": url,
                },
            )
            raise DecodeError(f"Failed to parse JSON response from {url}: {e}") from e

        logger.debug(
            "HTTP request succeeded",
            extra={
                "event": "adapter.fetch.succeeded",
                "status_code": response.status_code,
                "url": url,
            },
        )
        return data
