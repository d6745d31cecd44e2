"""Exceptions raised while fetching and decoding the offerings catalog."""


class CatalogFetchError(Exception):
    """Base exception for catalog fetch failures.

    The synchronizer catches this family, keeps the last good snapshot and
    forwards the error to its error sink.
    """

    pass


class NetworkError(CatalogFetchError):
    """The request was rejected, failed to connect, or returned 4xx/5xx."""

    def __init__(self, message: str, url: str, status_code: int = 0) -> None:
        """Initialize network error.

        Args:
            message: Human-readable error message
            url: URL that failed
            status_code: HTTP status code, 0 when no response was received
        """
        super().__init__(message)
        self.url = url
        self.status_code = status_code

    @property
    def is_retryable(self) -> bool:
        """Connection failures and 5xx responses are worth retrying on the next trigger."""
        return self.status_code == 0 or self.status_code >= 500


class FetchTimeoutError(NetworkError):
    """The request did not complete within the configured timeout."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message, url=url, status_code=0)


class DecodeError(CatalogFetchError):
    """The response body could not be parsed as JSON."""

    pass


class AdapterConfigurationError(CatalogFetchError):
    """Invalid adapter settings (bad timeout, empty user agent, unknown scheme)."""

    pass
