"""Environment variable loading and validation."""

import os
from typing import Optional
from urllib.parse import urlparse

from .exceptions import ConfigurationError
from .models import SUPPORTED_SCHEMES

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        catalog_endpoint_url: Optional[str] = None,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        self.catalog_endpoint_url = catalog_endpoint_url
        self.log_level = log_level.upper() if log_level else None
        self.environment = environment or "local"


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate optional environment overrides.

    Recognised variables:
    - CATALOG_ENDPOINT_URL: overrides catalog.endpoint_url
    - LOG_LEVEL: overrides logging.level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: environment label for logs (default: local)

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    endpoint_url = (os.getenv("CATALOG_ENDPOINT_URL") or "").strip() or None
    log_level = (os.getenv("LOG_LEVEL") or "").strip() or None
    environment = (os.getenv("ENVIRONMENT") or "").strip() or None

    if endpoint_url and urlparse(endpoint_url).scheme.lower() not in SUPPORTED_SCHEMES:
        errors.append(
            f"Invalid CATALOG_ENDPOINT_URL: '{endpoint_url}'. "
            f"Scheme must be one of: {', '.join(SUPPORTED_SCHEMES)}"
        )

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Check the values in your .env file",
                "Unset variables you do not need to override",
            ],
        )

    return EnvironmentConfig(
        catalog_endpoint_url=endpoint_url,
        log_level=log_level,
        environment=environment,
    )
