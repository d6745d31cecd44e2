"""Configuration management module for the provider discovery engine."""

from .duration import DurationParseError, parse_duration, validate_duration_range
from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config
from .models import (
    AdvancedConfig,
    AppConfig,
    CatalogConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    MatchingConfig,
    ProviderTypeOption,
    SyncConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "load_environment_config",
    "parse_duration",
    "validate_duration_range",
    # Configuration models
    "AppConfig",
    "CatalogConfig",
    "SyncConfig",
    "MatchingConfig",
    "LoggingConfig",
    "AdvancedConfig",
    "EnvironmentConfig",
    # Enums
    "ProviderTypeOption",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
    "DurationParseError",
]
