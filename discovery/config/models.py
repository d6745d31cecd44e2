"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator, model_validator

from .duration import DurationParseError, parse_duration, validate_duration_range

SUPPORTED_SCHEMES = ("http", "https", "file")


class ProviderTypeOption(str, Enum):
    """Provider type filter values."""

    ALL = "all"
    FREELANCER = "freelancer"
    STORE = "store"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class CatalogConfig(BaseModel):
    """Where the offerings catalog is fetched from."""

    endpoint_url: str = Field(
        "http://localhost:3000/api/services",
        min_length=1,
        description="Offerings endpoint (http, https or file URL)",
    )
    provider_id: Optional[str] = Field(
        None, description="Scope the catalog to a single provider"
    )

    @field_validator("endpoint_url")
    @classmethod
    def validate_endpoint_url(cls, v: str) -> str:
        stripped = v.strip()
        scheme = urlparse(stripped).scheme.lower()
        if scheme not in SUPPORTED_SCHEMES:
            raise ValueError(
                f"endpoint_url scheme must be one of {', '.join(SUPPORTED_SCHEMES)}, got: '{scheme or stripped}'"
            )
        return stripped

    @field_validator("provider_id")
    @classmethod
    def blank_provider_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped = v.strip()
        return stripped if stripped else None


class SyncConfig(BaseModel):
    """Catalog synchronizer settings."""

    refresh_interval: str = Field("30s", description="Periodic pull interval")
    push_topic: str = Field("services", min_length=1, description="Push channel topic to subscribe")
    refresh_on_focus: bool = Field(True, description="Refresh when the view regains focus/visibility")

    # Computed field
    refresh_interval_seconds: Optional[int] = None

    @field_validator("refresh_interval")
    @classmethod
    def validate_refresh_interval(cls, v: str) -> str:
        try:
            validate_duration_range(parse_duration(v))
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return v

    @model_validator(mode="after")
    def compute_interval_seconds(self):
        self.refresh_interval_seconds = parse_duration(self.refresh_interval)
        return self


class MatchingConfig(BaseModel):
    """Defaults applied to searches that omit a filter."""

    default_radius_km: float = Field(10.0, gt=0, le=500, description="Default search radius")
    default_provider_type: ProviderTypeOption = Field(
        ProviderTypeOption.ALL, description="Default provider type filter"
    )

    model_config = {"use_enum_values": True}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Advanced runtime settings."""

    http_request_timeout: int = Field(
        30, ge=5, le=300, description="Request timeout for catalog fetches (seconds)"
    )
    user_agent: str = Field(
        "ProviderDiscovery/1.0",
        min_length=1,
        description="User-Agent string for HTTP requests",
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object for the provider discovery engine."""

    catalog: CatalogConfig = Field(default_factory=CatalogConfig, description="Catalog source")
    sync: SyncConfig = Field(default_factory=SyncConfig, description="Synchronizer settings")
    matching: MatchingConfig = Field(default_factory=MatchingConfig, description="Search defaults")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    advanced: AdvancedConfig = Field(
        default_factory=AdvancedConfig, description="Advanced runtime settings"
    )
