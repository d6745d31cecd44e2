"""Configuration loader for the provider discovery engine."""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppConfig, CatalogConfig
from .validators import check_for_warnings, emit_warnings

DEFAULT_CANDIDATES = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)


def load_config(config_path: Optional[Path] = None) -> tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration from YAML and apply environment overrides.

    File lookup:
    1. Use config_path if given (it must exist)
    2. Try config.yaml, then config/config.yaml
    3. Fall back to built-in defaults when neither exists

    Every section has defaults, so an empty file is valid.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If the file is unreadable, not YAML, or fails validation
    """
    config_file = _find_config_file(config_path)
    config_dict = _read_yaml(config_file) if config_file else {}

    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Configuration root must be a mapping, got {type(config_dict).__name__}",
            suggestions=["Review config.example.yaml for the expected layout"],
        )

    warnings = check_for_warnings(config_dict)
    if warnings:
        emit_warnings(warnings)

    app_config = _validate(config_dict)
    env_config = load_environment_config()

    if env_config.catalog_endpoint_url:
        app_config.catalog = CatalogConfig(
            endpoint_url=env_config.catalog_endpoint_url,
            provider_id=app_config.catalog.provider_id,
        )

    return app_config, env_config


def _read_yaml(config_file: Path) -> dict:
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML configuration: {e}",
            suggestions=[
                "Check YAML syntax in your config file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            suggestions=[f"Ensure {config_file} is readable"],
        ) from e


def _validate(config_dict: dict) -> AppConfig:
    try:
        return AppConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            "Configuration validation failed",
            errors=_format_validation_errors(e),
            suggestions=[
                "Review config.example.yaml for correct format",
                "Verify field types match the expected schema",
            ],
        ) from e


def _format_validation_errors(error: ValidationError) -> List[str]:
    messages = []
    for item in error.errors():
        field_path = " -> ".join(str(loc) for loc in item["loc"])
        error_type = item["type"]

        if error_type == "missing":
            messages.append(f"Missing required field: {field_path}")
        elif error_type in ("string_type", "int_type", "float_type", "bool_type"):
            expected = error_type.replace("_type", "")
            messages.append(
                f"Invalid type for '{field_path}': expected {expected}, got {item.get('input')}"
            )
        else:
            messages.append(f"{field_path}: {item['msg']}")
    return messages


def _find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """
    Resolve the configuration file to read.

    Returns:
        Path to read, or None to use defaults

    Raises:
        ConfigurationError: If an explicit config_path does not exist
    """
    if config_path:
        if not config_path.exists():
            raise ConfigurationError(
                f"Specified configuration file not found: {config_path}",
                suggestions=[
                    f"Ensure {config_path} exists",
                    "Omit --config to use config.yaml or built-in defaults",
                ],
            )
        return config_path

    for candidate in DEFAULT_CANDIDATES:
        if candidate.exists():
            return candidate
    return None
