"""Logging configuration for the provider discovery engine."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Literal

from .context import get_log_context

LogFormat = Literal["json", "key-value"]

SERVICE_NAME = "provider-discovery"

# LogRecord attributes that are plumbing rather than event data
RECORD_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName", "levelname",
    "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
    "processName", "relativeCreated", "thread", "threadName", "asctime",
    "exc_info", "exc_text", "stack_info", "taskName",
})


def _event_fields(record: logging.LogRecord, skip: frozenset) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in skip and not key.startswith("_")
    }


class ContextualFilter(logging.Filter):
    """Stamp records with service/environment and the active log context.

    Fields already present on the record (passed via ``extra``) win over
    context fields of the same name.
    """

    def __init__(self, service: str = SERVICE_NAME, environment: str = "local"):
        super().__init__()
        self.service = service
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        record.environment = self.environment

        for key, value in get_log_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)

        return True


class JSONFormatter(logging.Formatter):
    """Single-line JSON output with stable field names."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        for key, value in _event_fields(record, RECORD_ATTRS).items():
            if isinstance(value, datetime):
                log_obj[key] = value.isoformat()
            elif isinstance(value, (str, int, float, bool, list, dict, type(None))):
                log_obj[key] = value
            else:
                log_obj[key] = str(value)

        if record.exc_info:
            log_obj["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, ensure_ascii=False)

    @staticmethod
    def _format_timestamp(created: float) -> str:
        """ISO-8601 UTC with millisecond precision and a 'Z' suffix."""
        dt = datetime.fromtimestamp(created, tz=timezone.utc)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class KeyValueFormatter(logging.Formatter):
    """Human-readable output: ``<base format> key1=value1 key2=value2``."""

    SKIP_ATTRS = RECORD_ATTRS | {"service", "environment"}

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)

        extras = []
        for key, value in sorted(_event_fields(record, self.SKIP_ATTRS).items()):
            extras.append(f"{key}={self._format_value(value)}")

        if extras:
            return f"{base} {' '.join(extras)}"
        return base

    @staticmethod
    def _format_value(value: Any) -> str:
        if isinstance(value, str):
            if " " in value or "=" in value or "," in value:
                return f'"{value}"'
            return value
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, bool):
            return str(value).lower()
        if value is None:
            return "null"
        return str(value)


def configure_logging(
    level: str = "INFO",
    format_type: LogFormat = "key-value",
    environment: str = "local",
) -> None:
    """
    Configure the root logger for the discovery engine.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: 'json' for JSON lines or 'key-value' for human-readable output
        environment: Environment label (production, staging, local)

    Raises:
        ValueError: If level or format_type is invalid
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    if format_type not in ("json", "key-value"):
        raise ValueError(f"Invalid log format: {format_type}. Must be 'json' or 'key-value'")

    handler = logging.StreamHandler(sys.stdout)
    if format_type == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            KeyValueFormatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    handler.addFilter(ContextualFilter(service=SERVICE_NAME, environment=environment))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={
            "event": "logging.configured",
            "component": "logging",
            "log_level": level.upper(),
            "log_format": format_type,
        },
    )
