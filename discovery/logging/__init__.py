"""Structured logging helpers for the discovery engine."""

import logging
from typing import Optional


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges a default component into each call's extra."""

    def process(self, msg, kwargs):
        """Merge adapter extra with the call's extra; call values win."""
        extra = kwargs.get("extra", {})
        kwargs["extra"] = {**self.extra, **extra}
        return msg, kwargs


def get_logger(name: str, component: Optional[str] = None):
    """Get a logger, optionally tagging every record with a component field.

    Args:
        name: Logger name (typically __name__)
        component: Optional component identifier, e.g. "sync" or "catalog"

    Returns:
        Logger or ComponentLoggerAdapter instance

    Example:
        >>> logger = get_logger(__name__, component="sync")
        >>> logger.info("Refresh started", extra={"event": "sync.refresh.started"})
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger
