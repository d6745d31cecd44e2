"""Context propagation for structured logging.

Fields pushed here (refresh_id, trigger, snapshot_version, ...) are copied
onto every log record emitted inside the scope. Backed by contextvars, so each
asyncio task sees the context that was active when it was created.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("discovery_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the active logging context."""
    return LogContextVar.get().copy()


def push_log_context(**fields) -> Token:
    """Merge fields into the active context.

    Returns:
        Token to hand back to pop_log_context()

    Example:
        >>> token = push_log_context(refresh_id="a1b2", trigger="push")
        >>> pop_log_context(token)
    """
    return LogContextVar.set({**LogContextVar.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the context that was active before push_log_context()."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every context field. Mostly useful in tests."""
    LogContextVar.set({})


class log_context:
    """Context manager that scopes logging fields to a block.

    Example:
        >>> with log_context(refresh_id="a1b2"):
        ...     logger.info("Fetching catalog")
    """

    def __init__(self, **fields):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
        return False
