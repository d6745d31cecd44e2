"""Push invalidation channel contract and in-process implementation."""

from .channel import (
    SERVICES_TOPIC,
    UPDATED_EVENT,
    InMemoryPushChannel,
    PushChannel,
    PushHandler,
)

__all__ = [
    "PushChannel",
    "PushHandler",
    "InMemoryPushChannel",
    "SERVICES_TOPIC",
    "UPDATED_EVENT",
]
