"""Publish/subscribe channel used for catalog invalidation events.

Providers publishing or editing an offering cause the backend to emit an
``updated`` event on the ``services`` topic. The event carries no payload;
receivers are expected to re-fetch the catalog.
"""

import threading
from typing import Callable, Dict, List, Protocol

from discovery.logging import get_logger

logger = get_logger(__name__, component="push")

SERVICES_TOPIC = "services"
UPDATED_EVENT = "updated"

PushHandler = Callable[[str], None]


class PushChannel(Protocol):
    """Minimal contract for a real-time invalidation channel."""

    def subscribe(self, topic: str, handler: PushHandler) -> Callable[[], None]:
        """Register ``handler(event_name)`` for a topic; returns an unsubscribe function."""
        ...


class InMemoryPushChannel:
    """In-process PushChannel, safe to use from several threads.

    Handlers run synchronously inside publish(), on the publishing thread, in
    subscription order. The handler list is copied under the lock, so
    handlers may subscribe or unsubscribe while being called. A failing
    handler is logged and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[PushHandler]] = {}
        self._lock = threading.Lock()

    def subscribe(self, topic: str, handler: PushHandler) -> Callable[[], None]:
        with self._lock:
            self._handlers.setdefault(topic, []).append(handler)
        logger.debug(
            f"Subscribed to push topic {topic}",
            extra={"event": "push.subscribed", "topic": topic},
        )

        def unsubscribe() -> None:
            with self._lock:
                handlers = self._handlers.get(topic, [])
                if handler not in handlers:
                    return
                handlers.remove(handler)
            logger.debug(
                f"Unsubscribed from push topic {topic}",
                extra={"event": "push.unsubscribed", "topic": topic},
            )

        return unsubscribe

    def publish(self, topic: str, event: str = UPDATED_EVENT) -> int:
        """Deliver an event to every handler of a topic.

        Returns:
            Number of handlers that were called
        """
        with self._lock:
            handlers = list(self._handlers.get(topic, []))

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Push handler failed on {topic}/{event}: {e}",
                    extra={"event": "push.handler.failed", "topic": topic, "push_event": event},
                    exc_info=True,
                )
        return len(handlers)

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._handlers.get(topic, []))
