"""Catalog synchronizer: one coalesced refresh routine fed by every trigger.

Triggers (timer ticks, push invalidations, focus/visibility changes, manual
calls) all go through request_refresh(). At most one fetch is in flight; a
trigger that arrives while a fetch is outstanding only raises a flag, and
when the fetch resolves exactly one more fetch runs. Fetch failures leave the
store on its last good snapshot and are reported to the error sink; they are
never raised to the code that fired the trigger.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional
from uuid import uuid4

from discovery.adapters.base import BaseCatalogAdapter
from discovery.adapters.exceptions import CatalogFetchError, DecodeError, NetworkError
from discovery.adapters.factory import get_adapter
from discovery.adapters.payloads import DecodedCatalog
from discovery.catalog.store import CatalogStore
from discovery.config.models import AppConfig
from discovery.logging import get_logger
from discovery.logging.context import log_context
from discovery.push.channel import SERVICES_TOPIC, UPDATED_EVENT, PushChannel
from discovery.scheduler.service import RefreshScheduler
from discovery.utils.timestamps import utc_now

from .models import ErrorSink, RefreshFailure, SyncStats

logger = get_logger(__name__, component="sync")

Fetcher = Callable[[], Awaitable[DecodedCatalog]]

DEFAULT_INTERVAL_SECONDS = 30


def threaded_fetcher(adapter: BaseCatalogAdapter) -> Fetcher:
    """Wrap a blocking adapter so its fetch runs off the event loop thread."""

    async def fetch() -> DecodedCatalog:
        return await asyncio.to_thread(adapter.fetch_catalog)

    return fetch


class CatalogSynchronizer:
    """
    Keeps a CatalogStore fresh from a periodic pull and a push channel.

    All methods must be called from the event loop that start() ran on,
    except that push events may arrive from any thread.
    """

    def __init__(
        self,
        store: CatalogStore,
        fetch: Fetcher,
        interval_seconds: int = DEFAULT_INTERVAL_SECONDS,
        push_channel: Optional[PushChannel] = None,
        push_topic: str = SERVICES_TOPIC,
        error_sink: Optional[ErrorSink] = None,
        refresh_on_focus: bool = True,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """
        Initialize the synchronizer.

        Args:
            store: Store to keep fresh; this synchronizer is its only writer
            fetch: Coroutine function returning a DecodedCatalog
            interval_seconds: Periodic pull interval
            push_channel: Optional invalidation channel to subscribe to
            push_topic: Topic carrying catalog "updated" events
            error_sink: Called with a RefreshFailure on each failed refresh
            refresh_on_focus: Whether focus/visibility notifications trigger a refresh
            logger_instance: Logger instance (defaults to module logger)
        """
        self.store = store
        self.interval_seconds = interval_seconds
        self.push_channel = push_channel
        self.push_topic = push_topic
        self.error_sink = error_sink
        self.refresh_on_focus = refresh_on_focus
        self.logger = logger_instance or logger
        self.stats = SyncStats()

        self._fetch = fetch
        self._scheduler = RefreshScheduler(self._on_timer, interval_seconds)
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._inflight: Optional[asyncio.Task] = None
        self._pending = False
        self._started = False
        self._disposed = False
        self._unsubscribe_push: Optional[Callable[[], None]] = None
        self._on_dispose: List[Callable[[], None]] = []

    @classmethod
    def from_config(
        cls,
        app_config: AppConfig,
        store: CatalogStore,
        push_channel: Optional[PushChannel] = None,
        error_sink: Optional[ErrorSink] = None,
    ) -> "CatalogSynchronizer":
        """Build a synchronizer whose fetch goes through the configured adapter.

        The adapter's HTTP session is closed on dispose().
        """
        adapter = get_adapter(app_config.catalog, app_config.advanced)
        synchronizer = cls(
            store=store,
            fetch=threaded_fetcher(adapter),
            interval_seconds=app_config.sync.refresh_interval_seconds,
            push_channel=push_channel,
            push_topic=app_config.sync.push_topic,
            error_sink=error_sink,
            refresh_on_focus=app_config.sync.refresh_on_focus,
        )
        synchronizer._on_dispose.append(adapter.close)
        return synchronizer

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def is_refreshing(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def start(self) -> bool:
        """
        Subscribe to the push channel, start the timer, and run the first pull.

        Returns:
            True if the initial refresh succeeded

        Raises:
            RuntimeError: If called after dispose() or twice
        """
        if self._disposed:
            raise RuntimeError("CatalogSynchronizer has been disposed")
        if self._started:
            raise RuntimeError("CatalogSynchronizer already started")

        self._started = True
        self._loop = asyncio.get_running_loop()

        if self.push_channel is not None:
            self._unsubscribe_push = self.push_channel.subscribe(self.push_topic, self._on_push_event)

        self._scheduler.start()

        self.logger.info(
            "Catalog synchronizer started",
            extra={
                "event": "sync.started",
                "interval_seconds": self.interval_seconds,
                "push_topic": self.push_topic if self.push_channel is not None else None,
            },
        )
        return await self.refresh(trigger="start")

    def dispose(self) -> None:
        """
        Tear down: stop the timer, leave the push channel, drop later results.

        A fetch still in flight is allowed to finish but its result is
        discarded. Idempotent.
        """
        if self._disposed:
            return
        self._disposed = True
        self._pending = False

        self._scheduler.shutdown()
        if self._unsubscribe_push is not None:
            self._unsubscribe_push()
            self._unsubscribe_push = None

        for callback in self._on_dispose:
            callback()
        self._on_dispose.clear()

        self.logger.info(
            "Catalog synchronizer disposed",
            extra={
                "event": "sync.disposed",
                "fetch_in_flight": self.is_refreshing,
                "snapshot_version": self.store.version,
            },
        )

    async def __aenter__(self) -> "CatalogSynchronizer":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
        return False

    def request_refresh(self, trigger: str = "manual") -> "asyncio.Future[bool]":
        """
        Fire a refresh trigger.

        Starts a fetch when idle. While a fetch is in flight the trigger is
        coalesced into a single trailing re-fetch, and the in-flight task is
        returned so callers can await the combined result.

        Returns:
            Future resolving to True if the last fetch of the run succeeded
        """
        if self._disposed:
            done = asyncio.get_running_loop().create_future()
            done.set_result(False)
            return done

        if self.is_refreshing:
            if not self._pending:
                self.logger.debug(
                    "Refresh in flight, scheduling one trailing re-fetch",
                    extra={"event": "sync.trigger.coalesced", "trigger": trigger},
                )
            self._pending = True
            self.stats.coalesced_count += 1
            return self._inflight

        self._inflight = asyncio.ensure_future(self._run(trigger))
        return self._inflight

    async def refresh(self, trigger: str = "manual") -> bool:
        """Trigger a refresh and wait for it (and any trailing re-fetch) to finish.

        Cancelling the caller does not cancel the shared refresh task.
        """
        return await asyncio.shield(self.request_refresh(trigger))

    async def wait_idle(self) -> None:
        """Wait until no fetch is in flight."""
        while self.is_refreshing:
            await asyncio.shield(self._inflight)

    def notify_focus_regained(self) -> Optional["asyncio.Future[bool]"]:
        """The owning view regained focus."""
        if not self.refresh_on_focus:
            return None
        return self.request_refresh(trigger="focus")

    def notify_visibility_changed(self, hidden: bool) -> Optional["asyncio.Future[bool]"]:
        """The owning view was hidden or shown; only becoming visible refreshes."""
        if hidden or not self.refresh_on_focus:
            return None
        return self.request_refresh(trigger="visibility")

    async def _on_timer(self) -> None:
        # Fire and forget: the timer must not wait on a slow fetch
        self.request_refresh(trigger="timer")

    def _on_push_event(self, event: str) -> None:
        if event != UPDATED_EVENT:
            self.logger.debug(
                f"Ignoring push event {event}",
                extra={"event": "sync.push.ignored", "push_event": event},
            )
            return

        loop = self._loop
        if self._disposed or loop is None or loop.is_closed():
            return
        # Channels may deliver from their own thread
        loop.call_soon_threadsafe(self._trigger_from_push)

    def _trigger_from_push(self) -> None:
        if not self._disposed:
            self.request_refresh(trigger="push")

    async def _run(self, trigger: str) -> bool:
        succeeded = False
        while True:
            self._pending = False
            succeeded = await self._fetch_once(trigger)
            if not self._pending or self._disposed:
                return succeeded
            trigger = "coalesced"

    async def _fetch_once(self, trigger: str) -> bool:
        refresh_id = uuid4().hex[:12]

        with log_context(refresh_id=refresh_id, trigger=trigger):
            self.stats.fetch_count += 1
            started = time.monotonic()
            self.logger.info(
                "Catalog refresh started",
                extra={"event": "sync.refresh.started", "snapshot_version": self.store.version},
            )

            error: Optional[CatalogFetchError] = None
            catalog: Optional[DecodedCatalog] = None
            try:
                catalog = await self._fetch()
            except CatalogFetchError as e:
                error = e
            except Exception as e:
                error = NetworkError(f"Catalog fetch failed: {e}", url="")
                error.__cause__ = e

            duration_ms = int((time.monotonic() - started) * 1000)

            if self._disposed:
                self.stats.discarded_count += 1
                self.logger.info(
                    "Discarding refresh result after dispose",
                    extra={"event": "sync.refresh.discarded", "duration_ms": duration_ms},
                )
                return False

            if error is None:
                try:
                    snapshot = self.store.replace_snapshot(
                        catalog.offerings, catalog.providers, fetched_at=utc_now()
                    )
                except ValueError as e:
                    error = DecodeError(f"Catalog rejected by store: {e}")
                    error.__cause__ = e
                else:
                    self.stats.success_count += 1
                    self.stats.last_success_at = snapshot.fetched_at
                    self.logger.info(
                        "Catalog refresh succeeded",
                        extra={
                            "event": "sync.refresh.succeeded",
                            "duration_ms": duration_ms,
                            "snapshot_version": snapshot.version,
                            "offering_count": len(snapshot.offerings),
                            "skipped_count": catalog.skipped_count,
                        },
                    )
                    return True

            self._report_failure(error, trigger, refresh_id, duration_ms)
            return False

    def _report_failure(
        self, error: CatalogFetchError, trigger: str, refresh_id: str, duration_ms: int
    ) -> None:
        failure = RefreshFailure(
            error=error,
            trigger=trigger,
            refresh_id=refresh_id,
            occurred_at=utc_now(),
            snapshot_version=self.store.version,
        )
        self.stats.failure_count += 1
        self.stats.last_error = failure.message
        self.stats.last_failure_at = failure.occurred_at

        self.logger.warning(
            f"Catalog refresh failed, keeping snapshot v{failure.snapshot_version}: {error}",
            extra={
                "event": "sync.refresh.failed",
                "error_type": failure.error_type,
                "duration_ms": duration_ms,
                "snapshot_version": failure.snapshot_version,
            },
        )

        if self.error_sink is None:
            return
        try:
            self.error_sink(failure)
        except Exception as e:
            self.logger.error(
                f"Error sink raised: {e}",
                extra={"event": "sync.error_sink.failed", "error_type": type(e).__name__},
                exc_info=True,
            )
