"""Interval timer that drives periodic catalog pulls."""

import asyncio
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from discovery.logging import get_logger

logger = get_logger(__name__, component="scheduler")

JOB_ID = "catalog-refresh"


class RefreshScheduler:
    """
    Wraps APScheduler's AsyncIOScheduler to fire a coroutine at a fixed interval.

    Jobs run as tasks on the event loop, never in worker threads, so the
    callable may touch loop-owned state directly.
    """

    def __init__(
        self,
        refresh_callable: Callable[[], Awaitable[None]],
        interval_seconds: int,
        event_loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Initialize the scheduler.

        Args:
            refresh_callable: Coroutine function called on each tick
            interval_seconds: Interval between ticks in seconds
            event_loop: Loop to schedule on (defaults to the loop running start())
        """
        self.refresh_callable = refresh_callable
        self.interval_seconds = interval_seconds
        self.event_loop = event_loop
        self.scheduler: Optional[AsyncIOScheduler] = None

    def start(self, run_immediately: bool = False) -> None:
        """
        Register the refresh job and start ticking.

        Must be called from within the event loop unless one was passed in.

        Args:
            run_immediately: Fire the first tick now instead of after one interval
        """
        self.scheduler = AsyncIOScheduler(
            job_defaults={
                "max_instances": 1,  # a slow tick never overlaps the next one
                "coalesce": True,  # missed ticks collapse into one
                "misfire_grace_time": self.interval_seconds,
            },
            timezone=timezone.utc,
            event_loop=self.event_loop or asyncio.get_running_loop(),
        )

        job_kwargs = {}
        if run_immediately:
            job_kwargs["next_run_time"] = datetime.now(timezone.utc)

        self.scheduler.add_job(
            func=self.refresh_callable,
            trigger=IntervalTrigger(seconds=self.interval_seconds, timezone=timezone.utc),
            id=JOB_ID,
            name="Catalog refresh",
            replace_existing=True,
            **job_kwargs,
        )
        self.scheduler.start()

        next_run = self.get_next_run_time()
        logger.info(
            f"Scheduler started with interval: {self.interval_seconds} seconds",
            extra={
                "event": "scheduler.started",
                "interval_seconds": self.interval_seconds,
                "next_run_time": next_run.isoformat() if next_run else None,
            },
        )

    def shutdown(self) -> None:
        """Stop ticking. Safe to call more than once or before start().

        The scheduler reference is dropped immediately; newer APScheduler
        releases finish AsyncIOScheduler.shutdown() on a later loop iteration.
        """
        scheduler, self.scheduler = self.scheduler, None
        if scheduler is None or not scheduler.running:
            return

        if scheduler.get_job(JOB_ID) is not None:
            scheduler.remove_job(JOB_ID)
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped", extra={"event": "scheduler.stopped"})

    def is_running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running

    def get_next_run_time(self) -> Optional[datetime]:
        """Next scheduled tick, or None if the job is not registered."""
        if self.scheduler is None:
            return None
        job = self.scheduler.get_job(JOB_ID)
        return job.next_run_time if job else None
