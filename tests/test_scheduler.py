"""Unit tests for the refresh scheduler.

Covers:
- Job registration with max_instances=1 and coalescing
- Deferred vs immediate first tick
- Start/shutdown lifecycle inside an event loop
"""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

from discovery.scheduler import RefreshScheduler
from discovery.scheduler.service import JOB_ID


class TestRefreshScheduler:
    """Test suite for RefreshScheduler."""

    def test_not_running_before_start(self):
        scheduler = RefreshScheduler(AsyncMock(), interval_seconds=30)

        assert scheduler.interval_seconds == 30
        assert not scheduler.is_running()
        assert scheduler.get_next_run_time() is None
        scheduler.shutdown()

    def test_start_registers_job(self):
        async def scenario():
            scheduler = RefreshScheduler(AsyncMock(), interval_seconds=30)
            scheduler.start()
            try:
                job = scheduler.scheduler.get_job(JOB_ID)
                return scheduler.is_running(), job.max_instances, job.coalesce, job.misfire_grace_time
            finally:
                scheduler.shutdown()

        running, max_instances, coalesce, grace = asyncio.run(scenario())

        assert running
        assert max_instances == 1
        assert coalesce is True
        assert grace == 30

    def test_first_tick_after_one_interval(self):
        async def scenario():
            scheduler = RefreshScheduler(AsyncMock(), interval_seconds=60)
            scheduler.start()
            try:
                return scheduler.get_next_run_time()
            finally:
                scheduler.shutdown()

        before = datetime.now(timezone.utc)
        next_run = asyncio.run(scenario())

        assert next_run >= before + timedelta(seconds=59)

    def test_run_immediately_fires_callable(self):
        refresh = AsyncMock()

        async def scenario():
            scheduler = RefreshScheduler(refresh, interval_seconds=300)
            scheduler.start(run_immediately=True)
            try:
                for _ in range(40):
                    if refresh.await_count:
                        break
                    await asyncio.sleep(0.05)
            finally:
                scheduler.shutdown()

        asyncio.run(scenario())

        assert refresh.await_count == 1

    def test_shutdown_stops_scheduler(self):
        async def scenario():
            scheduler = RefreshScheduler(AsyncMock(), interval_seconds=30)
            scheduler.start()
            inner = scheduler.scheduler

            scheduler.shutdown()
            scheduler.shutdown()
            stopped_now = (scheduler.is_running(), scheduler.get_next_run_time(), inner.get_jobs())

            for _ in range(5):
                await asyncio.sleep(0)
            return stopped_now, inner.running

        (running, next_run, jobs), inner_running = asyncio.run(scenario())

        assert running is False
        assert next_run is None
        assert jobs == []
        assert inner_running is False

    def test_restart_after_shutdown(self):
        async def scenario():
            scheduler = RefreshScheduler(AsyncMock(), interval_seconds=30)
            scheduler.start()
            scheduler.shutdown()
            scheduler.start()
            try:
                return scheduler.is_running(), scheduler.get_next_run_time() is not None
            finally:
                scheduler.shutdown()

        assert asyncio.run(scenario()) == (True, True)
