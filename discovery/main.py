"""Command line runner for the provider discovery engine."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import asyncio
import signal
import sys
import time
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import ValidationError

from discovery.catalog.models import CatalogSnapshot
from discovery.catalog.store import CatalogStore
from discovery.config.environment import EnvironmentConfig
from discovery.config.exceptions import ConfigurationError
from discovery.config.loader import load_config
from discovery.config.models import AppConfig
from discovery.domain.models import SearchRequest
from discovery.logging import get_logger
from discovery.logging.config import configure_logging
from discovery.matching.engine import ProviderMatcher
from discovery.presentation.console import ConsolePresenter
from discovery.presentation.models import MatchResults, ResultPresenter
from discovery.presentation.status import RefreshStatus
from discovery.push.channel import UPDATED_EVENT, InMemoryPushChannel
from discovery.sync.service import CatalogSynchronizer

logger = get_logger(__name__, component="cli")

DEFAULT_TIME_SLOT = "Any time"


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > environment > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Provider Discovery - match customers with nearby service providers"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml if present, else built-in defaults)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument("--category", required=True, help="Service category, e.g. 'AC' or 'Plumbing'")
    parser.add_argument(
        "--radius",
        type=float,
        default=None,
        help="Search radius in km (default: matching.default_radius_km)",
    )
    parser.add_argument(
        "--provider-type",
        default=None,
        choices=["all", "freelancer", "store"],
        help="Provider type filter (default: matching.default_provider_type)",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Service date as YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--time",
        default=DEFAULT_TIME_SLOT,
        help=f"Time slot label, e.g. '10:00 AM' (default: {DEFAULT_TIME_SLOT})",
    )
    parser.add_argument("--provider", default=None, help="Only match this provider ID")
    parser.add_argument("--service", default=None, help="Only match offerings whose name contains this text")
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep synchronizing and re-print matches on every catalog update until interrupted",
    )
    return parser


def build_search_request(args: argparse.Namespace, app_config: AppConfig) -> SearchRequest:
    """Build a SearchRequest from CLI arguments, filling gaps from matching defaults.

    Raises:
        ValidationError: If the resulting request is invalid
    """
    return SearchRequest(
        category_raw=args.category,
        date=args.date or date.today(),
        time=args.time,
        provider_type_filter=args.provider_type or app_config.matching.default_provider_type,
        radius_km=args.radius if args.radius is not None else app_config.matching.default_radius_km,
        fixed_provider_id=args.provider,
        fixed_service_name_substring=args.service,
    )


def present_snapshot(
    snapshot: CatalogSnapshot,
    request: SearchRequest,
    matcher: ProviderMatcher,
    presenter: ResultPresenter,
) -> None:
    records = matcher.match(snapshot, request)
    presenter.present(MatchResults.build(records, request, snapshot.version))


async def run_once(
    app_config: AppConfig,
    request: SearchRequest,
    presenter: ResultPresenter,
    matcher: Optional[ProviderMatcher] = None,
) -> int:
    """
    Refresh the catalog once, present matches, and return an exit code.

    Returns:
        0 on success, 1 if the catalog could not be fetched
    """
    matcher = matcher or ProviderMatcher()
    store = CatalogStore()
    status = RefreshStatus()
    status.attach(store)

    synchronizer = CatalogSynchronizer.from_config(app_config, store, error_sink=status.report_failure)
    try:
        refreshed = await synchronizer.refresh(trigger="start")
    finally:
        synchronizer.dispose()

    if not refreshed:
        print(status.message, file=sys.stderr)
        return 1

    present_snapshot(store.get_snapshot(), request, matcher, presenter)
    return 0


async def run_watch(
    app_config: AppConfig,
    request: SearchRequest,
    presenter: ResultPresenter,
    matcher: Optional[ProviderMatcher] = None,
) -> int:
    """
    Keep the catalog synchronized and re-present matches on every new snapshot.

    SIGINT/SIGTERM stop the loop. SIGHUP publishes an "updated" event on the
    push channel, forcing an immediate refresh.
    """
    matcher = matcher or ProviderMatcher()
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    store = CatalogStore()
    status = RefreshStatus()
    push_channel = InMemoryPushChannel()

    status.attach(store)
    unsubscribe = store.subscribe(
        lambda snapshot: present_snapshot(snapshot, request, matcher, presenter)
    )

    def signal_handler(signum, frame):
        logger.info(
            f"Received signal {signum}, shutting down",
            extra={"event": "service.signal_received", "signal": signum},
        )
        loop.call_soon_threadsafe(stop_event.set)

    def reload_handler(signum, frame):
        logger.info(
            "Received SIGHUP, requesting catalog refresh",
            extra={"event": "service.reload_requested", "signal": signum},
        )
        push_channel.publish(app_config.sync.push_topic, UPDATED_EVENT)

    previous_handlers = {
        signal.SIGINT: signal.signal(signal.SIGINT, signal_handler),
        signal.SIGTERM: signal.signal(signal.SIGTERM, signal_handler),
    }
    if hasattr(signal, "SIGHUP"):
        previous_handlers[signal.SIGHUP] = signal.signal(signal.SIGHUP, reload_handler)

    synchronizer = CatalogSynchronizer.from_config(
        app_config, store, push_channel=push_channel, error_sink=status.report_failure
    )
    try:
        await synchronizer.start()
        logger.info(
            "Watching catalog. Press Ctrl+C to stop",
            extra={"event": "service.watch_mode.started"},
        )
        await stop_event.wait()
    finally:
        synchronizer.dispose()
        unsubscribe()
        for signum, handler in previous_handlers.items():
            signal.signal(signum, handler)

    logger.info(
        "Synchronizer stats",
        extra={
            "event": "service.sync_stats",
            "fetch_count": synchronizer.stats.fetch_count,
            "success_count": synchronizer.stats.success_count,
            "failure_count": synchronizer.stats.failure_count,
            "coalesced_count": synchronizer.stats.coalesced_count,
        },
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the provider discovery runner.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            "Provider Discovery starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "watch": args.watch,
                "endpoint_url": app_config.catalog.endpoint_url,
            },
        )

        try:
            request = build_search_request(args, app_config)
        except ValidationError as e:
            print(f"Invalid search: {e}", file=sys.stderr)
            return 2

        presenter = ConsolePresenter()
        runner = run_watch if args.watch else run_once
        exit_code = asyncio.run(runner(app_config, request, presenter))

        logger.info(
            "Provider Discovery stopped",
            extra={
                "event": "service.stopping",
                "uptime_seconds": round(time.time() - start_time, 2),
                "exit_code": exit_code,
            },
        )
        return exit_code

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error",
            extra={
                "event": "service.fatal_error",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
