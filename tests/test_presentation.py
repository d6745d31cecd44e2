"""Unit tests for result presentation helpers."""

import dataclasses
import io
import logging
from datetime import datetime, timezone

import pytest

from discovery.adapters.exceptions import NetworkError
from discovery.catalog.store import CatalogStore
from discovery.matching import match
from discovery.presentation import (
    ConsolePresenter,
    MatchResults,
    PresentationError,
    RefreshStatus,
    build_display_payload,
    format_distance,
    format_price,
    format_rating,
)
from discovery.sync.models import RefreshFailure
from tests.helpers import make_offering, make_provider, make_request, make_snapshot


@pytest.fixture
def snapshot():
    return make_snapshot(
        offerings=[
            make_offering("o1", "P1", name="AC Service", price=500, description="Split units"),
            make_offering("o2", "P2", name="AC Repair", price=1499.5, description=""),
        ],
        providers=[
            make_provider("P1", display_name="Ravi Kumar", rating=4.25, completed_job_count=120, distance_km=3.24),
            make_provider("P2", display_name="Sharma Appliances", provider_type_raw="shop", rating=0, is_online=False),
        ],
        version=4,
    )


def _failure(message="HTTP 503: Service Unavailable"):
    return RefreshFailure(
        error=NetworkError(message, url="https://api/services", status_code=503),
        trigger="timer",
        refresh_id="abc123",
        occurred_at=datetime(2025, 11, 20, 9, 0, tzinfo=timezone.utc),
        snapshot_version=3,
    )


class TestFormatting:
    """Tests for display text helpers."""

    @pytest.mark.parametrize("rating,expected", [(0, "New"), (4.25, "4.2"), (4.26, "4.3"), (5, "5.0")])
    def test_rating(self, rating, expected):
        assert format_rating(rating) == expected

    @pytest.mark.parametrize(
        "distance,radius,expected",
        [(3.24, 10, "3.2 km"), (0, 10, "Within 10 km"), (0, 7.5, "Within 7.5 km"), (12, 50, "12.0 km")],
    )
    def test_distance(self, distance, radius, expected):
        assert format_distance(distance, radius) == expected

    @pytest.mark.parametrize("price,expected", [(500, "Rs 500"), (12500.0, "Rs 12,500"), (1499.5, "Rs 1,499.50"), (0, "Rs 0")])
    def test_price(self, price, expected):
        assert format_price(price) == expected


class TestDisplayPayload:
    """Tests for build_display_payload."""

    def test_payload_for_rated_provider_with_distance(self, snapshot):
        record = match(snapshot, make_request(radius_km=10))[0]

        payload = build_display_payload(record, radius_km=10)

        assert payload["provider_id"] == "P1"
        assert payload["provider_name"] == "Ravi Kumar"
        assert payload["provider_type_label"] == "Freelancer"
        assert payload["rating_text"] == "4.2"
        assert payload["jobs_text"] == "120 jobs"
        assert payload["distance_text"] == "3.2 km"
        assert payload["service_name"] == "AC Service"
        assert payload["service_description"] == "Split units"
        assert payload["price_text"] == "Rs 500"
        assert payload["is_online"] is True

    def test_payload_for_new_store_with_unknown_distance(self, snapshot):
        record = match(snapshot, make_request(radius_km=10))[1]

        payload = build_display_payload(record, radius_km=10)

        assert payload["provider_type"] == "store"
        assert payload["provider_type_label"] == "Store"
        assert payload["rating_text"] == "New"
        assert payload["distance_text"] == "Within 10 km"
        assert payload["service_description"] == "No description provided."
        assert payload["price_text"] == "Rs 1,499.50"
        assert payload["is_online"] is False


class TestMatchResults:
    """Tests for MatchResults."""

    def test_build(self, snapshot):
        request = make_request()
        results = MatchResults.build(match(snapshot, request), request, snapshot.version)

        assert isinstance(results.records, tuple)
        assert results.count == len(results) == 2
        assert results.best.provider_id == "P1"
        assert results.snapshot_version == 4
        assert [r.provider_id for r in results] == ["P1", "P2"]

    def test_empty(self):
        results = MatchResults.build([], make_request(), 0)

        assert results.is_empty
        assert results.best is None

    def test_immutable(self, snapshot):
        results = MatchResults.build(match(snapshot, make_request()), make_request(), 1)

        with pytest.raises(dataclasses.FrozenInstanceError):
            results.snapshot_version = 2


class TestConsolePresenter:
    """Tests for ConsolePresenter."""

    def test_lines_in_rank_order(self, snapshot):
        request = make_request("AC", time="10:00 AM", radius_km=10)
        stream = io.StringIO()

        ConsolePresenter(stream).present(MatchResults.build(match(snapshot, request), request, snapshot.version))

        lines = stream.getvalue().splitlines()
        assert lines[0] == "2 provider(s) for 'AC' on 2025-11-20 at 10:00 AM (catalog v4)"
        assert lines[1].startswith("  1. Ravi Kumar (Freelancer) [online] | 4.2 | 120 jobs | 3.2 km")
        assert lines[2].startswith("  2. Sharma Appliances (Store) | New | 0 jobs | Within 10 km")
        assert lines[2].endswith("AC Repair Rs 1,499.50")

    def test_empty_results(self):
        stream = io.StringIO()
        ConsolePresenter(stream).present(MatchResults.build([], make_request("Plumbing"), 2))

        assert "No providers match these filters." in stream.getvalue()

    def test_missing_template_raises_presentation_error(self, caplog):
        presenter = ConsolePresenter(io.StringIO(), template_name="missing.txt.j2")

        with caplog.at_level(logging.ERROR, logger="discovery.presentation.console"):
            with pytest.raises(PresentationError, match="Template rendering failed"):
                presenter.render(MatchResults.build([], make_request(), 1))

        failed = [r for r in caplog.records if getattr(r, "event", None) == "presentation.render.failed"]
        assert len(failed) == 1
        assert failed[0].component == "presentation"
        assert failed[0].template == "missing.txt.j2"


class TestRefreshStatus:
    """Tests for the refresh status error sink."""

    def test_starts_fresh(self):
        status = RefreshStatus()

        assert not status.could_not_refresh
        assert status.message is None

    def test_failure_sets_indicator(self):
        status = RefreshStatus()
        status.report_failure(_failure())
        status.report_failure(_failure("timed out"))

        assert status.could_not_refresh
        assert status.consecutive_failures == 2
        assert status.message == "Could not refresh services: timed out"

    def test_successful_swap_clears_indicator(self):
        store = CatalogStore()
        status = RefreshStatus()
        status.attach(store)
        status.report_failure(_failure())

        store.replace_snapshot([make_offering()], {"prov-1": make_provider()})

        assert not status.could_not_refresh
        assert status.consecutive_failures == 0
        assert status.snapshot_version == 1

    def test_detach(self):
        store = CatalogStore()
        status = RefreshStatus()
        detach = status.attach(store)
        detach()
        status.report_failure(_failure())

        store.replace_snapshot([], {})

        assert status.could_not_refresh
