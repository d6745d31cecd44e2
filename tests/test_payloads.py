"""Unit tests for decoding the offerings endpoint body."""

from datetime import datetime, timezone

import pytest

from discovery.adapters.payloads import (
    decode_catalog,
    extract_service_items,
    resolve_provider_name,
)
from tests.helpers import raw_item


class TestExtractServiceItems:
    """Tests for the accepted response envelopes."""

    @pytest.mark.parametrize(
        "payload",
        [
            [{"id": "1"}],
            {"data": {"services": [{"id": "1"}]}},
            {"services": [{"id": "1"}]},
            {"data": [{"id": "1"}]},
        ],
    )
    def test_known_envelopes(self, payload):
        assert extract_service_items(payload) == [{"id": "1"}]

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            "services",
            42,
            {},
            {"data": {"items": []}},
            {"services": {"id": "1"}},
            {"results": [{"id": "1"}]},
        ],
    )
    def test_unknown_envelopes_are_empty(self, payload):
        assert extract_service_items(payload) == []

    def test_nested_services_take_precedence(self):
        payload = {"data": {"services": [{"id": "nested"}]}, "services": [{"id": "top"}]}
        assert extract_service_items(payload) == [{"id": "nested"}]


class TestResolveProviderName:
    """Tests for provider display name resolution."""

    def test_profile_full_name(self):
        provider = {"businessName": "Cool Air", "users": {"profiles": {"firstName": "Ravi", "lastName": "Kumar"}}}
        assert resolve_provider_name(provider) == "Ravi Kumar"

    def test_first_name_only(self):
        provider = {"users": {"profiles": {"firstName": "Ravi"}}}
        assert resolve_provider_name(provider) == "Ravi"

    def test_business_name_fallback(self):
        provider = {"businessName": " Cool Air ", "users": {"profiles": {}}}
        assert resolve_provider_name(provider) == "Cool Air"

    def test_generic_fallback(self):
        assert resolve_provider_name({"users": None}) == "Provider"


class TestDecodeCatalog:
    """Tests for decode_catalog."""

    def test_decodes_full_item(self):
        catalog = decode_catalog([raw_item()])

        assert catalog.skipped_count == 0
        offering = catalog.offerings[0]
        assert offering.offering_id == "svc-1"
        assert offering.provider_id == "prov-1"
        assert offering.name == "AC Service"
        assert offering.description == "Split AC servicing"
        assert offering.category_raw == "AC"
        assert offering.price == 500.0
        assert offering.created_at == datetime(2025, 11, 1, 12, 0, tzinfo=timezone.utc)

        provider = catalog.providers["prov-1"]
        assert provider.display_name == "Ravi Kumar"
        assert provider.avatar_url == "https://cdn/ravi.png"
        assert provider.provider_type_raw == "freelancer"
        assert provider.rating == 4.5
        assert provider.completed_job_count == 12
        assert provider.is_online is True
        assert provider.distance_km == 2.5

    @pytest.mark.parametrize("avatar", [{"url": "https://cdn/ravi.png"}, 42, ["x"], "   ", None])
    def test_unusable_avatar_keeps_item(self, avatar):
        profiles = {"firstName": "Ravi", "lastName": "Kumar", "avatar": avatar}
        catalog = decode_catalog([raw_item(provider={"users": {"profiles": profiles}})])

        assert catalog.skipped_count == 0
        assert [o.offering_id for o in catalog.offerings] == ["svc-1"]
        assert catalog.providers["prov-1"].avatar_url is None
        assert catalog.providers["prov-1"].display_name == "Ravi Kumar"

    def test_provider_key_singular(self):
        catalog = decode_catalog([raw_item(provider_key="provider")])
        assert list(catalog.providers) == ["prov-1"]

    def test_numeric_ids_become_strings(self):
        catalog = decode_catalog([raw_item(offering_id=101, provider_id=7)])

        assert catalog.offerings[0].offering_id == "101"
        assert catalog.offerings[0].provider_id == "7"

    def test_name_falls_back_to_title_then_default(self):
        with_title = raw_item("a", name=None, title="Gas Refill")
        without = raw_item("b", name="", title=None)

        catalog = decode_catalog([with_title, without])

        assert [o.name for o in catalog.offerings] == ["Gas Refill", "Service"]

    def test_category_falls_back_to_provider_then_general(self):
        from_provider = raw_item("a", category=None, provider={"category": "Plumbing"})
        general = raw_item("b", category="")

        catalog = decode_catalog([from_provider, general])

        assert [o.category_raw for o in catalog.offerings] == ["Plumbing", "General"]

    def test_rating_falls_back_to_offering_rating(self):
        catalog = decode_catalog([raw_item(rating=3.5, provider={"rating": None})])
        assert catalog.providers["prov-1"].rating == 3.5

    def test_distance_falls_back_to_distance_field(self):
        catalog = decode_catalog([raw_item(provider={"distanceKm": None, "distance": "6.5"})])
        assert catalog.providers["prov-1"].distance_km == 6.5

    def test_malformed_numbers_coerced(self):
        item = raw_item(price="free", provider={"rating": "NaN", "totalOrders": None, "distanceKm": -3})

        catalog = decode_catalog([item])

        assert catalog.offerings[0].price == 0.0
        provider = catalog.providers["prov-1"]
        assert provider.rating == 0.0
        assert provider.completed_job_count == 0
        assert provider.distance_km == 0.0

    def test_bad_created_at_is_none(self):
        catalog = decode_catalog([raw_item(createdAt="yesterday")])
        assert catalog.offerings[0].created_at is None

    def test_skips_non_objects(self):
        catalog = decode_catalog(["oops", None, 5, raw_item()])

        assert len(catalog.offerings) == 1
        assert catalog.skipped_count == 3

    def test_skips_items_without_provider_id(self):
        no_provider = raw_item("a")
        del no_provider["providers"]
        blank_id = raw_item("b", provider_id="  ")

        catalog = decode_catalog([no_provider, blank_id, raw_item("c")])

        assert [o.offering_id for o in catalog.offerings] == ["c"]
        assert catalog.skipped_count == 2

    def test_skips_items_without_offering_id(self):
        catalog = decode_catalog([raw_item(offering_id=None), raw_item("ok")])

        assert [o.offering_id for o in catalog.offerings] == ["ok"]
        assert catalog.skipped_count == 1

    def test_duplicate_offering_ids_keep_first(self):
        first = raw_item("dup", price=100)
        second = raw_item("dup", price=900)

        catalog = decode_catalog([first, second])

        assert len(catalog.offerings) == 1
        assert catalog.offerings[0].price == 100.0
        assert catalog.skipped_count == 1

    def test_first_embedded_provider_copy_wins(self):
        first = raw_item("a", provider={"rating": 4.0})
        second = raw_item("b", provider={"rating": 1.0})

        catalog = decode_catalog([first, second])

        assert len(catalog.offerings) == 2
        assert catalog.providers["prov-1"].rating == 4.0

    def test_unknown_envelope_is_empty_catalog(self):
        catalog = decode_catalog({"unexpected": True})

        assert catalog.offerings == []
        assert catalog.providers == {}
        assert catalog.skipped_count == 0
