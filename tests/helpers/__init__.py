"""Test helper utilities for provider discovery tests."""

from .catalog_builders import (
    FakeFetch,
    decoded,
    make_offering,
    make_provider,
    make_request,
    make_snapshot,
    raw_item,
)

__all__ = [
    "FakeFetch",
    "decoded",
    "make_offering",
    "make_provider",
    "make_request",
    "make_snapshot",
    "raw_item",
]
