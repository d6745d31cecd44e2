"""Canonical keys for categories, provider types and search text.

Every comparison the matching engine makes on free-form strings goes through
these functions, so "AC", "ac/wm" and "Washing Machine" land on the same key
no matter which screen or provider typed them.
"""

import re
from typing import Iterable, List, Optional, Sequence

ACWM_KEY = "acwm"
ACWM_ALIASES = frozenset({"ac", "wm", ACWM_KEY})

STORE = "store"
FREELANCER = "freelancer"
STORE_ALIASES = frozenset({"store", "shop"})

DEFAULT_CATEGORY_OPTIONS = (
    "Mobile",
    "Bike",
    "Car",
    "AC / WM",
    "Electrical",
    "Plumbing",
    "Cleaning",
)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_search_text(raw: Optional[str]) -> str:
    """Lower-case and drop every non-alphanumeric character.

    Example:
        >>> normalize_search_text("AC Repair (Split)")
        'acrepairsplit'
    """
    if not raw:
        return ""
    return _NON_ALNUM.sub("", str(raw).lower())


def normalize_category_key(raw: Optional[str]) -> str:
    """Normalize a category label to its comparison key.

    AC and washing-machine labels share the single key ``"acwm"``. Empty or
    whitespace-only input gives ``""``. Idempotent.

    Example:
        >>> normalize_category_key("Washing Machine")
        'acwm'
        >>> normalize_category_key("Plumbing ")
        'plumbing'
    """
    key = normalize_search_text(raw)
    if not key:
        return ""
    if key in ACWM_ALIASES or "washingmachine" in key:
        return ACWM_KEY
    return key


def normalize_provider_type(raw: Optional[str]) -> str:
    """Map a raw provider type to ``"store"`` or ``"freelancer"``."""
    if raw and str(raw).lower() in STORE_ALIASES:
        return STORE
    return FREELANCER


def available_categories(
    raw_categories: Iterable[Optional[str]],
    defaults: Sequence[str] = DEFAULT_CATEGORY_OPTIONS,
) -> List[str]:
    """Build the category picker list.

    Defaults come first, followed by categories seen in the catalog. Labels
    are trimmed, blanks dropped, and labels sharing a normalized key are
    collapsed to the first one seen.
    """
    seen_keys = set()
    labels: List[str] = []

    for category in [*defaults, *raw_categories]:
        label = str(category or "").strip()
        if not label:
            continue
        key = normalize_category_key(label)
        if key in seen_keys:
            continue
        seen_keys.add(key)
        labels.append(label)

    return labels


def resolve_category(query: Optional[str], available: Sequence[str]) -> str:
    """Return the available label equivalent to ``query``, or ``""``.

    Example:
        >>> resolve_category("ac", ["Mobile", "AC / WM"])
        'AC / WM'
    """
    key = normalize_category_key(query)
    if not key:
        return ""
    for label in available:
        if normalize_category_key(label) == key:
            return label
    return ""
