"""Display payloads for match records.

Presenters render plain dictionaries so they never format numbers
themselves. Text conventions match the customer result cards:
- rating: one decimal, or "New" when unrated
- distance: "3.2 km", or "Within <radius> km" when unknown
- price: "Rs 1,500"
"""

from typing import Dict

from discovery.matching.models import MatchRecord

UNRATED_TEXT = "New"
NO_DESCRIPTION_TEXT = "No description provided."


def format_rating(rating: float) -> str:
    return f"{rating:.1f}" if rating > 0 else UNRATED_TEXT


def format_distance(distance_km: float, radius_km: float) -> str:
    if distance_km > 0:
        return f"{distance_km:.1f} km"
    return f"Within {radius_km:g} km"


def format_price(price: float) -> str:
    if float(price).is_integer():
        return f"Rs {int(price):,}"
    return f"Rs {price:,.2f}"


def format_provider_type(provider_type: str) -> str:
    return "Store" if provider_type == "store" else "Freelancer"


def build_display_payload(record: MatchRecord, radius_km: float) -> Dict:
    """Build a render-ready dictionary for one match record.

    Args:
        record: Match record to display
        radius_km: Radius of the search, used when the distance is unknown

    Returns:
        Dictionary with keys:
        - provider_id, provider_name, provider_avatar: Provider identity
        - provider_type, provider_type_label: Normalized type and its label
        - rating, rating_text: Raw rating and its display text
        - completed_job_count, jobs_text: Completed orders
        - is_online: Online flag
        - distance_km, distance_text: Raw distance and its display text
        - offering_id, service_name, service_description: Offering details
        - category_key: Normalized category of the offering
        - price, price_text: Raw price and its display text
    """
    offering = record.offering
    return {
        "provider_id": record.provider_id,
        "provider_name": record.provider_name,
        "provider_avatar": record.provider_avatar,
        "provider_type": record.provider_type,
        "provider_type_label": format_provider_type(record.provider_type),
        "rating": record.rating,
        "rating_text": format_rating(record.rating),
        "completed_job_count": record.completed_job_count,
        "jobs_text": f"{record.completed_job_count} jobs",
        "is_online": record.is_online,
        "distance_km": record.distance_km,
        "distance_text": format_distance(record.distance_km, radius_km),
        "offering_id": offering.offering_id,
        "service_name": offering.name,
        "service_description": offering.description or NO_DESCRIPTION_TEXT,
        "category_key": record.category_key,
        "price": record.price,
        "price_text": format_price(record.price),
    }
