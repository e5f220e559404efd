"""Utilities for transforming Google Places responses into restaurant records."""

import logging
import math
from typing import Any, Dict, Iterable, Optional

from mapsimport.models import ResolvedPlace

logger = logging.getLogger(__name__)

DESCRIPTION_MAX_LENGTH = 500
_OPTIONAL_ROW_FIELDS = ("place_id", "phone_number", "website", "price_level", "image_url", "description")
_COORDINATE_LIMITS = {"latitude": 90.0, "longitude": 180.0}


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _price_tier(value: Any) -> Optional[int]:
    try:
        tier = int(value)
    except (TypeError, ValueError):
        return None
    # Places reports 0 for "free"; restaurants only use 1-4.
    return tier if 1 <= tier <= 4 else None


def _first_review_text(reviews: Iterable[Dict[str, Any]]) -> Optional[str]:
    for review in reviews or []:
        text = _strip_or_none(review.get("text"))
        if text:
            return text
    return None


def parse_coordinate(value: Any, limit: float) -> Optional[float]:
    """Return a finite coordinate within [-limit, limit], else None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or abs(number) > limit:
        return None
    return number


def extract_description(result: Dict[str, Any]) -> Optional[str]:
    summary = result.get("editorial_summary") or {}
    description = _strip_or_none(summary.get("overview")) or _first_review_text(result.get("reviews", []))
    if description and len(description) > DESCRIPTION_MAX_LENGTH:
        description = description[:DESCRIPTION_MAX_LENGTH]
    return description


def extract_photo_reference(result: Dict[str, Any]) -> Optional[str]:
    for photo in result.get("photos") or []:
        reference = _strip_or_none(photo.get("photo_reference"))
        if reference:
            return reference
    return None


def to_resolved_place(result: Dict[str, Any], fallback_place_id: Optional[str] = None) -> Optional[ResolvedPlace]:
    """Normalize a Places details result; ``None`` when coordinates are missing."""
    location = (result.get("geometry") or {}).get("location") or {}
    lat = parse_coordinate(location.get("lat"), _COORDINATE_LIMITS["latitude"])
    lng = parse_coordinate(location.get("lng"), _COORDINATE_LIMITS["longitude"])
    if lat is None or lng is None:
        logger.warning("Place details for %s have missing or invalid geometry.location", result.get("place_id") or fallback_place_id)
        return None

    name = _strip_or_none(result.get("name"))
    if not name:
        logger.warning("Place details for %s are missing a name", result.get("place_id") or fallback_place_id)
        return None

    return ResolvedPlace(
        place_id=result.get("place_id") or fallback_place_id,
        name=name,
        address=_strip_or_none(result.get("formatted_address")) or name,
        latitude=lat,
        longitude=lng,
        phone_number=_strip_or_none(result.get("formatted_phone_number"))
        or _strip_or_none(result.get("international_phone_number")),
        website=_strip_or_none(result.get("website")),
        price_level=_price_tier(result.get("price_level")),
        description=extract_description(result),
        photo_reference=extract_photo_reference(result),
    )


def _coordinate(payload: Dict[str, Any], field: str) -> float:
    value = parse_coordinate(payload.get(field), _COORDINATE_LIMITS[field])
    if value is None:
        raise ValueError(f"{field} must be a number within ±{_COORDINATE_LIMITS[field]:g}")
    return value


def to_restaurant_row(payload: Dict[str, Any], country_id: int) -> Dict[str, Any]:
    """Convert an import payload (string coordinates) into a restaurants row."""
    name = _strip_or_none(payload.get("name"))
    address = _strip_or_none(payload.get("address"))
    if not name or not address:
        raise ValueError("name and address are required to import a restaurant")

    row: Dict[str, Any] = {
        "country_id": int(country_id),
        "name": name,
        "address": address,
        "latitude": _coordinate(payload, "latitude"),
        "longitude": _coordinate(payload, "longitude"),
    }
    for field in _OPTIONAL_ROW_FIELDS:
        value = payload.get(field)
        if value is not None and value != "":
            row[field] = value
    if "price_level" in row:
        row["price_level"] = _price_tier(row["price_level"])
        if row["price_level"] is None:
            del row["price_level"]
    return row
