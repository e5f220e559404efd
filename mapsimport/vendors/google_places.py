"""Client utilities for the Google Places API."""

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
REQUEST_TIMEOUT = 10
DETAIL_FIELDS = (
    "place_id,name,formatted_address,formatted_phone_number,international_phone_number,"
    "website,price_level,geometry,editorial_summary,reviews,photos"
)


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""


def _get_json(operation: str, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
    response = _SESSION.get(url, params=params, timeout=REQUEST_TIMEOUT)
    response.raise_for_status()
    payload = response.json()
    status = payload.get("status")
    if status not in {"OK", "ZERO_RESULTS"}:
        logger.error("%s failed: status=%s, error_message=%s", operation, status, payload.get("error_message"))
        raise GooglePlacesError(payload.get("error_message") or status)
    return payload


def nearby_search(
    lat: float,
    lng: float,
    radius: int,
    api_key: str,
    base_url: str,
    keyword: Optional[str] = None,
) -> Dict[str, Any]:
    params: Dict[str, Any] = {"location": f"{lat},{lng}", "radius": radius, "key": api_key}
    if keyword:
        params["keyword"] = keyword
    return _get_json("nearby_search", f"{base_url}/nearbysearch/json", params)


def text_search(
    query: str,
    api_key: str,
    base_url: str,
    place_type: Optional[str] = None,
    pagetoken: Optional[str] = None,
) -> Dict[str, Any]:
    params: Dict[str, Any] = {"query": query, "key": api_key}
    if place_type:
        params["type"] = place_type
    if pagetoken:
        params["pagetoken"] = pagetoken
    return _get_json("text_search", f"{base_url}/textsearch/json", params)


def place_details(place_id: str, api_key: str, base_url: str) -> Dict[str, Any]:
    params = {"place_id": place_id, "key": api_key, "fields": DETAIL_FIELDS}
    payload = _get_json("place_details", f"{base_url}/details/json", params)
    return payload.get("result", {})


def fetch_photo(photo_reference: str, api_key: str, base_url: str, max_width: int = 800) -> requests.Response:
    """Request a place photo without following the provider's CDN redirect."""
    params = {"maxwidth": max_width, "photo_reference": photo_reference, "key": api_key}
    return _SESSION.get(
        f"{base_url}/photo",
        params=params,
        timeout=REQUEST_TIMEOUT,
        allow_redirects=False,
    )
