"""Resolve a user-supplied Google Maps link into a normalized restaurant record."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

import requests

from mapsimport.core import links
from mapsimport.core.config import PlacesConfig, Settings, get_settings
from mapsimport.core.errors import (
    DetailsUnavailableError,
    InvalidUrlError,
    PlaceNotFoundError,
    ResolutionStage,
    UnresolvableLinkError,
)
from mapsimport.etl.transform import to_resolved_place
from mapsimport.models import Coordinates, PlaceInfo, ResolvedPlace
from mapsimport.vendors import google_places

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000.0
TEXT_SEARCH_TYPE = "establishment"


def distance_m(origin: Coordinates, lat: float, lng: float) -> float:
    """Great-circle distance in metres (haversine)."""
    phi1 = math.radians(origin.lat)
    phi2 = math.radians(lat)
    d_phi = math.radians(lat - origin.lat)
    d_lambda = math.radians(lng - origin.lng)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(a))


def _result_distance(origin: Coordinates, result: Dict[str, Any]) -> float:
    location = (result.get("geometry") or {}).get("location") or {}
    try:
        return distance_m(origin, float(location["lat"]), float(location["lng"]))
    except (KeyError, TypeError, ValueError):
        return math.inf


def pick_nearby_result(
    results: List[Dict[str, Any]],
    origin: Coordinates,
    name_hint: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """Prefer the first result whose name contains the hint, else the nearest one."""
    candidates = [result for result in results if result.get("place_id")]
    if not candidates:
        return None

    if name_hint:
        needle = name_hint.casefold()
        for result in candidates:
            if needle in (result.get("name") or "").casefold():
                return result
        logger.debug("No nearby result matched name hint %r; falling back to nearest", name_hint)

    # min() keeps provider order on ties and for results without geometry.
    return min(candidates, key=lambda result: _result_distance(origin, result))


class MapsLinkResolver:
    """Straight-line pipeline: validate, expand, extract, identify, fetch details.

    Every failure raises a :class:`MapsImportError` subclass tagged with the
    stage it happened in; there are no retries.
    """

    def __init__(self, config: PlacesConfig) -> None:
        self.config = config

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "MapsLinkResolver":
        return cls(PlacesConfig.from_settings(settings or get_settings()))

    def resolve(self, url: str) -> ResolvedPlace:
        url = (url or "").strip()

        logger.debug("[%s] %s", ResolutionStage.VALIDATING.value, url)
        if not links.is_valid_google_maps_url(url):
            logger.info("Rejected non Google Maps URL: %s", url)
            raise InvalidUrlError(stage=ResolutionStage.VALIDATING)

        if links.is_short_link(url):
            logger.debug("[%s] %s", ResolutionStage.RESOLVING.value, url)
            url = links.resolve_short_link(url, timeout=self.config.short_link_timeout)
            if not links.is_valid_google_maps_url(url):
                logger.info("Short link expanded outside Google Maps: %s", url)
                raise UnresolvableLinkError(stage=ResolutionStage.RESOLVING)

        logger.debug("[%s] %s", ResolutionStage.EXTRACTING.value, url)
        place_info = links.extract_place_info(url)
        if place_info is None:
            logger.info("No place information found in %s", url)
            raise UnresolvableLinkError(stage=ResolutionStage.EXTRACTING)

        place_id = self.identify_place(place_info)
        place = self.fetch_details(place_id)
        logger.info(
            "[%s] %s -> place_id=%s name=%s", ResolutionStage.DONE.value, url, place.place_id, place.name
        )
        return place

    def identify_place(self, place_info: PlaceInfo) -> str:
        if place_info.place_id:
            return place_info.place_id

        stage = ResolutionStage.IDENTIFYING_PLACE
        try:
            if place_info.coordinates is not None:
                result = self._nearby_lookup(place_info.coordinates, place_info.name_hint)
            else:
                result = self._text_lookup(place_info.name_hint)
        except (google_places.GooglePlacesError, requests.RequestException) as exc:
            logger.warning("Place lookup failed for %s: %s", place_info, exc)
            raise PlaceNotFoundError(stage=stage) from exc

        if result is None:
            logger.info("No place found for %s", place_info)
            raise PlaceNotFoundError(stage=stage)
        return result["place_id"]

    def _nearby_lookup(self, coordinates: Coordinates, name_hint: Optional[str]) -> Optional[Dict[str, Any]]:
        payload = google_places.nearby_search(
            coordinates.lat,
            coordinates.lng,
            self.config.nearby_radius_m,
            api_key=self.config.places_api_key,
            base_url=self.config.places_base_url,
        )
        results = payload.get("results", [])
        logger.debug("Nearby search at %s returned %d results", coordinates, len(results))
        return pick_nearby_result(results, coordinates, name_hint)

    def _text_lookup(self, name_hint: str) -> Optional[Dict[str, Any]]:
        payload = google_places.text_search(
            name_hint,
            api_key=self.config.places_api_key,
            base_url=self.config.places_base_url,
            place_type=TEXT_SEARCH_TYPE,
        )
        for result in payload.get("results", []):
            if result.get("place_id"):
                return result
        return None

    def fetch_details(self, place_id: str) -> ResolvedPlace:
        stage = ResolutionStage.FETCHING_DETAILS
        try:
            result = google_places.place_details(
                place_id,
                api_key=self.config.places_api_key,
                base_url=self.config.places_base_url,
            )
        except (google_places.GooglePlacesError, requests.RequestException) as exc:
            logger.warning("Failed to fetch details for %s: %s", place_id, exc)
            raise DetailsUnavailableError(stage=stage) from exc

        place = to_resolved_place(result, fallback_place_id=place_id) if result else None
        if place is None:
            raise DetailsUnavailableError(stage=stage)
        return place
