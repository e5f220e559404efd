"""Google Maps link helpers: allow-list validation, short-link expansion and place extraction."""

from __future__ import annotations

import json
import logging
import re
from typing import Optional, Tuple
from urllib.parse import parse_qs, unquote_plus, urljoin, urlparse

import requests
from bs4 import BeautifulSoup

from mapsimport.core.errors import NetworkError, NetworkTimeoutError, ResolutionStage
from mapsimport.models import Coordinates, PlaceInfo

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_SESSION.headers.update(
    {
        "User-Agent": "Mozilla/5.0 (compatible; MapsImportBot/1.0)",
        "Accept": "text/html,application/xhtml+xml",
        "Accept-Language": "en-US,en;q=0.9",
    }
)

SHORT_LINK_TIMEOUT = 10.0
SHORTENER_HOSTS = ("goo.gl",)
MAP_HOSTS = ("google.com", "maps.google.com")
ALLOWED_HOSTS = SHORTENER_HOSTS + MAP_HOSTS

PLACE_ID_PARAMS = ("place_id", "query_place_id")
PLACE_ID_IN_QUERY_REGEX = re.compile(r"^place_id[:=]([A-Za-z0-9_-]+)$")
PLACE_NAME_REGEX = re.compile(r"/place/([^/]+)")
DATA_BLOB_REGEX = re.compile(r"!3d(-?\d+(?:\.\d+)?)!4d(-?\d+(?:\.\d+)?)")
VIEWPORT_REGEX = re.compile(r"@(-?\d+(?:\.\d+)?),(-?\d+(?:\.\d+)?)")
LATLNG_QUERY_REGEX = re.compile(r"^(-?\d+(?:\.\d+)?),\s*(-?\d+(?:\.\d+)?)$")
META_REFRESH_URL_REGEX = re.compile(r"url\s*=\s*['\"]?([^'\";]+)", re.IGNORECASE)


def _normalized_host(url: str) -> Optional[str]:
    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
    except (AttributeError, ValueError):
        return None
    if parsed.scheme not in {"http", "https"} or not hostname:
        return None
    hostname = hostname.lower().rstrip(".")
    if hostname.startswith("www."):
        hostname = hostname[len("www."):]
    return hostname


def _host_matches(host: str, allowed: Tuple[str, ...]) -> bool:
    return any(host == candidate or host.endswith(f".{candidate}") for candidate in allowed)


def is_valid_google_maps_url(url: str) -> bool:
    """Return True when the URL host is a Google Maps host or the Maps link shortener."""
    host = _normalized_host(url) if isinstance(url, str) else None
    if not host:
        return False
    return _host_matches(host, ALLOWED_HOSTS)


def is_short_link(url: str) -> bool:
    host = _normalized_host(url)
    return bool(host) and _host_matches(host, SHORTENER_HOSTS)


def resolve_short_link(url: str, *, timeout: float = SHORT_LINK_TIMEOUT) -> str:
    """Follow redirects from a shortened Maps link and return the final URL."""
    try:
        response = _SESSION.get(url, timeout=timeout, allow_redirects=True)
    except requests.Timeout as exc:
        logger.warning("Timed out resolving short link %s after %.1fs", url, timeout)
        raise NetworkTimeoutError(stage=ResolutionStage.RESOLVING) from exc
    except requests.RequestException as exc:
        logger.warning("Failed to resolve short link %s: %s", url, exc)
        raise NetworkError(stage=ResolutionStage.RESOLVING) from exc

    final_url = response.url or url
    if is_short_link(final_url):
        content_type = response.headers.get("Content-Type", "").lower()
        if "text/html" in content_type:
            target = _find_interstitial_target(final_url, response.text)
            if target:
                logger.debug("Short link %s resolved through HTML interstitial to %s", url, target)
                return target
        logger.debug("Short link %s did not leave the shortener host", url)

    logger.info("Resolved short link %s -> %s", url, final_url)
    return final_url


def _find_interstitial_target(page_url: str, html: str) -> Optional[str]:
    soup = BeautifulSoup(html or "", "html.parser")

    canonical = soup.find("link", rel="canonical", href=True)
    if canonical:
        return urljoin(page_url, canonical["href"].strip())

    og_url = soup.find("meta", attrs={"property": "og:url", "content": True})
    if og_url and og_url["content"].strip():
        return urljoin(page_url, og_url["content"].strip())

    for meta in soup.find_all("meta", attrs={"http-equiv": True, "content": True}):
        if meta["http-equiv"].lower() != "refresh":
            continue
        match = META_REFRESH_URL_REGEX.search(meta["content"])
        if match:
            return urljoin(page_url, match.group(1).strip())

    return None


def _parse_coordinates(lat_raw: object, lng_raw: object) -> Optional[Coordinates]:
    try:
        lat = float(lat_raw)
        lng = float(lng_raw)
    except (TypeError, ValueError):
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        return None
    return Coordinates(lat=lat, lng=lng)


def _extract_place_id(query: dict) -> Optional[str]:
    for param in PLACE_ID_PARAMS:
        values = query.get(param)
        if values and values[0].strip():
            return values[0].strip()
    for param in ("q", "query"):
        for value in query.get(param, []):
            match = PLACE_ID_IN_QUERY_REGEX.match(value.strip())
            if match:
                return match.group(1)
    return None


def _extract_path_name(path: str) -> Optional[str]:
    match = PLACE_NAME_REGEX.search(path)
    if not match:
        return None
    name = unquote_plus(match.group(1)).strip()
    return name or None


def _extract_data_blob_coordinates(url: str, query: dict) -> Optional[Coordinates]:
    for raw in query.get("data", []):
        try:
            data = json.loads(raw)
        except ValueError:
            logger.debug("Ignoring non-JSON data parameter: %s", raw[:100])
            continue
        center = data.get("center") if isinstance(data, dict) else None
        if isinstance(center, dict):
            coordinates = _parse_coordinates(center.get("lat"), center.get("lng"))
            if coordinates:
                return coordinates

    match = DATA_BLOB_REGEX.search(unquote_plus(url))
    if match:
        return _parse_coordinates(match.group(1), match.group(2))
    return None


def _extract_viewport_coordinates(path: str, fragment: str, query: dict) -> Optional[Coordinates]:
    for segment in (path, fragment):
        match = VIEWPORT_REGEX.search(segment or "")
        if match:
            coordinates = _parse_coordinates(match.group(1), match.group(2))
            if coordinates:
                return coordinates
    # maps.google.com/?q=1.3521,103.8198
    for value in query.get("q", []) + query.get("ll", []):
        match = LATLNG_QUERY_REGEX.match(value.strip())
        if match:
            coordinates = _parse_coordinates(match.group(1), match.group(2))
            if coordinates:
                return coordinates
    return None


def extract_place_info(url: str) -> Optional[PlaceInfo]:
    """Recover a place id, coordinates or a name hint from a canonical Maps URL.

    Patterns are tried most specific first: explicit place id, the embedded
    data blob, the ``@lat,lng`` viewport marker, then a bare name. ``None``
    means nothing recognisable was found.
    """
    try:
        parsed = urlparse(url)
    except (AttributeError, ValueError):
        return None

    query = parse_qs(parsed.query)
    path = unquote_plus(parsed.path)

    place_id = _extract_place_id(query)
    if place_id:
        return PlaceInfo(place_id=place_id)

    name_hint = _extract_path_name(parsed.path)

    coordinates = _extract_data_blob_coordinates(url, query)
    if coordinates:
        return PlaceInfo(coordinates=coordinates, name_hint=name_hint)

    coordinates = _extract_viewport_coordinates(path, parsed.fragment, query)
    if coordinates:
        return PlaceInfo(coordinates=coordinates, name_hint=name_hint)

    if not name_hint:
        search_terms = [value.strip() for value in query.get("q", []) + query.get("query", []) if value.strip()]
        name_hint = search_terms[0] if search_terms else None
    if name_hint:
        return PlaceInfo(name_hint=name_hint)

    return None
