"""HTTP entrypoint for resolving and importing Google Maps links."""

from __future__ import annotations

import logging
from typing import Any, Dict

import requests
from flask import Flask, Response, jsonify, redirect, request

from mapsimport.core.config import ConfigError, get_settings
from mapsimport.core.errors import MapsImportError
from mapsimport.core.importer import import_restaurant
from mapsimport.core.resolver import MapsLinkResolver
from mapsimport.vendors import google_places

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)

ERROR_STATUS = {
    "invalid_url": 400,
    "unresolvable_link": 422,
    "place_not_found": 404,
    "details_unavailable": 502,
    "network_error": 502,
    "network_timeout": 504,
    "conflict": 409,
}

# ---------- Routes ----------


@app.get("/healthz")
def healthcheck() -> Any:
    settings = get_settings()
    return jsonify({"status": "ok", "places_configured": settings.places_configured}), 200


@app.post("/restaurants/parse-maps-url")
def parse_maps_url() -> Any:
    """
    Resolve a Google Maps link into restaurant fields.
    Required JSON fields: url
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    url = str(payload.get("url") or "").strip()
    if not url:
        return jsonify({"error": "url is required"}), 400

    try:
        resolver = MapsLinkResolver.from_settings(get_settings())
    except ConfigError as exc:
        logger.error("Maps link resolution unavailable: %s", exc)
        return jsonify({"error": "Google Maps import is not configured"}), 503

    try:
        place = resolver.resolve(url)
    except MapsImportError as exc:
        return _error_response(exc)

    return jsonify({"data": place.to_payload()}), 200


@app.post("/restaurants/import")
def import_from_google_maps() -> Any:
    """
    Persist a resolved place as a restaurant.
    Required JSON fields: name, address, latitude, longitude, country_id
    Optional: place_id, phone_number, website, price_level, image_url, description
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    required = ("name", "address", "latitude", "longitude", "country_id")
    missing = [f for f in required if payload.get(f) in (None, "")]
    if missing:
        return jsonify({"error": f"missing fields: {', '.join(missing)}"}), 400

    try:
        country_id = int(payload["country_id"])
    except (TypeError, ValueError):
        return jsonify({"error": "country_id must be numeric"}), 400

    try:
        restaurant = import_restaurant(payload, country_id)
    except MapsImportError as exc:
        return _error_response(exc)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception as exc:  # noqa: BLE001
        logger.exception("Restaurant import failed for %s: %s", payload.get("name"), exc)
        return jsonify({"error": "restaurant import failed"}), 500

    return jsonify({"data": restaurant}), 201


@app.get("/api/place-photo")
def place_photo() -> Any:
    """Stream a Places photo through our own domain so the API key stays server-side."""
    ref = request.args.get("ref")
    if not ref:
        return "Missing ref", 400

    settings = get_settings()
    if not settings.places_configured:
        return "Place photo proxy not configured", 503

    try:
        upstream = google_places.fetch_photo(
            ref,
            api_key=settings.places_api_key,
            base_url=settings.places_base_url,
            max_width=settings.photo_max_width,
        )
    except requests.RequestException as exc:
        logger.exception("[place-photo] %s", exc)
        return "Failed to fetch photo", 500

    location = upstream.headers.get("Location")
    if upstream.status_code == 302 and location:
        return redirect(location, code=302)
    if upstream.ok:
        return Response(upstream.content, content_type=upstream.headers.get("Content-Type") or "image/jpeg")
    return "Failed to fetch photo", upstream.status_code


# ---------- Internals ----------


def _error_response(exc: MapsImportError) -> Any:
    status = ERROR_STATUS.get(exc.code, 500)
    stage = exc.stage.value if exc.stage else None
    logger.info("Maps import failed: code=%s stage=%s", exc.code, stage)
    return jsonify({"error": exc.message, "code": exc.code}), status


def main() -> None:
    port = get_settings().worker_port
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
