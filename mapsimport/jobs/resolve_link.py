"""CLI job to resolve a Google Maps link and optionally import it as a restaurant."""

import argparse
import json
import logging
from typing import Any, Dict, Optional

from mapsimport.core.config import ConfigError
from mapsimport.core.errors import MapsImportError
from mapsimport.core.importer import import_restaurant
from mapsimport.core.resolver import MapsLinkResolver

logger = logging.getLogger(__name__)


def run_resolve_job(*, url: str, country_id: Optional[int] = None) -> Dict[str, Any]:
    resolver = MapsLinkResolver.from_settings()
    place = resolver.resolve(url)
    payload = place.to_payload()
    logger.info("Resolved %s to %s", url, payload["name"])

    if country_id is None:
        return payload

    restaurant = import_restaurant(payload, country_id)
    logger.info("Stored restaurant id=%s", restaurant["id"])
    return restaurant


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve a Google Maps link into restaurant fields")
    parser.add_argument("url", help="Google Maps link, e.g. https://maps.app.goo.gl/...")
    parser.add_argument("--country-id", dest="country_id", type=int, help="Import the place for this country id")
    return parser


def main(argv=None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        result = run_resolve_job(url=args.url, country_id=args.country_id)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    except MapsImportError as exc:
        logger.error("%s (code=%s)", exc.message, exc.code)
        raise SystemExit(1) from exc

    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
