"""Persist restaurants resolved from Google Maps links."""

import logging
from typing import Any, Dict

from mapsimport.core import db
from mapsimport.core.errors import RestaurantConflictError
from mapsimport.etl.transform import to_restaurant_row

logger = logging.getLogger(__name__)


def import_restaurant(payload: Dict[str, Any], country_id: int) -> Dict[str, Any]:
    """Create a restaurant for ``country_id`` unless one with the same name exists."""
    row = to_restaurant_row(payload, country_id)

    existing = db.get_restaurant_by_name(row["name"], row["country_id"])
    if existing:
        logger.info("Restaurant %r already exists for country %s (id=%s)", row["name"], country_id, existing.get("id"))
        raise RestaurantConflictError()

    restaurant_id = db.create_restaurant(row)
    logger.info("Imported restaurant %r for country %s (id=%s)", row["name"], country_id, restaurant_id)
    return {"id": restaurant_id, **row}
