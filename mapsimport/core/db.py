"""Database helpers for restaurant persistence."""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

from psycopg2 import extras, pool

from mapsimport.core.config import get_settings

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.SimpleConnectionPool] = None

_RESTAURANT_COLUMNS = (
    "country_id",
    "name",
    "address",
    "latitude",
    "longitude",
    "place_id",
    "phone_number",
    "website",
    "price_level",
    "image_url",
    "description",
    "is_active",
)
_REQUIRED_COLUMNS = ("country_id", "name", "address")


def init_pool(minconn: int = 1, maxconn: int = 5) -> pool.SimpleConnectionPool:
    """Initialise and return the shared connection pool."""
    global _connection_pool
    if _connection_pool is None:
        settings = get_settings()
        if not settings.database_url:
            raise RuntimeError("DATABASE_URL is required for database connections")
        _connection_pool = pool.SimpleConnectionPool(
            minconn,
            maxconn,
            dsn=settings.database_url,
            connect_timeout=10,
        )
        logger.info("Database connection pool initialised")
    return _connection_pool


@contextmanager
def get_connection():
    """Context manager yielding a pooled connection."""
    pg_pool = init_pool()
    conn = pg_pool.getconn()
    try:
        yield conn
    finally:
        pg_pool.putconn(conn)


_SELECT_BY_NAME = """
SELECT id, country_id, name, address, latitude, longitude, place_id, phone_number,
       website, price_level, image_url, description, is_active, created_at, updated_at
FROM restaurants
WHERE name = %(name)s AND country_id = %(country_id)s
LIMIT 1;
"""

_SELECT_COUNTRY = "SELECT id FROM countries WHERE id = %(country_id)s;"


def get_restaurant_by_name(name: str, country_id: int) -> Optional[Dict[str, Any]]:
    with get_connection() as conn:
        with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
            cur.execute(_SELECT_BY_NAME, {"name": name, "country_id": country_id})
            row = cur.fetchone()
    return dict(row) if row else None


def _prepare_params(row: Dict[str, Any]) -> Dict[str, Any]:
    params = {column: row[column] for column in _RESTAURANT_COLUMNS if row.get(column) is not None}
    params.setdefault("is_active", True)
    return params


def _build_insert(params: Dict[str, Any]) -> str:
    columns = [column for column in _RESTAURANT_COLUMNS if column in params]
    placeholders = ", ".join(f"%({column})s" for column in columns)
    return (
        f"INSERT INTO restaurants ({', '.join(columns)}, created_at, updated_at) "
        f"VALUES ({placeholders}, NOW(), NOW()) RETURNING id;"
    )


def create_restaurant(row: Dict[str, Any]) -> int:
    """Insert a restaurant row, writing optional columns only when present."""
    params = _prepare_params(row)
    missing = [column for column in _REQUIRED_COLUMNS if column not in params]
    if missing:
        raise ValueError(f"{', '.join(missing)} required to create a restaurant")

    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(_SELECT_COUNTRY, {"country_id": params["country_id"]})
            if cur.fetchone() is None:
                conn.rollback()
                raise ValueError(f"Country with ID {params['country_id']} does not exist")
            cur.execute(_build_insert(params), params)
            restaurant_id = cur.fetchone()[0]
        conn.commit()
    logger.debug("Inserted restaurant %s (id=%s)", params["name"], restaurant_id)
    return restaurant_id
