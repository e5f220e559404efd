import pytest

from mapsimport.core import importer
from mapsimport.core.errors import RestaurantConflictError

PAYLOAD = {
    "name": "Test Cafe",
    "address": "1 Orchard Rd",
    "latitude": "1.3521",
    "longitude": "103.8198",
    "place_id": "pid",
}


def test_import_restaurant_rejects_duplicates(monkeypatch):
    created = []
    monkeypatch.setattr(importer.db, "get_restaurant_by_name", lambda name, country_id: {"id": 5})
    monkeypatch.setattr(importer.db, "create_restaurant", lambda row: created.append(row))

    with pytest.raises(RestaurantConflictError) as excinfo:
        importer.import_restaurant(PAYLOAD, 1)

    assert excinfo.value.message == "Restaurant already exists in database"
    assert created == []


def test_import_restaurant_creates_row(monkeypatch):
    lookups = []
    monkeypatch.setattr(
        importer.db, "get_restaurant_by_name", lambda name, country_id: lookups.append((name, country_id))
    )
    monkeypatch.setattr(importer.db, "create_restaurant", lambda row: 11)

    restaurant = importer.import_restaurant(PAYLOAD, 2)

    assert lookups == [("Test Cafe", 2)]
    assert restaurant["id"] == 11
    assert restaurant["latitude"] == 1.3521
    assert restaurant["country_id"] == 2
