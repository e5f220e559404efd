import pytest

from mapsimport.models import Coordinates, PlaceInfo, ResolvedPlace


def test_place_info_shapes():
    assert PlaceInfo(place_id="ChIJabc").kind == "place_id"
    assert PlaceInfo(coordinates=Coordinates(1.0, 2.0), name_hint="Cafe").kind == "coordinates"
    assert PlaceInfo(name_hint="Cafe").kind == "name"


def test_place_info_rejects_mixed_or_empty_shapes():
    with pytest.raises(ValueError):
        PlaceInfo()
    with pytest.raises(ValueError):
        PlaceInfo(place_id="ChIJabc", coordinates=Coordinates(1.0, 2.0))


def test_resolved_place_requires_coordinates():
    with pytest.raises(ValueError):
        ResolvedPlace(place_id="pid", name="Cafe", address="Main", latitude=None, longitude=103.8)


def test_to_payload_omits_missing_optional_fields():
    place = ResolvedPlace(
        place_id="pid",
        name="Cafe",
        address="Main",
        latitude=-33.8688,
        longitude=151.2093,
        price_level=3,
        photo_reference="abc/def+g",
    )
    assert place.to_payload() == {
        "place_id": "pid",
        "name": "Cafe",
        "address": "Main",
        "latitude": "-33.8688",
        "longitude": "151.2093",
        "price_level": 3,
        "image_url": "/api/place-photo?ref=abc%2Fdef%2Bg",
    }
