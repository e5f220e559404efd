"""Core data models shared by the Maps link import pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

PHOTO_PROXY_PATH = "/api/place-photo"


@dataclass(slots=True, frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(slots=True, frozen=True)
class PlaceInfo:
    """What could be recovered from a canonical Maps URL.

    Exactly one of three shapes: a place id, coordinates with an optional
    name hint, or a name hint alone.
    """

    place_id: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    name_hint: Optional[str] = None

    def __post_init__(self) -> None:
        if self.place_id:
            if self.coordinates is not None or self.name_hint:
                raise ValueError("PlaceInfo with a place_id cannot carry coordinates or a name hint")
        elif self.coordinates is None and not self.name_hint:
            raise ValueError("PlaceInfo needs a place_id, coordinates or a name hint")

    @property
    def kind(self) -> str:
        if self.place_id:
            return "place_id"
        if self.coordinates is not None:
            return "coordinates"
        return "name"


@dataclass(slots=True)
class ResolvedPlace:
    """Normalized restaurant candidate built from Places details."""

    place_id: str
    name: str
    address: str
    latitude: float
    longitude: float
    phone_number: Optional[str] = None
    website: Optional[str] = None
    price_level: Optional[int] = None
    description: Optional[str] = None
    photo_reference: Optional[str] = None

    def __post_init__(self) -> None:
        if self.latitude is None or self.longitude is None:
            raise ValueError("ResolvedPlace requires both latitude and longitude")

    @property
    def image_url(self) -> Optional[str]:
        if not self.photo_reference:
            return None
        return f"{PHOTO_PROXY_PATH}?ref={quote(self.photo_reference, safe='')}"

    def to_payload(self) -> Dict[str, Any]:
        """Serialize into the shape accepted by the restaurant import call."""
        payload: Dict[str, Any] = {
            "place_id": self.place_id,
            "name": self.name,
            "address": self.address,
            "latitude": str(self.latitude),
            "longitude": str(self.longitude),
        }
        optional = {
            "phone_number": self.phone_number,
            "website": self.website,
            "price_level": self.price_level,
            "description": self.description,
            "image_url": self.image_url,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload
