"""Typed failures raised by the Maps link resolution pipeline."""

from enum import Enum
from typing import Optional


class ResolutionStage(str, Enum):
    VALIDATING = "validating"
    RESOLVING = "resolving"
    EXTRACTING = "extracting"
    IDENTIFYING_PLACE = "identifying_place"
    FETCHING_DETAILS = "fetching_details"
    DONE = "done"


class MapsImportError(Exception):
    """Base error; ``message`` is safe to show to end users."""

    code = "maps_import_error"
    default_message = "Could not import this Google Maps link."

    def __init__(self, message: Optional[str] = None, *, stage: Optional[ResolutionStage] = None) -> None:
        self.message = message or self.default_message
        self.stage = stage
        super().__init__(self.message)


class InvalidUrlError(MapsImportError):
    code = "invalid_url"
    default_message = "Invalid Google Maps URL. Please paste a valid Google Maps link."


class NetworkTimeoutError(MapsImportError):
    code = "network_timeout"
    default_message = "Timed out while resolving the Google Maps link. Please try again."


class NetworkError(MapsImportError):
    code = "network_error"
    default_message = "Could not resolve the Google Maps link."


class UnresolvableLinkError(MapsImportError):
    code = "unresolvable_link"
    default_message = "Could not find a place in this Google Maps link."


class PlaceNotFoundError(MapsImportError):
    code = "place_not_found"
    default_message = "No matching place was found for this Google Maps link."


class DetailsUnavailableError(MapsImportError):
    code = "details_unavailable"
    default_message = "Could not load details for this place."


class RestaurantConflictError(MapsImportError):
    code = "conflict"
    default_message = "Restaurant already exists in database"
