"""Mapping provider interface and the Google Maps implementation.

The rest of the package only talks to a provider through the three
operations of MappingProvider, so tests and the CLI can substitute a stub.
"""

import logging
from typing import Optional, Protocol

import requests
from geopy.distance import great_circle
from geopy.exc import GeopyError
from geopy.geocoders import GoogleV3

from .config import EARTH_RADIUS_M, PROVIDER_TIMEOUT
from .models import LatLng, Place, ViewBounds

logger = logging.getLogger(__name__)

PLACES_SEARCH_URL = "https://places.googleapis.com/v1/places:searchText"
PLACES_FIELD_MASK = "places.displayName,places.formattedAddress,places.location,nextPageToken"


class ProviderError(Exception):
    """Network, quota or credential failure reported by the mapping provider."""


class MappingProvider(Protocol):
    """What the core needs from a mapping service."""

    def geocode(self, address: str) -> Optional[LatLng]:
        ...

    def text_search(
        self,
        query: str,
        bounds: Optional[ViewBounds],
        page_token: Optional[str] = None,
    ) -> tuple[list[Place], Optional[str]]:
        ...

    def distance(self, a: LatLng, b: LatLng) -> float:
        ...


def surface_distance(a: LatLng, b: LatLng) -> float:
    """Great-circle distance in meters on a sphere of EARTH_RADIUS_M.

    The arguments are put in a fixed order first, so the result does not
    depend on which point is passed first.
    """
    first, second = sorted((a.as_tuple(), b.as_tuple()))
    return great_circle(first, second, radius=EARTH_RADIUS_M / 1000.0).meters


class GoogleMapsProvider:
    """Geocoding through geopy's GoogleV3, text search through the Places API."""

    def __init__(self, api_key: str, timeout: float = PROVIDER_TIMEOUT, session=None):
        if not api_key:
            raise ProviderError("Lipsește cheia API Google Maps.")
        self.api_key = api_key
        self.timeout = timeout
        self._geocoder = GoogleV3(api_key=api_key, timeout=timeout)
        self._session = session or requests.Session()

    def geocode(self, address: str) -> Optional[LatLng]:
        """Forward-geocode an address; None when the service finds nothing."""
        try:
            location = self._geocoder.geocode(address)
        except GeopyError as e:
            raise ProviderError(str(e)) from e
        if location is None:
            return None
        return LatLng(location.latitude, location.longitude)

    def text_search(
        self,
        query: str,
        bounds: Optional[ViewBounds],
        page_token: Optional[str] = None,
    ) -> tuple[list[Place], Optional[str]]:
        """One page of a Places text search, biased to the given viewport."""
        body: dict = {"textQuery": query}
        if bounds is not None:
            body["locationBias"] = {
                "rectangle": {
                    "low": {"latitude": bounds.south, "longitude": bounds.west},
                    "high": {"latitude": bounds.north, "longitude": bounds.east},
                }
            }
        if page_token:
            body["pageToken"] = page_token

        headers = {
            "X-Goog-Api-Key": self.api_key,
            "X-Goog-FieldMask": PLACES_FIELD_MASK,
        }
        try:
            response = self._session.post(
                PLACES_SEARCH_URL, json=body, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderError(str(e)) from e

        places = []
        for raw in payload.get("places", []):
            loc = raw.get("location") or {}
            if "latitude" not in loc or "longitude" not in loc:
                continue
            places.append(Place(
                name=(raw.get("displayName") or {}).get("text", ""),
                location=LatLng(loc["latitude"], loc["longitude"]),
                address=raw.get("formattedAddress", ""),
            ))
        next_token = payload.get("nextPageToken") or None
        logger.debug("Text search %r: %d places, more=%s", query, len(places), bool(next_token))
        return places, next_token

    def distance(self, a: LatLng, b: LatLng) -> float:
        return surface_distance(a, b)
