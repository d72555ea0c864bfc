"""Tests for the Google Maps provider, with the network replaced by fakes."""

from types import SimpleNamespace

import pytest
import requests
from geopy.exc import GeocoderQuotaExceeded

from core.models import LatLng, ViewBounds
from core.provider import PLACES_SEARCH_URL, GoogleMapsProvider, ProviderError


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        return self.payload


class FakeSession:
    """Records POSTs and replies with queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.posts = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.posts.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        return self.responses.pop(0)


class FakeGeocoder:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    def geocode(self, address):
        if self.error:
            raise self.error
        return self.result


class TestConstruction:
    """Tests for provider construction."""

    def test_empty_key_rejected(self):
        with pytest.raises(ProviderError):
            GoogleMapsProvider("")


class TestGeocode:
    """Tests for GoogleMapsProvider.geocode."""

    def test_found(self):
        provider = GoogleMapsProvider("key")
        provider._geocoder = FakeGeocoder(SimpleNamespace(latitude=46.77, longitude=23.59))
        assert provider.geocode("Cluj") == LatLng(46.77, 23.59)

    def test_not_found(self):
        provider = GoogleMapsProvider("key")
        provider._geocoder = FakeGeocoder(None)
        assert provider.geocode("nowhere") is None

    def test_service_error_wrapped(self):
        provider = GoogleMapsProvider("key")
        provider._geocoder = FakeGeocoder(error=GeocoderQuotaExceeded("OVER_QUERY_LIMIT"))
        with pytest.raises(ProviderError):
            provider.geocode("Cluj")


class TestTextSearch:
    """Tests for GoogleMapsProvider.text_search."""

    def test_request_and_parsing(self):
        session = FakeSession(FakeResponse({
            "places": [
                {
                    "displayName": {"text": "Lidl"},
                    "formattedAddress": "Str. Fabricii 1, Cluj-Napoca",
                    "location": {"latitude": 46.78, "longitude": 23.62},
                },
                {"displayName": {"text": "No location"}},
            ],
            "nextPageToken": "abc",
        }))
        provider = GoogleMapsProvider("key", timeout=5, session=session)

        places, token = provider.text_search("lidl", ViewBounds(46.7, 23.5, 46.8, 23.7))

        assert token == "abc"
        assert len(places) == 1
        assert places[0].name == "Lidl"
        assert places[0].location == LatLng(46.78, 23.62)
        post = session.posts[0]
        assert post["url"] == PLACES_SEARCH_URL
        assert post["headers"]["X-Goog-Api-Key"] == "key"
        assert post["json"]["textQuery"] == "lidl"
        assert post["json"]["locationBias"]["rectangle"]["low"] == {"latitude": 46.7, "longitude": 23.5}
        assert "pageToken" not in post["json"]
        assert post["timeout"] == 5

    def test_page_token_sent_and_last_page(self):
        session = FakeSession(FakeResponse({}))
        provider = GoogleMapsProvider("key", session=session)

        places, token = provider.text_search("lidl", None, page_token="abc")

        assert places == []
        assert token is None
        assert session.posts[0]["json"]["pageToken"] == "abc"
        assert "locationBias" not in session.posts[0]["json"]

    def test_http_error_wrapped(self):
        provider = GoogleMapsProvider("key", session=FakeSession(FakeResponse({}, status=403)))
        with pytest.raises(ProviderError):
            provider.text_search("lidl", None)

    def test_distance(self):
        provider = GoogleMapsProvider("key", session=FakeSession())
        a, b = LatLng(46.77, 23.59), LatLng(46.78, 23.60)
        assert provider.distance(a, b) == provider.distance(b, a) > 0
