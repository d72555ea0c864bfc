"""Shared fixtures for billboard map tests."""

import io
from typing import Optional

import pytest
from openpyxl import Workbook

from core.models import InventoryItem, LatLng, MapConfig, Place, ViewBounds
from core.provider import surface_distance
from core.session import MapSession

# Cluj-Napoca, Piața Unirii
CENTER = LatLng(46.769379, 23.589954)

HEADER = [
    "Spatiu ID", "Locatie", "Latitudine", "Longitudine",
    "Imagini 1", "Imagini 2", "Imagini 3", "Schita", "StreetView",
    "Perioade Disponibile",
]


class StubProvider:
    """MappingProvider that answers from fixed tables and records calls."""

    def __init__(
        self,
        geocodes: Optional[dict] = None,
        pages: Optional[list] = None,
        fail_on: Optional[set] = None,
    ):
        self.geocodes = geocodes or {}
        self.pages = pages or []
        self.fail_on = fail_on or set()
        self.geocode_calls: list[str] = []
        self.search_calls: list[tuple] = []

    def geocode(self, address: str) -> Optional[LatLng]:
        from core.provider import ProviderError

        self.geocode_calls.append(address)
        if address in self.fail_on:
            raise ProviderError("REQUEST_DENIED")
        return self.geocodes.get(address)

    def text_search(self, query: str, bounds: Optional[ViewBounds], page_token: Optional[str] = None):
        self.search_calls.append((query, bounds, page_token))
        index = int(page_token) if page_token else 0
        places = self.pages[index] if index < len(self.pages) else []
        next_token = str(index + 1) if index + 1 < len(self.pages) else None
        return places, next_token

    def distance(self, a: LatLng, b: LatLng) -> float:
        return surface_distance(a, b)


@pytest.fixture
def stub_provider():
    return StubProvider()


@pytest.fixture
def session(stub_provider):
    return MapSession(MapConfig(radius=1000), stub_provider)


def offset(point: LatLng, north_m: float = 0.0, east_m: float = 0.0) -> LatLng:
    """A point roughly north_m / east_m meters away (small offsets only)."""
    import math

    dlat = north_m / 111320.0
    dlng = east_m / (111320.0 * math.cos(math.radians(point.lat)))
    return LatLng(point.lat + dlat, point.lng + dlng)


def make_item(name: str, location: LatLng, periods: Optional[str] = None, item_id: Optional[str] = None) -> InventoryItem:
    """Helper to create an InventoryItem."""
    return InventoryItem(
        id=item_id or name,
        name=name,
        lat=location.lat,
        lng=location.lng,
        periods_available=periods,
    )


def make_place(name: str, location: LatLng, address: str = "") -> Place:
    return Place(name=name, location=location, address=address)


def make_workbook(
    rows: list[list],
    title_rows: Optional[list[list]] = None,
    links: Optional[dict[tuple[int, int], str]] = None,
) -> io.BytesIO:
    """Create an in-memory workbook.

    Args:
        rows: Header row followed by data rows
        title_rows: Rows written above the header (titles, blanks)
        links: (row, column) -> URL, 0-indexed within `rows`, set as cell hyperlinks

    Returns:
        BytesIO positioned at the start
    """
    wb = Workbook()
    ws = wb.active
    offset_rows = 0
    for title in title_rows or []:
        offset_rows += 1
        for col, value in enumerate(title, 1):
            ws.cell(row=offset_rows, column=col, value=value)
    for r, row in enumerate(rows):
        for c, value in enumerate(row):
            if value is not None:
                ws.cell(row=offset_rows + r + 1, column=c + 1, value=value)
    for (r, c), url in (links or {}).items():
        ws.cell(row=offset_rows + r + 1, column=c + 1).hyperlink = url

    buffer = io.BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer


def make_csv(text: str) -> io.BytesIO:
    return io.BytesIO(text.encode("utf-8"))
