"""Data models for the billboard map."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional
import uuid

from .config import DEFAULT_RADIUS


def new_item_id() -> str:
    """Return a fresh opaque item id. Ids are never reused within a process."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class LatLng:
    """A coordinate in decimal degrees."""
    lat: float
    lng: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.lat, self.lng)


@dataclass(frozen=True)
class ViewBounds:
    """Rectangular viewport used to bias place searches."""
    south: float
    west: float
    north: float
    east: float

    @property
    def center(self) -> LatLng:
        return LatLng((self.south + self.north) / 2, (self.west + self.east) / 2)


@dataclass
class CandidateRecord:
    """A spreadsheet row mapped to logical fields, before coordinates are resolved."""
    name: str
    lat_raw: object = None
    lng_raw: object = None
    address: Optional[str] = None
    location_text: Optional[str] = None
    space_id: Optional[str] = None
    images: list[str] = field(default_factory=list)
    periods_available: Optional[str] = None
    row_index: int = 0     # 0-based position in the data rows of the source sheet


@dataclass(frozen=True)
class InventoryItem:
    """A geocoded billboard.

    distance_meters and in_range are derived by the proximity engine and are
    replaced, never edited, on every recomputation.
    """
    id: str
    name: str
    lat: float
    lng: float
    address: Optional[str] = None
    location_text: Optional[str] = None
    space_id: Optional[str] = None
    images: tuple[str, ...] = ()
    periods_available: Optional[str] = None
    distance_meters: Optional[float] = None
    in_range: bool = False

    @property
    def location(self) -> LatLng:
        return LatLng(self.lat, self.lng)

    @property
    def label(self) -> str:
        """Human readable place: location label, else address."""
        return self.location_text or self.address or ""


class OriginKind(str, Enum):
    """Where the primary reference came from."""
    STORE = "store"
    ITEM = "item"


@dataclass(frozen=True)
class ReferencePoint:
    """The single active distance origin."""
    name: str
    location: LatLng
    origin: OriginKind = OriginKind.STORE


@dataclass(frozen=True)
class RadiusCircle:
    """A radius circle to draw. owner_id is None for the primary reference circle."""
    center: LatLng
    radius: float
    owner_id: Optional[str] = None

    @property
    def is_peek(self) -> bool:
        return self.owner_id is not None


@dataclass(frozen=True)
class Place:
    """A point of interest returned by a text search."""
    name: str
    location: LatLng
    address: str = ""


@dataclass(frozen=True)
class AvailabilityPeriod:
    """A closed date interval [start, end] parsed from an availability text."""
    start: date
    end: date

    def overlaps(self, query_start: date, query_end: date) -> bool:
        """Closed-interval overlap with the query window."""
        return self.start <= query_end and self.end >= query_start


@dataclass
class SheetSnapshot:
    """The imported worksheet grid from the header row down, kept for re-export.

    hyperlinks maps (row, column) in grid coordinates to the extracted URL.
    """
    rows: list[list] = field(default_factory=list)
    hyperlinks: dict[tuple[int, int], str] = field(default_factory=dict)
    header_row: int = 0    # 0-based row of the header in the source sheet

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return max((len(r) for r in self.rows), default=0)


@dataclass
class IngestResult:
    """Outcome of reading one file."""
    records: list[CandidateRecord] = field(default_factory=list)
    skipped_rows: int = 0
    header_row: Optional[int] = None
    sheet: Optional[SheetSnapshot] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ResolveResult:
    """Outcome of coordinate resolution for a batch of candidate records."""
    items: list[InventoryItem] = field(default_factory=list)
    dropped: int = 0
    geocoded: int = 0
    failures: list[str] = field(default_factory=list)
    cancelled: bool = False


@dataclass
class ExportResult:
    """A generated file ready for download."""
    filename: str
    data: bytes
    row_count: int = 0

    @property
    def mime(self) -> str:
        if self.filename.endswith(".csv"):
            return "text/csv"
        if self.filename.endswith(".json"):
            return "application/json"
        return "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass
class MapConfig:
    """Operator settings for a map session."""
    radius: float = DEFAULT_RADIUS
    show_only_in_range: bool = False
    keep_existing_places: bool = True

    def to_dict(self) -> dict:
        """Convert config to dictionary for JSON export."""
        return {
            "radius": self.radius,
            "show_only_in_range": self.show_only_in_range,
            "keep_existing_places": self.keep_existing_places,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MapConfig":
        """Create config from dictionary (JSON import)."""
        return cls(
            radius=max(0, float(data.get("radius", DEFAULT_RADIUS))),
            show_only_in_range=bool(data.get("show_only_in_range", False)),
            keep_existing_places=bool(data.get("keep_existing_places", True)),
        )
