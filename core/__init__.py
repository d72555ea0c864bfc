"""Core module for billboard map logic."""

from .models import (
    LatLng,
    ViewBounds,
    CandidateRecord,
    InventoryItem,
    OriginKind,
    ReferencePoint,
    RadiusCircle,
    Place,
    AvailabilityPeriod,
    SheetSnapshot,
    IngestResult,
    ResolveResult,
    ExportResult,
    MapConfig,
)
from .text import (
    normalize_key,
    pick_field,
    parse_loose_number,
)
from .file_loader import (
    detect_file_kind,
    find_header_row,
    extract_hyperlink,
    ingest_file,
)
from .filters import (
    parse_periods,
    parse_query_date,
    is_available,
    filter_available,
)
from .provider import (
    MappingProvider,
    GoogleMapsProvider,
    ProviderError,
    surface_distance,
)
from .geocoding import GeocodingResolver
from .places import search_places
from .proximity import ProximityEngine, ProximitySummary, format_distance
from .debounce import Debouncer
from .exporter import (
    build_sheet,
    export_in_range,
    export_grouped,
    reexport_sheet,
    template_csv,
    sanitize_filename,
)
from .session import MapSession

__all__ = [
    # Models
    "LatLng",
    "ViewBounds",
    "CandidateRecord",
    "InventoryItem",
    "OriginKind",
    "ReferencePoint",
    "RadiusCircle",
    "Place",
    "AvailabilityPeriod",
    "SheetSnapshot",
    "IngestResult",
    "ResolveResult",
    "ExportResult",
    "MapConfig",
    # Text
    "normalize_key",
    "pick_field",
    "parse_loose_number",
    # File loader
    "detect_file_kind",
    "find_header_row",
    "extract_hyperlink",
    "ingest_file",
    # Availability
    "parse_periods",
    "parse_query_date",
    "is_available",
    "filter_available",
    # Provider
    "MappingProvider",
    "GoogleMapsProvider",
    "ProviderError",
    "surface_distance",
    # Engines
    "GeocodingResolver",
    "search_places",
    "ProximityEngine",
    "ProximitySummary",
    "format_distance",
    "Debouncer",
    # Export
    "build_sheet",
    "export_in_range",
    "export_grouped",
    "reexport_sheet",
    "template_csv",
    "sanitize_filename",
    # Session
    "MapSession",
]
