#!/usr/bin/env python3
"""
Export the billboards within a radius of a point

- Loads a CSV or Excel file (header row detected automatically)
- Geocodes address-only rows if GOOGLE_MAPS_API_KEY is set, otherwise drops them
- Measures every billboard against the given point
- Writes the in-radius billboards to an Excel file
"""

import os
from pathlib import Path

from config import RADIUS, REFERENCE_NAME, OUTPUT_DIR
from core.config import API_KEY_ENV_VAR
from core.models import LatLng, MapConfig
from core.provider import GoogleMapsProvider
from core.session import MapSession


def export_in_radius(input_file: str, lat: float, lng: float, radius: float = RADIUS):
    """
    Main export function

    Args:
        input_file: Path to the CSV/Excel file
        lat: Latitude of the reference point
        lng: Longitude of the reference point
        radius: Radius in meters
    """
    api_key = os.environ.get(API_KEY_ENV_VAR, "")
    provider = GoogleMapsProvider(api_key) if api_key else None
    if provider is None:
        print(f"{API_KEY_ENV_VAR} not set: rows without coordinates will be skipped")

    session = MapSession(MapConfig(radius=radius), provider)

    print(f"Loading {input_file}...")

    def on_progress(index, total, address):
        print(f"  Geocoding {index}/{total}: {address}")

    with open(input_file, "rb") as f:
        status = session.ingest(f, Path(input_file).name, on_progress=on_progress)
    if status:
        print(status)
    if not session.items:
        return None

    session.set_store_reference(REFERENCE_NAME, LatLng(lat, lng))
    summary = session.summary()
    print(f"Billboards loaded: {summary.total}")
    print(f"Within {radius:.0f} m: {summary.in_range}")

    result, notice = session.export_in_range()
    if notice:
        print(notice)
        return None

    output_path = Path(OUTPUT_DIR)
    output_path.mkdir(exist_ok=True)
    filepath = output_path / result.filename
    filepath.write_bytes(result.data)

    # Summary
    print(f"\n=== Summary ===")
    print(f"Created: {filepath} ({result.row_count} billboards)")
    if summary.nearest is not None:
        print(f"Nearest: {summary.nearest.name} ({summary.nearest.distance_meters:.0f} m)")

    return filepath

if __name__ == "__main__":
    import sys

    if len(sys.argv) < 4:
        print("Usage: python export_in_radius.py <input_file> <lat> <lng> [radius_m]")
        print(f"  radius_m defaults to {RADIUS}")
        sys.exit(1)

    input_file = sys.argv[1]
    try:
        lat = float(sys.argv[2])
        lng = float(sys.argv[3])
        radius = float(sys.argv[4]) if len(sys.argv) > 4 else RADIUS
    except ValueError:
        print("Error: lat, lng and radius must be numbers")
        sys.exit(1)

    export_in_radius(input_file, lat, lng, radius)
