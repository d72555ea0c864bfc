"""Excel/CSV export - in-range lists, grouped nearby places, and re-export of the imported sheet."""

import io
import logging
import re
from typing import Iterable, Optional, Sequence

import pandas as pd
from openpyxl import Workbook

from .config import (
    EXPORT_EXTENSION,
    EXPORT_SHEET_NAME,
    GROUP_COLUMNS,
    GROUP_MARKER,
    GROUPED_EXPORT_FILENAME,
    IN_RANGE_HEADER,
    TEMPLATE_FILENAME,
    TEMPLATE_ROWS,
)
from .models import ExportResult, InventoryItem, Place, ReferencePoint, SheetSnapshot
from .proximity import ProximityEngine
from .text import is_blank

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_RE = re.compile(r"[^a-zA-Z0-9]")


def sanitize_filename(name: str) -> str:
    """Replace every character outside [a-zA-Z0-9] with "_"."""
    return _UNSAFE_FILENAME_RE.sub("_", name or "")


def ensure_xlsx_extension(filename: str) -> str:
    return filename if filename.endswith(EXPORT_EXTENSION) else f"{filename}{EXPORT_EXTENSION}"


def hyperlink_formula(url: str, text: str) -> str:
    """Spreadsheet HYPERLINK formula; double quotes are escaped by doubling."""
    safe_url = url.replace('"', '""')
    safe_text = str(text).replace('"', '""')
    return f'=HYPERLINK("{safe_url}","{safe_text}")'


def _workbook_bytes(wb: Workbook) -> bytes:
    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def build_sheet(rows: Sequence[Sequence]) -> bytes:
    """Create a one-sheet workbook from plain rows (first row is usually a header).

    Args:
        rows: Row values; rows may have different lengths

    Returns:
        Excel file bytes
    """
    wb = Workbook()
    ws = wb.active
    ws.title = EXPORT_SHEET_NAME
    for row in rows:
        ws.append(list(row))
    return _workbook_bytes(wb)


def in_range_rows(items: Iterable[InventoryItem]) -> list[list]:
    """Header plus one row per in-range item, distance rounded to meters."""
    rows: list[list] = [list(IN_RANGE_HEADER)]
    for item in items:
        if not item.in_range:
            continue
        distance = round(item.distance_meters) if item.distance_meters else 0
        rows.append([
            item.name or "Panou",
            item.label or "N/A",
            item.lat,
            item.lng,
            distance,
            "Da",
        ])
    return rows


def export_in_range(items: Iterable[InventoryItem], reference: ReferencePoint) -> ExportResult:
    """Workbook of the items inside the radius of a store reference."""
    rows = in_range_rows(items)
    filename = ensure_xlsx_extension(f"panouri_in_radius_{sanitize_filename(reference.name)}")
    return ExportResult(filename=filename, data=build_sheet(rows), row_count=len(rows) - 1)


def grouped_rows(
    selected: Sequence[InventoryItem],
    places: Sequence[Place],
    engine: ProximityEngine,
) -> list[list]:
    """For each selected item: a group row, a column header row, then its nearby places.

    Groups are separated by a blank row; there is no blank row after the last one.
    """
    rows: list[list] = []
    for idx, item in enumerate(selected):
        rows.append([GROUP_MARKER, item.name, item.lat, item.lng])
        rows.append(list(GROUP_COLUMNS))
        for place, distance in engine.nearby_places(item.location, places):
            rows.append([
                place.name or "Loc",
                place.address or "",
                place.location.lat,
                place.location.lng,
                round(distance),
            ])
        if idx != len(selected) - 1:
            rows.append([""])
    return rows


def export_grouped(
    selected: Sequence[InventoryItem],
    places: Sequence[Place],
    engine: ProximityEngine,
) -> ExportResult:
    rows = grouped_rows(selected, places, engine)
    return ExportResult(filename=GROUPED_EXPORT_FILENAME, data=build_sheet(rows), row_count=len(rows))


def reexport_sheet(sheet: SheetSnapshot, filename: str) -> ExportResult:
    """Write the imported sheet back out with hyperlinks restored as formulas.

    Every cell keeps its imported value, except cells with an extracted link,
    which become HYPERLINK(url, visible text). The grid extent is unchanged.

    Args:
        sheet: Snapshot taken at import time
        filename: Output name (".xlsx" appended if missing)

    Returns:
        ExportResult with the workbook bytes
    """
    wb = Workbook()
    ws = wb.active
    ws.title = EXPORT_SHEET_NAME
    width = sheet.column_count
    for row in sheet.rows:
        ws.append(list(row) + [None] * (width - len(row)))

    written = 0
    for (row_idx, col_idx), url in sheet.hyperlinks.items():
        if not url:
            continue
        value = sheet.rows[row_idx][col_idx] if col_idx < len(sheet.rows[row_idx]) else None
        text = url if is_blank(value) else value
        ws.cell(row=row_idx + 1, column=col_idx + 1).value = hyperlink_formula(url, text)
        written += 1

    logger.debug("Re-export: %d rows, %d hyperlinks", sheet.row_count, written)
    return ExportResult(
        filename=ensure_xlsx_extension(filename),
        data=_workbook_bytes(wb),
        row_count=max(sheet.row_count - 1, 0),
    )


def template_csv() -> ExportResult:
    """The 4-column CSV template with two example rows."""
    df = pd.DataFrame(TEMPLATE_ROWS[1:], columns=TEMPLATE_ROWS[0])
    data = df.to_csv(index=False, lineterminator="\n").encode("utf-8")
    return ExportResult(filename=TEMPLATE_FILENAME, data=data, row_count=len(df))


def items_dataframe(items: Iterable[InventoryItem], visibility: Optional[dict[str, bool]] = None) -> pd.DataFrame:
    """Inventory as a DataFrame for on-screen tables."""
    records = []
    for item in items:
        records.append({
            "ID": item.space_id or item.id,
            "Denumire": item.name,
            "Locație": item.label or "N/A",
            "Latitudine": round(item.lat, 6),
            "Longitudine": round(item.lng, 6),
            "Distanță (m)": round(item.distance_meters) if item.distance_meters is not None else None,
            "În radius": item.in_range,
            "Perioade disponibile": item.periods_available or "",
            "Vizibil": visibility.get(item.id, True) if visibility is not None else True,
        })
    return pd.DataFrame(records)
