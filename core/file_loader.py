"""Billboard file loading utilities.

This module reads CSV files and Excel workbooks into candidate records, with
automatic header row detection and hyperlink extraction for the image/link
columns. It is UI-agnostic and can be used by both Streamlit and CLI
applications.
"""

import io
import logging
import re
from typing import Any, BinaryIO, Optional

import pandas as pd
from openpyxl import load_workbook
from openpyxl.cell.cell import Cell
from openpyxl.worksheet.worksheet import Worksheet

from .config import (
    CSV_EXTENSIONS,
    DEFAULT_ITEM_NAME,
    FIELD_ALIASES,
    HEADER_SEARCH_ROWS,
    HEADER_TOKENS,
    HYPERLINK_COLUMNS,
    IMAGE_COLUMNS,
    MSG_READ_ERROR,
    MSG_UNSUPPORTED_FORMAT,
    WORKBOOK_EXTENSIONS,
)
from .models import CandidateRecord, IngestResult, SheetSnapshot
from .text import is_blank, normalize_key, parse_coordinates, pick_field, text_or_none

logger = logging.getLogger(__name__)

HYPERLINK_FORMULA_RE = re.compile(r'HYPERLINK\(\s*"([^"]+)"', re.IGNORECASE)
HYPERLINK_LABEL_RE = re.compile(r'HYPERLINK\(\s*"[^"]*"\s*[,;]\s*"([^"]*)"', re.IGNORECASE)

_HEADER_TOKEN_KEYS = {normalize_key(t) for t in HEADER_TOKENS}


def detect_file_kind(filename: str) -> Optional[str]:
    """Return "csv", "workbook" or None for an unsupported extension."""
    lower = (filename or "").lower()
    if lower.endswith(CSV_EXTENSIONS):
        return "csv"
    if lower.endswith(WORKBOOK_EXTENSIONS):
        return "workbook"
    return None


def find_header_row(rows: list[list], max_rows: int = HEADER_SEARCH_ROWS) -> Optional[int]:
    """Find the header row by looking for a coordinate/location column name.

    Args:
        rows: Sheet values, row by row
        max_rows: Maximum rows to search

    Returns:
        0-indexed header row, or None if no row within max_rows qualifies
    """
    for idx, row in enumerate(rows[:max_rows]):
        if any(normalize_key(v) in _HEADER_TOKEN_KEYS for v in row if not is_blank(v)):
            return idx
    return None


def extract_hyperlink(cell: Optional[Cell], value: Any = None) -> str:
    """Extract a link target from a cell.

    Tried in order: the hyperlink target, the hyperlink location, a
    HYPERLINK(...) formula, and finally a literal value that contains a URL.

    Args:
        cell: Cell from a workbook loaded with formulas (may be None)
        value: Cached display value of the same cell

    Returns:
        The URL, or "" when the cell carries none
    """
    if cell is None:
        return ""
    link = cell.hyperlink
    if link is not None and link.target:
        return str(link.target)
    if link is not None and link.location:
        return str(link.location)
    raw = cell.value
    if isinstance(raw, str) and raw.startswith("=") and "HYPERLINK" in raw.upper():
        match = HYPERLINK_FORMULA_RE.search(raw)
        if match:
            return match.group(1)
    for candidate in (value, raw):
        if isinstance(candidate, str) and "http" in candidate and not candidate.startswith("="):
            return candidate.strip()
    return ""


def _is_formula(value: Any) -> bool:
    return isinstance(value, str) and value.startswith("=")


def _display_value(formula_cell: Cell, cached_value: Any) -> Any:
    """Visible text of a cell when there is no cached value.

    HYPERLINK formulas show their label (or URL). Other uncached formulas are
    kept as formula text so a re-export writes them back unchanged.
    """
    if cached_value is not None:
        return cached_value
    raw = formula_cell.value
    if _is_formula(raw):
        label = HYPERLINK_LABEL_RE.search(raw)
        if label:
            return label.group(1)
        url = HYPERLINK_FORMULA_RE.search(raw)
        if url:
            return url.group(1)
    return raw


def _find_link_columns(header: list) -> dict[str, int]:
    """Map each hyperlink column name to the first header containing it."""
    found: dict[str, int] = {}
    normalized = [normalize_key(h) for h in header]
    for name in HYPERLINK_COLUMNS:
        key = normalize_key(name)
        for idx, h in enumerate(normalized):
            if h and key in h:
                found[name] = idx
                break
    return found


def _row_to_dict(header: list, row: list) -> dict:
    """Header-keyed record; unnamed and repeated headers are dropped."""
    record: dict = {}
    for idx, name in enumerate(header):
        if is_blank(name):
            continue
        key = str(name).strip()
        if key in record:
            continue
        record[key] = row[idx] if idx < len(row) else None
    return record


def build_record(
    row: dict,
    row_index: int,
    images: Optional[list[str]] = None,
) -> CandidateRecord:
    """Map a header-keyed row to a CandidateRecord using the alias table.

    Args:
        row: Header-keyed values
        row_index: 0-based index of the row among the data rows
        images: Links already extracted for the image columns; when None the
            image aliases are read from the row values instead

    Returns:
        CandidateRecord (coordinates not yet validated)
    """
    if images is None:
        images = [text_or_none(pick_field(row, FIELD_ALIASES[f"image_{n}"])) or "" for n in (1, 2, 3)]

    return CandidateRecord(
        name=text_or_none(pick_field(row, FIELD_ALIASES["name"])) or DEFAULT_ITEM_NAME,
        lat_raw=pick_field(row, FIELD_ALIASES["lat"]),
        lng_raw=pick_field(row, FIELD_ALIASES["lng"]),
        address=text_or_none(pick_field(row, FIELD_ALIASES["address"])),
        location_text=text_or_none(pick_field(row, FIELD_ALIASES["location_text"])),
        space_id=text_or_none(pick_field(row, FIELD_ALIASES["space_id"])),
        images=list(images),
        periods_available=text_or_none(pick_field(row, FIELD_ALIASES["periods"])),
        row_index=row_index,
    )


def has_coordinates(record: CandidateRecord) -> bool:
    """Whether the raw coordinates parse to a valid latitude/longitude pair."""
    return parse_coordinates(record.lat_raw, record.lng_raw) is not None


def is_usable(record: CandidateRecord) -> bool:
    """A record can become an item if it has coordinates or an address to geocode."""
    return has_coordinates(record) or bool(record.address)


def _keep_usable(records: list[CandidateRecord]) -> tuple[list[CandidateRecord], int]:
    kept = [r for r in records if is_usable(r)]
    return kept, len(records) - len(kept)


def read_csv_records(file: BinaryIO) -> IngestResult:
    """Read a comma-delimited file whose first line is the header."""
    try:
        df = pd.read_csv(
            file,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        logger.warning("CSV read failed: %s", e)
        return IngestResult(error=MSG_READ_ERROR.format(error=e))

    records = []
    for idx, row in enumerate(df.to_dict("records")):
        if all(is_blank(v) for v in row.values()):
            continue
        records.append(build_record(row, idx))

    kept, skipped = _keep_usable(records)
    logger.debug("CSV: %d records, %d skipped", len(kept), skipped)
    return IngestResult(records=kept, skipped_rows=skipped, header_row=0)


def _sheet_values(ws_formulas: Worksheet, ws_values: Worksheet) -> list[list]:
    """All visible cell values of a sheet as a rectangular grid."""
    width = ws_formulas.max_column
    grid = []
    formula_rows = ws_formulas.iter_rows(min_row=1, max_row=ws_formulas.max_row, max_col=width)
    value_rows = ws_values.iter_rows(
        min_row=1, max_row=ws_formulas.max_row, max_col=width, values_only=True
    )
    for formula_row, value_row in zip(formula_rows, value_rows):
        grid.append([_display_value(c, v) for c, v in zip(formula_row, value_row)])
    return grid


def _trim_grid(grid: list[list]) -> list[list]:
    """Drop trailing blank rows and trailing blank columns.

    Cells openpyxl reports inside the used range but holding nothing
    (formatting only) do not count towards the extent.
    """
    rows = list(grid)
    while rows and all(is_blank(v) for v in rows[-1]):
        rows.pop()
    width = 0
    for row in rows:
        for idx in range(len(row) - 1, -1, -1):
            if not is_blank(row[idx]):
                width = max(width, idx + 1)
                break
    return [row[:width] + [None] * (width - len(row[:width])) for row in rows]


def read_workbook_records(file: BinaryIO) -> IngestResult:
    """Read the first sheet of an Excel workbook.

    This function:
    1. Finds the header row within the first rows (falls back to row 0)
    2. Reads the data rows below it as header-keyed records
    3. Extracts hyperlinks for the image, sketch and street view columns
    4. Keeps the grid from the header row down for re-export

    The kept grid drops trailing blank rows and trailing blank columns, so
    its extent (and that of a re-export) ends at the last non-blank row and
    column, not at the workbook's stored used range. Formulas without a
    cached value stay as formula text in the grid but read as empty fields.
    """
    try:
        file.seek(0)
        data = file.read()
        wb_formulas = load_workbook(io.BytesIO(data))
        wb_values = load_workbook(io.BytesIO(data), data_only=True)
    except Exception as e:
        logger.warning("Workbook read failed: %s", e)
        return IngestResult(error=MSG_READ_ERROR.format(error=e))

    ws_formulas = wb_formulas.worksheets[0]
    ws_values = wb_values.worksheets[0]
    grid = _sheet_values(ws_formulas, ws_values)

    header_row = find_header_row(grid)
    if header_row is None:
        logger.debug("No header row found in first %d rows, using row 0", HEADER_SEARCH_ROWS)
        header_row = 0

    sheet = SheetSnapshot(rows=_trim_grid(grid[header_row:]), header_row=header_row)
    if not sheet.rows:
        return IngestResult(header_row=header_row, sheet=sheet)

    header = sheet.rows[0]
    link_columns = _find_link_columns(header)

    records = []
    for data_idx, values in enumerate(sheet.rows[1:]):
        if all(is_blank(v) for v in values):
            continue
        grid_row = data_idx + 1
        excel_row = header_row + grid_row + 1   # 1-indexed in openpyxl
        links: dict[str, str] = {}
        for col_name, col_idx in link_columns.items():
            cell = ws_formulas.cell(row=excel_row, column=col_idx + 1)
            url = extract_hyperlink(cell, values[col_idx])
            links[col_name] = url
            if url:
                sheet.hyperlinks[(grid_row, col_idx)] = url
        images = [links.get(col, "") for col in IMAGE_COLUMNS]
        fields = [None if _is_formula(v) else v for v in values]
        records.append(build_record(_row_to_dict(header, fields), data_idx, images=images))

    kept, skipped = _keep_usable(records)
    logger.debug(
        "Workbook: header at row %d, %d records, %d skipped, %d hyperlinks",
        header_row, len(kept), skipped, len(sheet.hyperlinks),
    )
    return IngestResult(records=kept, skipped_rows=skipped, header_row=header_row, sheet=sheet)


def ingest_file(file: BinaryIO, filename: str) -> IngestResult:
    """Read a CSV or workbook into candidate records.

    Never raises for bad content: unsupported extensions and unreadable files
    come back as IngestResult.error, unusable rows are counted in
    skipped_rows.
    """
    kind = detect_file_kind(filename)
    if kind is None:
        logger.info("Rejected unsupported file %s", filename)
        return IngestResult(error=MSG_UNSUPPORTED_FORMAT)
    if kind == "csv":
        file.seek(0)
        return read_csv_records(file)
    return read_workbook_records(file)
