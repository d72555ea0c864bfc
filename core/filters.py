"""Availability filtering.

This module parses the free-text availability column into date periods and
filters items by overlap with a requested date window.
It is UI-agnostic and can be used by both Streamlit and CLI applications.
"""

import logging
import re
from datetime import date, datetime
from typing import Iterable, Optional

from .config import CENTURY_PREFIX, PERIOD_DELIMITER, PERIOD_PATTERN
from .models import AvailabilityPeriod, InventoryItem

logger = logging.getLogger(__name__)

_PERIOD_RE = re.compile(PERIOD_PATTERN)


def parse_short_date(text: str) -> date:
    """Parse DD/MM/YY with the fixed century: "01/10/25" -> 2025-10-01.

    Raises:
        ValueError: if the date does not exist (e.g. 31/02/25)
    """
    day, month, year = text.split("/")
    return datetime.strptime(f"{day}/{month}/{CENTURY_PREFIX}{year}", "%d/%m/%Y").date()


def parse_periods(text: Optional[str]) -> list[AvailabilityPeriod]:
    """Extract all availability periods from a cell.

    Example: "Disponibil: 01/10/25 : 15/10/25; Disponibil: 01/12/25 : 31/12/25"
    -> two periods. Tokens that do not match the pattern, or name impossible
    dates, are ignored.

    Args:
        text: Value of the availability column

    Returns:
        Periods in the order they appear
    """
    if not text:
        return []

    periods = []
    for token in str(text).split(PERIOD_DELIMITER):
        match = _PERIOD_RE.search(token.strip())
        if not match:
            continue
        try:
            start = parse_short_date(match.group(1))
            end = parse_short_date(match.group(2))
        except ValueError:
            logger.debug("Ignoring period with invalid date: %r", token)
            continue
        periods.append(AvailabilityPeriod(start=start, end=end))
    return periods


def parse_query_date(value) -> Optional[date]:
    """Accept a date, an ISO string (2025-10-10) or DD/MM/YYYY; None if empty or invalid."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    for fmt in ("%Y-%m-%d", "%d/%m/%Y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def is_available(item: InventoryItem, start: date, end: date) -> bool:
    """Whether any declared period of the item overlaps [start, end]."""
    return any(p.overlaps(start, end) for p in parse_periods(item.periods_available))


def filter_available(
    items: Iterable[InventoryItem],
    start: Optional[date],
    end: Optional[date],
) -> list[InventoryItem]:
    """Items available somewhere in the window.

    Args:
        items: Inventory items
        start: First day of the window (None -> empty result)
        end: Last day of the window (None -> empty result)

    Returns:
        Matching items in input order; the inputs are not modified
    """
    if start is None or end is None:
        return []
    return [item for item in items if is_available(item, start, end)]
