"""Header/field name normalization and lenient number parsing."""

import math
import re
from typing import Any, Iterable, Mapping, Optional

# Romanian diacritics (comma and cedilla forms) folded to base letters
_DIACRITICS = str.maketrans({
    "ă": "a", "â": "a",
    "î": "i",
    "ș": "s", "ş": "s",
    "ț": "t", "ţ": "t",
})

_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")


def normalize_key(raw: Any) -> str:
    """Comparison key for header and column names.

    Lower-cases, drops all whitespace and folds diacritics:
    "Latitudine" -> "latitudine", "Perioade  Disponibile" -> "perioadedisponibile",
    "Locație" -> "locatie".
    """
    if raw is None:
        return ""
    key = str(raw).lower()
    key = _WHITESPACE_RE.sub("", key)
    return key.translate(_DIACRITICS)


def is_blank(value: Any) -> bool:
    """True for None, NaN and strings that are empty after trimming."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return str(value).strip() == ""


def pick_field(record: Mapping[Any, Any], candidates: Iterable[str]) -> Optional[Any]:
    """Return the value of the first candidate column present and non-blank.

    Candidates are tried in the order given; the record is indexed by
    normalized key once.
    """
    index = {normalize_key(k): v for k, v in (record or {}).items()}
    for candidate in candidates:
        key = normalize_key(candidate)
        if key in index and not is_blank(index[key]):
            return index[key]
    return None


def parse_loose_number(raw: Any) -> float:
    """Parse numbers like " 46,7704 ", "46.77°N" or 46.77.

    Returns NaN instead of raising, so callers test with math.isfinite.
    """
    if raw is None or isinstance(raw, bool):
        return math.nan
    if isinstance(raw, (int, float)):
        return float(raw)
    text = _WHITESPACE_RE.sub("", str(raw)).replace(",", ".")
    match = _NUMBER_RE.search(text)
    return float(match.group(0)) if match else math.nan


def parse_coordinates(lat_raw: Any, lng_raw: Any) -> Optional[tuple[float, float]]:
    """Parse a lat/lng pair; None unless both are finite and within [-90, 90] / [-180, 180].

    Swapped pairs and typos like "123.5" for a latitude come back as None,
    so the row is treated as having no coordinates.
    """
    lat = parse_loose_number(lat_raw)
    lng = parse_loose_number(lng_raw)
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    if abs(lat) > 90 or abs(lng) > 180:
        return None
    return lat, lng


def text_or_none(value: Any) -> Optional[str]:
    """Trimmed string form of a cell value, None when blank."""
    if is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()
