"""Coordinate resolution for candidate records."""

import logging
from collections import deque
from typing import Callable, Iterable, Optional

from .models import CandidateRecord, InventoryItem, LatLng, ResolveResult, new_item_id
from .provider import MappingProvider, ProviderError
from .text import parse_coordinates

logger = logging.getLogger(__name__)

# on_progress(index, total, address): index is 1-based over all records
ProgressCallback = Callable[[int, int, str], None]


def to_item(record: CandidateRecord, location: LatLng) -> InventoryItem:
    """Create an InventoryItem with a fresh id at the given location."""
    return InventoryItem(
        id=new_item_id(),
        name=record.name or record.address or f"Panou {record.row_index + 1}",
        lat=location.lat,
        lng=location.lng,
        address=record.address,
        location_text=record.location_text,
        space_id=record.space_id,
        images=tuple(record.images),
        periods_available=record.periods_available,
    )


class GeocodingResolver:
    """Turns candidate records into inventory items, geocoding addresses one at a time.

    Records are consumed in input order from a queue; a geocode request is
    only issued after the previous one has returned, so at most one request
    is ever in flight. A failed lookup drops that record and the batch
    carries on.
    """

    def __init__(
        self,
        provider: Optional[MappingProvider],
        on_progress: Optional[ProgressCallback] = None,
        is_current: Optional[Callable[[], bool]] = None,
    ):
        self.provider = provider
        self.on_progress = on_progress
        # Returns False once the caller no longer wants the result
        self.is_current = is_current or (lambda: True)

    def _geocode(self, address: str) -> Optional[LatLng]:
        if self.provider is None:
            return None
        try:
            return self.provider.geocode(address)
        except ProviderError as e:
            logger.warning("Geocoding failed for %r: %s", address, e)
            return None

    def resolve(self, records: Iterable[CandidateRecord]) -> ResolveResult:
        queue = deque(records)
        total = len(queue)
        result = ResolveResult()
        index = 0

        while queue:
            record = queue.popleft()
            index += 1
            coords = parse_coordinates(record.lat_raw, record.lng_raw)
            location: Optional[LatLng] = None

            if coords is not None:
                location = LatLng(*coords)
            elif record.address:
                if self.on_progress:
                    self.on_progress(index, total, record.address)
                location = self._geocode(record.address)
                if not self.is_current():
                    logger.info("Geocoding batch discarded after %d/%d records", index, total)
                    return ResolveResult(cancelled=True)
                if location is None:
                    result.failures.append(record.address)
                else:
                    result.geocoded += 1

            if location is None:
                result.dropped += 1
                continue
            result.items.append(to_item(record, location))

        logger.debug(
            "Resolved %d items (%d geocoded, %d dropped)",
            len(result.items), result.geocoded, result.dropped,
        )
        return result
