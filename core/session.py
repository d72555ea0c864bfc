"""Map session - owns the inventory, reference, search results and filters for one operator.

Every mutation replaces a whole collection (items, places, peek circles), so
a reader always sees either the old or the new snapshot.
"""

import json
import logging
from datetime import date
from pathlib import PurePath
from typing import BinaryIO, Optional

from .config import (
    DEBOUNCE_DELAY,
    MSG_EMPTY_QUERY,
    MSG_GEOCODING,
    MSG_INVALID_SETTINGS,
    MSG_NO_AVAILABLE_ITEMS,
    MSG_NO_ITEMS_IN_RANGE,
    MSG_NO_ORIGINAL_SHEET,
    MSG_NO_PEEK_CIRCLES,
    MSG_NO_SEARCH_RESULTS,
    MSG_NO_STORE_REFERENCE,
    MSG_NO_VALID_ROWS,
    MSG_PROCESSING,
    MSG_PROVIDER_ERROR,
    MSG_ROWS_SKIPPED,
    SETTINGS_FILENAME,
)
from .debounce import Debouncer
from .exporter import export_grouped, export_in_range, reexport_sheet, sanitize_filename, template_csv
from .file_loader import ingest_file
from .filters import filter_available
from .geocoding import GeocodingResolver, ProgressCallback
from .models import (
    ExportResult,
    InventoryItem,
    LatLng,
    MapConfig,
    OriginKind,
    Place,
    SheetSnapshot,
    ViewBounds,
)
from .places import search_places
from .provider import MappingProvider, ProviderError, surface_distance
from .proximity import ProximityEngine, ProximitySummary

logger = logging.getLogger(__name__)


class MapSession:
    """Single coordinating context for the billboard map."""

    def __init__(
        self,
        config: Optional[MapConfig] = None,
        provider: Optional[MappingProvider] = None,
        search_delay: float = DEBOUNCE_DELAY,
    ):
        self.config = config or MapConfig()
        self.provider = provider
        distance = provider.distance if provider is not None else surface_distance
        self.engine = ProximityEngine(
            radius=self.config.radius,
            show_only_in_range=self.config.show_only_in_range,
            distance=distance,
        )
        self.items: tuple[InventoryItem, ...] = ()
        self.places: tuple[Place, ...] = ()
        self.sheet: Optional[SheetSnapshot] = None
        self.sheet_name: str = ""
        self.window: tuple[Optional[date], Optional[date]] = (None, None)
        self.show_only_available = False
        self.status = ""
        self._inventory_epoch = 0
        self._search_epoch = 0
        self._pending_search: Optional[tuple[str, Optional[ViewBounds]]] = None
        self._search_debouncer = Debouncer(self._run_scheduled_search, search_delay)

    # --- inventory ---------------------------------------------------------

    def item(self, item_id: str) -> Optional[InventoryItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def ingest(
        self,
        file: BinaryIO,
        filename: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        """Read a file, geocode rows lacking coordinates and add the items.

        Returns:
            Status text ("" when everything was imported)
        """
        self.status = MSG_PROCESSING
        result = ingest_file(file, filename)
        if not result.ok:
            self.status = result.error
            return self.status

        epoch = self._inventory_epoch

        def report(index: int, total: int, address: str) -> None:
            self.status = MSG_GEOCODING.format(address=address, index=index, total=total)
            if on_progress:
                on_progress(index, total, address)

        resolver = GeocodingResolver(
            self.provider,
            on_progress=report,
            is_current=lambda: self._inventory_epoch == epoch,
        )
        resolved = resolver.resolve(result.records)
        if resolved.cancelled or self._inventory_epoch != epoch:
            logger.info("Discarding import of %s: inventory was cleared", filename)
            return self.status

        # Only the latest import can be re-exported; a CSV import forgets the workbook
        self.sheet = result.sheet
        self.sheet_name = PurePath(filename).stem if result.sheet is not None else ""

        self.items = self.engine.measure(self.items + tuple(resolved.items))

        skipped = result.skipped_rows + resolved.dropped
        if not resolved.items:
            self.status = MSG_NO_VALID_ROWS
        elif skipped:
            self.status = MSG_ROWS_SKIPPED.format(count=skipped)
        else:
            self.status = ""
        logger.info(
            "Imported %d items from %s (%d skipped, %d geocoded)",
            len(resolved.items), filename, skipped, resolved.geocoded,
        )
        return self.status

    def clear_inventory(self) -> None:
        """Remove all items, the remembered sheet and every peek circle."""
        self._inventory_epoch += 1
        self.items = ()
        self.sheet = None
        self.sheet_name = ""
        self.engine.hide_all_peeks()
        self.show_only_available = False

    # --- reference ---------------------------------------------------------

    def _remeasure(self) -> None:
        self.items = self.engine.measure(self.items)

    def set_store_reference(self, name: str, location: LatLng) -> None:
        self.engine.set_store_reference(name, location)
        self._remeasure()

    def promote_item(self, item_id: str) -> bool:
        """Make an item the reference (or clear it if it already is). Returns True if set."""
        item = self.item(item_id)
        if item is None:
            return False
        ref = self.engine.promote_item(item)
        self._remeasure()
        return ref is not None

    def promote_place(self, index: int) -> None:
        """Use a search result as the store reference."""
        place = self.places[index]
        self.set_store_reference(place.name or place.address or "Loc", place.location)

    def clear_reference(self) -> None:
        self.engine.clear_reference()
        self._remeasure()

    def set_radius(self, radius: float) -> None:
        self.config.radius = max(0.0, float(radius))
        self.engine.set_radius(self.config.radius)
        self._remeasure()

    def set_show_only_in_range(self, flag: bool) -> None:
        self.config.show_only_in_range = flag
        self.engine.show_only_in_range = flag

    # --- peek circles ------------------------------------------------------

    def toggle_peek(self, item_id: str) -> bool:
        item = self.item(item_id)
        if item is None:
            return False
        return self.engine.toggle_peek(item)

    def show_all_peeks(self) -> None:
        self.engine.show_all_peeks(self.items)

    def hide_all_peeks(self) -> None:
        self.engine.hide_all_peeks()

    # --- place search ------------------------------------------------------

    def search(self, query: str, bounds: Optional[ViewBounds]) -> Optional[str]:
        """Run a place search; returns a notice for the operator, or None on success."""
        if not query.strip():
            return MSG_EMPTY_QUERY
        if self.provider is None:
            self.status = MSG_PROVIDER_ERROR.format(error="cheie API lipsă")
            return self.status

        if not self.config.keep_existing_places:
            self.clear_places()
        epoch = self._search_epoch
        try:
            found = search_places(
                self.provider,
                query,
                bounds,
                is_current=lambda: self._search_epoch == epoch,
            )
        except ProviderError as e:
            logger.warning("Place search failed: %s", e)
            self.status = MSG_PROVIDER_ERROR.format(error=e)
            return self.status

        if found is None or self._search_epoch != epoch:
            return None
        self.places = self.places + tuple(found)
        return None

    def schedule_search(self, query: str, bounds: Optional[ViewBounds]) -> None:
        """Search after the viewport settles; repeated calls restart the wait.

        Only the last query/bounds scheduled before the delay elapses is searched.
        """
        if not query.strip():
            return
        self._pending_search = (query, bounds)
        self._search_debouncer.trigger()

    def _run_scheduled_search(self) -> None:
        pending, self._pending_search = self._pending_search, None
        if pending is not None:
            self.search(*pending)

    @property
    def search_pending(self) -> bool:
        return self._search_debouncer.pending

    def clear_places(self) -> None:
        self._search_epoch += 1
        self.places = ()

    def teardown(self) -> None:
        """Cancel pending debounced work."""
        self._search_debouncer.cancel()
        self._pending_search = None

    # --- availability ------------------------------------------------------

    def set_window(self, start: Optional[date], end: Optional[date]) -> None:
        self.window = (start, end)

    @property
    def available_items(self) -> list[InventoryItem]:
        start, end = self.window
        return filter_available(self.items, start, end)

    def show_available_on_map(self) -> Optional[str]:
        """Hide every item outside the availability filter; returns a notice if nothing matches."""
        if not self.available_items:
            return MSG_NO_AVAILABLE_ITEMS
        self.show_only_available = True
        return None

    def reset_map_display(self) -> None:
        self.show_only_available = False

    # --- views -------------------------------------------------------------

    def item_visibility(self) -> dict[str, bool]:
        if self.show_only_available:
            available = {i.id for i in self.available_items}
            return {i.id: i.id in available for i in self.items}
        return self.engine.item_visibility(self.items)

    def place_visibility(self) -> list[bool]:
        return self.engine.place_visibility(self.places)

    def summary(self) -> ProximitySummary:
        return self.engine.summary(self.items)

    # --- exports -----------------------------------------------------------

    def export_in_range(self) -> tuple[Optional[ExportResult], Optional[str]]:
        ref = self.engine.reference
        if ref is None or ref.origin != OriginKind.STORE:
            return None, MSG_NO_STORE_REFERENCE
        if not any(i.in_range for i in self.items):
            return None, MSG_NO_ITEMS_IN_RANGE
        return export_in_range(self.items, ref), None

    def export_grouped(self) -> tuple[Optional[ExportResult], Optional[str]]:
        if not self.places:
            return None, MSG_NO_SEARCH_RESULTS
        selected = [item for item in (self.item(i) for i in self.engine.peek_ids) if item is not None]
        if not selected:
            return None, MSG_NO_PEEK_CIRCLES
        return export_grouped(selected, self.places, self.engine), None

    def reexport_original(self) -> tuple[Optional[ExportResult], Optional[str]]:
        if self.sheet is None:
            return None, MSG_NO_ORIGINAL_SHEET
        filename = f"{sanitize_filename(self.sheet_name) or 'panouri'}_export"
        return reexport_sheet(self.sheet, filename), None

    @staticmethod
    def template() -> ExportResult:
        return template_csv()

    # --- settings ----------------------------------------------------------

    def export_settings(self) -> ExportResult:
        """Operator settings as a JSON file."""
        data = json.dumps(self.config.to_dict(), indent=2).encode("utf-8")
        return ExportResult(filename=SETTINGS_FILENAME, data=data)

    def load_settings(self, data: bytes) -> Optional[str]:
        """Apply settings from a JSON file; returns a notice if the file is invalid."""
        try:
            config = MapConfig.from_dict(json.loads(data))
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning("Settings file rejected: %s", e)
            return MSG_INVALID_SETTINGS.format(error=e)
        self.set_radius(config.radius)
        self.set_show_only_in_range(config.show_only_in_range)
        self.config.keep_existing_places = config.keep_existing_places
        return None
