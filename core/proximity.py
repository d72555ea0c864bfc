"""Proximity engine: distance to the primary reference, in-range flags and radius circles."""

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from .config import DEFAULT_RADIUS, SAME_POINT_TOLERANCE
from .models import InventoryItem, LatLng, OriginKind, Place, RadiusCircle, ReferencePoint
from .provider import surface_distance

logger = logging.getLogger(__name__)

DistanceFn = Callable[[LatLng, LatLng], float]


def format_distance(meters: Optional[float]) -> str:
    """Format a distance for display: "850 m", "1.25 km", or "–" when unknown."""
    if meters is None or math.isnan(meters):
        return "–"
    if meters < 1000:
        return f"{meters:.0f} m"
    return f"{meters / 1000:.2f} km"


@dataclass(frozen=True)
class ProximitySummary:
    """Counts shown next to the radius controls."""
    total: int
    in_range: int
    nearest: Optional[InventoryItem] = None


class ProximityEngine:
    """
    Computes distance-to-reference and in-range membership for the inventory.

    Rules:
    - No reference: every item has distance None and in_range False
    - With a reference: in_range = distance <= radius (boundary counts as inside)
    - "Show only in range" hides out-of-range items only for a store
      reference; with an item reference all items stay visible and the toggle
      applies to search results instead
    - Peek circles are per-item radius circles, independent of the reference,
      all sharing the current radius
    """

    def __init__(
        self,
        radius: float = DEFAULT_RADIUS,
        show_only_in_range: bool = False,
        distance: DistanceFn = surface_distance,
    ):
        self.radius = max(0.0, float(radius))
        self.show_only_in_range = show_only_in_range
        self.distance = distance
        self.reference: Optional[ReferencePoint] = None
        self._peeks: dict[str, RadiusCircle] = {}

    # --- primary reference -------------------------------------------------

    @property
    def origin(self) -> Optional[OriginKind]:
        return self.reference.origin if self.reference else None

    def set_store_reference(self, name: str, location: LatLng) -> ReferencePoint:
        """Use a searched location as the reference, retiring any previous one."""
        self.reference = ReferencePoint(name=name, location=location, origin=OriginKind.STORE)
        logger.debug("Store reference set: %s", name)
        return self.reference

    def is_item_reference(self, item: InventoryItem) -> bool:
        """Whether this item is the current item reference."""
        ref = self.reference
        return (
            ref is not None
            and ref.origin == OriginKind.ITEM
            and abs(ref.location.lat - item.lat) < SAME_POINT_TOLERANCE
            and abs(ref.location.lng - item.lng) < SAME_POINT_TOLERANCE
        )

    def promote_item(self, item: InventoryItem) -> Optional[ReferencePoint]:
        """Make an item the reference; promoting the current item reference clears it.

        Returns:
            The new reference, or None if the reference was cleared
        """
        if self.is_item_reference(item):
            self.clear_reference()
            return None
        self.reference = ReferencePoint(name=item.name, location=item.location, origin=OriginKind.ITEM)
        logger.debug("Item reference set: %s", item.name)
        return self.reference

    def clear_reference(self) -> None:
        self.reference = None

    def primary_circle(self) -> Optional[RadiusCircle]:
        if self.reference is None:
            return None
        return RadiusCircle(center=self.reference.location, radius=self.radius)

    # --- radius ------------------------------------------------------------

    def set_radius(self, radius: float) -> None:
        """Change the shared radius; the primary and every peek circle follow."""
        self.radius = max(0.0, float(radius))
        self._peeks = {
            owner: dataclasses.replace(circle, radius=self.radius)
            for owner, circle in self._peeks.items()
        }

    # --- measurement -------------------------------------------------------

    def measure(self, items: Iterable[InventoryItem]) -> tuple[InventoryItem, ...]:
        """Return the items with distance_meters and in_range recomputed.

        The input items are not modified; callers swap in the returned tuple.
        """
        ref = self.reference
        if ref is None:
            return tuple(dataclasses.replace(i, distance_meters=None, in_range=False) for i in items)

        measured = []
        for item in items:
            d = self.distance(item.location, ref.location)
            measured.append(dataclasses.replace(item, distance_meters=d, in_range=d <= self.radius))
        return tuple(measured)

    def item_visibility(self, items: Iterable[InventoryItem]) -> dict[str, bool]:
        """Marker visibility per item id, from already measured items."""
        filter_items = self.origin == OriginKind.STORE and self.show_only_in_range
        return {i.id: (i.in_range if filter_items else True) for i in items}

    def place_visibility(self, places: Sequence[Place]) -> list[bool]:
        """Visibility of search results, in the order given."""
        ref = self.reference
        if ref is None or ref.origin != OriginKind.ITEM or not self.show_only_in_range:
            return [True] * len(places)
        return [self.distance(p.location, ref.location) <= self.radius for p in places]

    def nearby_places(self, center: LatLng, places: Iterable[Place]) -> list[tuple[Place, float]]:
        """Search results within the radius of a point, with their distances."""
        found = []
        for place in places:
            d = self.distance(place.location, center)
            if d <= self.radius:
                found.append((place, d))
        return found

    def summary(self, items: Sequence[InventoryItem]) -> ProximitySummary:
        """Total, in-range count and nearest item (nearest only for a store reference)."""
        nearest = None
        if self.origin == OriginKind.STORE:
            measured = [i for i in items if i.distance_meters is not None]
            if measured:
                nearest = min(measured, key=lambda i: i.distance_meters)
        return ProximitySummary(
            total=len(items),
            in_range=sum(1 for i in items if i.in_range),
            nearest=nearest,
        )

    # --- peek circles ------------------------------------------------------

    @property
    def peek_circles(self) -> list[RadiusCircle]:
        return list(self._peeks.values())

    @property
    def peek_ids(self) -> list[str]:
        return list(self._peeks)

    def has_peek(self, item_id: str) -> bool:
        return item_id in self._peeks

    def toggle_peek(self, item: InventoryItem) -> bool:
        """Show or hide the radius circle around one item. Returns True if now shown."""
        peeks = dict(self._peeks)
        if item.id in peeks:
            del peeks[item.id]
            shown = False
        else:
            peeks[item.id] = RadiusCircle(center=item.location, radius=self.radius, owner_id=item.id)
            shown = True
        self._peeks = peeks
        return shown

    def show_all_peeks(self, items: Iterable[InventoryItem]) -> None:
        peeks = dict(self._peeks)
        for item in items:
            if item.id not in peeks:
                peeks[item.id] = RadiusCircle(center=item.location, radius=self.radius, owner_id=item.id)
        self._peeks = peeks

    def hide_all_peeks(self) -> None:
        self._peeks = {}
