"""Map rendering with folium.

The map is rebuilt from session state on every run: one marker per visible
item, one circle per peek id, one reference marker/circle pair. Nothing on
the map holds state of its own.
"""

import html
from typing import Optional

import folium
import streamlit as st
from streamlit_folium import st_folium

from core.config import DEFAULT_MAP_CENTER, DEFAULT_MAP_ZOOM
from core.models import InventoryItem, ViewBounds
from core.proximity import format_distance
from core.session import MapSession

REFERENCE_COLOR = "#0ea5e9"
PEEK_COLOR = "#22d3ee"
ITEM_COLOR = "red"
PLACE_COLOR = "#ef4444"


def is_link(url: str) -> bool:
    """Whether an image reference looks like a URL rather than plain text."""
    return bool(url) and url.strip().startswith(("http://", "https://", "//", "www."))


def item_popup_html(item: InventoryItem) -> str:
    parts = [
        f"<b>{html.escape(item.name or 'Panou')}</b>",
        html.escape(item.label),
        f"Lat: {item.lat:.6f}, Lng: {item.lng:.6f}",
        f"Distanță față de centru: <b>{format_distance(item.distance_meters)}</b>",
    ]
    if item.periods_available:
        parts.append(f"Perioade: <b>{html.escape(item.periods_available)}</b>")
    for idx, url in enumerate(u for u in item.images if u):
        if is_link(url):
            safe = html.escape(url, quote=True)
            parts.append(f'<a href="{safe}" target="_blank" rel="noopener">Imagine {idx + 1}</a>')
        else:
            parts.append(html.escape(url))
    return "<br>".join(p for p in parts if p)


def build_map(session: MapSession) -> folium.Map:
    engine = session.engine
    ref = engine.reference
    center = ref.location.as_tuple() if ref else DEFAULT_MAP_CENTER
    fmap = folium.Map(location=center, zoom_start=15 if ref else DEFAULT_MAP_ZOOM)

    visibility = session.item_visibility()
    shown = [i for i in session.items if visibility.get(i.id, True)]
    for item in shown:
        folium.Marker(
            location=item.location.as_tuple(),
            tooltip=item.name,
            popup=folium.Popup(item_popup_html(item), max_width=300),
            icon=folium.Icon(color=ITEM_COLOR, icon="bullhorn", prefix="fa"),
        ).add_to(fmap)

    for circle in engine.peek_circles:
        folium.Circle(
            location=circle.center.as_tuple(),
            radius=circle.radius,
            color=PEEK_COLOR,
            weight=1,
            fill=True,
            fill_opacity=0.12,
        ).add_to(fmap)

    for place, visible in zip(session.places, session.place_visibility()):
        if not visible:
            continue
        folium.CircleMarker(
            location=place.location.as_tuple(),
            radius=6,
            color=PLACE_COLOR,
            fill=True,
            tooltip=place.name,
            popup=folium.Popup(html.escape(f"{place.name} {place.address}"), max_width=300),
        ).add_to(fmap)

    primary = engine.primary_circle()
    if ref is not None and primary is not None:
        folium.CircleMarker(
            location=ref.location.as_tuple(),
            radius=8,
            color="white",
            fill=True,
            fill_color=REFERENCE_COLOR,
            fill_opacity=1,
            tooltip=ref.name,
        ).add_to(fmap)
        folium.Circle(
            location=primary.center.as_tuple(),
            radius=primary.radius,
            color=REFERENCE_COLOR,
            weight=1,
            fill=True,
            fill_opacity=0.15,
        ).add_to(fmap)
    elif shown:
        lats = [i.lat for i in shown]
        lngs = [i.lng for i in shown]
        fmap.fit_bounds([[min(lats), min(lngs)], [max(lats), max(lngs)]])

    return fmap


def bounds_from_map(state: Optional[dict]) -> Optional[ViewBounds]:
    """Viewport reported by st_folium ({"bounds": {"_southWest": ..., "_northEast": ...}})."""
    bounds = (state or {}).get("bounds") or {}
    south_west = bounds.get("_southWest") or {}
    north_east = bounds.get("_northEast") or {}
    try:
        return ViewBounds(
            south=float(south_west["lat"]),
            west=float(south_west["lng"]),
            north=float(north_east["lat"]),
            east=float(north_east["lng"]),
        )
    except (KeyError, TypeError, ValueError):
        return None


def render_map(session: MapSession, height: int = 620):
    """Render the map into the page and feed viewport changes to the auto search."""
    fmap = build_map(session)
    state = st_folium(
        fmap,
        height=height,
        use_container_width=True,
        returned_objects=["bounds"],
        key="billboard_map",
    )
    bounds = bounds_from_map(state)
    if bounds is not None and bounds != st.session_state.get("map_bounds"):
        st.session_state.map_bounds = bounds
        query = st.session_state.get("place_query", "")
        if st.session_state.get("auto_search") and query.strip():
            session.schedule_search(query, bounds)
    if session.status:
        st.caption(session.status)
