"""Proximity tab: place search, reference point, radius and exports."""

import math
from typing import Optional

import streamlit as st

from core.config import RADIUS_SLIDER_MAX, RADIUS_SLIDER_MIN, RADIUS_SLIDER_STEP
from core.models import OriginKind, ViewBounds
from core.proximity import format_distance
from core.session import MapSession

from .results import render_export
from .session_state import notify

# Search area around the reference, in multiples of the radius
SEARCH_SPAN = 3


def search_bounds(session: MapSession) -> Optional[ViewBounds]:
    """Viewport used to bias searches.

    The last viewport reported by the map, else a box around the reference,
    else the items' bounding box.
    """
    viewport = st.session_state.get("map_bounds")
    if viewport is not None:
        return viewport
    ref = session.engine.reference
    if ref is not None:
        span = max(session.engine.radius, RADIUS_SLIDER_MIN) * SEARCH_SPAN
        dlat = span / 111320.0
        dlng = dlat / max(math.cos(math.radians(ref.location.lat)), 0.01)
        lat, lng = ref.location.as_tuple()
        return ViewBounds(lat - dlat, lng - dlng, lat + dlat, lng + dlng)
    if session.items:
        lats = [i.lat for i in session.items]
        lngs = [i.lng for i in session.items]
        return ViewBounds(min(lats), min(lngs), max(lats), max(lngs))
    return None


def _on_radius_slider():
    st.session_state.map_session.set_radius(st.session_state.radius_slider)


def _on_radius_input():
    st.session_state.map_session.set_radius(max(0, int(st.session_state.radius_input or 0)))


def render_search(session: MapSession):
    st.subheader("Căutare locații")
    query = st.text_input("Caută (ex: Kaufland, Lidl, benzinărie)", key="place_query")
    keep = st.checkbox(
        "Păstrează rezultatele anterioare",
        value=session.config.keep_existing_places,
        key="keep_existing_places",
    )
    session.config.keep_existing_places = keep
    st.checkbox(
        "Caută automat când muți harta",
        key="auto_search",
        help="Reia căutarea în zona vizibilă după ce harta se oprește",
    )
    if session.search_pending:
        st.caption("Căutare programată...")

    col1, col2 = st.columns(2)
    if col1.button("Caută în zonă", key="search_places", type="primary", use_container_width=True):
        with st.spinner("Se caută..."):
            notice = session.search(query, search_bounds(session))
        if notice:
            st.warning(notice)
    if col2.button(
        f"Curăță rezultate ({len(session.places)})",
        key="clear_places",
        disabled=not session.places,
        use_container_width=True,
    ):
        session.clear_places()
        st.rerun()

    if session.places:
        labels = [f"{p.name} · {p.address}" for p in session.places]
        choice = st.selectbox(
            "Rezultat", range(len(labels)), format_func=lambda i: labels[i], key="place_choice"
        )
        if st.button("Setează ca centru", key="place_set_center"):
            session.promote_place(choice)
            st.rerun()


def render_reference(session: MapSession):
    ref = session.engine.reference
    if ref is None:
        st.caption("Niciun centru selectat.")
        return
    kind = "magazin" if ref.origin == OriginKind.STORE else "panou"
    col1, col2 = st.columns([3, 1])
    col1.markdown(f"Centru: **{ref.name}** ({kind})")
    if col2.button("Șterge", key="clear_reference"):
        session.clear_reference()
        st.rerun()


def render_radius(session: MapSession):
    st.subheader("Radius (metri)")
    radius = int(session.engine.radius)
    st.slider(
        "Radius",
        min_value=RADIUS_SLIDER_MIN,
        max_value=RADIUS_SLIDER_MAX,
        step=RADIUS_SLIDER_STEP,
        value=min(max(radius, RADIUS_SLIDER_MIN), RADIUS_SLIDER_MAX),
        key="radius_slider",
        on_change=_on_radius_slider,
        label_visibility="collapsed",
    )
    st.number_input(
        "Radius exact",
        min_value=0,
        value=radius,
        step=RADIUS_SLIDER_STEP,
        key="radius_input",
        on_change=_on_radius_input,
    )
    only = st.checkbox(
        "Arată doar panourile din radius",
        value=session.config.show_only_in_range,
        key="show_only_in_range",
    )
    session.set_show_only_in_range(only)


def render_stats(session: MapSession):
    summary = session.summary()
    col1, col2 = st.columns(2)
    col1.metric("Panouri", summary.total)
    col2.metric("În radius", summary.in_range)
    if summary.nearest is not None:
        st.caption(
            f"Cel mai apropiat: **{summary.nearest.name}** – "
            f"{format_distance(summary.nearest.distance_meters)}"
        )

    col1, col2 = st.columns(2)
    if col1.button(
        "Arată radius la toate panourile",
        key="show_all_peeks",
        disabled=not session.items,
        use_container_width=True,
    ):
        session.show_all_peeks()
        st.rerun()
    if col2.button(
        "Ascunde radius la toate",
        key="hide_all_peeks",
        disabled=not session.engine.peek_ids,
        use_container_width=True,
    ):
        session.hide_all_peeks()
        st.rerun()

    ref = session.engine.reference
    render_export(
        "Exportă panourile din radiusul locației",
        session.export_in_range,
        key="export_in_range",
        disabled=not session.items or ref is None or ref.origin != OriginKind.STORE,
    )
    render_export(
        "Exportă Excel: format grupat (BILLBOARD + POI-uri)",
        session.export_grouped,
        key="export_grouped",
        disabled=not session.places or not session.engine.peek_ids,
    )


def render_proximity_tab(session: MapSession):
    """Render the proximity tab."""
    render_search(session)
    st.divider()
    render_reference(session)
    render_radius(session)
    st.divider()
    render_stats(session)


def promote_item_callback(item_id: str):
    session = st.session_state.map_session
    if not session.promote_item(item_id):
        notify("Radius ascuns.")
