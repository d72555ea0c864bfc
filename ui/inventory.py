"""Inventory tab: file import and the billboard list."""

import streamlit as st

from core.config import SUPPORTED_EXTENSIONS
from core.proximity import format_distance
from core.session import MapSession

from .map_view import is_link
from .proximity import promote_item_callback
from .results import render_download, render_export


def _toggle_peek(item_id: str):
    st.session_state.map_session.toggle_peek(item_id)


def render_upload(session: MapSession):
    """Render the uploader; each uploaded file is imported once."""
    uploaded_file = st.file_uploader(
        "Încarcă panouri (CSV / Excel)",
        type=[ext.lstrip(".") for ext in SUPPORTED_EXTENSIONS],
        key="billboard_file",
    )
    if uploaded_file is not None and st.session_state.last_upload != uploaded_file.file_id:
        st.session_state.last_upload = uploaded_file.file_id
        progress = st.empty()

        def on_progress(index: int, total: int, address: str):
            progress.info(f"Geocodare: {address} ({index}/{total})...")

        try:
            with st.spinner("Se procesează fișierul..."):
                status = session.ingest(uploaded_file, uploaded_file.name, on_progress=on_progress)
        except Exception as e:
            st.error(f"Eroare la încărcarea fișierului: {e}")
        else:
            progress.empty()
            if status:
                st.warning(status)
            else:
                st.success(f"Fișier încărcat: {len(session.items)} panouri")

    col1, col2 = st.columns(2)
    with col1:
        render_download(session.template(), key="download_template", label="Descarcă template CSV")
    if col2.button("Șterge panourile", key="clear_inventory", disabled=not session.items):
        session.clear_inventory()
        st.rerun()

    render_export(
        "Exportă Excel-ul original (cu hyperlink-uri)",
        session.reexport_original,
        key="export_original",
        disabled=session.sheet is None,
    )


def render_item_list(session: MapSession):
    """Render one expander per billboard with its details and actions."""
    if not session.items:
        st.info("Nu există panouri încărcate.")
        return

    for item in session.items:
        state = "în radius" if item.in_range else "în afara radiusului"
        with st.expander(f"{item.name} · {state}", expanded=False):
            st.markdown(f"**ID:** {item.space_id or item.id}")
            st.markdown(f"**Locație:** {item.label or 'N/A'}")
            st.markdown(f"**Coordonate:** {item.lat:.6f}, {item.lng:.6f}")
            if item.periods_available:
                st.markdown(f"**Perioade disponibile:** {item.periods_available}")
            images = [u for u in item.images if u]
            if images:
                links = [f"[Imagine {n}]({u})" if is_link(u) else u for n, u in enumerate(images, 1)]
                st.markdown("**Imagini:** " + " · ".join(links))
            if item.distance_meters is not None:
                st.markdown(f"**Distanță față de centru:** {format_distance(item.distance_meters)}")

            col1, col2 = st.columns(2)
            col1.button(
                "Ascunde radius" if session.engine.has_peek(item.id) else "Arată radius",
                key=f"peek_{item.id}",
                on_click=_toggle_peek,
                args=(item.id,),
            )
            col2.button(
                "Ascunde radius centru" if session.engine.is_item_reference(item) else "Setează ca centru",
                key=f"promote_{item.id}",
                on_click=promote_item_callback,
                args=(item.id,),
            )


def render_inventory_tab(session: MapSession):
    """Render the inventory tab."""
    render_upload(session)
    st.divider()
    render_item_list(session)
