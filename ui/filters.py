"""Availability filter UI components for Streamlit.

This module provides the availability tab. It uses core.filters for the
underlying period parsing and overlap logic.
"""

import streamlit as st

from core.exporter import items_dataframe
from core.session import MapSession


def render_availability_tab(session: MapSession):
    """Render the date window inputs, the matching items and the map display toggles."""
    st.subheader("Filtrează după disponibilitate")

    col1, col2 = st.columns(2)
    start = col1.date_input("Data început", value=None, format="DD/MM/YYYY", key="avail_start")
    end = col2.date_input("Data sfârșit", value=None, format="DD/MM/YYYY", key="avail_end")
    session.set_window(start, end)

    if not (start and end):
        st.caption("Alege ambele date pentru a filtra panourile.")
        return

    available = session.available_items
    st.info(f"Găsite **{len(available)}** panouri disponibile în perioada selectată")

    col1, col2 = st.columns(2)
    if col1.button(
        "Afișează doar acestea pe hartă",
        key="show_available",
        disabled=session.show_only_available,
        use_container_width=True,
    ):
        notice = session.show_available_on_map()
        if notice:
            st.warning(notice)
        else:
            st.rerun()
    if col2.button(
        "Afișează toate panourile",
        key="reset_map_display",
        disabled=not session.show_only_available,
        use_container_width=True,
    ):
        session.reset_map_display()
        st.rerun()

    if available:
        st.dataframe(items_dataframe(available), hide_index=True, use_container_width=True)
