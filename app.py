"""
Billboard Map Streamlit App

Import billboards from spreadsheets, measure proximity to a searched location
or to another billboard, and filter by availability periods.
"""

import logging

import streamlit as st

from ui import (
    init_session_state,
    get_session,
    set_api_key,
    render_map,
    render_settings,
    render_proximity_tab,
    render_inventory_tab,
    render_availability_tab,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Page config
st.set_page_config(
    page_title="Harta panouri publicitare",
    page_icon="🗺️",
    layout="wide",
)

init_session_state()
session = get_session()

# Main UI
st.title("🗺️ Harta panouri publicitare")
st.markdown("Caută, încarcă panouri și lucrează cu radius.")

if st.session_state.notice:
    st.info(st.session_state.notice)
    st.session_state.notice = None

# Sidebar: credential and tabs
with st.sidebar:
    st.header("⚙️ Configurare")
    api_key = st.text_input(
        "Cheie API Google Maps",
        value=st.session_state.api_key,
        type="password",
        help="Folosită pentru geocodare și căutarea locațiilor",
    )
    if api_key != st.session_state.api_key:
        set_api_key(api_key)
        st.rerun()
    if st.session_state.provider_error:
        st.error(st.session_state.provider_error)
    elif session.provider is None:
        st.warning("Fără cheie API: geocodarea și căutarea sunt dezactivate.")

    with st.expander("Setări hartă"):
        render_settings(session)

    st.divider()

    tab1, tab2, tab3 = st.tabs(["📍 Proximități", "🪧 Panouri", "📅 Disponibilități"])

    with tab1:
        render_proximity_tab(session)

    with tab2:
        render_inventory_tab(session)

    with tab3:
        render_availability_tab(session)

# Map
render_map(session)

# Footer
st.divider()
st.caption("Harta panouri publicitare v1.0")
