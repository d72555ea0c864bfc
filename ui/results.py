"""Download rendering UI components.

This module provides Streamlit components for export buttons and downloads.
"""

from typing import Callable, Optional

import streamlit as st

from core.models import ExportResult
from core.session import MapSession

SETTINGS_WIDGET_KEYS = ("radius_slider", "radius_input", "show_only_in_range", "keep_existing_places")


def render_download(result: ExportResult, key: str, label: str = "Descarcă"):
    """Download button for a generated file."""
    st.download_button(
        label=label,
        data=result.data,
        file_name=result.filename,
        mime=result.mime,
        key=key,
    )


def render_export(
    label: str,
    produce: Callable[[], tuple[Optional[ExportResult], Optional[str]]],
    key: str,
    disabled: bool = False,
):
    """Button that produces an export on click, then offers it for download.

    Args:
        label: Button label
        produce: Session export method returning (result, notice)
        key: Unique widget key
        disabled: Whether the button is disabled
    """
    result_key = f"{key}_result"
    if st.button(label, key=key, disabled=disabled, use_container_width=True):
        result, notice = produce()
        if notice:
            st.warning(notice)
            st.session_state[result_key] = None
        else:
            st.session_state[result_key] = result

    result = st.session_state.get(result_key)
    if result is not None:
        col1, col2 = st.columns([3, 1])
        col1.markdown(f"**{result.filename}** ({result.row_count} rânduri)")
        with col2:
            render_download(result, key=f"{key}_download")


def render_settings(session: MapSession):
    """Download the current map settings or load them from a JSON file."""
    render_download(session.export_settings(), key="download_settings", label="Descarcă setările")
    uploaded = st.file_uploader("Încarcă setări (JSON)", type=["json"], key="settings_file")
    if uploaded is not None and st.session_state.get("last_settings_upload") != uploaded.file_id:
        st.session_state.last_settings_upload = uploaded.file_id
        notice = session.load_settings(uploaded.getvalue())
        if notice:
            st.warning(notice)
        else:
            # Widgets re-read their initial value from the session
            for key in SETTINGS_WIDGET_KEYS:
                st.session_state.pop(key, None)
            st.success("Setări aplicate.")
