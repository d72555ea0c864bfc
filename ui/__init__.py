"""UI module for Streamlit components.

This package contains all Streamlit-specific UI components.
The components are separated from business logic (in core/) to allow:
- Testing of business logic without Streamlit
- The command-line export script to reuse the same core
"""

from .session_state import init_session_state, get_session, set_api_key, notify
from .map_view import render_map, build_map
from .proximity import render_proximity_tab
from .inventory import render_inventory_tab
from .filters import render_availability_tab
from .results import render_download, render_export, render_settings

__all__ = [
    # Session state
    "init_session_state",
    "get_session",
    "set_api_key",
    "notify",
    # Map
    "render_map",
    "build_map",
    # Tabs
    "render_proximity_tab",
    "render_inventory_tab",
    "render_availability_tab",
    # Results
    "render_download",
    "render_export",
    "render_settings",
]
