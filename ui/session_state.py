"""Session state initialization and management.

This module provides functions for initializing and managing Streamlit session state.
"""

import logging
import os

import streamlit as st

from core.config import API_KEY_ENV_VAR
from core.models import MapConfig
from core.provider import GoogleMapsProvider, ProviderError
from core.session import MapSession

logger = logging.getLogger(__name__)


def init_session_state():
    """Initialize all session state variables with defaults."""
    if "api_key" not in st.session_state:
        st.session_state.api_key = os.environ.get(API_KEY_ENV_VAR, "")
    if "provider_error" not in st.session_state:
        st.session_state.provider_error = None
    if "map_session" not in st.session_state:
        st.session_state.map_session = MapSession(MapConfig(), build_provider(st.session_state.api_key))

    # Uploaded file already imported (uploader keeps returning it on rerun)
    if "last_upload" not in st.session_state:
        st.session_state.last_upload = None
    if "notice" not in st.session_state:
        st.session_state.notice = None


def build_provider(api_key: str):
    """Create the Google provider, or None (with the error remembered) if that fails."""
    if not api_key:
        return None
    try:
        provider = GoogleMapsProvider(api_key)
    except ProviderError as e:
        logger.warning("Provider init failed: %s", e)
        st.session_state.provider_error = str(e)
        return None
    st.session_state.provider_error = None
    return provider


def get_session() -> MapSession:
    return st.session_state.map_session


def set_api_key(api_key: str):
    """Replace the credential; the inventory and search results are reset with it."""
    old = st.session_state.map_session
    old.teardown()
    st.session_state.api_key = api_key
    st.session_state.map_session = MapSession(old.config, build_provider(api_key))
    st.session_state.last_upload = None


def notify(message):
    """Show a notice on the next run (used from button callbacks)."""
    st.session_state.notice = message
