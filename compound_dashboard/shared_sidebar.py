"""Shared sidebar components for the multi-page dashboard.

The sidebar decides who the current user is and keeps that user's
document in ``st.session_state`` so every page works on the same
snapshot.  Signing in is handled outside the dashboard; the user id typed
here is trusted as-is.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import streamlit as st

from .config import DEFAULT_USER, LEGACY_SCENARIO_NAME
from .models import UserData
from .scenarios import new_scenario
from .user_storage import UserDataStore

logger = logging.getLogger(__name__)

USER_KEY = 'user_id'
DATA_KEY = 'user_data'


def render_shared_sidebar(store: Optional[UserDataStore] = None) -> Dict[str, Any]:
    """Render shared sidebar elements available on all pages.

    Returns:
        Dict with keys: 'user_id', 'data', 'store'
    """
    store = store or UserDataStore()
    st.sidebar.header("💰 Compound Planner")
    user_id = st.sidebar.text_input(
        "Signed in as",
        value=st.session_state.get(USER_KEY) or DEFAULT_USER,
        help="Identifier your scenarios and expenses are stored under",
    ).strip()
    if not user_id:
        st.sidebar.error("Enter a user id to load your data.")
        st.stop()

    data = ensure_user_state(user_id, store)

    if st.sidebar.button("🔄 Reload saved data"):
        st.session_state.pop(DATA_KEY, None)
        data = ensure_user_state(user_id, store)
        st.sidebar.success("Reloaded from storage")

    return {'user_id': user_id, 'data': data, 'store': store}


def ensure_user_state(user_id: str, store: UserDataStore) -> UserData:
    """Load ``user_id``'s document into the session unless it is already there.

    A user with nothing stored yet starts with one default scenario.
    """
    if st.session_state.get(USER_KEY) == user_id and DATA_KEY in st.session_state:
        return st.session_state[DATA_KEY]

    is_new = not store.exists(user_id)
    data = store.load_user_data(user_id)
    if is_new and not data.scenarios:
        starter = new_scenario([], name=LEGACY_SCENARIO_NAME)
        data.scenarios = [starter]
        data.current_scenario_id = starter.id
        logger.info("Created starter scenario for new user")

    st.session_state[USER_KEY] = user_id
    st.session_state[DATA_KEY] = data
    return data


def persist_user_data(data: UserData, store: UserDataStore) -> bool:
    """Save ``data`` for the session's user and keep it as the session snapshot.

    Returns False (after showing the error) when the write fails.
    """
    user_id = st.session_state.get(USER_KEY)
    try:
        store.save_user_data(user_id, data)
    except (OSError, ValueError) as exc:
        logger.exception("Saving user document failed")
        st.error(f"Could not save: {exc}")
        return False
    st.session_state[DATA_KEY] = data
    return True
