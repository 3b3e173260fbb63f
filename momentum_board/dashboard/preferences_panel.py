"""
Preferences Panel, persisted defaults for the markets table.
"""

from __future__ import annotations

import streamlit as st

from momentum_board.config.config_loader import load_board_config
from momentum_board.core.preferences import load_preferences, reset_preferences, save_preferences
from momentum_board.core.ranking import MARKET_LIMITS, PAGE_SIZES, SORT_DIRS, SORT_KEYS, VIEWS, clamp_enum, clamp_num
from momentum_board.core.watchlist import Watchlist


def render() -> None:
    st.title("Preferences")

    config = load_board_config()
    path = config.preferences_path
    prefs = load_preferences(path)

    with st.form("preferences"):
        default_view = st.radio(
            "Default view", VIEWS, index=VIEWS.index(clamp_enum(prefs["default_view"], VIEWS, "all")), horizontal=True
        )
        only_high = st.checkbox("Only High confidence by default", value=bool(prefs["watch_only_high_default"]))
        hide_top3 = st.checkbox("Hide top-3 strip", value=bool(prefs["hide_top3"]))
        market_limit = st.selectbox(
            "Markets to load", MARKET_LIMITS, index=MARKET_LIMITS.index(clamp_num(prefs["market_limit"], MARKET_LIMITS, 250))
        )
        page_size = st.selectbox(
            "Page size", PAGE_SIZES, index=PAGE_SIZES.index(clamp_num(prefs["page_size"], PAGE_SIZES, 25))
        )
        sort_key = st.selectbox(
            "Sort by", SORT_KEYS, index=SORT_KEYS.index(clamp_enum(prefs["all_sort_key"], SORT_KEYS, "score"))
        )
        sort_dir = st.selectbox(
            "Direction", SORT_DIRS, index=SORT_DIRS.index(clamp_enum(prefs["all_sort_dir"], SORT_DIRS, "desc"))
        )
        watch_sort = st.selectbox(
            "Watchlist sort", SORT_KEYS, index=SORT_KEYS.index(clamp_enum(prefs["watch_sort_default"], SORT_KEYS, "score"))
        )
        submitted = st.form_submit_button("Save")

    if submitted:
        prefs.update(
            {
                "default_view": default_view,
                "watch_only_high_default": only_high,
                "hide_top3": hide_top3,
                "market_limit": market_limit,
                "page_size": page_size,
                "all_sort_key": sort_key,
                "all_sort_dir": sort_dir,
                "watch_sort_default": watch_sort,
            }
        )
        try:
            save_preferences(prefs, path)
        except OSError as e:
            st.error(f"Could not save preferences: {e}")
        else:
            st.success("Preferences saved.")

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Reset preferences"):
            reset_preferences(path)
            st.success("Preferences reset to defaults.")
    with col2:
        if st.button("Clear watchlist"):
            Watchlist(config.watchlist_path).clear()
            st.session_state.pop("watchlist", None)
            st.success("Watchlist cleared.")
