"""
Momentum Board Dashboard — Main Entry

Run with: streamlit run momentum_board/dashboard/dashboard.py
"""

from __future__ import annotations

import streamlit as st

from momentum_board.dashboard import (
    explainer_panel,
    markets_panel,
    preferences_panel,
)

PANELS = {
    "Markets": markets_panel.render,
    "Explainer": explainer_panel.render,
    "Preferences": preferences_panel.render,
}


def main():
    st.set_page_config(
        page_title="Crypto Momentum Dashboard",
        layout="wide",
    )

    st.sidebar.title("Momentum Board")

    panel = st.sidebar.radio("Panels", tuple(PANELS))
    PANELS[panel]()


if __name__ == "__main__":
    main()
