"""
Shared card components for dashboard panels
"""

from __future__ import annotations

import streamlit as st

from momentum_board.core.ranking import RankedAsset
from momentum_board.dashboard.formatting import confidence_badge, format_money
from momentum_board.core.momentum import format_pct


def metric_row(metrics: list[dict]) -> None:
    """
    Render a row of metric cards.

    Each metric: {"label": str, "value": Any, "help": str | None}
    """
    cols = st.columns(len(metrics))

    for col, m in zip(cols, metrics):
        with col:
            st.metric(m["label"], m["value"], help=m.get("help"))


def asset_card(row: RankedAsset, rank: int) -> None:
    """Compact card used for the top-3 strip."""
    with st.container(border=True):
        st.markdown(f"**#{rank} {row.asset.name}** `{row.asset.symbol.upper()}`")
        st.markdown(f"Score **{row.score}** · {confidence_badge(row.label)}")
        st.caption(f"{format_money(row.asset.current_price)} · 7d {format_pct(row.breakdown.inputs.c7)}")
