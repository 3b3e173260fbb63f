"""
Momentum Explainer: why an asset scores the way it does.
"""

from __future__ import annotations

import pandas as pd
import streamlit as st

from momentum_board.core.momentum import AssetSnapshot, format_pct, score_asset
from momentum_board.core.ranking import RankedAsset
from momentum_board.dashboard.components.cards import metric_row
from momentum_board.dashboard.formatting import confidence_badge, format_money


def render_breakdown(row: RankedAsset) -> None:
    inputs = row.breakdown.inputs

    metric_row(
        [
            {"label": "Momentum score", "value": row.score, "help": "0-100, 50 is neutral"},
            {"label": "Confidence", "value": row.label.value},
            {"label": "Price", "value": format_money(row.asset.current_price)},
        ]
    )
    st.markdown(f"**Confidence:** {confidence_badge(row.label)} — {row.confidence.explanation}")

    st.subheader("Drivers")
    for driver in row.breakdown.drivers:
        st.markdown(f"- {driver}")

    st.subheader("What would change this")
    for hint in row.breakdown.what_would_change:
        st.markdown(f"- {hint}")

    st.subheader("Inputs used")
    df = pd.DataFrame(
        [
            {"Input": "24h change", "Value": format_pct(inputs.c24)},
            {"Input": "7d change", "Value": format_pct(inputs.c7)},
            {"Input": "30d change", "Value": format_pct(inputs.c30)},
            {"Input": "24h vs 7d gap", "Value": f"{inputs.volatility_proxy:.1f} pts"},
        ]
    )
    st.dataframe(df, use_container_width=True, hide_index=True)
    st.caption("Decision support only. This score is a fixed heuristic, not a forecast.")


def render() -> None:
    st.title("Momentum Explainer")

    rows = st.session_state.get("ranked_rows") or []
    selected_id = st.session_state.get("selected_id")
    selected = next((r for r in rows if r.id == selected_id), None)

    if selected is not None:
        st.header(f"{selected.asset.name} ({selected.asset.symbol.upper()})")
        render_breakdown(selected)
    else:
        st.info("Select an asset in the Markets panel to see its breakdown.")

    st.divider()
    st.subheader("Try your own numbers")
    col1, col2, col3 = st.columns(3)
    with col1:
        c24 = st.number_input("24h change %", value=0.0, step=0.5)
    with col2:
        c7 = st.number_input("7d change %", value=0.0, step=0.5)
    with col3:
        c30 = st.number_input("30d change %", value=0.0, step=0.5)

    snap = AssetSnapshot(id="adhoc", name="Custom", symbol="custom", change24h=c24, change7d=c7, change30d=c30)
    breakdown, confidence = score_asset(snap)
    render_breakdown(RankedAsset(asset=snap, breakdown=breakdown, confidence=confidence))
