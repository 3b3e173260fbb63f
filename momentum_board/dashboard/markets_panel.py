"""
Markets Panel: ranked momentum table with search, filters, paging and watchlist.
"""

from __future__ import annotations

from typing import List

import pandas as pd
import streamlit as st

from momentum_board.config.config_loader import load_board_config
from momentum_board.core.momentum import format_pct
from momentum_board.core.preferences import load_preferences
from momentum_board.core.ranking import (
    MARKET_LIMITS,
    PAGE_SIZES,
    SORT_DIRS,
    SORT_KEYS,
    VIEWS,
    RankedAsset,
    TableQuery,
    build_table,
    empty_state_message,
    top_movers,
)
from momentum_board.core.watchlist import Watchlist
from momentum_board.dashboard.components.cards import asset_card, metric_row
from momentum_board.dashboard.formatting import format_money
from momentum_board.data.market_data import MarketDataClient, MarketDataError
from momentum_board.logging_utils import get_board_logger

_logger = get_board_logger("dashboard")


def _client() -> MarketDataClient:
    if "market_client" not in st.session_state:
        st.session_state["market_client"] = MarketDataClient(load_board_config())
    return st.session_state["market_client"]


def _watchlist() -> Watchlist:
    if "watchlist" not in st.session_state:
        st.session_state["watchlist"] = Watchlist(_client().config.watchlist_path)
    return st.session_state["watchlist"]


def _load_records(limit: int, force: bool) -> List[dict]:
    client = _client()
    try:
        payload = client.fetch_markets(limit, force=force)
    except MarketDataError as e:
        _logger.warning(f"DASHBOARD_FEED_ERROR limit={limit} err={e}")
        st.error(f"Failed to load data: {e}")
        return st.session_state.get("last_records", [])
    st.session_state["last_records"] = payload.data
    st.session_state["fetched_at"] = payload.fetched_at
    return payload.data


def _table_frame(rows: List[RankedAsset], watch_ids: set, offset: int) -> pd.DataFrame:
    records = []
    for i, row in enumerate(rows, start=offset + 1):
        inputs = row.breakdown.inputs
        records.append(
            {
                "#": i,
                "Name": row.asset.name,
                "Symbol": row.asset.symbol.upper(),
                "Price": format_money(row.asset.current_price),
                "24h": format_pct(inputs.c24),
                "7d": format_pct(inputs.c7),
                "30d": format_pct(inputs.c30),
                "Score": row.score,
                "Confidence": row.label.value,
                "Watching": row.id in watch_ids,
            }
        )
    return pd.DataFrame(records)


def render() -> None:
    st.title("Crypto Momentum")
    st.caption("Explainable momentum ranking. Decision support, not a forecast.")

    config = _client().config
    prefs = load_preferences(config.preferences_path)
    watchlist = _watchlist()
    query = TableQuery.from_params(st.query_params.to_dict(), prefs)

    col1, col2, col3 = st.columns([3, 1, 1])
    with col1:
        query.q = st.text_input("Search name or symbol", value=query.q)
    with col2:
        query.view = st.radio("View", VIEWS, index=VIEWS.index(query.view), horizontal=True)
    with col3:
        query.only_high = st.toggle("Only High confidence", value=query.only_high)

    col1, col2, col3, col4, col5 = st.columns(5)
    with col1:
        query.market_limit = st.selectbox("Markets", MARKET_LIMITS, index=MARKET_LIMITS.index(query.market_limit))
    with col2:
        query.page_size = st.selectbox("Page size", PAGE_SIZES, index=PAGE_SIZES.index(query.page_size))
    with col3:
        query.sort_key = st.selectbox("Sort", SORT_KEYS, index=SORT_KEYS.index(query.sort_key))
    with col4:
        query.sort_dir = st.selectbox("Direction", SORT_DIRS, index=SORT_DIRS.index(query.sort_dir))
    with col5:
        query.watch_sort = st.selectbox("Watch sort", SORT_KEYS, index=SORT_KEYS.index(query.watch_sort))

    force = st.button("Refresh")
    records = _load_records(query.market_limit, force)
    fetched_at = st.session_state.get("fetched_at")
    if fetched_at:
        st.caption(f"Last updated: {fetched_at}")

    table = build_table(records, query, watchlist.ids)
    st.session_state["ranked_rows"] = table.enriched

    if not prefs.get("hide_top3") and query.view == "all" and table.enriched:
        cols = st.columns(3)
        for rank, (col, row) in enumerate(zip(cols, top_movers(table.enriched, 3)), start=1):
            with col:
                asset_card(row, rank)

    summary = table.summary
    metric_row(
        [
            {"label": "Watching", "value": summary.count},
            {"label": "Avg watch score", "value": summary.avg_score if summary.avg_score is not None else "—"},
            {"label": "High confidence", "value": summary.high},
        ]
    )

    if not table.rows:
        st.warning(empty_state_message(query.view, query.only_high, len(watchlist)))
        st.query_params.from_dict(query.to_params())
        return

    if query.view == "all" and table.total_pages > 1:
        query.page = int(
            st.number_input("Page", min_value=1, max_value=table.total_pages, value=table.page, step=1)
        )
        table = build_table(records, query, watchlist.ids)
    else:
        query.page = table.page

    offset = (table.page - 1) * query.page_size if query.view == "all" else 0
    st.dataframe(
        _table_frame(table.rows, set(watchlist.ids), offset),
        use_container_width=True,
        hide_index=True,
    )
    if query.view == "all":
        st.caption(f"Page {table.page} / {table.total_pages} · {table.total} assets")

    labels = {row.id: f"{row.asset.name} ({row.asset.symbol.upper()})" for row in table.rows}
    ids = list(labels)
    default_index = ids.index(query.selected_id) if query.selected_id in ids else 0
    selected_id = st.selectbox("Asset", ids, index=default_index, format_func=labels.get)
    query.selected_id = selected_id
    st.session_state["selected_id"] = selected_id

    col1, col2 = st.columns(2)
    with col1:
        watching = selected_id in watchlist
        if st.button("Remove from watchlist" if watching else "Add to watchlist"):
            try:
                watchlist.toggle(selected_id)
            except OSError as e:
                st.error(f"Could not save watchlist: {e}")
            else:
                st.rerun()
    with col2:
        st.caption("Open the Explainer panel for the full breakdown.")

    st.query_params.from_dict(query.to_params())
