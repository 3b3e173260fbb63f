"""
Tests for the ranking pipeline (search, filters, sorting, paging, watchlist view).
"""

import pytest

from momentum_board.core.momentum import AssetSnapshot, ConfidenceLabel
from momentum_board.core.ranking import (
    TableQuery,
    build_table,
    clamp_enum,
    clamp_num,
    clamp_page,
    empty_state_message,
    enrich,
    only_high,
    paginate,
    search,
    sort_rows,
    to_bool,
    top_movers,
    watchlist_rows,
    watchlist_summary,
)


def _ids(rows):
    return [r.id for r in rows]


class TestParamClamping:
    def test_clamp_enum(self):
        assert clamp_enum("name", ("score", "name"), "score") == "name"
        assert clamp_enum("bogus", ("score", "name"), "score") == "score"
        assert clamp_enum(None, ("score", "name"), "score") == "score"

    def test_clamp_num(self):
        assert clamp_num("50", (25, 50), 25) == 50
        assert clamp_num(100, (50, 100, 250), 250) == 100
        assert clamp_num("75", (50, 100, 250), 250) == 250
        assert clamp_num(None, (25, 50), 25) == 25
        assert clamp_num("", (25, 50), 25) == 25

    def test_clamp_page(self):
        assert clamp_page("3.7") == 3
        assert clamp_page("-2") == 1
        assert clamp_page("abc") == 1
        assert clamp_page(None, 4) == 4
        assert clamp_page("inf") == 1

    def test_to_bool(self):
        for value in ("1", "true", "YES", " on "):
            assert to_bool(value) is True
        for value in ("0", "false", "No", "off"):
            assert to_bool(value) is False
        assert to_bool(None) is None
        assert to_bool("maybe") is None


class TestPipeline:
    def test_enrich_scores_every_record(self, market_records):
        rows = enrich(market_records)
        scores = {r.id: r.score for r in rows}
        assert scores == {"gamma": 50, "beta": 61, "delta": 15, "alpha": 71}
        labels = {r.id: r.label for r in rows}
        assert labels["alpha"] is ConfidenceLabel.HIGH
        assert labels["beta"] is ConfidenceLabel.MEDIUM

    def test_enrich_accepts_snapshots(self):
        rows = enrich([AssetSnapshot(id="x", change24h=10, change7d=10, change30d=10)])
        assert rows[0].score == 61

    def test_search(self, market_records):
        rows = enrich(market_records)
        assert _ids(search(rows, "ga")) == ["gamma"]
        assert _ids(search(rows, "BET")) == ["beta"]
        assert _ids(search(rows, "  ")) == _ids(rows)
        assert search(rows, "zzz") == []

    def test_only_high(self, market_records):
        rows = enrich(market_records)
        assert _ids(only_high(rows)) == ["alpha"]
        assert _ids(only_high(rows, enabled=False)) == _ids(rows)

    @pytest.mark.parametrize(
        "key,direction,expected",
        [
            ("score", "desc", ["alpha", "beta", "gamma", "delta"]),
            ("score", "asc", ["delta", "gamma", "beta", "alpha"]),
            ("name", "asc", ["alpha", "beta", "delta", "gamma"]),
            ("price", "desc", ["gamma", "delta", "alpha", "beta"]),
            ("change24", "desc", ["alpha", "beta", "gamma", "delta"]),
            ("bogus", "desc", ["alpha", "beta", "gamma", "delta"]),
        ],
    )
    def test_sort_rows(self, market_records, key, direction, expected):
        assert _ids(sort_rows(enrich(market_records), key, direction)) == expected

    def test_sort_is_stable_for_ties(self):
        records = [{"id": str(i), "name": f"Coin {i}"} for i in range(5)]
        assert _ids(sort_rows(enrich(records), "score", "desc")) == ["0", "1", "2", "3", "4"]

    def test_paginate(self, market_records):
        rows = sort_rows(enrich(market_records))
        page = paginate(rows, 2, 3)
        assert page.total_pages == 2
        assert page.total == 4
        assert _ids(page.rows) == ["delta"]

        # Past the last page resets to the first
        page = paginate(rows, 5, 3)
        assert page.page == 1
        assert _ids(page.rows) == ["alpha", "beta", "gamma"]

    def test_paginate_empty(self):
        page = paginate([], 1, 25)
        assert page.total_pages == 1
        assert page.rows == []

    def test_watchlist_rows_and_summary(self, market_records):
        rows = enrich(market_records)
        watched = watchlist_rows(rows, ["delta", "alpha", "unknown"], "score")
        assert _ids(watched) == ["alpha", "delta"]
        assert _ids(watchlist_rows(rows, ["gamma", "alpha"], "name")) == ["alpha", "gamma"]

        summary = watchlist_summary(watched)
        assert summary.count == 2
        assert summary.avg_score == 43
        assert summary.high == 1

    def test_empty_watchlist_summary(self):
        summary = watchlist_summary([])
        assert summary.count == 0
        assert summary.avg_score is None

    def test_top_movers(self, market_records):
        assert _ids(top_movers(enrich(market_records), 3)) == ["alpha", "beta", "gamma"]


class TestTableQuery:
    def test_defaults(self):
        query = TableQuery.from_params({})
        assert query == TableQuery()

    def test_params_are_clamped(self):
        query = TableQuery.from_params(
            {
                "view": "watchlist",
                "q": "btc",
                "high": "yes",
                "limit": "100",
                "size": "40",
                "page": "2.9",
                "sort": "price",
                "dir": "sideways",
                "wsort": "name",
                "sel": "bitcoin",
            }
        )
        assert query.view == "watchlist"
        assert query.q == "btc"
        assert query.only_high is True
        assert query.market_limit == 100
        assert query.page_size == 25
        assert query.page == 2
        assert query.sort_key == "price"
        assert query.sort_dir == "desc"
        assert query.watch_sort == "name"
        assert query.selected_id == "bitcoin"

    def test_preferences_supply_defaults(self):
        prefs = {
            "watch_only_high_default": True,
            "page_size": 50,
            "market_limit": 100,
            "all_sort_key": "name",
            "all_sort_dir": "asc",
            "watch_sort_default": "change24",
            "default_view": "watchlist",
        }
        query = TableQuery.from_params({}, prefs)
        assert query.only_high is True
        assert query.page_size == 50
        assert query.market_limit == 100
        assert (query.sort_key, query.sort_dir, query.watch_sort) == ("name", "asc", "change24")
        assert query.view == "watchlist"

        # URL wins over preferences
        assert TableQuery.from_params({"high": "0"}, prefs).only_high is False

    def test_to_params(self):
        query = TableQuery(q="  sol ", only_high=True, selected_id="solana")
        params = query.to_params()
        assert params["q"] == "sol"
        assert params["high"] == "1"
        assert params["sel"] == "solana"
        assert "q" not in TableQuery().to_params()


class TestBuildTable:
    def test_all_view(self, market_records):
        table = build_table(market_records, TableQuery(page_size=25))
        assert _ids(table.rows) == ["alpha", "beta", "gamma", "delta"]
        assert table.total == 4
        assert table.total_pages == 1
        assert table.find("beta").score == 61
        assert table.find("nope") is None

    def test_only_high_and_search(self, market_records):
        assert _ids(build_table(market_records, TableQuery(only_high=True)).rows) == ["alpha"]
        assert _ids(build_table(market_records, TableQuery(q="del")).rows) == ["delta"]

    def test_watchlist_view(self, market_records):
        table = build_table(market_records, TableQuery(view="watchlist"), ["gamma", "beta"])
        assert _ids(table.rows) == ["beta", "gamma"]
        assert table.total_pages == 1
        assert table.summary.count == 2
        assert table.summary.avg_score == 56

    def test_watchlist_respects_only_high(self, market_records):
        table = build_table(market_records, TableQuery(view="watchlist", only_high=True), ["gamma", "beta"])
        assert table.rows == []
        assert table.summary.count == 0


class TestEmptyStateMessage:
    def test_empty_watchlist(self):
        assert empty_state_message("watchlist", False, 0) == (
            "Your watchlist is empty. Go to All and star assets to track them."
        )
        assert empty_state_message("watchlist", True, 0).startswith("Your watchlist is empty.")

    def test_watchlist_filtered_by_only_high(self):
        assert empty_state_message("watchlist", True, 3) == (
            "Your watchlist may be filtered out. Turn off Only High confidence to see everything."
        )

    def test_all_view(self):
        assert empty_state_message("all", False, 0) == "No results. Try a different search."
        assert "Only High" in empty_state_message("all", True, 5)
