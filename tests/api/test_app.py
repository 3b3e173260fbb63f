"""
Tests for the Momentum Board API (market client overridden).
"""
import pytest
from fastapi.testclient import TestClient

from momentum_board.api.app import CACHE_ERROR, CACHE_OK, app, get_client
from momentum_board.data.market_data import MarketDataError, MarketsPayload

FETCHED_AT = "2026-01-01T00:00:00Z"


class FakeMarketClient:
    def __init__(self, records=None, error=None):
        self.records = records or []
        self.error = error
        self.calls = []

    def fetch_markets(self, per_page=None, force=False):
        self.calls.append(per_page)
        if self.error:
            raise self.error
        return MarketsPayload(data=self.records, fetched_at=FETCHED_AT)


@pytest.fixture
def fake_client(market_records):
    return FakeMarketClient(market_records)


@pytest.fixture
def api(fake_client):
    app.dependency_overrides[get_client] = lambda: fake_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def failing_api():
    failing = FakeMarketClient(error=MarketDataError("CoinGecko error (500)", 500))
    app.dependency_overrides[get_client] = lambda: failing
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestMarkets:
    def test_root_and_health(self, api):
        assert api.get("/").json()["name"] == "Momentum Board API"
        assert api.get("/health").json()["ok"] is True

    def test_markets_proxy(self, api, fake_client, market_records):
        resp = api.get("/markets", params={"per_page": 50})
        assert resp.status_code == 200
        assert resp.json() == {"data": market_records, "fetchedAt": FETCHED_AT}
        assert resp.headers["cache-control"] == CACHE_OK
        assert fake_client.calls == [50]

    def test_markets_upstream_error(self, failing_api):
        resp = failing_api.get("/markets")
        assert resp.status_code == 502
        assert resp.json() == {"error": "CoinGecko error (500)"}
        assert resp.headers["cache-control"] == CACHE_ERROR

    def test_markets_rejects_bad_per_page(self, api):
        assert api.get("/markets", params={"per_page": 0}).status_code == 422


class TestMomentum:
    def test_ranked_rows(self, api):
        resp = api.get("/momentum")
        assert resp.status_code == 200
        body = resp.json()
        assert [r["id"] for r in body["rows"]] == ["alpha", "beta", "gamma", "delta"]
        assert body["total"] == 4
        assert body["totalPages"] == 1
        assert body["fetchedAt"] == FETCHED_AT

        top = body["rows"][0]
        assert top["score"] == 71
        assert top["confidence"]["label"] == "High"
        assert len(top["breakdown"]["drivers"]) == 5
        assert top["breakdown"]["inputs"]["volatilityProxy"] == 5.0

    def test_filters_and_sorting(self, api):
        body = api.get("/momentum", params={"high": "1"}).json()
        assert [r["id"] for r in body["rows"]] == ["alpha"]

        body = api.get("/momentum", params={"sort": "name", "dir": "asc"}).json()
        assert [r["id"] for r in body["rows"]] == ["alpha", "beta", "delta", "gamma"]

        body = api.get("/momentum", params={"q": "gam"}).json()
        assert [r["id"] for r in body["rows"]] == ["gamma"]

    def test_single_asset(self, api):
        body = api.get("/momentum/delta").json()
        assert body["score"] == 15
        assert body["confidence"]["label"] == "Low"
        assert body["change24h"] == -25

    def test_unknown_asset(self, api):
        resp = api.get("/momentum/nope")
        assert resp.status_code == 404
        assert resp.json()["error"] == "NOT_FOUND"

    def test_upstream_error(self, failing_api):
        resp = failing_api.get("/momentum")
        assert resp.status_code == 502
        assert resp.json()["error"] == "UPSTREAM_ERROR"
        assert resp.json()["message"] == "CoinGecko error (500)"


class TestAdhocScore:
    def test_empty_body_is_neutral(self, api):
        resp = api.post("/momentum/score", json={})
        assert resp.status_code == 200
        body = resp.json()
        assert body["breakdown"]["score"] == 50
        assert body["confidence"]["label"] == "Low"
        assert len(body["breakdown"]["whatWouldChange"]) == 2

    def test_scores_given_changes(self, api, fake_client):
        body = api.post("/momentum/score", json={"change24h": 8, "change7d": 12, "change30d": 5}).json()
        assert body["breakdown"]["score"] == 60
        assert body["confidence"]["label"] == "Medium"
        assert fake_client.calls == []
