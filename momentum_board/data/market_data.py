"""
Market data - read-only CoinGecko /coins/markets feed with in-memory caching.

Successful responses are reused for `cache_ttl_seconds`; failures are
remembered for `error_ttl_seconds` so a broken upstream is not hammered.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import requests

from momentum_board.config.config_loader import BoardConfig, load_board_config
from momentum_board.core.momentum import AssetSnapshot
from momentum_board.logging_utils import get_board_logger

_logger = get_board_logger("market_data")

MAX_PER_PAGE = 250
SOURCE = "coingecko"


class MarketDataError(Exception):
    """Upstream feed could not be fetched or decoded."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class MarketsPayload:
    data: List[Dict[str, Any]]
    fetched_at: str
    source: str = SOURCE
    cached: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"data": self.data, "fetchedAt": self.fetched_at}


@dataclass
class _CacheEntry:
    expires_at: float
    payload: Optional[MarketsPayload] = None
    error: Optional[MarketDataError] = None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class MarketDataClient:
    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or load_board_config()
        self.session = session or requests.Session()
        self.clock = clock
        self._cache: Dict[int, _CacheEntry] = {}

    def _per_page(self, per_page: Optional[int]) -> int:
        if per_page is None:
            per_page = self.config.market_limit
        try:
            per_page = int(per_page)
        except (TypeError, ValueError):
            per_page = self.config.market_limit
        return max(1, min(MAX_PER_PAGE, per_page))

    def _request(self, per_page: int) -> List[Dict[str, Any]]:
        url = self.config.base_url.rstrip("/") + "/coins/markets"
        params = {
            "vs_currency": self.config.vs_currency,
            "order": "market_cap_desc",
            "per_page": per_page,
            "page": 1,
            "sparkline": "false",
            "price_change_percentage": "24h,7d,30d",
        }
        headers = {"accept": "application/json", "User-Agent": self.config.user_agent}

        try:
            resp = self.session.get(url, params=params, headers=headers, timeout=self.config.request_timeout)
        except requests.RequestException as e:
            _logger.warning(f"MARKETS_FETCH_FAILED per_page={per_page} err={type(e).__name__}: {e}")
            raise MarketDataError("Failed to reach CoinGecko")

        if not resp.ok:
            _logger.warning(f"MARKETS_FETCH_FAILED per_page={per_page} status={resp.status_code}")
            raise MarketDataError(f"CoinGecko error ({resp.status_code})", resp.status_code)

        try:
            data = resp.json()
        except ValueError:
            _logger.warning(f"MARKETS_BAD_JSON per_page={per_page} status={resp.status_code}")
            raise MarketDataError("CoinGecko returned invalid JSON", resp.status_code)

        if not isinstance(data, list):
            raise MarketDataError(f"Unexpected CoinGecko response type: {type(data).__name__}", resp.status_code)

        _logger.info(f"MARKETS_FETCH per_page={per_page} status={resp.status_code} rows={len(data)}")
        return data

    def fetch_markets(self, per_page: Optional[int] = None, force: bool = False) -> MarketsPayload:
        """
        Return the market feed, serving from cache while it is fresh.

        Raises:
            MarketDataError: upstream failure (possibly a cached one)
        """
        per_page = self._per_page(per_page)
        now = self.clock()
        entry = self._cache.get(per_page)

        if entry is not None and not force and now < entry.expires_at:
            if entry.error is not None:
                raise entry.error
            cached = entry.payload
            return MarketsPayload(data=cached.data, fetched_at=cached.fetched_at, source=cached.source, cached=True)

        try:
            data = self._request(per_page)
        except MarketDataError as e:
            self._cache[per_page] = _CacheEntry(expires_at=now + self.config.error_ttl_seconds, error=e)
            raise

        payload = MarketsPayload(data=data, fetched_at=_now_iso())
        self._cache[per_page] = _CacheEntry(expires_at=now + self.config.cache_ttl_seconds, payload=payload)
        return payload

    def snapshots(self, per_page: Optional[int] = None) -> List[AssetSnapshot]:
        payload = self.fetch_markets(per_page)
        return [AssetSnapshot.from_record(row) for row in payload.data if isinstance(row, dict)]

    def clear_cache(self) -> None:
        self._cache.clear()
