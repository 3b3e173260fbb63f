"""
Ranking - turns feed records into the scored, filtered, sorted table.

Pipeline: enrich -> search -> only-high -> sort + paginate (view "all")
or watchlist rows (view "watchlist").
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from momentum_board.core.momentum import (
    AssetSnapshot,
    Confidence,
    ConfidenceLabel,
    MomentumBreakdown,
    normalize_change,
    round_half_up,
    score_asset,
)

SORT_KEYS = ("score", "change24", "name", "price")
SORT_DIRS = ("asc", "desc")
PAGE_SIZES = (25, 50)
MARKET_LIMITS = (50, 100, 250)
VIEWS = ("all", "watchlist")

_TRUE_STRINGS = ("1", "true", "yes", "on")
_FALSE_STRINGS = ("0", "false", "no", "off")


def clamp_enum(value: Any, allowed: Sequence[Any], fallback: Any) -> Any:
    return value if value in allowed else fallback


def clamp_num(value: Any, allowed: Sequence[int], fallback: int) -> int:
    try:
        num = float(value)
    except (TypeError, ValueError):
        return fallback
    if num in allowed:
        return int(num)
    return fallback


def clamp_page(value: Any, fallback: int = 1) -> int:
    try:
        num = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(num):
        return fallback
    return max(1, int(math.floor(num)))


def to_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    text = str(value).lower().strip()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    return None


@dataclass(frozen=True)
class RankedAsset:
    asset: AssetSnapshot
    breakdown: MomentumBreakdown
    confidence: Confidence

    @property
    def id(self) -> str:
        return self.asset.id

    @property
    def score(self) -> int:
        return self.breakdown.score

    @property
    def label(self) -> ConfidenceLabel:
        return self.confidence.label

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.asset.id,
            "name": self.asset.name,
            "symbol": self.asset.symbol,
            "image": self.asset.image,
            "currentPrice": self.asset.current_price,
            "change24h": self.breakdown.inputs.c24,
            "change7d": self.breakdown.inputs.c7,
            "change30d": self.breakdown.inputs.c30,
            "score": self.score,
            "confidence": self.confidence.to_dict(),
            "breakdown": self.breakdown.to_dict(),
        }


@dataclass(frozen=True)
class Page:
    rows: List[RankedAsset]
    page: int
    total_pages: int
    total: int


@dataclass(frozen=True)
class WatchlistSummary:
    count: int
    avg_score: Optional[int]
    high: int


def enrich(records: Iterable[Any]) -> List[RankedAsset]:
    """Score every record once. Accepts AssetSnapshot objects or raw feed dicts."""
    rows = []
    for record in records:
        snap = record if isinstance(record, AssetSnapshot) else AssetSnapshot.from_record(record)
        breakdown, confidence = score_asset(snap)
        rows.append(RankedAsset(asset=snap, breakdown=breakdown, confidence=confidence))
    return rows


def search(rows: Iterable[RankedAsset], query: Optional[str]) -> List[RankedAsset]:
    q = (query or "").lower().strip()
    if not q:
        return list(rows)
    return [r for r in rows if q in r.asset.name.lower() or q in r.asset.symbol.lower()]


def only_high(rows: Iterable[RankedAsset], enabled: bool = True) -> List[RankedAsset]:
    if not enabled:
        return list(rows)
    return [r for r in rows if r.label is ConfidenceLabel.HIGH]


def _sort_value(row: RankedAsset, key: str) -> Any:
    if key == "name":
        return row.asset.name.casefold()
    if key == "price":
        return normalize_change(row.asset.current_price)
    if key == "change24":
        return row.breakdown.inputs.c24
    return row.score


def sort_rows(rows: Iterable[RankedAsset], key: str = "score", direction: str = "desc") -> List[RankedAsset]:
    """Stable sort; unknown keys sort by score, unknown directions sort descending."""
    key = clamp_enum(key, SORT_KEYS, "score")
    reverse = direction != "asc"
    return sorted(rows, key=lambda r: _sort_value(r, key), reverse=reverse)


def paginate(rows: Sequence[RankedAsset], page: int, page_size: int) -> Page:
    page_size = max(1, int(page_size))
    total = len(rows)
    total_pages = max(1, math.ceil(total / page_size))
    if page > total_pages or page < 1:
        page = 1
    start = (page - 1) * page_size
    return Page(rows=list(rows[start:start + page_size]), page=page, total_pages=total_pages, total=total)


def watchlist_rows(rows: Iterable[RankedAsset], watch_ids: Iterable[str], sort_key: str = "score") -> List[RankedAsset]:
    watched = set(watch_ids)
    items = [r for r in rows if r.id in watched]
    direction = "asc" if sort_key == "name" else "desc"
    return sort_rows(items, sort_key, direction)


def watchlist_summary(rows: Sequence[RankedAsset]) -> WatchlistSummary:
    count = len(rows)
    if not count:
        return WatchlistSummary(count=0, avg_score=None, high=0)
    avg = round_half_up(sum(r.score for r in rows) / count)
    high = sum(1 for r in rows if r.label is ConfidenceLabel.HIGH)
    return WatchlistSummary(count=count, avg_score=avg, high=high)


def top_movers(rows: Iterable[RankedAsset], n: int = 3) -> List[RankedAsset]:
    return sort_rows(rows, "score", "desc")[:n]


@dataclass
class TableQuery:
    view: str = "all"
    q: str = ""
    only_high: bool = False
    market_limit: int = 250
    page_size: int = 25
    page: int = 1
    sort_key: str = "score"
    sort_dir: str = "desc"
    watch_sort: str = "score"
    selected_id: Optional[str] = None

    @classmethod
    def from_params(cls, params: Optional[Mapping[str, Any]] = None, prefs: Optional[Mapping[str, Any]] = None) -> "TableQuery":
        """
        Build a query from URL-style parameters, falling back to preferences.

        Every value is clamped to its allowed set; garbage never raises.
        """
        params = params or {}
        prefs = prefs or {}

        base_limit = clamp_num(prefs.get("market_limit"), MARKET_LIMITS, 250)
        base_size = clamp_num(prefs.get("page_size"), PAGE_SIZES, 25)
        base_high = bool(prefs.get("watch_only_high_default", False))
        base_sort = clamp_enum(prefs.get("all_sort_key"), SORT_KEYS, "score")
        base_dir = clamp_enum(prefs.get("all_sort_dir"), SORT_DIRS, "desc")
        base_wsort = clamp_enum(prefs.get("watch_sort_default"), SORT_KEYS, "score")
        base_view = clamp_enum(prefs.get("default_view"), VIEWS, "all")

        high = to_bool(params.get("high"))
        q = params.get("q")
        sel = params.get("sel")

        return cls(
            view=clamp_enum(params.get("view"), VIEWS, base_view),
            q=q if isinstance(q, str) else "",
            only_high=base_high if high is None else high,
            market_limit=clamp_num(params.get("limit"), MARKET_LIMITS, base_limit),
            page_size=clamp_num(params.get("size"), PAGE_SIZES, base_size),
            page=clamp_page(params.get("page"), 1),
            sort_key=clamp_enum(params.get("sort"), SORT_KEYS, base_sort),
            sort_dir=clamp_enum(params.get("dir"), SORT_DIRS, base_dir),
            watch_sort=clamp_enum(params.get("wsort"), SORT_KEYS, base_wsort),
            selected_id=str(sel) if sel else None,
        )

    def to_params(self) -> Dict[str, str]:
        params = {"view": self.view}
        if self.q.strip():
            params["q"] = self.q.strip()
        params.update(
            {
                "high": "1" if self.only_high else "0",
                "limit": str(self.market_limit),
                "size": str(self.page_size),
                "page": str(self.page),
                "sort": self.sort_key,
                "dir": self.sort_dir,
                "wsort": self.watch_sort,
            }
        )
        if self.selected_id:
            params["sel"] = self.selected_id
        return params


@dataclass
class TableResult:
    rows: List[RankedAsset]
    page: int
    total_pages: int
    total: int
    enriched: List[RankedAsset] = field(default_factory=list)
    watchlist: List[RankedAsset] = field(default_factory=list)
    summary: WatchlistSummary = field(default_factory=lambda: WatchlistSummary(0, None, 0))

    def find(self, asset_id: Optional[str]) -> Optional[RankedAsset]:
        if not asset_id:
            return None
        for row in self.enriched:
            if row.id == asset_id:
                return row
        return None


def build_table(records: Iterable[Any], query: TableQuery, watch_ids: Iterable[str] = ()) -> TableResult:
    enriched = enrich(records)
    filtered = only_high(search(enriched, query.q), query.only_high)
    watched = watchlist_rows(filtered, watch_ids, query.watch_sort)
    summary = watchlist_summary(watched)

    if query.view == "watchlist":
        return TableResult(
            rows=watched,
            page=1,
            total_pages=1,
            total=len(watched),
            enriched=enriched,
            watchlist=watched,
            summary=summary,
        )

    page = paginate(sort_rows(filtered, query.sort_key, query.sort_dir), query.page, query.page_size)
    return TableResult(
        rows=page.rows,
        page=page.page,
        total_pages=page.total_pages,
        total=page.total,
        enriched=enriched,
        watchlist=watched,
        summary=summary,
    )


def empty_state_message(view: str, only_high: bool, watch_count: int) -> str:
    """Message shown when the table has no rows to display."""
    if view == "watchlist":
        if watch_count == 0:
            return "Your watchlist is empty. Go to All and star assets to track them."
        if only_high:
            return "Your watchlist may be filtered out. Turn off Only High confidence to see everything."
        return "No watched assets match the current search."
    if only_high:
        return "No results. Try a different search, or turn off Only High confidence."
    return "No results. Try a different search."
