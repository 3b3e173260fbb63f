"""
Watchlist persistence - a JSON list of asset ids.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from momentum_board.core.atomic_io import atomic_write_json, load_json
from momentum_board.core.paths import DATA

DEFAULT_WATCHLIST_PATH = DATA / "watchlist.json"


def _clean(ids: Iterable[object]) -> List[str]:
    seen = set()
    out: List[str] = []
    for asset_id in ids:
        if not asset_id or not isinstance(asset_id, str):
            continue
        if asset_id in seen:
            continue
        seen.add(asset_id)
        out.append(asset_id)
    return out


def load_watchlist(path: Optional[Path] = None) -> List[str]:
    """Return the saved asset ids. Missing or malformed files give []."""
    data = load_json(path or DEFAULT_WATCHLIST_PATH, default=[])
    if not isinstance(data, list):
        return []
    return _clean(data)


def save_watchlist(ids: Iterable[str], path: Optional[Path] = None) -> List[str]:
    cleaned = _clean(ids)
    atomic_write_json(path or DEFAULT_WATCHLIST_PATH, cleaned)
    return cleaned


def toggle_watch(ids: Iterable[str], asset_id: str) -> List[str]:
    """Return a new list with `asset_id` added (at the end) or removed."""
    current = _clean(ids)
    if asset_id in current:
        return [i for i in current if i != asset_id]
    return current + [asset_id]


class Watchlist:
    """File-backed watchlist. Every mutation is persisted immediately."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else DEFAULT_WATCHLIST_PATH
        self._ids = load_watchlist(self.path)

    @property
    def ids(self) -> List[str]:
        return list(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._ids

    def contains(self, asset_id: str) -> bool:
        return asset_id in self._ids

    def toggle(self, asset_id: str) -> bool:
        """Toggle membership; returns True if the asset is now watched."""
        self._ids = save_watchlist(toggle_watch(self._ids, asset_id), self.path)
        return asset_id in self._ids

    def add(self, asset_id: str) -> None:
        if asset_id not in self._ids:
            self._ids = save_watchlist(self._ids + [asset_id], self.path)

    def remove(self, asset_id: str) -> None:
        if asset_id in self._ids:
            self._ids = save_watchlist([i for i in self._ids if i != asset_id], self.path)

    def clear(self) -> None:
        self._ids = save_watchlist([], self.path)
