"""
User preferences - persisted as a JSON object and merged over defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from momentum_board.core.atomic_io import atomic_write_json, load_json
from momentum_board.core.paths import DATA

DEFAULT_PREFERENCES_PATH = DATA / "preferences.json"

DEFAULT_PREFERENCES: Dict[str, Any] = {
    "onboarding_dismissed": False,
    "default_view": "all",            # "all" | "watchlist"
    "hide_top3": False,
    "watch_only_high_default": False,
    "watch_sort_default": "score",    # "score" | "change24" | "name" | "price"
    "market_limit": 250,              # 50 | 100 | 250
    "page_size": 25,                  # 25 | 50
    "all_sort_key": "score",
    "all_sort_dir": "desc",
}


def _merge(stored: Any) -> Dict[str, Any]:
    prefs = dict(DEFAULT_PREFERENCES)
    if isinstance(stored, dict):
        for key, value in stored.items():
            if key in prefs:
                prefs[key] = value
    return prefs


def load_preferences(path: Optional[Path] = None) -> Dict[str, Any]:
    return _merge(load_json(path or DEFAULT_PREFERENCES_PATH, default={}))


def save_preferences(prefs: Dict[str, Any], path: Optional[Path] = None) -> Dict[str, Any]:
    """Persist preferences (unknown keys dropped). Returns what was written."""
    merged = _merge(prefs)
    atomic_write_json(path or DEFAULT_PREFERENCES_PATH, merged)
    return merged


def update_preferences(path: Optional[Path] = None, **changes: Any) -> Dict[str, Any]:
    prefs = load_preferences(path)
    prefs.update({k: v for k, v in changes.items() if k in DEFAULT_PREFERENCES})
    return save_preferences(prefs, path)


def reset_preferences(path: Optional[Path] = None) -> Dict[str, Any]:
    target = Path(path or DEFAULT_PREFERENCES_PATH)
    if target.exists():
        target.unlink()
    return dict(DEFAULT_PREFERENCES)
