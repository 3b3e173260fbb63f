"""
Config Loader - dashboard and market-data settings

Reads config/board_config.yaml (or the file named by MOMENTUM_BOARD_CONFIG),
merges it over built-in defaults and applies environment overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from momentum_board.core.paths import CONFIG, DATA

DEFAULT_CONFIG_PATH = CONFIG / "board_config.yaml"


@dataclass(frozen=True)
class BoardConfig:
    base_url: str = "https://api.coingecko.com/api/v3"
    vs_currency: str = "usd"
    market_limit: int = 250
    request_timeout: float = 10.0
    cache_ttl_seconds: int = 60         # successful upstream responses
    error_ttl_seconds: int = 15         # upstream failures
    refresh_interval_seconds: int = 60
    data_dir: Path = DATA
    user_agent: str = "MomentumBoard/1.0"

    @property
    def watchlist_path(self) -> Path:
        return self.data_dir / "watchlist.json"

    @property
    def preferences_path(self) -> Path:
        return self.data_dir / "preferences.json"


# env var -> (field, cast)
ENV_OVERRIDES = {
    "MOMENTUM_BOARD_BASE_URL": ("base_url", str),
    "MOMENTUM_BOARD_VS_CURRENCY": ("vs_currency", str),
    "MOMENTUM_BOARD_CACHE_TTL": ("cache_ttl_seconds", int),
    "MOMENTUM_BOARD_DATA_DIR": ("data_dir", Path),
}


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid board config at {path}: {e}")
    if not isinstance(data, dict):
        raise ValueError(f"Board config at {path} must be a mapping, got {type(data).__name__}")
    return data


def load_board_config(path: Optional[str | Path] = None) -> BoardConfig:
    """
    Load BoardConfig.

    Priority (highest first): environment overrides, YAML file, defaults.
    Unknown YAML keys are ignored.
    """
    if path is None:
        path = os.getenv("MOMENTUM_BOARD_CONFIG") or DEFAULT_CONFIG_PATH
    raw = _read_yaml(Path(path))

    known = {f.name for f in fields(BoardConfig)}
    values: Dict[str, Any] = {k: v for k, v in raw.items() if k in known and v is not None}
    if "data_dir" in values:
        values["data_dir"] = Path(values["data_dir"])

    for env_name, (field_name, cast) in ENV_OVERRIDES.items():
        env_value = os.getenv(env_name)
        if env_value:
            try:
                values[field_name] = cast(env_value)
            except ValueError:
                raise ValueError(f"{env_name} has invalid value {env_value!r}")

    return replace(BoardConfig(), **values)
