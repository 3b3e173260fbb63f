"""
Atomic JSON I/O for locally persisted state (watchlist, preferences, reports).

Writes go through a temp file + os.replace so a crash never leaves a
half-written file behind.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from momentum_board.logging_utils import get_board_logger

_logger = get_board_logger("storage")


def atomic_write_json(path: str | Path, obj: Any) -> None:
    """
    Write JSON file atomically using temp file + os.replace.

    Ensures parent directory exists.

    Args:
        path: Target file path
        obj: JSON-serializable object (dict or list)
    """
    path_obj = Path(path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)

    temp_path = path_obj.with_suffix(path_obj.suffix + ".tmp")

    try:
        with temp_path.open("w", encoding="utf-8") as f:
            json.dump(obj, f, indent=2, ensure_ascii=False)
        os.replace(str(temp_path), str(path_obj))
    except Exception:
        # Clean up temp file on error
        if temp_path.exists():
            temp_path.unlink()
        raise


def load_json(path: str | Path, default: Any = None) -> Any:
    """
    Load a JSON file, returning `default` when it is missing, empty or invalid.
    """
    path_obj = Path(path)
    if not path_obj.exists():
        return default
    try:
        content = path_obj.read_text(encoding="utf-8").strip()
    except OSError as e:
        _logger.warning(f"STORAGE_READ_FAILED path={path_obj} err={e}")
        return default
    if not content:
        return default
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        _logger.warning(f"STORAGE_INVALID_JSON path={path_obj} err={e}")
        return default
