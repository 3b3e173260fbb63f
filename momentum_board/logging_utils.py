"""
Logging utilities for Momentum Board.

Provides dedicated file loggers per component (market data, api, dashboard).
"""

import logging
from pathlib import Path
from typing import Optional

from momentum_board.core.paths import LOGS

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_board_logger(name: str, logs_dir: Optional[Path] = None) -> logging.Logger:
    """
    Get or create a component logger.

    Returns a logger that writes to logs/<name>.log with timestamped entries.
    """
    logger = logging.getLogger(f"momentum_board.{name}")

    # Only configure if not already configured
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        logger.propagate = False

        target_dir = logs_dir or LOGS
        target_dir.mkdir(parents=True, exist_ok=True)

        fh = logging.FileHandler(target_dir / f"{name}.log", mode="a", encoding="utf-8")
        fh.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(fh)

    return logger
