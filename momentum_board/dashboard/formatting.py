"""
Display formatting shared by dashboard panels and the CLI report.
"""

from __future__ import annotations

import math
from typing import Any

from momentum_board.core.momentum import MISSING, ConfidenceLabel

BADGE_COLORS = {
    ConfidenceLabel.HIGH: "green",
    ConfidenceLabel.MEDIUM: "orange",
    ConfidenceLabel.LOW: "red",
}


def format_money(n: Any) -> str:
    """$1,234.56 at or above one dollar, three significant digits below (plain decimals down to 1e-6)."""
    if n is None or isinstance(n, bool):
        return MISSING
    try:
        num = float(n)
    except (TypeError, ValueError):
        return MISSING
    if not math.isfinite(num):
        return MISSING
    if num >= 1:
        return f"${num:,.2f}"
    if num == 0:
        return "$0.00"
    exponent = math.floor(math.log10(abs(num)))
    if exponent < -6:
        return f"${num:.2e}"
    return f"${num:.{max(0, 2 - exponent)}f}"


def confidence_badge(label: ConfidenceLabel | str) -> str:
    """Streamlit markdown badge, e.g. ':green[High]'."""
    label = ConfidenceLabel(label)
    return f":{BADGE_COLORS[label]}[{label.value}]"
