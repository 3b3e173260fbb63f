"""
Momentum engine - explainable composite score per asset.

Turns the 24h / 7d / 30d percentage changes of an asset into a bounded
0-100 score, five driver sentences, a list of "what would change this"
hints and a High / Medium / Low confidence label.

Decision support only: fixed coefficients, no forecasting.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Context, Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

# Clamp ranges applied before weighting
CLAMP_24H = (-20.0, 20.0)
CLAMP_7D = (-30.0, 30.0)
CLAMP_30D = (-50.0, 50.0)

# Composite weights (7d dominates, 30d softened by the divisor)
WEIGHT_7D = 0.45
WEIGHT_24H = 0.35
WEIGHT_30D = 0.20
SOFTEN_30D = 1.5

VOLATILITY_CAP = 40.0
VOLATILITY_PENALTY = 0.25
SCORE_CENTER = 50.0
SCORE_SPREAD = 1.2

# Driver thresholds (raw inputs)
STRONG_7D = 5.0
STRONG_24H = 3.0
BROAD_30D = 15.0
CHOPPY_GAP = 15.0

# "What would change" thresholds
WHAT_IF_CHOPPY_GAP = 12.0

# Confidence thresholds
HIGH_MIN_SCORE = 70
HIGH_MAX_GAP = 12.0
MEDIUM_MIN_SCORE = 55
MEDIUM_MAX_GAP = 18.0

FALLBACK_WHAT_WOULD_CHANGE = "Momentum is already supported by multiple aligned signals."

MISSING = "—"

CHANGE_24H_KEYS = ("change24h", "price_change_percentage_24h_in_currency", "price_change_percentage_24h")
CHANGE_7D_KEYS = ("change7d", "price_change_percentage_7d_in_currency", "price_change_percentage_7d")
CHANGE_30D_KEYS = ("change30d", "price_change_percentage_30d_in_currency", "price_change_percentage_30d")


class ConfidenceLabel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


CONFIDENCE_EXPLANATIONS: Dict[ConfidenceLabel, str] = {
    ConfidenceLabel.HIGH: (
        "Signals are strong and mostly aligned. This does not predict returns — "
        "it indicates cleaner momentum conditions."
    ),
    ConfidenceLabel.MEDIUM: (
        "Momentum is present, but the signal quality is mixed (mild conflict or choppiness). "
        "Consider smaller position sizing or waiting for confirmation."
    ),
    ConfidenceLabel.LOW: (
        "Momentum is weak or inconsistent. This is not a forecast — "
        "it suggests the current setup is noisier and harder to rely on."
    ),
}


def clamp(n: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, n))


def normalize_change(value: Any) -> float:
    """
    Coerce a percentage change to a finite float.

    None, non-numeric values, NaN and +/-inf all become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(num):
        return 0.0
    return num


_CENT = Decimal("0.01")
_PCT_CONTEXT = Context(prec=400)  # wide enough for any finite float at two decimals


def format_pct(n: Any) -> str:
    """Sign-prefixed percentage with two decimals, e.g. +3.25%, -1.50%, 0.00%."""
    if n is None or isinstance(n, bool):
        return MISSING
    try:
        num = float(n)
    except (TypeError, ValueError):
        return MISSING
    if math.isnan(num):
        return MISSING
    if num == 0:
        num = 0.0  # drops the sign of -0.0
    sign = "+" if num > 0 else ""
    if math.isinf(num):
        return f"{sign}{num:.2f}%"
    # ties round away from zero on the exact binary value
    fixed = Decimal(num).quantize(_CENT, rounding=ROUND_HALF_UP, context=_PCT_CONTEXT)
    return f"{sign}{fixed}%"


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def is_trend_aligned(c24: float, c7: float) -> bool:
    return (c24 >= 0 and c7 >= 0) or (c24 <= 0 and c7 <= 0)


def _first_present(record: Mapping[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


@dataclass(frozen=True)
class AssetSnapshot:
    """One asset as supplied by the market feed. Descriptive fields pass through."""

    id: str
    change24h: Optional[float] = None
    change7d: Optional[float] = None
    change30d: Optional[float] = None
    name: str = ""
    symbol: str = ""
    current_price: Optional[float] = None
    image: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "AssetSnapshot":
        """
        Build a snapshot from a CoinGecko /coins/markets row or a short-key dict.

        Accepts both `price_change_percentage_7d_in_currency` style keys and
        `change7d` style keys.
        """
        price = record.get("current_price", record.get("price"))
        return cls(
            id=str(record.get("id") or ""),
            change24h=_first_present(record, CHANGE_24H_KEYS),
            change7d=_first_present(record, CHANGE_7D_KEYS),
            change30d=_first_present(record, CHANGE_30D_KEYS),
            name=str(record.get("name") or ""),
            symbol=str(record.get("symbol") or ""),
            current_price=float(price) if isinstance(price, (int, float)) and not isinstance(price, bool) else None,
            image=record.get("image"),
        )


@dataclass(frozen=True)
class MomentumInputs:
    c24: float
    c7: float
    c30: float
    volatility_proxy: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "c24": self.c24,
            "c7": self.c7,
            "c30": self.c30,
            "volatilityProxy": self.volatility_proxy,
        }


@dataclass(frozen=True)
class MomentumBreakdown:
    score: int
    inputs: MomentumInputs
    drivers: Tuple[str, ...] = field(default_factory=tuple)
    what_would_change: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "inputs": self.inputs.to_dict(),
            "drivers": list(self.drivers),
            "whatWouldChange": list(self.what_would_change),
        }


@dataclass(frozen=True)
class Confidence:
    label: ConfidenceLabel
    explanation: str

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label.value, "explanation": self.explanation}


AssetLike = Union[AssetSnapshot, Mapping[str, Any]]


def _to_snapshot(asset: AssetLike) -> AssetSnapshot:
    if isinstance(asset, AssetSnapshot):
        return asset
    return AssetSnapshot.from_record(asset or {})


def _drivers(c24: float, c7: float, c30: float, volatility_proxy: float) -> Tuple[str, ...]:
    drivers = []

    if c7 >= STRONG_7D:
        drivers.append(f"Strong 7-day trend ({format_pct(c7)}) is supporting momentum.")
    elif c7 <= -STRONG_7D:
        drivers.append(f"Weak 7-day trend ({format_pct(c7)}) is dragging momentum.")
    else:
        drivers.append(f"7-day trend is mild ({format_pct(c7)}), so momentum is less decisive.")

    if c24 >= STRONG_24H:
        drivers.append(f"Recent 24h move is positive ({format_pct(c24)}) and adds short-term strength.")
    elif c24 <= -STRONG_24H:
        drivers.append(f"Recent 24h move is negative ({format_pct(c24)}) and adds short-term pressure.")
    else:
        drivers.append(f"24h move is small ({format_pct(c24)}), so the short-term signal is muted.")

    if abs(c30) >= BROAD_30D:
        direction = "uptrend" if c30 >= 0 else "downtrend"
        drivers.append(f"30-day {direction} ({format_pct(c30)}) provides broader context.")
    else:
        drivers.append(f"30-day change is modest ({format_pct(c30)}), suggesting a steadier backdrop.")

    if volatility_proxy >= CHOPPY_GAP:
        drivers.append(
            f"Signals are choppy (24h vs 7d differs by ~{volatility_proxy:.1f} pts), which reduces confidence."
        )
    else:
        drivers.append(f"Signals are fairly consistent (24h vs 7d gap ~{volatility_proxy:.1f} pts).")

    if is_trend_aligned(c24, c7):
        drivers.append("Short-term and 7-day signals point in the same direction (better signal quality).")
    else:
        drivers.append("Short-term and 7-day signals conflict (treat as a lower-quality setup).")

    return tuple(drivers)


def _what_would_change(c24: float, c7: float, c30: float, volatility_proxy: float) -> Tuple[str, ...]:
    hints = []
    if c7 < STRONG_7D:
        hints.append("A stronger 7-day trend would raise momentum.")
    if c24 < STRONG_24H:
        hints.append("A clean positive 24h move would improve the short-term signal.")
    if volatility_proxy > WHAT_IF_CHOPPY_GAP:
        hints.append("Less choppiness between short-term and 7-day moves would raise confidence.")
    if c30 < 0:
        hints.append("A stabilizing 30-day trend would reduce longer-term drag.")
    return tuple(hints) if hints else (FALLBACK_WHAT_WOULD_CHANGE,)


def compute_momentum_breakdown(asset: AssetLike) -> MomentumBreakdown:
    """
    Compute the momentum score and its explanation for one asset.

    Args:
        asset: AssetSnapshot or a raw feed record (missing changes count as 0)

    Returns:
        MomentumBreakdown with score in [0, 100], 5 drivers and 1-4 hints
    """
    snap = _to_snapshot(asset)
    c24 = normalize_change(snap.change24h)
    c7 = normalize_change(snap.change7d)
    c30 = normalize_change(snap.change30d)

    # Raw gap is reported as-is (capped to a finite float); only the penalty uses the clamped value
    volatility_proxy = min(abs(c24 - c7), sys.float_info.max)

    n24 = clamp(c24, *CLAMP_24H)
    n7 = clamp(c7, *CLAMP_7D)
    n30 = clamp(c30, *CLAMP_30D)

    raw = WEIGHT_7D * n7 + WEIGHT_24H * n24 + WEIGHT_30D * (n30 / SOFTEN_30D)
    penalty = clamp(volatility_proxy, 0.0, VOLATILITY_CAP) * VOLATILITY_PENALTY

    scaled = SCORE_CENTER + raw * SCORE_SPREAD - penalty
    score = round_half_up(clamp(scaled, 0.0, 100.0))

    return MomentumBreakdown(
        score=score,
        inputs=MomentumInputs(c24=c24, c7=c7, c30=c30, volatility_proxy=volatility_proxy),
        drivers=_drivers(c24, c7, c30, volatility_proxy),
        what_would_change=_what_would_change(c24, c7, c30, volatility_proxy),
    )


def compute_confidence(breakdown: MomentumBreakdown) -> Confidence:
    """First matching rule wins: High, then Medium, else Low."""
    score = breakdown.score
    inputs = breakdown.inputs
    aligned = is_trend_aligned(inputs.c24, inputs.c7)
    gap = inputs.volatility_proxy

    if score >= HIGH_MIN_SCORE and aligned and gap <= HIGH_MAX_GAP:
        label = ConfidenceLabel.HIGH
    elif score >= MEDIUM_MIN_SCORE and (aligned or gap <= MEDIUM_MAX_GAP):
        label = ConfidenceLabel.MEDIUM
    else:
        label = ConfidenceLabel.LOW

    return Confidence(label=label, explanation=CONFIDENCE_EXPLANATIONS[label])


def score_asset(asset: AssetLike) -> Tuple[MomentumBreakdown, Confidence]:
    breakdown = compute_momentum_breakdown(asset)
    return breakdown, compute_confidence(breakdown)
