#!/usr/bin/env python3
"""
Momentum Report - rank assets by momentum score from the command line.

Reads a saved markets JSON (a list, or {"data": [...]} as served by /markets)
or fetches the live feed, then prints the ranked table.

Usage:
    python3 -m tools.momentum_report --top 20
    python3 -m tools.momentum_report --input markets.json --only-high --json reports/momentum.json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from momentum_board.core.atomic_io import atomic_write_json
from momentum_board.core.momentum import format_pct
from momentum_board.core.ranking import SORT_KEYS, only_high, sort_rows, enrich
from momentum_board.dashboard.formatting import format_money
from momentum_board.data.market_data import MarketDataClient, MarketDataError


def load_records(path: Path) -> List[Dict[str, Any]]:
    """
    Load feed records from a JSON file.

    Raises:
        ValueError: if the file does not hold a list or {"data": [...]}
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}")
    if isinstance(data, dict):
        data = data.get("data")
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of assets or an object with a 'data' list")
    return [row for row in data if isinstance(row, dict)]


def build_report(records: List[Dict[str, Any]], sort_key: str = "score", high_only: bool = False, top: Optional[int] = None):
    rows = only_high(enrich(records), high_only)
    direction = "asc" if sort_key == "name" else "desc"
    rows = sort_rows(rows, sort_key, direction)
    return rows[:top] if top else rows


def print_report(rows) -> None:
    print("\nMOMENTUM RANKING")
    print("----------------")
    if not rows:
        print("  No assets.")
        return
    for i, row in enumerate(rows, 1):
        inputs = row.breakdown.inputs
        print(
            f"  {i:>3}. {row.asset.symbol.upper():<8} {row.score:>3}  {row.label.value:<6} "
            f"{format_money(row.asset.current_price):>14}  24h {format_pct(inputs.c24):>8}  "
            f"7d {format_pct(inputs.c7):>8}  30d {format_pct(inputs.c30):>8}"
        )


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Rank crypto assets by momentum score")
    parser.add_argument("--input", type=Path, help="Markets JSON file (default: fetch live feed)")
    parser.add_argument("--limit", type=int, default=None, help="Markets to fetch when live (1-250)")
    parser.add_argument("--top", type=int, default=None, help="Only print the first N rows")
    parser.add_argument("--only-high", action="store_true", help="Keep High confidence assets only")
    parser.add_argument("--sort", choices=SORT_KEYS, default="score")
    parser.add_argument("--json", type=Path, dest="json_out", help="Also write ranked rows to this file")
    args = parser.parse_args(argv)

    try:
        if args.input:
            records = load_records(args.input)
        else:
            records = MarketDataClient().fetch_markets(args.limit).data
    except (ValueError, OSError, MarketDataError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    rows = build_report(records, args.sort, args.only_high, args.top)
    print_report(rows)

    if args.json_out:
        atomic_write_json(args.json_out, {"count": len(rows), "rows": [r.to_dict() for r in rows]})
        print(f"\nSaved → {args.json_out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
