# momentum_board/core/paths.py
from pathlib import Path

# Repository root two levels up from here
ROOT = Path(__file__).resolve().parents[2]

DATA    = ROOT / "data"
LOGS    = ROOT / "logs"
CONFIG  = ROOT / "config"
REPORTS = ROOT / "reports"
