import sys
from pathlib import Path

import pytest

# Add project root so `import momentum_board` and `import tools` work in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _record(asset_id, name, symbol, price, c24, c7, c30):
    return {
        "id": asset_id,
        "name": name,
        "symbol": symbol,
        "current_price": price,
        "price_change_percentage_24h_in_currency": c24,
        "price_change_percentage_7d_in_currency": c7,
        "price_change_percentage_30d_in_currency": c30,
    }


@pytest.fixture
def market_records():
    """Four assets with known scores: alpha 71 High, beta 61 Medium, gamma 50 Low, delta 15 Low."""
    return [
        _record("gamma", "Gamma", "gam", 100.0, 0, 0, 0),
        _record("beta", "Beta", "bet", 0.5, 10, 10, 10),
        _record("delta", "Delta", "del", 10.0, -25, -35, -60),
        _record("alpha", "Alpha", "alp", 2.0, 15, 20, 30),
    ]
