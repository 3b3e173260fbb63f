from momentum_board.core.momentum import ConfidenceLabel
from momentum_board.dashboard.formatting import confidence_badge, format_money


def test_format_money():
    assert format_money(65432.1) == "$65,432.10"
    assert format_money(1) == "$1.00"
    assert format_money(0.5) == "$0.500"
    assert format_money(0.0001234) == "$0.000123"
    assert format_money(0) == "$0.00"
    assert format_money(None) == "—"
    assert format_money("n/a") == "—"


def test_format_money_small_prices_stay_decimal():
    assert format_money(0.00001234) == "$0.0000123"
    assert format_money(0.000001234) == "$0.00000123"
    assert format_money(0.0000001234) == "$1.23e-07"


def test_confidence_badge():
    assert confidence_badge(ConfidenceLabel.HIGH) == ":green[High]"
    assert confidence_badge("Low") == ":red[Low]"
