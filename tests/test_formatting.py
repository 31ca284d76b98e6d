from __future__ import annotations

import pytest

from hospice_valuation.formatting import format_currency, format_multiple, format_number, format_percent


@pytest.mark.parametrize(
    "value, expected",
    [(1234567.4, "$1,234,567"), (-2500, "-$2,500"), (-0.2, "$0"), (None, "$0"), (float("nan"), "$0"), ("n/a", "$0")],
)
def test_format_currency(value, expected):
    assert format_currency(value) == expected


def test_format_currency_decimals():
    assert format_currency(80000.456, decimals=2) == "$80,000.46"


def test_format_percent_and_multiple():
    assert format_percent(0.15) == "15.00%"
    assert format_percent(0.138, 1) == "13.8%"
    assert format_percent(None) == "0.00%"
    assert format_multiple(4.75) == "4.75x"
    assert format_multiple(None, 1) == "0.0x"
    assert format_number(14611.2) == "14,611.20"
