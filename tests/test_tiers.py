from __future__ import annotations

import pytest

from hospice_valuation.tiers import market_adc_range, starting_multiples, within_market_range


@pytest.mark.parametrize(
    "adc, expected",
    [
        (0, {"sde": 3.0, "per_adc": 27500.0, "ebitda": 4.75, "revenue": 0.55, "norm_ebitda": 3.25}),
        (19.99, {"sde": 3.0, "per_adc": 65000.0, "ebitda": 4.75, "revenue": 0.55, "norm_ebitda": 3.25}),
        (20, {"sde": 4.0, "per_adc": 65000.0, "ebitda": 4.75, "revenue": 0.9, "norm_ebitda": 3.25}),
        (25, {"sde": 4.0, "per_adc": 65000.0, "ebitda": 6.25, "revenue": 0.9, "norm_ebitda": 5.0}),
        (40, {"sde": 4.0, "per_adc": 80000.0, "ebitda": 6.25, "revenue": 0.9, "norm_ebitda": 5.0}),
        (60, {"sde": 5.25, "per_adc": 150000.0, "ebitda": 7.75, "revenue": 1.5, "norm_ebitda": 7.0}),
        (100, {"sde": 6.5, "per_adc": 150000.0, "ebitda": 9.25, "revenue": 2.1, "norm_ebitda": 9.0}),
        (150, {"sde": 6.5, "per_adc": 215000.0, "ebitda": 9.25, "revenue": 2.1, "norm_ebitda": 9.0}),
    ],
)
def test_starting_multiples_tier_edges(adc, expected):
    assert starting_multiples(adc) == expected


def test_market_range_bands():
    assert market_adc_range(5) == {"low": 15000.0, "high": 40000.0}
    assert market_adc_range(40) == {"low": 55000.0, "high": 110000.0}
    assert market_adc_range(500) == {"low": 150000.0, "high": 280000.0}


def test_market_range_returns_copy():
    band = market_adc_range(40)
    band["low"] = 0
    assert market_adc_range(40)["low"] == 55000.0


def test_within_market_range():
    assert within_market_range(60000, 40)
    assert not within_market_range(50000, 40)
    assert within_market_range(110000, 40)
