"""Starting multiples by census tier and the market $/ADC benchmark."""

from __future__ import annotations


# (exclusive upper ADC bound, value); the final entry covers everything above.
SDE_TIERS = [(20, 3.0), (50, 4.0), (100, 5.25), (float("inf"), 6.5)]
PER_ADC_TIERS = [(10, 27500.0), (30, 65000.0), (60, 80000.0), (150, 150000.0), (float("inf"), 215000.0)]
EBITDA_TIERS = [(25, 4.75), (60, 6.25), (100, 7.75), (float("inf"), 9.25)]
REVENUE_TIERS = [(20, 0.55), (50, 0.9), (100, 1.5), (float("inf"), 2.1)]
NORM_EBITDA_TIERS = [(25, 3.25), (50, 5.0), (100, 7.0), (float("inf"), 9.0)]

TIER_TABLES = {
    "sde": SDE_TIERS,
    "per_adc": PER_ADC_TIERS,
    "ebitda": EBITDA_TIERS,
    "revenue": REVENUE_TIERS,
    "norm_ebitda": NORM_EBITDA_TIERS,
}

MARKET_ADC_RANGES = [
    (10, {"low": 15000.0, "high": 40000.0}),
    (30, {"low": 40000.0, "high": 90000.0}),
    (60, {"low": 55000.0, "high": 110000.0}),
    (150, {"low": 100000.0, "high": 200000.0}),
    (float("inf"), {"low": 150000.0, "high": 280000.0}),
]


def _step(table: list[tuple[float, object]], adc: float):
    for upper, value in table:
        if adc < upper:
            return value
    return table[-1][1]


def starting_multiples(adc: float) -> dict[str, float]:
    """Base multiple for every valuation method at the given census."""
    return {method: float(_step(table, adc)) for method, table in TIER_TABLES.items()}


def market_adc_range(adc: float) -> dict[str, float]:
    return dict(_step(MARKET_ADC_RANGES, adc))


def within_market_range(per_adc: float, adc: float) -> bool:
    band = market_adc_range(adc)
    return band["low"] <= per_adc <= band["high"]
