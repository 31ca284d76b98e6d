from __future__ import annotations

from hospice_valuation.defaults import DEFAULTS
from hospice_valuation.rates import TEXAS_RATES, city_names, city_rates, counties_for_city, default_county


def test_rate_table_shape():
    assert len(TEXAS_RATES) == 28
    assert len(set(city_names())) == 28
    assert all(r.rhc_high > r.rhc_low > 0 for r in TEXAS_RATES)


def test_default_rates_match_dallas():
    dallas = city_rates("Dallas-Plano-Irving")
    assert dallas.rhc_high == DEFAULTS["rhc_high_rate"]
    assert dallas.rhc_low == DEFAULTS["rhc_low_rate"]
    assert "Collin" in counties_for_city("Dallas-Plano-Irving")


def test_unknown_city():
    assert city_rates("Gotham") is None
    assert counties_for_city("Gotham") == []
    assert default_county("Gotham") == ""
    assert default_county("Other Texas Counties") == "All Other Counties"
