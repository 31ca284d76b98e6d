from __future__ import annotations

import pytest

from hospice_valuation.metrics import derive_flags
from hospice_valuation.model import build_profit_loss
from hospice_valuation.schema import ValuationInput
from hospice_valuation.valuation import CONSENSUS_METHODS, calculate_valuation, trailing_cap_liability


def _value(inputs, **kwargs):
    pl = build_profit_loss(inputs)
    flags = derive_flags(pl, inputs)
    return pl, calculate_valuation(inputs, pl, flags, **kwargs)


def test_default_method_values(make_inputs):
    pl, summary = _value(make_inputs())
    assert summary.ev["sde"] == pytest.approx(4.75 * pl.sde)
    assert summary.ev["ebitda"] == pytest.approx(6.625 * pl.ebitda)
    assert summary.ev["revenue"] == pytest.approx(0.975 * pl.net_revenue)
    assert summary.ev["norm_ebitda"] == pytest.approx(5.0 * pl.ebitda)


def test_consensus_and_per_adc_identity(make_inputs):
    _, summary = _value(make_inputs())
    values = [summary.ev[m] for m in CONSENSUS_METHODS]
    assert summary.consensus == pytest.approx(sum(values) / 4)
    assert summary.mid == summary.consensus
    assert summary.low == min(values)
    assert summary.high == max(values)
    assert summary.ev["per_adc"] == summary.consensus
    assert summary.per_adc_back_calculated == pytest.approx(summary.consensus / 40)
    assert summary.multiples["per_adc"] == summary.per_adc_back_calculated


def test_final_value_applies_cap_adjustment(make_inputs):
    pl, summary = _value(make_inputs())
    assert summary.cap_adj == pytest.approx((pl.acdri_v2 + pl.acdri_v4) / 2)
    assert summary.trailing_cap_liability == 0
    assert summary.final_ev == pytest.approx(summary.mid + summary.cap_adj)
    assert summary.low_adj == pytest.approx(summary.low + summary.cap_adj)
    assert summary.high_adj == pytest.approx(summary.high + summary.cap_adj)


@pytest.mark.parametrize("death_rate, direction", [(0.10, -1), (0.16, 1)])
def test_cap_adjustment_direction(make_inputs, death_rate, direction):
    _, summary = _value(make_inputs(death_rate_to_adc=death_rate))
    assert summary.cap_adj * direction > 0
    assert (summary.final_ev - summary.consensus) * direction > 0


def test_trailing_liability_only_with_prior_cap(make_inputs):
    assert trailing_cap_liability(make_inputs(cap_liability_amount=250_000)) == 0
    with_prior = make_inputs(prior_cap_liabilities=True, cap_liability_amount=250_000)
    assert trailing_cap_liability(with_prior) == 250_000

    _, summary = _value(with_prior)
    assert summary.final_ev == pytest.approx(summary.mid + summary.cap_adj - 250_000)
    assert summary.engines["sde"].factor("capRisk").value == -0.375


def test_prior_cap_liability_scenario_is_exact(base_inputs):
    flags_off = {k: False for k, v in base_inputs.items() if isinstance(v, bool)}
    inputs = ValuationInput.from_dict(
        {**base_inputs, **flags_off, "prior_cap_liabilities": True, "cap_liability_amount": 50000.0}
    )
    _, summary = _value(inputs)
    assert summary.trailing_cap_liability == 50000.0
    assert summary.final_ev == summary.consensus + summary.cap_adj - 50000.0


def test_override_replaces_multiple_without_touching_engine(make_inputs):
    pl, summary = _value(make_inputs(), overrides={"sde": 5.5, "revenue": 1.2})
    assert summary.multiples["sde"] == 5.5
    assert summary.ev["sde"] == pytest.approx(5.5 * pl.sde)
    assert summary.ev["revenue"] == pytest.approx(1.2 * pl.net_revenue)
    assert summary.engines["sde"].total == pytest.approx(4.75)
    assert summary.multiples["ebitda"] == summary.engines["ebitda"].total


def test_per_adc_override_field_has_no_effect(make_inputs):
    _, plain = _value(make_inputs())
    inputs = make_inputs(override_per_adc="250000")
    _, overridden = _value(inputs, overrides=inputs.multiple_overrides())
    assert overridden.consensus == plain.consensus
    assert overridden.multiples["per_adc"] == plain.multiples["per_adc"]


def test_norm_adjustment_changes_norm_basis(make_inputs):
    pl, summary = _value(make_inputs(norm_adjustment=100_000))
    assert summary.norm_ebitda_basis == pytest.approx(pl.ebitda + 100_000)
    assert summary.ev["norm_ebitda"] == pytest.approx(5.0 * (pl.ebitda + 100_000))


def test_harmonization_gap(make_inputs):
    _, summary = _value(make_inputs())
    gap = abs(summary.ev["ebitda"] - summary.ev["revenue"])
    assert summary.harmonization_gap == pytest.approx(gap)
    assert summary.harmonization_gap_pct == pytest.approx(gap / ((summary.ev["ebitda"] + summary.ev["revenue"]) / 2))


def test_zero_census_values_to_zero():
    _, summary = _value(ValuationInput())
    assert summary.consensus == 0
    assert summary.per_adc_back_calculated == 0
    assert summary.harmonization_gap_pct == 0
    assert summary.final_ev == 0


def test_repeated_runs_are_identical(make_inputs):
    inputs = make_inputs(viable_ads=2, strong_rcm=True)
    _, first = _value(inputs)
    _, second = _value(inputs)
    assert first == second
