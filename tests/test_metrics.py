from __future__ import annotations

import pytest

from hospice_valuation.metrics import derive_flags, operational_kpis, quality_level
from hospice_valuation.model import build_profit_loss


def _flags(inputs):
    return derive_flags(build_profit_loss(inputs), inputs)


def test_default_flags(make_inputs):
    flags = _flags(make_inputs())
    assert not flags.ebitda_above_20
    assert not flags.ebitda_above_18
    assert not flags.ebitda_below_12
    assert flags.has_mcr_mcd
    assert not flags.recurring_cap
    assert not flags.adc_below_30
    assert flags.staff_retention
    assert not flags.cap_surplus_8k


@pytest.mark.parametrize(
    "staff_pct, above_20, above_18, below_12, below_10, below_8",
    [
        (0.54, True, True, False, False, False),  # margin 0.26
        (0.66, False, False, False, False, False),  # margin 0.14 is not below 0.12
        (0.74, False, False, True, True, True),  # margin 0.06
    ],
)
def test_margin_threshold_flags(make_inputs, staff_pct, above_20, above_18, below_12, below_10, below_8):
    flags = _flags(make_inputs(staff_cost_pct=staff_pct))
    assert flags.ebitda_above_20 is above_20
    assert flags.ebitda_above_18 is above_18
    assert flags.ebitda_below_12 is below_12
    assert flags.ebitda_below_10 is below_10
    assert flags.ebitda_below_8 is below_8


def test_high_turnover_removes_staff_retention(make_inputs):
    assert not _flags(make_inputs(high_turnover=True)).staff_retention


def test_small_census_flag(make_inputs):
    assert _flags(make_inputs(yearly_adc=29.9)).adc_below_30
    assert not _flags(make_inputs(yearly_adc=30.0)).adc_below_30


def test_cap_surplus_flag_needs_high_death_rate(make_inputs):
    # (25 - 13.8) * 3567 per patient before the quality factor
    assert _flags(make_inputs(death_rate_to_adc=0.25, dc_rate_to_adc=0.5)).cap_surplus_8k


@pytest.mark.parametrize(
    "pqf, label",
    [
        (1.2, "Level 1 — Premium Quality"),
        (1.05, "Level 2 — Fair Quality"),
        (1.0, "Level 3 — Neutral"),
        (0.9, "Level 4 — Below Average"),
        (0.5, "Level 5 — Accumulation Risk"),
    ],
)
def test_quality_level_bands(pqf, label):
    assert quality_level(pqf) == label


def test_operational_kpis(make_inputs):
    inputs = make_inputs()
    pl = build_profit_loss(inputs)
    kpis = operational_kpis(inputs, pl)
    assert kpis["admits_per_year"] == pytest.approx(0.1375 * 40)
    assert kpis["net_admit_rate"] == pytest.approx(0.0125)
    assert kpis["census_growth"] == pytest.approx(6.0)
    assert kpis["census_growth_pct"] == pytest.approx(6 / 36)
    assert kpis["revenue_per_patient_day"] == pytest.approx(pl.net_revenue / pl.annual_patient_days)
    assert kpis["quality_level"] == "Level 1 — Premium Quality"
