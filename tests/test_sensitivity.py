from __future__ import annotations

import pytest

from hospice_valuation.metrics import derive_flags
from hospice_valuation.model import build_profit_loss
from hospice_valuation.schema import FLAG_FIELDS
from hospice_valuation.sensitivity import (
    ENGINE_TABLES,
    EngineContext,
    SDE_FACTORS,
    run_all_engines,
    run_engine,
)


def _engines(inputs, factor_overrides=None):
    flags = derive_flags(build_profit_loss(inputs), inputs)
    return run_all_engines(inputs, flags, factor_overrides)


def _fired(result) -> set[str]:
    return {f.key for f in result.factors if f.value != 0}


def test_default_engine_totals(make_inputs):
    engines = _engines(make_inputs())
    assert engines["sde"].total == pytest.approx(4.75)
    assert engines["ebitda"].total == pytest.approx(6.625)
    assert engines["revenue"].total == pytest.approx(0.975)
    assert engines["norm_ebitda"].total == pytest.approx(5.0)
    assert engines["per_adc"].total == pytest.approx(80000.0)


def test_engine_total_is_starting_plus_factors(make_inputs):
    inputs = make_inputs(viable_ads=3, con_state=True, audit_risk=True, ebitda_other=0.4, per_adc_other=-2500)
    for name, result in _engines(inputs).items():
        assert result.total == result.starting + sum(f.value for f in result.factors), name
        assert result.adjustment_sum == pytest.approx(sum(f.value for f in result.factors))


def test_factor_order_and_keys_follow_tables(make_inputs):
    engines = _engines(make_inputs())
    for name, rules in ENGINE_TABLES.items():
        assert [f.key for f in engines[name].factors] == [r.key for r in rules]
    assert engines["sde"].factors[-1].key == "other"


def test_only_inverse_polarity_factors_fire_with_every_flag_off(make_inputs):
    inputs = make_inputs(**{name: False for name in FLAG_FIELDS})
    engines = _engines(inputs)
    # Absence of a positive attribute still moves these factors: no license,
    # no turnover (retention), and no strong RCM above 25 ADC.
    assert _fired(engines["sde"]) == set()
    assert _fired(engines["per_adc"]) == {"noMedicaid"}
    assert _fired(engines["ebitda"]) == {"noMedicaid", "staffRetention", "weakRcmLarge"}
    assert _fired(engines["revenue"]) == {"noMedicaid"}
    assert _fired(engines["norm_ebitda"]) == {"weakRcmLarge"}


def test_viable_ads_scale_linearly(make_inputs):
    engines = _engines(make_inputs(viable_ads=4))
    assert engines["sde"].factor("ads").value == pytest.approx(1.5)
    assert engines["per_adc"].factor("ads").value == pytest.approx(70000)
    assert engines["norm_ebitda"].factor("ads1").value == pytest.approx(3.0)
    assert engines["norm_ebitda"].factor("ads2").value == pytest.approx(2.0)


def test_recurring_cap_hits_every_engine(make_inputs):
    engines = _engines(make_inputs(prior_cap_liabilities=True))
    assert engines["sde"].factor("capRisk").value == -0.375
    assert engines["per_adc"].factor("cap").value == -27500
    assert engines["ebitda"].factor("capRisk").value == -0.375
    assert engines["revenue"].factor("capRisk").value == -0.115
    assert engines["norm_ebitda"].factor("capOrAudit").value == -1.5
    assert engines["norm_ebitda"].factor("cleanNoCap").value == 0


def test_factor_override_replaces_value_and_keeps_label(make_inputs):
    engines = _engines(make_inputs(), {"sde": {"cleanSurvey": 1.0}, "per_adc": {"con": "12345"}})
    factor = engines["sde"].factor("cleanSurvey")
    assert factor.value == 1.0
    assert factor.label == "Clean Survey"
    assert engines["sde"].total == pytest.approx(4.0 + 1.0 + 0.375)
    assert engines["per_adc"].factor("con").value == 12345.0


def test_run_engine_ignores_malformed_override(make_inputs):
    inputs = make_inputs()
    context = EngineContext(inputs=inputs, flags=derive_flags(build_profit_loss(inputs), inputs))
    result = run_engine(4.0, SDE_FACTORS, context, {"cleanSurvey": "abc", "esop": float("nan")})
    assert result.factor("cleanSurvey").value == 0.375
    assert result.factor("esop").value == 0


def test_engine_to_dict_uses_wire_keys(make_inputs):
    payload = _engines(make_inputs())["sde"].to_dict()
    assert set(payload) == {"starting", "factors", "adjustmentSum", "total"}
    assert payload["factors"][0] == {"key": "capRisk", "label": "CAP Risk", "value": 0}
