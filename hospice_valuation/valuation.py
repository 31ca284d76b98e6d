"""Enterprise-value rollup across valuation methods."""

from __future__ import annotations

from dataclasses import dataclass

from hospice_valuation.metrics import DerivedFlags
from hospice_valuation.model import ProfitLossResult
from hospice_valuation.schema import OVERRIDE_METHODS, ValuationInput
from hospice_valuation.sensitivity import EngineResult, run_all_engines


CONSENSUS_METHODS = ("sde", "ebitda", "revenue", "norm_ebitda")


@dataclass(frozen=True)
class SensitivitySummary:
    engines: dict[str, EngineResult]
    multiples: dict[str, float]
    ev: dict[str, float]
    low: float
    mid: float
    high: float
    consensus: float
    per_adc_back_calculated: float
    cap_adj: float
    trailing_cap_liability: float
    low_adj: float
    mid_adj: float
    high_adj: float
    final_ev: float
    norm_ebitda_basis: float
    harmonization_gap: float
    harmonization_gap_pct: float


def _safe_div(a: float, b: float) -> float:
    return float(a / b) if b else 0.0


def effective_multiples(engines: dict[str, EngineResult], overrides: dict[str, float] | None) -> dict[str, float]:
    overrides = overrides or {}
    return {
        method: overrides[method] if overrides.get(method) is not None else engines[method].total
        for method in OVERRIDE_METHODS
    }


def trailing_cap_liability(inputs: ValuationInput) -> float:
    if inputs.prior_cap_liabilities and inputs.cap_liability_amount > 0:
        return float(inputs.cap_liability_amount)
    return 0.0


def calculate_valuation(
    inputs: ValuationInput,
    pl: ProfitLossResult,
    flags: DerivedFlags,
    engines: dict[str, EngineResult] | None = None,
    overrides: dict[str, float] | None = None,
    factor_overrides: dict | None = None,
) -> SensitivitySummary:
    """Roll engine multiples up into enterprise values, consensus, and the adjusted range.

    ``overrides`` replaces a method's multiple (sde, ebitda, revenue,
    norm_ebitda only); engine results themselves are left untouched.
    """
    if engines is None:
        engines = run_all_engines(inputs, flags, factor_overrides)
    multiples = effective_multiples(engines, overrides)

    norm_basis = pl.ebitda + inputs.norm_adjustment
    ev = {
        "sde": multiples["sde"] * pl.sde,
        "ebitda": multiples["ebitda"] * pl.ebitda,
        "revenue": multiples["revenue"] * pl.net_revenue,
        "norm_ebitda": multiples["norm_ebitda"] * norm_basis,
    }
    method_values = [ev[m] for m in CONSENSUS_METHODS]
    consensus = sum(method_values) / len(method_values)

    # $/ADC is never valued on its own: its EV is the consensus and its
    # multiple is backed out of it.
    per_adc = _safe_div(consensus, inputs.yearly_adc)
    ev["per_adc"] = consensus
    multiples["per_adc"] = per_adc

    low = min(method_values)
    high = max(method_values)
    mid = consensus

    # Added with its sign: a death rate above the national benchmark raises
    # value, below it lowers value (see model.acdri).
    cap_adj = (pl.acdri_v2 + pl.acdri_v4) / 2
    trailing = trailing_cap_liability(inputs)

    gap = abs(ev["ebitda"] - ev["revenue"])
    gap_avg = (ev["ebitda"] + ev["revenue"]) / 2

    return SensitivitySummary(
        engines=engines,
        multiples=multiples,
        ev=ev,
        low=low,
        mid=mid,
        high=high,
        consensus=consensus,
        per_adc_back_calculated=per_adc,
        cap_adj=cap_adj,
        trailing_cap_liability=trailing,
        low_adj=low + cap_adj - trailing,
        mid_adj=mid + cap_adj - trailing,
        high_adj=high + cap_adj - trailing,
        final_ev=mid + cap_adj - trailing,
        norm_ebitda_basis=norm_basis,
        harmonization_gap=gap,
        harmonization_gap_pct=_safe_div(gap, gap_avg),
    )
