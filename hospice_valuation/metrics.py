"""Derived flags and operational KPIs computed from the P&L."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from hospice_valuation.model import ProfitLossResult
from hospice_valuation.schema import ValuationInput


CAP_SURPLUS_PER_PATIENT = 8000.0
SMALL_CENSUS_ADC = 30.0

QUALITY_LEVELS = [
    (1.15, "Level 1 — Premium Quality"),
    (1.05, "Level 2 — Fair Quality"),
    (0.95, "Level 3 — Neutral"),
    (0.85, "Level 4 — Below Average"),
]
LOWEST_QUALITY_LEVEL = "Level 5 — Accumulation Risk"


@dataclass(frozen=True)
class DerivedFlags:
    """Threshold crossings consumed by the sensitivity engines."""

    ebitda_above_20: bool
    ebitda_above_18: bool
    ebitda_below_12: bool
    ebitda_below_10: bool
    ebitda_below_8: bool
    cap_surplus_8k: bool
    has_mcr_mcd: bool
    recurring_cap: bool
    audit_exposure: bool
    adc_below_30: bool
    staff_retention: bool

    def to_dict(self) -> dict:
        return asdict(self)


def _safe_div(a: float, b: float) -> float:
    return float(a / b) if b else 0.0


def derive_flags(pl: ProfitLossResult, inputs: ValuationInput) -> DerivedFlags:
    margin = pl.ebitda_margin
    return DerivedFlags(
        ebitda_above_20=margin > 0.20,
        ebitda_above_18=margin > 0.18,
        ebitda_below_12=margin < 0.12,
        ebitda_below_10=margin < 0.10,
        ebitda_below_8=margin < 0.08,
        cap_surplus_8k=pl.cap_per_patient > CAP_SURPLUS_PER_PATIENT,
        has_mcr_mcd=inputs.mcr_mcd_license,
        recurring_cap=inputs.prior_cap_liabilities,
        audit_exposure=inputs.audit_exposure,
        adc_below_30=inputs.yearly_adc < SMALL_CENSUS_ADC,
        staff_retention=not inputs.high_turnover,
    )


def quality_level(pqf: float) -> str:
    for floor, label in QUALITY_LEVELS:
        if pqf >= floor:
            return label
    return LOWEST_QUALITY_LEVEL


def operational_kpis(inputs: ValuationInput, pl: ProfitLossResult) -> dict:
    adc = inputs.yearly_adc
    growth = inputs.end_adc - inputs.start_adc
    return {
        "admits_per_year": inputs.admit_rate_to_adc * adc,
        "discharges_per_year": inputs.dc_rate_to_adc * adc,
        "deaths_per_year": inputs.death_rate_to_adc * adc,
        "net_admit_rate": inputs.admit_rate_to_adc - inputs.dc_rate_to_adc,
        "census_growth": growth,
        "census_growth_pct": _safe_div(growth, inputs.start_adc) if inputs.start_adc > 0 else 0.0,
        "revenue_per_patient_day": _safe_div(pl.net_revenue, pl.annual_patient_days),
        "ebitda_per_adc": _safe_div(pl.ebitda, adc),
        "patient_quality_factor": pl.patient_quality_factor,
        "quality_level": quality_level(pl.patient_quality_factor),
    }
