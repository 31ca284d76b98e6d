"""Input guidance metadata and advisory range checks."""

from __future__ import annotations

from typing import Any


INPUT_GUIDANCE: dict[str, dict[str, Any]] = {
    "start_adc": {"min": 1.0, "max": 500.0, "note": "Average daily census at the start of the trailing year."},
    "end_adc": {"min": 1.0, "max": 500.0, "note": "Average daily census at the end of the trailing year."},
    "yearly_adc": {"min": 1.0, "max": 500.0, "note": "Trailing-twelve-month average daily census."},
    "admit_rate_to_adc": {"min": 0.05, "max": 0.30, "note": "Annual admissions as a fraction of ADC."},
    "dc_rate_to_adc": {"min": 0.05, "max": 0.30, "note": "Annual live discharges as a fraction of ADC."},
    "death_rate_to_adc": {"min": 0.04, "max": 0.25, "note": "Annual deaths as a fraction of ADC; the national benchmark is 13.8%."},
    "rhc_high_rate": {"min": 150.0, "max": 300.0, "note": "FY2026 days 1-60 RHC per-diem after wage adjustment."},
    "rhc_low_rate": {"min": 120.0, "max": 240.0, "note": "FY2026 days 61+ RHC per-diem after wage adjustment."},
    "pct_high_rate": {"min": 0.05, "max": 0.40, "note": "Share of patient days billed at the days 1-60 rate."},
    "sequestration_rate": {"min": 0.0, "max": 0.04, "note": "Medicare sequestration is 2% in most years."},
    "pct_collected_30_days": {"min": 0.80, "max": 1.0, "note": "Share of billings collected within 30 days."},
    "staff_cost_pct": {"min": 0.45, "max": 0.75, "note": "Clinical and administrative payroll as a share of net revenue."},
    "patient_cost_pct": {"min": 0.05, "max": 0.18, "note": "Drugs, DME and supplies as a share of net revenue."},
    "ops_cost_pct": {"min": 0.05, "max": 0.18, "note": "Rent, IT, insurance and overhead as a share of net revenue."},
    "btl_pct": {"min": 0.0, "max": 0.10, "note": "Below-the-line items as a share of net revenue."},
    "cap_liability_amount": {"min": 0.0, "max": 2_000_000.0, "note": "Trailing aggregate CAP repayment owed."},
    "norm_adjustment": {"min": -1_000_000.0, "max": 1_000_000.0, "note": "Owner add-backs or one-time items in dollars."},
}

COST_FIELDS = ("staff_cost_pct", "patient_cost_pct", "ops_cost_pct")


def _fmt(v: float) -> str:
    if abs(v - round(v)) < 1e-9:
        return f"{int(round(v)):,}"
    return f"{v:.3f}".rstrip("0").rstrip(".")


def help_with_guidance(key: str, base_help: str) -> str:
    g = INPUT_GUIDANCE.get(key)
    if not g:
        return base_help
    return f"{base_help} Reasonable range: {_fmt(g['min'])} to {_fmt(g['max'])}. {g['note']}"


def advisory_warnings(inputs: dict) -> list[str]:
    warnings: list[str] = []
    for key, g in INPUT_GUIDANCE.items():
        if key not in inputs:
            continue
        try:
            v = float(inputs[key])
        except (TypeError, ValueError):
            continue
        if v < g["min"] or v > g["max"]:
            warnings.append(
                f"{key}={v:.3f} is outside the recommended range [{_fmt(g['min'])}, {_fmt(g['max'])}]."
            )

    try:
        cost_total = sum(float(inputs.get(k, 0.0)) for k in COST_FIELDS)
    except (TypeError, ValueError):
        cost_total = 0.0
    if cost_total > 1.0:
        warnings.append(f"Staff, patient and ops costs total {cost_total:.1%} of net revenue; EBITDA is negative.")
    if inputs.get("recurring_cap_liability") and not inputs.get("prior_cap_liabilities"):
        warnings.append("recurring_cap_liability is set without prior_cap_liabilities; it has no effect.")
    return warnings
