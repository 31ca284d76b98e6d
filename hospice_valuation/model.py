"""Core hospice P&L engine and monthly allocation."""

from __future__ import annotations

from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd

from hospice_valuation.schema import ValuationInput


AVG_DAYS_PER_MONTH = 30.44
HQRP_PENALTY_PCT = 0.02

# CAP risk index calibration: national death-rate benchmark (percent of ADC)
# and dollars per percentage point per census patient.
NATIONAL_DEATH_RATE_PCT = 13.8
CAP_DOLLARS_PER_POINT = 3567.0

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
DAYS_PER_MONTH = np.array([31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31], dtype=float)
DAYS_PER_YEAR = float(DAYS_PER_MONTH.sum())

MONTHLY_LINES = [
    "Patient Days",
    "Gross Revenue",
    "HQRP Reduction",
    "Sequestration",
    "Net Revenue",
    "Staff Costs",
    "Patient Costs",
    "Ops/Overhead",
    "EBITDA",
    "Below-the-Line",
    "NOI",
]

# Monthly column -> ProfitLossResult attribute it reconciles to.
MONTHLY_TO_ANNUAL = {
    "Patient Days": "annual_patient_days",
    "Gross Revenue": "gross_revenue",
    "HQRP Reduction": "hqrp_reduction",
    "Sequestration": "sequestration",
    "Net Revenue": "net_revenue",
    "Staff Costs": "staff_costs",
    "Patient Costs": "patient_costs",
    "Ops/Overhead": "ops_costs",
    "EBITDA": "ebitda",
    "Below-the-Line": "btl",
    "NOI": "noi",
}


@dataclass(frozen=True)
class ProfitLossResult:
    avg_days_per_month: float
    monthly_patient_days: float
    annual_patient_days: float
    weighted_avg_daily_rate: float
    gross_revenue: float
    hqrp_reduction: float
    sequestration: float
    net_revenue: float
    staff_costs: float
    patient_costs: float
    ops_costs: float
    ebitda: float
    ebitda_margin: float
    btl: float
    noi: float
    sde: float
    patient_quality_factor: float
    acdri_v2: float
    acdri_v4: float
    cap_per_patient: float

    def to_dict(self) -> dict:
        return asdict(self)


def _safe_div(a: float, b: float) -> float:
    return float(a / b) if b else 0.0


def weighted_daily_rate(i: ValuationInput) -> float:
    return i.pct_high_rate * i.rhc_high_rate + (1 - i.pct_high_rate) * i.rhc_low_rate


def patient_quality_factor(i: ValuationInput) -> float:
    """Reward a death/discharge ratio near 0.5; penalize census volatility."""
    if i.dc_rate_to_adc == 0 or i.yearly_adc == 0:
        return 1.0
    mix = 1 + (i.death_rate_to_adc / i.dc_rate_to_adc - 0.5) * 0.6
    growth = (i.end_adc - i.start_adc) / i.yearly_adc
    drift = (i.yearly_adc - (i.start_adc + i.end_adc) / 2) / i.yearly_adc
    return mix * (1 - growth * 0.3 - drift * 0.3)


def acdri(i: ValuationInput, quality_factor: float = 1.0) -> float:
    """Signed CAP risk index (ACDRI) in dollars.

    Negative when the death rate is below the 13.8% national benchmark,
    positive above it. The valuation rollup adds it to enterprise value with
    this sign, so the convention must not be flipped here.
    """
    return (i.death_rate_to_adc * 100 - NATIONAL_DEATH_RATE_PCT) * quality_factor * i.yearly_adc * CAP_DOLLARS_PER_POINT


def _revenue_lines(patient_days, rate: float, i: ValuationInput):
    gross = patient_days * rate
    hqrp = -(gross * HQRP_PENALTY_PCT) if i.hqrp_penalty else gross * 0.0
    seq = -(gross * i.sequestration_rate)
    net = gross + hqrp + seq
    return gross, hqrp, seq, net


def build_profit_loss(inputs: ValuationInput) -> ProfitLossResult:
    """Build the annual P&L waterfall plus quality and CAP risk indices."""
    i = inputs
    monthly_patient_days = i.yearly_adc * AVG_DAYS_PER_MONTH
    annual_patient_days = monthly_patient_days * 12
    rate = weighted_daily_rate(i)

    gross, hqrp, seq, net = _revenue_lines(annual_patient_days, rate, i)

    staff = -(net * i.staff_cost_pct)
    patient = -(net * i.patient_cost_pct)
    ops = -(net * i.ops_cost_pct)

    ebitda = net + staff + patient + ops
    btl = net * i.btl_pct
    noi = ebitda - btl
    # Equal to EBITDA today; kept as its own line so owner add-backs can diverge later.
    sde = noi + btl

    pqf = patient_quality_factor(i)
    acdri_v2 = acdri(i)
    acdri_v4 = acdri(i, pqf)
    cap_per_patient = _safe_div((acdri_v2 + acdri_v4) / 2, i.yearly_adc)

    return ProfitLossResult(
        avg_days_per_month=AVG_DAYS_PER_MONTH,
        monthly_patient_days=monthly_patient_days,
        annual_patient_days=annual_patient_days,
        weighted_avg_daily_rate=rate,
        gross_revenue=gross,
        hqrp_reduction=hqrp,
        sequestration=seq,
        net_revenue=net,
        staff_costs=staff,
        patient_costs=patient,
        ops_costs=ops,
        ebitda=ebitda,
        ebitda_margin=_safe_div(ebitda, net),
        btl=btl,
        noi=noi,
        sde=sde,
        patient_quality_factor=pqf,
        acdri_v2=acdri_v2,
        acdri_v4=acdri_v4,
        cap_per_patient=cap_per_patient,
    )


def allocate_monthly(inputs: ValuationInput, pl: ProfitLossResult) -> pd.DataFrame:
    """Spread the annual P&L over calendar months by day count (365-day year).

    Each line is recomputed from the month's patient days so the twelve rows
    sum back to the annual figures.
    """
    i = inputs
    patient_days = pl.annual_patient_days * DAYS_PER_MONTH / DAYS_PER_YEAR
    gross, hqrp, seq, net = _revenue_lines(patient_days, pl.weighted_avg_daily_rate, i)
    staff = -(net * i.staff_cost_pct)
    patient = -(net * i.patient_cost_pct)
    ops = -(net * i.ops_cost_pct)
    ebitda = net + staff + patient + ops
    btl = net * i.btl_pct
    noi = ebitda - btl

    return pd.DataFrame(
        {
            "Month": MONTH_NAMES,
            "Days": DAYS_PER_MONTH,
            "Patient Days": patient_days,
            "Gross Revenue": gross,
            "HQRP Reduction": hqrp,
            "Sequestration": seq,
            "Net Revenue": net,
            "Staff Costs": staff,
            "Patient Costs": patient,
            "Ops/Overhead": ops,
            "EBITDA": ebitda,
            "Below-the-Line": btl,
            "NOI": noi,
        }
    )


def monthly_with_annual_total(monthly: pd.DataFrame) -> pd.DataFrame:
    total = monthly[["Days", *MONTHLY_LINES]].sum(numeric_only=True)
    total["Month"] = "Annual"
    return pd.concat([monthly, total.to_frame().T], ignore_index=True)
