"""Factor-table sensitivity engines for the five valuation methods."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from hospice_valuation.metrics import DerivedFlags
from hospice_valuation.schema import ValuationInput
from hospice_valuation.tiers import starting_multiples


@dataclass(frozen=True)
class EngineContext:
    inputs: ValuationInput
    flags: DerivedFlags


@dataclass(frozen=True)
class FactorRule:
    key: str
    label: str
    value: Callable[[EngineContext], float]


@dataclass(frozen=True)
class Factor:
    key: str
    label: str
    value: float


@dataclass(frozen=True)
class EngineResult:
    starting: float
    factors: tuple[Factor, ...]

    @property
    def adjustment_sum(self) -> float:
        return sum(f.value for f in self.factors)

    @property
    def total(self) -> float:
        return self.starting + self.adjustment_sum

    def factor(self, key: str) -> Factor | None:
        return next((f for f in self.factors if f.key == key), None)

    def to_dict(self) -> dict:
        return {
            "starting": self.starting,
            "factors": [{"key": f.key, "label": f.label, "value": f.value} for f in self.factors],
            "adjustmentSum": self.adjustment_sum,
            "total": self.total,
        }


def _when(key: str, label: str, condition: Callable[[EngineContext], bool], amount: float) -> FactorRule:
    return FactorRule(key, label, lambda c: amount if condition(c) else 0)


def _flag(key: str, label: str, field: str, amount: float) -> FactorRule:
    return _when(key, label, lambda c: bool(getattr(c.inputs, field)), amount)


def _per_ads(key: str, label: str, amount: float) -> FactorRule:
    return FactorRule(key, label, lambda c: c.inputs.viable_ads * amount)


def _other(field: str) -> FactorRule:
    return FactorRule("other", "Other", lambda c: getattr(c.inputs, field))


def _recurring_cap(c: EngineContext) -> bool:
    return c.flags.recurring_cap


def _no_medicaid(c: EngineContext) -> bool:
    return not c.flags.has_mcr_mcd


def _weak_rcm_large(c: EngineContext) -> bool:
    return not c.inputs.strong_rcm and c.inputs.yearly_adc > 25


SDE_FACTORS = [
    _when("capRisk", "CAP Risk", _recurring_cap, -0.375),
    _flag("cleanSurvey", "Clean Survey", "clean_survey", 0.375),
    _when("mcrMcd", "R&B + Medicaid", lambda c: c.flags.has_mcr_mcd, 0.375),
    _flag("pureMedicare", "100% Medicare", "pure_medicare", -0.175),
    _flag("highTurnover", "High Turnover", "high_turnover", -0.375),
    _per_ads("ads", "ADS", 0.375),
    _flag("esop", "ESOP", "esop", -0.175),
    _flag("strongRcm", "Strong RCM", "strong_rcm", 0.375),
    _flag("highGip", "High GIP", "high_gip", 0.2),
    _flag("nonReplicable", "Non-Replicable", "non_replicable", -0.5),
    _flag("auditRisk", "Audit Risk", "audit_risk", -0.375),
    _other("sde_other"),
]

PER_ADC_FACTORS = [
    _flag("con", "CON State", "con_state", 40000),
    _when("cap", "CAP Risk", _recurring_cap, -27500),
    _flag("auditRisk", "Audit Risk", "audit_risk", -20000),
    _when("noMedicaid", "No Medicaid", _no_medicaid, -17500),
    _flag("hospitalRels", "Hospital Relationships", "hospital_rels", 12000),
    _per_ads("ads", "ADS", 17500),
    _flag("rcm", "Strong RCM", "strong_rcm", 10000),
    _when("capSurplus", "CAP Surplus", lambda c: c.flags.cap_surplus_8k, 10000),
    _flag("turnover", "High Turnover", "high_turnover", -17500),
    _flag("alos", "High ALOS", "high_alos", -15000),
    _flag("esop", "ESOP", "esop", -10000),
    _other("per_adc_other"),
]

EBITDA_FACTORS = [
    _flag("cleanSurvey", "Clean Survey", "clean_survey", 0.375),
    _when("ebitdaAbove20", "EBITDA > 20%", lambda c: c.flags.ebitda_above_20, 0.75),
    _flag("strongRcm", "Strong RCM", "strong_rcm", 0.5),
    _when("noMedicaid", "No Medicaid", _no_medicaid, -0.75),
    _when("staffRetention", "Staff Retention", lambda c: c.flags.staff_retention, 0.375),
    _when("capRisk", "CAP Risk", _recurring_cap, -0.375),
    _when("capSurplus", "CAP Surplus > $8k", lambda c: c.flags.cap_surplus_8k, 0.2),
    _when("auditHighDc", "Audit / High Live DC", lambda c: c.flags.audit_exposure or c.inputs.high_live_dc, -0.375),
    _when("weakRcmLarge", "Weak RCM (ADC>25)", _weak_rcm_large, -0.375),
    _flag("highTurnover", "High Turnover", "high_turnover", -0.375),
    _flag("highAlos", "High ALOS", "high_alos", -0.225),
    _flag("pureMedicare", "100% Medicare", "pure_medicare", -0.175),
    _per_ads("ads", "ADS", 0.5),
    _flag("con", "CON State", "con_state", 1.25),
    _when("ebitdaBelow12", "EBITDA < 12%", lambda c: c.flags.ebitda_below_12, -0.375),
    _when("ebitdaBelow8", "EBITDA < 8%", lambda c: c.flags.ebitda_below_8, -0.75),
    _flag("auditRisk", "Audit Risk", "audit_risk", -0.375),
    _other("ebitda_other"),
]

REVENUE_FACTORS = [
    _flag("cleanSurvey", "Clean Survey", "clean_survey", 0.075),
    _when("noMedicaid", "No Medicaid", _no_medicaid, -0.15),
    _when("capRisk", "CAP Risk", _recurring_cap, -0.115),
    _flag("highLiveDc", "High Live DC", "high_live_dc", -0.115),
    _flag("highGip", "High GIP", "high_gip", 0.1),
    _flag("strongRcm", "Strong RCM", "strong_rcm", 0.075),
    _per_ads("ads", "ADS", 0.085),
    _flag("pureMedicare", "100% Medicare", "pure_medicare", -0.055),
    _flag("highTurnover", "High Turnover", "high_turnover", -0.075),
    _flag("highAlos", "High ALOS", "high_alos", -0.075),
    _flag("con", "CON State", "con_state", 0.175),
    _when("ebitdaBelow10", "EBITDA < 10%", lambda c: c.flags.ebitda_below_10, -0.1),
    _when("ebitdaAbove18", "EBITDA > 18%", lambda c: c.flags.ebitda_above_18, 0.1),
    _flag("auditRisk", "Audit Risk", "audit_risk", -0.075),
    _other("revenue_other"),
]

NORM_EBITDA_FACTORS = [
    _when("ebitdaAbove20", "EBITDA > 20%", lambda c: c.flags.ebitda_above_20, 1.25),
    _when("cleanNoCap", "Clean Survey + No CAP", lambda c: c.inputs.clean_survey and not c.flags.recurring_cap, 0.75),
    _per_ads("ads1", "ADS (primary)", 0.75),
    _when("adcBelow30", "ADC < 30", lambda c: c.flags.adc_below_30, -1.0),
    _when("capOrAudit", "CAP / Audit Exposure", lambda c: c.flags.recurring_cap or c.flags.audit_exposure, -1.5),
    _when("weakRcmLarge", "Weak RCM (ADC>25)", _weak_rcm_large, -0.75),
    _when("auditExposure", "Audit Exposure", lambda c: c.flags.audit_exposure, -0.375),
    _flag("pureMedicare", "100% Medicare", "pure_medicare", -0.175),
    _flag("highTurnover", "High Turnover", "high_turnover", -0.375),
    _flag("highAlos", "High ALOS", "high_alos", -0.225),
    _flag("con", "CON State", "con_state", 1.25),
    _per_ads("ads2", "ADS (secondary)", 0.5),
    _flag("auditRisk", "Audit Risk", "audit_risk", -0.375),
    _other("norm_ebitda_other"),
]

ENGINE_TABLES: dict[str, list[FactorRule]] = {
    "sde": SDE_FACTORS,
    "per_adc": PER_ADC_FACTORS,
    "ebitda": EBITDA_FACTORS,
    "revenue": REVENUE_FACTORS,
    "norm_ebitda": NORM_EBITDA_FACTORS,
}

ENGINE_LABELS = {
    "sde": "SDE Multiple",
    "per_adc": "$/ADC",
    "ebitda": "EBITDA-A Multiple",
    "revenue": "Revenue Multiple",
    "norm_ebitda": "Normalized EBITDA Multiple",
}

# $/ADC factors are dollar amounts; every other engine works in multiples.
CURRENCY_ENGINES = {"per_adc"}


def _override_value(overrides: dict | None, key: str) -> float | None:
    if not overrides or key not in overrides:
        return None
    try:
        value = float(overrides[key])
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def run_engine(
    starting: float,
    rules: list[FactorRule],
    context: EngineContext,
    factor_overrides: dict | None = None,
) -> EngineResult:
    """Evaluate an ordered factor table; overrides replace individual factor values by key."""
    factors = []
    for rule in rules:
        override = _override_value(factor_overrides, rule.key)
        value = override if override is not None else rule.value(context)
        factors.append(Factor(rule.key, rule.label, value))
    return EngineResult(starting=float(starting), factors=tuple(factors))


def run_all_engines(
    inputs: ValuationInput,
    flags: DerivedFlags,
    factor_overrides: dict | None = None,
) -> dict[str, EngineResult]:
    starting = starting_multiples(inputs.yearly_adc)
    context = EngineContext(inputs=inputs, flags=flags)
    overrides = factor_overrides or {}
    return {
        method: run_engine(starting[method], rules, context, overrides.get(method))
        for method, rules in ENGINE_TABLES.items()
    }
