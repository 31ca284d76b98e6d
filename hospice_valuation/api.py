"""Request/response entry point for one valuation pass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pandas as pd

from hospice_valuation.auth import require_subject
from hospice_valuation.metrics import DerivedFlags, derive_flags
from hospice_valuation.model import ProfitLossResult, allocate_monthly, build_profit_loss
from hospice_valuation.schema import ValuationInput, camel_to_snake, migrate_inputs, snake_to_camel
from hospice_valuation.tiers import market_adc_range
from hospice_valuation.valuation import SensitivitySummary, calculate_valuation


class CalculationError(ValueError):
    """Raised for a request the boundary cannot hand to the engine."""


@dataclass(frozen=True)
class ValuationRun:
    inputs: ValuationInput
    pl: ProfitLossResult
    flags: DerivedFlags
    summary: SensitivitySummary
    market_adc_range: dict[str, float]

    @property
    def consensus(self) -> float:
        return self.summary.consensus

    @property
    def final_valuation(self) -> float:
        return self.summary.final_ev

    def monthly(self) -> pd.DataFrame:
        return allocate_monthly(self.inputs, self.pl)


def normalize_factor_overrides(raw: Any) -> dict[str, dict[str, float]]:
    """Map wire engine keys (``normEbitda``) to engine names, dropping blanks."""
    if not isinstance(raw, dict):
        return {}
    out: dict[str, dict[str, float]] = {}
    for engine_key, factors in raw.items():
        if not isinstance(factors, dict):
            continue
        cleaned = {}
        for factor_key, value in factors.items():
            if value is None or value == "":
                continue
            try:
                cleaned[str(factor_key)] = float(value)
            except (TypeError, ValueError):
                continue
        if cleaned:
            out[camel_to_snake(str(engine_key))] = cleaned
    return out


def run_valuation(inputs: ValuationInput, factor_overrides: dict | None = None) -> ValuationRun:
    pl = build_profit_loss(inputs)
    flags = derive_flags(pl, inputs)
    summary = calculate_valuation(
        inputs,
        pl,
        flags,
        overrides=inputs.multiple_overrides(),
        factor_overrides=factor_overrides,
    )
    return ValuationRun(
        inputs=inputs,
        pl=pl,
        flags=flags,
        summary=summary,
        market_adc_range=market_adc_range(inputs.yearly_adc or 0),
    )


def _camel_keys(data: dict) -> dict:
    return {snake_to_camel(k): v for k, v in data.items()}


def summary_to_wire(summary: SensitivitySummary) -> dict:
    return {
        "engines": {snake_to_camel(k): e.to_dict() for k, e in summary.engines.items()},
        "multiples": _camel_keys(summary.multiples),
        "ev": _camel_keys(summary.ev),
        "low": summary.low,
        "mid": summary.mid,
        "high": summary.high,
        "consensus": summary.consensus,
        "perAdcBackCalculated": summary.per_adc_back_calculated,
        "capAdj": summary.cap_adj,
        "trailingCapLiability": summary.trailing_cap_liability,
        "lowAdj": summary.low_adj,
        "midAdj": summary.mid_adj,
        "highAdj": summary.high_adj,
        "finalEv": summary.final_ev,
        "normEbitdaBasis": summary.norm_ebitda_basis,
        "harmonizationGap": summary.harmonization_gap,
        "harmonizationGapPct": summary.harmonization_gap_pct,
    }


def run_to_wire(run: ValuationRun) -> dict:
    return {
        "pl": _camel_keys(run.pl.to_dict()),
        "derived": _camel_keys(run.flags.to_dict()),
        "sensitivities": summary_to_wire(run.summary),
        "consensus": run.consensus,
        "finalValuation": run.final_valuation,
        "marketAdcRange": dict(run.market_adc_range),
    }


def calculate(request: dict) -> dict:
    """Evaluate ``{"inputs": {...}, "factorOverrides": {...}}`` and return the wire response."""
    if not isinstance(request, dict) or not isinstance(request.get("inputs"), dict):
        raise CalculationError("Missing inputs")
    raw_inputs, _, _ = migrate_inputs(request["inputs"])
    factor_overrides = normalize_factor_overrides(request.get("factorOverrides", {}))
    return run_to_wire(run_valuation(ValuationInput.from_dict(raw_inputs), factor_overrides))


def calculate_authorized(request: dict, token: str | None, secret: str) -> dict:
    """Run the auth gate, then the calculation; raises auth.Unauthorized on a bad token."""
    require_subject(token, secret)
    return calculate(request)
