"""Valuation input record, wire-format conversion, and input migration."""

from __future__ import annotations

import math
import re
from copy import deepcopy
from dataclasses import asdict, dataclass, fields
from typing import Any

from hospice_valuation.defaults import DEFAULTS


SCHEMA_VERSION = 1
SCENARIO_TYPE = "scenario"

YES = "yes"
NO = "no"

_TRUE_TEXT = {"1", "true", "yes", "y", "on"}
_FALSE_TEXT = {"0", "false", "no", "n", "off", ""}

# Older payloads carried the engine-side name for the turnover flag.
LEGACY_WIRE_ALIASES = {
    "staffTurnoverHigh": "high_turnover",
}

OVERRIDE_METHODS = ("sde", "ebitda", "revenue", "norm_ebitda")
MAX_VIABLE_ADS = 5


@dataclass(frozen=True)
class ValuationInput:
    """One fully-hydrated set of valuation inputs.

    Missing numbers are 0 and missing flags are False, so a partially
    populated record always evaluates without error.
    """

    start_adc: float = 0.0
    end_adc: float = 0.0
    yearly_adc: float = 0.0
    admit_rate_to_adc: float = 0.0
    dc_rate_to_adc: float = 0.0
    death_rate_to_adc: float = 0.0
    rhc_high_rate: float = 0.0
    rhc_low_rate: float = 0.0
    pct_high_rate: float = 0.0
    sequestration_rate: float = 0.0
    pct_collected_30_days: float = 0.0
    staff_cost_pct: float = 0.0
    patient_cost_pct: float = 0.0
    ops_cost_pct: float = 0.0
    btl_pct: float = 0.0
    mcr_mcd_license: bool = False
    audit_exposure: bool = False
    prior_cap_liabilities: bool = False
    cap_liability_amount: float = 0.0
    recurring_cap_liability: bool = False
    hqrp_penalty: bool = False
    clean_survey: bool = False
    pure_medicare: bool = False
    high_turnover: bool = False
    high_alos: bool = False
    viable_ads: int = 0
    con_state: bool = False
    esop: bool = False
    strong_rcm: bool = False
    high_gip: bool = False
    non_replicable: bool = False
    hospital_rels: bool = False
    high_live_dc: bool = False
    audit_risk: bool = False
    high_ebitda_margin: bool = False
    other_factor: bool = False
    override_sde: str = ""
    override_ebitda: str = ""
    override_revenue: str = ""
    override_norm_ebitda: str = ""
    override_per_adc: str = ""
    norm_adjustment: float = 0.0
    sde_other: float = 0.0
    per_adc_other: float = 0.0
    ebitda_other: float = 0.0
    revenue_other: float = 0.0
    norm_ebitda_other: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "ValuationInput":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict:
        return asdict(self)

    def multiple_overrides(self) -> dict[str, float]:
        """Parsed top-level multiple overrides; $/ADC is never overridable."""
        out: dict[str, float] = {}
        for method in OVERRIDE_METHODS:
            value = parse_override(getattr(self, f"override_{method}"))
            if value is not None:
                out[method] = value
        return out


FIELD_TYPES: dict[str, type] = {f.name: type(f.default) for f in fields(ValuationInput)}
BLANK_INPUTS: dict[str, Any] = {f.name: f.default for f in fields(ValuationInput)}
FLAG_FIELDS = [name for name, kind in FIELD_TYPES.items() if kind is bool]
OVERRIDE_FIELDS = [name for name, kind in FIELD_TYPES.items() if kind is str]


def camel_to_snake(key: str) -> str:
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[a-z])(?=[0-9])", "_", key).lower()


def snake_to_camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def parse_flag(value: Any) -> bool | None:
    """Return True/False for a recognised flag value, None when unrecognised."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        txt = value.strip().lower()
        if txt in _TRUE_TEXT:
            return True
        if txt in _FALSE_TEXT:
            return False
    return None


def flag_text(value: bool) -> str:
    return YES if value else NO


def parse_override(value: Any) -> float | None:
    """Parse a multiple override string; blank or malformed means no override."""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        parsed = float(text)
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def _resolve_key(key: str) -> str | None:
    if key in FIELD_TYPES:
        return key
    if key in LEGACY_WIRE_ALIASES:
        return LEGACY_WIRE_ALIASES[key]
    snake = camel_to_snake(key)
    if snake in FIELD_TYPES:
        return snake
    return None


def migrate_inputs(raw_inputs: Any, base: dict | None = None) -> tuple[dict, list[str], list[str]]:
    """Normalize a wire-format (camelCase, "yes"/"no") or snake_case payload.

    Fields absent from the payload take their value from ``base`` (blank
    zero/False record by default). Returns (inputs, warnings, unknown_keys).
    """
    warnings: list[str] = []
    unknown_keys: list[str] = []
    base_inputs = deepcopy(BLANK_INPUTS if base is None else {**BLANK_INPUTS, **base})
    inputs = deepcopy(base_inputs)
    payload = raw_inputs if isinstance(raw_inputs, dict) else {}
    if raw_inputs is not None and not isinstance(raw_inputs, dict):
        warnings.append("Inputs payload is not an object; defaults used.")

    explicit: set[str] = set()
    for key, value in payload.items():
        field = _resolve_key(str(key))
        if field is None:
            unknown_keys.append(str(key))
            continue
        if key in LEGACY_WIRE_ALIASES and field in explicit:
            continue
        inputs[field] = value
        if key not in LEGACY_WIRE_ALIASES:
            explicit.add(field)

    for key, kind in FIELD_TYPES.items():
        val = inputs.get(key)
        if kind is bool:
            parsed = parse_flag(val)
            if parsed is None:
                warnings.append(f"{key} is not a yes/no value and was reset to default.")
                parsed = bool(base_inputs[key])
            inputs[key] = parsed
        elif kind is str:
            inputs[key] = "" if val is None else str(val).strip()
        elif kind is int:
            try:
                inputs[key] = int(float(val))
            except (TypeError, ValueError, OverflowError):
                warnings.append(f"{key} invalid and reset to default.")
                inputs[key] = int(base_inputs[key])
        else:
            try:
                number = float(val)
                if not math.isfinite(number):
                    raise ValueError(key)
                inputs[key] = number
            except (TypeError, ValueError):
                warnings.append(f"{key} invalid and reset to default.")
                inputs[key] = float(base_inputs[key])

    if not 0 <= inputs["viable_ads"] <= MAX_VIABLE_ADS:
        warnings.append(f"viable_ads clamped to [0, {MAX_VIABLE_ADS}].")
        inputs["viable_ads"] = int(min(MAX_VIABLE_ADS, max(0, inputs["viable_ads"])))
    if inputs["cap_liability_amount"] < 0:
        warnings.append("cap_liability_amount must be non-negative; reset to 0.")
        inputs["cap_liability_amount"] = 0.0

    for method in OVERRIDE_METHODS:
        key = f"override_{method}"
        if inputs[key] and parse_override(inputs[key]) is None:
            warnings.append(f"{key}={inputs[key]!r} is not a number; the computed multiple is used.")

    return inputs, warnings, sorted(unknown_keys)


def to_wire(inputs: dict | ValuationInput) -> dict:
    """Convert snake_case inputs back to the camelCase "yes"/"no" wire record."""
    data = inputs.to_dict() if isinstance(inputs, ValuationInput) else inputs
    out: dict[str, Any] = {}
    for key, value in data.items():
        if key not in FIELD_TYPES:
            continue
        out[snake_to_camel(key)] = flag_text(value) if FIELD_TYPES[key] is bool else value
    return out


def default_inputs() -> dict:
    inputs, _, _ = migrate_inputs(deepcopy(DEFAULTS))
    return inputs
