"""Default valuation inputs for a new session (snake_case, flags as booleans)."""

from __future__ import annotations


DEFAULTS = {
    # Census and event rates
    "start_adc": 36.0,
    "end_adc": 42.0,
    "yearly_adc": 40.0,
    "admit_rate_to_adc": 0.1375,
    "dc_rate_to_adc": 0.125,
    "death_rate_to_adc": 0.1125,
    # Reimbursement
    "rhc_high_rate": 225.33,
    "rhc_low_rate": 177.61,
    "pct_high_rate": 0.14,
    "sequestration_rate": 0.02,
    "pct_collected_30_days": 0.98,
    # Costs as a share of net revenue
    "staff_cost_pct": 0.65,
    "patient_cost_pct": 0.10,
    "ops_cost_pct": 0.10,
    "btl_pct": 0.0,
    # Regulatory / risk flags
    "mcr_mcd_license": True,
    "audit_exposure": False,
    "prior_cap_liabilities": False,
    "cap_liability_amount": 0.0,
    "recurring_cap_liability": False,
    "hqrp_penalty": False,
    # Qualifying factors
    "clean_survey": True,
    "pure_medicare": False,
    "high_turnover": False,
    "high_alos": False,
    "viable_ads": 0,
    "con_state": False,
    "esop": False,
    "strong_rcm": False,
    "high_gip": False,
    "non_replicable": False,
    "hospital_rels": False,
    "high_live_dc": False,
    "audit_risk": False,
    "high_ebitda_margin": False,
    "other_factor": False,
    # Multiple overrides (empty string means use the computed multiple)
    "override_sde": "",
    "override_ebitda": "",
    "override_revenue": "",
    "override_norm_ebitda": "",
    "override_per_adc": "",
    # Manual adjustments
    "norm_adjustment": 0.0,
    "sde_other": 0.0,
    "per_adc_other": 0.0,
    "ebitda_other": 0.0,
    "revenue_other": 0.0,
    "norm_ebitda_other": 0.0,
}
