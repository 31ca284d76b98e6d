from __future__ import annotations

from hospice_valuation.input_metadata import advisory_warnings, help_with_guidance


def test_help_with_guidance_appends_range_and_note():
    help_text = help_with_guidance("cap_liability_amount", "Trailing CAP owed.")
    assert help_text.startswith("Trailing CAP owed.")
    assert "Reasonable range: 0 to 2,000,000." in help_text


def test_help_without_guidance_is_unchanged():
    assert help_with_guidance("esop", "Employee-owned.") == "Employee-owned."


def test_defaults_produce_no_advisories(base_inputs):
    assert advisory_warnings(base_inputs) == []


def test_out_of_range_and_cost_warnings(base_inputs):
    warnings = advisory_warnings({**base_inputs, "staff_cost_pct": 0.85, "patient_cost_pct": 0.10})
    assert any(w.startswith("staff_cost_pct=0.850 is outside") for w in warnings)
    assert any("EBITDA is negative" in w for w in warnings)


def test_recurring_cap_without_prior_is_flagged(base_inputs):
    warnings = advisory_warnings({**base_inputs, "recurring_cap_liability": True})
    assert warnings == ["recurring_cap_liability is set without prior_cap_liabilities; it has no effect."]


def test_event_rate_help_describes_annual_fraction():
    for key in ("admit_rate_to_adc", "dc_rate_to_adc", "death_rate_to_adc"):
        help_text = help_with_guidance(key, "Rate.")
        assert "Annual" in help_text
        assert "Monthly" not in help_text and "per month" not in help_text
