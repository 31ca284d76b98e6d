import json
from copy import deepcopy

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from hospice_valuation.access_codes import AccessCodeError, create_code, list_codes, lookup_code, revoke_code
from hospice_valuation.api import ValuationRun, run_valuation
from hospice_valuation.auth import (
    LEGACY_SUBJECT,
    check_password,
    configured_password,
    configured_secret,
    issue_token,
    verify_token,
)
from hospice_valuation.defaults import DEFAULTS
from hospice_valuation.formatting import format_currency, format_multiple, format_number, format_percent
from hospice_valuation.input_metadata import advisory_warnings, help_with_guidance
from hospice_valuation.integrity_checks import run_integrity_checks
from hospice_valuation.metrics import operational_kpis
from hospice_valuation.model import monthly_with_annual_total
from hospice_valuation.narrative import build_narrative
from hospice_valuation.persistence import (
    build_scenario_bundle,
    delete_saved,
    list_saved_names,
    load_saved,
    parse_import_json,
    save_named_bundle,
)
from hospice_valuation.rates import city_names, city_rates, default_county
from hospice_valuation.runtime_logging import (
    append_runtime_event,
    install_global_exception_logging,
    runtime_events_frame,
    runtime_log_path,
)
from hospice_valuation.schema import ValuationInput, migrate_inputs, to_wire
from hospice_valuation.sensitivity import CURRENCY_ENGINES, ENGINE_LABELS, ENGINE_TABLES
from hospice_valuation.share import decode_state, share_url
from hospice_valuation.tiers import within_market_range


install_global_exception_logging()


UI_DEFAULTS = {
    "auth_token": "",
    "rate_city": "",
    "factor_overrides": {},
    "factor_override_engine": "sde",
    "share_base_url": "http://localhost:8501/",
    "share_tier": "",
    "share_link": "",
    "runtime_log_limit": 120,
    "runtime_log_levels": [],
    "live_recalculate": True,
    "applied_inputs_json": "",
    "_share_loaded": False,
    "_input_warning_log_signature": "",
    "_integrity_log_signature": "",
}

EXPIRY_OPTIONS = ["unlimited", "24h", "7d", "30d", "3mo"]

KPI_FIELDS = [
    ("start_adc", "Start ADC", 0.1),
    ("end_adc", "End ADC", 0.1),
    ("yearly_adc", "Yearly ADC", 0.1),
    ("admit_rate_to_adc", "Admit Rate / ADC", 0.01),
    ("dc_rate_to_adc", "DC Rate / ADC", 0.01),
    ("death_rate_to_adc", "Death Rate / ADC", 0.01),
]
RATE_FIELDS = [
    ("rhc_high_rate", "RHC High Rate ($/day)", 0.01),
    ("rhc_low_rate", "RHC Low Rate ($/day)", 0.01),
    ("pct_high_rate", "% High Rate", 0.01),
    ("sequestration_rate", "Sequestration Rate", 0.005),
    ("pct_collected_30_days", "% Collected in 30 Days", 0.01),
]
COST_FIELDS = [
    ("staff_cost_pct", "Staff Cost %", 0.01),
    ("patient_cost_pct", "Patient Cost %", 0.01),
    ("ops_cost_pct", "Ops/Overhead %", 0.01),
    ("btl_pct", "Below-the-Line %", 0.01),
]
REGULATORY_FLAGS = [
    ("mcr_mcd_license", "MCR/MCD License"),
    ("audit_exposure", "Audit Exposure"),
    ("prior_cap_liabilities", "Prior CAP Liabilities"),
    ("recurring_cap_liability", "Recurring CAP Liability"),
    ("hqrp_penalty", "HQRP Penalty"),
]
QUALIFYING_FLAGS = [
    ("clean_survey", "Clean Survey"),
    ("pure_medicare", "100% Medicare"),
    ("high_turnover", "High Staff Turnover"),
    ("high_alos", "High ALOS"),
    ("con_state", "CON State"),
    ("esop", "ESOP"),
    ("strong_rcm", "Strong RCM"),
    ("high_gip", "High GIP"),
    ("non_replicable", "Non-Replicable"),
    ("hospital_rels", "Hospital Relationships"),
    ("high_live_dc", "High Live Discharge"),
    ("audit_risk", "Audit Risk"),
    ("high_ebitda_margin", "High EBITDA Margin"),
    ("other_factor", "Other Factor"),
]
OVERRIDE_LABELS = [
    ("override_sde", "SDE Multiple Override"),
    ("override_ebitda", "EBITDA-A Multiple Override"),
    ("override_revenue", "Revenue Multiple Override"),
    ("override_norm_ebitda", "Normalized EBITDA Multiple Override"),
]
OTHER_ADJUSTMENTS = [
    ("sde_other", "SDE Other Adjustment"),
    ("ebitda_other", "EBITDA-A Other Adjustment"),
    ("revenue_other", "Revenue Other Adjustment"),
    ("norm_ebitda_other", "Normalized EBITDA Other Adjustment"),
    ("per_adc_other", "$/ADC Other Adjustment ($)"),
]

PL_ROWS = [
    ("Gross Revenue", "gross_revenue"),
    ("HQRP Reduction", "hqrp_reduction"),
    ("Sequestration", "sequestration"),
    ("Net Revenue", "net_revenue"),
    ("Staff Costs", "staff_costs"),
    ("Patient Costs", "patient_costs"),
    ("Ops/Overhead", "ops_costs"),
    ("EBITDA", "ebitda"),
    ("Below-the-Line", "btl"),
    ("NOI", "noi"),
    ("SDE", "sde"),
]


def _inputs_from_state() -> dict:
    return {k: deepcopy(st.session_state.get(k, v)) for k, v in DEFAULTS.items()}


def _serialize(value) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"))


@st.cache_data(show_spinner=False)
def _run_valuation_cached(inputs_json: str, factor_overrides_json: str) -> ValuationRun:
    inputs = ValuationInput.from_dict(json.loads(inputs_json))
    return run_valuation(inputs, json.loads(factor_overrides_json))


def _apply_inputs_to_state(inputs: dict) -> None:
    migrated, _, _ = migrate_inputs(inputs, base=DEFAULTS)
    for k in DEFAULTS:
        st.session_state[k] = deepcopy(migrated[k])


def _queue_inputs(inputs: dict) -> None:
    # Widget-backed keys can only be written before the widgets render, so apply on the next run.
    st.session_state["_pending_inputs"] = deepcopy(inputs)
    st.rerun()


def _apply_city_rates() -> None:
    entry = city_rates(st.session_state.get("rate_city", ""))
    if entry is None:
        return
    st.session_state["rhc_high_rate"] = entry.rhc_high
    st.session_state["rhc_low_rate"] = entry.rhc_low


def _number_field(key: str, label: str, step: float, **kwargs) -> None:
    st.number_input(label, key=key, step=step, format="%.4f" if step < 0.1 else "%.2f", help=help_with_guidance(key, label + "."), **kwargs)


def _stable_json(value) -> str:
    return json.dumps(value, sort_keys=True, default=str)


def _log_once(signature_key: str, items: list, level: str, event: str, message: str) -> None:
    signature = _stable_json(items)
    if items and st.session_state.get(signature_key) != signature:
        append_runtime_event(level=level, event=event, message=message, context={"items": items[:25]})
        st.session_state[signature_key] = signature
    elif not items:
        st.session_state[signature_key] = ""


def _format_money_frame(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    out = df.copy()
    for col in columns:
        out[col] = out[col].map(format_currency)
    return out


def _engine_frame(run: ValuationRun, engine: str) -> pd.DataFrame:
    result = run.summary.engines[engine]
    fmt = format_currency if engine in CURRENCY_ENGINES else format_multiple
    rows = [{"Factor": "Starting (census tier)", "Key": "", "Adjustment": fmt(result.starting)}]
    rows += [{"Factor": f.label, "Key": f.key, "Adjustment": fmt(f.value)} for f in result.factors if f.value != 0]
    rows.append({"Factor": "Total", "Key": "", "Adjustment": fmt(result.total)})
    return pd.DataFrame(rows)


def _render_login() -> None:
    st.title("Hospice Valuation Calculator")
    with st.form("login_form"):
        password = st.text_input("Password or access code", type="password")
        submitted = st.form_submit_button("Sign In")
    if not submitted:
        return
    secret = configured_secret()
    if check_password(password, configured_password()):
        st.session_state["auth_token"] = issue_token(LEGACY_SUBJECT, secret)
        append_runtime_event(level="INFO", event="login", message="Admin signed in.")
        st.rerun()
    record = lookup_code(password)
    if record is not None:
        st.session_state["auth_token"] = issue_token(record["code"], secret)
        append_runtime_event(level="INFO", event="login", message="Access code signed in.", context={"code": record["code"]})
        st.rerun()
    append_runtime_event(level="WARNING", event="login_failed", message="Invalid password or access code.")
    st.error("Invalid password or access code.")


st.set_page_config(page_title="Hospice Valuation Calculator", layout="wide")

for k, v in UI_DEFAULTS.items():
    st.session_state.setdefault(k, deepcopy(v))

subject = None
if configured_password():
    subject = verify_token(st.session_state.get("auth_token"), configured_secret())
    if subject is None:
        _render_login()
        st.stop()

for k, v in DEFAULTS.items():
    st.session_state.setdefault(k, deepcopy(v))
pending_inputs = st.session_state.pop("_pending_inputs", None)
if pending_inputs:
    _apply_inputs_to_state(pending_inputs)

if not st.session_state["_share_loaded"]:
    shared = st.query_params.get("v")
    if shared:
        shared_inputs, shared_tier = decode_state(shared, DEFAULTS)
        _apply_inputs_to_state(shared_inputs)
        st.session_state["share_tier"] = shared_tier or ""
        append_runtime_event(level="INFO", event="share_link_loaded", message="Inputs loaded from share link.", context={"tier": shared_tier})
    st.session_state["_share_loaded"] = True

st.title("Hospice Valuation Calculator")
st.caption("Multi-method enterprise valuation: SDE, EBITDA-A, Revenue, Normalized EBITDA, and $/ADC cross-check.")

with st.sidebar:
    if subject is not None:
        st.caption(f"Signed in as `{subject}`.")
        if st.button("Sign Out"):
            st.session_state["auth_token"] = ""
            st.rerun()

    st.header("Inputs")
    st.toggle("Live Recalculate", key="live_recalculate", help="Turn off to batch several edits before recalculating.")
    recalculate = st.button("Recalculate", disabled=st.session_state["live_recalculate"])
    with st.expander("Hospice KPIs", expanded=True):
        for key, label, step in KPI_FIELDS:
            _number_field(key, label, step)

    with st.expander("Rates and Collections", expanded=False):
        st.selectbox(
            "Texas CBSA (FY2026 rates)",
            [""] + city_names(),
            key="rate_city",
            on_change=_apply_city_rates,
            help="Choosing a CBSA fills the RHC high and low rates.",
        )
        if st.session_state["rate_city"]:
            entry = city_rates(st.session_state["rate_city"])
            st.caption(
                f"CBSA {entry.cbsa_code} · wage index {entry.wage_index:.2f} · "
                f"default county {default_county(entry.city)}"
            )
        for key, label, step in RATE_FIELDS:
            _number_field(key, label, step)

    with st.expander("Cost Structure", expanded=False):
        for key, label, step in COST_FIELDS:
            _number_field(key, label, step)

    with st.expander("Regulatory and CAP", expanded=False):
        for key, label in REGULATORY_FLAGS:
            st.toggle(label, key=key)
        _number_field("cap_liability_amount", "Trailing CAP Liability Amount ($)", 1000.0)

    with st.expander("Qualifying Factors", expanded=False):
        for key, label in QUALIFYING_FLAGS:
            st.toggle(label, key=key)
        st.number_input("Viable ADS Count", key="viable_ads", min_value=0, max_value=5, step=1)

    with st.expander("Overrides and Adjustments", expanded=False):
        st.caption("Leave an override blank to use the computed multiple.")
        for key, label in OVERRIDE_LABELS:
            st.text_input(label, key=key, placeholder="e.g. 5.25")
        _number_field("norm_adjustment", "Normalization Adjustment ($)", 1000.0)
        for key, label in OTHER_ADJUSTMENTS:
            _number_field(key, label, 1000.0 if key == "per_adc_other" else 0.05)

    st.subheader("Saved Valuations")
    save_name = st.text_input("Save Name", placeholder="e.g., Dallas 40 ADC").strip()
    overwrite_save = st.checkbox("Overwrite if exists", value=False)
    if st.button("Save Valuation", disabled=not save_name):
        ok, msg = save_named_bundle(save_name, build_scenario_bundle(save_name, _inputs_from_state()), overwrite=overwrite_save)
        if ok:
            append_runtime_event(level="INFO", event="valuation_saved", message=msg, context={"name": save_name})
            st.success("Valuation saved.")
        else:
            append_runtime_event(level="WARNING", event="save_valuation_failed", message=msg, context={"name": save_name})
            st.warning(msg)

    saved_names = list_saved_names()
    selected_saved = st.selectbox("Saved", [""] + saved_names)
    l1, l2 = st.columns(2)
    if l1.button("Load", disabled=not selected_saved):
        bundle = load_saved(selected_saved)
        if bundle is None:
            append_runtime_event(level="WARNING", event="saved_valuation_missing", message="Saved valuation not found.", context={"name": selected_saved})
            st.warning(f"Saved valuation `{selected_saved}` was not found.")
        else:
            loaded, load_warnings, unknown = parse_import_json(json.dumps(bundle), base=DEFAULTS)
            append_runtime_event(level="INFO", event="valuation_loaded", message="Saved valuation loaded.", context={"name": selected_saved, "warnings": load_warnings, "unknown_keys": unknown})
            _queue_inputs(loaded)
    if l2.button("Delete", disabled=not selected_saved):
        if delete_saved(selected_saved):
            st.rerun()

    uploaded = st.file_uploader("Import Inputs JSON", type=["json"])
    if uploaded is not None and st.button("Apply Import"):
        imported, import_warnings, unknown = parse_import_json(uploaded.getvalue().decode("utf-8"), base=DEFAULTS)
        if imported:
            append_runtime_event(level="INFO", event="inputs_imported", message="Inputs imported.", context={"warnings": import_warnings, "unknown_keys": unknown})
            _queue_inputs(imported)
        else:
            append_runtime_event(level="WARNING", event="import_failed", message=" | ".join(import_warnings))
            st.error(" | ".join(import_warnings))
    st.download_button(
        "Download Inputs JSON",
        json.dumps(to_wire(migrate_inputs(_inputs_from_state(), base=DEFAULTS)[0]), indent=2),
        file_name="hospice_valuation_inputs.json",
        mime="application/json",
    )

    st.subheader("Share")
    st.text_input("App URL", key="share_base_url")
    if st.button("Create Share Link"):
        st.session_state["share_link"] = share_url(
            st.session_state["share_base_url"], _inputs_from_state(), tier=st.session_state["share_tier"] or None
        )
        append_runtime_event(level="INFO", event="share_link_created", message="Share link created.")
    if st.session_state["share_link"]:
        st.code(st.session_state["share_link"], language=None)

    if subject == LEGACY_SUBJECT:
        with st.expander("Access Codes", expanded=False):
            code_name = st.text_input("Recipient Name")
            code_email = st.text_input("Recipient Email")
            code_expiry = st.selectbox("Expires", EXPIRY_OPTIONS)
            if st.button("Create Access Code"):
                try:
                    created = create_code(code_name, email=code_email or None, expires=code_expiry)
                except AccessCodeError as exc:
                    st.warning(str(exc))
                else:
                    append_runtime_event(level="INFO", event="access_code_created", message="Access code created.", context={"code": created["code"]})
                    st.success(f"Access code: `{created['code']}`")
            codes = list_codes()
            if codes:
                st.dataframe(pd.DataFrame(codes), width="stretch", hide_index=True)
                revoke_choice = st.selectbox("Revoke Code", [""] + [c["code"] for c in codes if c.get("active")])
                if st.button("Revoke", disabled=not revoke_choice):
                    revoke_code(revoke_choice)
                    append_runtime_event(level="INFO", event="access_code_revoked", message="Access code revoked.", context={"code": revoke_choice})
                    st.rerun()

raw_inputs = _inputs_from_state()
inputs, input_warnings, _ = migrate_inputs(raw_inputs, base=DEFAULTS)
input_warnings.extend(advisory_warnings(inputs))

current_inputs_json = _serialize(inputs)
if st.session_state["live_recalculate"] or recalculate or not st.session_state["applied_inputs_json"]:
    st.session_state["applied_inputs_json"] = current_inputs_json
if current_inputs_json != st.session_state["applied_inputs_json"]:
    st.info("Input edits are pending. Click Recalculate to refresh the valuation.")

try:
    run = _run_valuation_cached(st.session_state["applied_inputs_json"], _serialize(st.session_state["factor_overrides"]))
except (TypeError, ValueError) as exc:
    append_runtime_event(level="ERROR", event="valuation_failed", message="Valuation failed.", context={"inputs": to_wire(inputs)}, exc=exc)
    st.error(f"Valuation failed: {exc}")
    st.stop()

monthly = run.monthly()
integrity_findings = run_integrity_checks(run.pl, monthly, run.summary)

_log_once("_input_warning_log_signature", input_warnings, "WARNING", "input_warnings", f"{len(input_warnings)} input warning(s).")
_log_once(
    "_integrity_log_signature",
    integrity_findings,
    "ERROR",
    "integrity_checks_failed",
    f"{len(integrity_findings)} integrity check(s) failed.",
)

if input_warnings:
    with st.expander(f"[!] Input Warnings ({len(input_warnings)})", expanded=False):
        for warning in input_warnings:
            st.write(f"- {warning}")
if integrity_findings:
    with st.expander(f"[!] Integrity Findings ({len(integrity_findings)})", expanded=False):
        st.dataframe(pd.DataFrame(integrity_findings), width="stretch", hide_index=True)
else:
    st.caption("Integrity checks: passed.")

summary = run.summary
pl = run.pl

m1, m2, m3, m4 = st.columns(4)
m1.metric("Final Valuation", format_currency(summary.final_ev))
m2.metric("Consensus (pre-adjustment)", format_currency(summary.consensus))
m3.metric("Adjusted Range", f"{format_currency(summary.low_adj)} – {format_currency(summary.high_adj)}")
m4.metric("Implied $/ADC", format_currency(summary.per_adc_back_calculated))

summary_tab, sens_tab, pl_tab, monthly_tab, narrative_tab = st.tabs(
    ["Valuation Summary", "Sensitivity Breakdown", "Profit & Loss", "Monthly Detail", "Narrative"]
)

with summary_tab:
    method_df = pd.DataFrame(
        [
            {"Method": ENGINE_LABELS[m], "Multiple": summary.multiples[m], "Enterprise Value": summary.ev[m]}
            for m in ("sde", "ebitda", "revenue", "norm_ebitda")
        ]
    )
    st.plotly_chart(
        px.bar(method_df, x="Method", y="Enterprise Value", title="Enterprise Value by Method", text_auto=".3s"),
        width="stretch",
    )
    display_df = method_df.assign(
        Multiple=method_df["Multiple"].map(format_multiple),
        **{"Enterprise Value": method_df["Enterprise Value"].map(format_currency)},
    )
    st.dataframe(display_df, width="stretch", hide_index=True)

    r1, r2, r3 = st.columns(3)
    r1.metric("CAP Adjustment", format_currency(summary.cap_adj))
    r2.metric("Trailing CAP Liability", format_currency(-summary.trailing_cap_liability))
    r3.metric("Harmonization Gap", format_percent(summary.harmonization_gap_pct, 1))

    band = run.market_adc_range
    in_band = within_market_range(summary.per_adc_back_calculated, run.inputs.yearly_adc)
    st.caption(
        f"Market $/ADC range for this census: {format_currency(band['low'])} – {format_currency(band['high'])} "
        f"({'within' if in_band else 'outside'} range)."
    )

    kpis = operational_kpis(run.inputs, pl)
    k1, k2, k3, k4 = st.columns(4)
    k1.metric("Census Growth", format_number(kpis["census_growth"], 1), format_percent(kpis["census_growth_pct"], 1))
    k2.metric("Net Revenue / Patient Day", format_currency(kpis["revenue_per_patient_day"], 2))
    k3.metric("EBITDA / ADC", format_currency(kpis["ebitda_per_adc"]))
    k4.metric("Patient Quality Factor", format_number(kpis["patient_quality_factor"], 3), kpis["quality_level"], delta_color="off")

with sens_tab:
    overview = pd.DataFrame(
        [
            {
                "Engine": ENGINE_LABELS[name],
                "Starting": result.starting,
                "Adjustments": result.adjustment_sum,
                "Total": result.total,
            }
            for name, result in summary.engines.items()
        ]
    )
    st.dataframe(overview, width="stretch", hide_index=True)

    engine = st.selectbox("Engine", list(ENGINE_TABLES), format_func=ENGINE_LABELS.get, key="factor_override_engine")
    st.dataframe(_engine_frame(run, engine), width="stretch", hide_index=True)
    active = [f for f in summary.engines[engine].factors if f.value != 0]
    if active:
        factor_df = pd.DataFrame({"Factor": [f.label for f in active], "Adjustment": [f.value for f in active]})
        st.plotly_chart(
            px.bar(factor_df, x="Adjustment", y="Factor", orientation="h", title=f"{ENGINE_LABELS[engine]} Adjustments"),
            width="stretch",
        )

    with st.expander("Factor Overrides", expanded=False):
        st.caption("Replace a single factor's value for this engine. Overrides persist until cleared.")
        rules = ENGINE_TABLES[engine]
        factor_key = st.selectbox(
            "Factor", [r.key for r in rules], format_func=lambda k: next(r.label for r in rules if r.key == k)
        )
        factor_value = st.number_input("Override Value", value=0.0, step=0.05)
        o1, o2 = st.columns(2)
        if o1.button("Apply Override"):
            overrides = deepcopy(st.session_state["factor_overrides"])
            overrides.setdefault(engine, {})[factor_key] = float(factor_value)
            st.session_state["factor_overrides"] = overrides
            st.rerun()
        if o2.button("Clear Overrides"):
            st.session_state["factor_overrides"] = {}
            st.rerun()
        if st.session_state["factor_overrides"]:
            st.json(st.session_state["factor_overrides"])

with pl_tab:
    pl_df = pd.DataFrame([{"Line Item": label, "Annual": getattr(pl, attr)} for label, attr in PL_ROWS])
    st.dataframe(_format_money_frame(pl_df, ["Annual"]), width="stretch", hide_index=True)
    p1, p2, p3 = st.columns(3)
    p1.metric("Weighted Daily Rate", format_currency(pl.weighted_avg_daily_rate, 2))
    p2.metric("Annual Patient Days", format_number(pl.annual_patient_days, 0))
    p3.metric("EBITDA Margin", format_percent(pl.ebitda_margin, 1))

    waterfall = go.Figure(
        go.Waterfall(
            name="P&L Bridge",
            orientation="v",
            measure=["absolute", "relative", "relative", "total", "relative", "relative", "relative", "total", "relative", "total"],
            x=[
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
            ],
            y=[pl.gross_revenue, pl.hqrp_reduction, pl.sequestration, 0, pl.staff_costs, pl.patient_costs, pl.ops_costs, 0, -pl.btl, 0],
        )
    )
    waterfall.update_layout(title="Annual P&L Bridge", showlegend=False)
    st.plotly_chart(waterfall, width="stretch")

with monthly_tab:
    monthly_total = monthly_with_annual_total(monthly)
    money_cols = [c for c in monthly_total.columns if c not in ("Month", "Days", "Patient Days")]
    st.dataframe(_format_money_frame(monthly_total, money_cols), width="stretch", hide_index=True)
    melt = monthly.melt(id_vars=["Month"], value_vars=["Net Revenue", "EBITDA"], var_name="Series", value_name="Amount")
    st.plotly_chart(
        px.bar(melt, x="Month", y="Amount", color="Series", barmode="group", title="Monthly Net Revenue and EBITDA"),
        width="stretch",
    )
    st.download_button(
        "Download Monthly CSV",
        monthly_total.to_csv(index=False),
        file_name="hospice_monthly_detail.csv",
        mime="text/csv",
    )

with narrative_tab:
    for section in build_narrative(run.inputs, pl, run.flags, summary):
        st.subheader(section["title"])
        st.markdown(section["text"].replace("\n", "  \n"))

with st.expander("Runtime Diagnostics", expanded=False):
    st.caption(f"Log file: `{runtime_log_path()}`")
    d1, d2 = st.columns(2)
    d1.number_input("Events to show", min_value=10, max_value=1000, step=10, key="runtime_log_limit")
    d2.multiselect("Levels", ["INFO", "WARNING", "ERROR"], key="runtime_log_levels")
    st.dataframe(
        runtime_events_frame(int(st.session_state["runtime_log_limit"]), st.session_state["runtime_log_levels"]),
        width="stretch",
        hide_index=True,
    )
