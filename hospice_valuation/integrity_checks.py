"""Accounting and rollup integrity checks for one valuation pass."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from hospice_valuation.model import MONTHLY_TO_ANNUAL, ProfitLossResult
from hospice_valuation.valuation import CONSENSUS_METHODS, SensitivitySummary


def _finding(
    check: str,
    max_abs_delta: float,
    month: str,
    lhs_name: str,
    rhs_name: str,
) -> dict[str, Any]:
    return {
        "Check": check,
        "Max Abs Delta": float(max_abs_delta),
        "Month of Max Delta": month,
        "LHS": lhs_name,
        "RHS": rhs_name,
    }


def _month_of_max_delta(labels: list[str] | None, delta: np.ndarray) -> str:
    if labels is None or len(delta) == 0:
        return ""
    idx = int(np.argmax(np.abs(delta)))
    return str(labels[idx]) if idx < len(labels) else str(idx)


def _check_identity(
    findings: list[dict[str, Any]],
    check_name: str,
    lhs_name: str,
    rhs_name: str,
    lhs,
    rhs,
    tol: float,
    labels: list[str] | None = None,
) -> None:
    delta = np.nan_to_num(np.atleast_1d(np.asarray(lhs, dtype=float) - np.asarray(rhs, dtype=float)), nan=0.0)
    if len(delta) == 0:
        return
    max_abs = float(np.max(np.abs(delta)))
    if max_abs > float(tol):
        findings.append(_finding(check_name, max_abs, _month_of_max_delta(labels, delta), lhs_name, rhs_name))


def run_integrity_checks(
    pl: ProfitLossResult,
    monthly: pd.DataFrame,
    summary: SensitivitySummary,
    tol: float = 1e-3,
) -> list[dict[str, Any]]:
    """Return integrity findings (empty list means all checks passed)."""
    if not isinstance(monthly, pd.DataFrame) or monthly.empty:
        return [{"Check": "Monthly detail not available", "Max Abs Delta": np.nan, "Month of Max Delta": "", "LHS": "", "RHS": ""}]

    findings: list[dict[str, Any]] = []
    months = monthly["Month"].astype(str).tolist()

    # Annual P&L identities.
    _check_identity(
        findings,
        "Net revenue identity",
        "Net Revenue",
        "Gross Revenue + HQRP Reduction + Sequestration",
        pl.net_revenue,
        pl.gross_revenue + pl.hqrp_reduction + pl.sequestration,
        tol,
    )
    _check_identity(
        findings,
        "EBITDA identity",
        "EBITDA",
        "Net Revenue + Staff + Patient + Ops",
        pl.ebitda,
        pl.net_revenue + pl.staff_costs + pl.patient_costs + pl.ops_costs,
        tol,
    )
    _check_identity(findings, "NOI identity", "NOI", "EBITDA - Below-the-Line", pl.noi, pl.ebitda - pl.btl, tol)

    # Monthly lines recomputed per month must sum back to the annual figures.
    for column, attr in MONTHLY_TO_ANNUAL.items():
        _check_identity(
            findings,
            f"Monthly reconciliation: {column}",
            f"Sum of monthly {column}",
            f"Annual {column}",
            float(monthly[column].sum()),
            getattr(pl, attr),
            tol,
        )
    _check_identity(
        findings,
        "Monthly EBITDA identity",
        "EBITDA",
        "Net Revenue + Staff + Patient + Ops",
        monthly["EBITDA"].to_numpy(),
        (monthly["Net Revenue"] + monthly["Staff Costs"] + monthly["Patient Costs"] + monthly["Ops/Overhead"]).to_numpy(),
        tol,
        labels=months,
    )

    # Engine and rollup identities; multiples are compared at a tighter tolerance.
    for name, engine in summary.engines.items():
        _check_identity(
            findings,
            f"Engine total identity: {name}",
            "Total",
            "Starting + sum of factors",
            engine.total,
            engine.starting + sum(f.value for f in engine.factors),
            1e-9,
        )
    _check_identity(
        findings,
        "Consensus identity",
        "Consensus",
        "Mean of SDE, EBITDA, Revenue, Normalized EBITDA EV",
        summary.consensus,
        float(np.mean([summary.ev[m] for m in CONSENSUS_METHODS])),
        tol,
    )
    _check_identity(
        findings,
        "Final EV identity",
        "Final EV",
        "Mid + CAP adjustment - trailing CAP liability",
        summary.final_ev,
        summary.mid + summary.cap_adj - summary.trailing_cap_liability,
        tol,
    )

    return findings
