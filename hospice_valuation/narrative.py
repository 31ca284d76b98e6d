"""Plain-language valuation opinion assembled from a valuation run."""

from __future__ import annotations

from hospice_valuation.formatting import format_currency, format_multiple, format_percent
from hospice_valuation.metrics import DerivedFlags
from hospice_valuation.model import ProfitLossResult
from hospice_valuation.schema import ValuationInput
from hospice_valuation.sensitivity import EngineResult
from hospice_valuation.valuation import SensitivitySummary


def adc_scale(adc: float) -> str:
    if adc >= 80:
        return "large-scale"
    if adc >= 50:
        return "mid-size"
    if adc >= 30:
        return "established"
    return "small"


def margin_assessment(margin: float) -> str:
    if margin >= 0.20:
        return "exceptionally strong"
    if margin >= 0.18:
        return "strong"
    if margin >= 0.15:
        return "healthy"
    if margin >= 0.12:
        return "adequate"
    if margin >= 0.08:
        return "below industry average"
    return "weak"


def gap_confidence(gap_pct_points: float) -> str:
    gap = abs(gap_pct_points)
    if gap <= 5:
        return "high"
    if gap <= 15:
        return "moderate"
    return "low"


def collect_active_factors(engines: dict[str, EngineResult]) -> tuple[list[str], list[str]]:
    """Unique non-zero factor labels across engines, split by sign (first seen wins)."""
    positive: list[str] = []
    negative: list[str] = []
    seen: set[str] = set()
    for engine in engines.values():
        for f in engine.factors:
            if f.value == 0 or f.label in seen:
                continue
            seen.add(f.label)
            (positive if f.value > 0 else negative).append(f.label)
    return positive, negative


def _article(phrase: str) -> str:
    return "an" if phrase[:1] in "aeiou" else "a"


def _per_adc_context(per_adc: float) -> str:
    if per_adc >= 70000:
        return "above"
    if per_adc >= 50000:
        return "within"
    if per_adc >= 35000:
        return "at the lower end of"
    return "below"


def build_narrative(
    inputs: ValuationInput,
    pl: ProfitLossResult,
    flags: DerivedFlags,
    summary: SensitivitySummary,
) -> list[dict[str, str]]:
    positive, negative = collect_active_factors(summary.engines)
    consensus = summary.consensus
    final = summary.final_ev
    adc = inputs.yearly_adc
    growth = inputs.end_adc - inputs.start_adc
    growth_pct = growth / inputs.start_adc if inputs.start_adc > 0 else 0.0
    # Gap confidence bands are expressed in percentage points.
    conf = gap_confidence(summary.harmonization_gap_pct * 100)

    sections = [
        {
            "title": "Valuation Opinion",
            "text": (
                "Based on a multi-method consensus analysis using four independent valuation approaches, "
                f"this hospice operation is valued at {format_currency(consensus)} (pre-adjustment), with a final "
                f"market-adjusted enterprise value of {format_currency(final)}. This valuation reflects the "
                "organization's financial performance, patient census characteristics, regulatory positioning, "
                "and market-comparable transaction data."
            ),
        }
    ]

    if growth > 0:
        growth_clause = (
            f", demonstrating census growth of {abs(growth):.1f} patients ({format_percent(abs(growth_pct), 1)}) "
            "over the measurement period"
        )
    elif growth < 0:
        growth_clause = (
            f", noting a census decline of {abs(growth):.1f} patients ({format_percent(abs(growth_pct), 1)}) "
            "over the measurement period"
        )
    else:
        growth_clause = ", with stable census over the measurement period"
    scale = adc_scale(adc)
    sections.append(
        {
            "title": "Business Profile",
            "text": (
                f"This is {_article(scale)} {scale} hospice operation serving an average daily census of "
                f"{adc:.1f} patients{growth_clause}. The organization generates {format_currency(pl.gross_revenue)} "
                f"in annual gross revenue ({format_currency(pl.net_revenue)} net of sequestration and HQRP "
                f"adjustments), producing EBITDA of {format_currency(pl.ebitda)} at a "
                f"{format_percent(pl.ebitda_margin, 1)} margin, which is {margin_assessment(pl.ebitda_margin)} "
                f"relative to industry benchmarks. Seller's Discretionary Earnings total {format_currency(pl.sde)}."
            ),
        }
    )

    ev = summary.ev
    multiples = summary.multiples
    closing = {
        "high": ", and the tight convergence across methods strengthens confidence in this estimate",
        "moderate": ", with reasonable agreement across the different approaches",
        "low": ", though the wider spread across methods suggests some valuation uncertainty",
    }[conf]
    sections.append(
        {
            "title": "Valuation Methodology",
            "text": (
                "Four independent valuation methods were applied, producing a harmonization gap of "
                f"{format_percent(abs(summary.harmonization_gap_pct), 1)}, indicating {conf} convergence "
                "across approaches:\n\n"
                f"• SDE Method: {format_currency(ev['sde'])} at {format_multiple(multiples['sde'])} "
                "applied to seller's discretionary earnings\n"
                f"• EBITDA-A Method: {format_currency(ev['ebitda'])} at {format_multiple(multiples['ebitda'])} "
                "applied to adjusted EBITDA\n"
                f"• Revenue Method: {format_currency(ev['revenue'])} at {format_multiple(multiples['revenue'])} "
                "applied to net revenue\n"
                f"• Normalized EBITDA Method: {format_currency(ev['norm_ebitda'])} at "
                f"{format_multiple(multiples['norm_ebitda'])} applied to normalized earnings\n\n"
                f"The consensus value of {format_currency(consensus)} represents the arithmetic mean of these "
                f"four approaches{closing}."
            ),
        }
    )

    if positive:
        drivers = "\n".join(f"• {label}" for label in positive)
        extra = ""
        if flags.ebitda_above_18:
            extra += (
                "The EBITDA margin above 18% signals operational efficiency that exceeds industry norms, "
                "commanding a premium in buyer negotiations. "
            )
        if growth > 0:
            extra += "Census growth demonstrates market demand and referral source strength. "
        if pl.patient_quality_factor >= 1.05:
            extra += (
                f"The patient quality factor of {pl.patient_quality_factor:.3f} reflects favorable clinical "
                "outcomes and care patterns. "
            )
        sections.append(
            {
                "title": "Value Drivers",
                "text": (
                    "The following factors contribute positively to the enterprise value, supporting premium "
                    f"multiples across the valuation engines:\n\n{drivers}\n\n{extra}"
                ).rstrip(),
            }
        )

    if negative:
        risks = "\n".join(f"• {label}" for label in negative)
        sections.append(
            {
                "title": "Risk Adjustments",
                "text": (
                    "The following factors apply downward pressure on valuation multiples, reflecting areas "
                    f"where buyers may discount the enterprise value:\n\n{risks}\n\n"
                    "A seller addressing these factors prior to sale could improve the achievable price."
                ),
            }
        )

    if final > consensus:
        direction = "The upward adjustment from the pre-adjustment consensus comes from the CAP position."
    elif final < consensus:
        direction = (
            "The downward adjustment from the pre-adjustment consensus reflects CAP exposure and any "
            "trailing CAP liability."
        )
    else:
        direction = "The final value aligns with the pre-adjustment consensus."
    sections.append(
        {
            "title": "Valuation Range",
            "text": (
                f"The market-adjusted valuation range spans from {format_currency(summary.low_adj)} "
                f"(conservative) to {format_currency(summary.high_adj)} (optimistic), with the midpoint at "
                f"{format_currency(summary.mid_adj)}. {direction}"
            ),
        }
    )

    per_adc = summary.per_adc_back_calculated
    context = _per_adc_context(per_adc)
    sections.append(
        {
            "title": "Per-Patient Validation",
            "text": (
                f"As a cross-check, the implied value per average daily census patient is "
                f"{format_currency(per_adc)}, which falls {context} the typical market range of "
                "$40,000–$80,000 per ADC for hospice operations in non-Certificate of Need states."
            ),
        }
    )

    if positive:
        support = f"{len(positive)} positive value driver{'s' if len(positive) > 1 else ''}"
    else:
        support = "the baseline financial metrics"
    audience = (
        "a seller to justify the asking price in negotiations with prospective buyers"
        if final >= consensus
        else "a buyer to anchor their offer and negotiate acquisition terms"
    )
    sections.append(
        {
            "title": "Summary",
            "text": (
                f"In summary, the enterprise value of {format_currency(final)} is supported by {support}, "
                f"validated across four independent methodologies with {conf} convergence, and cross-checked "
                f"against per-patient market benchmarks. This valuation provides a defensible basis for {audience}."
            ),
        }
    )
    return sections
