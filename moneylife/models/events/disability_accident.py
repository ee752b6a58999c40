"""
Disability caused by an accident.

Phase 1 pays the accident daily allowance for 728 days. Phase 2 coordinates
AI (adult and children), the LAA disability rente and the LPP disability
rentes under 90% of the annual salary.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from ..avs_ai import compute_ai_projection
from ..client import ClientData
from ..guards import count_children_under_18_at
from ..laa import disability_rente as laa_disability_rente
from ..laa import insured_earnings
from ..legal import LegalSettings, ScaleTable
from ..lpp import disability_child_rente, disability_rente
from ..units import clamp, monthly_to_annual
from .common import DailyAllowancePhase, EventMeta, daily_allowance_phase, to_monthly
from .coordination import CoordinationResult, coordinate_benefits

ACCIDENT_DAILY_ALLOWANCE_DAYS = 728


class DisabilityAccidentAmounts(BaseModel):
    ai_adult: float = Field(..., ge=0)
    ai_children: float = Field(..., ge=0)
    ai_total: float = Field(..., ge=0)
    laa_nominal: float = Field(..., ge=0)
    laa: float = Field(..., ge=0, description="After coordination")
    lpp_adult: float = Field(..., ge=0)
    lpp_children: float = Field(..., ge=0)
    lpp_available: float = Field(..., ge=0)
    lpp: float = Field(..., ge=0, description="After coordination")
    total: float = Field(..., ge=0)


class DisabilityAccidentResult(BaseModel):
    daily_allowance: DailyAllowancePhase
    annual: DisabilityAccidentAmounts
    monthly: DisabilityAccidentAmounts
    coordination: CoordinationResult
    children_count: int = Field(..., ge=0)
    meta: EventMeta


def accident_daily_allowance_rate(client: ClientData, legal: LegalSettings) -> float:
    """Accident allowance rate in percent, bounded to 80..100."""
    rate = client.accident_daily_allowance_rate
    if rate is None:
        rate = legal.laa_accident_daily_allowance_rate
    return clamp(rate, 80, 100)


def compute_disability_accident(
    client: ClientData,
    legal: LegalSettings,
    scale: ScaleTable,
    event_date: date,
    payment_date: Optional[date] = None,
    cap_base: Optional[float] = None,
    bte_years: Optional[int] = None,
    bta_years: int = 0,
) -> DisabilityAccidentResult:
    """
    Compose the accident disability benefits at event_date.

    Args:
        client: Client snapshot
        legal: Legal settings
        scale: Échelle 44 table
        event_date: Date of the accident
        payment_date: Date at which children are counted (default: event date)
        cap_base: Override of the coordination base (default: annual salary)
        bte_years: Explicit BTE year count (None dates them from children)
        bta_years: Number of BTA years

    Returns:
        Daily allowance phase and coordinated rente phase
    """
    salary = client.annual_salary
    rate = accident_daily_allowance_rate(client, legal)
    phase = daily_allowance_phase(salary, rate, ACCIDENT_DAILY_ALLOWANCE_DAYS)

    ai = compute_ai_projection(client, legal, scale, event_date, bte_years, bta_years)
    children = count_children_under_18_at(client, payment_date or event_date, legal)

    ai_adult = ai.adult_annual
    ai_children = monthly_to_annual(ai.child_monthly_per_child) * children
    ai_total = ai_adult + ai_children

    laa_nominal = laa_disability_rente(client, legal)
    lpp_adult = disability_rente(client)
    lpp_children = disability_child_rente(client) * children
    lpp_available = lpp_adult + lpp_children

    coordination = coordinate_benefits(
        salary, base=ai_total, laa=laa_nominal, lpp=lpp_available, cap_base=cap_base
    )

    annual = DisabilityAccidentAmounts(
        ai_adult=ai_adult,
        ai_children=ai_children,
        ai_total=ai_total,
        laa_nominal=laa_nominal,
        laa=coordination.laa_after,
        lpp_adult=lpp_adult,
        lpp_children=lpp_children,
        lpp_available=lpp_available,
        lpp=coordination.lpp_after,
        total=coordination.total,
    )

    return DisabilityAccidentResult(
        daily_allowance=phase,
        annual=annual,
        monthly=to_monthly(annual),
        coordination=coordination,
        children_count=children,
        meta=EventMeta(
            notes=[
                "Accident: AI + LAA + LPP limited to 90% of the annual salary.",
                "LAA is reduced first, LPP tops up the remaining room.",
                f"Daily allowance at {rate:g}% of the annual salary for "
                f"{ACCIDENT_DAILY_ALLOWANCE_DAYS} days.",
            ],
            inputs={
                "event_date": event_date.isoformat(),
                "salary": salary,
                "laa_insured_earnings": insured_earnings(client, legal),
                "cap_base": cap_base,
                "ramd": ai.breakdown.ramd,
                "bte_years": bte_years,
                "bta_years": bta_years,
            },
        ),
    )
