"""
Disability caused by illness.

Phase 1 pays the illness daily allowance for 730 days. Phase 2 adds the AI
rentes (adult and children) and the LPP disability rentes without any
coordination, so the total may exceed the last salary.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from ..avs_ai import compute_ai_projection
from ..client import ClientData
from ..guards import count_children_under_18_at
from ..legal import LegalSettings, ScaleTable
from ..lpp import disability_child_rente, disability_rente
from ..units import clamp, monthly_to_annual
from .common import DailyAllowancePhase, EventMeta, daily_allowance_phase, to_monthly

ILLNESS_DAILY_ALLOWANCE_DAYS = 730


class DisabilityIllnessAmounts(BaseModel):
    ai_adult: float = Field(..., ge=0)
    ai_children: float = Field(..., ge=0)
    ai_total: float = Field(..., ge=0)
    lpp_adult: float = Field(..., ge=0)
    lpp_children: float = Field(..., ge=0)
    total: float = Field(..., ge=0)


class DisabilityIllnessResult(BaseModel):
    daily_allowance: DailyAllowancePhase
    annual: DisabilityIllnessAmounts
    monthly: DisabilityIllnessAmounts
    children_count: int = Field(..., ge=0)
    ai_per_child_annual: float = Field(..., ge=0)
    lpp_per_child_annual: float = Field(..., ge=0)
    meta: EventMeta


def illness_daily_allowance_rate(client: ClientData) -> float:
    """Insured illness allowance rate in percent (0 when not insured)."""
    if not client.illness_daily_allowance:
        return 0.0
    return clamp(client.illness_daily_allowance_rate or 0.0, 0, 100)


def compute_disability_illness(
    client: ClientData,
    legal: LegalSettings,
    scale: ScaleTable,
    event_date: date,
    payment_date: Optional[date] = None,
    bte_years: Optional[int] = None,
    bta_years: int = 0,
) -> DisabilityIllnessResult:
    """
    Compose the illness disability benefits at event_date.

    Args:
        client: Client snapshot
        legal: Legal settings
        scale: Échelle 44 table
        event_date: Date of the disability
        payment_date: Date at which children are counted (default: event date)
        bte_years: Explicit BTE year count (None dates them from children)
        bta_years: Number of BTA years

    Returns:
        Daily allowance phase and rente phase (annual and monthly)
    """
    rate = illness_daily_allowance_rate(client)
    phase = daily_allowance_phase(client.annual_salary, rate, ILLNESS_DAILY_ALLOWANCE_DAYS)

    ai = compute_ai_projection(client, legal, scale, event_date, bte_years, bta_years)
    children = count_children_under_18_at(client, payment_date or event_date, legal)

    ai_adult = ai.adult_annual
    ai_per_child = monthly_to_annual(ai.child_monthly_per_child)
    ai_children = ai_per_child * children
    lpp_adult = disability_rente(client)
    lpp_per_child = disability_child_rente(client)
    lpp_children = lpp_per_child * children

    annual = DisabilityIllnessAmounts(
        ai_adult=ai_adult,
        ai_children=ai_children,
        ai_total=ai_adult + ai_children,
        lpp_adult=lpp_adult,
        lpp_children=lpp_children,
        total=ai_adult + ai_children + lpp_adult + lpp_children,
    )

    return DisabilityIllnessResult(
        daily_allowance=phase,
        annual=annual,
        monthly=to_monthly(annual),
        children_count=children,
        ai_per_child_annual=ai_per_child,
        lpp_per_child_annual=lpp_per_child,
        meta=EventMeta(
            notes=[
                "Illness: no coordination, AI and LPP are added and may exceed the salary.",
                f"Daily allowance at {rate:g}% of the annual salary for "
                f"{ILLNESS_DAILY_ALLOWANCE_DAYS} days.",
            ],
            inputs={
                "event_date": event_date.isoformat(),
                "salary": client.annual_salary,
                "ramd": ai.breakdown.ramd,
                "bte_years": bte_years,
                "bta_years": bta_years,
            },
        ),
    )
