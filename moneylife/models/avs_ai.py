"""
AVS/AI projections from the Échelle 44 scale.

The determinant average income (RAMD) is rebuilt from the annual salary over
the effective contribution years, a career supplement for early events and the
BTE/BTA notional credits, divided by the full contribution years. Amounts read
from the scale are monthly; the projections expose them unrounded.
"""

from datetime import date
from typing import Optional

import numpy as np
from pydantic import BaseModel, Field

from .client import ClientData
from .guards import count_children_under_18_at, has_partner
from .legal import LegalSettings, ScaleTable, as_scale_table
from .units import FloorTable, age_on_mask, monthly_to_annual, parse_date_mask

# Lower age bound -> percent of career income added for events before 45
CAREER_SUPPLEMENT_BANDS = FloorTable(
    [
        (float("-inf"), 100),
        (23, 90),
        (24, 80),
        (25, 70),
        (26, 60),
        (27, 50),
        (28, 40),
        (30, 30),
        (32, 20),
        (35, 10),
        (39, 5),
        (45, 0),
    ]
)

BTE_CHILD_AGE_LIMIT = 16


class BonusCredits(BaseModel):
    """BTE/BTA credits summed over the career window."""

    total: float = Field(..., ge=0, description="Sum of yearly credits (CHF)")
    bte_years: int = Field(..., ge=0, description="Years credited with BTE")
    bta_years_used: int = Field(..., ge=0, description="BTA years actually placed")
    career_window_known: bool = Field(default=True)


class RamdBreakdown(BaseModel):
    """Inputs and result of a RAMD computation."""

    full_years: int = Field(..., ge=0)
    effective_years: int = Field(..., ge=0)
    career_income: float = Field(..., ge=0)
    career_supplement: float = Field(default=0.0, ge=0)
    credits: BonusCredits
    ramd: float = Field(..., ge=0, description="Determinant average income (CHF/year)")


class AiProjection(BaseModel):
    """AI disability projection (monthly amounts)."""

    breakdown: RamdBreakdown
    adult_monthly: float = Field(..., ge=0)
    child_monthly_per_child: float = Field(..., ge=0)
    minimum_monthly_rente: float = Field(..., ge=0)

    @property
    def adult_annual(self) -> float:
        return monthly_to_annual(self.adult_monthly)

    @property
    def child_annual_per_child(self) -> float:
        return monthly_to_annual(self.child_monthly_per_child)


class SurvivorProjection(BaseModel):
    """AVS survivor projection (monthly amounts)."""

    breakdown: RamdBreakdown
    survivor_monthly: float = Field(..., ge=0, description="Widow/widower rente")
    orphan_monthly_per_child: float = Field(..., ge=0)
    orphan_count: int = Field(..., ge=0)
    orphan_monthly_total: float = Field(..., ge=0)


class RetirementProjection(BaseModel):
    """AVS old-age projection (monthly amount)."""

    breakdown: RamdBreakdown
    retirement_monthly: float = Field(..., ge=0)


def compute_full_contribution_years(legal: LegalSettings) -> int:
    """Years of a complete career (retirement age - legal start age)."""
    return legal.avs_retirement_age - legal.avs_contribution_start_age


def _start_age(client: ClientData, legal: LegalSettings) -> int:
    if client.avs_contribution_start_age is None:
        return legal.avs_contribution_start_age
    return max(client.avs_contribution_start_age, 0)


def compute_effective_contribution_years(client: ClientData, legal: LegalSettings) -> int:
    """Contribution years from the client's start age, minus missing years."""
    gross = legal.avs_retirement_age - _start_age(client, legal)
    return max(0, gross - len(client.avs_missing_years))


def compute_career_income(client: ClientData, legal: LegalSettings) -> float:
    """Revalued career income: annual salary over the effective years."""
    return client.annual_salary * compute_effective_contribution_years(client, legal)


def career_supplement_pct(age_at_event: int) -> float:
    """Career supplement percentage for an event at the given age."""
    return float(CAREER_SUPPLEMENT_BANDS.lookup(age_at_event) or 0)


def compute_career_supplement(age_at_event: int, career_income: float) -> float:
    return max(0.0, career_income * career_supplement_pct(age_at_event) / 100)


def _bte_years_from_children(client: ClientData, start_year: int, end_year: int) -> set:
    years = set()
    for child in client.children:
        birth = parse_date_mask(child.birthdate)
        if birth is None:
            continue
        first = max(start_year, birth.year)
        last = min(end_year, birth.year + BTE_CHILD_AGE_LIMIT - 1)
        years.update(range(first, last + 1))
    return years


def compute_bonus_credits(
    client: ClientData,
    legal: LegalSettings,
    event_year: int,
    bte_years: Optional[int] = None,
    bta_years: int = 0,
) -> BonusCredits:
    """
    Sum the BTE/BTA credits of each career year up to the event year.

    Each calendar year keeps the larger of its BTE and BTA credit. BTE years
    are dated from the children (years in which a child is under 16) unless
    an explicit count is given, in which case they are placed from the start
    of the career. BTA years are placed on the least-credited years first.

    Args:
        client: Client snapshot
        legal: Legal settings (credits, married split, start age)
        event_year: Last calendar year of the window
        bte_years: Explicit BTE year count, or None to date them from children
        bta_years: Number of BTA years

    Returns:
        The credit total and the years used
    """
    bte_credit = legal.bte_annual_credit
    bta_credit = legal.bta_annual_credit
    bte_pct = legal.bte_married_split if has_partner(client) else 1.0
    bta_years = max(0, bta_years)

    birth = parse_date_mask(client.birthdate)
    start_year = birth.year + _start_age(client, legal) if birth else None

    if start_year is None or start_year > event_year:
        explicit_bte = max(0, bte_years or 0)
        return BonusCredits(
            total=max(explicit_bte * bte_credit * bte_pct, bta_years * bta_credit),
            bte_years=explicit_bte,
            bta_years_used=bta_years,
            career_window_known=False,
        )

    years = np.arange(start_year, event_year + 1)
    if bte_years is not None:
        bte_mask = np.arange(len(years)) < max(0, bte_years)
    else:
        dated = _bte_years_from_children(client, start_year, event_year)
        bte_mask = np.isin(years, sorted(dated))

    credits = np.where(bte_mask, bte_credit * bte_pct, 0.0)

    remaining = bta_years
    if remaining > 0 and bta_credit > 0:
        for index in np.argsort(credits, kind="stable"):
            if remaining <= 0:
                break
            if bta_credit > credits[index]:
                credits[index] = bta_credit
                remaining -= 1

    return BonusCredits(
        total=float(credits.sum()),
        bte_years=int(bte_mask.sum()),
        bta_years_used=bta_years - remaining,
    )


def compute_ramd(
    career_income: float,
    career_supplement: float,
    credits: float,
    legal: LegalSettings,
) -> float:
    """RAMD = (career income + supplement + credits) / full contribution years."""
    full_years = compute_full_contribution_years(legal)
    if full_years <= 0:
        return 0.0
    return (career_income + career_supplement + credits) / full_years


def _breakdown(
    client: ClientData,
    legal: LegalSettings,
    event_year: int,
    age_at_event: Optional[int],
    bte_years: Optional[int],
    bta_years: int,
) -> RamdBreakdown:
    career_income = compute_career_income(client, legal)
    supplement = 0.0
    if age_at_event is not None:
        supplement = compute_career_supplement(age_at_event, career_income)
    credits = compute_bonus_credits(client, legal, event_year, bte_years, bta_years)
    return RamdBreakdown(
        full_years=max(0, compute_full_contribution_years(legal)),
        effective_years=compute_effective_contribution_years(client, legal),
        career_income=career_income,
        career_supplement=supplement,
        credits=credits,
        ramd=compute_ramd(career_income, supplement, credits.total, legal),
    )


def _age_at_event(client: ClientData, event_date: date) -> Optional[int]:
    if parse_date_mask(client.birthdate) is None:
        return None
    return age_on_mask(client.birthdate, event_date)


def minimum_monthly_rente(scale) -> float:
    """Smallest monthly old-age/invalidity rente of the scale."""
    return as_scale_table(scale).minimum_monthly_rente()


def compute_ai_projection(
    client: ClientData,
    legal: LegalSettings,
    scale: ScaleTable,
    event_date: date,
    bte_years: Optional[int] = None,
    bta_years: int = 0,
) -> AiProjection:
    """
    Project the AI disability rente for an event at event_date.

    Args:
        client: Client snapshot
        legal: Legal settings
        scale: Échelle 44 table
        event_date: Date of the disability event
        bte_years: Explicit BTE year count (None dates them from children)
        bta_years: Number of BTA years

    Returns:
        Monthly adult rente, per-child rente and the RAMD breakdown
    """
    table = as_scale_table(scale)
    breakdown = _breakdown(
        client,
        legal,
        event_date.year,
        _age_at_event(client, event_date),
        bte_years,
        bta_years,
    )
    row = table.select(breakdown.ramd)
    return AiProjection(
        breakdown=breakdown,
        adult_monthly=row.old_age_invalidity if row else 0.0,
        child_monthly_per_child=row.child_rente if row else 0.0,
        minimum_monthly_rente=table.minimum_monthly_rente(),
    )


def compute_survivor_projection(
    client: ClientData,
    legal: LegalSettings,
    scale: ScaleTable,
    death_date: date,
    payment_date: Optional[date] = None,
    bte_years: Optional[int] = None,
    bta_years: int = 0,
) -> SurvivorProjection:
    """
    Project the AVS survivor rentes for a death at death_date.

    Orphans are counted at payment_date (defaults to the death date).
    """
    table = as_scale_table(scale)
    breakdown = _breakdown(
        client,
        legal,
        death_date.year,
        _age_at_event(client, death_date),
        bte_years,
        bta_years,
    )
    row = table.select(breakdown.ramd)
    per_child = row.child_rente if row else 0.0
    orphans = count_children_under_18_at(client, payment_date or death_date, legal)
    return SurvivorProjection(
        breakdown=breakdown,
        survivor_monthly=row.widow_widower_survivor if row else 0.0,
        orphan_monthly_per_child=per_child,
        orphan_count=orphans,
        orphan_monthly_total=per_child * orphans,
    )


def compute_retirement_projection(
    client: ClientData,
    legal: LegalSettings,
    scale: ScaleTable,
    reference_date: date,
    bte_years: Optional[int] = None,
    bta_years: int = 0,
) -> RetirementProjection:
    """Project the AVS old-age rente; credits run up to the retirement year."""
    table = as_scale_table(scale)
    birth = parse_date_mask(client.birthdate)
    end_year = birth.year + legal.avs_retirement_age if birth else reference_date.year
    breakdown = _breakdown(client, legal, end_year, None, bte_years, bta_years)
    row = table.select(breakdown.ramd)
    return RetirementProjection(
        breakdown=breakdown,
        retirement_monthly=row.old_age_invalidity if row else 0.0,
    )
