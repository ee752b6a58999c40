"""
LAA (accident insurance) calculator.

Every amount derives from the insured earnings, the annual salary capped at
the LAA maximum. Survivor rentes are limited as a family to 70% of the insured
earnings by scaling every component down by the same ratio.
"""

from pydantic import BaseModel, Field

from .client import ClientData
from .legal import LegalSettings

DISABILITY_RATE = 0.80
SPOUSE_RATE = 0.40
CHILD_RATE = 0.15
FAMILY_CAP_RATE = 0.70
DAILY_ALLOWANCE_RATE = 0.80
ILLNESS_DAILY_ALLOWANCE_RATE = 0.80
DAYS_PER_YEAR = 365


class LaaSurvivors(BaseModel):
    """Survivor rentes before and after the family cap (annual CHF)."""

    spouse: float = Field(..., ge=0, description="After cap")
    children: float = Field(..., ge=0, description="All children, after cap")
    per_child: float = Field(..., ge=0, description="After cap")
    total_before_cap: float = Field(..., ge=0)
    total: float = Field(..., ge=0)
    family_cap: float = Field(..., ge=0)
    scale_factor: float = Field(default=1.0, ge=0, le=1)


class LaaProjection(BaseModel):
    insured_earnings: float = Field(..., ge=0)
    daily_allowance: float = Field(..., ge=0, description="CHF per day")
    illness_daily_allowance: float = Field(..., ge=0, description="CHF per year")
    disability_rente: float = Field(..., ge=0)
    survivors: LaaSurvivors
    capital: float = Field(..., ge=0, description="One-off capital if no rente is due")


def insured_earnings(client: ClientData, legal: LegalSettings) -> float:
    return min(client.annual_salary, legal.laa_max_insured_earnings)


def daily_allowance(client: ClientData, legal: LegalSettings) -> float:
    """Accident daily allowance: 80% of insured earnings per day."""
    return insured_earnings(client, legal) * DAILY_ALLOWANCE_RATE / DAYS_PER_YEAR


def illness_daily_allowance(client: ClientData) -> float:
    """Annualised illness daily allowance (80% of salary, not capped)."""
    return client.annual_salary * ILLNESS_DAILY_ALLOWANCE_RATE


def disability_rente(client: ClientData, legal: LegalSettings) -> float:
    return insured_earnings(client, legal) * DISABILITY_RATE


def spouse_rente(client: ClientData, legal: LegalSettings) -> float:
    """Nominal spouse rente, before any family cap."""
    return insured_earnings(client, legal) * SPOUSE_RATE


def child_rente(client: ClientData, legal: LegalSettings) -> float:
    """Nominal rente per child, before any family cap."""
    return insured_earnings(client, legal) * CHILD_RATE


def compute_survivor_rentes(
    client: ClientData, legal: LegalSettings, n_children: int, spouse_due: bool = True
) -> LaaSurvivors:
    """
    Survivor rentes with the 70% family cap.

    Args:
        client: Client snapshot
        legal: Legal settings
        n_children: Number of eligible children
        spouse_due: Whether the spouse rente is due (orphans are always counted)

    Returns:
        The capped survivor rentes
    """
    earnings = insured_earnings(client, legal)
    n_children = max(0, n_children)
    spouse = spouse_rente(client, legal) if spouse_due else 0.0
    per_child = child_rente(client, legal)
    children = per_child * n_children

    total_before_cap = spouse + children
    family_cap = earnings * FAMILY_CAP_RATE
    scale = 1.0
    if total_before_cap > family_cap and total_before_cap > 0:
        scale = family_cap / total_before_cap

    return LaaSurvivors(
        spouse=spouse * scale,
        children=children * scale,
        per_child=per_child * scale,
        total_before_cap=total_before_cap,
        total=(spouse + children) * scale,
        family_cap=family_cap,
        scale_factor=scale,
    )


def compute_capital(client: ClientData, legal: LegalSettings) -> float:
    """One-off capital when no survivor rente is due (spouse rente x multiplier)."""
    return spouse_rente(client, legal) * legal.laa_capital_multiplier


def compute_laa_projection(
    client: ClientData, legal: LegalSettings, n_children: int, spouse_due: bool = True
) -> LaaProjection:
    return LaaProjection(
        insured_earnings=insured_earnings(client, legal),
        daily_allowance=daily_allowance(client, legal),
        illness_daily_allowance=illness_daily_allowance(client),
        disability_rente=disability_rente(client, legal),
        survivors=compute_survivor_rentes(client, legal, n_children, spouse_due),
        capital=compute_capital(client, legal),
    )
