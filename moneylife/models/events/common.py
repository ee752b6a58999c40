"""
Result building blocks shared by the event composers.
"""

from typing import Any, Dict, List, TypeVar

from pydantic import BaseModel, Field

from ..units import annual_to_monthly

M = TypeVar("M", bound=BaseModel)

DAYS_PER_YEAR = 365


class EventMeta(BaseModel):
    """Human-readable notes plus the flags and inputs behind a result."""

    notes: List[str] = Field(default_factory=list)
    flags: Dict[str, Any] = Field(default_factory=dict)
    inputs: Dict[str, Any] = Field(default_factory=dict)


class DailyAllowancePhase(BaseModel):
    """Daily allowance paid before a disability rente starts."""

    days: int = Field(..., ge=0)
    rate_pct: float = Field(..., ge=0, le=100)
    annual: float = Field(..., ge=0)
    daily: float = Field(..., ge=0)
    total_for_period: float = Field(..., ge=0)
    monthly: float = Field(..., ge=0)


def daily_allowance_phase(salary: float, rate_pct: float, days: int) -> DailyAllowancePhase:
    """Flat percentage of the annual salary paid for a number of days."""
    annual = rate_pct / 100 * salary
    daily = annual / DAYS_PER_YEAR
    return DailyAllowancePhase(
        days=days,
        rate_pct=rate_pct,
        annual=annual,
        daily=daily,
        total_for_period=daily * days,
        monthly=annual_to_monthly(annual),
    )


def to_monthly(annual: M) -> M:
    """Same breakdown with every amount divided by 12."""
    return type(annual)(
        **{name: annual_to_monthly(value) for name, value in annual.model_dump().items()}
    )


def indeterminate_note(regime: str) -> str:
    return (
        f"{regime} spouse rente undetermined: marriage duration unknown, "
        "neither rente nor capital is counted."
    )
