"""
90% coordination cascade for accident events.

The base benefits (AVS/AI) are kept in full, the LAA is reduced first to the
room left under the cap, then the LPP tops up whatever room remains.
"""

from typing import Optional

from pydantic import BaseModel, Field

from ..units import annual_to_monthly

COORDINATION_CAP_RATE = 0.9


class CoordinationResult(BaseModel):
    """Annual amounts before and after the cascade."""

    cap_base: float = Field(..., ge=0)
    cap: float = Field(..., ge=0)
    base: float = Field(..., ge=0, description="AVS/AI, never reduced")
    laa_before: float = Field(..., ge=0)
    laa_after: float = Field(..., ge=0)
    lpp_available: float = Field(..., ge=0)
    lpp_after: float = Field(..., ge=0)
    total: float = Field(..., ge=0)

    @property
    def monthly_total(self) -> float:
        return annual_to_monthly(self.total)


def coordination_cap(cap_base: float) -> float:
    return max(0.0, cap_base) * COORDINATION_CAP_RATE


def coordinate_benefits(
    salary: float,
    base: float,
    laa: float,
    lpp: float,
    cap_base: Optional[float] = None,
) -> CoordinationResult:
    """
    Apply the 90% cascade.

    Args:
        salary: Annual salary, the default cap base
        base: AVS/AI benefits (annual)
        laa: LAA benefits before coordination (annual)
        lpp: LPP benefits available (annual)
        cap_base: Override of the cap base

    Returns:
        The coordinated amounts
    """
    effective_base = salary if cap_base is None else cap_base
    cap = coordination_cap(effective_base)

    laa_after = min(laa, max(0.0, cap - base))
    lpp_after = min(lpp, max(0.0, cap - (base + laa_after)))

    return CoordinationResult(
        cap_base=max(0.0, effective_base),
        cap=cap,
        base=base,
        laa_before=laa,
        laa_after=laa_after,
        lpp_available=lpp,
        lpp_after=lpp_after,
        total=base + laa_after + lpp_after,
    )
