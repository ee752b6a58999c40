"""
Retirement at the legal AVS age: AVS old-age rente plus LPP retirement rente,
added without coordination.
"""

from datetime import date

from pydantic import BaseModel, Field

from ..avs_ai import compute_retirement_projection
from ..client import ClientData
from ..legal import LegalSettings, ScaleTable
from ..lpp import retirement_rente
from ..units import age_on_mask, monthly_to_annual
from .common import EventMeta, to_monthly


class RetirementAmounts(BaseModel):
    avs: float = Field(..., ge=0)
    lpp: float = Field(..., ge=0)
    total: float = Field(..., ge=0)


class RetirementResult(BaseModel):
    annual: RetirementAmounts
    monthly: RetirementAmounts
    legal_retirement_age: int = Field(..., ge=0)
    current_age: int = Field(..., ge=0)
    years_to_retirement: int = Field(..., ge=0)
    meta: EventMeta


def compute_retirement(
    client: ClientData,
    legal: LegalSettings,
    scale: ScaleTable,
    reference_date: date,
) -> RetirementResult:
    avs = compute_retirement_projection(client, legal, scale, reference_date)
    avs_annual = monthly_to_annual(avs.retirement_monthly)
    lpp_annual = retirement_rente(client)

    annual = RetirementAmounts(
        avs=avs_annual, lpp=lpp_annual, total=avs_annual + lpp_annual
    )
    current_age = max(0, age_on_mask(client.birthdate, reference_date))

    return RetirementResult(
        annual=annual,
        monthly=to_monthly(annual),
        legal_retirement_age=legal.avs_retirement_age,
        current_age=current_age,
        years_to_retirement=max(0, legal.avs_retirement_age - current_age),
        meta=EventMeta(
            notes=[
                "Retirement: no coordination, AVS and LPP are added.",
                "AVS from the Échelle 44 monthly rente, LPP from the certificate.",
            ],
            inputs={
                "reference_date": reference_date.isoformat(),
                "ramd": avs.breakdown.ramd,
            },
        ),
    )
