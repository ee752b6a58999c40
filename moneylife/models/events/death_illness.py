"""
Death caused by illness.

No coordination applies: AVS and LPP survivor rentes are added. The spouse's
entitlement is fixed at the death date, orphans follow the payment date.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from ..avs_ai import compute_survivor_projection
from ..client import ClientData
from ..guards import (
    SpouseRenteStatus,
    avs_survivor_rente_due_at,
    count_children_under_18_at,
    lpp_spouse_rente_status_at,
)
from ..legal import LegalSettings, ScaleTable
from ..lpp import (
    capital_no_rente_illness,
    capital_plus_rente_illness,
    orphan_rente,
    survivor_rente,
)
from ..units import monthly_to_annual
from .common import EventMeta, indeterminate_note, to_monthly


class DeathIllnessAmounts(BaseModel):
    avs_survivor: float = Field(..., ge=0)
    avs_orphans: float = Field(..., ge=0)
    avs: float = Field(..., ge=0)
    lpp_survivor: float = Field(..., ge=0)
    lpp_orphans: float = Field(..., ge=0)
    lpp: float = Field(..., ge=0)
    total: float = Field(..., ge=0)


class DeathIllnessCapitals(BaseModel):
    lpp_no_rente: float = Field(default=0.0, ge=0, description="If the LPP rente is not due")
    lpp_plus_rente: float = Field(default=0.0, ge=0)
    total: float = Field(default=0.0, ge=0)


class DeathIllnessResult(BaseModel):
    annual: DeathIllnessAmounts
    monthly: DeathIllnessAmounts
    capitals: DeathIllnessCapitals
    orphan_count: int = Field(..., ge=0)
    meta: EventMeta


def compute_death_illness(
    client: ClientData,
    legal: LegalSettings,
    scale: ScaleTable,
    death_date: date,
    payment_date: Optional[date] = None,
) -> DeathIllnessResult:
    """Compose the illness death benefits (no coordination)."""
    paid_at = payment_date or death_date
    orphans = count_children_under_18_at(client, paid_at, legal)

    avs = compute_survivor_projection(client, legal, scale, death_date, payment_date=paid_at)
    avs_due = avs_survivor_rente_due_at(client, death_date, legal)
    avs_survivor = monthly_to_annual(avs.survivor_monthly) if avs_due else 0.0
    avs_orphans = monthly_to_annual(avs.orphan_monthly_per_child) * orphans

    lpp_status = lpp_spouse_rente_status_at(client, death_date, legal)
    lpp_survivor = survivor_rente(client) if lpp_status == SpouseRenteStatus.DUE else 0.0
    lpp_orphans = orphan_rente(client) * orphans

    annual = DeathIllnessAmounts(
        avs_survivor=avs_survivor,
        avs_orphans=avs_orphans,
        avs=avs_survivor + avs_orphans,
        lpp_survivor=lpp_survivor,
        lpp_orphans=lpp_orphans,
        lpp=lpp_survivor + lpp_orphans,
        total=avs_survivor + avs_orphans + lpp_survivor + lpp_orphans,
    )

    no_rente = (
        capital_no_rente_illness(client, legal)
        if lpp_status == SpouseRenteStatus.NON_DUE
        else 0.0
    )
    plus_rente = capital_plus_rente_illness(client)

    notes = [
        "Illness: no coordination, AVS and LPP survivor rentes are added.",
        "Orphan rentes follow the payment date and stop at 18.",
    ]
    if lpp_status == SpouseRenteStatus.INDETERMINATE:
        notes.append(indeterminate_note("LPP"))

    return DeathIllnessResult(
        annual=annual,
        monthly=to_monthly(annual),
        capitals=DeathIllnessCapitals(
            lpp_no_rente=no_rente,
            lpp_plus_rente=plus_rente,
            total=no_rente + plus_rente,
        ),
        orphan_count=orphans,
        meta=EventMeta(
            notes=notes,
            flags={"avs_survivor_due": avs_due, "lpp_status": lpp_status.value},
            inputs={
                "death_date": death_date.isoformat(),
                "payment_date": paid_at.isoformat(),
                "ramd": avs.breakdown.ramd,
            },
        ),
    )
