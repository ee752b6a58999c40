"""
Death caused by an accident.

The death date is fixed: the spouse's entitlement is evaluated once and, if
due, paid for life. Orphan rentes follow the payment date and stop at 18.
AVS survivors are kept in full; LAA survivors are reduced first and LPP
survivors top up, all within 90% of the annual salary.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from ..avs_ai import compute_survivor_projection
from ..client import ClientData
from ..guards import (
    SpouseRenteStatus,
    avs_survivor_rente_due_at,
    avs_widow_rente_due_at,
    avs_widower_rente_due_at,
    count_children_under_18_at,
    laa_spouse_rente_status_at,
    lpp_spouse_rente_status_at,
)
from ..laa import compute_capital, compute_survivor_rentes
from ..legal import LegalSettings, ScaleTable
from ..lpp import (
    capital_no_rente_accident,
    capital_plus_rente_accident,
    capital_plus_rente_generic,
    orphan_rente,
    survivor_rente,
)
from ..units import monthly_to_annual
from .common import EventMeta, indeterminate_note, to_monthly
from .coordination import CoordinationResult, coordinate_benefits


class DeathAccidentAmounts(BaseModel):
    avs_survivor: float = Field(..., ge=0)
    avs_orphans: float = Field(..., ge=0)
    avs: float = Field(..., ge=0)
    laa_nominal: float = Field(..., ge=0, description="After the family cap")
    laa: float = Field(..., ge=0, description="After coordination")
    lpp_survivor: float = Field(..., ge=0)
    lpp_orphans: float = Field(..., ge=0)
    lpp_available: float = Field(..., ge=0)
    lpp: float = Field(..., ge=0, description="After coordination")
    total: float = Field(..., ge=0)


class DeathAccidentCapitals(BaseModel):
    laa_unique: float = Field(default=0.0, ge=0, description="If the LAA rente is not due")
    lpp_no_rente: float = Field(default=0.0, ge=0, description="If the LPP rente is not due")
    lpp_plus_rente: float = Field(default=0.0, ge=0, description="Accident-specific")
    lpp_generic_plus_rente: float = Field(default=0.0, ge=0)
    total: float = Field(default=0.0, ge=0)


class DeathAccidentResult(BaseModel):
    annual: DeathAccidentAmounts
    monthly: DeathAccidentAmounts
    coordination: CoordinationResult
    capitals: DeathAccidentCapitals
    orphan_count: int = Field(..., ge=0)
    meta: EventMeta


def compute_death_accident(
    client: ClientData,
    legal: LegalSettings,
    scale: ScaleTable,
    death_date: date,
    payment_date: Optional[date] = None,
    cap_base: Optional[float] = None,
) -> DeathAccidentResult:
    """
    Compose the accident death benefits.

    Args:
        client: Client snapshot
        legal: Legal settings
        scale: Échelle 44 table
        death_date: Fixed date of death
        payment_date: Date at which orphans are counted (default: death date)
        cap_base: Override of the coordination base (default: annual salary)

    Returns:
        Coordinated survivor rentes and capitals
    """
    paid_at = payment_date or death_date
    orphans = count_children_under_18_at(client, paid_at, legal)

    avs = compute_survivor_projection(client, legal, scale, death_date, payment_date=paid_at)
    avs_due = avs_survivor_rente_due_at(client, death_date, legal)
    avs_survivor = monthly_to_annual(avs.survivor_monthly) if avs_due else 0.0
    avs_orphans = monthly_to_annual(avs.orphan_monthly_per_child) * orphans
    avs_total = avs_survivor + avs_orphans

    laa_status = laa_spouse_rente_status_at(client, death_date, legal)
    laa = compute_survivor_rentes(
        client, legal, orphans, spouse_due=laa_status == SpouseRenteStatus.DUE
    )

    lpp_status = lpp_spouse_rente_status_at(client, death_date, legal)
    lpp_survivor = survivor_rente(client) if lpp_status == SpouseRenteStatus.DUE else 0.0
    lpp_orphans = orphan_rente(client) * orphans
    lpp_available = lpp_survivor + lpp_orphans

    coordination = coordinate_benefits(
        client.annual_salary,
        base=avs_total,
        laa=laa.total,
        lpp=lpp_available,
        cap_base=cap_base,
    )

    annual = DeathAccidentAmounts(
        avs_survivor=avs_survivor,
        avs_orphans=avs_orphans,
        avs=avs_total,
        laa_nominal=laa.total,
        laa=coordination.laa_after,
        lpp_survivor=lpp_survivor,
        lpp_orphans=lpp_orphans,
        lpp_available=lpp_available,
        lpp=coordination.lpp_after,
        total=coordination.total,
    )

    laa_unique = (
        compute_capital(client, legal) if laa_status == SpouseRenteStatus.NON_DUE else 0.0
    )
    lpp_no_rente = (
        capital_no_rente_accident(client) if lpp_status == SpouseRenteStatus.NON_DUE else 0.0
    )
    lpp_plus_rente = capital_plus_rente_accident(client)
    lpp_generic_plus_rente = capital_plus_rente_generic(client)
    capitals = DeathAccidentCapitals(
        laa_unique=laa_unique,
        lpp_no_rente=lpp_no_rente,
        lpp_plus_rente=lpp_plus_rente,
        lpp_generic_plus_rente=lpp_generic_plus_rente,
        total=laa_unique + lpp_no_rente + lpp_plus_rente + lpp_generic_plus_rente,
    )

    notes = [
        "Death fixed at the analysis date; spouse rentes are paid for life if due.",
        "Accident: AVS + LAA within 90% of the salary, LAA reduced first, LPP tops up.",
        "LAA survivor rentes limited to 70% of the insured earnings.",
        "Orphan rentes follow the payment date and stop at 18.",
    ]
    if laa_status == SpouseRenteStatus.INDETERMINATE:
        notes.append(indeterminate_note("LAA"))
    if lpp_status == SpouseRenteStatus.INDETERMINATE:
        notes.append(indeterminate_note("LPP"))

    return DeathAccidentResult(
        annual=annual,
        monthly=to_monthly(annual),
        coordination=coordination,
        capitals=capitals,
        orphan_count=orphans,
        meta=EventMeta(
            notes=notes,
            flags={
                "avs_widow_due": avs_widow_rente_due_at(client, death_date, legal),
                "avs_widower_due": avs_widower_rente_due_at(client, death_date, legal),
                "avs_survivor_due": avs_due,
                "laa_status": laa_status.value,
                "lpp_status": lpp_status.value,
            },
            inputs={
                "death_date": death_date.isoformat(),
                "payment_date": paid_at.isoformat(),
                "salary": client.annual_salary,
                "laa_max_insured_earnings": legal.laa_max_insured_earnings,
                "cap_base": cap_base,
                "ramd": avs.breakdown.ramd,
                "laa_spouse": laa.spouse,
                "laa_per_child": laa.per_child,
            },
        ),
    )
