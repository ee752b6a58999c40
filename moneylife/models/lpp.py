"""
LPP (occupational pension) calculator.

Rentes are read from the client's certificate; the engine never invents an
LPP amount. Insured salaries fall back to the legal coordinated salary when
the certificate is silent. All amounts are annual CHF.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .client import (
    ClientData,
    GeneralInsuredSalary,
    LppCertificate,
    SplitInsuredSalary,
)
from .legal import LegalSettings
from .units import age_on_mask, clamp


class InsuredSalarySource(str, Enum):
    """Which value won the insured salary resolution."""

    CERTIFICATE_SPLIT = "certificate_split"
    CERTIFICATE_GENERAL = "certificate_general"
    LEGAL_FALLBACK = "legal_fallback"


class ResolvedInsuredSalary(BaseModel):
    amount: float = Field(..., ge=0)
    source: InsuredSalarySource


class LppInsuredSalaries(BaseModel):
    legal: float = Field(..., ge=0)
    risk: ResolvedInsuredSalary
    savings: ResolvedInsuredSalary
    mode: str


class LppRentes(BaseModel):
    disability: float = Field(default=0.0, ge=0)
    disability_child: float = Field(default=0.0, ge=0, description="Per child")
    spouse: float = Field(default=0.0, ge=0)
    partner: float = Field(default=0.0, ge=0)
    survivor: float = Field(
        default=0.0, ge=0, description="Spouse or partner rente per the selector"
    )
    orphan: float = Field(default=0.0, ge=0, description="Per child")
    retirement: float = Field(default=0.0, ge=0)


class LppCapitals(BaseModel):
    no_rente_illness: float = Field(default=0.0, ge=0)
    no_rente_accident: float = Field(default=0.0, ge=0)
    plus_rente_illness: float = Field(default=0.0, ge=0)
    plus_rente_accident: float = Field(default=0.0, ge=0)
    plus_rente_generic: float = Field(default=0.0, ge=0)


class LppProjection(BaseModel):
    """Everything the LPP certificate and legal fallbacks provide."""

    insured_salary: LppInsuredSalaries
    rentes: LppRentes
    capitals: LppCapitals
    legal_credit_rate: float = Field(default=0.0, ge=0)
    legal_savings_credit: float = Field(default=0.0, ge=0)


def compute_legal_insured_salary(client: ClientData, legal: LegalSettings) -> float:
    """Salary minus the coordination deduction, bounded to the legal range."""
    return clamp(
        client.annual_salary - legal.lpp_coordination_deduction,
        legal.lpp_min_insured_salary,
        legal.lpp_max_insured_salary,
    )


def _resolve(client: ClientData, legal: LegalSettings, part: str) -> ResolvedInsuredSalary:
    mode = client.lpp.insured_salary
    if isinstance(mode, SplitInsuredSalary):
        value = getattr(mode, part)
        if value is not None:
            return ResolvedInsuredSalary(
                amount=value, source=InsuredSalarySource.CERTIFICATE_SPLIT
            )
        if mode.general is not None:
            return ResolvedInsuredSalary(
                amount=mode.general, source=InsuredSalarySource.CERTIFICATE_GENERAL
            )
    elif isinstance(mode, GeneralInsuredSalary):
        return ResolvedInsuredSalary(
            amount=mode.amount, source=InsuredSalarySource.CERTIFICATE_GENERAL
        )
    return ResolvedInsuredSalary(
        amount=compute_legal_insured_salary(client, legal),
        source=InsuredSalarySource.LEGAL_FALLBACK,
    )


def resolve_risk_insured_salary(
    client: ClientData, legal: LegalSettings
) -> ResolvedInsuredSalary:
    """Insured salary for disability and survivor benefits."""
    return _resolve(client, legal, "risk")


def resolve_savings_insured_salary(
    client: ClientData, legal: LegalSettings
) -> ResolvedInsuredSalary:
    """Insured salary for retirement savings."""
    return _resolve(client, legal, "savings")


def disability_rente(client: ClientData) -> float:
    return client.lpp.disability_rente or 0.0


def disability_child_rente(client: ClientData) -> float:
    return client.lpp.disability_child_rente or 0.0


def spouse_rente(client: ClientData) -> float:
    return client.lpp.spouse_rente or 0.0


def partner_rente(client: ClientData) -> float:
    return client.lpp.partner_rente or 0.0


def survivor_rente(client: ClientData) -> float:
    """
    Spouse or partner rente according to the certificate selector.

    Without a selector the spouse rente is used when present, else the
    partner rente.
    """
    certificate = client.lpp
    if certificate.spouse_or_partner == "partner":
        return partner_rente(client)
    if certificate.spouse_or_partner == "spouse":
        return spouse_rente(client)
    return spouse_rente(client) or partner_rente(client)


def orphan_rente(client: ClientData) -> float:
    return client.lpp.orphan_rente or 0.0


def retirement_rente(client: ClientData) -> float:
    return client.lpp.retirement_rente_65 or 0.0


def _first_value(*values: Optional[float]) -> Optional[float]:
    for value in values:
        if value is not None:
            return value
    return None


def capital_no_rente_illness(client: ClientData, legal: LegalSettings) -> float:
    """
    Death capital (illness) when no survivor rente is due.

    Illness-specific certificate value, else the generic one, else the
    reference rente (spouse, else partner) times the legal multiplier.
    """
    certificate: LppCertificate = client.lpp
    explicit = _first_value(
        certificate.capital_no_rente_illness, certificate.capital_no_rente
    )
    if explicit is not None:
        return explicit
    reference = spouse_rente(client) or partner_rente(client)
    return reference * legal.lpp_capital_multiplier


def capital_no_rente_accident(client: ClientData) -> float:
    """Death capital (accident) when no survivor rente is due: certificate only."""
    return client.lpp.capital_no_rente_accident or 0.0


def capital_plus_rente_illness(client: ClientData) -> float:
    certificate = client.lpp
    return (
        _first_value(certificate.capital_plus_rente_illness, certificate.capital_plus_rente)
        or 0.0
    )


def capital_plus_rente_accident(client: ClientData) -> float:
    """Accident-specific capital paid on top of a rente."""
    return client.lpp.capital_plus_rente_accident or 0.0


def capital_plus_rente_generic(client: ClientData) -> float:
    """Generic capital paid on top of a rente."""
    return client.lpp.capital_plus_rente or 0.0


def legal_retirement_credit_rate(age: int, legal: LegalSettings) -> float:
    """Minimum LPP savings credit rate for an age (0 outside the bands)."""
    if age >= legal.avs_retirement_age:
        return 0.0
    return float(legal.retirement_credit_table().lookup(age) or 0.0)


def compute_legal_savings_credit(
    client: ClientData, legal: LegalSettings, at: date
) -> float:
    """Annual legal savings credit at the reference date."""
    age = age_on_mask(client.birthdate, at)
    savings = resolve_savings_insured_salary(client, legal).amount
    return savings * legal_retirement_credit_rate(age, legal)


def compute_lpp_projection(
    client: ClientData, legal: LegalSettings, at: date
) -> LppProjection:
    """
    Bundle insured salaries, rentes, capitals and the legal savings credit.

    Args:
        client: Client snapshot
        legal: Legal settings
        at: Reference date for the age-banded savings credit

    Returns:
        The LPP projection
    """
    age = age_on_mask(client.birthdate, at)
    return LppProjection(
        insured_salary=LppInsuredSalaries(
            legal=compute_legal_insured_salary(client, legal),
            risk=resolve_risk_insured_salary(client, legal),
            savings=resolve_savings_insured_salary(client, legal),
            mode=client.lpp.insured_salary.kind,
        ),
        rentes=LppRentes(
            disability=disability_rente(client),
            disability_child=disability_child_rente(client),
            spouse=spouse_rente(client),
            partner=partner_rente(client),
            survivor=survivor_rente(client),
            orphan=orphan_rente(client),
            retirement=retirement_rente(client),
        ),
        capitals=LppCapitals(
            no_rente_illness=capital_no_rente_illness(client, legal),
            no_rente_accident=capital_no_rente_accident(client),
            plus_rente_illness=capital_plus_rente_illness(client),
            plus_rente_accident=capital_plus_rente_accident(client),
            plus_rente_generic=capital_plus_rente_generic(client),
        ),
        legal_credit_rate=legal_retirement_credit_rate(age, legal),
        legal_savings_credit=compute_legal_savings_credit(client, legal, at),
    )
