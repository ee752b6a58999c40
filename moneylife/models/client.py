"""
Pydantic models for the client facts consumed by the benefit engine.

This module defines the biographical and financial snapshot of a client
(ClientData), the LPP certificate values and the typed variants that replace
the integer codes stored by the web layer.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MaritalStatus(str, Enum):
    """Civil status of the client."""

    SINGLE = "single"
    MARRIED = "married"
    DIVORCED = "divorced"
    REGISTERED_PARTNERSHIP = "registered_partnership"
    COHABITING = "cohabiting"
    WIDOWED = "widowed"

    @classmethod
    def from_code(cls, code: int) -> "MaritalStatus":
        """Map the legacy integer code (0..5) to a status."""
        try:
            return _MARITAL_STATUS_CODES[code]
        except KeyError:
            raise ValueError(f"Unknown marital status code: {code}") from None


_MARITAL_STATUS_CODES = {
    0: MaritalStatus.SINGLE,
    1: MaritalStatus.MARRIED,
    2: MaritalStatus.DIVORCED,
    3: MaritalStatus.REGISTERED_PARTNERSHIP,
    4: MaritalStatus.COHABITING,
    5: MaritalStatus.WIDOWED,
}


class MarriageDuration(str, Enum):
    """Marriage duration bucket."""

    AT_LEAST_FIVE_YEARS = "at_least_five_years"
    LESS_THAN_FIVE_YEARS = "less_than_five_years"

    @classmethod
    def from_code(cls, code: int) -> "MarriageDuration":
        """Map the legacy bucket code (0 = at least 5 years, 1 = less)."""
        if code == 0:
            return cls.AT_LEAST_FIVE_YEARS
        if code == 1:
            return cls.LESS_THAN_FIVE_YEARS
        raise ValueError(f"Unknown marriage duration code: {code}")


class Sex(str, Enum):
    """Sex of a person."""

    MALE = "male"
    FEMALE = "female"

    @classmethod
    def from_code(cls, code: int) -> "Sex":
        """Map the legacy code (0 = male, 1 = female)."""
        if code == 0:
            return cls.MALE
        if code == 1:
            return cls.FEMALE
        raise ValueError(f"Unknown sex code: {code}")


class Child(BaseModel):
    """A child of the client."""

    model_config = ConfigDict(frozen=True)

    birthdate: Optional[str] = Field(
        default=None, description="Birthdate mask (dd.MM.yyyy)"
    )


class GeneralInsuredSalary(BaseModel):
    """Certificate states one insured salary for risk and savings."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["general"] = "general"
    amount: float = Field(..., ge=0, description="Insured salary (CHF/year)")


class SplitInsuredSalary(BaseModel):
    """Certificate states separate insured salaries for risk and savings."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["split"] = "split"
    risk: Optional[float] = Field(
        default=None, ge=0, description="Insured salary for risk benefits"
    )
    savings: Optional[float] = Field(
        default=None, ge=0, description="Insured salary for retirement savings"
    )
    general: Optional[float] = Field(
        default=None, ge=0, description="General value printed next to the split"
    )


class LegalFallbackInsuredSalary(BaseModel):
    """No certificate value: the legal insured salary is derived."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["legal_fallback"] = "legal_fallback"


InsuredSalaryMode = Annotated[
    Union[GeneralInsuredSalary, SplitInsuredSalary, LegalFallbackInsuredSalary],
    Field(discriminator="kind"),
]


class LppCertificate(BaseModel):
    """Values read from the client's LPP certificate (annual CHF amounts)."""

    model_config = ConfigDict(frozen=True)

    insured_salary: InsuredSalaryMode = Field(
        default_factory=LegalFallbackInsuredSalary,
        description="Insured salary mode",
    )

    disability_rente: Optional[float] = Field(default=None, ge=0)
    disability_child_rente: Optional[float] = Field(
        default=None, ge=0, description="Per child"
    )
    spouse_rente: Optional[float] = Field(default=None, ge=0)
    partner_rente: Optional[float] = Field(default=None, ge=0)
    spouse_or_partner: Optional[Literal["spouse", "partner"]] = Field(
        default=None, description="Which survivor rente the certificate grants"
    )
    orphan_rente: Optional[float] = Field(default=None, ge=0, description="Per child")
    retirement_rente_65: Optional[float] = Field(default=None, ge=0)

    capital_no_rente: Optional[float] = Field(default=None, ge=0)
    capital_no_rente_illness: Optional[float] = Field(default=None, ge=0)
    capital_no_rente_accident: Optional[float] = Field(default=None, ge=0)
    capital_plus_rente: Optional[float] = Field(default=None, ge=0)
    capital_plus_rente_illness: Optional[float] = Field(default=None, ge=0)
    capital_plus_rente_accident: Optional[float] = Field(default=None, ge=0)

    old_age_assets: Optional[float] = Field(
        default=None, ge=0, description="Retirement assets at certificate date"
    )
    certificate_date: Optional[str] = Field(default=None, description="dd.MM.yyyy")


def _or_default(value: Any, default: Any) -> Any:
    """Web-layer documents store explicit nulls for unanswered fields."""
    return default if value is None else value


class ClientData(BaseModel):
    """Biographical and financial snapshot of a client."""

    model_config = ConfigDict(frozen=True)

    birthdate: Optional[str] = Field(default=None, description="dd.MM.yyyy")
    sex: Optional[Sex] = Field(default=None)
    marital_status: MaritalStatus = Field(default=MaritalStatus.SINGLE)
    spouse_sex: Optional[Sex] = Field(default=None)
    spouse_birthdate: Optional[str] = Field(default=None, description="dd.MM.yyyy")
    marriage_duration: Optional[MarriageDuration] = Field(default=None)
    children: List[Child] = Field(default_factory=list)

    annual_salary: float = Field(default=0.0, ge=0, description="CHF/year")

    avs_contribution_start_age: Optional[int] = Field(
        default=None, ge=0, le=100, description="Age at first AVS contribution"
    )
    avs_missing_years: List[int] = Field(
        default_factory=list, description="Calendar years without AVS contribution"
    )

    lpp_affiliated: bool = Field(default=True)
    lpp: LppCertificate = Field(default_factory=LppCertificate)

    illness_daily_allowance: bool = Field(
        default=False, description="Whether an illness daily allowance is insured"
    )
    illness_daily_allowance_rate: Optional[float] = Field(
        default=None, ge=0, description="Percent of salary (10..100)"
    )
    accident_daily_allowance_rate: Optional[float] = Field(
        default=None, ge=0, description="Percent of salary (80..100)"
    )

    @field_validator("marital_status", mode="before")
    @classmethod
    def coerce_marital_status(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return MaritalStatus.from_code(v)
        return v

    @field_validator("marriage_duration", mode="before")
    @classmethod
    def coerce_marriage_duration(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return MarriageDuration.from_code(v)
        return v

    @field_validator("sex", "spouse_sex", mode="before")
    @classmethod
    def coerce_sex(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return Sex.from_code(v)
        return v

    @field_validator("children", "avs_missing_years", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @classmethod
    def from_firestore(cls, doc: Dict[str, Any]) -> "ClientData":
        """
        Build a ClientData from the flat `Enter_*` document of the web layer.

        Args:
            doc: Firestore document data

        Returns:
            The typed client snapshot
        """
        salary_type = doc.get("Enter_typeSalaireAssure")
        if salary_type == "split":
            insured_salary: Dict[str, Any] = {
                "kind": "split",
                "risk": doc.get("Enter_salaireAssureLPPRisque"),
                "savings": doc.get("Enter_salaireAssureLPPEpargne"),
                "general": doc.get("Enter_salaireAssureLPP"),
            }
        elif doc.get("Enter_salaireAssureLPP") is not None:
            insured_salary = {"kind": "general", "amount": doc["Enter_salaireAssureLPP"]}
        else:
            insured_salary = {"kind": "legal_fallback"}

        spouse_or_partner = {0: "spouse", 1: "partner"}.get(
            doc.get("Enter_RenteConjointOuPartenaireLPP")
        )

        lpp = {
            "insured_salary": insured_salary,
            "disability_rente": doc.get("Enter_renteInvaliditeLPP"),
            "disability_child_rente": doc.get("Enter_renteEnfantInvaliditeLPP"),
            "spouse_rente": doc.get("Enter_renteConjointLPP"),
            "partner_rente": doc.get("Enter_rentePartenaireLPP"),
            "spouse_or_partner": spouse_or_partner,
            "orphan_rente": doc.get("Enter_renteOrphelinLPP"),
            "retirement_rente_65": doc.get("Enter_rentevieillesseLPP65"),
            "capital_no_rente": doc.get("Enter_CapitalAucuneRente"),
            "capital_no_rente_illness": doc.get("Enter_CapitalAucuneRenteMal"),
            "capital_no_rente_accident": doc.get("Enter_CapitalAucuneRenteAcc"),
            "capital_plus_rente": doc.get("Enter_CapitalPlusRente"),
            "capital_plus_rente_illness": doc.get("Enter_CapitalPlusRenteMal"),
            "capital_plus_rente_accident": doc.get("Enter_CapitalPlusRenteAcc"),
            "old_age_assets": doc.get("Enter_avoirVieillesseTotal"),
            "certificate_date": doc.get("Enter_dateCertificatLPP"),
        }

        children = [
            {"birthdate": child.get("Enter_dateNaissance")}
            for child in (doc.get("Enter_enfants") or [])
            if isinstance(child, dict)
        ]

        data = {
            "birthdate": doc.get("Enter_dateNaissance"),
            "sex": doc.get("Enter_sexe"),
            "marital_status": _or_default(doc.get("Enter_etatCivil"), 0),
            "spouse_sex": doc.get("Enter_spouseSexe"),
            "spouse_birthdate": doc.get("Enter_spouseDateNaissance"),
            "marriage_duration": doc.get("Enter_mariageDuree"),
            "children": children,
            "annual_salary": doc.get("Enter_salaireAnnuel") or 0.0,
            "avs_contribution_start_age": doc.get("Enter_ageDebutCotisationsAVS"),
            "avs_missing_years": doc.get("Enter_anneesManquantesAVS"),
            "lpp_affiliated": _or_default(doc.get("Enter_Affilie_LPP"), True),
            "lpp": lpp,
            "illness_daily_allowance": bool(doc.get("Enter_ijMaladie", False)),
            "illness_daily_allowance_rate": doc.get("Enter_ijMaladieTaux"),
            "accident_daily_allowance_rate": doc.get("Enter_ijAccidentTaux"),
        }
        return cls.model_validate(data)
