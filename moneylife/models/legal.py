"""
Regulatory parameter tables for the benefit engine.

This module defines the year-stamped legal settings (LegalSettings), the rows
of the AVS/AI Échelle 44 scale and the ScaleTable used to select a row by
floor lookup on the determinant average income.
"""

from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .units import FloorTable, round_chf


class AvsSurvivorRules(BaseModel):
    """Thresholds of the AVS widow/widower rules."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    widow_min_age: int = Field(default=45, ge=0, alias="widowMinAge")
    marriage_min_years: int = Field(default=5, ge=0, alias="marriageMinYears")
    child_minor_age: int = Field(default=18, ge=0, alias="childMinorAge")


class LaaSurvivorRules(BaseModel):
    """Thresholds of the LAA spouse rente rule."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    spouse_min_age: int = Field(default=45, ge=0, alias="spouseMinAge")
    marriage_min_years: int = Field(default=5, ge=0, alias="marriageMinYears")
    child_minor_age: int = Field(default=18, ge=0, alias="childMinorAge")


class LppSurvivorRules(LaaSurvivorRules):
    """Thresholds of the LPP spouse rente rule."""

    require_affiliation: bool = Field(default=True, alias="requireAffiliation")


class SurvivorRules(BaseModel):
    """Survivor rente thresholds per regime."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    avs: AvsSurvivorRules = Field(default_factory=AvsSurvivorRules)
    laa: LaaSurvivorRules = Field(default_factory=LaaSurvivorRules)
    lpp: LppSurvivorRules = Field(default_factory=LppSurvivorRules)


class LegalSettings(BaseModel):
    """Year-stamped legal parameters for AVS/AI, LPP and LAA."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    year: int = Field(default=2025, ge=1900, le=2100, alias="Legal_Year")

    # LAA
    laa_max_insured_earnings: float = Field(
        default=148_200, gt=0, alias="Legal_SalaireAssureMaxLAA"
    )
    laa_capital_multiplier: float = Field(
        default=3, ge=0, alias="Legal_MultiplicateurCapitalSiPasRenteLAA"
    )
    laa_accident_daily_allowance_rate: float = Field(
        default=80, ge=0, le=100, alias="Legal_ijAccidentTaux"
    )

    # LPP
    lpp_coordination_deduction: float = Field(
        default=26_460, ge=0, alias="Legal_DeductionCoordinationMinLPP"
    )
    lpp_entry_threshold: float = Field(
        default=22_680, ge=0, alias="Legal_SeuilEntreeLPP"
    )
    lpp_max_salary: float = Field(default=90_720, ge=0, alias="Legal_SalaireMaxLPP")
    lpp_max_insured_salary: float = Field(
        default=64_260, ge=0, alias="Legal_SalaireAssureMaxLPP"
    )
    lpp_min_insured_salary: float = Field(
        default=3_780, ge=0, alias="Legal_SalaireAssureMinLPP"
    )
    lpp_capital_multiplier: float = Field(
        default=3, ge=0, alias="Legal_MultiplicateurCapitalSiPasRenteLPP"
    )
    lpp_retirement_credit_rates: Dict[int, float] = Field(
        default_factory=lambda: {25: 0.07, 35: 0.10, 45: 0.15, 55: 0.18},
        alias="Legal_CotisationsMinLPP",
        description="Savings credit rate by lower age bound of each band",
    )

    # AVS/AI
    avs_retirement_age: int = Field(default=65, ge=0, alias="Legal_AgeRetraiteAVS")
    avs_contribution_start_age: int = Field(
        default=21, ge=0, alias="Legal_AgeLegalCotisationsAVS"
    )
    bte_annual_credit: float = Field(
        default=45_360, ge=0, alias="Legal_BTE_AnnualCredit"
    )
    bta_annual_credit: float = Field(
        default=45_360, ge=0, alias="Legal_BTA_AnnualCredit"
    )
    bte_married_split: float = Field(
        default=0.5, ge=0, le=1, alias="Legal_BTE_SplitMarried"
    )

    survivors: SurvivorRules = Field(
        default_factory=SurvivorRules, alias="Legal_Survivors"
    )
    echelle44_version: Optional[str] = Field(
        default=None, alias="Legal_Echelle44Version"
    )

    @field_validator("lpp_retirement_credit_rates", mode="before")
    @classmethod
    def parse_credit_rate_keys(cls, v):
        """Seed files key the bands by strings such as "25" or "25-34"."""
        if not isinstance(v, dict):
            return v
        parsed = {}
        for key, rate in v.items():
            lower = str(key).split("-")[0].strip()
            parsed[int(lower)] = rate
        return parsed

    @model_validator(mode="after")
    def validate_insured_salary_bounds(self):
        if self.lpp_max_insured_salary < self.lpp_min_insured_salary:
            raise ValueError("LPP maximum insured salary must be >= minimum")
        return self

    def retirement_credit_table(self) -> FloorTable:
        """LPP savings credit rates as a floor table on age."""
        return FloorTable(list(self.lpp_retirement_credit_rates.items()))


class Echelle44Row(BaseModel):
    """One bracket of the Échelle 44 scale (monthly CHF amounts)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    income: float = Field(
        ..., ge=0, alias="Legal_Income", description="Lower bound of the RAMD bracket (CHF/year)"
    )
    old_age_invalidity: float = Field(..., ge=0, alias="Legal_OldAgeInvalidity")
    widow_widower_survivor: float = Field(
        ..., ge=0, alias="Legal_WidowWidowerSurvivor"
    )
    old_age_invalidity_for_widow_widower: Optional[float] = Field(
        default=None, ge=0, alias="Legal_OldAgeInvalidityForWidowWidower"
    )
    supplementary_30: Optional[float] = Field(
        default=None, ge=0, alias="Legal_Supplementary30"
    )
    child_40: Optional[float] = Field(default=None, ge=0, alias="Legal_Child40")
    orphan_60: Optional[float] = Field(default=None, ge=0, alias="Legal_Orphan60")

    @property
    def child_rente(self) -> float:
        """Simple child/orphan rente: the 40% column, else 40% of the base rente."""
        if self.child_40 is not None:
            return self.child_40
        return round_chf(self.old_age_invalidity * 0.4)


class ScaleTable:
    """Échelle 44 rows indexed for floor selection on the RAMD."""

    def __init__(self, rows: Sequence[Echelle44Row]):
        if not rows:
            raise ValueError("Échelle 44 table requires at least one row")
        self.rows: List[Echelle44Row] = sorted(rows, key=lambda row: row.income)
        self._table = FloorTable([(row.income, row) for row in self.rows])

    @classmethod
    def from_records(cls, records: Sequence[dict]) -> "ScaleTable":
        """Build a table from raw seed records."""
        return cls([Echelle44Row.model_validate(record) for record in records])

    def select(self, ramd: float) -> Optional[Echelle44Row]:
        """Row with the highest income bracket <= ramd (never rounds up)."""
        return self._table.lookup(ramd)

    def minimum_monthly_rente(self) -> float:
        """Smallest monthly old-age/invalidity rente of the scale."""
        return min(row.old_age_invalidity for row in self.rows)

    def __len__(self) -> int:
        return len(self.rows)


def as_scale_table(scale) -> ScaleTable:
    """Accept either a ScaleTable or a sequence of rows."""
    if isinstance(scale, ScaleTable):
        return scale
    return ScaleTable(list(scale))
