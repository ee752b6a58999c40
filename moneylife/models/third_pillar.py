"""
Third-pillar (3a/3b) risk pricing.

Prices the risk riders of a third-pillar contract: fixed and decreasing death
capitals, disability annuities and the premium waiver. Every coefficient lives
in a versioned TariffConfig. Until the client's occupation has been classified
the contract is treated as pure savings and no risk is priced.
"""

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .units import MONTHS_PER_YEAR, FloorTable, age_on, parse_date_mask

ProductType = Literal["3a", "3b"]
PremiumFrequency = Literal["monthly", "yearly"]
WaitingPeriod = Literal[3, 12, 24]

DEFAULT_BMI = 22.0


class TariffConfig(BaseModel):
    """Calibrated pricing coefficients."""

    model_config = ConfigDict(frozen=True)

    version: str = Field(default="2025.1")

    death_per_mille: float = Field(default=1.8, ge=0, description="CHF per 1'000 of capital")
    death_smoker_factor: float = Field(default=2.6, ge=0)
    decreasing_death_discount: float = Field(default=0.65, ge=0)

    disability_per_mille: float = Field(
        default=33.8, ge=0, description="CHF per 1'000 of annual rente"
    )
    disability_smoker_factor: float = Field(default=1.165, ge=0)
    occupation_factors: Dict[int, float] = Field(
        default_factory=lambda: {1: 1.0, 2: 1.2, 3: 1.66}
    )
    bmi_bands: Dict[float, float] = Field(
        default_factory=lambda: {0: 1.05, 18.5: 1.0, 25: 1.10, 30: 1.20, 35: 1.35},
        description="Lower BMI bound -> factor",
    )
    hypertension_factor: float = Field(default=1.15, ge=0)
    age_slope: float = Field(default=0.02, ge=0)
    age_pivot: int = Field(default=30, ge=0)
    waiting_period_factors: Dict[int, float] = Field(
        default_factory=lambda: {3: 1.4, 12: 1.1, 24: 1.0}
    )

    premium_waiver_rates: Dict[int, float] = Field(
        default_factory=lambda: {3: 0.075, 12: 0.055, 24: 0.04}
    )

    def occupation_factor(self, occupation_class: int) -> float:
        """Factor for an occupation class; classes above the table use the highest."""
        known = sorted(self.occupation_factors)
        clamped = min(max(occupation_class, known[0]), known[-1])
        return FloorTable(list(self.occupation_factors.items())).lookup(clamped)

    def bmi_factor(self, bmi: Optional[float]) -> float:
        value = bmi if bmi else DEFAULT_BMI
        factor = FloorTable(list(self.bmi_bands.items())).lookup(value)
        return 1.0 if factor is None else factor

    def age_factor(self, age: int) -> float:
        return 1 + max(age - self.age_pivot, 0) * self.age_slope

    def waiting_factor(self, months: int) -> float:
        return self.waiting_period_factors.get(months, 1.0)

    def premium_waiver_rate(self, months: int) -> float:
        return self.premium_waiver_rates.get(months, self.premium_waiver_rates[3])


DEFAULT_TARIFF = TariffConfig()


class DeathFixedRider(BaseModel):
    enabled: bool = False
    capital: float = Field(default=0.0, ge=0)


class DeathDecreasingRider(BaseModel):
    enabled: bool = False
    capital_initial: float = Field(default=0.0, ge=0)
    duration_years: int = Field(default=0, ge=0)


class DisabilityAnnuityRider(BaseModel):
    enabled: bool = False
    annual_rente: float = Field(default=0.0, ge=0)
    start_age: Optional[int] = Field(default=None, ge=0)
    waiting_period: WaitingPeriod = 24


class PremiumWaiverRider(BaseModel):
    enabled: bool = False
    waiting_period: WaitingPeriod = 3


class ThirdPillarConfig(BaseModel):
    """Risk riders and premium of a third-pillar contract."""

    product_type: ProductType = "3a"
    premium_amount: float = Field(default=0.0, ge=0)
    premium_frequency: PremiumFrequency = "yearly"
    death_fixed: DeathFixedRider = Field(default_factory=DeathFixedRider)
    death_decreasing: DeathDecreasingRider = Field(default_factory=DeathDecreasingRider)
    disability_annuities: List[DisabilityAnnuityRider] = Field(default_factory=list)
    premium_waiver: PremiumWaiverRider = Field(default_factory=PremiumWaiverRider)

    @property
    def annual_premium(self) -> float:
        if self.premium_frequency == "monthly":
            return self.premium_amount * MONTHS_PER_YEAR
        return self.premium_amount


class ClientHealthSnapshot(BaseModel):
    """Client facts used for underwriting."""

    birthdate: Optional[str] = Field(default=None, description="yyyy-MM-dd")
    is_smoker: bool = False
    height_cm: Optional[float] = Field(default=None, gt=0)
    weight_kg: Optional[float] = Field(default=None, gt=0)
    has_hypertension: bool = False
    has_health_issues: bool = False
    occupation_risk_class: Optional[int] = Field(default=None, ge=1, le=4)


class RiskPricingContext(BaseModel):
    age: int = Field(..., ge=0)
    product_type: ProductType
    is_smoker: bool = False
    bmi: Optional[float] = Field(default=None, ge=0)
    has_hypertension: bool = False
    has_health_issues: bool = False
    occupation_risk_class: Optional[int] = Field(
        default=None, ge=1, le=4, description="None: not classified, no risk pricing"
    )


class RiskPremiumResult(BaseModel):
    total_risk_premium: float = Field(..., ge=0)
    breakdown: Dict[str, float] = Field(default_factory=dict)


class RiskSavingsSplit(BaseModel):
    """Risk and savings parts, in the frequency of the contract premium."""

    total_risk_premium: float = Field(..., ge=0)
    net_savings_premium: float = Field(..., ge=0)
    breakdown: Dict[str, float] = Field(default_factory=dict)


def age_at_date(birthdate: Optional[str], at: date) -> int:
    """Whole-year age at a date (0 when the birthdate is unknown)."""
    return max(0, age_on(parse_date_mask(birthdate), at))


def build_risk_pricing_context(
    client: ClientHealthSnapshot, product_type: ProductType, as_of: date
) -> RiskPricingContext:
    bmi = None
    if client.height_cm and client.weight_kg:
        bmi = client.weight_kg / (client.height_cm / 100) ** 2
    return RiskPricingContext(
        age=age_at_date(client.birthdate, as_of),
        product_type=product_type,
        is_smoker=client.is_smoker,
        bmi=bmi,
        has_hypertension=client.has_hypertension,
        has_health_issues=client.has_health_issues,
        occupation_risk_class=client.occupation_risk_class,
    )


def compute_risk_premiums(
    config: ThirdPillarConfig,
    ctx: RiskPricingContext,
    tariff: TariffConfig = DEFAULT_TARIFF,
) -> RiskPremiumResult:
    """
    Annual risk premium per rider.

    Death riders apply the smoker factor only. Disability annuities apply the
    smoker, occupation, BMI, hypertension, waiting period and age factors.
    The premium waiver is a share of the annual contract premium.

    Args:
        config: Contract riders and premium
        ctx: Pricing context
        tariff: Pricing coefficients

    Returns:
        Total annual risk premium and its breakdown by rider
    """
    if ctx.occupation_risk_class is None:
        return RiskPremiumResult(total_risk_premium=0.0, breakdown={})

    breakdown: Dict[str, float] = {}
    death_smoker = tariff.death_smoker_factor if ctx.is_smoker else 1.0

    if config.death_fixed.enabled and config.death_fixed.capital > 0:
        units = config.death_fixed.capital / 1000
        breakdown["death_fixed"] = units * tariff.death_per_mille * death_smoker

    decreasing = config.death_decreasing
    if decreasing.enabled and decreasing.capital_initial > 0 and decreasing.duration_years > 0:
        units = decreasing.capital_initial / 1000
        breakdown["death_decreasing"] = (
            units * tariff.death_per_mille * tariff.decreasing_death_discount * death_smoker
        )

    disability_smoker = tariff.disability_smoker_factor if ctx.is_smoker else 1.0
    hypertension = tariff.hypertension_factor if ctx.has_hypertension else 1.0
    common_factor = (
        disability_smoker
        * tariff.occupation_factor(ctx.occupation_risk_class)
        * tariff.bmi_factor(ctx.bmi)
        * hypertension
        * tariff.age_factor(ctx.age)
    )
    for index, rider in enumerate(config.disability_annuities, start=1):
        if not rider.enabled or rider.annual_rente <= 0:
            continue
        units = rider.annual_rente / 1000
        breakdown[f"disability_annuity_{index}"] = (
            units
            * tariff.disability_per_mille
            * common_factor
            * tariff.waiting_factor(rider.waiting_period)
        )

    if config.premium_waiver.enabled:
        rate = tariff.premium_waiver_rate(config.premium_waiver.waiting_period)
        breakdown["premium_waiver"] = config.annual_premium * rate

    return RiskPremiumResult(
        total_risk_premium=sum(breakdown.values()), breakdown=breakdown
    )


def compute_risk_and_savings(
    config: ThirdPillarConfig,
    ctx: RiskPricingContext,
    tariff: TariffConfig = DEFAULT_TARIFF,
) -> RiskSavingsSplit:
    """Split the contract premium into risk and savings (savings floored at 0)."""
    risk = compute_risk_premiums(config, ctx, tariff)
    savings_annual = max(config.annual_premium - risk.total_risk_premium, 0.0)

    divisor = MONTHS_PER_YEAR if config.premium_frequency == "monthly" else 1
    return RiskSavingsSplit(
        total_risk_premium=risk.total_risk_premium / divisor,
        net_savings_premium=savings_annual / divisor,
        breakdown=risk.breakdown,
    )
