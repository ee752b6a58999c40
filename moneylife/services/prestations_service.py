"""
Prestations service for computing a client's benefits across life events.

This service runs every event composer against the configured legal tables
and turns the results into coverage gap stacks (monthly need target, covered
amount and uncovered gap, split by source) for the web layer.
"""

import logging
from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from moneylife.config import Settings
from moneylife.models.client import ClientData
from moneylife.models.events import (
    DeathAccidentResult,
    DeathIllnessResult,
    DisabilityAccidentResult,
    DisabilityIllnessResult,
    RetirementResult,
    compute_death_accident,
    compute_death_illness,
    compute_disability_accident,
    compute_disability_illness,
    compute_retirement,
)
from moneylife.models.guards import (
    LegalRentesStatus,
    SpouseRenteStatus,
    compute_legal_rentes_status_at,
)
from moneylife.models.legal import LegalSettings, ScaleTable
from moneylife.models.registry import load_legal_settings, load_scale
from moneylife.models.third_pillar import (
    DEFAULT_TARIFF,
    ClientHealthSnapshot,
    RiskSavingsSplit,
    TariffConfig,
    ThirdPillarConfig,
    build_risk_pricing_context,
    compute_risk_and_savings,
)
from moneylife.models.timeline import (
    BenefitTimeline,
    build_death_timeline,
    build_disability_timeline,
    build_retirement_timeline,
)
from moneylife.models.units import annual_to_monthly, clamp

logger = logging.getLogger(__name__)

Source = Literal["AVS", "LPP", "LAA", "P3"]


class NeedTargets(BaseModel):
    """Need targets in percent of the annual salary."""

    disability_pct: float = Field(default=90.0)
    death_pct: float = Field(default=80.0)
    retirement_pct: float = Field(default=80.0)

    def clamped(self) -> "NeedTargets":
        """Targets bounded to 50..90 for disability and 50..100 otherwise."""
        return NeedTargets(
            disability_pct=clamp(self.disability_pct, 50, 90),
            death_pct=clamp(self.death_pct, 50, 100),
            retirement_pct=clamp(self.retirement_pct, 50, 100),
        )


class GapSegment(BaseModel):
    label: str
    value: float = Field(..., ge=0)
    source: Source


class GapStack(BaseModel):
    """Monthly need split into covered segments and the remaining gap."""

    target: float = Field(..., ge=0)
    covered: float = Field(..., ge=0)
    gap: float = Field(..., ge=0)
    segments: List[GapSegment] = Field(default_factory=list)


class PrestationsSummary(BaseModel):
    """Every event result for one client at a reference date."""

    reference_date: date
    legal_year: int
    echelle44_version: Optional[str] = None
    disability_illness: DisabilityIllnessResult
    disability_accident: DisabilityAccidentResult
    death_illness: DeathIllnessResult
    death_accident: DeathAccidentResult
    retirement: RetirementResult
    legal_status: LegalRentesStatus
    targets: NeedTargets
    gaps: Dict[str, GapStack] = Field(default_factory=dict)


def build_gap_stack(target: float, segments: List[GapSegment]) -> GapStack:
    """Stack the segments against a target; zero-valued segments are dropped."""
    kept = [segment for segment in segments if segment.value > 0]
    covered = sum(segment.value for segment in kept)
    return GapStack(
        target=target,
        covered=min(target, covered),
        gap=max(0.0, target - covered),
        segments=kept,
    )


class PrestationsService:
    """Service for computing benefits and coverage gaps."""

    def __init__(
        self,
        legal: LegalSettings,
        scale: ScaleTable,
        tariff: TariffConfig = DEFAULT_TARIFF,
    ) -> None:
        """Initialize the prestations service.

        Args:
            legal: Legal settings for the computation year
            scale: Échelle 44 table
            tariff: Third-pillar pricing coefficients
        """
        self.legal = legal
        self.scale = scale
        self.tariff = tariff
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_settings(cls, settings: Settings) -> "PrestationsService":
        """Build the service from the configured legal year and seed directory."""
        legal = load_legal_settings(settings.legal_year, settings.legal_data_dir)
        scale = load_scale(settings.legal_year, settings.legal_data_dir)
        return cls(legal, scale)

    def compute(
        self,
        client: ClientData,
        reference_date: date,
        targets: Optional[NeedTargets] = None,
    ) -> PrestationsSummary:
        """Run every life event for a client at the reference date.

        Args:
            client: Client snapshot
            reference_date: Date of the hypothetical event
            targets: Need targets (defaults apply when missing)

        Returns:
            Results per event plus the coverage gap stacks
        """
        self.logger.info(
            f"Computing prestations at {reference_date.isoformat()} "
            f"with legal year {self.legal.year}"
        )

        disability_illness = compute_disability_illness(
            client, self.legal, self.scale, reference_date
        )
        disability_accident = compute_disability_accident(
            client, self.legal, self.scale, reference_date
        )
        death_illness = compute_death_illness(client, self.legal, self.scale, reference_date)
        death_accident = compute_death_accident(
            client, self.legal, self.scale, reference_date
        )
        retirement = compute_retirement(client, self.legal, self.scale, reference_date)
        legal_status = compute_legal_rentes_status_at(client, reference_date, self.legal)

        for regime, status in (
            ("LPP", legal_status.lpp_status),
            ("LAA", legal_status.laa_status),
        ):
            if status == SpouseRenteStatus.INDETERMINATE:
                self.logger.warning(
                    f"{regime} spouse rente undetermined: marriage duration unknown"
                )

        clamped = (targets or NeedTargets()).clamped()
        gaps = self._gaps(
            client,
            clamped,
            disability_illness,
            disability_accident,
            death_illness,
            death_accident,
            retirement,
        )

        self.logger.info(
            f"Prestations computed: disability illness "
            f"{disability_illness.monthly.total:.2f}/month, death accident "
            f"{death_accident.monthly.total:.2f}/month, retirement "
            f"{retirement.monthly.total:.2f}/month"
        )

        return PrestationsSummary(
            reference_date=reference_date,
            legal_year=self.legal.year,
            echelle44_version=self.legal.echelle44_version,
            disability_illness=disability_illness,
            disability_accident=disability_accident,
            death_illness=death_illness,
            death_accident=death_accident,
            retirement=retirement,
            legal_status=legal_status,
            targets=clamped,
            gaps=gaps,
        )

    def _gaps(
        self,
        client: ClientData,
        targets: NeedTargets,
        disability_illness: DisabilityIllnessResult,
        disability_accident: DisabilityAccidentResult,
        death_illness: DeathIllnessResult,
        death_accident: DeathAccidentResult,
        retirement: RetirementResult,
    ) -> Dict[str, GapStack]:
        monthly_salary = annual_to_monthly(client.annual_salary)

        def target(pct: float) -> float:
            return monthly_salary * pct / 100

        di = disability_illness.monthly
        da = disability_accident.monthly
        dth = death_illness.monthly
        dta = death_accident.monthly
        ret = retirement.monthly

        return {
            "disability_illness": build_gap_stack(
                target(targets.disability_pct),
                [
                    GapSegment(label="AI", value=di.ai_adult, source="AVS"),
                    GapSegment(label="AI children", value=di.ai_children, source="AVS"),
                    GapSegment(label="LPP", value=di.lpp_adult, source="LPP"),
                    GapSegment(label="LPP children", value=di.lpp_children, source="LPP"),
                ],
            ),
            "disability_accident": build_gap_stack(
                target(targets.disability_pct),
                [
                    GapSegment(label="AI", value=da.ai_total, source="AVS"),
                    GapSegment(label="LAA (coordinated)", value=da.laa, source="LAA"),
                    GapSegment(label="LPP (coordinated)", value=da.lpp, source="LPP"),
                ],
            ),
            "death_illness": build_gap_stack(
                target(targets.death_pct),
                [
                    GapSegment(label="AVS survivors", value=dth.avs, source="AVS"),
                    GapSegment(label="LPP survivors", value=dth.lpp, source="LPP"),
                ],
            ),
            "death_accident": build_gap_stack(
                target(targets.death_pct),
                [
                    GapSegment(label="AVS survivors", value=dta.avs, source="AVS"),
                    GapSegment(label="LAA (coordinated)", value=dta.laa, source="LAA"),
                    GapSegment(label="LPP (coordinated)", value=dta.lpp, source="LPP"),
                ],
            ),
            "retirement": build_gap_stack(
                target(targets.retirement_pct),
                [
                    GapSegment(label="AVS old age", value=ret.avs, source="AVS"),
                    GapSegment(label="LPP old age", value=ret.lpp, source="LPP"),
                ],
            ),
        }

    def timelines(self, client: ClientData, start: date) -> Dict[str, BenefitTimeline]:
        """Year-by-year timelines for every event from the start date."""
        self.logger.info(f"Building benefit timelines from {start.isoformat()}")
        return {
            "disability_illness": build_disability_timeline(
                client, self.legal, self.scale, start, accident=False
            ),
            "disability_accident": build_disability_timeline(
                client, self.legal, self.scale, start, accident=True
            ),
            "death_illness": build_death_timeline(
                client, self.legal, self.scale, start, accident=False
            ),
            "death_accident": build_death_timeline(
                client, self.legal, self.scale, start, accident=True
            ),
            "retirement": build_retirement_timeline(client, self.legal, self.scale, start),
        }

    def price_third_pillar(
        self,
        config: ThirdPillarConfig,
        client: ClientHealthSnapshot,
        as_of: date,
    ) -> RiskSavingsSplit:
        """Split a third-pillar premium into risk and savings parts."""
        ctx = build_risk_pricing_context(client, config.product_type, as_of)
        if ctx.occupation_risk_class is None:
            self.logger.info("Occupation class not set, pricing as pure savings")
        split = compute_risk_and_savings(config, ctx, self.tariff)
        self.logger.info(
            f"Priced {config.product_type} contract with tariff {self.tariff.version}: "
            f"risk {split.total_risk_premium:.2f}, savings {split.net_savings_premium:.2f}"
        )
        return split
