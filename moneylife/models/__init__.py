"""Benefit calculators and data models for Swiss social insurance projections."""

from .client import (
    Child,
    ClientData,
    GeneralInsuredSalary,
    LegalFallbackInsuredSalary,
    LppCertificate,
    MaritalStatus,
    MarriageDuration,
    Sex,
    SplitInsuredSalary,
)
from .legal import (
    AvsSurvivorRules,
    Echelle44Row,
    LaaSurvivorRules,
    LegalSettings,
    LppSurvivorRules,
    ScaleTable,
    SurvivorRules,
)
from .registry import (
    DEFAULT_LEGAL_2025,
    default_scale,
    load_legal_settings,
    load_scale,
)
from .guards import (
    LegalRentesStatus,
    SpouseRenteStatus,
    compute_legal_rentes_status_at,
    count_children_under_18_at,
)
from .avs_ai import (
    compute_ai_projection,
    compute_retirement_projection,
    compute_survivor_projection,
)
from .lpp import compute_lpp_projection
from .laa import compute_laa_projection
from .timeline import (
    BenefitTimeline,
    build_death_timeline,
    build_disability_timeline,
    build_retirement_timeline,
)
from .third_pillar import (
    ClientHealthSnapshot,
    RiskPremiumResult,
    TariffConfig,
    ThirdPillarConfig,
    build_risk_pricing_context,
    compute_risk_and_savings,
    compute_risk_premiums,
)

__all__ = [
    "Child",
    "ClientData",
    "GeneralInsuredSalary",
    "LegalFallbackInsuredSalary",
    "LppCertificate",
    "MaritalStatus",
    "MarriageDuration",
    "Sex",
    "SplitInsuredSalary",
    "AvsSurvivorRules",
    "Echelle44Row",
    "LaaSurvivorRules",
    "LegalSettings",
    "LppSurvivorRules",
    "ScaleTable",
    "SurvivorRules",
    "DEFAULT_LEGAL_2025",
    "default_scale",
    "load_legal_settings",
    "load_scale",
    "LegalRentesStatus",
    "SpouseRenteStatus",
    "compute_legal_rentes_status_at",
    "count_children_under_18_at",
    "compute_ai_projection",
    "compute_retirement_projection",
    "compute_survivor_projection",
    "compute_lpp_projection",
    "compute_laa_projection",
    "BenefitTimeline",
    "build_death_timeline",
    "build_disability_timeline",
    "build_retirement_timeline",
    "ClientHealthSnapshot",
    "RiskPremiumResult",
    "TariffConfig",
    "ThirdPillarConfig",
    "build_risk_pricing_context",
    "compute_risk_and_savings",
    "compute_risk_premiums",
]
