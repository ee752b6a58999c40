"""
Life-event composers.

Each composer combines the AVS/AI, LPP and LAA calculators for one event and
returns a pydantic result with annual and monthly breakdowns, capitals and a
meta block.
"""

from .common import DailyAllowancePhase, EventMeta
from .coordination import CoordinationResult, coordinate_benefits
from .death_accident import DeathAccidentResult, compute_death_accident
from .death_illness import DeathIllnessResult, compute_death_illness
from .disability_accident import DisabilityAccidentResult, compute_disability_accident
from .disability_illness import DisabilityIllnessResult, compute_disability_illness
from .retirement import RetirementResult, compute_retirement

__all__ = [
    "CoordinationResult",
    "DailyAllowancePhase",
    "DeathAccidentResult",
    "DeathIllnessResult",
    "DisabilityAccidentResult",
    "DisabilityIllnessResult",
    "EventMeta",
    "RetirementResult",
    "compute_death_accident",
    "compute_death_illness",
    "compute_disability_accident",
    "compute_disability_illness",
    "compute_retirement",
    "coordinate_benefits",
]
