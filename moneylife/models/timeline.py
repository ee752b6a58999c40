"""
Year-by-year benefit timelines.

A timeline lays out, per calendar year, the annual AVS/AI, LPP and LAA rentes,
the daily allowance, one-off capitals, the total, the need (last salary) and
the gap between need and total. Disability and death columns run from the
start year to the year the client reaches the AVS retirement age; retirement
columns cover 23 years from that year.
"""

from datetime import date
from typing import Dict, List

import numpy as np
import pandas as pd
from pydantic import BaseModel, Field

from .client import ClientData
from .events.death_accident import compute_death_accident
from .events.death_illness import compute_death_illness
from .events.disability_accident import compute_disability_accident
from .events.disability_illness import compute_disability_illness
from .events.retirement import compute_retirement
from .legal import LegalSettings, ScaleTable
from .units import year_from_mask

TIMELINE_ROWS = (
    "avs_ai",
    "lpp",
    "laa",
    "daily_allowance",
    "capital",
    "total",
    "need",
    "gap",
)

DAILY_ALLOWANCE_YEARS = 2
RETIREMENT_TIMELINE_YEARS = 23


class BenefitTimeline(BaseModel):
    """Rows of annual amounts indexed by calendar year."""

    event: str
    years: List[int] = Field(default_factory=list)
    rows: Dict[str, List[float]] = Field(default_factory=dict)

    def to_dataframe(self) -> pd.DataFrame:
        """Rows as index, years as columns."""
        return pd.DataFrame.from_dict(
            {name: self.rows[name] for name in TIMELINE_ROWS},
            orient="index",
            columns=self.years,
        )


def _working_years(client: ClientData, legal: LegalSettings, start: date) -> List[int]:
    """Start year to the retirement year, or the start year alone without a birthdate."""
    birth_year = year_from_mask(client.birthdate)
    if birth_year is None:
        return [start.year]
    end_year = max(start.year, birth_year + legal.avs_retirement_age)
    return list(range(start.year, end_year + 1))


def _january_first(year: int) -> date:
    return date(year, 1, 1)


def _assemble(
    event: str,
    years: List[int],
    salary: float,
    avs_ai: np.ndarray,
    lpp: np.ndarray,
    laa: np.ndarray,
    daily_allowance: np.ndarray,
    capital: np.ndarray,
) -> BenefitTimeline:
    total = avs_ai + lpp + laa + daily_allowance
    need = np.full(len(years), salary, dtype=np.float64)
    columns = {
        "avs_ai": avs_ai,
        "lpp": lpp,
        "laa": laa,
        "daily_allowance": daily_allowance,
        "capital": capital,
        "total": total,
        "need": need,
        "gap": need - total,
    }
    return BenefitTimeline(
        event=event,
        years=years,
        rows={name: values.tolist() for name, values in columns.items()},
    )


def build_disability_timeline(
    client: ClientData,
    legal: LegalSettings,
    scale: ScaleTable,
    start: date,
    accident: bool,
) -> BenefitTimeline:
    """
    Disability timeline: the first two years pay the daily allowance only,
    then the rentes apply with children counted on 1 January of each year.
    """
    years = _working_years(client, legal, start)
    size = len(years)
    avs_ai, lpp, laa, allowance = (np.zeros(size) for _ in range(4))

    for index, year in enumerate(years):
        paid_at = _january_first(year)
        if accident:
            result = compute_disability_accident(
                client, legal, scale, start, payment_date=paid_at
            )
            rente_phase = (result.annual.ai_total, result.annual.lpp, result.annual.laa)
        else:
            result = compute_disability_illness(
                client, legal, scale, start, payment_date=paid_at
            )
            rente_phase = (
                result.annual.ai_total,
                result.annual.lpp_adult + result.annual.lpp_children,
                0.0,
            )

        if index < DAILY_ALLOWANCE_YEARS:
            allowance[index] = result.daily_allowance.annual
        else:
            avs_ai[index], lpp[index], laa[index] = rente_phase

    event = "disability_accident" if accident else "disability_illness"
    return _assemble(
        event, years, client.annual_salary, avs_ai, lpp, laa, allowance, np.zeros(size)
    )


def build_death_timeline(
    client: ClientData,
    legal: LegalSettings,
    scale: ScaleTable,
    start: date,
    accident: bool,
) -> BenefitTimeline:
    """
    Death timeline: death fixed at the start date, orphans re-evaluated on
    1 January of each year, capitals shown in the first year only.
    """
    years = _working_years(client, legal, start)
    size = len(years)
    avs_ai, lpp, laa, capital = (np.zeros(size) for _ in range(4))

    for index, year in enumerate(years):
        paid_at = _january_first(year)
        if accident:
            result = compute_death_accident(client, legal, scale, start, payment_date=paid_at)
            avs_ai[index] = result.annual.avs
            lpp[index] = result.annual.lpp
            laa[index] = result.annual.laa
        else:
            result = compute_death_illness(client, legal, scale, start, payment_date=paid_at)
            avs_ai[index] = result.annual.avs
            lpp[index] = result.annual.lpp
        if index == 0:
            capital[index] = result.capitals.total

    event = "death_accident" if accident else "death_illness"
    return _assemble(
        event, years, client.annual_salary, avs_ai, lpp, laa, np.zeros(size), capital
    )


def build_retirement_timeline(
    client: ClientData,
    legal: LegalSettings,
    scale: ScaleTable,
    start: date,
) -> BenefitTimeline:
    """Retirement timeline over 23 years from the retirement year."""
    birth_year = year_from_mask(client.birthdate)
    if birth_year is None:
        first_year = start.year
    else:
        first_year = birth_year + legal.avs_retirement_age
    years = list(range(first_year, first_year + RETIREMENT_TIMELINE_YEARS))
    size = len(years)

    result = compute_retirement(client, legal, scale, start)
    avs_ai = np.full(size, result.annual.avs)
    lpp = np.full(size, result.annual.lpp)

    return _assemble(
        "retirement",
        years,
        client.annual_salary,
        avs_ai,
        lpp,
        np.zeros(size),
        np.zeros(size),
        np.zeros(size),
    )
