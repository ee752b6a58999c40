"""
Tests for the year-by-year benefit timelines.
"""

from datetime import date

import pandas as pd
import pytest

from moneylife.models.timeline import (
    TIMELINE_ROWS,
    build_death_timeline,
    build_disability_timeline,
    build_retirement_timeline,
)

START = date(2025, 6, 30)


class TestDisabilityTimeline:
    """Test the disability timeline."""

    def test_columns_run_to_retirement_year(self, single_client, legal, scale):
        timeline = build_disability_timeline(single_client, legal, scale, START, accident=False)

        assert timeline.event == "disability_illness"
        assert timeline.years[0] == 2025
        assert timeline.years[-1] == 2045
        assert len(timeline.years) == 21

    def test_daily_allowance_then_rentes(self, single_client, legal, scale):
        """The first two years pay the daily allowance only."""
        timeline = build_disability_timeline(single_client, legal, scale, START, accident=False)
        rows = timeline.rows

        assert rows["daily_allowance"][:2] == [48_000, 48_000]
        assert rows["avs_ai"][:2] == [0.0, 0.0]
        assert rows["daily_allowance"][2] == 0.0
        assert rows["avs_ai"][2] == pytest.approx(2_097 * 12)
        assert rows["lpp"][2] == pytest.approx(20_000)

    def test_gap_is_need_minus_total(self, single_client, legal, scale):
        timeline = build_disability_timeline(single_client, legal, scale, START, accident=True)

        for need, total, gap in zip(timeline.rows["need"], timeline.rows["total"], timeline.rows["gap"]):
            assert need == 60_000
            assert gap == pytest.approx(need - total)

    def test_dataframe_export(self, single_client, legal, scale):
        frame = build_disability_timeline(
            single_client, legal, scale, START, accident=True
        ).to_dataframe()

        assert isinstance(frame, pd.DataFrame)
        assert list(frame.index) == list(TIMELINE_ROWS)
        assert frame.shape == (len(TIMELINE_ROWS), 21)
        assert frame.loc["need", 2030] == 60_000

    @pytest.mark.parametrize("accident", [True, False])
    def test_unknown_birthdate_single_column(self, single_client, legal, scale, accident):
        """Without a birthdate the retirement year is unknown: one column only."""
        unknown = single_client.model_copy(update={"birthdate": None})
        timeline = build_disability_timeline(unknown, legal, scale, START, accident=accident)

        assert timeline.years == [2025]
        assert all(len(values) == 1 for values in timeline.rows.values())


class TestDeathTimeline:
    """Test the death timeline."""

    def test_capital_first_year_only(self, married_client, legal, scale):
        young = married_client.model_copy(update={"spouse_birthdate": "01.01.1995"})
        timeline = build_death_timeline(young, legal, scale, START, accident=True)

        assert timeline.rows["capital"][0] == pytest.approx(146_000)
        assert all(value == 0.0 for value in timeline.rows["capital"][1:])
        assert timeline.rows["total"][0] == pytest.approx(
            timeline.rows["avs_ai"][0] + timeline.rows["lpp"][0] + timeline.rows["laa"][0]
        )

    def test_orphans_reevaluated_each_year(self, family_client, legal, scale):
        """Orphan rentes stop once each child reaches 18."""
        timeline = build_death_timeline(family_client, legal, scale, START, accident=False)
        lpp = dict(zip(timeline.years, timeline.rows["lpp"]))

        assert lpp[2026] == pytest.approx(15_000 + 2 * 5_000)
        assert lpp[2031] == pytest.approx(15_000 + 5_000)
        assert lpp[2035] == pytest.approx(15_000)

    def test_unknown_birthdate_single_column(self, married_client, legal, scale):
        unknown = married_client.model_copy(update={"birthdate": None})
        timeline = build_death_timeline(unknown, legal, scale, START, accident=True)

        assert timeline.years == [2025]
        assert len(timeline.rows["capital"]) == 1


class TestRetirementTimeline:
    """Test the retirement timeline."""

    def test_23_years_from_retirement_year(self, single_client, legal, scale):
        timeline = build_retirement_timeline(single_client, legal, scale, START)

        assert timeline.years[0] == 2045
        assert len(timeline.years) == 23
        assert all(total == pytest.approx(49_164) for total in timeline.rows["total"])
        assert timeline.rows["capital"] == [0.0] * 23

    def test_unknown_birthdate_starts_at_start_year(self, single_client, legal, scale):
        unknown = single_client.model_copy(update={"birthdate": None})
        timeline = build_retirement_timeline(unknown, legal, scale, START)

        assert timeline.years[0] == 2025
        assert len(timeline.years) == 23
