"""
Tests for the life-event composers.

This module tests the 90% coordination cascade and the disability, death and
retirement composers, including their daily allowance phases, capitals and
the annual/monthly breakdowns.
"""

from datetime import date

import pytest

from moneylife.models.client import Child, ClientData
from moneylife.models.events import (
    compute_death_accident,
    compute_death_illness,
    compute_disability_accident,
    compute_disability_illness,
    compute_retirement,
    coordinate_benefits,
)
from moneylife.models.events.common import daily_allowance_phase, to_monthly
from moneylife.models.events.disability_accident import accident_daily_allowance_rate
from moneylife.models.units import annual_to_monthly

AT = date(2025, 6, 30)


class TestCoordination:
    """Test the 90% coordination cascade."""

    def test_laa_reduced_to_room_under_cap(self):
        """80'000 salary, AI 2'000/month: LAA drops from 5'333.33 to 4'000/month."""
        result = coordinate_benefits(80_000, base=24_000, laa=64_000, lpp=0)

        assert result.cap == pytest.approx(72_000)
        assert result.laa_before / 12 == pytest.approx(5_333.33, abs=0.01)
        assert result.laa_after / 12 == pytest.approx(4_000)
        assert result.monthly_total == pytest.approx(6_000)

    def test_lpp_tops_up_remaining_room(self):
        result = coordinate_benefits(100_000, base=30_000, laa=40_000, lpp=30_000)

        assert result.laa_after == pytest.approx(40_000)
        assert result.lpp_after == pytest.approx(20_000)
        assert result.total == pytest.approx(90_000)

    def test_base_kept_in_full(self):
        """AVS/AI above the cap is never reduced, LAA and LPP fall to zero."""
        result = coordinate_benefits(20_000, base=30_000, laa=10_000, lpp=5_000)

        assert result.base == 30_000
        assert result.laa_after == 0.0
        assert result.lpp_after == 0.0

    def test_cap_base_override(self):
        result = coordinate_benefits(80_000, base=0, laa=100_000, lpp=0, cap_base=50_000)
        assert result.cap == pytest.approx(45_000)
        assert result.laa_after == pytest.approx(45_000)


class TestCommon:
    """Test the shared result helpers."""

    def test_daily_allowance_phase(self):
        phase = daily_allowance_phase(73_000, 80, 730)

        assert phase.annual == pytest.approx(58_400)
        assert phase.daily == pytest.approx(160)
        assert phase.total_for_period == pytest.approx(116_800)
        assert phase.monthly == 4_866.67

    def test_monthly_round_trip(self, single_client, legal, scale):
        """Monthly amounts are the annual amounts over 12, to the cent."""
        result = compute_disability_illness(single_client, legal, scale, AT)

        for name, annual in result.annual.model_dump().items():
            assert getattr(result.monthly, name) == annual_to_monthly(annual)
        assert to_monthly(result.annual) == result.monthly

    @pytest.mark.parametrize(
        "compose",
        [
            compute_disability_illness,
            compute_disability_accident,
            compute_death_illness,
            compute_death_accident,
            compute_retirement,
        ],
    )
    def test_idempotent(self, family_client, legal, scale, compose):
        """Identical inputs give identical results."""
        first = compose(family_client, legal, scale, AT)
        second = compose(family_client, legal, scale, AT)
        assert first == second
        assert first.model_dump() == second.model_dump()


class TestDisabilityIllness:
    """Test the illness disability composer."""

    def test_rentes_added_without_coordination(self, single_client, legal, scale):
        client = single_client.model_copy(update={"children": [Child(birthdate="01.01.2015")]})
        result = compute_disability_illness(client, legal, scale, AT, bte_years=0)

        assert result.children_count == 1
        assert result.annual.ai_adult == pytest.approx(2_097 * 12)
        assert result.annual.ai_children == pytest.approx(839 * 12)
        assert result.annual.lpp_adult == 20_000
        assert result.annual.lpp_children == 4_000
        assert result.annual.total == pytest.approx(25_164 + 10_068 + 24_000)

    def test_daily_allowance_phase(self, single_client, legal, scale):
        result = compute_disability_illness(single_client, legal, scale, AT)

        assert result.daily_allowance.days == 730
        assert result.daily_allowance.rate_pct == 80
        assert result.daily_allowance.annual == pytest.approx(48_000)

    def test_no_illness_insurance(self, single_client, legal, scale):
        uninsured = single_client.model_copy(update={"illness_daily_allowance": False})
        result = compute_disability_illness(uninsured, legal, scale, AT)
        assert result.daily_allowance.annual == 0.0


class TestDisabilityAccident:
    """Test the accident disability composer."""

    def test_coordinated_total(self, single_client, legal, scale):
        """AI is kept, LAA takes the room left under 90%, LPP gets nothing."""
        client = single_client.model_copy(update={"children": [Child(birthdate="01.01.2015")]})
        result = compute_disability_accident(client, legal, scale, AT, bte_years=0)

        assert result.annual.ai_total == pytest.approx(35_232)
        assert result.annual.laa_nominal == pytest.approx(48_000)
        assert result.annual.laa == pytest.approx(54_000 - 35_232)
        assert result.annual.lpp_available == pytest.approx(24_000)
        assert result.annual.lpp == 0.0
        assert result.annual.total == pytest.approx(54_000)

    @pytest.mark.parametrize("salary", [20_000, 45_000, 80_000, 150_000, 300_000])
    def test_total_within_cap(self, single_client, legal, scale, salary):
        client = single_client.model_copy(update={"annual_salary": salary})
        result = compute_disability_accident(client, legal, scale, AT)

        ai = result.annual.ai_total
        assert result.annual.total <= max(result.coordination.cap, ai) + 1e-6

    def test_daily_allowance_rate_bounds(self, legal):
        assert accident_daily_allowance_rate(ClientData(), legal) == 80
        assert accident_daily_allowance_rate(ClientData(accident_daily_allowance_rate=50), legal) == 80
        assert accident_daily_allowance_rate(ClientData(accident_daily_allowance_rate=120), legal) == 100

    def test_daily_allowance_phase(self, single_client, legal, scale):
        result = compute_disability_accident(single_client, legal, scale, AT)

        assert result.daily_allowance.days == 728
        assert result.daily_allowance.annual == pytest.approx(48_000)


class TestDeathIllness:
    """Test the illness death composer."""

    def test_spouse_rente_due(self, married_client, legal, scale):
        result = compute_death_illness(married_client, legal, scale, AT)

        assert result.annual.avs_survivor == pytest.approx(1_887 * 12)
        assert result.annual.lpp_survivor == 15_000
        assert result.annual.total == pytest.approx(22_644 + 15_000)
        assert result.capitals.lpp_no_rente == 0.0
        assert result.meta.flags["lpp_status"] == "due"

    def test_capital_when_rente_not_due(self, married_client, legal, scale):
        """A young spouse without children gets three times the spouse rente."""
        young = married_client.model_copy(update={"spouse_birthdate": "01.01.1995"})
        result = compute_death_illness(young, legal, scale, AT)

        assert result.annual.lpp_survivor == 0.0
        assert result.capitals.lpp_no_rente == pytest.approx(45_000)
        assert result.capitals.total == pytest.approx(45_000)

    def test_indeterminate_counts_nothing(self, married_client, legal, scale):
        unknown = married_client.model_copy(update={"marriage_duration": None})
        result = compute_death_illness(unknown, legal, scale, AT)

        assert result.annual.lpp_survivor == 0.0
        assert result.capitals.lpp_no_rente == 0.0
        assert any("undetermined" in note for note in result.meta.notes)

    def test_orphans(self, family_client, legal, scale):
        result = compute_death_illness(family_client, legal, scale, AT)

        assert result.orphan_count == 2
        assert result.annual.lpp_orphans == 10_000


class TestDeathAccident:
    """Test the accident death composer."""

    def test_spouse_rente_due(self, married_client, legal, scale):
        """AVS kept, LAA spouse rente 40%, LPP tops up within 90%."""
        result = compute_death_accident(married_client, legal, scale, AT)

        assert result.annual.avs == pytest.approx(22_644)
        assert result.annual.laa_nominal == pytest.approx(32_000)
        assert result.annual.laa == pytest.approx(32_000)
        assert result.annual.lpp == pytest.approx(15_000)
        assert result.annual.total == pytest.approx(69_644)
        assert result.capitals.total == 0.0
        assert result.meta.flags["avs_widow_due"] is True
        assert result.meta.flags["laa_status"] == "due"

    def test_capitals_when_rente_not_due(self, married_client, legal, scale):
        young = married_client.model_copy(update={"spouse_birthdate": "01.01.1995"})
        result = compute_death_accident(young, legal, scale, AT)

        assert result.annual.laa == 0.0
        assert result.capitals.laa_unique == pytest.approx(96_000)
        assert result.capitals.lpp_no_rente == 50_000
        assert result.capitals.total == pytest.approx(146_000)

    def test_accident_and_generic_plus_rente_capitals_added(self, married_client, legal, scale):
        """Both plus-rente capitals are paid alongside the rente."""
        lpp = married_client.lpp.model_copy(
            update={"capital_plus_rente": 10_000, "capital_plus_rente_accident": 20_000}
        )
        client = married_client.model_copy(update={"lpp": lpp})
        result = compute_death_accident(client, legal, scale, AT)

        assert result.capitals.lpp_plus_rente == 20_000
        assert result.capitals.lpp_generic_plus_rente == 10_000
        assert result.capitals.total == pytest.approx(30_000)

    def test_total_within_cap(self, family_client, legal, scale):
        client = family_client.model_copy(
            update={"children": family_client.children + [Child(birthdate="01.01.2020")] * 3}
        )
        result = compute_death_accident(client, legal, scale, AT)

        assert result.annual.laa_nominal <= 0.7 * 80_000 + 1e-6
        assert result.annual.total <= max(result.coordination.cap, result.annual.avs) + 1e-6


class TestRetirement:
    """Test the retirement composer."""

    def test_avs_and_lpp_added(self, single_client, legal, scale):
        result = compute_retirement(single_client, legal, scale, AT)

        assert result.annual.avs == pytest.approx(25_164)
        assert result.annual.lpp == 24_000
        assert result.annual.total == pytest.approx(49_164)
        assert result.monthly.total == pytest.approx(49_164 / 12)
        assert result.current_age == 45
        assert result.years_to_retirement == 20
