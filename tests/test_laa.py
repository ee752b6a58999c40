"""
Tests for the LAA calculator.
"""

import pytest

from moneylife.models.client import ClientData
from moneylife.models.laa import (
    compute_capital,
    compute_laa_projection,
    compute_survivor_rentes,
    daily_allowance,
    disability_rente,
    insured_earnings,
)


class TestLaaAmounts:
    """Test the fixed-percentage LAA amounts."""

    def test_insured_earnings_capped(self, legal):
        assert insured_earnings(ClientData(annual_salary=200_000), legal) == 148_200
        assert insured_earnings(ClientData(annual_salary=80_000), legal) == 80_000

    def test_disability_rente(self, legal):
        """80% of insured earnings: 5'333.33 per month on an 80'000 salary."""
        rente = disability_rente(ClientData(annual_salary=80_000), legal)

        assert rente == pytest.approx(64_000)
        assert rente / 12 == pytest.approx(5_333.33, abs=0.01)

    def test_daily_allowance(self, legal):
        assert daily_allowance(ClientData(annual_salary=73_000), legal) == pytest.approx(160)

    def test_capital(self, legal):
        """Spouse rente reference times the multiplier."""
        assert compute_capital(ClientData(annual_salary=80_000), legal) == pytest.approx(96_000)


class TestSurvivorRentes:
    """Test the survivor rentes and the family cap."""

    def test_under_cap(self, legal):
        survivors = compute_survivor_rentes(ClientData(annual_salary=100_000), legal, 1)

        assert survivors.spouse == pytest.approx(40_000)
        assert survivors.per_child == pytest.approx(15_000)
        assert survivors.total == pytest.approx(55_000)
        assert survivors.scale_factor == 1.0

    def test_family_cap_scales_every_component(self, legal):
        """Spouse and four children exceed 70% and are scaled by the same ratio."""
        survivors = compute_survivor_rentes(ClientData(annual_salary=100_000), legal, 4)

        assert survivors.total_before_cap == pytest.approx(100_000)
        assert survivors.scale_factor == pytest.approx(0.7)
        assert survivors.spouse == pytest.approx(28_000)
        assert survivors.per_child == pytest.approx(10_500)
        assert survivors.total == pytest.approx(70_000)

    @pytest.mark.parametrize("n_children", range(0, 8))
    @pytest.mark.parametrize("spouse_due", [True, False])
    def test_total_never_exceeds_family_cap(self, legal, n_children, spouse_due):
        survivors = compute_survivor_rentes(
            ClientData(annual_salary=120_000), legal, n_children, spouse_due
        )
        assert survivors.total <= survivors.family_cap + 1e-6

    def test_orphans_without_spouse(self, legal):
        survivors = compute_survivor_rentes(
            ClientData(annual_salary=100_000), legal, 2, spouse_due=False
        )
        assert survivors.spouse == 0.0
        assert survivors.children == pytest.approx(30_000)

    def test_projection(self, legal):
        projection = compute_laa_projection(ClientData(annual_salary=80_000), legal, 0)

        assert projection.insured_earnings == 80_000
        assert projection.disability_rente == pytest.approx(64_000)
        assert projection.survivors.total == pytest.approx(32_000)
