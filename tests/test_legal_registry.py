"""
Tests for the legal settings, the Échelle 44 scale and the regulatory registry.
"""

import json

import pytest
from pydantic import ValidationError

from moneylife.models.legal import Echelle44Row, LegalSettings, ScaleTable
from moneylife.models.registry import (
    DEFAULT_LEGAL_2025,
    default_scale,
    load_legal_settings,
    load_scale,
    pick_year,
)


class TestLegalSettings:
    """Test the LegalSettings model."""

    def test_defaults_2025(self):
        """Built-in 2025 values."""
        legal = DEFAULT_LEGAL_2025

        assert legal.year == 2025
        assert legal.laa_max_insured_earnings == 148_200
        assert legal.lpp_coordination_deduction == 26_460
        assert legal.lpp_min_insured_salary == 3_780
        assert legal.lpp_max_insured_salary == 64_260
        assert legal.avs_retirement_age == 65
        assert legal.survivors.avs.widow_min_age == 45
        assert legal.survivors.lpp.spouse_min_age == 45
        assert legal.survivors.lpp.require_affiliation is True
        assert legal.survivors.laa.child_minor_age == 18

    def test_seed_aliases(self):
        """Seed documents use the Legal_* keys."""
        legal = LegalSettings.model_validate(
            {
                "Legal_Year": 2026,
                "Legal_SalaireAssureMaxLAA": 150_000,
                "Legal_Survivors": {
                    "avs": {"widowMinAge": 45, "marriageMinYears": 5, "childMinorAge": 18},
                    "laa": {"spouseMinAge": 50, "marriageMinYears": 5, "childMinorAge": 18},
                    "lpp": {
                        "spouseMinAge": 50,
                        "marriageMinYears": 5,
                        "childMinorAge": 20,
                        "requireAffiliation": False,
                    },
                },
            }
        )
        assert legal.year == 2026
        assert legal.laa_max_insured_earnings == 150_000
        assert legal.survivors.avs.widow_min_age == 45
        assert legal.survivors.laa.spouse_min_age == 50
        assert legal.survivors.lpp.spouse_min_age == 50
        assert legal.survivors.lpp.child_minor_age == 20
        assert legal.survivors.lpp.require_affiliation is False

    def test_partial_survivor_rules(self):
        """Regimes missing from the seed keep their defaults."""
        legal = LegalSettings.model_validate(
            {"Legal_Survivors": {"laa": {"spouseMinAge": 50}}}
        )
        assert legal.survivors.laa.spouse_min_age == 50
        assert legal.survivors.laa.marriage_min_years == 5
        assert legal.survivors.lpp.spouse_min_age == 45

    def test_credit_rate_band_keys(self):
        """String band keys such as "25-34" are keyed by their lower bound."""
        legal = LegalSettings.model_validate(
            {"Legal_CotisationsMinLPP": {"25-34": 0.07, "35-44": 0.10, "45-54": 0.15, "55-65": 0.18}}
        )
        assert legal.lpp_retirement_credit_rates == {25: 0.07, 35: 0.10, 45: 0.15, 55: 0.18}
        assert legal.retirement_credit_table().lookup(40) == 0.10

    def test_insured_salary_bounds_validation(self):
        """The maximum insured salary cannot be below the minimum."""
        with pytest.raises(ValidationError):
            LegalSettings(lpp_max_insured_salary=100, lpp_min_insured_salary=200)

    def test_settings_are_frozen(self):
        with pytest.raises(ValidationError):
            DEFAULT_LEGAL_2025.year = 2030


class TestScaleTable:
    """Test floor selection on the Échelle 44."""

    def test_builtin_scale(self, scale):
        """The built-in table spans 15'120 to 90'720."""
        assert len(scale) == 51
        assert scale.rows[0].income == 15_120
        assert scale.rows[-1].income == 90_720
        assert scale.minimum_monthly_rente() == 1_260

    def test_floor_selection(self, scale):
        """A RAMD between brackets selects the lower one."""
        row = scale.select(60_000)
        assert row.income == 58_968
        assert row.old_age_invalidity == 2_097
        assert row.child_rente == 839

    def test_above_and_below_range(self, scale):
        """Above the top bracket selects the top row, below the first selects none."""
        assert scale.select(500_000).old_age_invalidity == 2_520
        assert scale.select(10_000) is None

    def test_child_rente_fallback(self):
        """Without a 40% column the child rente is 40% of the base, rounded half-up."""
        row = Echelle44Row(income=0, old_age_invalidity=1_261.25, widow_widower_survivor=1_000)
        assert row.child_rente == 505

    def test_empty_scale_rejected(self):
        with pytest.raises(ValueError):
            ScaleTable([])


class TestRegistry:
    """Test year selection and JSON seed loading."""

    def test_pick_year(self):
        """Requested year, else the closest earlier one, else the most recent."""
        assert pick_year([2024, 2025], 2025) == 2025
        assert pick_year([2023, 2025], 2024) == 2023
        assert pick_year([2024, 2025], 2030) == 2025
        assert pick_year([2024, 2025], 2020) == 2025

    def test_pick_year_without_tables(self):
        with pytest.raises(ValueError):
            pick_year([], 2025)

    def test_builtin_fallback(self):
        """Without a seed directory the built-in tables are used."""
        assert load_legal_settings(2025) is DEFAULT_LEGAL_2025
        assert load_legal_settings(2030).year == 2025
        assert len(load_scale(2025)) == len(default_scale())

    def test_load_legal_seed(self, tmp_path):
        """A seed file overrides the built-in settings and stamps its year."""
        seed = {"Legal_SalaireAssureMaxLAA": 150_000}
        (tmp_path / "regs_legal_2026.json").write_text(json.dumps(seed), encoding="utf-8")

        legal = load_legal_settings(2026, tmp_path)

        assert legal.year == 2026
        assert legal.laa_max_insured_earnings == 150_000

    def test_load_survivor_rules_seed(self, tmp_path):
        """Nested survivor thresholds in a seed file are applied per regime."""
        seed = {
            "Legal_Survivors": {
                "avs": {"widowMinAge": 45, "marriageMinYears": 5, "childMinorAge": 18},
                "laa": {"spouseMinAge": 50, "marriageMinYears": 5, "childMinorAge": 18},
                "lpp": {
                    "spouseMinAge": 50,
                    "marriageMinYears": 5,
                    "childMinorAge": 18,
                    "requireAffiliation": True,
                },
            }
        }
        (tmp_path / "regs_legal_2026.json").write_text(json.dumps(seed), encoding="utf-8")

        legal = load_legal_settings(2026, tmp_path)

        assert legal.survivors.laa.spouse_min_age == 50
        assert legal.survivors.lpp.spouse_min_age == 50
        assert legal.survivors.avs.widow_min_age == 45

    def test_load_scale_seed(self, tmp_path):
        """Scale seeds may wrap their rows in an object."""
        seed = {
            "rows": [
                {"Legal_Income": 10_000, "Legal_OldAgeInvalidity": 1_000, "Legal_WidowWidowerSurvivor": 800},
                {"Legal_Income": 20_000, "Legal_OldAgeInvalidity": 2_000, "Legal_WidowWidowerSurvivor": 1_600},
            ]
        }
        (tmp_path / "regs_avs_ai_2026.json").write_text(json.dumps(seed), encoding="utf-8")

        table = load_scale(2026, tmp_path)

        assert len(table) == 2
        assert table.select(15_000).child_rente == 400

    def test_invalid_scale_seed(self, tmp_path):
        (tmp_path / "regs_avs_ai_2026.json").write_text(json.dumps({"data": []}), encoding="utf-8")
        with pytest.raises(ValueError):
            load_scale(2026, tmp_path)
