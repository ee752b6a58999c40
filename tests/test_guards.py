"""
Tests for the survivor rente eligibility guards.
"""

import itertools
from datetime import date

import pytest

from moneylife.models.client import Child, ClientData
from moneylife.models.guards import (
    SpouseRenteStatus,
    avs_survivor_rente_due_at,
    avs_widow_rente_due_at,
    avs_widower_rente_due_at,
    compute_legal_rentes_status_at,
    count_children_under_18_at,
    has_child_under_18_at,
    has_partner,
    laa_spouse_rente_due_at,
    laa_spouse_rente_non_due_at,
    laa_spouse_rente_status_at,
    lpp_spouse_rente_due_at,
    lpp_spouse_rente_non_due_at,
    lpp_spouse_rente_status_at,
)
from moneylife.models.legal import LegalSettings

AT = date(2025, 6, 30)


class TestChildren:
    """Test minor children counting."""

    def test_child_turning_18(self):
        """A child is a minor up to the day before the 18th birthday."""
        client = ClientData(children=[Child(birthdate="15.06.2007")])

        assert count_children_under_18_at(client, date(2025, 6, 14)) == 1
        assert count_children_under_18_at(client, date(2025, 6, 15)) == 0

    def test_unknown_birthdate_counts_as_minor(self):
        client = ClientData(children=[Child(birthdate=None), Child(birthdate="01.01.1990")])
        assert count_children_under_18_at(client, AT) == 1
        assert has_child_under_18_at(client, AT)


class TestSpouseRentes:
    """Test the spouse rente rules."""

    @pytest.mark.parametrize(
        "marital_status,partner",
        [
            ("married", True),
            ("registered_partnership", True),
            ("single", False),
            ("divorced", False),
            ("cohabiting", False),
        ],
    )
    def test_has_partner(self, marital_status, partner):
        assert has_partner(ClientData(marital_status=marital_status)) is partner

    def test_widow_aged_50_long_marriage(self, married_client, legal):
        """A 50-year-old widow after a long marriage receives every rente."""
        assert avs_widow_rente_due_at(married_client, AT, legal)
        assert avs_survivor_rente_due_at(married_client, AT, legal)
        assert lpp_spouse_rente_due_at(married_client, AT, legal)
        assert laa_spouse_rente_due_at(married_client, AT, legal)
        assert lpp_spouse_rente_status_at(married_client, AT, legal) == SpouseRenteStatus.DUE

    def test_widower_needs_minor_child(self, married_client, legal):
        """The widower rule only grants the AVS rente with a minor child."""
        husband = married_client.model_copy(update={"spouse_sex": "male"})
        assert not avs_widower_rente_due_at(husband, AT, legal)
        assert not avs_survivor_rente_due_at(husband, AT, legal)

        with_child = husband.model_copy(update={"children": [Child(birthdate="01.01.2015")]})
        assert avs_survivor_rente_due_at(with_child, AT, legal)

    def test_young_spouse_without_children(self, married_client, legal):
        """A spouse under 45 without children gets the capital instead."""
        young = married_client.model_copy(update={"spouse_birthdate": "01.01.1995"})

        assert not lpp_spouse_rente_due_at(young, AT, legal)
        assert lpp_spouse_rente_non_due_at(young, AT, legal)
        assert laa_spouse_rente_non_due_at(young, AT, legal)
        assert laa_spouse_rente_status_at(young, AT, legal) == SpouseRenteStatus.NON_DUE

    def test_unknown_marriage_duration_is_indeterminate(self, married_client, legal):
        """Neither due nor non-due when the marriage duration is missing."""
        unknown = married_client.model_copy(update={"marriage_duration": None})

        assert not lpp_spouse_rente_due_at(unknown, AT, legal)
        assert not lpp_spouse_rente_non_due_at(unknown, AT, legal)
        assert lpp_spouse_rente_status_at(unknown, AT, legal) == SpouseRenteStatus.INDETERMINATE

    def test_lpp_requires_affiliation(self, married_client, legal):
        unaffiliated = married_client.model_copy(update={"lpp_affiliated": False})

        assert not lpp_spouse_rente_due_at(unaffiliated, AT, legal)
        assert not lpp_spouse_rente_non_due_at(unaffiliated, AT, legal)
        assert lpp_spouse_rente_status_at(unaffiliated, AT, legal) == SpouseRenteStatus.NOT_APPLICABLE
        assert laa_spouse_rente_due_at(unaffiliated, AT, legal)

    def test_thresholds_read_per_regime(self, married_client):
        """A higher LAA/LPP spouse age leaves the AVS widow rule unchanged."""
        legal = LegalSettings.model_validate(
            {
                "Legal_Survivors": {
                    "laa": {"spouseMinAge": 52},
                    "lpp": {"spouseMinAge": 52},
                }
            }
        )

        assert avs_widow_rente_due_at(married_client, AT, legal)
        assert not laa_spouse_rente_due_at(married_client, AT, legal)
        assert laa_spouse_rente_non_due_at(married_client, AT, legal)
        assert lpp_spouse_rente_status_at(married_client, AT, legal) == SpouseRenteStatus.NON_DUE

    def test_minor_age_read_per_regime(self, married_client):
        """A 19-year-old child is a minor only where the regime says so."""
        legal = LegalSettings.model_validate(
            {"Legal_Survivors": {"lpp": {"childMinorAge": 20}}}
        )
        young = married_client.model_copy(
            update={
                "spouse_birthdate": "01.01.1995",
                "children": [Child(birthdate="01.01.2006")],
            }
        )

        assert lpp_spouse_rente_due_at(young, AT, legal)
        assert not laa_spouse_rente_due_at(young, AT, legal)
        assert count_children_under_18_at(young, AT, legal) == 0

    def test_affiliation_not_required(self, married_client):
        legal = LegalSettings.model_validate(
            {"Legal_Survivors": {"lpp": {"requireAffiliation": False}}}
        )
        unaffiliated = married_client.model_copy(update={"lpp_affiliated": False})

        assert lpp_spouse_rente_due_at(unaffiliated, AT, legal)
        assert lpp_spouse_rente_status_at(unaffiliated, AT, legal) == SpouseRenteStatus.DUE

    def test_single_client(self, single_client, legal):
        """No partner, no spouse rente of any kind."""
        status = compute_legal_rentes_status_at(single_client, AT, legal)

        assert not status.avs_survivor_due
        assert status.lpp_status == SpouseRenteStatus.NOT_APPLICABLE
        assert status.laa_status == SpouseRenteStatus.NOT_APPLICABLE

    @pytest.mark.parametrize(
        "marital_status,duration,spouse_birthdate,children",
        list(
            itertools.product(
                ["single", "married", "registered_partnership", "divorced"],
                ["at_least_five_years", "less_than_five_years", None],
                ["01.01.1995", "01.01.1975", None],
                [[], [Child(birthdate="01.01.2015")], [Child(birthdate="01.01.2000")]],
            )
        ),
    )
    def test_due_and_non_due_are_exclusive(
        self, legal, marital_status, duration, spouse_birthdate, children
    ):
        """A spouse rente is never both due and not due."""
        client = ClientData(
            marital_status=marital_status,
            marriage_duration=duration,
            spouse_birthdate=spouse_birthdate,
            children=children,
        )

        assert not (
            lpp_spouse_rente_due_at(client, AT, legal)
            and lpp_spouse_rente_non_due_at(client, AT, legal)
        )
        assert not (
            laa_spouse_rente_due_at(client, AT, legal)
            and laa_spouse_rente_non_due_at(client, AT, legal)
        )
