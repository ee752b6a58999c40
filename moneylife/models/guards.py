"""
Eligibility predicates for survivor rentes.

Every guard is a pure function of the client, an explicit reference date and
optionally the legal settings (only the survivor thresholds are read). The
due and non-due predicates of one regime are never both true; the case where
neither holds (marriage duration unknown, spouse old enough, no minor child)
is reported as SpouseRenteStatus.INDETERMINATE.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .client import ClientData, MaritalStatus, MarriageDuration, Sex
from .legal import LegalSettings, LppSurvivorRules, SurvivorRules
from .units import age_on_mask

_PARTNER_STATUSES = (MaritalStatus.MARRIED, MaritalStatus.REGISTERED_PARTNERSHIP)


class SpouseRenteStatus(str, Enum):
    """Outcome of the spouse rente rules at a reference date."""

    DUE = "due"
    NON_DUE = "non_due"
    INDETERMINATE = "indeterminate"
    NOT_APPLICABLE = "not_applicable"


class LegalRentesStatus(BaseModel):
    """Combined flags of every survivor rule at one date."""

    lpp_due: bool
    lpp_non_due: bool
    lpp_status: SpouseRenteStatus
    laa_due: bool
    laa_non_due: bool
    laa_status: SpouseRenteStatus
    avs_widow_due: bool
    avs_widower_due: bool
    avs_survivor_due: bool


def _rules(legal: Optional[LegalSettings]) -> SurvivorRules:
    return legal.survivors if legal is not None else SurvivorRules()


def has_partner(client: ClientData) -> bool:
    """Married or in a registered partnership."""
    return client.marital_status in _PARTNER_STATUSES


def count_children_under_18_at(
    client: ClientData,
    at: date,
    legal: Optional[LegalSettings] = None,
    minor_age: Optional[int] = None,
) -> int:
    """Children younger than the minor age at the reference date (AVS age by default)."""
    if minor_age is None:
        minor_age = _rules(legal).avs.child_minor_age
    return sum(
        1 for child in client.children if age_on_mask(child.birthdate, at) < minor_age
    )


def has_child_under_18_at(
    client: ClientData,
    at: date,
    legal: Optional[LegalSettings] = None,
    minor_age: Optional[int] = None,
) -> bool:
    """At least one child younger than the minor age at the reference date."""
    return count_children_under_18_at(client, at, legal, minor_age) > 0


def _long_marriage(client: ClientData) -> bool:
    return client.marriage_duration == MarriageDuration.AT_LEAST_FIVE_YEARS


def _short_marriage(client: ClientData) -> bool:
    return client.marriage_duration == MarriageDuration.LESS_THAN_FIVE_YEARS


def _spouse_age(client: ClientData, at: date) -> int:
    return age_on_mask(client.spouse_birthdate, at)


def _spouse_rente_due(
    client: ClientData, at: date, min_age: int, minor_age: int
) -> bool:
    if not has_partner(client):
        return False
    old_enough = _spouse_age(client, at) >= min_age
    return (old_enough and _long_marriage(client)) or has_child_under_18_at(
        client, at, minor_age=minor_age
    )


def _spouse_rente_non_due(
    client: ClientData, at: date, min_age: int, minor_age: int
) -> bool:
    if not has_partner(client):
        return False
    if has_child_under_18_at(client, at, minor_age=minor_age):
        return False
    return _spouse_age(client, at) < min_age or _short_marriage(client)


def _status(due: bool, non_due: bool, applicable: bool) -> SpouseRenteStatus:
    if not applicable:
        return SpouseRenteStatus.NOT_APPLICABLE
    if due:
        return SpouseRenteStatus.DUE
    if non_due:
        return SpouseRenteStatus.NON_DUE
    return SpouseRenteStatus.INDETERMINATE


def _lpp_applies(client: ClientData, rules: LppSurvivorRules) -> bool:
    return client.lpp_affiliated or not rules.require_affiliation


def avs_widow_rente_due_at(
    client: ClientData, at: date, legal: Optional[LegalSettings] = None
) -> bool:
    """AVS widow rente: (spouse age >= 45 and marriage >= 5 years) or a minor child."""
    rules = _rules(legal).avs
    return _spouse_rente_due(client, at, rules.widow_min_age, rules.child_minor_age)


def avs_widower_rente_due_at(
    client: ClientData, at: date, legal: Optional[LegalSettings] = None
) -> bool:
    """AVS widower rente: a minor child."""
    if not has_partner(client):
        return False
    return has_child_under_18_at(
        client, at, minor_age=_rules(legal).avs.child_minor_age
    )


def avs_survivor_rente_due_at(
    client: ClientData, at: date, legal: Optional[LegalSettings] = None
) -> bool:
    """
    AVS survivor rente for the surviving spouse.

    The widow rule applies to a female spouse and the widower rule to a male
    one; when the spouse's sex is unknown either rule grants the rente.
    """
    if client.spouse_sex == Sex.FEMALE:
        return avs_widow_rente_due_at(client, at, legal)
    if client.spouse_sex == Sex.MALE:
        return avs_widower_rente_due_at(client, at, legal)
    return avs_widow_rente_due_at(client, at, legal) or avs_widower_rente_due_at(
        client, at, legal
    )


def lpp_spouse_rente_due_at(
    client: ClientData, at: date, legal: Optional[LegalSettings] = None
) -> bool:
    rules = _rules(legal).lpp
    if not _lpp_applies(client, rules):
        return False
    return _spouse_rente_due(client, at, rules.spouse_min_age, rules.child_minor_age)


def lpp_spouse_rente_non_due_at(
    client: ClientData, at: date, legal: Optional[LegalSettings] = None
) -> bool:
    """LPP spouse rente not due, so the death capital applies instead."""
    rules = _rules(legal).lpp
    if not _lpp_applies(client, rules):
        return False
    return _spouse_rente_non_due(
        client, at, rules.spouse_min_age, rules.child_minor_age
    )


def laa_spouse_rente_due_at(
    client: ClientData, at: date, legal: Optional[LegalSettings] = None
) -> bool:
    rules = _rules(legal).laa
    return _spouse_rente_due(client, at, rules.spouse_min_age, rules.child_minor_age)


def laa_spouse_rente_non_due_at(
    client: ClientData, at: date, legal: Optional[LegalSettings] = None
) -> bool:
    """LAA spouse rente not due, so the one-off capital applies instead."""
    rules = _rules(legal).laa
    return _spouse_rente_non_due(
        client, at, rules.spouse_min_age, rules.child_minor_age
    )


def lpp_spouse_rente_status_at(
    client: ClientData, at: date, legal: Optional[LegalSettings] = None
) -> SpouseRenteStatus:
    return _status(
        lpp_spouse_rente_due_at(client, at, legal),
        lpp_spouse_rente_non_due_at(client, at, legal),
        _lpp_applies(client, _rules(legal).lpp) and has_partner(client),
    )


def laa_spouse_rente_status_at(
    client: ClientData, at: date, legal: Optional[LegalSettings] = None
) -> SpouseRenteStatus:
    return _status(
        laa_spouse_rente_due_at(client, at, legal),
        laa_spouse_rente_non_due_at(client, at, legal),
        has_partner(client),
    )


def compute_legal_rentes_status_at(
    client: ClientData, at: date, legal: Optional[LegalSettings] = None
) -> LegalRentesStatus:
    """Evaluate every survivor rule at the reference date."""
    return LegalRentesStatus(
        lpp_due=lpp_spouse_rente_due_at(client, at, legal),
        lpp_non_due=lpp_spouse_rente_non_due_at(client, at, legal),
        lpp_status=lpp_spouse_rente_status_at(client, at, legal),
        laa_due=laa_spouse_rente_due_at(client, at, legal),
        laa_non_due=laa_spouse_rente_non_due_at(client, at, legal),
        laa_status=laa_spouse_rente_status_at(client, at, legal),
        avs_widow_due=avs_widow_rente_due_at(client, at, legal),
        avs_widower_due=avs_widower_rente_due_at(client, at, legal),
        avs_survivor_due=avs_survivor_rente_due_at(client, at, legal),
    )
