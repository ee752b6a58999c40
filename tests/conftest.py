"""
Pytest configuration and shared fixtures for the benefit engine tests.
"""

import os
from datetime import date
from unittest.mock import patch

import pytest

from moneylife.config import reset_global_settings
from moneylife.models.client import Child, ClientData, LppCertificate
from moneylife.models.registry import DEFAULT_LEGAL_2025, default_scale

REFERENCE_DATE = date(2025, 6, 30)


@pytest.fixture
def legal():
    """2025 legal settings."""
    return DEFAULT_LEGAL_2025


@pytest.fixture
def scale():
    """2025 Échelle 44 table."""
    return default_scale()


@pytest.fixture
def single_client():
    """Single client aged 45 at the reference date, no children."""
    return ClientData(
        birthdate="01.01.1980",
        sex="male",
        marital_status="single",
        annual_salary=60_000,
        illness_daily_allowance=True,
        illness_daily_allowance_rate=80,
        lpp=LppCertificate(
            disability_rente=20_000,
            disability_child_rente=4_000,
            retirement_rente_65=24_000,
        ),
    )


@pytest.fixture
def married_client():
    """Married client whose wife is 50 at the reference date, long marriage."""
    return ClientData(
        birthdate="01.01.1980",
        sex="male",
        marital_status="married",
        spouse_sex="female",
        spouse_birthdate="01.01.1975",
        marriage_duration="at_least_five_years",
        annual_salary=80_000,
        lpp=LppCertificate(
            disability_rente=24_000,
            spouse_rente=15_000,
            orphan_rente=5_000,
            retirement_rente_65=30_000,
            capital_no_rente_accident=50_000,
        ),
    )


@pytest.fixture
def family_client(married_client):
    """Married client with two minor children."""
    return married_client.model_copy(
        update={
            "children": [Child(birthdate="15.03.2012"), Child(birthdate="01.09.2016")]
        }
    )


@pytest.fixture
def app_env():
    """Environment with a valid SECRET_KEY and fresh global settings."""
    reset_global_settings()
    with patch.dict(os.environ, {"SECRET_KEY": "test-secret-key-123"}, clear=True):
        yield
    reset_global_settings()
