"""Shared fixtures for travelnurse_core tests."""

from datetime import date
from decimal import Decimal

import pytest
import structlog

from travelnurse_core import JobOffer, TravelNurseConfig, USState


@pytest.fixture
def config() -> TravelNurseConfig:
    """Test configuration pinned to tax year 2025."""
    return TravelNurseConfig(env="test", tax_year=2025)


@pytest.fixture
def icu_offer() -> JobOffer:
    """$35/hr x 36 hours with $2100 housing and $553 meals per week."""
    return JobOffer(
        name="ICU Sacramento",
        hourly_rate=Decimal("35"),
        hours_per_week=Decimal("36"),
        housing_stipend=Decimal("2100"),
        meals_stipend=Decimal("553"),
        state=USState.CALIFORNIA,
    )


@pytest.fixture
def as_of() -> date:
    return date(2025, 3, 1)


@pytest.fixture(autouse=True)
def reset_structlog():
    """Leave structlog unconfigured between tests."""
    yield
    structlog.reset_defaults()
