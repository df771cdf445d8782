from datetime import date

import pytest

from compliance_core.models import CompliancePolicy, ResidencePeriod


@pytest.fixture
def as_of():
    return date(2024, 1, 1)


@pytest.fixture
def policy():
    return CompliancePolicy()


@pytest.fixture
def scenario_a_periods():
    return [
        ResidencePeriod(start=date(2019, 1, 1), end=date(2021, 6, 1)),
        ResidencePeriod(start=date(2021, 7, 1), end="present"),
    ]
