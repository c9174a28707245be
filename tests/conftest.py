"""
Pytest configuration and shared fixtures for the life plan simulator tests.
"""

import os

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from lifeplan import create_app  # noqa: E402
from lifeplan.config import reset_global_settings  # noqa: E402
from lifeplan.models.household import (  # noqa: E402
    Child,
    EducationPlan,
    Household,
    HousingInfo,
    OwnTerms,
    Parameters,
    RentTerms,
)
from lifeplan.models.line_items import LineItemStore  # noqa: E402


@pytest.fixture
def app():
    """Flask application configured for testing."""
    reset_global_settings()
    application = create_app("testing")
    yield application
    reset_global_settings()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def short_household():
    """Three-year horizon starting in 2024 with zero housing cost."""
    return Household(current_age=30, start_year=2024, death_age=32)


@pytest.fixture
def zero_parameters():
    """Parameters with every rate at zero."""
    return Parameters(
        inflation_rate=0, education_cost_increase_rate=0, investment_return=0
    )


@pytest.fixture
def empty_store():
    """Store with the default items and no amounts."""
    return LineItemStore()


@pytest.fixture
def family_household():
    """Married household renting, with one child and a private university plan."""
    return Household(
        current_age=40,
        start_year=2024,
        death_age=60,
        marital_status="married",
        monthly_living_expense=25,
        housing_info=HousingInfo(
            type="rent",
            rent=RentTerms(
                monthly_rent=12,
                annual_increase_rate=1.0,
                renewal_fee=12,
                renewal_interval=2,
            ),
        ),
        children=[
            Child(
                current_age=10,
                education_plan=EducationPlan(university="私立大学（理系）"),
            )
        ],
    )


@pytest.fixture
def owner_household():
    """Single owner who buys a home in 2026."""
    return Household(
        current_age=35,
        start_year=2024,
        death_age=70,
        housing_info=HousingInfo(
            type="own",
            own=OwnTerms(
                purchase_year=2026,
                purchase_price=5000,
                loan_amount=4000,
                interest_rate=1.0,
                loan_term_years=35,
                maintenance_cost_rate=1.0,
            ),
        ),
    )
