"""
Derived line-item amounts computed from the household profile.

Living, housing and education expenses, the spouse income line and the
home purchase asset/loan pair are not typed in by hand: they are generated
from the household and written into the items bound to their roles.
"""

import logging

from .cost_schedule import education_expense, housing_expense
from .household import Household, Parameters
from .line_items import ItemRole, LineItemStore

logger = logging.getLogger(__name__)

SPOUSE_INCOME_NAME = "配偶者収入"

# Personal items whose amounts are entirely generated from the profile
GENERATED_ROLES = (
    ("expense", ItemRole.LIVING_EXPENSE),
    ("expense", ItemRole.HOUSING_EXPENSE),
    ("expense", ItemRole.EDUCATION_EXPENSE),
    ("asset", ItemRole.REAL_ESTATE),
    ("liability", ItemRole.HOUSING_LOAN),
)


def ensure_spouse_income_item(
    household: Household, store: LineItemStore
) -> LineItemStore:
    """
    Keep the spouse income line in step with the household.

    The line is added for an earning spouse and removed otherwise, so a
    household that goes back to single no longer projects spouse income.
    """
    if not household.has_spouse_income:
        return store.remove_role_items("income", "personal", ItemRole.SPOUSE_INCOME)
    if store.find_by_role("income", "personal", ItemRole.SPOUSE_INCOME) is not None:
        return store
    logger.debug("Adding spouse income item")
    return store.add_item(
        "income",
        "personal",
        name=SPOUSE_INCOME_NAME,
        type="income",
        role=ItemRole.SPOUSE_INCOME,
    )


def populate_derived_items(
    household: Household, parameters: Parameters, store: LineItemStore
) -> LineItemStore:
    """
    Write generated amounts for every horizon year into a copy of ``store``.

    Args:
        household: Household profile
        parameters: Macro parameters (education cost growth is used)
        store: Current line items

    Returns:
        New store in which the items of ``GENERATED_ROLES`` hold only the
        amounts generated for this household: living, housing and education
        expenses for the horizon years and, in own mode, the purchase-year
        real-estate asset and housing loan
    """
    years = household.years()
    store = ensure_spouse_income_item(household, store)

    living = {year: household.monthly_living_expense * 12 for year in years}
    housing = {
        year: housing_expense(household.housing_info, year, household.start_year)
        for year in years
    }
    education = {
        year: education_expense(
            household.children,
            household.planned_children,
            year,
            household.start_year,
            parameters.education_cost_increase_rate,
        )
        for year in years
    }

    # Amounts from an earlier profile must not survive a change of horizon,
    # housing type or purchase year
    for kind, role in GENERATED_ROLES:
        store = store.clear_role_amounts(kind, "personal", role)

    store = store.set_role_amounts(
        "expense", "personal", ItemRole.LIVING_EXPENSE, living
    )
    store = store.set_role_amounts(
        "expense", "personal", ItemRole.HOUSING_EXPENSE, housing
    )
    store = store.set_role_amounts(
        "expense", "personal", ItemRole.EDUCATION_EXPENSE, education
    )

    own = household.housing_info.own
    if household.housing_info.type == "own" and own is not None:
        store = store.set_role_amounts(
            "asset",
            "personal",
            ItemRole.REAL_ESTATE,
            {own.purchase_year: own.purchase_price},
        )
        store = store.set_role_amounts(
            "liability",
            "personal",
            ItemRole.HOUSING_LOAN,
            {own.purchase_year: own.loan_amount},
        )

    return store
