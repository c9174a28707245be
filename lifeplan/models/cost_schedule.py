"""
Housing and education cost schedules.

This module computes, for a single projection year, the housing expense of a
rented or owned home and the education expense of all current and planned
children. Both schedules are pure functions of their inputs and return
man-yen amounts rounded to one decimal.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .household import (
    Child,
    EducationPlan,
    HousingInfo,
    OwnTerms,
    PlannedChild,
    RentTerms,
    SchoolChoice,
    UniversityChoice,
)
from .units import compound_multiplier, round_man_yen

logger = logging.getLogger(__name__)


# Age bands are inclusive on both ends and do not overlap
EDUCATION_BANDS: Tuple[Tuple[str, int, int], ...] = (
    ("nursery", 0, 2),
    ("preschool", 3, 5),
    ("elementary", 6, 11),
    ("junior_high", 12, 14),
    ("high_school", 15, 17),
    ("university", 18, 21),
)

# Flat annual costs in man-yen
SCHOOL_COSTS: Dict[str, Dict[str, float]] = {
    "nursery": {SchoolChoice.PUBLIC.value: 23.3, SchoolChoice.PRIVATE.value: 50.0},
    "preschool": {SchoolChoice.PUBLIC.value: 58.3, SchoolChoice.PRIVATE.value: 100.0},
    "elementary": {SchoolChoice.PUBLIC.value: 41.7, SchoolChoice.PRIVATE.value: 83.3},
    "junior_high": {
        SchoolChoice.PUBLIC.value: 66.7,
        SchoolChoice.PRIVATE.value: 133.3,
    },
    "high_school": {SchoolChoice.PUBLIC.value: 83.3, SchoolChoice.PRIVATE.value: 250.0},
}

UNIVERSITY_COSTS: Dict[str, float] = {
    UniversityChoice.PUBLIC_HUMANITIES.value: 325.0,
    UniversityChoice.PUBLIC_SCIENCE.value: 375.0,
    UniversityChoice.PRIVATE_HUMANITIES.value: 550.0,
    UniversityChoice.PRIVATE_SCIENCE.value: 650.0,
}


class HousingCostCalculator:
    """Calculator for yearly housing costs."""

    @staticmethod
    def calculate_annual_loan_payment(
        loan_amount: float, interest_rate: float, term_years: int
    ) -> float:
        """
        Calculate the level annual payment of a fixed-rate loan.

        Args:
            loan_amount: Loan principal
            interest_rate: Annual interest rate in percent (1.5 = 1.5%)
            term_years: Loan term in years

        Returns:
            Annual payment amount
        """
        if loan_amount <= 0 or term_years <= 0:
            return 0.0
        if interest_rate <= 0:
            return loan_amount / term_years

        rate = interest_rate / 100
        return loan_amount * rate / (1 - (1 + rate) ** -term_years)

    @staticmethod
    def calculate_rent_cost(terms: RentTerms, year: int, reference_year: int) -> float:
        """
        Calculate the rent paid in a year, renewal fee included.

        Args:
            terms: Rent terms
            year: Projection year
            reference_year: Year the lease is measured from when the terms
                carry no explicit lease start

        Returns:
            Annual rent cost (unrounded)
        """
        lease_start = (
            terms.lease_start_year
            if terms.lease_start_year is not None
            else reference_year
        )
        elapsed = year - lease_start
        if elapsed < 0:
            return 0.0

        cost = terms.monthly_rent * 12 * compound_multiplier(
            terms.annual_increase_rate, elapsed
        )
        # The renewal fee is a flat add and does not compound with rent
        if (
            terms.renewal_interval > 0
            and elapsed > 0
            and elapsed % terms.renewal_interval == 0
        ):
            cost += terms.renewal_fee
        return cost

    @staticmethod
    def calculate_ownership_cost(terms: OwnTerms, year: int) -> float:
        """
        Calculate loan payment plus maintenance for an owned home.

        Args:
            terms: Ownership terms
            year: Projection year

        Returns:
            Annual ownership cost (unrounded), zero before purchase
        """
        if year < terms.purchase_year:
            return 0.0

        cost = terms.purchase_price * terms.maintenance_cost_rate / 100
        if year < terms.purchase_year + terms.loan_term_years:
            cost += HousingCostCalculator.calculate_annual_loan_payment(
                terms.loan_amount, terms.interest_rate, terms.loan_term_years
            )
        return cost


def annual_loan_payment(
    loan_amount: float, interest_rate: float, term_years: int
) -> float:
    """Level annual payment of a fixed-rate loan (rate in percent)."""
    return HousingCostCalculator.calculate_annual_loan_payment(
        loan_amount, interest_rate, term_years
    )


def housing_expense(
    housing_info: HousingInfo, year: int, reference_year: Optional[int] = None
) -> float:
    """
    Housing expense for one year.

    Args:
        housing_info: Rent or own payload
        year: Projection year
        reference_year: Lease reference year for rent mode (usually the
            projection start year); required unless the rent terms carry a
            ``lease_start_year``

    Returns:
        Housing expense in man-yen, rounded to one decimal

    Raises:
        ValueError: If rent mode has neither a lease start nor a reference
            year to measure rent increases and renewals from
    """
    if housing_info.type == "rent" and housing_info.rent is not None:
        if reference_year is None:
            if housing_info.rent.lease_start_year is None:
                raise ValueError(
                    "reference_year is required for rent terms without a "
                    "lease start year"
                )
            reference_year = housing_info.rent.lease_start_year
        cost = HousingCostCalculator.calculate_rent_cost(
            housing_info.rent, year, reference_year
        )
    elif housing_info.type == "own" and housing_info.own is not None:
        cost = HousingCostCalculator.calculate_ownership_cost(housing_info.own, year)
    else:
        cost = 0.0
    return round_man_yen(cost)


def education_cost_for_age(plan: EducationPlan, age: int) -> float:
    """
    Flat (uninflated) education cost for one child at a given age.

    Args:
        plan: The child's education plan
        age: Age in the target year

    Returns:
        Cost of the single band covering ``age``, or 0 outside all bands,
        for a "none" choice, or for an unrecognised choice
    """
    for level, low, high in EDUCATION_BANDS:
        if not low <= age <= high:
            continue
        choice = getattr(plan, level)
        if level == "university":
            cost = UNIVERSITY_COSTS.get(choice)
        else:
            cost = SCHOOL_COSTS[level].get(choice)
        if cost is None:
            if choice != SchoolChoice.NONE.value:
                logger.debug(f"Unrecognised {level} choice {choice!r}, costing 0")
            return 0.0
        return cost
    return 0.0


def _child_ages(
    children: Sequence[Child],
    planned_children: Sequence[PlannedChild],
    year: int,
    start_year: int,
) -> List[Tuple[EducationPlan, int]]:
    elapsed = year - start_year
    ages = [(child.education_plan, child.current_age + elapsed) for child in children]
    for planned in planned_children:
        if elapsed >= planned.years_from_now:
            ages.append((planned.education_plan, elapsed - planned.years_from_now))
    return ages


def education_expense(
    children: Sequence[Child],
    planned_children: Sequence[PlannedChild],
    year: int,
    start_year: int,
    increase_rate: float,
) -> float:
    """
    Education expense for all children in one year.

    Per-child flat costs are summed and the education cost growth multiplier
    is applied once to the total.

    Args:
        children: Children already born
        planned_children: Children not born yet
        year: Projection year
        start_year: First projected year
        increase_rate: Education cost growth in percent

    Returns:
        Education expense in man-yen, rounded to one decimal
    """
    total = sum(
        education_cost_for_age(plan, age)
        for plan, age in _child_ages(children, planned_children, year, start_year)
    )
    total *= compound_multiplier(increase_rate, year - start_year)
    return round_man_yen(total)
