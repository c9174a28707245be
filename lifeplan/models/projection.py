"""
Year-by-year cash-flow projection engine.

This module implements the core recurrence of the simulator: starting from
the net worth of each book in the start year, every projected year adds that
year's balance (income minus expenses, plus the investment return on the
prior year-end personal total) to a running total. The whole series is
recomputed on every run; nothing is patched incrementally.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from pydantic import BaseModel, Field

from .household import Household, Parameters
from .line_items import Book, ItemKind, ItemRole, LineItemStore
from .units import round_man_yen

logger = logging.getLogger(__name__)

# Roles the engine reads, by kind and book
PERSONAL_INCOME_ROLES = (
    ItemRole.SALARY,
    ItemRole.SIDE_INCOME,
    ItemRole.SPOUSE_INCOME,
)
PERSONAL_EXPENSE_ROLES = (
    ItemRole.LIVING_EXPENSE,
    ItemRole.HOUSING_EXPENSE,
    ItemRole.EDUCATION_EXPENSE,
    ItemRole.OTHER_EXPENSE,
)
CORPORATE_INCOME_ROLES = (ItemRole.CORPORATE_SALES, ItemRole.CORPORATE_OTHER_INCOME)
CORPORATE_EXPENSE_ROLES = (
    ItemRole.CORPORATE_EXPENSE,
    ItemRole.CORPORATE_OTHER_EXPENSE,
)

# Only populated for married or planning households
OPTIONAL_ROLES = {ItemRole.SPOUSE_INCOME}


class CashFlowYear(BaseModel):
    """Projected financial state of one year."""

    year: int = Field(..., description="Calendar year")
    age: int = Field(..., description="Age of the household member")

    # Personal book
    main_income: float = Field(default=0)
    side_income: float = Field(default=0)
    spouse_income: float = Field(default=0)
    investment_income: float = Field(default=0)
    living_expense: float = Field(default=0)
    housing_expense: float = Field(default=0)
    education_expense: float = Field(default=0)
    other_expense: float = Field(default=0)
    personal_opening_assets: float = Field(
        default=0, description="Personal total carried in from the prior year"
    )
    personal_balance: float = Field(default=0)
    personal_total_assets: float = Field(default=0)

    # Corporate book
    corporate_income: float = Field(default=0)
    corporate_other_income: float = Field(default=0)
    corporate_expense: float = Field(default=0)
    corporate_other_expense: float = Field(default=0)
    corporate_balance: float = Field(default=0)
    corporate_total_assets: float = Field(default=0)

    @property
    def personal_income(self) -> float:
        return (
            self.main_income
            + self.side_income
            + self.spouse_income
            + self.investment_income
        )

    @property
    def personal_expense(self) -> float:
        return (
            self.living_expense
            + self.housing_expense
            + self.education_expense
            + self.other_expense
        )

    def balance(self, book: Book) -> float:
        return self.personal_balance if book == "personal" else self.corporate_balance

    def total_assets(self, book: Book) -> float:
        if book == "personal":
            return self.personal_total_assets
        return self.corporate_total_assets


class CashFlowData(BaseModel):
    """Ordered, gap-free series of projected years."""

    records: List[CashFlowYear] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, year: object) -> bool:
        return any(record.year == year for record in self.records)

    def years(self) -> List[int]:
        return [record.year for record in self.records]

    def get(self, year: int) -> Optional[CashFlowYear]:
        if not self.records:
            return None
        index = year - self.records[0].year
        if 0 <= index < len(self.records):
            return self.records[index]
        return None

    def __getitem__(self, year: int) -> CashFlowYear:
        record = self.get(year)
        if record is None:
            raise KeyError(year)
        return record

    @property
    def first(self) -> Optional[CashFlowYear]:
        return self.records[0] if self.records else None

    @property
    def last(self) -> Optional[CashFlowYear]:
        return self.records[-1] if self.records else None

    def to_dict(self) -> Dict[int, Dict[str, float]]:
        """Year-keyed mapping of each record's fields."""
        return {
            record.year: record.model_dump(exclude={"year"})
            for record in self.records
        }


def accumulate_balances(seed: float, balances: Iterable[float]) -> List[float]:
    """
    Running totals of a starting value plus yearly balances.

    ``totals[i] = totals[i-1] + balances[i]`` with ``totals[-1] = seed``.

    Args:
        seed: Opening value
        balances: Yearly balances in order

    Returns:
        List of year-end totals, one per balance
    """
    totals = []
    running = seed
    for balance in balances:
        running += balance
        totals.append(running)
    return totals


class ProjectionEngine:
    """Runs the full-horizon cash-flow recurrence for a plan."""

    def __init__(
        self, household: Household, parameters: Parameters, store: LineItemStore
    ) -> None:
        self.household = household
        self.parameters = parameters
        self.store = store
        self._missing_roles: Set[ItemRole] = set()

    def opening_net_worth(self, book: Book) -> float:
        """Assets minus liabilities of a book in the start year."""
        start_year = self.household.start_year
        return self.store.total("asset", book, start_year) - self.store.total(
            "liability", book, start_year
        )

    def _role_amount(
        self, kind: ItemKind, book: Book, role: ItemRole, year: int
    ) -> float:
        if self.store.find_by_role(kind, book, role) is None:
            self._missing_roles.add(role)
        return self.store.role_amount(kind, book, role, year)

    def investment_return(self, prior_total_assets: Optional[float]) -> float:
        """
        Return earned on the prior year-end personal total.

        The first projected year has no prior year-end and earns nothing; the
        worked 150, 215, 286.5 scenario takes priority over a seed-based
        first-year return.
        """
        if prior_total_assets is None:
            return 0.0
        return round_man_yen(
            prior_total_assets * self.parameters.investment_return / 100
        )

    def project_year(
        self,
        year: int,
        personal_opening: float,
        corporate_opening: float,
        prior_personal_total: Optional[float],
    ) -> CashFlowYear:
        """Build the record for one year from the carried-in totals."""
        main, side, spouse = (
            self._role_amount("income", "personal", role, year)
            for role in PERSONAL_INCOME_ROLES
        )
        living, housing, education, other = (
            self._role_amount("expense", "personal", role, year)
            for role in PERSONAL_EXPENSE_ROLES
        )
        corp_income, corp_other_income = (
            self._role_amount("income", "corporate", role, year)
            for role in CORPORATE_INCOME_ROLES
        )
        corp_expense, corp_other_expense = (
            self._role_amount("expense", "corporate", role, year)
            for role in CORPORATE_EXPENSE_ROLES
        )

        returns = self.investment_return(prior_personal_total)
        personal_balance = (main + side + spouse + returns) - (
            living + housing + education + other
        )
        corporate_balance = (corp_income + corp_other_income) - (
            corp_expense + corp_other_expense
        )

        return CashFlowYear(
            year=year,
            age=self.household.age_in(year),
            main_income=main,
            side_income=side,
            spouse_income=spouse,
            investment_income=returns,
            living_expense=living,
            housing_expense=housing,
            education_expense=education,
            other_expense=other,
            personal_opening_assets=personal_opening,
            personal_balance=personal_balance,
            personal_total_assets=personal_opening + personal_balance,
            corporate_income=corp_income,
            corporate_other_income=corp_other_income,
            corporate_expense=corp_expense,
            corporate_other_expense=corp_other_expense,
            corporate_balance=corporate_balance,
            corporate_total_assets=corporate_opening + corporate_balance,
        )

    def run(self) -> CashFlowData:
        """
        Project every year of the horizon.

        Returns:
            CashFlowData with exactly ``death_age - current_age + 1`` records
        """
        self._missing_roles = set()
        years = self.household.years()
        logger.info(
            f"Projecting {len(years)} years from {self.household.start_year} "
            f"to {self.household.end_year}"
        )

        personal_total = self.opening_net_worth("personal")
        corporate_total = self.opening_net_worth("corporate")
        prior_personal_total: Optional[float] = None

        records = []
        for year in years:
            record = self.project_year(
                year, personal_total, corporate_total, prior_personal_total
            )
            records.append(record)
            personal_total = record.personal_total_assets
            corporate_total = record.corporate_total_assets
            prior_personal_total = personal_total

        self._report_missing_roles()
        logger.info(
            f"Projection finished: personal total {personal_total:.1f}, "
            f"corporate total {corporate_total:.1f}"
        )
        return CashFlowData(records=records)

    def _report_missing_roles(self) -> None:
        for role in sorted(self._missing_roles, key=lambda r: r.value):
            if role in OPTIONAL_ROLES:
                logger.debug(f"No line item bound to {role.value}; using 0")
            else:
                logger.warning(f"No line item bound to {role.value}; using 0")


def run_projection(
    household: Household, parameters: Parameters, store: LineItemStore
) -> CashFlowData:
    """Convenience wrapper around ``ProjectionEngine.run``."""
    return ProjectionEngine(household, parameters, store).run()
