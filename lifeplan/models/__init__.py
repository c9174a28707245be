"""Data models and calculation engines for life plan projections."""

from .household import (
    Child,
    EducationPlan,
    Household,
    HousingInfo,
    OwnTerms,
    Parameters,
    PlannedChild,
    RentTerms,
    SchoolChoice,
    SpouseInfo,
    UniversityChoice,
)
from .line_items import ItemRole, LineItem, LineItemSection, LineItemStore
from .history import HistoryEntry, HistoryLog
from .cost_schedule import (
    HousingCostCalculator,
    annual_loan_payment,
    education_cost_for_age,
    education_expense,
    housing_expense,
)
from .projection import (
    CashFlowData,
    CashFlowYear,
    ProjectionEngine,
    accumulate_balances,
    run_projection,
)
from .derived_items import populate_derived_items
from .derived_metrics import net_asset_series, net_assets, summary_frame
from .life_events import LifeEvent, describe_year

__all__ = [
    "Child",
    "EducationPlan",
    "Household",
    "HousingInfo",
    "OwnTerms",
    "Parameters",
    "PlannedChild",
    "RentTerms",
    "SchoolChoice",
    "SpouseInfo",
    "UniversityChoice",
    "ItemRole",
    "LineItem",
    "LineItemSection",
    "LineItemStore",
    "HistoryEntry",
    "HistoryLog",
    "HousingCostCalculator",
    "annual_loan_payment",
    "education_cost_for_age",
    "education_expense",
    "housing_expense",
    "CashFlowData",
    "CashFlowYear",
    "ProjectionEngine",
    "accumulate_balances",
    "run_projection",
    "populate_derived_items",
    "net_asset_series",
    "net_assets",
    "summary_frame",
    "LifeEvent",
    "describe_year",
]
