"""
Derived metrics over a projected cash-flow series.

Net assets are never stored in the projection: they are recomputed from the
projected total assets and the current liability line items, so liability
edits show up without re-running the projection.
"""

from typing import Dict, List, Optional

import numpy as np
import pandas as pd
from numpy.typing import NDArray
from pydantic import BaseModel, Field

from .household import Parameters
from .line_items import BOOKS, Book, LineItemStore
from .projection import CashFlowData, accumulate_balances
from .units import InflationAdjuster


class NetAssetPoint(BaseModel):
    """Net assets of both books in one year."""

    year: int = Field(..., description="Calendar year")
    personal: float = Field(..., description="Personal net assets")
    corporate: float = Field(..., description="Corporate net assets")


def net_assets(
    cash_flow: CashFlowData, store: LineItemStore, book: Book, year: int
) -> float:
    """
    Total assets minus liabilities of a book in one year.

    Args:
        cash_flow: Projected series
        store: Current line items (liabilities are read from here)
        book: personal or corporate
        year: Calendar year

    Returns:
        Net assets; 0 total assets are assumed for years outside the series
    """
    record = cash_flow.get(year)
    total_assets = record.total_assets(book) if record is not None else 0.0
    return total_assets - store.total("liability", book, year)


def net_asset_series(
    cash_flow: CashFlowData, store: LineItemStore, book: Book
) -> NDArray[np.float64]:
    """Net assets of a book for every projected year, in year order."""
    totals = np.array(
        [record.total_assets(book) for record in cash_flow.records], dtype=np.float64
    )
    liabilities = np.array(
        [store.total("liability", book, year) for year in cash_flow.years()],
        dtype=np.float64,
    )
    return totals - liabilities


def net_asset_points(
    cash_flow: CashFlowData, store: LineItemStore
) -> List[NetAssetPoint]:
    """Net assets of both books per year, for JSON output."""
    personal = net_asset_series(cash_flow, store, "personal")
    corporate = net_asset_series(cash_flow, store, "corporate")
    return [
        NetAssetPoint(year=year, personal=float(p), corporate=float(c))
        for year, p, c in zip(cash_flow.years(), personal, corporate)
    ]


def real_value_series(
    cash_flow: CashFlowData, parameters: Parameters, book: Book
) -> NDArray[np.float64]:
    """
    Total assets deflated to start-year man-yen at the general inflation rate.

    Args:
        cash_flow: Projected series
        parameters: Macro parameters (``inflation_rate`` is used)
        book: personal or corporate

    Returns:
        Array of real total assets, one per projected year
    """
    if not cash_flow.records:
        return np.array([], dtype=np.float64)

    adjuster = InflationAdjuster(
        inflation_rate=parameters.inflation_rate, base_year=cash_flow.records[0].year
    )
    return np.array(
        [
            adjuster.to_real_value(record.total_assets(book), record.year)
            for record in cash_flow.records
        ],
        dtype=np.float64,
    )


def validate_running_totals(
    cash_flow: CashFlowData, seeds: Dict[str, float], tolerance: float = 1e-6
) -> bool:
    """
    Check that each book's totals equal its seed plus accumulated balances.

    Args:
        cash_flow: Projected series
        seeds: Opening net worth per book
        tolerance: Allowed absolute difference per year

    Returns:
        True if every year of every book matches
    """
    for book in BOOKS:
        expected = accumulate_balances(
            seeds.get(book, 0.0),
            (record.balance(book) for record in cash_flow.records),
        )
        actual = [record.total_assets(book) for record in cash_flow.records]
        if any(abs(e - a) > tolerance for e, a in zip(expected, actual)):
            return False
    return True


def summary_frame(
    cash_flow: CashFlowData,
    store: LineItemStore,
    parameters: Optional[Parameters] = None,
) -> pd.DataFrame:
    """
    One row per projected year with balances, totals and net assets.

    Args:
        cash_flow: Projected series
        store: Current line items
        parameters: When given, adds real (start-year) personal total assets

    Returns:
        DataFrame indexed by year
    """
    frame = pd.DataFrame(
        {
            "age": [record.age for record in cash_flow.records],
            "personal_balance": [r.personal_balance for r in cash_flow.records],
            "personal_total_assets": [
                r.personal_total_assets for r in cash_flow.records
            ],
            "personal_net_assets": net_asset_series(cash_flow, store, "personal"),
            "corporate_balance": [r.corporate_balance for r in cash_flow.records],
            "corporate_total_assets": [
                r.corporate_total_assets for r in cash_flow.records
            ],
            "corporate_net_assets": net_asset_series(cash_flow, store, "corporate"),
        },
        index=pd.Index(cash_flow.years(), name="year"),
    )
    if parameters is not None:
        frame["personal_real_total_assets"] = real_value_series(
            cash_flow, parameters, "personal"
        )
    return frame
