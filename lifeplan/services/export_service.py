"""
CSV export of a projected plan.

The export lists one row per projected year: year, age, the personal and
corporate event descriptions, every income and expense line item, and the
four summary columns. All cells are quoted and amounts are rounded to one
decimal.
"""

import csv
from datetime import date
from typing import List, Optional

import pandas as pd

from lifeplan.models.life_events import describe_year
from lifeplan.models.line_items import LineItem
from lifeplan.models.units import ManYenFormatter

from .simulator_service import SimulatorState

UTF8_BOM = "\ufeff"
UNIT_SUFFIX = "（万円）"

SUMMARY_HEADERS = [
    f"個人収支{UNIT_SUFFIX}",
    f"個人総資産{UNIT_SUFFIX}",
    f"法人収支{UNIT_SUFFIX}",
    f"法人総資産{UNIT_SUFFIX}",
]


def _exported_items(state: SimulatorState) -> List[LineItem]:
    store = state.store
    return [
        *store.items("income", "personal"),
        *store.items("income", "corporate"),
        *store.items("expense", "personal"),
        *store.items("expense", "corporate"),
    ]


def build_rows(state: SimulatorState) -> List[List[str]]:
    """Header row followed by one row per projected year."""
    formatter = ManYenFormatter()
    items = _exported_items(state)
    household = state.household

    rows = [
        [
            "年度",
            "年齢",
            "イベント（個人）",
            "イベント（法人）",
            *(f"{item.name}{UNIT_SUFFIX}" for item in items),
            *SUMMARY_HEADERS,
        ]
    ]
    for year in household.years():
        record = state.cash_flow.get(year)
        summary = (
            [
                record.personal_balance,
                record.personal_total_assets,
                record.corporate_balance,
                record.corporate_total_assets,
            ]
            if record is not None
            else [0.0, 0.0, 0.0, 0.0]
        )
        rows.append(
            [
                str(year),
                str(household.age_in(year)),
                describe_year(year, household, state.life_events, "personal"),
                describe_year(year, household, state.life_events, "corporate"),
                *(formatter.format_amount(item.amount(year)) for item in items),
                *(formatter.format_amount(value) for value in summary),
            ]
        )
    return rows


def export_cash_flow_csv(state: SimulatorState, include_bom: bool = True) -> str:
    """
    Render the projection as CSV text.

    Args:
        state: Projected simulator state
        include_bom: Prefix a UTF-8 byte order mark so spreadsheet tools
            detect the encoding

    Returns:
        CSV document with rows separated by ``\\n``
    """
    header, *rows = build_rows(state)
    frame = pd.DataFrame(rows, columns=header)
    content = frame.to_csv(
        index=False, quoting=csv.QUOTE_ALL, lineterminator="\n"
    ).rstrip("\n")
    return f"{UTF8_BOM}{content}" if include_bom else content


def export_filename(on: Optional[date] = None) -> str:
    """Download file name for an export made on the given date."""
    on = on or date.today()
    return f"キャッシュフロー_{on.isoformat()}.csv"
