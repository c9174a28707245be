"""Tests for net assets, real values and the summary frame."""

import numpy as np
import pytest

from lifeplan.models.derived_metrics import (
    net_asset_points,
    net_asset_series,
    net_assets,
    real_value_series,
    summary_frame,
)
from lifeplan.models.household import Parameters
from lifeplan.models.line_items import LineItemStore
from lifeplan.models.projection import CashFlowData, run_projection


@pytest.fixture
def store_with_debt():
    """Personal cash 1000, a 200 loan in 2024 and 150 in 2025."""
    return (
        LineItemStore()
        .set_amount("asset", "personal", "1", 2024, 1000)
        .set_amount("liability", "personal", "1", 2024, 200)
        .set_amount("liability", "personal", "1", 2025, 150)
        .set_amount("asset", "corporate", "1", 2024, 500)
    )


class TestNetAssets:
    """Test net assets recomputed from totals and liabilities."""

    def test_net_assets_per_year(
        self, short_household, zero_parameters, store_with_debt
    ):
        """Test total assets minus that year's liabilities."""
        cash_flow = run_projection(short_household, zero_parameters, store_with_debt)

        # Opening net worth already nets the 2024 loan: 1000 - 200 = 800
        assert cash_flow[2024].personal_total_assets == 800
        assert net_assets(cash_flow, store_with_debt, "personal", 2024) == 600
        assert net_assets(cash_flow, store_with_debt, "personal", 2025) == 650
        assert net_assets(cash_flow, store_with_debt, "personal", 2026) == 800
        assert net_assets(cash_flow, store_with_debt, "corporate", 2024) == 500

    def test_year_outside_series(
        self, short_household, zero_parameters, store_with_debt
    ):
        """Test that missing years count as zero total assets."""
        cash_flow = run_projection(short_household, zero_parameters, store_with_debt)

        assert net_assets(cash_flow, store_with_debt, "personal", 2030) == 0

    def test_series_matches_pointwise(
        self, short_household, zero_parameters, store_with_debt
    ):
        """Test that the vector form agrees with the scalar form."""
        cash_flow = run_projection(short_household, zero_parameters, store_with_debt)

        for book in ("personal", "corporate"):
            series = net_asset_series(cash_flow, store_with_debt, book)
            expected = [
                net_assets(cash_flow, store_with_debt, book, year)
                for year in cash_flow.years()
            ]
            np.testing.assert_allclose(series, expected)

    def test_liability_edit_without_rerun(
        self, short_household, zero_parameters, store_with_debt
    ):
        """Test that liability edits are reflected without re-projecting."""
        cash_flow = run_projection(short_household, zero_parameters, store_with_debt)
        edited = store_with_debt.set_amount("liability", "personal", "2", 2026, 30)

        assert net_assets(cash_flow, edited, "personal", 2026) == 770

    def test_points(self, short_household, zero_parameters, store_with_debt):
        """Test the per-year points of both books."""
        cash_flow = run_projection(short_household, zero_parameters, store_with_debt)

        points = net_asset_points(cash_flow, store_with_debt)

        assert [p.year for p in points] == [2024, 2025, 2026]
        assert points[1].personal == 650
        assert points[1].corporate == 500


class TestRealValues:
    """Test inflation-deflated totals."""

    def test_real_value_series(self, short_household):
        """Test deflation to start-year man-yen."""
        store = LineItemStore().set_amount("asset", "personal", "1", 2024, 1000)
        parameters = Parameters(inflation_rate=10, investment_return=0)
        cash_flow = run_projection(short_household, parameters, store)

        real = real_value_series(cash_flow, parameters, "personal")

        np.testing.assert_allclose(real, [1000, 1000 / 1.1, 1000 / 1.21])

    def test_empty_series(self):
        """Test an empty projection."""
        assert real_value_series(CashFlowData(), Parameters(), "personal").size == 0


class TestSummaryFrame:
    """Test the pandas summary."""

    def test_frame_shape_and_index(
        self, short_household, zero_parameters, store_with_debt
    ):
        """Test one row per year indexed by year."""
        cash_flow = run_projection(short_household, zero_parameters, store_with_debt)

        frame = summary_frame(cash_flow, store_with_debt)

        assert list(frame.index) == [2024, 2025, 2026]
        assert frame.index.name == "year"
        assert frame.loc[2025, "personal_net_assets"] == 650
        assert frame.loc[2024, "corporate_total_assets"] == 500
        assert "personal_real_total_assets" not in frame.columns

    def test_frame_with_real_values(
        self, short_household, zero_parameters, store_with_debt
    ):
        """Test the optional real-value column."""
        cash_flow = run_projection(short_household, zero_parameters, store_with_debt)

        frame = summary_frame(cash_flow, store_with_debt, zero_parameters)

        assert frame["personal_real_total_assets"].tolist() == [800, 800, 800]
