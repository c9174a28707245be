"""
Man-yen unit helpers for life plan projections.

This module provides compounding adjustments for percent-denominated growth
rates, the inflation adjuster behind real-value views, and the one-decimal
rounding convention used for every man-yen amount the simulator produces.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import BaseModel, Field

MIN_YEAR = 1900
MAX_YEAR = 2300


def round_man_yen(amount: float, decimal_places: int = 1) -> float:
    """
    Round a man-yen amount half away from zero.

    Python's built-in ``round`` rounds half to even, which would turn
    ``21.25`` into ``21.2``; display and stored values use half-up instead.

    Args:
        amount: Amount in man-yen
        decimal_places: Number of decimal places to keep

    Returns:
        The rounded amount as a float
    """
    quantum = Decimal(1).scaleb(-decimal_places)
    value = Decimal(str(float(amount)))
    return float(value.quantize(quantum, rounding=ROUND_HALF_UP))


def compound_multiplier(rate_percent: float, years: int) -> float:
    """Growth multiplier ``(1 + rate/100) ** years`` for a percent rate."""
    return (1 + rate_percent / 100) ** years


class InflationAdjuster(BaseModel):
    """Compounds and deflates amounts at a flat annual percent rate."""

    inflation_rate: float = Field(
        ..., ge=0, le=100, description="Annual rate in percent (3.0 = 3%)"
    )
    base_year: int = Field(
        ..., ge=MIN_YEAR, le=MAX_YEAR, description="Base year for calculations"
    )

    def adjust_for_inflation(
        self, amount: float, from_year: int, to_year: int
    ) -> float:
        """
        Adjust an amount for inflation between two years.

        Args:
            amount: The amount to adjust
            from_year: The year the amount is from
            to_year: The year to adjust to

        Returns:
            The inflation-adjusted amount
        """
        years_diff = to_year - from_year
        if years_diff == 0:
            return amount

        # Negative exponents deflate, so one formula covers both directions
        return amount * compound_multiplier(self.inflation_rate, years_diff)

    def to_real_value(self, nominal_amount: float, year: int) -> float:
        """Convert nominal value to real value (base year man-yen)."""
        return self.adjust_for_inflation(nominal_amount, year, self.base_year)

    def to_nominal_value(self, real_amount: float, year: int) -> float:
        """Convert real value to nominal value (that year's man-yen)."""
        return self.adjust_for_inflation(real_amount, self.base_year, year)


class ManYenFormatter(BaseModel):
    """Formats man-yen amounts for display and export."""

    unit_suffix: str = Field(default="万円", description="Unit suffix")
    decimal_places: int = Field(
        default=1, ge=0, le=10, description="Number of decimal places"
    )
    show_unit: bool = Field(default=False, description="Whether to append the unit")

    def format_amount(self, amount: float, show_unit: Optional[bool] = None) -> str:
        """
        Format a man-yen amount.

        Args:
            amount: The amount to format
            show_unit: Override the default unit display setting

        Returns:
            Formatted amount string, e.g. ``"145.2"`` or ``"145.2万円"``
        """
        show_unit = show_unit if show_unit is not None else self.show_unit
        rounded = round_man_yen(amount, self.decimal_places)

        # Integral values print without a trailing ".0"
        if rounded == int(rounded):
            formatted = str(int(rounded))
        else:
            formatted = f"{rounded:.{self.decimal_places}f}"

        if show_unit:
            return f"{formatted}{self.unit_suffix}"
        return formatted


def get_current_year() -> int:
    """Get the current year."""
    return datetime.now().year
