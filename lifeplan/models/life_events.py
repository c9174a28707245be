"""Life events shown alongside the projection (display only)."""

from typing import List, Literal, Optional, Sequence

from pydantic import BaseModel, Field

from .household import Household
from .line_items import Book

EVENT_SEPARATOR = "、"


class LifeEvent(BaseModel):
    """A user-entered one-off event."""

    year: int = Field(..., description="Year the event happens")
    description: str = Field(..., min_length=1, description="Event label")
    type: Literal["income", "expense"] = Field(default="expense")
    amount: float = Field(default=0, ge=0, description="Amount in man-yen")
    source: Book = Field(default="personal", description="Book the event belongs to")

    def label(self) -> str:
        sign = "+" if self.type == "income" else "-"
        return f"{self.description}（{sign}{_format_amount(self.amount)}万円）"


def _format_amount(amount: float) -> str:
    return str(int(amount)) if amount == int(amount) else str(amount)


def marriage_year(household: Household) -> Optional[int]:
    """Year of a planned marriage, if the household is planning one."""
    spouse = household.spouse_info
    if household.marital_status != "planning" or spouse is None:
        return None
    if spouse.marriage_age is None:
        return None
    return household.start_year + (spouse.marriage_age - household.current_age)


def household_events(household: Household, year: int) -> List[str]:
    """Marriage and birth events derived from the household profile."""
    events = []
    if year == marriage_year(household):
        events.append("結婚")

    for index, child in enumerate(household.children, start=1):
        if year == household.start_year - child.current_age:
            events.append(f"第{index}子誕生")

    offset = len(household.children)
    for index, planned in enumerate(household.planned_children, start=offset + 1):
        if year == household.start_year + planned.years_from_now:
            events.append(f"第{index}子誕生")
    return events


def describe_year(
    year: int,
    household: Household,
    life_events: Sequence[LifeEvent],
    source: Book = "personal",
) -> str:
    """
    Joined event descriptions of one year for one book.

    Household events (marriage, births) belong to the personal book only.
    """
    events = household_events(household, year) if source == "personal" else []
    events.extend(
        event.label()
        for event in life_events
        if event.year == year and event.source == source
    )
    return EVENT_SEPARATOR.join(events)
