"""
Pydantic models for the household being planned.

This module defines the demographic, housing, family and macro-parameter
inputs of a life plan, with the validation that must pass before a
projection is run.
"""

from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .units import get_current_year

Occupation = Literal[
    "company_employee",
    "part_time_with_pension",
    "part_time_without_pension",
    "self_employed",
    "homemaker",
]


class SchoolChoice(str, Enum):
    """School type for nursery through high school."""

    PUBLIC = "public"
    PRIVATE = "private"
    NONE = "none"


class UniversityChoice(str, Enum):
    """University track."""

    PUBLIC_HUMANITIES = "public_humanities"
    PUBLIC_SCIENCE = "public_science"
    PRIVATE_HUMANITIES = "private_humanities"
    PRIVATE_SCIENCE = "private_science"
    NONE = "none"


# Labels used by the Japanese input forms
SCHOOL_LABELS = {
    "公立": SchoolChoice.PUBLIC.value,
    "私立": SchoolChoice.PRIVATE.value,
    "行かない": SchoolChoice.NONE.value,
}

UNIVERSITY_LABELS = {
    "公立大学（文系）": UniversityChoice.PUBLIC_HUMANITIES.value,
    "公立大学（理系）": UniversityChoice.PUBLIC_SCIENCE.value,
    "私立大学（文系）": UniversityChoice.PRIVATE_HUMANITIES.value,
    "私立大学（理系）": UniversityChoice.PRIVATE_SCIENCE.value,
    "行かない": UniversityChoice.NONE.value,
}


class EducationPlan(BaseModel):
    """
    School selection for one child, one entry per level.

    Choices are stored as plain strings so that an unrecognised value from an
    external form degrades to "no cost" in the cost table instead of failing
    validation.
    """

    nursery: str = Field(default=SchoolChoice.PUBLIC.value, description="0-2 years")
    preschool: str = Field(default=SchoolChoice.PUBLIC.value, description="3-5 years")
    elementary: str = Field(
        default=SchoolChoice.PUBLIC.value, description="6-11 years"
    )
    junior_high: str = Field(
        default=SchoolChoice.PUBLIC.value, description="12-14 years"
    )
    high_school: str = Field(
        default=SchoolChoice.PUBLIC.value, description="15-17 years"
    )
    university: str = Field(
        default=UniversityChoice.PUBLIC_HUMANITIES.value, description="18-21 years"
    )

    @field_validator(
        "nursery", "preschool", "elementary", "junior_high", "high_school",
        mode="before",
    )
    @classmethod
    def normalize_school_choice(cls, v: Any) -> Any:
        if isinstance(v, Enum):
            return v.value
        return SCHOOL_LABELS.get(v, v)

    @field_validator("university", mode="before")
    @classmethod
    def normalize_university_choice(cls, v: Any) -> Any:
        if isinstance(v, Enum):
            return v.value
        return UNIVERSITY_LABELS.get(v, v)

    @classmethod
    def no_schooling(cls) -> "EducationPlan":
        """Plan with every level set to none."""
        return cls(
            nursery=SchoolChoice.NONE,
            preschool=SchoolChoice.NONE,
            elementary=SchoolChoice.NONE,
            junior_high=SchoolChoice.NONE,
            high_school=SchoolChoice.NONE,
            university=UniversityChoice.NONE,
        )


class Child(BaseModel):
    """A child who is already born."""

    current_age: int = Field(..., ge=0, le=120, description="Age in the start year")
    education_plan: EducationPlan = Field(default_factory=EducationPlan)


class PlannedChild(BaseModel):
    """A child who is not born yet."""

    years_from_now: int = Field(
        ..., ge=0, le=30, description="Birth year offset from the start year"
    )
    education_plan: EducationPlan = Field(default_factory=EducationPlan)


class RentTerms(BaseModel):
    """Rental housing terms."""

    monthly_rent: float = Field(default=0, ge=0, description="Monthly rent")
    annual_increase_rate: float = Field(
        default=0, ge=0, description="Annual rent increase in percent"
    )
    renewal_fee: float = Field(default=0, ge=0, description="Fee per lease renewal")
    renewal_interval: int = Field(
        default=2, ge=0, description="Years between renewals (0 = never)"
    )
    lease_start_year: Optional[int] = Field(
        default=None,
        ge=1900,
        le=2300,
        description="Lease reference year (defaults to the projection start year)",
    )


class OwnTerms(BaseModel):
    """Owner-occupied housing terms."""

    purchase_year: int = Field(..., ge=1900, le=2150, description="Purchase year")
    purchase_price: float = Field(default=0, ge=0, description="Purchase price")
    loan_amount: float = Field(default=0, ge=0, description="Mortgage principal")
    interest_rate: float = Field(
        default=0, ge=0, description="Annual interest rate in percent"
    )
    loan_term_years: int = Field(default=35, ge=1, le=50, description="Loan term")
    maintenance_cost_rate: float = Field(
        default=0,
        ge=0,
        le=100,
        description="Yearly maintenance as percent of purchase price",
    )


class HousingInfo(BaseModel):
    """Housing situation: exactly one payload, matching ``type``."""

    type: Literal["rent", "own"] = Field(default="rent", description="Housing mode")
    rent: Optional[RentTerms] = Field(default=None)
    own: Optional[OwnTerms] = Field(default=None)

    @model_validator(mode="after")
    def validate_payload(self):
        if self.type == "rent":
            if self.rent is None:
                raise ValueError("Rent terms are required when housing type is rent")
            if self.own is not None:
                raise ValueError("Own terms must be empty when housing type is rent")
        else:
            if self.own is None:
                raise ValueError("Own terms are required when housing type is own")
            if self.rent is not None:
                raise ValueError("Rent terms must be empty when housing type is own")
        return self

    @classmethod
    def default_rent(cls) -> "HousingInfo":
        return cls(type="rent", rent=RentTerms())


class SpouseInfo(BaseModel):
    """Spouse details (married or planning households only)."""

    current_age: Optional[int] = Field(default=None, ge=0, le=120)
    marriage_age: Optional[int] = Field(
        default=None, ge=0, le=120, description="Household member's age at marriage"
    )
    occupation: Optional[Occupation] = Field(default=None)
    additional_expense: Optional[float] = Field(default=None, ge=0)


class Household(BaseModel):
    """Household composition and demographics."""

    current_age: int = Field(default=30, ge=0, le=120, description="Age now")
    start_year: int = Field(
        default_factory=get_current_year,
        ge=1900,
        le=2150,
        description="First projected year",
    )
    death_age: int = Field(
        default=80, ge=0, le=120, description="Assumed age at end of life"
    )
    gender: Literal["male", "female"] = Field(default="male")
    occupation: Occupation = Field(default="company_employee")
    marital_status: Literal["single", "married", "planning"] = Field(default="single")
    monthly_living_expense: float = Field(
        default=0, ge=0, description="Monthly living expense"
    )
    housing_info: HousingInfo = Field(default_factory=HousingInfo.default_rent)
    spouse_info: Optional[SpouseInfo] = Field(default=None)
    children: List[Child] = Field(default_factory=list)
    planned_children: List[PlannedChild] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_horizon(self):
        if self.death_age < self.current_age:
            raise ValueError(
                f"Death age ({self.death_age}) must be >= current age "
                f"({self.current_age})"
            )
        if self.marital_status == "single":
            self.spouse_info = None
        return self

    @property
    def horizon_years(self) -> int:
        """Number of projected years, both ends included."""
        return self.death_age - self.current_age + 1

    @property
    def end_year(self) -> int:
        return self.start_year + (self.death_age - self.current_age)

    def years(self) -> List[int]:
        return list(range(self.start_year, self.end_year + 1))

    def age_in(self, year: int) -> int:
        """Age of the household member in the given year."""
        return self.current_age + (year - self.start_year)

    @property
    def has_spouse_income(self) -> bool:
        return (
            self.marital_status != "single"
            and self.spouse_info is not None
            and self.spouse_info.occupation is not None
        )


class Parameters(BaseModel):
    """Macro assumptions, all whole-number percents."""

    inflation_rate: float = Field(
        default=1.0, ge=0, le=100, description="General inflation in percent"
    )
    education_cost_increase_rate: float = Field(
        default=2.0, ge=0, le=100, description="Education cost growth in percent"
    )
    investment_return: float = Field(
        default=3.0, ge=0, le=100, description="Return on personal net worth"
    )
