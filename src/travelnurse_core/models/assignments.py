"""Assignment records consumed by the state breakdown and one-year rule checks."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, computed_field, model_validator

from ..states import USState
from ..utils import safe_divide

# IRS one-year rule: assignments expected to run a year or more are
# indefinite, and the work location becomes the tax home.
ONE_YEAR_LIMIT_DAYS = 365
ONE_YEAR_WARNING_DAYS = 300


class AssignmentStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXTENDED = "extended"

    @property
    def display_name(self) -> str:
        return self.value.title()

    @property
    def is_in_progress(self) -> bool:
        return self in (AssignmentStatus.ACTIVE, AssignmentStatus.EXTENDED)


class PayBreakdown(BaseModel):
    """Weekly pay package for an assignment."""

    hourly_rate: Decimal = Field(ge=0)
    guaranteed_hours: Decimal = Field(default=Decimal("36"), ge=0)
    housing_stipend: Decimal = Field(default=Decimal("0"), ge=0)
    meals_stipend: Decimal = Field(default=Decimal("0"), ge=0)
    travel_reimbursement: Decimal = Field(default=Decimal("0"), ge=0)
    overtime_rate: Optional[Decimal] = Field(default=None, ge=0)
    sign_on_bonus: Optional[Decimal] = Field(default=None, ge=0)
    completion_bonus: Optional[Decimal] = Field(default=None, ge=0)

    @computed_field
    @property
    def weekly_taxable(self) -> Decimal:
        return self.hourly_rate * self.guaranteed_hours

    @computed_field
    @property
    def weekly_stipends(self) -> Decimal:
        return self.housing_stipend + self.meals_stipend

    @computed_field
    @property
    def weekly_gross(self) -> Decimal:
        return self.weekly_taxable + self.weekly_stipends

    @computed_field
    @property
    def annual_gross(self) -> Decimal:
        return self.weekly_gross * 52

    @computed_field
    @property
    def blended_hourly_rate(self) -> Decimal:
        return safe_divide(self.weekly_gross, self.guaranteed_hours)

    @computed_field
    @property
    def non_taxable_percentage(self) -> Decimal:
        return safe_divide(self.weekly_stipends, self.weekly_gross) * 100

    def stipends_within_gsa_limits(self, daily_lodging: Decimal, daily_meals: Decimal) -> bool:
        return (
            self.housing_stipend / 7 <= daily_lodging
            and self.meals_stipend / 7 <= daily_meals
        )


class Assignment(BaseModel):
    """A travel contract at one facility."""

    id: UUID = Field(default_factory=uuid4)
    facility_name: str
    agency_name: Optional[str] = None
    start_date: date
    end_date: date
    status: AssignmentStatus = AssignmentStatus.UPCOMING
    weekly_hours: Decimal = Field(default=Decimal("36"), ge=0)
    state: Optional[USState] = None
    pay: Optional[PayBreakdown] = None
    was_extended: bool = False
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self) -> "Assignment":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    @computed_field
    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days

    @computed_field
    @property
    def duration_weeks(self) -> int:
        return self.duration_days // 7

    @computed_field
    @property
    def total_expected_pay(self) -> Decimal:
        if self.pay is None:
            return Decimal("0")
        return self.pay.weekly_gross * self.duration_weeks

    @property
    def is_approaching_one_year_limit(self) -> bool:
        return self.duration_days >= ONE_YEAR_WARNING_DAYS

    @property
    def exceeds_one_year_limit(self) -> bool:
        return self.duration_days >= ONE_YEAR_LIMIT_DAYS

    def days_remaining(self, as_of: Optional[date] = None) -> int:
        """Days left while the assignment is active or extended, else 0."""
        if not self.status.is_in_progress:
            return 0
        return max(0, (self.end_date - (as_of or date.today())).days)
