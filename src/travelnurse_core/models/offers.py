"""Job offer models for stipend and take-home comparisons."""

from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, computed_field

from ..states import USState
from ..utils import safe_divide


class JobOffer(BaseModel):
    """A travel contract offer: taxable hourly pay plus weekly stipends.

    Housing and meals stipends are weekly, non-taxable amounts. Bonuses are
    one-time amounts and do not enter weekly figures.
    """

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "ICU - Sacramento",
                    "hourly_rate": "35",
                    "hours_per_week": "36",
                    "housing_stipend": "2100",
                    "meals_stipend": "553",
                    "contract_weeks": 13,
                    "state": "CA",
                }
            ]
        }
    }

    id: UUID = Field(default_factory=uuid4)
    name: str = "Offer"
    facility_name: Optional[str] = None
    location: Optional[str] = None

    hourly_rate: Decimal = Field(ge=0)
    hours_per_week: Decimal = Field(ge=0)
    housing_stipend: Decimal = Field(default=Decimal("0"), ge=0)
    meals_stipend: Decimal = Field(default=Decimal("0"), ge=0)
    travel_reimbursement: Decimal = Field(default=Decimal("0"), ge=0)

    overtime_rate: Optional[Decimal] = Field(default=None, ge=0)
    sign_on_bonus: Optional[Decimal] = Field(default=None, ge=0)
    completion_bonus: Optional[Decimal] = Field(default=None, ge=0)
    referral_bonus: Optional[Decimal] = Field(default=None, ge=0)

    contract_weeks: int = Field(default=13, gt=0)
    state: Optional[USState] = None

    @computed_field
    @property
    def weekly_taxable(self) -> Decimal:
        return self.hourly_rate * self.hours_per_week

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
    def daily_housing(self) -> Decimal:
        return self.housing_stipend / 7

    @computed_field
    @property
    def daily_meals(self) -> Decimal:
        return self.meals_stipend / 7

    @computed_field
    @property
    def blended_hourly_rate(self) -> Decimal:
        """Weekly gross per hour worked; 0 with no hours."""
        return safe_divide(self.weekly_gross, self.hours_per_week)

    @computed_field
    @property
    def non_taxable_percentage(self) -> Decimal:
        """Stipends as a percentage of weekly gross; 0 with no gross."""
        return safe_divide(self.weekly_stipends, self.weekly_gross) * 100

    @computed_field
    @property
    def total_contract_value(self) -> Decimal:
        return self.weekly_gross * self.contract_weeks

    @computed_field
    @property
    def total_bonuses(self) -> Decimal:
        bonuses = (self.sign_on_bonus, self.completion_bonus, self.referral_bonus)
        return sum((b for b in bonuses if b is not None), Decimal("0"))


class GSAComplianceResult(BaseModel):
    """Daily stipend amounts checked against GSA per-diem limits."""

    housing_within_limit: bool
    meals_within_limit: bool
    daily_housing: Decimal
    daily_meals: Decimal
    gsa_daily_lodging: Decimal
    gsa_daily_meals: Decimal

    @computed_field
    @property
    def is_compliant(self) -> bool:
        return self.housing_within_limit and self.meals_within_limit

    @computed_field
    @property
    def housing_excess(self) -> Decimal:
        return max(Decimal("0"), self.daily_housing - self.gsa_daily_lodging)

    @computed_field
    @property
    def meals_excess(self) -> Decimal:
        return max(Decimal("0"), self.daily_meals - self.gsa_daily_meals)


class OfferComparisonResult(BaseModel):
    """One offer's projected pay, ranked against the other offers."""

    offer: JobOffer
    weekly_gross: Decimal
    weekly_take_home: Decimal
    annual_gross: Decimal
    annual_take_home: Decimal
    blended_rate: Decimal
    non_taxable_percentage: Decimal
    effective_tax_rate: Decimal = Field(description="Percent of annual gross paid in tax")
    rank: int = Field(ge=1)
