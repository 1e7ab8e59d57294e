"""Mileage trip model."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, computed_field

from ..tax_tables import get_mileage_rate


class TripType(str, Enum):
    TAX_HOME_TRAVEL = "tax_home_travel"
    ASSIGNMENT_TRAVEL = "assignment_travel"
    WORK_RELATED = "work_related"
    OTHER = "other"


class MileageTrip(BaseModel):
    """A business trip by personal vehicle."""

    id: UUID = Field(default_factory=uuid4)
    trip_date: date
    distance_miles: Decimal = Field(ge=0)
    purpose: str = ""
    trip_type: TripType = TripType.WORK_RELATED
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    mileage_rate: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Override for the IRS standard rate of the trip's year",
    )

    @computed_field
    @property
    def tax_year(self) -> int:
        return self.trip_date.year

    @computed_field
    @property
    def effective_rate(self) -> Decimal:
        if self.mileage_rate is not None:
            return self.mileage_rate
        return get_mileage_rate(self.tax_year)

    @computed_field
    @property
    def deduction(self) -> Decimal:
        return self.distance_miles * self.effective_rate
