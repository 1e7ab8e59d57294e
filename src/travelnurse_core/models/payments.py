"""Quarterly estimated tax payment models."""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, computed_field

from ..exceptions import ValidationError
from ..states import USState
from ..tax_tables import standard_due_dates
from ..utils import Number, safe_divide, to_decimal

DUE_SOON_DAYS = 14
UPCOMING_DAYS = 30


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PaymentStatus(str, Enum):
    PAID = "paid"
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    UPCOMING = "upcoming"
    SCHEDULED = "scheduled"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


def due_date_for(tax_year: int, quarter: int) -> date:
    """IRS due date for one installment.

    Raises:
        ValidationError: If quarter is not 1-4.
    """
    if quarter not in (1, 2, 3, 4):
        raise ValidationError(
            "Quarter must be between 1 and 4",
            field="quarter",
            value=quarter,
            constraint="1 <= quarter <= 4",
        )
    return standard_due_dates(tax_year)[quarter]


class QuarterlyPayment(BaseModel):
    """One estimated-tax installment and what has been paid against it."""

    id: UUID = Field(default_factory=uuid4)
    tax_year: int
    quarter: int = Field(ge=1, le=4)
    due_date: date
    estimated_amount: Decimal = Field(ge=0)
    paid_amount: Decimal = Field(default=Decimal("0"), ge=0)
    is_paid: bool = False
    paid_date: Optional[date] = None
    payment_notes: Optional[str] = None
    federal_payment: Decimal = Field(default=Decimal("0"), ge=0)
    state_payment: Decimal = Field(default=Decimal("0"), ge=0)
    state: Optional[USState] = None
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)

    @classmethod
    def create(
        cls,
        tax_year: int,
        quarter: int,
        estimated_amount: Decimal,
        federal_payment: Decimal = Decimal("0"),
        state_payment: Decimal = Decimal("0"),
        state: Optional[USState] = None,
    ) -> "QuarterlyPayment":
        """New unpaid installment with the IRS due date filled in."""
        return cls(
            tax_year=tax_year,
            quarter=quarter,
            due_date=due_date_for(tax_year, quarter),
            estimated_amount=estimated_amount,
            federal_payment=federal_payment,
            state_payment=state_payment,
            state=state,
        )

    @staticmethod
    def standard_due_dates(tax_year: int) -> dict[int, date]:
        return standard_due_dates(tax_year)

    @computed_field
    @property
    def quarter_name(self) -> str:
        return f"Q{self.quarter}"

    @computed_field
    @property
    def full_name(self) -> str:
        return f"Q{self.quarter} {self.tax_year}"

    @computed_field
    @property
    def remaining_amount(self) -> Decimal:
        return max(Decimal("0"), self.estimated_amount - self.paid_amount)

    def days_until_due(self, as_of: Optional[date] = None) -> int:
        """Days from ``as_of`` to the due date; negative once past due."""
        return (self.due_date - (as_of or date.today())).days

    def is_overdue(self, as_of: Optional[date] = None) -> bool:
        return not self.is_paid and (as_of or date.today()) > self.due_date

    def status(self, as_of: Optional[date] = None) -> PaymentStatus:
        if self.is_paid:
            return PaymentStatus.PAID
        if self.is_overdue(as_of):
            return PaymentStatus.OVERDUE
        days = self.days_until_due(as_of)
        if days <= DUE_SOON_DAYS:
            return PaymentStatus.DUE_SOON
        if days <= UPCOMING_DAYS:
            return PaymentStatus.UPCOMING
        return PaymentStatus.SCHEDULED

    def record_payment(
        self,
        amount: Number,
        notes: Optional[str] = None,
        paid_on: Optional[date] = None,
    ) -> None:
        """Record what was paid. Marks the installment paid once it covers the estimate.

        Raises:
            ValidationError: If amount is negative.
        """
        paid = to_decimal(amount)
        if paid < 0:
            raise ValidationError(
                "Payment amount cannot be negative",
                field="amount",
                value=str(paid),
                constraint="amount >= 0",
            )
        self.paid_amount = paid
        self.paid_date = paid_on or date.today()
        self.is_paid = paid >= self.estimated_amount
        self.payment_notes = notes
        self.updated_at = _utc_now()

    def update_estimate(
        self,
        amount: Decimal,
        federal_payment: Optional[Decimal] = None,
        state_payment: Optional[Decimal] = None,
    ) -> None:
        """Replace the estimate; an earlier payment that now covers it marks the quarter paid."""
        self.estimated_amount = amount
        self.is_paid = self.paid_amount > 0 and self.paid_amount >= amount
        if federal_payment is not None:
            self.federal_payment = federal_payment
        if state_payment is not None:
            self.state_payment = state_payment
        self.updated_at = _utc_now()


class PaymentSummary(BaseModel):
    """Totals across the four installments of a tax year."""

    year: int
    total_estimated: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")
    quarters_paid: int = 0
    quarters_overdue: int = 0
    payments: list[QuarterlyPayment] = Field(default_factory=list)

    @computed_field
    @property
    def remaining(self) -> Decimal:
        return max(Decimal("0"), self.total_estimated - self.total_paid)

    @computed_field
    @property
    def progress(self) -> Decimal:
        """Fraction of the estimate paid so far; 0 when nothing is estimated."""
        return safe_divide(self.total_paid, self.total_estimated)

    @computed_field
    @property
    def is_fully_paid(self) -> bool:
        return self.quarters_paid == 4

    @computed_field
    @property
    def has_overdue(self) -> bool:
        return self.quarters_overdue > 0
