"""Result models for tax calculations."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from ..config import DeductionApportionment
from ..states import USState
from ..tax_tables import standard_due_dates
from ..utils import money_context, safe_divide
from .audit import AuditEntry


class TaxableIncomeBreakdown(BaseModel):
    """Federal, state and self-employment tax for one year of income.

    ``taxable_income`` never goes below 0, so deductions larger than gross
    income zero out every tax component.
    """

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "gross_income": "75000",
                    "deductions": "0",
                    "taxable_income": "75000",
                    "federal_tax": "11553",
                    "state_tax": "0",
                    "self_employment_tax": "0",
                    "total_tax": "11553",
                    "marginal_tax_rate": "0.22",
                    "state": "TX",
                }
            ]
        }
    }

    gross_income: Decimal
    deductions: Decimal = Decimal("0")
    taxable_income: Decimal = Field(ge=0)
    federal_tax: Decimal = Field(ge=0)
    state_tax: Decimal = Field(ge=0)
    self_employment_tax: Decimal = Field(default=Decimal("0"), ge=0)
    total_tax: Decimal = Field(ge=0)
    marginal_tax_rate: Decimal = Decimal("0")

    state: USState
    is_self_employed: bool = False
    tax_year: Optional[int] = None

    audit_log: list[AuditEntry] = Field(default_factory=list)
    methodology_version: str = ""
    warnings: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def effective_tax_rate(self) -> Decimal:
        """Total tax as a fraction of gross income; 0 without income."""
        if self.gross_income <= 0:
            return Decimal("0")
        return self.total_tax / self.gross_income

    @computed_field
    @property
    def take_home_pay(self) -> Decimal:
        with money_context(self.gross_income, self.total_tax):
            return self.gross_income - self.total_tax


class QuarterlyEstimate(BaseModel):
    """Four estimated-tax installments with their IRS due dates."""

    tax_year: int
    q1: Decimal
    q2: Decimal
    q3: Decimal
    q4: Decimal

    @computed_field
    @property
    def total_annual(self) -> Decimal:
        with money_context(self.q1, self.q2, self.q3, self.q4):
            return self.q1 + self.q2 + self.q3 + self.q4

    @computed_field
    @property
    def q1_due_date(self) -> date:
        return standard_due_dates(self.tax_year)[1]

    @computed_field
    @property
    def q2_due_date(self) -> date:
        return standard_due_dates(self.tax_year)[2]

    @computed_field
    @property
    def q3_due_date(self) -> date:
        return standard_due_dates(self.tax_year)[3]

    @computed_field
    @property
    def q4_due_date(self) -> date:
        """Due in January of the following year."""
        return standard_due_dates(self.tax_year)[4]

    def amount_for(self, quarter: int) -> Decimal:
        return (self.q1, self.q2, self.q3, self.q4)[quarter - 1]

    def installments(self) -> list[tuple[int, Decimal, date]]:
        """``(quarter, amount, due_date)`` for Q1 through Q4."""
        due_dates = standard_due_dates(self.tax_year)
        return [(q, self.amount_for(q), due_dates[q]) for q in range(1, 5)]


class MultiStateTaxResult(BaseModel):
    """Tax for income earned across several states in one year."""

    total_income: Decimal
    total_deductions: Decimal
    taxable_income: Decimal
    federal_tax: Decimal
    state_breakdown: dict[USState, Decimal] = Field(default_factory=dict)
    apportionment: DeductionApportionment = DeductionApportionment.PRORATE

    @computed_field
    @property
    def total_state_tax(self) -> Decimal:
        return sum(self.state_breakdown.values(), Decimal("0"))

    @computed_field
    @property
    def total_tax(self) -> Decimal:
        return self.federal_tax + self.total_state_tax


class StateBreakdown(BaseModel):
    """Earnings attributed to one state across assignments."""

    state: USState
    earnings: Decimal = Decimal("0")
    taxable_earnings: Decimal = Decimal("0")
    stipends: Decimal = Decimal("0")
    weeks_worked: int = 0
    days_worked: int = 0
    assignment_count: int = 0

    @computed_field
    @property
    def has_state_tax(self) -> bool:
        return not self.state.has_no_income_tax

    @computed_field
    @property
    def tax_free_percentage(self) -> Decimal:
        """Share of earnings paid as stipends, in percent."""
        return safe_divide(self.stipends, self.earnings) * 100
