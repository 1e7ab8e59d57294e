"""Quarterly estimated payment scheduling."""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

import structlog

from .calculator import TaxCalculationEngine, split_into_quarters
from .models.payments import PaymentSummary, QuarterlyPayment
from .repository import InMemoryPaymentRepository, PaymentRepository
from .state_tax import StateLike
from .tax_tables import PAYMENT_REMINDER_DAYS
from .utils import Number

logger = structlog.get_logger()


class QuarterlyPaymentScheduler:
    """
    Builds and maintains the four-installment plan for a tax year.

    Regenerating a year re-estimates quarters that are still unpaid and
    never touches a quarter already marked paid.
    """

    def __init__(
        self,
        calculator: Optional[TaxCalculationEngine] = None,
        repository: Optional[PaymentRepository] = None,
    ):
        self.calculator = calculator or TaxCalculationEngine()
        self.repository = repository if repository is not None else InMemoryPaymentRepository()

    def generate_payments(
        self,
        year: int,
        gross_income: Number,
        deductions: Number,
        state: StateLike,
        is_self_employed: bool = True,
    ) -> list[QuarterlyPayment]:
        """Create or refresh Q1-Q4 for ``year``; always returns four payments."""
        breakdown = self.calculator.calculate_total_tax(
            gross_income, deductions, state, is_self_employed, tax_year=year
        )
        totals = split_into_quarters(breakdown.total_tax)
        state_shares = split_into_quarters(breakdown.state_tax)

        existing = {p.quarter: p for p in self.repository.list_for_year(year)}
        created = updated = preserved = 0

        for quarter in range(1, 5):
            amount = totals[quarter - 1]
            state_share = state_shares[quarter - 1]
            federal_share = amount - state_share

            payment = existing.get(quarter)
            if payment is None:
                payment = QuarterlyPayment.create(
                    tax_year=year,
                    quarter=quarter,
                    estimated_amount=amount,
                    federal_payment=federal_share,
                    state_payment=state_share,
                    state=breakdown.state,
                )
                created += 1
            elif payment.is_paid:
                preserved += 1
                continue
            else:
                payment.update_estimate(amount, federal_share, state_share)
                payment.state = breakdown.state
                updated += 1
            self.repository.save(payment)

        logger.info(
            "quarterly_payments_generated",
            tax_year=year,
            total_tax=str(breakdown.total_tax),
            created=created,
            updated=updated,
            preserved=preserved,
        )
        return self.repository.list_for_year(year)

    def record_payment(
        self,
        payment: QuarterlyPayment,
        amount: Number,
        notes: Optional[str] = None,
        paid_on: Optional[date] = None,
    ) -> QuarterlyPayment:
        payment.record_payment(amount, notes=notes, paid_on=paid_on)
        self.repository.save(payment)
        logger.info(
            "payment_recorded",
            payment=payment.full_name,
            paid_amount=str(payment.paid_amount),
            is_paid=payment.is_paid,
        )
        return payment

    def delete_payment(self, payment: QuarterlyPayment) -> None:
        self.repository.delete(payment.id)
        logger.info("payment_deleted", payment=payment.full_name)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def fetch_payments(self, year: int) -> list[QuarterlyPayment]:
        return self.repository.list_for_year(year)

    def fetch_unpaid_payments(self) -> list[QuarterlyPayment]:
        return [p for p in self.repository.list_all() if not p.is_paid]

    def fetch_overdue_payments(self, as_of: Optional[date] = None) -> list[QuarterlyPayment]:
        return [p for p in self.repository.list_all() if p.is_overdue(as_of)]

    def next_upcoming_payment(self, as_of: Optional[date] = None) -> Optional[QuarterlyPayment]:
        """Earliest unpaid payment due on or after ``as_of``."""
        today = as_of or date.today()
        for payment in self.fetch_unpaid_payments():
            if payment.due_date >= today:
                return payment
        return None

    def payment_summary(self, year: int, as_of: Optional[date] = None) -> PaymentSummary:
        payments = self.repository.list_for_year(year)
        return PaymentSummary(
            year=year,
            total_estimated=sum((p.estimated_amount for p in payments), Decimal("0")),
            total_paid=sum((p.paid_amount for p in payments), Decimal("0")),
            quarters_paid=sum(1 for p in payments if p.is_paid),
            quarters_overdue=sum(1 for p in payments if p.is_overdue(as_of)),
            payments=payments,
        )

    @staticmethod
    def reminder_dates(payment: QuarterlyPayment, as_of: Optional[date] = None) -> list[date]:
        """Reminder dates (14, 7 and 1 days before, and the due date) after ``as_of``.

        Delivery is up to the caller; paid installments get no reminders.
        """
        if payment.is_paid:
            return []
        today = as_of or date.today()
        candidates = [payment.due_date - timedelta(days=d) for d in PAYMENT_REMINDER_DAYS]
        candidates.append(payment.due_date)
        return [d for d in candidates if d > today]
