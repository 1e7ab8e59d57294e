"""Tests for quarterly payment scheduling and payment records."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from travelnurse_core import (
    InMemoryPaymentRepository,
    PaymentRepository,
    PaymentStatus,
    QuarterlyPayment,
    QuarterlyPaymentScheduler,
    TaxCalculationEngine,
    TravelNurseConfig,
    USState,
    ValidationError,
)


@pytest.fixture
def scheduler(config: TravelNurseConfig) -> QuarterlyPaymentScheduler:
    return QuarterlyPaymentScheduler(calculator=TaxCalculationEngine(config=config))


@pytest.fixture
def payments_2025(scheduler: QuarterlyPaymentScheduler) -> list[QuarterlyPayment]:
    """Plan for $75,000 in Texas, not self-employed: 11553 total."""
    return scheduler.generate_payments(
        2025, Decimal("75000"), Decimal("0"), USState.TEXAS, is_self_employed=False
    )


class TestGeneratePayments:
    """Plan creation and regeneration."""

    def test_creates_four_quarters(self, payments_2025: list[QuarterlyPayment]):
        assert [p.quarter for p in payments_2025] == [1, 2, 3, 4]
        assert all(p.estimated_amount == Decimal("2888.25") for p in payments_2025)
        assert all(p.state == USState.TEXAS for p in payments_2025)

    def test_due_dates(self, payments_2025: list[QuarterlyPayment]):
        assert [p.due_date for p in payments_2025] == [
            date(2025, 4, 15),
            date(2025, 6, 15),
            date(2025, 9, 15),
            date(2026, 1, 15),
        ]

    def test_federal_and_state_shares_add_up(self, scheduler: QuarterlyPaymentScheduler):
        payments = scheduler.generate_payments(
            2025, Decimal("90000"), Decimal("14600"), USState.CALIFORNIA
        )
        for payment in payments:
            assert payment.federal_payment + payment.state_payment == payment.estimated_amount
            assert payment.state_payment > 0

    def test_regeneration_preserves_paid_quarter(
        self, scheduler: QuarterlyPaymentScheduler, payments_2025: list[QuarterlyPayment]
    ):
        q1 = payments_2025[0]
        scheduler.record_payment(q1, Decimal("2888.25"), notes="EFTPS", paid_on=date(2025, 4, 10))

        regenerated = scheduler.generate_payments(
            2025, Decimal("100000"), Decimal("0"), USState.TEXAS, is_self_employed=False
        )

        assert len(regenerated) == 4
        first = regenerated[0]
        assert first.id == q1.id
        assert first.is_paid is True
        assert first.estimated_amount == Decimal("2888.25")
        assert first.paid_amount == Decimal("2888.25")
        assert first.paid_date == date(2025, 4, 10)
        # 100000 -> 17053 / 4
        assert all(p.estimated_amount == Decimal("4263.25") for p in regenerated[1:])

    def test_regeneration_updates_in_place(
        self, scheduler: QuarterlyPaymentScheduler, payments_2025: list[QuarterlyPayment]
    ):
        ids = [p.id for p in payments_2025]
        regenerated = scheduler.generate_payments(
            2025, Decimal("30000"), Decimal("0"), USState.TEXAS, is_self_employed=False
        )
        assert [p.id for p in regenerated] == ids
        assert regenerated[0].estimated_amount == Decimal("842")

    def test_regeneration_marks_covered_quarter_paid(
        self, scheduler: QuarterlyPaymentScheduler, payments_2025: list[QuarterlyPayment]
    ):
        q1 = payments_2025[0]
        scheduler.record_payment(q1, Decimal("2000"), paid_on=date(2025, 4, 10))
        assert q1.is_paid is False

        regenerated = scheduler.generate_payments(
            2025, Decimal("30000"), Decimal("0"), USState.TEXAS, is_self_employed=False
        )

        first = regenerated[0]
        assert first.estimated_amount == Decimal("842")
        assert first.is_paid is True
        assert first.status(date(2025, 5, 1)) == PaymentStatus.PAID
        assert scheduler.payment_summary(2025, as_of=date(2025, 5, 1)).quarters_overdue == 0

    def test_recreates_deleted_quarter(
        self, scheduler: QuarterlyPaymentScheduler, payments_2025: list[QuarterlyPayment]
    ):
        scheduler.delete_payment(payments_2025[2])
        assert len(scheduler.fetch_payments(2025)) == 3

        regenerated = scheduler.generate_payments(
            2025, Decimal("75000"), Decimal("0"), USState.TEXAS, is_self_employed=False
        )
        assert [p.quarter for p in regenerated] == [1, 2, 3, 4]

    def test_years_are_separate(
        self, scheduler: QuarterlyPaymentScheduler, payments_2025: list[QuarterlyPayment]
    ):
        scheduler.generate_payments(2026, Decimal("50000"), Decimal("0"), "TX", False)
        assert len(scheduler.fetch_payments(2025)) == 4
        assert len(scheduler.fetch_payments(2026)) == 4


class TestRecordPayment:
    """Paying installments."""

    def test_partial_payment(
        self, scheduler: QuarterlyPaymentScheduler, payments_2025: list[QuarterlyPayment]
    ):
        payment = scheduler.record_payment(payments_2025[0], Decimal("1000"))

        assert payment.paid_amount == Decimal("1000")
        assert payment.is_paid is False
        assert payment.remaining_amount == Decimal("1888.25")
        assert payment.paid_date == date.today()

    def test_full_payment(
        self, scheduler: QuarterlyPaymentScheduler, payments_2025: list[QuarterlyPayment]
    ):
        payment = scheduler.record_payment(payments_2025[0], Decimal("3000"), notes="paid extra")

        assert payment.is_paid is True
        assert payment.remaining_amount == Decimal("0")
        assert payment.payment_notes == "paid extra"

    def test_negative_amount(self, payments_2025: list[QuarterlyPayment]):
        with pytest.raises(ValidationError):
            payments_2025[0].record_payment(Decimal("-1"))


class TestPaymentSummary:
    """Yearly totals."""

    def test_summary(
        self, scheduler: QuarterlyPaymentScheduler, payments_2025: list[QuarterlyPayment]
    ):
        scheduler.record_payment(payments_2025[0], Decimal("2888.25"), paid_on=date(2025, 4, 1))

        summary = scheduler.payment_summary(2025, as_of=date(2025, 7, 1))

        assert summary.total_estimated == Decimal("11553")
        assert summary.total_paid == Decimal("2888.25")
        assert summary.remaining == Decimal("8664.75")
        assert summary.quarters_paid == 1
        assert summary.quarters_overdue == 1
        assert summary.progress == Decimal("0.25")
        assert summary.has_overdue is True
        assert summary.is_fully_paid is False

    def test_fully_paid(
        self, scheduler: QuarterlyPaymentScheduler, payments_2025: list[QuarterlyPayment]
    ):
        for payment in payments_2025:
            scheduler.record_payment(payment, payment.estimated_amount)

        summary = scheduler.payment_summary(2025, as_of=date(2026, 2, 1))
        assert summary.is_fully_paid is True
        assert summary.has_overdue is False
        assert summary.remaining == Decimal("0")
        assert summary.progress == Decimal("1")

    def test_empty_year(self, scheduler: QuarterlyPaymentScheduler):
        summary = scheduler.payment_summary(2030)
        assert summary.total_estimated == Decimal("0")
        assert summary.progress == Decimal("0")
        assert summary.is_fully_paid is False


class TestLookups:
    """Unpaid, overdue and upcoming payments."""

    def test_next_upcoming(
        self, scheduler: QuarterlyPaymentScheduler, payments_2025: list[QuarterlyPayment]
    ):
        upcoming = scheduler.next_upcoming_payment(as_of=date(2025, 5, 1))
        assert upcoming is not None
        assert upcoming.quarter == 2

    def test_overdue(
        self, scheduler: QuarterlyPaymentScheduler, payments_2025: list[QuarterlyPayment]
    ):
        scheduler.record_payment(payments_2025[0], Decimal("2888.25"))
        overdue = scheduler.fetch_overdue_payments(as_of=date(2025, 10, 1))
        assert [p.quarter for p in overdue] == [2, 3]

    def test_unpaid(
        self, scheduler: QuarterlyPaymentScheduler, payments_2025: list[QuarterlyPayment]
    ):
        scheduler.record_payment(payments_2025[1], Decimal("2888.25"))
        assert [p.quarter for p in scheduler.fetch_unpaid_payments()] == [1, 3, 4]

    def test_reminder_dates(self, payments_2025: list[QuarterlyPayment]):
        q2 = payments_2025[1]
        assert QuarterlyPaymentScheduler.reminder_dates(q2, as_of=date(2025, 6, 5)) == [
            date(2025, 6, 8),
            date(2025, 6, 14),
            date(2025, 6, 15),
        ]

    def test_reminder_on_as_of_date_is_dropped(self, payments_2025: list[QuarterlyPayment]):
        q2 = payments_2025[1]
        assert QuarterlyPaymentScheduler.reminder_dates(q2, as_of=date(2025, 6, 8)) == [
            date(2025, 6, 14),
            date(2025, 6, 15),
        ]
        assert QuarterlyPaymentScheduler.reminder_dates(q2, as_of=date(2025, 6, 15)) == []

    def test_no_reminders_once_paid(self, payments_2025: list[QuarterlyPayment]):
        q2 = payments_2025[1]
        q2.record_payment(q2.estimated_amount)
        assert QuarterlyPaymentScheduler.reminder_dates(q2, as_of=date(2025, 6, 5)) == []

    def test_in_memory_repository_satisfies_protocol(self):
        assert isinstance(InMemoryPaymentRepository(), PaymentRepository)


class TestQuarterlyPayment:
    """Payment record behaviour."""

    @pytest.fixture
    def q1(self) -> QuarterlyPayment:
        return QuarterlyPayment.create(2025, 1, Decimal("1000"))

    def test_names(self, q1: QuarterlyPayment):
        assert q1.quarter_name == "Q1"
        assert q1.full_name == "Q1 2025"

    def test_standard_due_dates(self):
        assert QuarterlyPayment.standard_due_dates(2025) == {
            1: date(2025, 4, 15),
            2: date(2025, 6, 15),
            3: date(2025, 9, 15),
            4: date(2026, 1, 15),
        }

    @pytest.mark.parametrize(
        "as_of,status",
        [
            (date(2025, 1, 1), PaymentStatus.SCHEDULED),
            (date(2025, 3, 20), PaymentStatus.UPCOMING),
            (date(2025, 4, 1), PaymentStatus.DUE_SOON),
            (date(2025, 4, 15), PaymentStatus.DUE_SOON),
            (date(2025, 4, 16), PaymentStatus.OVERDUE),
        ],
    )
    def test_status(self, q1: QuarterlyPayment, as_of: date, status: PaymentStatus):
        assert q1.status(as_of) == status

    def test_paid_status_wins(self, q1: QuarterlyPayment):
        q1.record_payment(Decimal("1000"), paid_on=date(2025, 5, 1))
        assert q1.status(date(2025, 6, 1)) == PaymentStatus.PAID
        assert q1.is_overdue(date(2025, 6, 1)) is False

    def test_status_display_name(self):
        assert PaymentStatus.DUE_SOON.display_name == "Due Soon"

    def test_days_until_due(self, q1: QuarterlyPayment):
        assert q1.days_until_due(date(2025, 4, 5)) == 10
        assert q1.days_until_due(date(2025, 4, 20)) == -5

    def test_update_estimate(self, q1: QuarterlyPayment):
        q1.update_estimate(Decimal("1200"), Decimal("1000"), Decimal("200"))
        assert q1.estimated_amount == Decimal("1200")
        assert q1.federal_payment == Decimal("1000")
        assert q1.state_payment == Decimal("200")

    def test_update_estimate_below_paid_amount(self, q1: QuarterlyPayment):
        q1.record_payment(Decimal("600"))
        assert q1.is_paid is False

        q1.update_estimate(Decimal("500"))
        assert q1.is_paid is True

        q1.update_estimate(Decimal("900"))
        assert q1.is_paid is False

    def test_update_estimate_zero_without_payment_stays_unpaid(self, q1: QuarterlyPayment):
        q1.update_estimate(Decimal("0"))
        assert q1.is_paid is False

    def test_create_rejects_bad_quarter(self):
        with pytest.raises(ValidationError):
            QuarterlyPayment.create(2025, 5, Decimal("100"))

    def test_model_rejects_bad_quarter(self):
        with pytest.raises(PydanticValidationError):
            QuarterlyPayment(
                tax_year=2025, quarter=0, due_date=date(2025, 4, 15),
                estimated_amount=Decimal("100"),
            )
