"""Tests for the total tax and quarterly estimate engine."""

from datetime import date
from decimal import Decimal

import pytest
from structlog.testing import capture_logs

from travelnurse_core import (
    DeductionApportionment,
    QuarterlyEstimate,
    TaxableIncomeBreakdown,
    TaxCalculationEngine,
    TravelNurseConfig,
    USState,
    split_into_quarters,
)


@pytest.fixture
def engine(config: TravelNurseConfig) -> TaxCalculationEngine:
    return TaxCalculationEngine(config=config)


class TestTotalTax:
    """calculate_total_tax composition."""

    def test_returns_breakdown(self, engine: TaxCalculationEngine):
        result = engine.calculate_total_tax(Decimal("75000"), Decimal("0"), USState.TEXAS)

        assert isinstance(result, TaxableIncomeBreakdown)
        assert result.taxable_income == Decimal("75000")
        assert result.federal_tax == Decimal("11553")
        assert result.state_tax == Decimal("0")
        assert result.self_employment_tax == Decimal("0")
        assert result.total_tax == Decimal("11553")

    def test_derived_rates(self, engine: TaxCalculationEngine):
        result = engine.calculate_total_tax(Decimal("75000"), Decimal("0"), "TX")

        assert result.effective_tax_rate == Decimal("11553") / Decimal("75000")
        assert result.take_home_pay == Decimal("63447")
        assert result.marginal_tax_rate == Decimal("0.22")

    def test_self_employed_adds_se_tax_on_taxable_income(self, engine: TaxCalculationEngine):
        result = engine.calculate_total_tax(
            Decimal("60000"), Decimal("10000"), USState.TEXAS, is_self_employed=True
        )

        assert result.taxable_income == Decimal("50000")
        assert result.federal_tax == Decimal("6053")
        assert result.self_employment_tax == Decimal("7065")
        assert result.total_tax == Decimal("13118")

    def test_state_tax_included(self, engine: TaxCalculationEngine):
        result = engine.calculate_total_tax(Decimal("50000"), Decimal("0"), USState.CALIFORNIA)

        assert result.state_tax == Decimal("1664")
        assert result.total_tax == result.federal_tax + Decimal("1664")

    def test_total_is_sum_of_components(self, engine: TaxCalculationEngine):
        result = engine.calculate_total_tax(
            Decimal("142000"), Decimal("14600"), USState.NEW_YORK, is_self_employed=True
        )
        assert result.total_tax == (
            result.federal_tax + result.state_tax + result.self_employment_tax
        )

    def test_deductions_exceeding_gross_zero_everything(self, engine: TaxCalculationEngine):
        result = engine.calculate_total_tax(
            Decimal("10000"), Decimal("20000"), USState.CALIFORNIA, is_self_employed=True
        )

        assert result.taxable_income == Decimal("0")
        assert result.federal_tax == Decimal("0")
        assert result.state_tax == Decimal("0")
        assert result.self_employment_tax == Decimal("0")
        assert result.total_tax == Decimal("0")
        assert result.take_home_pay == Decimal("10000")
        assert any("exceed" in w for w in result.warnings)

    def test_zero_gross_has_zero_effective_rate(self, engine: TaxCalculationEngine):
        result = engine.calculate_total_tax(Decimal("0"), Decimal("0"), USState.OHIO)

        assert result.effective_tax_rate == Decimal("0")
        assert result.total_tax == Decimal("0")
        assert result.warnings

    def test_audit_log_populated(self, engine: TaxCalculationEngine):
        result = engine.calculate_total_tax(Decimal("75000"), Decimal("5000"), USState.TEXAS)

        step_names = [entry.step for entry in result.audit_log]
        assert step_names == [
            "taxable_income",
            "federal_tax",
            "state_tax",
            "self_employment_tax",
            "total_tax",
        ]

    def test_audit_log_resets_between_calls(self, engine: TaxCalculationEngine):
        engine.calculate_total_tax(Decimal("75000"), Decimal("0"), USState.TEXAS)
        second = engine.calculate_total_tax(Decimal("30000"), Decimal("0"), USState.TEXAS)
        assert len(second.audit_log) == 5

    def test_methodology_version_included(self, engine: TaxCalculationEngine):
        result = engine.calculate_total_tax(Decimal("75000"), Decimal("0"), USState.TEXAS)
        assert "2024" in result.methodology_version

    def test_steps_are_logged(self, engine: TaxCalculationEngine):
        with capture_logs() as logs:
            engine.calculate_total_tax(Decimal("75000"), Decimal("0"), USState.TEXAS)

        steps = [log["step"] for log in logs if log["event"] == "tax_calculation_step"]
        assert "federal_tax" in steps

    def test_huge_income_keeps_every_digit(self, engine: TaxCalculationEngine):
        result = engine.calculate_total_tax(Decimal("1e30"), 0, "CA", True)

        # 0.37 * 1e30 - 41812.25
        assert result.federal_tax == Decimal("36" + "9" * 23 + "58188")
        # 0.9235 * 0.029 * 1e30 + 168600 * 0.124
        assert result.self_employment_tax == Decimal("267815" + "0" * 18 + "20906")
        assert result.total_tax == result.total_tax.to_integral_value()
        assert result.take_home_pay > 0


class TestQuarterlyEstimate:
    """Quarterly split and due dates."""

    def test_even_split(self, engine: TaxCalculationEngine):
        estimate = engine.calculate_quarterly_estimate(
            Decimal("75000"), Decimal("0"), USState.TEXAS, tax_year=2025
        )

        assert isinstance(estimate, QuarterlyEstimate)
        assert estimate.q1 == Decimal("2888.25")
        assert estimate.q4 == Decimal("2888.25")
        assert estimate.total_annual == Decimal("11553")

    def test_due_dates(self, engine: TaxCalculationEngine):
        estimate = engine.calculate_quarterly_estimate(
            Decimal("75000"), Decimal("0"), USState.TEXAS, tax_year=2025
        )

        assert estimate.q1_due_date == date(2025, 4, 15)
        assert estimate.q2_due_date == date(2025, 6, 15)
        assert estimate.q3_due_date == date(2025, 9, 15)
        assert estimate.q4_due_date == date(2026, 1, 15)

    def test_uses_configured_tax_year(self, engine: TaxCalculationEngine):
        estimate = engine.calculate_quarterly_estimate(
            Decimal("75000"), Decimal("0"), USState.TEXAS
        )
        assert estimate.tax_year == 2025

    def test_falls_back_to_current_year(self):
        engine = TaxCalculationEngine(config=TravelNurseConfig(env="test"))
        assert engine.resolve_tax_year() == date.today().year

    def test_sum_equals_total_tax(self, engine: TaxCalculationEngine):
        for gross in ("48123", "91777", "250001"):
            breakdown = engine.calculate_total_tax(
                Decimal(gross), Decimal("14600"), USState.CALIFORNIA, True
            )
            estimate = engine.calculate_quarterly_estimate(
                Decimal(gross), Decimal("14600"), USState.CALIFORNIA, True, tax_year=2025
            )
            assert estimate.total_annual == breakdown.total_tax

    def test_huge_income_splits_without_error(self, engine: TaxCalculationEngine):
        estimate = engine.calculate_quarterly_estimate(
            Decimal("1e30"), Decimal("0"), USState.TEXAS, tax_year=2025
        )
        assert estimate.q1 == estimate.q4
        assert estimate.total_annual == Decimal("36" + "9" * 23 + "58188")

    def test_installments(self, engine: TaxCalculationEngine):
        estimate = engine.calculate_quarterly_estimate(
            Decimal("30000"), Decimal("0"), USState.TEXAS, tax_year=2025
        )
        installments = estimate.installments()
        assert [q for q, _, _ in installments] == [1, 2, 3, 4]
        assert installments[3] == (4, Decimal("842"), date(2026, 1, 15))


class TestSplitIntoQuarters:
    """Remainder handling."""

    def test_remainder_goes_to_q4(self):
        assert split_into_quarters(Decimal("100.01")) == (
            Decimal("25.00"),
            Decimal("25.00"),
            Decimal("25.00"),
            Decimal("25.01"),
        )

    def test_tiny_amount(self):
        q1, q2, q3, q4 = split_into_quarters(Decimal("0.03"))
        assert q1 == q2 == q3 == Decimal("0")
        assert q4 == Decimal("0.03")

    def test_zero(self):
        assert sum(split_into_quarters(Decimal("0"))) == Decimal("0")


class TestMultiStateTotal:
    """Federal on combined income plus per-state tax."""

    def test_combined(self, engine: TaxCalculationEngine):
        result = engine.calculate_multi_state_tax(
            [(USState.TEXAS, Decimal("50000")), (USState.CALIFORNIA, Decimal("50000"))],
            total_deductions=Decimal("20000"),
        )

        assert result.total_income == Decimal("100000")
        assert result.taxable_income == Decimal("80000")
        assert result.federal_tax == Decimal("12653")
        assert result.state_breakdown[USState.CALIFORNIA] == Decimal("1064")
        assert result.total_state_tax == Decimal("1064")
        assert result.total_tax == Decimal("13717")
        assert result.apportionment == DeductionApportionment.PRORATE

    def test_policy_from_config(self):
        config = TravelNurseConfig(env="test")
        config.tax.deduction_apportionment = DeductionApportionment.NONE
        engine = TaxCalculationEngine(config=config)

        result = engine.calculate_multi_state_tax(
            [("CA", Decimal("50000"))], total_deductions=Decimal("20000")
        )
        assert result.state_breakdown[USState.CALIFORNIA] == Decimal("1664")
        assert result.apportionment == DeductionApportionment.NONE
