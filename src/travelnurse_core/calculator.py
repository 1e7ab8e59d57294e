"""Total tax and quarterly estimate calculations.

TaxCalculationEngine composes the bracket engine, the state resolver and
the self-employment calculator into a single breakdown. Every step is
recorded in the breakdown's audit log and emitted through structlog.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

import structlog

from .brackets import TaxBracketEngine
from .config import DeductionApportionment, TravelNurseConfig
from .models import (
    AuditEntry,
    MultiStateTaxResult,
    QuarterlyEstimate,
    TaxableIncomeBreakdown,
)
from .self_employment import SelfEmploymentTaxCalculator
from .state_tax import StateLike, StateTaxResolver
from .tax_tables import get_tax_tables_version
from .utils import ZERO, Number, floor_cents, money_context, to_decimal

logger = structlog.get_logger()


def split_into_quarters(total: Decimal) -> tuple[Decimal, Decimal, Decimal, Decimal]:
    """Split an annual amount into four installments.

    Q1-Q3 get total / 4 truncated to the cent; Q4 takes whatever is left,
    so the four always add back up to ``total`` exactly.
    """
    with money_context(total):
        base = floor_cents(total / 4)
        return base, base, base, total - base * 3


class TaxCalculationEngine:
    """
    Federal + state + self-employment tax for a year of income.

    All amounts are Decimal. Deductions larger than gross income clamp
    taxable income to 0 instead of producing negative tax.
    """

    def __init__(
        self,
        config: Optional[TravelNurseConfig] = None,
        bracket_engine: Optional[TaxBracketEngine] = None,
        state_resolver: Optional[StateTaxResolver] = None,
        self_employment: Optional[SelfEmploymentTaxCalculator] = None,
        methodology_version: Optional[str] = None,
    ):
        self.config = config or TravelNurseConfig()
        self.bracket_engine = bracket_engine or TaxBracketEngine()
        self.state_resolver = state_resolver or StateTaxResolver(
            self.bracket_engine, self.config
        )
        self.self_employment = self_employment or SelfEmploymentTaxCalculator()
        self.methodology_version = methodology_version or get_tax_tables_version()
        self._audit_log: list[AuditEntry] = []

    def _log_step(
        self,
        step: str,
        input_value: str,
        output_value: str,
        source: str,
        notes: Optional[str] = None,
    ) -> None:
        """Add an entry to the audit log."""
        entry = AuditEntry(
            step=step,
            input_value=input_value,
            output_value=output_value,
            source=source,
            notes=notes,
        )
        self._audit_log.append(entry)
        logger.info(
            "tax_calculation_step",
            step=step,
            input=input_value,
            output=output_value,
            source=source,
        )

    def resolve_tax_year(self, tax_year: Optional[int] = None) -> int:
        """Explicit year, else the configured year, else the current year."""
        if tax_year is not None:
            return tax_year
        if self.config.tax_year is not None:
            return self.config.tax_year
        return date.today().year

    def federal_marginal_rate(self, taxable_income: Number) -> Decimal:
        return self.bracket_engine.marginal_rate(taxable_income)

    def calculate_total_tax(
        self,
        gross_income: Number,
        deductions: Number,
        state: StateLike,
        is_self_employed: bool = False,
        tax_year: Optional[int] = None,
    ) -> TaxableIncomeBreakdown:
        """
        Compute the full tax breakdown.

        Args:
            gross_income: Annual gross income
            deductions: Total deductions subtracted before any tax
            state: USState or two-letter code of the taxing state
            is_self_employed: Whether SE tax applies to taxable income
            tax_year: Year the breakdown is for (informational)

        Returns:
            TaxableIncomeBreakdown with audit log and warnings
        """
        self._audit_log = []
        warnings: list[str] = []

        gross = to_decimal(gross_income)
        deduction_amount = max(ZERO, to_decimal(deductions))
        resolved_state = self.state_resolver.resolve_state(state)

        with money_context(gross, deduction_amount):
            taxable = max(ZERO, gross - deduction_amount)
        self._log_step(
            step="taxable_income",
            input_value=f"gross={gross}, deductions={deduction_amount}",
            output_value=str(taxable),
            source="max(0, gross - deductions)",
        )
        if gross <= 0:
            warnings.append("No gross income; all taxes are zero.")
        elif deduction_amount > gross:
            warnings.append(
                f"Deductions ({deduction_amount}) exceed gross income ({gross}); "
                "taxable income is zero."
            )

        federal_tax = self.bracket_engine.calculate_tax(taxable)
        self._log_step(
            step="federal_tax",
            input_value=str(taxable),
            output_value=str(federal_tax),
            source=f"Federal brackets {self.methodology_version}",
        )

        state_tax = self.state_resolver.calculate(taxable, resolved_state)
        self._log_step(
            step="state_tax",
            input_value=f"{taxable} ({resolved_state.value})",
            output_value=str(state_tax),
            source=f"State tax table {resolved_state.value}",
            notes="No state income tax" if resolved_state.has_no_income_tax else None,
        )

        se_tax = self.self_employment.calculate(taxable) if is_self_employed else ZERO
        self._log_step(
            step="self_employment_tax",
            input_value=str(taxable) if is_self_employed else "not self-employed",
            output_value=str(se_tax),
            source="Schedule SE: 92.35% x (12.4% SS capped + 2.9% Medicare)",
        )

        with money_context(federal_tax, state_tax, se_tax):
            total_tax = federal_tax + state_tax + se_tax
        self._log_step(
            step="total_tax",
            input_value=f"federal={federal_tax}, state={state_tax}, se={se_tax}",
            output_value=str(total_tax),
            source="federal + state + self-employment",
        )

        return TaxableIncomeBreakdown(
            gross_income=gross,
            deductions=deduction_amount,
            taxable_income=taxable,
            federal_tax=federal_tax,
            state_tax=state_tax,
            self_employment_tax=se_tax,
            total_tax=total_tax,
            marginal_tax_rate=self.federal_marginal_rate(taxable),
            state=resolved_state,
            is_self_employed=is_self_employed,
            tax_year=tax_year,
            audit_log=self._audit_log.copy(),
            methodology_version=self.methodology_version,
            warnings=warnings,
        )

    def calculate_quarterly_estimate(
        self,
        gross_income: Number,
        deductions: Number,
        state: StateLike,
        is_self_employed: bool = False,
        tax_year: Optional[int] = None,
    ) -> QuarterlyEstimate:
        """Four installments of the total tax, due on the IRS dates for the year."""
        year = self.resolve_tax_year(tax_year)
        breakdown = self.calculate_total_tax(
            gross_income, deductions, state, is_self_employed, tax_year=year
        )
        q1, q2, q3, q4 = split_into_quarters(breakdown.total_tax)
        logger.info(
            "quarterly_estimate_calculated",
            tax_year=year,
            total_tax=str(breakdown.total_tax),
            installment=str(q1),
            final_installment=str(q4),
        )
        return QuarterlyEstimate(tax_year=year, q1=q1, q2=q2, q3=q3, q4=q4)

    def calculate_multi_state_tax(
        self,
        allocations: Iterable[tuple[StateLike, Number]],
        total_deductions: Number = 0,
        apportionment: Optional[DeductionApportionment] = None,
    ) -> MultiStateTaxResult:
        """Federal tax on combined income plus each state's tax on its share."""
        pairs = [(state, to_decimal(income)) for state, income in allocations]
        policy = apportionment or self.config.tax.deduction_apportionment

        deductions = max(ZERO, to_decimal(total_deductions))
        with money_context(deductions, *(income for _, income in pairs)):
            total_income = sum((max(ZERO, income) for _, income in pairs), ZERO)
            taxable = max(ZERO, total_income - deductions)

        return MultiStateTaxResult(
            total_income=total_income,
            total_deductions=deductions,
            taxable_income=taxable,
            federal_tax=self.bracket_engine.calculate_tax(taxable),
            state_breakdown=self.state_resolver.calculate_multi_state(
                pairs, deductions, policy
            ),
            apportionment=policy,
        )
