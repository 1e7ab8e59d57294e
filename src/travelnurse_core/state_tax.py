"""State income tax resolution and multi-state apportionment."""

from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

import structlog

from .brackets import TaxBracketEngine
from .config import DeductionApportionment, TravelNurseConfig
from .exceptions import ConfigurationError
from .models.assignments import Assignment, AssignmentStatus
from .models.tax import StateBreakdown
from .states import USState
from .tax_tables import TaxBracket, get_state_brackets
from .utils import ZERO, Number, money_context, safe_divide, to_decimal

logger = structlog.get_logger()

StateLike = Union[USState, str]


class StateTaxResolver:
    """
    Maps a state to its income tax.

    No-income-tax states short-circuit to 0. California and New York use
    progressive tables; every other state is a single flat bracket at its
    top rate. The bracket math itself is delegated to TaxBracketEngine.
    """

    def __init__(
        self,
        bracket_engine: Optional[TaxBracketEngine] = None,
        config: Optional[TravelNurseConfig] = None,
    ):
        self.bracket_engine = bracket_engine or TaxBracketEngine()
        self.config = config or TravelNurseConfig()

    @staticmethod
    def resolve_state(state: StateLike) -> USState:
        return USState.from_code(state)

    def has_state_income_tax(self, state: StateLike) -> bool:
        return not self.resolve_state(state).has_no_income_tax

    def brackets_for(self, state: StateLike) -> tuple[TaxBracket, ...]:
        """Bracket table for a state; empty for no-tax states.

        Raises:
            ConfigurationError: If the state levies income tax but has no table.
        """
        resolved = self.resolve_state(state)
        brackets = get_state_brackets(resolved)
        if brackets is None:
            raise ConfigurationError(
                f"No income tax table for {resolved.full_name}",
                config_key="STATE_TAX_RATES",
                expected="A rate or bracket table for every taxing state",
                actual=resolved.value,
            )
        return brackets

    def calculate(self, taxable_income: Number, state: StateLike) -> Decimal:
        """State income tax on ``taxable_income``."""
        resolved = self.resolve_state(state)
        if resolved.has_no_income_tax:
            return ZERO

        income = to_decimal(taxable_income)
        if income <= 0:
            return ZERO

        return self.bracket_engine.calculate_tax(income, self.brackets_for(resolved))

    def calculate_multi_state(
        self,
        allocations: Iterable[tuple[StateLike, Number]],
        total_deductions: Number = 0,
        apportionment: Optional[DeductionApportionment] = None,
    ) -> dict[USState, Decimal]:
        """Tax each state on the income earned there.

        A state listed more than once has its incomes added together. How
        ``total_deductions`` reaches each state depends on ``apportionment``
        (the configured policy when not given).
        """
        policy = apportionment or self.config.tax.deduction_apportionment
        deductions = max(ZERO, to_decimal(total_deductions))

        amounts = [
            (self.resolve_state(state), max(ZERO, to_decimal(income)))
            for state, income in allocations
        ]

        results: dict[USState, Decimal] = {}
        with money_context(deductions, *(amount for _, amount in amounts)):
            income_by_state: dict[USState, Decimal] = {}
            for state, amount in amounts:
                income_by_state[state] = income_by_state.get(state, ZERO) + amount

            total_income = sum(income_by_state.values(), ZERO)

            for state, income in income_by_state.items():
                if policy == DeductionApportionment.PRORATE:
                    deduction = deductions * safe_divide(income, total_income)
                elif policy == DeductionApportionment.FULL:
                    deduction = deductions
                else:
                    deduction = ZERO
                taxable = max(ZERO, income - deduction)
                results[state] = self.calculate(taxable, state)

        logger.info(
            "multi_state_tax_calculated",
            states=[s.value for s in results],
            apportionment=policy.value,
            total_income=str(total_income),
        )
        return results

    def state_breakdowns(self, assignments: Sequence[Assignment]) -> list[StateBreakdown]:
        """Per-state earnings from assignments, largest earnings first.

        Cancelled assignments and assignments without a state are skipped.
        """
        by_state: dict[USState, StateBreakdown] = {}
        for assignment in assignments:
            if assignment.state is None or assignment.status == AssignmentStatus.CANCELLED:
                continue

            summary = by_state.setdefault(
                assignment.state, StateBreakdown(state=assignment.state)
            )
            weeks = assignment.duration_weeks
            if assignment.pay is not None:
                summary.earnings += assignment.pay.weekly_gross * weeks
                summary.taxable_earnings += assignment.pay.weekly_taxable * weeks
                summary.stipends += assignment.pay.weekly_stipends * weeks
            summary.weeks_worked += weeks
            summary.days_worked += assignment.duration_days
            summary.assignment_count += 1

        return sorted(by_state.values(), key=lambda s: s.earnings, reverse=True)
