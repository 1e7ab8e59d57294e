"""Progressive marginal-bracket tax calculation.

The same engine serves the federal table and any state with a progressive
table. Tables are validated the first time the engine sees them; a
malformed table is a defect in the constants, so it raises
ConfigurationError instead of producing a number.
"""

from decimal import Decimal
from typing import Optional, Sequence

import structlog

from .exceptions import ConfigurationError
from .tax_tables import FEDERAL_BRACKETS_2024, TaxBracket
from .utils import ZERO, Number, money_context, round_dollars, to_decimal

logger = structlog.get_logger()


def validate_brackets(brackets: Sequence[TaxBracket], name: str = "brackets") -> None:
    """Check that a bracket table is well formed.

    A valid table is non-empty, starts at 0, has contiguous ascending
    bounds, non-decreasing rates between 0 and 1, and only the last bracket
    may be unbounded.

    Raises:
        ConfigurationError: Describing the first problem found.
    """
    if not brackets:
        raise ConfigurationError(
            "Bracket table is empty",
            config_key=name,
            expected="At least one bracket",
        )

    if brackets[0].lower_bound != 0:
        raise ConfigurationError(
            "First bracket must start at 0",
            config_key=name,
            expected="lower_bound == 0",
            actual=str(brackets[0].lower_bound),
        )

    previous: Optional[TaxBracket] = None
    for index, bracket in enumerate(brackets):
        if not (0 <= bracket.rate <= 1):
            raise ConfigurationError(
                "Bracket rate must be between 0 and 1",
                config_key=name,
                expected="0 <= rate <= 1",
                actual=str(bracket.rate),
            )

        is_last = index == len(brackets) - 1
        if bracket.upper_bound is None and not is_last:
            raise ConfigurationError(
                "Only the last bracket may be unbounded",
                config_key=name,
                actual=f"bracket {index} has no upper bound",
            )
        if bracket.upper_bound is not None and bracket.upper_bound <= bracket.lower_bound:
            raise ConfigurationError(
                "Bracket bounds must be ascending",
                config_key=name,
                expected="upper_bound > lower_bound",
                actual=f"{bracket.lower_bound} -> {bracket.upper_bound}",
            )

        if previous is not None:
            if bracket.lower_bound != previous.upper_bound:
                raise ConfigurationError(
                    "Brackets must be contiguous",
                    config_key=name,
                    expected=f"lower_bound == {previous.upper_bound}",
                    actual=str(bracket.lower_bound),
                )
            if bracket.rate < previous.rate:
                raise ConfigurationError(
                    "Bracket rates must not decrease",
                    config_key=name,
                    expected=f"rate >= {previous.rate}",
                    actual=str(bracket.rate),
                )
        previous = bracket


class TaxBracketEngine:
    """Progressive tax over an ordered bracket table.

    Tax is the sum over brackets of the income falling inside each bracket
    times that bracket's rate, rounded to whole dollars (half up).
    """

    def __init__(self, default_brackets: Sequence[TaxBracket] = FEDERAL_BRACKETS_2024):
        self.default_brackets = tuple(default_brackets)
        self._validated: set[tuple[TaxBracket, ...]] = set()
        self._ensure_valid(self.default_brackets)

    def _ensure_valid(self, brackets: tuple[TaxBracket, ...]) -> None:
        if brackets in self._validated:
            return
        validate_brackets(brackets)
        self._validated.add(brackets)

    def _resolve(self, brackets: Optional[Sequence[TaxBracket]]) -> tuple[TaxBracket, ...]:
        if brackets is None:
            return self.default_brackets
        table = tuple(brackets)
        self._ensure_valid(table)
        return table

    def calculate_tax(
        self,
        taxable_income: Number,
        brackets: Optional[Sequence[TaxBracket]] = None,
    ) -> Decimal:
        """Tax owed on ``taxable_income``; 0 for income at or below 0."""
        table = self._resolve(brackets)
        income = to_decimal(taxable_income)
        if income <= 0:
            return ZERO

        with money_context(income):
            tax = ZERO
            for bracket in table:
                if income <= bracket.lower_bound:
                    break
                tax += bracket.taxable_portion(income) * bracket.rate
            result = round_dollars(tax)
        logger.debug("bracket_tax_calculated", income=str(income), tax=str(result))
        return result

    def marginal_rate(
        self,
        taxable_income: Number,
        brackets: Optional[Sequence[TaxBracket]] = None,
    ) -> Decimal:
        """Rate of the bracket the last dollar of income falls into."""
        table = self._resolve(brackets)
        income = to_decimal(taxable_income)
        if income <= 0:
            return ZERO

        rate = ZERO
        for bracket in table:
            if income > bracket.lower_bound:
                rate = bracket.rate
            else:
                break
        return rate
