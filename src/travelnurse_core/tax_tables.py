"""Fixed tax tables for 2024 single-filer calculations.

This module holds every constant the engines read: federal brackets,
self-employment rates, state rate tables, IRS quarterly due dates, GSA
per-diem defaults and IRS standard mileage rates.

Sources:
- Federal brackets: IRS Rev. Proc. 2023-34 (tax year 2024, single)
- Self-employment tax: IRS Schedule SE (2024)
- Mileage: IRS standard mileage rate notices 2020-2024
- GSA: FY2024 standard CONUS per-diem rates

Updated: 2024 tax year
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from .states import NO_INCOME_TAX_STATES, USState


# =============================================================================
# VERSION TRACKING
# =============================================================================

TAX_TABLES_VERSION = "2024-single"
TAX_TABLES_YEAR = 2024


def get_tax_tables_version() -> str:
    """Return current tax table version."""
    return TAX_TABLES_VERSION


# =============================================================================
# BRACKETS
# =============================================================================


@dataclass(frozen=True)
class TaxBracket:
    """One marginal bracket. ``upper_bound`` of None means unbounded."""

    lower_bound: Decimal
    upper_bound: Optional[Decimal]
    rate: Decimal

    def taxable_portion(self, income: Decimal) -> Decimal:
        """Part of ``income`` that falls inside this bracket."""
        if income <= self.lower_bound:
            return Decimal("0")
        top = income if self.upper_bound is None else min(income, self.upper_bound)
        return top - self.lower_bound


def build_brackets(
    thresholds: list[tuple[str, str]], top_rate: str
) -> tuple[TaxBracket, ...]:
    """Build a bracket table from ``(upper_bound, rate)`` steps.

    The first bracket starts at 0, each following bracket starts where the
    previous one ends, and ``top_rate`` applies above the last threshold.
    """
    brackets = []
    lower = Decimal("0")
    for upper, rate in thresholds:
        brackets.append(TaxBracket(lower, Decimal(upper), Decimal(rate)))
        lower = Decimal(upper)
    brackets.append(TaxBracket(lower, None, Decimal(top_rate)))
    return tuple(brackets)


def flat_brackets(rate: Decimal) -> tuple[TaxBracket, ...]:
    """Single unbounded bracket for a flat-rate state."""
    return (TaxBracket(Decimal("0"), None, rate),)


# =============================================================================
# FEDERAL - 2024 SINGLE FILER
# =============================================================================

FEDERAL_BRACKETS_2024 = build_brackets(
    [
        ("11600", "0.10"),
        ("47150", "0.12"),
        ("100525", "0.22"),
        ("191950", "0.24"),
        ("243725", "0.32"),
        ("609350", "0.35"),
    ],
    top_rate="0.37",
)


# =============================================================================
# SELF-EMPLOYMENT TAX
# =============================================================================

SE_MINIMUM_EARNINGS = Decimal("400")
SE_NET_EARNINGS_FACTOR = Decimal("0.9235")
SE_SOCIAL_SECURITY_RATE = Decimal("0.124")
SE_MEDICARE_RATE = Decimal("0.029")
SOCIAL_SECURITY_WAGE_BASE_2024 = Decimal("168600")


# =============================================================================
# STATE INCOME TAX
# =============================================================================
# Top marginal rates. States without a progressive table below are taxed
# as a single flat bracket at this rate.

STATE_TAX_RATES: dict[USState, Decimal] = {
    USState.ALABAMA: Decimal("0.05"),
    USState.ARIZONA: Decimal("0.0259"),
    USState.ARKANSAS: Decimal("0.047"),
    USState.CALIFORNIA: Decimal("0.1330"),
    USState.COLORADO: Decimal("0.044"),
    USState.CONNECTICUT: Decimal("0.0699"),
    USState.DELAWARE: Decimal("0.066"),
    USState.GEORGIA: Decimal("0.0549"),
    USState.HAWAII: Decimal("0.11"),
    USState.IDAHO: Decimal("0.058"),
    USState.ILLINOIS: Decimal("0.0495"),
    USState.INDIANA: Decimal("0.0315"),
    USState.IOWA: Decimal("0.06"),
    USState.KANSAS: Decimal("0.057"),
    USState.KENTUCKY: Decimal("0.04"),
    USState.LOUISIANA: Decimal("0.0425"),
    USState.MAINE: Decimal("0.0715"),
    USState.MARYLAND: Decimal("0.0575"),
    USState.MASSACHUSETTS: Decimal("0.05"),
    USState.MICHIGAN: Decimal("0.0425"),
    USState.MINNESOTA: Decimal("0.0985"),
    USState.MISSISSIPPI: Decimal("0.05"),
    USState.MISSOURI: Decimal("0.048"),
    USState.MONTANA: Decimal("0.059"),
    USState.NEBRASKA: Decimal("0.0664"),
    USState.NEW_JERSEY: Decimal("0.1075"),
    USState.NEW_MEXICO: Decimal("0.059"),
    USState.NEW_YORK: Decimal("0.109"),
    USState.NORTH_CAROLINA: Decimal("0.0475"),
    USState.NORTH_DAKOTA: Decimal("0.029"),
    USState.OHIO: Decimal("0.0399"),
    USState.OKLAHOMA: Decimal("0.0475"),
    USState.OREGON: Decimal("0.099"),
    USState.PENNSYLVANIA: Decimal("0.0307"),
    USState.RHODE_ISLAND: Decimal("0.0599"),
    USState.SOUTH_CAROLINA: Decimal("0.064"),
    USState.UTAH: Decimal("0.0465"),
    USState.VERMONT: Decimal("0.0875"),
    USState.VIRGINIA: Decimal("0.0575"),
    USState.WEST_VIRGINIA: Decimal("0.0512"),
    USState.WISCONSIN: Decimal("0.0765"),
    USState.DISTRICT_OF_COLUMBIA: Decimal("0.1075"),
}

CALIFORNIA_BRACKETS = build_brackets(
    [
        ("10099", "0.01"),
        ("23942", "0.02"),
        ("37788", "0.04"),
        ("52455", "0.06"),
        ("66295", "0.08"),
        ("338639", "0.093"),
        ("406364", "0.103"),
        ("677275", "0.113"),
    ],
    top_rate="0.123",
)

NEW_YORK_BRACKETS = build_brackets(
    [
        ("8500", "0.04"),
        ("11700", "0.045"),
        ("13900", "0.0525"),
        ("80650", "0.0585"),
        ("215400", "0.0625"),
        ("1077550", "0.0685"),
    ],
    top_rate="0.103",
)

PROGRESSIVE_STATE_BRACKETS: dict[USState, tuple[TaxBracket, ...]] = {
    USState.CALIFORNIA: CALIFORNIA_BRACKETS,
    USState.NEW_YORK: NEW_YORK_BRACKETS,
}


def get_state_brackets(state: USState) -> Optional[tuple[TaxBracket, ...]]:
    """Return the bracket table for a state.

    Returns:
        The progressive table if the state has one, a flat single-bracket
        table for flat-rate states, or None when no table is known. No-tax
        states return an empty tuple.
    """
    if state in NO_INCOME_TAX_STATES:
        return ()
    if state in PROGRESSIVE_STATE_BRACKETS:
        return PROGRESSIVE_STATE_BRACKETS[state]
    rate = STATE_TAX_RATES.get(state)
    if rate is None:
        return None
    return flat_brackets(rate)


# Rough average effective rates used to pre-fill offer comparisons.
SIMPLIFIED_STATE_RATES: dict[USState, Decimal] = {
    USState.CALIFORNIA: Decimal("0.093"),
    USState.NEW_YORK: Decimal("0.0685"),
    USState.NEW_JERSEY: Decimal("0.0637"),
    USState.OREGON: Decimal("0.09"),
    USState.MINNESOTA: Decimal("0.0785"),
    USState.MASSACHUSETTS: Decimal("0.05"),
    USState.HAWAII: Decimal("0.0825"),
    USState.CONNECTICUT: Decimal("0.0699"),
}
SIMPLIFIED_STATE_RATE_DEFAULT = Decimal("0.05")


# =============================================================================
# QUARTERLY ESTIMATED PAYMENTS
# =============================================================================
# quarter: (month, day, years after the tax year)

QUARTERLY_DUE_DATES: dict[int, tuple[int, int, int]] = {
    1: (4, 15, 0),
    2: (6, 15, 0),
    3: (9, 15, 0),
    4: (1, 15, 1),
}

PAYMENT_REMINDER_DAYS = (14, 7, 1)


def standard_due_dates(tax_year: int) -> dict[int, date]:
    """IRS due dates for the four installments of ``tax_year``."""
    return {
        quarter: date(tax_year + offset, month, day)
        for quarter, (month, day, offset) in QUARTERLY_DUE_DATES.items()
    }


# =============================================================================
# GSA PER DIEM
# =============================================================================

GSA_DEFAULT_LODGING = Decimal("107")
GSA_DEFAULT_MEALS = Decimal("79")


# =============================================================================
# IRS STANDARD MILEAGE RATES (dollars per business mile)
# =============================================================================

IRS_MILEAGE_RATES: dict[int, Decimal] = {
    2020: Decimal("0.575"),
    2021: Decimal("0.56"),
    2022: Decimal("0.625"),
    2023: Decimal("0.655"),
    2024: Decimal("0.67"),
}
CURRENT_MILEAGE_RATE = IRS_MILEAGE_RATES[2024]


def get_mileage_rate(tax_year: int) -> Decimal:
    """IRS business mileage rate for a year, or the current rate if unknown."""
    return IRS_MILEAGE_RATES.get(tax_year, CURRENT_MILEAGE_RATE)
