"""IRS standard mileage deductions."""

from decimal import Decimal
from typing import Iterable, Optional

import structlog

from .models.mileage import MileageTrip
from .tax_tables import get_mileage_rate

logger = structlog.get_logger()


def irs_mileage_rate(tax_year: int) -> Decimal:
    """Business rate per mile for ``tax_year``; the current rate for unknown years."""
    return get_mileage_rate(tax_year)


def calculate_mileage_deduction(
    trips: Iterable[MileageTrip],
    tax_year: Optional[int] = None,
) -> Decimal:
    """Sum of distance x rate, limited to one tax year when given."""
    total = Decimal("0")
    miles = Decimal("0")
    for trip in trips:
        if tax_year is not None and trip.tax_year != tax_year:
            continue
        total += trip.deduction
        miles += trip.distance_miles

    logger.debug(
        "mileage_deduction_calculated",
        tax_year=tax_year,
        miles=str(miles),
        deduction=str(total),
    )
    return total
