"""Decimal helpers shared by the calculation engines."""

from contextlib import contextmanager
from decimal import ROUND_DOWN, ROUND_HALF_UP, Context, Decimal, localcontext
from typing import Iterator, Union

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
ONE_DOLLAR = Decimal("1")
ONE_CENT = Decimal("0.01")

# Fractional digits kept beyond the integer part of the largest amount.
MONEY_GUARD_DIGITS = 34


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal.

    Floats go through ``str`` so that 0.1 stays 0.1 instead of picking up
    binary noise.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@contextmanager
def money_context(*values: Number) -> Iterator[Context]:
    """Local decimal context wide enough for arithmetic on ``values``.

    Precision grows with the largest magnitude given, so every whole-dollar
    digit survives addition, rate multiplication and quantizing no matter
    how large the amounts are. Never narrower than the current context.
    """
    digits = 1
    for value in values:
        amount = to_decimal(value)
        if amount.is_finite() and amount:
            digits = max(digits, amount.adjusted() + 1)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, digits + MONEY_GUARD_DIGITS)
        yield ctx


def round_dollars(value: Decimal) -> Decimal:
    """Round to whole dollars, half away from zero."""
    with money_context(value):
        return value.quantize(ONE_DOLLAR, rounding=ROUND_HALF_UP)


def round_cents(value: Decimal) -> Decimal:
    """Round to cents, half away from zero."""
    with money_context(value):
        return value.quantize(ONE_CENT, rounding=ROUND_HALF_UP)


def floor_cents(value: Decimal) -> Decimal:
    """Truncate to cents toward zero."""
    with money_context(value):
        return value.quantize(ONE_CENT, rounding=ROUND_DOWN)


def safe_divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide, returning 0 when the denominator is 0."""
    if denominator == 0:
        return ZERO
    return numerator / denominator
