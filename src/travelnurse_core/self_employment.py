"""Self-employment (Social Security + Medicare) tax."""

from decimal import Decimal

import structlog
from pydantic import BaseModel

from .tax_tables import (
    SE_MEDICARE_RATE,
    SE_MINIMUM_EARNINGS,
    SE_NET_EARNINGS_FACTOR,
    SE_SOCIAL_SECURITY_RATE,
    SOCIAL_SECURITY_WAGE_BASE_2024,
)
from .utils import ZERO, Number, money_context, round_dollars, to_decimal

logger = structlog.get_logger()


class SelfEmploymentTaxBreakdown(BaseModel):
    """Unrounded components of the self-employment tax."""

    net_earnings: Decimal
    adjusted_earnings: Decimal
    social_security_tax: Decimal
    medicare_tax: Decimal

    @property
    def total(self) -> Decimal:
        with money_context(self.social_security_tax, self.medicare_tax):
            return self.social_security_tax + self.medicare_tax


class SelfEmploymentTaxCalculator:
    """
    Schedule SE tax on net self-employment earnings.

    92.35% of net earnings is subject to the tax. Social Security (12.4%)
    stops at the wage base; Medicare (2.9%) has no cap. Earnings under
    $400 owe nothing.
    """

    def __init__(
        self,
        wage_base: Decimal = SOCIAL_SECURITY_WAGE_BASE_2024,
        minimum_earnings: Decimal = SE_MINIMUM_EARNINGS,
    ):
        self.wage_base = wage_base
        self.minimum_earnings = minimum_earnings

    def breakdown(self, net_earnings: Number) -> SelfEmploymentTaxBreakdown:
        net = to_decimal(net_earnings)
        if net < self.minimum_earnings:
            return SelfEmploymentTaxBreakdown(
                net_earnings=net,
                adjusted_earnings=ZERO,
                social_security_tax=ZERO,
                medicare_tax=ZERO,
            )

        with money_context(net):
            adjusted = net * SE_NET_EARNINGS_FACTOR
            return SelfEmploymentTaxBreakdown(
                net_earnings=net,
                adjusted_earnings=adjusted,
                social_security_tax=min(adjusted, self.wage_base) * SE_SOCIAL_SECURITY_RATE,
                medicare_tax=adjusted * SE_MEDICARE_RATE,
            )

    def calculate(self, net_earnings: Number) -> Decimal:
        """SE tax rounded to whole dollars."""
        parts = self.breakdown(net_earnings)
        total = round_dollars(parts.total)
        if total:
            logger.debug(
                "self_employment_tax_calculated",
                adjusted_earnings=str(parts.adjusted_earnings),
                social_security=str(parts.social_security_tax),
                medicare=str(parts.medicare_tax),
                total=str(total),
            )
        return total
