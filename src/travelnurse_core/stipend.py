"""Stipend, blended-rate and offer comparison calculations.

Travel nurse pay splits into a taxable hourly wage and non-taxable weekly
stipends for housing and meals. Comparing offers on hourly rate alone is
misleading, so offers are ranked on weekly take-home pay instead.
"""

from decimal import Decimal
from typing import Optional, Sequence

import structlog

from .config import TravelNurseConfig
from .models import GSAComplianceResult, JobOffer, OfferComparisonResult
from .states import USState
from .tax_tables import (
    FEDERAL_BRACKETS_2024,
    SIMPLIFIED_STATE_RATE_DEFAULT,
    SIMPLIFIED_STATE_RATES,
)
from .utils import ZERO, Number, safe_divide, to_decimal

logger = structlog.get_logger()


class StipendCalculator:
    """Weekly and annual pay projections for job offers."""

    def __init__(self, config: Optional[TravelNurseConfig] = None):
        self.config = config or TravelNurseConfig()

    def _weeks(self, weeks_worked: Optional[int]) -> int:
        if weeks_worked is None:
            return self.config.tax.default_weeks_worked
        return weeks_worked

    # -------------------------------------------------------------------------
    # Weekly figures
    # -------------------------------------------------------------------------

    def calculate_weekly_taxable(self, hourly_rate: Number, hours_per_week: Number) -> Decimal:
        return to_decimal(hourly_rate) * to_decimal(hours_per_week)

    def calculate_weekly_stipends(self, housing_stipend: Number, meals_stipend: Number) -> Decimal:
        return to_decimal(housing_stipend) + to_decimal(meals_stipend)

    def calculate_weekly_gross(self, offer: JobOffer) -> Decimal:
        return offer.weekly_gross

    def calculate_blended_rate(self, offer: JobOffer) -> Decimal:
        return offer.blended_hourly_rate

    def calculate_non_taxable_percentage(self, offer: JobOffer) -> Decimal:
        return offer.non_taxable_percentage

    def calculate_weekly_take_home(
        self,
        offer: JobOffer,
        federal_rate: Number,
        state_rate: Number,
    ) -> Decimal:
        """Taxable pay after flat federal and state rates, plus untaxed stipends."""
        retained = 1 - to_decimal(federal_rate) - to_decimal(state_rate)
        return offer.weekly_taxable * retained + offer.weekly_stipends

    def calculate_weekly_with_overtime(self, offer: JobOffer, overtime_hours: Number) -> Decimal:
        """Regular pay, overtime if the offer has an overtime rate, and stipends."""
        hours = to_decimal(overtime_hours)
        overtime = ZERO
        if offer.overtime_rate is not None and hours > 0:
            overtime = offer.overtime_rate * hours
        return offer.weekly_taxable + overtime + offer.weekly_stipends

    # -------------------------------------------------------------------------
    # Annual projections
    # -------------------------------------------------------------------------

    def calculate_annual_gross(self, offer: JobOffer, weeks_worked: Optional[int] = None) -> Decimal:
        return offer.weekly_gross * self._weeks(weeks_worked)

    def calculate_annual_take_home(
        self,
        offer: JobOffer,
        federal_rate: Number,
        state_rate: Number,
        weeks_worked: Optional[int] = None,
    ) -> Decimal:
        weekly = self.calculate_weekly_take_home(offer, federal_rate, state_rate)
        return weekly * self._weeks(weeks_worked)

    def calculate_stipend_tax_savings(
        self,
        offer: JobOffer,
        federal_rate: Number,
        state_rate: Number,
        weeks_worked: Optional[int] = None,
    ) -> Decimal:
        """Extra annual take-home compared to receiving the same gross fully taxed."""
        weeks = self._weeks(weeks_worked)
        retained = 1 - to_decimal(federal_rate) - to_decimal(state_rate)
        with_stipends = self.calculate_weekly_take_home(offer, federal_rate, state_rate)
        fully_taxed = offer.weekly_gross * retained
        return (with_stipends - fully_taxed) * weeks

    # -------------------------------------------------------------------------
    # GSA per diem
    # -------------------------------------------------------------------------

    def check_gsa_compliance(
        self,
        offer: JobOffer,
        daily_lodging: Optional[Number] = None,
        daily_meals: Optional[Number] = None,
    ) -> GSAComplianceResult:
        """Compare daily stipends to GSA limits (national defaults if none given).

        Stipends above the GSA rate for the area may be treated as taxable
        wages.
        """
        lodging_limit = (
            self.config.tax.gsa_daily_lodging if daily_lodging is None
            else to_decimal(daily_lodging)
        )
        meals_limit = (
            self.config.tax.gsa_daily_meals if daily_meals is None
            else to_decimal(daily_meals)
        )

        result = GSAComplianceResult(
            housing_within_limit=offer.daily_housing <= lodging_limit,
            meals_within_limit=offer.daily_meals <= meals_limit,
            daily_housing=offer.daily_housing,
            daily_meals=offer.daily_meals,
            gsa_daily_lodging=lodging_limit,
            gsa_daily_meals=meals_limit,
        )
        if not result.is_compliant:
            logger.warning(
                "gsa_limit_exceeded",
                offer=offer.name,
                housing_excess=str(result.housing_excess),
                meals_excess=str(result.meals_excess),
            )
        return result

    # -------------------------------------------------------------------------
    # Rate estimates
    # -------------------------------------------------------------------------

    def estimate_federal_tax_bracket(self, annual_income: Number) -> Decimal:
        """Single-filer marginal rate for a quick default."""
        income = to_decimal(annual_income)
        for bracket in FEDERAL_BRACKETS_2024:
            if bracket.upper_bound is None or income <= bracket.upper_bound:
                return bracket.rate
        return FEDERAL_BRACKETS_2024[-1].rate

    def get_state_tax_rate(self, state: Optional[USState]) -> Decimal:
        """Rough average state rate for offer comparisons; 0 for no-tax states."""
        if state is None or state.has_no_income_tax:
            return ZERO
        return SIMPLIFIED_STATE_RATES.get(state, SIMPLIFIED_STATE_RATE_DEFAULT)

    # -------------------------------------------------------------------------
    # Offer comparison
    # -------------------------------------------------------------------------

    def compare_offers(
        self,
        offers: Sequence[JobOffer],
        federal_rate: Number,
        state_rate: Number,
        weeks_worked: Optional[int] = None,
    ) -> list[OfferComparisonResult]:
        """Rank offers by weekly take-home, best first.

        Ties keep the order the offers were given in.
        """
        weeks = self._weeks(weeks_worked)

        evaluated = []
        for offer in offers:
            weekly_take_home = self.calculate_weekly_take_home(offer, federal_rate, state_rate)
            annual_gross = offer.weekly_gross * weeks
            weekly_tax = offer.weekly_gross - weekly_take_home
            evaluated.append(
                {
                    "offer": offer,
                    "weekly_gross": offer.weekly_gross,
                    "weekly_take_home": weekly_take_home,
                    "annual_gross": annual_gross,
                    "annual_take_home": weekly_take_home * weeks,
                    "blended_rate": offer.blended_hourly_rate,
                    "non_taxable_percentage": offer.non_taxable_percentage,
                    "effective_tax_rate": safe_divide(weekly_tax * weeks, annual_gross) * 100,
                }
            )

        # sorted() is stable, so equal take-home keeps input order
        ranked = sorted(evaluated, key=lambda e: e["weekly_take_home"], reverse=True)
        results = [
            OfferComparisonResult(rank=position, **entry)
            for position, entry in enumerate(ranked, start=1)
        ]

        logger.info(
            "offers_compared",
            offer_count=len(results),
            best=results[0].offer.name if results else None,
        )
        return results

    def find_best_offer(
        self,
        offers: Sequence[JobOffer],
        federal_rate: Number,
        state_rate: Number,
        weeks_worked: Optional[int] = None,
    ) -> Optional[OfferComparisonResult]:
        ranked = self.compare_offers(offers, federal_rate, state_rate, weeks_worked)
        return ranked[0] if ranked else None
