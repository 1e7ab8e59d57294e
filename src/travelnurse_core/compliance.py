"""IRS tax-home compliance scoring.

The score is built from three parts, out of a maximum that depends on the
checklist:

    checklist      sum of item weights (complete = full, partial = half)
    30-day rule    20 if more than the at-risk window remains,
                   10 while at risk, 0 once violated or with no visit
    days at home   days * 20 / target, capped at 20

    score = round_half_up(raw * 100 / max_possible)

Stored scores never update on their own. Every mutation goes through this
engine, which recalculates the record as part of the same call.
"""

from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

import structlog

from .config import TravelNurseConfig
from .exceptions import ConfigurationError, ValidationError
from .models.compliance import (
    ComplianceChecklistItem,
    ComplianceItemStatus,
    ComplianceLevel,
    ComplianceScore,
    TaxHomeCompliance,
    ThirtyDayRuleStatus,
)
from .utils import ZERO, safe_divide

logger = structlog.get_logger()

THIRTY_DAY_RULE_POINTS = Decimal("20")
DAYS_AT_HOME_POINTS = Decimal("20")


class ComplianceScoringEngine:
    """Scores tax-home evidence and applies record transitions."""

    def __init__(self, config: Optional[TravelNurseConfig] = None):
        self.config = config or TravelNurseConfig()
        settings = self.config.compliance
        if not (
            100 >= settings.excellent_threshold
            > settings.good_threshold
            > settings.at_risk_threshold
            >= 0
        ):
            raise ConfigurationError(
                "Compliance thresholds must be strictly decreasing",
                config_key="compliance thresholds",
                expected="100 >= excellent > good > at_risk >= 0",
                actual=(
                    f"{settings.excellent_threshold}/{settings.good_threshold}/"
                    f"{settings.at_risk_threshold}"
                ),
            )
        self.settings = settings

    # -------------------------------------------------------------------------
    # 30-day rule
    # -------------------------------------------------------------------------

    def days_until_30_day_return(
        self, last_visit: Optional[date], as_of: Optional[date] = None
    ) -> Optional[int]:
        """Days left before the next required visit; None without a visit."""
        if last_visit is None:
            return None
        days_since = ((as_of or date.today()) - last_visit).days
        return max(0, self.settings.thirty_day_limit - days_since)

    def thirty_day_status(
        self, last_visit: Optional[date], as_of: Optional[date] = None
    ) -> ThirtyDayRuleStatus:
        days_until = self.days_until_30_day_return(last_visit, as_of)
        if days_until is None or days_until <= 0:
            return ThirtyDayRuleStatus.VIOLATED
        if days_until <= self.settings.at_risk_window_days:
            return ThirtyDayRuleStatus.AT_RISK
        return ThirtyDayRuleStatus.COMPLIANT

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------

    @staticmethod
    def checklist_points(checklist: Sequence[ComplianceChecklistItem]) -> Decimal:
        points = ZERO
        for item in checklist:
            if item.status == ComplianceItemStatus.COMPLETE:
                points += item.weight
            elif item.status == ComplianceItemStatus.PARTIAL:
                points += Decimal(item.weight) / 2
        return points

    def days_points(self, days_at_tax_home: int) -> Decimal:
        earned = Decimal(days_at_tax_home) * DAYS_AT_HOME_POINTS / self.settings.target_days_at_home
        return min(DAYS_AT_HOME_POINTS, earned)

    def level_for(self, score: int) -> ComplianceLevel:
        return ComplianceLevel.from_score(
            score,
            excellent=self.settings.excellent_threshold,
            good=self.settings.good_threshold,
            at_risk=self.settings.at_risk_threshold,
        )

    def score(
        self,
        checklist: Sequence[ComplianceChecklistItem],
        days_at_tax_home: int,
        last_visit: Optional[date],
        as_of: Optional[date] = None,
    ) -> ComplianceScore:
        """Score the given evidence without touching any record.

        A record with nothing to go on (no points and no visit on file)
        is UNKNOWN rather than NON_COMPLIANT.
        """
        status = self.thirty_day_status(last_visit, as_of)
        if status == ThirtyDayRuleStatus.COMPLIANT:
            thirty_day = THIRTY_DAY_RULE_POINTS
        elif status == ThirtyDayRuleStatus.AT_RISK:
            thirty_day = THIRTY_DAY_RULE_POINTS / 2
        else:
            thirty_day = ZERO

        checklist_pts = self.checklist_points(checklist)
        days_pts = self.days_points(max(0, days_at_tax_home))
        max_possible = (
            Decimal(sum(item.weight for item in checklist))
            + THIRTY_DAY_RULE_POINTS
            + DAYS_AT_HOME_POINTS
        )
        raw = checklist_pts + thirty_day + days_pts

        percent = safe_divide(raw * 100, max_possible)
        value = int(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        value = max(0, min(100, value))

        if raw == 0 and last_visit is None:
            level = ComplianceLevel.UNKNOWN
        else:
            level = self.level_for(value)

        return ComplianceScore(
            score=value,
            level=level,
            checklist_points=checklist_pts,
            thirty_day_points=thirty_day,
            days_points=days_pts,
            max_possible=max_possible,
            thirty_day_status=status,
            days_until_30_day_return=self.days_until_30_day_return(last_visit, as_of),
        )

    # -------------------------------------------------------------------------
    # Record transitions
    # -------------------------------------------------------------------------

    def recalculate_score(
        self, record: TaxHomeCompliance, as_of: Optional[date] = None
    ) -> ComplianceScore:
        """Recompute and store the record's score and level."""
        result = self.score(
            record.checklist_items,
            record.days_at_tax_home,
            record.last_tax_home_visit,
            as_of,
        )
        record.compliance_score = result.score
        record.compliance_level = result.level
        record.touch()

        logger.info(
            "compliance_score_recalculated",
            tax_year=record.tax_year,
            score=result.score,
            level=result.level.value,
            thirty_day_status=result.thirty_day_status.value,
        )
        return result

    def record_tax_home_visit(
        self,
        record: TaxHomeCompliance,
        days: int = 1,
        visit_date: Optional[date] = None,
        as_of: Optional[date] = None,
    ) -> ComplianceScore:
        """Add days at the tax home, set the last visit and rescore as of ``as_of``.

        Raises:
            ValidationError: If days is negative.
        """
        if days < 0:
            raise ValidationError(
                "Visit days cannot be negative",
                field="days",
                value=days,
                constraint="days >= 0",
            )
        visited = visit_date or date.today()
        record.days_at_tax_home += days
        record.last_tax_home_visit = visited

        logger.info(
            "tax_home_visit_recorded",
            tax_year=record.tax_year,
            days=days,
            visit_date=visited.isoformat(),
            days_at_tax_home=record.days_at_tax_home,
        )
        return self.recalculate_score(record, as_of)

    def update_days_at_tax_home(
        self,
        record: TaxHomeCompliance,
        days: int,
        as_of: Optional[date] = None,
    ) -> ComplianceScore:
        if days < 0:
            raise ValidationError(
                "Days at tax home cannot be negative",
                field="days_at_tax_home",
                value=days,
                constraint="days >= 0",
            )
        record.days_at_tax_home = days
        return self.recalculate_score(record, as_of)

    def update_checklist_item(
        self,
        record: TaxHomeCompliance,
        item_id: str,
        status: ComplianceItemStatus,
        notes: Optional[str] = None,
        as_of: Optional[date] = None,
    ) -> ComplianceScore:
        """Set one checklist item's status and rescore.

        Raises:
            ValidationError: If the record has no item with that id.
        """
        item = record.get_item(item_id)
        if item is None:
            raise ValidationError(
                f"Unknown checklist item: {item_id}",
                field="item_id",
                value=item_id,
                constraint="Must match an item on the record",
            )
        item.status = status
        if notes is not None:
            item.notes = notes
        item.last_updated = datetime.now(timezone.utc)
        return self.recalculate_score(record, as_of)
