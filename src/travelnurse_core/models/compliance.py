"""Tax-home compliance models.

The IRS treats a travel nurse's stipends as non-taxable only while the
nurse keeps a genuine tax home. These models hold the evidence for one tax
year (a weighted checklist plus visit history) and the score derived from
it by ``ComplianceScoringEngine``.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from ..utils import safe_divide


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ComplianceLevel(str, Enum):
    """Overall tax-home standing derived from the 0-100 score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    AT_RISK = "at_risk"
    NON_COMPLIANT = "non_compliant"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return _LEVEL_DISPLAY_NAMES[self]

    @property
    def description(self) -> str:
        return _LEVEL_DESCRIPTIONS[self]

    @property
    def minimum_score(self) -> int:
        """Lowest score for this level under the default thresholds."""
        return _LEVEL_MINIMUM_SCORES[self]

    @classmethod
    def from_score(
        cls,
        score: int,
        excellent: int = 90,
        good: int = 70,
        at_risk: int = 50,
    ) -> "ComplianceLevel":
        """Map a 0-100 score to a level; anything outside 0-100 is UNKNOWN."""
        if score < 0 or score > 100:
            return cls.UNKNOWN
        if score >= excellent:
            return cls.EXCELLENT
        if score >= good:
            return cls.GOOD
        if score >= at_risk:
            return cls.AT_RISK
        return cls.NON_COMPLIANT


_LEVEL_DISPLAY_NAMES = {
    ComplianceLevel.EXCELLENT: "Excellent",
    ComplianceLevel.GOOD: "Good",
    ComplianceLevel.AT_RISK: "At Risk",
    ComplianceLevel.NON_COMPLIANT: "Non-Compliant",
    ComplianceLevel.UNKNOWN: "Unknown",
}

_LEVEL_DESCRIPTIONS = {
    ComplianceLevel.EXCELLENT: "Strong tax home with thorough documentation",
    ComplianceLevel.GOOD: "Tax home is well supported with minor gaps",
    ComplianceLevel.AT_RISK: "Several requirements are missing; stipends may be questioned",
    ComplianceLevel.NON_COMPLIANT: "Tax home is unlikely to hold up; stipends may be taxable",
    ComplianceLevel.UNKNOWN: "Not enough information to assess the tax home",
}

_LEVEL_MINIMUM_SCORES = {
    ComplianceLevel.EXCELLENT: 90,
    ComplianceLevel.GOOD: 70,
    ComplianceLevel.AT_RISK: 50,
    ComplianceLevel.NON_COMPLIANT: 0,
    ComplianceLevel.UNKNOWN: 0,
}


class ComplianceItemStatus(str, Enum):
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    PARTIAL = "partial"
    NOT_APPLICABLE = "not_applicable"

    @property
    def display_name(self) -> str:
        if self is ComplianceItemStatus.NOT_APPLICABLE:
            return "N/A"
        return self.value.title()


class ChecklistCategory(str, Enum):
    RESIDENCE = "residence"
    PRESENCE = "presence"
    TIES = "ties"
    FINANCIAL = "financial"
    DOCUMENTATION = "documentation"

    @property
    def display_name(self) -> str:
        return _CATEGORY_DISPLAY_NAMES[self]


_CATEGORY_DISPLAY_NAMES = {
    ChecklistCategory.RESIDENCE: "Residence",
    ChecklistCategory.PRESENCE: "Physical Presence",
    ChecklistCategory.TIES: "Community Ties",
    ChecklistCategory.FINANCIAL: "Financial Ties",
    ChecklistCategory.DOCUMENTATION: "Documentation",
}


class ThirtyDayRuleStatus(str, Enum):
    """Where the nurse stands against the 30-day return rule."""

    COMPLIANT = "compliant"
    AT_RISK = "at_risk"
    VIOLATED = "violated"


class ComplianceChecklistItem(BaseModel):
    """One piece of tax-home evidence and the points it is worth."""

    id: str
    title: str
    description: str = ""
    category: ChecklistCategory
    weight: int = Field(ge=0)
    status: ComplianceItemStatus = ComplianceItemStatus.INCOMPLETE
    notes: Optional[str] = None
    document_path: Optional[str] = None
    last_updated: Optional[datetime] = None


DEFAULT_CHECKLIST_ITEMS: tuple[ComplianceChecklistItem, ...] = (
    ComplianceChecklistItem(
        id="maintain_residence",
        title="Maintain a residence at tax home",
        description="Own or rent a home you keep while away on assignment",
        category=ChecklistCategory.RESIDENCE,
        weight=15,
    ),
    ComplianceChecklistItem(
        id="pay_expenses",
        title="Pay tax home expenses",
        description="Pay mortgage or rent and utilities at the tax home",
        category=ChecklistCategory.RESIDENCE,
        weight=15,
    ),
    ComplianceChecklistItem(
        id="regular_visits",
        title="Return regularly to tax home",
        description="Go back to the tax home at least every 30 days",
        category=ChecklistCategory.PRESENCE,
        weight=15,
    ),
    ComplianceChecklistItem(
        id="family_ties",
        title="Family at tax home",
        description="Immediate family lives at or near the tax home",
        category=ChecklistCategory.TIES,
        weight=10,
    ),
    ComplianceChecklistItem(
        id="voter_registration",
        title="Voter registration",
        description="Registered to vote at the tax home address",
        category=ChecklistCategory.TIES,
        weight=5,
    ),
    ComplianceChecklistItem(
        id="drivers_license",
        title="Driver's license",
        description="Driver's license issued by the tax home state",
        category=ChecklistCategory.TIES,
        weight=5,
    ),
    ComplianceChecklistItem(
        id="vehicle_registration",
        title="Vehicle registration",
        description="Vehicle registered in the tax home state",
        category=ChecklistCategory.TIES,
        weight=5,
    ),
    ComplianceChecklistItem(
        id="bank_accounts",
        title="Bank accounts",
        description="Primary bank accounts at the tax home address",
        category=ChecklistCategory.TIES,
        weight=5,
    ),
    ComplianceChecklistItem(
        id="professional_affiliations",
        title="Professional affiliations",
        description="Nursing license and memberships tied to the tax home",
        category=ChecklistCategory.TIES,
        weight=5,
    ),
    ComplianceChecklistItem(
        id="religious_civic",
        title="Community involvement",
        description="Church, civic or volunteer ties at the tax home",
        category=ChecklistCategory.TIES,
        weight=5,
    ),
)


def default_checklist_items() -> list[ComplianceChecklistItem]:
    """Fresh, independently mutable copies of the ten default items."""
    return [item.model_copy() for item in DEFAULT_CHECKLIST_ITEMS]


class ComplianceScore(BaseModel):
    """Result of scoring one compliance record."""

    score: int = Field(ge=0, le=100)
    level: ComplianceLevel
    checklist_points: Decimal
    thirty_day_points: Decimal
    days_points: Decimal
    max_possible: Decimal
    thirty_day_status: ThirtyDayRuleStatus
    days_until_30_day_return: Optional[int] = None

    @property
    def raw_score(self) -> Decimal:
        return self.checklist_points + self.thirty_day_points + self.days_points


class TaxHomeCompliance(BaseModel):
    """Tax-home evidence for one tax year.

    ``compliance_score`` and ``compliance_level`` are stored values. They
    only change when ``ComplianceScoringEngine`` recalculates the record.
    """

    id: UUID = Field(default_factory=uuid4)
    tax_year: int
    days_at_tax_home: int = Field(default=0, ge=0)
    last_tax_home_visit: Optional[date] = None
    checklist_items: list[ComplianceChecklistItem] = Field(
        default_factory=default_checklist_items
    )
    compliance_score: int = Field(default=0, ge=0, le=100)
    compliance_level: ComplianceLevel = ComplianceLevel.UNKNOWN
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)

    def get_item(self, item_id: str) -> Optional[ComplianceChecklistItem]:
        for item in self.checklist_items:
            if item.id == item_id:
                return item
        return None

    @property
    def completed_items_count(self) -> int:
        return sum(
            1 for item in self.checklist_items
            if item.status == ComplianceItemStatus.COMPLETE
        )

    @property
    def total_items_count(self) -> int:
        return len(self.checklist_items)

    @property
    def checklist_completion_percentage(self) -> Decimal:
        return safe_divide(
            Decimal(self.completed_items_count), Decimal(self.total_items_count)
        ) * 100

    def incomplete_items(self) -> list[ComplianceChecklistItem]:
        return [
            item for item in self.checklist_items
            if item.status in (ComplianceItemStatus.INCOMPLETE, ComplianceItemStatus.PARTIAL)
        ]

    def touch(self) -> None:
        self.updated_at = _utc_now()
