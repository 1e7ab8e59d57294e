"""Data models for travelnurse_core.

This package provides pydantic models for:
- Tax results (breakdowns, quarterly estimates, multi-state results)
- Job offers and comparison results
- Tax-home compliance records and scores
- Quarterly payments and yearly summaries
- Assignments, pay packages and mileage trips
- Audit trail entries
"""

from .assignments import (
    ONE_YEAR_LIMIT_DAYS,
    ONE_YEAR_WARNING_DAYS,
    Assignment,
    AssignmentStatus,
    PayBreakdown,
)
from .audit import AuditEntry
from .compliance import (
    DEFAULT_CHECKLIST_ITEMS,
    ChecklistCategory,
    ComplianceChecklistItem,
    ComplianceItemStatus,
    ComplianceLevel,
    ComplianceScore,
    TaxHomeCompliance,
    ThirtyDayRuleStatus,
    default_checklist_items,
)
from .mileage import MileageTrip, TripType
from .offers import GSAComplianceResult, JobOffer, OfferComparisonResult
from .payments import PaymentStatus, PaymentSummary, QuarterlyPayment, due_date_for
from .tax import (
    MultiStateTaxResult,
    QuarterlyEstimate,
    StateBreakdown,
    TaxableIncomeBreakdown,
)

__all__ = [
    # Assignments
    "ONE_YEAR_LIMIT_DAYS",
    "ONE_YEAR_WARNING_DAYS",
    "Assignment",
    "AssignmentStatus",
    "PayBreakdown",
    # Audit
    "AuditEntry",
    # Compliance
    "DEFAULT_CHECKLIST_ITEMS",
    "ChecklistCategory",
    "ComplianceChecklistItem",
    "ComplianceItemStatus",
    "ComplianceLevel",
    "ComplianceScore",
    "TaxHomeCompliance",
    "ThirtyDayRuleStatus",
    "default_checklist_items",
    # Mileage
    "MileageTrip",
    "TripType",
    # Offers
    "GSAComplianceResult",
    "JobOffer",
    "OfferComparisonResult",
    # Payments
    "PaymentStatus",
    "PaymentSummary",
    "QuarterlyPayment",
    "due_date_for",
    # Tax
    "MultiStateTaxResult",
    "QuarterlyEstimate",
    "StateBreakdown",
    "TaxableIncomeBreakdown",
]
