"""Tax and compliance calculation core for travel nurses."""

from .brackets import TaxBracketEngine, validate_brackets
from .calculator import TaxCalculationEngine, split_into_quarters
from .compliance import ComplianceScoringEngine
from .config import (
    ComplianceConfig,
    DeductionApportionment,
    TaxConfig,
    TravelNurseConfig,
)
from .exceptions import ConfigurationError, TravelNurseError, ValidationError
from .mileage import calculate_mileage_deduction, irs_mileage_rate
from .models import (
    Assignment,
    AssignmentStatus,
    AuditEntry,
    ComplianceChecklistItem,
    ComplianceItemStatus,
    ComplianceLevel,
    ComplianceScore,
    GSAComplianceResult,
    JobOffer,
    MileageTrip,
    MultiStateTaxResult,
    OfferComparisonResult,
    PayBreakdown,
    PaymentStatus,
    PaymentSummary,
    QuarterlyEstimate,
    QuarterlyPayment,
    StateBreakdown,
    TaxableIncomeBreakdown,
    TaxHomeCompliance,
    ThirtyDayRuleStatus,
    default_checklist_items,
)
from .quarterly import QuarterlyPaymentScheduler
from .repository import (
    ComplianceRepository,
    InMemoryComplianceRepository,
    InMemoryPaymentRepository,
    PaymentRepository,
)
from .self_employment import SelfEmploymentTaxCalculator
from .state_tax import StateTaxResolver
from .states import NO_INCOME_TAX_STATES, USState
from .stipend import StipendCalculator
from .tax_tables import FEDERAL_BRACKETS_2024, TaxBracket

__version__ = "0.1.0"

__all__ = [
    # Engines
    "TaxBracketEngine",
    "SelfEmploymentTaxCalculator",
    "StateTaxResolver",
    "TaxCalculationEngine",
    "StipendCalculator",
    "ComplianceScoringEngine",
    "QuarterlyPaymentScheduler",
    "validate_brackets",
    "split_into_quarters",
    "calculate_mileage_deduction",
    "irs_mileage_rate",
    # Tables
    "FEDERAL_BRACKETS_2024",
    "NO_INCOME_TAX_STATES",
    "TaxBracket",
    "USState",
    # Models
    "Assignment",
    "AssignmentStatus",
    "AuditEntry",
    "ComplianceChecklistItem",
    "ComplianceItemStatus",
    "ComplianceLevel",
    "ComplianceScore",
    "GSAComplianceResult",
    "JobOffer",
    "MileageTrip",
    "MultiStateTaxResult",
    "OfferComparisonResult",
    "PayBreakdown",
    "PaymentStatus",
    "PaymentSummary",
    "QuarterlyEstimate",
    "QuarterlyPayment",
    "StateBreakdown",
    "TaxableIncomeBreakdown",
    "TaxHomeCompliance",
    "ThirtyDayRuleStatus",
    "default_checklist_items",
    # Storage
    "ComplianceRepository",
    "InMemoryComplianceRepository",
    "InMemoryPaymentRepository",
    "PaymentRepository",
    # Config
    "ComplianceConfig",
    "DeductionApportionment",
    "TaxConfig",
    "TravelNurseConfig",
    # Errors
    "ConfigurationError",
    "TravelNurseError",
    "ValidationError",
]
