"""Record store contracts used by the scheduler and compliance workflows.

The calculation core owns no persistence. These protocols describe the few
lookups it needs; any storage layer with matching methods can be passed
in. The in-memory implementations back the tests and simple callers.

Example Usage:
    ```python
    from travelnurse_core.repository import InMemoryPaymentRepository
    from travelnurse_core.quarterly import QuarterlyPaymentScheduler

    scheduler = QuarterlyPaymentScheduler(repository=InMemoryPaymentRepository())
    ```
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable
from uuid import UUID

from .models.compliance import TaxHomeCompliance, default_checklist_items
from .models.payments import QuarterlyPayment


# =============================================================================
# PROTOCOLS
# =============================================================================

@runtime_checkable
class PaymentRepository(Protocol):
    """Storage for quarterly payment records."""

    def list_for_year(self, tax_year: int) -> list[QuarterlyPayment]:
        """Payments for a tax year, sorted by quarter."""
        ...

    def list_all(self) -> list[QuarterlyPayment]:
        """Every payment, sorted by due date."""
        ...

    def save(self, payment: QuarterlyPayment) -> None:
        """Insert or replace a payment by id."""
        ...

    def delete(self, payment_id: UUID) -> None:
        """Remove a payment. Missing ids are ignored."""
        ...


@runtime_checkable
class ComplianceRepository(Protocol):
    """Storage for one tax-home compliance record per tax year."""

    def get(self, tax_year: int) -> Optional[TaxHomeCompliance]:
        ...

    def save(self, record: TaxHomeCompliance) -> None:
        ...

    def get_or_create(self, tax_year: int) -> TaxHomeCompliance:
        """Existing record, or a new one with the default checklist."""
        ...


# =============================================================================
# IN-MEMORY IMPLEMENTATIONS
# =============================================================================

class InMemoryPaymentRepository:
    def __init__(self) -> None:
        self._payments: dict[UUID, QuarterlyPayment] = {}

    def list_for_year(self, tax_year: int) -> list[QuarterlyPayment]:
        return sorted(
            (p for p in self._payments.values() if p.tax_year == tax_year),
            key=lambda p: p.quarter,
        )

    def list_all(self) -> list[QuarterlyPayment]:
        return sorted(self._payments.values(), key=lambda p: p.due_date)

    def save(self, payment: QuarterlyPayment) -> None:
        self._payments[payment.id] = payment

    def delete(self, payment_id: UUID) -> None:
        self._payments.pop(payment_id, None)


class InMemoryComplianceRepository:
    def __init__(self) -> None:
        self._records: dict[int, TaxHomeCompliance] = {}

    def get(self, tax_year: int) -> Optional[TaxHomeCompliance]:
        return self._records.get(tax_year)

    def save(self, record: TaxHomeCompliance) -> None:
        self._records[record.tax_year] = record

    def get_or_create(self, tax_year: int) -> TaxHomeCompliance:
        record = self.get(tax_year)
        if record is None:
            record = TaxHomeCompliance(
                tax_year=tax_year,
                checklist_items=default_checklist_items(),
            )
            self.save(record)
        return record
