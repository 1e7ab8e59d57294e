"""Audit trail for tax calculations."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


class AuditEntry(BaseModel):
    """One calculation step: what went in, what came out and the rule used.

    Attributes:
        timestamp: When the step ran (UTC)
        step: Step name, e.g. "federal_tax" or "quarterly_split"
        input_value: Inputs as text
        output_value: Result as text
        source: Table or rule the step applied
        notes: Extra context
    """
    timestamp: datetime = Field(default_factory=_utc_now)
    step: str
    input_value: str
    output_value: str
    source: str
    notes: Optional[str] = None
