"""Custom exceptions for the travel nurse calculation core.

Ordinary arithmetic edge cases (negative income, zero hours, deductions
larger than gross) are clamped by the engines and never raise. Exceptions
are reserved for defects in the constant tables or configuration, and for
caller arguments that have no sensible clamped meaning.

Example:
    try:
        tax = resolver.calculate(income, state_code)
    except ConfigurationError as e:
        # Unknown state code or missing bracket table
        logger.error("state_tax_failed", **e.details)
        raise
"""

from typing import Any, Optional


class TravelNurseError(Exception):
    """Base exception for all travelnurse_core errors.

    Attributes:
        message: Human-readable error description.
        details: Dictionary with additional context.
        recoverable: Whether the caller can fix the problem and retry.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(TravelNurseError):
    """Raised when a caller argument is outside its valid domain.

    Examples are a quarter outside 1-4, a negative number of visit days,
    or a checklist item id that does not exist on the record.

    Attributes:
        field: The argument that failed validation.
        value: The rejected value.
        constraint: The rule that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Quarter must be between 1 and 4",
        ...     field="quarter",
        ...     value=5,
        ...     constraint="1 <= quarter <= 4",
        ... )
        ValidationError: Quarter must be between 1 and 4
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class ConfigurationError(TravelNurseError):
    """Raised when a constant table or setting is malformed.

    Covers bracket tables with descending or gapped bounds, states that levy
    income tax but have no rate table, unknown state codes and
    non-monotonic compliance thresholds. These indicate a defect rather
    than bad runtime input, so they are not recoverable by default.

    Attributes:
        config_key: The table or setting that is problematic.
        expected: Description of the expected value or shape.
        actual: The value found.

    Example:
        >>> raise ConfigurationError(
        ...     "Bracket bounds must be ascending",
        ...     config_key="FEDERAL_BRACKETS_2024",
        ...     expected="upper_bound > lower_bound",
        ...     actual="11600 -> 10000",
        ... )
        ConfigurationError: Bracket bounds must be ascending
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "TravelNurseError",
    "ValidationError",
    "ConfigurationError",
]
