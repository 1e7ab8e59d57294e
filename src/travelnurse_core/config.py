"""Configuration system for travelnurse_core.

Pydantic Settings-based configuration with environment variable support.
Every engine accepts an optional ``TravelNurseConfig`` and builds a default
one when none is given.

Usage:
    from travelnurse_core.config import TravelNurseConfig

    # Load from environment variables and .env file
    config = TravelNurseConfig()

    print(config.compliance.thirty_day_limit)
    print(config.tax.deduction_apportionment)
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DeductionApportionment(str, Enum):
    """How a single deduction amount is split across states.

    PRORATE: each state deducts total_deductions * state_income / total_income.
    NONE: each state taxes its own income with no deduction.
    FULL: each state subtracts the full deduction from its own income.
    """

    PRORATE = "prorate"
    NONE = "none"
    FULL = "full"


class LogFormat(str, Enum):
    """Renderer used by configure_logging."""

    CONSOLE = "console"
    JSON = "json"


class ComplianceConfig(BaseSettings):
    """Tax-home compliance scoring settings.

    Environment Variables:
        TRAVELNURSE_COMPLIANCE_THIRTY_DAY_LIMIT: Days allowed between tax home visits
        TRAVELNURSE_COMPLIANCE_AT_RISK_WINDOW_DAYS: Days left that count as at risk
        TRAVELNURSE_COMPLIANCE_TARGET_DAYS_AT_HOME: Annual days target for full credit
        TRAVELNURSE_COMPLIANCE_EXCELLENT_THRESHOLD: Minimum score for "excellent"
        TRAVELNURSE_COMPLIANCE_GOOD_THRESHOLD: Minimum score for "good"
        TRAVELNURSE_COMPLIANCE_AT_RISK_THRESHOLD: Minimum score for "at_risk"
    """

    model_config = SettingsConfigDict(
        env_prefix="TRAVELNURSE_COMPLIANCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    thirty_day_limit: int = Field(
        default=30,
        gt=0,
        description="Maximum days between returns to the tax home",
    )
    at_risk_window_days: int = Field(
        default=7,
        ge=0,
        description="Days remaining at or below which the 30-day rule is at risk",
    )
    target_days_at_home: int = Field(
        default=30,
        gt=0,
        description="Annual days at tax home that earn the full days score",
    )
    excellent_threshold: int = Field(default=90, ge=0, le=100)
    good_threshold: int = Field(default=70, ge=0, le=100)
    at_risk_threshold: int = Field(default=50, ge=0, le=100)


class TaxConfig(BaseSettings):
    """Tax calculation settings.

    Environment Variables:
        TRAVELNURSE_TAX_DEDUCTION_APPORTIONMENT: prorate, none or full
        TRAVELNURSE_TAX_GSA_DAILY_LODGING: Default GSA daily lodging limit
        TRAVELNURSE_TAX_GSA_DAILY_MEALS: Default GSA daily meals limit
        TRAVELNURSE_TAX_DEFAULT_WEEKS_WORKED: Weeks per year for annual projections
    """

    model_config = SettingsConfigDict(
        env_prefix="TRAVELNURSE_TAX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    deduction_apportionment: DeductionApportionment = Field(
        default=DeductionApportionment.PRORATE,
        description="Policy for splitting deductions across states",
    )
    gsa_daily_lodging: Decimal = Field(
        default=Decimal("107"),
        ge=0,
        description="GSA standard CONUS daily lodging rate",
    )
    gsa_daily_meals: Decimal = Field(
        default=Decimal("79"),
        ge=0,
        description="GSA standard CONUS daily M&IE rate",
    )
    default_weeks_worked: int = Field(
        default=48,
        gt=0,
        le=52,
        description="Weeks worked per year used for annual projections",
    )


class TravelNurseConfig(BaseSettings):
    """Root configuration for travelnurse_core.

    Environment Variables:
        TRAVELNURSE_ENV: Environment name (development, staging, production, test)
        TRAVELNURSE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        TRAVELNURSE_LOG_FORMAT: console or json (defaults by environment)
        TRAVELNURSE_TAX_YEAR: Tax year used when a call does not name one

    Example:
        config = TravelNurseConfig(
            tax_year=2025,
            compliance=ComplianceConfig(at_risk_window_days=10),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="TRAVELNURSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        description="Log renderer; console in development, json otherwise",
    )
    tax_year: Optional[int] = Field(
        default=None,
        ge=2000,
        le=2100,
        description="Default tax year; the current calendar year when unset",
    )

    compliance: ComplianceConfig = Field(default_factory=ComplianceConfig)
    tax: TaxConfig = Field(default_factory=TaxConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    @property
    def use_json_logs(self) -> bool:
        """JSON logs when asked for explicitly, or by default outside development."""
        if self.log_format is not None:
            return self.log_format == LogFormat.JSON
        return not self.is_development
