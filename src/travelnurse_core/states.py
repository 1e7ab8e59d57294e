"""U.S. state codes and state-level lookups."""

from enum import Enum
from typing import Union

from .exceptions import ConfigurationError


class USState(str, Enum):
    """The 50 states plus the District of Columbia, keyed by postal code."""

    ALABAMA = "AL"
    ALASKA = "AK"
    ARIZONA = "AZ"
    ARKANSAS = "AR"
    CALIFORNIA = "CA"
    COLORADO = "CO"
    CONNECTICUT = "CT"
    DELAWARE = "DE"
    FLORIDA = "FL"
    GEORGIA = "GA"
    HAWAII = "HI"
    IDAHO = "ID"
    ILLINOIS = "IL"
    INDIANA = "IN"
    IOWA = "IA"
    KANSAS = "KS"
    KENTUCKY = "KY"
    LOUISIANA = "LA"
    MAINE = "ME"
    MARYLAND = "MD"
    MASSACHUSETTS = "MA"
    MICHIGAN = "MI"
    MINNESOTA = "MN"
    MISSISSIPPI = "MS"
    MISSOURI = "MO"
    MONTANA = "MT"
    NEBRASKA = "NE"
    NEVADA = "NV"
    NEW_HAMPSHIRE = "NH"
    NEW_JERSEY = "NJ"
    NEW_MEXICO = "NM"
    NEW_YORK = "NY"
    NORTH_CAROLINA = "NC"
    NORTH_DAKOTA = "ND"
    OHIO = "OH"
    OKLAHOMA = "OK"
    OREGON = "OR"
    PENNSYLVANIA = "PA"
    RHODE_ISLAND = "RI"
    SOUTH_CAROLINA = "SC"
    SOUTH_DAKOTA = "SD"
    TENNESSEE = "TN"
    TEXAS = "TX"
    UTAH = "UT"
    VERMONT = "VT"
    VIRGINIA = "VA"
    WASHINGTON = "WA"
    WEST_VIRGINIA = "WV"
    WISCONSIN = "WI"
    WYOMING = "WY"
    DISTRICT_OF_COLUMBIA = "DC"

    @property
    def full_name(self) -> str:
        if self is USState.DISTRICT_OF_COLUMBIA:
            return "Washington D.C."
        return self.name.replace("_", " ").title()

    @property
    def has_no_income_tax(self) -> bool:
        return self in NO_INCOME_TAX_STATES

    @classmethod
    def from_code(cls, code: Union["USState", str]) -> "USState":
        """Resolve a postal code or full state name.

        Raises:
            ConfigurationError: If the value names no known state.
        """
        if isinstance(code, cls):
            return code
        normalized = str(code).strip()
        try:
            return cls(normalized.upper())
        except ValueError:
            pass
        for state in cls:
            if state.full_name.lower() == normalized.lower():
                return state
        raise ConfigurationError(
            f"Unknown state: {code!r}",
            config_key="state",
            expected="Two-letter postal code or full state name",
            actual=code,
        )


# Wage income is untaxed in these states. TN and NH taxed only
# interest and dividends historically, and neither taxes wages.
NO_INCOME_TAX_STATES: frozenset[USState] = frozenset(
    {
        USState.ALASKA,
        USState.FLORIDA,
        USState.NEVADA,
        USState.NEW_HAMPSHIRE,
        USState.SOUTH_DAKOTA,
        USState.TENNESSEE,
        USState.TEXAS,
        USState.WASHINGTON,
        USState.WYOMING,
    }
)
