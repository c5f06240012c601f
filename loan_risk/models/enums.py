"""Reusable enums for risk-scoring domain models."""

from enum import Enum

from .exceptions import ConfigurationError


class StringEnum(str, Enum):
    """Base enum class with string behavior for JSON serialization."""


class LoanType(StringEnum):
    """Coarse loan classification selecting a built-in weight preset."""

    GENERAL = "general"
    EQUIPMENT = "equipment"
    REALESTATE = "realestate"

    @classmethod
    def parse(cls, value: object) -> "LoanType":
        """Resolve a loan type from its value or a legacy alias.

        Raises:
            ConfigurationError: If the value is not a recognized loan type.
        """
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower()
        resolved = _LOAN_TYPE_ALIASES.get(normalized)
        if resolved is None:
            raise ConfigurationError("Unknown loan type: {0}".format(value))
        return resolved


_LOAN_TYPE_ALIASES = {
    "general": LoanType.GENERAL,
    "unsecured": LoanType.GENERAL,
    "equipment": LoanType.EQUIPMENT,
    "equipment_vehicles": LoanType.EQUIPMENT,
    "realestate": LoanType.REALESTATE,
    "real_estate": LoanType.REALESTATE,
    "real-estate": LoanType.REALESTATE,
}


class CategoryId(StringEnum):
    """The six fixed risk categories."""

    CREDITWORTHINESS = "creditworthiness"
    FINANCIAL = "financial"
    CASHFLOW = "cashflow"
    LEGAL = "legal"
    EQUIPMENT = "equipment"
    PROPERTY = "property"


class ParameterStatus(StringEnum):
    """Point bucket a parameter is classified into."""

    GOOD = "good"
    AVERAGE = "average"
    NEGATIVE = "negative"


# Evaluation order doubles as tie-break order for overlapping bands.
STATUS_ORDER = (ParameterStatus.GOOD, ParameterStatus.AVERAGE, ParameterStatus.NEGATIVE)

STATUS_POINTS = {
    ParameterStatus.GOOD: 2,
    ParameterStatus.AVERAGE: 1,
    ParameterStatus.NEGATIVE: 0,
}


class DefaultReason(StringEnum):
    """Why a parameter was forced into the negative bucket."""

    MISSING_VALUE = "missing_value"
    UNPARSEABLE_VALUE = "unparseable_value"
    UNKNOWN_PARAMETER = "unknown_parameter"
    UNCLASSIFIED_VALUE = "unclassified_value"


class Comparator(StringEnum):
    """Comparison operators supported by count rules."""

    LT = "<"
    LTE = "<="
    EQ = "=="
    NE = "!="
    GTE = ">="
    GT = ">"


class Recommendation(StringEnum):
    """Underwriting recommendation derived from the overall score."""

    APPROVE = "approve"
    REVIEW = "review"
    DECLINE = "decline"
    INSUFFICIENT_DATA = "insufficient_data"
