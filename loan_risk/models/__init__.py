"""Public model package exports for the risk-scoring engine."""

from .base import BaseDocumentModel, Score, Weight
from .enums import (
    CategoryId,
    Comparator,
    DefaultReason,
    LoanType,
    ParameterStatus,
    Recommendation,
)
from .exceptions import (
    ConfigurationError,
    DefaultProfileError,
    ModelError,
    ModelNotFoundError,
    ModelValidationError,
    ProfileNotFoundError,
    VersionConflictError,
)
from .profiles import ActiveConfiguration, NoProfile, ProfileLoaded, ScoringProfile
from .repositories import ScoringProfileRepository
from .scoring import (
    BorrowerData,
    CategoryInput,
    CategoryScore,
    Parameter,
    ParameterInput,
    ScoringResult,
)
from .thresholds import Band, CountBucket, CountRule, LabelRule, RangeRule, ThresholdCatalog

__all__ = [
    "BaseDocumentModel",
    "Score",
    "Weight",
    "CategoryId",
    "Comparator",
    "DefaultReason",
    "LoanType",
    "ParameterStatus",
    "Recommendation",
    "ModelError",
    "ModelValidationError",
    "ModelNotFoundError",
    "VersionConflictError",
    "ConfigurationError",
    "ProfileNotFoundError",
    "DefaultProfileError",
    "ActiveConfiguration",
    "NoProfile",
    "ProfileLoaded",
    "ScoringProfile",
    "ScoringProfileRepository",
    "BorrowerData",
    "CategoryInput",
    "CategoryScore",
    "Parameter",
    "ParameterInput",
    "ScoringResult",
    "Band",
    "CountBucket",
    "CountRule",
    "LabelRule",
    "RangeRule",
    "ThresholdCatalog",
]
