"""Scoring profile and active-configuration models."""

import math
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, validator

from .base import BaseDocumentModel, Weight
from .enums import CategoryId, LoanType
from .thresholds import ThresholdCatalog


_CATEGORY_IDS = {category.value for category in CategoryId}


def validate_weights(value: Any) -> Dict[str, Weight]:
    """Validate a category weight mapping.

    Keys must be known category ids and values finite, non-negative numbers.

    Raises:
        ValueError: If any key or weight is malformed.
    """
    if not isinstance(value, dict):
        raise ValueError("weights must be a mapping of category id to number")
    weights: Dict[str, Weight] = {}
    for key, raw in value.items():
        category_id = key.value if isinstance(key, CategoryId) else str(key).strip().lower()
        if category_id not in _CATEGORY_IDS:
            raise ValueError("unknown category in weights: {0}".format(key))
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise ValueError("weight for {0} must be numeric, got {1!r}".format(category_id, raw))
        weight = float(raw)
        if math.isnan(weight) or math.isinf(weight):
            raise ValueError("weight for {0} must be finite".format(category_id))
        if weight < 0:
            raise ValueError("weight for {0} must not be negative".format(category_id))
        weights[category_id] = weight
    return weights


class ScoringProfile(BaseDocumentModel):
    """Named, persisted bundle of category weights and threshold rules."""

    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = Field(default=None)
    weights: Dict[str, Weight] = Field(...)
    thresholds: ThresholdCatalog = Field(default_factory=ThresholdCatalog)
    is_default: bool = Field(default=False)

    @validator("weights", pre=True)
    def _validate_weights(cls, value: Any) -> Dict[str, Weight]:
        """Reject negative, non-numeric or unknown-category weights."""
        return validate_weights(value)


class NoProfile(BaseModel):
    """Weights come from the preset of the selected loan type."""

    state: Literal["no_profile"] = "no_profile"
    loan_type: LoanType = Field(...)

    model_config = ConfigDict(frozen=True)


class ProfileLoaded(BaseModel):
    """Weights and thresholds come from a saved profile."""

    state: Literal["profile_loaded"] = "profile_loaded"
    profile_id: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)


ConfigurationState = Annotated[Union[NoProfile, ProfileLoaded], Field(discriminator="state")]


class ActiveConfiguration(BaseModel):
    """Immutable snapshot of the configuration a scoring run uses."""

    selection: ConfigurationState = Field(...)
    loan_type: LoanType = Field(...)
    weights: Dict[str, Weight] = Field(...)
    thresholds: ThresholdCatalog = Field(...)

    model_config = ConfigDict(frozen=True)

    @validator("weights", pre=True)
    def _validate_weights(cls, value: Any) -> Dict[str, Weight]:
        return validate_weights(value)

    @classmethod
    def for_loan_type(
        cls,
        loan_type: object,
        thresholds: Optional[ThresholdCatalog] = None,
    ) -> "ActiveConfiguration":
        """Stateless preset configuration for callers that do not use a profile store."""
        from loan_risk.services.weight_resolver import configuration_for_loan_type

        return configuration_for_loan_type(loan_type, thresholds)

    @property
    def profile_id(self) -> Optional[str]:
        if isinstance(self.selection, ProfileLoaded):
            return self.selection.profile_id
        return None
