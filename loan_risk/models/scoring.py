"""Borrower input and scoring result models."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, root_validator

from .base import Score, Weight
from .exceptions import ConfigurationError
from .enums import STATUS_POINTS, DefaultReason, LoanType, ParameterStatus, Recommendation


class ParameterInput(BaseModel):
    """A raw borrower metric as supplied by an upstream collaborator."""

    id: str = Field(..., min_length=1)
    name: Optional[str] = Field(default=None)
    raw_value: Any = Field(default=None)
    data_source: Optional[str] = Field(default=None)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class Parameter(BaseModel):
    """An evaluated parameter; built fresh on every scoring run."""

    id: str = Field(..., min_length=1)
    name: str = Field(...)
    raw_value: Any = Field(default=None)
    status: ParameterStatus = Field(...)
    points: int = Field(..., ge=0, le=2)
    data_source: Optional[str] = Field(default=None)
    defaulted: bool = Field(default=False)
    default_reason: Optional[DefaultReason] = Field(default=None)

    model_config = ConfigDict(frozen=True)

    @root_validator(skip_on_failure=True)
    def _validate_points(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        """Points must agree with the status bucket; defaulted parameters carry a reason."""
        status = values.get("status")
        if values.get("points") != STATUS_POINTS[status]:
            raise ValueError("points do not match status {0}".format(status))
        if values.get("defaulted") and values.get("default_reason") is None:
            raise ValueError("defaulted parameter requires default_reason")
        return values


class CategoryInput(BaseModel):
    """Borrower metrics grouped under one risk category."""

    id: str = Field(..., min_length=1)
    name: Optional[str] = Field(default=None)
    description: Optional[str] = Field(default=None)
    enabled: bool = Field(default=True)
    parameters: List[ParameterInput] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class BorrowerData(BaseModel):
    """Read-only scoring input for one applicant."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    loan_type: LoanType = Field(default=LoanType.GENERAL)
    loan_amount: Optional[float] = Field(default=None, ge=0)
    categories: Dict[str, CategoryInput] = Field(default_factory=dict)
    total_score: Optional[float] = Field(default=None)
    max_possible_score: Optional[float] = Field(default=None)
    recommendation: Optional[str] = Field(default=None)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @root_validator(pre=True)
    def _key_categories(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        """Accept categories as a list and key them by id; fill ids from mapping keys."""
        if not isinstance(values, dict):
            return values
        categories = values.get("categories")
        if isinstance(categories, list):
            keyed: Dict[str, Any] = {}
            for item in categories:
                category_id = item.id if isinstance(item, CategoryInput) else dict(item).get("id")
                keyed[category_id] = item
            values = dict(values, categories=keyed)
        elif isinstance(categories, dict):
            filled: Dict[str, Any] = {}
            for key, item in categories.items():
                if isinstance(item, dict) and "id" not in item:
                    item = dict(item, id=key)
                filled[key] = item
            values = dict(values, categories=filled)
        if values.get("loan_type") is not None:
            try:
                values = dict(values, loan_type=LoanType.parse(values["loan_type"]))
            except ConfigurationError as exc:
                raise ValueError(str(exc))
        return values

    @root_validator(skip_on_failure=True)
    def _validate_category_keys(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        for key, category in (values.get("categories") or {}).items():
            if key != category.id:
                raise ValueError("category key {0} does not match id {1}".format(key, category.id))
        return values


class CategoryScore(BaseModel):
    """Derived score for one enabled category."""

    id: str = Field(...)
    name: str = Field(...)
    description: str = Field(default="")
    traditional_mapping: str = Field(default="")
    enabled: bool = Field(default=True)
    parameters: List[Parameter] = Field(default_factory=list)
    weight: Weight = Field(default=0.0, ge=0)
    raw_score: int = Field(default=0, ge=0)
    max_score: int = Field(default=0, ge=0)
    score: Optional[Score] = Field(default=None, ge=0, le=100)

    model_config = ConfigDict(frozen=True)


class ScoringResult(BaseModel):
    """Full scoring output with an audit trail of defaulted parameters."""

    borrower_id: str = Field(...)
    loan_type: LoanType = Field(...)
    profile_id: Optional[str] = Field(default=None)
    weights: Dict[str, Weight] = Field(default_factory=dict)
    categories: Dict[str, CategoryScore] = Field(default_factory=dict)
    overall: Optional[Score] = Field(default=None, ge=0, le=100)
    recommendation: Recommendation = Field(default=Recommendation.INSUFFICIENT_DATA)
    warnings: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def score_map(self) -> Dict[str, Optional[int]]:
        """Return ``{category_id: score, "overall": score}``; undefined scores are ``None``."""
        scores: Dict[str, Optional[int]] = {
            category_id: category.score for category_id, category in self.categories.items()
        }
        scores["overall"] = self.overall
        return scores

    def defaulted_parameters(self) -> List[Parameter]:
        """Parameters forced to zero points, for audit review."""
        return [
            parameter
            for category in self.categories.values()
            for parameter in category.parameters
            if parameter.defaulted
        ]
