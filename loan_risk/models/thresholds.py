"""Threshold rule shapes used to classify raw borrower metrics.

Each rule knows how to coerce a raw value into the type it compares against and how
to classify that value into a ``ParameterStatus``. The evaluator only talks to the
``coerce``/``classify`` pair, so adding a rule shape means adding a model here and
listing it in ``ThresholdRule``.
"""

import math
import operator
import re
from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, root_validator, validator

from .enums import STATUS_ORDER, Comparator, ParameterStatus


_NUMBER_PATTERN = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)")
_LABEL_SEPARATORS = re.compile(r"[\s\-]+")

_COMPARATORS: Dict[Comparator, Callable[[float, float], bool]] = {
    Comparator.LT: operator.lt,
    Comparator.LTE: operator.le,
    Comparator.EQ: operator.eq,
    Comparator.NE: operator.ne,
    Comparator.GTE: operator.ge,
    Comparator.GT: operator.gt,
}


def coerce_number(raw: Any) -> float:
    """Extract a finite number from a raw metric such as ``"68%"`` or ``"12 years"``.

    Raises:
        ValueError: If no finite number can be read from the value.
    """
    if isinstance(raw, bool):
        raise ValueError("boolean is not a numeric metric")
    if isinstance(raw, (int, float)):
        text = None
    else:
        match = _NUMBER_PATTERN.search(str(raw).replace(",", ""))
        if match is None:
            raise ValueError("no number found in {0!r}".format(raw))
        text = match.group(0)
    try:
        number = float(raw if text is None else text)
    except OverflowError:
        raise ValueError("non-finite metric {0!r}".format(raw))
    if math.isnan(number) or math.isinf(number):
        raise ValueError("non-finite metric {0!r}".format(raw))
    return number


def normalize_label(raw: Any) -> str:
    """Normalize a categorical label: lowercase, separators collapsed to ``_``.

    Raises:
        ValueError: If the value is not a usable label.
    """
    if isinstance(raw, bool) or raw is None:
        raise ValueError("label must be text")
    normalized = _LABEL_SEPARATORS.sub("_", str(raw).strip().lower())
    if not normalized:
        raise ValueError("label must not be blank")
    return normalized


class Band(BaseModel):
    """Inclusive numeric band; either side may be open."""

    min: Optional[float] = Field(default=None)
    max: Optional[float] = Field(default=None)

    model_config = ConfigDict(frozen=True)

    @root_validator(skip_on_failure=True)
    def _validate_bounds(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        """Require at least one bound and an ordered pair."""
        lower, upper = values.get("min"), values.get("max")
        if lower is None and upper is None:
            raise ValueError("band needs a min or a max")
        if lower is not None and upper is not None and lower > upper:
            raise ValueError("band min {0} exceeds max {1}".format(lower, upper))
        return values

    def contains(self, value: float) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True


class CountBucket(BaseModel):
    """Bucket matched by comparing a count against a threshold."""

    count: float = Field(...)
    comparator: Comparator = Field(default=Comparator.GTE)

    model_config = ConfigDict(frozen=True)

    def matches(self, value: float) -> bool:
        return _COMPARATORS[self.comparator](value, self.count)


class BaseRule(BaseModel):
    """Metadata shared by every rule shape."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    data_source: Optional[str] = Field(default=None)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    def _bucket(self, status: ParameterStatus) -> Any:
        return getattr(self, status.value)

    def coerce(self, raw: Any) -> Any:
        """Convert a raw metric into the comparable value; raises ``ValueError``."""
        raise NotImplementedError

    def bucket_matches(self, bucket: Any, value: Any) -> bool:
        raise NotImplementedError

    def classify(self, value: Any) -> Optional[ParameterStatus]:
        """Return the first matching status in good, average, negative order."""
        for status in STATUS_ORDER:
            bucket = self._bucket(status)
            if bucket and self.bucket_matches(bucket, value):
                return status
        return None


class RangeRule(BaseRule):
    """Numeric rule with inclusive ``[min, max]`` bands."""

    kind: Literal["range"] = "range"
    good: Optional[Band] = Field(default=None)
    average: Optional[Band] = Field(default=None)
    negative: Optional[Band] = Field(default=None)

    @root_validator(skip_on_failure=True)
    def _require_band(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        if not any(values.get(status.value) for status in STATUS_ORDER):
            raise ValueError("range rule {0} defines no bands".format(values.get("id")))
        return values

    def coerce(self, raw: Any) -> float:
        return coerce_number(raw)

    def bucket_matches(self, bucket: Band, value: float) -> bool:
        return bucket.contains(value)


class CountRule(BaseRule):
    """Count rule where each bucket is a ``{count, comparator}`` test."""

    kind: Literal["count"] = "count"
    good: Optional[CountBucket] = Field(default=None)
    average: Optional[CountBucket] = Field(default=None)
    negative: Optional[CountBucket] = Field(default=None)

    @root_validator(skip_on_failure=True)
    def _require_bucket(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        if not any(values.get(status.value) for status in STATUS_ORDER):
            raise ValueError("count rule {0} defines no buckets".format(values.get("id")))
        return values

    def coerce(self, raw: Any) -> float:
        return coerce_number(raw)

    def bucket_matches(self, bucket: CountBucket, value: float) -> bool:
        return bucket.matches(value)


class LabelRule(BaseRule):
    """Categorical rule matched by exact (normalized) label."""

    kind: Literal["label"] = "label"
    good: List[str] = Field(default_factory=list)
    average: List[str] = Field(default_factory=list)
    negative: List[str] = Field(default_factory=list)

    @validator("good", "average", "negative", pre=True, always=True)
    def _normalize_labels(cls, value: Any) -> List[str]:
        """Accept a single label or a list; store normalized labels."""
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        return [normalize_label(item) for item in value]

    @root_validator(skip_on_failure=True)
    def _require_label(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        if not any(values.get(status.value) for status in STATUS_ORDER):
            raise ValueError("label rule {0} defines no labels".format(values.get("id")))
        return values

    def coerce(self, raw: Any) -> str:
        return normalize_label(raw)

    def bucket_matches(self, bucket: List[str], value: str) -> bool:
        return value in bucket


ThresholdRule = Annotated[Union[RangeRule, CountRule, LabelRule], Field(discriminator="kind")]


class ThresholdCatalog(BaseModel):
    """Per-parameter rule sets keyed by parameter id."""

    rules: Dict[str, ThresholdRule] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @root_validator(skip_on_failure=True)
    def _validate_rule_keys(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        """Every key must match the id of the rule it holds."""
        for key, rule in (values.get("rules") or {}).items():
            if key != rule.id:
                raise ValueError("catalog key {0} does not match rule id {1}".format(key, rule.id))
        return values

    @classmethod
    def from_rules(cls, rules: List[Any]) -> "ThresholdCatalog":
        """Build a catalog from a list of rule models or rule dictionaries."""
        mapping: Dict[str, Any] = {}
        for rule in rules:
            rule_id = rule.id if isinstance(rule, BaseRule) else dict(rule).get("id")
            if rule_id in mapping:
                raise ValueError("duplicate threshold rule id {0}".format(rule_id))
            mapping[rule_id] = rule
        return cls(rules=mapping)

    def get_rule(self, parameter_id: str) -> Optional[BaseRule]:
        return self.rules.get(parameter_id)

    def parameters_for(self, category_id: str) -> List[BaseRule]:
        """Rules belonging to one category, in catalog order."""
        return [rule for rule in self.rules.values() if rule.category == category_id]

    def categories(self) -> List[str]:
        seen: List[str] = []
        for rule in self.rules.values():
            if rule.category not in seen:
                seen.append(rule.category)
        return seen
