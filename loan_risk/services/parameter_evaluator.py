"""Classify raw borrower metrics against threshold rules."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from loan_risk.models.enums import STATUS_POINTS, DefaultReason, ParameterStatus
from loan_risk.models.scoring import CategoryInput, Parameter, ParameterInput
from loan_risk.models.thresholds import BaseRule, ThresholdCatalog


logger = logging.getLogger(__name__)


def _is_missing(raw: Any) -> bool:
    if raw is None:
        return True
    return isinstance(raw, str) and not raw.strip()


def _defaulted(
    parameter_id: str,
    name: str,
    raw: Any,
    data_source: Optional[str],
    reason: DefaultReason,
) -> Parameter:
    logger.debug("Defaulting parameter=%s to negative reason=%s raw=%r", parameter_id, reason.value, raw)
    return Parameter(
        id=parameter_id,
        name=name,
        raw_value=raw,
        status=ParameterStatus.NEGATIVE,
        points=STATUS_POINTS[ParameterStatus.NEGATIVE],
        data_source=data_source,
        defaulted=True,
        default_reason=reason,
    )


def evaluate_parameter(
    parameter_id: str,
    supplied: Optional[ParameterInput],
    rule: Optional[BaseRule],
) -> Parameter:
    """Evaluate one parameter into a status and point value.

    Never raises for data problems: a missing value, an unparseable value, a
    parameter with no rule, or a value no bucket matches is scored as negative
    with ``defaulted=True`` and the matching ``DefaultReason``.

    Args:
        parameter_id: Parameter identifier.
        supplied: Borrower-supplied metric, or ``None`` when it was not supplied.
        rule: Threshold rule for the parameter, or ``None`` when the catalog has none.

    Returns:
        Parameter: Freshly built evaluated parameter.
    """
    raw = supplied.raw_value if supplied is not None else None
    name = (supplied.name if supplied is not None else None) or (rule.name if rule is not None else parameter_id)
    data_source = (supplied.data_source if supplied is not None else None) or (
        rule.data_source if rule is not None else None
    )

    if rule is None:
        return _defaulted(parameter_id, name, raw, data_source, DefaultReason.UNKNOWN_PARAMETER)
    if _is_missing(raw):
        return _defaulted(parameter_id, name, raw, data_source, DefaultReason.MISSING_VALUE)
    try:
        value = rule.coerce(raw)
    except ValueError:
        return _defaulted(parameter_id, name, raw, data_source, DefaultReason.UNPARSEABLE_VALUE)

    status = rule.classify(value)
    if status is None:
        return _defaulted(parameter_id, name, raw, data_source, DefaultReason.UNCLASSIFIED_VALUE)
    return Parameter(
        id=parameter_id,
        name=name,
        raw_value=raw,
        status=status,
        points=STATUS_POINTS[status],
        data_source=data_source,
    )


def evaluate_category_parameters(category: CategoryInput, catalog: ThresholdCatalog) -> List[Parameter]:
    """Evaluate every parameter expected for a category.

    The expected set is the catalog's rules for the category followed by any
    other parameters the borrower supplied. Catalog parameters the borrower did
    not supply are defaulted as missing. When a parameter id is supplied twice
    the first occurrence is used.
    """
    supplied: Dict[str, ParameterInput] = {}
    for item in category.parameters:
        if item.id in supplied:
            logger.warning("Ignoring duplicate parameter=%s in category=%s", item.id, category.id)
            continue
        supplied[item.id] = item

    expected: List[str] = [rule.id for rule in catalog.parameters_for(category.id)]
    expected.extend(parameter_id for parameter_id in supplied if parameter_id not in expected)

    return [
        evaluate_parameter(parameter_id, supplied.get(parameter_id), catalog.get_rule(parameter_id))
        for parameter_id in expected
    ]
