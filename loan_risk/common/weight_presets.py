"""Loan-type weight presets and weight editing helpers."""

from __future__ import annotations

import logging
from typing import Dict, Mapping

from loan_risk.models.enums import CategoryId, LoanType

from .common_functions import round_half_up


logger = logging.getLogger(__name__)

WEIGHT_SCALE = 100

LOAN_TYPE_WEIGHT_PRESETS: Dict[LoanType, Dict[str, float]] = {
    LoanType.GENERAL: {
        CategoryId.CREDITWORTHINESS.value: 40.0,
        CategoryId.FINANCIAL.value: 20.0,
        CategoryId.CASHFLOW.value: 20.0,
        CategoryId.LEGAL.value: 20.0,
        CategoryId.EQUIPMENT.value: 0.0,
        CategoryId.PROPERTY.value: 0.0,
    },
    LoanType.EQUIPMENT: {
        CategoryId.CREDITWORTHINESS.value: 30.0,
        CategoryId.FINANCIAL.value: 20.0,
        CategoryId.CASHFLOW.value: 15.0,
        CategoryId.LEGAL.value: 15.0,
        CategoryId.EQUIPMENT.value: 20.0,
        CategoryId.PROPERTY.value: 0.0,
    },
    LoanType.REALESTATE: {
        CategoryId.CREDITWORTHINESS.value: 30.0,
        CategoryId.FINANCIAL.value: 20.0,
        CategoryId.CASHFLOW.value: 15.0,
        CategoryId.LEGAL.value: 15.0,
        CategoryId.EQUIPMENT.value: 0.0,
        CategoryId.PROPERTY.value: 20.0,
    },
}


def preset_weights(loan_type: object) -> Dict[str, float]:
    """Return a fresh copy of the preset for a loan type or one of its aliases.

    Raises:
        ConfigurationError: If the loan type is not recognized.
    """
    return dict(LOAN_TYPE_WEIGHT_PRESETS[LoanType.parse(loan_type)])


def weights_total(weights: Mapping[str, float]) -> float:
    return float(sum(weights.values()))


def normalize_weights(weights: Mapping[str, float]) -> Dict[str, float]:
    """Scale weights to whole numbers summing to exactly 100.

    Rounding drift is absorbed by the largest weight.

    Raises:
        ValueError: If every weight is zero.
    """
    total = weights_total(weights)
    if total <= 0:
        raise ValueError("cannot normalize weights that sum to zero")
    normalized = {key: float(round_half_up(value * WEIGHT_SCALE / total)) for key, value in weights.items()}
    drift = WEIGHT_SCALE - weights_total(normalized)
    if drift:
        largest = max(normalized, key=lambda key: normalized[key])
        normalized[largest] = max(0.0, normalized[largest] + drift)
    return normalized


def rebalance_weights(weights: Mapping[str, float], category: str, new_value: float) -> Dict[str, float]:
    """Set one category's weight and spread the difference over the others.

    Only categories that currently carry weight absorb the change, in proportion
    to their current weight. The result sums to 100 unless no other category
    carries weight.

    Raises:
        ValueError: If the category is unknown or the new value is outside 0..100.
    """
    category = category.value if isinstance(category, CategoryId) else str(category).strip().lower()
    if category not in weights:
        raise ValueError("unknown category in weights: {0}".format(category))
    if new_value < 0 or new_value > WEIGHT_SCALE:
        raise ValueError("weight must be between 0 and {0}".format(WEIGHT_SCALE))

    previous = dict(weights)
    updated = dict(previous)
    updated[category] = float(new_value)
    difference = float(new_value) - previous[category]

    adjustable = [key for key, value in previous.items() if key != category and value > 0]
    if not adjustable:
        logger.warning("No other weighted category to rebalance against category=%s", category)
        return updated

    adjustable_total = sum(previous[key] for key in adjustable)
    for key in adjustable:
        proportion = previous[key] / adjustable_total
        updated[key] = float(max(0, round_half_up(previous[key] - difference * proportion)))

    drift = WEIGHT_SCALE - weights_total(updated)
    if drift:
        largest = max(adjustable, key=lambda key: updated[key])
        updated[largest] = max(0.0, updated[largest] + drift)
    return updated
