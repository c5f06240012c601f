"""Category and overall score aggregation.

``calculate_scores`` is a pure function of its inputs: it reads the borrower
data and the configuration, never mutates either, and builds every
``Parameter``/``CategoryScore`` fresh on each call.
"""

from __future__ import annotations

from decimal import Decimal
import logging
from typing import Dict, List, Optional, Tuple

from loan_risk.common.common_functions import percentage, round_half_up, to_decimal
from loan_risk.common.threshold_catalog import category_info
from loan_risk.models.enums import STATUS_POINTS, ParameterStatus, Recommendation
from loan_risk.models.profiles import ActiveConfiguration
from loan_risk.models.scoring import BorrowerData, CategoryInput, CategoryScore, Parameter, ScoringResult
from loan_risk.models.thresholds import ThresholdCatalog

from .parameter_evaluator import evaluate_category_parameters


logger = logging.getLogger(__name__)

DEFAULT_APPROVE_MIN_SCORE = 80
DEFAULT_REVIEW_MIN_SCORE = 65

_MAX_POINTS = STATUS_POINTS[ParameterStatus.GOOD]


def category_raw_score(parameters: List[Parameter]) -> Tuple[int, int]:
    """Return ``(raw_score, max_score)`` for a list of evaluated parameters."""
    raw_score = sum(parameter.points for parameter in parameters)
    return raw_score, len(parameters) * _MAX_POINTS


def category_score(raw_score: int, max_score: int) -> Optional[int]:
    """Normalize a raw score to 0..100; ``None`` when the category has no parameters."""
    if max_score <= 0:
        return None
    return round_half_up(percentage(raw_score, max_score))


def score_category(category: CategoryInput, weight: float, catalog: ThresholdCatalog) -> CategoryScore:
    """Evaluate and score one enabled category."""
    parameters = evaluate_category_parameters(category, catalog)
    raw_score, max_score = category_raw_score(parameters)
    info = category_info(category.id)
    return CategoryScore(
        id=category.id,
        name=category.name or info.name,
        description=category.description or info.description,
        traditional_mapping=info.traditional_mapping,
        enabled=True,
        parameters=parameters,
        weight=weight,
        raw_score=raw_score,
        max_score=max_score,
        score=category_score(raw_score, max_score),
    )


def overall_score(categories: List[CategoryScore]) -> Optional[int]:
    """Weighted mean of category scores over the weight actually in play.

    Only categories with a defined score count toward the denominator, so weight
    sets that do not sum to 100 still yield a 0..100 result. Returns ``None``
    when no scored category carries weight.
    """
    numerator = Decimal(0)
    denominator = Decimal(0)
    for category in categories:
        if category.score is None:
            continue
        weight = to_decimal(category.weight)
        numerator += to_decimal(category.score) * weight
        denominator += weight
    if denominator == 0:
        return None
    return round_half_up(numerator / denominator)


def classify_recommendation(
    overall: Optional[int],
    approve_min_score: int = DEFAULT_APPROVE_MIN_SCORE,
    review_min_score: int = DEFAULT_REVIEW_MIN_SCORE,
) -> Recommendation:
    if overall is None:
        return Recommendation.INSUFFICIENT_DATA
    if overall >= approve_min_score:
        return Recommendation.APPROVE
    if overall >= review_min_score:
        return Recommendation.REVIEW
    return Recommendation.DECLINE


def calculate_scores(
    borrower: BorrowerData,
    configuration: ActiveConfiguration,
    approve_min_score: int = DEFAULT_APPROVE_MIN_SCORE,
    review_min_score: int = DEFAULT_REVIEW_MIN_SCORE,
) -> ScoringResult:
    """Score a borrower under an explicit configuration.

    Disabled categories are skipped entirely and do not appear in the result.
    A category with no parameters gets an undefined score, is left out of the
    overall score and produces a warning.

    Args:
        borrower: Borrower metrics grouped by category.
        configuration: Weights and thresholds to score with.
        approve_min_score: Lowest overall score recommended for approval.
        review_min_score: Lowest overall score recommended for manual review.

    Returns:
        ScoringResult: Category scores, overall score and recommendation.
    """
    warnings: List[str] = []
    categories: Dict[str, CategoryScore] = {}
    for category_id, category in borrower.categories.items():
        if not category.enabled:
            continue
        weight = configuration.weights.get(category_id, 0.0)
        scored = score_category(category, weight, configuration.thresholds)
        if scored.score is None:
            message = "Category {0} has no parameters and was excluded from the overall score".format(category_id)
            logger.warning("%s borrower_id=%s", message, borrower.id)
            warnings.append(message)
        categories[category_id] = scored

    overall = overall_score(list(categories.values()))
    if overall is None:
        message = "No enabled category with a defined score carries weight; overall score is undefined"
        logger.warning("%s borrower_id=%s", message, borrower.id)
        warnings.append(message)

    return ScoringResult(
        borrower_id=borrower.id,
        loan_type=configuration.loan_type,
        profile_id=configuration.profile_id,
        weights=dict(configuration.weights),
        categories=categories,
        overall=overall,
        recommendation=classify_recommendation(overall, approve_min_score, review_min_score),
        warnings=warnings,
    )
