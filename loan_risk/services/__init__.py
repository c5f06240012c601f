"""Service layer exports."""

from .parameter_evaluator import evaluate_category_parameters, evaluate_parameter
from .profile_store import ProfileStore
from .score_aggregator import calculate_scores, classify_recommendation, overall_score, score_category
from .scoring_service import ScoringService, build_profile_repository, build_profile_store
from .weight_resolver import (
    configuration_for_loan_type,
    configuration_for_profile,
    resolve_weights,
    with_loan_type,
)

__all__ = [
    "evaluate_parameter",
    "evaluate_category_parameters",
    "ProfileStore",
    "calculate_scores",
    "classify_recommendation",
    "overall_score",
    "score_category",
    "ScoringService",
    "build_profile_repository",
    "build_profile_store",
    "configuration_for_loan_type",
    "configuration_for_profile",
    "resolve_weights",
    "with_loan_type",
]
