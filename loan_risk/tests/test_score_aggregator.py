"""Unit tests for category and overall score aggregation."""

import unittest

from loan_risk.common.threshold_catalog import DEFAULT_THRESHOLD_CATALOG
from loan_risk.models.enums import DefaultReason, LoanType, Recommendation
from loan_risk.models.profiles import ActiveConfiguration, NoProfile
from loan_risk.models.scoring import BorrowerData
from loan_risk.services.score_aggregator import calculate_scores, category_score, classify_recommendation


STRONG_CREDIT = [
    {"id": "credit-score", "raw_value": 780},
    {"id": "payment-history", "raw_value": 0},
    {"id": "credit-utilization", "raw_value": "20%"},
    {"id": "public-records", "raw_value": 0},
    {"id": "credit-history-age", "raw_value": "12 years"},
]

AVERAGE_FINANCIALS = [
    {"id": "debt-to-equity", "raw_value": 1.5},
    {"id": "current-ratio", "raw_value": 1.5},
    {"id": "quick-ratio", "raw_value": 0.8},
]

WEAK_FINANCIALS = [
    {"id": "debt-to-equity", "raw_value": 3.0},
    {"id": "current-ratio", "raw_value": 0.5},
    {"id": "quick-ratio", "raw_value": 0.2},
]


def _borrower(categories, loan_type="general"):
    return BorrowerData.model_validate(
        {"id": "b-1", "name": "Acme Tooling LLC", "loan_type": loan_type, "categories": categories}
    )


def _configuration(weights):
    return ActiveConfiguration(
        selection=NoProfile(loan_type=LoanType.GENERAL),
        loan_type=LoanType.GENERAL,
        weights=weights,
        thresholds=DEFAULT_THRESHOLD_CATALOG,
    )


class CategoryScoreTests(unittest.TestCase):
    """Normalization of raw category points."""

    def test_category_score_rounds_half_up(self) -> None:
        self.assertEqual(category_score(1, 8), 13)
        self.assertEqual(category_score(5, 8), 63)
        self.assertEqual(category_score(6, 10), 60)

    def test_category_without_parameters_is_undefined(self) -> None:
        self.assertIsNone(category_score(0, 0))


class CalculateScoresTests(unittest.TestCase):
    """Overall aggregation behavior."""

    def test_full_category_scores_hundred(self) -> None:
        """Five good parameters, weight 40, nothing else enabled."""
        borrower = _borrower([{"id": "creditworthiness", "parameters": STRONG_CREDIT}])
        result = calculate_scores(borrower, ActiveConfiguration.for_loan_type("general"))
        self.assertEqual(result.score_map(), {"creditworthiness": 100, "overall": 100})
        self.assertEqual(result.categories["creditworthiness"].weight, 40.0)
        self.assertEqual(result.recommendation, Recommendation.APPROVE)
        self.assertEqual(result.warnings, [])

    def test_missing_parameters_lower_category_score(self) -> None:
        """Three of five parameters present; the other two default to zero."""
        borrower = _borrower([{"id": "creditworthiness", "parameters": STRONG_CREDIT[:3]}])
        result = calculate_scores(borrower, ActiveConfiguration.for_loan_type("general"))
        category = result.categories["creditworthiness"]
        self.assertEqual((category.raw_score, category.max_score, category.score), (6, 10, 60))
        self.assertEqual(result.overall, 60)
        self.assertEqual(result.recommendation, Recommendation.DECLINE)
        defaulted = result.defaulted_parameters()
        self.assertEqual([parameter.id for parameter in defaulted], ["public-records", "credit-history-age"])
        self.assertTrue(all(p.default_reason == DefaultReason.MISSING_VALUE for p in defaulted))

    def test_weights_not_summing_to_hundred_self_normalize(self) -> None:
        """Weights 50 and 30 still produce a 0..100 result."""
        borrower = _borrower(
            [
                {"id": "creditworthiness", "parameters": STRONG_CREDIT},
                {"id": "financial", "parameters": AVERAGE_FINANCIALS},
            ]
        )
        configuration = _configuration({"creditworthiness": 50, "financial": 30})
        result = calculate_scores(borrower, configuration)
        self.assertEqual(result.categories["financial"].score, 50)
        # (100 * 50 + 50 * 30) / 80 = 81.25
        self.assertEqual(result.overall, 81)
        self.assertEqual(result.recommendation, Recommendation.APPROVE)

    def test_disabled_category_is_excluded(self) -> None:
        borrower = _borrower(
            [
                {"id": "creditworthiness", "parameters": STRONG_CREDIT},
                {"id": "financial", "enabled": False, "parameters": WEAK_FINANCIALS},
            ]
        )
        result = calculate_scores(borrower, ActiveConfiguration.for_loan_type("general"))
        self.assertNotIn("financial", result.categories)
        self.assertEqual(result.overall, 100)

    def test_enabled_categories_weighted_together(self) -> None:
        borrower = _borrower(
            [
                {"id": "creditworthiness", "parameters": STRONG_CREDIT},
                {"id": "financial", "parameters": WEAK_FINANCIALS},
            ]
        )
        result = calculate_scores(borrower, ActiveConfiguration.for_loan_type("general"))
        # (100 * 40 + 0 * 20) / 60 = 66.67
        self.assertEqual(result.overall, 67)
        self.assertEqual(result.recommendation, Recommendation.REVIEW)

    def test_zero_weight_yields_sentinel(self) -> None:
        """Only a zero-weight category enabled leaves the overall score undefined."""
        borrower = _borrower(
            [{"id": "equipment", "parameters": [{"id": "equipment-age", "raw_value": 1}]}]
        )
        result = calculate_scores(borrower, ActiveConfiguration.for_loan_type("general"))
        self.assertEqual(result.categories["equipment"].score, 50)
        self.assertIsNone(result.overall)
        self.assertEqual(result.recommendation, Recommendation.INSUFFICIENT_DATA)
        self.assertEqual(len(result.warnings), 1)

    def test_no_enabled_category_yields_sentinel(self) -> None:
        borrower = _borrower([{"id": "creditworthiness", "enabled": False, "parameters": STRONG_CREDIT}])
        result = calculate_scores(borrower, ActiveConfiguration.for_loan_type("general"))
        self.assertEqual(result.score_map(), {"overall": None})

    def test_category_without_parameters_is_skipped_with_warning(self) -> None:
        borrower = _borrower(
            [
                {"id": "creditworthiness", "parameters": STRONG_CREDIT},
                {"id": "esg", "parameters": []},
            ]
        )
        configuration = _configuration({"creditworthiness": 40})
        result = calculate_scores(borrower, configuration)
        self.assertIsNone(result.categories["esg"].score)
        self.assertEqual(result.overall, 100)
        self.assertIn("esg", result.warnings[0])

    def test_overall_stays_in_range(self) -> None:
        borrower = _borrower(
            [
                {"id": "creditworthiness", "parameters": STRONG_CREDIT[:2]},
                {"id": "financial", "parameters": AVERAGE_FINANCIALS},
                {"id": "legal", "parameters": [{"id": "regulatory-status", "raw_value": "pending"}]},
            ]
        )
        for weights in (
            {"creditworthiness": 1, "financial": 99},
            {"creditworthiness": 400, "financial": 5, "legal": 70},
            {"legal": 0.5},
        ):
            overall = calculate_scores(borrower, _configuration(weights)).overall
            self.assertGreaterEqual(overall, 0)
            self.assertLessEqual(overall, 100)

    def test_scoring_is_deterministic_and_pure(self) -> None:
        borrower = _borrower(
            [
                {"id": "creditworthiness", "parameters": STRONG_CREDIT[:4]},
                {"id": "financial", "parameters": AVERAGE_FINANCIALS},
            ]
        )
        configuration = ActiveConfiguration.for_loan_type("equipment")
        before_borrower = borrower.model_dump()
        before_configuration = configuration.model_dump()
        first = calculate_scores(borrower, configuration)
        second = calculate_scores(borrower, configuration)
        self.assertEqual(first, second)
        self.assertEqual(borrower.model_dump(), before_borrower)
        self.assertEqual(configuration.model_dump(), before_configuration)


class RecommendationTests(unittest.TestCase):
    """Recommendation thresholds."""

    def test_boundaries(self) -> None:
        self.assertEqual(classify_recommendation(80), Recommendation.APPROVE)
        self.assertEqual(classify_recommendation(79), Recommendation.REVIEW)
        self.assertEqual(classify_recommendation(65), Recommendation.REVIEW)
        self.assertEqual(classify_recommendation(64), Recommendation.DECLINE)
        self.assertEqual(classify_recommendation(None), Recommendation.INSUFFICIENT_DATA)
        self.assertEqual(classify_recommendation(70, approve_min_score=70, review_min_score=50), Recommendation.APPROVE)


if __name__ == "__main__":
    unittest.main()
