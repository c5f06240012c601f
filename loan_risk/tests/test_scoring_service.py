"""Tests for which configuration ScoringService scores against."""

import unittest

from loan_risk.core.config import AppSettings
from loan_risk.models.enums import LoanType
from loan_risk.models.profiles import NoProfile, ProfileLoaded, ScoringProfile
from loan_risk.models.scoring import BorrowerData
from loan_risk.models.thresholds import Band, RangeRule, ThresholdCatalog
from loan_risk.repositories import InMemoryScoringProfileRepository
from loan_risk.services.profile_store import ProfileStore
from loan_risk.services.scoring_service import ScoringService


STRICT_THRESHOLDS = ThresholdCatalog.from_rules(
    [
        RangeRule(
            id="credit-score",
            name="Credit Score",
            category="creditworthiness",
            good=Band(min=800, max=850),
            average=Band(min=740, max=800),
            negative=Band(min=300, max=740),
        )
    ]
)


def _settings() -> AppSettings:
    return AppSettings(
        app_name="Loan Risk Test",
        debug=False,
        host="127.0.0.1",
        port=8000,
        log_level="INFO",
        default_loan_type="general",
        profiles_backend="memory",
        profiles_path="profiles.json",
        seed_profiles_path=None,
        approve_min_score=80,
        review_min_score=65,
    )


def _equipment_borrower() -> BorrowerData:
    return BorrowerData(
        id="b-200",
        name="Contoso Excavation",
        loan_type="equipment",
        categories=[
            {"id": "creditworthiness", "parameters": [{"id": "credit-score", "raw_value": 760}]},
            {"id": "equipment", "parameters": [{"id": "equipment-age", "raw_value": 1}]},
        ],
    )


class ScoringServiceTests(unittest.TestCase):
    """Store selection versus per-call overrides."""

    def setUp(self) -> None:
        self.repository = InMemoryScoringProfileRepository()
        self.store = ProfileStore(self.repository, default_thresholds=STRICT_THRESHOLDS)
        self.service = ScoringService(self.store, settings=_settings())

    def test_store_selection_wins_over_borrower_loan_type(self) -> None:
        """The active loan type applies even when the borrower asks for another."""
        self.assertEqual(self.store.active.selection, NoProfile(loan_type=LoanType.GENERAL))
        result = self.service.score(_equipment_borrower())
        self.assertEqual(result.loan_type, LoanType.GENERAL)
        self.assertEqual(result.weights["equipment"], 0)
        self.assertEqual(result.categories["equipment"].weight, 0)

    def test_loan_type_override_uses_its_preset(self) -> None:
        borrower = _equipment_borrower()
        result = self.service.score_with(borrower, loan_type=borrower.loan_type.value)
        self.assertEqual(result.loan_type, LoanType.EQUIPMENT)
        self.assertEqual(result.weights["equipment"], 20)
        self.assertEqual(self.store.active.loan_type, LoanType.GENERAL)

    def test_without_store_borrower_loan_type_applies(self) -> None:
        result = ScoringService(settings=_settings()).score(_equipment_borrower())
        self.assertEqual(result.loan_type, LoanType.EQUIPMENT)
        self.assertEqual(result.weights["equipment"], 20)

    def test_profile_override_without_rules_uses_store_thresholds(self) -> None:
        """A credit score of 760 is good by default but only average under the store's catalog."""
        bare = self.repository.create(
            ScoringProfile(name="Bare", weights={"creditworthiness": 100}, thresholds=ThresholdCatalog())
        )
        result = self.service.score_with(_equipment_borrower(), profile_id=bare.id)
        self.assertEqual(result.profile_id, bare.id)
        self.assertEqual(result.categories["creditworthiness"].score, 50)
        self.assertEqual(self.store.active.selection, NoProfile(loan_type=LoanType.GENERAL))

    def test_loaded_profile_without_rules_scores_with_store_thresholds(self) -> None:
        bare = self.repository.create(
            ScoringProfile(name="Bare", weights={"creditworthiness": 100}, thresholds=ThresholdCatalog())
        )
        self.store.load_profile(bare.id)
        self.assertEqual(self.store.active.selection, ProfileLoaded(profile_id=bare.id))
        result = self.service.score(_equipment_borrower())
        self.assertEqual(result.categories["creditworthiness"].score, 50)
        self.assertEqual(result.overall, 50)


if __name__ == "__main__":
    unittest.main()
