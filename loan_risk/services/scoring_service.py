"""Scoring service wiring settings, the profile store and the pure aggregator."""

from __future__ import annotations

import logging
from typing import Optional

from loan_risk.core.config import AppSettings, load_settings
from loan_risk.models.exceptions import ConfigurationError
from loan_risk.models.profiles import ActiveConfiguration
from loan_risk.models.repositories import ScoringProfileRepository
from loan_risk.models.scoring import BorrowerData, ScoringResult
from loan_risk.repositories import InMemoryScoringProfileRepository, JsonFileScoringProfileRepository

from .profile_store import ProfileStore
from .score_aggregator import calculate_scores
from .weight_resolver import configuration_for_loan_type, configuration_for_profile


logger = logging.getLogger(__name__)


def build_profile_repository(settings: AppSettings) -> ScoringProfileRepository:
    """Return the repository selected by ``profiles.backend``."""
    if settings.profiles_backend == "json":
        return JsonFileScoringProfileRepository(settings.profiles_path)
    return InMemoryScoringProfileRepository()


def build_profile_store(settings: Optional[AppSettings] = None) -> ProfileStore:
    """Create a profile store and seed it when the repository is empty."""
    resolved = settings or load_settings()
    store = ProfileStore(
        repository=build_profile_repository(resolved),
        default_loan_type=resolved.default_loan_type,
    )
    if resolved.seed_profiles_path:
        store.seed_from_file(resolved.seed_profiles_path)
    return store


class ScoringService:
    """Score borrowers against explicit or store-provided configurations."""

    def __init__(self, store: Optional[ProfileStore] = None, settings: Optional[AppSettings] = None) -> None:
        self._store = store
        self._settings = settings or load_settings()

    @property
    def store(self) -> Optional[ProfileStore]:
        return self._store

    def score(self, borrower: BorrowerData, configuration: Optional[ActiveConfiguration] = None) -> ScoringResult:
        """Score with an explicit configuration or a snapshot of the active one.

        Without a store and without a configuration the borrower's loan-type
        preset is used.
        """
        if configuration is None:
            if self._store is not None:
                configuration = self._store.active
            else:
                configuration = configuration_for_loan_type(borrower.loan_type)
        result = calculate_scores(
            borrower,
            configuration,
            approve_min_score=self._settings.approve_min_score,
            review_min_score=self._settings.review_min_score,
        )
        logger.info(
            "Scored borrower_id=%s overall=%s recommendation=%s profile_id=%s",
            borrower.id,
            result.overall,
            result.recommendation.value,
            result.profile_id,
        )
        return result

    def score_with(
        self,
        borrower: BorrowerData,
        loan_type: Optional[str] = None,
        profile_id: Optional[str] = None,
    ) -> ScoringResult:
        """Score with a one-off override without touching the active configuration.

        A profile override wins over a loan-type override.

        Raises:
            ProfileNotFoundError: If ``profile_id`` is unknown.
            ConfigurationError: If ``loan_type`` is unknown or a profile override
                is requested without a store.
        """
        configuration: Optional[ActiveConfiguration] = None
        if profile_id is not None:
            if self._store is None:
                raise ConfigurationError("Profile override requires a profile store")
            profile = self._store.get_profile(profile_id)
            configuration = configuration_for_profile(
                profile,
                loan_type or borrower.loan_type,
                self._store.default_thresholds,
            )
        elif loan_type is not None:
            configuration = configuration_for_loan_type(
                loan_type,
                self._store.default_thresholds if self._store is not None else None,
            )
        return self.score(borrower, configuration)
