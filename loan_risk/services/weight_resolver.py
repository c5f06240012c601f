"""Resolve the active category weights from a profile or a loan-type preset."""

from __future__ import annotations

from typing import Dict, Optional

from loan_risk.common.threshold_catalog import DEFAULT_THRESHOLD_CATALOG
from loan_risk.common.weight_presets import preset_weights
from loan_risk.models.enums import LoanType
from loan_risk.models.profiles import ActiveConfiguration, NoProfile, ProfileLoaded, ScoringProfile
from loan_risk.models.thresholds import ThresholdCatalog


def resolve_weights(loan_type: object, profile: Optional[ScoringProfile] = None) -> Dict[str, float]:
    """Profile weights win; otherwise the loan-type preset applies.

    Raises:
        ConfigurationError: If no profile is given and the loan type is unknown.
    """
    if profile is not None:
        return dict(profile.weights)
    return preset_weights(loan_type)


def configuration_for_loan_type(
    loan_type: object,
    thresholds: Optional[ThresholdCatalog] = None,
) -> ActiveConfiguration:
    """Build a ``NoProfile`` configuration from the loan-type preset."""
    resolved = LoanType.parse(loan_type)
    return ActiveConfiguration(
        selection=NoProfile(loan_type=resolved),
        loan_type=resolved,
        weights=resolve_weights(resolved),
        thresholds=thresholds if thresholds is not None else DEFAULT_THRESHOLD_CATALOG,
    )


def configuration_for_profile(
    profile: ScoringProfile,
    loan_type: object,
    fallback_thresholds: Optional[ThresholdCatalog] = None,
) -> ActiveConfiguration:
    """Build a ``ProfileLoaded`` configuration; the loan type is kept for later resets.

    A profile with an empty catalog scores with ``fallback_thresholds``, or the
    built-in catalog when none is given.
    """
    if profile.thresholds.rules:
        thresholds = profile.thresholds
    else:
        thresholds = fallback_thresholds if fallback_thresholds is not None else DEFAULT_THRESHOLD_CATALOG
    return ActiveConfiguration(
        selection=ProfileLoaded(profile_id=profile.id),
        loan_type=LoanType.parse(loan_type),
        weights=resolve_weights(loan_type, profile),
        thresholds=thresholds,
    )


def with_loan_type(configuration: ActiveConfiguration, loan_type: object) -> ActiveConfiguration:
    """Apply a loan-type selection to a configuration.

    With no profile loaded the weights are recomputed from the new preset. With a
    profile loaded the selection and weights are unchanged and only the remembered
    loan type moves.
    """
    resolved = LoanType.parse(loan_type)
    if isinstance(configuration.selection, ProfileLoaded):
        return configuration.model_copy(update={"loan_type": resolved})
    return configuration_for_loan_type(resolved, configuration.thresholds)
