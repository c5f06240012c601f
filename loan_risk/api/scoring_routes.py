"""Scoring configuration and evaluation API routes.

Provides the ``/api/scoring`` endpoints. The profile store owns the active
configuration; ``POST /score`` scores against a snapshot of it, or against a
one-off loan-type or profile override that leaves the active state untouched.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from loan_risk.common.weight_presets import normalize_weights, preset_weights, rebalance_weights, weights_total
from loan_risk.models.exceptions import (
    ConfigurationError,
    ModelNotFoundError,
    ModelValidationError,
    VersionConflictError,
)
from loan_risk.models.profiles import ActiveConfiguration, ScoringProfile, validate_weights
from loan_risk.models.scoring import BorrowerData, ScoringResult
from loan_risk.services.profile_store import ProfileStore
from loan_risk.services.scoring_service import ScoringService


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class LoanTypeRequest(BaseModel):
    loan_type: str = Field(..., min_length=1)


class ProfileCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = Field(default=None)
    weights: Dict[str, Any] = Field(...)
    thresholds: Optional[Dict[str, Any]] = Field(default=None)
    is_default: bool = Field(default=False)


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    description: Optional[str] = Field(default=None)
    weights: Optional[Dict[str, Any]] = Field(default=None)
    thresholds: Optional[Dict[str, Any]] = Field(default=None)
    is_default: Optional[bool] = Field(default=None)


class WeightsRequest(BaseModel):
    weights: Dict[str, Any] = Field(...)


class RebalanceRequest(WeightsRequest):
    category: str = Field(..., min_length=1)
    value: float = Field(..., ge=0, le=100)


class ScoreRequest(BaseModel):
    borrower: BorrowerData
    loan_type: Optional[str] = Field(default=None)
    profile_id: Optional[str] = Field(default=None)


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------


def _configuration_payload(configuration: ActiveConfiguration) -> Dict[str, Any]:
    return {
        "state": configuration.selection.state,
        "loan_type": configuration.loan_type.value,
        "profile_id": configuration.profile_id,
        "weights": dict(configuration.weights),
        "weights_total": weights_total(configuration.weights),
    }


def _profile_payload(profile: ScoringProfile) -> Dict[str, Any]:
    return profile.to_document()


def _result_payload(result: ScoringResult) -> Dict[str, Any]:
    payload = result.model_dump(mode="json")
    payload["scores"] = result.score_map()
    payload["defaulted_parameters"] = [
        parameter.model_dump(mode="json") for parameter in result.defaulted_parameters()
    ]
    return payload


def _http_error(exc: Exception) -> HTTPException:
    """Translate domain errors to HTTP errors."""
    if isinstance(exc, ModelNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, (ConfigurationError, VersionConflictError)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, (ModelValidationError, ValueError)):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


_DOMAIN_ERRORS = (ModelNotFoundError, ConfigurationError, VersionConflictError, ModelValidationError, ValueError)


def build_scoring_router(store: ProfileStore, service: ScoringService) -> APIRouter:
    """Build scoring routes bound to a profile store and scoring service."""
    router = APIRouter(prefix="/api/scoring", tags=["scoring"])

    @router.get("/configuration", summary="Active scoring configuration")
    def get_configuration() -> Dict[str, Any]:
        return _configuration_payload(store.active)

    @router.put("/configuration/loan-type", summary="Select loan type")
    def select_loan_type(payload: LoanTypeRequest) -> Dict[str, Any]:
        """Switch loan type; weights follow the preset only while no profile is loaded."""
        try:
            return _configuration_payload(store.select_loan_type(payload.loan_type))
        except _DOMAIN_ERRORS as exc:
            raise _http_error(exc)

    @router.post("/configuration/reset", summary="Reset to default profile or preset")
    def reset_configuration() -> Dict[str, Any]:
        try:
            return _configuration_payload(store.reset_to_defaults())
        except _DOMAIN_ERRORS as exc:
            raise _http_error(exc)
        except Exception as exc:
            logger.exception("Reset configuration endpoint failed.")
            raise _http_error(exc)

    @router.get("/profiles", summary="List scoring profiles")
    def list_profiles() -> List[Dict[str, Any]]:
        try:
            return [_profile_payload(profile) for profile in store.list_profiles()]
        except Exception as exc:
            logger.exception("List profiles endpoint failed.")
            raise _http_error(exc)

    @router.post("/profiles", summary="Save a scoring profile", status_code=status.HTTP_201_CREATED)
    def save_profile(payload: ProfileCreateRequest) -> Dict[str, Any]:
        """Create a profile and make it the active configuration."""
        try:
            profile = store.save_profile(
                name=payload.name,
                description=payload.description,
                weights=payload.weights,
                thresholds=payload.thresholds,
                is_default=payload.is_default,
            )
            return _profile_payload(profile)
        except _DOMAIN_ERRORS as exc:
            raise _http_error(exc)
        except Exception as exc:
            logger.exception("Save profile endpoint failed name=%s", payload.name)
            raise _http_error(exc)

    @router.get("/profiles/{profile_id}", summary="Get a scoring profile")
    def get_profile(profile_id: str) -> Dict[str, Any]:
        try:
            return _profile_payload(store.get_profile(profile_id))
        except _DOMAIN_ERRORS as exc:
            raise _http_error(exc)

    @router.put("/profiles/{profile_id}", summary="Update a scoring profile")
    def update_profile(profile_id: str, payload: ProfileUpdateRequest) -> Dict[str, Any]:
        """Replace only the fields present in the request body."""
        try:
            changes = payload.model_dump(exclude_unset=True)
            return _profile_payload(store.update_profile(profile_id, **changes))
        except _DOMAIN_ERRORS as exc:
            raise _http_error(exc)
        except Exception as exc:
            logger.exception("Update profile endpoint failed profile_id=%s", profile_id)
            raise _http_error(exc)

    @router.delete("/profiles/{profile_id}", summary="Delete a scoring profile")
    def delete_profile(profile_id: str) -> Dict[str, Any]:
        try:
            store.delete_profile(profile_id)
            return {"deleted": profile_id, "configuration": _configuration_payload(store.active)}
        except _DOMAIN_ERRORS as exc:
            raise _http_error(exc)
        except Exception as exc:
            logger.exception("Delete profile endpoint failed profile_id=%s", profile_id)
            raise _http_error(exc)

    @router.post("/profiles/{profile_id}/load", summary="Load a scoring profile")
    def load_profile(profile_id: str) -> Dict[str, Any]:
        try:
            return _configuration_payload(store.load_profile(profile_id))
        except _DOMAIN_ERRORS as exc:
            raise _http_error(exc)

    @router.get("/presets/{loan_type}", summary="Loan type weight preset")
    def get_preset(loan_type: str) -> Dict[str, Any]:
        try:
            weights = preset_weights(loan_type)
            return {"loan_type": loan_type, "weights": weights, "weights_total": weights_total(weights)}
        except _DOMAIN_ERRORS as exc:
            raise _http_error(exc)

    @router.get("/thresholds", summary="Active threshold catalog")
    def get_thresholds() -> Dict[str, Any]:
        return store.active.thresholds.model_dump(mode="json", exclude_none=True)

    @router.post("/weights/normalize", summary="Scale weights to sum to 100")
    def normalize(payload: WeightsRequest) -> Dict[str, Any]:
        try:
            weights = normalize_weights(validate_weights(payload.weights))
            return {"weights": weights, "weights_total": weights_total(weights)}
        except _DOMAIN_ERRORS as exc:
            raise _http_error(exc)

    @router.post("/weights/rebalance", summary="Change one weight and rebalance the rest")
    def rebalance(payload: RebalanceRequest) -> Dict[str, Any]:
        try:
            weights = rebalance_weights(validate_weights(payload.weights), payload.category, payload.value)
            return {"weights": weights, "weights_total": weights_total(weights)}
        except _DOMAIN_ERRORS as exc:
            raise _http_error(exc)

    @router.post("/score", summary="Score a borrower")
    def score(payload: ScoreRequest) -> Dict[str, Any]:
        """Score with the active configuration unless an override is given."""
        try:
            if payload.loan_type is None and payload.profile_id is None:
                result = service.score(payload.borrower)
            else:
                result = service.score_with(
                    payload.borrower,
                    loan_type=payload.loan_type,
                    profile_id=payload.profile_id,
                )
            return _result_payload(result)
        except _DOMAIN_ERRORS as exc:
            raise _http_error(exc)
        except Exception as exc:
            logger.exception("Score endpoint failed borrower_id=%s", payload.borrower.id)
            raise _http_error(exc)

    return router
