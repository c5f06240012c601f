"""Scoring profile management and the active-configuration state machine."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Mapping, Optional, Union
from uuid import uuid4

from pydantic import ValidationError

from loan_risk.common.threshold_catalog import DEFAULT_THRESHOLD_CATALOG
from loan_risk.common.weight_presets import WEIGHT_SCALE, weights_total
from loan_risk.models.base import utc_now
from loan_risk.models.enums import LoanType
from loan_risk.models.exceptions import (
    DefaultProfileError,
    ModelNotFoundError,
    ModelValidationError,
    ProfileNotFoundError,
)
from loan_risk.models.profiles import ActiveConfiguration, ScoringProfile
from loan_risk.models.repositories import ScoringProfileRepository
from loan_risk.models.thresholds import ThresholdCatalog

from .weight_resolver import configuration_for_loan_type, configuration_for_profile, with_loan_type


logger = logging.getLogger(__name__)

_UNSET: Any = object()


class ProfileStore:
    """Owns the active configuration and CRUD over saved scoring profiles.

    State is either ``NoProfile(loan_type)``, where weights follow the loan-type
    preset, or ``ProfileLoaded(profile_id)``, where the profile's weights and
    thresholds are authoritative. Every transition swaps in a new immutable
    ``ActiveConfiguration``; readers take a snapshot through ``active`` and
    never observe a half-applied change.
    """

    def __init__(
        self,
        repository: ScoringProfileRepository,
        default_loan_type: object = LoanType.GENERAL,
        default_thresholds: Optional[ThresholdCatalog] = None,
    ) -> None:
        self._repository = repository
        self._lock = RLock()
        self._default_thresholds = default_thresholds or DEFAULT_THRESHOLD_CATALOG
        self._active = configuration_for_loan_type(default_loan_type, self._default_thresholds)

    @property
    def repository(self) -> ScoringProfileRepository:
        return self._repository

    @property
    def default_thresholds(self) -> ThresholdCatalog:
        return self._default_thresholds

    @property
    def active(self) -> ActiveConfiguration:
        """Snapshot of the active configuration."""
        with self._lock:
            return self._active

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------
    def select_loan_type(self, loan_type: object) -> ActiveConfiguration:
        """Select a loan type.

        Without a loaded profile the weights switch to the matching preset. With a
        profile loaded the weights are unchanged; the loan type is remembered for
        ``reset_to_defaults``.

        Raises:
            ConfigurationError: If the loan type is not recognized.
        """
        with self._lock:
            self._active = with_loan_type(self._active, loan_type)
            logger.info(
                "Selected loan_type=%s profile_id=%s", self._active.loan_type.value, self._active.profile_id
            )
            return self._active

    def load_profile(self, profile_id: str) -> ActiveConfiguration:
        """Make a saved profile active.

        Raises:
            ProfileNotFoundError: If the profile does not exist; the active
                configuration is left unchanged.
        """
        with self._lock:
            profile = self.get_profile(profile_id)
            self._active = configuration_for_profile(profile, self._active.loan_type, self._default_thresholds)
            logger.info("Loaded scoring profile profile_id=%s", profile_id)
            return self._active

    def reset_to_defaults(self) -> ActiveConfiguration:
        """Load the default profile, or the preset of the current loan type when none exists."""
        with self._lock:
            default = self.default_profile()
            if default is not None:
                self._active = configuration_for_profile(default, self._active.loan_type, self._default_thresholds)
                logger.info("Reset to default profile profile_id=%s", default.id)
            else:
                self._active = configuration_for_loan_type(self._active.loan_type, self._default_thresholds)
                logger.info("Reset to loan type preset loan_type=%s", self._active.loan_type.value)
            return self._active

    # ------------------------------------------------------------------
    # Profile CRUD
    # ------------------------------------------------------------------
    def save_profile(
        self,
        name: str,
        weights: Mapping[str, Any],
        description: Optional[str] = None,
        thresholds: Optional[Union[ThresholdCatalog, Dict[str, Any]]] = None,
        is_default: bool = False,
    ) -> ScoringProfile:
        """Create a profile and make it active.

        Raises:
            ModelValidationError: If the name, weights or thresholds are malformed.
        """
        with self._lock:
            profile = self._build_profile(
                {
                    "id": uuid4().hex,
                    "name": name,
                    "description": description,
                    "weights": dict(weights) if isinstance(weights, Mapping) else weights,
                    "thresholds": thresholds if thresholds is not None else self._default_thresholds,
                    "is_default": is_default,
                }
            )
            self._warn_if_unbalanced(profile)
            created = self._repository.create(profile)
            if created.is_default:
                self._clear_other_defaults(created.id)
            self._active = configuration_for_profile(created, self._active.loan_type, self._default_thresholds)
            logger.info("Saved scoring profile profile_id=%s name=%s", created.id, created.name)
            return created

    def update_profile(
        self,
        profile_id: str,
        name: Any = _UNSET,
        description: Any = _UNSET,
        weights: Any = _UNSET,
        thresholds: Any = _UNSET,
        is_default: Any = _UNSET,
    ) -> ScoringProfile:
        """Apply an explicit update, re-stamping ``updated_at`` and bumping ``version``.

        Only the fields passed are replaced. If the profile is active, the active
        configuration picks up the new weights and thresholds.

        Raises:
            ProfileNotFoundError: If the profile does not exist.
            ModelValidationError: If the updated fields are malformed.
        """
        with self._lock:
            current = self.get_profile(profile_id)
            changes = {
                key: value
                for key, value in (
                    ("name", name),
                    ("description", description),
                    ("weights", weights),
                    ("thresholds", thresholds),
                    ("is_default", is_default),
                )
                if value is not _UNSET
            }
            payload = current.model_dump()
            payload.update(changes)
            payload.update({"updated_at": utc_now(), "version": current.version + 1})
            profile = self._build_profile(payload)
            self._warn_if_unbalanced(profile)
            updated = self._repository.update(profile)
            if updated.is_default:
                self._clear_other_defaults(updated.id)
            if self._active.profile_id == updated.id:
                self._active = configuration_for_profile(updated, self._active.loan_type, self._default_thresholds)
            logger.info("Updated scoring profile profile_id=%s version=%s", updated.id, updated.version)
            return updated

    def delete_profile(self, profile_id: str) -> None:
        """Soft delete a profile; an active profile falls back to the loan-type preset.

        Raises:
            ProfileNotFoundError: If the profile does not exist.
            DefaultProfileError: If the profile is the default.
        """
        with self._lock:
            profile = self.get_profile(profile_id)
            if profile.is_default:
                raise DefaultProfileError("Cannot delete the default scoring profile: {0}".format(profile_id))
            self._repository.soft_delete(profile_id)
            if self._active.profile_id == profile_id:
                self._active = configuration_for_loan_type(self._active.loan_type, self._default_thresholds)
            logger.info("Deleted scoring profile profile_id=%s", profile_id)

    def get_profile(self, profile_id: str) -> ScoringProfile:
        """Raises ``ProfileNotFoundError`` for unknown or deleted profiles."""
        try:
            return self._repository.get_by_id(profile_id)
        except ModelNotFoundError as exc:
            raise ProfileNotFoundError(str(exc))

    def list_profiles(self) -> List[ScoringProfile]:
        return self._repository.list_profiles()

    def default_profile(self) -> Optional[ScoringProfile]:
        """Return the profile flagged default; the first wins if several are flagged."""
        defaults = [profile for profile in self.list_profiles() if profile.is_default]
        if not defaults:
            return None
        if len(defaults) > 1:
            logger.warning(
                "Multiple default profiles found; using profile_id=%s ids=%s",
                defaults[0].id,
                [profile.id for profile in defaults],
            )
        return defaults[0]

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------
    def seed(self, profiles: List[Dict[str, Any]]) -> List[ScoringProfile]:
        """Create profiles into an empty repository without changing the active state.

        Only the first profile flagged default keeps the flag.
        """
        with self._lock:
            if self.list_profiles():
                logger.info("Profile repository already populated; skipping seed.")
                return []
            created: List[ScoringProfile] = []
            default_seen = False
            for item in profiles:
                payload = dict(item)
                payload.setdefault("id", uuid4().hex)
                payload.setdefault("thresholds", self._default_thresholds)
                if payload.get("is_default"):
                    if default_seen:
                        logger.warning("Seed profile %s also flagged default; clearing flag.", payload["id"])
                        payload["is_default"] = False
                    default_seen = True
                created.append(self._repository.create(self._build_profile(payload)))
            logger.info("Seeded %s scoring profiles.", len(created))
            return created

    def seed_from_file(self, path: Union[str, Path]) -> List[ScoringProfile]:
        """Seed from a JSON file holding a list or ``{"profiles": [...]}``."""
        seed_path = Path(path)
        if not seed_path.exists():
            logger.warning("Seed profile file not found: %s", seed_path)
            return []
        try:
            with seed_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError:
            logger.exception("Invalid JSON in seed profile file: %s", seed_path)
            raise
        profiles = payload.get("profiles", []) if isinstance(payload, dict) else payload
        return self.seed(list(profiles))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _build_profile(payload: Dict[str, Any]) -> ScoringProfile:
        try:
            return ScoringProfile.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Rejected scoring profile payload name=%s: %s", payload.get("name"), exc)
            raise ModelValidationError(str(exc))

    @staticmethod
    def _warn_if_unbalanced(profile: ScoringProfile) -> None:
        total = weights_total(profile.weights)
        if total != WEIGHT_SCALE:
            logger.warning("Profile %s weights sum to %s, not %s.", profile.name, total, WEIGHT_SCALE)

    def _clear_other_defaults(self, keep_id: str) -> None:
        for profile in self.list_profiles():
            if profile.id == keep_id or not profile.is_default:
                continue
            cleared = profile.model_copy(
                update={"is_default": False, "updated_at": utc_now(), "version": profile.version + 1}
            )
            self._repository.update(cleared)
            if self._active.profile_id == profile.id:
                self._active = configuration_for_profile(cleared, self._active.loan_type, self._default_thresholds)
            logger.info("Cleared default flag on profile_id=%s", profile.id)


__all__ = ["ProfileStore"]
