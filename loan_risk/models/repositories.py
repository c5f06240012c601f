"""Repository interfaces for datastore-agnostic model access."""

from abc import ABC, abstractmethod
from typing import List

from pydantic import ValidationError

from .exceptions import ModelNotFoundError, VersionConflictError
from .profiles import ScoringProfile


class BaseRepository(ABC):
    """Common contract for CRUD and soft-delete operations."""

    @abstractmethod
    def create(self, model):
        """Persist a new model."""

    @abstractmethod
    def get_by_id(self, model_id: str):
        """Return model by identifier."""

    @abstractmethod
    def update(self, model):
        """Update existing model with optimistic version check."""

    @abstractmethod
    def soft_delete(self, model_id: str) -> None:
        """Mark a model as deleted."""


class ScoringProfileRepository(BaseRepository):
    """Scoring profile data access abstraction.

    Each call is an atomic read or write of whatever the store currently holds.
    """

    @abstractmethod
    def create(self, model: ScoringProfile) -> ScoringProfile:
        """Persist a new scoring profile.

        Raises:
            VersionConflictError: If a profile with the same id already exists.
        """

    @abstractmethod
    def get_by_id(self, model_id: str) -> ScoringProfile:
        """Fetch a profile by identifier.

        Raises:
            ModelNotFoundError: If the profile does not exist or is deleted.
        """

    @abstractmethod
    def update(self, model: ScoringProfile) -> ScoringProfile:
        """Update profile document.

        Raises:
            ModelNotFoundError: If profile does not exist.
            VersionConflictError: If version does not advance the persisted document.
        """

    @abstractmethod
    def soft_delete(self, model_id: str) -> None:
        """Soft delete profile document."""

    @abstractmethod
    def list_profiles(self) -> List[ScoringProfile]:
        """Return non-deleted profiles in creation order."""


__all__ = [
    "ValidationError",
    "ModelNotFoundError",
    "VersionConflictError",
    "BaseRepository",
    "ScoringProfileRepository",
]
